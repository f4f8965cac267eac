"""
Forms per app events.
"""

from django import forms
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Row, Column, Submit, HTML, Fieldset
from crispy_forms.bootstrap import TabHolder, Tab
from django_select2.forms import Select2MultipleWidget

from team.models import Category, Person

from .models import Event

STAFF_FIELD_PREFIX = "staff_"


class EventForm(forms.ModelForm):
    """
    Form per creazione/modifica evento.

    Aggiunge un campo numerico per ogni categoria di staff
    (quante persone servono); 0 = categoria non necessaria.
    """

    class Meta:
        model = Event
        fields = [
            "title",
            "description",
            "date",
            "start_time",
            "end_time",
            "location",
            "status",
            "guest_count",
            "price_per_person",
        ]
        widgets = {
            "date": forms.DateInput(attrs={"type": "date", "class": "form-control"}, format="%Y-%m-%d"),
            "start_time": forms.TimeInput(attrs={"type": "time", "class": "form-control"}),
            "end_time": forms.TimeInput(attrs={"type": "time", "class": "form-control"}),
            "description": forms.Textarea(attrs={"rows": 3}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        # Campi fabbisogno staff
        current = {}
        if self.instance and self.instance.pk:
            current = {staff.category_id: staff.quantity for staff in self.instance.staff.all()}

        self.categories = list(Category.objects.order_by("name"))
        staff_fields = []
        for category in self.categories:
            name = f"{STAFF_FIELD_PREFIX}{category.pk}"
            self.fields[name] = forms.IntegerField(
                label=category.name,
                min_value=0,
                required=False,
                initial=current.get(category.pk, 0),
            )
            staff_fields.append(Column(name, css_class="col-md-3"))

        staff_tab_content = (
            [Row(*staff_fields)]
            if staff_fields
            else [HTML('<p class="text-muted">Nessuna categoria di staff. Creane una nella sezione Squadra.</p>')]
        )

        self.helper = FormHelper()
        self.helper.form_method = "post"
        self.helper.layout = Layout(
            TabHolder(
                Tab(
                    "Informazioni Generali",
                    "title",
                    "description",
                    Row(
                        Column("date", css_class="col-md-4"),
                        Column("start_time", css_class="col-md-4"),
                        Column("end_time", css_class="col-md-4"),
                    ),
                    Row(
                        Column("location", css_class="col-md-8"),
                        Column("status", css_class="col-md-4"),
                    ),
                    Row(
                        Column("guest_count", css_class="col-md-6"),
                        Column("price_per_person", css_class="col-md-6"),
                    ),
                ),
                Tab(
                    "Staff Necessario",
                    Fieldset("Persone per categoria", *staff_tab_content),
                ),
            ),
            HTML("<hr>"),
            Row(
                Column(
                    Submit("submit", "Salva Evento", css_class="btn btn-primary btn-lg"),
                    css_class="col-md-6",
                ),
                Column(
                    HTML('<a href="{% url "events:event_list" %}" class="btn btn-secondary btn-lg">Annulla</a>'),
                    css_class="col-md-6 text-end",
                ),
            ),
        )

    def clean_title(self):
        title = self.cleaned_data.get("title", "").strip()
        if not title:
            raise forms.ValidationError("Il titolo è obbligatorio")
        return title

    def event_data(self):
        """Dati dell'evento senza i campi staff."""
        return {field: self.cleaned_data.get(field) for field in self.Meta.fields}

    def staff_assignments(self):
        """Fabbisogno staff nel formato [{category_id, count}]."""
        return [
            {
                "category_id": category.pk,
                "count": self.cleaned_data.get(f"{STAFF_FIELD_PREFIX}{category.pk}") or 0,
            }
            for category in self.categories
        ]


class EventTeamForm(forms.Form):
    """Selezione delle persone che lavorano all'evento."""

    people = forms.ModelMultipleChoiceField(
        label="Squadra",
        queryset=Person.objects.select_related("category").order_by("category__name", "name"),
        widget=Select2MultipleWidget(attrs={
            "data-placeholder": "Seleziona persone...",
            "class": "form-control",
        }),
        required=False,
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        # Mostra anche la categoria nella select
        self.fields["people"].label_from_instance = lambda obj: f"{obj.name} ({obj.category.name})"

        self.helper = FormHelper()
        self.helper.form_method = "post"
        self.helper.layout = Layout(
            "people",
            Submit("submit", "Salva Squadra", css_class="btn btn-primary"),
        )


class EventStatusForm(forms.Form):
    status = forms.ChoiceField(choices=Event._meta.get_field("status").choices)
