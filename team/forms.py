"""
Forms per app team.
"""

from django import forms
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Row, Column, Submit, HTML

from .models import Category, Person


class CategoryForm(forms.ModelForm):
    """Form creazione/modifica categoria."""

    class Meta:
        model = Category
        fields = ["name", "description", "color"]
        widgets = {
            "description": forms.Textarea(attrs={"rows": 3}),
            "color": forms.TextInput(attrs={"type": "color", "class": "form-control form-control-color"}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.helper = FormHelper()
        self.helper.form_method = "post"
        self.helper.layout = Layout(
            Row(
                Column("name", css_class="col-md-9"),
                Column("color", css_class="col-md-3"),
            ),
            "description",
            HTML("<hr>"),
            Row(
                Column(
                    Submit("submit", "Salva Categoria", css_class="btn btn-primary"),
                    css_class="col-md-6",
                ),
                Column(
                    HTML('<a href="{% url "team:category_list" %}" class="btn btn-secondary">Annulla</a>'),
                    css_class="col-md-6 text-end",
                ),
            ),
        )

    def clean_name(self):
        name = self.cleaned_data.get("name", "").strip()
        if not name:
            raise forms.ValidationError("Il nome è obbligatorio")
        return name


class PersonForm(forms.ModelForm):
    """Form creazione/modifica persona."""

    class Meta:
        model = Person
        fields = ["name", "category", "value"]
        widgets = {
            "value": forms.NumberInput(attrs={"step": "0.01", "min": "0"}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["category"].queryset = Category.objects.order_by("name")

        self.helper = FormHelper()
        self.helper.form_method = "post"
        self.helper.layout = Layout(
            "name",
            Row(
                Column("category", css_class="col-md-6"),
                Column("value", css_class="col-md-6"),
            ),
            HTML("<hr>"),
            Submit("submit", "Salva Persona", css_class="btn btn-primary"),
        )

    def clean_name(self):
        name = self.cleaned_data.get("name", "").strip()
        if not name:
            raise forms.ValidationError("Il nome è obbligatorio")
        return name
