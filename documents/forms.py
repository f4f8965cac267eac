"""
Forms per app documents.
"""

from django import forms
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Row, Column, Submit, HTML, Fieldset

from core.files import ALLOWED_FILE_EXTENSIONS, TEMPLATE_FILE_EXTENSIONS, validate_file_upload
from events.models import Event

from . import fields as document_fields
from .models import BudgetTemplate, ContractTemplate, Document

INTEGER_CONTRACT_KEYS = {"6", "7", "8", "13", "14", "dia 2"}
INTEGER_BUDGET_KEYS = {"pessoas1", "pessoas2"}


def form_field_name(key):
    """Nome del campo HTML per una chiave dei dati ('dia 2' -> 'f_dia_2')."""
    return "f_" + key.replace(" ", "_")


def _event_field():
    return forms.ModelChoiceField(
        label="Evento",
        queryset=Event.objects.order_by("-date"),
        required=False,
    )


class DocumentUploadForm(forms.Form):
    file = forms.FileField(
        label="File",
        widget=forms.ClearableFileInput(attrs={"accept": ",".join(sorted(ALLOWED_FILE_EXTENSIONS))}),
    )
    name = forms.CharField(label="Nome", max_length=255, required=False)
    category = forms.ChoiceField(label="Categoria", choices=Document.CATEGORY_CHOICES, initial="other")
    description = forms.CharField(label="Descrizione", widget=forms.Textarea(attrs={"rows": 2}), required=False)
    event = _event_field()

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.helper = FormHelper()
        self.helper.form_method = "post"
        self.helper.form_enctype = "multipart/form-data"
        self.helper.layout = Layout(
            "file",
            Row(
                Column("name", css_class="col-md-6"),
                Column("category", css_class="col-md-3"),
                Column("event", css_class="col-md-3"),
            ),
            "description",
            Submit("submit", "Carica", css_class="btn btn-primary"),
        )

    def clean_file(self):
        file = self.cleaned_data["file"]
        is_valid, error = validate_file_upload(file)
        if not is_valid:
            raise forms.ValidationError(error)
        return file


class TemplateUploadForm(forms.Form):
    name = forms.CharField(label="Nome", max_length=200)
    description = forms.CharField(label="Descrizione", widget=forms.Textarea(attrs={"rows": 2}), required=False)
    template_file = forms.FileField(
        label="PDF con campi modulo",
        widget=forms.ClearableFileInput(attrs={"accept": ",".join(sorted(TEMPLATE_FILE_EXTENSIONS))}),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.helper = FormHelper()
        self.helper.form_method = "post"
        self.helper.form_enctype = "multipart/form-data"
        self.helper.layout = Layout(
            "name",
            "description",
            "template_file",
            Submit("submit", "Carica template", css_class="btn btn-primary"),
        )


class _FilledDocumentForm(forms.Form):
    """Campi dinamici a partire dalle etichette della mappatura PDF."""

    template_model = None
    field_labels = {}
    integer_keys = set()
    currency_keys = ()
    sections = []

    template = forms.ModelChoiceField(label="Template", queryset=ContractTemplate.objects.none())
    event = _event_field()
    notes = forms.CharField(label="Note", widget=forms.Textarea(attrs={"rows": 2}), required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["template"].queryset = self.template_model.objects.filter(is_active=True)

        for key, label in self.field_labels.items():
            if key in self.integer_keys:
                field = forms.IntegerField(label=label, min_value=0, required=False)
            elif key in self.currency_keys:
                field = forms.DecimalField(label=label, max_digits=12, decimal_places=2, min_value=0, required=False)
            else:
                field = forms.CharField(label=label, max_length=500, required=False)
            self.fields[form_field_name(key)] = field

        self.helper = FormHelper()
        self.helper.form_method = "post"
        self.helper.layout = Layout(
            Row(
                Column("template", css_class="col-md-6"),
                Column("event", css_class="col-md-6"),
            ),
            *[
                Fieldset(title, Row(*[Column(form_field_name(key), css_class="col-md-4") for key in keys]))
                for title, keys in self.sections
            ],
            "notes",
            HTML("<hr>"),
            Submit("submit", "Salva e genera PDF", css_class="btn btn-primary"),
        )

    def filled_data(self):
        """Dati compilati con le chiavi originali del template."""
        return {key: self.cleaned_data.get(form_field_name(key)) for key in self.field_labels}

    @classmethod
    def initial_from_values(cls, values):
        return {form_field_name(key): value for key, value in values.items() if key in cls.field_labels}


class ContractForm(_FilledDocumentForm):
    template_model = ContractTemplate
    field_labels = document_fields.CONTRACT_FIELD_LABELS
    integer_keys = INTEGER_CONTRACT_KEYS
    currency_keys = document_fields.CONTRACT_CURRENCY_KEYS
    sections = [
        ("Contraente", ["1", "2", "3"]),
        ("Evento", ["dia", "4", "5", "local"]),
        ("Squadra", ["6", "7", "8"]),
        ("Valori", ["9", "10", "11", "12"]),
        ("Pagamento", ["13", "14", "15", "pix"]),
        ("Firma", ["dia 2", "mes"]),
    ]

    def clean(self):
        cleaned = super().clean()
        cpf = cleaned.get(form_field_name("2"))
        if cpf:
            if not document_fields.validate_cpf(cpf):
                self.add_error(form_field_name("2"), "CPF non valido")
            else:
                cleaned[form_field_name("2")] = document_fields.format_cpf(cpf)
        total = cleaned.get(form_field_name("9"))
        if total is not None and not cleaned.get(form_field_name("10")):
            cleaned[form_field_name("10")] = document_fields.number_to_words(total)
        return cleaned


class BudgetForm(_FilledDocumentForm):
    template_model = BudgetTemplate
    field_labels = document_fields.BUDGET_FIELD_LABELS
    integer_keys = INTEGER_BUDGET_KEYS
    currency_keys = document_fields.BUDGET_CURRENCY_KEYS
    sections = [
        ("Evento", ["evento", "data", "cerimonialista"]),
        ("Valori", ["pessoas1", "preço2", "pessoas2", "preçotexto"]),
    ]

    def clean(self):
        cleaned = super().clean()
        people = cleaned.get(form_field_name("pessoas1"))
        price = cleaned.get(form_field_name("preço2"))
        if people is not None and not cleaned.get(form_field_name("pessoas2")):
            cleaned[form_field_name("pessoas2")] = people
        if people is not None and price is not None and cleaned.get(form_field_name("preçotexto")) is None:
            cleaned[form_field_name("preçotexto")] = document_fields.budget_total(people, price)
        return cleaned


class FilledStatusForm(forms.Form):
    status = forms.ChoiceField(choices=())

    def __init__(self, *args, choices=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["status"].choices = choices
