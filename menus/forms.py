"""
Forms per app menus.
"""

from django import forms
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Row, Column, Submit, HTML

from .models import Menu, MenuCategory, MenuItem
from .parser import validate_menu_text


class MenuForm(forms.ModelForm):
    class Meta:
        model = Menu
        fields = ["name", "description", "status"]
        widgets = {
            "description": forms.Textarea(attrs={"rows": 3}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.helper = FormHelper()
        self.helper.form_method = "post"
        self.helper.layout = Layout(
            Row(
                Column("name", css_class="col-md-8"),
                Column("status", css_class="col-md-4"),
            ),
            "description",
            HTML("<hr>"),
            Submit("submit", "Salva Cardapio", css_class="btn btn-primary"),
        )

    def clean_name(self):
        name = self.cleaned_data.get("name", "").strip()
        if not name:
            raise forms.ValidationError("Il nome è obbligatorio")
        return name


class MenuImportForm(forms.Form):
    """
    Import da testo.

    Il primo invio mostra l'anteprima; con `confirm` il cardapio viene salvato.
    """

    text = forms.CharField(
        label="Testo del cardapio",
        widget=forms.Textarea(attrs={
            "rows": 16,
            "placeholder": "CARDÁPIO: Nome\nCATEGORIA: Entradas\n- Piatto :: descrizione",
        }),
    )
    description = forms.CharField(label="Descrizione", required=False)
    confirm = forms.BooleanField(required=False, widget=forms.HiddenInput)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.helper = FormHelper()
        self.helper.form_method = "post"
        self.helper.layout = Layout(
            "text",
            "description",
            "confirm",
            Submit("submit", "Anteprima", css_class="btn btn-primary"),
        )

    def clean_text(self):
        result = validate_menu_text(self.cleaned_data.get("text", ""))
        if not result["valid"]:
            raise forms.ValidationError(result["error"])
        self.parsed = result["preview"]
        return self.cleaned_data["text"]


class MenuCategoryForm(forms.ModelForm):
    class Meta:
        model = MenuCategory
        fields = ["name", "recommended_count"]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.helper = FormHelper()
        self.helper.form_method = "post"
        self.helper.layout = Layout(
            Row(
                Column("name", css_class="col-md-8"),
                Column("recommended_count", css_class="col-md-4"),
            ),
            Submit("submit", "Salva Categoria", css_class="btn btn-primary"),
        )


class MenuItemForm(forms.ModelForm):
    class Meta:
        model = MenuItem
        fields = ["name", "description", "image_url"]
        widgets = {
            "description": forms.Textarea(attrs={"rows": 2}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.helper = FormHelper()
        self.helper.form_method = "post"
        self.helper.layout = Layout(
            "name",
            "description",
            "image_url",
            Submit("submit", "Salva Piatto", css_class="btn btn-primary"),
        )


class EventMenuLinkForm(forms.Form):
    menu = forms.ModelChoiceField(
        label="Cardapio",
        queryset=Menu.objects.filter(status=Menu.STATUS_ACTIVE).order_by("name"),
        empty_label="Seleziona un cardapio...",
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.helper = FormHelper()
        self.helper.form_method = "post"
        self.helper.layout = Layout(
            "menu",
            Submit("submit", "Collega e genera link", css_class="btn btn-primary"),
        )


class GuestSelectionForm(forms.Form):
    """Invio finale delle scelte dalla pagina pubblica."""

    items = forms.MultipleChoiceField(required=False)

    def __init__(self, *args, item_choices=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["items"].choices = [(str(pk), name) for pk, name in item_choices]
