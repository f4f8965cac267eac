"""
Forms per app payments.
"""

from decimal import Decimal

from django import forms
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Row, Column, Submit

from .models import Payment


class PaymentForm(forms.ModelForm):
    class Meta:
        model = Payment
        fields = ["amount", "is_paid", "notes"]
        widgets = {
            "notes": forms.Textarea(attrs={"rows": 2}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.helper = FormHelper()
        self.helper.form_method = "post"
        self.helper.layout = Layout(
            Row(
                Column("amount", css_class="col-md-6"),
                Column("is_paid", css_class="col-md-6"),
            ),
            "notes",
            Submit("submit", "Salva", css_class="btn btn-primary"),
        )


class PaymentAmountForm(forms.Form):
    """Modifica rapida dell'importo (endpoint JSON)."""

    amount = forms.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0.01"))


class PaymentToggleForm(forms.Form):
    person = forms.UUIDField()
    amount = forms.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0.01"), required=False)
