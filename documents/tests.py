"""
Tests per app documents.
"""

from datetime import date, time
from decimal import Decimal
from io import BytesIO

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.urls import reverse
from pypdf import PdfReader
from reportlab.pdfgen import canvas

from core.pdf_generator import fill_pdf_form, list_pdf_form_fields
from core.testing import authenticate_client
from events.models import Event

from . import fields as document_fields
from .forms import ContractForm, form_field_name
from .models import ContractTemplate, Document, FilledBudget, FilledContract
from .services import (
    BudgetTemplateService,
    ContractTemplateService,
    DocumentService,
    FilledBudgetService,
    FilledContractService,
)

CONTRACT_PDF_FIELDS = ["1", "2", "9", "10", "11", "data01", "mes", "contratante", "contratado"]
BUDGET_PDF_FIELDS = ["evento", "data", "pessoas1"]


def make_template_pdf(field_names):
    """PDF con un campo di testo per ogni nome."""
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer)
    y = 800
    for name in field_names:
        pdf.acroForm.textfield(name=name, x=50, y=y, width=250, height=18)
        y -= 25
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def pdf_upload(name, field_names):
    return SimpleUploadedFile(name, make_template_pdf(field_names), content_type="application/pdf")


def pdf_values(content):
    fields = PdfReader(BytesIO(content)).get_fields()
    return {name: field.get("/V") for name, field in fields.items()}


class FieldFormattingTestCase(TestCase):
    """Formattazioni brasiliane (funzioni pure)"""

    def test_format_currency(self):
        self.assertEqual(document_fields.format_currency(Decimal("1234.5")), "R$ 1.234,50")
        self.assertEqual(document_fields.format_currency("150"), "R$ 150,00")
        self.assertEqual(document_fields.format_currency(None), "R$ 0,00")

    def test_cpf(self):
        self.assertTrue(document_fields.validate_cpf("529.982.247-25"))
        self.assertFalse(document_fields.validate_cpf("111.111.111-11"))
        self.assertFalse(document_fields.validate_cpf("123"))
        self.assertEqual(document_fields.format_cpf("52998224725"), "529.982.247-25")

    def test_number_to_words(self):
        self.assertEqual(document_fields.number_to_words(1500), "mil e quinhentos reais")
        self.assertEqual(document_fields.number_to_words(100), "cem reais")
        self.assertEqual(document_fields.number_to_words(0), "zero reais")

    def test_contract_pdf_values(self):
        values = document_fields.build_contract_pdf_values({"1": "Maria", "9": "1500", "dia 2": 12})

        self.assertEqual(values["9"], "R$ 1.500,00")
        self.assertEqual(values["data01"], "12")
        self.assertNotIn("dia 2", values)
        self.assertEqual(values["contratante"], "Maria")
        self.assertEqual(values["11"], "R$ 0,00")

    def test_values_for_event(self):
        event = Event(
            title="Casamento",
            date=date(2025, 3, 15),
            start_time=time(19, 0),
            guest_count=100,
            price_per_person=Decimal("45.00"),
        )

        contract = document_fields.contract_values_for_event(event, signed_on=date(2025, 3, 1))
        self.assertEqual(contract["dia"], "15 de março de 2025")
        self.assertEqual(contract["4"], "19:00")
        self.assertEqual(contract["9"], Decimal("4500.00"))
        self.assertEqual(contract["mes"], "marco")
        self.assertEqual(contract["dia 2"], 1)

        budget = document_fields.budget_values_for_event(event)
        self.assertEqual(budget["pessoas1"], 100)
        self.assertEqual(budget["preçotexto"], Decimal("4500.00"))


class PdfFormTestCase(TestCase):
    def test_fill_only_matching_fields(self):
        template = make_template_pdf(["1", "mes"])

        content, matched = fill_pdf_form(template, {"1": "Maria", "extra": "x"}, flatten=False)

        self.assertEqual(matched, ["1"])
        self.assertEqual(pdf_values(content)["1"], "Maria")
        self.assertEqual(list_pdf_form_fields(template), ["1", "mes"])


class DocumentServiceTestCase(TestCase):
    def test_upload(self):
        result = DocumentService.upload(
            SimpleUploadedFile("ricevuta.pdf", b"%PDF-1.4", content_type="application/pdf"),
            category="receipt",
        )

        self.assertTrue(result.ok)
        self.assertEqual(result.value.name, "ricevuta.pdf")
        self.assertEqual(result.value.file_size, 8)

    def test_upload_rejects_extension(self):
        result = DocumentService.upload(SimpleUploadedFile("virus.exe", b"x"))

        self.assertFalse(result.ok)
        self.assertEqual(Document.objects.count(), 0)

    def test_delete(self):
        document = DocumentService.upload(SimpleUploadedFile("nota.txt", b"ciao")).value

        self.assertTrue(DocumentService.delete(document.pk).ok)
        self.assertFalse(Document.objects.exists())


class TemplateServiceTestCase(TestCase):
    def test_fields_read_on_upload(self):
        result = ContractTemplateService.create("Padrão", pdf_upload("contrato.pdf", ["2", "1"]))

        self.assertTrue(result.ok)
        self.assertEqual(result.value.field_names, ["1", "2"])

    def test_pdf_without_fields_rejected(self):
        result = BudgetTemplateService.create("Vuoto", pdf_upload("vuoto.pdf", []))
        self.assertFalse(result.ok)

    def test_not_a_pdf_rejected(self):
        result = ContractTemplateService.create("Rotto", SimpleUploadedFile("rotto.pdf", b"non un pdf"))
        self.assertFalse(result.ok)


class FilledDocumentServiceTestCase(TestCase):
    def setUp(self):
        self.contract_template = ContractTemplateService.create(
            "Contratto", pdf_upload("contrato.pdf", CONTRACT_PDF_FIELDS)
        ).value
        self.budget_template = BudgetTemplateService.create(
            "Orcamento", pdf_upload("orcamento.pdf", BUDGET_PDF_FIELDS)
        ).value

    def test_contract_requires_name(self):
        result = FilledContractService.create(self.contract_template.pk, {"1": " "})
        self.assertFalse(result.ok)

    def test_contract_rejects_invalid_cpf(self):
        result = FilledContractService.create(self.contract_template.pk, {"1": "Maria", "2": "123.456.789-00"})
        self.assertFalse(result.ok)

    def test_inactive_template_rejected(self):
        ContractTemplateService.set_active(self.contract_template.pk, False)

        result = FilledContractService.create(self.contract_template.pk, {"1": "Maria"})
        self.assertFalse(result.ok)

    def test_generate_contract_pdf(self):
        contract = FilledContractService.create(
            self.contract_template.pk,
            {"1": "Maria", "9": Decimal("1500"), "10": "mil e quinhentos reais", "dia 2": 12, "mes": "marco"},
        ).value

        result = FilledContractService.generate_pdf(contract.pk)

        self.assertTrue(result.ok)
        contract.refresh_from_db()
        self.assertEqual(contract.status, "completed")
        self.assertTrue(contract.generated_pdf.name.endswith(".pdf"))
        with contract.generated_pdf.open("rb") as generated:
            self.assertTrue(generated.read().startswith(b"%PDF"))

    def test_generate_budget_pdf(self):
        budget = FilledBudgetService.create(self.budget_template.pk, {"evento": "Festa", "pessoas1": 80}).value

        self.assertTrue(FilledBudgetService.generate_pdf(budget.pk).ok)
        self.assertEqual(FilledBudget.objects.get(pk=budget.pk).status, "completed")

    def test_set_status(self):
        budget = FilledBudgetService.create(self.budget_template.pk, {"evento": "Festa"}).value

        self.assertTrue(FilledBudgetService.set_status(budget.pk, "approved").ok)
        self.assertFalse(FilledBudgetService.set_status(budget.pk, "signed").ok)


class ContractFormTestCase(TestCase):
    def setUp(self):
        self.template = ContractTemplate.objects.create(name="T", fields_schema={"fields": ["1"]})

    def test_cpf_formatted_and_total_in_words(self):
        form = ContractForm(data={
            "template": self.template.pk,
            form_field_name("1"): "Maria",
            form_field_name("2"): "52998224725",
            form_field_name("9"): "1500",
        })

        self.assertTrue(form.is_valid(), form.errors)
        data = form.filled_data()
        self.assertEqual(data["2"], "529.982.247-25")
        self.assertEqual(data["10"], "mil e quinhentos reais")
        self.assertIn("dia 2", data)

    def test_invalid_cpf(self):
        form = ContractForm(data={"template": self.template.pk, form_field_name("2"): "11111111111"})

        self.assertFalse(form.is_valid())
        self.assertIn(form_field_name("2"), form.errors)


@override_settings(METRI_COMPANY={"NAME": "Prime Buffet", "PIX_KEY": "pix@prime"})
class DocumentViewsTestCase(TestCase):
    def setUp(self):
        authenticate_client(self.client)
        self.template = ContractTemplateService.create(
            "Contratto", pdf_upload("contrato.pdf", CONTRACT_PDF_FIELDS)
        ).value
        self.event = Event.objects.create(
            title="Aniversário",
            date=date(2025, 6, 10),
            guest_count=50,
            price_per_person=Decimal("30.00"),
        )

    def test_document_list(self):
        response = self.client.get(reverse("documents:document_list"))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Contratto")

    def test_contract_initial_from_event(self):
        response = self.client.get(reverse("documents:contract_create") + f"?event={self.event.pk}")

        self.assertEqual(response.status_code, 200)
        form = response.context["form"]
        self.assertEqual(form.initial[form_field_name("9")], Decimal("1500.00"))
        self.assertEqual(form.initial[form_field_name("pix")], "pix@prime")

    def test_contract_create_generates_pdf(self):
        response = self.client.post(reverse("documents:contract_create"), {
            "template": self.template.pk,
            "event": self.event.pk,
            form_field_name("1"): "Maria",
            form_field_name("9"): "1500",
        })

        contract = FilledContract.objects.get()
        self.assertRedirects(response, contract.get_absolute_url())
        self.assertEqual(contract.status, "completed")
        self.assertEqual(contract.event, self.event)

        download = self.client.get(reverse("documents:contract_download", args=[contract.pk]))
        self.assertEqual(download.status_code, 200)
        self.assertEqual(download["Content-Type"], "application/pdf")

    def test_contract_detail_and_status(self):
        contract = FilledContractService.create(self.template.pk, {"1": "Maria"}).value

        response = self.client.get(contract.get_absolute_url())
        self.assertContains(response, "Maria")

        self.client.post(reverse("documents:contract_status", args=[contract.pk]), {"status": "signed"})
        contract.refresh_from_db()
        self.assertEqual(contract.status, "signed")

    def test_contract_update_regenerates_pdf(self):
        contract = FilledContractService.create(self.template.pk, {"1": "Maria"}, event_id=self.event.pk).value

        response = self.client.post(reverse("documents:contract_update", args=[contract.pk]), {
            "template": self.template.pk,
            form_field_name("1"): "Maria Souza",
            form_field_name("9"): "2000",
            "notes": "rivisto",
        })

        self.assertRedirects(response, contract.get_absolute_url())
        contract.refresh_from_db()
        self.assertEqual(contract.filled_data["1"], "Maria Souza")
        self.assertEqual(contract.filled_data["10"], "dois mil reais")
        self.assertEqual(contract.notes, "rivisto")
        self.assertEqual(contract.status, "completed")

    def test_download_without_pdf_is_404(self):
        contract = FilledContractService.create(self.template.pk, {"1": "Maria"}).value

        response = self.client.get(reverse("documents:contract_download", args=[contract.pk]))
        self.assertEqual(response.status_code, 404)

    def test_upload_document(self):
        response = self.client.post(reverse("documents:document_upload"), {
            "file": SimpleUploadedFile("foto.png", b"png", content_type="image/png"),
            "category": "photo",
            "event": self.event.pk,
        })

        self.assertRedirects(response, reverse("documents:document_list"))
        self.assertEqual(self.event.documents.get().category, "photo")

    def test_template_toggle(self):
        self.client.post(reverse("documents:contract_template_toggle", args=[self.template.pk]))

        self.template.refresh_from_db()
        self.assertFalse(self.template.is_active)
