"""
Tests per core: risultati dei servizi, date, upload, export e diagnostica.
"""

from datetime import date, datetime
from decimal import Decimal
from io import StringIO

from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import IntegrityError
from django.test import SimpleTestCase, TestCase

from events.models import Event
from team.models import Category

from . import dates
from .excel_generator import ExcelSheet, build_workbook
from .files import TEMPLATE_FILE_EXTENSIONS, validate_file_upload
from .pdf_generator import PdfSection, build_report_pdf, format_cell
from .results import ServiceResult, get_object_or_fail, service_operation


@service_operation("provare")
def _operation(outcome):
    if outcome == "validation":
        raise ValidationError({"name": "Obbligatorio"})
    if outcome == "integrity":
        raise IntegrityError("duplicate key")
    if outcome == "result":
        return ServiceResult.failure("già fallito")
    return outcome


class ServiceOperationTestCase(TestCase):
    def test_success_wraps_value(self):
        result = _operation(42)

        self.assertTrue(result)
        self.assertEqual(result.value, 42)

    def test_validation_error(self):
        result = _operation("validation")

        self.assertFalse(result)
        self.assertEqual(result.error, "name: Obbligatorio")

    def test_integrity_error(self):
        result = _operation("integrity")
        self.assertIn("Impossibile provare", result.error)

    def test_result_passed_through(self):
        self.assertEqual(_operation("result").error, "già fallito")

    def test_get_object_or_fail(self):
        with self.assertRaises(ValidationError):
            get_object_or_fail(Event, "non-un-uuid")


class DatesTestCase(SimpleTestCase):
    def test_parse_event_date(self):
        self.assertEqual(dates.parse_event_date("2025-03-15T10:00:00"), date(2025, 3, 15))
        self.assertEqual(dates.parse_event_date(datetime(2025, 3, 15, 23, 59)), date(2025, 3, 15))
        with self.assertRaises(TypeError):
            dates.parse_event_date(None)

    def test_formats(self):
        self.assertEqual(dates.format_event_date(date(2025, 3, 5)), "05/03/2025")
        self.assertEqual(dates.format_date_extended(date(2025, 3, 15)), "15 de março de 2025")
        self.assertEqual(
            dates.format_date_with_weekday(date(2025, 10, 1)),
            "01 de outubro de 2025 - quarta-feira",
        )
        self.assertEqual(dates.get_month_name(13), "")


class FileUploadTestCase(SimpleTestCase):
    def test_allowed_file(self):
        self.assertEqual(validate_file_upload(SimpleUploadedFile("foto.JPG", b"x")), (True, None))

    def test_wrong_extension(self):
        is_valid, error = validate_file_upload(
            SimpleUploadedFile("foto.png", b"x"), allowed_extensions=TEMPLATE_FILE_EXTENSIONS
        )
        self.assertFalse(is_valid)
        self.assertIn(".pdf", error)

    def test_too_large(self):
        is_valid, _ = validate_file_upload(SimpleUploadedFile("a.txt", b"x" * 20), max_size=10)
        self.assertFalse(is_valid)


class ExcelTestCase(SimpleTestCase):
    def test_build_workbook(self):
        sheet = ExcelSheet(
            "Pagamenti",
            [{"Nome": "Ana", "Valore": Decimal("50.00"), "Pagato": True}],
            currency_columns=["Valore"],
            total_columns=["Valore"],
        )

        ws = build_workbook([sheet]).worksheets[0]

        self.assertEqual(ws.title, "Pagamenti")
        self.assertEqual(ws["A1"].value, "Nome")
        self.assertEqual(ws["A2"].value, "Ana")
        self.assertEqual(ws["B2"].value, 50.0)
        self.assertEqual(ws["C2"].value, "Sì")
        self.assertEqual(ws["A3"].value, "Totale")
        self.assertEqual(ws["B3"].value, "=SUM(B2:B2)")

    def test_empty_sheet_keeps_headers(self):
        ws = build_workbook([ExcelSheet("Vuoto", [], headers=["Nome"], total_columns=["Nome"])]).worksheets[0]

        self.assertEqual(ws["A1"].value, "Nome")
        self.assertEqual(ws.max_row, 1)

    def test_no_sheets(self):
        wb = build_workbook([])

        self.assertEqual(wb.sheetnames, ["Dati"])


class PdfReportTestCase(SimpleTestCase):
    def test_format_cell(self):
        self.assertEqual(format_cell(None), "-")
        self.assertEqual(format_cell(False), "No")
        self.assertEqual(format_cell(date(2024, 3, 5)), "05/03/2024")
        self.assertEqual(format_cell(Decimal("12.5")), "12.50")

    def test_build_report_pdf(self):
        sections = [
            PdfSection("Festa <Silva>", [{"Nome": "Ana & Bia", "Valore": Decimal("10")}], footer="Totale R$ 10.00"),
            PdfSection("Vuota", []),
        ]

        content = build_report_pdf("Report", ["Nome", "Valore"], sections, subtitle="Prova")

        self.assertTrue(content.startswith(b"%PDF"))


class DiagnosticsCommandTestCase(TestCase):
    def test_categories(self):
        Category.objects.create(name="Garçom")
        out = StringIO()

        call_command("diagnostics", "categories", stdout=out)

        self.assertIn("Garçom", out.getvalue())
        self.assertIn("Totale: 1", out.getvalue())

    def test_team_requires_event_id(self):
        with self.assertRaises(CommandError):
            call_command("diagnostics", "team", stdout=StringIO())

    def test_team_with_invalid_id(self):
        out = StringIO()
        call_command("diagnostics", "team", "abc", stdout=out)
        self.assertIn("Nessun dato", out.getvalue())
