"""
CORE EXCEL GENERATOR - Metri
============================

Export tabellari in Excel (openpyxl): un foglio per tabella, importi in
formato R$ e riga dei totali con formule SUM.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from io import BytesIO
from typing import Any, Dict, Iterable, List, Optional, Sequence

from django.http import HttpResponse
from django.utils import timezone

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

CURRENCY_FORMAT = '"R$" #,##0.00'
DATE_FORMAT = "DD/MM/YYYY"
MAX_COLUMN_WIDTH = 50

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(fill_type="solid", start_color="5585B5", end_color="5585B5")
TOTAL_FONT = Font(bold=True)
TOTAL_BORDER = Border(top=Side(style="medium"))


@dataclass
class ExcelSheet:
    """
    Un foglio dell'export.

    currency_columns: colonne formattate come importo
    total_columns: colonne sommate nella riga finale "Totale"
    """

    title: str
    rows: List[Dict[str, Any]]
    headers: Optional[List[str]] = None
    currency_columns: Sequence[str] = ()
    total_columns: Sequence[str] = ()

    def column_names(self) -> List[str]:
        if self.headers is not None:
            return list(self.headers)
        return list(self.rows[0].keys()) if self.rows else []


def _cell_value(value):
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Sì" if value else "No"
    if isinstance(value, datetime):
        # openpyxl non accetta datetime con fuso orario
        if timezone.is_aware(value):
            value = timezone.make_naive(value)
        return value
    if isinstance(value, Decimal):
        return float(value)
    return value


def _write_sheet(ws, sheet: ExcelSheet):
    # Titolo foglio: massimo 31 caratteri in Excel
    ws.title = sheet.title[:31]
    headers = sheet.column_names()
    if not headers:
        return

    ws.append(headers)
    for cell in ws[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center")

    for row in sheet.rows:
        ws.append([_cell_value(row.get(header)) for header in headers])

    last_row = len(sheet.rows) + 1
    for col_num, header in enumerate(headers, 1):
        letter = get_column_letter(col_num)
        for (cell,) in ws.iter_rows(min_row=2, max_row=last_row, min_col=col_num, max_col=col_num):
            if header in sheet.currency_columns:
                cell.number_format = CURRENCY_FORMAT
            elif isinstance(cell.value, (date, datetime)):
                cell.number_format = DATE_FORMAT

        width = max((len(str(cell.value)) for cell in ws[letter] if cell.value is not None), default=0)
        ws.column_dimensions[letter].width = min(width + 2, MAX_COLUMN_WIDTH)

    if sheet.total_columns and sheet.rows:
        total_row = last_row + 1
        ws.cell(row=total_row, column=1, value="Totale")
        for col_num, header in enumerate(headers, 1):
            if header not in sheet.total_columns:
                continue
            letter = get_column_letter(col_num)
            cell = ws.cell(row=total_row, column=col_num, value=f"=SUM({letter}2:{letter}{last_row})")
            if header in sheet.currency_columns:
                cell.number_format = CURRENCY_FORMAT
        for cell in ws[total_row]:
            cell.font = TOTAL_FONT
            cell.border = TOTAL_BORDER

    ws.freeze_panes = "A2"


def build_workbook(sheets: Iterable[ExcelSheet]) -> Workbook:
    wb = Workbook()
    wb.remove(wb.active)
    for sheet in sheets:
        _write_sheet(wb.create_sheet(), sheet)
    if not wb.worksheets:
        wb.create_sheet("Dati")
    return wb


def excel_response(sheets: Iterable[ExcelSheet], filename: str) -> HttpResponse:
    """Workbook come allegato .xlsx."""
    output = BytesIO()
    build_workbook(sheets).save(output)

    response = HttpResponse(output.getvalue(), content_type=XLSX_CONTENT_TYPE)
    response["Content-Disposition"] = f'attachment; filename="{filename}.xlsx"'
    return response
