"""
CORE PDF GENERATOR - Metri
==========================

- build_report_pdf: report tabellare a sezioni (ReportLab), usato per
  pagamenti per evento e scelte del cardapio per categoria
- render_html_pdf: schede stampabili da template HTML (xhtml2pdf)
- list_pdf_form_fields / fill_pdf_form: campi modulo dei template di
  contratti e orcamenti (pypdf)
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from io import BytesIO
from typing import Any, Dict, List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

from django.http import HttpResponse
from django.utils import timezone

from pypdf import PdfReader, PdfWriter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import KeepTogether, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from xhtml2pdf import pisa

logger = logging.getLogger(__name__)

BRAND_COLOR = colors.HexColor("#5585b5")
STRIPE_COLOR = colors.HexColor("#f4f6f9")


@dataclass
class PdfSection:
    """Blocco del report: intestazione, righe della tabella, riga di chiusura."""

    heading: str
    rows: List[Dict[str, Any]]
    footer: str = ""


def format_cell(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "Sì" if value else "No"
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.strftime("%d/%m/%Y %H:%M")
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    return str(value)


def _styles():
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("ReportTitle", parent=base["Heading1"], textColor=BRAND_COLOR, alignment=1, spaceAfter=6),
        "subtitle": ParagraphStyle("ReportSubtitle", parent=base["Normal"], alignment=1, textColor=colors.grey),
        "heading": ParagraphStyle("SectionHeading", parent=base["Heading3"], textColor=BRAND_COLOR, spaceBefore=10),
        "footer": ParagraphStyle("SectionFooter", parent=base["Normal"], fontSize=9, alignment=2),
        "cell": ParagraphStyle("Cell", parent=base["Normal"], fontSize=9, leading=11),
        "normal": base["Normal"],
    }


def _section_table(section: PdfSection, headers: Sequence[str], styles) -> Table:
    # Paragraph nelle celle: testo lungo (descrizioni) va a capo, markup escapato
    data = [list(headers)]
    for row in section.rows:
        data.append([Paragraph(escape(format_cell(row.get(header))), styles["cell"]) for header in headers])

    table = Table(data, repeatRows=1, hAlign="LEFT")
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), BRAND_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 10),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, STRIPE_COLOR]),
    ]))
    return table


def build_report_pdf(
    title: str,
    headers: Sequence[str],
    sections: Sequence[PdfSection],
    subtitle: str = "",
) -> bytes:
    """
    Report A4 con una tabella per sezione.

    Le sezioni senza righe mostrano solo l'intestazione e "Nessun dato";
    un report senza sezioni contiene solo il titolo.
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=1.5 * cm,
        rightMargin=1.5 * cm,
        topMargin=1.5 * cm,
        bottomMargin=1.5 * cm,
        title=title,
    )
    styles = _styles()

    elements = [Paragraph(escape(title), styles["title"])]
    if subtitle:
        elements.append(Paragraph(escape(subtitle), styles["subtitle"]))
    elements.append(Paragraph(
        f"Generato il {timezone.localtime().strftime('%d/%m/%Y alle %H:%M')}", styles["subtitle"]
    ))
    elements.append(Spacer(1, 0.5 * cm))

    for section in sections:
        block = [Paragraph(escape(section.heading), styles["heading"])]
        if section.rows:
            block.append(_section_table(section, headers, styles))
        else:
            block.append(Paragraph("Nessun dato", styles["normal"]))
        if section.footer:
            block.append(Spacer(1, 4))
            block.append(Paragraph(escape(section.footer), styles["footer"]))
        elements.append(KeepTogether(block))

    doc.build(elements)
    return buffer.getvalue()


def render_html_pdf(html_content: str) -> Optional[bytes]:
    """HTML -> PDF con xhtml2pdf; None se la conversione fallisce."""
    buffer = BytesIO()
    status = pisa.CreatePDF(html_content, dest=buffer, encoding="utf-8")
    if status.err:
        logger.error(f"Errore xhtml2pdf: {status.err} errori di conversione")
        return None
    return buffer.getvalue()


def pdf_response(content: bytes, filename: str, inline: bool = False) -> HttpResponse:
    response = HttpResponse(content, content_type="application/pdf")
    disposition = "inline" if inline else "attachment"
    response["Content-Disposition"] = f'{disposition}; filename="{filename}.pdf"'
    return response


# ============================================================================
# TEMPLATE CON CAMPI MODULO
# ============================================================================

def list_pdf_form_fields(template_bytes: bytes) -> List[str]:
    """Nomi dei campi modulo presenti in un template PDF."""
    reader = PdfReader(BytesIO(template_bytes))
    return sorted((reader.get_fields() or {}).keys())


def fill_pdf_form(
    template_bytes: bytes,
    values: Dict[str, Any],
    flatten: bool = True,
) -> Tuple[bytes, List[str]]:
    """
    Compila i campi di testo di un template PDF.

    Vengono scritte solo le chiavi che corrispondono a un campo del template:
    le chiavi in più sono ignorate e i campi senza valore restano vuoti.

    Args:
        template_bytes: Contenuto del PDF template
        values: Mappa nome campo -> valore (convertito a stringa)
        flatten: Se True il testo viene impresso nella pagina

    Returns:
        (bytes del PDF compilato, lista dei campi compilati)
    """
    reader = PdfReader(BytesIO(template_bytes))
    template_fields = reader.get_fields() or {}

    matched = {
        name: "" if value is None else str(value)
        for name, value in values.items()
        if name in template_fields
    }

    writer = PdfWriter(clone_from=reader)
    if matched:
        writer.update_page_form_field_values(
            None, matched, auto_regenerate=False, flatten=flatten
        )
    else:
        logger.warning("Nessun campo del template corrisponde ai valori forniti")

    output = BytesIO()
    writer.write(output)
    return output.getvalue(), sorted(matched.keys())
