"""
Utility date per gli eventi.

Le date evento sono giorni di calendario: si confrontano solo come date,
senza conversioni di fuso orario.
"""

from datetime import date, datetime

from django.utils import timezone

MONTH_NAMES = [
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
]

# date.weekday(): lunedì = 0
WEEKDAY_NAMES = [
    "segunda-feira",
    "terça-feira",
    "quarta-feira",
    "quinta-feira",
    "sexta-feira",
    "sábado",
    "domingo",
]


def parse_event_date(value) -> date:
    """
    Converte una data evento in `date`.

    Accetta date, datetime (si prende il giorno) o stringhe ISO "YYYY-MM-DD"
    (eventuale parte oraria ignorata).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"Data evento non valida: {value!r}")


def today() -> date:
    """Giorno corrente nel fuso orario del progetto."""
    return timezone.localdate()


def format_event_date(value) -> str:
    """Formato DD/MM/YYYY."""
    return parse_event_date(value).strftime("%d/%m/%Y")


def is_date_in_past(value, reference: date = None) -> bool:
    return parse_event_date(value) < (reference or today())


def is_date_today(value, reference: date = None) -> bool:
    return parse_event_date(value) == (reference or today())


def get_month_name(month: int) -> str:
    """Nome del mese (1-12) in portoghese, stringa vuota se fuori range."""
    if 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return ""


def format_date_extended(value) -> str:
    """Es. "15 de março de 2025"."""
    day = parse_event_date(value)
    return f"{day.day} de {get_month_name(day.month)} de {day.year}"


def format_date_with_weekday(value) -> str:
    """Es. "01 de outubro de 2025 - quarta-feira"."""
    day = parse_event_date(value)
    return (
        f"{day.day:02d} de {get_month_name(day.month)} de {day.year}"
        f" - {WEEKDAY_NAMES[day.weekday()]}"
    )
