"""
Campi di contratti e orcamenti.

Formattazioni brasiliane (R$, CPF, importi in lettere) e mappatura
dei dati verso i nomi dei campi modulo dei template PDF.
"""

import re
import unicodedata
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.conf import settings

from core.dates import format_date_extended, format_date_with_weekday, get_month_name, today

# ============================================================================
# FORMATTAZIONI
# ============================================================================


def _to_decimal(value) -> Decimal:
    if value in (None, ""):
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Valore numerico non valido: {value}")


def format_currency(value) -> str:
    """1234.5 -> 'R$ 1.234,50'"""
    amount = _to_decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    integer, cents = f"{abs(amount):.2f}".split(".")
    integer = f"{int(integer):,}".replace(",", ".")
    return f"{sign}R$ {integer},{cents}"


def format_cpf(cpf: str) -> str:
    """'12345678909' -> '123.456.789-09'; valori non a 11 cifre restano invariati."""
    digits = re.sub(r"\D", "", cpf or "")
    if len(digits) != 11:
        return cpf
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def _cpf_digit(digits: str) -> int:
    weight = len(digits) + 1
    total = sum(int(d) * (weight - i) for i, d in enumerate(digits))
    digit = 11 - (total % 11)
    return 0 if digit >= 10 else digit


def validate_cpf(cpf: str) -> bool:
    digits = re.sub(r"\D", "", cpf or "")
    if len(digits) != 11 or len(set(digits)) == 1:
        return False
    return (
        _cpf_digit(digits[:9]) == int(digits[9])
        and _cpf_digit(digits[:10]) == int(digits[10])
    )


UNITS = ["", "um", "dois", "três", "quatro", "cinco", "seis", "sete", "oito", "nove"]
TEENS = ["dez", "onze", "doze", "treze", "quatorze", "quinze", "dezesseis", "dezessete", "dezoito", "dezenove"]
TENS = ["", "", "vinte", "trinta", "quarenta", "cinquenta", "sessenta", "setenta", "oitenta", "noventa"]
HUNDREDS = [
    "", "cento", "duzentos", "trezentos", "quatrocentos",
    "quinhentos", "seiscentos", "setecentos", "oitocentos", "novecentos",
]


def _group_to_words(number: int) -> str:
    if number == 100:
        return "cem"

    hundreds, rest = divmod(number, 100)
    tens, units = divmod(rest, 10)
    parts = []
    if hundreds:
        parts.append(HUNDREDS[hundreds])
    if tens == 1:
        parts.append(TEENS[units])
    else:
        if tens:
            parts.append(TENS[tens])
        if units:
            parts.append(UNITS[units])
    return " e ".join(parts)


def number_to_words(value) -> str:
    """
    Importo in lettere (parte intera, fino a 999.999).

    1500 -> 'mil e quinhentos reais'
    """
    number = int(_to_decimal(value))
    if number == 0:
        return "zero reais"

    thousands, rest = divmod(number, 1000)
    words = ""
    if thousands:
        words = "mil" if thousands == 1 else f"{_group_to_words(thousands)} mil"
    if rest:
        words = f"{words} e {_group_to_words(rest)}" if words else _group_to_words(rest)
    return f"{words} reais"


def strip_accents(text: str) -> str:
    normalized = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in normalized if not unicodedata.combining(ch))


def format_time(value) -> str:
    return value.strftime("%H:%M") if value else ""


# ============================================================================
# CONTRATTI
# ============================================================================

CONTRACT_FIELD_LABELS = {
    "1": "Nome del contraente",
    "2": "CPF",
    "3": "Indirizzo",
    "dia": "Giorno dell'evento",
    "4": "Dalle ore",
    "5": "Alle ore",
    "local": "Luogo",
    "6": "Garçons",
    "7": "Copeiras",
    "8": "Maître",
    "9": "Valore totale",
    "10": "Valore in lettere",
    "11": "Caparra",
    "12": "Saldo",
    "13": "Giorni prima per il saldo",
    "14": "Ospiti in eccedenza",
    "15": "Penale per ora di ritardo",
    "pix": "Chiave PIX",
    "dia 2": "Giorno della firma",
    "mes": "Mese della firma",
}

CONTRACT_CURRENCY_KEYS = ("9", "11", "12", "15")

# Chiave del modulo -> nome del campo nel PDF quando differiscono
CONTRACT_PDF_NAMES = {"dia 2": "data01"}


def default_contract_values() -> dict:
    return {
        "6": 4,
        "7": 2,
        "8": 1,
        "13": 7,
        "14": 0,
        "15": Decimal("150.00"),
        "pix": settings.METRI_COMPANY["PIX_KEY"],
    }


def contract_values_for_event(event, signed_on=None) -> dict:
    """Valori iniziali del contratto a partire dall'evento."""
    signed_on = signed_on or today()
    values = default_contract_values()
    values.update({
        "dia": format_date_extended(event.date),
        "4": format_time(event.start_time),
        "5": format_time(event.end_time),
        "local": event.location,
        "dia 2": signed_on.day,
        "mes": strip_accents(get_month_name(signed_on.month)),
    })
    total = event.total_price
    if total is not None:
        values["9"] = total
        values["10"] = number_to_words(total)
    return values


def build_contract_pdf_values(data: dict) -> dict:
    """
    Dati del contratto -> campi del PDF.

    Valuta in formato R$ per 9/11/12/15, 'dia 2' scritto nel campo 'data01',
    firme con il nome del contraente e dell'azienda.
    """
    values = {}
    for key in CONTRACT_FIELD_LABELS:
        value = data.get(key)
        if key in CONTRACT_CURRENCY_KEYS:
            value = format_currency(value)
        values[CONTRACT_PDF_NAMES.get(key, key)] = "" if value is None else str(value)

    values["contratante"] = str(data.get("1") or "")
    values["contratado"] = settings.METRI_COMPANY["NAME"]
    return values


# ============================================================================
# ORCAMENTI
# ============================================================================

BUDGET_FIELD_LABELS = {
    "evento": "Evento",
    "data": "Data",
    "cerimonialista": "Cerimonialista",
    "pessoas1": "Persone",
    "preço2": "Prezzo per persona",
    "pessoas2": "Persone (calcolo)",
    "preçotexto": "Totale",
}

BUDGET_CURRENCY_KEYS = ("preço2", "preçotexto")


def default_budget_values() -> dict:
    return {
        "pessoas1": 80,
        "pessoas2": 80,
        "preço2": Decimal("15.00"),
        "preçotexto": Decimal("1200.00"),
    }


def budget_values_for_event(event) -> dict:
    values = default_budget_values()
    values.update({
        "evento": event.title,
        "data": format_date_with_weekday(event.date),
    })
    if event.guest_count:
        values["pessoas1"] = values["pessoas2"] = event.guest_count
    if event.price_per_person is not None:
        values["preço2"] = event.price_per_person
    values["preçotexto"] = budget_total(values["pessoas1"], values["preço2"])
    return values


def budget_total(people, price_per_person) -> Decimal:
    return (Decimal(int(people or 0)) * _to_decimal(price_per_person)).quantize(Decimal("0.01"))


def build_budget_pdf_values(data: dict) -> dict:
    values = {}
    for key in BUDGET_FIELD_LABELS:
        value = data.get(key)
        if key in BUDGET_CURRENCY_KEYS:
            value = format_currency(value)
        values[key] = "" if value is None else str(value)
    return values
