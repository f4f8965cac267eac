"""
Parser del testo cardapio (es. generato da un assistente o incollato da un documento).

Formato:

    CARDÁPIO: Nome del cardapio        (anche MENU: / CARDAPIO:)
    CATEGORIA: Entradas                (anche CATEGORY:)
    - Bruschetta :: pane, pomodoro e basilico
    - Coxinha

Le categorie senza piatti vengono scartate e i piatti fuori da una
categoria ignorati.
"""

import re
from dataclasses import dataclass, field, asdict
from typing import List

MENU_HEADERS = ("MENU:", "CARDÁPIO:", "CARDAPIO:")
CATEGORY_HEADERS = ("CATEGORY:", "CATEGORIA:")
ITEM_MARKER = "-"
DESCRIPTION_SEPARATOR = "::"

_HEADER_BREAK = re.compile(
    r"\s*(" + "|".join(re.escape(h) for h in MENU_HEADERS + CATEGORY_HEADERS) + r")"
)
_ITEM_BREAK = re.compile(r"\s+-\s+")


class MenuParseError(ValueError):
    """Testo cardapio non valido (solo messaggio)."""


@dataclass
class ParsedMenuItem:
    name: str
    description: str = ""


@dataclass
class ParsedCategory:
    name: str
    items: List[ParsedMenuItem] = field(default_factory=list)


@dataclass
class ParsedMenu:
    menu_name: str
    categories: List[ParsedCategory] = field(default_factory=list)

    @property
    def item_count(self):
        return sum(len(category.items) for category in self.categories)

    def as_dict(self):
        return asdict(self)


def _normalize(text):
    text = _HEADER_BREAK.sub(lambda m: "\n" + m.group(1), text or "")
    text = _ITEM_BREAK.sub("\n- ", text)
    return [line.strip() for line in text.split("\n") if line.strip()]


def _header_value(line, headers):
    upper = line.upper()
    for header in headers:
        if upper.startswith(header):
            return line[line.index(":") + 1:].strip()
    return None


def _parse_item(line):
    text = line[len(ITEM_MARKER):].strip()
    if DESCRIPTION_SEPARATOR in text:
        name, description = text.split(DESCRIPTION_SEPARATOR, 1)
        return ParsedMenuItem(name=name.strip(), description=description.strip())
    return ParsedMenuItem(name=text)


def parse_menu_text(text) -> ParsedMenu:
    """
    Converte il testo in un ParsedMenu.

    Raises:
        MenuParseError: nome cardapio mancante, nessuna categoria o nessun piatto
    """
    menu_name = ""
    categories = []
    current = None

    for line in _normalize(text):
        value = _header_value(line, MENU_HEADERS)
        if value is not None:
            menu_name = value
            continue

        value = _header_value(line, CATEGORY_HEADERS)
        if value is not None:
            if current is not None and current.items:
                categories.append(current)
            current = ParsedCategory(name=value)
            continue

        if line.startswith(ITEM_MARKER) and current is not None:
            current.items.append(_parse_item(line))

    if current is not None and current.items:
        categories.append(current)

    if not menu_name:
        raise MenuParseError(
            "Nome del cardapio non trovato. Inizia il testo con 'CARDÁPIO: [nome]' o 'MENU: [nome]'."
        )
    if not categories:
        raise MenuParseError("Nessuna categoria trovata. Usa 'CATEGORIA: [nome]' per definire le categorie.")

    parsed = ParsedMenu(menu_name=menu_name, categories=categories)
    if parsed.item_count == 0:
        raise MenuParseError("Nessun piatto trovato. Usa '- [nome] :: [descrizione]' per aggiungere i piatti.")
    return parsed


def validate_menu_text(text) -> dict:
    """Variante che non solleva: {"valid": True, "preview": ParsedMenu} o {"valid": False, "error": str}."""
    try:
        return {"valid": True, "preview": parse_menu_text(text)}
    except MenuParseError as e:
        return {"valid": False, "error": str(e)}
