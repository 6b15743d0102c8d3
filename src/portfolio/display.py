# src/portfolio/display.py
from __future__ import annotations

CURRENCY_SYMBOL = "¥"
LABEL_MAX_CHARS = 10
ELLIPSIS = "…"

CATEGORY_LABELS = {
    "phone": "Téléphone",
    "laptop": "Ordinateur",
    "watch": "Montre",
    "headphone": "Écouteurs",
    "tablet": "Tablette",
    "other": "Autre",
}


def format_currency(amount: float) -> str:
    return f"{CURRENCY_SYMBOL}{float(amount):,.2f}"


def format_daily(amount: float) -> str:
    return f"{CURRENCY_SYMBOL}{float(amount):.1f}/jour"


def truncate_label(name: str, max_chars: int = LABEL_MAX_CHARS) -> str:
    if len(name) <= max_chars:
        return name
    return name[:max_chars] + ELLIPSIS


def category_label(tag: str) -> str:
    return CATEGORY_LABELS.get(tag, CATEGORY_LABELS["other"])
