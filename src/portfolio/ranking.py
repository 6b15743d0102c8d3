# src/portfolio/ranking.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from functools import cmp_to_key
from typing import Iterable

from portfolio.display import LABEL_MAX_CHARS, truncate_label
from portfolio.models import Device
from portfolio.valuation import DeviceMetrics, evaluate


class SortKey(str, Enum):
    NONE = "none"
    PRICE = "price"
    DAILY_COST = "daily_cost"
    OWNERSHIP_DAYS = "ownership_days"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class ChartPoint:
    label: str      # tronqué pour l'axe
    value: float
    name: str       # nom complet (tooltip)
    device_id: str


def _metric(m: DeviceMetrics, key: SortKey) -> float:
    if key is SortKey.PRICE:
        return float(m.device.price)
    if key is SortKey.DAILY_COST:
        return m.daily_cost
    return float(m.ownership_days)


def _compare(a: float, b: float) -> int:
    return (a > b) - (a < b)


def sort_devices(
    devices: Iterable[Device],
    key: SortKey | str = SortKey.NONE,
    direction: SortDirection | str = SortDirection.ASC,
    today: date | None = None,
) -> list[Device]:
    """
    Vue triée de la collection.
    key=none -> ordre d'insertion inchangé.
    desc = comparaison ascendante négée (même chemin de code), les égalités
    gardent l'ordre d'origine dans les deux sens (tri stable).
    """
    key = SortKey(key)
    direction = SortDirection(direction)
    items = list(devices)
    if key is SortKey.NONE:
        return items

    sign = -1 if direction is SortDirection.DESC else 1
    metrics = evaluate(items, today)

    def cmp(x: DeviceMetrics, y: DeviceMetrics) -> int:
        return sign * _compare(_metric(x, key), _metric(y, key))

    return [m.device for m in sorted(metrics, key=cmp_to_key(cmp))]


def next_sort_state(
    key: SortKey | str,
    direction: SortDirection | str,
    clicked: SortKey | str,
) -> tuple[SortKey, SortDirection]:
    """
    Clic sur un en-tête : nouvelle colonne -> desc, même colonne desc -> asc,
    même colonne asc -> plus de tri.
    """
    key, direction, clicked = SortKey(key), SortDirection(direction), SortKey(clicked)
    if clicked is SortKey.NONE:
        return SortKey.NONE, SortDirection.DESC
    if clicked is not key:
        return clicked, SortDirection.DESC
    if direction is SortDirection.DESC:
        return key, SortDirection.ASC
    return SortKey.NONE, SortDirection.DESC


def top_daily_cost(
    devices: Iterable[Device],
    n: int,
    today: date | None = None,
    max_label_chars: int = LABEL_MAX_CHARS,
) -> list[ChartPoint]:
    """Top n par coût journalier décroissant (barres du graphique)."""
    if n <= 0:
        return []
    ref = today if today is not None else date.today()
    ranked = sort_devices(devices, SortKey.DAILY_COST, SortDirection.DESC, today=ref)[:n]
    return [
        ChartPoint(
            label=truncate_label(m.device.name, max_label_chars),
            value=m.daily_cost,
            name=m.device.name,
            device_id=m.device.id,
        )
        for m in evaluate(ranked, ref)
    ]
