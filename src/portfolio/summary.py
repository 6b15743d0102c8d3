# src/portfolio/summary.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from portfolio.models import Device
from portfolio.valuation import evaluate


@dataclass(frozen=True)
class Summary:
    total_asset: float
    total_daily_cost: float
    device_count: int = 0


@dataclass(frozen=True)
class CategorySlice:
    category: str
    value: float
    share: float  # fraction du total des prix


def summarize(devices: Iterable[Device], today: date | None = None) -> Summary:
    """
    total_asset = somme des prix,
    total_daily_cost = somme des coûts journaliers de chaque appareil
    (chaque appareil s'amortit indépendamment).
    """
    total_asset = 0.0
    total_daily = 0.0
    n = 0
    for m in evaluate(devices, today):
        total_asset += float(m.device.price)
        total_daily += m.daily_cost
        n += 1
    return Summary(total_asset=total_asset, total_daily_cost=total_daily, device_count=n)


def group_by_category(devices: Iterable[Device]) -> dict[str, float]:
    # uniquement les catégories présentes, dans l'ordre d'apparition
    out: dict[str, float] = {}
    for d in devices:
        key = d.display_category.value
        out[key] = out.get(key, 0.0) + float(d.price)
    return out


def category_distribution(devices: Iterable[Device]) -> list[CategorySlice]:
    """Paires {category, value} pour le camembert."""
    grouped = group_by_category(devices)
    total = sum(grouped.values())
    return [
        CategorySlice(category=cat, value=value, share=(value / total if total > 0 else 0.0))
        for cat, value in grouped.items()
    ]
