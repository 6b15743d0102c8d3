# src/ui/queries.py
from __future__ import annotations

from datetime import date
from typing import Iterable

import pandas as pd

from portfolio.display import category_label
from portfolio.models import Device
from portfolio.ranking import SortDirection, SortKey, sort_devices, top_daily_cost
from portfolio.summary import category_distribution
from portfolio.valuation import evaluate


DEVICE_COLUMNS = [
    "id", "name", "category", "price", "purchase_date", "ownership_days", "daily_cost",
]


def devices_frame(
    devices: Iterable[Device],
    today: date | None = None,
    key: SortKey | str = SortKey.NONE,
    direction: SortDirection | str = SortDirection.DESC,
) -> pd.DataFrame:
    """Table des appareils + métriques dérivées, dans l'ordre de la vue triée."""
    ref = today if today is not None else date.today()
    ordered = sort_devices(devices, key, direction, today=ref)
    rows = [
        {
            "id": m.device.id,
            "name": m.device.name,
            "category": m.device.display_category.value,
            "price": float(m.device.price),
            "purchase_date": m.device.purchase_date.isoformat(),
            "ownership_days": m.ownership_days,
            "daily_cost": m.daily_cost,
        }
        for m in evaluate(ordered, ref)
    ]
    return pd.DataFrame(rows, columns=DEVICE_COLUMNS)


def category_frame(devices: Iterable[Device]) -> pd.DataFrame:
    rows = [
        {"category": s.category, "label": category_label(s.category), "value": s.value, "share": s.share}
        for s in category_distribution(devices)
    ]
    return pd.DataFrame(rows, columns=["category", "label", "value", "share"])


def top_daily_cost_frame(devices: Iterable[Device], n: int = 5, today: date | None = None) -> pd.DataFrame:
    rows = [
        {"label": p.label, "value": p.value, "name": p.name, "id": p.device_id}
        for p in top_daily_cost(devices, n, today=today)
    ]
    return pd.DataFrame(rows, columns=["label", "value", "name", "id"])
