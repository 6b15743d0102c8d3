# src/portfolio/valuation.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable

from portfolio.models import Device, parse_day


SECONDS_PER_DAY = 24 * 3600


def ownership_days(purchase_date, now=None) -> int:
    """
    Nombre de jours calendaires de possession, plancher à 1.
    Les deux dates sont ramenées à minuit avant la différence.
    """
    d0 = parse_day(purchase_date)
    d1 = parse_day(now) if now is not None else date.today()
    # |Δ| : une date future donne aussi une durée positive (le rejet est fait à la validation)
    delta_s = abs((d1 - d0).total_seconds())
    days = math.ceil(delta_s / SECONDS_PER_DAY)
    return max(1, days)


def daily_cost(price: float, days: int) -> float:
    # days >= 1 garanti par ownership_days : pas de division par zéro
    return float(price) / int(days)


@dataclass(frozen=True)
class DeviceMetrics:
    device: Device
    ownership_days: int
    daily_cost: float


def device_metrics(device: Device, today: date | None = None) -> DeviceMetrics:
    days = ownership_days(device.purchase_date, today)
    return DeviceMetrics(device=device, ownership_days=days, daily_cost=daily_cost(device.price, days))


def evaluate(devices: Iterable[Device], today: date | None = None) -> list[DeviceMetrics]:
    """Métriques de toute la collection contre un même 'today'."""
    ref = today if today is not None else date.today()
    return [device_metrics(d, ref) for d in devices]
