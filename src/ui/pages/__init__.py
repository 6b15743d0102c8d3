# src/ui/pages/__init__.py
from __future__ import annotations

from . import (
    _01_devices as devices_page,
    _02_dashboard as dashboard_page,
    _03_data as data_page,
)
