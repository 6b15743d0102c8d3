"""Shared fixtures: a fixed reference day and an in-memory device store."""

from datetime import date, timedelta

import pytest

from portfolio.models import Device, DeviceInput
from remote.store_api import SyncError


TODAY = date(2024, 6, 15)


def make_device(device_id, name="Device", price=100.0, days_ago=10, category="other", today=TODAY):
    """Build a Device purchased `days_ago` days before `today`."""
    return Device(
        id=str(device_id),
        name=name,
        price=float(price),
        purchase_date=today - timedelta(days=days_ago),
        category=category,
    )


class FakeStore:
    """In-memory stand-in for the remote store; fails on demand."""

    def __init__(self, devices=None, fail_on=()):
        self.devices = list(devices or [])
        self.fail_on = set(fail_on)
        self.calls = []
        self.on_call = None
        self._next_id = 1

    def _enter(self, op, *args):
        self.calls.append((op, *args))
        if self.on_call is not None:
            self.on_call(op)
        if op in self.fail_on:
            raise SyncError(f"{op}: réseau indisponible")

    def list(self):
        self._enter("list")
        return list(self.devices)

    def create(self, data: DeviceInput):
        self._enter("create", data)
        device = Device(
            id=f"dev-{self._next_id}",
            name=data.name,
            price=data.price,
            purchase_date=data.purchase_date,
            category=data.category.value,
        )
        self._next_id += 1
        self.devices.insert(0, device)
        return device

    def update(self, device_id, data: DeviceInput):
        self._enter("update", device_id, data)
        device = Device(
            id=device_id,
            name=data.name,
            price=data.price,
            purchase_date=data.purchase_date,
            category=data.category.value,
        )
        self.devices = [device if d.id == device_id else d for d in self.devices]
        return device

    def delete(self, device_id):
        self._enter("delete", device_id)
        self.devices = [d for d in self.devices if d.id != device_id]


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def sample_devices():
    return [
        make_device("a", "iPhone 15", 8999, days_ago=0, category="phone"),
        make_device("b", "MacBook Pro 16 M3 Max", 19999, days_ago=99, category="laptop"),
        make_device("c", "AirPods", 1299, days_ago=9, category="headphone"),
        make_device("d", "Kindle", 999, days_ago=365, category="tablet"),
    ]


@pytest.fixture
def store(sample_devices):
    return FakeStore(sample_devices)
