"""Tests for the sync engine: local state follows the remote store."""

import sqlite3

import pytest

from app.engine import (
    DeviceState,
    FormState,
    MutationKind,
    MutationStatus,
    SyncEngine,
)
from portfolio.valuation import device_metrics

from conftest import FakeStore, make_device


def _form(**overrides):
    values = {"name": "iPhone 15", "price": "8999", "purchase_date": "2024-06-15", "category": "phone"}
    values.update(overrides)
    return values


@pytest.fixture
def engine(store):
    e = SyncEngine(store)
    assert e.load().ok
    store.calls.clear()
    return e


class TestLoad:
    """Tests for the initial fetch."""

    def test_seeds_local_state(self, store, sample_devices):
        engine = SyncEngine(store)
        m = engine.load()
        assert m.kind is MutationKind.LOAD
        assert m.status is MutationStatus.COMMITTED
        assert engine.devices == sample_devices
        assert engine.state.version == 1

    def test_failure_leaves_state(self, sample_devices):
        engine = SyncEngine(FakeStore(sample_devices, fail_on={"list"}))
        m = engine.load()
        assert m.status is MutationStatus.FAILED
        assert "réseau" in m.error
        assert engine.devices == []
        assert engine.state.version == 0


class TestCreate:
    """Tests for create."""

    def test_prepends_store_record(self, engine, today):
        before = list(engine.devices)
        m = engine.create(_form(), today=today)
        assert m.ok
        assert m.device.id == "dev-1"
        assert engine.devices[0] == m.device
        assert engine.devices[1:] == before

    def test_scenario_bought_today(self, engine, today):
        m = engine.create(_form(purchase_date=today.isoformat()), today=today)
        metrics = device_metrics(m.device, today)
        assert metrics.ownership_days == 1
        assert metrics.daily_cost == 8999

    def test_uses_and_clears_form(self, engine, store, today):
        engine.form.name = "Pixel 8"
        engine.form.price = "4999"
        engine.form.purchase_date = "2024-05-01"
        engine.form.category = "phone"
        m = engine.create(today=today)
        assert m.ok
        assert store.calls[0][1].name == "Pixel 8"
        assert engine.form == FormState()

    def test_validation_failure_makes_no_call(self, engine, store, today):
        m = engine.create(_form(purchase_date="2024-06-16"), today=today)
        assert m.status is MutationStatus.IDLE
        assert m.rejected
        assert m.issues[0].code == "future_date"
        assert store.calls == []

    def test_store_failure_leaves_state_and_form(self, sample_devices, today):
        store = FakeStore(sample_devices, fail_on={"create"})
        engine = SyncEngine(store)
        engine.load()
        version = engine.state.version
        engine.form.name = "Pixel 8"
        m = engine.create(_form(), today=today)
        assert m.status is MutationStatus.FAILED
        assert engine.devices == sample_devices
        assert engine.state.version == version
        assert engine.form.name == "Pixel 8"


class TestUpdate:
    """Tests for full-record update."""

    def test_replaces_matching_record(self, engine, today):
        m = engine.update("c", _form(name="AirPods Pro", price="1899", category="headphone"), today=today)
        assert m.ok
        assert [d.id for d in engine.devices] == ["a", "b", "c", "d"]
        assert engine.state.get("c").name == "AirPods Pro"
        assert engine.state.get("c").price == 1899.0

    def test_failure_leaves_state(self, sample_devices, today):
        engine = SyncEngine(FakeStore(sample_devices, fail_on={"update"}))
        engine.load()
        m = engine.update("c", _form(name="AirPods Pro"), today=today)
        assert m.status is MutationStatus.FAILED
        assert engine.state.get("c").name == "AirPods"

    def test_invalid_input_rejected(self, engine, store, today):
        m = engine.update("c", _form(price="-5"), today=today)
        assert m.rejected
        assert store.calls == []

    def test_mismatched_id_is_a_failure(self, engine, store, today):
        original = store.update

        def wrong_id(device_id, data):
            return original("zzz", data)

        store.update = wrong_id
        m = engine.update("c", _form(), today=today)
        assert m.status is MutationStatus.FAILED
        assert engine.state.get("c").name == "AirPods"


class TestDelete:
    """Tests for confirmed delete."""

    def test_confirmed_delete_removes(self, engine, store):
        m = engine.delete("b", confirm=lambda device: True)
        assert m.ok
        assert m.device.name == "MacBook Pro 16 M3 Max"
        assert [d.id for d in engine.devices] == ["a", "c", "d"]
        assert store.calls == [("delete", "b")]

    def test_declined_confirmation(self, engine, store, sample_devices):
        m = engine.delete("b", confirm=lambda device: False)
        assert m.aborted
        assert m.status is MutationStatus.IDLE
        assert store.calls == []
        assert engine.devices == sample_devices

    def test_remote_failure_keeps_device(self, sample_devices):
        engine = SyncEngine(FakeStore(sample_devices, fail_on={"delete"}))
        engine.load()
        m = engine.delete("b", confirm=lambda device: True)
        assert m.status is MutationStatus.FAILED
        assert m.error
        assert engine.devices == sample_devices

    def test_confirm_receives_device(self, engine):
        seen = []
        engine.delete("d", confirm=lambda device: seen.append(device.name) or False)
        assert seen == ["Kindle"]

    def test_unknown_id(self, engine, store):
        m = engine.delete("nope", confirm=lambda device: True)
        assert m.status is MutationStatus.FAILED
        assert store.calls == []


class TestSubmissionState:
    """Tests for in-flight tracking and the journal."""

    def test_submitting_while_call_runs(self, engine, store, today):
        observed = []
        store.on_call = lambda op: observed.append([(m.kind, m.status) for m in engine.in_flight])
        engine.create(_form(), today=today)
        assert observed == [[(MutationKind.CREATE, MutationStatus.SUBMITTING)]]
        assert engine.in_flight == []

    def test_in_flight_cleared_after_failure(self, sample_devices):
        engine = SyncEngine(FakeStore(sample_devices, fail_on={"delete"}))
        engine.load()
        engine.delete("a", confirm=lambda device: True)
        assert engine.in_flight == []

    def test_journal_records_outcomes(self, store, today):
        events = []
        engine = SyncEngine(store, journal=lambda kind, payload: events.append((kind, payload["status"])))
        engine.load()
        engine.create(_form(), today=today)
        engine.create(_form(name=""), today=today)   # rejet local : pas journalisé
        engine.delete("a", confirm=lambda device: False)
        assert events == [("LOAD", "committed"), ("CREATE", "committed")]

    def test_journal_error_does_not_fail_the_sync(self, store, today):
        def broken_journal(kind, payload):
            raise sqlite3.OperationalError("database is locked")

        engine = SyncEngine(store, journal=broken_journal)
        assert engine.load().ok
        m = engine.create(_form(), today=today)
        assert m.ok
        assert engine.devices[0].id == m.device.id

    def test_no_retry_after_failure(self, sample_devices, today):
        store = FakeStore(sample_devices, fail_on={"create"})
        engine = SyncEngine(store)
        engine.create(_form(), today=today)
        assert [c[0] for c in store.calls] == ["create"]


class TestDeviceState:
    """Tests for the local collection."""

    def test_writes_replace_the_list(self):
        state = DeviceState()
        snapshot = state.devices
        state.prepend(make_device("x"))
        assert snapshot == []
        assert state.version == 1

    def test_replace_missing_prepends(self):
        state = DeviceState([make_device("a")])
        state.replace(make_device("b"))
        assert [d.id for d in state.devices] == ["b", "a"]

    def test_remove(self):
        state = DeviceState([make_device("a"), make_device("b")])
        state.remove("a")
        assert [d.id for d in state.devices] == ["b"]


class TestFormState:
    def test_fill_and_reset(self):
        form = FormState()
        form.fill(make_device("a", "Kindle", 999.0, category="drone"))
        assert form.as_raw()["price"] == "999"
        assert form.category == "other"
        form.reset()
        assert form == FormState()
