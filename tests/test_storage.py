"""Tests for the SQLite event journal."""

import json

import pytest

from app.engine import SyncEngine
from storage.db import connect, get_db_path, init_db
from storage.repo import get_events, journal_for, log_event

from conftest import FakeStore


@pytest.fixture
def conn(tmp_path):
    c = connect(tmp_path / "journal.db")
    init_db(c)
    yield c
    c.close()


class TestJournal:
    def test_db_path_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ASSET_TRACKER_DB", str(tmp_path / "x.db"))
        assert get_db_path() == tmp_path / "x.db"

    def test_init_is_idempotent(self, conn):
        init_db(conn)
        assert get_events(conn).empty

    def test_log_and_read_back_newest_first(self, conn):
        log_event(conn, "CREATE", {"device_id": "a"})
        log_event(conn, "DELETE", {"device_id": "a"})
        df = get_events(conn)
        assert list(df["event_type"]) == ["DELETE", "CREATE"]
        assert json.loads(df["payload"].iloc[1]) == {"device_id": "a"}

    def test_filter_and_limit(self, conn):
        for _ in range(3):
            log_event(conn, "LOAD")
        log_event(conn, "CREATE", {})
        assert len(get_events(conn, limit=2)) == 2
        assert list(get_events(conn, event_type="CREATE")["event_type"]) == ["CREATE"]

    def test_engine_writes_through_journal(self, conn, sample_devices):
        engine = SyncEngine(FakeStore(sample_devices, fail_on={"delete"}), journal=journal_for(conn))
        engine.load()
        engine.delete("a", confirm=lambda device: True)
        df = get_events(conn)
        assert list(df["event_type"]) == ["DELETE", "LOAD"]
        failed = json.loads(df["payload"].iloc[0])
        assert failed["status"] == "failed"
        assert "réseau" in failed["error"]
