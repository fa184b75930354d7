# tests/test_storage.py
import sqlite3
from datetime import date

import pytest

from core.errors import PersistenceUnavailable
from core.models import AppSettings, ProgressSnapshot
from core.storage import Storage


def test_init_creates_tables(tmp_db):
    Storage(tmp_db)
    conn = sqlite3.connect(tmp_db)
    tables = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    conn.close()
    assert {"kv_store", "journal_entries", "settings"} <= tables


def test_get_missing_key_returns_default(storage):
    assert storage.get("nothing") is None
    assert storage.get("nothing", 0) == 0


def test_set_then_get(storage):
    storage.set("meditationStreak", 3)
    storage.set("meditationStreak", 4)
    assert storage.get("meditationStreak") == 4


def test_no_progress_saved_yet(storage):
    assert storage.load_progress() is None


def test_save_progress_writes_snapshot_and_streak(storage):
    snapshot = ProgressSnapshot(total_minutes=30, streak_days=2)
    snapshot.completed_dates.add(date(2025, 3, 12))
    storage.save_progress(snapshot)

    loaded = storage.load_progress()
    assert loaded.total_minutes == 30
    assert loaded.completed_dates == {date(2025, 3, 12)}
    assert storage.get("meditationStreak") == 2


def test_corrupt_progress_raises_persistence_error(storage, tmp_db):
    conn = sqlite3.connect(tmp_db)
    conn.execute("INSERT INTO kv_store (key, value) VALUES ('progress', '{not json')")
    conn.commit()
    conn.close()
    with pytest.raises(PersistenceUnavailable):
        storage.load_progress()


def test_unopenable_database_raises(tmp_path):
    with pytest.raises(PersistenceUnavailable):
        Storage(str(tmp_path / "missing_dir" / "db.sqlite"))


def test_settings_round_trip_keeps_types(storage):
    settings = AppSettings(
        sound_enabled=False,
        haptics_enabled=True,
        default_duration_seconds=1200,
        default_intensity=0.75,
        sounds_dir="/tmp/sounds",
    )
    storage.save_settings(settings)
    assert storage.get_settings() == settings


def test_settings_defaults_when_empty(storage):
    assert storage.get_settings() == AppSettings()


def test_bad_setting_value_ignored(storage, tmp_db):
    conn = sqlite3.connect(tmp_db)
    conn.execute("INSERT INTO settings (key, value) VALUES ('default_intensity', 'loud')")
    conn.commit()
    conn.close()
    assert storage.get_settings().default_intensity == 0.5


def test_bad_streak_value_raises_persistence_error(storage):
    storage.set("meditationStreak", [1])
    with pytest.raises(PersistenceUnavailable):
        storage.load_progress()


def test_bad_journal_timestamp_raises_persistence_error(storage, tmp_db):
    conn = sqlite3.connect(tmp_db)
    conn.execute(
        "INSERT INTO journal_entries (id, entry_ts, mood, notes, theme, duration_sec, seq) "
        "VALUES ('abc', 'not-a-date', '😌', 'calm', 'harmony', 600, 1)"
    )
    conn.commit()
    conn.close()
    with pytest.raises(PersistenceUnavailable):
        storage.get_journal_entries()
