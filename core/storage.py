"""
SQLite storage module for the Eunoia application.
A small key-value table holds the progress snapshot and settings;
journal entries get their own table.
"""

import json
import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import fields
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from .errors import PersistenceUnavailable
from .models import AppSettings, JournalEntry, ProgressSnapshot

logger = logging.getLogger(__name__)

PROGRESS_KEY = 'progress'
STREAK_KEY = 'meditationStreak'


def get_app_data_dir() -> Path:
    """
    Get the appropriate application data directory based on OS.
    Creates the directory if it doesn't exist.
    """
    override = os.environ.get('EUNOIA_DATA_DIR')
    if override:
        app_dir = Path(override)
        app_dir.mkdir(parents=True, exist_ok=True)
        return app_dir

    if os.name == 'nt':  # Windows
        base = Path(os.environ.get('APPDATA', Path.home()))
    elif os.name == 'posix':
        # macOS uses ~/Library/Application Support, Linux uses ~/.local/share
        if os.uname().sysname == 'Darwin':
            base = Path.home() / 'Library' / 'Application Support'
        else:
            base = Path(os.environ.get('XDG_DATA_HOME', Path.home() / '.local' / 'share'))
    else:
        base = Path.home()

    app_dir = base / 'Eunoia'
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


class Storage:
    """
    Database storage manager.
    Every public method raises PersistenceUnavailable on database errors;
    callers decide how to degrade.
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize storage with database path.

        Args:
            db_path: Optional custom path for database file.
                    If None, uses default app data directory.
        """
        if db_path is None:
            db_path = str(get_app_data_dir() / 'eunoia.db')

        self.db_path = db_path
        self._init_database()

    @contextmanager
    def _get_connection(self):
        """Context manager for database connections, one transaction each."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise PersistenceUnavailable(f"Cannot open {self.db_path}: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise PersistenceUnavailable(str(e)) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_database(self):
        """Initialize database schema if tables don't exist."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            ''')

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS journal_entries (
                    id TEXT PRIMARY KEY,
                    entry_ts TEXT NOT NULL,
                    mood TEXT NOT NULL,
                    notes TEXT NOT NULL,
                    theme TEXT NOT NULL,
                    duration_sec INTEGER NOT NULL,
                    seq INTEGER NOT NULL
                )
            ''')

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            ''')

            cursor.execute('''
                CREATE INDEX IF NOT EXISTS idx_journal_seq
                ON journal_entries(seq)
            ''')

    # ==================== Key-value ====================

    def get(self, key: str, default: Any = None) -> Any:
        """Get a JSON value by key, or ``default`` when absent."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT value FROM kv_store WHERE key = ?', (key,))
            row = cursor.fetchone()
        if row is None:
            return default
        try:
            return json.loads(row['value'])
        except ValueError as e:
            raise PersistenceUnavailable(f"Corrupt value for {key}: {e}") from e

    def set(self, key: str, value: Any):
        """Store a JSON-serialisable value under ``key``."""
        with self._get_connection() as conn:
            self._put(conn, key, value)

    def _put(self, conn: sqlite3.Connection, key: str, value: Any):
        conn.execute(
            'INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)',
            (key, json.dumps(value))
        )

    # ==================== Progress ====================

    def load_progress(self) -> Optional[ProgressSnapshot]:
        """
        Load the saved progress snapshot.

        Returns:
            The snapshot, or None if nothing has been saved yet. A saved
            streak counter without a snapshot still yields a snapshot.
        """
        data = self.get(PROGRESS_KEY)
        streak = self.get(STREAK_KEY)
        if data is None and streak is None:
            return None

        try:
            snapshot = ProgressSnapshot.from_dict(data or {})
            if data is None:
                snapshot.streak_days = max(0, int(streak))
        except (TypeError, ValueError, KeyError, AttributeError) as e:
            raise PersistenceUnavailable(f"Corrupt progress record: {e}") from e
        return snapshot

    def save_progress(self, snapshot: ProgressSnapshot):
        """Write the snapshot and the streak counter in one transaction."""
        with self._get_connection() as conn:
            self._put(conn, PROGRESS_KEY, snapshot.to_dict())
            self._put(conn, STREAK_KEY, snapshot.streak_days)

    # ==================== Journal ====================

    def add_journal_entry(self, entry: JournalEntry):
        """Append a journal entry."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT COALESCE(MAX(seq), 0) + 1 FROM journal_entries')
            seq = cursor.fetchone()[0]
            cursor.execute('''
                INSERT INTO journal_entries
                (id, entry_ts, mood, notes, theme, duration_sec, seq)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            ''', (
                entry.id,
                entry.date.isoformat(),
                entry.mood,
                entry.notes,
                entry.theme,
                entry.duration_seconds,
                seq
            ))

    def get_journal_entries(self) -> List[JournalEntry]:
        """Get all journal entries, newest first."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT * FROM journal_entries ORDER BY seq DESC')
            rows = cursor.fetchall()
        try:
            return [self._row_to_entry(row) for row in rows]
        except (TypeError, ValueError) as e:
            raise PersistenceUnavailable(f"Corrupt journal entry: {e}") from e

    def _row_to_entry(self, row: sqlite3.Row) -> JournalEntry:
        """Convert a database row to a JournalEntry object."""
        return JournalEntry(
            id=row['id'],
            date=datetime.fromisoformat(row['entry_ts']),
            mood=row['mood'],
            notes=row['notes'],
            theme=row['theme'],
            duration_seconds=row['duration_sec']
        )

    # ==================== Settings ====================

    def get_settings(self) -> AppSettings:
        """Get application settings."""
        settings = AppSettings()
        types = {f.name: type(getattr(settings, f.name)) for f in fields(AppSettings)}
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT key, value FROM settings')
            rows = cursor.fetchall()

        for row in rows:
            key, value = row['key'], row['value']
            if key not in types:
                continue
            # Convert string to the type of the field's default
            try:
                if types[key] is bool:
                    setattr(settings, key, value.lower() == 'true')
                else:
                    setattr(settings, key, types[key](value))
            except ValueError:
                logger.warning("Ignoring bad setting %s=%r", key, value)
        return settings

    def save_settings(self, settings: AppSettings):
        """Save application settings."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            for f in fields(AppSettings):
                cursor.execute('''
                    INSERT OR REPLACE INTO settings (key, value)
                    VALUES (?, ?)
                ''', (f.name, str(getattr(settings, f.name))))
