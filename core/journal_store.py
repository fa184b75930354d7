"""
Meditation journal for the Eunoia application.
"""

import logging
from dataclasses import fields
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from .errors import PersistenceUnavailable
from .models import JournalEntry
from .storage import Storage

logger = logging.getLogger(__name__)


class JournalStore(QObject):
    """
    Ordered journal entries, newest first.

    Signals:
        entry_added: Emitted with each saved entry
    """

    entry_added = Signal(JournalEntry)

    def __init__(self, storage: Optional[Storage] = None, parent: Optional[QObject] = None):
        super().__init__(parent)

        self.storage = storage
        self._entries: List[JournalEntry] = self._load()

    def _load(self) -> List[JournalEntry]:
        if self.storage is None:
            return []
        try:
            return self.storage.get_journal_entries()
        except PersistenceUnavailable as e:
            logger.warning("Could not load journal, starting empty: %s", e)
            return []

    @property
    def entries(self) -> List[JournalEntry]:
        """Entries, most recent first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add_entry(self, entry: JournalEntry):
        """Put ``entry`` at the top of the journal and save it."""
        for f in fields(JournalEntry):
            if getattr(entry, f.name) is None:
                raise ValueError(f"Journal entry field '{f.name}' is required")

        self._entries.insert(0, entry)

        if self.storage is not None:
            try:
                self.storage.add_journal_entry(entry)
            except PersistenceUnavailable as e:
                logger.warning("Could not save journal entry, keeping it in memory: %s", e)

        self.entry_added.emit(entry)
