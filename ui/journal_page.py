"""
Journal page widget for the Eunoia application.
Lists saved reflections and opens a dialog to write a new one.
"""

from typing import List, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QListWidget, QListWidgetItem, QDialog, QFormLayout, QComboBox,
    QTextEdit, QDialogButtonBox, QButtonGroup
)
from PySide6.QtCore import Slot
from PySide6.QtGui import QFont

from core.models import MOODS, JournalEntry, Theme
from core.journal_store import JournalStore
from core.themes import get_theme


class NewEntryDialog(QDialog):
    """Dialog for writing a journal entry."""

    def __init__(
        self,
        themes: List[Theme],
        current_theme: Theme,
        duration_seconds: int,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)
        self.setWindowTitle("New Entry")
        self.setMinimumWidth(400)
        self._duration_seconds = duration_seconds

        layout = QFormLayout(self)

        # Mood picker
        mood_layout = QHBoxLayout()
        self.mood_group = QButtonGroup(self)
        for index, mood in enumerate(MOODS):
            button = QPushButton(mood)
            button.setCheckable(True)
            button.setChecked(index == 0)
            self.mood_group.addButton(button, index)
            mood_layout.addWidget(button)
        layout.addRow("How do you feel?", mood_layout)

        self.notes_edit = QTextEdit()
        self.notes_edit.setMinimumHeight(100)
        layout.addRow("Reflection", self.notes_edit)

        self.theme_combo = QComboBox()
        for theme in themes:
            self.theme_combo.addItem(theme.name, theme.id)
        self.theme_combo.setCurrentIndex(max(0, self.theme_combo.findData(current_theme.id)))
        layout.addRow("Theme", self.theme_combo)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addRow(buttons)

    def build_entry(self) -> JournalEntry:
        return JournalEntry.create(
            mood=MOODS[max(0, self.mood_group.checkedId())],
            notes=self.notes_edit.toPlainText(),
            theme=self.theme_combo.currentData(),
            duration_seconds=self._duration_seconds,
        )


class JournalPage(QWidget):
    """
    Journal page listing entries newest first.
    """

    def __init__(
        self,
        journal: JournalStore,
        themes: List[Theme],
        current_session=None,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)

        self.journal = journal
        self.themes = themes
        # Callable returning (current theme, selected duration) for new entries
        self._current_session = current_session

        self._setup_ui()
        self.journal.entry_added.connect(self._on_entry_added)
        self.refresh()

    def _setup_ui(self):
        """Set up the UI components."""
        layout = QVBoxLayout(self)
        layout.setSpacing(15)
        layout.setContentsMargins(30, 20, 30, 20)

        header_layout = QHBoxLayout()
        header = QLabel("Meditation Journal")
        header_font = QFont()
        header_font.setPointSize(18)
        header_font.setBold(True)
        header.setFont(header_font)
        header_layout.addWidget(header)
        header_layout.addStretch()

        self.new_btn = QPushButton("✎ New Entry")
        self.new_btn.clicked.connect(self._on_new_clicked)
        header_layout.addWidget(self.new_btn)
        layout.addLayout(header_layout)

        self.entry_list = QListWidget()
        self.entry_list.setWordWrap(True)
        layout.addWidget(self.entry_list)

    def refresh(self):
        self.entry_list.clear()
        for entry in self.journal.entries:
            self.entry_list.addItem(self._make_item(entry))

    def _make_item(self, entry: JournalEntry) -> QListWidgetItem:
        theme = get_theme(entry.theme)
        theme_name = theme.name if theme else entry.theme
        notes = entry.notes if len(entry.notes) <= 200 else entry.notes[:200] + "…"
        text = (
            f"{entry.date.strftime('%B %d, %Y')}    {entry.mood}\n"
            f"{notes}\n"
            f"🍃 {theme_name}    {entry.duration_minutes} min"
        )
        return QListWidgetItem(text)

    @Slot()
    def _on_new_clicked(self):
        theme, duration = self._current_session() if self._current_session else (self.themes[0], 600)
        dialog = NewEntryDialog(self.themes, theme, duration, self)
        if dialog.exec():
            self.journal.add_entry(dialog.build_entry())

    @Slot(JournalEntry)
    def _on_entry_added(self, entry: JournalEntry):
        self.entry_list.insertItem(0, self._make_item(entry))
