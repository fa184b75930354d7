"""
Main window for the Eunoia application.
Builds the stores and controller, and hosts the three tabs.
"""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QWidget, QVBoxLayout, QTabWidget
from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QIcon, QCloseEvent, QPixmap, QPainter, QColor

from core.audio import QtAudioBackend, SilentAudioBackend
from core.errors import PersistenceUnavailable
from core.haptics import HapticFeedback
from core.journal_store import JournalStore
from core.models import AppSettings
from core.progress_store import ProgressStore
from core.session_controller import SessionController
from core.storage import Storage
from core.themes import THEME_CATALOG

from .journal_page import JournalPage
from .meditate_page import MeditatePage
from .progress_page import ProgressPage

logger = logging.getLogger(__name__)


def create_app_icon() -> QIcon:
    """Create a simple app icon programmatically."""
    icon = QIcon()

    for size in [16, 32, 48, 64]:
        pixmap = QPixmap(size, size)
        pixmap.fill(Qt.GlobalColor.transparent)

        painter = QPainter(pixmap)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setPen(Qt.PenStyle.NoPen)

        # Two overlapping circles in the first theme's colors
        margin = size // 8
        painter.setBrush(QColor("#2196F3"))
        painter.drawEllipse(margin, margin, size - 3 * margin, size - 3 * margin)
        painter.setBrush(QColor(156, 39, 176, 180))
        painter.drawEllipse(2 * margin, 2 * margin, size - 3 * margin, size - 3 * margin)

        painter.end()
        icon.addPixmap(pixmap)

    return icon


class MainWindow(QMainWindow):
    """
    Main application window with Meditate / Progress / Journal tabs.
    """

    def __init__(self, storage: Optional[Storage] = None):
        super().__init__()

        self.storage = storage if storage is not None else self._open_storage()
        self.settings = self._load_settings()

        self.progress = ProgressStore(self.storage, parent=self)
        self.journal = JournalStore(self.storage, parent=self)
        self.controller = SessionController(
            audio=self._create_audio(),
            haptics=HapticFeedback(enabled=self.settings.haptics_enabled),
            progress=self.progress,
            intensity=self.settings.default_intensity,
            duration_seconds=self.settings.default_duration_seconds,
            storage=self.storage,
            parent=self
        )

        self.setWindowTitle("Eunoia")
        self.setMinimumSize(700, 650)
        self.resize(820, 760)
        self.setWindowIcon(create_app_icon())

        self._setup_ui()

    def _open_storage(self) -> Optional[Storage]:
        try:
            return Storage()
        except PersistenceUnavailable as e:
            logger.warning("Storage unavailable, progress will not be saved: %s", e)
            return None

    def _load_settings(self) -> AppSettings:
        if self.storage is None:
            return AppSettings()
        try:
            return self.storage.get_settings()
        except PersistenceUnavailable as e:
            logger.warning("Could not read settings, using defaults: %s", e)
            return AppSettings()

    def _create_audio(self):
        if not self.settings.sound_enabled:
            return SilentAudioBackend()
        sounds_dir = Path(self.settings.sounds_dir) if self.settings.sounds_dir else None
        return QtAudioBackend(sounds_dir, parent=self)

    def _setup_ui(self):
        """Set up the main UI."""
        central = QWidget()
        self.setCentralWidget(central)

        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)

        self.tabs = QTabWidget()
        self.tabs.setDocumentMode(True)

        self.meditate_page = MeditatePage(self.controller, self.progress)
        self.progress_page = ProgressPage(self.progress)
        self.journal_page = JournalPage(self.journal, THEME_CATALOG, self._current_session)

        self.tabs.addTab(self.meditate_page, "✨ Meditate")
        self.tabs.addTab(self.progress_page, "📈 Progress")
        self.tabs.addTab(self.journal_page, "📖 Journal")
        self.tabs.currentChanged.connect(self._on_tab_changed)

        layout.addWidget(self.tabs)

    def _current_session(self):
        state = self.controller.state
        return state.current_theme, state.selected_duration

    @Slot(int)
    def _on_tab_changed(self, index: int):
        """Handle tab change."""
        if self.tabs.widget(index) == self.progress_page:
            self.progress_page.refresh()

    def closeEvent(self, event: QCloseEvent):
        """Stop the countdown and sound before the window goes away."""
        self.controller.cleanup()
        event.accept()
