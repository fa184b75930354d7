"""
Progress page widget for the Eunoia application.
Weekly chart, lifetime minutes, achievements and the calendar heatmap.
"""

from datetime import date
from typing import List, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel,
    QPushButton, QGroupBox, QProgressBar, QScrollArea
)
from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QFont

from core.calendar_grid import month_grid, month_title, shift_month
from core.models import DAY_ABBREVIATIONS, ProgressSnapshot
from core.progress_store import ProgressStore


class ProgressPage(QWidget):
    """
    Statistics page. Read-only view of the ProgressStore.
    """

    def __init__(self, progress: ProgressStore, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.progress = progress
        today = date.today()
        self._year, self._month = today.year, today.month
        self._day_bars: List[QProgressBar] = []
        self._calendar_cells: List[QLabel] = []

        self._setup_ui()
        self.progress.progress_changed.connect(self._on_progress_changed)
        self.refresh()

    def _setup_ui(self):
        """Set up the UI components."""
        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        outer.addWidget(scroll)

        content = QWidget()
        layout = QVBoxLayout(content)
        layout.setSpacing(20)
        layout.setContentsMargins(30, 20, 30, 20)
        scroll.setWidget(content)

        # Weekly progress
        week_box = QGroupBox("Weekly Progress")
        week_layout = QHBoxLayout(week_box)
        for day in DAY_ABBREVIATIONS:
            column = QVBoxLayout()
            bar = QProgressBar()
            bar.setOrientation(Qt.Orientation.Vertical)
            bar.setTextVisible(False)
            bar.setFixedWidth(30)
            bar.setMinimumHeight(100)
            column.addWidget(bar, alignment=Qt.AlignmentFlag.AlignHCenter)
            label = QLabel(day)
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            label.setStyleSheet("color: #a0a0a0; font-size: 11px;")
            column.addWidget(label)
            week_layout.addLayout(column)
            self._day_bars.append(bar)
        layout.addWidget(week_box)

        # Total time
        total_box = QGroupBox("Total Minutes")
        total_layout = QVBoxLayout(total_box)
        self.total_label = QLabel("0")
        self.total_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        total_font = QFont()
        total_font.setPointSize(36)
        total_font.setBold(True)
        self.total_label.setFont(total_font)
        total_layout.addWidget(self.total_label)
        layout.addWidget(total_box)

        # Achievements
        achievements_box = QGroupBox("Achievements")
        self.achievements_layout = QGridLayout(achievements_box)
        layout.addWidget(achievements_box)

        # Calendar
        calendar_box = QGroupBox("Calendar")
        calendar_layout = QVBoxLayout(calendar_box)

        nav_layout = QHBoxLayout()
        self.prev_btn = QPushButton("‹")
        self.prev_btn.clicked.connect(lambda: self._change_month(-1))
        nav_layout.addWidget(self.prev_btn)
        self.month_label = QLabel("")
        self.month_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.month_label.setStyleSheet("font-weight: bold;")
        nav_layout.addWidget(self.month_label, stretch=1)
        self.next_btn = QPushButton("›")
        self.next_btn.clicked.connect(lambda: self._change_month(1))
        nav_layout.addWidget(self.next_btn)
        calendar_layout.addLayout(nav_layout)

        grid = QGridLayout()
        for col, day in enumerate(DAY_ABBREVIATIONS):
            header = QLabel(day)
            header.setAlignment(Qt.AlignmentFlag.AlignCenter)
            header.setStyleSheet("color: #a0a0a0; font-size: 11px;")
            grid.addWidget(header, 0, col)
        for index in range(42):
            cell = QLabel("")
            cell.setAlignment(Qt.AlignmentFlag.AlignCenter)
            cell.setFixedSize(36, 36)
            grid.addWidget(cell, 1 + index // 7, index % 7)
            self._calendar_cells.append(cell)
        calendar_layout.addLayout(grid)
        layout.addWidget(calendar_box)

        layout.addStretch()

    def refresh(self):
        """Re-render from the current snapshot."""
        self._on_progress_changed(self.progress.snapshot)

    def _change_month(self, delta: int):
        self._year, self._month = shift_month(self._year, self._month, delta)
        self._render_calendar(self.progress.snapshot)

    @Slot(ProgressSnapshot)
    def _on_progress_changed(self, snapshot: ProgressSnapshot):
        peak = max(max(snapshot.weekly_minutes), 30)
        for bar, minutes in zip(self._day_bars, snapshot.weekly_minutes):
            bar.setRange(0, peak)
            bar.setValue(minutes)
            bar.setToolTip(f"{minutes} min")

        self.total_label.setText(str(snapshot.total_minutes))
        self._render_achievements(snapshot)
        self._render_calendar(snapshot)

    def _render_achievements(self, snapshot: ProgressSnapshot):
        while self.achievements_layout.count():
            item = self.achievements_layout.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()

        for index, achievement in enumerate(snapshot.achievements):
            card = QLabel(f"<b>{achievement.title}</b><br><small>{achievement.description}</small>")
            card.setAlignment(Qt.AlignmentFlag.AlignCenter)
            card.setWordWrap(True)
            color = "#42A5F5" if achievement.is_unlocked else "#606060"
            card.setStyleSheet(
                f"border: 1px solid {color}; border-radius: 8px; padding: 10px; color: {color};"
            )
            self.achievements_layout.addWidget(card, index // 2, index % 2)

    def _render_calendar(self, snapshot: ProgressSnapshot):
        self.month_label.setText(month_title(self._year, self._month))
        for cell, day in zip(self._calendar_cells, month_grid(self._year, self._month)):
            if day is None:
                cell.setText("")
                cell.setStyleSheet("")
            elif day in snapshot.completed_dates:
                cell.setText(str(day.day))
                cell.setStyleSheet("background-color: #2196F3; color: white; border-radius: 18px;")
            else:
                cell.setText(str(day.day))
                cell.setStyleSheet("color: #e0e0e0;")
