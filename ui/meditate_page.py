"""
Meditate page widget for the Eunoia application.
Theme carousel, play button, countdown, intensity slider and the
benefits of the current theme.
"""

import math
from typing import Dict, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QComboBox, QSlider, QGroupBox, QSizePolicy
)
from PySide6.QtCore import Qt, QPointF, QTimer, Slot
from PySide6.QtGui import QBrush, QColor, QFont, QLinearGradient, QPainter, QPainterPath

from core.models import DURATION_PRESETS, ProgressSnapshot, SessionState, Theme
from core.progress_store import ProgressStore
from core.session_controller import SessionController

from core.effects import flowing_wave_points, generate_particles


class FlowingCanvas(QWidget):
    """Gradient wave with drifting particles, denser at higher intensity."""

    FRAME_INTERVAL_MS = 50
    # One full phase turn every 10 seconds
    PHASE_STEP = 2 * math.pi * FRAME_INTERVAL_MS / 10000

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setMinimumHeight(220)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

        self._phase = 0.0
        self._intensity = 0.5
        self._colors = (QColor("#2196F3"), QColor("#9C27B0"))

        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(self.FRAME_INTERVAL_MS)
        self._frame_timer.timeout.connect(self._advance)
        self._frame_timer.start()

    def set_theme(self, theme: Theme):
        self._colors = (QColor(theme.primary_color), QColor(theme.secondary_color))
        self.update()

    def set_intensity(self, intensity: float):
        self._intensity = intensity
        self.update()

    @Slot()
    def _advance(self):
        self._phase = (self._phase + self.PHASE_STEP) % (2 * math.pi)
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        width, height = self.width(), self.height()

        path = QPainterPath()
        path.moveTo(0, height / 2)
        for x, y in flowing_wave_points(width, height, self._phase):
            path.lineTo(x, y)
        path.lineTo(width, height)
        path.lineTo(0, height)
        path.closeSubpath()

        alpha = int(255 * (0.3 + self._intensity * 0.4))
        gradient = QLinearGradient(QPointF(0, 0), QPointF(width, height))
        for stop, color in ((0.0, self._colors[0]), (1.0, self._colors[1])):
            color = QColor(color)
            color.setAlpha(alpha)
            gradient.setColorAt(stop, color)
        painter.fillPath(path, QBrush(gradient))

        painter.setPen(Qt.PenStyle.NoPen)
        for x, y, opacity in generate_particles(self._intensity, width, height):
            painter.setOpacity(opacity)
            painter.setBrush(QColor("white"))
            painter.drawEllipse(QPointF(x, y), 2, 2)
        painter.end()


class MeditatePage(QWidget):
    """
    Main meditation page.
    Reads SessionController state and sends commands back to it.
    """

    def __init__(
        self,
        controller: SessionController,
        progress: ProgressStore,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)

        self.controller = controller
        self.progress = progress
        self._theme_buttons: Dict[str, QPushButton] = {}

        self._setup_ui()
        self._connect_signals()
        self._on_state_changed(self.controller.state)
        self._on_progress_changed(self.progress.snapshot)

    def _setup_ui(self):
        """Set up the UI components."""
        layout = QVBoxLayout(self)
        layout.setSpacing(16)
        layout.setContentsMargins(30, 20, 30, 20)

        # Daily streak banner
        self.streak_label = QLabel("🔥 0 Day Streak")
        self.streak_label.setStyleSheet(
            "background-color: rgba(255, 152, 0, 0.1); color: #FFA726;"
            "font-size: 16px; font-weight: bold; padding: 10px; border-radius: 8px;"
        )
        layout.addWidget(self.streak_label)

        # Theme carousel
        theme_layout = QHBoxLayout()
        theme_layout.setSpacing(20)
        for theme in self.controller.themes:
            button = QPushButton(theme.name)
            button.setCheckable(True)
            button.setMinimumSize(100, 60)
            button.setToolTip(theme.description)
            button.setStyleSheet(f"""
                QPushButton {{
                    background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                        stop:0 {theme.primary_color}, stop:1 {theme.secondary_color});
                    color: white;
                    border-radius: 10px;
                    font-size: 14px;
                }}
                QPushButton:checked {{
                    border: 3px solid white;
                }}
            """)
            button.clicked.connect(lambda checked=False, t=theme: self.controller.select_theme(t))
            self._theme_buttons[theme.id] = button
            theme_layout.addWidget(button)
        theme_layout.addStretch()
        layout.addLayout(theme_layout)

        # Flowing canvas with countdown and play button on top
        self.canvas = FlowingCanvas()
        canvas_layout = QVBoxLayout(self.canvas)
        canvas_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.time_label = QLabel("")
        self.time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        time_font = QFont()
        time_font.setPointSize(40)
        self.time_label.setFont(time_font)
        self.time_label.setStyleSheet("color: white; background: transparent;")
        canvas_layout.addWidget(self.time_label)

        self.play_btn = QPushButton("▶")
        self.play_btn.setFixedSize(80, 80)
        self.play_btn.setStyleSheet("""
            QPushButton {
                background-color: rgba(255, 255, 255, 0.2);
                color: white;
                border: 2px solid white;
                border-radius: 40px;
                font-size: 30px;
            }
        """)
        canvas_layout.addWidget(self.play_btn, alignment=Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.canvas, stretch=1)

        # Control panel
        control_box = QGroupBox("Sound Intensity")
        control_layout = QHBoxLayout(control_box)
        control_layout.addWidget(QLabel("🔈"))
        self.intensity_slider = QSlider(Qt.Orientation.Horizontal)
        self.intensity_slider.setRange(0, 100)
        control_layout.addWidget(self.intensity_slider)
        control_layout.addWidget(QLabel("🔊"))

        control_layout.addSpacing(20)
        control_layout.addWidget(QLabel("Timer:"))
        self.duration_combo = QComboBox()
        for preset in DURATION_PRESETS:
            self.duration_combo.addItem(str(preset), preset.seconds)
        control_layout.addWidget(self.duration_combo)
        layout.addWidget(control_box)

        # Benefits card
        self.benefits_box = QGroupBox("Benefits")
        self.benefits_layout = QVBoxLayout(self.benefits_box)
        layout.addWidget(self.benefits_box)

    def _connect_signals(self):
        """Connect widget signals to slots."""
        self.controller.state_changed.connect(self._on_state_changed)
        self.progress.progress_changed.connect(self._on_progress_changed)

        self.play_btn.clicked.connect(self.controller.toggle_playback)
        # Commit on release, like a slider that reports once editing ends
        self.intensity_slider.valueChanged.connect(self._on_slider_moved)
        self.intensity_slider.sliderReleased.connect(self._on_slider_released)
        self.duration_combo.currentIndexChanged.connect(self._on_duration_changed)

    @Slot(int)
    def _on_slider_moved(self, value: int):
        self.canvas.set_intensity(value / 100)
        if not self.intensity_slider.isSliderDown():
            self.controller.update_intensity(value / 100)

    @Slot()
    def _on_slider_released(self):
        self.controller.update_intensity(self.intensity_slider.value() / 100)

    @Slot(int)
    def _on_duration_changed(self, index: int):
        seconds = self.duration_combo.itemData(index)
        if seconds is not None and seconds != self.controller.state.selected_duration:
            self.controller.select_duration(seconds)

    @Slot(SessionState)
    def _on_state_changed(self, state: SessionState):
        """Render the session state."""
        for theme_id, button in self._theme_buttons.items():
            button.setChecked(theme_id == state.current_theme.id)
        self.canvas.set_theme(state.current_theme)
        self.canvas.set_intensity(state.intensity)

        self.play_btn.setText("⏸" if state.is_playing else "▶")
        self.time_label.setText(state.format_remaining() if state.is_playing else "")

        if not self.intensity_slider.isSliderDown():
            self.intensity_slider.blockSignals(True)
            self.intensity_slider.setValue(round(state.intensity * 100))
            self.intensity_slider.blockSignals(False)

        index = self.duration_combo.findData(state.selected_duration)
        if index >= 0 and index != self.duration_combo.currentIndex():
            self.duration_combo.blockSignals(True)
            self.duration_combo.setCurrentIndex(index)
            self.duration_combo.blockSignals(False)

        self._show_benefits(state.current_theme)

    def _show_benefits(self, theme: Theme):
        while self.benefits_layout.count():
            item = self.benefits_layout.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()
        for benefit in theme.benefits:
            label = QLabel(f"✔ {benefit}")
            label.setStyleSheet(f"color: {theme.primary_color}; font-size: 14px;")
            self.benefits_layout.addWidget(label)

    @Slot(ProgressSnapshot)
    def _on_progress_changed(self, snapshot: ProgressSnapshot):
        self.streak_label.setText(f"🔥 {snapshot.streak_days} Day Streak")
