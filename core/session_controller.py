"""
Session controller for the Eunoia application.
Owns playback state, the selected theme, intensity and session length,
and keeps the audio player, haptics and countdown in step with them.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Callable, List, Optional

from PySide6.QtCore import QObject, Signal, Slot

from .audio import AudioBackend
from .errors import AssetMissing, PersistenceUnavailable
from .haptics import HapticFeedback
from .models import DURATION_PRESETS, DEFAULT_DURATION_SECONDS, SessionState, Theme
from .progress_store import ProgressStore
from .storage import Storage
from .themes import DEFAULT_THEME, THEME_CATALOG
from .timer_engine import CountdownTimer

logger = logging.getLogger(__name__)


class SessionController(QObject):
    """
    Meditation session state machine.

    Commands never raise because of audio or haptics trouble: a missing
    sound leaves the session silent, missing haptics are skipped.

    Signals:
        state_changed: Emitted with a copy of SessionState after every change
        session_completed: Emitted with the theme when a countdown runs out
    """

    state_changed = Signal(SessionState)
    session_completed = Signal(Theme)

    def __init__(
        self,
        audio: AudioBackend,
        haptics: Optional[HapticFeedback] = None,
        timer: Optional[CountdownTimer] = None,
        progress: Optional[ProgressStore] = None,
        themes: Optional[List[Theme]] = None,
        intensity: float = 0.5,
        duration_seconds: int = DEFAULT_DURATION_SECONDS,
        today: Callable[[], date] = date.today,
        storage: Optional[Storage] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)

        self.themes = list(themes or THEME_CATALOG)
        self.audio = audio
        self.haptics = haptics or HapticFeedback()
        self.timer = timer or CountdownTimer(self)
        self.progress = progress
        self.storage = storage
        self._today = today

        default_theme = DEFAULT_THEME if DEFAULT_THEME in self.themes else self.themes[0]
        if duration_seconds not in self.duration_choices():
            duration_seconds = DEFAULT_DURATION_SECONDS
        self._state = SessionState(
            current_theme=default_theme,
            intensity=self._clamp(intensity),
            selected_duration=duration_seconds,
        )
        self._audio_handle: Any = None

        self.timer.tick.connect(self._on_timer_tick)
        self.timer.finished.connect(self._on_timer_finished)

        self.haptics.setup()
        self._setup_audio()

    @staticmethod
    def duration_choices() -> List[int]:
        return [preset.seconds for preset in DURATION_PRESETS]

    @staticmethod
    def _clamp(value: float) -> float:
        return min(1.0, max(0.0, float(value)))

    @property
    def state(self) -> SessionState:
        """A copy of the current session state."""
        return replace(self._state)

    @property
    def current_theme(self) -> Theme:
        return self._state.current_theme

    @property
    def is_playing(self) -> bool:
        return self._state.is_playing

    @property
    def intensity(self) -> float:
        return self._state.intensity

    # ==================== Commands ====================

    def select_theme(self, theme: Theme):
        """Switch theme; playback carries on with the new sound if playing."""
        if theme not in self.themes:
            raise ValueError(f"Unknown theme: {theme.id}")

        self._state.current_theme = self.themes[self.themes.index(theme)]
        self._setup_audio()
        if self._state.is_playing:
            self._audio_call('play', looping=True)
        self._emit_state()

    @Slot()
    def toggle_playback(self):
        """Play or pause the session and give a haptic tap."""
        self._state.is_playing = not self._state.is_playing

        if self._state.is_playing:
            self._audio_call('set_volume', self._state.intensity)
            self._audio_call('play', looping=True)
            if self.timer.is_paused:
                self.timer.resume()
            elif not self.timer.is_running:
                self.timer.start(self._state.selected_duration)
                self._state.remaining_seconds = self.timer.remaining_seconds
        else:
            self._audio_call('pause')
            self.timer.pause()

        self.haptics.trigger()
        self._emit_state()

    @Slot(float)
    def update_intensity(self, value: float):
        """Change volume/visual intensity without interrupting playback."""
        self._state.intensity = self._clamp(value)
        self._audio_call('set_volume', self._state.intensity)
        self._save_defaults()
        self._emit_state()

    @Slot(int)
    def select_duration(self, seconds: int):
        """Choose the session length used at the next start."""
        if seconds not in self.duration_choices():
            raise ValueError(f"Unsupported session length: {seconds}s")
        self._state.selected_duration = seconds
        self._save_defaults()
        self._emit_state()

    def stop(self):
        """End the session early; it is not recorded."""
        if self._state.is_playing:
            self._audio_call('pause')
        self._state.is_playing = False
        self.timer.cancel()
        self._state.remaining_seconds = 0
        self._emit_state()

    # ==================== Internals ====================

    def _setup_audio(self):
        """(Re)load the sound for the current theme."""
        if self._audio_handle is not None:
            self._audio_call('release')
            self._audio_handle = None

        asset_id = self._state.current_theme.sound_file_name
        try:
            self._audio_handle = self.audio.load(asset_id)
        except AssetMissing as e:
            logger.warning("Sound file not found: %s", e)
            return
        except Exception as e:
            logger.warning("Failed to initialize audio player for %s: %s", asset_id, e)
            return

        self._audio_call('set_volume', self._state.intensity)

    def _save_defaults(self):
        """Remember intensity and session length for the next launch."""
        if self.storage is None:
            return
        try:
            settings = self.storage.get_settings()
            settings.default_intensity = self._state.intensity
            settings.default_duration_seconds = self._state.selected_duration
            self.storage.save_settings(settings)
        except PersistenceUnavailable as e:
            logger.warning("Could not save session defaults: %s", e)

    def _audio_call(self, method: str, *args, **kwargs):
        """Forward to the audio backend when a sound is loaded."""
        if self._audio_handle is None:
            return
        try:
            getattr(self.audio, method)(self._audio_handle, *args, **kwargs)
        except Exception as e:
            logger.warning("Audio %s failed: %s", method, e)

    @Slot(int)
    def _on_timer_tick(self, remaining: int):
        self._state.remaining_seconds = remaining
        self._emit_state()

    @Slot()
    def _on_timer_finished(self):
        """Countdown ran out: stop playing and record the session."""
        theme = self._state.current_theme
        minutes = self.timer.total_seconds // 60 or self._state.selected_duration // 60

        self._state.remaining_seconds = 0
        if self._state.is_playing:
            self._state.is_playing = False
            self._audio_call('pause')

        if self.progress is not None:
            self.progress.record_session_completion(minutes, self._today(), theme.id)

        self._emit_state()
        self.session_completed.emit(theme)

    def _emit_state(self):
        self.state_changed.emit(self.state)

    def cleanup(self):
        """Stop the countdown and free audio. Call before exit."""
        self.timer.cleanup()
        if self._audio_handle is not None:
            self._audio_call('pause')
            self._audio_call('release')
            self._audio_handle = None
        self._state.is_playing = False
