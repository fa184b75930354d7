"""
Countdown timer for the Eunoia application.
A one-second repeating tick that counts a session down to zero.
"""

import logging
from enum import Enum, auto
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal, Slot

logger = logging.getLogger(__name__)


class CountdownState(Enum):
    """Possible states for the countdown."""
    IDLE = auto()
    RUNNING = auto()
    PAUSED = auto()


class CountdownTimer(QObject):
    """
    Session countdown driven by a single QTimer.

    Only one tick stream exists per instance: ``start`` always stops the
    previous one first. When the remaining time reaches zero the stream
    stops itself and ``finished`` is emitted.

    Signals:
        tick: Emitted after every decrement with the remaining seconds
        finished: Emitted once when the countdown reaches zero
        state_changed: Emitted on state transitions (old_state, new_state)
    """

    tick = Signal(int)
    finished = Signal()
    state_changed = Signal(CountdownState, CountdownState)

    TICK_INTERVAL_MS = 1000

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)

        self._state = CountdownState.IDLE
        self._remaining_seconds = 0
        self._total_seconds = 0

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(self.TICK_INTERVAL_MS)
        self._qt_timer.timeout.connect(self.on_tick)

    @property
    def state(self) -> CountdownState:
        return self._state

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def total_seconds(self) -> int:
        return self._total_seconds

    @property
    def is_running(self) -> bool:
        """Check if the tick stream is active."""
        return self._state == CountdownState.RUNNING

    @property
    def is_paused(self) -> bool:
        return self._state == CountdownState.PAUSED

    @property
    def is_idle(self) -> bool:
        return self._state == CountdownState.IDLE

    def start(self, duration_seconds: int):
        """
        Start counting down from ``duration_seconds``.
        Any countdown already in progress is cancelled first.
        """
        if duration_seconds < 0:
            raise ValueError("duration_seconds must be non-negative")

        self._qt_timer.stop()
        self._total_seconds = duration_seconds
        self._remaining_seconds = duration_seconds

        if duration_seconds == 0:
            self._set_state(CountdownState.IDLE)
            self.finished.emit()
            return

        self._qt_timer.start()
        self._set_state(CountdownState.RUNNING)
        logger.debug("Countdown started: %ss", duration_seconds)

    def pause(self):
        """Suspend ticking without losing the remaining time."""
        if not self.is_running:
            return
        self._qt_timer.stop()
        self._set_state(CountdownState.PAUSED)

    def resume(self):
        """Continue a paused countdown."""
        if not self.is_paused:
            return
        self._qt_timer.start()
        self._set_state(CountdownState.RUNNING)

    def cancel(self):
        """Stop the countdown and return to idle."""
        self._qt_timer.stop()
        self._remaining_seconds = 0
        self._total_seconds = 0
        self._set_state(CountdownState.IDLE)

    @Slot()
    def on_tick(self):
        """Decrement by one second; stop at zero."""
        if not self.is_running:
            return

        self._remaining_seconds = max(0, self._remaining_seconds - 1)
        self.tick.emit(self._remaining_seconds)

        if self._remaining_seconds == 0:
            self._qt_timer.stop()
            self._set_state(CountdownState.IDLE)
            logger.debug("Countdown finished")
            self.finished.emit()

    def _set_state(self, new_state: CountdownState):
        old_state = self._state
        self._state = new_state
        if old_state != new_state:
            self.state_changed.emit(old_state, new_state)

    def cleanup(self):
        """Stop the tick stream. Call before teardown."""
        self.cancel()
