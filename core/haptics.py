"""
Haptic feedback for the Eunoia application.
A transient pulse on play/pause where the hardware supports it.

Implementations:
    - UnsupportedHaptics: default on desktop machines, no engine
    - CallbackHaptics: forwards pulses to a callable (device bridges, tests)
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from .errors import HardwareUnsupported

logger = logging.getLogger(__name__)


class HapticsBase(ABC):
    """Abstract base class for haptics engines."""

    @abstractmethod
    def start(self):
        """
        Bring the engine up.

        Raises:
            HardwareUnsupported: If there is no haptics hardware.
        """

    @abstractmethod
    def fire_transient_pulse(self, intensity: float, sharpness: float):
        """Play a single short pulse."""


class UnsupportedHaptics(HapticsBase):
    """Stand-in for machines without a haptics engine."""

    def start(self):
        raise HardwareUnsupported("No haptics engine on this machine")

    def fire_transient_pulse(self, intensity: float, sharpness: float):
        raise HardwareUnsupported("No haptics engine on this machine")


class CallbackHaptics(HapticsBase):
    """Engine that hands every pulse to ``callback(intensity, sharpness)``."""

    def __init__(self, callback: Callable[[float, float], None]):
        self._callback = callback

    def start(self):
        pass

    def fire_transient_pulse(self, intensity: float, sharpness: float):
        self._callback(intensity, sharpness)


class HapticFeedback:
    """
    Best-effort wrapper around a haptics engine.
    If the engine fails to start, feedback stays off for the rest of the
    session; failed pulses are logged and ignored.
    """

    PULSE_INTENSITY = 1.0
    PULSE_SHARPNESS = 0.5

    def __init__(self, engine: Optional[HapticsBase] = None, enabled: bool = True):
        self._engine = engine or UnsupportedHaptics()
        self._enabled = enabled
        self._started = False

    @property
    def available(self) -> bool:
        return self._enabled and self._started

    def setup(self):
        """Start the engine once; disable feedback if that fails."""
        if not self._enabled or self._started:
            return
        try:
            self._engine.start()
            self._started = True
        except HardwareUnsupported as e:
            logger.info("Haptics disabled: %s", e)
            self._enabled = False
        except Exception as e:
            logger.warning("Haptics error: %s", e)
            self._enabled = False

    def trigger(self):
        """Fire the standard play/pause pulse."""
        if not self.available:
            return
        try:
            self._engine.fire_transient_pulse(self.PULSE_INTENSITY, self.PULSE_SHARPNESS)
        except HardwareUnsupported as e:
            logger.info("Haptics disabled: %s", e)
            self._enabled = False
        except Exception as e:
            logger.warning("Failed to play haptic pattern: %s", e)
