"""
Ambient sound playback for the Eunoia application.
Plays a theme's sound file on a loop using Qt multimedia.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from PySide6.QtCore import QObject, QUrl

from .errors import AssetMissing

logger = logging.getLogger(__name__)

SOUND_EXTENSIONS = ('.mp3', '.m4a', '.wav', '.ogg')


def default_sounds_dir() -> Path:
    """Sounds shipped next to the application."""
    return Path(__file__).resolve().parent.parent / 'sounds'


def find_sound_file(sounds_dir: Path, asset_id: str) -> Optional[Path]:
    """Return the first existing file for ``asset_id``, trying each extension."""
    for ext in SOUND_EXTENSIONS:
        candidate = sounds_dir / f"{asset_id}{ext}"
        if candidate.is_file():
            return candidate
    return None


class AudioBackend(ABC):
    """Looping sound player used by the session controller."""

    @abstractmethod
    def load(self, asset_id: str) -> Any:
        """
        Prepare the sound for ``asset_id``.

        Returns:
            An opaque handle for the other calls.

        Raises:
            AssetMissing: If the asset cannot be found.
        """

    @abstractmethod
    def play(self, handle: Any, looping: bool = True):
        """Start or resume playback."""

    @abstractmethod
    def pause(self, handle: Any):
        """Pause playback, keeping the position."""

    @abstractmethod
    def set_volume(self, handle: Any, level: float):
        """Set volume in [0, 1]."""

    def release(self, handle: Any):
        """Free a handle that will not be used again."""


@dataclass
class QtAudioHandle:
    asset_id: str
    player: Any
    output: Any


class QtAudioBackend(AudioBackend):
    """
    Audio backend built on QMediaPlayer.
    Looping uses QMediaPlayer.Loops.Infinite.
    """

    def __init__(self, sounds_dir: Optional[Path] = None, parent: Optional[QObject] = None):
        self.sounds_dir = Path(sounds_dir) if sounds_dir else default_sounds_dir()
        self._parent = parent

    def load(self, asset_id: str) -> QtAudioHandle:
        path = find_sound_file(self.sounds_dir, asset_id)
        if path is None:
            raise AssetMissing(asset_id, f"not found in {self.sounds_dir}")

        # Multimedia backend is only loaded once a sound is actually needed
        from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

        output = QAudioOutput(self._parent)
        player = QMediaPlayer(self._parent)
        player.setAudioOutput(output)
        player.setSource(QUrl.fromLocalFile(str(path)))
        player.setLoops(QMediaPlayer.Loops.Infinite)
        logger.debug("Loaded sound %s from %s", asset_id, path)
        return QtAudioHandle(asset_id, player, output)

    def play(self, handle: QtAudioHandle, looping: bool = True):
        from PySide6.QtMultimedia import QMediaPlayer

        handle.player.setLoops(QMediaPlayer.Loops.Infinite if looping else QMediaPlayer.Loops.Once)
        handle.player.play()

    def pause(self, handle: QtAudioHandle):
        handle.player.pause()

    def set_volume(self, handle: QtAudioHandle, level: float):
        handle.output.setVolume(float(level))

    def release(self, handle: QtAudioHandle):
        handle.player.stop()
        handle.player.deleteLater()
        handle.output.deleteLater()


class SilentAudioBackend(AudioBackend):
    """Backend used when sound is disabled in settings."""

    def load(self, asset_id: str):
        raise AssetMissing(asset_id, "not loaded (sound disabled)")

    def play(self, handle, looping: bool = True):
        pass

    def pause(self, handle):
        pass

    def set_volume(self, handle, level: float):
        pass
