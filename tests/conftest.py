import pytest
from PySide6.QtCore import QCoreApplication

from core.audio import AudioBackend
from core.errors import AssetMissing
from core.haptics import HapticsBase
from core.storage import Storage


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """QTimer needs an application instance in the test process."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    return str(tmp_path / "test_eunoia.db")


@pytest.fixture
def storage(tmp_db):
    return Storage(tmp_db)


class FakeAudio(AudioBackend):
    """Records backend calls; assets listed in ``missing`` fail to load."""

    def __init__(self, missing=()):
        self.missing = set(missing)
        self.calls = []
        self.volume = None
        self.playing = None

    def load(self, asset_id):
        self.calls.append(("load", asset_id))
        if asset_id in self.missing:
            raise AssetMissing(asset_id)
        return asset_id

    def play(self, handle, looping=True):
        self.calls.append(("play", handle, looping))
        self.playing = handle

    def pause(self, handle):
        self.calls.append(("pause", handle))
        self.playing = None

    def set_volume(self, handle, level):
        self.calls.append(("set_volume", handle, level))
        self.volume = level

    def release(self, handle):
        self.calls.append(("release", handle))

    def names(self):
        return [call[0] for call in self.calls]


class FakeHaptics(HapticsBase):
    def __init__(self):
        self.pulses = []

    def start(self):
        pass

    def fire_transient_pulse(self, intensity, sharpness):
        self.pulses.append((intensity, sharpness))


@pytest.fixture
def fake_audio():
    return FakeAudio()


@pytest.fixture
def fake_haptics():
    return FakeHaptics()
