# tests/test_session_controller.py
from datetime import date

import pytest

from core.errors import PersistenceUnavailable
from core.haptics import HapticFeedback, UnsupportedHaptics
from core.models import Theme
from core.progress_store import ProgressStore
from core.session_controller import SessionController
from core.themes import THEME_CATALOG
from core.storage import Storage
from core.timer_engine import CountdownTimer

from conftest import FakeAudio


def make_controller(audio=None, haptics=None, progress=None, today=None):
    return SessionController(
        audio=audio or FakeAudio(),
        haptics=haptics or HapticFeedback(UnsupportedHaptics()),
        progress=progress,
        today=today or (lambda: date(2025, 3, 12)),
    )


def test_initial_state():
    controller = make_controller()
    state = controller.state
    assert state.current_theme == THEME_CATALOG[0]
    assert state.is_playing is False
    assert state.intensity == 0.5
    assert state.selected_duration == 600


@pytest.mark.parametrize("theme", THEME_CATALOG, ids=lambda t: t.id)
def test_select_theme_sets_current_theme(theme):
    controller = make_controller()
    controller.select_theme(theme)
    assert controller.state.current_theme == theme


def test_select_unknown_theme_rejected():
    controller = make_controller()
    stranger = Theme("ocean", "Ocean", "", "#000", "#fff", "ocean_ambient")
    with pytest.raises(ValueError):
        controller.select_theme(stranger)
    assert controller.current_theme == THEME_CATALOG[0]


def test_toggle_twice_restores_playing_flag():
    controller = make_controller()
    before = controller.is_playing
    controller.toggle_playback()
    assert controller.is_playing is not before
    controller.toggle_playback()
    assert controller.is_playing is before


def test_toggle_drives_audio():
    audio = FakeAudio()
    controller = make_controller(audio=audio)
    controller.toggle_playback()
    assert audio.playing == "harmony_ambient"
    assert audio.volume == 0.5
    controller.toggle_playback()
    assert audio.playing is None
    assert audio.names()[-1] == "pause"


def test_toggle_fires_haptic_pulse(fake_haptics):
    controller = make_controller(haptics=HapticFeedback(fake_haptics))
    controller.toggle_playback()
    controller.toggle_playback()
    assert fake_haptics.pulses == [(1.0, 0.5), (1.0, 0.5)]


def test_unsupported_haptics_do_not_interrupt():
    controller = make_controller(haptics=HapticFeedback(UnsupportedHaptics()))
    controller.toggle_playback()
    assert controller.is_playing


def test_select_theme_while_playing_switches_sound():
    audio = FakeAudio()
    controller = make_controller(audio=audio)
    controller.toggle_playback()
    controller.select_theme(THEME_CATALOG[1])
    assert ("release", "harmony_ambient") in audio.calls
    assert audio.playing == "empathy_ambient"
    assert controller.is_playing


def test_select_theme_while_paused_stays_silent():
    audio = FakeAudio()
    controller = make_controller(audio=audio)
    controller.select_theme(THEME_CATALOG[2])
    assert audio.playing is None
    assert ("load", "resilience_ambient") in audio.calls


def test_missing_asset_is_silent_and_does_not_raise(caplog):
    audio = FakeAudio(missing={"empathy_ambient"})
    controller = make_controller(audio=audio)
    controller.toggle_playback()
    controller.select_theme(THEME_CATALOG[1])
    assert controller.is_playing
    assert controller.current_theme == THEME_CATALOG[1]
    after_load = audio.calls[audio.calls.index(("load", "empathy_ambient")):]
    assert "play" not in [call[0] for call in after_load]
    assert "not found" in caplog.text


def test_update_intensity_is_idempotent():
    audio = FakeAudio()
    controller = make_controller(audio=audio)
    controller.update_intensity(0.8)
    once = controller.state
    controller.update_intensity(0.8)
    assert controller.state == once
    assert audio.volume == 0.8


def test_update_intensity_does_not_interrupt_playback():
    audio = FakeAudio()
    controller = make_controller(audio=audio)
    controller.toggle_playback()
    controller.update_intensity(0.2)
    assert controller.is_playing
    assert audio.playing == "harmony_ambient"
    assert audio.volume == 0.2


def test_update_intensity_is_clamped():
    controller = make_controller()
    controller.update_intensity(1.7)
    assert controller.intensity == 1.0
    controller.update_intensity(-0.3)
    assert controller.intensity == 0.0


def test_state_changed_emitted():
    controller = make_controller()
    states = []
    controller.state_changed.connect(states.append)
    controller.update_intensity(0.3)
    assert states[-1].intensity == 0.3


def test_state_is_a_copy():
    controller = make_controller()
    state = controller.state
    state.is_playing = True
    assert controller.is_playing is False


def test_playing_starts_countdown_with_selected_duration():
    controller = make_controller()
    controller.select_duration(300)
    controller.toggle_playback()
    assert controller.timer.is_running
    assert controller.state.remaining_seconds == 300
    controller.timer.on_tick()
    assert controller.state.remaining_seconds == 299
    controller.cleanup()


def test_pause_pauses_countdown():
    controller = make_controller()
    controller.toggle_playback()
    controller.timer.on_tick()
    controller.toggle_playback()
    controller.timer.on_tick()
    assert controller.state.remaining_seconds == 599
    controller.toggle_playback()
    assert controller.timer.is_running
    assert controller.state.remaining_seconds == 599
    controller.cleanup()


def test_select_duration_does_not_affect_running_session():
    controller = make_controller()
    controller.toggle_playback()
    controller.select_duration(1800)
    assert controller.timer.total_seconds == 600
    assert controller.state.selected_duration == 1800
    controller.cleanup()


def test_select_duration_rejects_unknown_preset():
    controller = make_controller()
    with pytest.raises(ValueError):
        controller.select_duration(42)


def test_countdown_completion_stops_and_records(storage):
    audio = FakeAudio()
    progress = ProgressStore(storage, today=lambda: date(2025, 3, 12))
    controller = make_controller(audio=audio, progress=progress)
    completed = []
    controller.session_completed.connect(completed.append)

    controller.select_duration(300)
    controller.toggle_playback()
    for _ in range(300):
        controller.timer.on_tick()

    assert controller.is_playing is False
    assert controller.state.remaining_seconds == 0
    assert audio.playing is None
    assert completed == [THEME_CATALOG[0]]
    snapshot = progress.snapshot
    assert snapshot.total_minutes == 5
    assert date(2025, 3, 12) in snapshot.completed_dates
    assert "harmony" in snapshot.themes_tried


def test_stop_does_not_record(storage):
    progress = ProgressStore(storage, today=lambda: date(2025, 3, 12))
    controller = make_controller(progress=progress)
    controller.toggle_playback()
    controller.timer.on_tick()
    controller.stop()
    assert controller.is_playing is False
    assert controller.timer.is_idle
    assert progress.total_minutes == 0


def test_injected_timer_is_used():
    timer = CountdownTimer()
    controller = SessionController(audio=FakeAudio(), timer=timer)
    controller.toggle_playback()
    assert timer.is_running
    controller.cleanup()
    assert timer.is_idle


def test_select_theme_keeps_catalog_instance():
    audio = FakeAudio()
    controller = make_controller(audio=audio)
    target = THEME_CATALOG[1]
    impostor = Theme(
        id=target.id,
        name="Impostor",
        description="",
        primary_color="#000000",
        secondary_color="#000000",
        sound_file_name="elsewhere",
        benefits=(),
        icon="?",
    )
    controller.select_theme(impostor)
    assert controller.current_theme is target
    assert ("load", "elsewhere") not in audio.calls
    assert ("load", target.sound_file_name) in audio.calls


def test_duration_and_intensity_saved_as_defaults(storage):
    controller = SessionController(
        audio=FakeAudio(),
        haptics=HapticFeedback(UnsupportedHaptics()),
        storage=storage,
    )
    controller.select_duration(1200)
    controller.update_intensity(0.8)

    settings = storage.get_settings()
    assert settings.default_duration_seconds == 1200
    assert settings.default_intensity == 0.8
    assert settings.sound_enabled is True


class UnwritableStorage(Storage):
    def __init__(self):
        self.db_path = ":broken:"

    def get_settings(self):
        raise PersistenceUnavailable("read-only")


def test_saving_defaults_failure_is_ignored(caplog):
    controller = SessionController(
        audio=FakeAudio(),
        haptics=HapticFeedback(UnsupportedHaptics()),
        storage=UnwritableStorage(),
    )
    controller.select_duration(900)
    assert controller.state.selected_duration == 900
    assert "Could not save session defaults" in caplog.text
