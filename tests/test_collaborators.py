# tests/test_collaborators.py
import random

import pytest

from core.audio import QtAudioBackend, SilentAudioBackend, find_sound_file
from core.errors import AssetMissing
from core.haptics import CallbackHaptics, HapticFeedback, HapticsBase, UnsupportedHaptics
from core.effects import flowing_wave_points, generate_particles


def test_find_sound_file_tries_extensions(tmp_path):
    (tmp_path / "harmony_ambient.wav").write_bytes(b"RIFF")
    assert find_sound_file(tmp_path, "harmony_ambient") == tmp_path / "harmony_ambient.wav"
    assert find_sound_file(tmp_path, "empathy_ambient") is None


def test_qt_backend_missing_asset(tmp_path):
    backend = QtAudioBackend(tmp_path)
    with pytest.raises(AssetMissing):
        backend.load("harmony_ambient")


def test_silent_backend_never_loads():
    with pytest.raises(AssetMissing):
        SilentAudioBackend().load("harmony_ambient")


def test_unsupported_haptics_disable_feedback():
    feedback = HapticFeedback(UnsupportedHaptics())
    feedback.setup()
    assert not feedback.available
    feedback.trigger()


def test_haptics_pulse_forwarded():
    pulses = []
    feedback = HapticFeedback(CallbackHaptics(lambda i, s: pulses.append((i, s))))
    feedback.setup()
    feedback.trigger()
    assert pulses == [(1.0, 0.5)]


def test_haptics_disabled_in_settings():
    pulses = []
    feedback = HapticFeedback(CallbackHaptics(lambda i, s: pulses.append((i, s))), enabled=False)
    feedback.setup()
    feedback.trigger()
    assert pulses == []


class FlakyHaptics(HapticsBase):
    def start(self):
        pass

    def fire_transient_pulse(self, intensity, sharpness):
        raise RuntimeError("engine stopped")


def test_failed_pulse_is_ignored():
    feedback = HapticFeedback(FlakyHaptics())
    feedback.setup()
    feedback.trigger()
    assert feedback.available


def test_particle_count_follows_intensity():
    rng = random.Random(1)
    assert generate_particles(0.0, 100, 100, rng) == []
    particles = generate_particles(0.42, 200, 100, rng)
    assert len(particles) == 42
    for x, y, opacity in particles:
        assert 0 <= x <= 200
        assert 0 <= y <= 100
        assert 0.1 <= opacity <= 0.3


def test_wave_points_sampled_every_five_pixels():
    points = flowing_wave_points(100, 200, 0.0)
    assert [x for x, _ in points] == [float(x) for x in range(0, 101, 5)]
    assert points[0] == (0.0, 100.0)
    assert all(100 - 20 / 0.7 - 1e-9 <= y <= 100 + 20 / 0.7 + 1e-9 for _, y in points)
    assert flowing_wave_points(0, 200, 0.0) == []
