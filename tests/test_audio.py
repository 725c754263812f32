"""Tests for heartbeat tone synthesis and the sound toggle (no device needed)."""

from unittest.mock import MagicMock

import numpy as np
import pytest

from heartfield.audio import (
    PULSE_GAP,
    START_GAIN,
    TONE_LENGTH,
    HeartbeatSound,
    heartbeat_samples,
    sound_label,
    tone,
)


class TestLabels:

    def test_vietnamese(self):
        assert sound_label(True, "vi") == "Âm thanh: ON"
        assert sound_label(False, "vi") == "Âm thanh: OFF"

    def test_english_and_fallback(self):
        assert sound_label(True, "en") == "Sound: ON"
        assert sound_label(False, "fr") == "Sound: OFF"


class TestSynthesis:

    def test_tone_envelope(self):
        samples = tone(8000)
        assert len(samples) == int(8000 * TONE_LENGTH)
        assert np.abs(samples).max() <= START_GAIN
        head = np.abs(samples[:80]).max()
        tail = np.abs(samples[-80:]).max()
        assert tail < head

    def test_two_pulses(self):
        rate = 8000
        samples = heartbeat_samples(rate)
        assert samples.ndim == 2 and samples.shape[1] == 1
        assert samples.dtype == np.float32
        expected = int(rate * PULSE_GAP) + int(rate * TONE_LENGTH)
        assert abs(len(samples) - expected) <= 1
        # Silence between the end of the first pulse and the start of the second
        gap = samples[int(rate * TONE_LENGTH) + 2:int(rate * PULSE_GAP) - 2]
        assert np.all(gap == 0)


class TestHeartbeatSound:

    def test_off_by_default_and_silent(self):
        sound = HeartbeatSound(locale="en")
        assert not sound.enabled
        assert sound.label == "Sound: OFF"
        sound.play_heartbeat()
        sound.close()

    def test_toggle_without_device_stays_silent(self, monkeypatch):
        monkeypatch.setattr(HeartbeatSound, "_open", lambda self: None)
        sound = HeartbeatSound(locale="vi")
        assert sound.toggle() == "Âm thanh: ON"
        assert not sound.ready
        sound.play_heartbeat()
        assert sound.toggle() == "Âm thanh: OFF"

    def test_plays_when_enabled(self):
        sound = HeartbeatSound()
        fake = MagicMock()
        sound._sd = fake
        sound._samples = heartbeat_samples(8000)
        sound.sample_rate = 8000
        sound.play_heartbeat()
        fake.play.assert_not_called()

        sound.enabled = True
        sound.play_heartbeat()
        fake.play.assert_called_once()
        assert fake.play.call_args.kwargs["samplerate"] == 8000
        sound.close()
        fake.stop.assert_called_once()
