"""Synthesized "lub-dub" heartbeat sound, played through sounddevice."""

import os

import numpy as np

# Suppress PortAudio JACK errors when JACK isn't running
os.environ.setdefault("JACK_NO_START_SERVER", "1")

SAMPLE_RATE = 44100
TONE_LENGTH = 0.1      # seconds per pulse
PULSE_GAP = 0.15       # second pulse starts this long after the first
START_HZ = 80.0
END_HZ = 40.0
START_GAIN = 0.3
END_GAIN = 0.01

_LABELS = {
    "vi": "Âm thanh",
    "en": "Sound",
}


def sound_label(enabled: bool, locale: str = "vi") -> str:
    """Toggle label, e.g. 'Âm thanh: ON'. Unknown locales fall back to English."""
    return f"{_LABELS.get(locale, _LABELS['en'])}: {'ON' if enabled else 'OFF'}"


def tone(sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """One percussive pulse: exponential pitch drop and exponential decay."""
    n = int(sample_rate * TONE_LENGTH)
    ramp = np.arange(n) / sample_rate / TONE_LENGTH
    freq = START_HZ * (END_HZ / START_HZ) ** ramp
    gain = START_GAIN * (END_GAIN / START_GAIN) ** ramp
    phase = 2 * np.pi * np.cumsum(freq) / sample_rate
    return (np.sin(phase) * gain).astype(np.float32)


def heartbeat_samples(sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Two pulses, ``PULSE_GAP`` apart, as a mono column for playback."""
    pulse = tone(sample_rate)
    offset = int(sample_rate * PULSE_GAP)
    out = np.zeros(offset + len(pulse), dtype=np.float32)
    out[:len(pulse)] += pulse
    out[offset:offset + len(pulse)] += pulse
    return out.reshape(-1, 1)


class HeartbeatSound:
    """Plays the heartbeat on demand once enabled.

    The output device is opened on first enable. If it can't be opened,
    sound stays silent and ``play_heartbeat`` does nothing.
    """

    def __init__(self, locale: str = "vi", device: str | int | None = None):
        self.locale = locale
        self.device = device
        self.enabled = False
        self.sample_rate = SAMPLE_RATE
        self._sd = None
        self._samples: np.ndarray | None = None

    @property
    def label(self) -> str:
        return sound_label(self.enabled, self.locale)

    @property
    def ready(self) -> bool:
        return self._sd is not None

    def toggle(self) -> str:
        """Flip sound on/off; returns the new label."""
        self.enabled = not self.enabled
        if self.enabled and not self.ready:
            self._open()
        return self.label

    def _open(self) -> None:
        try:
            import sounddevice as sd
        except OSError as e:
            print(f"[audio] PortAudio unavailable, sound disabled: {e}")
            return
        try:
            dev_info = sd.query_devices(self.device, kind="output")
        except (sd.PortAudioError, ValueError) as e:
            print(f"[audio] No output device, sound disabled: {e}")
            return
        self.sample_rate = int(dev_info["default_samplerate"])
        self._samples = heartbeat_samples(self.sample_rate)
        self._sd = sd
        print(f"[audio] Speaker open: {dev_info['name']} @ {self.sample_rate}Hz")

    def play_heartbeat(self) -> None:
        if not self.enabled or self._sd is None:
            return
        try:
            self._sd.play(self._samples, samplerate=self.sample_rate, device=self.device)
        except self._sd.PortAudioError as e:
            print(f"[audio] Playback error: {e}")

    def close(self) -> None:
        if self._sd is not None:
            self._sd.stop()
