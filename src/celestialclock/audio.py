"""Alarm tone synthesis. The browser plays the WAV clips the app hands it."""

import io
import logging
import wave
from typing import Protocol

import numpy as np

log = logging.getLogger(__name__)


class AudioCollaborator(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...


def tone_samples(
    duration_s: float,
    frequency: float,
    sample_rate: int,
    gain_from: float,
    gain_to: float,
    ramp_s: float,
) -> np.ndarray:
    """Sine wave whose gain ramps linearly from `gain_from` to `gain_to`, then holds."""
    n = int(round(duration_s * sample_rate))
    t = np.arange(n) / sample_rate
    ramp = np.clip(t / ramp_s, 0.0, 1.0) if ramp_s > 0 else np.ones(n)
    envelope = gain_from + (gain_to - gain_from) * ramp
    return envelope * np.sin(2 * np.pi * frequency * t)


def to_wav_bytes(samples: np.ndarray, sample_rate: int) -> bytes:
    """Encode float samples in [-1, 1] as 16-bit mono PCM WAV."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype("<i2")
    buf = io.BytesIO()
    with wave.open(buf, "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(sample_rate)
        w.writeframes(pcm.tobytes())
    return buf.getvalue()


class ToneAudio:
    """A 440 Hz sine alarm that fades in over 0.5 s and fades out over 0.5 s.

    Holds the one current clip. `start()` while a tone is already playing
    replaces it rather than layering a second tone.
    """

    def __init__(
        self,
        frequency: float = 440.0,
        gain: float = 0.5,
        ramp_s: float = 0.5,
        sample_rate: int = 22050,
        ring_duration_s: float = 30.0,
    ) -> None:
        self.frequency = frequency
        self.gain = gain
        self.ramp_s = ramp_s
        self.sample_rate = sample_rate
        self.ring_duration_s = ring_duration_s
        self._clip: bytes | None = None
        self._playing = False
        self._generation = 0

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def clip(self) -> bytes | None:
        """WAV bytes to play now: the ringing loop, the fade-out tail, or None."""
        return self._clip

    @property
    def generation(self) -> int:
        """Bumped on every start/stop so a player can tell clips apart."""
        return self._generation

    def start(self) -> None:
        if self._playing:
            log.debug("Replacing tone already playing")
        samples = tone_samples(
            self.ring_duration_s,
            self.frequency,
            self.sample_rate,
            0.0,
            self.gain,
            self.ramp_s,
        )
        self._clip = to_wav_bytes(samples, self.sample_rate)
        self._playing = True
        self._generation += 1

    def stop(self) -> None:
        if not self._playing:
            return
        samples = tone_samples(
            self.ramp_s, self.frequency, self.sample_rate, self.gain, 0.0, self.ramp_s
        )
        self._clip = to_wav_bytes(samples, self.sample_rate)
        self._playing = False
        self._generation += 1

    def release(self) -> None:
        """Drop the fade-out tail once it has been handed to the player."""
        if not self._playing:
            self._clip = None
