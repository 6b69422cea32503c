"""
Ambient audio (non-authoritative, pure consumer).

Plays a synthesized calm pad: a 110 Hz sine under a 220 Hz triangle, looped.
Never affects simulation state; safe to disable or fail.
"""
from __future__ import annotations

import logging
import math
from array import array
from typing import Optional

import pygame

from config import AMBIENT_MASTER_GAIN

logger = logging.getLogger(__name__)

# (frequency Hz, waveform, relative gain)
PAD_VOICES = (
    (110.0, "sine", 0.03),
    (220.0, "triangle", 0.02),
)
LOOP_SECONDS = 1.0  # every voice completes whole cycles in one loop


def _wave(kind: str, phase: float) -> float:
    """Unit-amplitude sample for a phase in cycles."""
    if kind == "triangle":
        frac = phase - math.floor(phase)
        return 4.0 * abs(frac - 0.5) - 1.0
    return math.sin(2.0 * math.pi * phase)


def synthesize_pad(sample_rate: int, channels: int, seconds: float = LOOP_SECONDS) -> bytes:
    """Signed 16-bit interleaved PCM for the ambient pad."""
    total_gain = sum(g for _, _, g in PAD_VOICES) or 1.0
    n = int(sample_rate * seconds)
    samples = array("h")
    for i in range(n):
        t = i / sample_rate
        v = sum(g * _wave(kind, freq * t) for freq, kind, g in PAD_VOICES) / total_gain
        s = int(max(-1.0, min(1.0, v * 0.5)) * 32767)
        samples.extend([s] * channels)
    return samples.tobytes()


class AudioSystem:
    """
    Lightweight, non-authoritative audio system.

    Starts/stops the ambient soundscape. Safe to disable or fail gracefully.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._ambient_sound: Optional[pygame.mixer.Sound] = None
        self._ambient_channel: Optional[pygame.mixer.Channel] = None
        self._master_volume: float = AMBIENT_MASTER_GAIN

        if not self.enabled:
            return

        # Initialize pygame.mixer safely
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=22050, size=-16, channels=2, buffer=512)
        except pygame.error as e:
            # Mixer init failed; disable audio
            logger.info("audio disabled: %s", e)
            self.enabled = False

    def _build_pad(self) -> Optional[pygame.mixer.Sound]:
        init = pygame.mixer.get_init()
        if not init:
            return None
        frequency, size, channels = init
        if abs(size) != 16:
            logger.info("audio disabled: unsupported mixer sample size %s", size)
            return None
        return pygame.mixer.Sound(buffer=synthesize_pad(frequency, channels))

    def start_ambient(self):
        if not self.enabled or self._ambient_channel is not None:
            return
        if self._ambient_sound is None:
            self._ambient_sound = self._build_pad()
            if self._ambient_sound is None:
                self.enabled = False
                return
        self._ambient_sound.set_volume(self._master_volume)
        self._ambient_channel = self._ambient_sound.play(loops=-1, fade_ms=2000)
        logger.debug("ambient pad started")

    def stop_ambient(self):
        if self._ambient_channel is not None:
            self._ambient_channel.fadeout(500)
            self._ambient_channel = None
