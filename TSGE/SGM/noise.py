# =============================================================================
# noise.py — White and pink noise sources
# =============================================================================
#
# Both sources draw from a 31-bit Park-Miller ("minimal standard") PRNG:
#
#   seed' = 16807 * seed  mod  (2^31 - 1)
#
# seeded with a fixed constant so every run reproduces the same sequence.
# Each generator owns its own PRNG; nothing is shared between runs.
#
# CORRELATION:
#   By default one value is drawn per frame and repeated on every channel.
#   With `uncorrelated` set, a fresh value is drawn for every channel.
#
# PINK FILTER:
#   Paul Kellet's refined 7-tap 1/f filter over the white source, plus a
#   direct white component.  The filter peaks at roughly 5x the source, so
#   the output is divided by 5, giving about -15 dBFS RMS at 0 dBFS alignment.
# =============================================================================

from __future__ import annotations

from TSGE.SMM.constants import (
    NOISE_SEED, NOISE_MULTIPLIER, NOISE_MODULUS,
    PINK_TAPS, PINK_TAP7_GAIN, PINK_DIRECT_GAIN, PINK_PEAK_SCALE,
    MAX_LEVEL, MIN_INT32,
)
from TSGE.SMM.model import GenerationState, WaveformType, to_int32
from .base import Generator


class Rand31:
    """Park-Miller PRNG.  Output range is 1 .. 2^31 - 2."""

    def __init__(self, seed: int = NOISE_SEED) -> None:
        self.seed = seed

    def next(self) -> int:
        self.seed = (NOISE_MULTIPLIER * self.seed) % NOISE_MODULUS
        return self.seed


class WhiteNoiseGenerator(Generator):
    waveform = WaveformType.WHITE

    def reset(self) -> None:
        super().reset()
        self.frame_locked = not self.config.uncorrelated
        self._rand = Rand31()

    def next_value(self, state: GenerationState) -> int:
        # Recentre 1 .. 2^31-2 onto the full signed 32-bit range.
        raw = self._rand.next()
        return to_int32((raw - NOISE_MODULUS // 2) * 2)


class PinkNoiseGenerator(Generator):
    waveform = WaveformType.PINK

    def reset(self) -> None:
        super().reset()
        self.frame_locked = not self.config.uncorrelated
        self._rand = Rand31()
        self._taps = [0.0] * (len(PINK_TAPS) + 1)

    def next_value(self, state: GenerationState) -> int:
        if state.sample_number == 0 and state.channel == 0:
            self._taps = [0.0] * (len(PINK_TAPS) + 1)

        white = self._rand.next() - NOISE_MODULUS / 2.0
        b = self._taps

        for i, (pole, gain) in enumerate(PINK_TAPS):
            b[i] = pole * b[i] + white * gain

        pink = sum(b) + white * PINK_DIRECT_GAIN
        b[-1] = white * PINK_TAP7_GAIN

        level = int(pink / PINK_PEAK_SCALE)
        return max(MIN_INT32, min(MAX_LEVEL, level))
