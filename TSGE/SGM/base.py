# =============================================================================
# base.py — Generator base class
# =============================================================================
#
# Every waveform generator is a small stateful object, constructed fresh for
# each run (never shared between runs), that produces one int32 sample per
# (frame, channel) step in the "unified" internal format:
#
#   full scale = ±MAX_LEVEL (2^31 - 1)
#
# FRAME LOCK:
#   Most generators emit the same value on every channel of a frame.  For
#   those, only the frame leader (channel 0) advances the private state; all
#   other channels repeat the leader's value.  This keeps per-frame
#   transitions (square polarity, burst resets, saw wrap, step advance)
#   in strict sample-then-channel order.
#
#   Generators that must produce a fresh value per channel (uncorrelated
#   noise) clear `frame_locked`.
# =============================================================================

from __future__ import annotations
import math

from TSGE.SMM.constants import MAX_LEVEL, MIN_INT32
from TSGE.SMM.model import GenerationState, WaveformConfig, WaveformType


def nearest_int(value: float) -> int:
    """Round half up, then clamp to the signed 32-bit range."""
    rounded = math.floor(value + 0.5)
    return max(MIN_INT32, min(MAX_LEVEL, rounded))


def sine_level(position: int, cycle_length: int) -> int:
    """Full-scale sine value at `position` within a `cycle_length` cycle."""
    level = math.sin(2.0 * math.pi * position / cycle_length) * MAX_LEVEL
    return nearest_int(min(level, float(MAX_LEVEL)))


def cycle_samples(sample_rate: int, frequency_hz: int) -> int:
    """
    Whole samples per cycle.  Integer division re-quantises the frequency to
    the nearest value with whole cycles, so wrap points never jitter.
    """
    return max(sample_rate // frequency_hz, 1)


class Generator:
    """
    Stateful single-waveform generator.

    Subclasses implement next_value(); the run loop calls generate() once per
    (frame, channel) step.
    """

    waveform: WaveformType
    frame_locked: bool = True

    def __init__(self, config: WaveformConfig) -> None:
        self.config = config
        self._value = 0
        self.reset()

    def reset(self) -> None:
        """Return private state to its start-of-run value."""
        self._value = 0

    def generate(self, state: GenerationState) -> int:
        """
        Produce the int32 sample for state.sample_number / state.channel.

        Frame-locked generators only advance on the frame leader; other
        channels repeat the leader's value.
        """
        if state.is_frame_leader or not self.frame_locked:
            self._value = self.next_value(state)
        return self._value

    def next_value(self, state: GenerationState) -> int:
        raise NotImplementedError
