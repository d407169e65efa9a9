# =============================================================================
# generators.py — Deterministic waveform generators
# =============================================================================
#
# Periodic and non-audio generators.  Noise sources live in noise.py.
#
#   burst    periodic sine bursts (latency / polarity / sync testing)
#   counter  +1 LSB per frame in the target word size (buffer debugging)
#   saw      symmetric ramp, wraps from +peak to -peak once per cycle
#   silence  all zero (markers may still be stamped on top)
#   sine     full-scale sine, whole samples per cycle
#   square   full-scale square, starts at +peak, never zero
#   steps    five coarse levels 0..4 x MAX_LEVEL/4 (level checking)
#
# Frequencies are re-quantised with integer division (sample_rate // f) so a
# cycle always spans a whole number of samples.
# =============================================================================

from __future__ import annotations

from TSGE.SMM.constants import MAX_LEVEL, STEPS_NUM_LEVELS
from TSGE.SMM.model import GenerationState, WaveformConfig, WaveformType, to_int32
from .base import Generator, cycle_samples, sine_level
from .noise import PinkNoiseGenerator, WhiteNoiseGenerator


class SilenceGenerator(Generator):
    waveform = WaveformType.SILENCE

    def next_value(self, state: GenerationState) -> int:
        return 0


class SineGenerator(Generator):
    waveform = WaveformType.SINE

    def reset(self) -> None:
        super().reset()
        self.cycle_length = cycle_samples(self.config.sample_rate, self.config.frequency_hz)

    def next_value(self, state: GenerationState) -> int:
        return sine_level(state.sample_number, self.cycle_length)


class SquareGenerator(Generator):
    """
    Square wave starting at +MAX_LEVEL.  Polarity flips after every
    half-period; the flip is taken by the frame leader at the start of the
    next frame so every channel of a frame carries the same polarity.
    """

    waveform = WaveformType.SQUARE

    def reset(self) -> None:
        super().reset()
        self.half_period = max(
            cycle_samples(self.config.sample_rate, self.config.frequency_hz) // 2, 1
        )
        self._level = MAX_LEVEL

    def next_value(self, state: GenerationState) -> int:
        n = state.sample_number
        # Frame n-1 was the last of a half-period.
        if n > 0 and n % self.half_period == 0:
            self._level = -self._level
        return self._level


class SawGenerator(Generator):
    """
    Symmetric saw-tooth.  Starts at zero and climbs by `step_size` per frame;
    the first value that would exceed `peak_level` is replaced by the
    negative peak, giving one deliberate discontinuity per cycle.

    One cycle is `cycle_length` samples running -peak .. +peak inclusive,
    i.e. `cycle_length - 1` steps.  At f = rate/2 that is a single step of
    2 x MAX_LEVEL and the output alternates -MAX_LEVEL / +MAX_LEVEL.
    """

    waveform = WaveformType.SAW

    def reset(self) -> None:
        super().reset()
        self.cycle_length = cycle_samples(self.config.sample_rate, self.config.frequency_hz)
        self.num_steps    = max(self.cycle_length - 1, 1)
        self.step_size    = (MAX_LEVEL // self.num_steps) * 2
        # Peak that the step size reaches exactly (no frequency jitter).
        self.peak_level   = (self.step_size * self.num_steps) // 2
        self._next = 0

    def next_value(self, state: GenerationState) -> int:
        value = self._next

        if value == MAX_LEVEL:
            self._next = -MAX_LEVEL
        else:
            self._next = value + self.step_size
            if self._next > self.peak_level:
                self._next = -self.peak_level

        return value


class BurstGenerator(Generator):
    """
    Periodic sine bursts: `num_cycles` cycles of the tone at the start of
    every `period_ms`, silence for the rest of the period.
    """

    waveform = WaveformType.BURST

    def reset(self) -> None:
        super().reset()
        cfg = self.config
        self.burst_length  = cycle_samples(cfg.sample_rate, cfg.frequency_hz)
        self.period_length = max(cfg.sample_rate * cfg.period_ms // 1000, 1)
        self.burst_total   = self.burst_length * max(cfg.num_cycles, 1)
        self._burst_sample = 0

    def next_value(self, state: GenerationState) -> int:
        if state.sample_number % self.period_length == 0:
            self._burst_sample = 0

        if self._burst_sample >= self.burst_total:
            return 0

        value = sine_level(self._burst_sample, self.burst_length)
        self._burst_sample += 1
        return value


class CounterGenerator(Generator):
    """
    Frame counter, one LSB of the target word per frame.  The value is the
    same on every channel of a frame so mis-aligned channels stand out.
    """

    waveform = WaveformType.COUNTER

    def reset(self) -> None:
        super().reset()
        cfg = self.config
        # Position of the target word's LSB inside the 32-bit sample.
        self.word_shift = 0 if cfg.is_float else 32 - cfg.bits_per_sample
        # Bottom-byte markers need the low byte vacated.
        self.marker_shift = 8 if (cfg.markers.enabled and not cfg.markers.in_msb) else 0

    def next_value(self, state: GenerationState) -> int:
        counter = state.sample_number << self.marker_shift
        return to_int32(counter << self.word_shift)


class StepsGenerator(Generator):
    """Five positive levels, 0, s, 2s, 3s, 4s (s = MAX_LEVEL / 4), one per frame."""

    waveform = WaveformType.STEPS

    def reset(self) -> None:
        super().reset()
        self.step_size = MAX_LEVEL // STEPS_NUM_LEVELS
        self._step = 0

    def next_value(self, state: GenerationState) -> int:
        value = self.step_size * self._step
        self._step += 1
        if self._step > STEPS_NUM_LEVELS:
            self._step = 0
        return value


# ── Registry ─────────────────────────────────────────────────────────────────

GENERATORS: dict[WaveformType, type[Generator]] = {
    WaveformType.BURST:   BurstGenerator,
    WaveformType.COUNTER: CounterGenerator,
    WaveformType.SAW:     SawGenerator,
    WaveformType.SILENCE: SilenceGenerator,
    WaveformType.SINE:    SineGenerator,
    WaveformType.SQUARE:  SquareGenerator,
    WaveformType.STEPS:   StepsGenerator,
    WaveformType.PINK:    PinkNoiseGenerator,
    WaveformType.WHITE:   WhiteNoiseGenerator,
}


def create_generator(config: WaveformConfig) -> Generator:
    """Fresh generator (fresh private state) for one run of `config`."""
    return GENERATORS[config.waveform](config)
