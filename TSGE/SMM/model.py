# =============================================================================
# model.py — SMM Data Model
# =============================================================================
#
# Value types shared by every stage of a run:
#
#   WaveformType     — the nine generator variants
#   Sample           — tagged int/float sample (one channel of one frame)
#   MarkerConfig     — channel-marker switch + byte position
#   WaveformConfig   — immutable per-run configuration (validated)
#   GenerationState  — mutable loop position, current sample and gain
#
# A run owns exactly one GenerationState; nothing here is shared across runs.
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional

from TSGE.SMM.constants import (
    MAX_SAMPLE_RATE_HZ, MAX_CHANNELS, MAX_RIFF_SIZE,
    SUPPORTED_PCM_BITS, FLOAT_BITS,
    RIFF_HEADER_SIZE, FMT_CHUNK_SIZE, FACT_CHUNK_SIZE, DATA_HEADER_SIZE,
    DEFAULT_FREQUENCY_HZ, DEFAULT_PERIOD_MS, DEFAULT_NUM_CYCLES,
)
from TSGE.SMM.errors import ConfigError


class WaveformType(str, Enum):
    BURST   = "burst"
    COUNTER = "counter"
    SAW     = "saw"
    SILENCE = "silence"
    SINE    = "sine"
    SQUARE  = "square"
    STEPS   = "steps"
    PINK    = "pink"
    WHITE   = "white"

    @classmethod
    def parse(cls, name: str) -> "WaveformType":
        """Look up a waveform by name or alias (case-insensitive)."""
        key = name.strip().lower()
        key = WAVEFORM_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ConfigError(
                f"Unknown waveform type {name!r}\n"
                f"Valid types: {sorted(t.value for t in cls)}"
            ) from None


WAVEFORM_ALIASES = {
    "sawtooth":   "saw",
    "sinewave":   "sine",
    "step":       "steps",
    "squarewave": "square",
    "count":      "counter",
}

# Real audio: peaks at 0 dBFS, level may be changed by the gain stage.
LEVEL_TYPES = frozenset({
    WaveformType.SAW, WaveformType.SINE, WaveformType.SQUARE,
    WaveformType.BURST, WaveformType.PINK, WaveformType.WHITE,
})

# May carry channel markers (integer output only).
MARKER_TYPES = frozenset({
    WaveformType.COUNTER, WaveformType.SILENCE, WaveformType.STEPS,
    WaveformType.PINK, WaveformType.WHITE,
})

# A top-byte marker would swamp the level/symmetry of these.
MSB_MARKER_FORBIDDEN = frozenset({
    WaveformType.SAW, WaveformType.SINE, WaveformType.SQUARE,
    WaveformType.BURST, WaveformType.PINK, WaveformType.WHITE,
})


class Sample(NamedTuple):
    value:    int | float    # int32 when is_float is False, else [-1.0, 1.0]
    is_float: bool = False


@dataclass(frozen=True)
class MarkerConfig:
    enabled: bool = False
    in_msb:  bool = False


@dataclass(frozen=True)
class WaveformConfig:
    waveform:        WaveformType
    sample_rate:     int
    bits_per_sample: int
    num_channels:    int
    num_samples:     int                  # per channel
    is_float:        bool = False
    frequency_hz:    int = DEFAULT_FREQUENCY_HZ
    period_ms:       int = DEFAULT_PERIOD_MS
    num_cycles:      int = DEFAULT_NUM_CYCLES
    uncorrelated:    bool = False
    markers:         MarkerConfig = field(default_factory=MarkerConfig)
    gain:            float = 1.0
    output:          Optional[str] = None  # path, or None for a stream sink

    # ── Derived sizes ────────────────────────────────────────────────────────

    @property
    def bytes_per_sample(self) -> int:
        return self.bits_per_sample // 8

    @property
    def block_align(self) -> int:
        return self.num_channels * self.bytes_per_sample

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.block_align

    @property
    def num_data_bytes(self) -> int:
        return self.num_samples * self.num_channels * self.bytes_per_sample

    @property
    def duration_ms(self) -> int:
        """Advertised duration.  Approximate: truncated to whole ms."""
        return self.num_samples * 1000 // self.sample_rate

    @property
    def riff_size(self) -> int:
        size = (RIFF_HEADER_SIZE - 8) + FMT_CHUNK_SIZE + DATA_HEADER_SIZE + self.num_data_bytes
        if self.is_float:
            size += FACT_CHUNK_SIZE
        return size

    # ── Validation ───────────────────────────────────────────────────────────

    def validate(self) -> "WaveformConfig":
        """
        Reject anything the generation core cannot produce.

        Raises:
            ConfigError: with a message naming the offending option.

        Returns:
            self, so construction and validation can be chained.
        """
        if not isinstance(self.waveform, WaveformType):
            raise ConfigError(f"waveform must be a WaveformType, got {self.waveform!r}")

        if not 1 <= self.sample_rate <= MAX_SAMPLE_RATE_HZ:
            raise ConfigError(
                f"Sample rate must be 1..{MAX_SAMPLE_RATE_HZ} Hz, got {self.sample_rate}"
            )

        if self.is_float:
            if self.bits_per_sample != FLOAT_BITS:
                raise ConfigError(
                    f"Floating-point output is {FLOAT_BITS}-bit only, got {self.bits_per_sample}"
                )
        elif self.bits_per_sample not in SUPPORTED_PCM_BITS:
            raise ConfigError(
                f"This bit-width is not supported: {self.bits_per_sample} "
                f"(use {', '.join(str(b) for b in SUPPORTED_PCM_BITS)} or float)"
            )

        if not 1 <= self.num_channels <= MAX_CHANNELS:
            raise ConfigError(f"Channels must be 1..{MAX_CHANNELS}, got {self.num_channels}")

        if self.num_samples < 0:
            raise ConfigError(f"Sample count cannot be negative, got {self.num_samples}")

        if not 1 <= self.frequency_hz <= self.sample_rate // 2:
            raise ConfigError(
                f"Frequency must be 1..{self.sample_rate // 2} Hz "
                f"(half the sample rate), got {self.frequency_hz}"
            )

        if self.period_ms < 1:
            raise ConfigError(f"Burst period must be at least 1 ms, got {self.period_ms}")

        if self.num_cycles < 1:
            raise ConfigError(f"Burst cycle count must be at least 1, got {self.num_cycles}")

        if self.markers.enabled and self.markers.in_msb and self.waveform in MSB_MARKER_FORBIDDEN:
            raise ConfigError(
                f"Markers cannot be put in the MSB of waveform type {self.waveform.value!r}"
            )

        if self.riff_size > MAX_RIFF_SIZE:
            raise ConfigError(
                f"Output of {self.num_data_bytes:,} bytes does not fit a 32-bit RIFF container"
            )

        return self


@dataclass
class GenerationState:
    sample_number: int = 0               # frame index, 0-based
    channel:       int = 0               # 0-based, wraps every frame
    sample:        Sample = Sample(0)
    gain:          float = 1.0

    @property
    def is_frame_leader(self) -> bool:
        """Channel 0 owns per-frame transitions (polarity, resets)."""
        return self.channel == 0

    def is_frame_end(self, num_channels: int) -> bool:
        return self.channel == num_channels - 1


def samples_from_duration(duration_ms: int, sample_rate: int) -> int:
    """Per-channel sample count for a duration in ms (truncated)."""
    return duration_ms * sample_rate // 1000


def to_int32(value: int) -> int:
    """Wrap an arbitrary Python int to the signed 32-bit range."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value
