# =============================================================================
# options.py — raw user options → validated WaveformConfig
# =============================================================================
#
# Shared by the command line (TSGE/cli.py) and the HTTP/JSON bridges.
# Sanitising follows the wavgen rules:
#
#   sample rate        clamped to 192 kHz
#   channels           clamped to 8
#   samples / duration clamped to 10 minutes; samples (-s) wins over duration
#   alignment level    clamped to <= 0 dBFS
#   peak level         clamped to <= +20 dB
#   power fraction     raised to >= 1
#   burst period       shortened to the total duration
#   burst cycles       raised to >= 1
#
# Anything that cannot be sanitised is rejected by WaveformConfig.validate().
# =============================================================================

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Optional

from TSGE.SMM.constants import (
    MAX_SAMPLE_RATE_HZ, MAX_CHANNELS, MAX_DURATION_MS, MAX_SAMPLES_PER_CHNL,
    MAX_PEAK_LEVEL_DB, MAX_ALIGN_LEVEL_DBFS,
    DEFAULT_SAMPLE_RATE, DEFAULT_BITS, DEFAULT_CHANNELS, DEFAULT_DURATION_MS,
    DEFAULT_FREQUENCY_HZ, DEFAULT_PERIOD_MS, DEFAULT_NUM_CYCLES,
    FLOAT_BITS, FLOAT_BITDEPTH_FLAG,
)
from TSGE.SMM.errors import ConfigError
from TSGE.SMM.levels import gain_from_params
from TSGE.SMM.model import (
    MarkerConfig, WaveformConfig, WaveformType, samples_from_duration,
)

logger = logging.getLogger(__name__)

_NUMBER_WITH_UNITS = re.compile(r"^\s*(\d+)\s*([A-Za-z]*)\s*$")

_DURATION_SCALE = {
    "":   1,
    "ms": 1,
    "s":  1_000,
    "m":  60_000,
    "h":  3_600_000,
}

_FREQUENCY_SCALE = {
    "":    1,
    "hz":  1,
    "k":   1_000,
    "khz": 1_000,
}

_MSB_MARKER_NAMES = ("tb", "msb")


def _split_units(text: str, what: str) -> tuple[int, str]:
    m = _NUMBER_WITH_UNITS.match(str(text))
    if m is None:
        raise ConfigError(f"Cannot parse {what} {text!r}")
    return int(m.group(1)), m.group(2)


def parse_duration_ms(text: str | int) -> int:
    """'250', '250ms', '2s', '1m', '1h' → milliseconds."""
    if isinstance(text, int):
        return text
    value, units = _split_units(text, "duration")
    scale = _DURATION_SCALE.get(units.lower())
    if scale is None:
        raise ConfigError(f"Unknown units for duration {text!r} (use h, m, s, ms or nothing)")
    return value * scale


def parse_frequency_hz(text: str | int) -> int:
    """'440', '440Hz', '1k', '1kHz' → Hz."""
    if isinstance(text, int):
        return text
    value, units = _split_units(text, "frequency")
    scale = _FREQUENCY_SCALE.get(units.lower())
    if scale is None:
        raise ConfigError(f"Unknown units for frequency {text!r} (use kHz or Hz/nothing)")
    return value * scale


def parse_markers(position: Optional[str]) -> MarkerConfig:
    """None or blank → markers off; 'tb'/'msb' → top byte; anything else → bottom byte."""
    if position is None or not position.strip():
        return MarkerConfig()
    return MarkerConfig(enabled=True, in_msb=position.strip().lower() in _MSB_MARKER_NAMES)


@dataclass
class UserOptions:
    """Options as given by the user, before sanitising.  None = not given."""
    waveform:       Optional[str] = None
    bitdepth:       int = DEFAULT_BITS
    channels:       int = DEFAULT_CHANNELS
    rate:           str | int = DEFAULT_SAMPLE_RATE
    duration:       str | int | None = None
    samples:        Optional[int] = None
    frequency:      str | int = DEFAULT_FREQUENCY_HZ
    align:          Optional[float] = None
    level:          Optional[float] = None
    power:          Optional[int] = None
    markers:        Optional[str] = None
    period:         str | int = DEFAULT_PERIOD_MS
    numcycles:      int = DEFAULT_NUM_CYCLES
    uncorrelated:   bool = False
    output:         Optional[str] = None


def build_config(opts: UserOptions) -> WaveformConfig:
    """
    Sanitise and validate user options.

    Raises:
        ConfigError: for anything that cannot be generated.
    """
    if not opts.waveform:
        raise ConfigError("A waveform type (-t) is required")
    waveform = WaveformType.parse(opts.waveform)

    # ── Sample format ────────────────────────────────────────────────────────
    bitdepth = int(opts.bitdepth)
    is_float = bitdepth == FLOAT_BITDEPTH_FLAG
    if is_float:
        bitdepth = FLOAT_BITS
        logger.debug("Floating-point format selected (FLOAT_LE).")
    else:
        logger.debug("Fixed-point format selected (%d-bit).", bitdepth)

    sample_rate = min(parse_frequency_hz(opts.rate), MAX_SAMPLE_RATE_HZ)
    channels    = min(int(opts.channels), MAX_CHANNELS)
    frequency   = parse_frequency_hz(opts.frequency)

    # ── Length ───────────────────────────────────────────────────────────────
    if opts.samples:
        num_samples = min(int(opts.samples), MAX_SAMPLES_PER_CHNL)
        duration_ms = num_samples * 1000 // max(sample_rate, 1)
    else:
        duration_ms = DEFAULT_DURATION_MS if opts.duration is None else parse_duration_ms(opts.duration)
        duration_ms = min(duration_ms, MAX_DURATION_MS)
        num_samples = samples_from_duration(duration_ms, sample_rate)

    # ── Level ────────────────────────────────────────────────────────────────
    gain = 1.0
    if opts.align is not None or opts.level is not None or opts.power is not None:
        align = min(float(opts.align or 0.0), MAX_ALIGN_LEVEL_DBFS)
        peak  = min(float(opts.level or 0.0), MAX_PEAK_LEVEL_DB)
        power = max(int(opts.power or 1), 1)
        gain  = gain_from_params(align, peak, power)

    # ── Burst ────────────────────────────────────────────────────────────────
    period_ms  = parse_duration_ms(opts.period)
    if duration_ms > 0:
        period_ms = min(period_ms, duration_ms)
    period_ms  = max(period_ms, 1)
    num_cycles = max(int(opts.numcycles), 1)

    config = WaveformConfig(
        waveform=waveform,
        sample_rate=sample_rate,
        bits_per_sample=bitdepth,
        num_channels=channels,
        num_samples=num_samples,
        is_float=is_float,
        frequency_hz=frequency,
        period_ms=period_ms,
        num_cycles=num_cycles,
        uncorrelated=bool(opts.uncorrelated),
        markers=parse_markers(opts.markers),
        gain=gain,
        output=opts.output,
    )
    return config.validate()
