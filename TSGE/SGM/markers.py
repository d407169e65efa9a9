# =============================================================================
# markers.py — Channel markers
# =============================================================================
#
# Stamps a per-channel tag into one byte of each sample so that mixed-up or
# mis-interleaved multi-channel streams can be diagnosed from a hex dump:
#
#   marker = 0xC0 + (channel + 1)      → C1, C2, ... C8
#
# The marker REPLACES the chosen byte of the output word:
#   top byte    (msb) — bits 24..31 of the 32-bit sample, which is the top
#                       byte of every narrowed word too
#   bottom byte (lsb) — the lowest byte that survives narrowing to the
#                       output word size (bit 0 for 32-bit, bit 8 for 24-bit,
#                       bit 16 for 16-bit)
#
# Markers are never added to float output, nor to symmetric audio waveforms
# (saw, sine, square, burst) where they would destroy level and symmetry.
# =============================================================================

from __future__ import annotations

from TSGE.SMM.constants import MARKER_BASE, UINT32_MASK
from TSGE.SMM.model import MARKER_TYPES, WaveformConfig, to_int32


def marker_value(channel: int) -> int:
    return MARKER_BASE + channel + 1


def marker_shift(in_msb: bool, bits_per_sample: int = 32) -> int:
    """Bit offset of the marker byte inside the 32-bit sample."""
    return 24 if in_msb else 32 - bits_per_sample


def add_marker(value: int, channel: int, in_msb: bool, bits_per_sample: int = 32) -> int:
    """Overwrite one byte of `value` with the marker for `channel`."""
    shift = marker_shift(in_msb, bits_per_sample)
    word  = value & UINT32_MASK
    word &= ~(0xFF << shift) & UINT32_MASK
    word |= marker_value(channel) << shift
    return to_int32(word)


def markers_permitted(config: WaveformConfig) -> bool:
    """True if markers were asked for and this waveform/format may carry them."""
    return (
        config.markers.enabled
        and config.waveform in MARKER_TYPES
        and not config.is_float
    )
