# =============================================================================
# finalizer.py — Sample finalisation pipeline
# =============================================================================
#
# Turns one raw int32 generator sample into output bytes.  The stage order is
# fixed and load-bearing:
#
#   1. Level     — gain scaling, audio waveforms only, skipped near unity
#   2. Format    — int32 → float32 normalised by MAX_LEVEL (float output)
#   3. Markers   — byte overwrite, marker-capable types, integer output only
#   4. Narrowing — float32 / int32 verbatim / int24 / int16 (upper bits)
#
# Level must precede markers (gain would corrupt them) and format must
# precede markers (markers are only stamped into integer words).
# Narrowing truncates; there is no dithering.
# =============================================================================

from __future__ import annotations
import struct
from typing import BinaryIO

from TSGE.SMM.constants import GAIN_UNITY_TOLERANCE, MAX_LEVEL
from TSGE.SMM.errors import SinkWriteError, UnsupportedNarrowingError
from TSGE.SMM.model import LEVEL_TYPES, GenerationState, Sample, WaveformConfig
from .base import nearest_int
from .markers import add_marker, markers_permitted

_FLOAT32 = struct.Struct("<f")
_INT32   = struct.Struct("<i")
_INT16   = struct.Struct("<h")


def scale_level(sample: Sample, gain: float) -> Sample:
    """Apply `gain` in double precision; a gain within tolerance of 1.0 is a no-op."""
    if abs(gain - 1.0) <= GAIN_UNITY_TOLERANCE:
        return sample
    return Sample(nearest_int(sample.value * gain))


def to_float(sample: Sample) -> Sample:
    """int32 → float in [-1.0, 1.0]."""
    if sample.is_float:
        return sample
    return Sample(float(sample.value) / MAX_LEVEL, is_float=True)


def narrow(sample: Sample, bits_per_sample: int) -> bytes:
    """
    Serialise one finalised sample.

    Raises:
        UnsupportedNarrowingError: for integer widths other than 16/24/32.
    """
    if sample.is_float:
        return _FLOAT32.pack(sample.value)

    value = sample.value
    if bits_per_sample == 32:
        return _INT32.pack(value)
    if bits_per_sample == 24:
        return ((value >> 8) & 0xFFFFFF).to_bytes(3, "little")
    if bits_per_sample == 16:
        return _INT16.pack(value >> 16)

    raise UnsupportedNarrowingError(f"{bits_per_sample}-bit integer output is not supported")


class SampleFinalizer:
    """
    Per-run finaliser.  Decides once which stages apply to the configured
    waveform/format, then runs them for every sample.
    """

    def __init__(self, config: WaveformConfig) -> None:
        self.config      = config
        self.apply_level = config.waveform in LEVEL_TYPES
        self.to_float    = config.is_float
        self.add_markers = markers_permitted(config)

    def finalise(self, state: GenerationState) -> bytes:
        """Run stages 1-4 on state.sample; stores the finalised sample back."""
        sample = state.sample

        if self.apply_level:
            sample = scale_level(sample, state.gain)

        if self.to_float:
            sample = to_float(sample)

        if self.add_markers:
            sample = Sample(add_marker(
                sample.value, state.channel,
                self.config.markers.in_msb, self.config.bits_per_sample,
            ))

        state.sample = sample
        return narrow(sample, self.config.bits_per_sample)

    def write(self, state: GenerationState, sink: BinaryIO) -> int:
        """
        Finalise and write one sample word.

        Raises:
            SinkWriteError: on a short write or an OSError from the sink.
        """
        return write_all(sink, self.finalise(state))


def write_all(sink: BinaryIO, buf: bytes) -> int:
    """Write `buf` to `sink`; anything less than a full write is fatal."""
    try:
        written = sink.write(buf)
    except OSError as exc:
        raise SinkWriteError(f"Write of {len(buf)} bytes failed: {exc}") from exc

    # Raw (unbuffered) streams may report a short write; None = would block.
    if written is None:
        raise SinkWriteError(f"Sink would block; 0 of {len(buf)} bytes written")
    if written != len(buf):
        raise SinkWriteError(f"Short write: {written} of {len(buf)} bytes")
    return written
