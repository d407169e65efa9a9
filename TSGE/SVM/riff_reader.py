# =============================================================================
# riff_reader.py — RIFF/WAVE parser
# =============================================================================
#
# Inverse of SGM/riff.py.  Walks the chunk list of a WAV byte string and
# returns every header field exactly as stored, plus the raw payload, so
# generated files can be checked field-by-field.
#
# Supports what TSGE writes (PCM 16/24/32, IEEE float 32 with "fact") and
# skips any chunk it does not know.
# =============================================================================

from __future__ import annotations
import io
import struct
from typing import NamedTuple, Optional

import numpy as np

from TSGE.SMM.constants import WAVE_FORMAT_IEEE_FLOAT


class WavInfo(NamedTuple):
    riff_size:       int
    audio_format:    int
    num_channels:    int
    sample_rate:     int
    byte_rate:       int
    block_align:     int
    bits_per_sample: int
    fact_samples:    Optional[int]     # None when there is no fact chunk
    data_size:       int               # as declared in the data header
    data:            bytes             # payload actually present
    chunk_order:     list[str]

    @property
    def is_float(self) -> bool:
        return self.audio_format == WAVE_FORMAT_IEEE_FLOAT

    @property
    def num_frames(self) -> int:
        return len(self.data) // max(self.block_align, 1)


def parse_wav(wav_bytes: bytes) -> WavInfo:
    """
    Parse a WAV file held in memory.

    Raises:
        ValueError: not RIFF/WAVE, or missing fmt/data chunk.
    """
    f = io.BytesIO(wav_bytes)

    if f.read(4) != b"RIFF":
        raise ValueError("Not a RIFF file")
    riff_size = struct.unpack("<I", f.read(4))[0]
    if f.read(4) != b"WAVE":
        raise ValueError("RIFF type is not WAVE")

    fmt          = None
    fact_samples = None
    data_size    = None
    data         = b""
    order: list[str] = []

    while f.tell() <= len(wav_bytes) - 8:
        chunk_id    = f.read(4)
        chunk_size  = struct.unpack("<I", f.read(4))[0]
        chunk_start = f.tell()
        order.append(chunk_id.decode("ascii", errors="replace"))

        if chunk_id == b"fmt ":
            fmt = struct.unpack("<HHIIHH", f.read(16))
            f.seek(chunk_start + chunk_size)
        elif chunk_id == b"fact":
            fact_samples = struct.unpack("<I", f.read(4))[0]
            f.seek(chunk_start + chunk_size)
        elif chunk_id == b"data":
            data_size = chunk_size
            data = f.read(chunk_size)
            break
        else:
            # RIFF chunks are word-aligned.
            f.seek(chunk_start + chunk_size + (chunk_size & 1))

    if fmt is None or data_size is None:
        raise ValueError("Could not find fmt or data chunk in WAV")

    audio_format, num_channels, sample_rate, byte_rate, block_align, bits = fmt
    return WavInfo(
        riff_size=riff_size,
        audio_format=audio_format,
        num_channels=num_channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits,
        fact_samples=fact_samples,
        data_size=data_size,
        data=data,
        chunk_order=order,
    )


def decode_samples(info: WavInfo) -> np.ndarray:
    """
    De-interleave the payload into a (frames, channels) array.

    dtype: float32 for IEEE float, int16 for 16-bit, int32 for 24/32-bit
    (24-bit words are sign-extended, not rescaled).
    """
    n_frames = info.num_frames
    payload  = info.data[: n_frames * info.block_align]

    if info.is_float:
        flat = np.frombuffer(payload, dtype="<f4")
    elif info.bits_per_sample == 16:
        flat = np.frombuffer(payload, dtype="<i2")
    elif info.bits_per_sample == 32:
        flat = np.frombuffer(payload, dtype="<i4")
    elif info.bits_per_sample == 24:
        raw  = np.frombuffer(payload, dtype=np.uint8).reshape(-1, 3).astype(np.int32)
        flat = raw[:, 0] | (raw[:, 1] << 8) | (raw[:, 2] << 16)
        flat = np.where(flat >= 0x800000, flat - 0x1000000, flat).astype(np.int32)
    else:
        raise ValueError(f"Unsupported bit depth: {info.bits_per_sample}")

    return flat.reshape(n_frames, info.num_channels)
