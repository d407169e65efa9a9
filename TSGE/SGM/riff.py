# =============================================================================
# riff.py — RIFF/WAVE container writer
# =============================================================================
#
# Builds the four header structures that precede the sample payload:
#
#   RIFF header   "RIFF" <size> "WAVE"
#   fmt  chunk    "fmt " <16> <tag> <channels> <rate> <byte rate>
#                 <block align> <bits>
#   fact chunk    "fact" <4> <samples per channel>     (float output ONLY)
#   data header   "data" <payload bytes>
#
# Chunk identifiers are packed BIG-ENDIAN from their numeric tags so they
# read as ASCII in a hex dump; every other field is LITTLE-ENDIAN.
#
# Sizes are computed from the FINAL payload size before anything is written;
# headers are never patched afterwards, so the per-channel sample count must
# be known up front.
#
# Reference layout (32-bit PCM, 2 channels, 48 kHz, 4 samples/channel):
#   52 49 46 46 44 00 00 00  57 41 56 45 66 6d 74 20   RIFFD...WAVEfmt
#   10 00 00 00 01 00 02 00  80 bb 00 00 00 dc 05 00   ................
#   08 00 20 00 64 61 74 61  20 00 00 00               .. .data ...
# =============================================================================

from __future__ import annotations
import struct
from typing import BinaryIO, NamedTuple, Optional

from TSGE.SMM.constants import (
    RIFF_ID, WAVE_ID, FMT_ID, FACT_ID, DATA_ID,
    WAVE_FORMAT_PCM, WAVE_FORMAT_IEEE_FLOAT,
    FMT_BODY_SIZE, FACT_BODY_SIZE,
)
from TSGE.SMM.model import WaveformConfig
from .finalizer import write_all

_TAG = struct.Struct(">I")


def _tag(chunk_id: int) -> bytes:
    return _TAG.pack(chunk_id)


class RiffHeader(NamedTuple):
    chunk_size: int                      # everything after this field

    def pack(self) -> bytes:
        return _tag(RIFF_ID) + struct.pack("<I", self.chunk_size) + _tag(WAVE_ID)


class FormatChunk(NamedTuple):
    audio_format:    int                 # 1 = PCM, 3 = IEEE float
    num_channels:    int
    sample_rate:     int
    byte_rate:       int
    block_align:     int
    bits_per_sample: int

    def pack(self) -> bytes:
        return _tag(FMT_ID) + struct.pack(
            "<IHHIIHH",
            FMT_BODY_SIZE,
            self.audio_format,
            self.num_channels,
            self.sample_rate,
            self.byte_rate,
            self.block_align,
            self.bits_per_sample,
        )


class FactChunk(NamedTuple):
    num_samples: int                     # per channel

    def pack(self) -> bytes:
        return _tag(FACT_ID) + struct.pack("<II", FACT_BODY_SIZE, self.num_samples)


class DataChunkHeader(NamedTuple):
    chunk_size: int                      # payload bytes

    def pack(self) -> bytes:
        return _tag(DATA_ID) + struct.pack("<I", self.chunk_size)


class WaveHeaders(NamedTuple):
    riff: RiffHeader
    fmt:  FormatChunk
    fact: Optional[FactChunk]
    data: DataChunkHeader

    def pack(self) -> bytes:
        parts = [self.riff.pack(), self.fmt.pack()]
        if self.fact is not None:
            parts.append(self.fact.pack())
        parts.append(self.data.pack())
        return b"".join(parts)


def build_headers(config: WaveformConfig) -> WaveHeaders:
    """All container structures for `config`, sized from the final payload."""
    fmt = FormatChunk(
        audio_format=WAVE_FORMAT_IEEE_FLOAT if config.is_float else WAVE_FORMAT_PCM,
        num_channels=config.num_channels,
        sample_rate=config.sample_rate,
        byte_rate=config.byte_rate,
        block_align=config.block_align,
        bits_per_sample=config.bits_per_sample,
    )
    return WaveHeaders(
        riff=RiffHeader(config.riff_size),
        fmt=fmt,
        fact=FactChunk(config.num_samples) if config.is_float else None,
        data=DataChunkHeader(config.num_data_bytes),
    )


def write_headers(config: WaveformConfig, sink: BinaryIO) -> int:
    """
    Write every header structure, in order, ahead of the payload.

    Returns:
        Number of header bytes written.

    Raises:
        SinkWriteError: on any short write.
    """
    headers = build_headers(config)
    written = 0
    for chunk in (headers.riff, headers.fmt, headers.fact, headers.data):
        if chunk is not None:
            written += write_all(sink, chunk.pack())
    return written
