#!/usr/bin/env python3
# =============================================================================
# analyze.py — Per-channel level report for a WAV file
# =============================================================================
#
# Usage:
#   python -m TSGE.SVM.analyze out.wav
#   python -m TSGE.SVM.analyze out.wav --raw       (TSGE's own RIFF reader)
#
# Reports, per channel:
#   peak   — max |x| relative to full scale, and in dBFS
#   rms    — root mean square, and in dBFS
#   dc     — mean value (a symmetric waveform should sit at ~0)
#
# By default the file is read with soundfile, which also proves the output
# opens in a third-party reader.  --raw decodes with riff_reader instead and
# additionally prints the stored header fields.
# =============================================================================

from __future__ import annotations
import argparse
import sys
from typing import NamedTuple

import numpy as np
import soundfile as sf

from .riff_reader import WavInfo, decode_samples, parse_wav


class ChannelStats(NamedTuple):
    channel:   int                       # 0-based
    peak:      float                     # fraction of full scale
    rms:       float
    dc:        float
    peak_dbfs: float
    rms_dbfs:  float


def _dbfs(x: float) -> float:
    return 20.0 * float(np.log10(x)) if x > 0.0 else float("-inf")


def full_scale_for(info: WavInfo) -> float:
    """Value that represents 0 dBFS in the decoded integer/float array."""
    if info.is_float:
        return 1.0
    # decode_samples() leaves 24-bit words unscaled in int32.
    return float(2 ** (info.bits_per_sample - 1))


def analyze_samples(data: np.ndarray, full_scale: float = 1.0) -> list[ChannelStats]:
    """
    Args:
        data:       (frames, channels) array, any numeric dtype.
        full_scale: value of a 0 dBFS sample in `data`.
    """
    x = np.asarray(data, dtype=np.float64) / full_scale
    if x.ndim == 1:
        x = x[:, np.newaxis]

    stats = []
    for ch in range(x.shape[1]):
        col = x[:, ch]
        if col.size == 0:
            peak = rms = dc = 0.0
        else:
            peak = float(np.max(np.abs(col)))
            rms  = float(np.sqrt(np.mean(col ** 2)))
            dc   = float(np.mean(col))
        stats.append(ChannelStats(ch, peak, rms, dc, _dbfs(peak), _dbfs(rms)))
    return stats


def analyze_file(path: str) -> tuple[int, list[ChannelStats]]:
    """Read `path` with soundfile.  Returns (sample_rate, stats)."""
    data, sr = sf.read(path, always_2d=True)
    return sr, analyze_samples(data, 1.0)


def analyze_wav_bytes(wav_bytes: bytes) -> tuple[WavInfo, list[ChannelStats]]:
    """Decode with riff_reader (no third-party reader involved)."""
    info = parse_wav(wav_bytes)
    return info, analyze_samples(decode_samples(info), full_scale_for(info))


def _print_stats(stats: list[ChannelStats]) -> None:
    for s in stats:
        print(
            f"  Ch{s.channel}: peak={s.peak:.4f} ({s.peak_dbfs:6.2f} dBFS)  "
            f"rms={s.rms:.4f} ({s.rms_dbfs:6.2f} dBFS)  dc={s.dc:+.5f}"
        )


def main() -> None:
    parser = argparse.ArgumentParser(
        description="TSGE per-channel level report",
    )
    parser.add_argument("wav", help="Path to WAV file")
    parser.add_argument(
        "--raw", action="store_true",
        help="Decode with the built-in RIFF reader and show header fields",
    )
    args = parser.parse_args()

    print("=" * 60)
    print(f"File        : {args.wav}")

    if args.raw:
        with open(args.wav, "rb") as f:
            info, stats = analyze_wav_bytes(f.read())
        print(f"Format      : {'IEEE float' if info.is_float else 'PCM'} "
              f"{info.bits_per_sample}-bit")
        print(f"Sample rate : {info.sample_rate} Hz")
        print(f"Channels    : {info.num_channels}")
        print(f"Frames      : {info.num_frames}")
        print(f"Chunks      : {' '.join(info.chunk_order)}")
        if info.data_size != len(info.data):
            print(f"  [WARN] data chunk declares {info.data_size} bytes, "
                  f"{len(info.data)} present")
    else:
        sr, stats = analyze_file(args.wav)
        print(f"Sample rate : {sr} Hz")
        print(f"Channels    : {len(stats)}")

    print("=" * 60)
    _print_stats(stats)
    sys.exit(0)


if __name__ == "__main__":
    main()
