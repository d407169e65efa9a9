#!/usr/bin/env python3
# =============================================================================
# validate.py — TSGE Self-Validation Suite
# =============================================================================
#
# Run directly:  python -m TSGE.SVM.validate
#
# Tests:
#   1. Constants integrity  — RIFF tags read as ASCII, filter/PRNG constants
#   2. Container            — header layout, payload size, fmt round-trip,
#                             fact chunk present for float only
#   3. Generators           — quantisation, saw ramp/wrap, steps, square,
#                             counter frame lock, noise determinism
#   4. Finalizer + markers  — known marker scenarios, gain clamp, 16/24-bit
#   5. Interop              — output opens in soundfile with matching fields
#
# Exit status is 1 if any check failed.
# =============================================================================

from __future__ import annotations
import io
import struct
import sys

import numpy as np
import soundfile as sf

from TSGE.SMM.constants import (
    RIFF_ID, WAVE_ID, FMT_ID, FACT_ID, DATA_ID, MAX_LEVEL,
    NOISE_MODULUS, PINK_TAPS,
)
from TSGE.SMM.levels import gain_from_params
from TSGE.SMM.model import GenerationState, MarkerConfig, WaveformConfig, WaveformType
from TSGE.SGM.generators import SawGenerator, create_generator
from TSGE.SGM.wavgen import render_wav
from .riff_reader import decode_samples, parse_wav

PASS = "[PASS]"
FAIL = "[FAIL]"
INFO = "[INFO]"

failures = 0


def check(label: str, condition: bool, detail: str = "") -> bool:
    global failures
    if condition:
        print(f"  {PASS} {label}")
    else:
        print(f"  {FAIL} {label}{(' -- ' + detail) if detail else ''}")
        failures += 1
    return condition


def _banner(title: str) -> None:
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


def _config(waveform: WaveformType, **kw) -> WaveformConfig:
    kw.setdefault("sample_rate", 48_000)
    kw.setdefault("bits_per_sample", 32)
    kw.setdefault("num_channels", 1)
    kw.setdefault("num_samples", 16)
    return WaveformConfig(waveform=waveform, **kw).validate()


def _words(config: WaveformConfig) -> list[int]:
    """Payload of a 32-bit run as unsigned words."""
    data = parse_wav(render_wav(config)).data
    return list(struct.unpack(f"<{len(data) // 4}I", data))


def _raw_values(config: WaveformConfig) -> list[int]:
    """Generator output for channel 0, before finalisation."""
    gen   = create_generator(config)
    state = GenerationState()
    out   = []
    for n in range(config.num_samples):
        state.sample_number = n
        state.channel = 0
        out.append(gen.generate(state))
    return out


# =============================================================================
# TEST 1 — Constants Integrity
# =============================================================================

def test_constants() -> None:
    _banner("TEST 1 — Constants Integrity")

    tags = {RIFF_ID: b"RIFF", WAVE_ID: b"WAVE", FMT_ID: b"fmt ",
            FACT_ID: b"fact", DATA_ID: b"data"}
    for value, text in tags.items():
        check(f"tag 0x{value:08X} packs as {text!r}",
              struct.pack(">I", value) == text)

    check("MAX_LEVEL = 2^31 - 1",        MAX_LEVEL == 2 ** 31 - 1)
    check("PRNG modulus = 2^31 - 1",     NOISE_MODULUS == 2 ** 31 - 1)
    check("Pink filter has 6 IIR taps",  len(PINK_TAPS) == 6)
    check("Pink poles are stable",       all(abs(p) < 1.0 for p, _ in PINK_TAPS))


# =============================================================================
# TEST 2 — Container
# =============================================================================

def test_container() -> None:
    _banner("TEST 2 — Container")

    for bits in (16, 24, 32):
        for channels in (1, 2, 6):
            cfg  = _config(WaveformType.SINE, bits_per_sample=bits,
                           num_channels=channels, num_samples=37)
            wav  = render_wav(cfg)
            info = parse_wav(wav)
            expected = 37 * channels * bits // 8
            check(f"{bits}-bit {channels}ch: payload {expected} bytes",
                  len(info.data) == expected == info.data_size,
                  f"data={len(info.data)} declared={info.data_size}")
            check(f"{bits}-bit {channels}ch: fmt round-trip",
                  (info.sample_rate, info.num_channels, info.bits_per_sample)
                  == (48_000, channels, bits))
            check(f"{bits}-bit {channels}ch: RIFF size = file - 8",
                  info.riff_size == len(wav) - 8)
            check(f"{bits}-bit {channels}ch: no fact chunk",
                  "fact" not in info.chunk_order)

    cfg  = _config(WaveformType.SINE, is_float=True, num_channels=2, num_samples=10)
    wav  = render_wav(cfg)
    info = parse_wav(wav)
    check("float: format tag 3",             info.audio_format == 3)
    check("float: chunk order fmt/fact/data", info.chunk_order == ["fmt ", "fact", "data"],
          f"got {info.chunk_order}")
    check("float: fact = samples per channel", info.fact_samples == 10)
    check("float: RIFF size = file - 8",     info.riff_size == len(wav) - 8)

    empty = parse_wav(render_wav(_config(WaveformType.SILENCE, num_samples=0)))
    check("zero samples: empty data chunk",  empty.data_size == 0 and empty.data == b"")


# =============================================================================
# TEST 3 — Generators
# =============================================================================

def test_generators() -> None:
    _banner("TEST 3 — Generators")

    # Nyquist request must still give a non-empty cycle.
    sq = _raw_values(_config(WaveformType.SQUARE, frequency_hz=24_000, num_samples=6))
    check("square at f = rate/2 alternates every sample",
          sq == [MAX_LEVEL, -MAX_LEVEL] * 3, f"got {sq}")

    sq = _raw_values(_config(WaveformType.SQUARE, frequency_hz=12_000, num_samples=8))
    check("square starts positive, half period 2",
          sq == [MAX_LEVEL, MAX_LEVEL, -MAX_LEVEL, -MAX_LEVEL] * 2, f"got {sq}")

    sine = _raw_values(_config(WaveformType.SINE, frequency_hz=12_000, num_samples=4))
    check("sine quarter-cycle points", sine == [0, MAX_LEVEL, 0, -MAX_LEVEL], f"got {sine}")

    cfg = _config(WaveformType.SAW, frequency_hz=1_000, num_samples=200)
    gen = SawGenerator(cfg)
    saw = _raw_values(cfg)
    ramps = all(
        b - a == gen.step_size or (a > gen.peak_level - gen.step_size and b == -gen.peak_level)
        for a, b in zip(saw, saw[1:])
    )
    check("saw: rises by step_size, wraps to -peak", ramps)
    check("saw: starts at zero", saw[0] == 0)
    check("saw: wrap lands on negative peak", -gen.peak_level in saw)

    steps = _raw_values(_config(WaveformType.STEPS, num_samples=10))
    s = MAX_LEVEL // 4
    check("steps: 0,s,2s,3s,4s repeating", steps == [0, s, 2 * s, 3 * s, 4 * s] * 2,
          f"got {steps}")

    cfg  = _config(WaveformType.COUNTER, num_channels=2, num_samples=5)
    info = parse_wav(render_wav(cfg))
    arr  = decode_samples(info)
    check("counter: channels identical within a frame",
          bool(np.all(arr[:, 0] == arr[:, 1])))
    check("counter: counts frames", arr[:, 0].tolist() == [0, 1, 2, 3, 4])

    w1 = render_wav(_config(WaveformType.WHITE, num_samples=64))
    w2 = render_wav(_config(WaveformType.WHITE, num_samples=64))
    check("white: reproducible between runs", w1 == w2)

    corr = decode_samples(parse_wav(render_wav(
        _config(WaveformType.PINK, num_channels=2, num_samples=32))))
    unc  = decode_samples(parse_wav(render_wav(
        _config(WaveformType.PINK, num_channels=2, num_samples=32, uncorrelated=True))))
    check("pink: correlated channels match", bool(np.all(corr[:, 0] == corr[:, 1])))
    check("pink: uncorrelated channels differ", bool(np.any(unc[:, 0] != unc[:, 1])))


# =============================================================================
# TEST 4 — Finalizer + Markers
# =============================================================================

def test_finalizer() -> None:
    _banner("TEST 4 — Finalizer + Markers")

    words = _words(_config(
        WaveformType.COUNTER, num_channels=2, num_samples=4,
        markers=MarkerConfig(enabled=True, in_msb=True),
    ))
    check("counter + top-byte markers",
          words[:4] == [0xC1000000, 0xC2000000, 0xC1000001, 0xC2000001],
          " ".join(f"{w:08X}" for w in words[:4]))

    words = _words(_config(
        WaveformType.SILENCE, num_samples=3, markers=MarkerConfig(enabled=True),
    ))
    check("silence + bottom-byte markers", words == [0xC1] * 3, f"got {words}")

    words = _words(_config(
        WaveformType.COUNTER, num_channels=2, num_samples=3,
        markers=MarkerConfig(enabled=True),
    ))
    check("counter + bottom-byte markers: byte 0 is the marker",
          [w & 0xFF for w in words] == [0xC1, 0xC2] * 3)
    check("counter + bottom-byte markers: count above the marker",
          [w >> 8 for w in words] == [0, 0, 1, 1, 2, 2])

    marked = render_wav(_config(
        WaveformType.SINE, frequency_hz=1_000, num_samples=48, markers=MarkerConfig(enabled=True),
    ))
    plain  = render_wav(_config(WaveformType.SINE, frequency_hz=1_000, num_samples=48))
    check("sine output unchanged by marker request", marked == plain)

    worst = max(
        gain_from_params(a, p, n)
        for a in (0.0, -6.0, -18.0)
        for p in (0.0, 6.0, 20.0)
        for n in (1, 2, 8)
    )
    check("gain never exceeds 1.0", worst <= 1.0, f"max {worst}")

    sq = decode_samples(parse_wav(render_wav(_config(
        WaveformType.SQUARE, frequency_hz=12_000, num_samples=4, gain=0.5,
    ))))
    check("square at gain 0.5 is half scale",
          sq[:, 0].tolist() == [MAX_LEVEL // 2 + 1, MAX_LEVEL // 2 + 1,
                                -(MAX_LEVEL // 2), -(MAX_LEVEL // 2)],
          f"got {sq[:, 0].tolist()}")

    c16 = decode_samples(parse_wav(render_wav(_config(
        WaveformType.COUNTER, bits_per_sample=16, num_samples=4))))
    check("16-bit counter counts LSBs", c16[:, 0].tolist() == [0, 1, 2, 3])
    c24 = decode_samples(parse_wav(render_wav(_config(
        WaveformType.COUNTER, bits_per_sample=24, num_samples=4))))
    check("24-bit counter counts LSBs", c24[:, 0].tolist() == [0, 1, 2, 3])

    fl = decode_samples(parse_wav(render_wav(_config(
        WaveformType.SQUARE, is_float=True, frequency_hz=24_000, num_samples=2))))
    check("float square is +/-1.0", fl[:, 0].tolist() == [1.0, -1.0])


# =============================================================================
# TEST 5 — Interop
# =============================================================================

def test_interop() -> None:
    _banner("TEST 5 — Interop (soundfile)")

    for bits, subtype in ((16, "PCM_16"), (24, "PCM_24"), (32, "PCM_32")):
        cfg = _config(WaveformType.SINE, bits_per_sample=bits, num_channels=2, num_samples=480)
        info = sf.info(io.BytesIO(render_wav(cfg)))
        check(f"soundfile reads {bits}-bit",
              (info.samplerate, info.channels, info.frames, info.subtype)
              == (48_000, 2, 480, subtype),
              f"{info.samplerate} {info.channels} {info.frames} {info.subtype}")

    cfg  = _config(WaveformType.SINE, is_float=True, frequency_hz=12_000, num_samples=480)
    data, sr = sf.read(io.BytesIO(render_wav(cfg)), always_2d=True)
    check("soundfile reads float, peak ~ 1.0", abs(float(np.max(np.abs(data))) - 1.0) < 1e-6)


def run_all() -> int:
    """Run every section; returns the number of failed checks."""
    global failures
    failures = 0

    test_constants()
    test_container()
    test_generators()
    test_finalizer()
    test_interop()

    print("\n" + "=" * 60)
    if failures:
        print(f"{FAIL} {failures} check(s) failed")
    else:
        print(f"{PASS} all checks passed")
    print("=" * 60)
    return failures


def main() -> None:
    sys.exit(1 if run_all() else 0)


if __name__ == "__main__":
    main()
