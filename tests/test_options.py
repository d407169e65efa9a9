"""Tests for option sanitising in TSGE.SMM.options."""
import pytest

from TSGE.SMM.constants import MAX_LEVEL, MAX_SAMPLES_PER_CHNL
from TSGE.SMM.errors import ConfigError
from TSGE.SMM.model import MarkerConfig, WaveformConfig, WaveformType, to_int32
from TSGE.SMM.options import (
    UserOptions,
    build_config,
    parse_duration_ms,
    parse_frequency_hz,
    parse_markers,
)


# ─── unit parsing ────────────────────────────────────────────────

@pytest.mark.parametrize("text, ms", [
    ("250", 250), ("250ms", 250), ("2s", 2_000), ("1m", 60_000),
    ("1h", 3_600_000), (" 5 S ", 5_000), (750, 750),
])
def test_parse_duration(text, ms) -> None:
    assert parse_duration_ms(text) == ms


@pytest.mark.parametrize("text", ["", "abc", "5x", "-1", "1.5s"])
def test_parse_duration_rejects(text) -> None:
    with pytest.raises(ConfigError):
        parse_duration_ms(text)


@pytest.mark.parametrize("text, hz", [
    ("440", 440), ("440Hz", 440), ("1k", 1_000), ("96kHz", 96_000), (48_000, 48_000),
])
def test_parse_frequency(text, hz) -> None:
    assert parse_frequency_hz(text) == hz


def test_parse_frequency_rejects_unknown_units() -> None:
    with pytest.raises(ConfigError):
        parse_frequency_hz("1MHz")


@pytest.mark.parametrize("position, expected", [
    (None, MarkerConfig()),
    ("", MarkerConfig()),
    ("  ", MarkerConfig()),
    ("msb", MarkerConfig(True, True)),
    ("tb", MarkerConfig(True, True)),
    ("lsb", MarkerConfig(True, False)),
    ("bb", MarkerConfig(True, False)),
])
def test_parse_markers(position, expected) -> None:
    assert parse_markers(position) == expected


# ─── waveform names ──────────────────────────────────────────────

@pytest.mark.parametrize("name, waveform", [
    ("sine", WaveformType.SINE), ("sinewave", WaveformType.SINE),
    ("sawtooth", WaveformType.SAW), ("step", WaveformType.STEPS),
    ("count", WaveformType.COUNTER), ("SquareWave", WaveformType.SQUARE),
])
def test_waveform_aliases(name, waveform) -> None:
    assert WaveformType.parse(name) is waveform


def test_unknown_waveform() -> None:
    with pytest.raises(ConfigError, match="Unknown waveform"):
        WaveformType.parse("triangle")


# ─── build_config ────────────────────────────────────────────────

class TestBuildConfig:
    def test_defaults(self) -> None:
        cfg = build_config(UserOptions(waveform="sine"))
        assert cfg.sample_rate == 48_000
        assert cfg.bits_per_sample == 32
        assert cfg.num_channels == 1
        assert cfg.num_samples == 48_000
        assert cfg.frequency_hz == 440
        assert cfg.gain == 1.0
        assert not cfg.is_float

    def test_waveform_required(self) -> None:
        with pytest.raises(ConfigError):
            build_config(UserOptions())

    def test_float_selected_by_zero_bitdepth(self) -> None:
        cfg = build_config(UserOptions(waveform="sine", bitdepth=0))
        assert cfg.is_float
        assert cfg.bits_per_sample == 32

    @pytest.mark.parametrize("bits", [8, 12, 20, 64])
    def test_unsupported_bitdepth_rejected(self, bits) -> None:
        with pytest.raises(ConfigError, match="bit-width"):
            build_config(UserOptions(waveform="sine", bitdepth=bits))

    def test_rate_and_channels_clamped(self) -> None:
        cfg = build_config(UserOptions(waveform="silence", rate="400k", channels=12,
                                       samples=10))
        assert cfg.sample_rate == 192_000
        assert cfg.num_channels == 8

    def test_samples_win_over_duration(self) -> None:
        cfg = build_config(UserOptions(waveform="sine", samples=100, duration="5s"))
        assert cfg.num_samples == 100
        assert cfg.duration_ms == 2

    def test_duration_with_units(self) -> None:
        cfg = build_config(UserOptions(waveform="sine", duration="250ms", rate=44_100))
        assert cfg.num_samples == 11_025

    def test_duration_clamped_to_ten_minutes(self) -> None:
        cfg = build_config(UserOptions(waveform="silence", duration="2h", rate=8_000))
        assert cfg.num_samples == 600 * 8_000

    def test_samples_clamped(self) -> None:
        opts = UserOptions(waveform="silence", samples=MAX_SAMPLES_PER_CHNL + 5, rate=192_000)
        assert build_config(opts).num_samples == MAX_SAMPLES_PER_CHNL

    def test_frequency_above_nyquist_rejected(self) -> None:
        with pytest.raises(ConfigError, match="Frequency"):
            build_config(UserOptions(waveform="sine", rate=8_000, frequency=5_000))

    def test_zero_frequency_rejected(self) -> None:
        with pytest.raises(ConfigError, match="Frequency"):
            build_config(UserOptions(waveform="sine", frequency=0))

    def test_nyquist_accepted(self) -> None:
        cfg = build_config(UserOptions(waveform="square", rate=8_000, frequency="4k"))
        assert cfg.frequency_hz == 4_000

    def test_gain_from_level(self) -> None:
        cfg = build_config(UserOptions(waveform="sine", level=-6.0206))
        assert cfg.gain == pytest.approx(0.5, abs=1e-4)

    def test_alignment_clamped_to_zero(self) -> None:
        cfg = build_config(UserOptions(waveform="sine", align=12.0))
        assert cfg.gain == 1.0

    def test_power_fraction(self) -> None:
        cfg = build_config(UserOptions(waveform="pink", power=8))
        assert cfg.gain == pytest.approx(8 ** -0.5)

    def test_burst_period_shortened_to_duration(self) -> None:
        cfg = build_config(UserOptions(waveform="burst", duration=50, period=100))
        assert cfg.period_ms == 50

    def test_burst_cycles_at_least_one(self) -> None:
        cfg = build_config(UserOptions(waveform="burst", numcycles=0))
        assert cfg.num_cycles == 1

    @pytest.mark.parametrize("waveform", ["saw", "sine", "square", "burst", "pink", "white"])
    def test_msb_markers_rejected_for_audio(self, waveform) -> None:
        with pytest.raises(ConfigError, match="MSB"):
            build_config(UserOptions(waveform=waveform, markers="msb"))

    @pytest.mark.parametrize("waveform", ["counter", "silence", "steps"])
    def test_msb_markers_accepted_for_non_audio(self, waveform) -> None:
        cfg = build_config(UserOptions(waveform=waveform, markers="msb"))
        assert cfg.markers == MarkerConfig(True, True)

    def test_lsb_markers_accepted_for_noise(self) -> None:
        cfg = build_config(UserOptions(waveform="pink", markers="lsb", uncorrelated=True))
        assert cfg.markers == MarkerConfig(True, False)
        assert cfg.uncorrelated


# ─── WaveformConfig ──────────────────────────────────────────────

class TestWaveformConfig:
    def test_derived_sizes(self) -> None:
        cfg = WaveformConfig(WaveformType.SINE, 48_000, 24, 2, 100)
        assert cfg.bytes_per_sample == 3
        assert cfg.block_align == 6
        assert cfg.byte_rate == 288_000
        assert cfg.num_data_bytes == 600
        assert cfg.riff_size == 36 + 600

    def test_float_riff_size_includes_fact(self) -> None:
        cfg = WaveformConfig(WaveformType.SINE, 48_000, 32, 1, 10, is_float=True)
        assert cfg.riff_size == 36 + 12 + 40

    def test_validate_returns_self(self) -> None:
        cfg = WaveformConfig(WaveformType.SINE, 48_000, 16, 1, 10)
        assert cfg.validate() is cfg

    @pytest.mark.parametrize("kw", [
        {"sample_rate": 0}, {"sample_rate": 200_000}, {"num_channels": 0},
        {"num_channels": 9}, {"num_samples": -1}, {"period_ms": 0}, {"num_cycles": 0},
        {"is_float": True, "bits_per_sample": 16},
        {"num_channels": 8, "num_samples": 200_000_000},
    ])
    def test_validate_rejects(self, kw) -> None:
        base = dict(waveform=WaveformType.SINE, sample_rate=48_000, bits_per_sample=32,
                    num_channels=1, num_samples=10)
        base.update(kw)
        with pytest.raises(ConfigError):
            WaveformConfig(**base).validate()

    def test_frozen(self) -> None:
        cfg = WaveformConfig(WaveformType.SINE, 48_000, 16, 1, 10)
        with pytest.raises(AttributeError):
            cfg.num_channels = 2


def test_to_int32_wraps() -> None:
    assert to_int32(MAX_LEVEL + 1) == -0x80000000
    assert to_int32(0xFFFFFFFF) == -1
    assert to_int32(-1) == -1
