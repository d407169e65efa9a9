"""End-to-end tests for the generation loop in TSGE.SGM.wavgen."""
import io
import struct

import pytest

from TSGE.SMM.constants import MAX_LEVEL
from TSGE.SMM.errors import ConfigError, SinkWriteError
from TSGE.SMM.model import MarkerConfig, WaveformType
from TSGE.SGM.wavgen import generate, render_wav, write_wav
from TSGE.SVM.riff_reader import parse_wav


class _LimitedSink:
    """Fails once more than `limit` bytes have been written."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.data = bytearray()

    def write(self, buf):
        room = self.limit - len(self.data)
        if room <= 0:
            raise OSError("no space left on device")
        accepted = bytes(buf[:room])
        self.data += accepted
        return len(accepted)


def _words(wav: bytes) -> list:
    data = parse_wav(wav).data
    return list(struct.unpack(f"<{len(data) // 4}I", data))


# ─── known scenarios ─────────────────────────────────────────────

def test_counter_with_top_byte_markers(make_config) -> None:
    cfg = make_config(
        "counter", num_channels=2, num_samples=4,
        markers=MarkerConfig(enabled=True, in_msb=True),
    )
    words = _words(render_wav(cfg))
    assert words[:4] == [0xC1000000, 0xC2000000, 0xC1000001, 0xC2000001]
    assert words[4:] == [0xC1000002, 0xC2000002, 0xC1000003, 0xC2000003]


def test_silence_with_bottom_byte_markers(make_config) -> None:
    cfg = make_config("silence", num_samples=3, markers=MarkerConfig(enabled=True))
    assert _words(render_wav(cfg)) == [0xC1, 0xC1, 0xC1]


def test_counter_with_bottom_byte_markers(make_config) -> None:
    cfg = make_config("counter", num_channels=2, num_samples=3,
                      markers=MarkerConfig(enabled=True))
    assert _words(render_wav(cfg)) == [0xC1, 0xC2, 0x1C1, 0x1C2, 0x2C1, 0x2C2]


def test_16_bit_counter_with_bottom_byte_markers(make_config) -> None:
    cfg = make_config("counter", bits_per_sample=16, num_channels=2, num_samples=3,
                      markers=MarkerConfig(enabled=True))
    data = parse_wav(render_wav(cfg)).data
    assert struct.unpack("<6H", data) == (0x00C1, 0x00C2, 0x01C1, 0x01C2, 0x02C1, 0x02C2)


def test_24_bit_counter_with_top_byte_markers(make_config) -> None:
    cfg = make_config("counter", bits_per_sample=24, num_channels=2, num_samples=2,
                      markers=MarkerConfig(enabled=True, in_msb=True))
    data = parse_wav(render_wav(cfg)).data
    assert data == bytes.fromhex("0000c1 0000c2 0100c1 0100c2".replace(" ", ""))


def test_steps_with_top_byte_markers_keep_lower_bytes(make_config) -> None:
    cfg = make_config("steps", num_channels=2, num_samples=2,
                      markers=MarkerConfig(enabled=True, in_msb=True))
    words = _words(render_wav(cfg))
    s = MAX_LEVEL // 4
    assert [w & 0x00FFFFFF for w in words] == [0, 0, s & 0xFFFFFF, s & 0xFFFFFF]
    assert [w >> 24 for w in words] == [0xC1, 0xC2, 0xC1, 0xC2]


# ─── sizes ───────────────────────────────────────────────────────

@pytest.mark.parametrize("waveform", list(WaveformType))
@pytest.mark.parametrize("bits, is_float", [(16, False), (24, False), (32, False), (32, True)])
def test_payload_size_exact(make_config, waveform, bits, is_float) -> None:
    cfg = make_config(waveform, bits_per_sample=bits, is_float=is_float,
                      num_channels=3, num_samples=25)
    buf = io.BytesIO()
    report = generate(cfg, buf)
    info = parse_wav(buf.getvalue())

    expected = 25 * 3 * bits // 8
    assert report.data_bytes == expected
    assert info.data_size == expected
    assert len(info.data) == expected
    assert report.samples_written == 75
    assert report.header_bytes + report.data_bytes == len(buf.getvalue())


def test_zero_samples_writes_headers_only(make_config) -> None:
    wav = render_wav(make_config("sine", num_samples=0))
    assert len(wav) == 44
    assert parse_wav(wav).data_size == 0


def test_fmt_round_trip(make_config) -> None:
    cfg = make_config("sine", sample_rate=44_100, bits_per_sample=24, num_channels=6,
                      frequency_hz=1_000)
    info = parse_wav(render_wav(cfg))
    assert (info.sample_rate, info.num_channels, info.bits_per_sample) == (44_100, 6, 24)
    assert info.block_align == 18
    assert info.byte_rate == 44_100 * 18


def test_report_duration_is_approximate(make_config) -> None:
    report = generate(make_config("silence", num_samples=4_799), io.BytesIO())
    assert report.duration_ms == 99


def test_runs_are_independent(make_config) -> None:
    cfg = make_config("pink", num_channels=2, num_samples=50, uncorrelated=True)
    assert render_wav(cfg) == render_wav(cfg)


# ─── failures ────────────────────────────────────────────────────

def test_rejected_config_writes_nothing(make_config) -> None:
    buf = io.BytesIO()
    with pytest.raises(ConfigError):
        generate(make_config("sine", bits_per_sample=8), buf)
    assert buf.getvalue() == b""


def test_msb_markers_on_sine_rejected(make_config) -> None:
    cfg = make_config("sine", markers=MarkerConfig(enabled=True, in_msb=True))
    with pytest.raises(ConfigError, match="MSB"):
        render_wav(cfg)


def test_write_failure_aborts_mid_run(make_config) -> None:
    sink = _LimitedSink(limit=44 + 10 * 4)
    with pytest.raises(SinkWriteError):
        generate(make_config("counter", num_samples=100), sink)
    # Bytes already written are left in place.
    assert len(sink.data) == 44 + 10 * 4


def test_short_write_in_header_aborts(make_config) -> None:
    sink = _LimitedSink(limit=20)
    with pytest.raises(SinkWriteError):
        generate(make_config("counter", num_samples=100), sink)


# ─── write_wav ───────────────────────────────────────────────────

def test_write_wav_to_path(make_config, tmp_path) -> None:
    path = tmp_path / "out.wav"
    cfg = make_config("sine", num_samples=480)
    report = write_wav(cfg, str(path))
    assert path.read_bytes() == render_wav(cfg)
    assert report.data_bytes == 480 * 4


def test_write_wav_to_pathlike(make_config, tmp_path) -> None:
    path = tmp_path / "out.wav"
    write_wav(make_config("steps", num_samples=10), path)
    assert parse_wav(path.read_bytes()).data_size == 40


def test_write_wav_to_stream_leaves_it_open(make_config) -> None:
    buf = io.BytesIO()
    write_wav(make_config("silence", num_samples=5), buf)
    assert not buf.closed
    assert len(buf.getvalue()) == 44 + 20
