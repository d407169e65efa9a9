"""Tests for the command line front end in TSGE.cli."""
import io
import struct

import pytest

from TSGE import __version__
from TSGE.cli import GENERAL_HELP, TYPE_HELP, UNKNOWN_TYPE_HELP, run, type_help
from TSGE.SMM.model import WaveformType
from TSGE.SVM.riff_reader import parse_wav


class _Stdout:
    """Stand-in for sys.stdout with a binary buffer and a fixed isatty()."""

    def __init__(self, tty: bool) -> None:
        self.tty = tty
        self.buffer = io.BytesIO()
        self.text = io.StringIO()

    def isatty(self) -> bool:
        return self.tty

    def write(self, s: str) -> int:
        return self.text.write(s)

    def flush(self) -> None:
        pass


@pytest.fixture
def terminal():
    return _Stdout(tty=True)


@pytest.fixture
def pipe():
    return _Stdout(tty=False)


# ─── files ───────────────────────────────────────────────────────

def test_counter_check_file(tmp_path, terminal) -> None:
    path = tmp_path / "check.wav"
    rc = run(["-b", "32", "-c", "2", "-s", "4", "-t", "counter", "-m", "msb", str(path)],
             stdout=terminal)
    assert rc == 0

    info = parse_wav(path.read_bytes())
    assert (info.sample_rate, info.num_channels, info.bits_per_sample) == (48_000, 2, 32)
    words = struct.unpack("<8I", info.data)
    assert words[:4] == (0xC1000000, 0xC2000000, 0xC1000001, 0xC2000001)


def test_long_options(tmp_path, terminal) -> None:
    path = tmp_path / "burst.wav"
    rc = run([
        "--type", "burst", "--channels", "2", "--duration", "1s", "--period", "100",
        "--numcycles", "2", "--frequency", "1k", "--rate", "44100",
        "--bitdepth", "16", "--level", "-6", str(path),
    ], stdout=terminal)
    assert rc == 0
    info = parse_wav(path.read_bytes())
    assert info.sample_rate == 44_100
    assert info.num_frames == 44_100


def test_float_output(tmp_path, terminal) -> None:
    path = tmp_path / "silence.wav"
    assert run(["-t", "silence", "-b", "0", "-s", "10", str(path)], stdout=terminal) == 0
    info = parse_wav(path.read_bytes())
    assert info.is_float
    assert info.fact_samples == 10


def test_uncorrelated_noise(tmp_path, terminal) -> None:
    path = tmp_path / "pink.wav"
    argv = ["-t", "pink", "-c", "2", "-s", "64", "-u", "-w", "8", str(path)]
    assert run(argv, stdout=terminal) == 0


# ─── piping ──────────────────────────────────────────────────────

def test_pipes_to_stdout_without_filename(pipe) -> None:
    assert run(["-t", "silence", "-s", "3", "-m", "lsb"], stdout=pipe) == 0
    info = parse_wav(pipe.buffer.getvalue())
    assert struct.unpack("<3I", info.data) == (0xC1, 0xC1, 0xC1)


def test_filename_required_on_terminal(terminal) -> None:
    assert run(["-t", "sine"], stdout=terminal) == 1
    assert terminal.buffer.getvalue() == b""


# ─── rejected input ──────────────────────────────────────────────

def test_missing_type(tmp_path, terminal) -> None:
    assert run([str(tmp_path / "out.wav")], stdout=terminal) == 1


def test_short_filename(terminal) -> None:
    assert run(["-t", "sine", "a.wv"], stdout=terminal) == 1


@pytest.mark.parametrize("argv", [
    ["-t", "sine", "-b", "8"],
    ["-t", "sine", "-m", "msb"],
    ["-t", "sine", "-r", "8000", "-f", "5000"],
    ["-t", "triangle"],
    ["-t", "sine", "-c", "two"],
    ["-t", "sine", "--no-such-option"],
])
def test_bad_options_exit_1(tmp_path, terminal, argv) -> None:
    path = tmp_path / "out.wav"
    assert run(argv + [str(path)], stdout=terminal) == 1
    assert not path.exists()


def test_unwritable_path(tmp_path, terminal) -> None:
    path = tmp_path / "missing" / "out.wav"
    assert run(["-t", "sine", "-s", "4", str(path)], stdout=terminal) == 1


# ─── help / version ──────────────────────────────────────────────

def test_version(terminal) -> None:
    assert run(["--version"], stdout=terminal) == 0
    assert __version__ in terminal.text.getvalue()


def test_general_help(terminal) -> None:
    assert run(["-h"], stdout=terminal) == 0
    assert terminal.text.getvalue().strip() == GENERAL_HELP.strip()


def test_output_goes_to_given_stream_only(pipe, capsys) -> None:
    assert run(["-t", "silence", "-s", "2"], stdout=pipe) == 0
    assert run(["--version"], stdout=pipe) == 0
    assert capsys.readouterr().out == ""
    assert parse_wav(pipe.buffer.getvalue()).data_size == 8


def test_type_help(terminal) -> None:
    assert run(["-t", "pink", "--help"], stdout=terminal) == 0
    assert "PINK NOISE" in terminal.text.getvalue()


def test_every_type_has_help() -> None:
    assert set(TYPE_HELP) == set(WaveformType)


def test_unknown_type_help() -> None:
    assert type_help("triangle") == UNKNOWN_TYPE_HELP
    assert type_help("sawtooth") == TYPE_HELP[WaveformType.SAW]
