import pytest

from TSGE.SMM.model import GenerationState, WaveformConfig, WaveformType
from TSGE.SGM.generators import create_generator


def _make_config(waveform, **kw) -> WaveformConfig:
    if isinstance(waveform, str):
        waveform = WaveformType.parse(waveform)
    kw.setdefault("sample_rate", 48_000)
    kw.setdefault("bits_per_sample", 32)
    kw.setdefault("num_channels", 1)
    kw.setdefault("num_samples", 16)
    return WaveformConfig(waveform=waveform, **kw)


def _run_generator(config: WaveformConfig) -> list[list[int]]:
    """Raw generator output as [frame][channel], in loop order."""
    gen = create_generator(config)
    state = GenerationState(gain=config.gain)
    frames = []
    for n in range(config.num_samples):
        state.sample_number = n
        row = []
        for ch in range(config.num_channels):
            state.channel = ch
            row.append(gen.generate(state))
        frames.append(row)
    return frames


@pytest.fixture
def make_config():
    return _make_config


@pytest.fixture
def run_generator():
    return _run_generator
