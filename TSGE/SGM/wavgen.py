# =============================================================================
# wavgen.py — Generation loop
# =============================================================================
#
# Drives one run:
#
#   1. validate the configuration (nothing is written if it is rejected)
#   2. write the RIFF headers, sized from the final payload
#   3. for each frame (outer) and each channel (inner):
#        generator → raw int32 sample
#        finaliser → level → format → markers → narrowed bytes → sink
#
# ORDER GUARANTEE:
#   Samples are produced strictly frame-by-frame, channel 0 first.  Channel-0
#   transitions (square polarity, burst reset, pink filter init) therefore
#   always precede the other channels of the same frame.
#
# FAILURE:
#   Any write error aborts the loop at once.  Bytes already written are not
#   retracted; the caller reports the run as failed.
# =============================================================================

from __future__ import annotations
import io
import logging
from typing import BinaryIO, NamedTuple, Union

from TSGE.SMM.levels import gain_to_dbfs
from TSGE.SMM.model import GenerationState, Sample, WaveformConfig
from .finalizer import SampleFinalizer
from .generators import create_generator
from .riff import write_headers

logger = logging.getLogger(__name__)


class GenerationReport(NamedTuple):
    samples_written: int                 # words, all channels
    header_bytes:    int
    data_bytes:      int
    duration_ms:     int                 # advertised, approximate


def generate(config: WaveformConfig, sink: BinaryIO) -> GenerationReport:
    """
    Generate `config` into an open binary sink.

    Raises:
        ConfigError:               before anything is written.
        SinkWriteError:            mid-run; the sink holds a partial file.
        UnsupportedNarrowingError: mid-run (unreachable for a valid config).
    """
    config.validate()

    logger.debug(
        "Samples to generate (per channel) = %d, duration ~%d ms",
        config.num_samples, config.duration_ms,
    )
    logger.debug(
        "%s: %d Hz, %d ch, %s, gain %.2f dB",
        config.waveform.value, config.sample_rate, config.num_channels,
        "float32" if config.is_float else f"s{config.bits_per_sample}le",
        gain_to_dbfs(config.gain),
    )

    header_bytes = write_headers(config, sink)
    logger.debug("Total RIFF chunk size is %d bytes.", config.riff_size)

    generator = create_generator(config)
    finaliser = SampleFinalizer(config)
    state     = GenerationState(gain=config.gain)

    data_bytes = 0
    words      = 0
    for frame in range(config.num_samples):
        state.sample_number = frame
        for channel in range(config.num_channels):
            state.channel = channel
            state.sample  = Sample(generator.generate(state))
            data_bytes  += finaliser.write(state, sink)
            words       += 1

    return GenerationReport(
        samples_written=words,
        header_bytes=header_bytes,
        data_bytes=data_bytes,
        duration_ms=config.duration_ms,
    )


def render_wav(config: WaveformConfig) -> bytes:
    """Complete WAV file for `config`, in memory."""
    buf = io.BytesIO()
    generate(config, buf)
    return buf.getvalue()


def write_wav(config: WaveformConfig, target: Union[str, BinaryIO]) -> GenerationReport:
    """
    Generate into a file path or an already-open binary stream (e.g. stdout).
    A path is created/truncated; a stream is flushed but left open.
    """
    if isinstance(target, (str, bytes)) or hasattr(target, "__fspath__"):
        logger.debug("Output filename is '%s'", target)
        with open(target, "wb") as f:
            return generate(config, f)

    report = generate(config, target)
    target.flush()
    return report
