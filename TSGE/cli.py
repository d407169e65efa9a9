#!/usr/bin/env python3
# =============================================================================
# cli.py — wavgen command line
# =============================================================================
#
# Usage:
#   tsge-wavgen [opts] [filename]
#   python -m TSGE.cli -t counter -b 32 -c 2 -s 4 -m msb /tmp/check.wav
#   python -m TSGE.cli -t sine -c 2 -d 1000 -f 1000 | aplay
#
# OUTPUT:
#   A filename writes a file.  With no filename and standard output not a
#   terminal, the WAV stream goes to stdout and console logging is cut to
#   errors only (on stderr) so nothing interleaves with the audio.
#
# Exit status: 0 on success, 1 on any failure.
# =============================================================================

from __future__ import annotations
import argparse
import logging
import sys
from typing import Optional, Sequence, TextIO

from TSGE import __version__
from TSGE.log import setup_logging
from TSGE.SMM.constants import MAX_CHANNELS, MIN_FILENAME_LEN
from TSGE.SMM.errors import ConfigError, WavgenError
from TSGE.SMM.model import WaveformType
from TSGE.SMM.options import UserOptions, build_config
from TSGE.SGM.wavgen import write_wav

logger = logging.getLogger(__name__)

# ── Help text ────────────────────────────────────────────────────────────────

GENERAL_HELP = f"""\
Waveform Generator (wavgen) utility version {__version__}

Usage: tsge-wavgen [opts] [filename]

Where opts:
 -a [--align]        Alignment level in dBFS that the peak level is relative to.
 -b [--bitdepth]     Bit-depth of the samples (16, 24 or 32; 0 = float) [32].
 -c [--channels]     Number of channels in the generated output file [1].
 -d [--duration]     Duration of the content, e.g. 500, 2s, 1m [1s].
 -f [--frequency]    Frequency (no effect on the non-audio types) [440Hz].
 -h [--help]         Show this help page (with -t: help for that type).
 -l [--level]        Peak level in dB relative to the alignment level [0dB].
 -m [--markers]      Add channel markers, top (msb) or bottom (lsb) byte [OFF].
 -n [--numcycles]    Number of cycles in each burst [1].
 -p [--period]       Period between bursts, e.g. 100, 1s [100ms].
 -r [--rate]         Sample rate, e.g. 48000, 96k [48kHz].
 -s [--samples]      Number of samples per channel (instead of duration).
 -t [--type]         Type of waveform to generate (see below).
 -u [--uncorrelated] Different noise on each channel.
 -v [--verbose]      Detailed logging (suppressed when piping).
 -w [--power]        Power fraction, alternative to -l (e.g. 8 = eighth power).
    [--version]      Show the version number and exit.
and:
 filename is the output WAV file, required unless piping to another program.

The arguments for waveform type (-t/--type) are:
 counter : +ve sample values incrementing by one LSB (a very slow saw-tooth).
 steps   : A set of five levels useful for checking normalisation/conversion.
 saw     : A symmetrical saw-tooth waveform at the specified frequency.
 sine    : A symmetrical sine-wave at the specified frequency.
 square  : A symmetrical square-wave at the specified frequency.
 silence : Silence, apart from the channel markers if selected with -m.
 pink    : Pink noise, 1/f filtered from the white noise source.
 burst   : A periodic burst of sine-wave cycles, useful for measuring latency.
 white   : White noise from a fast pseudo-random generator.

e.g. tsge-wavgen -t counter -b 32 -c 2 -m msb /tmp/count-s32le-2ch-marked.wav
 or  tsge-wavgen -t sine -b 32 -c 2 -d 1000 -f 1000 | aplay -D hw:default

Use 'tsge-wavgen -t <type> --help' for help on each waveform type."""

_COMMON_OPTIONS = f"""\
 -v             : Detailed logging if not piping to another app.
 -r <rate>      : The sample rate in Hz, e.g. 48000 for 48kHz.
 -d <duration>  : The duration of the waveform (ms unless suffixed s/m/h).
 -s <samples>   : The number of samples per channel (instead of duration).
 -c <channels>  : The number of channels to generate (1 - {MAX_CHANNELS})."""

_LEVEL_OPTIONS = """\
 -l <level>     : The signal amplitude in dB relative to the alignment level.
 -a <align>     : An optional alignment level (dBFS) that -l is relative to."""

_FREQUENCY_OPTION = " -f <frequency> : The frequency in Hz of the generated waveform."

_QUANTISED = """\
If the requested frequency does not divide into the sample rate it is moved
to the nearest value that does, so every cycle spans a whole number of
samples and the tone carries no frequency jitter.  At the usual test
frequencies such as 1000Hz you get exactly what you ask for."""

TYPE_HELP = {
    WaveformType.BURST: f"""\
PERIODIC BURST (-t burst):

Example: tsge-wavgen -t burst -c 2 -d 1000 -p 100 -n 2 -f 1000 burst-1khz.wav

A 'burst' of sine-wave cycles at a fixed period, e.g. four cycles of 100Hz
every 100ms.  Useful for measuring the latency through a device, checking
polarity along a signal chain, or time-aligning loudspeaker drivers.

{_QUANTISED}

Channel markers are not allowed.

Configure the burst waveform using these options:
{_COMMON_OPTIONS}
 -f <frequency> : The frequency in Hz of the burst tone.
 -p <period>    : The period between the starts of successive bursts.
 -n <cycles>    : The number of cycles in each burst.
{_LEVEL_OPTIONS}""",

    WaveformType.COUNTER: f"""\
COUNTER (-t counter):

Example: tsge-wavgen -t counter -c 2 -b 32 -m lsb -s 100 /tmp/count-s32le.wav

An integer count, increasing by one LSB of the output word at each frame.
Most useful for debugging buffer problems or measuring drop-outs: the
length of any missing signal follows from the counts on either side.

The count is the same on every channel of a frame, making mis-aligned
channels and bad interleaving easy to spot.  Channel markers may be added
in the MSB or the LSB; the count then occupies the remaining bytes.

This is not an audio waveform so its level cannot be changed.
Use caution when playing this signal back.

Configure the counter using these options:
{_COMMON_OPTIONS}
 -m <lsb|msb>   : Place channel markers in the LSB or MSB.""",

    WaveformType.STEPS: f"""\
STEPS (-t steps):

Example: tsge-wavgen -t steps -c 2 -b 16 -m lsb -s 100 /tmp/steps-s16le.wav

Five discrete levels (0, 1/4, 2/4, 3/4 and 4/4 of full scale), one per
frame, which are easy to see when analysed or viewed as hex.

Channel markers may be added in either the LSB or the MSB.

This is not an audio waveform so its level cannot be changed.
Use caution when playing this signal back.

Configure the step waveform using these options:
{_COMMON_OPTIONS}
 -m <lsb|msb>   : Place channel markers in the LSB or MSB.""",

    WaveformType.SILENCE: f"""\
SILENCE (-t silence):

Example: tsge-wavgen -t silence -c 2 -m msb -d 1000 /tmp/silence-marked.wav

Zero-value samples.  Use it to check that an audio chain really is silent.

Channel markers may be added in either the MSB or the LSB, and cannot be
mistaken for audio data here.  Markers are never added to float output.

CAUTION: markers in the MSB make the signal distinctly NON-silent, at
least in D.C. terms.

Configure the silence using these options:
{_COMMON_OPTIONS}
 -m <lsb|msb>   : Place channel markers in the LSB or MSB.""",

    WaveformType.SAW: f"""\
SAW-TOOTH (-t saw):

Example: tsge-wavgen -t saw -c 2 -d 1000 -f 440 -l -10.0 /tmp/saw-10dbfs.wav

A symmetrical ramp: starts at zero, climbs to the peak level and wraps
round to the negative peak.  The wrap is a large step and will pop at low
frequencies (potentially damaging if played loud).

{_QUANTISED}

Channel markers are not allowed (use the counter or steps types instead).

Configure the saw-tooth waveform using these options:
{_COMMON_OPTIONS}
{_FREQUENCY_OPTION}
{_LEVEL_OPTIONS}""",

    WaveformType.SINE: f"""\
SINE-WAVE (-t sine):

Example: tsge-wavgen -t sine -c 2 -d 1000 -f 440 -a -18 -l -3.0 sine-21dbfs.wav

A pure sine-wave at the requested frequency.

{_QUANTISED}

Channel markers are not allowed.

Configure the sine-wave using these options:
{_COMMON_OPTIONS}
{_FREQUENCY_OPTION}
{_LEVEL_OPTIONS}""",

    WaveformType.SQUARE: f"""\
SQUARE-WAVE (-t square):

Example: tsge-wavgen -t square -c 1 -d 1000 -f 20 square-1ch-0dbfs.wav

A non-antialiased square-wave, starting at the positive peak.

{_QUANTISED}

Channel markers are not allowed.

Configure the square-wave using these options:
{_COMMON_OPTIONS}
{_FREQUENCY_OPTION}
{_LEVEL_OPTIONS}""",

    WaveformType.PINK: f"""\
PINK NOISE (-t pink):

Example: tsge-wavgen -t pink -c 2 -d 5000 -w 8 -u pink-eighth-power.wav

A good approximation to pink noise, not intended for very accurate
frequency measurements.  An 'eighth-power' source, common in professional
audio testing, is given by --power 8.  Aligned to 0dBFS (the default) the
noise measures roughly -15dBFS RMS.

Channel markers may be added in the LSB only (-m lsb), where they do not
significantly affect the sound.

Configure the pink-noise waveform using these options:
{_COMMON_OPTIONS}
{_LEVEL_OPTIONS}
 -w <fraction>  : Power fraction instead of -l (e.g. 8 for eighth power).
 -m lsb         : Place channel markers in the LSB.
 -u             : Generate uncorrelated noise (different on each channel).""",

    WaveformType.WHITE: f"""\
WHITE NOISE (-t white):

Example: tsge-wavgen -t white -c 2 -d 5000 -u white-5s-0dbfs.wav

A good approximation to white noise, not intended for very accurate
frequency measurements.  Aligned to 0dBFS (the default) the noise
measures roughly -4.8dBFS RMS.

Channel markers may be added in the LSB only (-m lsb), where they do not
significantly affect the sound.

Configure the white-noise waveform using these options:
{_COMMON_OPTIONS}
{_LEVEL_OPTIONS}
 -w <fraction>  : Power fraction instead of -l.
 -m lsb         : Place channel markers in the LSB.
 -u             : Generate uncorrelated noise (different on each channel).""",
}

UNKNOWN_TYPE_HELP = """\
UNRECOGNISED type:

These waveform types are supported:
 -t burst   : A periodic burst of -n sine-wave cycles every -p ms.
 -t counter : A non-audio incremental count in each sample position.
 -t saw     : A saw-tooth waveform at frequency -f <freq>.
 -t silence : Audio silence (zero-value samples) with optional channel markers.
 -t sine    : A sine-wave at frequency -f <freq>.
 -t steps   : A non-audio waveform consisting of large discrete steps.
 -t square  : A square-wave at frequency -f <freq>.
 -t pink    : A pink noise source (1/f filtered white noise).
 -t white   : A white noise source."""


def type_help(name: Optional[str]) -> str:
    """Help page for a waveform name, or the list of valid names."""
    if name:
        try:
            return TYPE_HELP[WaveformType.parse(name)]
        except ConfigError:
            pass
    return UNKNOWN_TYPE_HELP


# ── Argument parsing ─────────────────────────────────────────────────────────

class _Parser(argparse.ArgumentParser):
    """argparse that reports bad arguments as ConfigError (exit 1, not 2)."""

    def error(self, message: str) -> None:
        raise ConfigError(message)


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(prog="tsge-wavgen", add_help=False)
    p.add_argument("-a", "--align",        type=float)
    p.add_argument("-b", "--bitdepth",     type=int, default=UserOptions.bitdepth)
    p.add_argument("-c", "--channels",     type=int, default=UserOptions.channels)
    p.add_argument("-d", "--duration")
    p.add_argument("-f", "--frequency",    default=UserOptions.frequency)
    p.add_argument("-h", "--help",         action="store_true")
    p.add_argument("-l", "--level",        type=float)
    p.add_argument("-m", "--markers")
    p.add_argument("-n", "--numcycles",    type=int, default=UserOptions.numcycles)
    p.add_argument("-p", "--period",       default=UserOptions.period)
    p.add_argument("-r", "--rate",         default=UserOptions.rate)
    p.add_argument("-s", "--samples",      type=int)
    p.add_argument("-t", "--type",         dest="waveform")
    p.add_argument("-u", "--uncorrelated", action="store_true")
    p.add_argument("-v", "--verbose",      action="store_true")
    p.add_argument("-w", "--power",        type=int)
    p.add_argument("--version",            action="store_true")
    p.add_argument("filename", nargs="?")
    return p


def options_from_args(args: argparse.Namespace) -> UserOptions:
    return UserOptions(
        waveform=args.waveform,
        bitdepth=args.bitdepth,
        channels=args.channels,
        rate=args.rate,
        duration=args.duration,
        samples=args.samples,
        frequency=args.frequency,
        align=args.align,
        level=args.level,
        power=args.power,
        markers=args.markers,
        period=args.period,
        numcycles=args.numcycles,
        uncorrelated=args.uncorrelated,
        output=args.filename,
    )


def run(argv: Optional[Sequence[str]] = None, stdout: Optional[TextIO] = None) -> int:
    """
    Parse `argv`, generate, and return the process exit status.

    `stdout` defaults to sys.stdout; help text goes to it, and so does the WAV
    stream (through its `buffer`) when it is not a terminal.
    """
    out = stdout if stdout is not None else sys.stdout
    try:
        args = build_parser().parse_args(argv)
    except ConfigError as exc:
        setup_logging()
        logger.error("%s (try --help)", exc)
        return 1

    if args.version:
        print(f"Waveform Generator (wavgen) utility version {__version__}", file=out)
        return 0

    if args.help:
        print(type_help(args.waveform) if args.waveform else GENERAL_HELP, file=out)
        return 0

    piping = args.filename is None and not out.isatty()
    setup_logging(verbose=args.verbose, piping=piping)

    if not args.waveform:
        print(UNKNOWN_TYPE_HELP, file=sys.stderr)
        return 1

    if args.filename is None and not piping:
        logger.error("Invalid arguments (try --help).")
        logger.error("Either provide an output filename or pipe to another application.")
        return 1

    if args.filename is not None and len(args.filename) < MIN_FILENAME_LEN:
        logger.error("Invalid output filename (length < %d characters).", MIN_FILENAME_LEN)
        logger.error("Supply a filename as the last parameter - at least 'o.wav'.")
        return 1

    try:
        config = build_config(options_from_args(args))
        target = args.filename if args.filename is not None else out.buffer
        report = write_wav(config, target)
    except WavgenError as exc:
        logger.error("%s", exc)
        logger.debug("FAILED.")
        return 1
    except OSError as exc:
        logger.error("Could not create or open output file '%s': %s", args.filename, exc)
        return 1

    logger.info(
        "Wrote %d samples (%d bytes) to %s",
        report.samples_written, report.header_bytes + report.data_bytes,
        args.filename or "stdout",
    )
    logger.debug("Success.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    sys.exit(run(argv))


if __name__ == "__main__":
    main()
