# =============================================================================
# errors.py — TSGE exception hierarchy
# =============================================================================
#
# Every detected error is fatal to a run; nothing here is retried.
#
#   ConfigError               — rejected before any byte is written
#   UnsupportedNarrowingError — serializer asked for a width it cannot emit
#   SinkWriteError            — short write / OSError on the output sink
# =============================================================================


class WavgenError(Exception):
    """Base class for all TSGE errors."""


class ConfigError(WavgenError, ValueError):
    """The requested configuration cannot be generated."""


class UnsupportedNarrowingError(WavgenError, ValueError):
    """A sample cannot be narrowed to the requested word size."""


class SinkWriteError(WavgenError, OSError):
    """The output sink accepted fewer bytes than it was given."""
