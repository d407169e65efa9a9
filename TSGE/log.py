from __future__ import annotations

import logging
import os


def setup_logging(verbose: bool = False, piping: bool = False) -> None:
    """
    Console logging for the wavgen front ends.

    verbose → DEBUG (the "extra" detail), default → INFO.
    When the WAV stream itself is piped to another application only errors
    are reported, on stderr, so nothing interleaves with the audio.
    LOG_LEVEL overrides the default level.
    """
    if piping:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        name  = os.getenv("LOG_LEVEL", "INFO").upper().strip()
        level = getattr(logging, name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )
