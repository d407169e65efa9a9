# =============================================================================
# levels.py — dB level → linear gain
# =============================================================================
#
# The "alignment level" is the absolute peak (dBFS) the environment expects,
# very often simply 0 dBFS.  The "peak level" is relative to it.  A "power
# fraction" n (e.g. 8 for eighth-power) replaces the peak level with a POWER
# adjustment of 10·log10(1/n).
#
# The overall gain never exceeds 1.0.  Anything above would clip or wrap the
# full-scale integer samples the generators produce.
# =============================================================================

from __future__ import annotations
import logging
import math

logger = logging.getLogger(__name__)


def gain_from_params(align_dbfs: float, peak_dbfs: float, power_fraction: int = 1) -> float:
    """
    Linear gain that moves a 0 dBFS signal to the requested level.

    Args:
        align_dbfs:     Alignment level, dBFS (voltage).
        peak_dbfs:      Peak level relative to alignment, dB (voltage).
        power_fraction: Denominator of a fractional power target; 1 = unused.

    Returns:
        Gain in (0.0, 1.0].
    """
    target_dbfs = align_dbfs + peak_dbfs

    if power_fraction != 1:
        target_dbfs = align_dbfs + 10.0 * math.log10(1.0 / power_fraction)
        if peak_dbfs != 0.0:
            logger.warning("Peak level is ignored when a power fraction is supplied.")

    gain = 10.0 ** (target_dbfs / 20.0)
    logger.debug("Overall gain factor is %.3f", gain)

    return min(gain, 1.0)


def gain_to_dbfs(gain: float) -> float:
    """Inverse of the voltage conversion above; -inf for zero gain."""
    if gain <= 0.0:
        return float("-inf")
    return 20.0 * math.log10(gain)
