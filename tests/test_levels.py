"""Tests for dB → gain conversion in TSGE.SMM.levels."""
import itertools
import logging
import math

import pytest

from TSGE.SMM.levels import gain_from_params, gain_to_dbfs


def test_zero_db_is_unity() -> None:
    assert gain_from_params(0.0, 0.0) == 1.0


def test_minus_six_db_is_about_half() -> None:
    assert gain_from_params(-6.0206, 0.0) == pytest.approx(0.5, abs=1e-4)


def test_peak_relative_to_alignment() -> None:
    assert gain_from_params(-18.0, -3.0) == pytest.approx(10 ** (-21 / 20))


def test_eighth_power() -> None:
    # 10*log10(1/8) = -9.03 dB, i.e. 1/sqrt(8) in voltage.
    assert gain_from_params(0.0, 0.0, 8) == pytest.approx(1 / math.sqrt(8))


def test_power_fraction_relative_to_alignment() -> None:
    assert gain_from_params(-10.0, 0.0, 2) == pytest.approx(10 ** ((-10 - 3.0103) / 20), rel=1e-4)


def test_peak_ignored_with_power_fraction(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="TSGE.SMM.levels"):
        gain = gain_from_params(0.0, -20.0, 8)
    assert gain == pytest.approx(1 / math.sqrt(8))
    assert "ignored" in caplog.text


def test_gain_never_above_unity() -> None:
    combos = itertools.product((0.0, -3.0, -40.0), (-6.0, 0.0, 6.0, 20.0), (1, 2, 8))
    for align, peak, power in combos:
        assert gain_from_params(align, peak, power) <= 1.0


def test_gain_to_dbfs() -> None:
    assert gain_to_dbfs(1.0) == 0.0
    assert gain_to_dbfs(0.5) == pytest.approx(-6.0206, abs=1e-4)
    assert gain_to_dbfs(0.0) == float("-inf")
