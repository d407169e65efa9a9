# =============================================================================
# TSGE/SGM/export_bridge.py — JSON render bridge
# =============================================================================
#
# Entry points for callers that speak JSON rather than Python objects (the
# Flask server in TSGE/server.py, or any embedding host).
#
#   config_from_params(params) -> WaveformConfig
#       params : dict — keys mirror the CLI long options:
#                type, bitdepth, channels, rate, duration, samples,
#                frequency, align, level, power, markers, period,
#                numcycles, uncorrelated
#
#   render_wav_json(params_json) -> str
#       returns : JSON string {wav_b64, sample_rate, channels,
#                 bits_per_sample, is_float, num_samples, data_bytes}
#                 or {error, traceback} on failure
# =============================================================================

from __future__ import annotations
import base64
import json
import traceback
from dataclasses import fields
from typing import Any, Mapping

from TSGE.SMM.errors import ConfigError
from TSGE.SMM.model import WaveformConfig
from TSGE.SMM.options import UserOptions, build_config
from .wavgen import render_wav

_OPTION_FIELDS = {f.name for f in fields(UserOptions)}

_TRUE_STRINGS = ("1", "true", "yes", "y", "on")


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def config_from_params(params: Mapping[str, Any]) -> WaveformConfig:
    """
    Build a validated config from a JSON-like mapping.

    Raises:
        ConfigError: unknown keys, bad values or a rejected configuration.
    """
    # null means "not given": the option default applies.
    raw = {k: v for k, v in params.items() if v is not None}
    if "type" in raw:
        raw["waveform"] = raw.pop("type")

    unknown = set(raw) - _OPTION_FIELDS
    if unknown:
        raise ConfigError(f"Unknown parameter(s): {sorted(unknown)}")

    if "uncorrelated" in raw:
        raw["uncorrelated"] = _as_bool(raw["uncorrelated"])
    try:
        for key in ("bitdepth", "channels", "samples", "power", "numcycles"):
            if key in raw:
                raw[key] = int(raw[key])
        for key in ("align", "level"):
            if key in raw:
                raw[key] = float(raw[key])
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Bad parameter value: {exc}") from exc
    raw.pop("output", None)

    return build_config(UserOptions(**raw))


def render_params(params: Mapping[str, Any]) -> tuple[WaveformConfig, bytes]:
    """Config + complete WAV bytes for a parameter mapping."""
    config = config_from_params(params)
    return config, render_wav(config)


def render_wav_json(params_json: str) -> str:
    """
    Safe JSON entry point.  Always returns a JSON string.
    On error returns {error, traceback}.
    """
    try:
        config, wav = render_params(json.loads(params_json))
        return json.dumps({
            "wav_b64":         base64.b64encode(wav).decode("ascii"),
            "sample_rate":     config.sample_rate,
            "channels":        config.num_channels,
            "bits_per_sample": config.bits_per_sample,
            "is_float":        config.is_float,
            "num_samples":     config.num_samples,
            "data_bytes":      config.num_data_bytes,
        })
    except Exception as exc:
        return json.dumps({
            "error":     str(exc),
            "traceback": traceback.format_exc(),
        })
