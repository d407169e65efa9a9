# =============================================================================
# server.py — Flask render bridge
# =============================================================================
#
# Serves generated WAV files over HTTP for test rigs that cannot run the CLI.
#
#   GET|POST /wavgen/render   params as JSON body or query string
#                             → audio/wav attachment, or 400 {error}
#   GET      /wavgen/health   → {"status": "ok"}
#   GET      /wavgen/types    → waveform names + level/marker capabilities
#
# Parameter names are the CLI long options (see SGM/export_bridge.py).
# Host/port: TSGE_HOST (default 127.0.0.1) and TSGE_PORT (default 5000).
# =============================================================================

from __future__ import annotations
import io
import logging
import os

from flask import Flask, jsonify, request, send_file

from TSGE.log import setup_logging
from TSGE.SMM.errors import ConfigError
from TSGE.SMM.model import LEVEL_TYPES, MARKER_TYPES, MSB_MARKER_FORBIDDEN, WaveformType
from TSGE.SGM.export_bridge import render_params

logger = logging.getLogger(__name__)


def _download_name(config) -> str:
    fmt = "f32le" if config.is_float else f"s{config.bits_per_sample}le"
    return f"{config.waveform.value}-{fmt}-{config.num_channels}ch.wav"


def create_app() -> Flask:
    app = Flask(__name__)

    @app.route("/wavgen/render", methods=["GET", "POST"])
    def render():
        if request.method == "POST" and request.is_json:
            params = request.get_json(silent=True)
            if not isinstance(params, dict):
                return jsonify({"error": "JSON body must be an object"}), 400
        else:
            params = request.args.to_dict()

        try:
            config, wav = render_params(params)
        except ConfigError as exc:
            logger.info("Rejected render request: %s", exc)
            return jsonify({"error": str(exc)}), 400

        logger.debug("Rendered %s (%d bytes)", _download_name(config), len(wav))
        return send_file(
            io.BytesIO(wav),
            mimetype="audio/wav",
            as_attachment=True,
            download_name=_download_name(config),
        )

    @app.route("/wavgen/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    @app.route("/wavgen/types", methods=["GET"])
    def types():
        return jsonify([
            {
                "name":        t.value,
                "level":       t in LEVEL_TYPES,
                "markers":     t in MARKER_TYPES,
                "msb_markers": t in MARKER_TYPES and t not in MSB_MARKER_FORBIDDEN,
            }
            for t in WaveformType
        ])

    return app


def main() -> None:
    setup_logging()
    host = os.getenv("TSGE_HOST", "127.0.0.1")
    port = int(os.getenv("TSGE_PORT", "5000"))
    create_app().run(host=host, port=port)


if __name__ == "__main__":
    main()
