# =============================================================================
# Test Signal Generation Engine (TSGE)
# Deterministic test waveforms in RIFF/WAVE containers.
# =============================================================================
#
# ── WHAT THE ENGINE IS FOR ────────────────────────────────────────────────────
#
#   - Latency measurement          (burst)
#   - Channel-order verification   (counter / silence / steps + markers)
#   - Level calibration            (sine, square, saw, pink, white + gain)
#   - Bit-depth conversion testing (counter counts LSBs of the target word)
#
# Every run is exactly reproducible: fixed PRNG seed, integer cycle lengths,
# no dither, no time-based state.
#
# ── DATA FLOW ─────────────────────────────────────────────────────────────────
#   options (CLI / JSON / HTTP)
#       → SMM.options.build_config()        sanitise + validate
#       → SGM.wavgen.generate()             headers first, then per frame:
#            SGM.generators  raw int32 sample   (±MAX_LEVEL full scale)
#            SGM.finalizer   level → float → markers → narrowing
#       → sink (file, stdout, BytesIO)
#
# ── MODULE LAYOUT ─────────────────────────────────────────────────────────────
#   SMM/    constants, errors, data model, gain maths, option sanitising
#   SGM/    generators, markers, finalizer, RIFF writer, loop, JSON bridge
#   SVM/    RIFF reader, level analysis, self-validation suite
#   cli.py     wavgen-style command line
#   server.py  Flask render bridge
#   log.py     logging setup
# =============================================================================

__version__ = "0.1.0"
