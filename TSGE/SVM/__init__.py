# =============================================================================
# TSGE/SVM/__init__.py — Signal Verification Module
# =============================================================================
#
# The SVM contains the tools for checking that generated files are exactly
# what the generation core promised: header fields, payload size, and the
# per-channel sample values.
#
# Sub-modules:
#   riff_reader.py  — parses RIFF/WAVE bytes back into header fields + samples
#   analyze.py      — per-channel peak / RMS / DC report (CLI + importable)
#   validate.py     — automated self-check suite for the whole TSGE stack
# =============================================================================
