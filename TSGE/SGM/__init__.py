# =============================================================================
# SGM — Signal Generation Module
# Subfolder of TSGE (Test Signal Generation Engine)
# =============================================================================
#
# Generates deterministic test waveforms and serialises them into RIFF/WAVE.
#
# Modules:
#   base.py          — Generator base class, frame lock, rounding helpers
#   generators.py    — burst, counter, saw, silence, sine, square, steps
#                      + the waveform → generator registry
#   noise.py         — rand31 PRNG, white and pink noise
#   markers.py       — per-channel marker byte injection
#   finalizer.py     — level → format → markers → narrowing pipeline
#   riff.py          — RIFF / fmt / fact / data header writer
#   wavgen.py        — the frame × channel generation loop
#   export_bridge.py — JSON entry points (used by TSGE/server.py)
#
# Constants and the data model live in TSGE/SMM/
# Verification tools live in TSGE/SVM/
# =============================================================================
