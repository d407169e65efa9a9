# =============================================================================
# TSGE/SMM/__init__.py — Signal Model Module
# =============================================================================
#
# The SMM is the single source of truth for sample formats, option limits,
# RIFF constants and the per-run data model.  All other TSGE sub-modules
# (SGM, SVM) import exclusively from here.
#
# Sub-modules:
#   constants.py — level limits, RIFF tags, PRNG and pink-filter constants
#   errors.py    — ConfigError / UnsupportedNarrowingError / SinkWriteError
#   model.py     — WaveformType, Sample, MarkerConfig, WaveformConfig,
#                  GenerationState
#   levels.py    — dB alignment/peak/power-fraction → linear gain
#   options.py   — raw user options → validated WaveformConfig
# =============================================================================
