# =============================================================================
# constants.py — SMM Format Constants, Limits and Filter Coefficients
# =============================================================================
#
# Every numeric constant used by the generators, the finalizer and the RIFF
# writer lives here.  Other TSGE sub-modules import from this file only.
#
# Sources:
#   RIFF/WAVE layout — Microsoft WAVE format (PCM + IEEE float "fact")
#   rand31 PRNG      — Park-Miller minimal standard (16807, 2^31 - 1)
#   Pink filter      — Paul Kellet's refined 1/f filter (7 taps)
# =============================================================================

# -----------------------------------------------------------------------------
# SAMPLE LEVELS  (internal "unified" format = signed 32-bit)
# -----------------------------------------------------------------------------

MAX_LEVEL = 0x7FFFFFFF           # +full scale; all audio generators peak here
MIN_INT32 = -0x80000000
UINT32_MASK = 0xFFFFFFFF

# -----------------------------------------------------------------------------
# OPTION LIMITS AND DEFAULTS
# -----------------------------------------------------------------------------

MAX_SAMPLE_RATE_HZ   = 192_000
MAX_DURATION_MS      = 10 * 60 * 1000                         # 10 minutes
MAX_SAMPLES_PER_CHNL = MAX_DURATION_MS * MAX_SAMPLE_RATE_HZ // 1000
MAX_CHANNELS         = 8

MAX_PEAK_LEVEL_DB    = 20.0      # peak level is relative to alignment
MAX_ALIGN_LEVEL_DBFS = 0.0       # alignment is absolute, never above 0 dBFS

DEFAULT_SAMPLE_RATE  = 48_000
DEFAULT_BITS         = 32
DEFAULT_CHANNELS     = 1
DEFAULT_DURATION_MS  = 1_000
DEFAULT_FREQUENCY_HZ = 440
DEFAULT_PERIOD_MS    = 100
DEFAULT_NUM_CYCLES   = 1

SUPPORTED_PCM_BITS   = (16, 24, 32)
FLOAT_BITS           = 32
FLOAT_BITDEPTH_FLAG  = 0         # "-b 0" selects IEEE float

MIN_FILENAME_LEN     = 5         # "o.wav"

# -----------------------------------------------------------------------------
# RIFF / WAVE CONTAINER
# -----------------------------------------------------------------------------
# Chunk identifiers are stored big-endian so they read as ASCII in a hex dump.
# Every other field is little-endian.

RIFF_ID = 0x52494646             # "RIFF"
WAVE_ID = 0x57415645             # "WAVE"
FMT_ID  = 0x666D7420             # "fmt "
FACT_ID = 0x66616374             # "fact"
DATA_ID = 0x64617461             # "data"

WAVE_FORMAT_PCM        = 1
WAVE_FORMAT_IEEE_FLOAT = 3

RIFF_HEADER_SIZE = 12            # id + size + "WAVE"
FMT_CHUNK_SIZE   = 24            # id + size + 16-byte body
FMT_BODY_SIZE    = 16
FACT_CHUNK_SIZE  = 12            # id + size + NumSamples
FACT_BODY_SIZE   = 4
DATA_HEADER_SIZE = 8             # id + size (payload follows)

MAX_RIFF_SIZE    = UINT32_MASK

# -----------------------------------------------------------------------------
# FINALIZER
# -----------------------------------------------------------------------------

GAIN_UNITY_TOLERANCE = 0.0001    # |gain - 1| at or below this is a no-op
MARKER_BASE          = 0xC0      # marker byte = 0xC0 + (channel + 1)

# -----------------------------------------------------------------------------
# GENERATORS
# -----------------------------------------------------------------------------

STEPS_NUM_LEVELS = 4             # not counting the zero level

NOISE_SEED       = 1
NOISE_MULTIPLIER = 16_807
NOISE_MODULUS    = 0x7FFFFFFF

# Paul Kellet's refined pink filter: (pole, white-gain) per tap.
PINK_TAPS = (
    (0.99886,  0.0555179),
    (0.99332,  0.0750759),
    (0.96900,  0.1538520),
    (0.86650,  0.3104856),
    (0.55000,  0.5329522),
    (-0.7616, -0.0168980),
)
PINK_TAP7_GAIN   = 0.115926
PINK_DIRECT_GAIN = 0.5362
PINK_PEAK_SCALE  = 5.0           # filter peak is ~5x the white source
