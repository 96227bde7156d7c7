"""romjak protocol constants.

Single source of truth for validation limits, defaults and fill values.
The splitter and the verifier must agree on every value here.
"""

# Validation limits
MAX_ROMS = 16
MAX_BANKS = 4
MAX_ROM_WIDTH = 32  # bits

# Byte-lane granularity
BITS_PER_BYTE = 8

# Defaults applied when an option is omitted
DEFAULT_ROM_WIDTH = 8
DEFAULT_BANKS = 1

# Erased EPROM/flash state
PAD_BYTE = 0xFF

# Manifest layout
MANIFEST_SCHEMA = "romjak-manifest-v1"
MANIFEST_SUFFIX = ".manifest.json"
SLOT_TABLE_SUFFIX = ".slots.parquet"
HASH_ALGORITHM = "sha256"
