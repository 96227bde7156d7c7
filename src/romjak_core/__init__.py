"""romjak core - shared limits, errors and output naming."""
from .errors import InvalidConfiguration, RomIoError, RomjakError, TruncatedRead, TruncatedWrite
from .names import default_base, name_for, slot_names

__all__ = [
    "RomjakError",
    "InvalidConfiguration",
    "RomIoError",
    "TruncatedRead",
    "TruncatedWrite",
    "name_for",
    "slot_names",
    "default_base",
]
