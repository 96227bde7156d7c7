"""romjak - layout planning.

Turns the five user-facing numbers into the geometry the interleaver walks.
Nothing here touches the filesystem.
"""
from __future__ import annotations

from dataclasses import dataclass
from romjak_core.errors import InvalidConfiguration
from romjak_core.protocol import (
    BITS_PER_BYTE,
    DEFAULT_BANKS,
    DEFAULT_ROM_WIDTH,
    MAX_BANKS,
    MAX_ROM_WIDTH,
    MAX_ROMS,
)


@dataclass(frozen=True)
class Configuration:
    num_roms: int
    rom_size_bytes: int
    rom_width_bits: int = DEFAULT_ROM_WIDTH
    num_banks: int = DEFAULT_BANKS
    pad_up_to_size: int | None = None

    def __post_init__(self):
        # The padding window defaults to the whole logical space, so a short
        # input is padded out once and never repeated.
        if self.pad_up_to_size is None and isinstance(self.num_roms, int) and isinstance(self.rom_size_bytes, int):
            object.__setattr__(self, "pad_up_to_size", self.rom_size_bytes * self.num_roms)

    @classmethod
    def create(
        cls,
        num_roms: int,
        rom_size_bytes: int,
        rom_width_bits: int | None = None,
        num_banks: int | None = None,
        pad_up_to_size: int | None = None,
    ) -> "Configuration":
        """Build a configuration, filling in the defaults for omitted values."""
        return cls(
            num_roms=num_roms,
            rom_size_bytes=rom_size_bytes,
            rom_width_bits=DEFAULT_ROM_WIDTH if rom_width_bits is None else rom_width_bits,
            num_banks=DEFAULT_BANKS if num_banks is None else num_banks,
            pad_up_to_size=pad_up_to_size,
        )

    def to_dict(self) -> dict:
        return {
            "num_roms": self.num_roms,
            "rom_size_bytes": self.rom_size_bytes,
            "rom_width_bits": self.rom_width_bits,
            "num_banks": self.num_banks,
            "pad_up_to_size": self.pad_up_to_size,
        }


@dataclass(frozen=True)
class Geometry:
    config: Configuration
    stride_bytes: int
    roms_per_bank: int
    bank_size_bytes: int
    total_size_bytes: int
    # Printed for the operator only; the copy loop derives repetition from
    # the absolute position modulo the padding window.
    repeat_count: int

    @property
    def num_banks(self) -> int:
        return self.config.num_banks

    @property
    def num_roms(self) -> int:
        return self.config.num_roms

    @property
    def rom_size_bytes(self) -> int:
        return self.config.rom_size_bytes

    @property
    def pad_up_to_size(self) -> int:
        return self.config.pad_up_to_size

    @property
    def row_bytes(self) -> int:
        """Bytes of logical space covered by one row across a bank."""
        return self.roms_per_bank * self.stride_bytes

    def bank_range(self, bank: int) -> tuple[int, int]:
        """Inclusive logical byte range covered by ``bank``."""
        start = bank * self.bank_size_bytes
        return start, start + self.bank_size_bytes - 1

    @property
    def bank_ranges(self) -> list[tuple[int, int]]:
        return [self.bank_range(b) for b in range(self.num_banks)]

    def slots(self):
        """Every (bank, rom) pair in write order."""
        for b in range(self.num_banks):
            for r in range(self.roms_per_bank):
                yield b, r

    def to_dict(self) -> dict:
        return {
            "stride_bytes": self.stride_bytes,
            "roms_per_bank": self.roms_per_bank,
            "bank_size_bytes": self.bank_size_bytes,
            "total_size_bytes": self.total_size_bytes,
            "repeat_count": self.repeat_count,
            "bank_ranges": [list(r) for r in self.bank_ranges],
        }


def _validate(config: Configuration) -> None:
    for field in ("num_roms", "rom_size_bytes", "rom_width_bits", "num_banks", "pad_up_to_size"):
        value = getattr(config, field)
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidConfiguration(f"{field} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidConfiguration(f"{field} must be positive, got {value}")

    if config.num_banks > MAX_BANKS:
        raise InvalidConfiguration(f"Too many banks: {config.num_banks} > {MAX_BANKS}")
    if config.rom_width_bits % BITS_PER_BYTE != 0:
        raise InvalidConfiguration(
            f"ROM width needs to be a multiple of {BITS_PER_BYTE}, got {config.rom_width_bits}"
        )
    if config.rom_width_bits > MAX_ROM_WIDTH:
        raise InvalidConfiguration(f"ROM width is too big: {config.rom_width_bits} > {MAX_ROM_WIDTH}")
    if config.num_roms % config.num_banks != 0:
        raise InvalidConfiguration(
            f"Number of ROMs ({config.num_roms}) must be a multiple of number of banks ({config.num_banks})"
        )
    if config.num_roms > MAX_ROMS:
        raise InvalidConfiguration(f"Too many ROMs: {config.num_roms} > {MAX_ROMS}")

    stride = config.rom_width_bits // BITS_PER_BYTE
    if config.rom_size_bytes % stride != 0:
        raise InvalidConfiguration(
            f"ROM size ({config.rom_size_bytes}) must be a multiple of the ROM width in bytes ({stride})"
        )


def plan(config: Configuration) -> Geometry:
    """Validate ``config`` and derive the interleave geometry."""
    _validate(config)

    stride = config.rom_width_bits // BITS_PER_BYTE
    roms_per_bank = config.num_roms // config.num_banks

    return Geometry(
        config=config,
        stride_bytes=stride,
        roms_per_bank=roms_per_bank,
        bank_size_bytes=config.rom_size_bytes * roms_per_bank,
        total_size_bytes=config.rom_size_bytes * config.num_roms,
        repeat_count=config.rom_size_bytes // config.pad_up_to_size,
    )
