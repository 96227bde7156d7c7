"""romjak - deterministic output naming."""
from __future__ import annotations

from pathlib import Path


def name_for(base: str, bank_index: int, rom_index: int, num_banks: int) -> str:
    """Name of the image for one (bank, rom) slot.

    Single-bank layouts drop the bank component so the common case stays
    short: ``base.0``, ``base.1``. Multi-bank layouts always carry both
    indices, so every slot of a layout maps to a distinct name.
    """
    if num_banks == 1:
        return f"{base}.{rom_index}"
    return f"{base}.{bank_index}.{rom_index}"


def slot_names(base: str, num_banks: int, roms_per_bank: int) -> list[list[str]]:
    """Names for every slot, indexed ``[bank][rom]``."""
    return [
        [name_for(base, b, r, num_banks) for r in range(roms_per_bank)]
        for b in range(num_banks)
    ]


def default_base(input_path: Path | str) -> str:
    """Output base derived from the input path: same directory, suffix removed."""
    p = Path(input_path)
    return str(p.with_suffix("")) if p.suffix else str(p)
