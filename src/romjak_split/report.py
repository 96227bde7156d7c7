"""romjak - human readable plan summary."""
from __future__ import annotations

from typing import Sequence

from .planner import Geometry


def format_plan(geometry: Geometry, names: Sequence[Sequence[str]]) -> str:
    g = geometry
    lines = [
        f"Going to create outputs for {g.num_roms} ROMs:",
        f" - Total data to generate {g.total_size_bytes} bytes, {g.bank_size_bytes} bytes per bank",
        f" - Each image will be {g.rom_size_bytes} bytes long",
        f" - Input data stride (how many bytes put into an output at a time) is {g.stride_bytes} bytes",
        f" - Input data will be repeated {g.repeat_count} times",
        "Your output images will be like this:",
    ]
    for b, (start, end) in enumerate(g.bank_ranges):
        roms = "".join(f" rom {r} - {name}" for r, name in enumerate(names[b]))
        lines.append(f" - bank {b} [0x{start:08x} - 0x{end:08x}]:{roms}")
    return "\n".join(lines)
