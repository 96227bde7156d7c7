import struct
from pathlib import Path

# --- PATTERNS ---
# counter: byte N holds N & 0xFF
# address: every 32-bit little-endian word holds its own byte address,
#          so a dumped ROM shows where each lane came from.

def counter_pattern(size: int) -> bytes:
    return bytes(i & 0xFF for i in range(size))

def address_pattern(size: int) -> bytes:
    words = (size + 3) // 4
    blob = b"".join(struct.pack("<I", w * 4) for w in range(words))
    return blob[:size]

PATTERNS = {
    "counter": counter_pattern,
    "address": address_pattern,
}

def generate_pattern(out_path, size: int, kind: str = "counter") -> Path:
    if kind not in PATTERNS:
        raise SystemExit(f"unknown pattern {kind!r}, expected one of {sorted(PATTERNS)}")
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(PATTERNS[kind](size))
    print(f"GENERATED: {out} ({size} bytes, {kind})")
    return out

if __name__ == "__main__":
    import sys

    # Usage:
    #   python tools/make_pattern.py OUT SIZE [--kind counter|address]

    args = [a for a in sys.argv[1:] if a]

    kind = "counter"
    if "--kind" in args:
        i = args.index("--kind")
        if i + 1 >= len(args):
            raise SystemExit("--kind requires a value")
        kind = args[i + 1]
        args = args[:i] + args[i + 2:]

    if len(args) != 2:
        raise SystemExit("Usage: make_pattern.py OUT SIZE [--kind counter|address]")

    generate_pattern(args[0], int(args[1], 0), kind)
