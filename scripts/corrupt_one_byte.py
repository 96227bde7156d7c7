import sys
from pathlib import Path

def main():
    if len(sys.argv) not in (2, 3):
        print("Usage: corrupt_one_byte.py <image> [offset]")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    idx = int(sys.argv[2], 0) if len(sys.argv) == 3 else 0
    b = bytearray(p.read_bytes())
    if idx >= len(b):
        print(f"Offset {idx} is past the end of {p} ({len(b)} bytes).")
        raise SystemExit(2)

    # Flip the low bit so the image size stays the same and only the digest moves.
    b[idx] ^= 0x01
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 byte at offset {idx} in {p}")

if __name__ == "__main__":
    main()
