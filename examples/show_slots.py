"""Show which logical bytes each ROM image carries, from a run's slot table."""
from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python show_slots.py <base>.slots.parquet [bank]")
        print("Example: python show_slots.py out/firmware.slots.parquet 1")
        sys.exit(1)

    table = Path(sys.argv[1])
    df = pd.read_parquet(table).sort_values(["bank", "rom"])

    if len(sys.argv) > 2:
        df = df[df["bank"] == int(sys.argv[2], 0)]

    if df.empty:
        print("No images found.")
        return

    row_bytes = int(df.groupby("bank")["lane_width"].sum().iloc[0])

    print(f"--- Slot map: {table} ---")
    print(f"--- {row_bytes} bytes per row ---\n")

    for _, row in df.iterrows():
        first = int(row["bank_start"]) + int(row["lane_offset"])
        last = first + int(row["lane_width"]) - 1
        print(f"IMAGE: {row['file']}")
        print(f"  Bank {row['bank']} [0x{int(row['bank_start']):08x} - 0x{int(row['bank_end']):08x}], rom {row['rom']}")
        print(f"  Lane: bytes 0x{first:x}-0x{last:x} of every {row_bytes} byte row")
        print(f"  SHA-256: {row['sha256'][:16]}...")
        print()


if __name__ == "__main__":
    main()
