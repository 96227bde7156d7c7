"""romjak - run manifest.

A manifest records how a set of images was produced and what each one
hashes to, so the set can be checked later without the source input.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from romjak_core.protocol import HASH_ALGORITHM, MANIFEST_SCHEMA, MANIFEST_SUFFIX, SLOT_TABLE_SUFFIX
from romjak_verify.merkle import digest, integrity_root

from .planner import Geometry

CANONICAL_JSON_KW = {"sort_keys": True, "separators": (",", ":"), "ensure_ascii": False}

SLOT_SCHEMA = pa.schema(
    [
        ("file", pa.string()),
        ("bank", pa.int8()),
        ("rom", pa.int8()),
        ("bank_start", pa.int64()),
        ("bank_end", pa.int64()),
        ("lane_offset", pa.int32()),
        ("lane_width", pa.int32()),
        ("size", pa.int64()),
        ("sha256", pa.string()),
    ]
)


def canonical_json_bytes(obj) -> bytes:
    return json.dumps(obj, **CANONICAL_JSON_KW).encode("utf-8")


def manifest_path_for(base: str) -> Path:
    return Path(f"{base}{MANIFEST_SUFFIX}")


def slot_table_path_for(base: str) -> Path:
    return Path(f"{base}{SLOT_TABLE_SUFFIX}")


def slot_records(geometry: Geometry, names: Sequence[Sequence[str]]) -> list[dict]:
    """One record per image, in write order. Files are named relative to the manifest."""
    records: list[dict] = []
    for b, r in geometry.slots():
        path = Path(names[b][r])
        content = path.read_bytes()
        start, end = geometry.bank_range(b)
        records.append(
            {
                "file": path.name,
                "bank": b,
                "rom": r,
                "bank_start": start,
                "bank_end": end,
                "lane_offset": r * geometry.stride_bytes,
                "lane_width": geometry.stride_bytes,
                "size": len(content),
                "sha256": digest(content),
            }
        )
    return records


def write_manifest(
    geometry: Geometry,
    names: Sequence[Sequence[str]],
    base: str,
    input_path: Path,
    timestamp: str | None = None,
) -> Path:
    """Write ``{base}.manifest.json`` and ``{base}.slots.parquet`` for a finished run."""
    if timestamp is None:
        timestamp = datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")

    records = slot_records(geometry, names)
    leaves = {rec["file"]: Path(names[rec["bank"]][rec["rom"]]).read_bytes() for rec in records}
    source_bytes = Path(input_path).read_bytes()

    manifest = {
        "schema": MANIFEST_SCHEMA,
        "created": timestamp,
        "source": {
            "file": Path(input_path).name,
            "size": len(source_bytes),
            HASH_ALGORITHM: digest(source_bytes),
        },
        "config": geometry.config.to_dict(),
        "geometry": geometry.to_dict(),
        "images": records,
        "integrity": {
            "algorithm": HASH_ALGORITHM,
            "files": sorted(leaves),
            "root": integrity_root(leaves),
        },
    }

    out = manifest_path_for(base)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(canonical_json_bytes(manifest))

    df = pd.DataFrame(records).sort_values(["bank", "rom"])
    table = pa.Table.from_pandas(df, schema=SLOT_SCHEMA, preserve_index=False)
    pq.write_table(table, slot_table_path_for(base))

    return out
