import io
import json
from pathlib import Path
from romjak_core.errors import RomjakError
from romjak_core.protocol import MANIFEST_SCHEMA
from romjak_split.engine import InterleaveEngine
from romjak_split.planner import Configuration, plan
from .const import ERRORS
from .merkle import compute_integrity_root, digest

def _load_json(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))

def _err(code: str, **extra) -> dict:
    return {"code": code, "message": ERRORS[code], **extra}

def _fail(errors: list) -> dict:
    return {"status": "FAIL", "error_count": len(errors), "errors": errors}

def regenerate(config: Configuration, source_path: Path) -> list:
    """Rebuild every image in memory from the source input, indexed [bank][rom]."""
    geometry = plan(config)
    sinks = [[io.BytesIO() for _ in range(geometry.roms_per_bank)] for _ in range(geometry.num_banks)]
    with open(source_path, "rb") as f:
        InterleaveEngine(geometry).copy(f, sinks)
    return [[s.getvalue() for s in bank] for bank in sinks]

def verify_images(manifest_path: Path, source_path: Path | None = None) -> dict:
    errors = []
    root = manifest_path.parent

    if not manifest_path.exists():
        return _fail([_err("E_MANIFEST_MISSING", path=str(manifest_path))])

    try:
        manifest_obj = _load_json(manifest_path)
    except Exception as e:
        return _fail([_err("E_MANIFEST_JSON", detail=str(e))])

    if manifest_obj.get("schema") != MANIFEST_SCHEMA:
        return _fail([_err("E_MANIFEST_SCHEMA", found=manifest_obj.get("schema"))])

    try:
        config = Configuration(**manifest_obj["config"])
        plan(config)
    except (KeyError, TypeError, RomjakError) as e:
        return _fail([_err("E_CONFIG_INVALID", detail=str(e))])

    images = manifest_obj.get("images", [])
    present = []
    for rec in images:
        p = root / rec["file"]
        if not p.exists():
            errors.append(_err("E_IMAGE_MISSING", path=str(p)))
            continue
        content = p.read_bytes()
        if len(content) != config.rom_size_bytes:
            errors.append(_err("E_SIZE_MISMATCH", path=str(p), expected=config.rom_size_bytes, found=len(content)))
        elif digest(content) != rec["sha256"]:
            errors.append(_err("E_DIGEST_MISMATCH", path=str(p), expected=rec["sha256"], computed=digest(content)))
        present.append(rec["file"])
    if errors:
        return _fail(errors)

    integrity = manifest_obj.get("integrity", {})
    expected_root = integrity.get("root", "")
    try:
        computed = compute_integrity_root(root, integrity.get("files", present))
    except Exception as e:
        return _fail([_err("E_INTEGRITY_MISMATCH", expected=expected_root, detail=str(e))])
    if expected_root != computed:
        return _fail([_err("E_INTEGRITY_MISMATCH", expected=expected_root, computed=computed)])

    if source_path is not None:
        try:
            rebuilt = regenerate(config, source_path)
        except (OSError, RomjakError) as e:
            return _fail([_err("E_SOURCE_UNREADABLE", path=str(source_path), detail=str(e))])
        for rec in images:
            if digest(rebuilt[rec["bank"]][rec["rom"]]) != rec["sha256"]:
                errors.append(_err("E_SOURCE_MISMATCH", path=str(root / rec["file"]), bank=rec["bank"], rom=rec["rom"]))
        if errors:
            return _fail(errors)

    return {"status": "PASS", "error_count": 0, "errors": []}
