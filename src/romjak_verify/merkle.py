from pathlib import Path
import hashlib

def digest(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()

def leaf_hash(rel_path: str, content: bytes) -> bytes:
    h = hashlib.sha256()
    h.update(rel_path.encode("utf-8"))
    h.update(b"\x00")
    h.update(content)
    return h.digest()

def integrity_root(leaves: dict[str, bytes]) -> str:
    """Accumulate leaf hashes in sorted name order into one hex root."""
    acc = hashlib.sha256()
    for rel in sorted(leaves):
        acc.update(leaf_hash(rel, leaves[rel]))
    return acc.hexdigest()

def compute_integrity_root(root_dir: Path, rel_files: list[str]) -> str:
    return integrity_root({rel: (root_dir / rel).read_bytes() for rel in rel_files})
