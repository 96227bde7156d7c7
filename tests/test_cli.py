import json
import os
import sys
from pathlib import Path
import subprocess

REPO = Path(__file__).resolve().parents[1]

def run(args, cwd=REPO):
    env = dict(os.environ)
    env["PYTHONPATH"] = str(REPO / "src") + os.pathsep + env.get("PYTHONPATH", "")
    return subprocess.run([sys.executable, *args], cwd=cwd, env=env, check=False, capture_output=True, text=True)

def make_input(tmp_path, size, kind="counter"):
    out = tmp_path / "fw.bin"
    r = run(["tools/make_pattern.py", str(out), str(size), "--kind", kind])
    assert r.returncode == 0, r.stderr + r.stdout
    return out

def test_split_two_roms(tmp_path):
    src = make_input(tmp_path, 8)
    r = run(["-m", "romjak_split.cli", "--numroms", "2", "--romsize", "4", str(src)])
    assert r.returncode == 0, r.stderr + r.stdout
    assert "Done" in r.stdout
    assert (tmp_path / "fw.0").read_bytes() == bytes([0, 2, 4, 6])
    assert (tmp_path / "fw.1").read_bytes() == bytes([1, 3, 5, 7])

def test_hex_sizes_and_banks(tmp_path):
    src = make_input(tmp_path, 0x40, kind="address")
    base = tmp_path / "out" / "rom"
    r = run(["-m", "romjak_split.cli", "--numroms", "4", "--romsize", "0x10", "--romwidth", "32",
             "--rombanks", "2", str(src), str(base)])
    assert r.returncode == 0, r.stderr + r.stdout
    assert "bank 1 [0x00000020 - 0x0000003f]" in r.stdout
    # Each 32-bit lane carries its own little-endian address.
    assert (tmp_path / "out" / "rom.0.0").read_bytes()[:4] == (0).to_bytes(4, "little")
    assert (tmp_path / "out" / "rom.0.1").read_bytes()[:4] == (4).to_bytes(4, "little")
    assert (tmp_path / "out" / "rom.1.0").read_bytes()[:4] == (0x20).to_bytes(4, "little")
    for name in ["rom.0.0", "rom.0.1", "rom.1.0", "rom.1.1"]:
        assert (tmp_path / "out" / name).stat().st_size == 0x10

def test_invalid_width_does_no_io(tmp_path):
    src = make_input(tmp_path, 8)
    r = run(["-m", "romjak_split.cli", "--numroms", "2", "--romsize", "4", "--romwidth", "12", str(src)])
    assert r.returncode == 1
    assert r.stdout.startswith("FATAL:")
    assert "Traceback" not in r.stderr
    assert not (tmp_path / "fw.0").exists()
    assert not (tmp_path / "fw.1").exists()

def test_manifest_verifies_and_detects_tampering(tmp_path):
    src = make_input(tmp_path, 20)
    base = tmp_path / "fw"
    r = run(["-m", "romjak_split.cli", "--numroms", "4", "--romsize", "8", "--rombanks", "2",
             "--paduptosize", "16", "--manifest", str(src), str(base)])
    assert r.returncode == 0, r.stderr + r.stdout

    manifest = tmp_path / "fw.manifest.json"
    assert manifest.exists()
    assert (tmp_path / "fw.slots.parquet").stat().st_size > 0

    r = run(["-m", "romjak_verify.cli", "images", str(manifest), "--source", str(src)])
    assert r.returncode == 0, r.stderr + r.stdout
    assert json.loads(r.stdout)["status"] == "PASS"

    # Different source input
    other = tmp_path / "other.bin"
    other.write_bytes(bytes(20))
    r = run(["-m", "romjak_verify.cli", "images", str(manifest), "--source", str(other)])
    assert r.returncode == 1
    assert {e["code"] for e in json.loads(r.stdout)["errors"]} == {"E_SOURCE_MISMATCH"}

    # Flip one byte
    r = run(["scripts/corrupt_one_byte.py", str(tmp_path / "fw.1.0"), "3"])
    assert r.returncode == 0, r.stderr + r.stdout
    r = run(["-m", "romjak_verify.cli", "images", str(manifest)])
    assert r.returncode == 1
    result = json.loads(r.stdout)
    assert result["status"] == "FAIL"
    assert [e["code"] for e in result["errors"]] == ["E_DIGEST_MISMATCH"]

    # Truncate one image, delete another
    img = tmp_path / "fw.0.1"
    img.write_bytes(img.read_bytes()[:4])
    (tmp_path / "fw.0.0").unlink()
    r = run(["-m", "romjak_verify.cli", "images", str(manifest)])
    codes = [e["code"] for e in json.loads(r.stdout)["errors"]]
    assert codes == ["E_IMAGE_MISSING", "E_SIZE_MISMATCH", "E_DIGEST_MISMATCH"]

def test_verify_missing_manifest(tmp_path):
    r = run(["-m", "romjak_verify.cli", "images", str(tmp_path / "nope.manifest.json")])
    assert r.returncode == 1
    assert json.loads(r.stdout)["errors"][0]["code"] == "E_MANIFEST_MISSING"

def test_default_base_never_overwrites_input(tmp_path):
    src = tmp_path / "game.1"
    src.write_bytes(bytes(range(8)))
    r = run(["-m", "romjak_split.cli", "--numroms", "2", "--romsize", "4", str(src)])
    assert r.returncode == 1
    assert r.stdout.splitlines()[-1].startswith("FATAL:")
    assert "overwrite the input" in r.stdout
    assert src.read_bytes() == bytes(range(8))
    assert not (tmp_path / "game.0").exists()
