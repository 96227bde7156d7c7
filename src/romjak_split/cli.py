"""romjak - split a linear image into ROM images for parallel and banked chips."""
from __future__ import annotations

from pathlib import Path

import click

from romjak_core.errors import RomjakError
from romjak_core.names import default_base, slot_names

from .engine import InterleaveEngine
from .manifest import write_manifest
from .planner import Configuration, plan
from .report import format_plan

PADUPTOSIZE_HELP = (
    "How much to pad the input data up to. "
    "For example with a 4KB input, padding up to 32KB and a 64KB bank "
    "gives two copies of the input each padded up to 32KB with 0xff. "
    "A larger input is truncated. "
    "Defaults to the total size of all ROMs."
)


class AutoInt(click.ParamType):
    """Integer in decimal or 0x-prefixed hex."""

    name = "integer"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        text = str(value).strip().lower()
        try:
            return int(text, 16) if text.startswith("0x") else int(text, 10)
        except ValueError:
            self.fail(f"{value!r} is not a valid integer", param, ctx)


AUTO_INT = AutoInt()


def split_image(
    input_path: Path,
    config: Configuration,
    base: str | None = None,
    manifest: bool = False,
    timestamp: str | None = None,
) -> dict:
    """Plan, name, and write every ROM image for ``input_path``.

    Returns the engine statistics plus the output names. Raises
    ``InvalidConfiguration`` before touching any file.
    """
    geometry = plan(config)

    if base is None:
        base = default_base(input_path)
    names = slot_names(base, geometry.num_banks, geometry.roms_per_bank)

    click.echo(format_plan(geometry, names))

    click.echo("Doing it..")
    engine = InterleaveEngine(geometry, names)
    stats = engine.run(input_path)

    result = {"names": names, "stats": stats}
    if manifest:
        result["manifest"] = write_manifest(geometry, names, base, input_path, timestamp=timestamp)
        click.echo(f"Manifest written to {result['manifest']}")

    click.echo("Done")
    return result


@click.command()
@click.option("--numroms", type=AUTO_INT, required=True, help="Total number of ROMs")
@click.option("--romwidth", type=AUTO_INT, default=None,
              help="Data bus width of a single ROM in bits (multiple of 8), defaults to 8")
@click.option("--romsize", type=AUTO_INT, required=True, help="Size of a single ROM in bytes")
@click.option("--rombanks", type=AUTO_INT, default=None, help="How many banks of ROMs, defaults to 1")
@click.option("--paduptosize", type=AUTO_INT, default=None, help=PADUPTOSIZE_HELP)
@click.option("--manifest", is_flag=True, help="Also write BASENAME.manifest.json and BASENAME.slots.parquet")
@click.argument("input", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("basename", required=False, default=None)
def main(
    numroms: int,
    romwidth: int | None,
    romsize: int,
    rombanks: int | None,
    paduptosize: int | None,
    manifest: bool,
    input: Path,
    basename: str | None,
) -> None:
    """Split INPUT into ROM images named BASENAME.<rom> or BASENAME.<bank>.<rom>.

    BASENAME defaults to INPUT without its extension.
    """
    try:
        config = Configuration.create(
            num_roms=numroms,
            rom_size_bytes=romsize,
            rom_width_bits=romwidth,
            num_banks=rombanks,
            pad_up_to_size=paduptosize,
        )
        split_image(input, config, base=basename, manifest=manifest)
    except (RomjakError, OSError) as e:
        # One line, no traceback: the operator fixes the arguments and re-runs.
        click.echo(f"FATAL: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
