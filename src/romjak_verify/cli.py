import json
from pathlib import Path
import click
from .logic import verify_images

@click.group()
def main():
    pass

@main.command("images")
@click.argument("manifest", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--source", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None,
              help="Also regenerate the images from this input and compare")
def images_cmd(manifest: Path, source: Path | None):
    result = verify_images(manifest, source)
    click.echo(json.dumps(result, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    if result["status"] != "PASS":
        raise SystemExit(1)

if __name__ == "__main__":
    main()
