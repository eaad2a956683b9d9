import json
from pathlib import Path

import click

from .logic import inspect_file, item_values

CANONICAL_JSON_KW = {"sort_keys": True, "separators": (",", ":"), "ensure_ascii": False}


def _emit(result: dict) -> None:
    click.echo(json.dumps(result, **CANONICAL_JSON_KW))
    if result["status"] != "PASS":
        raise SystemExit(1)


@click.group()
def main():
    pass


@main.command("tree")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def tree_cmd(path: Path):
    """Print the metadata atom tree of PATH."""
    _emit(inspect_file(path))


@main.command("tags")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def tags_cmd(path: Path):
    """Print the ilst item values of PATH."""
    _emit(item_values(path))


if __name__ == "__main__":
    main()
