"""File hashing commands."""

from __future__ import annotations

from pathlib import Path

import click

from ..utils import sha256_hex


@click.group("hash")
def hash_group() -> None:
    """Hash utilities."""


@hash_group.command("sha256")
@click.option(
    "--file",
    "-f",
    "file_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path of file to be hashed",
)
def sha256(file_path: Path) -> None:
    """Print the SHA-256 hex digest of a file."""
    click.echo(sha256_hex(file_path.read_bytes()))
