"""Nonce and asset id generation commands."""

from __future__ import annotations

import click

from ..idgen import IdGenerator


@click.group()
def gen() -> None:
    """Generate ids for business payloads."""


@gen.command("nonce")
@click.option("--count", "-n", default=1, type=click.IntRange(min=1), help="How many nonces")
def nonce(count: int) -> None:
    """Print fresh nonces, one per line."""
    generator = IdGenerator()
    for _ in range(count):
        click.echo(generator.nonce())


@gen.command("asset-id")
@click.option("--app-id", required=True, type=int, help="App id embedded in the low 20 bits")
@click.option("--count", "-n", default=1, type=click.IntRange(min=1), help="How many ids")
def asset_id(app_id: int, count: int) -> None:
    """Print fresh asset ids for an app, one per line."""
    generator = IdGenerator()
    for _ in range(count):
        click.echo(generator.asset_id(app_id))
