"""Account keypair commands."""

from __future__ import annotations

import json
import sys

import click

from ..auth.ecdsa import CURVES, generate_keypair


@click.group()
def account() -> None:
    """Account operations."""


@account.command("create")
@click.option("--curve", type=click.Choice(sorted(CURVES)), default="P-256", help="Elliptic curve")
@click.option("--fmt", "-f", type=click.Choice(["std", "vis"]), default="vis", help="Display format")
def create(curve: str, fmt: str) -> None:
    """Create a new account keypair."""
    keypair = generate_keypair(curve)

    if fmt == "std":
        payload = {"private_key": keypair.private_key, "public_key": keypair.public_key}
        if keypair.address:
            payload["address"] = keypair.address
        click.echo(json.dumps(payload))
        return

    if keypair.address:
        click.echo(f"address:{keypair.address}")
    click.echo(f"private_key:{keypair.private_key}")
    click.echo(f"public_key:{keypair.public_key}")
    click.secho("Keep the private key secret; it cannot be recovered.", fg="yellow", file=sys.stderr)
