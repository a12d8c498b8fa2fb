"""
xasset CLI

Command-line helpers for the asset service SDK.

Commands:
  account   - Create account keypairs
  sign      - ECDSA sign/verify messages, sign HTTP requests
  hash      - Hash files
  gen       - Generate nonces and asset ids
"""

from __future__ import annotations

import logging
import sys

import click

from . import __version__


@click.group()
@click.version_option(version=__version__, prog_name="xasset")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """xasset: asset service terminal client."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


from .commands.account import account
from .commands.gen import gen
from .commands.hash import hash_group
from .commands.sign import sign

cli.add_command(account)
cli.add_command(sign)
cli.add_command(hash_group)
cli.add_command(gen)


def main() -> None:
    """xasset CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
