"""Signing commands: account ECDSA and HTTP request authorization."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
import httpx

from ..auth.ecdsa import sign_ecdsa, verify_ecdsa
from ..auth.errors import AuthError
from ..auth.signer import DEFAULT_EXPIRE_SECONDS, Signer
from ..common.config import XassetConfig, default_sign_options
from ..common.errors import ConfigError


def _fail(exc: Exception, exit_code: int) -> None:
    click.secho(f"ERROR: {exc}", fg="red", err=True)
    sys.exit(exit_code)


@click.group()
def sign() -> None:
    """Sign messages and requests."""


@sign.command("ecdsa")
@click.option("--privtkey", "-k", "private_key", required=True, help="Account private key (JSON)")
@click.option("--msg", "-m", required=True, help="Content to be signed")
@click.option("--fmt", "-f", type=click.Choice(["std", "vis"]), default="vis", help="Display format")
def ecdsa(private_key: str, msg: str, fmt: str) -> None:
    """ECDSA-sign a message with an account key."""
    try:
        signature = sign_ecdsa(private_key, msg.encode("utf-8"))
    except AuthError as exc:
        _fail(exc, exc.exit_code)
        return

    if fmt == "std":
        click.echo(signature, nl=False)
    else:
        click.echo(signature)


@sign.command("verify")
@click.option("--pubkey", "-k", "public_key", required=True, help="Account public key (JSON)")
@click.option("--sign", "-s", "signature", required=True, help="Hex signature")
@click.option("--msg", "-m", required=True, help="Signed content")
def verify(public_key: str, signature: str, msg: str) -> None:
    """Verify an ECDSA message signature."""
    try:
        valid = verify_ecdsa(public_key, signature, msg.encode("utf-8"))
    except AuthError as exc:
        _fail(exc, exc.exit_code)
        return

    if not valid:
        click.secho("Signature: invalid", fg="red")
        sys.exit(1)
    click.secho("Signature: valid", fg="green")


@sign.command("request")
@click.option("--method", "-X", default="POST", help="HTTP method")
@click.option("--url", "-u", required=True, help="Full request URL")
@click.option("--header", "-H", "headers", multiple=True, help="Header as 'Name: value'")
@click.option("--expire", default=DEFAULT_EXPIRE_SECONDS, type=int, help="Token lifetime in seconds")
@click.option("--timestamp", default=0, type=int, help="Sign time (unix seconds, 0 = now)")
@click.option("--env-file", type=click.Path(dir_okay=False), default=None, help="Credentials .env file")
def request(
    method: str,
    url: str,
    headers: tuple[str, ...],
    expire: int,
    timestamp: int,
    env_file: Optional[str],
) -> None:
    """Print the Authorization token for an HTTP request."""
    try:
        config = XassetConfig.from_env(Path(env_file) if env_file else None)
    except ConfigError as exc:
        _fail(exc, exc.exit_code)
        return

    header_pairs = []
    for raw in headers:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            _fail(click.BadParameter(f"Header must be 'Name: value', got {raw!r}"), 2)
            return
        header_pairs.append((name.strip(), value.strip()))

    if not any(name.lower() == "host" for name, _ in header_pairs):
        header_pairs.append(("Host", httpx.URL(url).netloc.decode("ascii")))

    options = default_sign_options()
    options.expire_seconds = expire
    options.timestamp = timestamp

    try:
        token = Signer(config.credentials, options).sign(method.upper(), url, header_pairs)
    except AuthError as exc:
        _fail(exc, exc.exit_code)
        return
    click.echo(token)
