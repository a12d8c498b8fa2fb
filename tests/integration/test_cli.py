"""
CLI integration tests using Click's test runner.

Tests verify that the CLI commands work end-to-end via the Click
CliRunner, without requiring network access.
"""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from xasset import __version__
from xasset.auth.ecdsa import generate_keypair, sign_ecdsa, verify_address, verify_ecdsa
from xasset.auth.signer import Credentials, check_sign
from xasset.cli import cli

ENV_VARS = [
    "XASSET_ENDPOINT",
    "XASSET_APP_ID",
    "XASSET_ACCESS_KEY_ID",
    "XASSET_SECRET_ACCESS_KEY",
    "XASSET_USER_AGENT",
]


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def keypair():
    return generate_keypair()


@pytest.fixture()
def credentials_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("XASSET_APP_ID", "110380")
    monkeypatch.setenv("XASSET_ACCESS_KEY_ID", "AK")
    monkeypatch.setenv("XASSET_SECRET_ACCESS_KEY", "SK")


class TestVersion:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("account", "sign", "hash", "gen"):
            assert command in result.output


class TestAccount:
    def test_create_std(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["account", "create", "--fmt", "std"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        signature = sign_ecdsa(payload["private_key"], b"msg")
        assert verify_ecdsa(payload["public_key"], signature, b"msg") is True
        assert verify_address(payload["address"], payload["public_key"]) is True

    def test_create_visual(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["account", "create"])
        assert result.exit_code == 0
        assert "address:" in result.output
        assert "private_key:" in result.output
        assert "public_key:" in result.output

    def test_create_other_curve_has_no_address(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["account", "create", "--curve", "P-384", "--fmt", "std"])
        assert result.exit_code == 0
        assert "address" not in json.loads(result.output)


class TestSign:
    def test_ecdsa_then_verify(self, runner: CliRunner, keypair) -> None:
        result = runner.invoke(cli, ["sign", "ecdsa", "-k", keypair.private_key, "-m", "hello", "-f", "std"])
        assert result.exit_code == 0
        signature = result.output.strip()

        result = runner.invoke(cli, ["sign", "verify", "-k", keypair.public_key, "-s", signature, "-m", "hello"])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_verify_rejects_other_message(self, runner: CliRunner, keypair) -> None:
        signature = sign_ecdsa(keypair.private_key, b"hello")
        result = runner.invoke(cli, ["sign", "verify", "-k", keypair.public_key, "-s", signature, "-m", "bye"])
        assert result.exit_code == 1
        assert "invalid" in result.output

    def test_ecdsa_bad_key(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["sign", "ecdsa", "-k", "not-a-key", "-m", "hello"])
        assert result.exit_code == 5

    def test_request_token_verifies(self, runner: CliRunner, credentials_env, tmp_path: Path) -> None:
        url = "http://xasset.test/xasset/horae/v1/query?asset_id=7"
        result = runner.invoke(
            cli,
            [
                "sign", "request",
                "-X", "post",
                "-u", url,
                "-H", "Content-Type: application/json",
                "--timestamp", "1700000000",
                "--env-file", str(tmp_path / "missing.env"),
            ],
        )
        assert result.exit_code == 0, result.output
        token = result.output.strip()
        fields = token.split("/")
        assert fields[:4] == ["bce-auth-v1", "AK", "2023-11-14T22:13:20Z", "1800"]
        assert fields[4] == "content-type;host"

        request = httpx.Request(
            "POST",
            url,
            headers={"Content-Type": "application/json", "Authorization": token},
        )
        check_sign(request, Credentials(110380, "AK", "SK"), clock=lambda: 1_700_000_000)

    def test_request_without_credentials(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        for name in ENV_VARS:
            monkeypatch.setenv(name, "")
        result = runner.invoke(
            cli,
            ["sign", "request", "-u", "http://xasset.test/", "--env-file", str(tmp_path / "missing.env")],
        )
        assert result.exit_code == 6

    def test_request_bad_header(self, runner: CliRunner, credentials_env, tmp_path: Path) -> None:
        result = runner.invoke(
            cli,
            ["sign", "request", "-u", "http://xasset.test/", "-H", "no-colon", "--env-file", str(tmp_path / "x.env")],
        )
        assert result.exit_code == 2


class TestHash:
    def test_sha256_file(self, runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "data.txt"
        target.write_bytes(b"hello")
        result = runner.invoke(cli, ["hash", "sha256", "-f", str(target)])
        assert result.exit_code == 0
        assert result.output.strip() == "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["hash", "sha256", "-f", str(tmp_path / "nope")])
        assert result.exit_code != 0


class TestGen:
    def test_nonce_count(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["gen", "nonce", "-n", "3"])
        assert result.exit_code == 0
        values = [int(line) for line in result.output.split()]
        assert len(values) == 3
        assert all(0 <= value < (1 << 63) for value in values)

    def test_asset_ids_embed_app_id(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["gen", "asset-id", "--app-id", "110380", "-n", "5"])
        assert result.exit_code == 0
        values = [int(line) for line in result.output.split()]
        assert len(values) == 5
        assert all(value & 0xFFFFF == 110380 for value in values)
