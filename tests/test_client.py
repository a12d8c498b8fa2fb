"""Tests for configuration, the httpx transport and the base client."""

from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path
from urllib.parse import parse_qs

import httpx
import pytest

from xasset.auth.ecdsa import generate_keypair, verify_ecdsa
from xasset.auth.errors import SignatureMismatch
from xasset.auth.signer import DEFAULT_HEADERS_TO_SIGN, check_sign
from xasset.client import RequestResult, XassetBaseClient, sign_action
from xasset.common.config import (
    CONNECT_TIMEOUT_MS_DEFAULT,
    ENDPOINT_DEFAULT,
    USER_AGENT_DEFAULT,
    XassetConfig,
)
from xasset.common.errors import ConfigError, RequestFailedError, ResponseError
from xasset.common.httpcli import gen_request, is_https, send_request

NOW = 1_700_000_000
ENV_VARS = [
    "XASSET_ENDPOINT",
    "XASSET_APP_ID",
    "XASSET_ACCESS_KEY_ID",
    "XASSET_SECRET_ACCESS_KEY",
    "XASSET_USER_AGENT",
]


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register every XASSET_* variable so values loaded from .env files are undone."""
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture()
def config() -> XassetConfig:
    cfg = XassetConfig(endpoint="http://xasset.test")
    cfg.set_credentials(110380, "AK", "SK")
    return cfg


def make_client(config: XassetConfig, handler) -> XassetBaseClient:
    return XassetBaseClient(config, transport=httpx.MockTransport(handler), clock=lambda: NOW)


class TestConfig:
    def test_defaults(self) -> None:
        cfg = XassetConfig()
        assert cfg.endpoint == ENDPOINT_DEFAULT
        assert cfg.user_agent == USER_AGENT_DEFAULT
        assert cfg.sign_options.headers_to_sign == DEFAULT_HEADERS_TO_SIGN
        assert cfg.sign_options.expire_seconds == 1800
        assert cfg.credentials is None

    def test_invalid_without_credentials(self) -> None:
        assert XassetConfig().is_valid() is False

    def test_invalid_without_endpoint(self, config: XassetConfig) -> None:
        config.endpoint = ""
        assert config.is_valid() is False

    def test_backfills_defaults(self, config: XassetConfig) -> None:
        config.user_agent = ""
        config.connect_timeout_ms = 0
        assert config.is_valid() is True
        assert config.user_agent == USER_AGENT_DEFAULT
        assert config.connect_timeout_ms == CONNECT_TIMEOUT_MS_DEFAULT

    def test_str_hides_secret(self, config: XassetConfig) -> None:
        config.set_credentials(1, "AK", "very-secret-value")
        text = str(config)
        assert "AK" in text
        assert "very-secret-value" not in text

    def test_from_env_variables(self, clean_env, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("XASSET_APP_ID", "110380")
        monkeypatch.setenv("XASSET_ACCESS_KEY_ID", "AK")
        monkeypatch.setenv("XASSET_SECRET_ACCESS_KEY", "SK")
        cfg = XassetConfig.from_env(tmp_path / "missing.env")
        assert cfg.credentials.app_id == 110380
        assert cfg.credentials.access_key_id == "AK"
        assert cfg.endpoint == ENDPOINT_DEFAULT

    def test_from_env_file(self, clean_env, tmp_path: Path) -> None:
        env_path = tmp_path / ".env"
        env_path.write_text(
            "XASSET_ENDPOINT=http://example.test\n"
            "XASSET_APP_ID=42\n"
            "XASSET_ACCESS_KEY_ID=file-ak\n"
            "XASSET_SECRET_ACCESS_KEY=file-sk\n",
            encoding="utf-8",
        )
        cfg = XassetConfig.from_env(env_path)
        assert cfg.endpoint == "http://example.test"
        assert cfg.credentials.app_id == 42
        assert cfg.credentials.secret_access_key == "file-sk"
        assert os.environ["XASSET_ACCESS_KEY_ID"] == "file-ak"

    def test_from_env_missing_credentials(self, clean_env, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            XassetConfig.from_env(tmp_path / "missing.env")

    def test_from_env_bad_app_id(self, clean_env, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("XASSET_APP_ID", "abc")
        monkeypatch.setenv("XASSET_ACCESS_KEY_ID", "AK")
        monkeypatch.setenv("XASSET_SECRET_ACCESS_KEY", "SK")
        with pytest.raises(ConfigError):
            XassetConfig.from_env(tmp_path / "missing.env")


class TestHttpcli:
    def test_gen_request_host_override(self) -> None:
        request = gen_request("POST", "http://10.0.0.1:8360/x", {"Host": "xasset.test"}, "a=1")
        assert request.headers["host"] == "xasset.test"
        assert request.content == b"a=1"
        assert request.headers["content-length"] == "3"

    def test_is_https(self) -> None:
        assert is_https("HTTPS://example.test") is True
        assert is_https("http://example.test") is False

    def test_send_request(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"ok"))
        response = send_request(gen_request("GET", "http://example.test/"), 1000, 3000, transport=transport)
        assert response.status_code == 200
        assert response.body == b"ok"

    def test_redirect_not_followed_when_disabled(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/start":
                return httpx.Response(302, headers={"Location": "http://example.test/end"})
            return httpx.Response(200, content=b"end")

        transport = httpx.MockTransport(handler)
        request = gen_request("GET", "http://example.test/start")
        response = send_request(request, 1000, 3000, follow_redirects=False, transport=transport)
        assert response.status_code == 302


class TestBaseClient:
    def test_requires_valid_config(self) -> None:
        with pytest.raises(ConfigError):
            XassetBaseClient(None)
        with pytest.raises(ConfigError):
            XassetBaseClient(XassetConfig())

    def test_post_is_signed_and_verifiable(self, config: XassetConfig) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            check_sign(request, config.credentials, clock=lambda: NOW)
            return httpx.Response(200, json={"errno": 0, "request_id": "r1", "asset_id": 7})

        client = make_client(config, handler)
        result = client.post("/xasset/horae/v1/create", {"asset_id": 7, "nonce": 99})

        assert result.http_code == 200
        assert result.req_url == "http://xasset.test/xasset/horae/v1/create"
        assert client.parse_response(result)["asset_id"] == 7

        request = seen[0]
        body = request.content
        assert parse_qs(body.decode()) == {"asset_id": ["7"], "nonce": ["99"]}
        assert request.headers["content-md5"] == hashlib.md5(body).hexdigest()
        assert request.headers["content-type"] == "application/x-www-form-urlencoded;charset=utf-8"
        assert request.headers["timestamp"] == str(NOW)
        assert request.headers["host"] == "xasset.test"
        signed = request.headers["authorization"].split("/")[4]
        assert signed == "content-length;content-md5;content-type;host"

    def test_tampered_md5_detected_by_server(self, config: XassetConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            forged = httpx.Request(
                request.method,
                request.url,
                headers={**request.headers, "content-md5": "0" * 32},
                content=request.content,
            )
            with pytest.raises(SignatureMismatch):
                check_sign(forged, config.credentials, clock=lambda: NOW)
            return httpx.Response(200, json={"errno": 0})

        make_client(config, handler).post("/x", {"a": 1})

    def test_transport_failure(self, config: XassetConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RequestFailedError):
            make_client(config, handler).post("/x", {"a": 1})

    def test_parse_response_http_error(self, config: XassetConfig) -> None:
        client = make_client(config, lambda r: httpx.Response(500))
        result = RequestResult(http_code=500, req_url="u", headers=httpx.Headers(), body="")
        with pytest.raises(ResponseError) as excinfo:
            client.parse_response(result)
        assert excinfo.value.http_code == 500

    def test_parse_response_errno(self, config: XassetConfig) -> None:
        client = make_client(config, lambda r: httpx.Response(200))
        body = json.dumps({"errno": 1002, "errmsg": "param error", "request_id": "r9"})
        result = RequestResult(http_code=200, req_url="u", headers=httpx.Headers(), body=body)
        with pytest.raises(ResponseError) as excinfo:
            client.parse_response(result)
        assert excinfo.value.errno == 1002
        assert excinfo.value.request_id == "r9"

    def test_parse_response_not_json(self, config: XassetConfig) -> None:
        client = make_client(config, lambda r: httpx.Response(200))
        result = RequestResult(http_code=200, req_url="u", headers=httpx.Headers(), body="<html>")
        with pytest.raises(ResponseError):
            client.parse_response(result)

    def test_trace_id(self) -> None:
        assert XassetBaseClient.get_trace_id(httpx.Headers({"xasset-trace-id": "abc"})) == "abc"
        assert XassetBaseClient.get_trace_id(httpx.Headers()) == "0"
        assert XassetBaseClient.get_trace_id(None) == "0"


class TestSignAction:
    def test_signs_concatenated_parts(self) -> None:
        keypair = generate_keypair()
        signature = sign_action(keypair.private_key, 123, 456)
        assert verify_ecdsa(keypair.public_key, signature, b"123456") is True
