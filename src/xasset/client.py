"""
Base client for the asset service.

Every call is a form-encoded POST signed with the app's access key. Business
payloads additionally carry a nonce and an ECDSA signature made with the
acting account's key (see :func:`sign_action`).
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union
from urllib.parse import urlencode

import httpx

from .auth.ecdsa import sign_ecdsa
from .auth.errors import AuthError
from .auth.signer import Signer
from .common.config import XassetConfig
from .common.errors import ConfigError, RequestFailedError, ResponseError
from .common.httpcli import gen_request, send_request
from .utils import md5_hex

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded;charset=utf-8"
TRACE_ID_HEADER = "xasset-trace-id"
ERRNO_SUCCESS = 0


@dataclass
class RequestResult:
    http_code: int
    req_url: str
    headers: httpx.Headers
    body: str


def sign_action(private_key_json: str, *parts: Union[int, str]) -> str:
    """ECDSA-sign the concatenation of ``parts``, e.g. ``(asset_id, nonce)``."""
    message = "".join(str(part) for part in parts)
    return sign_ecdsa(private_key_json, message.encode("utf-8"))


class XassetBaseClient:
    """Send signed requests to the configured endpoint."""

    def __init__(
        self,
        config: Optional[XassetConfig],
        transport: Optional[httpx.BaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ):
        if config is None or not config.is_valid():
            raise ConfigError("Client config requires an endpoint, credentials and sign options.")
        self.config = config
        self.transport = transport
        self.signer = Signer(config.credentials, config.sign_options, clock=clock)
        self.clock = clock

    def post(self, uri: str, data: Union[Mapping[str, Any], str] = "") -> RequestResult:
        """
        Sign and send a POST request.

        Args:
            uri: Path under the endpoint, e.g. ``/xasset/horae/v1/create``
            data: Form fields (encoded in key order) or an already-encoded body

        Returns:
            HTTP status, request URL, response headers and body text

        Raises:
            ConfigError: If the endpoint does not form a valid URL
            AuthError: If the request cannot be signed
            RequestFailedError: On transport failures
        """
        req_url = f"{self.config.endpoint}{uri}"
        body = data if isinstance(data, str) else urlencode(sorted(data.items()))
        try:
            host = httpx.URL(req_url).host
        except httpx.InvalidURL as exc:
            logger.warning("URL error. [url:%s] [err:%s]", req_url, exc)
            raise ConfigError(f"Invalid request URL: {req_url}") from exc

        headers = {
            "Content-Type": FORM_CONTENT_TYPE,
            "Host": host,
            "Timestamp": str(int(self.clock())),
            "Content-Md5": md5_hex(body.encode("utf-8")),
            "User-Agent": self.config.user_agent,
        }
        request = gen_request("POST", req_url, headers, body)

        try:
            request.headers["Authorization"] = self.signer.sign_request(request)
        except AuthError:
            logger.warning("Sign request failed. [url:%s]", req_url)
            raise

        try:
            response = send_request(
                request,
                self.config.connect_timeout_ms,
                self.config.read_write_timeout_ms,
                transport=self.transport,
            )
        except httpx.HTTPError as exc:
            logger.warning("Send http request failed. [url:%s] [err:%s]", req_url, exc)
            raise RequestFailedError(f"Request to {req_url} failed: {exc}") from exc

        return RequestResult(
            http_code=response.status_code,
            req_url=req_url,
            headers=response.headers,
            body=response.body.decode("utf-8", errors="replace"),
        )

    def parse_response(self, result: RequestResult) -> dict[str, Any]:
        """Decode the JSON envelope and check ``errno``.

        Raises:
            ResponseError: On a non-200 status, a non-JSON body or a non-zero errno
        """
        trace_id = self.get_trace_id(result.headers)
        if result.http_code != 200:
            raise ResponseError(
                f"Unexpected HTTP status {result.http_code} [trace_id:{trace_id}]",
                http_code=result.http_code,
            )

        try:
            payload = json.loads(result.body)
        except json.JSONDecodeError as exc:
            raise ResponseError(
                f"Response body is not JSON [trace_id:{trace_id}]",
                http_code=result.http_code,
            ) from exc
        if not isinstance(payload, dict):
            raise ResponseError(f"Response body is not an object [trace_id:{trace_id}]", http_code=result.http_code)

        errno = payload.get("errno", ERRNO_SUCCESS)
        if errno != ERRNO_SUCCESS:
            logger.warning(
                "Server returned an error. [errno:%s] [errmsg:%s] [request_id:%s] [trace_id:%s]",
                errno,
                payload.get("errmsg", ""),
                payload.get("request_id", ""),
                trace_id,
            )
            raise ResponseError(
                f"Server error {errno}: {payload.get('errmsg', '')}",
                http_code=result.http_code,
                errno=errno,
                request_id=payload.get("request_id", ""),
            )
        return payload

    @staticmethod
    def get_trace_id(headers: Optional[httpx.Headers]) -> str:
        trace_id = headers.get(TRACE_ID_HEADER) if headers is not None else None
        return trace_id or "0"
