"""
Thin HTTP transport over httpx.

Requests are built separately from being sent so that they can be signed in
between: the signature covers the exact method, URL and headers that go on
the wire.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import httpx


@dataclass
class HttpResponse:
    status_code: int
    headers: httpx.Headers
    body: bytes


def gen_request(
    method: str,
    url: str,
    headers: Optional[dict[str, str]] = None,
    data: Union[str, bytes] = "",
) -> httpx.Request:
    """Build a request; a ``Host`` entry in ``headers`` overrides the URL host."""
    return httpx.Request(method, url, headers=headers or {}, content=data or None)


def is_https(url: str) -> bool:
    return url.lower().startswith("https")


def send_request(
    request: httpx.Request,
    connect_timeout_ms: int,
    rw_timeout_ms: int,
    *,
    follow_redirects: bool = True,
    verify_tls: bool = True,
    transport: Optional[httpx.BaseTransport] = None,
) -> HttpResponse:
    """
    Send a prepared request.

    Args:
        request: Request from :func:`gen_request`, already signed
        connect_timeout_ms: Connect timeout in milliseconds
        rw_timeout_ms: Read/write timeout in milliseconds
        follow_redirects: When False a redirect response is returned as-is
        verify_tls: Verify server certificates for https endpoints
        transport: Optional transport (e.g. ``httpx.MockTransport`` in tests)

    Returns:
        Status code, headers and raw body

    Raises:
        httpx.HTTPError: On connection failures and timeouts
    """
    timeout = httpx.Timeout(rw_timeout_ms / 1000, connect=connect_timeout_ms / 1000)
    with httpx.Client(
        timeout=timeout,
        follow_redirects=follow_redirects,
        verify=verify_tls,
        transport=transport,
    ) as client:
        response = client.send(request)
        return HttpResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=response.content,
        )
