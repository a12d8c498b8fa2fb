"""
HTTP request signing (bce-auth-v1).

Authorization token layout::

    {version}/{access_key_id}/{iso_date}/{expire_seconds}/{signed_headers}/{signature}

The signing key is ``HMAC-SHA256(secret_access_key, scope)`` where scope is
the first four fields joined by ``/``. The signature is
``HMAC-SHA256(signing_key, canonical_request)``; both are lower-case hex.
"""

from __future__ import annotations

import hmac
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Optional, Union

import httpx

from ..utils import format_iso8601, hmac_sha256_hex, parse_iso8601, uri_encode
from .errors import (
    BadDateField,
    ExpirationOutOfRange,
    Expired,
    MalformedToken,
    MissingHostInSignedHeaders,
    SignatureMismatch,
    SignFailure,
    UnsupportedVersion,
)

logger = logging.getLogger(__name__)

AUTH_VERSION = "bce-auth-v1"
AUTHORIZATION = "authorization"
SIGN_JOINER = "\n"
SIGN_HEADER_JOINER = ";"
DEFAULT_EXPIRE_SECONDS = 1800
MAX_EXPIRE_SECONDS = 3600
DEFAULT_HEADERS_TO_SIGN = frozenset({"host", "content-length", "content-type", "content-md5"})

_INTEGER_RE = re.compile(r"[+-]?\d+")

HeadersLike = Union[httpx.Headers, Mapping[str, str], Iterable[tuple[str, str]]]
Clock = Callable[[], float]


@dataclass(frozen=True)
class Credentials:
    app_id: int
    access_key_id: str
    secret_access_key: str = field(repr=False)


@dataclass
class SignOptions:
    """Per-request signing parameters.

    Attributes:
        headers_to_sign: Lower-case header names to cover. ``None`` signs
            ``host`` only; ``host`` is always covered.
        timestamp: Unix seconds for the sign date, 0 for the current time.
        expire_seconds: Token lifetime; values below 1 fall back to
            ``DEFAULT_EXPIRE_SECONDS``.
    """

    headers_to_sign: Optional[frozenset[str]] = None
    timestamp: int = 0
    expire_seconds: int = DEFAULT_EXPIRE_SECONDS


@dataclass(frozen=True)
class CanonicalRequest:
    method: str
    uri: str
    query_string: str
    headers: str
    signed_headers: tuple[str, ...]

    def __str__(self) -> str:
        return SIGN_JOINER.join([self.method, self.uri, self.query_string, self.headers])


# ---------------------------------------------------------------------------
# Canonicalization
# ---------------------------------------------------------------------------


def canonical_uri(path: str) -> str:
    if not path:
        return "/"
    if path.startswith("/"):
        path = path[1:]
    return "/" + uri_encode(path, encode_slash=False)


def canonical_query_string(raw_query: str) -> str:
    if not raw_query:
        return ""

    items = []
    for pair in raw_query.split("&"):
        if not pair:
            continue
        # Raw wire text is encoded as-is; "a=b=c" yields key "a", value "b".
        parts = pair.split("=")
        key = parts[0]
        value = parts[1] if len(parts) > 1 else ""
        if key.lower() == AUTHORIZATION:
            continue
        items.append(f"{uri_encode(key)}={uri_encode(value)}")

    items.sort()
    return "&".join(items)


def _header_items(headers: HeadersLike) -> Iterable[tuple[str, str]]:
    if isinstance(headers, httpx.Headers):
        return headers.multi_items()
    if isinstance(headers, Mapping):
        return headers.items()
    return headers


def _merge_headers(headers: HeadersLike) -> dict[str, str]:
    # Repeated header names collapse into one ";"-joined value.
    merged: dict[str, list[str]] = {}
    for name, value in _header_items(headers):
        merged.setdefault(name.lower(), []).append(value)
    return {name: SIGN_HEADER_JOINER.join(values) for name, values in merged.items()}


def canonical_headers(
    headers: HeadersLike,
    headers_to_sign: Iterable[str],
) -> tuple[str, list[str]]:
    """Return the canonical header block and the sorted signed header names."""
    wanted = {name.lower() for name in headers_to_sign}
    lines = []
    names = []
    for name, value in _merge_headers(headers).items():
        if name == AUTHORIZATION:
            continue
        if name in wanted or name == "host":
            lines.append(f"{uri_encode(name)}:{uri_encode(value.strip())}")
            names.append(name)

    lines.sort()
    names.sort()
    return SIGN_JOINER.join(lines), names


def build_canonical_request(
    method: str,
    path: str,
    raw_query: str,
    headers: HeadersLike,
    headers_to_sign: Iterable[str],
) -> CanonicalRequest:
    header_block, signed_headers = canonical_headers(headers, headers_to_sign)
    return CanonicalRequest(
        method=method,
        uri=canonical_uri(path),
        query_string=canonical_query_string(raw_query),
        headers=header_block,
        signed_headers=tuple(signed_headers),
    )


def _split_url(url: Union[str, httpx.URL]) -> tuple[str, str]:
    parsed = url if isinstance(url, httpx.URL) else httpx.URL(url)
    return parsed.path, parsed.query.decode("ascii")


def _signature(signing_key: str, canonical: CanonicalRequest) -> str:
    return hmac_sha256_hex(signing_key, str(canonical))


# ---------------------------------------------------------------------------
# Signer / Verifier
# ---------------------------------------------------------------------------


class Signer:
    """Build Authorization tokens for outgoing requests."""

    def __init__(
        self,
        credentials: Optional[Credentials],
        options: Optional[SignOptions],
        clock: Clock = time.time,
    ):
        self.credentials = credentials
        self.options = options
        self.clock = clock

    def sign(
        self,
        method: str,
        url: Union[str, httpx.URL],
        headers: Optional[HeadersLike] = None,
    ) -> str:
        credentials = self.credentials
        options = self.options
        if credentials is None or options is None or not method or url is None:
            raise SignFailure("Credentials, sign options and request are required.")
        if not credentials.access_key_id or not credentials.secret_access_key:
            raise SignFailure("Credentials must carry an access key id and secret.")

        timestamp = options.timestamp if options.timestamp != 0 else int(self.clock())
        expire_seconds = options.expire_seconds if options.expire_seconds >= 1 else DEFAULT_EXPIRE_SECONDS
        headers_to_sign = options.headers_to_sign if options.headers_to_sign is not None else {"host"}

        scope = f"{AUTH_VERSION}/{credentials.access_key_id}/{format_iso8601(timestamp)}/{expire_seconds}"
        signing_key = hmac_sha256_hex(credentials.secret_access_key, scope)

        path, raw_query = _split_url(url)
        canonical = build_canonical_request(method, path, raw_query, headers or {}, headers_to_sign)
        logger.debug("Canonical request for %s:\n%s", credentials.access_key_id, canonical)

        signed_headers = SIGN_HEADER_JOINER.join(canonical.signed_headers)
        return f"{scope}/{signed_headers}/{_signature(signing_key, canonical)}"

    def sign_request(self, request: Optional[httpx.Request]) -> str:
        if request is None:
            raise SignFailure("Request is required.")
        return self.sign(request.method, request.url, request.headers)


class Verifier:
    """Check the Authorization token carried by an incoming request.

    The signed-header list in the token is taken as given: the signature is
    recomputed over the current values of exactly those headers, so any
    change to them, the method, the path or the query is detected.
    """

    def __init__(self, credentials: Optional[Credentials], clock: Clock = time.time):
        self.credentials = credentials
        self.clock = clock

    def verify(
        self,
        method: str,
        url: Union[str, httpx.URL],
        headers: HeadersLike,
    ) -> None:
        credentials = self.credentials
        if credentials is None or not method or url is None or headers is None:
            raise SignFailure("Credentials and request are required.")

        merged = _merge_headers(headers)
        fields = merged.get(AUTHORIZATION, "").split("/")
        if len(fields) != 6:
            raise self._reject(MalformedToken(f"Authorization must have 6 fields, got {len(fields)}."))
        version, access_key_id, sign_date, expire_field, signed_field, signature = fields

        if version != AUTH_VERSION:
            raise self._reject(UnsupportedVersion(f"Unsupported auth version: {version!r}"), access_key_id)

        if not _INTEGER_RE.fullmatch(expire_field):
            raise self._reject(ExpirationOutOfRange(f"Invalid expiration: {expire_field!r}"), access_key_id)
        expire_seconds = int(expire_field)
        if expire_seconds < 0 or expire_seconds > MAX_EXPIRE_SECONDS:
            raise self._reject(ExpirationOutOfRange(f"Expiration out of range: {expire_seconds}"), access_key_id)

        try:
            signed_at = parse_iso8601(sign_date)
        except ValueError as exc:
            raise self._reject(BadDateField(f"Invalid sign date: {sign_date!r}"), access_key_id) from exc

        if signed_at + expire_seconds < int(self.clock()):
            raise self._reject(Expired(f"Signature expired at {signed_at + expire_seconds}."), access_key_id)

        headers_to_sign = set(signed_field.split(SIGN_HEADER_JOINER))
        if "host" not in headers_to_sign:
            raise self._reject(MissingHostInSignedHeaders("Signed headers must include host."), access_key_id)

        scope = "/".join(fields[0:4])
        signing_key = hmac_sha256_hex(credentials.secret_access_key, scope)
        path, raw_query = _split_url(url)
        canonical = build_canonical_request(method, path, raw_query, headers, headers_to_sign)
        expected = _signature(signing_key, canonical)

        if not hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8", "surrogateescape")):
            raise self._reject(SignatureMismatch("Signature does not match request."), access_key_id)

    def verify_request(self, request: Optional[httpx.Request]) -> None:
        if request is None:
            raise SignFailure("Request is required.")
        self.verify(request.method, request.url, request.headers)

    @staticmethod
    def _reject(exc: Exception, access_key_id: str = "") -> Exception:
        logger.warning(
            "Signature check failed: reason=%s access_key_id=%s",
            getattr(exc, "reason", type(exc).__name__),
            access_key_id or "-",
        )
        return exc


def sign(
    request: Optional[httpx.Request],
    credentials: Optional[Credentials],
    options: Optional[SignOptions],
    *,
    clock: Clock = time.time,
) -> str:
    """Return the Authorization token for ``request``."""
    return Signer(credentials, options, clock=clock).sign_request(request)


def check_sign(
    request: Optional[httpx.Request],
    credentials: Optional[Credentials],
    *,
    clock: Clock = time.time,
) -> None:
    """Verify the Authorization header of ``request``; raises on failure."""
    Verifier(credentials, clock=clock).verify_request(request)
