from __future__ import annotations

import hashlib
import hmac
import socket
from datetime import datetime, timezone
from urllib.parse import quote

ISO8601_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
DEFAULT_HOSTNAME = "127.0.0.1"


def sha256_digest(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def md5_hex(data: bytes) -> str:
    return hashlib.md5(data, usedforsecurity=False).hexdigest()


def hmac_sha256_hex(key: str, message: str) -> str:
    return hmac.new(key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def uri_encode(value: str, encode_slash: bool = True) -> str:
    """Percent-encode everything except RFC 3986 unreserved characters.

    Hex digits are upper-case and a space becomes ``%20``. With
    ``encode_slash=False`` the ``/`` separator is kept literal.
    """
    return quote(value, safe="" if encode_slash else "/")


def format_iso8601(unix_seconds: int) -> str:
    return datetime.fromtimestamp(unix_seconds, tz=timezone.utc).strftime(ISO8601_FORMAT)


def parse_iso8601(value: str) -> int:
    parsed = datetime.strptime(value, ISO8601_FORMAT)
    return int(parsed.replace(tzinfo=timezone.utc).timestamp())


def get_hostname() -> str:
    try:
        hostname = socket.gethostname()
    except OSError:
        return DEFAULT_HOSTNAME
    return hostname or DEFAULT_HOSTNAME


BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def base58_encode(data: bytes) -> str:
    num = int.from_bytes(data, "big")
    encoded = ""
    while num > 0:
        num, rem = divmod(num, 58)
        encoded = BASE58_ALPHABET[rem] + encoded

    # each leading zero byte is written as "1"
    zeros = len(data) - len(data.lstrip(b"\x00"))
    return "1" * zeros + encoded


def base58_decode(s: str) -> bytes:
    num = 0
    for ch in s:
        index = BASE58_ALPHABET.find(ch)
        if index < 0:
            raise ValueError(f"Invalid base58 character: {ch}")
        num = num * 58 + index

    zeros = len(s) - len(s.lstrip("1"))
    body = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
    return b"\x00" * zeros + body
