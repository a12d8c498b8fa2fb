"""
Pseudo-unique identifier generation.

Produces the 63-bit random ids, nonces and packed asset ids carried in
business payloads (``nonce``, ``asset_id``). These values resist trivial
collision and replay; they are not security tokens.

Packed id layout (bit 0 is the least significant bit)::

    | 0 - 19  | 20 - 31 | 32   | 33 - 40 | 41 - 56    | 57 - 60 | 61 - 63 |
    | 20 bits | 12 bits | 1    | 8 bits  | 16 bits    | 4 bits  | 3 bits  |
    | base id | random  | flag | random  | hash bits  | random  | zero    |
"""

from __future__ import annotations

import hashlib
import random
import struct
import time
from typing import Callable, Optional

from .utils import get_hostname

MASK63 = 0x7FFF_FFFF_FFFF_FFFF
MASK64 = 0xFFFF_FFFF_FFFF_FFFF
MASK32 = 0xFFFF_FFFF
BASE_ID_MASK = 0xF_FFFF


def content_hash64(content: str) -> int:
    """Fold the MD5 digest of ``content`` into an unsigned 64-bit integer.

    The digest is read as four little-endian 32-bit words ``w0..w3``; the low
    half of the result is ``w0 + w2`` and the high half ``w1 + w3``, both with
    32-bit wraparound.
    """
    digest = hashlib.md5(content.encode("utf-8"), usedforsecurity=False).digest()
    w0, w1, w2, w3 = struct.unpack("<4I", digest)
    low = (w0 + w2) & MASK32
    high = (w1 + w3) & MASK32
    return low | (high << 32)


class IdGenerator:
    """Mint random ids, nonces and packed ids.

    Each instance owns its random source. The default is the operating
    system CSPRNG, which is safe to share between threads; pass a seeded
    ``random.Random`` together with a fixed ``clock_ns`` for reproducible
    output.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock_ns: Callable[[], int] = time.time_ns,
        hostname: Optional[str] = None,
    ):
        self.rng = rng if rng is not None else random.SystemRandom()
        self.clock_ns = clock_ns
        self.hostname = hostname if hostname is not None else get_hostname()

    def rand_id(self) -> int:
        nano = self.clock_ns()
        r1 = self.rng.getrandbits(63)
        r2 = self.rng.getrandbits(63)
        shift1 = self.rng.randint(2, 17)
        shift2 = self.rng.randint(1, 8)
        return ((r1 >> shift1) + (r2 >> shift2) + (nano >> 1)) & MASK63

    def nonce(self) -> int:
        first = self.rand_id()
        second = self.rand_id()
        content = f"{first}#{second}#{self.clock_ns()}#{self.hostname}"
        return content_hash64(content) & MASK63

    def pack_id(self, base_id: int, flag: int = 0) -> int:
        if flag not in (0, 1):
            raise ValueError(f"flag must be 0 or 1, got {flag!r}")

        base_id &= MASK64
        sign = content_hash64(f"{base_id}#{flag}#{self.clock_ns()}")
        first = self.rand_id()
        second = self.rand_id()

        packed = base_id & BASE_ID_MASK
        packed |= ((first >> 4) & 0xFFF) << 20
        packed |= flag << 32
        packed |= (second & 0xFF) << 33
        packed |= (sign & 0xFFFF) << 41
        packed |= (second & 0xF) << 57
        return packed

    def asset_id(self, app_id: int) -> int:
        return self.pack_id(app_id, 0)


_default_generator = IdGenerator()


def gen_rand_id() -> int:
    return _default_generator.rand_id()


def gen_nonce() -> int:
    return _default_generator.nonce()


def gen_asset_id(app_id: int) -> int:
    return _default_generator.asset_id(app_id)
