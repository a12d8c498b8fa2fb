"""
ECDSA message signing with JSON-encoded account keys.

Business actions (asset creation, transfer, ...) carry a signature made with
the acting account's key. Keys travel as JSON objects::

    {"Curvname": "P-256", "X": <int>, "Y": <int>, "D": <int>}

where ``D`` is present only in private keys. Messages are hashed with
SHA-256 and the digest is signed as-is; signatures are DER-encoded and shown
as lower-case hex. P-256 accounts also have a base58 chain address derived
from the public key.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from ..utils import base58_decode, base58_encode, sha256_digest
from .errors import InvalidKeyError, SignatureFormatError, SignFailure

CURVES: dict[str, type[ec.EllipticCurve]] = {
    "P-224": ec.SECP224R1,
    "P-256": ec.SECP256R1,
    "P-384": ec.SECP384R1,
    "P-521": ec.SECP521R1,
}
CURVE_NAMES = {cls.name: name for name, cls in CURVES.items()}

_SIGNATURE_ALGORITHM = ec.ECDSA(Prehashed(hashes.SHA256()))
_HEX_RE = re.compile(r"[0-9a-fA-F]*")

ADDRESS_CURVE = "P-256"
ADDRESS_VERSION_NIST = 1
ADDRESS_CHECKSUM_LEN = 4


@dataclass(frozen=True)
class KeyPair:
    """An account: JSON keys plus its chain address.

    ``address`` is empty for curves that have no address form.
    """

    private_key: str
    public_key: str
    address: str = ""


def hash_by_sha256(data: bytes) -> bytes:
    return sha256_digest(data)


def encode_sign(signature: bytes) -> str:
    return signature.hex()


def decode_sign(signature: str) -> bytes:
    # bytes.fromhex skips whitespace; only bare hex digits are accepted
    if not isinstance(signature, str) or not _HEX_RE.fullmatch(signature):
        raise SignatureFormatError("Signature is not a valid hex string.")
    try:
        return bytes.fromhex(signature)
    except ValueError as exc:
        raise SignatureFormatError("Signature is not a valid hex string.") from exc


def _parse_key_json(key_json: str) -> dict[str, Any]:
    if not key_json:
        raise InvalidKeyError("Key is empty.")
    try:
        payload = json.loads(key_json)
    except (json.JSONDecodeError, TypeError) as exc:
        raise InvalidKeyError("Key is not valid JSON.") from exc
    if not isinstance(payload, dict):
        raise InvalidKeyError("Key must be a JSON object.")
    return payload


def _curve_of(payload: dict[str, Any]) -> ec.EllipticCurve:
    name = payload.get("Curvname")
    curve_cls = CURVES.get(name) if isinstance(name, str) else None
    if curve_cls is None:
        raise InvalidKeyError(f"Unsupported curve: {name!r}")
    return curve_cls()


def _int_field(payload: dict[str, Any], name: str) -> int:
    value = payload.get(name)
    # bool is an int subclass
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidKeyError(f"Key field {name!r} must be an integer.")
    return value


def _public_numbers(payload: dict[str, Any]) -> ec.EllipticCurvePublicNumbers:
    return ec.EllipticCurvePublicNumbers(
        x=_int_field(payload, "X"),
        y=_int_field(payload, "Y"),
        curve=_curve_of(payload),
    )


def load_private_key(key_json: str) -> ec.EllipticCurvePrivateKey:
    payload = _parse_key_json(key_json)
    numbers = ec.EllipticCurvePrivateNumbers(
        private_value=_int_field(payload, "D"),
        public_numbers=_public_numbers(payload),
    )
    try:
        return numbers.private_key()
    except ValueError as exc:
        raise InvalidKeyError("Private key does not match its curve.") from exc


def load_public_key(key_json: str) -> ec.EllipticCurvePublicKey:
    payload = _parse_key_json(key_json)
    try:
        return _public_numbers(payload).public_key()
    except ValueError as exc:
        raise InvalidKeyError("Public key is not a point on its curve.") from exc


def _public_payload(public_key: ec.EllipticCurvePublicKey) -> dict[str, Any]:
    numbers = public_key.public_numbers()
    return {
        "Curvname": CURVE_NAMES[public_key.curve.name],
        "X": numbers.x,
        "Y": numbers.y,
    }


def generate_keypair(curve: str = "P-256") -> KeyPair:
    """Create a new account keypair in JSON form."""
    curve_cls = CURVES.get(curve)
    if curve_cls is None:
        raise InvalidKeyError(f"Unsupported curve: {curve!r}")

    private_key = ec.generate_private_key(curve_cls())
    public_payload = _public_payload(private_key.public_key())
    private_payload = dict(public_payload, D=private_key.private_numbers().private_value)
    address = address_from_public_key(private_key.public_key()) if curve == ADDRESS_CURVE else ""
    return KeyPair(
        private_key=json.dumps(private_payload, separators=(",", ":")),
        public_key=json.dumps(public_payload, separators=(",", ":")),
        address=address,
    )


def public_key_from_private(private_key_json: str) -> str:
    key = load_private_key(private_key_json)
    return json.dumps(_public_payload(key.public_key()), separators=(",", ":"))


# ----- Chain addresses -----


def _ripemd160(data: bytes) -> bytes:
    digest = hashes.Hash(hashes.RIPEMD160())
    digest.update(data)
    return digest.finalize()


def _address_checksum(payload: bytes) -> bytes:
    return sha256_digest(sha256_digest(payload))[:ADDRESS_CHECKSUM_LEN]


def address_from_public_key(key: ec.EllipticCurvePublicKey) -> str:
    """
    Derive the chain address of a P-256 public key.

    base58(version || RIPEMD160(SHA256(uncompressed point)) || checksum), where
    the checksum is the first 4 bytes of a double SHA-256 over the rest.

    Raises:
        InvalidKeyError: If the key is not on P-256
    """
    if CURVE_NAMES.get(key.curve.name) != ADDRESS_CURVE:
        raise InvalidKeyError(f"Addresses are only defined for {ADDRESS_CURVE} keys.")

    point = key.public_bytes(serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint)
    payload = bytes([ADDRESS_VERSION_NIST]) + _ripemd160(sha256_digest(point))
    return base58_encode(payload + _address_checksum(payload))


def get_address(public_key_json: str) -> str:
    return address_from_public_key(load_public_key(public_key_json))


def verify_address(address: str, public_key_json: str) -> bool:
    """Check that ``address`` belongs to the JSON public key.

    Malformed or foreign-format addresses are simply False; a malformed key
    raises :class:`InvalidKeyError`.
    """
    key = load_public_key(public_key_json)
    if not address:
        return False
    try:
        decoded = base58_decode(address)
    except ValueError:
        return False
    payload, checksum = decoded[:-ADDRESS_CHECKSUM_LEN], decoded[-ADDRESS_CHECKSUM_LEN:]
    if len(payload) < 1 or _address_checksum(payload) != checksum:
        return False
    if CURVE_NAMES.get(key.curve.name) != ADDRESS_CURVE:
        return False
    return address_from_public_key(key) == address


def sign_ecdsa(private_key_json: str, message: bytes) -> str:
    """Sign ``message`` with a JSON private key.

    Args:
        private_key_json: Account private key in JSON form.
        message: Raw message bytes; hashed with SHA-256 before signing.

    Returns:
        Hex-encoded DER signature.

    Raises:
        SignFailure: If the key is missing or malformed.
    """
    if message is None:
        raise SignFailure("Message is required.")
    key = load_private_key(private_key_json)
    signature = key.sign(hash_by_sha256(message), _SIGNATURE_ALGORITHM)
    return encode_sign(signature)


def verify_ecdsa(public_key_json: str, signature_hex: str, message: bytes) -> bool:
    """Verify a hex signature made by :func:`sign_ecdsa`.

    Returns False when the signature simply does not match. Malformed keys
    raise :class:`InvalidKeyError`; non-hex signatures raise
    :class:`SignatureFormatError`.
    """
    key = load_public_key(public_key_json)
    signature = decode_sign(signature_hex)
    try:
        key.verify(signature, hash_by_sha256(message), _SIGNATURE_ALGORITHM)
    except InvalidSignature:
        return False
    return True
