"""Error taxonomy for request signing, verification and ECDSA keys."""

from __future__ import annotations


class AuthError(ValueError):
    reason: str = "auth_error"
    exit_code: int = 1


class SignFailure(AuthError):
    """Missing or unusable credentials, options, request or key."""

    reason = "sign_failure"
    exit_code = 2


# ----- Format errors (parsing the Authorization token) -----


class TokenFormatError(AuthError):
    reason = "token_format"
    exit_code = 3


class MalformedToken(TokenFormatError):
    reason = "malformed_token"


class UnsupportedVersion(TokenFormatError):
    reason = "unsupported_version"


class ExpirationOutOfRange(TokenFormatError):
    reason = "expiration_out_of_range"


class BadDateField(TokenFormatError):
    reason = "bad_date_field"


# ----- Trust errors (temporal / cryptographic) -----


class TrustError(AuthError):
    reason = "trust_error"
    exit_code = 4


class Expired(TrustError):
    reason = "expired"


class MissingHostInSignedHeaders(TrustError):
    reason = "missing_host"


class SignatureMismatch(TrustError):
    reason = "signature_mismatch"


# ----- Key errors (ECDSA layer) -----


class InvalidKeyError(SignFailure):
    """Malformed or unsupported elliptic-curve key material."""

    reason = "invalid_key"
    exit_code = 5


class SignatureFormatError(AuthError):
    reason = "invalid_signature_encoding"
    exit_code = 5
