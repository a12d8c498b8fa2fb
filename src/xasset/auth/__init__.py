"""Request signing, verification and account-key ECDSA."""

from .ecdsa import (
    KeyPair,
    generate_keypair,
    get_address,
    sign_ecdsa,
    verify_address,
    verify_ecdsa,
)
from .errors import (
    AuthError,
    BadDateField,
    ExpirationOutOfRange,
    Expired,
    InvalidKeyError,
    MalformedToken,
    MissingHostInSignedHeaders,
    SignatureFormatError,
    SignatureMismatch,
    SignFailure,
    TokenFormatError,
    TrustError,
    UnsupportedVersion,
)
from .signer import (
    AUTH_VERSION,
    DEFAULT_EXPIRE_SECONDS,
    DEFAULT_HEADERS_TO_SIGN,
    CanonicalRequest,
    Credentials,
    SignOptions,
    Signer,
    Verifier,
    build_canonical_request,
    check_sign,
    sign,
)

__all__ = [
    "AUTH_VERSION",
    "DEFAULT_EXPIRE_SECONDS",
    "DEFAULT_HEADERS_TO_SIGN",
    "CanonicalRequest",
    "Credentials",
    "SignOptions",
    "Signer",
    "Verifier",
    "build_canonical_request",
    "check_sign",
    "sign",
    "KeyPair",
    "generate_keypair",
    "get_address",
    "verify_address",
    "sign_ecdsa",
    "verify_ecdsa",
    "AuthError",
    "SignFailure",
    "TokenFormatError",
    "MalformedToken",
    "UnsupportedVersion",
    "ExpirationOutOfRange",
    "BadDateField",
    "TrustError",
    "Expired",
    "MissingHostInSignedHeaders",
    "SignatureMismatch",
    "InvalidKeyError",
    "SignatureFormatError",
]
