__version__ = "1.0.0"

__all__ = [
    # Request signing
    "Credentials",
    "SignOptions",
    "CanonicalRequest",
    "Signer",
    "Verifier",
    "build_canonical_request",
    "sign",
    "check_sign",
    # Account ECDSA
    "KeyPair",
    "generate_keypair",
    "get_address",
    "verify_address",
    "sign_ecdsa",
    "verify_ecdsa",
    # Errors
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
    "ClientError",
    "ConfigError",
    "ParamError",
    "RequestFailedError",
    "ResponseError",
    # Ids
    "IdGenerator",
    "content_hash64",
    "gen_rand_id",
    "gen_nonce",
    "gen_asset_id",
    # Client
    "XassetConfig",
    "XassetBaseClient",
    "RequestResult",
    "sign_action",
    # Asset operations
    "AssetClient",
    "AssetCate",
    "CreateAssetInfo",
    "CreateAssetParam",
    "GrantAssetParam",
    "TransferAssetParam",
]

from .asset import (
    AssetCate,
    AssetClient,
    CreateAssetInfo,
    CreateAssetParam,
    GrantAssetParam,
    TransferAssetParam,
)
from .auth.ecdsa import (
    KeyPair,
    generate_keypair,
    get_address,
    sign_ecdsa,
    verify_address,
    verify_ecdsa,
)
from .auth.errors import (
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
from .auth.signer import (
    CanonicalRequest,
    Credentials,
    SignOptions,
    Signer,
    Verifier,
    build_canonical_request,
    check_sign,
    sign,
)
from .client import RequestResult, XassetBaseClient, sign_action
from .common.config import XassetConfig
from .common.errors import ClientError, ConfigError, ParamError, RequestFailedError, ResponseError
from .idgen import IdGenerator, content_hash64, gen_asset_id, gen_nonce, gen_rand_id
