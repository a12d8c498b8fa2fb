"""Configuration, transport and client-side errors."""

from .config import XassetConfig
from .errors import ClientError, ConfigError, ParamError, RequestFailedError, ResponseError
from .httpcli import HttpResponse, gen_request, send_request

__all__ = [
    "XassetConfig",
    "ClientError",
    "ConfigError",
    "ParamError",
    "RequestFailedError",
    "ResponseError",
    "HttpResponse",
    "gen_request",
    "send_request",
]
