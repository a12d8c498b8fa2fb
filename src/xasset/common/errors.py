from __future__ import annotations


class ClientError(RuntimeError):
    exit_code: int = 1


class ConfigError(ClientError):
    exit_code = 6


class RequestFailedError(ClientError):
    exit_code = 7


class ResponseError(ClientError):
    exit_code = 8

    def __init__(self, message: str, http_code: int = 0, errno: int = 0, request_id: str = ""):
        super().__init__(message)
        self.http_code = http_code
        self.errno = errno
        self.request_id = request_id


class ParamError(ClientError):
    exit_code = 9
