"""
Client configuration.

Credentials are read from the environment or from ``~/.xasset/.env``::

    XASSET_ENDPOINT=http://120.48.16.137:8360
    XASSET_APP_ID=110380
    XASSET_ACCESS_KEY_ID=...
    XASSET_SECRET_ACCESS_KEY=...
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..auth.signer import (
    DEFAULT_EXPIRE_SECONDS,
    DEFAULT_HEADERS_TO_SIGN,
    Credentials,
    SignOptions,
)
from .errors import ConfigError

ENDPOINT_DEFAULT = "http://120.48.16.137:8360"
USER_AGENT_DEFAULT = "xasset-sdk-python"
CONNECT_TIMEOUT_MS_DEFAULT = 1000
READ_WRITE_TIMEOUT_MS_DEFAULT = 3000

XASSET_DIR = Path.home() / ".xasset"
XASSET_ENV = XASSET_DIR / ".env"


def default_sign_options() -> SignOptions:
    return SignOptions(
        headers_to_sign=DEFAULT_HEADERS_TO_SIGN,
        timestamp=0,
        expire_seconds=DEFAULT_EXPIRE_SECONDS,
    )


@dataclass
class XassetConfig:
    endpoint: str = ENDPOINT_DEFAULT
    user_agent: str = USER_AGENT_DEFAULT
    credentials: Optional[Credentials] = None
    sign_options: Optional[SignOptions] = field(default_factory=default_sign_options)
    connect_timeout_ms: int = CONNECT_TIMEOUT_MS_DEFAULT
    read_write_timeout_ms: int = READ_WRITE_TIMEOUT_MS_DEFAULT

    def set_credentials(self, app_id: int, access_key_id: str, secret_access_key: str) -> None:
        self.credentials = Credentials(
            app_id=app_id,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
        )

    def is_valid(self) -> bool:
        """Check required fields and back-fill optional ones with defaults."""
        if not self.endpoint or self.credentials is None or self.sign_options is None:
            return False

        if not self.user_agent:
            self.user_agent = USER_AGENT_DEFAULT
        if not self.connect_timeout_ms:
            self.connect_timeout_ms = CONNECT_TIMEOUT_MS_DEFAULT
        if not self.read_write_timeout_ms:
            self.read_write_timeout_ms = READ_WRITE_TIMEOUT_MS_DEFAULT
        return True

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "XassetConfig":
        """
        Build a config from ``.env`` file values and the process environment.

        Args:
            env_path: Path to .env file (default: ~/.xasset/.env)

        Returns:
            Config with credentials set

        Raises:
            ConfigError: If credentials are missing or the app id is not an integer
        """
        env_path = env_path or XASSET_ENV
        if env_path.exists():
            load_dotenv(env_path, override=True)

        access_key_id = os.environ.get("XASSET_ACCESS_KEY_ID")
        secret_access_key = os.environ.get("XASSET_SECRET_ACCESS_KEY")
        if not access_key_id or not secret_access_key:
            raise ConfigError(
                f"XASSET_ACCESS_KEY_ID / XASSET_SECRET_ACCESS_KEY not found. "
                f"Set them in the environment or in {env_path}"
            )

        raw_app_id = os.environ.get("XASSET_APP_ID", "0")
        try:
            app_id = int(raw_app_id)
        except ValueError as exc:
            raise ConfigError(f"XASSET_APP_ID must be an integer, got {raw_app_id!r}") from exc

        config = cls(
            endpoint=os.environ.get("XASSET_ENDPOINT", ENDPOINT_DEFAULT),
            user_agent=os.environ.get("XASSET_USER_AGENT", USER_AGENT_DEFAULT),
        )
        config.set_credentials(app_id, access_key_id, secret_access_key)
        return config

    def __str__(self) -> str:
        return (
            f"[Endpoint:{self.endpoint}] [UserAgent:{self.user_agent}] "
            f"[Credentials:{self.credentials!r}] [SignOption:{self.sign_options!r}] "
            f"[ConnectTimeoutMs:{self.connect_timeout_ms}ms] "
            f"[ReadWriteTimeoutMs:{self.read_write_timeout_ms}ms]"
        )
