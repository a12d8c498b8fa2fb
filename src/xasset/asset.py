"""
Asset operations: create, grant and transfer.

Each write is authorized twice. The app's access key signs the HTTP request,
and the acting account signs ``f"{asset_id}{nonce}"`` with its ECDSA key; the
form body carries that signature together with the account's address and
public key.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass, field
from enum import IntEnum
from typing import Any, Callable, Optional

import httpx

from .auth.ecdsa import KeyPair
from .client import XassetBaseClient, sign_action
from .common.config import XassetConfig
from .common.errors import ParamError
from .idgen import IdGenerator

logger = logging.getLogger(__name__)

ASSET_API_CREATE = "/xasset/horae/v1/create"
ASSET_API_GRANT = "/xasset/horae/v1/grant"
ASSET_API_TRANSFER = "/xasset/damocles/v1/transfer"

# Dropped from the asset_info JSON when left at their zero value.
_OPTIONAL_INFO_FIELDS = ("long_desc", "asset_ext", "group_id", "proc_script", "expire_time")


class AssetCate(IntEnum):
    ART = 1
    COLLECT = 2
    TICKET = 3
    HOTEL = 4


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ParamError(message)


def _require_account(account: Optional[KeyPair]) -> None:
    _require(account is not None, "Account is required.")
    _require(bool(account.private_key and account.public_key), "Account must carry its keys.")


@dataclass
class CreateAssetInfo:
    asset_cate: int
    title: str
    thumb: list[str]
    short_desc: str
    asset_url: list[str]
    img_desc: list[str] = field(default_factory=list)
    long_desc: str = ""
    asset_ext: str = ""
    group_id: int = 0
    proc_script: str = ""
    expire_time: int = 0

    def validate(self) -> None:
        _require(self.asset_cate in set(AssetCate), "Asset type invalid, must be between 1 and 4.")
        _require(bool(self.title), "Title must not be empty.")
        _require(bool(self.short_desc), "Short description must not be empty.")
        _require(bool(self.thumb), "At least one thumbnail is required.")
        _require(bool(self.asset_url), "At least one asset url is required.")

    def to_json(self) -> str:
        payload = asdict(self)
        for name in _OPTIONAL_INFO_FIELDS:
            if not payload[name]:
                del payload[name]
        payload["asset_cate"] = int(self.asset_cate)
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


@dataclass
class CreateAssetParam:
    account: KeyPair
    asset_info: CreateAssetInfo
    amount: int
    price: int = 0
    user_id: int = 0
    file_hash: str = ""

    def validate(self) -> None:
        _require(self.price >= 0, "Price must be zero or positive.")
        _require(self.amount >= 0, "Amount must be zero or positive.")
        _require_account(self.account)
        _require(self.asset_info is not None, "Asset info is required.")
        self.asset_info.validate()


@dataclass
class GrantAssetParam:
    """Grant a shard of a published asset to ``to_addr``.

    ``shard_id`` below 1 asks for a freshly generated shard id.
    """

    account: KeyPair
    asset_id: int
    to_addr: str
    shard_id: int = 0
    price: int = 0
    addr: str = ""
    to_user_id: int = 0

    def validate(self) -> None:
        _require(self.asset_id > 0, "Asset id must be a positive integer.")
        _require(self.price >= 0, "Price must be zero or positive.")
        _require_account(self.account)
        _require(bool(self.addr or self.account.address), "Address must not be empty.")
        _require(bool(self.to_addr), "Target address must not be empty.")


@dataclass
class TransferAssetParam:
    account: KeyPair
    asset_id: int
    shard_id: int
    to_addr: str
    price: int = 0
    addr: str = ""
    to_user_id: int = 0

    def validate(self) -> None:
        _require(self.asset_id > 0, "Asset id must be a positive integer.")
        _require(self.shard_id > 0, "Shard id must be a positive integer.")
        _require(self.price >= 0, "Price must be zero or positive.")
        _require_account(self.account)
        _require(bool(self.addr or self.account.address), "Address must not be empty.")
        _require(bool(self.to_addr), "Target address must not be empty.")


class AssetClient(XassetBaseClient):
    """Asset writes on top of the signed base client."""

    def __init__(
        self,
        config: Optional[XassetConfig],
        transport: Optional[httpx.BaseTransport] = None,
        clock: Callable[[], float] = time.time,
        id_generator: Optional[IdGenerator] = None,
    ):
        super().__init__(config, transport=transport, clock=clock)
        self.ids = id_generator or IdGenerator()

    # ----- Body builders -----

    def gen_create_asset_body(self, param: CreateAssetParam) -> dict[str, str]:
        nonce = self.ids.nonce()
        asset_id = self.ids.asset_id(self.config.credentials.app_id)
        body = {
            "asset_id": str(asset_id),
            "price": str(param.price),
            "amount": str(param.amount),
            "asset_info": param.asset_info.to_json(),
            "addr": param.account.address,
            "sign": sign_action(param.account.private_key, asset_id, nonce),
            "pkey": param.account.public_key,
            "nonce": str(nonce),
        }
        if param.user_id > 0:
            body["user_id"] = str(param.user_id)
        if param.file_hash:
            body["file_hash"] = param.file_hash
        return body

    def gen_grant_asset_body(self, param: GrantAssetParam) -> dict[str, str]:
        nonce = self.ids.nonce()
        shard_id = param.shard_id if param.shard_id >= 1 else self.ids.nonce()
        body = {
            "asset_id": str(param.asset_id),
            "shard_id": str(shard_id),
            "price": str(param.price),
            "addr": param.addr or param.account.address,
            "sign": sign_action(param.account.private_key, param.asset_id, nonce),
            "pkey": param.account.public_key,
            "nonce": str(nonce),
            "to_addr": param.to_addr,
        }
        if param.to_user_id > 0:
            body["to_userid"] = str(param.to_user_id)
        return body

    def gen_transfer_asset_body(self, param: TransferAssetParam) -> dict[str, str]:
        nonce = self.ids.nonce()
        body = {
            "asset_id": str(param.asset_id),
            "shard_id": str(param.shard_id),
            "price": str(param.price),
            "addr": param.addr or param.account.address,
            "sign": sign_action(param.account.private_key, param.asset_id, nonce),
            "pkey": param.account.public_key,
            "nonce": str(nonce),
            "to_addr": param.to_addr,
        }
        if param.to_user_id > 0:
            body["to_userid"] = str(param.to_user_id)
        return body

    # ----- Operations -----

    def create_asset(self, param: CreateAssetParam) -> dict[str, Any]:
        """
        Create an asset owned by ``param.account``.

        Returns:
            Response payload; ``asset_id`` holds the new asset id

        Raises:
            ParamError: On invalid parameters
            RequestFailedError: On transport failures
            ResponseError: On a non-200 status or a non-zero errno
        """
        param.validate()
        resp = self.parse_response(self.post(ASSET_API_CREATE, self.gen_create_asset_body(param)))
        logger.debug("Asset created. [asset_id:%s] [request_id:%s]", resp.get("asset_id"), resp.get("request_id"))
        return resp

    def grant_asset(self, param: GrantAssetParam) -> dict[str, Any]:
        param.validate()
        resp = self.parse_response(self.post(ASSET_API_GRANT, self.gen_grant_asset_body(param)))
        logger.debug(
            "Asset granted. [asset_id:%s] [shard_id:%s] [to:%s] [request_id:%s]",
            resp.get("asset_id"),
            resp.get("shard_id"),
            param.to_addr,
            resp.get("request_id"),
        )
        return resp

    def transfer_asset(self, param: TransferAssetParam) -> dict[str, Any]:
        param.validate()
        resp = self.parse_response(self.post(ASSET_API_TRANSFER, self.gen_transfer_asset_body(param)))
        logger.debug(
            "Shard transferred. [asset_id:%s] [shard_id:%s] [to:%s] [request_id:%s]",
            param.asset_id,
            param.shard_id,
            param.to_addr,
            resp.get("request_id"),
        )
        return resp
