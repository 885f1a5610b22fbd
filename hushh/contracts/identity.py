"""
HushhIdentity — soulbound identity token with a brand-value score.

Each wallet may create exactly one identity token (ids from 1). The owner
assigns a brand-value score in [0, 1000] to wallets holding an identity.
Tokens can never be transferred or approved.

Storage layout
--------------
    id:total              u256   identities created (also the last token id)
    id:wallet:<addr>      u256   token id held by addr (absent = none)
    id:token:<id u256>    bytes  holder of token id
    id:score:<addr>       u256   brand-value score
"""

from __future__ import annotations

from typing import Any

from ..errors import AlreadyExists, NonTransferable, NotFound
from ..runtime.context import ZERO_ADDRESS, CallContext
from ..runtime.ledger import ContractDef
from ..stdlib import access
from ..stdlib.bands import require_score
from ..stdlib.token import EVT_TRANSFER, require_address
from ..stdlib.uint import u256_add

NAME = "HushhIdentity"
SYMBOL = "HUSHH-ID"

K_TOTAL = b"id:total"
WALLET_PREFIX = b"id:wallet:"
TOKEN_PREFIX = b"id:token:"
SCORE_PREFIX = b"id:score:"

_NO_TRANSFER = f"{NAME}: SoulBound tokens cannot be transferred"
_NO_APPROVE = f"{NAME}: SoulBound tokens cannot be approved"


def _token_key(token_id: int) -> bytes:
    return TOKEN_PREFIX + token_id.to_bytes(32, "big")


def _token_of(ctx: CallContext, wallet: bytes) -> int:
    return ctx.storage.get_int(WALLET_PREFIX + wallet)


def _require_identity(ctx: CallContext, wallet: bytes) -> int:
    token_id = _token_of(ctx, wallet)
    if token_id == 0:
        raise NotFound(f"{NAME}: wallet has no identity", details={"wallet": wallet})
    return token_id


# --- methods ------------------------------------------------------------------


def init(ctx: CallContext) -> None:
    access.init_owner(ctx, ctx.caller)


def create_identity(ctx: CallContext) -> int:
    wallet = ctx.caller
    if _token_of(ctx, wallet) != 0:
        raise AlreadyExists(f"{NAME}: identity already exists", details={"wallet": wallet})
    token_id = u256_add(ctx.storage.get_int(K_TOTAL), 1)
    ctx.storage.set_int(K_TOTAL, token_id)
    ctx.storage.set_int(WALLET_PREFIX + wallet, token_id)
    ctx.storage.set(_token_key(token_id), wallet)
    ctx.storage.set_int(SCORE_PREFIX + wallet, 0)
    ctx.emit(EVT_TRANSFER, {"from": ZERO_ADDRESS, "to": wallet, "token_id": token_id})
    ctx.emit("IdentityCreated", {"wallet": wallet, "token_id": token_id, "timestamp": ctx.timestamp})
    return token_id


def set_brand_value_score(ctx: CallContext, wallet: Any, score: Any) -> None:
    access.require_owner(ctx, NAME)
    addr = require_address(wallet, NAME)
    _require_identity(ctx, addr)
    new_score = require_score(score, NAME)
    old_score = ctx.storage.get_int(SCORE_PREFIX + addr)
    ctx.storage.set_int(SCORE_PREFIX + addr, new_score)
    ctx.emit(
        "BrandScoreUpdated",
        {"wallet": addr, "old_score": old_score, "new_score": new_score, "timestamp": ctx.timestamp},
    )


def transfer_from(ctx: CallContext, *_args: Any) -> None:
    raise NonTransferable(_NO_TRANSFER)


def safe_transfer_from(ctx: CallContext, *_args: Any) -> None:
    raise NonTransferable(_NO_TRANSFER)


def approve(ctx: CallContext, *_args: Any) -> None:
    raise NonTransferable(_NO_APPROVE)


def set_approval_for_all(ctx: CallContext, *_args: Any) -> None:
    raise NonTransferable(_NO_APPROVE)


def transfer_ownership(ctx: CallContext, new_owner: Any) -> None:
    access.transfer_ownership(ctx, require_address(new_owner, NAME), NAME)


def renounce_ownership(ctx: CallContext) -> None:
    access.renounce_ownership(ctx, NAME)


# --- views --------------------------------------------------------------------


def name(ctx: CallContext) -> str:
    return NAME


def symbol(ctx: CallContext) -> str:
    return SYMBOL


def owner(ctx: CallContext) -> bytes:
    return access.get_owner(ctx)


def total_identities(ctx: CallContext) -> int:
    return ctx.storage.get_int(K_TOTAL)


def has_identity(ctx: CallContext, wallet: Any) -> bool:
    return _token_of(ctx, require_address(wallet, NAME)) != 0


def get_token_id(ctx: CallContext, wallet: Any) -> int:
    return _require_identity(ctx, require_address(wallet, NAME))


def get_brand_value_score(ctx: CallContext, wallet: Any) -> int:
    addr = require_address(wallet, NAME)
    _require_identity(ctx, addr)
    return ctx.storage.get_int(SCORE_PREFIX + addr)


def balance_of(ctx: CallContext, wallet: Any) -> int:
    return 1 if has_identity(ctx, wallet) else 0


def owner_of(ctx: CallContext, token_id: Any) -> bytes:
    if (
        isinstance(token_id, bool)
        or not isinstance(token_id, int)
        or not 0 < token_id <= ctx.storage.get_int(K_TOTAL)
    ):
        raise NotFound(f"{NAME}: token does not exist", details={"token_id": token_id})
    holder = ctx.storage.get(_token_key(token_id))
    if holder is None:
        raise NotFound(f"{NAME}: token does not exist", details={"token_id": token_id})
    return holder


CONTRACT = ContractDef(
    name=NAME,
    init=init,
    methods={
        "create_identity": create_identity,
        "set_brand_value_score": set_brand_value_score,
        "transfer_from": transfer_from,
        "safe_transfer_from": safe_transfer_from,
        "approve": approve,
        "set_approval_for_all": set_approval_for_all,
        "transfer_ownership": transfer_ownership,
        "renounce_ownership": renounce_ownership,
    },
    views={
        "name": name,
        "symbol": symbol,
        "owner": owner,
        "total_identities": total_identities,
        "has_identity": has_identity,
        "check_identity": has_identity,
        "get_token_id": get_token_id,
        "get_brand_value_score": get_brand_value_score,
        "balance_of": balance_of,
        "owner_of": owner_of,
    },
)
