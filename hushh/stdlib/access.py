# -*- coding: utf-8 -*-
"""
hushh.stdlib.access
===================

Ownership storage and capability checks for Hushh contracts.

Authorization is expressed as *capabilities*: predicates over the call
context (``ctx -> bool``). Contracts combine them with ``any_of`` and enforce
them with ``require_capability`` before touching state:

    can_mint = any_of(is_owner, stored_address(RESERVE_KEY))

    def mint(ctx, to, amount):
        require_capability(ctx, can_mint, "HushhCoin: caller is not authorized")
        ...

Conventions
-----------
- The owner lives at ``OWNER_KEY`` in the contract's own storage.
- After ``renounce_ownership`` the owner is the zero address and no caller
  passes ``is_owner``.
- Events:
    - "OwnershipTransferred" args: {"previous_owner": bytes, "new_owner": bytes}
"""

from __future__ import annotations

from typing import Callable

from ..errors import InvalidArgument, Unauthorized
from ..runtime.context import ZERO_ADDRESS, CallContext

OWNER_KEY: bytes = b"access:owner"

Capability = Callable[[CallContext], bool]


# --- Owner primitives ---------------------------------------------------------


def get_owner(ctx: CallContext) -> bytes:
    """Current owner, or the zero address if unset or renounced."""
    v = ctx.storage.get(OWNER_KEY)
    return v if v else ZERO_ADDRESS


def init_owner(ctx: CallContext, owner: bytes) -> None:
    """Set the owner once; later calls do not overwrite."""
    if not ctx.storage.get(OWNER_KEY):
        ctx.storage.set(OWNER_KEY, owner)
        ctx.emit("OwnershipTransferred", {"previous_owner": ZERO_ADDRESS, "new_owner": owner})


# --- Capabilities -------------------------------------------------------------


def is_owner(ctx: CallContext) -> bool:
    owner = get_owner(ctx)
    return owner != ZERO_ADDRESS and owner == ctx.caller


def stored_address(key: bytes) -> Capability:
    """Capability held by the address stored at ``key`` (if any)."""

    def _check(ctx: CallContext) -> bool:
        v = ctx.storage.get(key)
        return bool(v) and v != ZERO_ADDRESS and v == ctx.caller

    return _check


def any_of(*caps: Capability) -> Capability:
    def _check(ctx: CallContext) -> bool:
        return any(cap(ctx) for cap in caps)

    return _check


def require_capability(ctx: CallContext, cap: Capability, message: str) -> None:
    if not cap(ctx):
        raise Unauthorized(message, details={"caller": ctx.caller})


def require_owner(ctx: CallContext, contract: str) -> None:
    require_capability(ctx, is_owner, f"{contract}: caller is not the owner")


# --- Owner control ------------------------------------------------------------


def transfer_ownership(ctx: CallContext, new_owner: bytes, contract: str) -> None:
    """
    Owner-only. ``new_owner`` must not be the zero address; use
    ``renounce_ownership`` to leave the contract ownerless.
    """
    require_owner(ctx, contract)
    if new_owner == ZERO_ADDRESS:
        raise InvalidArgument(f"{contract}: new owner is the zero address")
    previous = get_owner(ctx)
    ctx.storage.set(OWNER_KEY, new_owner)
    ctx.emit("OwnershipTransferred", {"previous_owner": previous, "new_owner": new_owner})


def renounce_ownership(ctx: CallContext, contract: str) -> None:
    require_owner(ctx, contract)
    previous = get_owner(ctx)
    ctx.storage.set(OWNER_KEY, ZERO_ADDRESS)
    ctx.emit("OwnershipTransferred", {"previous_owner": previous, "new_owner": ZERO_ADDRESS})


__all__ = [
    "OWNER_KEY",
    "Capability",
    "any_of",
    "get_owner",
    "init_owner",
    "is_owner",
    "renounce_ownership",
    "require_capability",
    "require_owner",
    "stored_address",
    "transfer_ownership",
]
