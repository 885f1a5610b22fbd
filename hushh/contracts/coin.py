"""
HushhCoin — fungible token with an owner and a reserve authority.

ERC-20 semantics over the ledger's storage, plus a gated mint: the owner or
the reserve authority may mint whole tokens (scaled by 10**DECIMALS) to any
non-zero account. Holders burn their own base units, or a spender burns
from an allowance.

Public interface
----------------
# views
name() -> str                       symbol() -> str
decimals() -> int                   total_supply() -> int
balance_of(addr) -> int             allowance(owner, spender) -> int
owner() -> bytes                    reserve_authority() -> bytes
balance_of_human(addr) -> int       total_supply_human() -> int

# methods (caller = ctx.caller)
mint(to, amount_whole) -> bool
burn(amount) -> bool
burn_from(account, amount) -> bool
transfer(to, amount) -> bool
approve(spender, amount) -> bool
transfer_from(owner, to, amount) -> bool
increase_allowance(spender, added) -> bool
decrease_allowance(spender, subtracted) -> bool
set_reserve_authority(new_authority) -> None
transfer_ownership(new_owner) -> None
renounce_ownership() -> None

An allowance of U256_MAX is never decremented (infinite approval).
"""

from __future__ import annotations

from typing import Any, Final

from ..errors import InsufficientAllowance, InsufficientBalance, InvalidArgument
from ..runtime.context import ZERO_ADDRESS, CallContext
from ..runtime.ledger import ContractDef
from ..stdlib import access
from ..stdlib.token import (
    EVT_APPROVAL,
    EVT_TRANSFER,
    is_zero_address,
    key_allow,
    key_balance,
    require_address,
    require_amount,
)
from ..stdlib.uint import U256_MAX, require_u256, u256_add, u256_mul, u256_sub

NAME: Final[str] = "HushhCoin"
SYMBOL: Final[str] = "HUSHH"
DECIMALS: Final[int] = 18
UNIT: Final[int] = 10**DECIMALS

K_TOTAL: Final[bytes] = b"tok:meta:total"
K_RESERVE: Final[bytes] = b"coin:reserve"

is_reserve_authority = access.stored_address(K_RESERVE)
can_mint = access.any_of(access.is_owner, is_reserve_authority)


# --- internal ledger ops ------------------------------------------------------


def _balance(ctx: CallContext, addr: bytes) -> int:
    return ctx.storage.get_int(key_balance(addr))


def _set_balance(ctx: CallContext, addr: bytes, amount: int) -> None:
    ctx.storage.set_int(key_balance(addr), amount)


def _allowance(ctx: CallContext, owner_: bytes, spender: bytes) -> int:
    return ctx.storage.get_int(key_allow(owner_, spender))


def _set_allowance(ctx: CallContext, owner_: bytes, spender: bytes, amount: int) -> None:
    ctx.storage.set_int(key_allow(owner_, spender), amount)
    ctx.emit(EVT_APPROVAL, {"owner": owner_, "spender": spender, "value": amount})


def _move(ctx: CallContext, frm: bytes, to: bytes, amount: int) -> None:
    if is_zero_address(to):
        raise InvalidArgument(f"{NAME}: transfer to zero address")
    bal = _balance(ctx, frm)
    if bal < amount:
        raise InsufficientBalance(f"{NAME}: insufficient balance", details={"balance": bal, "amount": amount})
    _set_balance(ctx, frm, bal - amount)
    _set_balance(ctx, to, u256_add(_balance(ctx, to), amount))
    ctx.emit(EVT_TRANSFER, {"from": frm, "to": to, "value": amount})


def _spend_allowance(ctx: CallContext, owner_: bytes, spender: bytes, amount: int) -> None:
    current = _allowance(ctx, owner_, spender)
    if current == U256_MAX:
        return
    if current < amount:
        raise InsufficientAllowance(
            f"{NAME}: insufficient allowance", details={"allowance": current, "amount": amount}
        )
    _set_allowance(ctx, owner_, spender, current - amount)


def _burn(ctx: CallContext, account: bytes, amount: int) -> None:
    bal = _balance(ctx, account)
    if bal < amount:
        raise InsufficientBalance(f"{NAME}: insufficient balance", details={"balance": bal, "amount": amount})
    _set_balance(ctx, account, bal - amount)
    ctx.storage.set_int(K_TOTAL, u256_sub(ctx.storage.get_int(K_TOTAL), amount))
    ctx.emit(EVT_TRANSFER, {"from": account, "to": ZERO_ADDRESS, "value": amount})
    ctx.emit("TokensBurned", {"from": account, "amount": amount, "timestamp": ctx.timestamp})


# --- methods ------------------------------------------------------------------


def init(ctx: CallContext) -> None:
    access.init_owner(ctx, ctx.caller)
    ctx.storage.set(K_RESERVE, ctx.caller)


def mint(ctx: CallContext, to: Any, amount: Any) -> bool:
    """Mint ``amount`` whole tokens to ``to``. Owner or reserve authority only."""
    access.require_capability(ctx, can_mint, f"{NAME}: caller is not authorized")
    dst = require_address(to, NAME)
    if is_zero_address(dst):
        raise InvalidArgument(f"{NAME}: mint to zero address")
    scaled = u256_mul(require_amount(amount, NAME), UNIT)

    ctx.storage.set_int(K_TOTAL, u256_add(ctx.storage.get_int(K_TOTAL), scaled))
    _set_balance(ctx, dst, u256_add(_balance(ctx, dst), scaled))
    ctx.emit(EVT_TRANSFER, {"from": ZERO_ADDRESS, "to": dst, "value": scaled})
    ctx.emit("TokensMinted", {"to": dst, "amount": scaled, "timestamp": ctx.timestamp})
    return True


def burn(ctx: CallContext, amount: Any) -> bool:
    """Burn ``amount`` base units from the caller."""
    _burn(ctx, ctx.caller, require_amount(amount, NAME))
    return True


def burn_from(ctx: CallContext, account: Any, amount: Any) -> bool:
    src = require_address(account, NAME)
    n = require_amount(amount, NAME)
    _spend_allowance(ctx, src, ctx.caller, n)
    _burn(ctx, src, n)
    return True


def transfer(ctx: CallContext, to: Any, amount: Any) -> bool:
    _move(ctx, ctx.caller, require_address(to, NAME), require_u256(amount, "amount"))
    return True


def approve(ctx: CallContext, spender: Any, amount: Any) -> bool:
    sp = require_address(spender, NAME)
    if is_zero_address(sp):
        raise InvalidArgument(f"{NAME}: approve to zero address")
    _set_allowance(ctx, ctx.caller, sp, require_u256(amount, "amount"))
    return True


def transfer_from(ctx: CallContext, owner_: Any, to: Any, amount: Any) -> bool:
    src = require_address(owner_, NAME)
    dst = require_address(to, NAME)
    n = require_u256(amount, "amount")
    _spend_allowance(ctx, src, ctx.caller, n)
    _move(ctx, src, dst, n)
    return True


def increase_allowance(ctx: CallContext, spender: Any, added: Any) -> bool:
    sp = require_address(spender, NAME)
    if is_zero_address(sp):
        raise InvalidArgument(f"{NAME}: approve to zero address")
    current = _allowance(ctx, ctx.caller, sp)
    _set_allowance(ctx, ctx.caller, sp, u256_add(current, require_u256(added, "amount")))
    return True


def decrease_allowance(ctx: CallContext, spender: Any, subtracted: Any) -> bool:
    sp = require_address(spender, NAME)
    n = require_u256(subtracted, "amount")
    current = _allowance(ctx, ctx.caller, sp)
    if n > current:
        raise InsufficientAllowance(f"{NAME}: decreased allowance below zero")
    _set_allowance(ctx, ctx.caller, sp, current - n)
    return True


def set_reserve_authority(ctx: CallContext, new_authority: Any) -> None:
    access.require_owner(ctx, NAME)
    new = require_address(new_authority, NAME)
    if is_zero_address(new):
        raise InvalidArgument(f"{NAME}: new authority is zero address")
    previous = ctx.storage.get(K_RESERVE) or ZERO_ADDRESS
    ctx.storage.set(K_RESERVE, new)
    ctx.emit("ReserveAuthorityUpdated", {"previous_authority": previous, "new_authority": new})


def transfer_ownership(ctx: CallContext, new_owner: Any) -> None:
    access.transfer_ownership(ctx, require_address(new_owner, NAME), NAME)


def renounce_ownership(ctx: CallContext) -> None:
    access.renounce_ownership(ctx, NAME)


# --- views --------------------------------------------------------------------


def name(ctx: CallContext) -> str:
    return NAME


def symbol(ctx: CallContext) -> str:
    return SYMBOL


def decimals(ctx: CallContext) -> int:
    return DECIMALS


def total_supply(ctx: CallContext) -> int:
    return ctx.storage.get_int(K_TOTAL)


def total_supply_human(ctx: CallContext) -> int:
    return total_supply(ctx) // UNIT


def balance_of(ctx: CallContext, addr: Any) -> int:
    return _balance(ctx, require_address(addr, NAME))


def balance_of_human(ctx: CallContext, addr: Any) -> int:
    return balance_of(ctx, addr) // UNIT


def allowance(ctx: CallContext, owner_: Any, spender: Any) -> int:
    return _allowance(ctx, require_address(owner_, NAME), require_address(spender, NAME))


def owner(ctx: CallContext) -> bytes:
    return access.get_owner(ctx)


def reserve_authority(ctx: CallContext) -> bytes:
    return ctx.storage.get(K_RESERVE) or ZERO_ADDRESS


CONTRACT = ContractDef(
    name=NAME,
    init=init,
    methods={
        "mint": mint,
        "burn": burn,
        "burn_from": burn_from,
        "transfer": transfer,
        "approve": approve,
        "transfer_from": transfer_from,
        "increase_allowance": increase_allowance,
        "decrease_allowance": decrease_allowance,
        "set_reserve_authority": set_reserve_authority,
        "transfer_ownership": transfer_ownership,
        "renounce_ownership": renounce_ownership,
    },
    views={
        "name": name,
        "symbol": symbol,
        "decimals": decimals,
        "total_supply": total_supply,
        "total_supply_human": total_supply_human,
        "balance_of": balance_of,
        "balance_of_human": balance_of_human,
        "allowance": allowance,
        "owner": owner,
        "reserve_authority": reserve_authority,
    },
)
