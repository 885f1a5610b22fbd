# -*- coding: utf-8 -*-
"""
hushh.stdlib.token
==================

Storage-key conventions, event names and argument checks shared by the
token contracts. Nothing here touches storage itself.

Storage keys (prefixed bytes):
  - balances:   BAL_PREFIX || <addr>
  - allowances: ALLOW_PREFIX || <owner> || b"|" || <spender>

Events:
  - "Transfer" { "from": bytes, "to": bytes, "value": int }
  - "Approval" { "owner": bytes, "spender": bytes, "value": int }
"""

from __future__ import annotations

from typing import Any, Final

from ..errors import HushhError, InvalidArgument
from ..runtime.context import ADDRESS_LEN, ZERO_ADDRESS, to_address
from .uint import require_u256

BAL_PREFIX: Final[bytes] = b"tok:bal:"
ALLOW_PREFIX: Final[bytes] = b"tok:allow:"

EVT_TRANSFER: Final[str] = "Transfer"
EVT_APPROVAL: Final[str] = "Approval"


def key_balance(addr: bytes) -> bytes:
    return BAL_PREFIX + addr


def key_allow(owner: bytes, spender: bytes) -> bytes:
    return ALLOW_PREFIX + owner + b"|" + spender


def require_address(value: Any, where: str) -> bytes:
    """
    Normalize an address argument (20 raw bytes or 0x-hex) or raise
    InvalidArgument prefixed with ``where``. The zero address is accepted;
    callers that forbid it check ``is_zero_address`` with their own message.
    """
    try:
        return to_address(value)
    except HushhError as e:
        raise InvalidArgument(
            f"{where}: invalid address", details={"expected_len": ADDRESS_LEN}
        ) from e


def is_zero_address(addr: bytes) -> bool:
    return addr == ZERO_ADDRESS


def require_amount(value: Any, where: str) -> int:
    """u256 amount strictly greater than zero."""
    n = require_u256(value, "amount")
    if n == 0:
        raise InvalidArgument(f"{where}: amount must be greater than 0")
    return n


__all__ = [
    "ALLOW_PREFIX",
    "BAL_PREFIX",
    "EVT_APPROVAL",
    "EVT_TRANSFER",
    "is_zero_address",
    "key_allow",
    "key_balance",
    "require_address",
    "require_amount",
]
