"""
hushh.runtime.context — what a contract sees during one call.

Contracts are plain functions ``fn(ctx, *args)``. Everything they may touch
comes in through ``ctx``:

- ``ctx.caller``   the identity invoking the operation (20-byte address)
- ``ctx.address``  the contract's own address
- ``ctx.block``    a ``BlockEnv`` (height, timestamp, chain_id)
- ``ctx.storage``  a ``ContractStorage`` bound to ``ctx.address``
- ``ctx.emit()``   buffer an event for the running transaction

There is no process-wide state; the ledger builds a fresh context per call.

Helpers ``to_bytes``/``to_hex``/``derive_address`` normalize addresses for
hosts, tests and the CLI.
"""

from __future__ import annotations

import hashlib
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from ..errors import LedgerError, StaticCallViolation
from .events import Event, make_event
from .journal import ContractStorage

ADDRESS_LEN = 20
ZERO_ADDRESS = b"\x00" * ADDRESS_LEN


# ----------------------------- helpers ----------------------------- #


def _strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_bytes(value: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """
    Coerce ``value`` to bytes.
    - If str, interpret as hex (with or without '0x'); odd-length hex is rejected.
    - If a bytes-like object, copy to immutable bytes.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        h = _strip_0x(value.strip())
        if len(h) % 2 != 0:
            raise LedgerError(f"hex string must have even length, got {len(h)}")
        try:
            return bytes.fromhex(h)
        except ValueError as e:
            raise LedgerError(f"invalid hex string: {value!r}") from e
    raise LedgerError(f"cannot convert type {type(value).__name__} to bytes")


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    """Encode bytes as 0x-prefixed lowercase hex."""
    return "0x" + bytes(b).hex()


def to_address(value: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """``to_bytes`` plus a length check against ADDRESS_LEN."""
    b = to_bytes(value)
    if len(b) != ADDRESS_LEN:
        raise LedgerError(f"address must be {ADDRESS_LEN} bytes", details={"len": len(b)})
    return b


def derive_address(*parts: Union[bytes, str, int]) -> bytes:
    """
    Deterministic 20-byte address: sha3_256 over the concatenated parts,
    truncated. str parts are UTF-8 encoded, ints as 8-byte big-endian.
    """
    h = hashlib.sha3_256()
    for p in parts:
        if isinstance(p, str):
            h.update(p.encode("utf-8"))
        elif isinstance(p, int):
            h.update(p.to_bytes(8, "big"))
        else:
            h.update(bytes(p))
    return h.digest()[:ADDRESS_LEN]


# ----------------------------- models ------------------------------ #


@dataclass(frozen=True)
class BlockEnv:
    """
    Per-transaction block environment.

    Fields
    ------
    height:     Height the transaction will commit at (first is 1).
    timestamp:  Block timestamp, seconds.
    chain_id:   From ``LedgerConfig.chain_id``.
    """

    height: int
    timestamp: int
    chain_id: int

    def __post_init__(self) -> None:
        for name in ("height", "timestamp", "chain_id"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int) or v < 0:
                raise LedgerError(f"{name} must be a non-negative int", details={name: v})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CallContext:
    caller: bytes
    address: bytes
    block: BlockEnv
    storage: ContractStorage
    events: List[Event] = field(default_factory=list)

    @property
    def timestamp(self) -> int:
        return self.block.timestamp

    @property
    def readonly(self) -> bool:
        return self.storage.readonly

    def emit(self, name: str, args: Optional[Mapping[str, Any]] = None) -> None:
        if self.readonly:
            raise StaticCallViolation("event emitted during a read-only call", details={"event": name})
        self.events.append(make_event(self.address, name, args))


__all__ = [
    "ADDRESS_LEN",
    "ZERO_ADDRESS",
    "BlockEnv",
    "CallContext",
    "derive_address",
    "to_address",
    "to_bytes",
    "to_hex",
]
