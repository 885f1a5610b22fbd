"""
hushh.runtime.journal — journaled contract storage with checkpoints.

A deterministic, in-memory write journal over the ledger's committed
key/value state. Storage is addressed by ``(contract_address, key)``; both
are bytes. Writes go to the top overlay; reads consult overlays from top to
bottom and then the base. ``commit()`` merges the top overlay into its parent
(or into the base when it is the last one); ``revert()`` discards it.

The ledger opens exactly one checkpoint per transaction, which is what makes
every state-mutating contract operation all-or-nothing. Writing with no open
checkpoint is a host bug and raises ``LedgerError``.

``ContractStorage`` is the per-call view handed to contracts: it binds a
contract address, enforces key/value caps and offers typed helpers
(u256 integers as 32-byte big-endian, structured records as canonical CBOR).

Usage
-----
    j = Journal()
    j.begin()
    j.set(addr, b"k", b"v")
    j.commit()                     # visible in the base from now on
    j.begin()
    j.set(addr, b"k", b"other")
    j.revert()                     # back to b"v"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

import cbor2

from ..errors import LedgerError, StaticCallViolation
from ..stdlib.uint import U256_MAX


# Marks a key deleted in an overlay (distinct from "not touched here").
_DELETED = None
_UNTOUCHED = object()


def _b(x: Any, *, name: str) -> bytes:
    if not isinstance(x, (bytes, bytearray, memoryview)):
        raise LedgerError(f"{name} must be bytes-like", details={"py_type": type(x).__name__})
    return bytes(x)


@dataclass
class _Overlay:
    """Staged storage changes of one checkpoint. ``None`` values are deletions."""

    storage: Dict[bytes, Dict[bytes, Optional[bytes]]] = field(default_factory=dict)

    def lookup(self, addr: bytes, key: bytes) -> Any:
        m = self.storage.get(addr)
        if m is None:
            return _UNTOUCHED
        return m.get(key, _UNTOUCHED)

    def stage(self, addr: bytes, key: bytes, value: Optional[bytes]) -> None:
        self.storage.setdefault(addr, {})[key] = value

    def changes(self) -> int:
        return sum(len(m) for m in self.storage.values())


class Journal:
    """
    Copy-on-write journal with nested checkpoints.

    Parameters
    ----------
    base : dict, optional
        Committed state, ``{address: {key: value}}``. Owned by the journal
        after construction.
    """

    def __init__(self, base: Optional[Dict[bytes, Dict[bytes, bytes]]] = None) -> None:
        self._base: Dict[bytes, Dict[bytes, bytes]] = base if base is not None else {}
        self._layers: List[_Overlay] = []

    # ------------------------------------------------------------------ #
    # Checkpointing
    # ------------------------------------------------------------------ #

    def depth(self) -> int:
        """Number of open checkpoints."""
        return len(self._layers)

    def begin(self) -> int:
        """Open a checkpoint. Returns the new depth."""
        self._layers.append(_Overlay())
        return len(self._layers)

    def commit(self) -> int:
        """
        Merge the top checkpoint into its parent, or into the base state when
        no parent is open. Returns the number of staged changes applied.
        """
        if not self._layers:
            raise LedgerError("commit without an open checkpoint")
        top = self._layers.pop()
        if self._layers:
            parent = self._layers[-1]
            for addr, m in top.storage.items():
                for key, value in m.items():
                    parent.stage(addr, key, value)
        else:
            for addr, m in top.storage.items():
                dst = self._base.setdefault(addr, {})
                for key, value in m.items():
                    if value is _DELETED:
                        dst.pop(key, None)
                    else:
                        dst[key] = value
                if not dst:
                    self._base.pop(addr, None)
        return top.changes()

    def revert(self) -> int:
        """Discard the top checkpoint. Returns the number of changes dropped."""
        if not self._layers:
            raise LedgerError("revert without an open checkpoint")
        return self._layers.pop().changes()

    # ------------------------------------------------------------------ #
    # Storage
    # ------------------------------------------------------------------ #

    def get(self, addr: bytes, key: bytes) -> Optional[bytes]:
        for layer in reversed(self._layers):
            v = layer.lookup(addr, key)
            if v is not _UNTOUCHED:
                return v
        m = self._base.get(addr)
        return None if m is None else m.get(key)

    def set(self, addr: bytes, key: bytes, value: bytes) -> None:
        self._top().stage(addr, key, bytes(value))

    def delete(self, addr: bytes, key: bytes) -> None:
        self._top().stage(addr, key, _DELETED)

    def items(self, addr: bytes) -> Iterator[Tuple[bytes, bytes]]:
        """Effective (key, value) pairs for ``addr``, sorted by key."""
        merged: Dict[bytes, Optional[bytes]] = dict(self._base.get(addr, {}))
        for layer in self._layers:
            merged.update(layer.storage.get(addr, {}))
        for key in sorted(merged):
            value = merged[key]
            if value is not None:
                yield key, value

    def _top(self) -> _Overlay:
        if not self._layers:
            raise LedgerError("storage write outside of a transaction")
        return self._layers[-1]


class ContractStorage:
    """
    Storage view bound to one contract address for the duration of a call.

    ``readonly=True`` is used for views; any write raises
    ``StaticCallViolation``.
    """

    def __init__(
        self,
        journal: Journal,
        address: bytes,
        *,
        readonly: bool = False,
        max_key_bytes: int = 128,
        max_value_bytes: int = 131_072,
    ) -> None:
        self._journal = journal
        self._address = bytes(address)
        self._readonly = readonly
        self._max_key = max_key_bytes
        self._max_value = max_value_bytes

    @property
    def address(self) -> bytes:
        return self._address

    @property
    def readonly(self) -> bool:
        return self._readonly

    # --- validation ---------------------------------------------------- #

    def _key(self, key: Any) -> bytes:
        k = _b(key, name="storage key")
        if not k:
            raise LedgerError("storage key must be non-empty")
        if len(k) > self._max_key:
            raise LedgerError(
                f"storage key too long (>{self._max_key} bytes)", details={"len": len(k)}
            )
        return k

    def _writable(self) -> None:
        if self._readonly:
            raise StaticCallViolation(
                "storage write during a read-only call", details={"contract": self._address}
            )

    # --- raw bytes ----------------------------------------------------- #

    def get(self, key: bytes) -> Optional[bytes]:
        return self._journal.get(self._address, self._key(key))

    def set(self, key: bytes, value: bytes) -> None:
        self._writable()
        k = self._key(key)
        v = _b(value, name="storage value")
        if len(v) > self._max_value:
            raise LedgerError(
                f"storage value too large (>{self._max_value} bytes)", details={"len": len(v)}
            )
        self._journal.set(self._address, k, v)

    def delete(self, key: bytes) -> None:
        self._writable()
        self._journal.delete(self._address, self._key(key))

    def exists(self, key: bytes) -> bool:
        return self.get(key) is not None

    # --- typed helpers -------------------------------------------------- #

    def get_int(self, key: bytes) -> int:
        """u256 stored as 32-byte big-endian; absent reads as 0."""
        raw = self.get(key)
        return int.from_bytes(raw, "big") if raw else 0

    def set_int(self, key: bytes, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise LedgerError("set_int value must be int", details={"py_type": type(value).__name__})
        if value < 0 or value > U256_MAX:
            raise LedgerError("set_int out of range (must fit in 256 bits)")
        self.set(key, value.to_bytes(32, "big"))

    def get_record(self, key: bytes) -> Optional[Any]:
        raw = self.get(key)
        if raw is None:
            return None
        return cbor2.loads(raw)

    def set_record(self, key: bytes, record: Any) -> None:
        self.set(key, cbor2.dumps(record, canonical=True))


__all__ = ["Journal", "ContractStorage"]
