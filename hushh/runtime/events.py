"""
hushh.runtime.events — contract events and notification sinks.

Contracts emit events through their ``CallContext``; the ledger buffers them
for the running transaction, puts them in the ``Receipt`` and, once the
transaction commits, publishes each one to the injected ``EventSink``.
Events of a reverted transaction or of a static call are never published.

Event arguments are validated on emit:

- name: non-empty str, at most MAX_EVENT_NAME_LEN characters
- keys: identifier-like str (letters/underscore, then letters/digits/underscore)
- values: bytes (≤ MAX_BYTES_LEN), str (≤ MAX_BYTES_LEN UTF-8 bytes),
  bool, or int fitting in MAX_INT_BITS bits
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple, runtime_checkable

from ..errors import LedgerError

MAX_EVENT_NAME_LEN = 64
MAX_KEY_LEN = 64
MAX_BYTES_LEN = 4096
MAX_INT_BITS = 256

_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Event:
    """One emitted event, tagged with the emitting contract address."""

    contract: bytes
    name: str
    args: Mapping[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view: bytes become 0x-hex."""
        return {
            "contract": "0x" + self.contract.hex(),
            "name": self.name,
            "args": {k: _jsonable(v) for k, v in self.args.items()},
        }


def _jsonable(v: Any) -> Any:
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    return v


# --------------------------------------------------------------------------- #
# Validation
# --------------------------------------------------------------------------- #


def _check_name(name: Any) -> str:
    if not isinstance(name, str) or not name:
        raise LedgerError("event name must be a non-empty str", details={"where": "name"})
    if len(name) > MAX_EVENT_NAME_LEN:
        raise LedgerError("event name too long", details={"where": "name_length", "len": len(name)})
    return name


def _check_key(key: Any) -> str:
    if not isinstance(key, str) or not key:
        raise LedgerError("event key must be a non-empty str", details={"where": "key"})
    if len(key) > MAX_KEY_LEN or not _KEY_RE.match(key):
        raise LedgerError("event key has invalid form", details={"where": "key_grammar", "key": key})
    return key


def _check_value(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        b = bytes(value)
        if len(b) > MAX_BYTES_LEN:
            raise LedgerError("event bytes arg too long", details={"len": len(b)})
        return b
    if isinstance(value, str):
        if len(value.encode("utf-8")) > MAX_BYTES_LEN:
            raise LedgerError("event str arg too long", details={"len": len(value)})
        return value
    # bool is a subclass of int, so check it before int.
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value.bit_length() > MAX_INT_BITS:
            raise LedgerError("event int arg out of range", details={"bits": value.bit_length()})
        return int(value)
    raise LedgerError("unsupported event arg type", details={"py_type": type(value).__name__})


def make_event(contract: bytes, name: str, args: Optional[Mapping[str, Any]] = None) -> Event:
    """Validate and build an Event."""
    if args is not None and not isinstance(args, Mapping):
        raise LedgerError("event args must be a mapping", details={"where": "args_type"})
    checked: Dict[str, Any] = {}
    for k, v in (args or {}).items():
        checked[_check_key(k)] = _check_value(v)
    return Event(contract=bytes(contract), name=_check_name(name), args=checked)


# --------------------------------------------------------------------------- #
# Sinks
# --------------------------------------------------------------------------- #


@runtime_checkable
class EventSink(Protocol):
    """Receives events of committed transactions. No acknowledgement."""

    def publish(self, event: Event) -> None: ...


class MemorySink:
    """Collects published events in order."""

    def __init__(self) -> None:
        self._events: List[Event] = []

    def publish(self, event: Event) -> None:
        self._events.append(event)

    @property
    def events(self) -> Tuple[Event, ...]:
        return tuple(self._events)

    def named(self, name: str) -> List[Event]:
        return [e for e in self._events if e.name == name]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)


class LoggingSink:
    """Writes each event to a logger at INFO."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._log = logger or logging.getLogger("hushh.events")

    def publish(self, event: Event) -> None:
        self._log.info("event %s from 0x%s %s", event.name, event.contract.hex(), event.to_dict()["args"])


__all__ = [
    "Event",
    "EventSink",
    "MemorySink",
    "LoggingSink",
    "make_event",
    "MAX_EVENT_NAME_LEN",
    "MAX_KEY_LEN",
    "MAX_BYTES_LEN",
    "MAX_INT_BITS",
]
