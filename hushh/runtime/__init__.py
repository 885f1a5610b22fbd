"""
hushh.runtime — in-process ledger host for Hushh contracts.

Public surface:

    from hushh.runtime import Ledger, ManualClock, MemorySink
    ledger = Ledger(clock=ManualClock(1_700_000_000), sink=MemorySink())
    addr = ledger.deploy("ZKMockProof", owner)
    receipt = ledger.transact(addr, "generate_proof", 950, caller=alice)
"""

from .clock import Clock, ManualClock, SystemClock
from .context import (
    ADDRESS_LEN,
    ZERO_ADDRESS,
    BlockEnv,
    CallContext,
    derive_address,
    to_address,
    to_bytes,
    to_hex,
)
from .events import Event, EventSink, LoggingSink, MemorySink, make_event
from .journal import ContractStorage, Journal
from .ledger import ContractDef, ContractHandle, Ledger, Receipt

__all__ = [
    "ADDRESS_LEN",
    "ZERO_ADDRESS",
    "BlockEnv",
    "CallContext",
    "Clock",
    "ContractDef",
    "ContractHandle",
    "ContractStorage",
    "Event",
    "EventSink",
    "Journal",
    "Ledger",
    "LoggingSink",
    "ManualClock",
    "MemorySink",
    "Receipt",
    "SystemClock",
    "derive_address",
    "make_event",
    "to_address",
    "to_bytes",
    "to_hex",
]
