"""
hushh.runtime.ledger — single-writer in-process ledger hosting contracts.

The ledger is the order-preserving execution environment the contracts
assume. It owns:

- committed contract storage, behind a ``Journal``;
- the deployed-contract table (address → ``ContractDef``);
- block height and timestamp;
- a ``Clock`` (time source) and an optional ``EventSink``.

Every state-mutating operation is one transaction:

    block = next block env (height+1, non-decreasing timestamp)
    journal.begin()
    result = method(ctx, *args)       # any exception → journal.revert(), re-raise
    journal.commit()
    height/timestamp advance; events go into the Receipt and then to the sink

Views run against committed state through a read-only storage view. Calling
a mutating method through ``call()`` simulates it: it runs in a checkpoint
that is always reverted, and nothing is published.

A Ledger is not thread-safe; share one per writer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..config import LedgerConfig, load_config
from ..errors import LedgerError
from .clock import Clock, ManualClock, SystemClock
from .context import ZERO_ADDRESS, BlockEnv, CallContext, derive_address, to_address, to_hex
from .events import Event, EventSink
from .journal import ContractStorage, Journal

log = logging.getLogger(__name__)

ContractFn = Callable[..., Any]
AddressLike = Union[bytes, str]


@dataclass(frozen=True)
class ContractDef:
    """
    A deployable contract: an ``init`` run once at deploy, mutating
    ``methods`` (run as transactions) and read-only ``views``. Every
    callable takes a ``CallContext`` first.
    """

    name: str
    init: Optional[ContractFn]
    methods: Mapping[str, ContractFn]
    views: Mapping[str, ContractFn]

    def __post_init__(self) -> None:
        clash = set(self.methods) & set(self.views)
        if clash:
            raise LedgerError("names declared as both method and view", details={"names": sorted(clash)})

    def has(self, name: str) -> bool:
        return name in self.methods or name in self.views


@dataclass(frozen=True)
class Receipt:
    height: int
    contract: bytes
    method: str
    caller: bytes
    timestamp: int
    result: Any
    events: Tuple[Event, ...]

    def named(self, name: str) -> List[Event]:
        return [e for e in self.events if e.name == name]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "height": self.height,
            "contract": to_hex(self.contract),
            "method": self.method,
            "caller": to_hex(self.caller),
            "timestamp": self.timestamp,
            "events": [e.to_dict() for e in self.events],
        }


class Ledger:
    def __init__(
        self,
        config: Optional[LedgerConfig] = None,
        *,
        clock: Optional[Clock] = None,
        sink: Optional[EventSink] = None,
    ) -> None:
        self.config = config or load_config()
        if clock is None:
            if self.config.genesis_timestamp > 0:
                clock = ManualClock(self.config.genesis_timestamp)
            else:
                clock = SystemClock()
        self.clock = clock
        self.sink = sink
        self._journal = Journal()
        self._contracts: Dict[bytes, ContractDef] = {}
        self._nonces: Dict[bytes, int] = {}
        self._height = 0
        self._timestamp: Optional[int] = None

    # ------------------------------------------------------------------ #
    # Chain view
    # ------------------------------------------------------------------ #

    @property
    def height(self) -> int:
        """Number of committed transactions (deploys included)."""
        return self._height

    @property
    def timestamp(self) -> Optional[int]:
        """Timestamp of the last committed transaction, None before the first."""
        return self._timestamp

    def contracts(self) -> Dict[bytes, str]:
        return {addr: cdef.name for addr, cdef in self._contracts.items()}

    def contract_name(self, address: AddressLike) -> str:
        return self._lookup(to_address(address))[1].name

    def storage_items(self, address: AddressLike) -> Dict[bytes, bytes]:
        """Committed storage of a contract, for inspection."""
        addr, _ = self._lookup(to_address(address))
        return dict(self._journal.items(addr))

    # ------------------------------------------------------------------ #
    # Deploy / transact / call
    # ------------------------------------------------------------------ #

    def deploy(self, contract: Union[ContractDef, str], deployer: AddressLike, *args: Any) -> bytes:
        """
        Deploy ``contract`` (a ContractDef or a registered name) and run its
        ``init`` as a transaction sent by ``deployer``. Returns the address.
        """
        if isinstance(contract, str):
            # Lazy: the contract modules import this package.
            from ..contracts import get_contract

            contract = get_contract(contract)
        if not isinstance(contract, ContractDef):
            raise LedgerError("deploy expects a ContractDef or a contract name")

        sender = to_address(deployer)
        nonce = self._nonces.get(sender, 0)
        addr = derive_address(b"hushh/deploy", sender, nonce)
        if addr in self._contracts:
            raise LedgerError("address collision on deploy", details={"address": addr})

        receipt = self._execute(contract, addr, "<init>", contract.init, args, sender)
        self._contracts[addr] = contract
        self._nonces[sender] = nonce + 1
        log.debug("deployed %s at %s by %s", contract.name, to_hex(addr), to_hex(sender))
        self._publish(receipt.events)
        return addr

    def transact(self, address: AddressLike, method: str, *args: Any, caller: AddressLike) -> Receipt:
        """Run ``method`` as one transaction. Contract errors propagate after revert."""
        addr, cdef = self._lookup(to_address(address))
        fn = cdef.methods.get(method)
        if fn is None:
            if method in cdef.views:
                raise LedgerError(f"{cdef.name}.{method} is a view; use call()")
            raise LedgerError(f"unknown method {cdef.name}.{method}")
        receipt = self._execute(cdef, addr, method, fn, args, to_address(caller))
        self._publish(receipt.events)
        return receipt

    def call(self, address: AddressLike, name: str, *args: Any, caller: AddressLike = ZERO_ADDRESS) -> Any:
        """
        Read-only call. Views run on committed state; mutating methods are
        simulated on the next block and rolled back.
        """
        addr, cdef = self._lookup(to_address(address))
        sender = to_address(caller)
        view = cdef.views.get(name)
        if view is not None:
            block = self._current_block()
            storage = self._storage(addr, readonly=True)
            ctx = CallContext(caller=sender, address=addr, block=block, storage=storage)
            return view(ctx, *args)

        fn = cdef.methods.get(name)
        if fn is None:
            raise LedgerError(f"unknown method {cdef.name}.{name}")
        block = self._next_block()
        self._journal.begin()
        try:
            ctx = CallContext(caller=sender, address=addr, block=block, storage=self._storage(addr))
            return fn(ctx, *args)
        finally:
            self._journal.revert()

    def at(self, address: AddressLike) -> "ContractHandle":
        addr, _ = self._lookup(to_address(address))
        return ContractHandle(self, addr)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _lookup(self, addr: bytes) -> Tuple[bytes, ContractDef]:
        cdef = self._contracts.get(addr)
        if cdef is None:
            raise LedgerError("no contract at address", details={"address": addr})
        return addr, cdef

    def _storage(self, addr: bytes, *, readonly: bool = False) -> ContractStorage:
        return ContractStorage(
            self._journal,
            addr,
            readonly=readonly,
            max_key_bytes=self.config.max_storage_key_bytes,
            max_value_bytes=self.config.max_storage_value_bytes,
        )

    def _next_block(self) -> BlockEnv:
        now = self.clock.now()
        if self._timestamp is not None:
            now = max(now, self._timestamp + self.config.min_block_interval)
        return BlockEnv(height=self._height + 1, timestamp=now, chain_id=self.config.chain_id)

    def _current_block(self) -> BlockEnv:
        ts = self._timestamp if self._timestamp is not None else self.clock.now()
        return BlockEnv(height=self._height, timestamp=ts, chain_id=self.config.chain_id)

    def _execute(
        self,
        cdef: ContractDef,
        addr: bytes,
        method: str,
        fn: Optional[ContractFn],
        args: Sequence[Any],
        caller: bytes,
    ) -> Receipt:
        block = self._next_block()
        self._journal.begin()
        ctx = CallContext(caller=caller, address=addr, block=block, storage=self._storage(addr))
        try:
            result = fn(ctx, *args) if fn is not None else None
        except BaseException as exc:
            self._journal.revert()
            log.debug(
                "revert %s.%s at height %d: %s",
                cdef.name,
                method,
                block.height,
                getattr(exc, "code", type(exc).__name__),
            )
            raise
        changes = self._journal.commit()
        self._height = block.height
        self._timestamp = block.timestamp
        log.debug(
            "commit %s.%s height=%d ts=%d writes=%d events=%d",
            cdef.name,
            method,
            block.height,
            block.timestamp,
            changes,
            len(ctx.events),
        )
        return Receipt(
            height=block.height,
            contract=addr,
            method=method,
            caller=caller,
            timestamp=block.timestamp,
            result=result,
            events=tuple(ctx.events),
        )

    def _publish(self, events: Sequence[Event]) -> None:
        if self.sink is None:
            return
        for ev in events:
            try:
                self.sink.publish(ev)
            except Exception:
                log.warning("event sink failed on %s from %s", ev.name, to_hex(ev.contract), exc_info=True)


class ContractHandle:
    """
    Convenience binding of (ledger, address, caller).

        proofs = ledger.at(addr).connect(alice)
        receipt = proofs.transact("generate_proof", 950)
        proofs.call("total_proofs")
    """

    def __init__(self, ledger: Ledger, address: bytes, caller: bytes = ZERO_ADDRESS) -> None:
        self.ledger = ledger
        self.address = address
        self.caller = caller

    @property
    def name(self) -> str:
        return self.ledger.contract_name(self.address)

    def connect(self, caller: AddressLike) -> "ContractHandle":
        return ContractHandle(self.ledger, self.address, to_address(caller))

    def transact(self, method: str, *args: Any) -> Receipt:
        return self.ledger.transact(self.address, method, *args, caller=self.caller)

    def call(self, name: str, *args: Any) -> Any:
        return self.ledger.call(self.address, name, *args, caller=self.caller)

    def __repr__(self) -> str:
        return f"<ContractHandle {self.name} @ {to_hex(self.address)} as {to_hex(self.caller)}>"


__all__ = ["ContractDef", "ContractHandle", "Ledger", "Receipt"]
