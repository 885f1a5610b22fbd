# -*- coding: utf-8 -*-
"""
tests.conftest
==============

Pytest fixtures for the Hushh contracts.

- **Deterministic accounts** (owner, alice, bob, carol) derived from SHA3.
- A **ledger** on a ``ManualClock`` with a ``MemorySink`` so timestamps and
  published events are predictable.
- **Deployed handles** for each contract, connected as the owner.

Usage (inside a test file):
    def test_flow(ledger, proofs, accounts, sink):
        receipt = proofs.connect(accounts["alice"]).transact("generate_proof", 950)
        assert receipt.result == (1, "Excellent (900+)")
        assert [e.name for e in sink.events][-1] == "ProofGenerated"
"""
from __future__ import annotations

import hashlib
import os
from typing import Any, Dict

import pytest

from hushh.config import LedgerConfig, load_config
from hushh.runtime import ContractHandle, Ledger, ManualClock, MemorySink

# --- stable env for tests -----------------------------------------------------

os.environ.setdefault("PYTHONHASHSEED", "0")
os.environ.setdefault("TZ", "UTC")

GENESIS = 1_700_000_000
CHAIN_ID = 1337


def _det_address(tag: str) -> bytes:
    """Stable 20-byte address from a tag."""
    return hashlib.sha3_256(b"hushh-tests|" + tag.encode("utf-8")).digest()[:20]


# --- pretty asserts -----------------------------------------------------------


def pytest_assertrepr_compare(op: str, left: Any, right: Any):
    if op == "==" and isinstance(left, bytes) and isinstance(right, bytes):
        return [
            "bytes differ:",
            f"  left : 0x{left.hex()}",
            f"  right: 0x{right.hex()}",
        ]
    return None


# --- fixtures -----------------------------------------------------------------


@pytest.fixture(autouse=True)
def _fresh_config_cache():
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture(scope="session")
def accounts() -> Dict[str, bytes]:
    return {name: _det_address(name) for name in ("owner", "alice", "bob", "carol")}


@pytest.fixture
def config() -> LedgerConfig:
    return LedgerConfig(
        chain_id=CHAIN_ID,
        genesis_timestamp=GENESIS,
        min_block_interval=1,
        max_storage_key_bytes=128,
        max_storage_value_bytes=131_072,
        log_level="INFO",
    )


@pytest.fixture
def genesis() -> int:
    return GENESIS


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(GENESIS)


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def ledger(config: LedgerConfig, clock: ManualClock, sink: MemorySink) -> Ledger:
    return Ledger(config, clock=clock, sink=sink)


def _deploy(ledger: Ledger, name: str, owner: bytes) -> ContractHandle:
    return ledger.at(ledger.deploy(name, owner)).connect(owner)


@pytest.fixture
def proofs(ledger: Ledger, accounts: Dict[str, bytes]) -> ContractHandle:
    return _deploy(ledger, "ZKMockProof", accounts["owner"])


@pytest.fixture
def coin(ledger: Ledger, accounts: Dict[str, bytes]) -> ContractHandle:
    return _deploy(ledger, "HushhCoin", accounts["owner"])


@pytest.fixture
def identity(ledger: Ledger, accounts: Dict[str, bytes]) -> ContractHandle:
    return _deploy(ledger, "HushhIdentity", accounts["owner"])
