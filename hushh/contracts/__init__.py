"""
Hushh contracts, deployable by name:

    ledger.deploy("ZKMockProof", owner)
"""

from __future__ import annotations

from typing import Dict

from ..errors import LedgerError
from ..runtime.ledger import ContractDef
from . import coin, identity, proof_registry

CONTRACTS: Dict[str, ContractDef] = {
    c.name: c for c in (coin.CONTRACT, identity.CONTRACT, proof_registry.CONTRACT)
}


def get_contract(name: str) -> ContractDef:
    try:
        return CONTRACTS[name]
    except KeyError:
        raise LedgerError(
            f"unknown contract {name!r}", details={"known": sorted(CONTRACTS)}
        ) from None


__all__ = ["CONTRACTS", "get_contract"]
