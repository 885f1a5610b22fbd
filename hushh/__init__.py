"""
hushh — Hushh contract suite on an in-process ledger.

    from hushh.runtime import Ledger, ManualClock, MemorySink

    ledger = Ledger(clock=ManualClock(1_700_000_000), sink=MemorySink())
    proofs = ledger.at(ledger.deploy("ZKMockProof", owner)).connect(alice)
    proofs.transact("generate_proof", 950).result    # (1, "Excellent (900+)")
"""

from .version import __version__

__all__ = ["__version__"]
