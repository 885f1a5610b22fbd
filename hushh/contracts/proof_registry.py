"""
ZKMockProof — score-band proof registry.

A submitter hands in a score in [0, 1000]; the registry classifies it into a
band, stores a proof record whose statement names the band (e.g.
``"Excellent (900+)"``), assigns the next sequential id and indexes the id
under the submitter. Anyone may later mark a proof verified.

This is a mock: no cryptographic proof is produced or checked. The
"statement" is the only content of a proof.

Storage layout
--------------
    proof:total                      u256   last issued id (0 = none)
    proof:rec:<id u256>              cbor   {"prover", "statement", "verified", "created_at"}
    proof:user:<addr>                u256   number of proofs issued to addr
    proof:user:<addr>:<idx u256>     u256   idx-th proof id of addr (0-based)

Events
------
    ProofGenerated {prover, proof_id, statement, timestamp}
    ProofVerified  {proof_id, verifier, timestamp}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Sequence

from ..errors import InvalidArgument, LedgerError, NotFound
from ..runtime.context import CallContext, to_hex
from ..runtime.ledger import ContractDef
from ..stdlib import access
from ..stdlib.bands import band_for, require_score
from ..stdlib.token import require_address
from ..stdlib.uint import u256_add

NAME = "ZKMockProof"

K_TOTAL = b"proof:total"
REC_PREFIX = b"proof:rec:"
USER_PREFIX = b"proof:user:"


@dataclass(frozen=True)
class ProofRecord:
    proof_id: int
    prover: bytes
    statement: str
    verified: bool
    created_at: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proof_id": self.proof_id,
            "prover": to_hex(self.prover),
            "statement": self.statement,
            "verified": self.verified,
            "created_at": self.created_at,
        }


class IssuedProof(NamedTuple):
    proof_id: int
    statement: str


# --- storage helpers ----------------------------------------------------------


def _u256_key(prefix: bytes, n: int) -> bytes:
    return prefix + n.to_bytes(32, "big")


def _user_count_key(user: bytes) -> bytes:
    return USER_PREFIX + user


def _user_item_key(user: bytes, idx: int) -> bytes:
    return _u256_key(USER_PREFIX + user + b":", idx)


def _load(ctx: CallContext, proof_id: Any) -> ProofRecord:
    if isinstance(proof_id, bool) or not isinstance(proof_id, int):
        raise InvalidArgument(f"{NAME}: proof id must be an integer")
    if proof_id <= 0 or proof_id > ctx.storage.get_int(K_TOTAL):
        raise NotFound(f"{NAME}: proof does not exist", details={"proof_id": proof_id})
    raw = ctx.storage.get_record(_u256_key(REC_PREFIX, proof_id))
    if raw is None:
        raise LedgerError("proof index points at a missing record", details={"proof_id": proof_id})
    return ProofRecord(
        proof_id=proof_id,
        prover=raw["prover"],
        statement=raw["statement"],
        verified=raw["verified"],
        created_at=raw["created_at"],
    )


def _store(ctx: CallContext, rec: ProofRecord) -> None:
    ctx.storage.set_record(
        _u256_key(REC_PREFIX, rec.proof_id),
        {
            "prover": rec.prover,
            "statement": rec.statement,
            "verified": rec.verified,
            "created_at": rec.created_at,
        },
    )


def _issue(ctx: CallContext, score: int) -> IssuedProof:
    statement = band_for(score).statement
    proof_id = u256_add(ctx.storage.get_int(K_TOTAL), 1)
    ctx.storage.set_int(K_TOTAL, proof_id)
    _store(
        ctx,
        ProofRecord(
            proof_id=proof_id,
            prover=ctx.caller,
            statement=statement,
            verified=False,
            created_at=ctx.timestamp,
        ),
    )

    count = ctx.storage.get_int(_user_count_key(ctx.caller))
    ctx.storage.set_int(_user_item_key(ctx.caller, count), proof_id)
    ctx.storage.set_int(_user_count_key(ctx.caller), count + 1)

    ctx.emit(
        "ProofGenerated",
        {"prover": ctx.caller, "proof_id": proof_id, "statement": statement, "timestamp": ctx.timestamp},
    )
    return IssuedProof(proof_id, statement)


# --- methods ------------------------------------------------------------------


def init(ctx: CallContext) -> None:
    access.init_owner(ctx, ctx.caller)


def generate_proof(ctx: CallContext, score: int) -> IssuedProof:
    """Issue one proof for ``score``. Returns ``(proof_id, statement)``."""
    return _issue(ctx, require_score(score, NAME))


def batch_generate_proofs(ctx: CallContext, scores: Sequence[int]) -> List[int]:
    """
    Issue one proof per score, in order. Every score is validated before the
    first id is allocated, so a bad score leaves the counter untouched.
    """
    if isinstance(scores, (str, bytes)) or not isinstance(scores, Sequence):
        raise InvalidArgument(f"{NAME}: scores must be a list of integers")
    checked = [require_score(s, NAME) for s in scores]
    return [_issue(ctx, s).proof_id for s in checked]


def verify_proof(ctx: CallContext, proof_id: int) -> bool:
    rec = _load(ctx, proof_id)
    if not rec.verified:
        _store(ctx, ProofRecord(rec.proof_id, rec.prover, rec.statement, True, rec.created_at))
    ctx.emit("ProofVerified", {"proof_id": rec.proof_id, "verifier": ctx.caller, "timestamp": ctx.timestamp})
    return True


def transfer_ownership(ctx: CallContext, new_owner: Any) -> None:
    access.transfer_ownership(ctx, require_address(new_owner, NAME), NAME)


def renounce_ownership(ctx: CallContext) -> None:
    access.renounce_ownership(ctx, NAME)


# --- views --------------------------------------------------------------------


def get_proof(ctx: CallContext, proof_id: int) -> ProofRecord:
    return _load(ctx, proof_id)


def get_user_proofs(ctx: CallContext, user: Any) -> List[int]:
    addr = require_address(user, NAME)
    count = ctx.storage.get_int(_user_count_key(addr))
    return [ctx.storage.get_int(_user_item_key(addr, i)) for i in range(count)]


def total_proofs(ctx: CallContext) -> int:
    return ctx.storage.get_int(K_TOTAL)


def owner(ctx: CallContext) -> bytes:
    return access.get_owner(ctx)


CONTRACT = ContractDef(
    name=NAME,
    init=init,
    methods={
        "generate_proof": generate_proof,
        "batch_generate_proofs": batch_generate_proofs,
        "verify_proof": verify_proof,
        "transfer_ownership": transfer_ownership,
        "renounce_ownership": renounce_ownership,
    },
    views={
        "get_proof": get_proof,
        "get_user_proofs": get_user_proofs,
        "total_proofs": total_proofs,
        "owner": owner,
    },
)
