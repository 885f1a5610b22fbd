# -*- coding: utf-8 -*-
"""
Property tests for the proof registry.

- ids are dense and strictly increasing from 1, whoever submits
- every id in a user's index is a proof that user generated, in order
- a batch containing any out-of-range score allocates nothing
- ``verified`` only ever moves false → true
"""
from __future__ import annotations

import hashlib
from typing import Dict, List

import pytest
from hypothesis import given, settings, strategies as st

from hushh.config import LedgerConfig
from hushh.errors import OutOfRange
from hushh.runtime import ContractHandle, Ledger, ManualClock
from hushh.stdlib.bands import statement_for

USERS = [hashlib.sha3_256(f"prop-user-{i}".encode()).digest()[:20] for i in range(4)]
OWNER = hashlib.sha3_256(b"prop-owner").digest()[:20]

VALID = st.integers(min_value=0, max_value=1000)
INVALID = st.one_of(st.integers(min_value=1001, max_value=10**6), st.integers(max_value=-1))


def _fresh() -> ContractHandle:
    cfg = LedgerConfig(
        chain_id=1337,
        genesis_timestamp=1,
        min_block_interval=1,
        max_storage_key_bytes=128,
        max_storage_value_bytes=131_072,
        log_level="INFO",
    )
    ledger = Ledger(cfg, clock=ManualClock(1))
    return ledger.at(ledger.deploy("ZKMockProof", OWNER))


@settings(max_examples=40, deadline=None)
@given(st.lists(st.tuples(st.sampled_from(range(len(USERS))), VALID), max_size=25))
def test_ids_dense_and_user_index_partitions_them(submissions) -> None:
    proofs = _fresh()
    expected: Dict[int, List[int]] = {i: [] for i in range(len(USERS))}
    for n, (who, score) in enumerate(submissions, start=1):
        proof_id, statement = proofs.connect(USERS[who]).transact("generate_proof", score).result
        assert proof_id == n
        assert statement == statement_for(score)
        expected[who].append(proof_id)

    assert proofs.call("total_proofs") == len(submissions)
    seen: List[int] = []
    for who, ids in expected.items():
        got = proofs.call("get_user_proofs", USERS[who])
        assert got == ids
        for pid in got:
            assert proofs.call("get_proof", pid).prover == USERS[who]
        seen.extend(got)
    assert sorted(seen) == list(range(1, len(submissions) + 1))


@settings(max_examples=40, deadline=None)
@given(
    st.lists(VALID, max_size=6),
    INVALID,
    st.lists(VALID, max_size=6),
    st.lists(VALID, max_size=4),
)
def test_batch_with_bad_score_allocates_nothing(before, bad, after, prior) -> None:
    proofs = _fresh().connect(USERS[0])
    proofs.transact("batch_generate_proofs", prior)
    with pytest.raises(OutOfRange):
        proofs.transact("batch_generate_proofs", before + [bad] + after)
    assert proofs.call("total_proofs") == len(prior)
    assert proofs.call("get_user_proofs", USERS[0]) == list(range(1, len(prior) + 1))


@settings(max_examples=30, deadline=None)
@given(
    st.integers(min_value=1, max_value=8),
    st.lists(st.integers(min_value=1, max_value=8), max_size=12),
)
def test_verified_is_monotonic(count, verifications) -> None:
    proofs = _fresh().connect(USERS[1])
    proofs.transact("batch_generate_proofs", [500] * count)
    verified = set()
    for pid in verifications:
        if pid > count:
            continue
        assert proofs.transact("verify_proof", pid).result is True
        verified.add(pid)
        for other in range(1, count + 1):
            assert proofs.call("get_proof", other).verified is (other in verified)
