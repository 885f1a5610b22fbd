# -*- coding: utf-8 -*-
"""
ZKMockProof: issuance, per-user index, verification, batches.
"""
from __future__ import annotations

import pytest

from hushh.errors import InvalidArgument, NotFound, OutOfRange, Unauthorized
from hushh.runtime import ZERO_ADDRESS


# ---------------------------- deployment --------------------------------------


def test_owner_is_deployer(proofs, accounts) -> None:
    assert proofs.call("owner") == accounts["owner"]


def test_starts_with_zero_proofs(proofs) -> None:
    assert proofs.call("total_proofs") == 0


# ---------------------------- generate ----------------------------------------


def test_generate_returns_id_and_statement(proofs, accounts) -> None:
    r = proofs.connect(accounts["alice"]).transact("generate_proof", 850)
    proof_id, statement = r.result
    assert proof_id == 1
    assert "Very Good" in statement
    assert statement == "Very Good (800-899)"
    assert proofs.call("total_proofs") == 1


def test_new_proof_record(proofs, accounts) -> None:
    alice = accounts["alice"]
    r = proofs.connect(alice).transact("generate_proof", 950)
    rec = proofs.call("get_proof", 1)
    assert rec.proof_id == 1
    assert rec.prover == alice
    assert rec.statement == "Excellent (900+)"
    assert rec.verified is False
    assert rec.created_at == r.timestamp
    assert rec.to_dict()["prover"] == "0x" + alice.hex()


def test_generate_emits_event(proofs, accounts, sink) -> None:
    alice = accounts["alice"]
    r = proofs.connect(alice).transact("generate_proof", 750)
    (ev,) = r.named("ProofGenerated")
    assert ev.args == {
        "prover": alice,
        "proof_id": 1,
        "statement": "Good (700-799)",
        "timestamp": r.timestamp,
    }
    assert sink.named("ProofGenerated") == [ev]


def test_score_above_1000_reverts_and_keeps_counter(ledger, proofs, accounts, sink) -> None:
    height = ledger.height
    published = len(sink)
    with pytest.raises(OutOfRange) as ei:
        proofs.connect(accounts["alice"]).transact("generate_proof", 1001)
    assert ei.value.reason == "ZKMockProof: score must be <= 1000"
    assert proofs.call("total_proofs") == 0
    assert proofs.call("get_user_proofs", accounts["alice"]) == []
    assert ledger.height == height
    assert len(sink) == published


def test_score_of_exactly_1000(proofs, accounts) -> None:
    r = proofs.connect(accounts["alice"]).transact("generate_proof", 1000)
    assert r.result == (1, "Excellent (900+)")


def test_non_integer_score_rejected(proofs, accounts) -> None:
    with pytest.raises(InvalidArgument):
        proofs.connect(accounts["alice"]).transact("generate_proof", "950")


def test_ids_are_sequential(proofs, accounts) -> None:
    alice = proofs.connect(accounts["alice"])
    bob = proofs.connect(accounts["bob"])
    assert alice.transact("generate_proof", 700).result[0] == 1
    assert bob.transact("generate_proof", 800).result[0] == 2
    assert alice.transact("generate_proof", 10).result[0] == 3
    assert proofs.call("total_proofs") == 3


@pytest.mark.parametrize(
    "score,label,range_text",
    [
        (950, "Excellent", "900+"),
        (850, "Very Good", "800-899"),
        (750, "Good", "700-799"),
        (650, "Above Average", "600-699"),
        (550, "Average", "500-599"),
        (450, "Below Average", "400-499"),
        (350, "Low", "300-399"),
        (250, "Very Low", "200-299"),
        (150, "Minimal", "100-199"),
        (50, "Unrated", "0-99"),
    ],
)
def test_statement_per_band(proofs, accounts, score, label, range_text) -> None:
    _, statement = proofs.connect(accounts["alice"]).transact("generate_proof", score).result
    assert label in statement
    assert range_text in statement


def test_simulated_generate_leaves_no_trace(ledger, proofs, accounts, sink) -> None:
    published = len(sink)
    assert proofs.connect(accounts["alice"]).call("generate_proof", 950) == (1, "Excellent (900+)")
    assert proofs.call("total_proofs") == 0
    assert len(sink) == published
    assert ledger.height == 1


# ---------------------------- verify ------------------------------------------


def test_verify_existing_proof(proofs, accounts) -> None:
    proofs.connect(accounts["alice"]).transact("generate_proof", 850)
    r = proofs.connect(accounts["bob"]).transact("verify_proof", 1)
    assert r.result is True
    assert proofs.call("get_proof", 1).verified is True


def test_verify_emits_event(proofs, accounts) -> None:
    proofs.connect(accounts["alice"]).transact("generate_proof", 850)
    r = proofs.connect(accounts["bob"]).transact("verify_proof", 1)
    (ev,) = r.named("ProofVerified")
    assert ev.args == {"proof_id": 1, "verifier": accounts["bob"], "timestamp": r.timestamp}


def test_verify_is_idempotent(proofs, accounts) -> None:
    proofs.connect(accounts["alice"]).transact("generate_proof", 850)
    carol = proofs.connect(accounts["carol"])
    assert carol.transact("verify_proof", 1).result is True
    assert carol.transact("verify_proof", 1).result is True
    rec = proofs.call("get_proof", 1)
    assert rec.verified is True
    assert rec.prover == accounts["alice"]


def test_anyone_can_verify(proofs, accounts) -> None:
    proofs.connect(accounts["alice"]).transact("generate_proof", 850)
    assert proofs.connect(ZERO_ADDRESS).transact("verify_proof", 1).result is True


@pytest.mark.parametrize("proof_id", [0, 1, 999])
def test_verify_unknown_proof(proofs, accounts, proof_id) -> None:
    with pytest.raises(NotFound) as ei:
        proofs.connect(accounts["bob"]).transact("verify_proof", proof_id)
    assert ei.value.reason == "ZKMockProof: proof does not exist"


def test_get_unknown_proof(proofs) -> None:
    with pytest.raises(NotFound):
        proofs.call("get_proof", 1)


# ---------------------------- per-user index ----------------------------------


def test_user_proofs_in_creation_order(proofs, accounts) -> None:
    alice = proofs.connect(accounts["alice"])
    bob = proofs.connect(accounts["bob"])
    alice.transact("generate_proof", 700)
    bob.transact("generate_proof", 800)
    alice.transact("generate_proof", 900)
    assert proofs.call("get_user_proofs", accounts["alice"]) == [1, 3]
    assert proofs.call("get_user_proofs", accounts["bob"]) == [2]


def test_user_without_proofs(proofs, accounts) -> None:
    assert proofs.call("get_user_proofs", accounts["carol"]) == []


def test_user_proofs_accepts_hex_address(proofs, accounts) -> None:
    proofs.connect(accounts["alice"]).transact("generate_proof", 700)
    assert proofs.call("get_user_proofs", "0x" + accounts["alice"].hex()) == [1]


# ---------------------------- batch -------------------------------------------


def test_batch_generates_in_order(proofs, accounts) -> None:
    r = proofs.connect(accounts["alice"]).transact("batch_generate_proofs", [700, 800, 900])
    assert r.result == [1, 2, 3]
    assert [e.args["statement"] for e in r.named("ProofGenerated")] == [
        "Good (700-799)",
        "Very Good (800-899)",
        "Excellent (900+)",
    ]
    assert proofs.call("get_user_proofs", accounts["alice"]) == [1, 2, 3]


def test_batch_is_all_or_nothing(proofs, accounts) -> None:
    alice = proofs.connect(accounts["alice"])
    alice.transact("generate_proof", 500)
    with pytest.raises(OutOfRange):
        alice.transact("batch_generate_proofs", [700, 1001, 800])
    assert proofs.call("total_proofs") == 1
    assert proofs.call("get_user_proofs", accounts["alice"]) == [1]
    assert alice.transact("generate_proof", 600).result[0] == 2


def test_empty_batch(proofs, accounts) -> None:
    r = proofs.connect(accounts["alice"]).transact("batch_generate_proofs", [])
    assert r.result == []
    assert r.events == ()
    assert proofs.call("total_proofs") == 0


def test_batch_requires_a_list(proofs, accounts) -> None:
    with pytest.raises(InvalidArgument):
        proofs.connect(accounts["alice"]).transact("batch_generate_proofs", 700)


# ---------------------------- ownership ---------------------------------------


def test_only_owner_transfers_ownership(proofs, accounts) -> None:
    with pytest.raises(Unauthorized):
        proofs.connect(accounts["alice"]).transact("transfer_ownership", accounts["alice"])
    r = proofs.transact("transfer_ownership", accounts["bob"])
    (ev,) = r.named("OwnershipTransferred")
    assert ev.args == {"previous_owner": accounts["owner"], "new_owner": accounts["bob"]}
    assert proofs.call("owner") == accounts["bob"]


def test_timestamps_follow_block_interval(proofs, accounts, genesis) -> None:
    alice = proofs.connect(accounts["alice"])
    r1 = alice.transact("generate_proof", 1)
    r2 = alice.transact("generate_proof", 2)
    # deploy took the genesis timestamp; the clock never moves, so each tx adds the interval
    assert r1.timestamp == genesis + 1
    assert r2.timestamp == genesis + 2
