# -*- coding: utf-8 -*-
"""
Scripted sessions: argument resolution, step failures, full flows.
"""
from __future__ import annotations

import json

import pytest

from hushh.errors import ScriptError
from hushh.session import Session, account_address, load_script, run_script


def _script(*steps, accounts=("owner", "alice", "bob")):
    return {"accounts": list(accounts), "steps": list(steps)}


def test_proof_flow(ledger) -> None:
    results = run_script(
        _script(
            {"deploy": "ZKMockProof", "as": "proofs", "from": "owner"},
            {"send": "proofs", "method": "generate_proof", "args": [950], "from": "alice"},
            {"send": "proofs", "method": "verify_proof", "args": [1], "from": "bob"},
            {"call": "proofs", "method": "get_user_proofs", "args": ["@alice"]},
            {"call": "proofs", "method": "get_proof", "args": [1]},
        ),
        ledger,
    )
    assert all(r.ok for r in results)
    assert results[1].to_dict()["result"] == [1, "Excellent (900+)"]
    assert [e["name"] for e in results[1].events] == ["ProofGenerated"]
    assert results[3].result == [1]
    rec = results[4].to_dict()["result"]
    assert rec["verified"] is True
    assert rec["prover"] == "0x" + account_address("alice").hex()
    assert ledger.height == 3


def test_failed_step_is_recorded_and_session_continues(ledger) -> None:
    results = run_script(
        _script(
            {"deploy": "ZKMockProof", "as": "proofs"},
            {"send": "proofs", "method": "generate_proof", "args": [1001], "from": "alice"},
            {"send": "proofs", "method": "generate_proof", "args": [10], "from": "alice"},
        ),
        ledger,
    )
    assert [r.ok for r in results] == [True, False, True]
    assert results[1].error == {"code": "OUT_OF_RANGE", "message": "ZKMockProof: score must be <= 1000"}
    assert results[2].result == (1, "Unrated (0-99)")


def test_huge_token_id_fails_only_its_step(ledger) -> None:
    results = run_script(
        _script(
            {"deploy": "HushhIdentity", "as": "id", "from": "owner"},
            {"call": "id", "method": "owner_of", "args": [2**256]},
            {"call": "id", "method": "total_identities"},
        ),
        ledger,
    )
    assert [r.ok for r in results] == [True, False, True]
    assert results[1].error == {"code": "NOT_FOUND", "message": "HushhIdentity: token does not exist"}
    assert results[2].result == 0


def test_contract_alias_resolves_to_address(ledger) -> None:
    results = run_script(
        _script(
            {"deploy": "HushhCoin", "as": "coin", "from": "owner"},
            {"send": "coin", "method": "mint", "args": ["$coin", 1], "from": "owner"},
            {"call": "coin", "method": "balance_of_human", "args": ["$coin"]},
        ),
        ledger,
    )
    assert results[2].result == 1


def test_unknown_references_fail_the_step(ledger) -> None:
    results = run_script(
        _script(
            {"deploy": "HushhIdentity", "as": "id"},
            {"call": "id", "method": "has_identity", "args": ["@mallory"]},
            {"send": "nope", "method": "create_identity"},
            {"send": "id", "method": "create_identity", "args": [1, 2]},
        ),
        ledger,
    )
    assert [r.ok for r in results] == [True, False, False, False]
    assert results[1].error["code"] == "HUSHH_SCRIPT_ERROR"
    assert results[3].error["code"] == "TypeError"


def test_malformed_steps_raise(ledger) -> None:
    session = Session(ledger, ["owner"])
    with pytest.raises(ScriptError):
        session.run_step(0, {"deploy": "ZKMockProof", "send": "x"})
    with pytest.raises(ScriptError):
        session.run_step(0, {"send": "x"})
    with pytest.raises(ScriptError):
        session.run_step(0, {"call": "x", "method": "m", "args": "notalist"})
    with pytest.raises(ScriptError):
        Session(ledger, [])


def test_load_script(tmp_path) -> None:
    p = tmp_path / "s.json"
    p.write_text(json.dumps({"steps": []}))
    assert load_script(p) == {"accounts": ["deployer"], "steps": []}

    p.write_text("[]")
    with pytest.raises(ScriptError):
        load_script(p)
    p.write_text("{not json")
    with pytest.raises(ScriptError):
        load_script(p)
    with pytest.raises(ScriptError):
        load_script(tmp_path / "missing.json")
