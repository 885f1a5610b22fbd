"""
hushh.session — run scripted sessions against a fresh ledger.

A session script is a JSON object:

    {
      "accounts": ["owner", "alice", "bob"],
      "steps": [
        {"deploy": "ZKMockProof", "as": "proofs", "from": "owner"},
        {"send": "proofs", "method": "generate_proof", "args": [950], "from": "alice"},
        {"call": "proofs", "method": "get_user_proofs", "args": ["@alice"]}
      ]
    }

Account names map to deterministic addresses. In ``args``, ``"@name"``
resolves to an account address and ``"$alias"`` to a deployed contract's
address; lists are resolved element-wise. ``from`` defaults to the first
account for ``deploy``/``send`` and to the zero address for ``call``.

A failing step is recorded with its error and the session moves on.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, is_dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .errors import HushhError, ScriptError
from .runtime import ZERO_ADDRESS, Ledger, derive_address, to_hex

log = logging.getLogger(__name__)

STEP_KINDS = ("deploy", "send", "call")


def account_address(name: str) -> bytes:
    return derive_address(b"hushh/account/", name)


def jsonable(x: Any) -> Any:
    """Best-effort conversion of contract results to JSON-friendly values."""
    if isinstance(x, (bytes, bytearray)):
        return to_hex(x)
    if hasattr(x, "to_dict") and callable(x.to_dict):
        return jsonable(x.to_dict())
    if is_dataclass(x) and not isinstance(x, type):
        return {k: jsonable(v) for k, v in vars(x).items()}
    if isinstance(x, Mapping):
        return {str(k): jsonable(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [jsonable(v) for v in x]
    return x


@dataclass
class StepResult:
    index: int
    kind: str
    target: str
    method: Optional[str]
    ok: bool
    result: Any = None
    error: Optional[Dict[str, Any]] = None
    events: List[Dict[str, Any]] = field(default_factory=list)
    height: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "kind": self.kind,
            "target": self.target,
            "method": self.method,
            "ok": self.ok,
            "result": jsonable(self.result),
            "error": jsonable(self.error),
            "events": self.events,
            "height": self.height,
        }


class Session:
    def __init__(self, ledger: Ledger, accounts: Sequence[str]) -> None:
        if not accounts:
            raise ScriptError("at least one account is required")
        self.ledger = ledger
        self.accounts: Dict[str, bytes] = {}
        for name in accounts:
            if not isinstance(name, str) or not name:
                raise ScriptError("account names must be non-empty strings", details={"account": name})
            self.accounts[name] = account_address(name)
        self.default_sender = accounts[0]
        self.contracts: Dict[str, bytes] = {}

    # --- argument resolution ---------------------------------------------

    def resolve(self, value: Any) -> Any:
        if isinstance(value, list):
            return [self.resolve(v) for v in value]
        if isinstance(value, str) and value.startswith("@"):
            return self._account(value[1:])
        if isinstance(value, str) and value.startswith("$"):
            alias = value[1:]
            if alias not in self.contracts:
                raise ScriptError(f"unknown contract alias {alias!r}")
            return self.contracts[alias]
        return value

    def _account(self, name: str) -> bytes:
        try:
            return self.accounts[name]
        except KeyError:
            raise ScriptError(f"unknown account {name!r}") from None

    def _target(self, alias: Any) -> bytes:
        if not isinstance(alias, str) or alias not in self.contracts:
            raise ScriptError(f"unknown contract alias {alias!r}")
        return self.contracts[alias]

    # --- execution -------------------------------------------------------

    def run_step(self, index: int, step: Mapping[str, Any]) -> StepResult:
        if not isinstance(step, Mapping):
            raise ScriptError(f"step {index} must be an object")
        kinds = [k for k in STEP_KINDS if k in step]
        if len(kinds) != 1:
            raise ScriptError(f"step {index} must have exactly one of {', '.join(STEP_KINDS)}")
        kind = kinds[0]
        target = step[kind]
        method = step.get("method")
        if kind != "deploy" and not isinstance(method, str):
            raise ScriptError(f"step {index} needs a 'method'")
        args = step.get("args", [])
        if not isinstance(args, list):
            raise ScriptError(f"step {index}: 'args' must be a list")

        res = StepResult(index=index, kind=kind, target=str(target), method=method, ok=False)
        try:
            res.result, res.events, res.height = self._dispatch(kind, target, method, args, step)
            res.ok = True
        except (HushhError, TypeError) as e:
            code = getattr(e, "code", type(e).__name__)
            message = getattr(e, "message", str(e))
            res.error = {"code": code, "message": message}
            log.info("step %d (%s %s) failed: %s %s", index, kind, target, code, message)
        return res

    def _dispatch(self, kind: str, target: Any, method: Optional[str], args: List[Any], step: Mapping[str, Any]):
        resolved = self.resolve(args)
        if kind == "deploy":
            sender = self._account(step.get("from", self.default_sender))
            alias = step.get("as", target)
            if not isinstance(alias, str) or not alias:
                raise ScriptError("'as' must be a non-empty string")
            addr = self.ledger.deploy(target, sender, *resolved)
            self.contracts[alias] = addr
            return to_hex(addr), [], self.ledger.height
        addr = self._target(target)
        if kind == "send":
            sender = self._account(step.get("from", self.default_sender))
            receipt = self.ledger.transact(addr, method, *resolved, caller=sender)
            return receipt.result, [e.to_dict() for e in receipt.events], receipt.height
        caller = self._account(step["from"]) if "from" in step else ZERO_ADDRESS
        return self.ledger.call(addr, method, *resolved, caller=caller), [], None

    def run(self, steps: Sequence[Mapping[str, Any]]) -> List[StepResult]:
        return [self.run_step(i, step) for i, step in enumerate(steps)]


def load_script(path: Path) -> Dict[str, Any]:
    try:
        obj = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ScriptError(f"cannot read script {path}: {e}") from e
    if not isinstance(obj, dict):
        raise ScriptError("script must be a JSON object")
    if not isinstance(obj.get("steps"), list):
        raise ScriptError("script needs a 'steps' list")
    accounts = obj.get("accounts", ["deployer"])
    if not isinstance(accounts, list):
        raise ScriptError("'accounts' must be a list")
    return {"accounts": accounts, "steps": obj["steps"]}


def run_script(script: Mapping[str, Any], ledger: Optional[Ledger] = None) -> List[StepResult]:
    session = Session(ledger or Ledger(), script.get("accounts", ["deployer"]))
    return session.run(script["steps"])


__all__ = ["Session", "StepResult", "account_address", "jsonable", "load_script", "run_script"]
