from __future__ import annotations
# hushh/errors.py
"""
Error types for the Hushh ledger host and contracts. They are lightweight,
serializable, and safe to surface in receipts, logs and CLI output.

Two families:

- Host errors (``LedgerError``, ``StaticCallViolation``, ``ConfigError``):
  misuse of the ledger itself, e.g. calling an unknown method.
- Contract errors (``ContractError`` and subclasses): a rejected operation,
  the equivalent of an on-chain revert. The message is the revert reason and
  carries the contract prefix, e.g. ``"ZKMockProof: proof does not exist"``.

Any exception raised while a transaction executes reverts that transaction;
the ledger re-raises it unchanged.

Exports:
- HushhError (base)
- ConfigError, LedgerError, StaticCallViolation, ScriptError
- ContractError, OutOfRange, NotFound, Unauthorized, InvalidArgument,
  InsufficientBalance, InsufficientAllowance, AlreadyExists,
  NonTransferable, ArithmeticOverflow
"""


import json
from typing import Any, Dict, Mapping, Optional


class HushhError(Exception):
    """Base class for all Hushh errors."""

    code: str = "HUSHH_ERROR"

    def __init__(self, message: str = "", *, details: Optional[Mapping[str, Any]] = None) -> None:
        self.message = message or self.__class__.__name__
        self.details = dict(details or {})
        super().__init__(self.__str__())

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.details:
            # Keep this compact and stable for logs
            try:
                packed = json.dumps(self.details, sort_keys=True, separators=(",", ":"), default=_json_default)
            except (TypeError, ValueError):
                packed = str(self.details)
            return f"{self.code}: {self.message} [{packed}]"
        return f"{self.code}: {self.message}"


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (bytes, bytearray)):
        return "0x" + bytes(obj).hex()
    raise TypeError(f"not JSON serializable: {type(obj).__name__}")


# --------------------------------------------------------------------------- #
# Host errors
# --------------------------------------------------------------------------- #


class ConfigError(HushhError):
    """Invalid configuration value."""
    code = "HUSHH_CONFIG_ERROR"


class LedgerError(HushhError):
    """
    Misuse of the ledger host: unknown contract address or name, unknown
    method, bad storage key/value, malformed event.
    """
    code = "HUSHH_LEDGER_ERROR"


class StaticCallViolation(LedgerError):
    """A view (read-only call) attempted to write storage."""
    code = "HUSHH_STATIC_CALL_VIOLATION"


class ScriptError(HushhError):
    """Malformed session script (see ``hushh.session``)."""
    code = "HUSHH_SCRIPT_ERROR"


# --------------------------------------------------------------------------- #
# Contract errors (reverts)
# --------------------------------------------------------------------------- #


class ContractError(HushhError):
    """
    A contract rejected the operation. State is left unchanged by the
    surrounding transaction.
    """
    code = "CONTRACT_REVERT"

    @property
    def reason(self) -> str:
        return self.message


class OutOfRange(ContractError):
    """A bounded numeric input (e.g. a score) is outside its domain."""
    code = "OUT_OF_RANGE"


class NotFound(ContractError):
    """A referenced record (proof, identity, token) does not exist."""
    code = "NOT_FOUND"


class Unauthorized(ContractError):
    """The caller lacks the capability required by the operation."""
    code = "UNAUTHORIZED"


class InvalidArgument(ContractError):
    """Malformed input: zero address, zero amount, wrong type."""
    code = "INVALID_ARGUMENT"


class InsufficientBalance(ContractError):
    code = "INSUFFICIENT_BALANCE"


class InsufficientAllowance(ContractError):
    code = "INSUFFICIENT_ALLOWANCE"


class AlreadyExists(ContractError):
    code = "ALREADY_EXISTS"


class NonTransferable(ContractError):
    """Transfer or approval of a soulbound token."""
    code = "NON_TRANSFERABLE"


class ArithmeticOverflow(ContractError):
    """Checked u256 arithmetic left the [0, 2**256-1] range."""
    code = "ARITHMETIC_OVERFLOW"


__all__ = [
    "HushhError",
    "ConfigError",
    "LedgerError",
    "StaticCallViolation",
    "ScriptError",
    "ContractError",
    "OutOfRange",
    "NotFound",
    "Unauthorized",
    "InvalidArgument",
    "InsufficientBalance",
    "InsufficientAllowance",
    "AlreadyExists",
    "NonTransferable",
    "ArithmeticOverflow",
]
