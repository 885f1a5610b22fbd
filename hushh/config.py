"""
hushh.config — ledger parameters, storage caps, and logging level.

Standard library only; safe to import very early.

Configuration precedence:
  1) Environment variables (HUSHH_*)
  2) Hardcoded defaults below

Key env vars:
  - HUSHH_CHAIN_ID                 (int)   default: 1337
  - HUSHH_GENESIS_TIMESTAMP        (int)   default: 0 (use wall clock)
  - HUSHH_MIN_BLOCK_INTERVAL       (int)   default: 1
  - HUSHH_MAX_STORAGE_KEY_BYTES    (int)   default: 128
  - HUSHH_MAX_STORAGE_VALUE_BYTES  (int)   default: 131_072   (128 KiB)
  - HUSHH_LOG_LEVEL                (str)   default: INFO

Integer values outside their allowed range are clamped; unparsable values
fall back to the default.

Usage:
    from hushh.config import load_config
    cfg = load_config()
    ledger = Ledger(cfg)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Any, Dict

from .errors import ConfigError

log = logging.getLogger(__name__)

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


# ----------------------------- helpers ---------------------------------------


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        log.warning("ignoring %s=%r (not an integer), using %d", name, raw, default)
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


def _env_level(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip().upper()
    if not raw:
        return default
    if raw not in _LOG_LEVELS:
        log.warning("ignoring %s=%r (unknown level), using %s", name, raw, default)
        return default
    return raw


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class LedgerConfig:
    chain_id: int
    # 0 means "start from the wall clock"
    genesis_timestamp: int
    min_block_interval: int

    max_storage_key_bytes: int
    max_storage_value_bytes: int

    log_level: str

    def __post_init__(self) -> None:
        if self.chain_id < 0:
            raise ConfigError("chain_id must be non-negative", details={"chain_id": self.chain_id})
        if self.genesis_timestamp < 0:
            raise ConfigError("genesis_timestamp must be non-negative")
        if self.min_block_interval < 0:
            raise ConfigError("min_block_interval must be non-negative")
        if self.max_storage_key_bytes < 1 or self.max_storage_value_bytes < 1:
            raise ConfigError("storage caps must be positive")
        if self.log_level not in _LOG_LEVELS:
            raise ConfigError("unknown log level", details={"log_level": self.log_level})

    def with_overrides(self, **changes: Any) -> "LedgerConfig":
        return replace(self, **changes)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "chain_id": self.chain_id,
            "genesis_timestamp": self.genesis_timestamp,
            "min_block_interval": self.min_block_interval,
            "max_storage_key_bytes": self.max_storage_key_bytes,
            "max_storage_value_bytes": self.max_storage_value_bytes,
            "log_level": self.log_level,
        }


@lru_cache(maxsize=1)
def load_config() -> LedgerConfig:
    """
    Build and cache a LedgerConfig from environment + defaults.
    Call ``load_config.cache_clear()`` after changing the environment.
    """
    return LedgerConfig(
        chain_id=_env_int("HUSHH_CHAIN_ID", 1337, min_v=0, max_v=2**63 - 1),
        genesis_timestamp=_env_int("HUSHH_GENESIS_TIMESTAMP", 0, min_v=0, max_v=2**63 - 1),
        min_block_interval=_env_int("HUSHH_MIN_BLOCK_INTERVAL", 1, min_v=0, max_v=86_400),
        max_storage_key_bytes=_env_int("HUSHH_MAX_STORAGE_KEY_BYTES", 128, min_v=32, max_v=1024),
        max_storage_value_bytes=_env_int(
            "HUSHH_MAX_STORAGE_VALUE_BYTES", 131_072, min_v=1_024, max_v=1_048_576
        ),
        log_level=_env_level("HUSHH_LOG_LEVEL", "INFO"),
    )


__all__ = ["LedgerConfig", "load_config"]
