"""hushh.version — package version.

Resolution order: HUSHH_VERSION env → installed distribution metadata →
BASE_VERSION.
"""

from __future__ import annotations

import os
from importlib import metadata as importlib_metadata

BASE_VERSION = "0.1.0"
DIST_NAME = "hushh-contracts"


def compute_version() -> str:
    env = os.getenv("HUSHH_VERSION")
    if env:
        return env.strip()
    try:
        return importlib_metadata.version(DIST_NAME)
    except importlib_metadata.PackageNotFoundError:
        return BASE_VERSION


__version__ = compute_version()

__all__ = ["BASE_VERSION", "DIST_NAME", "compute_version", "__version__"]
