# -*- coding: utf-8 -*-
"""
hushh.stdlib.bands
==================

The fixed score-band table and the shared score validator.

Scores are integers in ``[0, MAX_SCORE]``. Each band is an inclusive range
``[lower, upper]``; the ten bands tile the domain with no gaps, so every
valid score has exactly one band. The statement derived from a score is
``"<label> (<range text>)"``, e.g. ``"Excellent (900+)"``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..errors import InvalidArgument, OutOfRange

MAX_SCORE = 1000


@dataclass(frozen=True)
class ScoreBand:
    lower: int
    upper: int
    label: str
    range_text: str

    def contains(self, score: int) -> bool:
        return self.lower <= score <= self.upper

    @property
    def statement(self) -> str:
        return f"{self.label} ({self.range_text})"


# Highest band first; classification takes the first lower bound <= score.
SCORE_BANDS: Tuple[ScoreBand, ...] = (
    ScoreBand(900, 1000, "Excellent", "900+"),
    ScoreBand(800, 899, "Very Good", "800-899"),
    ScoreBand(700, 799, "Good", "700-799"),
    ScoreBand(600, 699, "Above Average", "600-699"),
    ScoreBand(500, 599, "Average", "500-599"),
    ScoreBand(400, 499, "Below Average", "400-499"),
    ScoreBand(300, 399, "Low", "300-399"),
    ScoreBand(200, 299, "Very Low", "200-299"),
    ScoreBand(100, 199, "Minimal", "100-199"),
    ScoreBand(0, 99, "Unrated", "0-99"),
)


def require_score(score: object, where: str) -> int:
    """
    Validate a score and return it. ``where`` prefixes the revert message,
    e.g. ``require_score(s, "ZKMockProof")``.
    """
    if isinstance(score, bool) or not isinstance(score, int):
        raise InvalidArgument(f"{where}: score must be an integer", details={"py_type": type(score).__name__})
    if score > MAX_SCORE:
        raise OutOfRange(f"{where}: score must be <= {MAX_SCORE}", details={"score": score})
    if score < 0:
        raise OutOfRange(f"{where}: score must be >= 0", details={"score": score})
    return score


def band_for(score: int) -> ScoreBand:
    s = require_score(score, "ScoreBand")
    for band in SCORE_BANDS:
        if s >= band.lower:
            return band
    raise AssertionError("band table does not cover 0")  # pragma: no cover


def classify_score(score: int) -> str:
    """Label of the band containing ``score``."""
    return band_for(score).label


def statement_for(score: int) -> str:
    return band_for(score).statement


__all__ = [
    "MAX_SCORE",
    "SCORE_BANDS",
    "ScoreBand",
    "band_for",
    "classify_score",
    "require_score",
    "statement_for",
]
