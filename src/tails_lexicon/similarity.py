# SPDX-License-Identifier: Apache-2.0
"""Similarity signals between normalised texts.

Two signals are reported side by side and combined later by the match
resolver:

* the Levenshtein edit distance of the two strings, and
* a token-overlap score over the (optionally synonym-expanded) token sets,
  either ``shared_ratio`` (``|A & B| / max(|A|, |B|)``) or ``jaccard``
  (``|A & B| / |A | B|``).

The raw intersection size is reported as ``overlap`` and serves both as a
tie-break and as the minimum-overlap gate of the strict acceptance policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .synonyms import SynonymTable, expand
from .utils import tokenize

FORMULAS = ("shared_ratio", "jaccard")


@dataclass(frozen=True)
class SimilarityScore:
    score: float
    distance: int
    overlap: int


def levenshtein(a: str, b: str) -> int:
    """Unit-cost edit distance between ``a`` and ``b`` (no transpositions)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    if len(a) < len(b):
        a, b = b, a
    target = np.frombuffer(b.encode("utf-32-le"), dtype=np.uint32)
    previous = np.arange(len(b) + 1, dtype=np.int64)
    for i, char in enumerate(a, start=1):
        cost = (target != ord(char)).astype(np.int64)
        current = np.empty_like(previous)
        current[0] = i
        # substitution and deletion are vectorised; insertion depends on the
        # cell to the left so it is resolved in the running minimum below
        np.minimum(previous[:-1] + cost, previous[1:] + 1, out=current[1:])
        for j in range(1, len(current)):
            if current[j - 1] + 1 < current[j]:
                current[j] = current[j - 1] + 1
        previous = current
    return int(previous[-1])


def token_overlap(
    tokens_a: set[str],
    tokens_b: set[str],
    formula: str = "shared_ratio",
) -> tuple[float, int]:
    """Return ``(score, intersection size)`` for two token sets."""
    if not tokens_a or not tokens_b:
        return 0.0, 0
    shared = len(tokens_a & tokens_b)
    if formula == "shared_ratio":
        denominator = max(len(tokens_a), len(tokens_b))
    elif formula == "jaccard":
        denominator = len(tokens_a | tokens_b)
    else:
        msg = f"Unknown similarity formula {formula!r}"
        raise ValueError(msg)
    return shared / denominator, shared


class SimilarityScorer:
    """Scores a normalised query against a normalised stored input."""

    def __init__(self, formula: str = "shared_ratio", synonyms: Optional[SynonymTable] = None) -> None:
        if formula not in FORMULAS:
            msg = f"Unknown similarity formula {formula!r}; expected one of {FORMULAS}"
            raise ValueError(msg)
        self.formula = formula
        self.synonyms = synonyms
        self.calls = 0

    def _token_set(self, text: str) -> set[str]:
        tokens = set(tokenize(text))
        if self.synonyms:
            return expand(tokens, self.synonyms)
        return tokens

    def score(self, query: str, candidate: str) -> SimilarityScore:
        self.calls += 1
        ratio, shared = token_overlap(self._token_set(query), self._token_set(candidate), self.formula)
        return SimilarityScore(score=ratio, distance=levenshtein(query, candidate), overlap=shared)
