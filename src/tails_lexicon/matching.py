"""Resolve free text to the best stored pair."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Callable, Optional

from .config import CALIBRATED_POLICY
from .logging import get_logger
from .similarity import SimilarityScore, SimilarityScorer
from .store import Pair
from .utils import normalise_text

LOGGER = get_logger(__name__)

AcceptanceFn = Callable[[SimilarityScore], bool]


def accept_lenient(candidate: SimilarityScore) -> bool:
    return candidate.score > 0.25 or candidate.distance <= 2


def accept_strict(candidate: SimilarityScore) -> bool:
    if candidate.overlap < 3:
        return False
    return candidate.score > 0.6 or candidate.distance <= 1


ACCEPTANCE_POLICIES: dict[str, AcceptanceFn] = {
    "lenient": accept_lenient,
    "strict": accept_strict,
}


@dataclass(frozen=True)
class MatchResult:
    pair: Pair
    similarity: Optional[SimilarityScore] = None

    @property
    def exact(self) -> bool:
        return self.similarity is None


def _beats(candidate: SimilarityScore, best: SimilarityScore) -> bool:
    if candidate.score != best.score:
        return candidate.score > best.score
    if candidate.overlap != best.overlap:
        return candidate.overlap > best.overlap
    return candidate.distance < best.distance


class MatchResolver:
    """Exact lookup first, then a full similarity scan behind an acceptance gate."""

    def __init__(self, scorer: SimilarityScorer, acceptance: str = "lenient") -> None:
        if acceptance not in ACCEPTANCE_POLICIES:
            msg = f"Unknown acceptance policy {acceptance!r}"
            raise ValueError(msg)
        if CALIBRATED_POLICY[scorer.formula] != acceptance:
            msg = f"Acceptance policy {acceptance!r} is not calibrated for the {scorer.formula!r} formula"
            raise ValueError(msg)
        self.scorer = scorer
        self.acceptance = acceptance
        self._accept = ACCEPTANCE_POLICIES[acceptance]

    def best_candidate(self, query: str, pairs: Iterable[Pair]) -> Optional[MatchResult]:
        """Highest ranked pair for normalised ``query``, ignoring the acceptance gate."""
        best: Optional[MatchResult] = None
        for pair in pairs:
            candidate = self.scorer.score(query, normalise_text(pair.input))
            if best is None or _beats(candidate, best.similarity):
                best = MatchResult(pair=pair, similarity=candidate)
        return best

    def resolve(
        self,
        text: str,
        pairs: Iterable[Pair],
        index: Mapping[str, Pair],
    ) -> Optional[MatchResult]:
        query = normalise_text(text)
        exact = index.get(query)
        if exact is not None:
            return MatchResult(pair=exact)
        best = self.best_candidate(query, pairs)
        if best is None:
            return None
        if not self._accept(best.similarity):
            LOGGER.debug(
                "Rejected best candidate %r (score=%.3f, distance=%d, overlap=%d)",
                best.pair.input,
                best.similarity.score,
                best.similarity.distance,
                best.similarity.overlap,
            )
            return None
        return best
