from __future__ import annotations

import pytest

from tails_lexicon.config import MatchingConfig
from tails_lexicon.matching import MatchResolver, accept_lenient, accept_strict
from tails_lexicon.similarity import SimilarityScore, SimilarityScorer
from tails_lexicon.store import Pair
from tails_lexicon.utils import normalise_text


def _pairs(*inputs: str) -> list[Pair]:
    return [Pair(input=text, outputs=(f"re: {text}",)) for text in inputs]


def _index(pairs: list[Pair]) -> dict[str, Pair]:
    return {normalise_text(pair.input): pair for pair in pairs}


@pytest.fixture
def lenient() -> MatchResolver:
    return MatchResolver(SimilarityScorer("shared_ratio"), "lenient")


@pytest.fixture
def strict() -> MatchResolver:
    return MatchResolver(SimilarityScorer("jaccard"), "strict")


def test_exact_hit_skips_scoring(lenient: MatchResolver) -> None:
    pairs = _pairs("Hi!", "bye")
    result = lenient.resolve("  hi ", pairs, _index(pairs))
    assert result is not None
    assert result.exact
    assert result.pair is pairs[0]
    assert lenient.scorer.calls == 0


def test_empty_store_has_no_match(lenient: MatchResolver) -> None:
    assert lenient.resolve("anything", [], {}) is None


def test_lenient_boundary() -> None:
    assert not accept_lenient(SimilarityScore(score=0.25, distance=3, overlap=1))
    assert accept_lenient(SimilarityScore(score=0.26, distance=3, overlap=1))
    assert accept_lenient(SimilarityScore(score=0.0, distance=2, overlap=0))


def test_strict_requires_overlap() -> None:
    assert not accept_strict(SimilarityScore(score=0.9, distance=0, overlap=2))
    assert accept_strict(SimilarityScore(score=0.61, distance=9, overlap=3))
    assert accept_strict(SimilarityScore(score=0.5, distance=1, overlap=3))
    assert not accept_strict(SimilarityScore(score=0.6, distance=2, overlap=3))


def test_quarter_overlap_is_rejected(lenient: MatchResolver) -> None:
    pairs = _pairs("cat dog eel fox")
    assert lenient.resolve("cat", pairs, _index(pairs)) is None


def test_typo_matches_by_edit_distance(lenient: MatchResolver) -> None:
    pairs = _pairs("hello")
    result = lenient.resolve("helo", pairs, _index(pairs))
    assert result is not None
    assert not result.exact
    assert result.similarity.overlap == 0
    assert result.similarity.distance == 1


def test_partial_overlap_matches(lenient: MatchResolver) -> None:
    pairs = _pairs("what is your name", "where do you live")
    result = lenient.resolve("tell me your name", pairs, _index(pairs))
    assert result is not None
    assert result.pair is pairs[0]


def test_higher_overlap_breaks_score_tie(lenient: MatchResolver) -> None:
    pairs = _pairs("red car", "red apple pie tart")
    result = lenient.resolve("red apple", pairs, _index(pairs))
    assert result.pair is pairs[1]


def test_lower_distance_breaks_overlap_tie(lenient: MatchResolver) -> None:
    pairs = _pairs("red grape", "red apples")
    result = lenient.resolve("red apple", pairs, _index(pairs))
    assert result.pair is pairs[1]


def test_first_seen_wins_full_tie(lenient: MatchResolver) -> None:
    pairs = _pairs("ab ce", "ab cf")
    result = lenient.resolve("ab cd", pairs, _index(pairs))
    assert result.pair is pairs[0]


def test_strict_accepts_paraphrase(strict: MatchResolver) -> None:
    pairs = _pairs("how can i reset my password", "reset")
    result = strict.resolve("how do I reset my password?", pairs, _index(pairs))
    assert result is not None
    assert result.pair is pairs[0]


def test_strict_rejects_short_typo(strict: MatchResolver) -> None:
    pairs = _pairs("hello")
    assert strict.resolve("helo", pairs, _index(pairs)) is None


def test_mixed_calibration_is_rejected() -> None:
    with pytest.raises(ValueError):
        MatchResolver(SimilarityScorer("jaccard"), "lenient")
    with pytest.raises(ValueError):
        MatchingConfig(formula="shared_ratio", acceptance="strict")
