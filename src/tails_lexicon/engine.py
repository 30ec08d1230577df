"""Lookup engine: resolves input text and learns new pairs."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional, Union

import numpy as np

from .config import EngineConfig
from .fallback import FallbackGenerator, FeedForwardGenerator, NullGenerator
from .logging import get_logger
from .matching import MatchResolver, MatchResult
from .similarity import SimilarityScorer
from .store import OutputValue, Pair, PairStore, coerce_outputs
from .synonyms import load_synonyms
from .utils import make_rng, normalise_text
from .vocabulary import Vocabulary, pair_tokens

LOGGER = get_logger(__name__)


class MalformedBatchError(ValueError):
    """Raised when a learn batch is not a JSON array of pairs."""


@dataclass(frozen=True)
class Response:
    text: str
    source: str

    @property
    def known(self) -> bool:
        return self.source != "unknown"


@dataclass(frozen=True)
class EngineStats:
    pairs: int
    outputs: int
    vocabulary: int
    trained: bool


@dataclass
class TrainingCache:
    inputs: np.ndarray
    targets: np.ndarray


def parse_batch(payload: Union[str, list[Any]]) -> list[Any]:
    """Parse a learn batch; anything but a JSON array raises :class:`MalformedBatchError`."""
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except ValueError as exc:
            raise MalformedBatchError(f"Invalid multi-learn JSON array: {exc}") from exc
    if not isinstance(payload, list):
        raise MalformedBatchError("Invalid multi-learn JSON array: expected a list of pairs")
    return payload


class LookupEngine:
    """Session object owning the store and every cache derived from it.

    ``index`` maps each normalised input to its pair and ``vocabulary`` holds
    every token seen so far. Both are kept in step with the store by
    :meth:`learn`. The fallback generator is retrained lazily after a learn
    invalidates it.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        store: Optional[PairStore] = None,
        generator: Optional[FallbackGenerator] = None,
        scorer: Optional[SimilarityScorer] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.store = store if store is not None else PairStore(self.config.store.path)
        matching = self.config.matching
        if scorer is None:
            synonyms = load_synonyms(matching.synonyms_path) if matching.use_synonyms else None
            scorer = SimilarityScorer(matching.formula, synonyms)
        self.resolver = MatchResolver(scorer, matching.acceptance)
        self._explicit_generator = generator
        self._generator: Optional[FallbackGenerator] = None
        self._training: Optional[TrainingCache] = None
        self._rng = make_rng(self.config.response.seed)
        self.index: dict[str, Pair] = {}
        for pair in self.store:
            key = normalise_text(pair.input)
            if key:
                self.index[key] = pair
        self.vocabulary = Vocabulary.build(self.store)

    @classmethod
    def from_config(cls, config: Optional[EngineConfig] = None, **kwargs: Any) -> LookupEngine:
        """Build an engine from the store persisted at ``config.store.path``."""
        config = config or EngineConfig()
        store = PairStore.load(config.store.path)
        return cls(config=config, store=store, **kwargs)

    @property
    def scorer(self) -> SimilarityScorer:
        return self.resolver.scorer

    # Lookup ------------------------------------------------------------------------
    def resolve(self, text: str) -> Optional[MatchResult]:
        return self.resolver.resolve(text, self.store, self.index)

    def respond(self, text: str) -> Response:
        match = self.resolve(text)
        if match is not None:
            source = "exact" if match.exact else "match"
            return Response(text=self._rng.choice(match.pair.outputs), source=source)
        generated = self.generate(text)
        if generated:
            return Response(text=generated, source="fallback")
        return Response(text=self.config.response.unknown_text, source="unknown")

    def generate(self, text: str) -> str:
        """Decode the fallback generator's activations for ``text`` into tokens."""
        if not len(self.store) or not len(self.vocabulary):
            return ""
        generator = self.ensure_trained()
        activations = generator.infer(self.vocabulary.vectorise(text))
        return self.vocabulary.decode(activations, self.config.fallback.activation_threshold)

    def ensure_trained(self) -> FallbackGenerator:
        """Return the generator, (re)training it from the current store if needed."""
        if self._training is None:
            rows = [
                (self.vocabulary.vectorise(pair.input), self.vocabulary.vectorise(" ".join(pair.outputs)))
                for pair in self.store
            ]
            width = len(self.vocabulary)
            self._training = TrainingCache(
                inputs=np.array([row[0] for row in rows], dtype=float).reshape(len(rows), width),
                targets=np.array([row[1] for row in rows], dtype=float).reshape(len(rows), width),
            )
        if self._generator is None:
            generator = self._new_generator()
            if self._training.inputs.shape[0]:
                generator.train(self._training.inputs, self._training.targets)
            self._generator = generator
        return self._generator

    def _new_generator(self) -> FallbackGenerator:
        if self._explicit_generator is not None:
            return self._explicit_generator
        if not self.config.fallback.enabled:
            return NullGenerator()
        return FeedForwardGenerator(self.config.fallback, seed=self.config.response.seed)

    def invalidate(self) -> None:
        """Drop the training cache and generator so the next fallback retrains."""
        self._training = None
        self._generator = None

    # Learning ----------------------------------------------------------------------
    def learn(self, text: str, output: OutputValue) -> Pair:
        outputs = coerce_outputs(output)
        key = normalise_text(text)
        if not key:
            raise ValueError("Input must contain at least one word")
        pair = self.index.get(key)
        previous = pair.outputs if pair is not None else None
        if pair is not None:
            pair.merge(outputs)
        else:
            pair = Pair(input=text, outputs=outputs)
            self.store.append(pair)
        self.index[key] = pair
        self.vocabulary.extend(pair_tokens(text, outputs))
        self.invalidate()
        try:
            self.store.save()
        except OSError:
            # the store and index revert; the vocabulary only grows
            if previous is None:
                self.store.pairs.remove(pair)
                del self.index[key]
            else:
                pair.outputs = previous
            raise
        LOGGER.info("Learned: %s => %s", text, list(outputs))
        return pair

    def learn_batch(self, payload: Union[str, list[Any]]) -> list[Pair]:
        """Learn every ``{"input", "output"}`` item of a JSON array, in order."""
        learned: list[Pair] = []
        for position, item in enumerate(parse_batch(payload)):
            if not isinstance(item, dict) or not item.get("input") or not item.get("output"):
                LOGGER.warning("Skipping batch item %d without input and output", position)
                continue
            try:
                learned.append(self.learn(str(item["input"]), item["output"]))
            except (TypeError, ValueError) as exc:
                LOGGER.warning("Skipping batch item %d: %s", position, exc)
        return learned

    # Introspection -----------------------------------------------------------------
    def stats(self) -> EngineStats:
        return EngineStats(
            pairs=len(self.store),
            outputs=sum(len(pair.outputs) for pair in self.store),
            vocabulary=len(self.vocabulary),
            trained=self._generator is not None,
        )
