"""Token vocabulary shared by the store and the fallback generator."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from .logging import get_logger
from .utils import tokenize

if TYPE_CHECKING:
    from .store import Pair

LOGGER = get_logger(__name__)


class Vocabulary:
    """Ordered set of tokens that only ever grows.

    Token positions are stable, so a vector produced by :meth:`vectorise`
    stays aligned with :meth:`decode` until the next :meth:`extend`.
    """

    def __init__(self, tokens: Iterable[str] = ()) -> None:
        self._tokens: list[str] = []
        self._index: dict[str, int] = {}
        self.extend(tokens)

    @classmethod
    def build(cls, pairs: Iterable[Pair]) -> Vocabulary:
        vocabulary = cls()
        for pair in pairs:
            vocabulary.extend(pair_tokens(pair.input, pair.outputs))
        LOGGER.debug("Built vocabulary of size %d", len(vocabulary))
        return vocabulary

    def __len__(self) -> int:
        return len(self._tokens)

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(self._tokens)

    def extend(self, tokens: Iterable[str]) -> int:
        """Append unseen ``tokens`` in encounter order and return how many were added."""
        added = 0
        for token in tokens:
            if token not in self._index:
                self._index[token] = len(self._tokens)
                self._tokens.append(token)
                added += 1
        return added

    # Vector encoding -------------------------------------------------------------
    def vectorise(self, text: str) -> NDArray[np.float64]:
        vector = np.zeros((len(self._tokens),), dtype=float)
        for token in tokenize(text):
            position = self._index.get(token)
            if position is not None:
                vector[position] = 1.0
        return vector

    def decode(self, vector: NDArray[np.float64], threshold: float) -> str:
        values = np.asarray(vector, dtype=float)
        if values.shape != (len(self._tokens),):
            msg = f"Expected vector of length {len(self._tokens)}, got shape {values.shape}"
            raise ValueError(msg)
        active = np.flatnonzero(values > threshold)
        ordered = sorted(active.tolist(), key=lambda position: -values[position])
        return " ".join(self._tokens[position] for position in ordered)


def pair_tokens(text: str, outputs: Iterable[str]) -> list[str]:
    """Tokens of an input followed by the tokens of each output."""
    tokens = tokenize(text)
    for output in outputs:
        tokens.extend(tokenize(output))
    return tokens
