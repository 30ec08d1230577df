"""Ordered store of learned input/output pairs."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from .logging import get_logger
from .utils import load_json, normalise_text, save_json, unique_tokens

LOGGER = get_logger(__name__)

OutputValue = Union[str, Sequence[str]]


def coerce_outputs(value: Any) -> tuple[str, ...]:
    """Turn a raw ``output`` value into a tuple of distinct strings.

    A string that parses as a JSON list contributes its items; any other
    string, including malformed JSON, is taken as a single output.
    """
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            items: Iterable[Any] = [value]
        else:
            items = parsed if isinstance(parsed, list) else [value]
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        msg = f"Unsupported output type {type(value).__name__}"
        raise TypeError(msg)
    outputs = tuple(unique_tokens(str(item) for item in items if str(item).strip()))
    if not outputs:
        raise ValueError("Output must contain at least one non-empty response")
    return outputs


@dataclass
class Pair:
    """A learned input with one or more outputs in first-seen order."""

    input: str
    outputs: tuple[str, ...]

    def merge(self, outputs: Iterable[str]) -> int:
        """Union ``outputs`` into this pair and return how many were new."""
        merged = tuple(unique_tokens([*self.outputs, *outputs]))
        added = len(merged) - len(self.outputs)
        self.outputs = merged
        return added

    def to_record(self) -> dict[str, Any]:
        output: OutputValue = self.outputs[0] if len(self.outputs) == 1 else list(self.outputs)
        return {"input": self.input, "output": output}

    @classmethod
    def from_record(cls, record: Any) -> Pair:
        if not isinstance(record, dict):
            raise TypeError("Pair record must be a mapping")
        text = record.get("input")
        if not isinstance(text, str) or not normalise_text(text):
            raise ValueError("Pair record requires an 'input' with at least one word")
        return cls(input=text, outputs=coerce_outputs(record.get("output")))


class PairStore:
    """Pairs kept in insertion order and persisted as one JSON document.

    Every :meth:`save` rewrites the whole file. ``path=None`` keeps the
    store in memory only.
    """

    def __init__(self, path: Optional[Path] = None, pairs: Iterable[Pair] = ()) -> None:
        self.path = Path(path) if path is not None else None
        self.pairs: list[Pair] = list(pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[Pair]:
        return iter(self.pairs)

    def append(self, pair: Pair) -> None:
        self.pairs.append(pair)

    def to_records(self) -> list[dict[str, Any]]:
        return [pair.to_record() for pair in self.pairs]

    # Persistence -------------------------------------------------------------------
    @classmethod
    def load(cls, path: Optional[Path]) -> PairStore:
        store = cls(path)
        if store.path is None:
            return store
        try:
            payload = load_json(store.path)
        except FileNotFoundError:
            LOGGER.warning("No store found at %s. Starting with an empty store.", store.path)
            return store
        except (OSError, ValueError) as exc:
            LOGGER.warning("Could not read store %s (%s). Starting with an empty store.", store.path, exc)
            return store
        if not isinstance(payload, list):
            LOGGER.warning("Store %s does not hold a list of pairs. Starting with an empty store.", store.path)
            return store
        for position, record in enumerate(payload):
            try:
                store.append(Pair.from_record(record))
            except (TypeError, ValueError) as exc:
                LOGGER.warning("Skipping record %d in %s: %s", position, store.path, exc)
        LOGGER.debug("Loaded %d pairs from %s", len(store), store.path)
        return store

    def save(self) -> None:
        if self.path is None:
            return
        save_json(self.path, self.to_records())
        LOGGER.debug("Persisted %d pairs to %s", len(self), self.path)
