"""Static synonym tables used to widen token overlap."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Optional

from .data import load_default_synonyms
from .logging import get_logger
from .utils import load_yaml_or_json, normalise_text

LOGGER = get_logger(__name__)

SynonymTable = Mapping[str, frozenset[str]]


def build_table(raw: Mapping[str, Iterable[str]]) -> dict[str, frozenset[str]]:
    """Normalise keys and values of ``raw``; blank entries are dropped."""
    table: dict[str, set[str]] = {}
    for key, values in raw.items():
        head = normalise_text(str(key))
        if not head:
            continue
        if isinstance(values, str):
            values = [values]
        synonyms = {normalise_text(str(value)) for value in values}
        synonyms.discard("")
        synonyms.discard(head)
        table.setdefault(head, set()).update(synonyms)
    return {key: frozenset(values) for key, values in table.items()}


def load_synonyms(path: Optional[Path] = None) -> dict[str, frozenset[str]]:
    """Load a synonym table from YAML/JSON, or the bundled default table."""
    if path is None:
        raw = load_default_synonyms()
    else:
        raw = load_yaml_or_json(Path(path))
        if not isinstance(raw, Mapping):
            msg = f"Expected mapping at root of synonym table {path}"
            raise TypeError(msg)
    table = build_table(raw)
    LOGGER.debug("Loaded %d synonym entries", len(table))
    return table


def expand(tokens: Iterable[str], table: SynonymTable) -> set[str]:
    """Return ``tokens`` plus the direct synonyms of each token.

    Lookup is one step only: synonyms of synonyms are not added.
    """
    base = set(tokens)
    expanded = set(base)
    for token in base:
        expanded.update(table.get(token, ()))
    return expanded
