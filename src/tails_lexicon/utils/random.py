"""Randomness helpers for deterministic behaviour."""

from __future__ import annotations

import hashlib
import os
import random
from typing import Optional

SEED_ENV = "TAILS_LEXICON_SEED"


def deterministic_hash(value: str) -> int:
    """Return a deterministic integer hash for ``value``."""
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False)


def resolve_seed(seed: Optional[int] = None) -> int:
    """Return ``seed`` or one derived from ``TAILS_LEXICON_SEED``."""
    if seed is None:
        seed = deterministic_hash(os.getenv(SEED_ENV, "tails-lexicon")) % (2**32)
    return seed


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Seeded generator when ``seed`` or ``TAILS_LEXICON_SEED`` is set, else OS entropy."""
    if seed is None and SEED_ENV not in os.environ:
        return random.Random()
    return random.Random(resolve_seed(seed))
