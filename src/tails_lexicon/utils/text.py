"""Text processing helpers used throughout the Tails Lexicon package."""

from __future__ import annotations

import re
from typing import Iterable, List

_APOSTROPHE_RE = re.compile(r"['’]")
_PUNCT_RE = re.compile(r"[^\w\s]|_")


def normalise_text(value: str) -> str:
    """Lowercase ``value``, drop punctuation and collapse whitespace."""
    if not value:
        return ""
    text = _APOSTROPHE_RE.sub("", value.lower())
    text = _PUNCT_RE.sub(" ", text)
    return " ".join(text.split())


def tokenize(value: str) -> List[str]:
    """Split normalised ``value`` into whitespace separated tokens."""
    return normalise_text(value).split()


def unique_tokens(tokens: Iterable[str]) -> List[str]:
    """Return ``tokens`` without repeats, keeping first-seen order."""
    return list(dict.fromkeys(tokens))
