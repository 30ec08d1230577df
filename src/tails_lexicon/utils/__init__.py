"""Utility helpers shared across the Tails Lexicon package."""

from .io import load_json, load_yaml_or_json, save_json
from .random import deterministic_hash, make_rng, resolve_seed
from .text import normalise_text, tokenize, unique_tokens

__all__ = [
    "deterministic_hash",
    "load_json",
    "load_yaml_or_json",
    "make_rng",
    "normalise_text",
    "resolve_seed",
    "save_json",
    "tokenize",
    "unique_tokens",
]
