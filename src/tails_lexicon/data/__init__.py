"""Bundled data for the Tails Lexicon package."""

from __future__ import annotations

import json
from importlib import resources
from typing import Dict, List


def load_default_synonyms() -> Dict[str, List[str]]:
    with resources.files(__package__).joinpath("synonyms.json").open("r", encoding="utf-8") as stream:
        return json.load(stream)


__all__ = ["load_default_synonyms"]
