from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from tails_lexicon.config import EngineConfig, load_config
from tails_lexicon.engine import LookupEngine


@pytest.fixture
def workspace(tmp_path: Path) -> Iterator[Path]:
    yield tmp_path


@pytest.fixture
def config(workspace: Path) -> EngineConfig:
    return load_config(overrides=[{"store": {"path": str(workspace / "db.json")}, "response": {"seed": 7}}])


@pytest.fixture
def engine(config: EngineConfig) -> LookupEngine:
    return LookupEngine.from_config(config)
