from __future__ import annotations

from pathlib import Path

import pytest

from tails_lexicon.config import EngineConfig, load_config


def test_defaults_pair_shared_ratio_with_lenient() -> None:
    config = EngineConfig()
    assert (config.matching.formula, config.matching.acceptance) == ("shared_ratio", "lenient")
    assert config.fallback.activation_threshold == pytest.approx(0.3)
    assert config.store.path == Path("db.json")


def test_yaml_config_with_overrides(tmp_path: Path) -> None:
    path = tmp_path / "engine.yaml"
    path.write_text(
        "matching:\n  formula: jaccard\n  acceptance: strict\nfallback:\n  hidden_dim: 4\n",
        encoding="utf8",
    )
    config = load_config(path, overrides=[{"fallback": {"iterations": 10}}])
    assert config.matching.formula == "jaccard"
    assert config.fallback.hidden_dim == 4
    assert config.fallback.iterations == 10


def test_config_save_round_trip(tmp_path: Path) -> None:
    config = load_config(overrides=[{"store": {"path": str(tmp_path / "db.json")}, "response": {"seed": 3}}])
    for name in ("engine.yaml", "engine.json"):
        config.save(tmp_path / name)
        assert load_config(tmp_path / name) == config


def test_non_mapping_config_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "engine.json"
    path.write_text("[1, 2]", encoding="utf8")
    with pytest.raises(TypeError, match="must hold a mapping of sections"):
        load_config(path)


def test_unknown_policy_is_rejected() -> None:
    with pytest.raises(ValueError):
        load_config(overrides=[{"matching": {"acceptance": "loose"}}])
