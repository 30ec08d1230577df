"""Configuration helpers for Tails Lexicon."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional, cast

import yaml

from .utils import load_yaml_or_json

SIMILARITY_FORMULAS = ("shared_ratio", "jaccard")
ACCEPTANCE_POLICIES = ("lenient", "strict")

# Each similarity formula is calibrated against exactly one acceptance policy.
CALIBRATED_POLICY = {"shared_ratio": "lenient", "jaccard": "strict"}


@dataclass
class StoreConfig:
    """Location of the persisted pair store."""

    path: Optional[Path] = Path("db.json")

    def __post_init__(self) -> None:
        if self.path is not None:
            self.path = Path(self.path)


@dataclass
class MatchingConfig:
    """Configuration for similarity scoring and match acceptance."""

    formula: str = "shared_ratio"
    acceptance: str = "lenient"
    use_synonyms: bool = True
    synonyms_path: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.formula not in SIMILARITY_FORMULAS:
            msg = f"Unknown similarity formula {self.formula!r}; expected one of {SIMILARITY_FORMULAS}"
            raise ValueError(msg)
        if self.acceptance not in ACCEPTANCE_POLICIES:
            msg = f"Unknown acceptance policy {self.acceptance!r}; expected one of {ACCEPTANCE_POLICIES}"
            raise ValueError(msg)
        if CALIBRATED_POLICY[self.formula] != self.acceptance:
            msg = (
                f"Similarity formula {self.formula!r} is calibrated for the "
                f"{CALIBRATED_POLICY[self.formula]!r} acceptance policy, not {self.acceptance!r}"
            )
            raise ValueError(msg)
        if self.synonyms_path is not None:
            self.synonyms_path = Path(self.synonyms_path)


@dataclass
class FallbackConfig:
    """Configuration for the neural fallback generator."""

    enabled: bool = True
    hidden_dim: int = 8
    iterations: int = 1000
    error_threshold: float = 0.01
    learning_rate: float = 0.5
    activation_threshold: float = 0.3


@dataclass
class ResponseConfig:
    """Configuration for response selection."""

    unknown_text: str = "(I don't know yet)"
    seed: Optional[int] = None


@dataclass
class EngineConfig:
    """Top-level configuration for the lookup engine."""

    store: StoreConfig = field(default_factory=StoreConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    fallback: FallbackConfig = field(default_factory=FallbackConfig)
    response: ResponseConfig = field(default_factory=ResponseConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineConfig:
        return cls(
            store=StoreConfig(**data.get("store", {})),
            matching=MatchingConfig(**data.get("matching", {})),
            fallback=FallbackConfig(**data.get("fallback", {})),
            response=ResponseConfig(**data.get("response", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        for section in payload.values():
            for key, value in section.items():
                if isinstance(value, Path):
                    section[key] = str(value)
        return payload

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf8") as handle:
            if path.suffix.lower() in {".yaml", ".yml"}:
                yaml.safe_dump(self.to_dict(), handle, sort_keys=False)
            else:
                json.dump(self.to_dict(), handle, indent=2)


def _read_mapping(path: Path) -> dict[str, Any]:
    """Read an engine configuration file; an empty YAML document is an empty mapping."""
    loaded = load_yaml_or_json(path)
    if loaded is None:
        return {}
    if not isinstance(loaded, Mapping):
        msg = f"Engine configuration {path} must hold a mapping of sections, got {type(loaded).__name__}"
        raise TypeError(msg)
    return cast(dict[str, Any], dict(loaded))


def _merge_sections(base: dict[str, Any], overrides: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Apply ``overrides`` in order; nested sections merge key by key."""
    merged: dict[str, Any] = dict(base)
    for override in overrides:
        for key, value in override.items():
            current = merged.get(key)
            if isinstance(value, dict) and isinstance(current, dict):
                merged[key] = _merge_sections(current, [value])
            else:
                merged[key] = value
    return merged


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[Iterable[dict[str, Any]]] = None,
) -> EngineConfig:
    """Build an :class:`EngineConfig` from an optional file plus override mappings.

    Overrides win over the file, so the CLI can point ``store.path`` at
    ``--store`` without editing the configuration.
    """

    sections = _read_mapping(Path(path)) if path is not None else {}
    return EngineConfig.from_dict(_merge_sections(sections, list(overrides or [])))
