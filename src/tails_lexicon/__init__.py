"""Tails Lexicon package."""

from .config import EngineConfig, load_config
from .engine import LookupEngine, MalformedBatchError, Response
from .fallback import FallbackGenerator, FeedForwardGenerator
from .matching import MatchResolver, MatchResult
from .similarity import SimilarityScorer, levenshtein
from .store import Pair, PairStore
from .vocabulary import Vocabulary

__all__ = [
    "EngineConfig",
    "FallbackGenerator",
    "FeedForwardGenerator",
    "LookupEngine",
    "MalformedBatchError",
    "MatchResolver",
    "MatchResult",
    "Pair",
    "PairStore",
    "Response",
    "SimilarityScorer",
    "Vocabulary",
    "levenshtein",
    "load_config",
]

__version__ = "0.1.0"
