"""Minimal quickstart script for Tails Lexicon.

Learns a handful of pairs into a throwaway store, then shows an exact hit,
a typo-tolerant match and the neural fallback.
"""

import tempfile
from pathlib import Path

from tails_lexicon import LookupEngine, load_config

PAIRS = [
    ("hi", '["hello", "hey"]'),
    ("what is your name", "I am Tails."),
    ("how are you", "Doing well, thanks!"),
    ("bye", "goodbye"),
]

PROMPTS = ["hi", "whats your name?", "how r you", "helo", "tell me a story"]


def main() -> None:
    with tempfile.TemporaryDirectory() as workspace:
        config = load_config(overrides=[{"store": {"path": str(Path(workspace) / "db.json")}}])
        engine = LookupEngine.from_config(config)
        for text, output in PAIRS:
            engine.learn(text, output)
        for prompt in PROMPTS:
            response = engine.respond(prompt)
            print(f"{prompt!r:>22} -> {response.text} ({response.source})")
        print(engine.stats())


if __name__ == "__main__":
    main()
