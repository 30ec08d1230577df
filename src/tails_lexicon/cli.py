"""Command line interface for Tails Lexicon."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import EngineConfig, load_config
from .engine import LookupEngine, MalformedBatchError
from .logging import configure_logging

LOGGER = configure_logging(level=logging.WARNING, logger_name=__name__)

STORE_OPTION = typer.Option(
    None,
    "--store",
    help="Path to the JSON pair store (defaults to the configured store, db.json).",
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Path to an engine configuration file (YAML or JSON).",
)
VERBOSE_OPTION = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Log learning and matching details.",
)

USAGE = (
    "Usage: tails-lexicon learn 'hello' 'hi'\n"
    "   or: tails-lexicon learn '[{\"input\":\"hi\",\"output\":[\"hello\"]}]'"
)

app = typer.Typer(
    help="Answer free-text input from learned input/output pairs and learn new ones.",
    no_args_is_help=True,
)


def _load_engine(config_path: Optional[Path], store_path: Optional[Path], verbose: bool) -> LookupEngine:
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    overrides = [{"store": {"path": str(store_path)}}] if store_path is not None else []
    config: EngineConfig = load_config(config_path, overrides)
    LOGGER.debug("Using store %s (%s / %s)", config.store.path, config.matching.formula, config.matching.acceptance)
    return LookupEngine.from_config(config)


@app.command()
def ask(
    text: List[str] = typer.Argument(..., help="Text to respond to."),
    store: Optional[Path] = STORE_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Print the learned response for TEXT."""

    engine = _load_engine(config_path, store, verbose)
    response = engine.respond(" ".join(text))
    typer.echo(f"AI: {response.text}")


@app.command()
def learn(
    text: str = typer.Argument(..., help="Input text, or a JSON array of {input, output} pairs."),
    output: Optional[str] = typer.Argument(None, help="Response, or a JSON array of responses."),
    store: Optional[Path] = STORE_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Learn one pair, or a batch of pairs given as a JSON array."""

    engine = _load_engine(config_path, store, verbose)
    if text.lstrip().startswith("["):
        try:
            pairs = engine.learn_batch(text)
        except MalformedBatchError as exc:
            LOGGER.debug("Rejected batch: %s", exc)
            typer.echo("Invalid multi-learn JSON array.")
            raise typer.Exit(code=1)
        for pair in pairs:
            typer.echo(f"Learned: {pair.input} => {list(pair.outputs)}")
        return
    if output is None:
        typer.echo(USAGE)
        raise typer.Exit(code=2)
    try:
        pair = engine.learn(text, output)
    except ValueError as exc:
        typer.echo(f"Cannot learn pair: {exc}")
        raise typer.Exit(code=2)
    typer.echo(f"Learned: {pair.input} => {list(pair.outputs)}")


@app.command()
def stats(
    store: Optional[Path] = STORE_OPTION,
    config_path: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Summarise the pair store and vocabulary."""

    engine = _load_engine(config_path, store, verbose)
    summary = engine.stats()
    table = Table(title="Tails Lexicon Store")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Store", str(engine.store.path))
    table.add_row("Pairs", str(summary.pairs))
    table.add_row("Outputs", str(summary.outputs))
    table.add_row("Vocabulary", str(summary.vocabulary))
    table.add_row("Matching", f"{engine.config.matching.formula} / {engine.config.matching.acceptance}")
    Console().print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
