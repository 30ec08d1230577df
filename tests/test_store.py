from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from tails_lexicon.store import Pair, PairStore, coerce_outputs


def test_coerce_outputs_variants() -> None:
    assert coerce_outputs("hello") == ("hello",)
    assert coerce_outputs('["hello", "hey", "hello"]') == ("hello", "hey")
    assert coerce_outputs(["a", "b"]) == ("a", "b")
    assert coerce_outputs('{"not": "a list"}') == ('{"not": "a list"}',)


def test_coerce_outputs_keeps_malformed_json_as_text() -> None:
    assert coerce_outputs('["unterminated') == ('["unterminated',)


def test_coerce_outputs_rejects_empty() -> None:
    with pytest.raises(ValueError):
        coerce_outputs("[]")
    with pytest.raises(ValueError):
        coerce_outputs("   ")


def test_pair_merge_preserves_first_seen_order() -> None:
    pair = Pair(input="hi", outputs=("hello",))
    assert pair.merge(["hey", "hello"]) == 1
    assert pair.outputs == ("hello", "hey")


def test_pair_record_shape() -> None:
    assert Pair("bye", ("goodbye",)).to_record() == {"input": "bye", "output": "goodbye"}
    assert Pair("hi", ("hello", "hey")).to_record() == {"input": "hi", "output": ["hello", "hey"]}


def test_missing_store_starts_empty(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        store = PairStore.load(tmp_path / "missing.json")
    assert len(store) == 0
    assert "Starting with an empty store" in caplog.text


def test_corrupt_store_starts_empty(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    path.write_text("{not json", encoding="utf8")
    assert len(PairStore.load(path)) == 0
    path.write_text('{"input": "hi"}', encoding="utf8")
    assert len(PairStore.load(path)) == 0


def test_invalid_records_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    records = [{"input": "hi", "output": "hello"}, {"input": "", "output": "x"}, {"output": "y"}, "junk"]
    path.write_text(json.dumps(records), encoding="utf8")
    store = PairStore.load(path)
    assert [pair.input for pair in store] == ["hi"]


def test_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "db.json"
    store = PairStore(path, [Pair("hi", ("hello", "hey")), Pair("bye", ("goodbye",))])
    store.save()
    reloaded = PairStore.load(path)
    assert [(pair.input, set(pair.outputs)) for pair in reloaded] == [
        ("hi", {"hello", "hey"}),
        ("bye", {"goodbye"}),
    ]
    assert not list(path.parent.glob("*.tmp"))


def test_in_memory_store_does_not_write(tmp_path: Path) -> None:
    store = PairStore(None, [Pair("hi", ("hello",))])
    store.save()
    assert list(tmp_path.iterdir()) == []


def test_inputs_without_words_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    records = [{"input": "???", "output": "mystery"}, {"input": "hi", "output": "hello"}]
    path.write_text(json.dumps(records), encoding="utf8")
    store = PairStore.load(path)
    assert [pair.input for pair in store] == ["hi"]
    with pytest.raises(ValueError):
        Pair.from_record({"input": " !! ", "output": "x"})
