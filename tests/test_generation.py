"""
Unit tests for random-walk generation.
"""

from __future__ import annotations

import random
import threading
from typing import List

import pytest

from wordchain.codec import decode_model, encode_model
from wordchain.compiler import compile_model
from wordchain.constants import END_INDEX
from wordchain.errors import GenerationError
from wordchain.generation import ChainGenerator, generate_tokens, select_target
from wordchain.models import CompiledModel, ModelRow, ProbabilityEntry
from wordchain.tokens import END, START
from wordchain.training import TransitionGraph, build_graph


class FixedDraws:
    """
    Random source that replays fixed uniform draws.
    """

    def __init__(self, draws: List[float]) -> None:
        self._draws = list(draws)

    def random(self) -> float:
        """
        Return the next scripted draw.
        """
        return self._draws.pop(0)


def _model(*tables) -> CompiledModel:
    rows = []
    for index, table in enumerate(tables):
        rows.append(
            ModelRow(
                token=None if index == 0 else f"w{index}",
                table=tuple(
                    ProbabilityEntry(cumulative_probability=probability, target_index=target)
                    for probability, target in table
                ),
            )
        )
    return CompiledModel(rows=tuple(rows))


def test_two_sentence_model_generates_trained_sentences():
    """
    Every walk over the "a b" / "a c" model yields one of the two training sentences.
    """
    model = compile_model(build_graph([["a", "b"], ["a", "c"]]))
    seen = set()
    for seed in range(200):
        tokens = ChainGenerator(model, seed=seed).generate()
        assert tokens in (["a", "b"], ["a", "c"])
        seen.add(tuple(tokens))
    assert seen == {("a", "b"), ("a", "c")}


def test_decoded_model_generates_like_the_original():
    model = compile_model(build_graph([["one", "two", "three"], ["one", "three"]]))
    decoded = decode_model(encode_model(model))
    for seed in range(50):
        assert ChainGenerator(decoded, seed=seed).generate() == ChainGenerator(
            model, seed=seed
        ).generate()


def test_same_seed_is_reproducible():
    model = compile_model(build_graph([["a", "b", "a", "c"], ["b", "c"], ["c", "a"]]))
    first = ChainGenerator(model, seed=42).generate_many(20)
    second = ChainGenerator(model, seed=42).generate_many(20)
    assert first == second


def test_self_loop_terminates_across_seeds():
    """
    A chain that repeats a token with probability one half still reaches END.
    """
    graph = TransitionGraph()
    graph.add_transition(START, "a")
    graph.add_transition("a", "a")
    graph.add_transition("a", END)
    model = compile_model(graph)
    for seed in range(500):
        tokens = generate_tokens(model, random.Random(seed))
        assert 1 <= len(tokens) < 200
        assert set(tokens) == {"a"}


def test_blank_sentence_model_generates_empty_sequence():
    graph = TransitionGraph()
    graph.add_training_data([])
    assert ChainGenerator(compile_model(graph), seed=0).generate() == []


def test_draw_equal_to_cumulative_selects_that_entry():
    row = ModelRow(
        table=(
            ProbabilityEntry(cumulative_probability=0.5, target_index=1),
            ProbabilityEntry(cumulative_probability=1.0, target_index=2),
        )
    )
    assert select_target(row, 0.0) == 1
    assert select_target(row, 0.5) == 1
    assert select_target(row, 0.5000001) == 2


def test_scripted_draws_follow_the_table():
    model = compile_model(build_graph([["a", "b"], ["a", "c"]]))
    assert generate_tokens(model, FixedDraws([0.1, 0.9, 0.3])) == ["a", "c"]
    assert generate_tokens(model, FixedDraws([0.1, 0.2, 0.3])) == ["a", "b"]


def test_end_entry_stops_the_walk_mid_table():
    """
    An END entry ahead of word entries ends the sequence when its range covers the draw.
    """
    model = _model([(1.0, 1)], [(0.4, END_INDEX), (1.0, 2)], [(1.0, END_INDEX)])
    assert ProbabilityEntry(cumulative_probability=0.4, target_index=END_INDEX).is_end
    assert generate_tokens(model, FixedDraws([0.5, 0.2])) == ["w1"]
    assert generate_tokens(model, FixedDraws([0.5, 0.9, 0.1])) == ["w1", "w2"]


def test_unknown_target_index_is_a_generation_error():
    model = _model([(1.0, 5)])
    with pytest.raises(GenerationError, match="targets index 5"):
        generate_tokens(model, random.Random(0))


def test_transition_back_to_start_is_a_generation_error():
    model = _model([(1.0, 1)], [(1.0, 0)])
    with pytest.raises(GenerationError, match="back to START"):
        generate_tokens(model, random.Random(0))


def test_exhausted_table_is_a_generation_error():
    """
    A table whose final cumulative value falls short of the draw cannot select a target.
    """
    model = _model([(0.5, END_INDEX)])
    with pytest.raises(GenerationError, match="exhausted"):
        generate_tokens(model, FixedDraws([0.75]))


def test_max_tokens_stops_runaway_walks():
    model = _model([(1.0, 1)], [(1.0, 1)])
    with pytest.raises(GenerationError, match="exceeded 5 tokens"):
        ChainGenerator(model, seed=1, max_tokens=5).generate()


def test_max_tokens_allows_sequences_at_the_limit():
    model = _model([(1.0, 1)], [(1.0, 2)], [(1.0, END_INDEX)])
    assert ChainGenerator(model, seed=1, max_tokens=2).generate() == ["w1", "w2"]


def test_concurrent_generation_over_one_model():
    """
    Independent generators share one immutable model across threads.
    """
    model = compile_model(build_graph([["a", "b"], ["a", "c"]]))
    results: List[List[str]] = []
    lock = threading.Lock()

    def _worker(seed: int) -> None:
        tokens = ChainGenerator(model, seed=seed).generate()
        with lock:
            results.append(tokens)

    threads = [threading.Thread(target=_worker, args=(seed,)) for seed in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(results) == 16
    assert all(tokens in (["a", "b"], ["a", "c"]) for tokens in results)
