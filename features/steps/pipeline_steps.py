from __future__ import annotations

from typing import List

from behave import given, then, when

import wordchain.errors as errors_module
from wordchain.codec import decode_model, encode_model
from wordchain.compiler import compile_model
from wordchain.generation import ChainGenerator
from wordchain.inspection import summarize_model
from wordchain.text import tokenize_line
from wordchain.training import TransitionGraph


def _parse_table(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _render_table(context, index: int) -> List[str]:
    summary = summarize_model(context.model)
    rendered: List[str] = []
    for entry in summary.rows[index].table:
        target = "END" if entry.target == "<END>" else str(entry.target_index)
        rendered.append(f"{entry.cumulative_probability!r}->{target}")
    return rendered


@given("I train on the sentences:")
def step_train_on_sentences(context) -> None:
    graph = TransitionGraph()
    for row in context.table:
        graph.add_training_data(tokenize_line(row["sentence"]))
    context.graph = graph


@given("I train on no sentences")
def step_train_on_nothing(context) -> None:
    context.graph = TransitionGraph()


@given("I train on a sentence with a token of {size:d} bytes")
def step_train_on_long_token(context, size: int) -> None:
    graph = TransitionGraph()
    graph.add_training_data(["short", "x" * size])
    context.graph = graph


@when("I compile the transition graph")
def step_compile_graph(context) -> None:
    context.model = compile_model(context.graph)


@when("I attempt to compile the transition graph")
def step_attempt_compile_graph(context) -> None:
    try:
        context.model = compile_model(context.graph)
        context.error = None
    except errors_module.WordchainError as exc:
        context.error = exc


@when("I encode and decode the model")
def step_encode_decode(context) -> None:
    context.encoded = encode_model(context.model)
    context.decoded = decode_model(context.encoded)


@when("I attempt to encode the model")
def step_attempt_encode(context) -> None:
    try:
        context.encoded = encode_model(context.model)
        context.error = None
    except errors_module.WordchainError as exc:
        context.error = exc


@when("I attempt to decode the model with the last {count:d} bytes removed")
def step_attempt_decode_truncated(context, count: int) -> None:
    data = encode_model(context.model)
    try:
        decode_model(data[:-count])
        context.error = None
    except errors_module.WordchainError as exc:
        context.error = exc


@when("I generate {count:d} sentences with seeds starting at {seed:d}")
def step_generate_sentences(context, count: int, seed: int) -> None:
    context.generated = [
        " ".join(ChainGenerator(context.model, seed=seed + offset).generate())
        for offset in range(count)
    ]


@then('the model rows are "{tokens}"')
def step_model_rows_are(context, tokens: str) -> None:
    expected = [token.strip() for token in tokens.split(",")]
    summary = summarize_model(context.model)
    assert [row.token for row in summary.rows] == expected


@then('row {index:d} has the table "{table}"')
def step_row_has_table(context, index: int, table: str) -> None:
    assert _render_table(context, index) == _parse_table(table)


@then("the decoded model equals the compiled model")
def step_decoded_equals_compiled(context) -> None:
    assert context.decoded == context.model
    assert encode_model(context.decoded) == context.encoded


@then('every generated sentence is one of "{choices}"')
def step_generated_sentences_are(context, choices: str) -> None:
    allowed = set(choices.split("|"))
    assert context.generated
    assert set(context.generated) <= allowed


@then('a "{error_name}" is raised mentioning "{text}"')
def step_error_raised(context, error_name: str, text: str) -> None:
    error_class = getattr(errors_module, error_name)
    assert isinstance(context.error, error_class), context.error
    assert text in str(context.error)
