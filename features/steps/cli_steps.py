from __future__ import annotations

import json
import shlex

from behave import given, then, when

from features.environment import run_wordchain


@given('a text file "{name}" containing:')
def step_text_file(context, name: str) -> None:
    path = context.workdir / name
    path.write_text(context.text + "\n", encoding="utf-8")


@given('a binary file "{name}" with bytes "{hex_bytes}"')
def step_binary_file(context, name: str, hex_bytes: str) -> None:
    path = context.workdir / name
    path.write_bytes(bytes.fromhex(hex_bytes))


@when('I run "{command}" with input "{input_text}"')
def step_run_command_with_input(context, command: str, input_text: str) -> None:
    run_wordchain(context, shlex.split(command), input_text=input_text.replace("\\n", "\n"))


@when('I run "{command}"')
def step_run_command(context, command: str) -> None:
    run_wordchain(context, shlex.split(command))


@then("the command succeeds")
def step_command_succeeds(context) -> None:
    result = context.last_result
    assert result.returncode == 0, result.stderr


@then("the command fails with exit code {code:d}")
def step_command_fails(context, code: int) -> None:
    assert context.last_result.returncode == code


@then("the output reports {count:d} rows")
def step_output_reports_rows(context, count: int) -> None:
    data = json.loads(context.last_result.stdout)
    rows = data["row_count"] if "row_count" in data else data["rows"]
    assert rows == count


@then('every output line is one of "{choices}"')
def step_output_lines_are(context, choices: str) -> None:
    lines = context.last_result.stdout.splitlines()
    assert lines
    assert set(lines) <= set(choices.split("|"))


@then("the output has {count:d} lines")
def step_output_has_lines(context, count: int) -> None:
    assert len(context.last_result.stdout.splitlines()) == count


@then('standard error mentions "{text}"')
def step_stderr_mentions(context, text: str) -> None:
    assert text in context.last_result.stderr
