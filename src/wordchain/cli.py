"""
Command-line interface for wordchain.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from pydantic import ValidationError

from .codec import read_model, write_model
from .compiler import compile_model
from .configuration import WordchainConfiguration, load_configuration
from .errors import UsageError, WordchainError
from .generation import ChainGenerator
from .inspection import describe_graph, summarize_model
from .text import iter_training_sequences, read_training_lines
from .training import build_graph

logger = logging.getLogger(__name__)


def _configure_logger(verbose: bool) -> None:
    """
    Configure root logging for one command-line run.

    :param verbose: Whether to use debug logging.
    :type verbose: bool
    :return: None.
    :rtype: None
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger("wordchain").setLevel(level)


def _add_configuration_args(parser: argparse.ArgumentParser) -> None:
    """
    Add configuration file and override arguments to a parser.

    :param parser: Argument parser to modify.
    :type parser: argparse.ArgumentParser
    :return: None.
    :rtype: None
    """
    parser.add_argument(
        "--configuration",
        action="append",
        default=[],
        help="Path to a configuration YAML file. Repeatable; later files override earlier ones.",
    )
    parser.add_argument(
        "--override",
        action="append",
        default=[],
        help="Override key=value pairs applied after composing configurations (supports dotted keys).",
    )


def _load_configuration(
    arguments: argparse.Namespace, flag_overrides: Optional[Dict[str, object]] = None
) -> WordchainConfiguration:
    extra = {key: value for key, value in (flag_overrides or {}).items() if value is not None}
    return load_configuration(
        arguments.configuration,
        arguments.override,
        extra_overrides=extra,
    )


def cmd_train(arguments: argparse.Namespace) -> int:
    """
    Train a model from text files and write it to disk.

    :param arguments: Parsed command-line interface arguments.
    :type arguments: argparse.Namespace
    :return: Exit code.
    :rtype: int
    """
    if not arguments.input:
        raise UsageError("train requires at least one --input text file")
    configuration = _load_configuration(arguments)
    lines = read_training_lines(arguments.input, configuration.training)
    graph = build_graph(iter_training_sequences(lines, configuration.training))
    for line in describe_graph(graph):
        logger.debug(line)
    model = compile_model(graph)
    path = write_model(model, arguments.output)
    summary = {
        "model": str(path),
        "sequences": graph.sequence_count,
        "transitions": graph.transition_count,
        "rows": model.row_count,
        "edges": model.edge_count,
    }
    print(json.dumps(summary, indent=2))
    return 0


def _interactive_loop(generator: ChainGenerator, separator: str) -> int:
    while True:
        print(separator.join(generator.generate()), flush=True)
        print("Press Enter for another sentence, or q to quit.", file=sys.stderr, flush=True)
        response = sys.stdin.readline()
        if not response or response.strip().lower() in {"q", "quit"}:
            return 0


def cmd_generate(arguments: argparse.Namespace) -> int:
    """
    Generate sentences from a trained model.

    :param arguments: Parsed command-line interface arguments.
    :type arguments: argparse.Namespace
    :return: Exit code.
    :rtype: int
    """
    configuration = _load_configuration(
        arguments,
        {
            "generation.count": arguments.count,
            "generation.seed": arguments.seed,
            "generation.max_tokens": arguments.max_tokens,
        },
    )
    options = configuration.generation
    model = read_model(arguments.model)
    generator = ChainGenerator(model, seed=options.seed, max_tokens=options.max_tokens)
    if arguments.interactive:
        return _interactive_loop(generator, options.separator)
    for tokens in generator.generate_many(options.count):
        print(options.separator.join(tokens))
    return 0


def cmd_show(arguments: argparse.Namespace) -> int:
    """
    Print a summary of a trained model.

    :param arguments: Parsed command-line interface arguments.
    :type arguments: argparse.Namespace
    :return: Exit code.
    :rtype: int
    """
    model = read_model(arguments.model)
    summary = summarize_model(model, row_limit=arguments.rows)
    print(summary.model_dump_json(indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the command-line interface argument parser.

    :return: Argument parser instance.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="wordchain",
        description="Train, store, and sample first-order word chains.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log progress details to standard error.",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_train = sub.add_parser("train", help="Train a model from text files, one sentence per line.")
    _add_configuration_args(p_train)
    p_train.add_argument(
        "--input",
        "-i",
        action="append",
        default=[],
        help="Training text file. Repeatable; files are read in order.",
    )
    p_train.add_argument("--output", "-o", required=True, help="Path of the model file to write.")
    p_train.set_defaults(func=cmd_train)

    p_generate = sub.add_parser("generate", help="Generate sentences from a model file.")
    _add_configuration_args(p_generate)
    p_generate.add_argument("--model", "-m", required=True, help="Path of the model file to read.")
    p_generate.add_argument("--count", "-n", type=int, default=None, help="Sentences to generate.")
    p_generate.add_argument("--seed", type=int, default=None, help="Random seed.")
    p_generate.add_argument(
        "--max-tokens",
        type=int,
        default=None,
        help="Fail when a sentence grows beyond this many tokens.",
    )
    p_generate.add_argument(
        "--interactive",
        action="store_true",
        help="Generate one sentence per Enter press until end of input or q.",
    )
    p_generate.set_defaults(func=cmd_generate)

    p_show = sub.add_parser("show", help="Summarize a model file as JSON.")
    p_show.add_argument("--model", "-m", required=True, help="Path of the model file to read.")
    p_show.add_argument(
        "--rows",
        type=int,
        default=10,
        help="Number of leading rows to include (default: 10).",
    )
    p_show.set_defaults(func=cmd_show)

    return parser


def main(argument_list: Optional[List[str]] = None) -> int:
    """
    Entry point for the wordchain command-line interface.

    :param argument_list: Optional command-line interface arguments.
    :type argument_list: list[str] or None
    :return: Exit code.
    :rtype: int
    """
    parser = build_parser()
    arguments = parser.parse_args(argument_list)
    _configure_logger(arguments.verbose)
    try:
        return int(arguments.func(arguments))
    except ValidationError as exception:
        print(f"Invalid configuration: {exception}", file=sys.stderr)
        return 2
    except OSError as exception:
        if exception.strerror and exception.filename:
            print(f"{exception.strerror}: {exception.filename}", file=sys.stderr)
        else:
            print(str(exception), file=sys.stderr)
        return 2
    except (ValueError, WordchainError) as exception:
        print(str(exception), file=sys.stderr)
        return 2
