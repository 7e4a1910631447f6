"""
Text preparation for wordchain training.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Union

from .configuration import TrainingConfiguration

_PUNCTUATION_PATTERN = re.compile(r"[^\w'\-]+|(?<!\w)['\-]+|['\-]+(?!\w)")


def tokenize_line(line: str, *, lowercase: bool = False, strip_punctuation: bool = False) -> List[str]:
    """
    Split one line of text into word tokens.

    :param line: Raw text line.
    :type line: str
    :param lowercase: Whether to lowercase tokens.
    :type lowercase: bool
    :param strip_punctuation: Whether to drop punctuation, keeping apostrophes and hyphens inside
        words.
    :type strip_punctuation: bool
    :return: Word tokens.
    :rtype: list[str]
    """
    text = line.lower() if lowercase else line
    if strip_punctuation:
        text = _PUNCTUATION_PATTERN.sub(" ", text)
    return text.split()


def iter_training_sequences(
    lines: Iterable[str], configuration: TrainingConfiguration
) -> Iterator[List[str]]:
    """
    Yield one token sequence per line of training text.

    :param lines: Raw text lines.
    :type lines: Iterable[str]
    :param configuration: Training configuration.
    :type configuration: TrainingConfiguration
    :return: Token sequences.
    :rtype: Iterator[list[str]]
    """
    for line in lines:
        tokens = tokenize_line(
            line,
            lowercase=configuration.lowercase,
            strip_punctuation=configuration.strip_punctuation,
        )
        if not tokens and configuration.skip_blank_lines:
            continue
        yield tokens


def read_training_lines(
    paths: Sequence[Union[str, Path]], configuration: TrainingConfiguration
) -> List[str]:
    """
    Read the lines of every training file in order.

    :param paths: Training text files.
    :type paths: Sequence[str or Path]
    :param configuration: Training configuration.
    :type configuration: TrainingConfiguration
    :return: Text lines without line terminators.
    :rtype: list[str]
    :raises FileNotFoundError: If a file does not exist.
    """
    lines: List[str] = []
    for raw in paths:
        path = Path(raw)
        if not path.is_file():
            raise FileNotFoundError(f"Training text not found: {path}")
        lines.extend(path.read_text(encoding=configuration.encoding).splitlines())
    return lines
