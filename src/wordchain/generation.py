"""
Random-walk sampling from compiled wordchain models.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional

from .constants import START_INDEX
from .errors import GenerationError
from .models import CompiledModel, ModelRow, ProbabilityEntry

logger = logging.getLogger(__name__)


def _select_entry(row: ModelRow, draw: float) -> ProbabilityEntry:
    for entry in row.table:
        if draw <= entry.cumulative_probability:
            return entry
    label = "START" if row.token is None else row.token
    raise GenerationError(
        f"Probability table of {label!r} exhausted at draw {draw!r}"
        f" (final cumulative probability {row.table[-1].cumulative_probability!r})"
    )


def select_target(row: ModelRow, draw: float) -> int:
    """
    Pick the first table entry whose cumulative probability covers a draw.

    :param row: Row to sample from.
    :type row: ModelRow
    :param draw: Uniform value in [0, 1).
    :type draw: float
    :return: Target index of the selected entry.
    :rtype: int
    :raises GenerationError: If no entry covers the draw.
    """
    return _select_entry(row, draw).target_index


def generate_tokens(
    model: CompiledModel,
    rng: random.Random,
    *,
    max_tokens: Optional[int] = None,
) -> List[str]:
    """
    Walk a model from START until END is drawn.

    :param model: Compiled model.
    :type model: CompiledModel
    :param rng: Random source for uniform draws.
    :type rng: random.Random
    :param max_tokens: Optional cap on the number of generated tokens.
    :type max_tokens: int or None
    :return: Generated tokens in order.
    :rtype: list[str]
    :raises GenerationError: If the walk reaches an unknown index, START, an exhausted table, or
        exceeds ``max_tokens``.
    """
    rows = model.rows
    output: List[str] = []
    current = START_INDEX
    while True:
        entry = _select_entry(rows[current], rng.random())
        if entry.is_end:
            return output
        target = entry.target_index
        if target == START_INDEX:
            raise GenerationError(f"Row {current} transitions back to START")
        if target >= len(rows):
            raise GenerationError(
                f"Row {current} targets index {target} but the model has {len(rows)} rows"
            )
        if max_tokens is not None and len(output) >= max_tokens:
            raise GenerationError(f"Generated sequence exceeded {max_tokens} tokens")
        output.append(str(rows[target].token))
        current = target


class ChainGenerator:
    """
    Sentence generator bound to one compiled model.

    Walk state lives inside each :meth:`generate` call, so one generator may serve repeated
    calls. Each generator owns its random source.

    :param model: Compiled model to sample from.
    :type model: CompiledModel
    :param seed: Optional seed for a fresh random source.
    :type seed: int or None
    :param rng: Optional random source, used instead of ``seed``.
    :type rng: random.Random or None
    :param max_tokens: Optional cap on generated sequence length.
    :type max_tokens: int or None
    """

    def __init__(
        self,
        model: CompiledModel,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        max_tokens: Optional[int] = None,
    ) -> None:
        self.model = model
        self.rng = rng if rng is not None else random.Random(seed)
        self.max_tokens = max_tokens

    def generate(self) -> List[str]:
        """
        Generate one token sequence.

        :return: Generated tokens.
        :rtype: list[str]
        :raises GenerationError: If the model is malformed.
        """
        tokens = generate_tokens(self.model, self.rng, max_tokens=self.max_tokens)
        logger.debug("Generated %s tokens", len(tokens))
        return tokens

    def generate_many(self, count: int) -> List[List[str]]:
        """
        Generate several token sequences.

        :param count: Number of sequences.
        :type count: int
        :return: Generated sequences.
        :rtype: list[list[str]]
        """
        return [self.generate() for _ in range(count)]
