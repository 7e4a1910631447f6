"""
Transition counting for wordchain training.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple

from .tokens import END, START, Sentinel, Token, is_word

logger = logging.getLogger(__name__)


class TransitionGraph:
    """
    Raw transition counts between consecutive tokens.

    Sources and destinations are kept in first-seen order. That order decides row indices and
    tie-breaks during compilation, so two graphs fed the same sequences compile identically.
    """

    def __init__(self) -> None:
        self._edges: Dict[Token, Dict[Token, int]] = {}
        self._sequence_count = 0
        self._transition_count = 0

    def add_training_data(self, tokens: Sequence[str]) -> None:
        """
        Count every transition of one training sequence.

        The sequence is walked as START, tokens[0], ..., tokens[-1], END. An empty sequence
        records a single START to END transition.

        :param tokens: Ordered word tokens of the sequence.
        :type tokens: Sequence[str]
        :return: None.
        :rtype: None
        :raises ValueError: If any token is not a string.
        """
        words: List[str] = list(tokens)
        for word in words:
            if not is_word(word):
                raise ValueError(f"Training tokens must be strings (got {word!r})")
        chain: List[Token] = [START, *words, END]
        for source, destination in zip(chain, chain[1:]):
            self._increment(source, destination, 1)
        self._sequence_count += 1

    def add_transition(self, source: Token, destination: Token, count: int = 1) -> None:
        """
        Record an explicit transition between two tokens.

        :param source: Source token or START.
        :type source: str or Sentinel
        :param destination: Destination token or END.
        :type destination: str or Sentinel
        :param count: Number of observations to add.
        :type count: int
        :return: None.
        :rtype: None
        :raises ValueError: If END is a source, START is a destination, or count is below one.
        """
        if source is END:
            raise ValueError("END cannot be a transition source")
        if destination is START:
            raise ValueError("START cannot be a transition destination")
        for token in (source, destination):
            if not isinstance(token, (str, Sentinel)):
                raise ValueError(f"Tokens must be strings or sentinels (got {token!r})")
        if count < 1:
            raise ValueError(f"Transition counts must be positive (got {count})")
        self._increment(source, destination, count)

    def _increment(self, source: Token, destination: Token, count: int) -> None:
        outgoing = self._edges.setdefault(source, {})
        outgoing[destination] = outgoing.get(destination, 0) + count
        self._transition_count += count

    def sources(self) -> List[Token]:
        """
        Return source tokens in first-seen order.

        :return: Source tokens.
        :rtype: list[str or Sentinel]
        """
        return list(self._edges)

    def edges(self, source: Token) -> Mapping[Token, int]:
        """
        Return the outgoing counts of one source in first-seen destination order.

        :param source: Source token.
        :type source: str or Sentinel
        :return: Read-only copy of destination counts.
        :rtype: Mapping[str or Sentinel, int]
        :raises KeyError: If the source has no outgoing transitions.
        """
        return dict(self._edges[source])

    def iter_edges(self) -> Iterator[Tuple[Token, Token, int]]:
        """
        Iterate every edge as (source, destination, count).

        :return: Edge iterator in first-seen order.
        :rtype: Iterator[tuple[str or Sentinel, str or Sentinel, int]]
        """
        for source, outgoing in self._edges.items():
            for destination, count in outgoing.items():
                yield source, destination, count

    @property
    def sequence_count(self) -> int:
        """
        Number of sequences passed to :meth:`add_training_data`.
        """
        return self._sequence_count

    @property
    def transition_count(self) -> int:
        """
        Sum of all edge counts.
        """
        return self._transition_count

    def __len__(self) -> int:
        return len(self._edges)

    def __contains__(self, token: object) -> bool:
        return token in self._edges


def build_graph(sequences: Iterable[Sequence[str]]) -> TransitionGraph:
    """
    Build a transition graph from token sequences.

    :param sequences: Token sequences in training order.
    :type sequences: Iterable[Sequence[str]]
    :return: Populated transition graph.
    :rtype: TransitionGraph
    """
    graph = TransitionGraph()
    for tokens in sequences:
        graph.add_training_data(tokens)
    logger.debug(
        "Counted %s transitions over %s sequences (%s sources)",
        graph.transition_count,
        graph.sequence_count,
        len(graph),
    )
    return graph
