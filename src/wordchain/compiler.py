"""
Compilation of transition graphs into cumulative probability models.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping

from .constants import END_INDEX, MAX_ROWS, START_INDEX
from .errors import ModelError
from .models import CompiledModel, ModelRow, ProbabilityEntry
from .tokens import END, START, Token
from .training import TransitionGraph

logger = logging.getLogger(__name__)

_END_TABLE = (ProbabilityEntry(cumulative_probability=1.0, target_index=END_INDEX),)


def assign_indices(graph: TransitionGraph) -> Dict[Token, int]:
    """
    Assign a row index to START and every word token of a graph.

    START takes index 0, the remaining sources follow in first-seen order, and tokens that only
    ever appear as destinations are appended after them in first-seen order. END is left out; it
    always maps to the reserved END index.

    :param graph: Transition graph.
    :type graph: TransitionGraph
    :return: Mapping of token to row index.
    :rtype: dict[str or Sentinel, int]
    """
    indices: Dict[Token, int] = {START: START_INDEX}
    for source in graph.sources():
        if source not in indices:
            indices[source] = len(indices)
    for _source, destination, _count in graph.iter_edges():
        if destination is not END and destination not in indices:
            indices[destination] = len(indices)
    return indices


def build_probability_table(
    outgoing: Mapping[Token, int], indices: Mapping[Token, int]
) -> List[ProbabilityEntry]:
    """
    Turn outgoing counts into a cumulative probability table.

    Destinations are ordered by descending count; equal counts keep their first-seen order.

    :param outgoing: Destination counts in first-seen order.
    :type outgoing: Mapping[str or Sentinel, int]
    :param indices: Token index assignment.
    :type indices: Mapping[str or Sentinel, int]
    :return: Cumulative probability entries.
    :rtype: list[ProbabilityEntry]
    """
    ranked = sorted(outgoing.items(), key=lambda item: -item[1])
    total = sum(count for _destination, count in ranked)
    table: List[ProbabilityEntry] = []
    running = 0
    for destination, count in ranked:
        running += count
        target_index = END_INDEX if destination is END else indices[destination]
        table.append(
            ProbabilityEntry(cumulative_probability=running / total, target_index=target_index)
        )
    return table


def compile_model(graph: TransitionGraph, *, max_rows: int = MAX_ROWS) -> CompiledModel:
    """
    Compile a transition graph into an index-addressed model.

    :param graph: Transition graph populated by training.
    :type graph: TransitionGraph
    :param max_rows: Largest row total the serialized index fields can address.
    :type max_rows: int
    :return: Compiled model.
    :rtype: CompiledModel
    :raises ModelError: If START has no row or the row total exceeds ``max_rows``.
    """
    if START not in graph:
        raise ModelError("Transition graph has no START transitions; nothing was trained")
    indices = assign_indices(graph)
    if indices[START] != START_INDEX:
        raise ModelError(f"START must have index {START_INDEX} (got {indices[START]})")
    if len(indices) > max_rows:
        raise ModelError(f"Model needs {len(indices)} rows but at most {max_rows} are addressable")

    rows: List[ModelRow] = []
    for token in indices:
        display = None if token is START else str(token)
        if token in graph:
            table = build_probability_table(graph.edges(token), indices)
            rows.append(ModelRow(token=display, table=tuple(table)))
        else:
            rows.append(ModelRow(token=display, table=_END_TABLE))
    model = CompiledModel(rows=tuple(rows))
    sink_count = len(indices) - len(graph)
    logger.info("Compiled %s rows (%s edges)", model.row_count, model.edge_count)
    if sink_count:
        logger.debug("Registered %s destination-only tokens as END rows", sink_count)
    return model
