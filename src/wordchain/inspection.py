"""
Read-only summaries of transition graphs and compiled models.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import END_INDEX
from .models import CompiledModel
from .tokens import Sentinel, Token
from .training import TransitionGraph


class TableEntrySummary(BaseModel):
    """
    Display form of one probability table entry.

    :ivar cumulative_probability: Cumulative probability of the entry.
    :vartype cumulative_probability: float
    :ivar target_index: Target row index or the END index.
    :vartype target_index: int
    :ivar target: Target token, ``<END>`` for the END sentinel.
    :vartype target: str
    """

    model_config = ConfigDict(extra="forbid")

    cumulative_probability: float
    target_index: int
    target: str


class RowSummary(BaseModel):
    """
    Display form of one model row.

    :ivar index: Row index.
    :vartype index: int
    :ivar token: Row token, ``<START>`` for row 0.
    :vartype token: str
    :ivar table: Table entries.
    :vartype table: list[TableEntrySummary]
    """

    model_config = ConfigDict(extra="forbid")

    index: int
    token: str
    table: List[TableEntrySummary] = Field(default_factory=list)


class ModelSummary(BaseModel):
    """
    Overview of a compiled model.

    :ivar row_count: Number of rows including START.
    :vartype row_count: int
    :ivar edge_count: Number of table entries.
    :vartype edge_count: int
    :ivar rows: Leading rows, up to the requested limit.
    :vartype rows: list[RowSummary]
    """

    model_config = ConfigDict(extra="forbid")

    row_count: int
    edge_count: int
    rows: List[RowSummary] = Field(default_factory=list)


def _label(model: CompiledModel, index: int) -> str:
    if index == END_INDEX:
        return repr(Sentinel.END)
    if index == 0:
        return repr(Sentinel.START)
    if index >= model.row_count:
        return f"<missing {index}>"
    return str(model.rows[index].token)


def summarize_model(model: CompiledModel, *, row_limit: Optional[int] = None) -> ModelSummary:
    """
    Summarize a compiled model for display.

    :param model: Compiled model.
    :type model: CompiledModel
    :param row_limit: Optional number of leading rows to include; all rows when None.
    :type row_limit: int or None
    :return: Model summary.
    :rtype: ModelSummary
    """
    limit = model.row_count if row_limit is None else min(row_limit, model.row_count)
    rows = [
        RowSummary(
            index=index,
            token=_label(model, index),
            table=[
                TableEntrySummary(
                    cumulative_probability=entry.cumulative_probability,
                    target_index=entry.target_index,
                    target=_label(model, entry.target_index),
                )
                for entry in model.rows[index].table
            ],
        )
        for index in range(limit)
    ]
    return ModelSummary(row_count=model.row_count, edge_count=model.edge_count, rows=rows)


def _token_text(token: Token) -> str:
    return repr(token) if isinstance(token, Sentinel) else token


def describe_graph(graph: TransitionGraph) -> List[str]:
    """
    Render every edge of a transition graph as ``source -> destination: count``.

    :param graph: Transition graph.
    :type graph: TransitionGraph
    :return: One line per edge in first-seen order.
    :rtype: list[str]
    """
    return [
        f"{_token_text(source)} -> {_token_text(destination)}: {count}"
        for source, destination, count in graph.iter_edges()
    ]
