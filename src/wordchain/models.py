"""
Pydantic models for compiled wordchain models.
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .constants import END_INDEX, START_INDEX


class ProbabilityEntry(BaseModel):
    """
    One step of a cumulative probability table.

    :ivar cumulative_probability: Share of outgoing transitions covered up to this entry.
    :vartype cumulative_probability: float
    :ivar target_index: Row index of the destination, or the END index.
    :vartype target_index: int
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    cumulative_probability: float
    target_index: int = Field(ge=0)

    @property
    def is_end(self) -> bool:
        """
        Whether this entry terminates a walk.
        """
        return self.target_index == END_INDEX


class ModelRow(BaseModel):
    """
    Outgoing transitions of one source token.

    :ivar token: Display string of the source token, None for the START row.
    :vartype token: str or None
    :ivar table: Cumulative probability table in descending frequency order.
    :vartype table: tuple[ProbabilityEntry, ...]
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    token: Optional[str] = None
    table: Tuple[ProbabilityEntry, ...] = Field(min_length=1)


class CompiledModel(BaseModel):
    """
    Index-addressed first-order chain ready for sampling or serialization.

    Row 0 always belongs to START and carries no token. Every other row carries the display
    string of the token whose index equals the row position.

    :ivar rows: Rows in index order.
    :vartype rows: tuple[ModelRow, ...]
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    rows: Tuple[ModelRow, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def _validate_row_tokens(self) -> "CompiledModel":
        if self.rows[START_INDEX].token is not None:
            raise ValueError("Row 0 belongs to START and must not carry a token")
        for index, row in enumerate(self.rows[1:], start=1):
            if row.token is None:
                raise ValueError(f"Row {index} is missing its token")
        return self

    @property
    def row_count(self) -> int:
        """
        Number of rows, START included.
        """
        return len(self.rows)

    @property
    def edge_count(self) -> int:
        """
        Number of table entries across all rows.
        """
        return sum(len(row.table) for row in self.rows)
