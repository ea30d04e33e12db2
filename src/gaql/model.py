"""
ParsedQuery -- the structured representation of a GAQL-like query string,
plus the small value types that flow between the engine stages.
"""
from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Operator(str, Enum):
    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    IN = "IN"
    NOT_IN = "NOT IN"
    LIKE = "LIKE"


class DateRangeKind(str, Enum):
    DURING = "DURING"
    BETWEEN = "BETWEEN"


class Condition(BaseModel):
    """One ``<field> <operator> <value>`` predicate from the WHERE clause."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Dotted path, e.g. 'campaign.status'")
    operator: Operator
    value: str = Field(..., description="Raw literal; a comma list for IN, a %-pattern for LIKE")


class DateRangeSpec(BaseModel):
    """Unresolved date directive: a DURING keyword or BETWEEN bounds."""

    model_config = ConfigDict(frozen=True)

    kind: DateRangeKind
    keyword: str | None = None
    start_literal: str | None = None
    end_literal: str | None = None

    @classmethod
    def during(cls, keyword: str) -> "DateRangeSpec":
        return cls(kind=DateRangeKind.DURING, keyword=keyword)

    @classmethod
    def between(cls, start: str, end: str) -> "DateRangeSpec":
        return cls(kind=DateRangeKind.BETWEEN, start_literal=start, end_literal=end)


class ParsedQuery(BaseModel):
    """Parsed representation of a single query string."""

    model_config = ConfigDict(frozen=True)

    select_fields: tuple[str, ...] = Field(..., min_length=1)
    source: str
    conditions: tuple[Condition, ...] = ()
    date_range: DateRangeSpec | None = None

    @property
    def field_mask(self) -> str:
        return ",".join(self.select_fields)


class DateWindow(BaseModel):
    """A resolved ``[start, end]`` calendar window."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @property
    def days(self) -> int:
        """Day span of the window; inverted or zero-width windows count as 0."""
        return max((self.end - self.start).days, 0)


class SearchPage(BaseModel):
    """One page of projected results."""

    results: list[dict[str, Any]] = Field(default_factory=list)
    next_page_token: str | None = None
    total_results_count: int = 0
    field_mask: str = ""
