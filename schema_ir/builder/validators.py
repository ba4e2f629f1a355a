"""
Annotations and validators that narrow pydantic's defaults to the IR's semantics.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, StrictFloat

# Date and time joined by "T"; seconds and the UTC offset may be omitted
ISO_DATETIME = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?$")


def iso_datetime_string(value: Any) -> Any:
    """Only ISO 8601 date-time strings may reach pydantic's datetime parser."""
    if not isinstance(value, str) or not ISO_DATETIME.match(value):
        raise ValueError("Input should be an ISO 8601 date-time string")
    return value


class ExactLiteral:
    """Keeps booleans and numbers apart, which ``Literal`` equality does not."""

    def __init__(self, expected: Any):
        self.expected = expected

    def validate(self, value: Any) -> Any:
        if isinstance(value, bool) != isinstance(self.expected, bool):
            raise ValueError(f"Input should be {self.expected!r}")
        return value

    def __repr__(self) -> str:
        return f"ExactLiteral({self.expected!r})"


@dataclass(frozen=True)
class UnionBranch:
    """Marker that stops ``typing.Union`` from merging equal or nested branches."""

    index: int


FiniteNumber = Annotated[StrictFloat, Field(allow_inf_nan=False)]
IsoDatetime = Annotated[datetime, BeforeValidator(iso_datetime_string)]
