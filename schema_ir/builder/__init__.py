"""
Runtime schema builder (IR -> pydantic).
"""

from __future__ import annotations

from .builder import SchemaBuilder, build, validate
from .context import BuildContext, LazyReference
from .validators import ExactLiteral, FiniteNumber, IsoDatetime, UnionBranch, iso_datetime_string

__all__ = [
    "SchemaBuilder",
    "BuildContext",
    "LazyReference",
    "ExactLiteral",
    "FiniteNumber",
    "IsoDatetime",
    "UnionBranch",
    "iso_datetime_string",
    "build",
    "validate",
]
