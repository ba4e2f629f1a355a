"""
Runtime schema introspection.
"""

from __future__ import annotations

from .base import SchemaIntrospector, TypeTag
from .pydantic_introspector import FieldHandle, PydanticIntrospector

__all__ = [
    "SchemaIntrospector",
    "TypeTag",
    "FieldHandle",
    "PydanticIntrospector",
]
