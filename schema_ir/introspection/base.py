"""
Capability interface for reading runtime schemas.

The importer only talks to a :class:`SchemaIntrospector`; a binding for a
concrete validation library implements it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any


class TypeTag(str, Enum):
    """What a runtime schema is, as far as the importer cares."""

    OPTIONAL = "optional"  # may be absent; inner_type() is the wrapped schema
    ARRAY = "array"  # element_type() is the item schema
    DEFAULT = "default"  # default_producer() supplies the value, inner_type() the schema
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    LITERAL = "literal"  # literal_value()
    OBJECT = "object"  # shape()
    UNION = "union"  # options()
    NULL = "null"  # only admits null; not representable in the IR
    ANY = "any"
    OTHER = "other"  # known to the library but outside the IR


class SchemaIntrospector(ABC):
    """Read-only view over the internals of runtime schemas."""

    @abstractmethod
    def type_tag(self, schema: Any) -> TypeTag | None:
        """
        Classify a runtime schema.

        Returns:
            The tag, or None when the schema is opaque to this introspector
        """

    @abstractmethod
    def inner_type(self, schema: Any) -> Any:
        """Wrapped schema of an OPTIONAL or DEFAULT schema."""

    @abstractmethod
    def element_type(self, schema: Any) -> Any:
        """Item schema of an ARRAY schema."""

    @abstractmethod
    def shape(self, schema: Any) -> Mapping[str, Any]:
        """Property name -> schema of an OBJECT schema, in declaration order."""

    @abstractmethod
    def options(self, schema: Any) -> list[Any]:
        """Branches of a UNION schema, in declaration order."""

    @abstractmethod
    def literal_value(self, schema: Any) -> Any:
        """Stored value of a LITERAL schema."""

    @abstractmethod
    def default_producer(self, schema: Any) -> Callable[[], Any]:
        """Callable returning the default value of a DEFAULT schema."""

    @abstractmethod
    def accepts_sample(self, schema: Any, sample: Any) -> bool:
        """Whether ``schema`` accepts ``sample``; never raises."""

    def description(self, schema: Any) -> str | None:
        """Human readable annotation attached to the schema, if any."""
        return None
