"""
Schema introspection for pydantic v2.

Runtime schemas understood here are model classes, model fields (wrapped
in :class:`FieldHandle` so defaults are visible) and type annotations
built from ``typing`` constructs.
"""

from __future__ import annotations

import inspect
import types
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal, Union, get_args, get_origin
from uuid import UUID

import structlog
from pydantic import BaseModel, TypeAdapter
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

from .base import SchemaIntrospector, TypeTag

logger = structlog.get_logger(__name__)

ARRAY_ORIGINS = {list, set, frozenset, Sequence}
NUMBER_TYPES = {int, float, Decimal}
OTHER_TYPES = {bytes, date, time, timedelta, UUID, Path, dict, tuple}
UNION_ORIGINS = {Union, types.UnionType}


@dataclass(frozen=True)
class FieldHandle:
    """A model field seen as a runtime schema.

    ``with_default`` is cleared once the importer has consumed the field's
    default, exposing the annotation underneath.
    """

    field_info: FieldInfo
    with_default: bool = True

    @property
    def annotation(self) -> Any:
        info = self.field_info
        if info.metadata:
            return Annotated[(info.annotation, *info.metadata)]
        return info.annotation


def _has_default(info: FieldInfo) -> bool:
    """A ``None`` default only counts when the annotation itself rejects ``None``."""
    if info.default_factory is not None:
        return True
    if info.default is PydanticUndefined:
        return False
    return info.default is not None or not _admits_none(info.annotation)


def _admits_none(annotation: Any) -> bool:
    base, _ = _strip_annotated(annotation)
    if base is None or base is type(None) or base is Any:
        return True
    return get_origin(base) in UNION_ORIGINS and type(None) in get_args(base)


def _strip_annotated(schema: Any) -> tuple[Any, list[Any]]:
    """Return the bare type under any ``Annotated`` layers and their metadata."""
    metadata: list[Any] = []
    while get_origin(schema) is Annotated:
        base, *extra = get_args(schema)
        metadata.extend(extra)
        schema = base
    return schema, metadata


def _is_model(schema: Any) -> bool:
    return isinstance(schema, type) and get_origin(schema) is None and issubclass(schema, BaseModel)


def _is_one_of(schema: Any, candidates: set) -> bool:
    return any(schema is candidate for candidate in candidates)


class PydanticIntrospector(SchemaIntrospector):
    """Reads pydantic models, fields and annotations."""

    def type_tag(self, schema: Any) -> TypeTag | None:
        if isinstance(schema, FieldHandle):
            info = schema.field_info
            if schema.with_default:
                if _has_default(info):
                    return TypeTag.DEFAULT
                if not info.is_required():
                    return TypeTag.OPTIONAL
            return self.type_tag(schema.annotation)

        base, _ = _strip_annotated(schema)

        if base is None or base is type(None):
            return TypeTag.NULL
        if base is Any:
            return TypeTag.ANY
        if _is_model(base):
            return TypeTag.OBJECT

        origin = get_origin(base)
        if origin in UNION_ORIGINS:
            if type(None) in get_args(base):
                return TypeTag.OPTIONAL
            return TypeTag.UNION
        if origin is Literal:
            return TypeTag.LITERAL if len(get_args(base)) == 1 else TypeTag.UNION
        if origin in ARRAY_ORIGINS or _is_one_of(base, ARRAY_ORIGINS):
            return TypeTag.ARRAY
        if origin is not None:
            return TypeTag.OTHER

        if base is bool:
            return TypeTag.BOOLEAN
        if base is str:
            return TypeTag.STRING
        if base is datetime:
            return TypeTag.DATETIME
        if isinstance(base, type) and issubclass(base, Enum):
            return TypeTag.OTHER
        if _is_one_of(base, NUMBER_TYPES):
            return TypeTag.NUMBER
        if _is_one_of(base, OTHER_TYPES):
            return TypeTag.OTHER
        return None

    def inner_type(self, schema: Any) -> Any:
        if isinstance(schema, FieldHandle):
            if schema.with_default:
                return FieldHandle(schema.field_info, with_default=False)
            schema = schema.annotation

        base, _ = _strip_annotated(schema)
        members = [arg for arg in get_args(base) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
        return Union[tuple(members)]

    def element_type(self, schema: Any) -> Any:
        base, _ = _strip_annotated(self._annotation(schema))
        args = get_args(base)
        return args[0] if args else Any

    def shape(self, schema: Any) -> Mapping[str, Any]:
        base, _ = _strip_annotated(self._annotation(schema))
        return {(info.alias or key): FieldHandle(info) for key, info in base.model_fields.items()}

    def options(self, schema: Any) -> list[Any]:
        base, _ = _strip_annotated(self._annotation(schema))
        if get_origin(base) is Literal:
            return [Literal[value] for value in get_args(base)]
        return list(get_args(base))

    def literal_value(self, schema: Any) -> Any:
        base, _ = _strip_annotated(self._annotation(schema))
        return get_args(base)[0]

    def default_producer(self, schema: Any) -> Callable[[], Any]:
        info = schema.field_info
        return lambda: info.get_default(call_default_factory=True, validated_data={})

    def description(self, schema: Any) -> str | None:
        if isinstance(schema, FieldHandle):
            if schema.field_info.description:
                return schema.field_info.description
            schema = schema.annotation

        base, metadata = _strip_annotated(schema)
        found = None
        for entry in metadata:
            if isinstance(entry, FieldInfo) and entry.description:
                found = entry.description
        if found is None and _is_model(base):
            doc = vars(base).get("__doc__")
            if doc:
                found = inspect.cleandoc(doc)
        return found

    def accepts_sample(self, schema: Any, sample: Any) -> bool:
        """Trial-validate ``sample``; any failure counts as a rejection."""
        validate = getattr(schema, "validate_python", None)
        try:
            if callable(validate):
                validate(sample)
            else:
                TypeAdapter(self._annotation(schema)).validate_python(sample)
        except Exception as e:
            logger.debug("schema rejected sample", sample=repr(sample), error=type(e).__name__)
            return False
        return True

    @staticmethod
    def _annotation(schema: Any) -> Any:
        if isinstance(schema, FieldHandle):
            return schema.annotation
        return schema
