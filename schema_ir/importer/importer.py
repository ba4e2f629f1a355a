"""
Schema importer: reads a runtime schema back into IR.

This is best-effort. Wrappers (optional, array, default) are unwrapped
first and recorded as flags on the node they wrap; anything the
introspector cannot classify is classified by the sample values it accepts.
"""

from __future__ import annotations

from typing import Any

import structlog

from ..introspection import PydanticIntrospector, SchemaIntrospector, TypeTag
from ..ir.nodes import RootSchema, SchemaItem, SchemaKind

logger = structlog.get_logger(__name__)

SCALAR_KINDS = {
    TypeTag.STRING: SchemaKind.STRING,
    TypeTag.NUMBER: SchemaKind.NUMBER,
    TypeTag.BOOLEAN: SchemaKind.BOOLEAN,
    TypeTag.DATETIME: SchemaKind.DATETIME,
}

# Tried in order against schemas with no type tag; the first accepted sample wins.
SAMPLE_KINDS: list[tuple[Any, SchemaKind]] = [
    ("test", SchemaKind.STRING),
    (123, SchemaKind.NUMBER),
    (True, SchemaKind.BOOLEAN),
]


class SchemaImporter:
    """Converts runtime schemas into IR nodes."""

    def __init__(self, introspector: SchemaIntrospector | None = None):
        self.introspector = introspector or PydanticIntrospector()

    def import_schema(self, schema: Any, name: str = "") -> SchemaItem | None:
        """
        Import one runtime schema as an IR node.

        Args:
            schema: The runtime schema (model, field or annotation for pydantic)
            name: Name given to the resulting node

        Returns:
            The node, or None when the schema only admits null
        """
        tag = self.introspector.type_tag(schema)
        if tag is None:
            return self._classify_by_sample(schema, name)
        if tag == TypeTag.NULL:
            logger.debug("null-only schema has no IR counterpart", name=name)
            return None

        item = self._import_tagged(schema, tag, name)
        if item is not None and not item.description:
            description = self.introspector.description(schema)
            if description:
                item.description = description
        return item

    def import_root(self, schema: Any) -> RootSchema:
        """Import an object schema as the root of a new tree."""
        root = RootSchema()
        if self.introspector.type_tag(schema) != TypeTag.OBJECT:
            logger.debug("root schema is not an object, returning an empty root")
            return root
        root.fields = self._import_children(self.introspector.shape(schema).items())
        return root

    def _import_tagged(self, schema: Any, tag: TypeTag, name: str) -> SchemaItem | None:
        item = SchemaItem(name=name, kind=SchemaKind.STRING, required=True, is_array=False)

        if tag == TypeTag.OPTIONAL:
            inner = self.import_schema(self.introspector.inner_type(schema), name)
            if inner is None:
                item.required = False
                return item
            inner.required = False
            return inner

        if tag == TypeTag.ARRAY:
            inner = self.import_schema(self.introspector.element_type(schema), name)
            if inner is None:
                item.is_array = True
                return item
            inner.is_array = True
            return inner

        if tag == TypeTag.DEFAULT:
            inner = self.import_schema(self.introspector.inner_type(schema), name)
            if inner is None:
                return item
            inner.default_value = self.introspector.default_producer(schema)()
            inner.has_default = True
            return inner

        if tag in SCALAR_KINDS:
            item.kind = SCALAR_KINDS[tag]
        elif tag == TypeTag.LITERAL:
            item.kind = SchemaKind.LITERAL
            item.literal_value = self.introspector.literal_value(schema)
        elif tag == TypeTag.OBJECT:
            item.kind = SchemaKind.OBJECT
            item.fields = self._import_children(self.introspector.shape(schema).items())
        elif tag == TypeTag.UNION:
            item.kind = SchemaKind.UNION
            branches = self.introspector.options(schema)
            item.options = self._import_children((f"option_{i}", branch) for i, branch in enumerate(branches, start=1))
        else:
            logger.debug("unhandled schema type, defaulting to string", name=name, tag=tag.value)
        return item

    def _import_children(self, named_schemas) -> list[SchemaItem]:
        children = []
        for key, child_schema in named_schemas:
            child = self.import_schema(child_schema, key)
            if child is not None:
                children.append(child)
        return children

    def _classify_by_sample(self, schema: Any, name: str) -> SchemaItem:
        """Guess a scalar kind for an opaque schema by trial validation."""
        item = SchemaItem(name=name, kind=SchemaKind.STRING, required=True, is_array=False)
        for sample, kind in SAMPLE_KINDS:
            if self.introspector.accepts_sample(schema, sample):
                item.kind = kind
                break
        logger.debug("classified opaque schema by sample", name=name, kind=item.kind.value)
        return item


def import_schema(schema: Any, name: str = "") -> SchemaItem | None:
    return SchemaImporter().import_schema(schema, name)


def import_root(schema: Any) -> RootSchema:
    return SchemaImporter().import_root(schema)
