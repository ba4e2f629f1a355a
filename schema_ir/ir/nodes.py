"""
IR (Intermediate Representation) node definitions.

A schema is a tree of :class:`SchemaItem` nodes hanging off a
:class:`RootSchema`. Lazy references are plain ids, so reference edges
are resolved by lookup (see :func:`index_items`) rather than by pointers.
"""

from __future__ import annotations

import copy
import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

ROOT_ID = "root"


class SchemaKind(str, Enum):
    """Kind of a schema node."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    LITERAL = "literal"
    OBJECT = "object"  # has fields
    UNION = "union"  # has options


LiteralValue = str | int | float | bool


@dataclass
class SchemaItem:
    """A node of the schema tree."""

    id: str = ""
    name: str = ""  # Field key when nested inside an object
    kind: SchemaKind | str = SchemaKind.STRING
    required: bool = True
    is_array: bool = False
    description: str | None = None

    # Value used when the field is absent
    default_value: Any = None
    has_default: bool = False

    # Only for kind == object
    fields: list[SchemaItem] | None = None

    # Only for kind == union
    options: list[SchemaItem] | None = None

    # Only for kind == literal
    literal_value: LiteralValue | None = None

    # Id of the node this one stands for; all shape fields are ignored when set
    lazy_ref: str | None = None

    def __post_init__(self):
        if not self.id:
            self.id = generate_id()

    def children(self) -> list[SchemaItem]:
        """Fields followed by options."""
        return [*(self.fields or []), *(self.options or [])]


@dataclass
class RootSchema:
    """The top-level object of a schema; never a lazy reference target."""

    fields: list[SchemaItem] = field(default_factory=list)
    id: str = ROOT_ID
    kind: SchemaKind = SchemaKind.OBJECT

    def children(self) -> list[SchemaItem]:
        return list(self.fields)


def is_object_type(item: SchemaItem) -> bool:
    return item.kind == SchemaKind.OBJECT


def is_union_type(item: SchemaItem) -> bool:
    return item.kind == SchemaKind.UNION


def is_container_type(item: SchemaItem) -> bool:
    return is_object_type(item) or is_union_type(item)


def is_leaf_type(item: SchemaItem) -> bool:
    return not is_container_type(item)


def generate_id() -> str:
    """Return a fresh, globally unique node id."""
    return f"item_{uuid.uuid4()}"


def create_default_item(kind: SchemaKind | str, name: str = "") -> SchemaItem:
    """Create a node with the default shape for ``kind``."""
    item = SchemaItem(
        name=name,
        kind=kind,
        required=True,
        is_array=False,
        description="",
    )
    if kind == SchemaKind.OBJECT:
        item.fields = []
    elif kind == SchemaKind.UNION:
        item.options = []
    elif kind == SchemaKind.LITERAL:
        item.literal_value = ""
    return item


def create_root_schema() -> RootSchema:
    return RootSchema()


def iter_items(schema: RootSchema | SchemaItem) -> Iterator[SchemaItem]:
    """Yield every node below ``schema`` in pre-order, fields before options."""
    for child in schema.children():
        yield child
        yield from iter_items(child)


def find_item_by_id(schema: RootSchema | SchemaItem, item_id: str) -> SchemaItem | None:
    """Find a node by id; the root itself never matches."""
    if isinstance(schema, SchemaItem) and schema.id == item_id and schema.id != ROOT_ID:
        return schema
    for child in schema.children():
        found = find_item_by_id(child, item_id)
        if found is not None:
            return found
    return None


def get_ref_targets(root: RootSchema) -> list[SchemaItem]:
    """All object and union nodes, the candidates for a lazy reference."""
    return [item for item in iter_items(root) if is_container_type(item)]


def index_items(root: RootSchema | SchemaItem) -> dict[str, SchemaItem]:
    """
    Build an id -> node table for the tree.

    When ids collide the first node in pre-order wins, matching
    :func:`find_item_by_id`.
    """
    table: dict[str, SchemaItem] = {}
    if isinstance(root, SchemaItem):
        table[root.id] = root
    for item in iter_items(root):
        table.setdefault(item.id, item)
    return table


def clone_item(item: SchemaItem) -> SchemaItem:
    """
    Deep-copy a subtree, giving every node a fresh id.

    Lazy references are copied as-is, so references to nodes inside the
    original subtree dangle in the copy until they are re-pointed.
    """
    return SchemaItem(
        id=generate_id(),
        name=item.name,
        kind=item.kind,
        required=item.required,
        is_array=item.is_array,
        description=item.description,
        default_value=copy.deepcopy(item.default_value),
        has_default=item.has_default,
        fields=[clone_item(f) for f in item.fields] if item.fields is not None else None,
        options=[clone_item(o) for o in item.options] if item.options is not None else None,
        literal_value=copy.deepcopy(item.literal_value),
        lazy_ref=item.lazy_ref,
    )
