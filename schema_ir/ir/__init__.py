"""
Schema IR: the editor-facing tree of schema nodes.
"""

from __future__ import annotations

from .nodes import (
    ROOT_ID,
    RootSchema,
    SchemaItem,
    SchemaKind,
    clone_item,
    create_default_item,
    create_root_schema,
    find_item_by_id,
    generate_id,
    get_ref_targets,
    index_items,
    is_container_type,
    is_leaf_type,
    is_object_type,
    is_union_type,
    iter_items,
)
from .serialization import dumps_root, item_from_dict, item_to_dict, load_root, root_from_dict, root_to_dict

__all__ = [
    "ROOT_ID",
    "RootSchema",
    "SchemaItem",
    "SchemaKind",
    "clone_item",
    "create_default_item",
    "create_root_schema",
    "find_item_by_id",
    "generate_id",
    "get_ref_targets",
    "index_items",
    "is_container_type",
    "is_leaf_type",
    "is_object_type",
    "is_union_type",
    "iter_items",
    "dumps_root",
    "item_from_dict",
    "item_to_dict",
    "load_root",
    "root_from_dict",
    "root_to_dict",
]
