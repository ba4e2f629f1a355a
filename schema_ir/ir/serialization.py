"""
JSON codec for IR documents.

The document shape is the one the schema editor stores::

    {"type": "object", "id": "root", "fields": [
        {"id": "item_...", "name": "age", "type": "number", "required": false,
         "isArray": false, "description": "", "default": 0}
    ]}

Lazy references are stored as ``"lazy": {"refId": "<id>"}``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog

from ..exceptions import IRDecodeError
from .nodes import ROOT_ID, RootSchema, SchemaItem, SchemaKind, generate_id

logger = structlog.get_logger(__name__)


def item_to_dict(item: SchemaItem) -> dict[str, Any]:
    """Encode a node (and its subtree) as a JSON-ready dict."""
    kind = item.kind.value if isinstance(item.kind, SchemaKind) else item.kind
    d: dict[str, Any] = {
        "id": item.id,
        "name": item.name,
        "type": kind,
        "required": item.required,
        "isArray": item.is_array,
    }
    if item.description is not None:
        d["description"] = item.description
    if item.has_default:
        d["default"] = item.default_value
    if item.fields is not None:
        d["fields"] = [item_to_dict(f) for f in item.fields]
    if item.options is not None:
        d["options"] = [item_to_dict(o) for o in item.options]
    if item.lazy_ref is not None:
        d["lazy"] = {"refId": item.lazy_ref}
    if item.literal_value is not None:
        d["literalValue"] = item.literal_value
    return d


def root_to_dict(root: RootSchema) -> dict[str, Any]:
    return {
        "type": SchemaKind.OBJECT.value,
        "id": ROOT_ID,
        "fields": [item_to_dict(f) for f in root.fields],
    }


def _decode_kind(value: Any, path: str) -> SchemaKind | str:
    try:
        return SchemaKind(value)
    except ValueError:
        logger.warning("unknown schema kind", kind=value, path=path)
        return str(value)


def _decode_children(d: dict, key: str, path: str) -> list[SchemaItem] | None:
    if key not in d or d[key] is None:
        return None
    children = d[key]
    if not isinstance(children, list):
        raise IRDecodeError(f"'{key}' must be a list, got {type(children).__name__}", path)
    return [item_from_dict(child, f"{path}.{key}[{i}]") for i, child in enumerate(children)]


def item_from_dict(d: Any, path: str = "$") -> SchemaItem:
    """
    Decode a node from its JSON form.

    Args:
        d: Decoded JSON value for the node
        path: Location of the node, used in error messages

    Raises:
        IRDecodeError: If the node or its children are not shaped like IR nodes
    """
    if not isinstance(d, dict):
        raise IRDecodeError(f"node must be an object, got {type(d).__name__}", path)

    lazy_ref = None
    lazy = d.get("lazy")
    if isinstance(lazy, dict) and lazy.get("refId") is not None:
        lazy_ref = str(lazy["refId"])
    elif lazy is not None:
        raise IRDecodeError("'lazy' must be an object with a 'refId'", path)

    return SchemaItem(
        id=str(d.get("id") or generate_id()),
        name=str(d.get("name", "")),
        kind=_decode_kind(d.get("type", SchemaKind.STRING.value), path),
        required=bool(d.get("required", True)),
        is_array=bool(d.get("isArray", False)),
        description=d.get("description"),
        default_value=d.get("default"),
        has_default="default" in d,
        fields=_decode_children(d, "fields", path),
        options=_decode_children(d, "options", path),
        literal_value=d.get("literalValue"),
        lazy_ref=lazy_ref,
    )


def root_from_dict(d: Any) -> RootSchema:
    """Decode a root document; ``type`` and ``id`` are not checked."""
    if not isinstance(d, dict):
        raise IRDecodeError(f"root must be an object, got {type(d).__name__}", "$")
    fields = _decode_children(d, "fields", "$")
    return RootSchema(fields=fields or [])


def load_root(path: Path | str) -> RootSchema:
    with open(path, encoding="utf-8") as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            raise IRDecodeError(f"invalid JSON: {e}", str(path)) from e
    return root_from_dict(document)


def dumps_root(root: RootSchema, indent: int | None = 2) -> str:
    return json.dumps(root_to_dict(root), indent=indent, ensure_ascii=False)
