"""
Zod code emission backend.

Generates a TypeScript module declaring an equivalent zod schema and
its inferred type.
"""

from __future__ import annotations

import json
from typing import Any

from ...config import EmitterConfig
from ...ir.nodes import RootSchema, SchemaItem, SchemaKind
from ...utils import is_js_identifier, js_binding_name
from .base import EmitterBackend

UNKNOWN = "z.unknown()"


def quote(text: str) -> str:
    """Render ``text`` as a double-quoted string literal."""
    return json.dumps(text, ensure_ascii=False)


class ZodBackend(EmitterBackend):
    """TypeScript / zod code emission backend."""

    TEMPLATE_LANG = "zod"
    FILE_EXTENSION = "ts"

    TYPE_MAP = {
        SchemaKind.STRING: "z.string()",
        SchemaKind.NUMBER: "z.number()",
        SchemaKind.BOOLEAN: "z.boolean()",
        SchemaKind.DATETIME: "z.iso.datetime()",
    }

    def __init__(self, config: EmitterConfig):
        super().__init__(config)
        self.module_template = self.jinja_env.get_template(f"module.{self.FILE_EXTENSION}.jinja2")

    def generate(self, root: RootSchema) -> str:
        """Generate the zod module for ``root``."""
        self._index(root)
        indent = self.config.indent
        field_lines = [f"{indent}{self.property_key(f.name)}: {self.render_field(f, 1)}," for f in root.fields]
        return self.module_template.render(
            export_name=self.config.export_name,
            type_name=self.config.type_name,
            field_lines=field_lines,
        )

    def render_field(self, item: SchemaItem, depth: int) -> str:
        """Render a node in field position: description, array, optional, default."""
        code = self.render_item(item, depth)
        if item.description and item.kind == SchemaKind.OBJECT:
            code = f"{code}.describe({quote(item.description)})"
        if item.is_array:
            code = f"z.array({code})"
        if not item.required:
            code = f"{code}.optional()"
        if item.has_default:
            code = f"{code}.default({self.format_default_value(item.default_value)})"
        return code

    def render_item(self, item: SchemaItem, depth: int) -> str:
        if item.lazy_ref:
            code = self._render_lazy(item)
        elif item.kind in self.TYPE_MAP:
            code = self.TYPE_MAP[item.kind]
        elif item.kind == SchemaKind.LITERAL:
            code = f"z.literal({self.format_literal(item.literal_value)})"
        elif item.kind == SchemaKind.OBJECT:
            code = self._render_object(item, depth)
        elif item.kind == SchemaKind.UNION:
            code = self._render_union(item, depth)
        else:
            code = UNKNOWN

        # Objects are described where they are assembled into a field
        if item.description and item.kind != SchemaKind.OBJECT:
            code = f"{code}.describe({quote(item.description)})"
        return code

    def _render_lazy(self, item: SchemaItem) -> str:
        target = self.resolve_ref(item)
        if target is None:
            return f"z.lazy(() => {UNKNOWN})"
        return f"z.lazy(() => {js_binding_name(target.name)})"

    def _render_object(self, item: SchemaItem, depth: int) -> str:
        if not item.fields:
            return "z.object({})"
        pad = self.config.indent * depth
        lines = [f"{pad}{self.config.indent}{self.property_key(f.name)}: {self.render_field(f, depth + 1)}" for f in item.fields]
        body = ",\n".join(lines)
        return f"z.object({{\n{body}\n{pad}}})"

    def _render_union(self, item: SchemaItem, depth: int) -> str:
        options = item.options or []
        if len(options) < 2:
            return UNKNOWN
        rendered = []
        for option in options:
            code = self.render_item(option, depth)
            if option.description and option.kind == SchemaKind.OBJECT:
                code = f"{code}.describe({quote(option.description)})"
            if option.is_array:
                code = f"z.array({code})"
            rendered.append(code)
        return f"z.union([{', '.join(rendered)}])"

    @staticmethod
    def property_key(name: str) -> str:
        return name if is_js_identifier(name) else quote(name)

    @staticmethod
    def format_literal(value: Any) -> str:
        if isinstance(value, str):
            return quote(value)
        if isinstance(value, (bool, int, float)):
            return json.dumps(value)
        return quote("")

    def format_default_value(self, value: Any) -> str:
        return json.dumps(value, ensure_ascii=False)
