"""
Pydantic code emission backend.

Generates a Python module with one ``BaseModel`` class per object node,
mirroring what the schema builder constructs at runtime. Classes are
emitted children first, so only lazy references need forward references.
"""

from __future__ import annotations

import collections
import json
from typing import Any

from ...builder.validators import ISO_DATETIME
from ...config import EmitterConfig
from ...ir.nodes import RootSchema, SchemaItem, SchemaKind, iter_items
from ...utils import field_key, snake_to_pascal_case
from .base import EmitterBackend

RESERVED_NAMES = {
    "Annotated",
    "Any",
    "BaseModel",
    "BeforeValidator",
    "Field",
    "FiniteFloat",
    "IsoDatetime",
    "Literal",
    "Optional",
    "StrictBool",
    "StrictFloat",
    "StrictStr",
    "Union",
    "datetime",
    "re",
}

# Module-level definitions the generated code may need, in emission order,
# with the names each one uses
HELPERS = {
    "exact_literal": set(),
    "finite_float": {"Annotated", "Field", "StrictFloat"},
    "iso_datetime": {"re", "datetime", "Annotated", "BeforeValidator"},
}


def quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def escape_docstring(text: str) -> str:
    """Make ``text`` safe to place between triple double quotes."""
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text = text[:-1] + '\\"'
    return text


class PydanticBackend(EmitterBackend):
    """Python / pydantic code emission backend."""

    TEMPLATE_LANG = "pydantic"
    FILE_EXTENSION = "py"

    TYPE_MAP = {
        SchemaKind.STRING: "StrictStr",
        SchemaKind.NUMBER: "FiniteFloat",
        SchemaKind.BOOLEAN: "StrictBool",
        SchemaKind.DATETIME: "IsoDatetime",
    }

    # Helper defining each TYPE_MAP expression that is not a plain import
    TYPE_HELPERS = {
        "FiniteFloat": "finite_float",
        "IsoDatetime": "iso_datetime",
    }

    # Where each name used in generated code is imported from; None for ``import name``
    IMPORT_SOURCES = {
        "re": None,
        "datetime": "datetime",
        "Annotated": "typing",
        "Any": "typing",
        "Literal": "typing",
        "Optional": "typing",
        "Union": "typing",
        "BaseModel": "pydantic",
        "BeforeValidator": "pydantic",
        "Field": "pydantic",
        "StrictBool": "pydantic",
        "StrictFloat": "pydantic",
        "StrictStr": "pydantic",
    }

    def __init__(self, config: EmitterConfig):
        super().__init__(config)
        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")
        self.class_template = self.jinja_env.get_template(f"class.{self.FILE_EXTENSION}.jinja2")
        self.suffix_template = self.jinja_env.get_template(f"suffix.{self.FILE_EXTENSION}.jinja2")
        self._reset()

    def _reset(self) -> None:
        self.used_names: set[str] = set()
        self.helpers: set[str] = set()
        self.blocks: list[str] = []
        self.class_names: dict[str, str] = {}  # node id -> class name
        self.alias_names: dict[str, str] = {}  # union node id -> alias name
        self.emitted_classes: list[str] = []

    def generate(self, root: RootSchema) -> str:
        """Generate the pydantic module for ``root``."""
        self._reset()
        self._index(root)
        self.used_names.add("BaseModel")
        self._assign_names(root)

        root_name = self._unique_name(snake_to_pascal_case(self.config.type_name) or "Schema")
        self._emit_class(root_name, root.fields, None)

        helpers = [self._render_helper(name) for name in HELPERS if name in self.helpers]
        prefix = self.prefix_template.render(import_lines=self._assemble_imports()).strip()
        suffix = self.suffix_template.render(class_names=self.emitted_classes).strip()
        return "\n\n\n".join([prefix, *helpers, *self.blocks]) + "\n\n\n" + suffix + "\n"

    def _use_helper(self, name: str) -> None:
        self.helpers.add(name)
        self.used_names.update(HELPERS[name])

    def _render_helper(self, name: str) -> str:
        template = self.jinja_env.get_template(f"{name}.{self.FILE_EXTENSION}.jinja2")
        return template.render(pattern=ISO_DATETIME.pattern).strip()

    def _assign_names(self, root: RootSchema) -> None:
        """Name every class, and every union targeted by a lazy reference, up front."""
        lazy_targets = {item.lazy_ref for item in iter_items(root) if item.lazy_ref}
        for item in iter_items(root):
            if item.lazy_ref:
                continue
            if item.kind == SchemaKind.OBJECT:
                self.class_names[item.id] = self._unique_name(snake_to_pascal_case(item.name) or "Object")
            elif item.kind == SchemaKind.UNION and item.id in lazy_targets:
                self.alias_names[item.id] = self._unique_name(snake_to_pascal_case(item.name) or "Union")

    def _unique_name(self, base: str) -> str:
        if base[0].isdigit():
            base = "_" + base
        name = base
        counter = 2
        while name in self.used_names or name in RESERVED_NAMES:
            name = f"{base}{counter}"
            counter += 1
        self.used_names.add(name)
        return name

    def _emit_class(self, class_name: str, fields: list[SchemaItem], description: str | None) -> None:
        shape: dict[str, SchemaItem] = {}
        for item in fields:
            shape[item.name] = item

        lines = []
        keys: set[str] = set()
        for index, (name, item) in enumerate(shape.items()):
            key = field_key(name, index)
            while key in keys:
                key = f"{key}_"
            keys.add(key)
            lines.append(self.render_field(item, key, name))

        self.blocks.append(
            self.class_template.render(
                class_name=class_name,
                docstring=escape_docstring(description) if description else "",
                fields=lines,
            ).rstrip()
        )
        self.emitted_classes.append(class_name)

    def render_field(self, item: SchemaItem, key: str, name: str) -> str:
        """Render one class attribute with array, optional and default applied in that order."""
        annotation = self.render_item(item, 1)
        if item.is_array:
            annotation = f"list[{annotation}]"

        has_default = False
        default = "None"
        if not item.required:
            annotation = f"Optional[{annotation}]"
            self.used_names.add("Optional")
            has_default = True
        if item.has_default:
            has_default = True
            default = self.format_default_value(item.default_value)

        if key != name:
            self.used_names.add("Field")
            arguments = [f"default={default}"] if has_default else []
            arguments.append(f"alias={quote(name)}")
            return f"{key}: {annotation} = Field({', '.join(arguments)})"
        if has_default:
            return f"{key}: {annotation} = {default}"
        return f"{key}: {annotation}"

    def render_item(self, item: SchemaItem, depth: int) -> str:
        if item.lazy_ref:
            return self._render_lazy(item)

        if item.kind == SchemaKind.OBJECT:
            class_name = self.class_names[item.id]
            self._emit_class(class_name, item.fields or [], item.description)
            return class_name

        if item.kind in self.TYPE_MAP:
            code = self.TYPE_MAP[item.kind]
            if code in self.TYPE_HELPERS:
                self._use_helper(self.TYPE_HELPERS[code])
        elif item.kind == SchemaKind.LITERAL:
            code = self._render_literal(item.literal_value)
        elif item.kind == SchemaKind.UNION:
            code = self._render_union(item, depth)
        else:
            code = "Any"
        self.used_names.add(code.split("[", 1)[0])

        if item.description:
            self.used_names.update({"Annotated", "Field"})
            code = f"Annotated[{code}, Field(description={quote(item.description)})]"

        if item.id in self.alias_names:
            alias = self.alias_names[item.id]
            self.blocks.append(f"{alias} = {code}")
            return alias
        return code

    def _render_lazy(self, item: SchemaItem) -> str:
        target = self.resolve_ref(item)
        if target is None:
            self.used_names.add("Any")
            return "Any"
        if target.id in self.class_names:
            return quote(self.class_names[target.id])
        if target.id in self.alias_names:
            return quote(self.alias_names[target.id])
        # Scalars and literals have no name of their own; inline a copy
        inline = SchemaItem(kind=target.kind, literal_value=target.literal_value, options=target.options)
        return self.render_item(inline, 1)

    def _render_union(self, item: SchemaItem, depth: int) -> str:
        options = item.options or []
        if len(options) < 2:
            return "Any"
        rendered = []
        for option in options:
            code = self.render_item(option, depth)
            if option.is_array:
                code = f"list[{code}]"
            rendered.append(code)
        return f"Union[{', '.join(rendered)}]"

    def _render_literal(self, value: Any) -> str:
        literal = f"Literal[{self.format_literal(value)}]"
        if isinstance(value, str) or not isinstance(value, (bool, int, float)):
            return literal
        # ``Literal[1]`` alone would also accept ``True``
        self._use_helper("exact_literal")
        self.used_names.update({"Literal", "BeforeValidator"})
        return f"Annotated[{literal}, BeforeValidator(_exact_literal({self.format_literal(value)}))]"

    @staticmethod
    def format_literal(value: Any) -> str:
        if isinstance(value, str):
            return quote(value)
        if isinstance(value, (bool, int, float)):
            return repr(value)
        return quote("")

    def format_default_value(self, value: Any) -> str:
        return repr(value)

    def _assemble_imports(self) -> list[str]:
        """Group used names by module; standard library first, then pydantic."""
        by_module: dict[str | None, list[str]] = collections.defaultdict(list)
        for name, module in self.IMPORT_SOURCES.items():
            if name in self.used_names:
                by_module[module].append(name)

        lines = [f"import {name}" for name in by_module[None]]
        for module in ("datetime", "typing"):
            if by_module[module]:
                lines.append(f"from {module} import {', '.join(sorted(by_module[module]))}")
        if lines:
            lines.append("")
        lines.append(f"from pydantic import {', '.join(sorted(by_module['pydantic']))}")
        return lines
