"""
Base class for code emission backends.

Defines the interface that all language-specific backends must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import jinja2

from ...config import EmitterConfig
from ...ir.nodes import RootSchema, SchemaItem, SchemaKind, index_items


class EmitterBackend(ABC):
    """Abstract base class for code emission backends."""

    # Type mapping from scalar kinds to language expressions
    TYPE_MAP: dict[SchemaKind, str] = {}

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    def __init__(self, config: EmitterConfig):
        """
        Initialize the backend.

        Args:
            config: Code emission configuration
        """
        self.config = config
        self.items: dict[str, SchemaItem] = {}
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            autoescape=False,
        )

    @abstractmethod
    def generate(self, root: RootSchema) -> str:
        """
        Generate source text for a schema tree.

        Args:
            root: The schema tree

        Returns:
            Generated code as a string
        """

    @abstractmethod
    def render_item(self, item: SchemaItem, depth: int) -> str:
        """
        Render the expression for a single node, without field wrapping.

        Args:
            item: The node
            depth: Nesting depth of the node, used for indentation

        Returns:
            Language-specific expression
        """

    @abstractmethod
    def format_default_value(self, value: Any) -> str:
        """
        Format a default value as a literal of the target language.

        Args:
            value: The default value (JSON-serializable)

        Returns:
            Formatted literal
        """

    def _index(self, root: RootSchema) -> None:
        """Build the id lookup used to resolve lazy references."""
        self.items = index_items(root)

    def resolve_ref(self, item: SchemaItem) -> SchemaItem | None:
        """Follow a lazy reference (and chains of them) to a concrete node."""
        seen = {item.id}
        target = self.items.get(item.lazy_ref or "")
        while target is not None and target.lazy_ref:
            if target.id in seen:
                return None
            seen.add(target.id)
            target = self.items.get(target.lazy_ref)
        return target
