"""
Code emitter: renders an IR tree as validation-library source text.

1. Index the tree by id so lazy references can be resolved
2. Render the root's fields through the language backend
3. Optionally post-process the result with a formatter (Python output only)
"""

from __future__ import annotations

import structlog

from ..config import EmitterConfig
from ..formatters import format_code
from ..ir.nodes import RootSchema
from .backends import EmitterBackend, PydanticBackend, ZodBackend

logger = structlog.get_logger(__name__)

BACKENDS: dict[str, type[EmitterBackend]] = {
    "zod": ZodBackend,
    "pydantic": PydanticBackend,
}


class CodeEmitter:
    """Emits source code for a schema tree in the configured language."""

    def __init__(self, config: EmitterConfig | None = None):
        self.config = config or EmitterConfig()
        if self.config.language not in BACKENDS:
            raise ValueError(f"Unsupported language: {self.config.language}. Choose from: {', '.join(BACKENDS)}")
        self.backend = BACKENDS[self.config.language](self.config)

    @property
    def file_extension(self) -> str:
        return self.backend.FILE_EXTENSION

    def emit(self, root: RootSchema) -> str:
        """
        Generate source text for ``root``.

        Args:
            root: The schema tree

        Returns:
            Generated code as a string
        """
        code = self.backend.generate(root)
        if self.config.language == "pydantic":
            code = format_code(code, self.config.formatter)
        logger.debug("emitted schema", language=self.config.language, fields=len(root.fields))
        return code


def emit(root: RootSchema, config: EmitterConfig | None = None) -> str:
    """Generate source text for ``root``; see :meth:`CodeEmitter.emit`."""
    return CodeEmitter(config).emit(root)
