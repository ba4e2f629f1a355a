"""
Exceptions raised by the outer surfaces of schema_ir.

The builder, emitter and importer never raise for malformed trees or
unsupported schemas; these errors belong to file loading, module
resolution and output writing.
"""

from __future__ import annotations


class SchemaIRError(Exception):
    """Base class for all schema_ir errors."""

    pass


class IRDecodeError(SchemaIRError):
    """Raised when an IR document cannot be decoded.

    This can happen when:
    - A node is not a JSON object
    - ``fields`` or ``options`` is not a list
    - The root document is not an object
    """

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class SchemaLoadError(SchemaIRError):
    """Raised when a ``module:attribute`` reference cannot be resolved."""

    pass


class OutputExistsError(SchemaIRError):
    """Raised when an output file exists and overwriting was not requested."""

    pass
