"""Schema IR

A Python package for translating between an editor-facing schema tree
(the IR) and pydantic: build runtime models from the tree, emit zod or
pydantic source code for it, and import existing models back into it.
"""

__version__ = "0.1.0"

from .builder import SchemaBuilder, build, validate
from .config import BuilderConfig, EmitterConfig, FormatterConfig, OutputConfig, OutputMode
from .emitter import CodeEmitter, emit
from .exceptions import IRDecodeError, OutputExistsError, SchemaIRError, SchemaLoadError
from .importer import SchemaImporter, import_root, import_schema
from .ir import RootSchema, SchemaItem, SchemaKind, clone_item, create_default_item, create_root_schema

__all__ = [
    "SchemaBuilder",
    "CodeEmitter",
    "SchemaImporter",
    "build",
    "validate",
    "emit",
    "import_root",
    "import_schema",
    "BuilderConfig",
    "EmitterConfig",
    "FormatterConfig",
    "OutputConfig",
    "OutputMode",
    "RootSchema",
    "SchemaItem",
    "SchemaKind",
    "clone_item",
    "create_default_item",
    "create_root_schema",
    "SchemaIRError",
    "IRDecodeError",
    "SchemaLoadError",
    "OutputExistsError",
]
