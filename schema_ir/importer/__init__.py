"""
Runtime schema importer (runtime schema -> IR).
"""

from __future__ import annotations

from .importer import SAMPLE_KINDS, SchemaImporter, import_root, import_schema

__all__ = [
    "SAMPLE_KINDS",
    "SchemaImporter",
    "import_root",
    "import_schema",
]
