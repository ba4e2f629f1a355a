"""
Code emission backends.

Contains language-specific code emitters.
"""

from __future__ import annotations

from .base import EmitterBackend
from .pydantic_backend import PydanticBackend
from .zod_backend import ZodBackend

__all__ = [
    "EmitterBackend",
    "PydanticBackend",
    "ZodBackend",
]
