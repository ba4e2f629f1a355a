"""
Code emitter (IR -> validation-library source text).
"""

from __future__ import annotations

from .backends import EmitterBackend, PydanticBackend, ZodBackend
from .emitter import BACKENDS, CodeEmitter, emit

__all__ = [
    "BACKENDS",
    "CodeEmitter",
    "EmitterBackend",
    "PydanticBackend",
    "ZodBackend",
    "emit",
]
