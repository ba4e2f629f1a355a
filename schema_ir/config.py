"""
Configuration for the schema builder and code emitters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        atomic_write: Whether to write through a temporary file
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    atomic_write: bool = True


@dataclass
class FormatterConfig:
    """Configuration for post-processing generated Python code."""

    # Whether formatting is enabled
    enabled: bool = False

    # "black" or "ruff"
    tool: str = "black"

    # Line length for the formatter
    line_length: int = 100

    # Python version target (e.g., "py312", "py313")
    target_version: str = "py312"


@dataclass
class BuilderConfig:
    """Configuration options for runtime schema building."""

    # Class name of the top-level model
    root_model_name: str = "Schema"

    # Class name used for nested objects whose node has no name
    anonymous_model_name: str = "Object"

    @staticmethod
    def from_dict(d: dict) -> BuilderConfig:
        """Create a config from a dictionary."""
        config = BuilderConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config


@dataclass
class EmitterConfig:
    """Configuration options for code emission."""

    # Target: "zod" (TypeScript) or "pydantic" (Python)
    language: str = "zod"

    # Name of the exported schema constant (zod)
    export_name: str = "schema"

    # Name of the inferred type alias (zod) or of the root class (pydantic)
    type_name: str = "Schema"

    # Indentation unit for nested objects
    indent: str = "  "

    # Formatter configuration (pydantic output only)
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    # Output configuration
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> EmitterConfig:
        """Create a config from a dictionary."""
        config = EmitterConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    atomic_write=v.get("atomic_write", True),
                )
            elif hasattr(config, k):
                setattr(config, k, v)
        return config
