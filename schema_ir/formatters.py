"""
Post-processing formatters for generated Python code.
"""

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod

import structlog

from .config import FormatterConfig

logger = structlog.get_logger(__name__)


class Formatter(ABC):
    """Abstract base class for code formatters."""

    @abstractmethod
    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format the given code.

        Unavailable tools and invalid input leave the code unchanged.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the formatter's tool is installed."""


class BlackFormatter(Formatter):
    """Formats through black's library API."""

    def __init__(self):
        self._black = None
        self._available = None

    def is_available(self) -> bool:
        if self._available is None:
            try:
                import black

                self._black = black
                self._available = True
            except ImportError:
                self._available = False
        return self._available

    def format(self, code: str, config: FormatterConfig) -> str:
        if not self.is_available():
            logger.warning("black is not installed, leaving code unformatted")
            return code

        black = self._black
        target_versions = set()
        version = getattr(black.TargetVersion, config.target_version.upper(), None) if config.target_version else None
        if version is not None:
            target_versions.add(version)

        mode = black.Mode(target_versions=target_versions, line_length=config.line_length)
        try:
            return black.format_str(code, mode=mode)
        except black.InvalidInput as e:
            logger.warning("black rejected generated code", error=str(e))
            return code


class RuffFormatter(Formatter):
    """Formats by piping code through ``ruff format``."""

    def __init__(self):
        self._available = None

    def is_available(self) -> bool:
        if self._available is None:
            try:
                result = subprocess.run(["ruff", "--version"], capture_output=True, text=True, timeout=5)
                self._available = result.returncode == 0
            except (subprocess.SubprocessError, FileNotFoundError):
                self._available = False
        return self._available

    def format(self, code: str, config: FormatterConfig) -> str:
        if not self.is_available():
            logger.warning("ruff is not installed, leaving code unformatted")
            return code

        cmd = ["ruff", "format", "--stdin-filename", "schema.py"]
        if config.line_length:
            cmd.extend(["--line-length", str(config.line_length)])
        if config.target_version:
            cmd.extend(["--target-version", config.target_version])

        try:
            result = subprocess.run(cmd, input=code, capture_output=True, text=True, timeout=30)
        except subprocess.SubprocessError as e:
            logger.warning("ruff format failed", error=str(e))
            return code
        if result.returncode != 0:
            logger.warning("ruff rejected generated code", stderr=result.stderr.strip())
            return code
        return result.stdout


FORMATTERS: dict[str, type[Formatter]] = {
    "black": BlackFormatter,
    "ruff": RuffFormatter,
}


def get_formatter(tool: str) -> Formatter:
    """
    Look up a formatter by tool name.

    Raises:
        ValueError: If ``tool`` is not a known formatter
    """
    if tool not in FORMATTERS:
        raise ValueError(f"Unknown formatter: {tool}. Choose from: {', '.join(FORMATTERS)}")
    return FORMATTERS[tool]()


def format_code(code: str, config: FormatterConfig) -> str:
    """Format ``code`` with the configured tool when formatting is enabled."""
    if not config.enabled:
        return code
    return get_formatter(config.tool).format(code, config)
