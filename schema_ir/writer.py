"""
Atomic file writer for generated code and IR documents.

An interrupted write never leaves the target file half written.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

import structlog

from .config import OutputConfig, OutputMode
from .exceptions import OutputExistsError

logger = structlog.get_logger(__name__)


class AtomicWriter:
    """Writes files through a temporary file in the target directory.

    1. Write to a temporary file next to the target
    2. Atomically replace the target file

    Same directory means the final rename stays on one filesystem.
    """

    def write(self, path: Path, content: str) -> None:
        """Write ``content`` to ``path`` atomically.

        Raises:
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise
        logger.debug("wrote output", path=str(path), size=len(content))

    def write_if_not_exists(self, path: Path, content: str) -> bool:
        """Write ``content`` only if ``path`` does not exist yet.

        Returns:
            True once the file is written

        Raises:
            OutputExistsError: If the file already exists
        """
        if path.exists():
            raise OutputExistsError(f"Output file already exists: {path}. Use --force to overwrite.")
        self.write(path, content)
        return True


def write_output(path: Path, content: str, config: OutputConfig | None = None) -> None:
    """Write generated content honoring the output mode and atomicity settings."""
    config = config or OutputConfig()
    if config.mode == OutputMode.ERROR_IF_EXISTS and path.exists():
        raise OutputExistsError(f"Output file already exists: {path}. Use --force to overwrite.")

    if config.atomic_write:
        AtomicWriter().write(path, content)
    else:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
