"""
Atomic file writer for generated DTO files.

Ensures that an interrupted write never leaves a half-written output file.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable
from pathlib import Path

from ..errors import OpenApiToDtoError

logger = logging.getLogger(__name__)


class OutputValidationError(OpenApiToDtoError):
    """Raised when rendered output fails the structural check before it is written."""


# Characters after which a "/" starts a regex literal rather than a division
_REGEX_PRECEDERS = set("(,=:[!&|?{};")


def _skip_quoted(content: str, start: int, quote: str) -> int:
    """Index just past the string literal opened at start."""
    i = start + 1
    while i < len(content):
        char = content[i]
        if char == "\\":
            i += 2
            continue
        if char == quote or (char == "\n" and quote != "`"):
            return i + 1
        i += 1
    return i


def _skip_regex(content: str, start: int) -> int:
    """Index just past the regex literal opened at start (flags included)."""
    i = start + 1
    in_class = False
    while i < len(content):
        char = content[i]
        if char == "\\":
            i += 2
            continue
        if char == "\n":
            return i
        if char == "[":
            in_class = True
        elif char == "]":
            in_class = False
        elif char == "/" and not in_class:
            i += 1
            while i < len(content) and content[i].isalpha():
                i += 1
            return i
        i += 1
    return i


def count_braces(content: str) -> tuple[int, int]:
    """
    Count the structural braces of TypeScript source.

    Braces inside string, template and regex literals and inside comments
    are not counted.

    Returns:
        (open braces, close braces)
    """
    open_braces = close_braces = 0
    previous = ""
    i = 0
    while i < len(content):
        char = content[i]
        if char in "'\"`":
            i = _skip_quoted(content, i, char)
            previous = char
            continue
        if content.startswith("//", i):
            end = content.find("\n", i)
            i = len(content) if end == -1 else end
            continue
        if content.startswith("/*", i):
            end = content.find("*/", i + 2)
            i = len(content) if end == -1 else end + 2
            continue
        if char == "/" and (previous == "" or previous in _REGEX_PRECEDERS):
            i = _skip_regex(content, i)
            previous = "/"
            continue

        if char == "{":
            open_braces += 1
        elif char == "}":
            close_braces += 1
        if not char.isspace():
            previous = char
        i += 1
    return open_braces, close_braces


def check_balanced_braces(content: str) -> None:
    """Cheap structural check of rendered TypeScript.

    Raises:
        OutputValidationError: If braces are unbalanced
    """
    open_braces, close_braces = count_braces(content)
    if open_braces != close_braces:
        raise OutputValidationError(f"Rendered output has unbalanced braces: {open_braces} open, {close_braces} close")


class AtomicWriter:
    """Writes files through a temporary sibling and an atomic rename.

    1. Write to a temporary file in the target directory
    2. Validate the content
    3. Replace the target file
    """

    def __init__(self, validate: Callable[[str], None] | None = None):
        """
        Initialize the writer.

        Args:
            validate: Check run on the content before the rename (default: brace balance)
        """
        self._validate = validate or check_balanced_braces

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """
        Write content to path atomically, creating parent directories.

        Raises:
            OutputValidationError: If validation fails (the target is left untouched)
            OSError: If file operations fail
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory so the rename stays on one filesystem
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
            if validate:
                self._validate(content)
            temp_path.replace(path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

        logger.debug("Wrote %s (%d bytes)", path, len(content.encode("utf-8")))


def write_file(path: str | Path, content: str) -> Path:
    """Write one generated file atomically and return its path."""
    path = Path(path)
    AtomicWriter().write(path, content)
    return path
