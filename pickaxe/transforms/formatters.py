"""Formatter factories.

A formatter is an async callable ``(text, path) -> formatted text`` that
raises FormatError when the text is not valid for it.
"""

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence

from pickaxe.core.models import FormatError

logger = logging.getLogger(__name__)

Formatter = Callable[[str, Path], Awaitable[str]]

PRETTIER_COMMAND = ("prettier", "--parser", "typescript", "--no-semi")


def passthrough() -> Formatter:
    """Create a formatter that returns text unchanged.

    Returns:
        A formatter (text, path) -> text
    """
    async def formatter(text: str, path: Path) -> str:
        return text
    return formatter


def command(argv: Sequence[str], encoding: str = "utf-8") -> Formatter:
    """Create a formatter that pipes text through an external command.

    The command reads source on stdin and writes formatted source to stdout.
    A non-zero exit is reported as a FormatError carrying stderr.

    Args:
        argv: Command and arguments
        encoding: Text encoding used on both pipes

    Returns:
        A formatter (text, path) -> formatted text
    """
    argv = list(argv)
    if not argv:
        raise ValueError("Formatter command must not be empty")

    async def formatter(text: str, path: Path) -> str:
        logger.debug("Formatting %s with %s", path, argv[0])
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise FormatError(path, f"Cannot run formatter {argv[0]!r}: {e}") from e

        stdout, stderr = await proc.communicate(text.encode(encoding))
        if proc.returncode != 0:
            detail = stderr.decode(encoding, errors="replace").strip()
            raise FormatError(path, detail or f"{argv[0]} exited with status {proc.returncode}")
        return stdout.decode(encoding)
    return formatter


def prettier(argv: Optional[Sequence[str]] = None) -> Formatter:
    """Create a formatter that runs prettier with the TypeScript parser."""
    return command(argv or PRETTIER_COMMAND)
