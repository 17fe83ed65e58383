"""Optional persistence of generated modules.

Nothing in the pipeline writes to disk; callers invoke OutputWriter
explicitly once a run has produced its report.
"""

import asyncio
import logging
from pathlib import Path
from typing import Iterable, List

from pickaxe.core.models import NoteError, NoteOutput, WriteError

logger = logging.getLogger(__name__)


class OutputWriter:
    """Writes each generated module to ``<output_dir>/<slug><extension>``."""

    def __init__(self, output_dir: Path, extension: str = ".jsx"):
        self.output_dir = Path(output_dir)
        self.extension = extension if extension.startswith(".") else f".{extension}"

    def target(self, output: NoteOutput) -> Path:
        return self.output_dir / f"{output.identity.slug}{self.extension}"

    def write(self, output: NoteOutput) -> Path:
        """Write one module.

        Raises:
            WriteError: if the file cannot be written
        """
        path = self.target(output)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(output.content, encoding='utf-8')
        except OSError as e:
            raise WriteError(output.path, f"Cannot write {path}: {e}") from e
        logger.debug("Wrote %s -> %s", output.path, path)
        return path

    async def write_all(self, outputs: Iterable[NoteOutput]) -> List[NoteError]:
        """Write every module, returning the notes that could not be written.

        Notes whose slug collides with an earlier note are not written.
        """
        failures: List[NoteError] = []
        claimed = {}
        for output in sorted(outputs, key=lambda o: str(o.path)):
            target = self.target(output)
            if target in claimed:
                error = WriteError(output.path, f"{target} already written for {claimed[target]}")
                failures.append(NoteError(path=output.path, error=error, title=output.identity.title))
                continue
            claimed[target] = output.path
            try:
                await asyncio.to_thread(self.write, output)
            except WriteError as e:
                failures.append(NoteError(path=output.path, error=e, title=output.identity.title))
        return failures
