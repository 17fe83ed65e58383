"""Note discovery: lazily walks a directory tree for Markdown files."""

import fnmatch
import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional

from pickaxe.core.models import DiscoveryError

logger = logging.getLogger(__name__)

DEFAULT_IGNORE = ["node_modules/**"]


class VaultDiscovery:
    """Finds note files under a root directory."""

    def __init__(
        self,
        root: Path,
        ignore: Optional[List[str]] = None,
        extensions: Optional[List[str]] = None,
    ):
        """Initialize VaultDiscovery.

        Args:
            root: Directory to walk
            ignore: Glob patterns, relative to root, of paths to skip.
                    A pattern also matches at any depth below root.
            extensions: File suffixes treated as notes (default: .md)
        """
        self.root = Path(root)
        self.ignore = list(DEFAULT_IGNORE if ignore is None else ignore)
        self.extensions = {e.lower() for e in (extensions or [".md"])}

    def iter_notes(self) -> Iterator[Path]:
        """Yield note paths one at a time, in a stable order.

        Raises:
            DiscoveryError: if the root, or any directory below it, cannot be read
        """
        if not self.root.is_dir():
            raise DiscoveryError(f"Root directory not found: {self.root}")

        def on_error(err: OSError) -> None:
            raise DiscoveryError(f"Cannot read {err.filename}: {err.strerror}") from err

        for dirpath, dirnames, filenames in os.walk(self.root, onerror=on_error):
            current = Path(dirpath)
            kept = []
            for d in sorted(dirnames):
                if self.is_ignored(current / d, is_dir=True):
                    logger.debug("Skipping ignored directory %s", current / d)
                    continue
                kept.append(d)
            dirnames[:] = kept

            for name in sorted(filenames):
                path = current / name
                if path.suffix.lower() not in self.extensions:
                    continue
                if self.is_ignored(path):
                    continue
                yield path

    def discover_all(self) -> List[Path]:
        """Find all note paths eagerly."""
        return list(self.iter_notes())

    def is_ignored(self, path: Path, is_dir: bool = False) -> bool:
        """Check a path against the ignore patterns.

        Directories are tested with a trailing slash so that "dir/**" prunes
        the whole subtree.
        """
        rel = path.relative_to(self.root).as_posix()
        if is_dir:
            rel += "/"
        for pattern in self.ignore:
            if fnmatch.fnmatchcase(rel, pattern) or fnmatch.fnmatchcase(rel, f"*/{pattern}"):
                return True
        return False
