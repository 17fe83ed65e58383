"""Permalink index mapping note identifiers to canonical link targets."""

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from pickaxe.core.discovery import VaultDiscovery
from pickaxe.core.models import DiscoveryError

logger = logging.getLogger(__name__)


def path_to_permalink(path: Path, root: Path) -> str:
    """Convert a file path to its permalink: "/" + relative path, suffix dropped.

    A trailing "index" segment collapses onto its directory.
    """
    rel = Path(path).relative_to(root).with_suffix("").as_posix()
    if rel == "index":
        return "/"
    if rel.endswith("/index"):
        rel = rel[: -len("/index")]
    return "/" + rel


@dataclass(frozen=True)
class PermalinkIndex:
    """Immutable index of every permalink in a note corpus.

    Built once before any note is processed and shared read-only by all
    pipeline invocations.
    """

    permalinks: Tuple[str, ...]
    by_name: Mapping[str, str]

    @classmethod
    def from_permalinks(cls, permalinks: Iterable[str]) -> "PermalinkIndex":
        """Build an index from permalink strings.

        When two notes share a base name, the first in sorted order wins
        short-name lookups.
        """
        ordered = tuple(sorted(set(permalinks)))
        by_name = {}
        for permalink in ordered:
            name = permalink.rsplit("/", 1)[-1]
            if name in by_name:
                logger.debug("Ambiguous note name %r: keeping %s over %s", name, by_name[name], permalink)
                continue
            by_name[name] = permalink
        return cls(ordered, MappingProxyType(by_name))

    @classmethod
    def from_paths(cls, paths: Iterable[Path], root: Path) -> "PermalinkIndex":
        """Build an index from note file paths under root."""
        return cls.from_permalinks(path_to_permalink(p, root) for p in paths)

    @classmethod
    def build(cls, discovery: VaultDiscovery) -> "PermalinkIndex":
        """Walk a corpus and index every note in it.

        Raises:
            DiscoveryError: if the corpus cannot be walked
        """
        paths = discovery.discover_all()
        index = cls.from_paths(paths, discovery.root)
        logger.info("Indexed %d permalinks under %s", len(index), discovery.root)
        return index

    def __len__(self) -> int:
        return len(self.permalinks)

    def __contains__(self, permalink: object) -> bool:
        return permalink in self.permalinks

    def resolve(self, target: str) -> Optional[str]:
        """Resolve a wiki-link target using the short path format.

        A target may be a bare note name ("Note") or a path relative to the
        corpus root ("folder/Note"); returns None if nothing matches.
        """
        target = target.strip().strip("/")
        if not target:
            return None
        if target.lower().endswith(".md"):
            target = target[:-3]

        exact = "/" + target
        if exact in self.permalinks:
            return exact

        if "/" not in target:
            return self.by_name.get(target)

        suffix = "/" + target
        for permalink in self.permalinks:
            if permalink.endswith(suffix):
                return permalink
        return None


def build_index(root: Path, ignore=None, extensions=None) -> PermalinkIndex:
    """Build a PermalinkIndex for the notes under root."""
    root = Path(root)
    if not root.is_dir():
        raise DiscoveryError(f"Permalink root not found: {root}")
    return PermalinkIndex.build(VaultDiscovery(root, ignore=ignore, extensions=extensions))
