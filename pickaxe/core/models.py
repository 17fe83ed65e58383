"""Data models for pickaxe."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import inflection


ORDINAL_SEPARATOR = " - "


class PipelineError(Exception):
    """A document-scoped failure. Captured as a NoteError, never fatal to a run."""

    def __init__(self, path: Path, message: str):
        super().__init__(message)
        self.path = Path(path)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        return f"{self.kind}: {self.path}: {self.message}"


class ReadError(PipelineError):
    """The source file is missing, unreadable or not valid UTF-8."""


class RenderError(PipelineError):
    """Markdown conversion or frontmatter extraction failed."""


class FormatError(PipelineError):
    """The generated module was rejected by the formatter."""


class WriteError(PipelineError):
    """Persisting a formatted module failed."""


class DiscoveryError(Exception):
    """The note tree or permalink index could not be built. Fatal to a run."""


class ConfigError(Exception):
    """The configuration file is invalid. Fatal to a run."""


@dataclass(frozen=True)
class NoteContext:
    """Cheapest possible note reference - just location.

    Content is read on demand by the pipeline, never held by discovery.
    """
    path: Path

    def read_raw(self) -> str:
        """Read file contents on demand."""
        return self.path.read_text(encoding='utf-8')


@dataclass(frozen=True)
class NoteIdentity:
    """Names derived from a note's file path."""
    name: str
    slug: str
    title: str
    ordinal: Optional[str] = None

    @classmethod
    def from_path(cls, path: Path) -> "NoteIdentity":
        """Derive slug, title and ordinal from a path.

        A base name of the form "<ordinal> - <title>" is split at the first
        separator only; anything after it stays in the title.
        """
        path = Path(path)
        stem = path.stem
        if ORDINAL_SEPARATOR in stem:
            ordinal, title = stem.split(ORDINAL_SEPARATOR, 1)
        else:
            ordinal, title = None, stem
        return cls(
            name=str(path),
            slug=inflection.parameterize(stem),
            title=title,
            ordinal=ordinal,
        )


@dataclass
class RenderResult:
    """HTML body and extracted frontmatter of one rendered note."""
    html: str
    frontmatter: Dict[str, Any] = field(default_factory=dict)
    missing_links: List[str] = field(default_factory=list)


@dataclass
class NoteOutput:
    """A successfully transformed note."""
    path: Path
    identity: NoteIdentity
    content: str
    frontmatter: Dict[str, Any] = field(default_factory=dict)
    missing_links: List[str] = field(default_factory=list)

    ok = True


@dataclass
class NoteError:
    """A note that failed at some pipeline stage."""
    path: Path
    error: PipelineError
    title: Optional[str] = None

    ok = False

    @property
    def kind(self) -> str:
        return self.error.kind


PipelineResult = Union[NoteOutput, NoteError]


@dataclass
class RunReport:
    """Every pipeline result of one run, in completion order."""
    results: List[PipelineResult] = field(default_factory=list)

    @property
    def successes(self) -> List[NoteOutput]:
        return [r for r in self.results if isinstance(r, NoteOutput)]

    @property
    def failures(self) -> List[NoteError]:
        return [r for r in self.results if isinstance(r, NoteError)]

    @property
    def ok(self) -> bool:
        return not self.failures

    def replace(self, failures: List[NoteError]) -> None:
        """Swap each failed note's earlier result for its failure.

        A note keeps exactly one result, so a later stage (such as writing)
        that fails turns the note's success into that failure.
        """
        by_path = {f.path: f for f in failures}
        self.results = [by_path.pop(r.path, r) for r in self.results]
        self.results.extend(by_path.values())
