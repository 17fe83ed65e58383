"""
pickaxe - Turn a tree of Markdown notes into JSX component modules

Each note is rendered with a wiki-link aware Markdown dialect, wrapped in a
generated component, rewritten into JSX idioms and formatted:
- YAML frontmatter extraction
- Wiki-link resolution against a permalink index
- Code block and heading rewriting
- Bounded-concurrency batch processing
"""

__version__ = "0.1.0"

from pickaxe.core.models import (
    DiscoveryError,
    FormatError,
    NoteError,
    NoteIdentity,
    NoteOutput,
    PipelineError,
    ReadError,
    RenderError,
    RunReport,
)
from pickaxe.core.discovery import VaultDiscovery
from pickaxe.core.permalinks import PermalinkIndex
from pickaxe.core.processor import TransformPipeline
from pickaxe.core.coordinator import Coordinator

__all__ = [
    "DiscoveryError",
    "FormatError",
    "NoteError",
    "NoteIdentity",
    "NoteOutput",
    "PipelineError",
    "ReadError",
    "RenderError",
    "RunReport",
    "VaultDiscovery",
    "PermalinkIndex",
    "TransformPipeline",
    "Coordinator",
]
