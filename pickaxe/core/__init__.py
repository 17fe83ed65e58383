"""Core components for pickaxe."""

from pickaxe.core.models import (
    ConfigError,
    DiscoveryError,
    FormatError,
    NoteContext,
    NoteError,
    NoteIdentity,
    NoteOutput,
    PipelineError,
    PipelineResult,
    ReadError,
    RenderError,
    RenderResult,
    RunReport,
    WriteError,
)
from pickaxe.core.discovery import VaultDiscovery
from pickaxe.core.permalinks import PermalinkIndex, build_index
from pickaxe.core.renderer import NoteRenderer
from pickaxe.core.processor import TransformPipeline
from pickaxe.core.coordinator import Coordinator, run_all
from pickaxe.core.writer import OutputWriter

__all__ = [
    "ConfigError",
    "DiscoveryError",
    "FormatError",
    "NoteContext",
    "NoteError",
    "NoteIdentity",
    "NoteOutput",
    "PipelineError",
    "PipelineResult",
    "ReadError",
    "RenderError",
    "RenderResult",
    "RunReport",
    "WriteError",
    "VaultDiscovery",
    "PermalinkIndex",
    "build_index",
    "NoteRenderer",
    "TransformPipeline",
    "Coordinator",
    "run_all",
    "OutputWriter",
]
