"""Transform pipeline: turns one Markdown note into a formatted component module."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from pickaxe.core.models import (
    NoteContext,
    NoteError,
    NoteIdentity,
    NoteOutput,
    PipelineError,
    PipelineResult,
    ReadError,
    RenderError,
    RenderResult,
)
from pickaxe.core.permalinks import PermalinkIndex
from pickaxe.core.renderer import NoteRenderer
from pickaxe.core.template import DEFAULT_BLOCK_NAME, DEFAULT_CODE_IMPORT, build_module
from pickaxe.transforms.fixups import Fixup, postfix
from pickaxe.transforms.formatters import Formatter, prettier
from pickaxe.transforms.frontmatter import FrontmatterTransform, identity as fm_identity

logger = logging.getLogger(__name__)


class TransformPipeline:
    """Runs the per-note stages in order:

    read -> render -> derive identity -> template -> fixups -> format

    Each stage consumes the previous stage's output. A stage failure stops
    the note and is returned as a NoteError; nothing is written anywhere.
    """

    def __init__(
        self,
        index: PermalinkIndex,
        formatter: Optional[Formatter] = None,
        fixup: Optional[Fixup] = None,
        frontmatter_transform: Optional[FrontmatterTransform] = None,
        block_name: str = DEFAULT_BLOCK_NAME,
        code_import: str = DEFAULT_CODE_IMPORT,
        warn_on_missing_link: bool = True,
    ):
        """Initialize TransformPipeline.

        Args:
            index: Permalink index used to resolve wiki-links
            formatter: Final formatter (default: prettier)
            fixup: Text fixup chain (default: the full JSX fixup chain)
            frontmatter_transform: Transform applied before serializing frontmatter (default: unchanged)
            block_name: BEM block name used by the generated component
            code_import: Module the Code component is imported from
            warn_on_missing_link: Whether to warn about unresolved wiki-links
        """
        self.index = index
        self.renderer = NoteRenderer(index)
        self.formatter = formatter or prettier()
        self.fixup = fixup or postfix()
        self.frontmatter_transform = frontmatter_transform or fm_identity()
        self.block_name = block_name
        self.code_import = code_import
        self.warn_on_missing_link = warn_on_missing_link

    async def process(self, path: Path) -> PipelineResult:
        """Transform one note.

        Never raises for document-level failures: read, render and format
        errors come back as a NoteError.
        """
        path = Path(path)
        identity = NoteIdentity.from_path(path)
        try:
            content, rendered = await self._run(path, identity)
        except PipelineError as e:
            logger.debug("Failed %s: %s", path, e)
            return NoteError(path=path, error=e, title=identity.title)

        return NoteOutput(
            path=path,
            identity=identity,
            content=content,
            frontmatter=rendered.frontmatter,
            missing_links=rendered.missing_links,
        )

    async def _run(self, path: Path, identity: NoteIdentity):
        raw = await self.read(path)
        rendered = self.render(raw, path)

        if rendered.missing_links and self.warn_on_missing_link:
            for target in rendered.missing_links:
                logger.warning("%s: unresolved wiki-link [[%s]]", path, target)

        module = self.template(identity, rendered, path)
        fixed = self.fixup(module)
        logger.debug("Formatting %s", path)
        content = await self.formatter(fixed, path)
        return content, rendered

    async def read(self, path: Path) -> str:
        """Read a note's raw text without blocking the event loop.

        Raises:
            ReadError: if the file is missing, unreadable or not UTF-8
        """
        logger.debug("Reading %s", path)
        try:
            return await asyncio.to_thread(NoteContext(path).read_raw)
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(path, str(e)) from e

    def render(self, raw: str, path: Path) -> RenderResult:
        logger.debug("Rendering %s", path)
        return self.renderer.render(raw, path)

    def template(self, identity: NoteIdentity, rendered: RenderResult, path: Path) -> str:
        """Wrap a rendered note in its component module.

        Raises:
            RenderError: if the frontmatter cannot be serialized
        """
        frontmatter = self.frontmatter_transform(rendered.frontmatter.copy(), identity)
        try:
            return build_module(
                identity,
                rendered.html,
                frontmatter,
                block_name=self.block_name,
                code_import=self.code_import,
            )
        except (TypeError, ValueError) as e:
            raise RenderError(path, f"Cannot serialize frontmatter: {e}") from e
