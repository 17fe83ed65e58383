"""Markdown to HTML rendering with frontmatter extraction and wiki-links."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from markdown_it import MarkdownIt
from mdit_py_plugins.front_matter import front_matter_plugin

from pickaxe.core.models import RenderError, RenderResult
from pickaxe.core.permalinks import PermalinkIndex
from pickaxe.transforms.links import MISSING_LINKS_KEY, wikilinks_plugin

logger = logging.getLogger(__name__)


class NoteRenderer:
    """Renders note text to HTML using a wiki-link aware Markdown dialect.

    The dialect is CommonMark plus tables and strikethrough, with:
    - single newlines rendered as line breaks
    - raw HTML passed through untouched
    - self-closing void elements, as required by JSX
    - a leading ``---`` fenced YAML frontmatter block
    - wiki-links resolved against a PermalinkIndex
    """

    def __init__(self, index: PermalinkIndex):
        self.index = index
        self.md = (
            MarkdownIt("commonmark", {"breaks": True, "html": True, "xhtmlOut": True})
            .enable("table")
            .enable("strikethrough")
            .use(front_matter_plugin)
            .use(wikilinks_plugin, index)
        )

    def render(self, text: str, path: Optional[Path] = None) -> RenderResult:
        """Render a note.

        Args:
            text: Raw note text, including any frontmatter block
            path: Source path, used only for error reporting

        Returns:
            RenderResult with the HTML body, frontmatter and unresolved link targets

        Raises:
            RenderError: if the frontmatter is invalid or rendering fails
        """
        path = Path(path) if path is not None else Path("<string>")
        missing_links: List[str] = []
        env = {MISSING_LINKS_KEY: missing_links}

        try:
            tokens = self.md.parse(text, env)
            html = self.md.renderer.render(tokens, self.md.options, env)
        except Exception as e:
            raise RenderError(path, f"Markdown conversion failed: {e}") from e

        frontmatter = self._parse_frontmatter(tokens, path)
        return RenderResult(html=html, frontmatter=frontmatter, missing_links=missing_links)

    def _parse_frontmatter(self, tokens, path: Path) -> Dict[str, Any]:
        """Parse the YAML frontmatter token, if the note has one.

        Returns:
            Frontmatter dict (empty if the note has none)
        """
        block = next((t for t in tokens if t.type == "front_matter"), None)
        if block is None or not block.content.strip():
            return {}

        try:
            frontmatter = yaml.safe_load(block.content)
        except yaml.YAMLError as e:
            raise RenderError(path, f"Invalid YAML frontmatter: {e}") from e

        if frontmatter is None:
            return {}
        if not isinstance(frontmatter, dict):
            raise RenderError(
                path, f"Frontmatter must be a mapping, got {type(frontmatter).__name__}"
            )
        return frontmatter
