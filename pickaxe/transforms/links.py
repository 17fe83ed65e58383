"""Wiki-link support for the Markdown renderer.

Adds an inline rule to markdown-it that recognises:

- ``[[Target]]`` and ``[[Target|Alias]]``
- ``[[Target#Heading]]`` and ``[[#Heading]]``
- ``![[image.png]]`` embeds

Targets are resolved against a PermalinkIndex using the short path format,
so ``[[Note]]`` links to ``/any/folder/Note``.
"""

from pathlib import PurePosixPath
from typing import Optional

import inflection
from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.rules_inline import StateInline

from pickaxe.core.permalinks import PermalinkIndex

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.gif', '.webp', '.svg', '.avif', '.bmp')

MISSING_LINKS_KEY = "missing_links"


def is_image(target: str) -> bool:
    return target.lower().endswith(IMAGE_EXTENSIONS)


def heading_anchor(heading: str) -> str:
    return inflection.parameterize(heading)


def split_target(raw: str):
    """Split the inside of ``[[...]]`` into (target, heading, alias)."""
    target, _, alias = raw.partition("|")
    target, _, heading = target.partition("#")
    return target.strip(), heading.strip(), alias.strip() or None


def wikilinks_plugin(md: MarkdownIt, index: PermalinkIndex) -> None:
    """Register the wiki-link inline rule and its renderer on ``md``.

    Unresolved targets are appended to ``env["missing_links"]`` during
    rendering when the caller supplies that list.
    """

    def wikilink(state: StateInline, silent: bool) -> bool:
        src = state.src
        pos = state.pos

        if src.startswith("![[", pos):
            embed = True
            start = pos + 3
        elif src.startswith("[[", pos):
            embed = False
            start = pos + 2
        else:
            return False

        end = src.find("]]", start, state.posMax)
        if end == -1:
            return False
        inner = src[start:end]
        if not inner.strip() or "\n" in inner or "[" in inner:
            return False

        if not silent:
            token = state.push("wikilink", "", 0)
            token.content = inner
            token.meta = {"embed": embed}
        state.pos = end + 2
        return True

    def render_wikilink(self, tokens, idx, options, env) -> str:
        token = tokens[idx]
        target, heading, alias = split_target(token.content)
        href = _resolve(index, target, env)

        if token.meta.get("embed") and is_image(target):
            alt = alias or PurePosixPath(target).stem
            return f'<img src="{escapeHtml(href)}" alt="{escapeHtml(alt)}" class="internal" />'

        if heading:
            href = f"{href}#{heading_anchor(heading)}" if target else f"#{heading_anchor(heading)}"

        if alias:
            text = alias
        elif target and heading:
            text = f"{target}#{heading}"
        else:
            text = target or heading

        css = "internal" if not target or index.resolve(target) else "internal new"
        return f'<a href="{escapeHtml(href)}" class="{css}">{escapeHtml(text)}</a>'

    md.inline.ruler.before("link", "wikilink", wikilink)
    md.add_render_rule("wikilink", render_wikilink)


def _resolve(index: PermalinkIndex, target: str, env: Optional[dict]) -> str:
    if not target:
        return ""
    permalink = index.resolve(target)
    if permalink is not None:
        return permalink
    if env is not None and not is_image(target):
        missing = env.get(MISSING_LINKS_KEY)
        if missing is not None and target not in missing:
            missing.append(target)
    return "/" + target.strip("/")
