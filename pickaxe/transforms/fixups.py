"""Textual fixups that turn rendered HTML into JSX.

Each fixup is a plain ``str -> str`` function applied to the whole module
text. They are regex substitutions, not an HTML rewrite: nested or malformed
markup may be rewritten incorrectly. Order matters, since later fixups
assume earlier rewrites have already happened (e.g. code fixups expect
``className=``).
"""

import re
from typing import Callable

Fixup = Callable[[str], str]

CLASS_ATTRIBUTE = re.compile(r'\bclass=')

# Escaped "=" entities. Other entities, "&#x26;" (an escaped "&") included, are left alone.
EQUALS_ENTITY = re.compile(r'&(?:#x3[dD]|#61|equals);')

PLAIN_BLOCK_OPEN = re.compile(r'<pre><code>')
BLOCK_CLOSE = re.compile(r'</code></pre>')
LANGUAGE_BLOCK_OPEN = re.compile(r'<pre><code className="language-([^"]*)">')
INLINE_CODE = re.compile(r'<code>(.*?)</code>')

RENDERED_H1 = re.compile(r'<h1>.*?</h1>\n?', re.DOTALL)

HEADING_CLASSES = {
    2: "section",
    3: "subsection",
    4: "example",
    5: "summary",
}


def compose(*fixups: Fixup) -> Fixup:
    """Chain fixups left to right."""
    def fixup(text: str) -> str:
        for f in fixups:
            text = f(text)
        return text
    return fixup


def fix_class_names(text: str) -> str:
    return CLASS_ATTRIBUTE.sub("className=", text)


def fix_entities(text: str) -> str:
    return EQUALS_ENTITY.sub("=", text)


def fix_plain_code_blocks(text: str) -> str:
    return PLAIN_BLOCK_OPEN.sub('<Code language="none">{`', text)


def fix_code_block_close(text: str) -> str:
    return BLOCK_CLOSE.sub("`}</Code>", text)


def fix_language_code_blocks(text: str) -> str:
    return LANGUAGE_BLOCK_OPEN.sub(r'<Code language="\1">{`', text)


def fix_inline_code(text: str) -> str:
    return INLINE_CODE.sub(r'<code className={bem("code", "inline")}>{`\1`}</code>', text)


fix_code = compose(
    fix_plain_code_blocks,
    fix_code_block_close,
    fix_language_code_blocks,
    fix_inline_code,
)


def drop_rendered_h1(text: str) -> str:
    """Remove plain <h1> elements; the generated header block replaces them."""
    return RENDERED_H1.sub("", text)


def fix_headers(text: str) -> str:
    for level, kind in HEADING_CLASSES.items():
        text = text.replace(f"<h{level}>", f'<h{level} className={{bem("header", "{kind}")}}>')
    return drop_rendered_h1(text)


def postfix() -> Fixup:
    """Create the full fixup chain, in the order the rewrites depend on."""
    return compose(
        fix_class_names,
        fix_entities,
        fix_code,
        fix_headers,
    )
