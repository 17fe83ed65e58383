"""Component module generation.

Wraps a rendered HTML body in a JSX component module:

    import blem from "blem"
    import Code from "@/components/Code"

    export const NAME = "<slug>"
    export const DATA = <frontmatter as JSON>
    export const COMPONENT = () => ...
"""

import datetime
import json
from typing import Any, Dict

from pickaxe.core.models import NoteIdentity

DEFAULT_BLOCK_NAME = "HowToGuide"
DEFAULT_CODE_IMPORT = "@/components/Code"


def render_title(title: str) -> str:
    return f'<div className={{bem("title")}}>{title}</div>'


def render_ordinal(ordinal: str) -> str:
    return f'<div className={{bem("index", "ordinal")}}>{ordinal}</div>'


def render_header(identity: NoteIdentity) -> str:
    """Render the generated header block: title, then the ordinal if present."""
    if identity.ordinal is not None:
        inner = f"{render_title(identity.title)}\n{render_ordinal(identity.ordinal)}\n"
    else:
        inner = render_title(identity.title)
    return f'<h1 className={{bem("header", "main")}}>{inner}</h1>'


def _json_default(value: Any) -> str:
    """Serialize the non-JSON values YAML can produce."""
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    if isinstance(value, datetime.date):
        return value.strftime('%Y-%m-%d')
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


def _json_key(key: Any) -> Any:
    if key is None or isinstance(key, (str, int, float, bool)):
        return key
    return _json_default(key)


def _normalize(value: Any, parents: tuple = ()) -> Any:
    """Make mapping keys JSON-serializable, at any depth.

    Raises:
        ValueError: if the value contains itself (YAML anchors can do this)
    """
    if isinstance(value, (dict, list)):
        if id(value) in parents:
            raise ValueError("Circular reference in frontmatter")
        parents = parents + (id(value),)
    if isinstance(value, dict):
        return {_json_key(k): _normalize(v, parents) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize(v, parents) for v in value]
    return value


def stringify_frontmatter(frontmatter: Dict[Any, Any]) -> str:
    """JSON-serialize frontmatter with 2-space indentation, keeping key order.

    Dates and other YAML scalars are stringified, both as values and as keys.
    """
    return json.dumps(_normalize(frontmatter), indent=2, ensure_ascii=False, default=_json_default)


def build_module(
    identity: NoteIdentity,
    html: str,
    frontmatter: Dict[str, Any],
    block_name: str = DEFAULT_BLOCK_NAME,
    code_import: str = DEFAULT_CODE_IMPORT,
) -> str:
    """Build the component module source for one note.

    The header block is followed immediately by the body, with no
    whitespace between them.
    """
    return f"""import blem from "blem"

import Code from "{code_import}"

// This file was automatically generated from:
// {identity.name}

export const NAME = "{identity.slug}"
export const DATA = {stringify_frontmatter(frontmatter)}
export const COMPONENT = () => {{
  const bem = blem("{block_name}")
  return (<article className={{bem("")}}>{render_header(identity)}{html}</article>)
}}

export default COMPONENT
"""
