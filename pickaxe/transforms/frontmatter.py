"""Frontmatter transform factories for pickaxe.

Each factory returns a ``(frontmatter, note identity) -> frontmatter``
function that reshapes the mapping exported as the module's DATA. They are
chained with ``compose`` from the ``frontmatter_*`` config keys.
"""

import titlecase as tc
from typing import Any, Callable, Dict, List, Optional

from pickaxe.core.models import NoteIdentity

FrontmatterTransform = Callable[[Dict[str, Any], NoteIdentity], Dict[str, Any]]


def identity() -> FrontmatterTransform:
    """Create a transform that exports the note's frontmatter as written."""
    def transform(fm: Dict[str, Any], note: NoteIdentity) -> Dict[str, Any]:
        return dict(fm)
    return transform


def select(
    keep: Optional[List[str]] = None,
    drop: Optional[List[str]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> FrontmatterTransform:
    """Create a transform that limits exported keys and sets fixed ones.

    Args:
        keep: Export only these keys, in the note's own order
        drop: Never export these keys (cannot be combined with keep)
        extra: Keys set on every note, overriding the note's values

    Returns:
        A transform function

    Raises:
        ValueError: if both keep and drop are given
    """
    if keep is not None and drop is not None:
        raise ValueError("keep and drop are mutually exclusive")
    allowed = set(keep) if keep is not None else None
    blocked = set(drop or ())
    fixed = dict(extra or {})

    def transform(fm: Dict[str, Any], note: NoteIdentity) -> Dict[str, Any]:
        result = {
            key: value for key, value in fm.items()
            if (allowed is None or key in allowed) and key not in blocked
        }
        result.update(fixed)
        return result
    return transform


def annotate(title_case: bool = False) -> FrontmatterTransform:
    """Create a transform that records the note's derived title and ordinal.

    Existing "title" and "ordinal" keys win over derived values. The ordinal
    is only added when the file name carries one.

    Args:
        title_case: Convert the derived title to title case

    Returns:
        A transform function
    """
    def transform(fm: Dict[str, Any], note: NoteIdentity) -> Dict[str, Any]:
        result = fm.copy()
        title = tc.titlecase(note.title) if title_case else note.title
        result.setdefault('title', title)
        if note.ordinal is not None:
            result.setdefault('ordinal', note.ordinal)
        return result
    return transform


def compose(*transforms: FrontmatterTransform) -> FrontmatterTransform:
    """Chain frontmatter transforms left to right; no transforms means identity."""
    if not transforms:
        return identity()

    def transform(fm: Dict[str, Any], note: NoteIdentity) -> Dict[str, Any]:
        for t in transforms:
            fm = t(fm, note)
        return fm
    return transform
