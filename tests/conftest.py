"""Shared fixtures for pickaxe tests."""

from pathlib import Path

import pytest

from pickaxe.core.permalinks import PermalinkIndex
from pickaxe.core.processor import TransformPipeline
from pickaxe.transforms.formatters import passthrough


@pytest.fixture
def notes_dir(tmp_path) -> Path:
    """A small note tree with frontmatter, wiki-links and code."""
    root = tmp_path / "notes"
    (root / "guides").mkdir(parents=True)
    (root / "node_modules" / "pkg").mkdir(parents=True)

    (root / "guides" / "1 - Intro.md").write_text("""---
title: Introduction
tags:
  - basics
---
# Intro

Read [[Setup]] first.

```
foo
```
""", encoding="utf-8")

    (root / "guides" / "Setup.md").write_text("""## Install

Run `pip install pickaxe`.

```python
print("hi")
```
""", encoding="utf-8")

    (root / "Glossary.md").write_text("### Terms\nline one\nline two\n", encoding="utf-8")
    (root / "node_modules" / "pkg" / "README.md").write_text("# ignored\n", encoding="utf-8")
    (root / "image.png").write_bytes(b"\x89PNG")
    return root


@pytest.fixture
def index() -> PermalinkIndex:
    return PermalinkIndex.from_permalinks([
        "/guides/1 - Intro",
        "/guides/Setup",
        "/Glossary",
    ])


@pytest.fixture
def pipeline(index) -> TransformPipeline:
    return TransformPipeline(index, formatter=passthrough())
