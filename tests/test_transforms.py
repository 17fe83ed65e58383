"""Tests for transform factories: fixups, frontmatter and formatters."""

import sys
from pathlib import Path

import pytest

from pickaxe.core.models import FormatError, NoteIdentity
from pickaxe.transforms import fixups
from pickaxe.transforms.formatters import command, passthrough, prettier
from pickaxe.transforms.frontmatter import (
    annotate,
    compose,
    identity as fm_identity,
    select,
)


class TestFixups:
    """Tests for the JSX text fixups."""

    def test_class_names(self):
        assert fixups.fix_class_names('<a class="x">') == '<a className="x">'

    def test_class_names_leaves_classname_alone(self):
        assert fixups.fix_class_names('<a className="x">') == '<a className="x">'

    def test_entities(self):
        assert fixups.fix_entities("a &#x3D; b &#61; c &equals; d") == "a = b = c = d"
        assert fixups.fix_entities("x &#x26; y") == "x &#x26; y"

    def test_plain_code_block(self):
        text = fixups.fix_code("<pre><code>foo\n</code></pre>")
        assert text == '<Code language="none">{`foo\n`}</Code>'

    def test_language_code_block(self):
        text = fixups.fix_code('<pre><code className="language-python">x = 1\n</code></pre>')
        assert text == '<Code language="python">{`x = 1\n`}</Code>'

    def test_inline_code(self):
        text = fixups.fix_code("<p>run <code>ls</code> and <code>pwd</code></p>")
        assert text == (
            '<p>run <code className={bem("code", "inline")}>{`ls`}</code>'
            ' and <code className={bem("code", "inline")}>{`pwd`}</code></p>'
        )

    def test_language_block_needs_class_fixup_first(self):
        raw = '<pre><code class="language-python">x\n</code></pre>'
        # Without the className rewrite the language block is not recognized
        assert '<Code language="python">' not in fixups.fix_code(raw)
        assert '<Code language="python">' in fixups.postfix()(raw)

    def test_headers(self):
        text = fixups.fix_headers("<h2>A</h2><h3>B</h3><h4>C</h4><h5>D</h5><h6>E</h6>")
        assert '<h2 className={bem("header", "section")}>A</h2>' in text
        assert '<h3 className={bem("header", "subsection")}>B</h3>' in text
        assert '<h4 className={bem("header", "example")}>C</h4>' in text
        assert '<h5 className={bem("header", "summary")}>D</h5>' in text
        assert "<h6>E</h6>" in text

    def test_rendered_h1_removed(self):
        text = fixups.fix_headers('<h1 className={bem("header", "main")}>T</h1><h1>Body title</h1>\n<p>x</p>')
        assert "Body title" not in text
        assert '<h1 className={bem("header", "main")}>T</h1>' in text
        assert text.endswith("<p>x</p>")

    def test_postfix_full_chain(self):
        html = (
            '<h1>Title</h1>\n<h3>Sub</h3>\n'
            '<pre><code>foo\n</code></pre>\n'
            '<pre><code class="language-python">bar\n</code></pre>\n'
            '<p><a href="/x" class="internal">x</a> <code>y</code></p>\n'
        )
        text = fixups.postfix()(html)
        assert "<pre><code" not in text
        assert "</code></pre>" not in text
        assert "class=" not in text.replace("className=", "")
        assert '<Code language="none">{`foo\n`}</Code>' in text
        assert '<Code language="python">{`bar\n`}</Code>' in text
        assert '<h3 className={bem("header", "subsection")}>Sub</h3>' in text
        assert "<h1>" not in text

    def test_compose_order(self):
        chain = fixups.compose(lambda t: t + "a", lambda t: t + "b")
        assert chain("") == "ab"


class TestFrontmatterTransforms:
    """Tests for frontmatter transform factories."""

    @pytest.fixture
    def note(self):
        return NoteIdentity.from_path(Path("guides/2 - the art of war.md"))

    def test_identity(self, note):
        transform = fm_identity()
        fm = {"a": 1, "b": 2}
        result = transform(fm, note)
        assert result == {"a": 1, "b": 2}
        assert result is not fm

    def test_identity_empty(self, note):
        assert fm_identity()({}, note) == {}

    def test_select_keep(self, note):
        transform = select(keep=["a", "c"])
        assert list(transform({"c": 3, "b": 2, "a": 1}, note)) == ["c", "a"]

    def test_select_drop(self, note):
        transform = select(drop=["b"])
        assert transform({"a": 1, "b": 2, "c": 3}, note) == {"a": 1, "c": 3}

    def test_select_extra_overrides(self, note):
        transform = select(keep=["a"], extra={"a": 0, "x": 1})
        assert transform({"a": 1, "b": 2}, note) == {"a": 0, "x": 1}

    def test_select_keep_and_drop(self):
        with pytest.raises(ValueError):
            select(keep=["a"], drop=["b"])

    def test_select_leaves_input_alone(self, note):
        fm = {"a": 1, "b": 2}
        select(drop=["b"])(fm, note)
        assert fm == {"a": 1, "b": 2}

    def test_annotate(self, note):
        result = annotate()({"tags": ["x"]}, note)
        assert result == {"tags": ["x"], "title": "the art of war", "ordinal": "2"}

    def test_annotate_title_case(self, note):
        result = annotate(title_case=True)({}, note)
        assert result["title"] == "The Art of War"

    def test_annotate_keeps_existing_title(self, note):
        result = annotate()({"title": "Custom"}, note)
        assert result["title"] == "Custom"

    def test_annotate_without_ordinal(self):
        note = NoteIdentity.from_path(Path("Plain.md"))
        assert "ordinal" not in annotate()({}, note)

    def test_compose(self, note):
        transform = compose(select(drop=["draft"]), annotate())
        result = transform({"draft": True}, note)
        assert "draft" not in result
        assert result["ordinal"] == "2"

    def test_compose_nothing(self, note):
        assert compose()({"a": 1}, note) == {"a": 1}


class TestFormatters:
    """Tests for formatter factories."""

    @pytest.mark.asyncio
    async def test_passthrough(self):
        assert await passthrough()("text", Path("a.md")) == "text"

    @pytest.mark.asyncio
    async def test_command_pipes_text(self):
        upper = command([sys.executable, "-c", "import sys; sys.stdout.write(sys.stdin.read().upper())"])
        assert await upper("abc", Path("a.md")) == "ABC"

    @pytest.mark.asyncio
    async def test_command_failure_raises_format_error(self):
        failing = command([sys.executable, "-c", "import sys; sys.stderr.write('SyntaxError: bad'); sys.exit(2)"])
        with pytest.raises(FormatError) as exc:
            await failing("abc", Path("a.md"))
        assert "SyntaxError: bad" in str(exc.value)
        assert exc.value.path == Path("a.md")

    @pytest.mark.asyncio
    async def test_missing_executable_raises_format_error(self):
        formatter = command(["definitely-not-a-real-formatter-binary"])
        with pytest.raises(FormatError):
            await formatter("abc", Path("a.md"))

    def test_empty_command_rejected(self):
        with pytest.raises(ValueError):
            command([])

    def test_prettier_is_a_formatter(self):
        assert callable(prettier())
