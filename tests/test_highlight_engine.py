from __future__ import annotations

import asyncio

from bs4 import BeautifulSoup
from pygments.token import Comment, Keyword, Name, Number, Operator, Punctuation, String, Text

from jxr2prism.highlight.engine import (
    AsyncEngineAdapter,
    CodeElement,
    PygmentsHighlightEngine,
    prism_class,
    render_token,
)
from jxr2prism.model.document import split_lines


class TestPrismClass:
    def test_keywords_and_literals(self) -> None:
        assert prism_class(Keyword.Declaration, "public") == "keyword"
        assert prism_class(Keyword.Constant, "true") == "boolean"
        assert prism_class(Keyword.Constant, "null") == "keyword"
        assert prism_class(String.Double, '"x"') == "string"
        assert prism_class(String.Char, "'x'") == "char"
        assert prism_class(Number.Integer, "42") == "number"

    def test_comments_operators_names(self) -> None:
        assert prism_class(Comment.Multiline, "/* x */") == "comment"
        assert prism_class(Operator, "+") == "operator"
        assert prism_class(Punctuation, ";") == "punctuation"
        assert prism_class(Name.Decorator, "@Override") == "annotation punctuation"
        assert prism_class(Name.Function, "main") == "function"
        assert prism_class(Name.Class, "Foo") == "class-name"

    def test_plain_text_has_no_class(self) -> None:
        assert prism_class(Text, " ") is None
        assert prism_class(Name, "x") is None


class TestRenderToken:
    def test_escapes_markup(self) -> None:
        assert render_token("string", '"<a>"') == '<span class="token string">"&lt;a&gt;"</span>'
        assert render_token(None, "a & b") == "a &amp; b"

    def test_splits_span_at_newlines(self) -> None:
        out = render_token("comment", "/* a\n b */")
        assert out == '<span class="token comment">/* a</span>\n<span class="token comment"> b */</span>'

    def test_newline_only_token(self) -> None:
        assert render_token(None, "\n") == "\n"
        assert render_token("comment", "// x\n") == '<span class="token comment">// x</span>\n'


class TestPygmentsHighlightEngine:
    def test_is_available(self) -> None:
        assert PygmentsHighlightEngine().is_available()

    def test_preserves_line_count(self) -> None:
        text = "\n\nclass A {\n  /* one\n     two */\n}\n\n"
        markup = PygmentsHighlightEngine().highlight(text, "java")
        assert len(split_lines(markup)) == len(split_lines(text))

    def test_no_trailing_newline_added(self) -> None:
        markup = PygmentsHighlightEngine().highlight("int a;", "java")
        assert not markup.endswith("\n")

    def test_unknown_language_falls_back_to_text(self) -> None:
        engine = PygmentsHighlightEngine()
        markup = engine.highlight("x < y\n", "no-such-grammar")
        assert markup == "x &lt; y\n"

    def test_lexers_are_reused(self) -> None:
        engine = PygmentsHighlightEngine()
        engine.highlight("a", "java")
        first = engine._lexers["java"]
        engine.highlight("b", "java")
        assert engine._lexers["java"] is first

    def test_highlight_element_fills_markup(self) -> None:
        element = CodeElement(language="java", text='String s = "hi";')
        PygmentsHighlightEngine().highlight_element(element)
        assert element.class_name == "language-java"
        assert element.text == 'String s = "hi";'
        soup = BeautifulSoup(element.markup or "", "html.parser")
        assert "".join(s.get_text() for s in soup.select("span.token.string")) == '"hi"'


def test_async_adapter_runs_sync_engine() -> None:
    adapter = AsyncEngineAdapter(PygmentsHighlightEngine())
    element = CodeElement(language="java", text="int a = 1;")

    asyncio.run(adapter.highlight_element(element))

    assert adapter.name == "pygments"
    assert adapter.is_available()
    assert '<span class="token number">1</span>' in (element.markup or "")
