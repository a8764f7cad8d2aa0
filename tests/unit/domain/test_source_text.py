"""Unit tests for SourceTextStripper."""

from ux_commit_check.domain.source_text import SourceTextStripper, StripMode


class TestSourceTextStripper:
    def setup_method(self) -> None:
        self.stripper = SourceTextStripper()

    def test_code_mode_blanks_comments_and_string_contents(self) -> None:
        text = "const a = 'post'; // request.post()\n/* fetch() */ b();"
        stripped = self.stripper.strip(text, StripMode.CODE)
        assert len(stripped) == len(text)
        assert "post" not in stripped
        assert "fetch" not in stripped
        assert "const a = '    ';" in stripped
        assert stripped.endswith("b();")

    def test_line_structure_is_preserved(self) -> None:
        text = "a();\n/* one\ntwo */\nb();"
        stripped = self.stripper.strip_code(text)
        assert stripped.count("\n") == text.count("\n")
        assert stripped.splitlines()[3] == "b();"

    def test_comments_mode_keeps_strings(self) -> None:
        text = "const url = 'http://example.com'; // trailing"
        stripped = self.stripper.strip_comments(text)
        assert "'http://example.com'" in stripped
        assert "trailing" not in stripped

    def test_escaped_quote_does_not_end_string(self) -> None:
        text = "const s = 'it\\'s // not a comment'; c();"
        stripped = self.stripper.strip_comments(text)
        assert stripped == text

    def test_template_literal_spans_lines(self) -> None:
        text = "const t = `line1\n// still string`;\nd();"
        stripped = self.stripper.strip_code(text)
        assert "still" not in stripped
        assert stripped.splitlines()[2] == "d();"

    def test_unterminated_comment_runs_to_end(self) -> None:
        stripped = self.stripper.strip_code("x(); /* open")
        assert stripped.rstrip() == "x();"

    def test_markup_mode_only_removes_html_comments(self) -> None:
        text = "<div>\n<!-- <Input /> -->\n<span>'text'</span>\n</div>"
        stripped = self.stripper.strip(text, StripMode.MARKUP)
        assert "<Input" not in stripped
        assert "<span>'text'</span>" in stripped
        assert len(stripped) == len(text)
