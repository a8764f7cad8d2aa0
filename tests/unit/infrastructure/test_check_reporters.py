"""Unit tests for TerminalCheckReporter and JsonCheckReporter."""

import io
import json
from unittest.mock import MagicMock

from rich.console import Console

from ux_commit_check.domain.entities import CheckResult
from ux_commit_check.domain.rules import Violation
from ux_commit_check.infrastructure.reporters import JsonCheckReporter, TerminalCheckReporter


def _violation(rule: int, file: str, line: int, symbol: str = "s") -> Violation:
    return Violation(rule=rule, file=file, line=line, message=f"msg {rule}", suggestion="fix it", symbol=symbol)


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None), buffer


class TestTerminalCheckReporter:
    def test_clean_run(self) -> None:
        console, buffer = _console()
        TerminalCheckReporter(console=console).report(CheckResult(files_checked=3))
        assert "3 file(s) checked, no UI/UX violations found" in buffer.getvalue()

    def test_tables_per_rule_and_summary(self) -> None:
        console, buffer = _console()
        guidance = MagicMock()
        guidance.display_name.side_effect = lambda rule: f"label-{rule}"
        result = CheckResult(
            violations=[_violation(3, "src/b.js", 9), _violation(1, "src/a.jsx", 4), _violation(3, "src/a.js", 2)],
            files_checked=2,
        )
        TerminalCheckReporter(guidance_service=guidance, console=console).report(result)
        output = buffer.getvalue()
        assert "[规则1] label-1 (1)" in output
        assert "[规则3] label-3 (2)" in output
        assert output.index("src/a.js:2") < output.index("src/b.js:9")
        assert "3 violation(s) in 2 checked file(s)" in output

    def test_group_by_rule_sorts(self) -> None:
        grouped = TerminalCheckReporter.group_by_rule(
            [_violation(2, "b.js", 1), _violation(2, "a.js", 5), _violation(1, "z.js", 1)]
        )
        assert list(grouped) == [1, 2]
        assert [v.file for v in grouped[2]] == ["a.js", "b.js"]

    def test_summary_mentions_crashes(self) -> None:
        summary = TerminalCheckReporter.summary(CheckResult(violations=[_violation(1, "a.js", 1)], crashed_pairs=2))
        assert "2 rule run(s) crashed" in summary

    def test_markup_in_messages_is_escaped(self) -> None:
        console, buffer = _console()
        violation = Violation(rule=5, file="a.vue", line=1, message="New input component <el-input> [bold]x[/bold]", suggestion="")
        TerminalCheckReporter(console=console).report(CheckResult(violations=[violation], files_checked=1))
        assert "[bold]x[/bold]" in buffer.getvalue()


class TestJsonCheckReporter:
    def test_render_is_sorted_and_keeps_unicode(self) -> None:
        result = CheckResult(
            violations=[
                _violation(2, "b.js", 1),
                _violation(1, "b.js", 7, "wrong-loading-flag"),
                _violation(1, "b.js", 7, "loading-flag-not-bound"),
                Violation(rule=1, file="a.js", line=3, message="按钮", suggestion=""),
            ]
        )
        text = JsonCheckReporter.render(result)
        data = json.loads(text)
        assert [(d["rule"], d["file"], d["line"], d["symbol"]) for d in data] == [
            (1, "a.js", 3, ""),
            (1, "b.js", 7, "loading-flag-not-bound"),
            (1, "b.js", 7, "wrong-loading-flag"),
            (2, "b.js", 1, "s"),
        ]
        assert "按钮" in text
        assert set(data[0]) == {"rule", "symbol", "file", "line", "message", "suggestion"}

    def test_report_writes_to_stream(self) -> None:
        stream = io.StringIO()
        JsonCheckReporter(stream=stream).report(CheckResult())
        assert stream.getvalue() == "[]\n"
