"""Terminal and JSON reporters - live in infrastructure (they own the output libraries)."""

import json
from collections import defaultdict
from typing import TYPE_CHECKING, Optional, TextIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ux_commit_check.domain.constants import RULE_LABELS

if TYPE_CHECKING:
    from ux_commit_check.domain.entities import CheckResult
    from ux_commit_check.domain.protocols import GuidanceServiceProtocol
    from ux_commit_check.domain.rules import Violation


class TerminalCheckReporter:
    """Rich tables, one per rule, followed by a summary line."""

    def __init__(
        self,
        guidance_service: Optional["GuidanceServiceProtocol"] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.guidance_service = guidance_service
        self.console = console or Console()

    def _label(self, rule: int) -> str:
        if self.guidance_service is not None:
            return self.guidance_service.display_name(rule)
        return RULE_LABELS.get(rule, f"rule{rule}")

    def report(self, result: "CheckResult") -> None:
        if not result.violations:
            self.console.print(
                f"\n✅ {result.files_checked} file(s) checked, no UI/UX violations found.",
                style="bold green",
            )
            return
        for rule, violations in sorted(self.group_by_rule(result.violations).items()):
            table = Table(
                title=escape(f"[规则{rule}] {self._label(rule)} ({len(violations)})"),
                header_style="bold #007BFF",
                show_lines=True,
                title_justify="left",
            )
            table.add_column("Location", style="#00EEFF", no_wrap=True)
            table.add_column("Problem")
            table.add_column("Suggestion", style="dim")
            for violation in violations:
                table.add_row(escape(violation.location), escape(violation.message), escape(violation.suggestion))
            self.console.print(table)
        self.console.print(escape(self.summary(result)), style="bold red")

    @staticmethod
    def group_by_rule(violations: list["Violation"]) -> dict[int, list["Violation"]]:
        grouped: dict[int, list["Violation"]] = defaultdict(list)
        for violation in sorted(violations, key=lambda v: (v.rule, v.file, v.line)):
            grouped[violation.rule].append(violation)
        return dict(grouped)

    @staticmethod
    def summary(result: "CheckResult") -> str:
        text = (
            f"\n🚫 {len(result.violations)} violation(s) in {result.files_checked} checked file(s). "
            "Fix them, or adjust the whitelist in your ux-commit-check config."
        )
        if result.crashed_pairs:
            text += f" ({result.crashed_pairs} rule run(s) crashed; see log.)"
        return text


class JsonCheckReporter:
    """Machine-readable report: a JSON list of violation objects, stable order."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream

    @staticmethod
    def render(result: "CheckResult") -> str:
        ordered = sorted(result.violations, key=lambda v: (v.rule, v.file, v.line, v.symbol))
        return json.dumps([v.to_dict() for v in ordered], ensure_ascii=False, indent=2)

    def report(self, result: "CheckResult") -> None:
        text = self.render(result)
        if self.stream is not None:
            self.stream.write(text + "\n")
        else:
            print(text)
