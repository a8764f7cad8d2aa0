"""Domain models for rules and violations."""

from dataclasses import dataclass

__all__ = [
    "RuleEvaluator",
    "Violation",
]

from typing import TYPE_CHECKING, Protocol

from ux_commit_check.domain.constants import CRASH_SENTINEL_RULE

if TYPE_CHECKING:
    from ux_commit_check.domain.entities import SourceUnit


@dataclass(frozen=True)
class Violation:
    """A rule failure with location, message and remediation hint."""

    rule: int
    file: str
    line: int
    message: str
    suggestion: str
    symbol: str = ""
    """Sub-type of the failure, e.g. 'loading-flag-not-bound' for rule 1."""

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}"

    @classmethod
    def evaluator_crashed(cls, *, file: str, rule: int, error: BaseException) -> "Violation":
        """Sentinel (rule 0) recorded when a rule raised instead of finishing."""
        return cls(
            rule=CRASH_SENTINEL_RULE,
            file=file,
            line=0,
            message=f"rule {rule} crashed: {type(error).__name__}: {error}",
            suggestion="Re-run with --verbose and report the traceback.",
            symbol="evaluator-crashed",
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "rule": self.rule,
            "symbol": self.symbol,
            "file": self.file,
            "line": self.line,
            "message": self.message,
            "suggestion": self.suggestion,
        }


# -----------------------------------------------------------------------------
# Rule protocol: every evaluator is one-and-done per file. None means the rule
# did not apply (disabled, out of scope, whitelisted); [] means it applied and
# found nothing.
# -----------------------------------------------------------------------------


class RuleEvaluator(Protocol):
    """Protocol for a single UI/UX rule."""

    rule: int
    symbol: str
    description: str

    def evaluate(
        self, file_path: str, unit: "SourceUnit", diff_text: str
    ) -> list[Violation] | None:
        """Return violations for one file, or None when the rule does not apply."""
        ...
