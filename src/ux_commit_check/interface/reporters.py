"""Interface for check reporting."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ux_commit_check.domain.entities import CheckResult


class CheckReporter(Protocol):
    """Protocol for reporting check results."""

    def report(self, result: "CheckResult") -> None:
        """Report check results to the user."""
        ...
