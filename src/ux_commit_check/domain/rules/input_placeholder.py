"""Rule 5: newly added form inputs must carry a placeholder."""

from typing import TYPE_CHECKING

from ux_commit_check.domain.constants import NON_LEAF_COMPONENTS, PLACEHOLDERLESS_INPUT_TYPES
from ux_commit_check.domain.diff import DiffView
from ux_commit_check.domain.rules import Violation

if TYPE_CHECKING:
    from ux_commit_check.domain.config import RuleSettings
    from ux_commit_check.domain.entities import SourceUnit
    from ux_commit_check.domain.markup import MarkupElement


class InputPlaceholderRule:
    """Rule 5: configured input components need one of the placeholder attributes."""

    rule: int = 5
    symbol: str = "missing-placeholder"
    description: str = "Newly added form inputs must show placeholder text."

    def __init__(self, settings: "RuleSettings") -> None:
        self._settings = settings

    def evaluate(self, file_path: str, unit: "SourceUnit", diff_text: str) -> list[Violation] | None:
        """One violation per newly added input element without a placeholder."""
        if not self._settings.enabled or self._settings.is_path_whitelisted(file_path):
            return None
        if unit.root is None and unit.markup_region is None:
            return None
        diff = DiffView(diff_text)
        if not diff.is_new_file and not diff.mentions_any(("<",)):
            return None

        violations: list[Violation] = []
        for element in unit.elements:
            if not self.is_input_component(element.name):
                continue
            if element.has_spread or self._is_exempt_native_input(element):
                continue
            if not diff.touches(element.line, element.end_line):
                continue
            if self._is_whitelisted(element):
                continue
            if self.has_placeholder(element):
                continue
            violations.append(
                Violation(
                    rule=self.rule,
                    file=file_path,
                    line=element.line,
                    message=f"New input component <{element.name}> has no placeholder.",
                    suggestion=f'Add a hint, e.g. <{element.name} placeholder="请输入..." />.',
                    symbol=self.symbol,
                )
            )
        return violations

    def is_input_component(self, name: str) -> bool:
        """Dotted names match exactly; plain names also match their dotted sub-components."""
        if name in NON_LEAF_COMPONENTS:
            return False
        for component in self._settings.keywords("inputComponents"):
            if "." in component:
                if name == component:
                    return True
            elif name == component or name.startswith(component + "."):
                return True
        return False

    def has_placeholder(self, element: "MarkupElement") -> bool:
        return any(element.attribute(a) is not None for a in self._settings.keywords("placeholderAttributes"))

    @staticmethod
    def _is_exempt_native_input(element: "MarkupElement") -> bool:
        if element.name != "input":
            return False
        kind = (element.value_of("type") or "text").strip().lower()
        return kind in PLACEHOLDERLESS_INPUT_TYPES

    def _is_whitelisted(self, element: "MarkupElement") -> bool:
        if self._settings.matching_keyword(element.name):
            return True
        return any(
            attr.value and not attr.dynamic and self._settings.matching_keyword(attr.value)
            for attr in element.attributes
        )
