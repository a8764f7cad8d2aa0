"""Rule 4: lists rendered without a table component need a custom empty state."""

import re
from typing import TYPE_CHECKING

from ux_commit_check.domain.constants import EMPTY_TEXT_MARKERS, LIST_LOOP_METHODS, LOOP_STATEMENTS
from ux_commit_check.domain.diff import DiffView
from ux_commit_check.domain.evidence import Evidence, TwoTierSearch, first_evidence
from ux_commit_check.domain.rules import Violation
from ux_commit_check.domain.syntax import call_target, find_all, member_property

if TYPE_CHECKING:
    from tree_sitter import Node

    from ux_commit_check.domain.config import RuleSettings
    from ux_commit_check.domain.entities import SourceUnit

_MARKUP_LOOP = re.compile(r"\bv-for\s*=")
_CODE_LOOP = re.compile(r"\.(?:map|forEach)\s*\(|\bfor\s*\(")
_TABLE_IMPORT = re.compile(r"\bimport\s*(?:type\s*)?\{[^}]*\b(?:Table|ElTable|ProTable)\b[^}]*\}")
_ZERO_LENGTH = (
    re.compile(r"\.length\s*===?\s*0\b"),
    re.compile(r"\b0\s*===?\s*[\w$.?]+\.length\b"),
    re.compile(r"!\s*[\w$.?]+\.length\b"),
    re.compile(r"\.length\s*<\s*1\b"),
    re.compile(r"\.length\s*<=\s*0\b"),
    re.compile(r"\.length\s*>\s*0\s*\?"),
    re.compile(r"\.length\s*\?"),
    re.compile(r"\bisEmpty\s*\("),
)


class EmptyStateRule:
    """Rule 4: map/forEach/v-for lists need an empty-state component, text or length check."""

    rule: int = 4
    symbol: str = "missing-empty-state"
    description: str = "Non-table lists must render a custom empty state."

    def __init__(self, settings: "RuleSettings") -> None:
        self._settings = settings

    def evaluate(self, file_path: str, unit: "SourceUnit", diff_text: str) -> list[Violation] | None:
        """At most one violation per file, at the first list-rendering construct."""
        if not self._settings.enabled or self._settings.is_path_whitelisted(file_path):
            return None
        if unit.root is None and unit.markup_region is None:
            return None
        if self.uses_table(unit):
            return None
        if self._settings.matching_keyword(unit.comment_free_view + "\n" + unit.markup_view):
            return None
        rendering = self.find_list_rendering(unit)
        if rendering is None:
            return []
        diff = DiffView(diff_text)
        if not diff.touches(rendering.line) and not diff.mentions_any((".map(", ".forEach(", "v-for", "for (")):
            return None
        if self.find_empty_state(unit) is not None:
            return []
        components = self._settings.keywords("emptyComponents")
        return [
            Violation(
                rule=self.rule,
                file=file_path,
                line=rendering.line,
                message=f"List rendered with {rendering.detail} has no empty state.",
                suggestion=(
                    f"Render {' / '.join(f'<{c}>' for c in components) or 'an empty component'} "
                    "or an explicit '暂无数据' message when the list is empty "
                    "(e.g. {list.length === 0 && <Empty />})."
                ),
                symbol=self.symbol,
            )
        ]

    @staticmethod
    def uses_table(unit: "SourceUnit") -> bool:
        if any(e.name.lower().replace("-", "").endswith("table") for e in unit.elements):
            return True
        return _TABLE_IMPORT.search(unit.code_view) is not None

    # List rendering

    def find_list_rendering(self, unit: "SourceUnit") -> Evidence | None:
        return first_evidence(
            lambda: self._loop_in_markup(unit),
            TwoTierSearch(
                (lambda: self._loop_in_tree(unit)) if unit.root is not None else None,
                lambda: self._loop_in_code_text(unit),
            ).find,
        )

    @staticmethod
    def _loop_in_markup(unit: "SourceUnit") -> Evidence | None:
        match = _MARKUP_LOOP.search(unit.markup_view)
        if match is None:
            return None
        line = unit.markup_line_offset + unit.markup_view.count("\n", 0, match.start()) + 1
        return Evidence("list-render", "v-for", line, tier="text")

    @staticmethod
    def _loop_in_tree(unit: "SourceUnit") -> Evidence | None:
        assert unit.root is not None

        def is_loop(node: "Node") -> bool:
            if node.type in LOOP_STATEMENTS:
                return True
            if node.type != "call_expression":
                return False
            return member_property(call_target(node)) in LIST_LOOP_METHODS

        loops = find_all(unit.root, is_loop)
        if not loops:
            return None
        first = min(loops, key=lambda n: n.start_byte)
        detail = "a for loop" if first.type in LOOP_STATEMENTS else f".{member_property(call_target(first))}()"
        return Evidence("list-render", detail, unit.line_of(first))

    @staticmethod
    def _loop_in_code_text(unit: "SourceUnit") -> Evidence | None:
        match = _CODE_LOOP.search(unit.code_view)
        if match is None:
            return None
        line = unit.script_line_offset + unit.code_view.count("\n", 0, match.start()) + 1
        return Evidence("list-render", match.group(0).strip("( "), line)

    # Empty state

    def find_empty_state(self, unit: "SourceUnit") -> Evidence | None:
        return first_evidence(
            lambda: self._empty_component(unit),
            lambda: self._empty_text(unit),
            lambda: self._zero_length_check(unit),
        )

    def _empty_component(self, unit: "SourceUnit") -> Evidence | None:
        components = self._settings.keywords("emptyComponents")
        for element in unit.elements:
            normalized = element.name.replace("-", "").lower()
            for component in components:
                if element.name == component or element.name.startswith(component + "."):
                    return Evidence("empty-component", element.name, element.line)
                if normalized.endswith(component.replace("-", "").lower()):
                    return Evidence("empty-component", element.name, element.line)
        return None

    @staticmethod
    def _empty_text(unit: "SourceUnit") -> Evidence | None:
        text = unit.comment_free_view + "\n" + unit.markup_view
        for marker in EMPTY_TEXT_MARKERS:
            if marker in text:
                return Evidence("empty-text", marker, tier="text")
        return None

    @staticmethod
    def _zero_length_check(unit: "SourceUnit") -> Evidence | None:
        for text in (unit.code_view, unit.markup_view):
            for pattern in _ZERO_LENGTH:
                if pattern.search(text):
                    return Evidence("zero-length-check", pattern.pattern, tier="text")
        return None
