"""Domain entities: the unit under analysis and the records rules exchange."""

from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING

from ux_commit_check.domain.source_text import SourceTextStripper, StripMode

if TYPE_CHECKING:
    from tree_sitter import Node, Tree

    from ux_commit_check.domain.markup import MarkupElement
    from ux_commit_check.domain.rules import Violation

_STRIPPER = SourceTextStripper()


@dataclass(frozen=True)
class StagedFile:
    """A file handed to the checker: repo-relative path, working-tree text and staged diff."""

    path: str
    text: str
    diff_text: str = ""


@dataclass(frozen=True)
class SourceUnit:
    """
    One file under analysis.

    `tree` is the parsed script (None for markup-only formats and for
    container files without a script block). `markup_region` holds the template
    section of container formats, or the whole text of markup-only files.
    Line offsets map region-relative rows back to file lines.
    """

    path: str
    raw_text: str
    dialect: str
    tree: "Tree | None" = None
    script_text: str = ""
    markup_region: str | None = None
    diff_text: str = ""
    script_line_offset: int = 0
    markup_line_offset: int = 0

    @property
    def root(self) -> "Node | None":
        return self.tree.root_node if self.tree is not None else None

    def line_of(self, node: "Node") -> int:
        """1-based file line of a tree node."""
        return node.start_point[0] + 1 + self.script_line_offset

    def end_line_of(self, node: "Node") -> int:
        return node.end_point[0] + 1 + self.script_line_offset

    @cached_property
    def code_view(self) -> str:
        """Script text with comments and string contents blanked."""
        return _STRIPPER.strip(self.script_text, StripMode.CODE)

    @cached_property
    def comment_free_view(self) -> str:
        """Script text with comments blanked; string literals kept."""
        return _STRIPPER.strip(self.script_text, StripMode.COMMENTS)

    @cached_property
    def markup_view(self) -> str:
        """Markup region with <!-- --> comments blanked ('' when there is none)."""
        if self.markup_region is None:
            return ""
        return _STRIPPER.strip(self.markup_region, StripMode.MARKUP)

    @cached_property
    def elements(self) -> "tuple[MarkupElement, ...]":
        """All markup elements of the file, from the tree and the markup region."""
        from ux_commit_check.domain.markup import MarkupExtractor

        return MarkupExtractor().extract(self)


@dataclass(frozen=True)
class Handler:
    """An event handler referenced from a markup callback attribute."""

    name: str
    line: int
    element: "MarkupElement"
    attribute: str
    rate_limited: bool = False


@dataclass(frozen=True)
class ActionLoadingBinding:
    """Where an action is declared and which loading flag its declaring call names."""

    action_name: str
    loading_name: str | None
    source_path: str = ""


@dataclass
class CheckResult:
    """Outcome of one checker run."""

    violations: "list[Violation]" = field(default_factory=list)
    files_checked: int = 0
    files_skipped: int = 0
    crashed_pairs: int = 0

    def has_violations(self) -> bool:
        return bool(self.violations)
