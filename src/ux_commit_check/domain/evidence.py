"""Two-tier evidence search: structural (tree) first, text fallback second."""

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class Evidence:
    """Something found in the source that satisfies (part of) a rule."""

    kind: str
    detail: str = ""
    line: int = 0
    tier: str = "tree"


EvidenceFinder = Callable[[], Evidence | None]


class TwoTierSearch:
    """
    Combine a tree finder with a text finder.

    Tree evidence wins when present; the text finder only runs when the tree
    finder is absent or found nothing.
    """

    def __init__(
        self,
        find_in_tree: EvidenceFinder | None,
        find_in_text: EvidenceFinder | None,
    ) -> None:
        self._find_in_tree = find_in_tree
        self._find_in_text = find_in_text

    def find(self) -> Evidence | None:
        if self._find_in_tree is not None:
            found = self._find_in_tree()
            if found is not None:
                return found
        if self._find_in_text is not None:
            found = self._find_in_text()
            if found is not None:
                return Evidence(found.kind, found.detail, found.line, tier="text")
        return None


def first_evidence(*finders: EvidenceFinder) -> Evidence | None:
    """Run finders in order and return the first hit."""
    for finder in finders:
        found = finder()
        if found is not None:
            return found
    return None
