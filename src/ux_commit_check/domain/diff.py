"""Read-only view over a file's staged unified diff."""

import re
from collections.abc import Iterable
from dataclasses import dataclass

_HUNK_HEADER = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)(?:,\d+)? @@")


@dataclass(frozen=True)
class AddedLine:
    """One '+' line of a hunk, numbered in the new version of the file."""

    number: int
    content: str


class DiffView:
    """
    Parsed unified diff for a single file.

    An empty diff, a 'new file mode' header or a '--- /dev/null' source all
    mean the file is brand new: every line and element counts as added.
    """

    def __init__(self, diff_text: str) -> None:
        self._text = diff_text or ""
        self._is_new = self._detect_new_file(self._text)
        self._added = tuple(self._parse_added_lines(self._text))
        self._numbers = frozenset(line.number for line in self._added)

    @staticmethod
    def _detect_new_file(text: str) -> bool:
        if not text.strip():
            return True
        for line in text.splitlines():
            if line.startswith("new file mode") or line.startswith("--- /dev/null"):
                return True
            if line.startswith("@@"):
                break
        return False

    @staticmethod
    def _parse_added_lines(text: str) -> Iterable[AddedLine]:
        current: int | None = None
        for line in text.splitlines():
            if line.startswith("diff --git"):
                current = None
                continue
            header = _HUNK_HEADER.match(line)
            if header:
                current = int(header.group(1))
                continue
            if current is None:
                continue
            if line.startswith("+"):
                yield AddedLine(current, line[1:])
                current += 1
            elif line.startswith("-"):
                continue
            elif line.startswith("\\"):
                # "\ No newline at end of file"
                continue
            else:
                current += 1

    @property
    def text(self) -> str:
        return self._text

    @property
    def is_new_file(self) -> bool:
        return self._is_new

    @property
    def added_lines(self) -> tuple[AddedLine, ...]:
        return self._added

    def added_text(self) -> str:
        """All added lines joined with newlines."""
        return "\n".join(line.content for line in self._added)

    def mentions_any(self, tokens: Iterable[str]) -> bool:
        """True if any added line contains one of the tokens."""
        added = self.added_text()
        return any(token in added for token in tokens)

    def touches(self, start_line: int, end_line: int | None = None) -> bool:
        """True if the file is new or any line in [start_line, end_line] was added."""
        if self._is_new:
            return True
        last = start_line if end_line is None else end_line
        return any(start_line <= number <= last for number in self._numbers)
