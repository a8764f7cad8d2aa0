"""Comment and string stripping that preserves the line/column shape of the text.

Every character inside a comment or a quoted string is replaced by a space
(newlines are kept), so offsets and line numbers computed on the stripped
text still point at the same place in the original.
"""

from enum import Enum


class StripMode(Enum):
    """Which constructs to blank out."""

    CODE = "code"  # comments and string contents
    COMMENTS = "comments"  # comments only, string contents kept
    MARKUP = "markup"  # <!-- --> comments only


class SourceTextStripper:
    """Pure text transform over script or markup text. No tree required."""

    def strip(self, text: str, mode: StripMode = StripMode.CODE) -> str:
        """Return text with the constructs selected by mode replaced by whitespace."""
        if mode is StripMode.MARKUP:
            return self._strip_markup_comments(text)
        return self._strip_script(text, keep_strings=mode is StripMode.COMMENTS)

    def strip_code(self, text: str) -> str:
        return self.strip(text, StripMode.CODE)

    def strip_comments(self, text: str) -> str:
        return self.strip(text, StripMode.COMMENTS)

    @staticmethod
    def _blank(segment: str) -> str:
        return "".join("\n" if ch == "\n" else " " for ch in segment)

    def _strip_markup_comments(self, text: str) -> str:
        out: list[str] = []
        pos = 0
        while True:
            start = text.find("<!--", pos)
            if start == -1:
                out.append(text[pos:])
                break
            end = text.find("-->", start + 4)
            end = len(text) if end == -1 else end + 3
            out.append(text[pos:start])
            out.append(self._blank(text[start:end]))
            pos = end
        return "".join(out)

    def _strip_script(self, text: str, keep_strings: bool) -> str:
        out: list[str] = []
        i = 0
        n = len(text)
        while i < n:
            ch = text[i]
            nxt = text[i + 1] if i + 1 < n else ""
            if ch == "/" and nxt == "/":
                end = text.find("\n", i)
                end = n if end == -1 else end
                out.append(self._blank(text[i:end]))
                i = end
            elif ch == "/" and nxt == "*":
                end = text.find("*/", i + 2)
                end = n if end == -1 else end + 2
                out.append(self._blank(text[i:end]))
                i = end
            elif ch in ("'", '"', "`"):
                end = self._string_end(text, i)
                if keep_strings:
                    out.append(text[i:end])
                else:
                    # Quotes stay so the stripped text still reads as an (empty) literal.
                    closed = end - i >= 2 and text[end - 1] == ch
                    inner_end = end - 1 if closed else end
                    out.append(ch)
                    out.append(self._blank(text[i + 1:inner_end]))
                    if closed:
                        out.append(ch)
                i = end
            else:
                out.append(ch)
                i += 1
        return "".join(out)

    @staticmethod
    def _string_end(text: str, start: int) -> int:
        """Index just past the closing quote; plain strings end at a newline."""
        quote = text[start]
        i = start + 1
        n = len(text)
        while i < n:
            ch = text[i]
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                return i + 1
            if ch == "\n" and quote != "`":
                return i
            i += 1
        return n
