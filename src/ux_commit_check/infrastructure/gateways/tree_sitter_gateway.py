"""Source parser gateway: tree-sitter grammars for JS/TS/JSX/TSX, Vue and HTML files."""

import logging
import re
from pathlib import PurePosixPath
from typing import Optional

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language, Parser, Tree

from ux_commit_check.domain.entities import SourceUnit
from ux_commit_check.domain.protocols import SourceParserProtocol

logger = logging.getLogger(__name__)

_SCRIPT_BLOCK = re.compile(r"<script([^>]*)>([\s\S]*?)</script>")
_TEMPLATE_OPEN = re.compile(r"<template[^>]*>")
_LANG_ATTRIBUTE = re.compile(r"""\blang\s*=\s*["']?(\w+)""")

_DIALECT_BY_SUFFIX: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".vue": "vue",
    ".html": "html",
    ".htm": "html",
}


class TreeSitterGateway(SourceParserProtocol):
    """Builds SourceUnits with tree-sitter. One Parser per grammar, created up front."""

    def __init__(self) -> None:
        self._languages: dict[str, Language] = {
            "javascript": Language(tsjs.language()),
            "typescript": Language(tsts.language_typescript()),
            "tsx": Language(tsts.language_tsx()),
        }
        self._parsers: dict[str, Parser] = {
            name: Parser(language) for name, language in self._languages.items()
        }

    @staticmethod
    def dialect_of(path: str) -> Optional[str]:
        """Dialect name for a file path, or None for unsupported extensions."""
        return _DIALECT_BY_SUFFIX.get(PurePosixPath(path.replace("\\", "/")).suffix.lower())

    def parse(self, path: str, text: str, diff_text: str = "") -> Optional[SourceUnit]:
        """Parse text by the dialect of path. None when the file cannot be analyzed."""
        dialect = self.dialect_of(path)
        if dialect is None:
            logger.debug("No grammar for %s, skipping", path)
            return None
        if dialect == "html":
            return SourceUnit(path=path, raw_text=text, dialect=dialect, markup_region=text, diff_text=diff_text)
        if dialect == "vue":
            return self._parse_vue(path, text, diff_text)
        tree = self._parse_with(dialect, text)
        if tree is None:
            logger.debug("Syntax error in %s, skipping", path)
            return None
        return SourceUnit(
            path=path, raw_text=text, dialect=dialect, tree=tree, script_text=text, diff_text=diff_text
        )

    def parse_script(self, path: str, text: str) -> Optional[Tree]:
        """Parse plain script text; Vue files contribute their first <script> block."""
        dialect = self.dialect_of(path)
        if dialect == "vue":
            block = _SCRIPT_BLOCK.search(text)
            if block is None:
                return None
            return self._parse_with(self._script_dialect(block.group(1)), block.group(2))
        if dialect is None or dialect == "html":
            return None
        return self._parse_with(dialect, text)

    def _parse_vue(self, path: str, text: str, diff_text: str) -> Optional[SourceUnit]:
        script_text = ""
        script_offset = 0
        tree: Optional[Tree] = None
        dialect = "javascript"
        block = _SCRIPT_BLOCK.search(text)
        if block is not None:
            script_text = block.group(2)
            script_offset = text.count("\n", 0, block.start(2))
            dialect = self._script_dialect(block.group(1))
            tree = self._parse_with(dialect, script_text)
            if tree is None:
                logger.debug("Syntax error in <script> of %s, skipping", path)
                return None

        markup: Optional[str] = None
        markup_offset = 0
        opening = _TEMPLATE_OPEN.search(text)
        if opening is not None:
            close = text.rfind("</template>")
            if close >= opening.end():
                markup = text[opening.end():close]
                markup_offset = text.count("\n", 0, opening.end())

        return SourceUnit(
            path=path,
            raw_text=text,
            dialect=f"vue:{dialect}",
            tree=tree,
            script_text=script_text,
            markup_region=markup,
            diff_text=diff_text,
            script_line_offset=script_offset,
            markup_line_offset=markup_offset,
        )

    @staticmethod
    def _script_dialect(attributes: str) -> str:
        lang = _LANG_ATTRIBUTE.search(attributes)
        if lang is None:
            return "javascript"
        return {"ts": "typescript", "tsx": "tsx"}.get(lang.group(1).lower(), "javascript")

    def _parse_with(self, dialect: str, text: str) -> Optional[Tree]:
        tree = self._parsers[dialect].parse(text.encode("utf-8"))
        if tree.root_node.has_error:
            return None
        return tree
