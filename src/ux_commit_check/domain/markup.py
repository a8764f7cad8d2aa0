"""Markup element model shared by the rules.

Elements come from two places: JSX nodes in the syntax tree, and a
regex scan of template/markup text (Vue templates, plain HTML) that has
no tree. Vue binding syntax is normalised so rules see one vocabulary:
`:x` / `v-bind:x` -> `x`, `@click` / `v-on:click` -> `onClick`.
"""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ux_commit_check.domain.syntax import JSX_TAG_TYPES, node_text, string_value, walk

if TYPE_CHECKING:
    from tree_sitter import Node

    from ux_commit_check.domain.entities import SourceUnit

_ATTR_VALUE = r"(?:\"[^\"]*\"|'[^']*'|\{[^{}]*(?:\{[^{}]*(?:\{[^{}]*\}[^{}]*)*\}[^{}]*)*\}|[^\s>\"']+)"
_TAG = re.compile(
    r"<([A-Za-z][\w.:-]*)((?:\s+[^\s=/>\"']+(?:\s*=\s*" + _ATTR_VALUE + r")?)*)\s*(/?)>",
    re.S,
)
_ATTR = re.compile(r"([^\s=/>\"']+)(?:\s*=\s*(" + _ATTR_VALUE + r"))?", re.S)
_SUBMIT_ATTRIBUTES = ("htmlType", "nativeType", "type")


@dataclass(frozen=True)
class MarkupAttribute:
    """One attribute; dynamic means the value is an expression, not a literal string."""

    name: str
    value: str | None
    dynamic: bool = False
    raw_name: str = ""


@dataclass(frozen=True)
class MarkupElement:
    """An opening (or self-closing) tag with its attributes and location."""

    name: str
    attributes: tuple[MarkupAttribute, ...]
    line: int
    end_line: int
    span: tuple[int, int]
    source: str = "tree"
    has_spread: bool = False
    inner_text: str = ""

    def attribute(self, name: str) -> MarkupAttribute | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        lowered = name.lower()
        for attr in self.attributes:
            if attr.name.lower() == lowered:
                return attr
        return None

    def value_of(self, name: str) -> str | None:
        attr = self.attribute(name)
        return attr.value if attr is not None else None

    def contains(self, other: "MarkupElement") -> bool:
        if self.source != other.source or self.span == other.span:
            return False
        return self.span[0] <= other.span[0] and other.span[1] <= self.span[1]

    def is_submit_button(self) -> bool:
        if not is_button(self.name):
            return False
        return any((self.value_of(a) or "").strip("'\" ") == "submit" for a in _SUBMIT_ATTRIBUTES)


def is_button(name: str) -> bool:
    return name.lower().replace("-", "").endswith("button")


def references(expression: str | None, name: str) -> bool:
    """True if name occurs as a whole identifier inside expression."""
    if not expression or not name:
        return False
    return re.search(r"(?<![\w$])" + re.escape(name) + r"(?![\w$])", expression) is not None


def binds_flag(element: MarkupElement, flag: str, attributes: frozenset[str]) -> bool:
    """True if one of attributes (or an object-valued `loading:` entry) is bound to flag."""
    for attr in element.attributes:
        if not attr.dynamic:
            continue
        if attr.name in attributes and references(attr.value, flag):
            return True
        if attr.value and re.search(
            r"\bloading\s*:\s*[^,}]*(?<![\w$])" + re.escape(flag) + r"(?![\w$])", attr.value
        ):
            return True
    return False


def bound_values(element: MarkupElement, attributes: frozenset[str]) -> list[str]:
    """Expressions bound to any of attributes, plus object-valued `loading:` entries."""
    values: list[str] = []
    for attr in element.attributes:
        if not attr.dynamic or not attr.value:
            continue
        if attr.name in attributes:
            values.append(attr.value)
        else:
            values.extend(m.group(1).strip() for m in re.finditer(r"\bloading\s*:\s*([^,}]+)", attr.value))
    return values


class MarkupExtractor:
    """Collects MarkupElements from a SourceUnit's tree and markup region."""

    def extract(self, unit: "SourceUnit") -> tuple[MarkupElement, ...]:
        elements: list[MarkupElement] = []
        if unit.root is not None:
            elements.extend(self.from_tree(unit))
        if unit.markup_region is not None:
            elements.extend(self.from_text(unit.markup_view, unit.markup_line_offset))
        return tuple(sorted(elements, key=lambda e: (e.line, e.span[0])))

    # Tree tier

    def from_tree(self, unit: "SourceUnit") -> list[MarkupElement]:
        assert unit.root is not None
        result: list[MarkupElement] = []
        for node in walk(unit.root):
            if node.type not in JSX_TAG_TYPES:
                continue
            name_node = node.child_by_field_name("name")
            if name_node is None:
                continue
            attributes, spread = self._tree_attributes(node)
            container = node.parent if node.type == "jsx_opening_element" and node.parent is not None else node
            inner = " ".join(
                node_text(c).strip() for c in container.named_children if c.type == "jsx_text"
            ) if container is not node else ""
            result.append(
                MarkupElement(
                    name=node_text(name_node),
                    attributes=attributes,
                    line=unit.line_of(node),
                    end_line=unit.end_line_of(node),
                    span=(container.start_byte, container.end_byte),
                    source="tree",
                    has_spread=spread,
                    inner_text=" ".join(inner.split()),
                )
            )
        return result

    @staticmethod
    def _tree_attributes(tag: "Node") -> tuple[tuple[MarkupAttribute, ...], bool]:
        attributes: list[MarkupAttribute] = []
        spread = False
        for child in tag.named_children:
            if child.type == "jsx_expression":
                spread = spread or any(c.type == "spread_element" for c in child.named_children)
                continue
            if child.type != "jsx_attribute":
                continue
            parts = child.named_children
            if not parts:
                continue
            name = node_text(parts[0])
            value_node = parts[-1] if len(parts) > 1 else None
            if value_node is None:
                attributes.append(MarkupAttribute(name, None, False, name))
            elif value_node.type == "jsx_expression":
                inner = node_text(value_node)[1:-1].strip()
                attributes.append(MarkupAttribute(name, inner, True, name))
            else:
                literal = string_value(value_node)
                if literal is None:
                    attributes.append(MarkupAttribute(name, node_text(value_node), True, name))
                else:
                    attributes.append(MarkupAttribute(name, literal, False, name))
        return tuple(attributes), spread

    # Text tier

    def from_text(self, text: str, line_offset: int = 0) -> list[MarkupElement]:
        result: list[MarkupElement] = []
        for match in _TAG.finditer(text):
            name = match.group(1)
            attributes = tuple(self._text_attributes(match.group(2) or ""))
            start, end = match.start(), match.end()
            close = end if match.group(3) else self._close_position(text, name, end)
            result.append(
                MarkupElement(
                    name=name,
                    attributes=attributes,
                    line=line_offset + text.count("\n", 0, start) + 1,
                    end_line=line_offset + text.count("\n", 0, end) + 1,
                    span=(start, close),
                    source="text",
                    has_spread=any(a.raw_name in ("v-bind", "v-bind.prop") for a in attributes),
                    inner_text=_inner_text(text, end, close),
                )
            )
        return result

    def _text_attributes(self, raw: str) -> list[MarkupAttribute]:
        attributes: list[MarkupAttribute] = []
        for match in _ATTR.finditer(raw):
            raw_name = match.group(1)
            raw_value = match.group(2)
            name, dynamic = self._normalize(raw_name)
            value: str | None = None
            if raw_value is not None:
                if raw_value[:1] in ("'", '"'):
                    value = raw_value[1:-1]
                elif raw_value.startswith("{"):
                    value = raw_value[1:-1].strip()
                    dynamic = True
                else:
                    value = raw_value
            attributes.append(MarkupAttribute(name, value, dynamic, raw_name))
        return attributes

    @staticmethod
    def _normalize(raw_name: str) -> tuple[str, bool]:
        if raw_name.startswith("v-bind:"):
            return _camelize(raw_name[len("v-bind:"):].split(".")[0]), True
        if raw_name.startswith(":"):
            return _camelize(raw_name[1:].split(".")[0]), True
        if raw_name.startswith("v-on:") or raw_name.startswith("@"):
            event = raw_name.split(":", 1)[1] if raw_name.startswith("v-on:") else raw_name[1:]
            event = _camelize(event.split(".")[0])
            return "on" + event[:1].upper() + event[1:], True
        if raw_name.startswith("v-"):
            # directives (v-if, v-for, v-loading ...) always hold expressions
            return raw_name, True
        if len(raw_name) > 2 and raw_name.startswith("on") and raw_name.islower():
            # plain HTML event attribute: onclick -> onClick
            return "on" + raw_name[2:3].upper() + raw_name[3:], True
        return _camelize(raw_name), False

    @staticmethod
    def _close_position(text: str, name: str, start: int) -> int:
        """End offset of the matching </name>, or start when it cannot be found."""
        pattern = re.compile(r"<(/?)" + re.escape(name) + r"(?=[\s/>])[^>]*?(/?)>", re.S)
        depth = 1
        for match in pattern.finditer(text, start):
            if match.group(1):
                depth -= 1
                if depth == 0:
                    return match.end()
            elif not match.group(2):
                depth += 1
        return start


def _camelize(name: str) -> str:
    if "-" not in name:
        return name
    head, *rest = name.split("-")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _inner_text(text: str, start: int, close: int) -> str:
    """Visible text between an opening tag and its closing tag, tags removed."""
    if close <= start:
        return ""
    body = re.sub(r"<[^>]*>", " ", text[start:close])
    return " ".join(body.split())
