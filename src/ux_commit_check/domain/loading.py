"""Loading-flag flow analysis: where a busy flag is switched on and off around a request."""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ux_commit_check.domain.constants import LOADING_NAME_TOKENS, PROMISE_CALLBACK_METHODS
from ux_commit_check.domain.syntax import (
    boolean_value,
    call_arguments,
    call_target,
    callee_name,
    enclosing_finally_blocks,
    is_awaited,
    is_function,
    member_property,
    node_text,
    object_keys,
    promise_callbacks,
    statements_after,
    statements_before,
    unwrap,
    walk,
)

if TYPE_CHECKING:
    from tree_sitter import Node

_STATE_SETTER = re.compile(r"^set[A-Z][\w$]*$")


@dataclass(frozen=True)
class FlagAssignment:
    """flag = value, this.flag = value, setFlag(value) or setState({flag: value})."""

    flag: str
    value: bool
    line_node: "Node"


def is_loading_name(name: str) -> bool:
    lowered = name.lower()
    return any(token in lowered for token in LOADING_NAME_TOKENS)


def same_flag(a: str, b: str) -> bool:
    return a == b or a.lower() == b.lower()


def is_state_setter_call(call: "Node") -> bool:
    """setXxx(true|false): a React state setter driven by a boolean literal."""
    if call.type != "call_expression":
        return False
    name = callee_name(call).rsplit(".", 1)[-1]
    if not _STATE_SETTER.match(name):
        return False
    args = call_arguments(call)
    return bool(args) and boolean_value(args[0]) is not None


class LoadingFlowAnalyzer:
    """Pure queries over a function body; nothing is cached between calls."""

    def assignments(self, node: "Node") -> list[FlagAssignment]:
        """Every boolean flag assignment inside node (nested functions included)."""
        found: list[FlagAssignment] = []
        for current in walk(node):
            found.extend(self._assignments_at(current))
        return found

    def _assignments_at(self, node: "Node") -> Iterable[FlagAssignment]:
        if node.type == "assignment_expression":
            value = boolean_value(node.child_by_field_name("right"))
            left = unwrap(node.child_by_field_name("left"))
            if value is not None and left is not None:
                name = member_property(left) or (node_text(left) if left.type == "identifier" else "")
                if name:
                    yield FlagAssignment(name, value, node)
            return
        if node.type != "call_expression":
            return
        name = callee_name(call_target(node)).rsplit(".", 1)[-1]
        args = call_arguments(node)
        if not args:
            return
        if name == "setState":
            for key, value_node in object_keys(args[0]).items():
                value = boolean_value(value_node)
                if value is not None:
                    yield FlagAssignment(key, value, node)
            return
        if _STATE_SETTER.match(name):
            value = boolean_value(args[0])
            if value is not None:
                flag = name[3:4].lower() + name[4:]
                yield FlagAssignment(flag, value, node)

    def flags_set_before(
        self, call: "Node", func: "Node", loading_only: bool = True
    ) -> list[str]:
        """Flags switched on in statements that precede call inside func."""
        flags: list[str] = []
        for stmt in statements_before(call, func):
            for assignment in self.assignments(stmt):
                if not assignment.value:
                    continue
                if loading_only and not is_loading_name(assignment.flag):
                    continue
                if assignment.flag not in flags:
                    flags.append(assignment.flag)
        return flags

    def resets_after(self, call: "Node", func: "Node", flag: str) -> bool:
        """
        True if flag is switched off once call settles.

        Accepted places: a .then/.catch/.finally callback of the call, a
        callback argument of the call itself, the statements after an
        awaited call, and enclosing finally blocks.
        """
        regions: list["Node"] = [cb for _, cb in promise_callbacks(call, PROMISE_CALLBACK_METHODS)]
        regions.extend(arg for arg in call_arguments(call) if is_function(arg))
        for arg in call_arguments(call):
            regions.extend(v for v in object_keys(arg).values() if v is not None and is_function(v))
        if is_awaited(call):
            regions.extend(statements_after(call, func))
        regions.extend(enclosing_finally_blocks(call, func))
        return any(self._switches_off(region, flag) for region in regions)

    def _switches_off(self, region: "Node", flag: str) -> bool:
        return any(
            not a.value and same_flag(a.flag, flag) for a in self.assignments(region)
        )

    def protected_flags(self, call: "Node", func: "Node") -> list[str]:
        """Loading flags set before call and reset after it."""
        return [
            flag for flag in self.flags_set_before(call, func) if self.resets_after(call, func, flag)
        ]

    def defined_flags(self, func: "Node") -> list[str]:
        """Loading-named flags the function touches at all."""
        flags: list[str] = []
        for assignment in self.assignments(func):
            if is_loading_name(assignment.flag) and assignment.flag not in flags:
                flags.append(assignment.flag)
        return flags

    @staticmethod
    def is_loading_method_call(call: "Node", loading_methods: Sequence[str]) -> bool:
        """Call to a configured loading method; boolean state setters are excluded."""
        if call.type != "call_expression" or is_state_setter_call(call):
            return False
        name = callee_name(call)
        return bool(name) and any(method in name for method in loading_methods if method)
