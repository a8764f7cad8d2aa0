"""Rule 2: list and detail pages must show a loading indicator for their first data request."""

import re
from typing import TYPE_CHECKING

from ux_commit_check.domain.constants import (
    DETAIL_PAGE_TOKENS,
    EFFECT_HOOKS,
    LIFECYCLE_METHODS,
    LIST_PAGE_TOKENS,
    PROMISE_CALLBACK_METHODS,
    PROPS_SOURCES,
    RULE2_DIFF_TOKENS,
    SPINNER_ATTRIBUTES,
)
from ux_commit_check.domain.diff import DiffView
from ux_commit_check.domain.evidence import Evidence, TwoTierSearch, first_evidence
from ux_commit_check.domain.loading import LoadingFlowAnalyzer
from ux_commit_check.domain.markup import binds_flag, references
from ux_commit_check.domain.rules import Violation
from ux_commit_check.domain.syntax import (
    call_arguments,
    call_target,
    callee_name,
    enclosing_function,
    find_all,
    find_calls,
    function_index,
    function_name,
    is_function,
    node_text,
    promise_callbacks,
    statements_before,
    walk,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from ux_commit_check.domain.config import RuleSettings
    from ux_commit_check.domain.entities import SourceUnit
    from ux_commit_check.domain.protocols import ActionResolverProtocol
    from ux_commit_check.domain.request_calls import RequestCallClassifier


class InitialLoadingRule:
    """Rule 2: requests fired from lifecycle hooks need visible loading evidence."""

    rule: int = 2
    symbol: str = "missing-initial-loading"
    description: str = "List/detail pages must show a loading state while the first request is pending."

    def __init__(
        self,
        settings: "RuleSettings",
        classifier: "RequestCallClassifier",
        resolver: "ActionResolverProtocol | None" = None,
    ) -> None:
        self._settings = settings
        self._classifier = classifier
        self._resolver = resolver
        self._flow = LoadingFlowAnalyzer()

    def evaluate(self, file_path: str, unit: "SourceUnit", diff_text: str) -> list[Violation] | None:
        """One violation per file, pointing at the first request without loading evidence."""
        if not self._settings.enabled or self._settings.is_path_whitelisted(file_path):
            return None
        root = unit.root
        if root is None:
            return None
        diff = DiffView(diff_text)
        if not (
            diff.is_new_file
            or diff.mentions_any(RULE2_DIFF_TOKENS)
            or any(hook in unit.code_view for hook in EFFECT_HOOKS)
        ):
            return None
        if not self.looks_like_list_or_detail(unit):
            return None

        uncovered: list["Node"] = []
        for hook in self.lifecycle_callbacks(root):
            owner = self._hook_owner(hook)
            if owner and self._settings.matching_keyword(owner):
                continue
            for call in self._classifier.find_requests(hook):
                if self._has_loading_evidence(unit, call, hook) is None:
                    uncovered.append(call)
        if not uncovered:
            return []
        first = min(uncovered, key=lambda n: n.start_byte)
        name = callee_name(first) or node_text(call_target(first))
        return [
            Violation(
                rule=self.rule,
                file=file_path,
                line=unit.line_of(first),
                message=(
                    f"Initial request '{name}' runs on page entry without a loading indicator "
                    f"({len(uncovered)} unprotected request(s) in lifecycle hooks)."
                ),
                suggestion=(
                    "Set a loading flag before the request, reset it in finally and bind it to "
                    "<Spin spinning={loading}>, <Table loading={loading}> or v-loading, or call "
                    f"one of: {', '.join(self._settings.keywords('loadingMethods')) or 'showLoading'}."
                ),
                symbol=self.symbol,
            )
        ]

    # Scope

    def looks_like_list_or_detail(self, unit: "SourceUnit") -> bool:
        text = unit.comment_free_view + "\n" + unit.markup_view
        if any(token in text for token in LIST_PAGE_TOKENS + DETAIL_PAGE_TOKENS):
            return True
        return any(e.name.lower().replace("-", "").endswith("table") for e in unit.elements)

    @staticmethod
    def lifecycle_callbacks(root: "Node") -> list["Node"]:
        """Effect-hook callbacks and lifecycle methods, in source order."""
        hooks: list["Node"] = []
        for call in find_calls(root):
            name = callee_name(call_target(call)).rsplit(".", 1)[-1]
            if name not in EFFECT_HOOKS:
                continue
            args = call_arguments(call)
            if args and is_function(args[0]):
                hooks.append(args[0])
        for name, nodes in function_index(root).items():
            if name in LIFECYCLE_METHODS:
                hooks.extend(nodes)
        return sorted(hooks, key=lambda n: n.start_byte)

    @staticmethod
    def _hook_owner(hook: "Node") -> str:
        owner = enclosing_function(hook)
        return function_name(owner) if owner is not None else ""

    # Evidence

    def _has_loading_evidence(self, unit: "SourceUnit", call: "Node", hook: "Node") -> Evidence | None:
        func = enclosing_function(call) or hook
        return first_evidence(
            lambda: self._loading_method_before(call, func),
            lambda: self._loading_method_in_callbacks(call),
            lambda: self._bound_state_flag(unit, call, func),
            lambda: self._resolved_props_flag(unit, call),
        )

    def _loading_method_before(self, call: "Node", func: "Node") -> Evidence | None:
        methods = self._settings.keywords("loadingMethods")
        for stmt in statements_before(call, func):
            for candidate in find_calls(stmt):
                if self._flow.is_loading_method_call(candidate, methods):
                    return Evidence("loading-method", callee_name(candidate))
        return None

    def _loading_method_in_callbacks(self, call: "Node") -> Evidence | None:
        methods = self._settings.keywords("loadingMethods")
        for _, callback in promise_callbacks(call, PROMISE_CALLBACK_METHODS):
            for candidate in find_calls(callback):
                if self._flow.is_loading_method_call(candidate, methods):
                    return Evidence("loading-method-callback", callee_name(candidate))
        return None

    def _bound_state_flag(self, unit: "SourceUnit", call: "Node", func: "Node") -> Evidence | None:
        for flag in self._flow.protected_flags(call, func):
            if any(binds_flag(e, flag, SPINNER_ATTRIBUTES) for e in unit.elements):
                return Evidence("bound-flag", flag)
        return None

    def _resolved_props_flag(self, unit: "SourceUnit", call: "Node") -> Evidence | None:
        if self._resolver is None:
            return None
        action = self._classifier.action_name(call)
        if not action:
            return None
        binding = self._resolver.resolve(action, unit, strict=True) or self._resolver.resolve(
            action, unit, strict=False
        )
        if binding is None or not binding.loading_name:
            return None
        flag = binding.loading_name
        via_props = any(
            references(attr.value, f"{source}.{flag}")
            for e in unit.elements
            for attr in e.attributes
            if attr.dynamic and attr.name in SPINNER_ATTRIBUTES
            for source in PROPS_SOURCES
        )
        if via_props:
            return Evidence("props-flag", flag)
        destructured = TwoTierSearch(
            lambda: self._destructured_in_tree(unit, flag),
            lambda: self._destructured_in_text(unit, flag),
        ).find()
        if destructured is None:
            return None
        if not any(binds_flag(e, flag, SPINNER_ATTRIBUTES) for e in unit.elements):
            return None
        return destructured

    @staticmethod
    def _destructured_in_tree(unit: "SourceUnit", flag: str) -> Evidence | None:
        root = unit.root
        if root is None:
            return None
        for declarator in find_all(root, lambda n: n.type == "variable_declarator"):
            pattern = declarator.child_by_field_name("name")
            value = declarator.child_by_field_name("value")
            if pattern is None or value is None or pattern.type != "object_pattern":
                continue
            source = node_text(value).replace(" ", "")
            if not any(source == s or source.startswith(s + ".") for s in PROPS_SOURCES):
                continue
            names = {
                node_text(n)
                for n in walk(pattern)
                if n.type in ("shorthand_property_identifier_pattern", "identifier")
            }
            if flag in names:
                return Evidence("destructured", flag, unit.line_of(declarator))
        return None

    @staticmethod
    def _destructured_in_text(unit: "SourceUnit", flag: str) -> Evidence | None:
        pattern = re.compile(
            r"(?:const|let|var)\s*\{[^}]*(?<![\w$])" + re.escape(flag)
            + r"(?![\w$])[^}]*\}\s*=\s*(?:this\.)?props\b"
        )
        match = pattern.search(unit.code_view)
        if match is None:
            return None
        return Evidence("destructured", flag, unit.code_view.count("\n", 0, match.start()) + 1)
