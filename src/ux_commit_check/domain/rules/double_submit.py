"""Rule 1: buttons and confirm callbacks that send requests must be protected against double submit."""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ux_commit_check.domain.constants import (
    LOADING_ATTRIBUTES,
    MIN_RATE_LIMIT_DELAY_MS,
    RATE_LIMITERS,
    RULE1_DIFF_TOKENS,
)
from ux_commit_check.domain.diff import DiffView
from ux_commit_check.domain.entities import Handler
from ux_commit_check.domain.loading import LoadingFlowAnalyzer, is_loading_name
from ux_commit_check.domain.markup import MarkupElement, bound_values, binds_flag, is_button, references
from ux_commit_check.domain.rules import Violation
from ux_commit_check.domain.syntax import (
    ancestors,
    call_arguments,
    call_target,
    callee_name,
    function_index,
    node_text,
    object_keys,
    statements_before,
    unwrap,
    walk,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from ux_commit_check.domain.config import RuleSettings
    from ux_commit_check.domain.entities import SourceUnit
    from ux_commit_check.domain.protocols import ActionResolverProtocol
    from ux_commit_check.domain.request_calls import RequestCallClassifier

_CALL_IN_EXPRESSION = re.compile(r"([A-Za-z_$][\w$.]*)\s*\(")
_PLAIN_REFERENCE = re.compile(r"^[A-Za-z_$][\w$.]*$")
_INLINE_LIMITER = re.compile(r"\b(debounce|throttle)\s*\(")
_INLINE_DELAY = re.compile(r",\s*(\d+)\s*\)\s*$")
_IGNORED_CALLEES = frozenset({"bind", "preventDefault", "stopPropagation", "function"})


def _is_dialog(name: str) -> bool:
    lowered = name.lower()
    return "modal" in lowered or "drawer" in lowered or "dialog" in lowered


def _is_popconfirm(name: str) -> bool:
    return "popconfirm" in name.lower()


def _is_form(name: str) -> bool:
    return name.lower().replace("-", "").endswith("form")


# callback attribute -> predicate on the element name
_CALLBACK_ATTRIBUTES = (
    ("onClick", is_button),
    ("onOk", _is_dialog),
    ("onConfirm", _is_popconfirm),
    ("onFinish", _is_form),
    ("onSubmit", _is_form),
)


@dataclass(frozen=True)
class _Reference:
    name: str
    rate_limited: bool = False


class DoubleSubmitRule:
    """Rule 1: a handler that sends a request needs a guard, a debounce or a bound loading flag."""

    rule: int = 1
    symbol: str = "missing-double-submit-guard"
    description: str = "Interactive elements whose handler sends a request must prevent double submit."

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
        """Check every callback-bearing element once per handler function."""
        if not self._settings.enabled or self._settings.is_path_whitelisted(file_path):
            return None
        root = unit.root
        if root is None:
            return None
        diff = DiffView(diff_text)
        if not diff.is_new_file and not diff.mentions_any(RULE1_DIFF_TOKENS):
            return None

        functions = function_index(root)
        grouped: dict[tuple[int, int], tuple["Node", list[Handler]]] = {}
        for handler in self.discover_handlers(unit):
            if self._is_whitelisted(handler):
                continue
            func = self._match_function(handler.name, functions)
            if func is None:
                continue
            key = (func.start_byte, func.end_byte)
            grouped.setdefault(key, (func, []))[1].append(handler)

        violations: list[Violation] = []
        for func, handlers in grouped.values():
            if not diff.is_new_file and not self._touched(unit, diff, func, handlers):
                continue
            violation = self._check_handler(file_path, unit, func, handlers)
            if violation is not None:
                violations.append(violation)
        return sorted(violations, key=lambda v: v.line)

    # Handler discovery

    def discover_handlers(self, unit: "SourceUnit") -> list[Handler]:
        """Handlers referenced by click/ok/confirm/finish callbacks in the markup."""
        handlers: list[Handler] = []
        for element in unit.elements:
            for attribute, accepts in _CALLBACK_ATTRIBUTES:
                attr = element.attribute(attribute)
                if attr is None or not attr.value or attr.name != attribute or not accepts(element.name):
                    continue
                reference = self._reference(attr.value)
                if reference is None:
                    continue
                handlers.append(
                    Handler(
                        name=reference.name,
                        line=element.line,
                        element=element,
                        attribute=attribute,
                        rate_limited=reference.rate_limited,
                    )
                )
        return handlers

    @staticmethod
    def _reference(expression: str) -> _Reference | None:
        expression = expression.strip()
        limiter = _INLINE_LIMITER.search(expression)
        rate_limited = False
        if limiter:
            delay = _INLINE_DELAY.search(expression)
            rate_limited = delay is None or int(delay.group(1)) >= MIN_RATE_LIMIT_DELAY_MS
        if _PLAIN_REFERENCE.match(expression):
            return _Reference(expression.rsplit(".", 1)[-1], rate_limited)
        for match in _CALL_IN_EXPRESSION.finditer(expression):
            dotted = match.group(1)
            last = dotted.rsplit(".", 1)[-1]
            if last in _IGNORED_CALLEES or last in RATE_LIMITERS:
                if last == "bind":
                    return _Reference(dotted.rsplit(".", 2)[-2], rate_limited)
                continue
            return _Reference(last, rate_limited)
        # debounce(handleSave, 800) style: the first bare argument
        if limiter:
            inner = expression[limiter.end():].split(",", 1)[0].strip()
            if _PLAIN_REFERENCE.match(inner):
                return _Reference(inner.rsplit(".", 1)[-1], rate_limited)
        return None

    def _is_whitelisted(self, handler: Handler) -> bool:
        return any(
            self._settings.matching_keyword(text)
            for text in (handler.name, handler.element.inner_text)
            if text
        )

    @staticmethod
    def _match_function(name: str, functions: dict[str, list["Node"]]) -> "Node | None":
        """Exact name, then case-insensitive, then containment (either direction)."""
        if name in functions:
            return functions[name][0]
        lowered = name.lower()
        for candidate in sorted(functions):
            if candidate.lower() == lowered:
                return functions[candidate][0]
        if len(name) < 4:
            return None
        for candidate in sorted(functions):
            if len(candidate) >= 4 and (candidate in name or name in candidate):
                return functions[candidate][0]
        return None

    @staticmethod
    def _touched(unit: "SourceUnit", diff: DiffView, func: "Node", handlers: list[Handler]) -> bool:
        if diff.touches(unit.line_of(func), unit.end_line_of(func)):
            return True
        return any(diff.touches(h.element.line, h.element.end_line) for h in handlers)

    # Protection analysis

    def _check_handler(
        self, file_path: str, unit: "SourceUnit", func: "Node", handlers: list[Handler]
    ) -> Violation | None:
        requests = self._classifier.find_requests(func)
        if not requests:
            return None
        if any(h.rate_limited for h in handlers):
            return None
        if self._has_leading_guard(func, requests[0]) or self._is_rate_limited(func):
            return None
        targets = self._binding_targets(unit, handlers)
        if self._has_disabled_binding(targets, handlers[0].name):
            return None

        protected = [flag for call in requests for flag in self._flow.protected_flags(call, func)]
        if any(self._bound(targets, flag) for flag in protected):
            return None

        wrong_flag: tuple[str, str, str] | None = None
        for call in requests:
            outcome = self._resolved_binding(unit, call, targets)
            if outcome is True:
                return None
            if isinstance(outcome, tuple) and wrong_flag is None:
                wrong_flag = outcome

        first = handlers[0]
        element_name = first.element.name
        defined = [f for f in self._flow.defined_flags(func) if not self._bound(targets, f)]
        if defined:
            flag = defined[0]
            return Violation(
                rule=self.rule,
                file=file_path,
                line=first.line,
                message=(
                    f"Handler '{first.name}' sets loading flag '{flag}' but <{element_name}> "
                    "never binds it, so the element stays clickable while the request is pending."
                ),
                suggestion=self._binding_hint(first, flag),
                symbol="loading-flag-not-bound",
            )
        if wrong_flag is not None:
            action, correct, bound = wrong_flag
            return Violation(
                rule=self.rule,
                file=file_path,
                line=first.line,
                message=(
                    f"<{element_name}> is bound to '{bound}' but action '{action}' "
                    f"declares loading flag '{correct}'."
                ),
                suggestion=f"Bind '{correct}' instead of '{bound}'. {self._binding_hint(first, correct)}",
                symbol="wrong-loading-flag",
            )
        return Violation(
            rule=self.rule,
            file=file_path,
            line=first.line,
            message=(
                f"Handler '{first.name}' on <{element_name}> sends a request without "
                "double-submit protection."
            ),
            suggestion=(
                "Set a loading flag before the request, reset it in finally and bind it "
                "to the element (loading / confirmLoading / disabled), or debounce the "
                f"handler with a delay of at least {MIN_RATE_LIMIT_DELAY_MS}ms."
            ),
            symbol=self.symbol,
        )

    @staticmethod
    def _binding_hint(handler: Handler, flag: str) -> str:
        if handler.attribute == "onOk":
            return f"Add confirmLoading={{{flag}}} (or okButtonProps={{{{ loading: {flag} }}}}) to <{handler.element.name}>."
        if handler.element.source == "text":
            return f'Add :loading="{flag}" to <{handler.element.name}>.'
        if handler.attribute in ("onFinish", "onSubmit"):
            return f'Add loading={{{flag}}} to the submit button (htmlType="submit") of <{handler.element.name}>.'
        return f"Add loading={{{flag}}} to <{handler.element.name}>."

    @staticmethod
    def _binding_targets(unit: "SourceUnit", handlers: list[Handler]) -> list[MarkupElement]:
        """The triggering elements plus submit buttons inside triggering forms."""
        targets: list[MarkupElement] = []
        for handler in handlers:
            targets.append(handler.element)
            if handler.attribute in ("onFinish", "onSubmit"):
                targets.extend(
                    e for e in unit.elements if handler.element.contains(e) and e.is_submit_button()
                )
        return targets

    @staticmethod
    def _bound(targets: list[MarkupElement], flag: str) -> bool:
        return any(binds_flag(element, flag, LOADING_ATTRIBUTES) for element in targets)

    @staticmethod
    def _has_disabled_binding(targets: list[MarkupElement], handler_name: str) -> bool:
        for element in targets:
            attr = element.attribute("disabled")
            if attr is None:
                continue
            if attr.dynamic and attr.value and attr.value.strip() not in ("false", "0"):
                return True
            if references(attr.value, handler_name):
                return True
        return False

    @staticmethod
    def _has_leading_guard(func: "Node", first_request: "Node") -> bool:
        """`if (loading) return;` (or similar) before the first request."""
        for stmt in statements_before(first_request, func):
            if stmt.type != "if_statement":
                continue
            condition = stmt.child_by_field_name("condition")
            consequence = stmt.child_by_field_name("consequence")
            if condition is None or consequence is None:
                continue
            names = (
                node_text(n)
                for n in walk(condition)
                if n.type in ("identifier", "property_identifier", "shorthand_property_identifier")
            )
            if not any(is_loading_name(name) for name in names):
                continue
            if any(n.type == "return_statement" for n in walk(consequence)):
                return True
        return False

    @staticmethod
    def _is_rate_limited(func: "Node") -> bool:
        """func is wrapped by debounce/throttle with a long enough (or non-literal) delay."""
        for parent in ancestors(func):
            if parent.type != "call_expression":
                continue
            name = callee_name(call_target(parent)).rsplit(".", 1)[-1]
            limiter = next((r for r in RATE_LIMITERS if r in name.lower()), None)
            if limiter is None:
                continue
            args = call_arguments(parent)
            if len(args) < 2:
                return True
            delay = unwrap(args[1])
            if delay is None:
                return True
            if delay.type == "object":
                wait = unwrap(object_keys(delay).get("wait"))
                if wait is None or wait.type != "number":
                    return True
                delay = wait
            if delay.type != "number":
                return True
            try:
                return float(node_text(delay)) >= MIN_RATE_LIMIT_DELAY_MS
            except ValueError:
                return True
        return False

    def _resolved_binding(
        self, unit: "SourceUnit", call: "Node", targets: list[MarkupElement]
    ) -> bool | tuple[str, str, str] | None:
        """
        True when the action's declared flag is bound, (action, correct, bound)
        when another flag is bound instead, None when nothing can be said.
        """
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
        correct = binding.loading_name
        if self._bound(targets, correct):
            return True
        values = [v for element in targets for v in bound_values(element, LOADING_ATTRIBUTES)]
        if values:
            return (action, correct, values[0])
        return None
