"""Rule 3: mutating requests must tell the user when they succeed."""

from typing import TYPE_CHECKING

from ux_commit_check.domain.constants import PROMISE_CALLBACK_METHODS
from ux_commit_check.domain.diff import DiffView
from ux_commit_check.domain.rules import Violation
from ux_commit_check.domain.syntax import (
    call_arguments,
    callee_name,
    enclosing_function,
    find_calls,
    function_name,
    is_awaited,
    is_function,
    object_keys,
    promise_callbacks,
    statements_after,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from ux_commit_check.domain.config import RuleSettings
    from ux_commit_check.domain.entities import SourceUnit
    from ux_commit_check.domain.request_calls import RequestCallClassifier

_SUCCESS_CALLBACK_KEYS = ("onSuccess", "success", "callback")


class SuccessToastRule:
    """Rule 3: POST/PUT/DELETE-like requests need a success toast on their success path."""

    rule: int = 3
    symbol: str = "missing-success-toast"
    description: str = "Mutating requests must show a success message when they complete."

    def __init__(self, settings: "RuleSettings", classifier: "RequestCallClassifier") -> None:
        self._settings = settings
        self._classifier = classifier

    def evaluate(self, file_path: str, unit: "SourceUnit", diff_text: str) -> list[Violation] | None:
        """One violation per mutating request that never reaches a success toast."""
        if not self._settings.enabled or self._settings.is_path_whitelisted(file_path):
            return None
        root = unit.root
        if root is None:
            return None
        diff = DiffView(diff_text)
        violations: list[Violation] = []
        for call in self._classifier.find_requests(root):
            verb = self._classifier.mutation_verb(call)
            if verb is None:
                continue
            if not diff.touches(unit.line_of(call), unit.end_line_of(call)):
                continue
            func = enclosing_function(call)
            method = self._classifier.method_name(call)
            owner = function_name(func) if func is not None else ""
            if any(self._settings.matching_keyword(text) for text in (owner, method) if text):
                continue
            if self.reaches_success_toast(call, func):
                continue
            violations.append(
                Violation(
                    rule=self.rule,
                    file=file_path,
                    line=unit.line_of(call),
                    message=f"{verb} request '{method}' gives no success feedback when it completes.",
                    suggestion=(
                        "Call one of "
                        f"{', '.join(self._settings.keywords('successMethods')) or 'message.success'} "
                        "in the .then callback or after the await."
                    ),
                    symbol=self.symbol,
                )
            )
        return violations

    def reaches_success_toast(self, call: "Node", func: "Node | None") -> bool:
        """Look in .then callbacks, success callbacks passed to the call, and code after an await."""
        regions: list["Node"] = [
            cb for method, cb in promise_callbacks(call, PROMISE_CALLBACK_METHODS) if method == "then"
        ]
        for arg in call_arguments(call):
            if is_function(arg):
                regions.append(arg)
            keys = object_keys(arg)
            regions.extend(
                keys[k] for k in _SUCCESS_CALLBACK_KEYS if keys.get(k) is not None and is_function(keys[k])
            )
        if func is not None and is_awaited(call):
            regions.extend(statements_after(call, func))
        return any(self._calls_success_method(region) for region in regions)

    def _calls_success_method(self, region: "Node") -> bool:
        methods = self._settings.keywords("successMethods")
        for candidate in find_calls(region):
            name = callee_name(candidate)
            if name and any(method in name for method in methods if method):
                return True
        return False
