"""Request-call classification: decides whether an invocation is a network/data request.

Every rule that asks "does this code talk to the server?" goes through
RequestCallClassifier so the calling conventions stay consistent.
"""

import re
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING

from ux_commit_check.domain.constants import (
    ACTION_MUTATION_KEYWORDS,
    ACTION_SUFFIX,
    CAPITALIZED_HTTP_VERBS,
    DISPATCH_MUTATION_KEYWORDS,
    EXCLUDED_METHOD_NAMES,
    HTTP_VERBS,
    LOG_TOKENS,
    MUTATION_VERBS,
    PROPS_SOURCES,
    SERIALIZATION_TOKENS,
    XHR_METHODS,
)
from ux_commit_check.domain.syntax import (
    CALL_TYPES,
    call_arguments,
    call_target,
    callee_name,
    find_calls,
    node_text,
    object_keys,
    string_value,
    unwrap,
)

if TYPE_CHECKING:
    from tree_sitter import Node

_MUTATING_SUFFIX = re.compile(r"\.(post|put|delete|patch)$", re.IGNORECASE)


class RequestShape(Enum):
    """Recognised request conventions, in evaluation order."""

    HTTP_VERB_NAME = 1
    PROPS_ACTION = 2
    HTTP_CLIENT = 3
    VUE_HTTP = 4
    AJAX = 5
    AXIOS = 6
    FETCH = 7
    FETCH_DATA_API = 8
    PROPS_DISPATCH = 9
    XHR = 10
    CUSTOM_KEYWORD = 11


class RequestCallClassifier:
    """Classifies call/new expressions against the known request conventions."""

    def __init__(self, request_methods: Sequence[str] = ()) -> None:
        self._keywords = tuple(k.lower() for k in request_methods if k)

    def classify(self, call: "Node") -> RequestShape | None:
        """Return the first matching shape, or None when call is not a request."""
        if call.type == "new_expression":
            ctor = node_text(call_target(call))
            return RequestShape.XHR if ctor == "XMLHttpRequest" else None
        if call.type != "call_expression":
            return None
        target = unwrap(call_target(call))
        name = callee_name(call)
        lowered = name.lower()
        for shape, matches in (
            (RequestShape.HTTP_VERB_NAME, lambda: self._has_verb(lowered)),
            (RequestShape.PROPS_ACTION, lambda: self._is_props_action(target)),
            (RequestShape.HTTP_CLIENT, lambda: self._is_http_client(target)),
            (RequestShape.VUE_HTTP, lambda: self._is_vue_http(target)),
            (RequestShape.AJAX, lambda: self._is_ajax(target)),
            (RequestShape.AXIOS, lambda: self._is_bare(target, "axios")),
            (RequestShape.FETCH, lambda: self._is_bare(target, "fetch")),
            (RequestShape.FETCH_DATA_API, lambda: self._is_bare(target, "fetchDataApi")),
            (RequestShape.PROPS_DISPATCH, lambda: self._is_props_dispatch(target, call)),
            (RequestShape.XHR, lambda: self._is_xhr_call(target)),
            (RequestShape.CUSTOM_KEYWORD, lambda: self._has_custom_keyword(lowered)),
        ):
            if matches():
                return shape
        return None

    def is_request(self, call: "Node") -> bool:
        return self.classify(call) is not None

    def find_requests(self, node: "Node") -> list["Node"]:
        """
        Request calls inside node, in source order.

        Links of a promise chain (fetch(x).then(...).catch(...)) are folded
        into the call that starts the chain.
        """
        calls = [c for c in find_calls(node) if self.is_request(c) and not self.continues_request(c)]
        return sorted(calls, key=lambda c: c.start_byte)

    def has_request(self, node: "Node") -> bool:
        return any(self.is_request(c) for c in find_calls(node))

    def continues_request(self, call: "Node") -> bool:
        """True if call is a method invoked on the result of a request call."""
        target = unwrap(call_target(call))
        if target is None or target.type != "member_expression":
            return False
        obj = unwrap(target.child_by_field_name("object"))
        if obj is None or obj.type not in CALL_TYPES:
            return False
        return self.is_request(obj) or self.continues_request(obj)

    # Shape predicates

    @staticmethod
    def _has_verb(lowered: str) -> bool:
        if not any(verb in lowered for verb in HTTP_VERBS):
            return False
        return not any(token in lowered for token in LOG_TOKENS)

    @staticmethod
    def _is_props_action(target: "Node | None") -> bool:
        if target is None or target.type != "member_expression":
            return False
        prop = node_text(target.child_by_field_name("property"))
        if not prop.endswith(ACTION_SUFFIX):
            return False
        obj = callee_name(target.child_by_field_name("object"))
        return any(obj == src or obj.startswith(src + ".") for src in PROPS_SOURCES)

    @staticmethod
    def _is_http_client(target: "Node | None") -> bool:
        if target is None or target.type != "member_expression":
            return False
        obj = unwrap(target.child_by_field_name("object"))
        prop = node_text(target.child_by_field_name("property"))
        return obj is not None and obj.type == "identifier" and node_text(obj) == "http" and (
            prop in CAPITALIZED_HTTP_VERBS
        )

    @staticmethod
    def _is_vue_http(target: "Node | None") -> bool:
        if target is None or target.type != "member_expression":
            return False
        obj = callee_name(target.child_by_field_name("object"))
        prop = node_text(target.child_by_field_name("property"))
        return obj.endswith("$http") and prop in HTTP_VERBS

    @staticmethod
    def _is_ajax(target: "Node | None") -> bool:
        if target is None or target.type != "member_expression":
            return False
        obj = callee_name(target.child_by_field_name("object"))
        prop = node_text(target.child_by_field_name("property"))
        if obj in ("$", "jQuery") and prop == "ajax":
            return True
        return obj == "ajax" and prop.lower() in HTTP_VERBS

    @staticmethod
    def _is_bare(target: "Node | None", name: str) -> bool:
        return target is not None and target.type == "identifier" and node_text(target) == name

    @staticmethod
    def _is_props_dispatch(target: "Node | None", call: "Node") -> bool:
        if target is None or callee_name(target) not in ("props.dispatch", "this.props.dispatch"):
            return False
        args = call_arguments(call)
        return bool(args) and "type" in object_keys(args[0])

    @staticmethod
    def _is_xhr_call(target: "Node | None") -> bool:
        if target is None or target.type != "member_expression":
            return False
        prop = node_text(target.child_by_field_name("property"))
        if prop not in XHR_METHODS:
            return False
        obj = callee_name(target.child_by_field_name("object")).lower()
        return "xhr" in obj or "http" in obj

    def _has_custom_keyword(self, lowered: str) -> bool:
        if not any(keyword in lowered for keyword in self._keywords):
            return False
        return not any(token in lowered for token in LOG_TOKENS + SERIALIZATION_TOKENS)

    # Derived facts used by the rules

    @staticmethod
    def method_name(call: "Node") -> str:
        return callee_name(call) if call.type in CALL_TYPES else ""

    @staticmethod
    def action_name(call: "Node") -> str | None:
        """Name of an Action-suffixed property being called, if any."""
        target = unwrap(call_target(call))
        if target is None:
            return None
        if target.type == "member_expression":
            prop = node_text(target.child_by_field_name("property"))
        elif target.type == "identifier":
            prop = node_text(target)
        else:
            return None
        return prop if prop.endswith(ACTION_SUFFIX) else None

    def mutation_verb(self, call: "Node") -> str | None:
        """
        POST/PUT/DELETE/PATCH when the request mutates server state.

        Evidence, in order: method-name suffix, jQuery-style ajax verb, a
        dispatch payload type, an Action name, then an options object with
        a method/type field.
        """
        if call.type != "call_expression" or not self.is_request(call):
            return None
        name = self.method_name(call)
        if self._is_excluded(name):
            return None
        suffix = _MUTATING_SUFFIX.search(name)
        if suffix:
            return suffix.group(1).upper()
        lowered = name.lower()
        if "dispatch" in lowered:
            verb = self._dispatch_verb(call)
            if verb:
                return verb
        action = self.action_name(call)
        if action:
            action_lower = action.lower()
            for keyword in ACTION_MUTATION_KEYWORDS:
                if keyword in action_lower:
                    return "DELETE" if keyword in ("delete", "remove") else "POST"
        return self._options_verb(call)

    @staticmethod
    def _is_excluded(name: str) -> bool:
        last = name.rsplit(".", 1)[-1]
        return any(last == excluded for excluded in EXCLUDED_METHOD_NAMES)

    @staticmethod
    def _dispatch_verb(call: "Node") -> str | None:
        args = call_arguments(call)
        if not args:
            return None
        type_value = string_value(object_keys(args[0]).get("type"))
        if not type_value:
            return None
        lowered = type_value.lower()
        for keyword in DISPATCH_MUTATION_KEYWORDS:
            if keyword in lowered:
                return "DELETE" if keyword in ("delete", "remove") else "POST"
        return None

    @staticmethod
    def _options_verb(call: "Node") -> str | None:
        for arg in call_arguments(call):
            keys = object_keys(arg)
            for field in ("method", "type"):
                value = string_value(keys.get(field))
                if value and value.upper() in MUTATION_VERBS:
                    return value.upper()
        return None
