"""Read-only helpers over tree-sitter syntax trees (JavaScript / TypeScript / JSX)."""

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tree_sitter import Node

FUNCTION_TYPES: frozenset[str] = frozenset(
    {
        "function_declaration",
        "function_expression",
        "function",
        "arrow_function",
        "method_definition",
        "generator_function",
        "generator_function_declaration",
    }
)
CALL_TYPES: frozenset[str] = frozenset({"call_expression", "new_expression"})
MEMBER_TYPES: frozenset[str] = frozenset({"member_expression"})
JSX_TAG_TYPES: frozenset[str] = frozenset({"jsx_opening_element", "jsx_self_closing_element"})
STRING_TYPES: frozenset[str] = frozenset({"string", "template_string"})
TRANSPARENT_WRAPPERS: frozenset[str] = frozenset(
    {"parenthesized_expression", "await_expression", "non_null_expression", "as_expression"}
)
WRAPPER_HOOKS: frozenset[str] = frozenset(
    {
        "useCallback",
        "useMemo",
        "useMemoizedFn",
        "useLockFn",
        "useDebounceFn",
        "useThrottleFn",
        "debounce",
        "throttle",
    }
)
_CHAIN_TYPES: frozenset[str] = frozenset(
    {"parenthesized_expression", "member_expression", "call_expression", "non_null_expression"}
)


def node_text(node: "Node | None") -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def same_node(a: "Node | None", b: "Node | None") -> bool:
    if a is None or b is None:
        return False
    return (a.start_byte, a.end_byte, a.type) == (b.start_byte, b.end_byte, b.type)


def contains(outer: "Node", inner: "Node") -> bool:
    return outer.start_byte <= inner.start_byte and inner.end_byte <= outer.end_byte


def is_function(node: "Node") -> bool:
    # Anonymous keyword tokens share some of these type names.
    return node.is_named and node.type in FUNCTION_TYPES


def walk(node: "Node") -> Iterator["Node"]:
    """Pre-order traversal over named nodes."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.named_children))


def find_all(node: "Node", predicate: Callable[["Node"], bool]) -> list["Node"]:
    return [n for n in walk(node) if predicate(n)]


def find_calls(node: "Node") -> list["Node"]:
    return find_all(node, lambda n: n.type in CALL_TYPES)


def ancestors(node: "Node") -> Iterator["Node"]:
    current = node.parent
    while current is not None:
        yield current
        current = current.parent


def enclosing_function(node: "Node") -> "Node | None":
    for parent in ancestors(node):
        if is_function(parent):
            return parent
    return None


def unwrap(node: "Node | None") -> "Node | None":
    """Strip parentheses, await and TypeScript non-null/as wrappers."""
    while node is not None and node.type in TRANSPARENT_WRAPPERS:
        inner = node.named_children
        node = inner[0] if inner else None
    return node


def string_value(node: "Node | None") -> str | None:
    """Value of a string literal (or a template literal without substitutions)."""
    node = unwrap(node)
    if node is None or node.type not in STRING_TYPES:
        return None
    if node.type == "template_string" and any(
        c.type == "template_substitution" for c in node.named_children
    ):
        return None
    return node_text(node)[1:-1]


def callee_name(node: "Node | None") -> str:
    """
    Dotted name of an invocation target.

    identifier -> name; member -> "object.property" (recursively); call ->
    recurse into its callee; anything else -> "".
    """
    node = unwrap(node)
    if node is None:
        return ""
    if node.type in CALL_TYPES:
        return callee_name(call_target(node))
    if node.type in ("identifier", "property_identifier", "private_property_identifier"):
        return node_text(node)
    if node.type == "this":
        return "this"
    if node.type in MEMBER_TYPES:
        obj = callee_name(node.child_by_field_name("object"))
        prop = node_text(node.child_by_field_name("property"))
        return f"{obj}.{prop}" if obj else prop
    return ""


def call_target(call: "Node") -> "Node | None":
    if call.type == "new_expression":
        return call.child_by_field_name("constructor")
    return call.child_by_field_name("function")


def call_arguments(call: "Node") -> list["Node"]:
    args = call.child_by_field_name("arguments")
    if args is None:
        return []
    return [a for a in args.named_children if a.type != "comment"]


def member_property(node: "Node | None") -> str:
    node = unwrap(node)
    if node is None or node.type not in MEMBER_TYPES:
        return ""
    return node_text(node.child_by_field_name("property"))


def object_keys(node: "Node | None") -> dict[str, "Node | None"]:
    """Keys of an object literal mapped to their value nodes (shorthand keys map to themselves)."""
    node = unwrap(node)
    keys: dict[str, "Node | None"] = {}
    if node is None or node.type != "object":
        return keys
    for child in node.named_children:
        if child.type == "pair":
            key_node = child.child_by_field_name("key")
            key = string_value(key_node)
            if key is None:
                key = node_text(key_node)
            keys[key] = child.child_by_field_name("value")
        elif child.type == "shorthand_property_identifier":
            keys[node_text(child)] = child
    return keys


def function_body_statements(func: "Node") -> list["Node"]:
    """Top-level statements of a function body; an expression body is its own single statement."""
    body = func.child_by_field_name("body")
    if body is None:
        return []
    if body.type == "statement_block":
        return block_statements(body)
    return [body]


def block_statements(block: "Node") -> list["Node"]:
    return [c for c in block.named_children if c.type != "comment"]


def function_name(func: "Node") -> str:
    """Best-effort name of a function node: declared name, variable, property or field."""
    name = func.child_by_field_name("name")
    if name is not None and func.type != "arrow_function":
        return node_text(name)
    declared = _declared_name(func)
    if declared:
        return declared
    parent = func.parent
    if parent is not None and parent.type == "arguments" and parent.parent is not None:
        wrapper = parent.parent
        if wrapper.type == "call_expression" and _is_wrapper_hook(wrapper):
            return _declared_name(wrapper)
    return ""


def _is_wrapper_hook(call: "Node") -> bool:
    name = callee_name(call_target(call))
    return name.rsplit(".", 1)[-1] in WRAPPER_HOOKS


def _declared_name(node: "Node") -> str:
    parent = node.parent
    while parent is not None and parent.type in TRANSPARENT_WRAPPERS:
        parent = parent.parent
    if parent is None:
        return ""
    if parent.type == "variable_declarator":
        return node_text(parent.child_by_field_name("name"))
    if parent.type == "pair":
        key = parent.child_by_field_name("key")
        return string_value(key) or node_text(key)
    if parent.type == "assignment_expression":
        left = parent.child_by_field_name("left")
        return member_property(left) or node_text(left)
    if parent.type in ("field_definition", "public_field_definition"):
        key = parent.child_by_field_name("property") or parent.child_by_field_name("name")
        return node_text(key)
    return ""


def function_index(root: "Node") -> dict[str, list["Node"]]:
    """Map every nameable function in the tree to its nodes."""
    index: dict[str, list["Node"]] = {}
    for node in walk(root):
        if not is_function(node):
            continue
        name = function_name(node)
        if name:
            index.setdefault(name, []).append(node)
    return index


def containing_statement(node: "Node", block: "Node") -> "Node | None":
    """The direct child statement of block that contains node."""
    for stmt in block_statements(block):
        if contains(stmt, node):
            return stmt
    return None


def statement_path(node: "Node", stop: "Node") -> list[tuple["Node", "Node"]]:
    """(block, statement) pairs from the innermost block outwards, up to stop."""
    pairs: list[tuple["Node", "Node"]] = []
    child = node
    for parent in ancestors(node):
        if parent.type == "statement_block":
            pairs.append((parent, child))
        if same_node(parent, stop):
            break
        child = parent
    return pairs


def statements_before(node: "Node", func: "Node") -> list["Node"]:
    """Statements that run before node within func, innermost block first."""
    result: list["Node"] = []
    for block, stmt in statement_path(node, func):
        for sibling in block_statements(block):
            if same_node(sibling, stmt):
                break
            result.append(sibling)
    return result


def statements_after(node: "Node", func: "Node") -> list["Node"]:
    """Statements that run after node within func, innermost block first."""
    result: list["Node"] = []
    for block, stmt in statement_path(node, func):
        seen = False
        for sibling in block_statements(block):
            if seen:
                result.append(sibling)
            elif same_node(sibling, stmt):
                seen = True
    return result


def enclosing_finally_blocks(node: "Node", func: "Node") -> list["Node"]:
    """finally bodies of try statements around node inside func."""
    blocks: list["Node"] = []
    for parent in ancestors(node):
        if same_node(parent, func):
            break
        if parent.type == "try_statement":
            handler = parent.child_by_field_name("finalizer")
            if handler is not None and not contains(handler, node):
                body = handler.child_by_field_name("body") or handler
                blocks.append(body)
    return blocks


def is_async(func: "Node") -> bool:
    return any(child.type == "async" for child in func.children)


def is_awaited(node: "Node") -> bool:
    """True if node (or the chain it starts) is the operand of an await."""
    for parent in ancestors(node):
        if parent.type == "await_expression":
            return True
        if parent.type not in _CHAIN_TYPES:
            return False
    return False


def promise_callbacks(call: "Node", methods: frozenset[str]) -> list[tuple[str, "Node"]]:
    """
    Callbacks attached to call through a .then/.catch/.finally chain.

    Returns (method, callback-node) pairs in chain order; only function
    arguments are returned.
    """
    callbacks: list[tuple[str, "Node"]] = []
    current = call
    while True:
        parent = current.parent
        while parent is not None and parent.type in ("parenthesized_expression", "non_null_expression"):
            current, parent = parent, parent.parent
        if parent is None or parent.type != "member_expression":
            break
        if not same_node(parent.child_by_field_name("object"), current):
            break
        method = node_text(parent.child_by_field_name("property"))
        outer = parent.parent
        if method not in methods or outer is None or outer.type != "call_expression":
            break
        for arg in call_arguments(outer):
            if is_function(arg):
                callbacks.append((method, arg))
        current = outer
    return callbacks


def top_chain_call(call: "Node") -> "Node":
    """Outermost call of a promise/method chain starting at call."""
    current = call
    while True:
        parent = current.parent
        if parent is None or parent.type != "member_expression":
            return current
        outer = parent.parent
        if outer is None or outer.type != "call_expression":
            return current
        current = outer


def boolean_value(node: "Node | None") -> bool | None:
    """true/false literal (also !0 / !1 and !true / !false)."""
    node = unwrap(node)
    if node is None:
        return None
    if node.type == "true":
        return True
    if node.type == "false":
        return False
    if node.type == "unary_expression" and node_text(node.child_by_field_name("operator")) == "!":
        inner = unwrap(node.child_by_field_name("argument"))
        if inner is not None and inner.type == "number":
            return node_text(inner) == "0"
        inner_value = boolean_value(inner)
        return None if inner_value is None else not inner_value
    return None
