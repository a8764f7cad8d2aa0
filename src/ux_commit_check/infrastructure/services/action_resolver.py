"""Cross-file action resolver: finds the loading flag an `xxxAction` is declared with.

Actions are declared elsewhere as `XxxAction = declareRequest('loading', ...)`.
The declaring file is located through namespace imports
(`import { NS_USER } from '~/enumerate/namespace'` -> `src/api/<ns>/index.*`),
or, when that yields nothing, through a bounded search of the project.
Resolution is heuristic: None means "no information", never an error.
"""

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from ux_commit_check.domain.constants import (
    DEFAULT_DECLARE_FUNCTION,
    DEFINE_NAMESPACE_FUNCTION,
    NAMESPACE_CONSTANT_PREFIX,
    NAMESPACE_IMPORT_TOKENS,
    NAMESPACE_PROBE_DIRS,
    PATH_ALIASES,
    SCRIPT_EXTENSIONS,
    SEARCH_NAME_PREFIXES,
)
from ux_commit_check.domain.entities import ActionLoadingBinding
from ux_commit_check.domain.protocols import ActionResolverProtocol
from ux_commit_check.domain.syntax import (
    call_arguments,
    call_target,
    find_all,
    member_property,
    node_text,
    string_value,
    unwrap,
    walk,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from ux_commit_check.domain.entities import SourceUnit
    from ux_commit_check.domain.protocols import FileSystemProtocol, SourceParserProtocol

logger = logging.getLogger(__name__)

STRICT_LOADING_NAME = "loading"


class ActionResolver(ActionResolverProtocol):
    """Resolves action names to ActionLoadingBindings. One instance per run; lookups are memoized."""

    def __init__(
        self,
        parser: "SourceParserProtocol",
        filesystem: "FileSystemProtocol",
        project_root: Optional[str] = None,
        declare_function: str = DEFAULT_DECLARE_FUNCTION,
    ) -> None:
        self._parser = parser
        self._filesystem = filesystem
        self._root = Path(project_root) if project_root else Path.cwd()
        self._declare_function = declare_function
        self._cache: Dict[Tuple[str, str], Optional[ActionLoadingBinding]] = {}

    def resolve(
        self, action_name: str, unit: "SourceUnit", strict: bool = False
    ) -> Optional[ActionLoadingBinding]:
        """Binding for action_name as seen from unit; strict only accepts the flag 'loading'."""
        if not action_name:
            return None
        key = (action_name, unit.path)
        if key not in self._cache:
            self._cache[key] = self._lookup(action_name, unit)
        binding = self._cache[key]
        if binding is None:
            return None
        if strict and binding.loading_name != STRICT_LOADING_NAME:
            return None
        return binding

    def clear_cache(self) -> None:
        self._cache.clear()

    def _lookup(self, action_name: str, unit: "SourceUnit") -> Optional[ActionLoadingBinding]:
        for candidate in self.candidate_files(unit):
            try:
                text = self._filesystem.read_text(candidate)
            except OSError as exc:
                logger.debug("Cannot read %s while resolving %s: %s", candidate, action_name, exc)
                continue
            if action_name not in text or self._declare_function not in text:
                continue
            tree = self._parser.parse_script(candidate, text)
            if tree is None:
                continue
            loading_name = self.find_declaration(tree.root_node, action_name)
            if loading_name is not None:
                logger.debug("Resolved %s -> %r in %s", action_name, loading_name, candidate)
                return ActionLoadingBinding(action_name, loading_name, candidate)
        logger.debug("Could not resolve %s from %s", action_name, unit.path)
        return None

    # Candidate files

    def candidate_files(self, unit: "SourceUnit") -> List[str]:
        """Namespace-derived files, else a project search. Deduplicated, order kept."""
        files = self._namespace_files(unit)
        if not files:
            files = self._searched_files(unit)
        seen: set[str] = set()
        unique: List[str] = []
        for path in files:
            normalized = os.path.normpath(path)
            if normalized not in seen:
                seen.add(normalized)
                unique.append(normalized)
        return unique

    def _namespace_files(self, unit: "SourceUnit") -> List[str]:
        root = unit.root
        if root is None:
            return []
        files: List[str] = []
        for statement in find_all(root, lambda n: n.type == "import_statement"):
            source = string_value(statement.child_by_field_name("source"))
            if not source or not any(token in source for token in NAMESPACE_IMPORT_TOKENS):
                continue
            if not any(n.type == "import_specifier" for n in walk(statement)):
                continue
            namespace_file = self.resolve_module(source, unit.path)
            if namespace_file is None:
                continue
            for value in self.namespace_values(namespace_file).values():
                probed = self._probe_namespace(value)
                if probed is not None:
                    files.append(probed)
        return files

    def resolve_module(self, import_path: str, current_file: str) -> Optional[str]:
        """First existing file for an import path, alias-substituted or relative to current_file."""
        aliased = import_path
        for alias, target in PATH_ALIASES.items():
            if aliased.startswith(alias):
                aliased = target + aliased[len(alias):]
                break
        current_dir = (self._root / current_file).parent
        candidates: List[Path] = []
        candidates.extend(self._root / f"{aliased}{ext}" for ext in SCRIPT_EXTENSIONS)
        candidates.extend(self._root / aliased / f"index{ext}" for ext in SCRIPT_EXTENSIONS)
        candidates.extend(current_dir / f"{import_path}{ext}" for ext in (".js", ".ts"))
        candidates.extend(current_dir / import_path / f"index{ext}" for ext in (".js", ".ts"))
        for candidate in candidates:
            path = os.path.normpath(str(candidate))
            if self._filesystem.exists(path):
                return path
        return None

    def namespace_values(self, namespace_file: str) -> Dict[str, str]:
        """NS_* constants of a namespace file mapped to their string values."""
        try:
            text = self._filesystem.read_text(namespace_file)
        except OSError as exc:
            logger.debug("Cannot read namespace file %s: %s", namespace_file, exc)
            return {}
        tree = self._parser.parse_script(namespace_file, text)
        if tree is None:
            return {}
        values: Dict[str, str] = {}
        for declarator in find_all(tree.root_node, lambda n: n.type == "variable_declarator"):
            name_node = declarator.child_by_field_name("name")
            if name_node is None or name_node.type != "identifier":
                continue
            name = node_text(name_node)
            if not name.startswith(NAMESPACE_CONSTANT_PREFIX):
                continue
            value = unwrap(declarator.child_by_field_name("value"))
            literal = string_value(value)
            if literal is None and value is not None and value.type == "call_expression":
                if node_text(call_target(value)) == DEFINE_NAMESPACE_FUNCTION:
                    args = call_arguments(value)
                    literal = string_value(args[0]) if args else None
            if literal is not None:
                values[name] = literal
        return values

    def _probe_namespace(self, value: str) -> Optional[str]:
        for directory, extensions in NAMESPACE_PROBE_DIRS:
            for ext in extensions:
                path = str(self._root / directory / value / f"index{ext}")
                if self._filesystem.exists(path):
                    return path
        return None

    def _searched_files(self, unit: "SourceUnit") -> List[str]:
        current_dir = (self._root / unit.path).parent
        files: List[str] = []
        files.extend(self._filesystem.search_files(str(current_dir), SCRIPT_EXTENSIONS))
        files.extend(self._filesystem.search_files(str(self._root / "src"), SCRIPT_EXTENSIONS))
        files.extend(
            self._filesystem.search_files(str(self._root), SCRIPT_EXTENSIONS, SEARCH_NAME_PREFIXES)
        )
        return files

    # Declarations

    def find_declaration(self, root: "Node", action_name: str) -> Optional[str]:
        """Loading literal of the first `action_name = declare(...)` style declaration."""
        for node in walk(root):
            if node.type == "variable_declarator":
                target, value = node.child_by_field_name("name"), node.child_by_field_name("value")
                declared = node_text(target) if target is not None and target.type == "identifier" else ""
            elif node.type == "assignment_expression":
                target, value = node.child_by_field_name("left"), node.child_by_field_name("right")
                declared = member_property(target)
            elif node.type == "pair":
                target, value = node.child_by_field_name("key"), node.child_by_field_name("value")
                declared = string_value(target) or node_text(target)
            else:
                continue
            if declared != action_name:
                continue
            loading_name = self._declared_loading(value)
            if loading_name is not None:
                return loading_name
        return None

    def _declared_loading(self, value: "Node | None") -> Optional[str]:
        value = unwrap(value)
        if value is None or value.type != "call_expression":
            return None
        if node_text(call_target(value)) != self._declare_function:
            return None
        args = call_arguments(value)
        return string_value(args[0]) if args else None
