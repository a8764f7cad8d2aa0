"""Ports implemented by Infrastructure and consumed by rules and use cases."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable

    from tree_sitter import Tree

    from ux_commit_check.domain.entities import ActionLoadingBinding, SourceUnit, StagedFile
    from ux_commit_check.domain.registry_types import RuleRegistryEntry


class SourceParserProtocol(Protocol):
    """Turns file text into a SourceUnit."""

    def parse(self, path: str, text: str, diff_text: str = "") -> "SourceUnit | None":
        """Return None when the file cannot be analyzed at all."""
        ...

    def parse_script(self, path: str, text: str) -> "Tree | None":
        """Parse plain script text by extension; None on syntax errors."""
        ...


class ActionResolverProtocol(Protocol):
    """Finds the loading flag an action's declaring call names."""

    def resolve(
        self, action_name: str, unit: "SourceUnit", strict: bool = False
    ) -> "ActionLoadingBinding | None":
        """strict=True only accepts the literal 'loading' as the flag name."""
        ...


class FileSystemProtocol(Protocol):
    """Filesystem access used by the resolver and the CLI."""

    def exists(self, path: str) -> bool:
        ...

    def read_text(self, path: str) -> str:
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        ...

    def search_files(
        self, root: str, suffixes: tuple[str, ...], name_prefixes: tuple[str, ...] = ()
    ) -> list[str]:
        ...

    def collect_files(self, paths: list[str]) -> list[str]:
        ...


class GitError(Exception):
    """The staging area could not be read."""


class StagingAreaProtocol(Protocol):
    """Reads what is about to be committed."""

    def staged_files(self, path_filter: "Callable[[str], bool] | None" = None) -> list["StagedFile"]:
        ...


class TelemetryPort(Protocol):
    """Operator-facing status lines."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def handshake(self) -> None: ...


class GuidanceServiceProtocol(Protocol):
    """Packaged rule guidance."""

    def get_entry(self, rule: int) -> "RuleRegistryEntry | None":
        ...

    def display_name(self, rule: int) -> str:
        ...

    def get_manual_instructions(self, rule: int) -> str:
        ...

    def find_rule(self, code: str) -> int | None:
        ...
