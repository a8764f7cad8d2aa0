"""Checker configuration. Immutable value object created by Infrastructure."""

from __future__ import annotations

import fnmatch
from collections.abc import Mapping
from dataclasses import dataclass, field

from ux_commit_check.domain.constants import DEFAULT_DECLARE_FUNCTION, RULE_NUMBERS


class ConfigurationError(Exception):
    """Configuration is missing or malformed; the run cannot start."""


@dataclass(frozen=True)
class RuleSettings:
    """Per-rule switches: enabled flag, whitelist and custom keyword lists."""

    number: int
    enabled: bool = True
    whitelist_keywords: tuple[str, ...] = ()
    whitelist_paths: tuple[str, ...] = ()
    custom_keywords: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def keywords(self, key: str) -> tuple[str, ...]:
        return self.custom_keywords.get(key, ())

    def is_path_whitelisted(self, path: str) -> bool:
        return any(_path_matches(path, pattern) for pattern in self.whitelist_paths)

    def matching_keyword(self, text: str) -> str | None:
        """First whitelist keyword contained in text (case-insensitive)."""
        lowered = text.lower()
        for keyword in self.whitelist_keywords:
            if keyword and keyword.lower() in lowered:
                return keyword
        return None


class CheckConfiguration:
    """
    Immutable configuration for a checker run.

    Created by Infrastructure from an already merged config dict (packaged
    defaults overlaid with the project's file). Domain code never reads the
    filesystem; it only receives this object.
    """

    def __init__(self, config_dict: Mapping[str, object]) -> None:
        """Validate and freeze config_dict. Raises ConfigurationError on bad shapes."""
        if not isinstance(config_dict, Mapping):
            raise ConfigurationError("configuration root must be a mapping")
        self._raw = config_dict
        self._rules = {n: self._parse_rule(n, config_dict.get(f"rule{n}", {})) for n in RULE_NUMBERS}
        global_section = config_dict.get("global", {}) or {}
        if not isinstance(global_section, Mapping):
            raise ConfigurationError("'global' must be a mapping")
        self._file_extensions = self._get_list(global_section, "fileExtensions", "global")
        self._ignore = self._get_list(global_section, "ignore", "global")
        declare = global_section.get("declareRequestFunction", DEFAULT_DECLARE_FUNCTION)
        if not isinstance(declare, str) or not declare:
            raise ConfigurationError("'global.declareRequestFunction' must be a non-empty string")
        self._declare_function = declare
        self._fail_on_error = bool(global_section.get("failOnError", False))

    @staticmethod
    def _get_list(section: Mapping[str, object], key: str, where: str) -> tuple[str, ...]:
        value = section.get(key, [])
        if value is None:
            return ()
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise ConfigurationError(f"'{where}.{key}' must be a list of strings")
        return tuple(value)

    def _parse_rule(self, number: int, section: object) -> RuleSettings:
        where = f"rule{number}"
        if section is None:
            section = {}
        if not isinstance(section, Mapping):
            raise ConfigurationError(f"'{where}' must be a mapping")
        whitelist = section.get("whitelist", {}) or {}
        if not isinstance(whitelist, Mapping):
            raise ConfigurationError(f"'{where}.whitelist' must be a mapping")
        custom = section.get("customKeywords", {}) or {}
        if not isinstance(custom, Mapping):
            raise ConfigurationError(f"'{where}.customKeywords' must be a mapping")
        return RuleSettings(
            number=number,
            enabled=bool(section.get("enabled", True)),
            whitelist_keywords=self._get_list(whitelist, "keywords", f"{where}.whitelist"),
            whitelist_paths=self._get_list(whitelist, "paths", f"{where}.whitelist"),
            custom_keywords={
                str(key): self._get_list(custom, key, f"{where}.customKeywords") for key in custom
            },
        )

    def rule(self, number: int) -> RuleSettings:
        return self._rules[number]

    @property
    def rules(self) -> dict[int, RuleSettings]:
        return dict(self._rules)

    @property
    def file_extensions(self) -> tuple[str, ...]:
        return self._file_extensions

    @property
    def ignore_patterns(self) -> tuple[str, ...]:
        return self._ignore

    @property
    def declare_function(self) -> str:
        return self._declare_function

    @property
    def fail_on_error(self) -> bool:
        return self._fail_on_error

    def as_dict(self) -> dict[str, object]:
        return dict(self._raw)

    def accepts(self, path: str) -> bool:
        """True if path has a checked extension and matches no ignore pattern."""
        normalized = path.replace("\\", "/")
        if self._file_extensions and not normalized.endswith(self._file_extensions):
            return False
        return not any(_path_matches(normalized, pattern) for pattern in self._ignore)


def _path_matches(path: str, pattern: str) -> bool:
    """Glob match against the whole path or its basename; 'dir/**' also matches nested dirs."""
    path = path.replace("\\", "/")
    if fnmatch.fnmatch(path, pattern) or fnmatch.fnmatch(path.rsplit("/", 1)[-1], pattern):
        return True
    if pattern.endswith("/**"):
        prefix = pattern[: -len("/**")]
        return prefix in path.split("/")[:-1] or path.startswith(prefix + "/")
    # plain substrings match anywhere in the path
    return not any(ch in pattern for ch in "*?[") and pattern in path
