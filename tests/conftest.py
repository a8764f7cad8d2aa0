"""Pytest configuration: shared parser, configuration and source-unit fixtures.

Run pytest from this project's root; pythonpath in pyproject.toml puts src/
on the import path so the installed package is not required.
"""

import textwrap
from collections.abc import Callable

import pytest

from ux_commit_check.domain.config import CheckConfiguration
from ux_commit_check.domain.entities import SourceUnit
from ux_commit_check.infrastructure.config_file_loader import ConfigFileLoader
from ux_commit_check.infrastructure.gateways.tree_sitter_gateway import TreeSitterGateway


@pytest.fixture(scope="session")
def parser() -> TreeSitterGateway:
    """One gateway for the whole session; grammar loading is the slow part."""
    return TreeSitterGateway()


@pytest.fixture
def config() -> CheckConfiguration:
    """The packaged default configuration."""
    return CheckConfiguration(ConfigFileLoader.load_defaults())


@pytest.fixture
def config_with() -> Callable[..., CheckConfiguration]:
    """Defaults overlaid with the given top-level sections, e.g. config_with(rule3={"enabled": False})."""

    def _build(**sections: object) -> CheckConfiguration:
        return CheckConfiguration(ConfigFileLoader.deep_merge(ConfigFileLoader.load_defaults(), sections))

    return _build


@pytest.fixture
def make_unit(parser: TreeSitterGateway) -> Callable[..., SourceUnit]:
    """Parse dedented source text into a SourceUnit; fails the test when the text does not parse."""

    def _make(path: str, text: str, diff_text: str = "") -> SourceUnit:
        unit = parser.parse(path, textwrap.dedent(text).lstrip("\n"), diff_text)
        assert unit is not None, f"{path} did not parse"
        return unit

    return _make


def line_of(text: str, needle: str) -> int:
    """1-based line of the first occurrence of needle in dedented text."""
    source = textwrap.dedent(text).lstrip("\n")
    return source[: source.index(needle)].count("\n") + 1


@pytest.fixture
def find_line() -> Callable[[str, str], int]:
    return line_of
