"""Load ux-commit-check configuration from YAML or pyproject.toml. Infrastructure I/O only."""

import copy
import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

import yaml

from ux_commit_check.domain.config import CheckConfiguration, ConfigurationError
from ux_commit_check.domain.constants import CONFIG_FILE_NAMES, PYPROJECT_TOOL_KEY

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "resources" / "default_config.yaml"


class ConfigFileLoader:
    """
    Finds the project configuration and merges it over the packaged defaults.

    Search order, from the working directory upwards: ux-commit-check.yaml,
    ux-commit-check.yml, .ux-commit-check.yaml, then [tool.ux-commit-check]
    in pyproject.toml. The first directory holding any of them wins.
    """

    @staticmethod
    def default_config_text() -> str:
        return DEFAULT_CONFIG_PATH.read_text(encoding="utf-8")

    @staticmethod
    def load_defaults() -> dict[str, object]:
        data = yaml.safe_load(ConfigFileLoader.default_config_text())
        if not isinstance(data, dict):
            raise ConfigurationError(f"packaged defaults at {DEFAULT_CONFIG_PATH} are not a mapping")
        return data

    @staticmethod
    def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
        """First config file found walking up from start (default: cwd)."""
        current_path = (start or Path.cwd()).resolve()
        while True:
            for name in CONFIG_FILE_NAMES:
                candidate = current_path / name
                if candidate.is_file():
                    return candidate
            pyproject = current_path / "pyproject.toml"
            if pyproject.is_file() and ConfigFileLoader._pyproject_section(pyproject) is not None:
                return pyproject
            if current_path.parent == current_path:
                return None
            current_path = current_path.parent

    @staticmethod
    def _pyproject_section(path: Path) -> Optional[dict[str, object]]:
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Ignoring unreadable %s: %s", path, e)
            return None
        section = (data.get("tool", {}) or {}).get(PYPROJECT_TOOL_KEY)
        return section if isinstance(section, dict) else None

    @staticmethod
    def read_user_config(path: Path) -> dict[str, object]:
        """Parse one config file. Raises ConfigurationError when it is unreadable or malformed."""
        if path.name == "pyproject.toml":
            section = ConfigFileLoader._pyproject_section(path)
            if section is None:
                raise ConfigurationError(f"{path} has no [tool.{PYPROJECT_TOOL_KEY}] table")
            return section
        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"cannot read {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"invalid YAML in {path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping at the top level")
        return data

    @staticmethod
    def load(config_path: Optional[str] = None, start: Optional[Path] = None) -> CheckConfiguration:
        """Load, merge and validate configuration. Missing configuration is a ConfigurationError."""
        if config_path is not None:
            path: Optional[Path] = Path(config_path)
            if not path.is_file():
                raise ConfigurationError(f"config file not found: {config_path}")
        else:
            path = ConfigFileLoader.find_config_file(start)
        if path is None:
            raise ConfigurationError(
                "no configuration found (ux-commit-check.yaml or [tool.ux-commit-check] in "
                "pyproject.toml); run 'ux-commit-check init' to create one"
            )
        logger.debug("Using configuration from %s", path)
        merged = ConfigFileLoader.deep_merge(ConfigFileLoader.load_defaults(), ConfigFileLoader.read_user_config(path))
        return CheckConfiguration(merged)

    @staticmethod
    def deep_merge(base: Mapping[str, object], override: Mapping[str, object]) -> dict[str, object]:
        """Recursively merge override into a copy of base; lists and scalars are replaced."""
        result: dict[str, object] = copy.deepcopy(dict(base))
        for key, value in override.items():
            current = result.get(key)
            if isinstance(current, Mapping) and isinstance(value, Mapping):
                result[key] = ConfigFileLoader.deep_merge(current, value)
            else:
                result[key] = copy.deepcopy(value)
        return result
