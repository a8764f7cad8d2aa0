"""GuidanceService: loads the rule registry and provides display names and fix instructions."""

from pathlib import Path
from typing import Optional, cast

import yaml

from ux_commit_check.domain.constants import RULE_LABELS
from ux_commit_check.domain.protocols import GuidanceServiceProtocol
from ux_commit_check.domain.registry_types import RuleRegistryEntry


class GuidanceService(GuidanceServiceProtocol):
    """Loads rule_registry.yaml and answers per-rule guidance lookups."""

    def __init__(self, registry_path: Optional[str] = None) -> None:
        if registry_path is not None:
            self._path = Path(registry_path)
        else:
            # Default: packaged resource next to this package
            _base = Path(__file__).resolve().parent.parent.parent
            self._path = _base / "resources" / "rule_registry.yaml"
        self._registry: dict[str, RuleRegistryEntry] = {}
        self._load()

    def _load(self) -> None:
        if self._path.exists():
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
                self._registry = (
                    cast(dict[str, RuleRegistryEntry], data) if isinstance(data, dict) else {}
                )
        else:
            self._registry = {}

    def get_registry(self) -> dict[str, RuleRegistryEntry]:
        """Return a shallow copy of the loaded registry."""
        return dict(self._registry)

    def get_entry(self, rule: int) -> Optional[RuleRegistryEntry]:
        """Registry entry for a rule number, or None if it has none."""
        entry = self._registry.get(f"rule{rule}")
        return cast(RuleRegistryEntry, dict(entry)) if entry else None

    def display_name(self, rule: int) -> str:
        entry = self.get_entry(rule)
        if entry and entry.get("display_name"):
            return str(entry["display_name"])
        return RULE_LABELS.get(rule, f"rule{rule}")

    def get_manual_instructions(self, rule: int) -> str:
        entry = self.get_entry(rule)
        if entry and "manual_instructions" in entry:
            return str(entry["manual_instructions"]).rstrip()
        return "See the project docs. Fix the violation at the reported location."

    def find_rule(self, code: str) -> Optional[int]:
        """Rule number from '3', 'rule3' or a symbol such as 'missing-success-toast'."""
        text = code.strip().lower()
        if text.startswith("rule"):
            text = text[len("rule"):]
        if text.isdigit():
            number = int(text)
            return number if f"rule{number}" in self._registry else None
        for key, entry in self._registry.items():
            if entry.get("symbol") == text and key.startswith("rule") and key[4:].isdigit():
                return int(key[4:])
        return None
