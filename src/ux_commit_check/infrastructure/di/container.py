from typing import TYPE_CHECKING, Any, Optional, cast

from ux_commit_check.infrastructure.config_file_loader import ConfigFileLoader
from ux_commit_check.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from ux_commit_check.infrastructure.gateways.git_gateway import GitGateway
from ux_commit_check.infrastructure.gateways.tree_sitter_gateway import TreeSitterGateway
from ux_commit_check.infrastructure.reporters import JsonCheckReporter, TerminalCheckReporter
from ux_commit_check.infrastructure.services.action_resolver import ActionResolver
from ux_commit_check.infrastructure.services.guidance_service import GuidanceService
from ux_commit_check.interface.telemetry import ProjectTelemetry

if TYPE_CHECKING:
    from ux_commit_check.domain.config import CheckConfiguration
    from ux_commit_check.domain.protocols import (
        ActionResolverProtocol,
        FileSystemProtocol,
        SourceParserProtocol,
        StagingAreaProtocol,
        TelemetryPort,
    )
    from ux_commit_check.interface.reporters import CheckReporter


class UXCheckContainer:
    """Dependency Injection Container for ux-commit-check."""

    _instance: Optional["UXCheckContainer"] = None

    def __init__(self) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default implementations for protocols."""
        telemetry = ProjectTelemetry("UX-CHECK", "cyan", "pre-commit UI/UX checks")
        self.register_singleton("TelemetryPort", telemetry)
        self.register_singleton("ConfigFileLoader", ConfigFileLoader())
        self.register_singleton("TreeSitterGateway", TreeSitterGateway())
        self.register_singleton("FileSystemGateway", FileSystemGateway())
        self.register_singleton("GitGateway", GitGateway())
        guidance_service = GuidanceService()
        self.register_singleton("GuidanceService", guidance_service)
        self.register_singleton("TerminalCheckReporter", TerminalCheckReporter(guidance_service))
        self.register_singleton("JsonCheckReporter", JsonCheckReporter())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_config_loader(self) -> ConfigFileLoader:
        return cast(ConfigFileLoader, self.get("ConfigFileLoader"))

    def get_parser(self) -> "SourceParserProtocol":
        """Return the tree-sitter source parser."""
        return cast("SourceParserProtocol", self.get("TreeSitterGateway"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        """Return the filesystem gateway."""
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_staging_area(self) -> "StagingAreaProtocol":
        """Return the git staging-area gateway."""
        return cast("StagingAreaProtocol", self.get("GitGateway"))

    def get_guidance_service(self) -> GuidanceService:
        """Return the guidance service (rule registry)."""
        return cast(GuidanceService, self.get("GuidanceService"))

    def get_reporter(self, output_format: str = "text") -> "CheckReporter":
        """Return the reporter for an output format ('text' or 'json')."""
        key = "JsonCheckReporter" if output_format == "json" else "TerminalCheckReporter"
        return cast("CheckReporter", self.get(key))

    def create_action_resolver(self, config: "CheckConfiguration") -> "ActionResolverProtocol":
        """A fresh resolver per run, so its memo cache never outlives the run."""
        return ActionResolver(
            parser=self.get_parser(),
            filesystem=self.get_filesystem_gateway(),
            declare_function=config.declare_function,
        )

    @classmethod
    def get_instance(cls) -> "UXCheckContainer":
        """Get or create global container instance."""
        if cls._instance is None:
            cls._instance = UXCheckContainer()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        cls._instance = None
