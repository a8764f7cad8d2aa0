import pytest

from ux_commit_check.domain.config import CheckConfiguration
from ux_commit_check.infrastructure.config_file_loader import ConfigFileLoader
from ux_commit_check.infrastructure.di.container import UXCheckContainer
from ux_commit_check.infrastructure.reporters import JsonCheckReporter, TerminalCheckReporter
from ux_commit_check.infrastructure.services.action_resolver import ActionResolver


class TestUXCheckContainer:
    def test_initialization_registers_telemetry(self) -> None:
        container = UXCheckContainer()
        telemetry = container.get("TelemetryPort")
        assert telemetry is not None
        assert telemetry.project_name == "UX-CHECK"

    def test_register_and_get_singleton(self) -> None:
        container = UXCheckContainer()
        mock_dep = {"foo": "bar"}
        container.register_singleton("MockDep", mock_dep)

        retrieved = container.get("MockDep")
        assert retrieved == mock_dep
        assert retrieved is mock_dep  # Same instance

    def test_get_missing_dependency_raises_error(self) -> None:
        container = UXCheckContainer()
        with pytest.raises(ValueError, match=r"Dependency 'Missing' not registered\."):
            container.get("Missing")

    def test_reporter_by_format(self) -> None:
        container = UXCheckContainer()
        assert isinstance(container.get_reporter("json"), JsonCheckReporter)
        assert isinstance(container.get_reporter("text"), TerminalCheckReporter)
        assert isinstance(container.get_reporter("anything"), TerminalCheckReporter)

    def test_terminal_reporter_uses_guidance_service(self) -> None:
        container = UXCheckContainer()
        reporter = container.get_reporter("text")
        assert reporter.guidance_service is container.get_guidance_service()

    def test_resolver_is_fresh_per_run(self) -> None:
        container = UXCheckContainer()
        config = CheckConfiguration(
            ConfigFileLoader.deep_merge(
                ConfigFileLoader.load_defaults(), {"global": {"declareRequestFunction": "createAction"}}
            )
        )
        first = container.create_action_resolver(config)
        second = container.create_action_resolver(config)
        assert isinstance(first, ActionResolver)
        assert first is not second

    def test_get_instance_and_reset(self) -> None:
        UXCheckContainer.reset()
        try:
            instance = UXCheckContainer.get_instance()
            assert UXCheckContainer.get_instance() is instance
            UXCheckContainer.reset()
            assert UXCheckContainer.get_instance() is not instance
        finally:
            UXCheckContainer.reset()
