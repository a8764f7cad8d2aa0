"""Unit tests for Typer-based CLI interface."""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from typer.testing import CliRunner

from ux_commit_check import __version__
from ux_commit_check.domain.config import CheckConfiguration, ConfigurationError
from ux_commit_check.domain.entities import CheckResult, StagedFile
from ux_commit_check.domain.protocols import GitError
from ux_commit_check.domain.rules import Violation
from ux_commit_check.infrastructure.config_file_loader import ConfigFileLoader
from ux_commit_check.infrastructure.services.guidance_service import GuidanceService
from ux_commit_check.interface.cli import CLIAppFactory, CLIDependencies

runner = CliRunner()

USE_CASE = "ux_commit_check.interface.cli.CheckStagedFilesUseCase"


def _default_config() -> CheckConfiguration:
    return CheckConfiguration(ConfigFileLoader.load_defaults())


def _make_mock_deps(**overrides) -> CLIDependencies:
    """Create CLIDependencies with mock adapters/services for testing."""
    defaults: dict = {
        "telemetry": Mock(),
        "load_config": Mock(return_value=_default_config()),
        "default_config_text": Mock(return_value="rule1:\n  enabled: true\n"),
        "parser": Mock(),
        "filesystem": Mock(),
        "staging_area": Mock(),
        "guidance_service": GuidanceService(),
        "reporter_for": Mock(),
        "resolver_factory": Mock(),
    }
    defaults.update(overrides)
    return CLIDependencies(**defaults)


def _result(*violations: Violation) -> CheckResult:
    return CheckResult(violations=list(violations), files_checked=1)


class TestCheckCommand:
    """Test the check command."""

    @patch(USE_CASE)
    def test_clean_commit_exits_zero(self, mock_use_case_cls: Mock) -> None:
        deps = _make_mock_deps()
        deps.staging_area.staged_files.return_value = [StagedFile("src/a.js", "x", "d")]
        mock_use_case_cls.return_value.execute.return_value = _result()

        result = runner.invoke(CLIAppFactory.create_app(deps), ["check"])

        assert result.exit_code == 0
        deps.telemetry.handshake.assert_called_once()
        deps.reporter_for.assert_called_once_with("text")
        deps.reporter_for.return_value.report.assert_called_once()
        mock_use_case_cls.return_value.execute.assert_called_once_with([StagedFile("src/a.js", "x", "d")])

    @patch(USE_CASE)
    def test_violations_exit_one(self, mock_use_case_cls: Mock) -> None:
        deps = _make_mock_deps()
        deps.staging_area.staged_files.return_value = [StagedFile("src/a.js", "x")]
        mock_use_case_cls.return_value.execute.return_value = _result(
            Violation(rule=3, file="src/a.js", line=2, message="m", suggestion="s")
        )

        result = runner.invoke(CLIAppFactory.create_app(deps), ["check", "--format", "json"])

        assert result.exit_code == 1
        deps.reporter_for.assert_called_once_with("json")

    @patch(USE_CASE)
    def test_use_case_gets_resolver_for_configuration(self, mock_use_case_cls: Mock) -> None:
        config = _default_config()
        deps = _make_mock_deps(load_config=Mock(return_value=config))
        deps.staging_area.staged_files.return_value = [StagedFile("src/a.js", "x")]
        mock_use_case_cls.return_value.execute.return_value = _result()

        runner.invoke(CLIAppFactory.create_app(deps), ["check", "-c", "custom.yaml"])

        deps.load_config.assert_called_once_with("custom.yaml")
        deps.resolver_factory.assert_called_once_with(config)
        kwargs = mock_use_case_cls.call_args.kwargs
        assert kwargs["config"] is config
        assert kwargs["resolver"] is deps.resolver_factory.return_value

    def test_staging_area_filter_is_the_configuration(self) -> None:
        config = _default_config()
        deps = _make_mock_deps(load_config=Mock(return_value=config))
        deps.staging_area.staged_files.return_value = []

        runner.invoke(CLIAppFactory.create_app(deps), ["check"])

        path_filter = deps.staging_area.staged_files.call_args[0][0]
        assert path_filter("src/a.vue")
        assert not path_filter("README.md")

    def test_nothing_staged_exits_zero(self) -> None:
        deps = _make_mock_deps()
        deps.staging_area.staged_files.return_value = []

        result = runner.invoke(CLIAppFactory.create_app(deps), ["check"])

        assert result.exit_code == 0
        deps.telemetry.step.assert_called_with("No staged front-end files to check.")
        deps.reporter_for.assert_not_called()

    def test_git_error_exits_one(self) -> None:
        deps = _make_mock_deps()
        deps.staging_area.staged_files.side_effect = GitError("not a git repository")

        result = runner.invoke(CLIAppFactory.create_app(deps), ["check"])

        assert result.exit_code == 1
        assert "not a git repository" in deps.telemetry.error.call_args[0][0]

    def test_configuration_error_exits_one(self) -> None:
        deps = _make_mock_deps(load_config=Mock(side_effect=ConfigurationError("no configuration found")))

        result = runner.invoke(CLIAppFactory.create_app(deps), ["check"])

        assert result.exit_code == 1
        deps.telemetry.error.assert_called_once_with("Configuration error: no configuration found")
        deps.staging_area.staged_files.assert_not_called()


class TestFilesCommand:
    @patch(USE_CASE)
    def test_checks_accepted_files_as_new(self, mock_use_case_cls: Mock) -> None:
        deps = _make_mock_deps()
        deps.filesystem.collect_files.return_value = ["src/a.js", "README.md", "src/b.vue"]
        deps.filesystem.read_text.side_effect = lambda path: f"text of {path}"
        mock_use_case_cls.return_value.execute.return_value = _result()

        result = runner.invoke(CLIAppFactory.create_app(deps), ["files", "src", "README.md"])

        assert result.exit_code == 0
        deps.filesystem.collect_files.assert_called_once_with(["src", "README.md"])
        staged = mock_use_case_cls.return_value.execute.call_args[0][0]
        assert staged == [StagedFile("src/a.js", "text of src/a.js"), StagedFile("src/b.vue", "text of src/b.vue")]

    @patch(USE_CASE)
    def test_unreadable_file_is_warned_and_skipped(self, mock_use_case_cls: Mock) -> None:
        deps = _make_mock_deps()
        deps.filesystem.collect_files.return_value = ["src/a.js"]
        deps.filesystem.read_text.side_effect = OSError("permission denied")
        mock_use_case_cls.return_value.execute.return_value = _result()

        runner.invoke(CLIAppFactory.create_app(deps), ["files", "src"])

        deps.telemetry.warning.assert_called_once()
        assert mock_use_case_cls.return_value.execute.call_args[0][0] == []

    def test_paths_are_required(self) -> None:
        result = runner.invoke(CLIAppFactory.create_app(_make_mock_deps()), ["files"])
        assert result.exit_code != 0


class TestRulesAndExplain:
    def test_rules_lists_state(self) -> None:
        config = CheckConfiguration(
            ConfigFileLoader.deep_merge(ConfigFileLoader.load_defaults(), {"rule4": {"enabled": False}})
        )
        deps = _make_mock_deps(load_config=Mock(return_value=config))

        result = runner.invoke(CLIAppFactory.create_app(deps), ["rules"])

        assert result.exit_code == 0
        assert "rule1  [on ]  防重复提交缺失  (missing-double-submit-guard)" in result.output
        assert "rule4  [off]" in result.output

    @pytest.mark.parametrize("code", ["3", "rule3", "missing-success-toast"])
    def test_explain(self, code: str) -> None:
        result = runner.invoke(CLIAppFactory.create_app(_make_mock_deps()), ["explain", code])
        assert result.exit_code == 0
        assert "rule3: 接口操作成功后缺失轻提示" in result.output

    def test_explain_unknown_rule(self) -> None:
        deps = _make_mock_deps()
        result = runner.invoke(CLIAppFactory.create_app(deps), ["explain", "rule42"])
        assert result.exit_code == 1
        deps.telemetry.error.assert_called_once_with("Unknown rule: rule42")


class TestInitAndVersion:
    def test_init_writes_default_config(self) -> None:
        deps = _make_mock_deps()
        deps.filesystem.exists.return_value = False

        result = runner.invoke(CLIAppFactory.create_app(deps), ["init"])

        assert result.exit_code == 0
        target, content = deps.filesystem.write_text.call_args[0]
        assert Path(target).name == "ux-commit-check.yaml"
        assert content == "rule1:\n  enabled: true\n"

    def test_init_refuses_to_overwrite(self) -> None:
        deps = _make_mock_deps()
        deps.filesystem.exists.return_value = True

        result = runner.invoke(CLIAppFactory.create_app(deps), ["init"])

        assert result.exit_code == 1
        deps.filesystem.write_text.assert_not_called()

    def test_init_force_overwrites(self) -> None:
        deps = _make_mock_deps()
        deps.filesystem.exists.return_value = True

        result = runner.invoke(CLIAppFactory.create_app(deps), ["init", "--force"])

        assert result.exit_code == 0
        deps.filesystem.write_text.assert_called_once()

    def test_init_with_real_filesystem(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from ux_commit_check.infrastructure.gateways.filesystem_gateway import FileSystemGateway

        deps = _make_mock_deps(filesystem=FileSystemGateway(), default_config_text=ConfigFileLoader.default_config_text)
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(CLIAppFactory.create_app(deps), ["init"])

        assert result.exit_code == 0
        written = tmp_path / "ux-commit-check.yaml"
        assert written.is_file()
        assert ConfigFileLoader.load(config_path=str(written)).rule(1).enabled

    def test_version(self) -> None:
        result = runner.invoke(CLIAppFactory.create_app(_make_mock_deps()), ["version"])
        assert result.exit_code == 0
        assert result.output.strip() == __version__
