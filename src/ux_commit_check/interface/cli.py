"""CLI entry points for ux-commit-check - Thin Controller using Typer."""

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer

from ux_commit_check import __version__
from ux_commit_check.domain.config import CheckConfiguration, ConfigurationError
from ux_commit_check.domain.constants import CONFIG_FILE_NAMES, RULE_LABELS, RULE_NUMBERS
from ux_commit_check.domain.entities import CheckResult, StagedFile
from ux_commit_check.domain.protocols import (
    ActionResolverProtocol,
    FileSystemProtocol,
    GitError,
    GuidanceServiceProtocol,
    SourceParserProtocol,
    StagingAreaProtocol,
    TelemetryPort,
)
from ux_commit_check.interface.reporters import CheckReporter
from ux_commit_check.use_cases.check_staged import CheckStagedFilesUseCase

# B008: avoid function call in default; use module-level singletons for Typer Options
_CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="Config file (default: search upwards from the current directory)"
)
_FORMAT_OPTION = typer.Option("text", "--format", "-f", help="Report format: text or json")
_VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Log debug details to stderr")
_PATHS_ARGUMENT = typer.Argument(..., help="Files or directories to check as newly added code")


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    telemetry: TelemetryPort
    load_config: Callable[[Optional[str]], CheckConfiguration]
    default_config_text: Callable[[], str]
    parser: SourceParserProtocol
    filesystem: FileSystemProtocol
    staging_area: StagingAreaProtocol
    guidance_service: GuidanceServiceProtocol
    reporter_for: Callable[[str], CheckReporter]
    resolver_factory: Callable[[CheckConfiguration], ActionResolverProtocol]


class CLIAppFactory:
    """Creates the Typer app and holds the helpers its commands share."""

    @staticmethod
    def configure_logging(verbose: bool) -> None:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
            force=True,
        )

    @staticmethod
    def load_config_or_exit(deps: CLIDependencies, config: Optional[Path]) -> CheckConfiguration:
        try:
            return deps.load_config(str(config) if config is not None else None)
        except ConfigurationError as e:
            deps.telemetry.error(f"Configuration error: {e}")
            sys.exit(1)

    @staticmethod
    def run_check(
        deps: CLIDependencies,
        configuration: CheckConfiguration,
        files: List[StagedFile],
        output_format: str,
    ) -> CheckResult:
        use_case = CheckStagedFilesUseCase(
            config=configuration,
            parser=deps.parser,
            resolver=deps.resolver_factory(configuration),
        )
        result = use_case.execute(files)
        deps.reporter_for(output_format).report(result)
        return result

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies. No Service Locator."""
        app = typer.Typer(
            name="ux-commit-check",
            help="Pre-commit UI/UX convention checks for JS/TS/JSX/TSX, Vue and HTML files.",
            add_completion=False,
        )

        @app.command()
        def check(
            config: Optional[Path] = _CONFIG_OPTION,
            output_format: str = _FORMAT_OPTION,
            verbose: bool = _VERBOSE_OPTION,
        ) -> None:
            """Check the files staged for commit. Exits 1 when any rule fails."""
            CLIAppFactory.configure_logging(verbose)
            configuration = CLIAppFactory.load_config_or_exit(deps, config)
            deps.telemetry.handshake()
            try:
                files = deps.staging_area.staged_files(configuration.accepts)
            except GitError as e:
                deps.telemetry.error(f"Cannot read the staging area: {e}")
                sys.exit(1)
            if not files:
                deps.telemetry.step("No staged front-end files to check.")
                sys.exit(0)
            deps.telemetry.step(f"Checking {len(files)} staged file(s)...")
            result = CLIAppFactory.run_check(deps, configuration, files, output_format)
            sys.exit(1 if result.has_violations() else 0)

        @app.command()
        def files(
            paths: List[Path] = _PATHS_ARGUMENT,
            config: Optional[Path] = _CONFIG_OPTION,
            output_format: str = _FORMAT_OPTION,
            verbose: bool = _VERBOSE_OPTION,
        ) -> None:
            """Check files or directories as if every line were newly added."""
            CLIAppFactory.configure_logging(verbose)
            configuration = CLIAppFactory.load_config_or_exit(deps, config)
            staged: List[StagedFile] = []
            for path in deps.filesystem.collect_files([str(p) for p in paths]):
                if not configuration.accepts(path):
                    continue
                try:
                    text = deps.filesystem.read_text(path)
                except OSError as e:
                    deps.telemetry.warning(f"Cannot read {path}: {e}")
                    continue
                staged.append(StagedFile(path=path, text=text))
            deps.telemetry.step(f"Checking {len(staged)} file(s)...")
            result = CLIAppFactory.run_check(deps, configuration, staged, output_format)
            sys.exit(1 if result.has_violations() else 0)

        @app.command()
        def rules(config: Optional[Path] = _CONFIG_OPTION) -> None:
            """List the rules and whether the current configuration enables them."""
            configuration = CLIAppFactory.load_config_or_exit(deps, config)
            for number in RULE_NUMBERS:
                settings = configuration.rule(number)
                entry = deps.guidance_service.get_entry(number) or {}
                state = "on " if settings.enabled else "off"
                symbol = entry.get("symbol", "")
                typer.echo(f"rule{number}  [{state}]  {RULE_LABELS[number]}  ({symbol})")

        @app.command()
        def explain(rule: str = typer.Argument(..., help="Rule number, 'ruleN' or symbol")) -> None:
            """Show why a rule exists and how to fix its violations."""
            number = deps.guidance_service.find_rule(rule)
            if number is None:
                deps.telemetry.error(f"Unknown rule: {rule}")
                sys.exit(1)
            entry = deps.guidance_service.get_entry(number) or {}
            typer.secho(f"rule{number}: {deps.guidance_service.display_name(number)}", bold=True)
            if entry.get("short_description"):
                typer.echo(str(entry["short_description"]))
            typer.echo("")
            typer.echo(deps.guidance_service.get_manual_instructions(number))
            for reference in entry.get("references") or []:
                typer.echo(f"  see: {reference}")

        @app.command()
        def init(
            force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
        ) -> None:
            """Write the default configuration to ux-commit-check.yaml."""
            target = Path.cwd() / CONFIG_FILE_NAMES[0]
            if deps.filesystem.exists(str(target)) and not force:
                deps.telemetry.error(f"{target.name} already exists (use --force to overwrite).")
                sys.exit(1)
            deps.filesystem.write_text(str(target), deps.default_config_text())
            deps.telemetry.step(f"Wrote {target.name}")

        @app.command()
        def version() -> None:
            """Print the installed version."""
            typer.echo(__version__)

        return app
