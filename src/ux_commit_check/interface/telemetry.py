"""Operator-facing status lines: printed to stderr and mirrored to the log."""

import logging

from rich.console import Console
from rich.markup import escape

from ux_commit_check.domain.protocols import TelemetryPort


class ProjectTelemetry(TelemetryPort):
    """Telemetry port rendered with a rich console on stderr."""

    def __init__(self, project_name: str, color: str, welcome_msg: str) -> None:
        self.project_name = project_name
        self.color = color
        self.welcome_msg = welcome_msg
        self.console = Console(stderr=True)
        self.logger = logging.getLogger(project_name.lower())

    def handshake(self) -> None:
        self.console.print(f"[bold {self.color}]{self.project_name}[/] {escape(self.welcome_msg)}")
        self.logger.info("%s: %s", self.project_name, self.welcome_msg)

    def step(self, message: str) -> None:
        self.console.print(f"[{self.color}]›[/] {escape(message)}", highlight=False)
        self.logger.info(message)

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]✗ {escape(message)}[/]", highlight=False)
        self.logger.error(message)

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]! {escape(message)}[/]", highlight=False)
        self.logger.warning(message)

    def debug(self, message: str) -> None:
        self.logger.debug(message)
