"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from ux_commit_check.infrastructure.di.container import UXCheckContainer
from ux_commit_check.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = UXCheckContainer()
    config_loader = container.get_config_loader()

    deps = CLIDependencies(
        telemetry=container.get_telemetry_port(),
        load_config=lambda path: config_loader.load(path),
        default_config_text=config_loader.default_config_text,
        parser=container.get_parser(),
        filesystem=container.get_filesystem_gateway(),
        staging_area=container.get_staging_area(),
        guidance_service=container.get_guidance_service(),
        reporter_for=container.get_reporter,
        resolver_factory=container.create_action_resolver,
    )

    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
