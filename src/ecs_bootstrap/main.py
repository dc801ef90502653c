"""CLI entrypoint for ecs-bootstrap."""

from __future__ import annotations

import logging

import rich_click as click

from ecs_bootstrap import __version__
from ecs_bootstrap.controllers import BootstrapCliController, BootstrapCommand
from ecs_bootstrap.errors import BootstrapError

click.rich_click.USE_MARKDOWN = True
BOOTSTRAP_CONTROLLER = BootstrapCliController()
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"

logger = logging.getLogger(__name__)


@click.command()
@click.version_option(version=__version__, prog_name="ecs-bootstrap")
@click.argument("task_definition")
@click.option(
    "--metadata-url",
    default=None,
    help=(
        "ECS agent introspection URL. "
        "If omitted, ECS_BOOTSTRAP_AGENT_METADATA_URL or the agent default is used."
    ),
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level. If omitted, ECS_BOOTSTRAP_LOG_LEVEL is used.",
)
def ecs_bootstrap(task_definition: str, metadata_url: str | None, log_level: str | None) -> None:
    """Start **TASK_DEFINITION** on the ECS container instance this runs on.

    Reads the instance identity from the local ECS agent, places the task on
    this instance and waits until it is running.
    """

    command = BootstrapCommand(
        task_definition=task_definition,
        metadata_url=metadata_url,
        log_level=log_level,
    )
    try:
        settings = BOOTSTRAP_CONTROLLER.settings(command)
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    _configure_logging(settings.log_level)

    try:
        lines = BOOTSTRAP_CONTROLLER.run(command, settings)
    except BootstrapError as error:
        logger.exception("Bootstrap of %s failed", task_definition)
        raise click.ClickException(str(error)) from error
    _emit_lines(lines)


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    ecs_bootstrap()
