"""Controllers for bootstrap CLI commands."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from ecs_bootstrap.agent.metadata import EcsClientFactory, create_ecs_client
from ecs_bootstrap.config import Settings
from ecs_bootstrap.pipeline import bootstrap


@dataclass(slots=True)
class BootstrapCommand:
    """CLI input for one bootstrap run."""

    task_definition: str
    metadata_url: str | None = None
    log_level: str | None = None


class BootstrapCliController:
    """Resolves settings and runs the bootstrap pipeline for the CLI."""

    def __init__(
        self,
        *,
        client_factory: EcsClientFactory = create_ecs_client,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client_factory = client_factory
        self._sleep = sleep

    def settings(self, command: BootstrapCommand) -> Settings:
        settings = Settings.from_env(metadata_url=command.metadata_url)
        if command.log_level:
            settings.log_level = command.log_level.upper()
        settings.validate()
        return settings

    def run(self, command: BootstrapCommand, settings: Settings) -> list[str]:
        context = bootstrap(
            command.task_definition,
            settings=settings,
            client_factory=self._client_factory,
            sleep=self._sleep,
        )
        identity = context.identity
        return [
            f"Successfully started {command.task_definition}",
            f"Task: {context.task_arn} cluster={identity.cluster} region={identity.region}",
        ]
