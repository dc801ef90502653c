"""Fetch -> parse -> launch pipeline with an append-only context."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

from ecs_bootstrap.agent.metadata import (
    EcsClientFactory,
    create_ecs_client,
    fetch_agent_metadata,
    parse_agent_metadata,
)
from ecs_bootstrap.agent.models import NodeIdentity
from ecs_bootstrap.config import Settings
from ecs_bootstrap.http.fetcher import HttpFetcher
from ecs_bootstrap.launcher.tasks import ensure_task_running

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class BootstrapContext:
    """State handed from one pipeline stage to the next.

    Stages only add fields; a field that is already set cannot be replaced.
    """

    task_definition: str
    identity: NodeIdentity | None = None
    task_arn: str | None = None

    def with_identity(self, identity: NodeIdentity) -> BootstrapContext:
        if self.identity is not None:
            raise RuntimeError("Node identity is already resolved for this bootstrap")
        return replace(self, identity=identity)

    def with_task(self, task_arn: str) -> BootstrapContext:
        if self.identity is None:
            raise RuntimeError("Cannot record a task before the node identity is known")
        if self.task_arn is not None:
            raise RuntimeError("Task is already recorded for this bootstrap")
        return replace(self, task_arn=task_arn)


def bootstrap(
    task_definition: str,
    *,
    settings: Settings | None = None,
    client_factory: EcsClientFactory = create_ecs_client,
    fetcher: HttpFetcher | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BootstrapContext:
    """Run ``task_definition`` on the container instance this process runs on."""

    settings = settings or Settings.from_env()
    context = BootstrapContext(task_definition=task_definition)

    owned_fetcher = fetcher is None
    active_fetcher = fetcher or HttpFetcher(timeout_seconds=settings.agent.timeout_seconds)
    try:
        raw = fetch_agent_metadata(
            url=settings.agent.metadata_url,
            fetcher=active_fetcher,
            sleep=sleep,
        )
    finally:
        if owned_fetcher:
            active_fetcher.close()

    context = context.with_identity(parse_agent_metadata(raw, client_factory=client_factory))
    identity = context.identity
    logger.info(
        "Bootstrapping %s on %s (cluster=%s region=%s)",
        task_definition,
        identity.container_instance_arn,
        identity.cluster,
        identity.region,
    )

    task_arn = ensure_task_running(identity, task_definition, sleep=sleep)
    return context.with_task(task_arn)
