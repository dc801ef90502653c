"""Place a task on the bootstrapping container instance and wait for it to run."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from botocore.exceptions import BotoCoreError, ClientError, WaiterError

from ecs_bootstrap.agent.models import NodeIdentity
from ecs_bootstrap.errors import ConfirmationError, PlacementError, TaskLaunchError
from ecs_bootstrap.retry import retry_with_fixed_delay

STARTED_BY = "ecs-bootstrap"
LAUNCH_MAX_ATTEMPTS = 10
LAUNCH_RETRY_PAUSE_SECONDS = 1.0
DEFAULT_PLACEMENT_FAILURE = "Failed to start task"

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class LaunchRequest:
    """One task definition to run on one container instance."""

    task_definition: str
    identity: NodeIdentity


def start_task(request: LaunchRequest) -> str:
    """Ask ECS to place the task on the instance and return the new task ARN."""

    identity = request.identity
    try:
        response = identity.ecs_client.start_task(
            cluster=identity.cluster,
            taskDefinition=request.task_definition,
            containerInstances=[identity.container_instance_arn],
            startedBy=STARTED_BY,
        )
    except (BotoCoreError, ClientError) as error:
        raise PlacementError(str(error)) from error

    tasks = response.get("tasks") or []
    if tasks:
        task_arn = tasks[0].get("taskArn")
        if not task_arn:
            raise PlacementError(DEFAULT_PLACEMENT_FAILURE)
        return task_arn

    failures = response.get("failures") or []
    reason = failures[0].get("reason") if failures else None
    raise PlacementError(reason or DEFAULT_PLACEMENT_FAILURE)


def wait_for_task_running(identity: NodeIdentity, task_arn: str) -> None:
    """Block on the ``tasks_running`` waiter for ``task_arn``."""

    try:
        identity.ecs_client.get_waiter("tasks_running").wait(
            cluster=identity.cluster,
            tasks=[task_arn],
        )
    except (WaiterError, BotoCoreError, ClientError) as error:
        raise ConfirmationError(str(error), task_arn=task_arn) from error


def ensure_task_running(
    identity: NodeIdentity,
    task_definition: str,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """Start ``task_definition`` on the instance and return its running task ARN.

    Placement and confirmation are retried together; every attempt starts a
    fresh placement. After the last attempt the most recent
    ``TaskLaunchError`` is raised.
    """

    if not task_definition:
        raise ValueError("task_definition is required")
    request = LaunchRequest(task_definition=task_definition, identity=identity)

    def _attempt() -> str:
        task_arn = start_task(request)
        logger.info("Placed %s as %s on %s", task_definition, task_arn, identity.cluster)
        try:
            wait_for_task_running(identity, task_arn)
        except ConfirmationError:
            # The next attempt places a new task; this one is left behind in ECS.
            logger.warning("Task %s did not reach RUNNING; it will not be reused", task_arn)
            raise
        return task_arn

    outcome = retry_with_fixed_delay(
        _attempt,
        max_attempts=LAUNCH_MAX_ATTEMPTS,
        delay_seconds=LAUNCH_RETRY_PAUSE_SECONDS,
        is_retryable=lambda exc: isinstance(exc, TaskLaunchError),
        sleep=sleep,
        label=f"start {task_definition}",
    )
    task_arn = outcome.unwrap()
    logger.info("Task %s is running after %d attempt(s)", task_arn, outcome.attempts)
    return task_arn
