"""Error hierarchy for the bootstrap pipeline."""

from __future__ import annotations


class BootstrapError(Exception):
    """Base bootstrap error."""

    code = "bootstrap_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class AgentConnectionError(BootstrapError, ConnectionError):
    """The local ECS agent could not be reached or returned a bad response."""

    code = "agent_unreachable"


class MetadataValidationError(BootstrapError, ValueError):
    """Agent metadata is malformed; retrying will not fix it."""

    code = "invalid_metadata"


class TaskLaunchError(BootstrapError):
    """One launch attempt failed."""

    code = "launch_failed"


class PlacementError(TaskLaunchError):
    """ECS did not place the task on the container instance."""

    code = "placement_failed"


class ConfirmationError(TaskLaunchError):
    """A placed task never reached the RUNNING state."""

    code = "confirmation_failed"

    def __init__(self, message: str, *, task_arn: str | None = None) -> None:
        super().__init__(message)
        self.task_arn = task_arn
