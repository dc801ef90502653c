"""Domain models describing the node a task is bootstrapped onto."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True, frozen=True)
class NodeIdentity:
    """Identity of the ECS container instance reported by the local agent.

    ``ecs_client`` is always bound to ``region``.
    """

    container_instance_arn: str
    cluster: str
    region: str
    ecs_client: Any = field(compare=False, repr=False)
    agent_version: str | None = None
