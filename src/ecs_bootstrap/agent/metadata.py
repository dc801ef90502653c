"""Fetch and parse container instance metadata from the local ECS agent."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from typing import Any

import boto3

from ecs_bootstrap.agent.models import NodeIdentity
from ecs_bootstrap.config import DEFAULT_AGENT_METADATA_URL
from ecs_bootstrap.errors import AgentConnectionError, MetadataValidationError
from ecs_bootstrap.http.fetcher import HttpFetcher
from ecs_bootstrap.retry import retry_with_fixed_delay

METADATA_MAX_ATTEMPTS = 10
METADATA_RETRY_PAUSE_SECONDS = 2.0
ARN_REGION_SEGMENT = 3

logger = logging.getLogger(__name__)

EcsClientFactory = Callable[[str], Any]


def create_ecs_client(region: str) -> Any:
    """Build a boto3 ECS client for ``region``."""
    return boto3.client("ecs", region_name=region)


def fetch_agent_metadata(
    *,
    url: str = DEFAULT_AGENT_METADATA_URL,
    fetcher: HttpFetcher | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """Return the raw metadata document served by the ECS agent.

    The agent may still be starting when the instance boots, so a non-200
    status, a transport error and an error while the body streams are all
    retried with a fixed pause. Raises ``AgentConnectionError`` once every
    attempt has failed.
    """

    owned_fetcher = fetcher is None
    active_fetcher = fetcher or HttpFetcher()

    def _attempt() -> str:
        result = active_fetcher.fetch(url)
        if result.is_success:
            return result.content
        if result.status_code == 0 and result.error:
            raise AgentConnectionError(result.error)
        raise AgentConnectionError(
            f"Could not connect to ecs-agent after {METADATA_MAX_ATTEMPTS} attempts",
        )

    try:
        outcome = retry_with_fixed_delay(
            _attempt,
            max_attempts=METADATA_MAX_ATTEMPTS,
            delay_seconds=METADATA_RETRY_PAUSE_SECONDS,
            is_retryable=lambda exc: isinstance(exc, AgentConnectionError),
            sleep=sleep,
            label=f"GET {url}",
        )
    finally:
        if owned_fetcher:
            active_fetcher.close()

    raw = outcome.unwrap()
    logger.info("Fetched ecs-agent metadata after %d attempt(s)", outcome.attempts)
    return raw


def parse_agent_metadata(
    raw: str,
    *,
    client_factory: EcsClientFactory = create_ecs_client,
) -> NodeIdentity:
    """Validate agent metadata and bind an ECS client to the instance's region."""

    try:
        metadata = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as error:
        raise MetadataValidationError(f"ecs-agent metadata is not valid JSON: {error}") from error
    if not isinstance(metadata, dict):
        raise MetadataValidationError("ecs-agent metadata must be a JSON object")

    container_instance_arn = _required_string(metadata, "ContainerInstanceArn")
    region = _region_from_arn(container_instance_arn)
    cluster = _required_string(metadata, "Cluster")
    agent_version = metadata.get("Version")

    return NodeIdentity(
        container_instance_arn=container_instance_arn,
        cluster=cluster,
        region=region,
        ecs_client=client_factory(region),
        agent_version=agent_version if isinstance(agent_version, str) else None,
    )


def _required_string(metadata: dict[str, Any], key: str) -> str:
    value = metadata.get(key)
    if not isinstance(value, str) or not value:
        raise MetadataValidationError(f"ecs-agent metadata is missing {key}")
    return value


def _region_from_arn(arn: str) -> str:
    segments = arn.split(":")
    if len(segments) <= ARN_REGION_SEGMENT or not segments[ARN_REGION_SEGMENT]:
        raise MetadataValidationError(f"Cannot determine region from ContainerInstanceArn {arn!r}")
    return segments[ARN_REGION_SEGMENT]
