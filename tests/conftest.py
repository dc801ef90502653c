"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest

from ecs_bootstrap.agent.models import NodeIdentity

CONTAINER_INSTANCE_ARN = (
    "arn:aws:ecs:us-east-1:123456789012:container-instance/60693afc-e694-4da9-92d6-c27dcb27d182"
)
CLUSTER = "ecs-cluster-testing"
AGENT_URL = "http://agent.test/v1/metadata"
VALID_METADATA = json.dumps(
    {
        "Cluster": CLUSTER,
        "ContainerInstanceArn": CONTAINER_INSTANCE_ARN,
        "Version": "Amazon ECS Agent - v1.80.0 (d8a2a26f)",
    },
)


class ChunkedStream(httpx.SyncByteStream):
    """Response body delivered in fixed chunks, optionally failing afterwards."""

    def __init__(self, chunks: list[bytes], error: Exception | None = None) -> None:
        self._chunks = chunks
        self._error = error

    def __iter__(self) -> Iterator[bytes]:
        yield from self._chunks
        if self._error is not None:
            raise self._error


class AgentTransport(httpx.MockTransport):
    """Mock agent endpoint that records every request it receives."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return respond(request)

        super().__init__(_handler)


class FakeWaiter:
    def __init__(self, client: FakeEcsClient, name: str) -> None:
        self._client = client
        self.name = name

    def wait(self, **kwargs: Any) -> None:
        self._client.wait_calls.append(kwargs)
        if self._client.wait_errors:
            error = self._client.wait_errors.pop(0)
            if error is not None:
                raise error


class FakeEcsClient:
    """In-memory stand-in for a boto3 ECS client.

    ``start_responses`` is consumed in order; the last entry repeats. An entry
    that is an exception is raised instead of returned.
    """

    def __init__(
        self,
        start_responses: list[Any] | None = None,
        wait_errors: list[Exception | None] | None = None,
    ) -> None:
        self.start_responses = list(start_responses or [{"tasks": [{"taskArn": "abcd"}]}])
        self.wait_errors = list(wait_errors or [])
        self.start_calls: list[dict[str, Any]] = []
        self.wait_calls: list[dict[str, Any]] = []
        self.waiter_names: list[str] = []

    def start_task(self, **kwargs: Any) -> dict[str, Any]:
        self.start_calls.append(kwargs)
        response = (
            self.start_responses.pop(0) if len(self.start_responses) > 1 else self.start_responses[0]
        )
        if isinstance(response, Exception):
            raise response
        return response

    def get_waiter(self, name: str) -> FakeWaiter:
        self.waiter_names.append(name)
        return FakeWaiter(self, name)


@pytest.fixture()
def sleeps() -> list[float]:
    return []


@pytest.fixture()
def identity_factory() -> Callable[[FakeEcsClient], NodeIdentity]:
    def _build(client: FakeEcsClient) -> NodeIdentity:
        return NodeIdentity(
            container_instance_arn="my-container-instance-arn",
            cluster="my-cluster",
            region="us-east-1",
            ecs_client=client,
        )

    return _build
