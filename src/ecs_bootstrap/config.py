"""Runtime configuration for the bootstrap command."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from urllib.parse import urlparse

DEFAULT_AGENT_METADATA_URL = "http://localhost:51678/v1/metadata"


@dataclass(slots=True)
class AgentSettings:
    """Local ECS agent endpoint settings."""

    metadata_url: str = DEFAULT_AGENT_METADATA_URL
    timeout_seconds: float = 5.0


@dataclass(slots=True)
class Settings:
    """Application settings grouped by concern.

    Retry counts and pauses are fixed in the fetcher and launcher modules
    and intentionally not exposed here.
    """

    agent: AgentSettings = field(default_factory=AgentSettings)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, metadata_url: str | None = None) -> Settings:
        """Load settings from environment, falling back to agent defaults."""

        return cls(
            agent=AgentSettings(
                metadata_url=metadata_url
                or os.getenv("ECS_BOOTSTRAP_AGENT_METADATA_URL", DEFAULT_AGENT_METADATA_URL),
                timeout_seconds=_env_float("ECS_BOOTSTRAP_AGENT_TIMEOUT_SECONDS", "5.0"),
            ),
            log_level=os.getenv("ECS_BOOTSTRAP_LOG_LEVEL", "INFO").strip().upper(),
        )

    def validate(self) -> None:
        """Raise configuration error if any value is unusable."""

        _validate_agent_url(self.agent.metadata_url)
        if self.agent.timeout_seconds <= 0:
            raise ValueError("ECS_BOOTSTRAP_AGENT_TIMEOUT_SECONDS must be > 0.")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown ECS_BOOTSTRAP_LOG_LEVEL: {self.log_level!r}")


def _env_float(name: str, default: str) -> float:
    value = os.getenv(name, default)
    try:
        return float(value)
    except ValueError as error:
        raise ValueError(f"{name} must be a number, got {value!r}.") from error


def _validate_agent_url(value: str) -> None:
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(
            "Invalid agent metadata URL: "
            f"{value!r}. Expected an absolute URL with http:// or https:// scheme.",
        )
