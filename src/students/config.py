"""Configuration loading for the Students service."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from students.store import DEFAULT_DATABASE_URL


class ConfigError(Exception):
    """Raised when configuration is invalid."""


@dataclass
class OAuthConfig:
    """Location of the internal OAuth gateway."""

    protocol: str = "http"
    host: str = "oauth"
    port: int = 8000
    timeout: float = 10.0

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}"


@dataclass
class Settings:
    """Service settings.

    Every value can be set from the environment:
    - STUDENTS_DATABASE_URL
    - STUDENTS_HOST, STUDENTS_PORT
    - OAUTH_INTERNAL_PROTOCOL, OAUTH_INTERNAL_HOST, OAUTH_INTERNAL_API_PORT
    - STUDENTS_AUTH_TIMEOUT (seconds)
    """

    database_url: str = DEFAULT_DATABASE_URL
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8080
    oauth: OAuthConfig = field(default_factory=OAuthConfig)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Load settings from environment variables.

        Args:
            environ: Variables to read. Defaults to os.environ.

        Returns:
            Parsed settings.

        Raises:
            ConfigError: If a numeric variable is not a number.
        """
        env = os.environ if environ is None else environ

        oauth = OAuthConfig(
            protocol=env.get("OAUTH_INTERNAL_PROTOCOL", "http"),
            host=env.get("OAUTH_INTERNAL_HOST", "oauth"),
            port=_parse_number(env, "OAUTH_INTERNAL_API_PORT", 8000, int),
            timeout=_parse_number(env, "STUDENTS_AUTH_TIMEOUT", 10.0, float),
        )
        return cls(
            database_url=env.get("STUDENTS_DATABASE_URL", DEFAULT_DATABASE_URL),
            host=env.get("STUDENTS_HOST", "0.0.0.0"),  # noqa: S104
            port=_parse_number(env, "STUDENTS_PORT", 8080, int),
            oauth=oauth,
        )


def _parse_number(env: Mapping[str, str], name: str, default: float, kind: type) -> Any:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return kind(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
