"""Configuration loading for clg."""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from clg.errors import ConfigurationError, MissingScopeError

logger = logging.getLogger(__name__)

DEFAULT_HOST = "https://gitlab.com"


class Scope(BaseModel):
    """Group or user whose collections are listed."""

    model_config = ConfigDict(frozen=True)

    group: str | None = None
    user: str | None = None

    def resolve(self) -> tuple[str, str]:
        """Return the API collection and identifier for this scope.

        A group takes precedence over a user when both are set.

        Raises:
            MissingScopeError: If neither group nor user is set
        """
        if self.group:
            return "groups", self.group
        if self.user:
            return "users", self.user
        raise MissingScopeError()


class Config(BaseModel):
    """Settings for one invocation. Never mutated after loading."""

    model_config = ConfigDict(frozen=True)

    scope: Scope = Field(default_factory=Scope)
    access_token: str
    host: str = DEFAULT_HOST
    labels: tuple[str, ...] = ()
    ssh_key_path: str | None = None
    remote_name: str = "origin"

    @field_validator("host")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def read_token_file(path: str) -> str:
    """Read the access token from the first line of a file."""
    try:
        with open(Path(path).expanduser(), encoding="utf-8") as handle:
            token = handle.readline().strip()
    except OSError as e:
        logger.error(f"Could not read access token file {path}: {e}")
        raise ConfigurationError(f"Could not read access token file '{path}': {e}") from e

    if not token:
        raise ConfigurationError(f"Access token file '{path}' is empty")
    return token


def _split_labels(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(label.strip() for label in raw.split(",") if label.strip())


def _override_or_env(overrides: dict[str, Any], key: str, env_name: str) -> Any:
    """Return the override for ``key`` when one was passed (even None), else the environment value."""
    if key in overrides:
        return overrides.pop(key)
    return os.getenv(env_name)


def load_config(**overrides: Any) -> Config:
    """Build a Config from the environment (and .env file).

    Keyword overrides take precedence over environment variables and accept the
    Config field names plus ``group`` and ``user``. Passing None for ``group``,
    ``user`` or ``ssh_key_path`` clears the environment value.

    Raises:
        ConfigurationError: If the token is missing or the host URL is invalid
    """
    load_dotenv()

    token = overrides.pop("access_token", None) or os.getenv("GITLAB_TOKEN")
    if not token:
        token_file = os.getenv("GITLAB_TOKEN_FILE")
        if token_file:
            token = read_token_file(token_file)
    if not token:
        logger.error("GITLAB_TOKEN not set in environment variables")
        raise ConfigurationError(
            "GITLAB_TOKEN environment variable is required. Set it in your .env file or environment."
        )

    host = (
        overrides.pop("host", None) or os.getenv("GITLAB_BASE_URL") or os.getenv("GITLAB_URL") or DEFAULT_HOST
    )
    if not host.startswith(("http://", "https://")):
        logger.error(f"Invalid GITLAB_URL: {host}")
        raise ConfigurationError(f"GITLAB_URL must start with http:// or https://, got: {host}")

    scope = Scope(
        group=_override_or_env(overrides, "group", "GITLAB_GROUP") or None,
        user=_override_or_env(overrides, "user", "GITLAB_USER") or None,
    )

    labels = overrides.pop("labels", None)
    if labels is None:
        labels = _split_labels(os.getenv("GITLAB_MR_LABELS"))

    config = Config(
        scope=scope,
        access_token=token,
        host=host,
        labels=tuple(labels),
        ssh_key_path=_override_or_env(overrides, "ssh_key_path", "GITLAB_SSH_KEY") or None,
        remote_name=overrides.pop("remote_name", None) or os.getenv("GITLAB_REMOTE") or "origin",
    )
    if overrides:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(overrides))}")

    logger.debug(f"Loaded configuration for {config.host}")
    return config
