"""Shared test fixtures for clg tests."""

import os
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import patch

import httpx
import pytest

from clg.client import GitLabClient
from clg.config import Config, Scope


@pytest.fixture
def mock_env_vars() -> Generator[dict[str, str], None, None]:
    """Set up test environment variables."""
    env = {
        "GITLAB_TOKEN": "test-token-12345",
        "GITLAB_URL": "https://gitlab.example.com",
        "GITLAB_GROUP": "my-group",
    }
    with patch.dict(os.environ, env, clear=True):
        yield env


@pytest.fixture
def config() -> Config:
    """Group-scoped configuration pointing at a fake instance."""
    return Config(
        scope=Scope(group="my-group"),
        access_token="test-token-12345",
        host="https://gitlab.example.com",
        labels=["backend", "needs-review"],
    )


@pytest.fixture
def make_client(config: Config) -> Callable[..., GitLabClient]:
    """Build a GitLabClient whose HTTP traffic goes to a handler instead of the network."""

    def factory(handler: Callable[[httpx.Request], Any], client_config: Config | None = None) -> GitLabClient:
        return GitLabClient(client_config or config, transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def sample_project() -> dict:
    """Sample GitLab project response."""
    return {
        "id": 123,
        "name": "test-project",
        "path_with_namespace": "my-group/test-project",
        "ssh_url_to_repo": "git@gitlab.example.com:my-group/test-project.git",
        "http_url_to_repo": "https://gitlab.example.com/my-group/test-project.git",
        "web_url": "https://gitlab.example.com/my-group/test-project",
        "default_branch": "main",
    }


@pytest.fixture
def sample_merge_request() -> dict:
    """Sample GitLab merge request response."""
    return {
        "id": 456,
        "iid": 1,
        "title": "Add new feature",
        "description": "This MR adds a new feature",
        "state": "opened",
        "source_branch": "feature-branch",
        "target_branch": "main",
        "author": {"id": 1, "username": "testuser", "name": "Test User"},
        "web_url": "https://gitlab.example.com/my-group/test-project/-/merge_requests/1",
    }


@pytest.fixture
def project_page() -> Callable[[int, int], list[dict]]:
    """Build one page of project entities with consecutive ids."""

    def build(start: int, count: int) -> list[dict]:
        return [
            {
                "id": project_id,
                "name": f"project-{project_id}",
                "ssh_url_to_repo": f"git@gitlab.example.com:my-group/project-{project_id}.git",
                "http_url_to_repo": f"https://gitlab.example.com/my-group/project-{project_id}.git",
            }
            for project_id in range(start, start + count)
        ]

    return build


# Integration test fixtures


@pytest.fixture
def gitlab_token() -> str | None:
    """Get GitLab token from environment for integration tests."""
    return os.getenv("GITLAB_TOKEN")


@pytest.fixture
def gitlab_url() -> str:
    """Get GitLab URL from environment for integration tests."""
    return os.getenv("GITLAB_URL", "https://gitlab.com")


@pytest.fixture
def skip_without_token(gitlab_token: str | None) -> None:
    """Skip test if GITLAB_TOKEN is not set."""
    if not gitlab_token:
        pytest.skip("GITLAB_TOKEN not set - skipping integration test")
