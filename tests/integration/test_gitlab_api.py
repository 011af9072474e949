"""Integration tests against a real GitLab instance.

These tests require GITLAB_TOKEN plus GITLAB_GROUP or GITLAB_USER and will
make real API calls. They only read; no merge request is created.
"""

import asyncio
import os

import pytest


@pytest.mark.integration
class TestGitLabClientIntegration:
    """Integration tests for GitLabClient listings."""

    @pytest.fixture(autouse=True)
    def require_scope(self, skip_without_token: None) -> None:
        if not (os.getenv("GITLAB_GROUP") or os.getenv("GITLAB_USER")):
            pytest.skip("GITLAB_GROUP or GITLAB_USER not set - skipping integration test")

    def test_list_projects(self, gitlab_token: str, gitlab_url: str) -> None:
        """Test listing every project of the configured scope."""
        from clg import GitLabClient, load_config

        client = GitLabClient(load_config(access_token=gitlab_token, host=gitlab_url))
        projects = asyncio.run(client.list_projects())

        assert isinstance(projects, list)
        assert len({project.id for project in projects}) == len(projects)

    def test_list_merge_requests(self, gitlab_token: str, gitlab_url: str) -> None:
        """Test listing every merge request of the configured scope."""
        from clg import GitLabClient, load_config

        client = GitLabClient(load_config(access_token=gitlab_token, host=gitlab_url))
        merge_requests = asyncio.run(client.list_merge_requests())

        assert isinstance(merge_requests, list)
        if merge_requests:
            assert merge_requests[0].author.username


@pytest.mark.integration
class TestCurrentRepositoryDetection:
    """Integration tests for git detection in this checkout."""

    def test_current_branch_in_repo(self) -> None:
        from clg.utils.git import find_git_root, get_current_branch

        git_root = find_git_root(os.getcwd())
        if git_root is None:
            pytest.skip("Not running inside a git checkout")

        branch = get_current_branch(git_root)
        assert branch is None or isinstance(branch, str)
