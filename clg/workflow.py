"""Push the current branch and open a merge request for it."""

import asyncio
import logging
import os

from clg.client import GitLabClient
from clg.config import Config
from clg.errors import GitError, ProjectNotFoundError
from clg.models import MergeRequestRequest
from clg.utils.git import (
    PushCallbacks,
    SshKeyCallbacks,
    find_git_root,
    get_current_branch,
    get_remote_url,
    get_uncommitted_paths,
    push_branch,
)
from clg.utils.resolvers import match_project

logger = logging.getLogger(__name__)


async def push_and_create_merge_request(
    config: Config,
    title: str,
    description: str = "",
    target_branch: str = "main",
    repo_path: str | None = None,
    callbacks: PushCallbacks | None = None,
    client: GitLabClient | None = None,
) -> str:
    """Push the current branch and open a merge request from it.

    The GitLab project is the listed project whose clone URL equals the
    repository's remote URL.

    Args:
        config: Loaded configuration
        title: Merge request title
        description: Merge request description
        target_branch: Branch to merge into
        repo_path: Repository directory (default: GITLAB_REPO_PATH, then the working directory)
        callbacks: Push credentials and completion hook (default: the configured ssh key)
        client: GitLab client (default: one built from ``config``)

    Returns:
        Web URL of the created merge request

    Raises:
        GitError: If the repository, branch or remote can't be determined, or the push fails
        ProjectNotFoundError: If no project matches the remote URL
        GitLabError: Any listing or submission failure
    """
    start_path = repo_path or os.getenv("GITLAB_REPO_PATH") or os.getcwd()
    git_root = await asyncio.to_thread(find_git_root, start_path)
    if not git_root:
        raise GitError(f"'{start_path}' is not inside a git repository")

    branch = await asyncio.to_thread(get_current_branch, git_root)
    if not branch:
        raise GitError("Could not determine current git branch")

    remote_url = await asyncio.to_thread(get_remote_url, git_root, config.remote_name)
    if not remote_url:
        raise GitError(f"No git remote '{config.remote_name}' configured")

    uncommitted = await asyncio.to_thread(get_uncommitted_paths, git_root)
    if uncommitted:
        logger.warning(f"{len(uncommitted)} paths have uncommitted changes and will not be pushed: {uncommitted}")

    client = client or GitLabClient(config)
    projects = await client.list_projects()
    project = match_project(projects, remote_url)
    if project is None:
        raise ProjectNotFoundError(remote_url)
    logger.info(f"Current project: {project.name} ({project.id})")

    await asyncio.to_thread(
        push_branch,
        git_root,
        branch,
        callbacks or SshKeyCallbacks(config.ssh_key_path),
        remote=config.remote_name,
        remote_url=remote_url,
    )

    request = MergeRequestRequest(
        access_token=config.access_token,
        project=project,
        title=title,
        description=description,
        source_branch=branch,
        target_branch=target_branch,
    )
    return await client.create_merge_request(request)
