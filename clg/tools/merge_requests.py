"""Merge request tools for clg."""

from typing import Any

from clg.client import GitLabClient
from clg.config import load_config
from clg.server import mcp
from clg.utils.decorators import handle_gitlab_errors
from clg.utils.resolvers import apply_filters
from clg.workflow import push_and_create_merge_request as run_push_and_create


@mcp.tool()
@handle_gitlab_errors("list merge requests")
async def list_merge_requests(filters: dict[str, str] | None = None) -> dict[str, Any]:
    """List all merge requests of the configured GitLab group (or user)

    Args:
        filters: Optional field/value pairs every returned merge request must match.
                 Nested fields use dots (e.g., {"author.username": "alice"})

    Returns:
        Result with success status and the matching merge requests
    """
    client = GitLabClient(load_config())
    merge_requests = apply_filters(await client.list_merge_requests(), filters or {})
    return {
        "success": True,
        "count": len(merge_requests),
        "merge_requests": [mr.model_dump() for mr in merge_requests],
    }


@mcp.tool()
@handle_gitlab_errors("push and create merge request")
async def push_and_create_merge_request(
    title: str,
    description: str = "",
    target_branch: str = "main",
) -> dict[str, Any]:
    """Push the current branch and open a merge request from it

    The repository is taken from GITLAB_REPO_PATH (or the server's working directory).
    Configured labels are attached; the source branch is removed and commits are
    squashed on merge.

    Args:
        title: MR title (required)
        description: MR description/body (optional, supports Markdown)
        target_branch: Target branch name (default: "main")

    Returns:
        Result with success status and the web URL of the created MR
    """
    web_url = await run_push_and_create(load_config(), title, description=description, target_branch=target_branch)
    return {
        "success": True,
        "message": f"Successfully created merge request {web_url}",
        "web_url": web_url,
    }
