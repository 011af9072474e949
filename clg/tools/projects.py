"""Project tools for clg."""

from typing import Any

from clg.client import GitLabClient
from clg.config import load_config
from clg.server import mcp
from clg.utils.decorators import handle_gitlab_errors
from clg.utils.resolvers import apply_filters


@mcp.tool()
@handle_gitlab_errors("list projects")
async def list_projects(filters: dict[str, str] | None = None) -> dict[str, Any]:
    """List all projects of the configured GitLab group (or user)

    Args:
        filters: Optional field/value pairs every returned project must match
                 (e.g., {"name": "backend"})

    Returns:
        Result with success status and the matching projects
    """
    client = GitLabClient(load_config())
    projects = apply_filters(await client.list_projects(), filters or {})
    return {
        "success": True,
        "count": len(projects),
        "projects": [project.model_dump() for project in projects],
    }
