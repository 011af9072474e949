"""clg MCP server entry point."""

import logging

from fastmcp import FastMCP

mcp = FastMCP(
    "clg",
    instructions="""
This server lists the projects and merge requests of the configured GitLab group (or user)
and opens merge requests for the current repository.

Configuration comes from the environment (or a .env file): GITLAB_TOKEN, GITLAB_URL,
GITLAB_GROUP or GITLAB_USER, GITLAB_MR_LABELS, GITLAB_SSH_KEY, GITLAB_REPO_PATH.

TOOLS:
- list_projects(filters) - All projects of the group/user. filters is an optional
  {"field": "value"} dict, e.g. {"name": "backend"}
- list_merge_requests(filters) - All merge requests of the group/user,
  e.g. {"author.username": "alice"}
- push_and_create_merge_request(title, description, target_branch) - Push the current branch
  of the repository at GITLAB_REPO_PATH and open a merge request from it. Returns its web URL.
""",
)

# Import tools for side-effect registration
from clg import tools  # noqa: F401, E402


def main() -> None:
    """Run the clg MCP server."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    mcp.run()


if __name__ == "__main__":
    main()
