"""clg - push a branch and open a GitLab merge request.

This package provides:
- A GitLab client that lists projects and merge requests of a group or user,
  fetching all pages concurrently
- Merge request creation
- A push-and-create-merge-request workflow for the current git repository
- A command line interface and a FastMCP server
"""

from clg.client import GitLabClient
from clg.config import Config, Scope, load_config
from clg.errors import (
    APIError,
    ConfigurationError,
    GitError,
    GitLabError,
    MalformedResponseError,
    MissingScopeError,
    ProjectNotFoundError,
    TransportError,
)
from clg.models import (
    Author,
    MergeRequestListItem,
    MergeRequestPayload,
    MergeRequestRequest,
    MergeRequestResult,
    Project,
)
from clg.workflow import push_and_create_merge_request

__all__ = [
    # Client
    "GitLabClient",
    # Config
    "Config",
    "Scope",
    "load_config",
    # Exceptions
    "GitLabError",
    "APIError",
    "ConfigurationError",
    "MissingScopeError",
    "TransportError",
    "MalformedResponseError",
    "GitError",
    "ProjectNotFoundError",
    # Models
    "Project",
    "Author",
    "MergeRequestListItem",
    "MergeRequestRequest",
    "MergeRequestPayload",
    "MergeRequestResult",
    # Workflow
    "push_and_create_merge_request",
]
