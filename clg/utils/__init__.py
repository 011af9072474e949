"""Utility functions for clg."""

from clg.utils.decorators import handle_gitlab_errors
from clg.utils.git import (
    Credentials,
    PushCallbacks,
    SshKeyCallbacks,
    find_git_root,
    get_current_branch,
    get_remote_url,
    get_uncommitted_paths,
    push_branch,
    remote_url_user,
)
from clg.utils.resolvers import apply_filters, match_project, parse_filter, parse_filters

__all__ = [
    # decorators
    "handle_gitlab_errors",
    # git
    "Credentials",
    "PushCallbacks",
    "SshKeyCallbacks",
    "find_git_root",
    "get_current_branch",
    "get_remote_url",
    "get_uncommitted_paths",
    "push_branch",
    "remote_url_user",
    # resolvers
    "apply_filters",
    "match_project",
    "parse_filter",
    "parse_filters",
]
