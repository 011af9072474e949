"""GitLab API client composed from mixins."""

from clg.client.base import build_list_request, decode_pages, fetch_page
from clg.client.merge_requests import MergeRequestsMixin, build_merge_request_payload, format_labels
from clg.client.projects import ProjectsMixin


class GitLabClient(
    ProjectsMixin,
    MergeRequestsMixin,
):
    """GitLab API client composed from mixins.

    This client provides methods for:
    - Listing the projects of a group or user
    - Listing the merge requests of a group or user
    - Creating merge requests
    """


__all__ = [
    "GitLabClient",
    "build_list_request",
    "build_merge_request_payload",
    "decode_pages",
    "fetch_page",
    "format_labels",
]
