"""Type definitions for clg."""

from pydantic import BaseModel, ConfigDict


class Project(BaseModel):
    """Project as returned by the projects listing endpoint."""

    id: int
    name: str
    ssh_url_to_repo: str
    http_url_to_repo: str


class Author(BaseModel):
    """Merge request author."""

    id: int
    name: str
    username: str


class MergeRequestListItem(BaseModel):
    """Merge request as returned by the merge requests listing endpoint."""

    id: int
    title: str
    author: Author


class MergeRequestRequest(BaseModel):
    """What the caller wants to open, before it is turned into an API body."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    project: Project
    title: str
    description: str
    source_branch: str
    target_branch: str


class MergeRequestPayload(BaseModel):
    """Exact body posted to the merge request creation endpoint."""

    id: str
    title: str
    description: str
    source_branch: str
    target_branch: str
    labels: str
    remove_source_branch: bool = True
    squash: bool = True


class MergeRequestResult(BaseModel):
    """Created merge request; only the URL is consumed."""

    web_url: str
