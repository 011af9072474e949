"""Merge request client mixin."""

import logging
from collections.abc import Sequence

import httpx
from pydantic import ValidationError

from clg.client.base import DEFAULT_PER_PAGE, BaseClientMixin, decode_pages
from clg.errors import APIError, MalformedResponseError, TransportError
from clg.models import MergeRequestListItem, MergeRequestPayload, MergeRequestRequest, MergeRequestResult

logger = logging.getLogger(__name__)


def format_labels(labels: Sequence[str]) -> str:
    """Join labels into the single string the API expects.

    Each label is appended as ``", {label}"``, so a non-empty list yields a
    leading separator: ``["a", "b"]`` becomes ``", a, b"``.
    """
    joined = ""
    for label in labels:
        joined = f"{joined}, {label}"
    return joined


def build_merge_request_payload(request: MergeRequestRequest, labels: Sequence[str]) -> MergeRequestPayload:
    """Turn a merge request intent into the exact body posted to GitLab."""
    return MergeRequestPayload(
        id=str(request.project.id),
        title=request.title,
        description=request.description,
        source_branch=request.source_branch,
        target_branch=request.target_branch,
        labels=format_labels(labels),
        remove_source_branch=True,
        squash=True,
    )


class MergeRequestsMixin(BaseClientMixin):
    """Mixin for merge request operations."""

    async def list_merge_requests(self, per_page: int = DEFAULT_PER_PAGE) -> list[MergeRequestListItem]:
        """Get all merge requests of the configured group or user."""
        bodies = await self.fetch_all_pages("merge_requests", per_page=per_page)
        merge_requests = decode_pages(bodies, MergeRequestListItem)
        logger.info(f"Listed {len(merge_requests)} merge requests from {len(bodies)} pages")
        return merge_requests

    async def create_merge_request(self, request: MergeRequestRequest) -> str:
        """Create a new merge request.

        Posting twice opens two merge requests.

        Args:
            request: Project, branches, title and description of the merge request

        Returns:
            Web URL of the created merge request

        Raises:
            APIError: If GitLab answers with a non-2xx status
            TransportError: On network failures
            MalformedResponseError: If the response has no ``web_url``
        """
        payload = build_merge_request_payload(request, self.config.labels)
        url = f"{self.config.host}/api/v4/projects/{request.project.id}/merge_requests"
        headers = {"PRIVATE-TOKEN": request.access_token, "Content-Type": "application/json"}

        logger.info(
            f"Creating MR from {request.source_branch} to {request.target_branch} in project {request.project.id}"
        )
        async with self._http_client() as client:
            try:
                response = await client.post(url, content=payload.model_dump_json(), headers=headers)
            except httpx.RequestError as e:
                logger.error(f"Network error while creating MR in project {request.project.id}: {e}")
                raise TransportError(f"Request to {url} failed: {e}") from e

        if not response.is_success:
            error_detail = response.text[:500] if response.text else "No error details"
            logger.error(
                f"Failed to create MR in project {request.project.id}: {response.status_code} - {error_detail}"
            )
            raise APIError(response.status_code, url)

        try:
            result = MergeRequestResult.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Unexpected response while creating MR in project {request.project.id}: {e}")
            raise MalformedResponseError("Could not decode merge request creation response") from e

        logger.info(f"Successfully created MR {result.web_url}")
        return result.web_url
