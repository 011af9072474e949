"""Unit tests for merge request payloads and submission."""

import asyncio
import json
from collections.abc import Callable

import httpx
import pytest

from clg.client import GitLabClient, build_merge_request_payload, format_labels
from clg.config import Config
from clg.errors import APIError, MalformedResponseError, TransportError
from clg.models import MergeRequestRequest, Project


@pytest.fixture
def mr_request(sample_project: dict) -> MergeRequestRequest:
    return MergeRequestRequest(
        access_token="request-token",
        project=Project.model_validate(sample_project),
        title="Add new feature",
        description="This MR adds a new feature",
        source_branch="feature-branch",
        target_branch="main",
    )


class TestFormatLabels:
    """Tests for the label join."""

    def test_keeps_leading_separator(self) -> None:
        assert format_labels(["a", "b"]) == ", a, b"

    def test_single_label(self) -> None:
        assert format_labels(["bug"]) == ", bug"

    def test_no_labels(self) -> None:
        assert format_labels([]) == ""


class TestBuildPayload:
    """Tests for the wire payload."""

    def test_payload_shape(self) -> None:
        """Test the id/labels conversion and fixed merge policy flags."""
        request = MergeRequestRequest(
            access_token="token",
            project=Project(id=42, name="p", ssh_url_to_repo="ssh", http_url_to_repo="http"),
            title="t",
            description="",
            source_branch="feature",
            target_branch="main",
        )

        payload = build_merge_request_payload(request, ["a", "b"])

        assert payload.id == "42"
        assert payload.labels == ", a, b"
        assert payload.squash is True
        assert payload.remove_source_branch is True
        assert payload.title == "t"

    def test_serialized_field_types(self, mr_request: MergeRequestRequest) -> None:
        """Test that the JSON body carries the id as a string and the flags as booleans."""
        body = json.loads(build_merge_request_payload(mr_request, []).model_dump_json())

        assert body == {
            "id": "123",
            "title": "Add new feature",
            "description": "This MR adds a new feature",
            "source_branch": "feature-branch",
            "target_branch": "main",
            "labels": "",
            "remove_source_branch": True,
            "squash": True,
        }


class TestCreateMergeRequest:
    """Tests for posting a merge request."""

    def test_success_returns_web_url(
        self, make_client: Callable[..., GitLabClient], mr_request: MergeRequestRequest
    ) -> None:
        """Test that a 201 response yields the created MR URL."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"id": 1, "iid": 7, "web_url": "https://x/y"})

        web_url = asyncio.run(make_client(handler).create_merge_request(mr_request))

        assert web_url == "https://x/y"
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://gitlab.example.com/api/v4/projects/123/merge_requests"
        assert request.headers["PRIVATE-TOKEN"] == "request-token"
        assert request.headers["Content-Type"] == "application/json"
        body = json.loads(request.content)
        assert body["id"] == "123"
        assert body["labels"] == ", backend, needs-review"
        assert body["squash"] is True
        assert body["remove_source_branch"] is True

    def test_unprocessable_entity_raises_api_error(
        self, make_client: Callable[..., GitLabClient], mr_request: MergeRequestRequest
    ) -> None:
        """Test that a 422 is surfaced with its status code."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, json={"message": ["Another open merge request already exists"]})

        with pytest.raises(APIError) as exc_info:
            asyncio.run(make_client(handler).create_merge_request(mr_request))

        assert exc_info.value.status_code == 422

    def test_missing_web_url_raises_malformed(
        self, make_client: Callable[..., GitLabClient], mr_request: MergeRequestRequest
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201, json={"id": 1})

        with pytest.raises(MalformedResponseError):
            asyncio.run(make_client(handler).create_merge_request(mr_request))

    def test_network_error_raises_transport_error(
        self, make_client: Callable[..., GitLabClient], mr_request: MergeRequestRequest
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError):
            asyncio.run(make_client(handler).create_merge_request(mr_request))

    def test_no_labels_configured(
        self, config: Config, make_client: Callable[..., GitLabClient], mr_request: MergeRequestRequest
    ) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(201, json={"web_url": "https://x/y"})

        client = make_client(handler, config.model_copy(update={"labels": []}))
        asyncio.run(client.create_merge_request(mr_request))

        assert bodies[0]["labels"] == ""
