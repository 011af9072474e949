"""Base GitLab client mixin with HTTP primitives and concurrent pagination."""

import asyncio
import logging
from typing import Any, NamedTuple, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from clg.config import Config, Scope
from clg.errors import APIError, MalformedResponseError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 20
TOTAL_PAGES_HEADER = "x-total-pages"

T = TypeVar("T")


class Page(NamedTuple):
    """Raw body of one fetched page plus the page count the server reported."""

    body: bytes
    total_pages: int


def build_list_request(
    scope: Scope,
    access_token: str,
    host: str,
    resource_domain: str,
    per_page: int,
    page: int,
) -> httpx.Request:
    """Build an authenticated GET request for one page of a scoped collection.

    Nothing is sent.

    Raises:
        MissingScopeError: If the scope has neither group nor user
    """
    collection, scope_id = scope.resolve()
    url = f"{host.rstrip('/')}/api/v4/{collection}/{quote(scope_id, safe='')}/{resource_domain}"
    return httpx.Request(
        "GET",
        url,
        params={"per_page": per_page, "page": page},
        headers={"PRIVATE-TOKEN": access_token},
    )


def parse_total_pages(headers: httpx.Headers) -> int:
    """Read the page count header, falling back to 0 when absent or not an integer."""
    try:
        return int(headers.get(TOTAL_PAGES_HEADER, "0"))
    except ValueError:
        return 0


async def fetch_page(client: httpx.AsyncClient, request: httpx.Request) -> Page:
    """Send one request and return its body and reported page count.

    Raises:
        APIError: If the status is not 2xx (the body is left unread)
        TransportError: On connection, TLS or protocol failures
    """
    logger.debug(f"{request.method} {request.url}")
    try:
        response = await client.send(request, stream=True)
    except httpx.RequestError as e:
        logger.error(f"Network error for {request.method} {request.url}: {e}")
        raise TransportError(f"Request to {request.url} failed: {e}") from e

    try:
        if not response.is_success:
            logger.error(f"GitLab API error for {request.method} {request.url}: {response.status_code}")
            raise APIError(response.status_code, str(request.url))
        try:
            body = await response.aread()
        except httpx.RequestError as e:
            logger.error(f"Network error reading body of {request.url}: {e}")
            raise TransportError(f"Reading response from {request.url} failed: {e}") from e
    finally:
        await response.aclose()

    return Page(body=body, total_pages=parse_total_pages(response.headers))


def decode_pages(bodies: list[bytes], model: type[T]) -> list[T]:
    """Decode every page body as a JSON array of ``model`` and concatenate in order.

    Raises:
        MalformedResponseError: If any body is not a JSON array of the expected shape
    """
    adapter = TypeAdapter(list[model])  # type: ignore[valid-type]
    results: list[T] = []
    for index, body in enumerate(bodies, start=1):
        try:
            results.extend(adapter.validate_json(body))
        except ValidationError as e:
            logger.error(f"Page {index} is not a list of {model.__name__}: {e}")
            raise MalformedResponseError(f"Could not decode page {index} as a list of {model.__name__}") from e
    return results


class BaseClientMixin:
    """Base mixin providing request construction and paginated fetching."""

    config: Config

    def __init__(self, config: Config, transport: httpx.AsyncBaseTransport | None = None, timeout: Any = None):
        """Initialize GitLab API client.

        Args:
            config: Loaded configuration (scope, token, host, labels)
            transport: Optional httpx transport, used for tests or custom networking
            timeout: Optional httpx timeout; httpx defaults apply when omitted
        """
        self.config = config
        self._transport = transport
        self._timeout = timeout

    def _http_client(self) -> httpx.AsyncClient:
        """Create a fresh connection pool for a single operation."""
        kwargs: dict[str, Any] = {}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        return httpx.AsyncClient(**kwargs)

    def build_request(self, resource_domain: str, page: int, per_page: int = DEFAULT_PER_PAGE) -> httpx.Request:
        """Build the request for one page of ``resource_domain`` in the configured scope."""
        return build_list_request(
            self.config.scope,
            self.config.access_token,
            self.config.host,
            resource_domain,
            per_page,
            page,
        )

    async def fetch_all_pages(self, resource_domain: str, per_page: int = DEFAULT_PER_PAGE) -> list[bytes]:
        """Fetch every page of a scoped collection.

        The first page reveals the page count; the remaining pages are fetched
        concurrently over the same connection pool. All fetches are awaited before
        any failure is reported, and the failure of the lowest failing page wins.

        Args:
            resource_domain: Collection name, e.g. "projects" or "merge_requests"
            per_page: Results per page

        Returns:
            Raw page bodies in ascending page order

        Raises:
            MissingScopeError: If no scope is configured
            APIError: If any page returns a non-2xx status
            TransportError: If any page fails below HTTP
        """
        first_request = self.build_request(resource_domain, 1, per_page)

        async with self._http_client() as client:
            first = await fetch_page(client, first_request)
            if first.total_pages <= 1:
                logger.debug(f"Fetched single page of {resource_domain}")
                return [first.body]

            requests = [
                self.build_request(resource_domain, page, per_page) for page in range(2, first.total_pages + 1)
            ]
            logger.debug(f"Fetching {len(requests)} more pages of {resource_domain} concurrently")
            # return_exceptions keeps the other pages running after one fails
            results = await asyncio.gather(
                *(fetch_page(client, request) for request in requests),
                return_exceptions=True,
            )

        bodies = [first.body]
        for page, result in enumerate(results, start=2):
            if isinstance(result, BaseException):
                logger.error(f"Fetching page {page} of {resource_domain} failed: {result}")
                raise result
            bodies.append(result.body)

        logger.debug(f"Fetched {len(bodies)} pages of {resource_domain}")
        return bodies
