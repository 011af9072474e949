"""Decorators for clg MCP tools."""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

from clg.errors import APIError, GitLabError

F = TypeVar("F", bound=Callable[..., Any])


def handle_gitlab_errors(operation: str) -> Callable[[F], F]:
    """Decorator to turn clg errors raised by a tool into error responses.

    Args:
        operation: Description of the operation for error messages (e.g., "list projects")

    Returns:
        Decorated function that returns ``{"success": False, ...}`` instead of raising
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> dict[str, Any]:
            try:
                return await func(*args, **kwargs)
            except APIError as e:
                return {
                    "success": False,
                    "error": f"Failed to {operation}: {e}",
                    "kind": e.kind,
                    "status_code": e.status_code,
                }
            except GitLabError as e:
                return {
                    "success": False,
                    "error": f"Failed to {operation}: {e}",
                    "kind": e.kind,
                }
            except ValueError as e:
                return {
                    "success": False,
                    "error": f"Failed to {operation}: {e}",
                }

        return wrapper  # type: ignore[return-value]

    return decorator
