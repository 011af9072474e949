"""Project matching and listing filters for clg."""

import logging
from collections.abc import Iterable
from typing import Any, TypeVar

from pydantic import BaseModel

from clg.models import Project

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def match_project(projects: Iterable[Project], remote_url: str) -> Project | None:
    """Find the project whose ssh or http clone URL equals the remote URL.

    Comparison is exact: a missing ``.git`` suffix or a different protocol is a miss.
    """
    for project in projects:
        if remote_url in (project.ssh_url_to_repo, project.http_url_to_repo):
            logger.debug(f"Remote {remote_url} matches project {project.id} ({project.name})")
            return project
    logger.debug(f"No project matches remote {remote_url}")
    return None


def parse_filter(raw: str) -> tuple[str, str]:
    """Split a ``key=value`` filter.

    Raises:
        ValueError: If there is no ``=`` or the key is empty
    """
    key, sep, value = raw.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ValueError(f"Invalid filter '{raw}', expected key=value")
    return key, value.strip()


def parse_filters(raw_filters: Iterable[str]) -> dict[str, str]:
    """Parse ``key=value`` filters into a dict; later keys override earlier ones."""
    return dict(parse_filter(raw) for raw in raw_filters)


def _lookup(data: Any, dotted_key: str) -> Any:
    for part in dotted_key.split("."):
        if not isinstance(data, dict) or part not in data:
            raise KeyError(dotted_key)
        data = data[part]
    return data


def apply_filters(items: Iterable[M], filters: dict[str, str]) -> list[M]:
    """Keep items whose fields (dotted paths like ``author.username``) equal every filter value."""
    if not filters:
        return list(items)

    kept = []
    for item in items:
        dumped = item.model_dump()
        try:
            if all(str(_lookup(dumped, key)) == value for key, value in filters.items()):
                kept.append(item)
        except KeyError:
            continue
    return kept
