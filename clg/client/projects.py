"""Project client mixin."""

import logging

from clg.client.base import DEFAULT_PER_PAGE, BaseClientMixin, decode_pages
from clg.models import Project

logger = logging.getLogger(__name__)


class ProjectsMixin(BaseClientMixin):
    """Mixin for project listing."""

    async def list_projects(self, per_page: int = DEFAULT_PER_PAGE) -> list[Project]:
        """Get all projects of the configured group or user."""
        bodies = await self.fetch_all_pages("projects", per_page=per_page)
        projects = decode_pages(bodies, Project)
        logger.info(f"Listed {len(projects)} projects from {len(bodies)} pages")
        return projects
