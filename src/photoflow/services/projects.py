"""Owner-scoped project management and public portfolios."""

import logging
from dataclasses import dataclass
from datetime import date

from photoflow.domain.models import (
    Project,
    ProjectDraft,
    ProjectStatus,
    PublicUser,
)
from photoflow.errors import AuthenticationRequiredError
from photoflow.services.sessions import SessionManager
from photoflow.services.storage import Storage

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"


@dataclass(frozen=True)
class PublicPortfolio:
    """A user's public profile with their completed projects."""

    user: PublicUser
    projects: list[Project]


@dataclass(frozen=True)
class ProjectFilter:
    """Dashboard search criteria; every criterion must match."""

    search: str = ""
    status: str = ALL_STATUSES
    day: date | None = None

    def matches(self, project: Project) -> bool:
        """Return True when the project satisfies all criteria."""
        needle = self.search.lower()
        matches_search = (
            needle in project.client_name.lower()
            or needle in project.photographer.lower()
            or needle in project.location.lower()
        )
        matches_status = self.status == ALL_STATUSES or project.status == self.status
        matches_day = self.day is None or project.date == self.day
        return matches_search and matches_status and matches_day


def filter_projects(projects: list[Project], criteria: ProjectFilter) -> list[Project]:
    """Return the projects matching the criteria, preserving order."""
    return [project for project in projects if criteria.matches(project)]


@dataclass
class ProjectService:
    """Application service for a signed-in user's projects.

    Every method except ``get_public_portfolio`` verifies the session token
    before touching storage and only ever reads or writes the caller's own
    projects.
    """

    storage: Storage
    sessions: SessionManager

    async def list_projects(self, token: str | None) -> list[Project]:
        """Return the caller's projects, newest first."""
        caller = self.require_session(token)
        return await self.storage.list_projects_for_user(caller.email)

    async def create_project(self, token: str | None, draft: ProjectDraft) -> Project:
        """Create a project owned by the caller."""
        caller = self.require_session(token)
        if not draft.photographer.strip() and caller.name:
            draft = draft.model_copy(update={"photographer": caller.name})
        project = await self.storage.add_project_for_user(caller.email, draft)
        logger.info("Created project %s for %s", project.id, caller.email)
        return project

    async def update_project(
        self, token: str | None, project: Project
    ) -> Project | None:
        """Replace a project's fields; None when the caller does not own it."""
        caller = self.require_session(token)
        return await self.storage.update_project_for_user(caller.email, project)

    async def set_project_status(
        self, token: str | None, project_id: str, status: ProjectStatus
    ) -> Project | None:
        """Change only the status of one of the caller's projects."""
        caller = self.require_session(token)
        for project in await self.storage.list_projects_for_user(caller.email):
            if project.id == project_id:
                changed = project.model_copy(update={"status": status})
                return await self.storage.update_project_for_user(
                    caller.email, changed
                )
        return None

    async def delete_project(self, token: str | None, project_id: str) -> bool:
        """Delete one of the caller's projects."""
        caller = self.require_session(token)
        return await self.storage.delete_project_for_user(caller.email, project_id)

    async def append_gallery_image(
        self, token: str | None, project_id: str, image_ref: str
    ) -> Project | None:
        """Append an image to the end of a project's gallery."""
        caller = self.require_session(token)
        return await self.storage.add_gallery_image_to_project(
            caller.email, project_id, image_ref
        )

    async def bulk_import(self, token: str | None, projects: list[Project]) -> None:
        """Replace the caller's whole project set, e.g. from a personal backup."""
        caller = self.require_session(token)
        await self.storage.import_projects_for_user(caller.email, projects)
        logger.info("Imported %d projects for %s", len(projects), caller.email)

    async def get_public_portfolio(self, slug: str) -> PublicPortfolio | None:
        """Return the slug owner's completed projects without authentication."""
        owner = await self.storage.find_user_by_slug(slug)
        if owner is None:
            return None
        projects = await self.storage.list_projects_for_user(owner.email)
        completed = [
            project for project in projects if project.status == ProjectStatus.COMPLETED
        ]
        return PublicPortfolio(user=owner.public(), projects=completed)

    def require_session(self, token: str | None) -> PublicUser:
        """Return the session user or raise AuthenticationRequiredError."""
        caller = self.sessions.verify(token)
        if caller is None:
            raise AuthenticationRequiredError()
        return caller
