"""Storage contract shared by every persistence engine."""

from collections.abc import Iterable
from typing import Protocol

from photoflow.domain.models import (
    FullBackup,
    Project,
    ProjectDraft,
    PublicUser,
    User,
)
from photoflow.errors import DuplicateKeyError

PROJECT_ID_TAKEN_MESSAGE = "A project id in this import is repeated or already taken."


def ensure_importable_ids(
    projects: list[Project], foreign_ids: Iterable[str]
) -> None:
    """Reject an import whose ids repeat or belong to another user's projects."""
    ids = [project.id for project in projects]
    if len(set(ids)) != len(ids) or not set(ids).isdisjoint(foreign_ids):
        raise DuplicateKeyError("id", PROJECT_ID_TAKEN_MESSAGE)


class Storage(Protocol):
    """Async CRUD interface over users, projects and gallery images."""

    async def find_user_by_email(self, email: str) -> User | None:
        """Return the user with this email, if present."""

    async def find_user_by_slug(self, slug: str) -> User | None:
        """Return the user owning this portfolio slug, if present."""

    async def add_user(self, user: User) -> User:
        """Persist a new user; raise DuplicateKeyError if the email exists."""

    async def update_user(self, email: str, fields: dict[str, object]) -> User | None:
        """Apply partial field changes and return the updated user."""

    async def delete_user(self, email: str) -> bool:
        """Delete a user together with their projects and gallery images."""

    async def list_users(self) -> list[PublicUser]:
        """Return every user without passwords."""

    async def list_projects_for_user(self, email: str) -> list[Project]:
        """Return the user's projects, newest first, with galleries."""

    async def add_project_for_user(self, email: str, draft: ProjectDraft) -> Project:
        """Create a project with a fresh id and an empty gallery."""

    async def update_project_for_user(
        self, email: str, project: Project
    ) -> Project | None:
        """Replace a project's fields if the user owns it."""

    async def delete_project_for_user(self, email: str, project_id: str) -> bool:
        """Delete a project owned by the user."""

    async def add_gallery_image_to_project(
        self, email: str, project_id: str, image_ref: str
    ) -> Project | None:
        """Append an image to the project's gallery if the user owns it."""

    async def import_projects_for_user(
        self, email: str, projects: list[Project]
    ) -> None:
        """Replace the user's whole project set."""

    async def export_full_backup(self) -> FullBackup:
        """Return every user (with password hashes) and every project."""

    async def close(self) -> None:
        """Release engine resources."""
