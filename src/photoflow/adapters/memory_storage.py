"""In-process storage engine for development and tests."""

from dataclasses import dataclass, field

from photoflow.adapters.dataset import Dataset
from photoflow.domain.models import (
    FullBackup,
    Project,
    ProjectDraft,
    PublicUser,
    User,
)
from photoflow.services.storage import Storage


@dataclass
class InMemoryStorage(Storage):
    """Storage kept in process memory; lost on restart.

    Operations never await, so each one runs atomically on the event loop.
    """

    dataset: Dataset = field(default_factory=Dataset)

    async def find_user_by_email(self, email: str) -> User | None:
        return self.dataset.find_user_by_email(email)

    async def find_user_by_slug(self, slug: str) -> User | None:
        return self.dataset.find_user_by_slug(slug)

    async def add_user(self, user: User) -> User:
        return self.dataset.add_user(user)

    async def update_user(self, email: str, fields: dict[str, object]) -> User | None:
        return self.dataset.update_user(email, fields)

    async def delete_user(self, email: str) -> bool:
        return self.dataset.delete_user(email)

    async def list_users(self) -> list[PublicUser]:
        return self.dataset.list_users()

    async def list_projects_for_user(self, email: str) -> list[Project]:
        return self.dataset.list_projects(email)

    async def add_project_for_user(self, email: str, draft: ProjectDraft) -> Project:
        return self.dataset.add_project(email, draft)

    async def update_project_for_user(
        self, email: str, project: Project
    ) -> Project | None:
        return self.dataset.update_project(email, project)

    async def delete_project_for_user(self, email: str, project_id: str) -> bool:
        return self.dataset.delete_project(email, project_id)

    async def add_gallery_image_to_project(
        self, email: str, project_id: str, image_ref: str
    ) -> Project | None:
        return self.dataset.add_gallery_image(email, project_id, image_ref)

    async def import_projects_for_user(
        self, email: str, projects: list[Project]
    ) -> None:
        self.dataset.import_projects(email, projects)

    async def export_full_backup(self) -> FullBackup:
        return self.dataset.to_backup()

    async def close(self) -> None:
        return None
