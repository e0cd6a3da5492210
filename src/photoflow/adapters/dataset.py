"""Dataset operations shared by the in-memory and JSON-file engines."""

from dataclasses import dataclass, field
from uuid import uuid4

from photoflow.domain.models import (
    FullBackup,
    Project,
    ProjectDraft,
    PublicUser,
    User,
)
from photoflow.errors import DuplicateKeyError, NotFoundError
from photoflow.services.storage import ensure_importable_ids


@dataclass
class Dataset:
    """Users and per-user project lists held in memory.

    Project lists are kept newest first. Every value handed out is a deep
    copy so callers can never mutate stored state.
    """

    users: list[User] = field(default_factory=list)
    projects: dict[str, list[Project]] = field(default_factory=dict)

    @classmethod
    def from_backup(cls, backup: FullBackup) -> "Dataset":
        """Build a dataset from a backup document."""
        return cls(
            users=list(backup.users),
            projects={
                email: list(projects)
                for email, projects in backup.projects_by_email.items()
            },
        )

    def to_backup(self) -> FullBackup:
        """Return a deep copy of the dataset as a backup document."""
        return FullBackup(
            users=[user.model_copy(deep=True) for user in self.users],
            projects_by_email={
                email: [project.model_copy(deep=True) for project in projects]
                for email, projects in self.projects.items()
            },
        )

    def find_user_by_email(self, email: str) -> User | None:
        user = self._user(email)
        return user.model_copy(deep=True) if user else None

    def find_user_by_slug(self, slug: str) -> User | None:
        if not slug:
            return None
        for user in self.users:
            if user.portfolio_slug == slug:
                return user.model_copy(deep=True)
        return None

    def add_user(self, user: User) -> User:
        if self._user(user.email) is not None:
            raise DuplicateKeyError("email", "This email is already in use.")
        self._ensure_slug_free(user.email, user.portfolio_slug)
        self.users.append(user.model_copy(deep=True))
        self.projects.setdefault(user.email, [])
        return user.model_copy(deep=True)

    def update_user(self, email: str, fields: dict[str, object]) -> User | None:
        for index, user in enumerate(self.users):
            if user.email != email:
                continue
            changes = {key: value for key, value in fields.items() if key != "email"}
            if not changes:
                return user.model_copy(deep=True)
            slug = changes.get("portfolio_slug")
            if isinstance(slug, str):
                self._ensure_slug_free(email, slug)
            updated = User.model_validate({**user.model_dump(), **changes})
            self.users[index] = updated
            return updated.model_copy(deep=True)
        return None

    def delete_user(self, email: str) -> bool:
        remaining = [user for user in self.users if user.email != email]
        if len(remaining) == len(self.users):
            return False
        self.users = remaining
        self.projects.pop(email, None)
        return True

    def list_users(self) -> list[PublicUser]:
        return [user.public() for user in self.users]

    def list_projects(self, email: str) -> list[Project]:
        return [
            project.model_copy(deep=True) for project in self.projects.get(email, [])
        ]

    def add_project(self, email: str, draft: ProjectDraft) -> Project:
        owned = self._owned_projects(email)
        project = Project(
            **draft.model_dump(),
            id=str(uuid4()),
            user_email=email,
            gallery_images=[],
        )
        owned.insert(0, project)
        return project.model_copy(deep=True)

    def update_project(self, email: str, project: Project) -> Project | None:
        owned = self.projects.get(email, [])
        for index, current in enumerate(owned):
            if current.id != project.id:
                continue
            updated = project.model_copy(
                update={
                    "user_email": email,
                    "gallery_images": list(current.gallery_images),
                },
                deep=True,
            )
            owned[index] = updated
            return updated.model_copy(deep=True)
        return None

    def delete_project(self, email: str, project_id: str) -> bool:
        owned = self.projects.get(email, [])
        remaining = [project for project in owned if project.id != project_id]
        if len(remaining) == len(owned):
            return False
        self.projects[email] = remaining
        return True

    def add_gallery_image(
        self, email: str, project_id: str, image_ref: str
    ) -> Project | None:
        for project in self.projects.get(email, []):
            if project.id == project_id:
                project.gallery_images.append(image_ref)
                return project.model_copy(deep=True)
        return None

    def import_projects(self, email: str, projects: list[Project]) -> None:
        self._owned_projects(email)
        ensure_importable_ids(
            projects,
            (
                project.id
                for owner, owned in self.projects.items()
                if owner != email
                for project in owned
            ),
        )
        self.projects[email] = [
            project.model_copy(update={"user_email": email}, deep=True)
            for project in projects
        ]

    def _user(self, email: str) -> User | None:
        for user in self.users:
            if user.email == email:
                return user
        return None

    def _owned_projects(self, email: str) -> list[Project]:
        if self._user(email) is None:
            raise NotFoundError("The project owner does not exist.")
        return self.projects.setdefault(email, [])

    def _ensure_slug_free(self, email: str, slug: str | None) -> None:
        if not slug:
            return
        for user in self.users:
            if user.portfolio_slug == slug and user.email != email:
                raise DuplicateKeyError(
                    "portfolio_slug", "This portfolio link is already in use."
                )
