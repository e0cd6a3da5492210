"""Domain models for users, projects and backups."""

import datetime as dt
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SLUG_PATTERN = r"^[a-z0-9-]+$"
BIO_MAX_LENGTH = 280


class ProjectStatus(StrEnum):
    """Workflow status of a project."""

    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"


class ProjectStage(StrEnum):
    """Production stage of a project."""

    SHOOTING = "Shooting"
    EDITING = "Editing"
    DELIVERY = "Delivery"


class PaymentStatus(StrEnum):
    """Client payment state of a project."""

    UNPAID = "Unpaid"
    PARTIALLY_PAID = "PartiallyPaid"
    PAID = "Paid"


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, object]:
        """Return a JSON-compatible dict using the wire field names."""
        return self.model_dump(mode="json", by_alias=True)


class PublicUser(CamelModel):
    """User fields that are safe to expose outside the storage layer."""

    email: str
    name: str | None = ""
    company: str | None = None
    phone: str | None = None
    profile_complete: bool = False
    portfolio_slug: str | None = None
    profile_picture_url: str | None = None
    bio: str | None = None
    website: str | None = None
    instagram: str | None = None
    twitter: str | None = None

    @field_validator("portfolio_slug", mode="before")
    @classmethod
    def _blank_slug_is_none(cls, value: object) -> object:
        if value == "":
            return None
        return value


class User(PublicUser):
    """Full user record including the password hash."""

    password: str

    def public(self) -> PublicUser:
        """Return the user without the password field."""
        return PublicUser.model_validate(self.model_dump(exclude={"password"}))


class ProfileUpdate(CamelModel):
    """Editable profile fields; unset fields are left untouched."""

    name: str | None = None
    company: str | None = None
    phone: str | None = None
    portfolio_slug: str | None = Field(default=None, pattern=SLUG_PATTERN)
    profile_picture_url: str | None = None
    bio: str | None = Field(default=None, max_length=BIO_MAX_LENGTH)
    website: str | None = None
    instagram: str | None = None
    twitter: str | None = None

    @field_validator("portfolio_slug", mode="before")
    @classmethod
    def _blank_slug_is_none(cls, value: object) -> object:
        if value == "":
            return None
        return value

    def changes(self) -> dict[str, object]:
        """Return only the fields the caller explicitly set."""
        return self.model_dump(exclude_unset=True)


class ProjectDraft(CamelModel):
    """Project fields supplied by the owner on creation."""

    client_name: str
    date: dt.date
    location: str = ""
    photographer: str = ""
    status: ProjectStatus = ProjectStatus.PENDING
    stage: ProjectStage = ProjectStage.SHOOTING
    income: float = Field(default=0.0, ge=0)
    expenses: float = Field(default=0.0, ge=0)
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    description: str = ""
    image_url: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _drop_time_of_day(cls, value: object) -> object:
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value

    @field_validator("location", "photographer", "description", mode="before")
    @classmethod
    def _none_as_blank(cls, value: object) -> object:
        return "" if value is None else value


class Project(ProjectDraft):
    """Persisted project with its gallery."""

    id: str
    user_email: str | None = Field(default=None, alias="user_email")
    gallery_images: list[str] = Field(default_factory=list)

    @property
    def profit(self) -> float:
        """Income minus expenses."""
        return self.income - self.expenses


class FullBackup(CamelModel):
    """Complete dataset of all users and their projects."""

    users: list[User] = Field(default_factory=list)
    projects_by_email: dict[str, list[Project]] = Field(
        default_factory=dict, alias="projects"
    )


class DatabaseConfig(BaseModel):
    """Connection settings for a MySQL server."""

    host: str
    port: int = 3306
    user: str | None = None
    password: str | None = None
    database: str | None = None
