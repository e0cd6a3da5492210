"""Request bodies for the HTTP API."""

from pydantic import Field

from photoflow.domain.models import CamelModel, DatabaseConfig, ProjectStatus


class Credentials(CamelModel):
    """Email and password pair for login and registration."""

    email: str
    password: str


class PasswordChange(CamelModel):
    current_password: str
    new_password: str


class StatusChange(CamelModel):
    status: ProjectStatus


class GalleryImage(CamelModel):
    image_url: str = Field(min_length=1)


class ExtractionRequest(CamelModel):
    description: str = Field(min_length=1)


class DatabaseImportRequest(CamelModel):
    """Target database and the backup document to load into it."""

    config: DatabaseConfig
    json_data: str
