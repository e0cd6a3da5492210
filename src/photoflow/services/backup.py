"""Full-dataset export and migration into a SQL database."""

import json
import logging
from dataclasses import dataclass, replace
from typing import Protocol

from pydantic import ValidationError

from photoflow.domain.admin import ConnectionResult, ImportResult, SchemaResult
from photoflow.domain.models import DatabaseConfig, Project, User
from photoflow.errors import ImportParseError, StorageFailureError
from photoflow.security import DEFAULT_ROUNDS, hash_password, is_password_hash
from photoflow.services.storage import Storage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedBackup:
    """Backup contents ready for import: valid users and owned projects."""

    users: list[User]
    projects: list[tuple[str, Project]]
    skipped_users: int = 0


class MigrationTarget(Protocol):
    """SQL database that backups are migrated into."""

    async def test_connection(self, config: DatabaseConfig) -> None:
        """Open and ping a connection; raise StorageFailureError on failure."""

    async def create_schema(self, config: DatabaseConfig) -> None:
        """Create missing tables; raise StorageFailureError on failure."""

    async def import_backup(self, config: DatabaseConfig, backup: ParsedBackup) -> None:
        """Upsert users and projects in one transaction."""


def parse_backup(json_text: str) -> ParsedBackup:
    """Parse a backup document, skipping users without email or password.

    Raises:
        ImportParseError: the text is not JSON or not a backup document.
    """
    try:
        document = json.loads(json_text)
    except json.JSONDecodeError as exc:
        raise ImportParseError(context={"error": str(exc)}) from exc
    if not isinstance(document, dict):
        raise ImportParseError(context={"error": "document is not an object"})

    raw_users = document.get("users", [])
    raw_projects = document.get("projects", {})
    if not isinstance(raw_users, list) or not isinstance(raw_projects, dict):
        raise ImportParseError(context={"error": "unexpected document shape"})

    try:
        users = [
            User.model_validate(raw)
            for raw in raw_users
            if isinstance(raw, dict) and raw.get("email") and raw.get("password")
        ]
        projects = []
        for key, owned in raw_projects.items():
            for raw in owned or []:
                project = Project.model_validate(raw)
                projects.append((project.user_email or key, project))
    except (TypeError, ValidationError) as exc:
        raise ImportParseError(context={"error": str(exc)}) from exc
    return ParsedBackup(
        users=users, projects=projects, skipped_users=len(raw_users) - len(users)
    )


@dataclass
class BackupService:
    """Service for administrators moving data between storage engines."""

    storage: Storage
    target: MigrationTarget
    bcrypt_rounds: int = DEFAULT_ROUNDS

    async def export_all_as_json(self) -> str:
        """Return every user and project as a pretty-printed JSON document."""
        backup = await self.storage.export_full_backup()
        return json.dumps(backup.to_document(), indent=2, ensure_ascii=False)

    async def test_connection(self, config: DatabaseConfig) -> ConnectionResult:
        """Check that the database accepts connections."""
        try:
            await self.target.test_connection(config)
        except StorageFailureError as exc:
            return ConnectionResult(success=False, error=exc.message)
        return ConnectionResult(success=True)

    async def create_schema(self, config: DatabaseConfig) -> SchemaResult:
        """Create the users, projects and gallery tables if missing."""
        try:
            await self.target.create_schema(config)
        except StorageFailureError as exc:
            return SchemaResult(
                success=False, error=f"Failed to create tables: {exc.message}"
            )
        return SchemaResult(
            success=True, message="Database tables created successfully!"
        )

    async def import_json_into_sql(
        self, config: DatabaseConfig, json_text: str
    ) -> ImportResult:
        """Upsert a backup document into the database in a single transaction."""
        try:
            backup = self._hash_legacy_passwords(parse_backup(json_text))
            await self.target.import_backup(config, backup)
        except ImportParseError as exc:
            logger.warning("Rejected backup import: %s", exc.context)
            return ImportResult(success=False, error=exc.message)
        except StorageFailureError as exc:
            return ImportResult(
                success=False, error=f"Failed to import data: {exc.message}"
            )
        if backup.skipped_users:
            logger.info("Skipped %d users without credentials", backup.skipped_users)
        return ImportResult(
            success=True,
            message=(
                f"Data imported! {len(backup.users)} users and "
                f"{len(backup.projects)} projects."
            ),
        )

    def _hash_legacy_passwords(self, backup: ParsedBackup) -> ParsedBackup:
        """Hash plaintext passwords from older backups; keep bcrypt hashes."""
        users = [
            user
            if is_password_hash(user.password)
            else user.model_copy(
                update={"password": hash_password(user.password, self.bcrypt_rounds)}
            )
            for user in backup.users
        ]
        rehashed = sum(
            1 for old, new in zip(backup.users, users, strict=True) if old is not new
        )
        if rehashed:
            logger.info("Hashed %d plaintext passwords from the backup", rehashed)
        return replace(backup, users=users)
