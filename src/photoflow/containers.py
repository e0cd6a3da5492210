"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from photoflow.adapters.json_storage import JsonFileStorage
from photoflow.adapters.memory_storage import InMemoryStorage
from photoflow.adapters.openai_extraction_client import OpenAIExtractionClient
from photoflow.adapters.sql_admin import SqlMigrationTarget
from photoflow.adapters.sql_storage import SqlStorage, create_mysql_engine
from photoflow.config import DEFAULT_SESSION_SECRET, Settings
from photoflow.services.auth import AuthService
from photoflow.services.backup import BackupService
from photoflow.services.extraction import ExtractionService
from photoflow.services.projects import ProjectService
from photoflow.services.reports import ReportService
from photoflow.services.sessions import SessionManager
from photoflow.services.storage import Storage

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    storage: Storage
    sessions: SessionManager
    auth_service: AuthService
    project_service: ProjectService
    report_service: ReportService
    backup_service: BackupService
    extraction_service: ExtractionService | None
    close_resources: Callable[[], Awaitable[None]]


def build_storage(settings: Settings) -> Storage:
    """Pick SQL when DB_HOST is set, then the JSON file, then process memory."""
    database_config = settings.database_config()
    if database_config is not None:
        logger.info(
            "Using MySQL storage at %s:%s", database_config.host, database_config.port
        )
        engine = create_mysql_engine(database_config, settings.db_pool_size)
        return SqlStorage(engine)
    if settings.json_db_path:
        logger.info("Using JSON file storage at %s", settings.json_db_path)
        return JsonFileStorage(Path(settings.json_db_path))
    logger.info("Using in-memory storage")
    return InMemoryStorage()


def build_container(
    settings: Settings | None = None, storage: Storage | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resolved_storage = storage or build_storage(resolved_settings)
    if resolved_settings.session_secret == DEFAULT_SESSION_SECRET:
        logger.warning("SESSION_SECRET is not set; using the development default")

    sessions = SessionManager(
        secret=resolved_settings.session_secret,
        ttl=timedelta(hours=resolved_settings.session_ttl_hours),
    )
    auth_service = AuthService(
        storage=resolved_storage,
        sessions=sessions,
        bcrypt_rounds=resolved_settings.bcrypt_rounds,
    )
    project_service = ProjectService(storage=resolved_storage, sessions=sessions)
    report_service = ReportService(project_service)
    backup_service = BackupService(
        storage=resolved_storage,
        target=SqlMigrationTarget(),
        bcrypt_rounds=resolved_settings.bcrypt_rounds,
    )

    openai_client = None
    extraction_service = None
    if resolved_settings.openai_api_key:
        openai_client = OpenAIExtractionClient.create(resolved_settings.openai_api_key)
        extraction_service = ExtractionService(
            client=openai_client, model=resolved_settings.openai_model
        )

    async def close_resources() -> None:
        await resolved_storage.close()
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        storage=resolved_storage,
        sessions=sessions,
        auth_service=auth_service,
        project_service=project_service,
        report_service=report_service,
        backup_service=backup_service,
        extraction_service=extraction_service,
        close_resources=close_resources,
    )
