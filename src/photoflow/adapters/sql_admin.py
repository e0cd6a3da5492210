"""SQL migration target used by the admin backup tools."""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import timedelta

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from photoflow.adapters.sql_schema import metadata
from photoflow.adapters.sql_storage import (
    create_mysql_engine,
    replace_gallery,
    upsert_project,
    upsert_user,
    utcnow,
)
from photoflow.domain.models import DatabaseConfig
from photoflow.errors import StorageFailureError
from photoflow.services.backup import MigrationTarget, ParsedBackup

logger = logging.getLogger(__name__)

CR_CONNECTION_ERROR = 2002
CR_CONN_HOST_ERROR = 2003
ER_ACCESS_DENIED_ERROR = 1045
ER_BAD_DB_ERROR = 1049

_ERROR_MESSAGES = {
    CR_CONNECTION_ERROR: (
        "Connection refused. Check if the database server is running "
        "and the host/port are correct."
    ),
    CR_CONN_HOST_ERROR: (
        "Connection refused. Check if the database server is running "
        "and the host/port are correct."
    ),
    ER_ACCESS_DENIED_ERROR: "Access denied. Check your username and password.",
    ER_BAD_DB_ERROR: "Database not found. Check the database name.",
}


def describe_database_error(error: BaseException | None) -> str:
    """Return a message for a driver error that exposes no server details."""
    code = error.args[0] if error is not None and error.args else None
    if not isinstance(code, int):
        return "An unknown error occurred."
    return _ERROR_MESSAGES.get(
        code, f"Error: {code}. Please check your connection details."
    )


def _single_connection_engine(config: DatabaseConfig) -> AsyncEngine:
    return create_mysql_engine(config, pool_size=1)


@dataclass
class SqlMigrationTarget(MigrationTarget):
    """Runs admin operations against a database given per request.

    Each operation opens a short-lived engine for the supplied connection
    settings and disposes of it afterwards.
    """

    engine_factory: Callable[[DatabaseConfig], AsyncEngine] = field(
        default=_single_connection_engine
    )

    async def test_connection(self, config: DatabaseConfig) -> None:
        async with self._engine(config, "connection test") as engine:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

    async def create_schema(self, config: DatabaseConfig) -> None:
        async with self._engine(config, "schema creation") as engine:
            async with engine.begin() as conn:
                await conn.run_sync(metadata.create_all, checkfirst=True)
        logger.info("Ensured database schema on %s", config.host)

    async def import_backup(self, config: DatabaseConfig, backup: ParsedBackup) -> None:
        async with self._engine(config, "backup import") as engine:
            async with engine.begin() as conn:
                for user in backup.users:
                    await upsert_user(conn, user)
                now = utcnow()
                for position, (owner, project) in enumerate(backup.projects):
                    await upsert_project(
                        conn, project, owner, now - timedelta(microseconds=position)
                    )
                    await replace_gallery(conn, project.id, project.gallery_images)
        logger.info(
            "Imported %d users and %d projects into %s",
            len(backup.users),
            len(backup.projects),
            config.host,
        )

    @asynccontextmanager
    async def _engine(
        self, config: DatabaseConfig, operation: str
    ) -> AsyncIterator[AsyncEngine]:
        engine = self.engine_factory(config)
        try:
            yield engine
        except DBAPIError as exc:
            logger.exception("Database %s failed", operation)
            raise StorageFailureError(describe_database_error(exc.orig)) from exc
        except SQLAlchemyError as exc:
            logger.exception("Database %s failed", operation)
            raise StorageFailureError(describe_database_error(None)) from exc
        finally:
            await engine.dispose()
