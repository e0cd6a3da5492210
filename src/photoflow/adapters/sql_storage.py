"""SQLAlchemy-backed storage engine for MySQL."""

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from sqlalchemy import URL, ColumnElement, delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from photoflow.adapters.sql_schema import gallery_images, projects, users
from photoflow.domain.models import (
    DatabaseConfig,
    FullBackup,
    Project,
    ProjectDraft,
    PublicUser,
    User,
)
from photoflow.errors import (
    DuplicateKeyError,
    NotFoundError,
    PhotoFlowError,
    StorageFailureError,
)
from photoflow.services.storage import Storage, ensure_importable_ids

logger = logging.getLogger(__name__)


def database_url(config: DatabaseConfig) -> URL:
    """Build an aiomysql connection URL from connection settings."""
    return URL.create(
        "mysql+aiomysql",
        username=config.user,
        password=config.password,
        host=config.host,
        port=config.port,
        database=config.database,
        query={"charset": "utf8mb4"},
    )


def create_mysql_engine(config: DatabaseConfig, pool_size: int = 10) -> AsyncEngine:
    """Create an engine whose pool never exceeds ``pool_size`` connections."""
    return create_async_engine(
        database_url(config),
        pool_size=pool_size,
        max_overflow=0,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


@dataclass
class SqlStorage(Storage):
    """Storage engine over the users, projects and gallery_images tables."""

    engine: AsyncEngine

    async def find_user_by_email(self, email: str) -> User | None:
        async with self._begin() as conn:
            return await _select_user(conn, users.c.email == email)

    async def find_user_by_slug(self, slug: str) -> User | None:
        if not slug:
            return None
        async with self._begin() as conn:
            return await _select_user(conn, users.c.portfolioSlug == slug)

    async def add_user(self, user: User) -> User:
        async with self._begin() as conn:
            if await _select_user(conn, users.c.email == user.email):
                raise DuplicateKeyError("email", "This email is already in use.")
            await _ensure_slug_free(conn, user.email, user.portfolio_slug)
            await conn.execute(insert(users).values(**_user_values(user)))
        return user

    async def update_user(self, email: str, fields: dict[str, object]) -> User | None:
        values = _user_columns(fields)
        if not values:
            return await self.find_user_by_email(email)
        async with self._begin() as conn:
            slug = fields.get("portfolio_slug")
            if isinstance(slug, str):
                await _ensure_slug_free(conn, email, slug)
            await conn.execute(
                update(users).where(users.c.email == email).values(**values)
            )
            return await _select_user(conn, users.c.email == email)

    async def delete_user(self, email: str) -> bool:
        async with self._begin() as conn:
            result = await conn.execute(delete(users).where(users.c.email == email))
            return result.rowcount > 0

    async def list_users(self) -> list[PublicUser]:
        async with self._begin() as conn:
            rows = (
                (await conn.execute(select(users).order_by(users.c.id)))
                .mappings()
                .all()
            )
        return [_row_to_user(row).public() for row in rows]

    async def list_projects_for_user(self, email: str) -> list[Project]:
        async with self._begin() as conn:
            return await _select_projects(conn, projects.c.user_email == email)

    async def add_project_for_user(self, email: str, draft: ProjectDraft) -> Project:
        project = Project(
            **draft.model_dump(), id=str(uuid4()), user_email=email, gallery_images=[]
        )
        async with self._begin() as conn:
            if await _select_user(conn, users.c.email == email) is None:
                raise NotFoundError("The project owner does not exist.")
            await insert_project(conn, project, email, utcnow())
        return project

    async def update_project_for_user(
        self, email: str, project: Project
    ) -> Project | None:
        async with self._begin() as conn:
            if not await _is_owned(conn, email, project.id):
                return None
            await conn.execute(
                update(projects)
                .where(projects.c.id == project.id, projects.c.user_email == email)
                .values(**_project_values(project))
            )
            return await _select_project(conn, email, project.id)

    async def delete_project_for_user(self, email: str, project_id: str) -> bool:
        async with self._begin() as conn:
            result = await conn.execute(
                delete(projects).where(
                    projects.c.id == project_id, projects.c.user_email == email
                )
            )
            return result.rowcount > 0

    async def add_gallery_image_to_project(
        self, email: str, project_id: str, image_ref: str
    ) -> Project | None:
        async with self._begin() as conn:
            if not await _is_owned(conn, email, project_id):
                return None
            await conn.execute(
                insert(gallery_images).values(project_id=project_id, imageUrl=image_ref)
            )
            return await _select_project(conn, email, project_id)

    async def import_projects_for_user(
        self, email: str, projects_to_import: list[Project]
    ) -> None:
        async with self._begin() as conn:
            if await _select_user(conn, users.c.email == email) is None:
                raise NotFoundError("The project owner does not exist.")
            foreign = await conn.execute(
                select(projects.c.id).where(
                    projects.c.id.in_([project.id for project in projects_to_import]),
                    projects.c.user_email != email,
                )
            )
            ensure_importable_ids(projects_to_import, foreign.scalars())
            await conn.execute(delete(projects).where(projects.c.user_email == email))
            now = utcnow()
            for position, project in enumerate(projects_to_import):
                await insert_project(
                    conn, project, email, now - timedelta(microseconds=position)
                )
                await replace_gallery(conn, project.id, project.gallery_images)

    async def export_full_backup(self) -> FullBackup:
        async with self._begin() as conn:
            user_rows = (
                (await conn.execute(select(users).order_by(users.c.id)))
                .mappings()
                .all()
            )
            all_projects = await _select_projects(conn, None)
        by_email: dict[str, list[Project]] = {row["email"]: [] for row in user_rows}
        for project in all_projects:
            by_email.setdefault(str(project.user_email), []).append(project)
        return FullBackup(
            users=[_row_to_user(row) for row in user_rows],
            projects_by_email=by_email,
        )

    async def close(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def _begin(self) -> AsyncIterator[AsyncConnection]:
        try:
            async with self.engine.begin() as conn:
                yield conn
        except IntegrityError as exc:
            raise _integrity_error(exc) from exc
        except SQLAlchemyError as exc:
            logger.exception("SQL storage operation failed")
            raise StorageFailureError() from exc


async def upsert_user(conn: AsyncConnection, user: User) -> None:
    """Insert the user, or update every field of an existing email."""
    values = _user_values(user)
    existing = await conn.execute(
        select(users.c.id).where(users.c.email == user.email)
    )
    if existing.first() is None:
        await conn.execute(insert(users).values(**values))
        return
    values.pop("email")
    await conn.execute(
        update(users).where(users.c.email == user.email).values(**values)
    )


async def upsert_project(
    conn: AsyncConnection, project: Project, owner: str, created_at: datetime
) -> None:
    """Insert the project, or update an existing id in place."""
    existing = await conn.execute(
        select(projects.c.id).where(projects.c.id == project.id)
    )
    if existing.first() is None:
        await insert_project(conn, project, owner, created_at)
        return
    await conn.execute(
        update(projects)
        .where(projects.c.id == project.id)
        .values(**_project_values(project), user_email=owner)
    )


async def insert_project(
    conn: AsyncConnection, project: Project, owner: str, created_at: datetime
) -> None:
    """Insert a project row owned by ``owner``."""
    await conn.execute(
        insert(projects).values(
            id=project.id,
            user_email=owner,
            createdAt=created_at,
            **_project_values(project),
        )
    )


async def replace_gallery(
    conn: AsyncConnection, project_id: str, image_refs: list[str]
) -> None:
    """Replace a project's gallery rows, keeping the given order."""
    await conn.execute(
        delete(gallery_images).where(gallery_images.c.project_id == project_id)
    )
    for image_ref in image_refs:
        await conn.execute(
            insert(gallery_images).values(project_id=project_id, imageUrl=image_ref)
        )


def utcnow() -> datetime:
    return datetime.now(tz=UTC).replace(tzinfo=None)


def _user_values(user: User) -> dict[str, object]:
    return {
        "email": user.email,
        "password": user.password,
        "name": user.name or "",
        "company": user.company,
        "phone": user.phone,
        "profileComplete": user.profile_complete,
        "portfolioSlug": user.portfolio_slug,
        "profilePictureUrl": user.profile_picture_url,
        "bio": user.bio,
        "website": user.website,
        "instagram": user.instagram,
        "twitter": user.twitter,
    }


def _user_columns(fields: dict[str, object]) -> dict[str, object]:
    columns = {}
    for name, value in fields.items():
        model_field = User.model_fields.get(name)
        if name == "email" or model_field is None:
            continue
        columns[model_field.alias or name] = value
    return columns


def _project_values(project: ProjectDraft) -> dict[str, object]:
    return {
        "clientName": project.client_name,
        "date": project.date,
        "location": project.location,
        "photographer": project.photographer,
        "status": project.status.value,
        "stage": project.stage.value,
        "income": project.income,
        "expenses": project.expenses,
        "paymentStatus": project.payment_status.value,
        "description": project.description,
        "imageUrl": project.image_url,
    }


def _row_to_user(row: Mapping[str, object]) -> User:
    return User.model_validate(dict(row))


async def _select_user(
    conn: AsyncConnection, condition: ColumnElement[bool]
) -> User | None:
    row = (await conn.execute(select(users).where(condition))).mappings().first()
    return _row_to_user(row) if row else None


async def _ensure_slug_free(
    conn: AsyncConnection, email: str, slug: str | None
) -> None:
    if not slug:
        return
    holder = await conn.execute(
        select(users.c.email).where(
            users.c.portfolioSlug == slug, users.c.email != email
        )
    )
    if holder.first() is not None:
        raise DuplicateKeyError(
            "portfolio_slug", "This portfolio link is already in use."
        )


async def _is_owned(conn: AsyncConnection, email: str, project_id: str) -> bool:
    row = await conn.execute(
        select(projects.c.id).where(
            projects.c.id == project_id, projects.c.user_email == email
        )
    )
    return row.first() is not None


async def _select_project(
    conn: AsyncConnection, email: str, project_id: str
) -> Project | None:
    found = await _select_projects(
        conn, (projects.c.id == project_id) & (projects.c.user_email == email)
    )
    return found[0] if found else None


async def _select_projects(
    conn: AsyncConnection, condition: ColumnElement[bool] | None
) -> list[Project]:
    query = select(projects).order_by(projects.c.createdAt.desc())
    if condition is not None:
        query = query.where(condition)
    rows = (await conn.execute(query)).mappings().all()
    if not rows:
        return []
    ids = [row["id"] for row in rows]
    image_rows = await conn.execute(
        select(gallery_images.c.project_id, gallery_images.c.imageUrl)
        .where(gallery_images.c.project_id.in_(ids))
        .order_by(gallery_images.c.id)
    )
    galleries: dict[str, list[str]] = {project_id: [] for project_id in ids}
    for project_id, image_ref in image_rows:
        galleries[project_id].append(image_ref)
    return [
        Project.model_validate({**row, "galleryImages": galleries[row["id"]]})
        for row in rows
    ]


def _integrity_error(exc: IntegrityError) -> PhotoFlowError:
    detail = str(exc.orig)
    if "portfolioSlug" in detail:
        return DuplicateKeyError(
            "portfolio_slug", "This portfolio link is already in use."
        )
    if "users.email" in detail or "'email'" in detail:
        return DuplicateKeyError("email", "This email is already in use.")
    logger.exception("SQL integrity check failed")
    return StorageFailureError()
