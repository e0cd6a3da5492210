"""Storage engine backed by a single JSON file."""

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from photoflow.adapters.dataset import Dataset
from photoflow.domain.models import (
    FullBackup,
    Project,
    ProjectDraft,
    PublicUser,
    User,
)
from photoflow.errors import StorageFailureError
from photoflow.services.storage import Storage

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class JsonFileStorage(Storage):
    """Whole-file JSON storage for a single-process, single-writer deployment.

    Every operation reads the file, applies the change in memory and writes
    the whole document back through a temporary file. Operations are
    serialized by one lock; several processes sharing a file are not
    supported.
    """

    path: Path
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    async def find_user_by_email(self, email: str) -> User | None:
        return await self._read(lambda data: data.find_user_by_email(email))

    async def find_user_by_slug(self, slug: str) -> User | None:
        return await self._read(lambda data: data.find_user_by_slug(slug))

    async def add_user(self, user: User) -> User:
        return await self._write(lambda data: data.add_user(user))

    async def update_user(self, email: str, fields: dict[str, object]) -> User | None:
        if not fields:
            return await self.find_user_by_email(email)
        return await self._write(lambda data: data.update_user(email, fields))

    async def delete_user(self, email: str) -> bool:
        return await self._write(lambda data: data.delete_user(email))

    async def list_users(self) -> list[PublicUser]:
        return await self._read(lambda data: data.list_users())

    async def list_projects_for_user(self, email: str) -> list[Project]:
        return await self._read(lambda data: data.list_projects(email))

    async def add_project_for_user(self, email: str, draft: ProjectDraft) -> Project:
        return await self._write(lambda data: data.add_project(email, draft))

    async def update_project_for_user(
        self, email: str, project: Project
    ) -> Project | None:
        return await self._write(lambda data: data.update_project(email, project))

    async def delete_project_for_user(self, email: str, project_id: str) -> bool:
        return await self._write(lambda data: data.delete_project(email, project_id))

    async def add_gallery_image_to_project(
        self, email: str, project_id: str, image_ref: str
    ) -> Project | None:
        return await self._write(
            lambda data: data.add_gallery_image(email, project_id, image_ref)
        )

    async def import_projects_for_user(
        self, email: str, projects: list[Project]
    ) -> None:
        await self._write(lambda data: data.import_projects(email, projects))

    async def export_full_backup(self) -> FullBackup:
        return await self._read(lambda data: data.to_backup())

    async def close(self) -> None:
        return None

    async def _read(self, operation: Callable[[Dataset], T]) -> T:
        async with self._lock:
            dataset = await self._load()
            return operation(dataset)

    async def _write(self, operation: Callable[[Dataset], T]) -> T:
        async with self._lock:
            dataset = await self._load()
            result = operation(dataset)
            await self._save(dataset)
            return result

    async def _load(self) -> Dataset:
        if not await aiofiles.os.path.exists(self.path):
            dataset = Dataset()
            await self._save(dataset)
            return dataset
        try:
            async with aiofiles.open(self.path, encoding="utf-8") as handle:
                raw = await handle.read()
            backup = FullBackup.model_validate(json.loads(raw))
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            logger.exception("Failed to read JSON database %s", self.path)
            raise StorageFailureError(context={"path": str(self.path)}) from exc
        return Dataset.from_backup(backup)

    async def _save(self, dataset: Dataset) -> None:
        payload = json.dumps(dataset.to_backup().to_document(), indent=2)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as handle:
                await handle.write(payload)
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.exception("Failed to write JSON database %s", self.path)
            raise StorageFailureError(context={"path": str(self.path)}) from exc
