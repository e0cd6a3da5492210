"""Tests for container wiring."""

import asyncio
import logging

from photoflow.adapters.json_storage import JsonFileStorage
from photoflow.adapters.memory_storage import InMemoryStorage
from photoflow.adapters.sql_storage import SqlStorage
from photoflow.config import Settings
from photoflow.containers import build_container, build_storage


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)
    assert container.auth_service is not None
    assert container.report_service.projects is container.project_service
    assert container.extraction_service is None
    asyncio.run(container.close_resources())


def test_storage_defaults_to_json_file(settings: Settings, tmp_path) -> None:
    path = tmp_path / "db.json"
    storage = build_storage(settings.model_copy(update={"json_db_path": str(path)}))

    assert isinstance(storage, JsonFileStorage)
    assert storage.path == path


def test_storage_without_file_is_in_memory(settings: Settings) -> None:
    assert isinstance(build_storage(settings), InMemoryStorage)


def test_db_host_selects_sql_storage(settings: Settings) -> None:
    storage = build_storage(
        settings.model_copy(
            update={"db_host": "db.local", "db_user": "root", "db_database": "app"}
        )
    )

    assert isinstance(storage, SqlStorage)
    assert storage.engine.url.host == "db.local"
    assert storage.engine.url.database == "app"
    assert storage.engine.pool.size() == 10
    asyncio.run(storage.close())


def test_openai_key_enables_extraction(settings: Settings) -> None:
    container = build_container(
        settings.model_copy(update={"openai_api_key": "openai-key"})
    )

    assert container.extraction_service is not None
    asyncio.run(container.close_resources())


def test_default_session_secret_logs_warning(caplog, monkeypatch) -> None:
    monkeypatch.setattr(logging.getLogger("photoflow"), "propagate", True)
    settings = Settings(admin_token="admin-token", json_db_path="")

    with caplog.at_level("WARNING", logger="photoflow"):
        build_container(settings)

    assert "SESSION_SECRET" in caplog.text
