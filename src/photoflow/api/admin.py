"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.responses import Response

from photoflow.api.schemas import DatabaseImportRequest
from photoflow.domain.models import DatabaseConfig

if TYPE_CHECKING:
    from photoflow.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])

BACKUP_FILENAME = "photoflow-backup.json"


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/users", dependencies=[Depends(require_admin)])
async def list_users(request: Request) -> dict[str, object]:
    """Return every user without password hashes."""
    container: AppContainer = request.app.state.container
    users = await container.storage.list_users()
    return {"users": [user.to_document() for user in users]}


@router.delete(
    "/users/{email}",
    dependencies=[Depends(require_admin)],
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_user(email: str, request: Request) -> None:
    """Delete a user together with their projects and galleries."""
    container: AppContainer = request.app.state.container
    if not await container.storage.delete_user(email):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found."
        )


@router.get("/export", dependencies=[Depends(require_admin)])
async def export_backup(request: Request) -> Response:
    """Download the whole dataset as a JSON backup."""
    container: AppContainer = request.app.state.container
    document = await container.backup_service.export_all_as_json()
    return Response(
        content=document,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{BACKUP_FILENAME}"'},
    )


@router.post("/db/test", dependencies=[Depends(require_admin)])
async def test_database(config: DatabaseConfig, request: Request) -> dict[str, object]:
    """Check that a MySQL server accepts the given connection settings."""
    container: AppContainer = request.app.state.container
    result = await container.backup_service.test_connection(config)
    return {"success": result.success, "error": result.error}


@router.post("/db/schema", dependencies=[Depends(require_admin)])
async def create_schema(config: DatabaseConfig, request: Request) -> dict[str, object]:
    """Create the application tables on a MySQL server."""
    container: AppContainer = request.app.state.container
    result = await container.backup_service.create_schema(config)
    return {"success": result.success, "message": result.message, "error": result.error}


@router.post("/db/import", dependencies=[Depends(require_admin)])
async def import_backup(
    body: DatabaseImportRequest, request: Request
) -> dict[str, object]:
    """Load a JSON backup into a MySQL server."""
    container: AppContainer = request.app.state.container
    result = await container.backup_service.import_json_into_sql(
        body.config, body.json_data
    )
    return {"success": result.success, "message": result.message, "error": result.error}
