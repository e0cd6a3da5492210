"""Project, report and public portfolio endpoints."""

from __future__ import annotations

import logging
from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import APIRouter, Cookie, HTTPException, Query, Request, Response, status

from photoflow.api.schemas import ExtractionRequest, GalleryImage, StatusChange
from photoflow.domain.models import Project, ProjectDraft
from photoflow.services.projects import ALL_STATUSES, ProjectFilter, filter_projects
from photoflow.services.sessions import SESSION_COOKIE_NAME

if TYPE_CHECKING:
    from photoflow.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])
reports_router = APIRouter(prefix="/reports", tags=["reports"])
portfolio_router = APIRouter(tags=["portfolio"])

PROJECT_NOT_FOUND = "Project not found."


@router.get("")
async def list_projects(
    request: Request,
    search: str = "",
    status_filter: str = Query(default=ALL_STATUSES, alias="status"),
    day: date | None = None,
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> dict[str, object]:
    """Return the caller's projects, optionally filtered for the dashboard."""
    container: AppContainer = request.app.state.container
    projects = await container.project_service.list_projects(session)
    criteria = ProjectFilter(search=search, status=status_filter, day=day)
    return {"projects": _documents(filter_projects(projects, criteria))}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    draft: ProjectDraft,
    request: Request,
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> dict[str, object]:
    """Create a project owned by the caller."""
    container: AppContainer = request.app.state.container
    project = await container.project_service.create_project(session, draft)
    return {"project": project.to_document()}


@router.post("/import")
async def import_projects(
    projects: list[Project],
    request: Request,
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> dict[str, object]:
    """Replace the caller's projects with the uploaded list."""
    container: AppContainer = request.app.state.container
    await container.project_service.bulk_import(session, projects)
    return {"success": True, "imported": len(projects)}


@router.post("/extract")
async def extract_project_details(
    body: ExtractionRequest,
    request: Request,
    response: Response,
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> dict[str, object]:
    """Suggest project fields from a free-form description."""
    container: AppContainer = request.app.state.container
    container.project_service.require_session(session)
    if container.extraction_service is None:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"success": False, "error": "Project details extraction is disabled."}
    try:
        details = await container.extraction_service.extract(body.description)
    except Exception:
        logger.exception("Project details extraction failed")
        response.status_code = status.HTTP_502_BAD_GATEWAY
        return {"success": False, "error": "Failed to extract project details."}
    suggested_date = details.parsed_date()
    data = details.to_document()
    data["date"] = suggested_date.isoformat() if suggested_date else None
    return {"success": True, "data": data}


@router.put("/{project_id}")
async def update_project(
    project_id: str,
    draft: ProjectDraft,
    request: Request,
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> dict[str, object]:
    """Replace the fields of one of the caller's projects."""
    container: AppContainer = request.app.state.container
    project = Project(**draft.model_dump(), id=project_id)
    updated = await container.project_service.update_project(session, project)
    return {"project": _found(updated).to_document()}


@router.patch("/{project_id}/status")
async def set_project_status(
    project_id: str,
    body: StatusChange,
    request: Request,
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> dict[str, object]:
    """Move a project to another workflow column."""
    container: AppContainer = request.app.state.container
    updated = await container.project_service.set_project_status(
        session, project_id, body.status
    )
    return {"project": _found(updated).to_document()}


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: str,
    request: Request,
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> None:
    """Delete one of the caller's projects."""
    container: AppContainer = request.app.state.container
    if not await container.project_service.delete_project(session, project_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=PROJECT_NOT_FOUND
        )


@router.post("/{project_id}/gallery")
async def append_gallery_image(
    project_id: str,
    body: GalleryImage,
    request: Request,
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> dict[str, object]:
    """Append an image to a project's gallery."""
    container: AppContainer = request.app.state.container
    updated = await container.project_service.append_gallery_image(
        session, project_id, body.image_url
    )
    return {"project": _found(updated).to_document()}


@reports_router.get("/revenue")
async def revenue(
    request: Request,
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> dict[str, object]:
    """Return income, expenses and profit for the caller's projects."""
    container: AppContainer = request.app.state.container
    summary = await container.report_service.revenue_summary(session)
    return {
        "totalIncome": summary.total_income,
        "totalExpenses": summary.total_expenses,
        "netProfit": summary.net_profit,
        "projectCount": summary.project_count,
        "projects": [
            {
                "id": row.project_id,
                "clientName": row.client_name,
                "date": row.date.isoformat(),
                "income": row.income,
                "expenses": row.expenses,
                "profit": row.profit,
                "paymentStatus": row.payment_status.value,
            }
            for row in summary.rows
        ],
    }


@reports_router.get("/calendar")
async def calendar_day(
    day: date,
    request: Request,
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> dict[str, object]:
    """Return the caller's projects on one day."""
    container: AppContainer = request.app.state.container
    projects = await container.report_service.projects_on_day(session, day)
    return {"day": day.isoformat(), "projects": _documents(projects)}


@reports_router.get("/calendar/busy")
async def calendar_busy_days(
    request: Request,
    year: int = Query(ge=1),
    month: int = Query(ge=1, le=12),
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> dict[str, object]:
    """Return the days of a month that have projects."""
    container: AppContainer = request.app.state.container
    days = await container.report_service.busy_days(session, year, month)
    return {"days": [day.isoformat() for day in days]}


@reports_router.get("/workflow")
async def workflow(
    request: Request,
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> dict[str, object]:
    """Return the caller's projects grouped by status."""
    container: AppContainer = request.app.state.container
    board = await container.report_service.workflow_board(session)
    return {column.value: _documents(projects) for column, projects in board.items()}


@portfolio_router.get("/p/{slug}")
async def public_portfolio(slug: str, request: Request) -> dict[str, object]:
    """Return a photographer's public profile and completed projects."""
    container: AppContainer = request.app.state.container
    portfolio = await container.project_service.get_public_portfolio(slug)
    if portfolio is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Portfolio not found."
        )
    return {
        "user": portfolio.user.to_document(),
        "projects": _documents(portfolio.projects),
    }


def _found(project: Project | None) -> Project:
    if project is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=PROJECT_NOT_FOUND
        )
    return project


def _documents(projects: list[Project]) -> list[dict[str, object]]:
    return [project.to_document() for project in projects]
