"""Revenue, calendar and workflow views over a user's projects."""

from dataclasses import dataclass
from datetime import date

from photoflow.domain.models import Project, ProjectStatus
from photoflow.domain.reports import RevenueRow, RevenueSummary
from photoflow.services.projects import ProjectService


@dataclass
class ReportService:
    """Owner-scoped reports built on the project service."""

    projects: ProjectService

    async def revenue_summary(self, token: str | None) -> RevenueSummary:
        """Return income, expenses and profit totals with one row per project."""
        return summarize_revenue(await self.projects.list_projects(token))

    async def projects_on_day(self, token: str | None, day: date) -> list[Project]:
        """Return the projects scheduled on the given day."""
        projects = await self.projects.list_projects(token)
        return [project for project in projects if project.date == day]

    async def busy_days(self, token: str | None, year: int, month: int) -> list[date]:
        """Return the sorted days of a month that have at least one project."""
        projects = await self.projects.list_projects(token)
        return sorted(
            {
                project.date
                for project in projects
                if project.date.year == year and project.date.month == month
            }
        )

    async def workflow_board(
        self, token: str | None
    ) -> dict[ProjectStatus, list[Project]]:
        """Group projects into one column per status."""
        return group_by_status(await self.projects.list_projects(token))


def summarize_revenue(projects: list[Project]) -> RevenueSummary:
    """Aggregate project finances."""
    rows = [
        RevenueRow(
            project_id=project.id,
            client_name=project.client_name,
            date=project.date,
            income=project.income,
            expenses=project.expenses,
            profit=project.profit,
            payment_status=project.payment_status,
        )
        for project in projects
    ]
    total_income = sum(row.income for row in rows)
    total_expenses = sum(row.expenses for row in rows)
    return RevenueSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=total_income - total_expenses,
        rows=rows,
    )


def group_by_status(projects: list[Project]) -> dict[ProjectStatus, list[Project]]:
    """Return every status mapped to its projects, keeping list order."""
    board: dict[ProjectStatus, list[Project]] = {status: [] for status in ProjectStatus}
    for project in projects:
        board[project.status].append(project)
    return board
