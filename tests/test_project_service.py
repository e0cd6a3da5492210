"""Tests for the project and portfolio service."""

import asyncio
from datetime import date

import pytest

from photoflow.domain.models import ProfileUpdate, Project, ProjectStatus
from photoflow.errors import AuthenticationRequiredError
from photoflow.services.auth import AuthService
from photoflow.services.projects import (
    ProjectFilter,
    ProjectService,
    filter_projects,
)
from tests.conftest import make_draft


def test_operations_require_a_session(project_service: ProjectService) -> None:
    with pytest.raises(AuthenticationRequiredError):
        asyncio.run(project_service.list_projects(None))
    with pytest.raises(AuthenticationRequiredError):
        asyncio.run(project_service.create_project("bogus", make_draft()))
    with pytest.raises(AuthenticationRequiredError):
        asyncio.run(project_service.delete_project(None, "p-1"))


def test_create_and_list_projects(project_service: ProjectService, signed_in) -> None:
    token = signed_in("jane@x.com")

    created = asyncio.run(
        project_service.create_project(
            token, make_draft("Smith Wedding", income=2000, expenses=300)
        )
    )
    projects = asyncio.run(project_service.list_projects(token))

    assert [project.id for project in projects] == [created.id]
    assert projects[0].client_name == "Smith Wedding"
    assert projects[0].profit == 1700
    assert projects[0].status == ProjectStatus.PENDING


def test_create_project_defaults_photographer_to_owner_name(
    project_service: ProjectService, auth_service: AuthService, signed_in
) -> None:
    token = signed_in("jane@x.com")
    profile = asyncio.run(
        auth_service.update_profile(token, ProfileUpdate(name="Jane"))
    )

    created = asyncio.run(project_service.create_project(profile.token, make_draft()))
    explicit = asyncio.run(
        project_service.create_project(profile.token, make_draft(photographer="Bob"))
    )

    assert created.photographer == "Jane"
    assert explicit.photographer == "Bob"


def test_users_cannot_touch_each_others_projects(
    project_service: ProjectService, signed_in
) -> None:
    jane = signed_in("jane@x.com")
    john = signed_in("john@x.com")
    project = asyncio.run(project_service.create_project(jane, make_draft()))

    assert asyncio.run(project_service.list_projects(john)) == []
    assert (
        asyncio.run(
            project_service.set_project_status(
                john, project.id, ProjectStatus.COMPLETED
            )
        )
        is None
    )
    assert asyncio.run(project_service.delete_project(john, project.id)) is False
    assert (
        asyncio.run(project_service.append_gallery_image(john, project.id, "img"))
        is None
    )
    assert asyncio.run(project_service.list_projects(jane))[0].status == (
        ProjectStatus.PENDING
    )


def test_gallery_append_then_list(project_service: ProjectService, signed_in) -> None:
    token = signed_in("jane@x.com")
    project = asyncio.run(project_service.create_project(token, make_draft()))

    asyncio.run(project_service.append_gallery_image(token, project.id, "img1"))
    asyncio.run(project_service.append_gallery_image(token, project.id, "img2"))

    listed = asyncio.run(project_service.list_projects(token))
    assert listed[0].gallery_images == ["img1", "img2"]


def test_set_project_status(project_service: ProjectService, signed_in) -> None:
    token = signed_in("jane@x.com")
    project = asyncio.run(project_service.create_project(token, make_draft()))

    updated = asyncio.run(
        project_service.set_project_status(token, project.id, ProjectStatus.IN_PROGRESS)
    )

    assert updated is not None
    assert updated.status == ProjectStatus.IN_PROGRESS
    assert updated.client_name == project.client_name


def test_bulk_import_replaces_projects(
    project_service: ProjectService, signed_in
) -> None:
    token = signed_in("jane@x.com")
    asyncio.run(project_service.create_project(token, make_draft("Old")))
    backup = [Project(**make_draft("Restored").model_dump(), id="restored-1")]

    asyncio.run(project_service.bulk_import(token, backup))

    projects = asyncio.run(project_service.list_projects(token))
    assert [project.id for project in projects] == ["restored-1"]


def test_public_portfolio_shows_only_completed_projects(
    project_service: ProjectService, auth_service: AuthService, signed_in
) -> None:
    token = signed_in("jane@x.com")
    asyncio.run(
        auth_service.update_profile(
            token, ProfileUpdate(name="Jane", portfolio_slug="jane-portfolio")
        )
    )
    asyncio.run(project_service.create_project(token, make_draft("Pending shoot")))
    done = asyncio.run(
        project_service.create_project(
            token, make_draft("Delivered", status=ProjectStatus.COMPLETED)
        )
    )

    portfolio = asyncio.run(project_service.get_public_portfolio("jane-portfolio"))

    assert portfolio is not None
    assert portfolio.user.name == "Jane"
    assert "password" not in portfolio.user.to_document()
    assert [project.id for project in portfolio.projects] == [done.id]


def test_unknown_portfolio_slug(project_service: ProjectService) -> None:
    assert asyncio.run(project_service.get_public_portfolio("nobody")) is None
    assert asyncio.run(project_service.get_public_portfolio("")) is None


def _project(project_id: str, **fields: object) -> Project:
    return Project(**make_draft(**fields).model_dump(), id=project_id)


def test_filter_by_search_status_and_day() -> None:
    projects = [
        _project(
            "1",
            client_name="Smith Wedding",
            location="Porto",
            status=ProjectStatus.COMPLETED,
        ),
        _project("2", client_name="Acme Launch", photographer="Jane Smith"),
        _project("3", client_name="Birthday", location="Smithfield"),
        _project("4", client_name="Corporate", date=date(2024, 6, 2)),
    ]

    by_search = filter_projects(projects, ProjectFilter(search="SMITH"))
    by_status = filter_projects(projects, ProjectFilter(status="Completed"))
    by_day = filter_projects(projects, ProjectFilter(day=date(2024, 6, 2)))
    combined = filter_projects(
        projects, ProjectFilter(search="smith", status="Pending")
    )

    assert [project.id for project in by_search] == ["1", "2", "3"]
    assert [project.id for project in by_status] == ["1"]
    assert [project.id for project in by_day] == ["4"]
    assert [project.id for project in combined] == ["2", "3"]
    assert filter_projects(projects, ProjectFilter()) == projects
