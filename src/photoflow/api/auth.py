"""Account and session endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Cookie, Request, Response, status

from photoflow.api.schemas import Credentials, PasswordChange
from photoflow.domain.models import ProfileUpdate
from photoflow.errors import AuthenticationRequiredError
from photoflow.services.sessions import SESSION_COOKIE_NAME

if TYPE_CHECKING:
    from photoflow.config import Settings
    from photoflow.containers import AppContainer

router = APIRouter(prefix="/auth", tags=["auth"])


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """Attach the session token as an HTTP-only cookie."""
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=settings.session_ttl_hours * 3600,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


@router.post("/register")
async def register(
    credentials: Credentials, request: Request, response: Response
) -> dict[str, object]:
    """Create an account; the user logs in separately."""
    container: AppContainer = request.app.state.container
    result = await container.auth_service.register(
        credentials.email, credentials.password
    )
    response.status_code = (
        status.HTTP_201_CREATED if result.success else status.HTTP_400_BAD_REQUEST
    )
    return {"success": result.success, "message": result.message}


@router.post("/login")
async def login(
    credentials: Credentials, request: Request, response: Response
) -> dict[str, object]:
    """Verify credentials and start a cookie session."""
    container: AppContainer = request.app.state.container
    result = await container.auth_service.login(
        credentials.email, credentials.password
    )
    if not result.success or result.token is None:
        response.status_code = status.HTTP_401_UNAUTHORIZED
        return {"success": False, "message": result.message}
    set_session_cookie(response, result.token, container.settings)
    return {"success": True}


@router.post("/logout")
async def logout(response: Response) -> dict[str, object]:
    """End the session by removing the cookie."""
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return {"success": True}


@router.get("/me")
async def me(
    request: Request,
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> dict[str, object]:
    """Return the signed-in user's public profile."""
    container: AppContainer = request.app.state.container
    user = await container.auth_service.current_user(session)
    if user is None:
        raise AuthenticationRequiredError()
    return {"user": user.to_document()}


@router.post("/password")
async def change_password(
    body: PasswordChange,
    request: Request,
    response: Response,
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> dict[str, object]:
    """Replace the signed-in user's password."""
    container: AppContainer = request.app.state.container
    result = await container.auth_service.change_password(
        session, body.current_password, body.new_password
    )
    if not result.success:
        response.status_code = status.HTTP_400_BAD_REQUEST
    return {"success": result.success, "message": result.message}


@router.put("/profile")
async def update_profile(
    body: ProfileUpdate,
    request: Request,
    response: Response,
    session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
) -> dict[str, object]:
    """Save profile fields and refresh the session cookie."""
    container: AppContainer = request.app.state.container
    result = await container.auth_service.update_profile(session, body)
    if not result.success or result.token is None or result.user is None:
        response.status_code = status.HTTP_400_BAD_REQUEST
        return {"success": False, "message": result.message}
    set_session_cookie(response, result.token, container.settings)
    return {
        "success": True,
        "message": result.message,
        "user": result.user.to_document(),
    }
