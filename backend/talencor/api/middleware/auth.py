"""
Cookie-backed session dependencies. The session is a signed JWT kept in an HttpOnly
cookie and holds at most: user {id, username, is_admin}, client {id, company_name}
and visitor_id. Use CurrentAdmin / CurrentClient for protected routes.
"""
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talencor.config import get_settings
from talencor.database.connection import get_db
from talencor.models import Client
from talencor.utils.logger import get_logger
from talencor.utils.security import (
    create_session_token,
    decode_session_token,
    new_visitor_id,
)

logger = get_logger(__name__)


def get_session(request: Request) -> dict[str, Any]:
    """Read the session cookie. Missing, tampered or expired cookies yield an empty session."""
    settings = get_settings()
    return decode_session_token(request.cookies.get(settings.session_cookie_name))


def save_session(response: Response, session: dict[str, Any]) -> None:
    """Re-sign the session and attach it to the response."""
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=create_session_token(session),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )


def clear_session(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(key=settings.session_cookie_name, path="/")


def ensure_visitor_id(session: dict[str, Any], response: Response) -> str:
    """Return the session's visitor id, minting and persisting one on first use."""
    visitor_id = session.get("visitor_id")
    if not visitor_id:
        visitor_id = new_visitor_id()
        session["visitor_id"] = visitor_id
        save_session(response, session)
    return visitor_id


SessionData = Annotated[dict[str, Any], Depends(get_session)]


async def require_admin(session: SessionData) -> dict[str, Any]:
    """
    Gate for back-office routes. Returns the session user.
    401 when nobody is logged in, 403 when the user is not an administrator.
    """
    user = session.get("user")
    if not user or not user.get("id"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please log in to access this area",
        )
    if not user.get("is_admin"):
        logger.warning("Non-admin blocked from admin route", extra={"user_id": user.get("id")})
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to access this area",
        )
    return user


async def require_client(
    session: SessionData,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Client:
    """
    Gate for client-portal routes. The client must still exist and be active;
    a deactivated client loses portal access immediately.
    """
    client_data = session.get("client")
    if not client_data or not client_data.get("id"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Client authentication required",
        )
    result = await db.execute(select(Client).where(Client.id == client_data["id"]))
    client = result.scalar_one_or_none()
    if not client or not client.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Client authentication required",
        )
    return client


# Type aliases for dependency injection
CurrentAdmin = Annotated[dict[str, Any], Depends(require_admin)]
CurrentClient = Annotated[Client, Depends(require_client)]
