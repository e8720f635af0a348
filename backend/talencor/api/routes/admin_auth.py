"""
Admin authentication: login, logout, session check. Login is rate limited.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talencor.api.middleware.auth import SessionData, clear_session, save_session
from talencor.api.middleware.rate_limit import check_auth_rate_limit
from talencor.database.connection import get_db
from talencor.models import User
from talencor.utils.logger import get_logger
from talencor.utils.security import verify_password

logger = get_logger(__name__)
router = APIRouter()


class AdminLoginRequest(BaseModel):
    username: str = Field(default="", max_length=100)
    password: str = Field(default="", max_length=256)


@router.post("/login")
async def login(
    request: Request,
    response: Response,
    body: AdminLoginRequest,
    session: SessionData,
    db: AsyncSession = Depends(get_db),
):
    """Check credentials and store the admin in the session cookie."""
    check_auth_rate_limit(request)

    username = body.username.strip()
    if not username or not body.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if not user or not verify_password(body.password, user.password_hash):
        logger.info("Admin login failed", extra={"username": username[:50]})
        raise HTTPException(status_code=401, detail="Invalid username or password")
    if not user.is_admin:
        logger.warning("Non-admin attempted admin login", extra={"user_id": user.id})
        raise HTTPException(status_code=401, detail="You don't have admin access")

    session["user"] = {"id": user.id, "username": user.username, "is_admin": True}
    save_session(response, session)
    logger.info("Admin logged in", extra={"user_id": user.id})
    return {
        "success": True,
        "message": "Login successful",
        "user": {"id": user.id, "username": user.username},
    }


@router.post("/logout")
async def logout(response: Response, session: SessionData):
    """Destroy the whole session, including any client login."""
    user = session.get("user") or {}
    clear_session(response)
    if user:
        logger.info("Admin logged out", extra={"user_id": user.get("id")})
    return {"success": True, "message": "Logout successful"}


@router.get("/auth")
async def check_auth(session: SessionData):
    user = session.get("user")
    if user and user.get("is_admin"):
        return {
            "is_authenticated": True,
            "user": {"id": user["id"], "username": user["username"]},
        }
    return {"is_authenticated": False}
