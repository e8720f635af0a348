"""
Client lookups shared by the portal, the job-posting intake and the admin screens.
"""
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Request
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from talencor.api.middleware.rate_limit import get_client_ip
from talencor.config import get_settings
from talencor.models import Client, ClientActivity
from talencor.utils.logger import get_logger
from talencor.utils.security import generate_access_code

logger = get_logger(__name__)

MAX_CODE_ATTEMPTS = 20


async def find_client_by_access_code(db: AsyncSession, access_code: str) -> Client | None:
    """Active client whose code matches exactly and has not expired."""
    code = (access_code or "").strip()
    if not code:
        return None
    now = datetime.now(timezone.utc)
    result = await db.execute(
        select(Client).where(
            Client.access_code == code,
            Client.is_active.is_(True),
            or_(Client.code_expires_at.is_(None), Client.code_expires_at > now),
        )
    )
    return result.scalar_one_or_none()


async def generate_unique_access_code(db: AsyncSession) -> str:
    for _ in range(MAX_CODE_ATTEMPTS):
        code = generate_access_code()
        result = await db.execute(select(Client.id).where(Client.access_code == code))
        if result.scalar_one_or_none() is None:
            return code
    raise RuntimeError("Could not allocate a unique access code")


def code_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=get_settings().access_code_valid_days)


async def create_client(
    db: AsyncSession,
    company_name: str,
    contact_name: str,
    email: str,
    phone: str | None = None,
    access_code: str | None = None,
    code_expires_at: datetime | None = None,
) -> Client:
    client = Client(
        company_name=company_name,
        contact_name=contact_name,
        email=email,
        phone=phone,
        access_code=access_code or await generate_unique_access_code(db),
        code_expires_at=code_expires_at if code_expires_at is not None else code_expiry(),
        is_active=True,
        login_count=0,
    )
    db.add(client)
    await db.flush()
    logger.info("Client created", extra={"client_id": client.id})
    return client


async def record_activity(
    db: AsyncSession,
    request: Request,
    activity_type: str,
    client_id: int | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    db.add(
        ClientActivity(
            client_id=client_id,
            activity_type=activity_type,
            ip_address=get_client_ip(request),
            user_agent=(request.headers.get("user-agent") or "unknown")[:500],
            details=details or {},
        )
    )
    await db.flush()
