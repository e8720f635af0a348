"""
Admin client management: clients, their activity, code requests, bulk code generation.
All routes require an admin session.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from talencor.api.middleware.auth import CurrentAdmin
from talencor.database.connection import get_db
from talencor.models import Client, ClientActivity, ClientCodeRequest
from talencor.services.clients import code_expiry, create_client
from talencor.services.email import send_access_code_email
from talencor.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


class ClientResponse(BaseModel):
    id: int
    company_name: str
    contact_name: str
    email: str
    phone: str | None
    access_code: str
    code_expires_at: datetime | None
    is_active: bool
    last_login_at: datetime | None
    login_count: int
    created_at: datetime | None

    class Config:
        from_attributes = True


class ClientActivityResponse(BaseModel):
    id: int
    client_id: int | None
    activity_type: str
    ip_address: str
    user_agent: str
    details: dict
    created_at: datetime | None

    class Config:
        from_attributes = True


class CodeRequestResponse(BaseModel):
    id: int
    company_name: str
    contact_name: str
    email: str
    phone: str | None
    reason: str | None
    status: str
    reviewed_by: int | None
    reviewed_at: datetime | None
    rejection_reason: str | None
    client_id: int | None
    created_at: datetime | None

    class Config:
        from_attributes = True


class ClientUpdate(BaseModel):
    company_name: str | None = Field(default=None, min_length=1, max_length=255)
    contact_name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    access_code: str | None = Field(default=None, min_length=4, max_length=50)
    code_expires_at: datetime | None = None
    is_active: bool | None = None


class RejectRequest(BaseModel):
    reason: str = Field(default="", max_length=2000)


class BulkClientEntry(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=255)
    contact_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=50)


class BulkGenerateRequest(BaseModel):
    clients: list[BulkClientEntry] = Field(default_factory=list)


async def _get_client(db: AsyncSession, client_id: int) -> Client:
    result = await db.execute(select(Client).where(Client.id == client_id))
    client = result.scalar_one_or_none()
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


async def _get_code_request(db: AsyncSession, request_id: int) -> ClientCodeRequest:
    result = await db.execute(select(ClientCodeRequest).where(ClientCodeRequest.id == request_id))
    code_request = result.scalar_one_or_none()
    if not code_request:
        raise HTTPException(status_code=404, detail="Request not found")
    return code_request


def _ensure_pending(code_request: ClientCodeRequest) -> None:
    if code_request.status != "pending":
        raise HTTPException(
            status_code=409,
            detail=f"Request has already been {code_request.status}",
        )


@router.get("/clients", response_model=list[ClientResponse])
async def list_clients(admin: CurrentAdmin, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Client).where(Client.is_active.is_(True)).order_by(Client.company_name)
    )
    return result.scalars().all()


@router.get("/clients/{client_id}")
async def get_client(client_id: int, admin: CurrentAdmin, db: AsyncSession = Depends(get_db)):
    client = await _get_client(db, client_id)
    result = await db.execute(
        select(ClientActivity)
        .where(ClientActivity.client_id == client_id)
        .order_by(ClientActivity.created_at.desc(), ClientActivity.id.desc())
    )
    return {
        "client": ClientResponse.model_validate(client),
        "activities": [ClientActivityResponse.model_validate(a) for a in result.scalars().all()],
    }


@router.put("/clients/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    body: ClientUpdate,
    admin: CurrentAdmin,
    db: AsyncSession = Depends(get_db),
):
    client = await _get_client(db, client_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field not in ("phone", "code_expires_at"):
            continue
        setattr(client, field, value)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="Company name or access code already in use")
    await db.refresh(client)
    logger.info("Client updated", extra={"client_id": client.id, "admin_id": admin["id"]})
    return client


@router.delete("/clients/{client_id}")
async def deactivate_client(client_id: int, admin: CurrentAdmin, db: AsyncSession = Depends(get_db)):
    """Soft delete: the client keeps its history but can no longer sign in."""
    client = await _get_client(db, client_id)
    client.is_active = False
    await db.commit()
    logger.info("Client deactivated", extra={"client_id": client.id, "admin_id": admin["id"]})
    return {"success": True}


@router.get("/code-requests", response_model=list[CodeRequestResponse])
async def list_code_requests(
    admin: CurrentAdmin,
    status: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    query = select(ClientCodeRequest).order_by(
        ClientCodeRequest.created_at.desc(), ClientCodeRequest.id.desc()
    )
    if status:
        query = query.where(ClientCodeRequest.status == status)
    result = await db.execute(query)
    return result.scalars().all()


@router.post("/code-requests/{request_id}/approve")
async def approve_code_request(
    request_id: int,
    admin: CurrentAdmin,
    db: AsyncSession = Depends(get_db),
):
    """Create the client with a fresh code, close the request and email the code."""
    code_request = await _get_code_request(db, request_id)
    _ensure_pending(code_request)

    existing = await db.execute(
        select(Client.id).where(Client.company_name == code_request.company_name)
    )
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(status_code=409, detail="A client with this company name already exists")

    client = await create_client(
        db,
        company_name=code_request.company_name,
        contact_name=code_request.contact_name,
        email=code_request.email,
        phone=code_request.phone,
    )
    code_request.status = "approved"
    code_request.reviewed_by = admin["id"]
    code_request.reviewed_at = datetime.now(timezone.utc)
    code_request.client_id = client.id
    await db.commit()
    await db.refresh(client)

    logger.info(
        "Code request approved",
        extra={"request_id": code_request.id, "client_id": client.id, "admin_id": admin["id"]},
    )
    await send_access_code_email(
        contact_name=client.contact_name,
        email=client.email,
        company_name=client.company_name,
        access_code=client.access_code,
        expires_at=client.code_expires_at,
    )
    return {
        "success": True,
        "client": ClientResponse.model_validate(client),
        "access_code": client.access_code,
    }


@router.post("/code-requests/{request_id}/reject", response_model=CodeRequestResponse)
async def reject_code_request(
    request_id: int,
    body: RejectRequest,
    admin: CurrentAdmin,
    db: AsyncSession = Depends(get_db),
):
    reason = body.reason.strip()
    if not reason:
        raise HTTPException(status_code=400, detail="Rejection reason is required")
    code_request = await _get_code_request(db, request_id)
    _ensure_pending(code_request)

    code_request.status = "rejected"
    code_request.rejection_reason = reason
    code_request.reviewed_by = admin["id"]
    code_request.reviewed_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(code_request)
    logger.info("Code request rejected", extra={"request_id": code_request.id, "admin_id": admin["id"]})
    return code_request


@router.post("/clients/bulk-generate")
async def bulk_generate(
    body: BulkGenerateRequest,
    admin: CurrentAdmin,
    db: AsyncSession = Depends(get_db),
):
    """One client per entry, each with its own code valid for the configured period."""
    if not body.clients:
        raise HTTPException(status_code=400, detail="Client list is required")

    created = []
    expires = code_expiry()
    try:
        for entry in body.clients:
            client = await create_client(
                db,
                company_name=entry.company_name.strip(),
                contact_name=entry.contact_name.strip(),
                email=entry.email,
                phone=entry.phone,
                code_expires_at=expires,
            )
            created.append(client)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="One or more companies already exist")

    logger.info("Bulk access codes generated", extra={"count": len(created), "admin_id": admin["id"]})
    return {
        "success": True,
        "clients": [ClientResponse.model_validate(c) for c in created],
    }
