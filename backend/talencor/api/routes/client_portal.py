"""
Client portal: access-code login, own job postings, self-service code requests,
and access-code verification for pre-filling the public job-posting form.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from talencor.api.middleware.auth import CurrentClient, SessionData, save_session
from talencor.api.middleware.rate_limit import check_auth_rate_limit, check_submit_rate_limit
from talencor.api.routes.job_postings import JobPostingResponse, JobPostingUpdate
from talencor.database.connection import get_db
from talencor.models import Client, ClientCodeRequest, JobPosting
from talencor.services.clients import find_client_by_access_code, record_activity
from talencor.utils.logger import get_logger
from talencor.utils.security import mask_access_code

logger = get_logger(__name__)
router = APIRouter()

# Explicit nulls for these are ignored on partial update
NON_NULLABLE_FIELDS = frozenset((
    "job_title", "location", "employment_type", "number_of_positions",
    "contact_name", "email", "phone",
))


class AccessCodeRequest(BaseModel):
    access_code: str = Field(default="", max_length=50)


class CodeRequestCreate(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=255)
    contact_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=50)
    reason: str | None = Field(default=None, max_length=2000)


def _owned_by(client: Client):
    return or_(JobPosting.client_id == client.id, JobPosting.company_name == client.company_name)


async def _get_owned_posting(db: AsyncSession, posting_id: int, client: Client, action: str) -> JobPosting:
    result = await db.execute(select(JobPosting).where(JobPosting.id == posting_id))
    posting = result.scalar_one_or_none()
    if not posting:
        raise HTTPException(status_code=404, detail="Job posting not found")
    if posting.client_id != client.id and posting.company_name != client.company_name:
        logger.warning(
            "Client tried to modify another company's posting",
            extra={"client_id": client.id, "posting_id": posting_id},
        )
        raise HTTPException(status_code=403, detail=f"You can only {action} your own job postings")
    return posting


@router.post("/client/login")
async def client_login(
    request: Request,
    response: Response,
    body: AccessCodeRequest,
    session: SessionData,
    db: AsyncSession = Depends(get_db),
):
    """Access-code login. Every attempt is recorded in client_activities."""
    check_auth_rate_limit(request)

    code = body.access_code.strip()
    if not code:
        raise HTTPException(status_code=400, detail="Access code is required")

    client = await find_client_by_access_code(db, code)
    if not client:
        await record_activity(
            db,
            request,
            "failed_login",
            details={"access_code": mask_access_code(code)},
        )
        await db.commit()
        logger.info("Client login failed", extra={"code_prefix": mask_access_code(code)})
        raise HTTPException(status_code=401, detail="Invalid access code")

    now = datetime.now(timezone.utc)
    client.last_login_at = now
    client.login_count = (client.login_count or 0) + 1
    await record_activity(db, request, "login", client_id=client.id, details={"timestamp": now.isoformat()})
    await db.commit()

    session["client"] = {"id": client.id, "company_name": client.company_name}
    save_session(response, session)
    logger.info("Client logged in", extra={"client_id": client.id})
    return {"success": True, "client": {"id": client.id, "company_name": client.company_name}}


@router.post("/client/logout")
async def client_logout(response: Response, session: SessionData):
    """Drop only the client; an admin login in the same session survives."""
    session.pop("client", None)
    save_session(response, session)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/client/auth")
async def client_auth(session: SessionData):
    client = session.get("client")
    if client:
        return {
            "is_authenticated": True,
            "client": {"id": client["id"], "company_name": client["company_name"]},
        }
    return {"is_authenticated": False}


@router.get("/client/job-postings")
async def client_job_postings(client: CurrentClient, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(JobPosting)
        .where(_owned_by(client))
        .order_by(JobPosting.created_at.desc(), JobPosting.id.desc())
    )
    postings = result.scalars().all()
    return {
        "success": True,
        "job_postings": [JobPostingResponse.model_validate(p) for p in postings],
    }


@router.patch("/client/job-postings/{posting_id}")
async def update_client_job_posting(
    posting_id: int,
    body: JobPostingUpdate,
    client: CurrentClient,
    db: AsyncSession = Depends(get_db),
):
    posting = await _get_owned_posting(db, posting_id, client, "edit")
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field in NON_NULLABLE_FIELDS:
            continue
        setattr(posting, field, value)
    await db.commit()
    await db.refresh(posting)
    logger.info("Client updated job posting", extra={"client_id": client.id, "posting_id": posting.id})
    return {"success": True, "job_posting": JobPostingResponse.model_validate(posting)}


@router.delete("/client/job-postings/{posting_id}")
async def delete_client_job_posting(
    posting_id: int,
    client: CurrentClient,
    db: AsyncSession = Depends(get_db),
):
    posting = await _get_owned_posting(db, posting_id, client, "delete")
    await db.delete(posting)
    await db.commit()
    logger.info("Client deleted job posting", extra={"client_id": client.id, "posting_id": posting_id})
    return {"success": True, "message": "Job posting deleted successfully"}


@router.post("/client/code-request")
async def create_code_request(
    request: Request,
    body: CodeRequestCreate,
    db: AsyncSession = Depends(get_db),
):
    check_submit_rate_limit(request)
    code_request = ClientCodeRequest(
        company_name=body.company_name.strip(),
        contact_name=body.contact_name.strip(),
        email=body.email,
        phone=body.phone or None,
        reason=body.reason or None,
        status="pending",
    )
    db.add(code_request)
    await db.commit()
    await db.refresh(code_request)
    logger.info("Access code requested", extra={"request_id": code_request.id})
    return {
        "success": True,
        "message": "Your request has been submitted and will be reviewed shortly",
        "request_id": code_request.id,
    }


@router.get("/client/code-request/{request_id}")
async def get_code_request(request_id: int, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(ClientCodeRequest).where(ClientCodeRequest.id == request_id))
    code_request = result.scalar_one_or_none()
    if not code_request:
        raise HTTPException(status_code=404, detail="Request not found")
    return {
        "success": True,
        "request": {
            "id": code_request.id,
            "status": code_request.status,
            "created_at": code_request.created_at,
            "company_name": code_request.company_name,
        },
    }


@router.post("/verify-client")
async def verify_client(
    request: Request,
    body: AccessCodeRequest,
    db: AsyncSession = Depends(get_db),
):
    """Resolve an access code to the client's contact details for form pre-fill."""
    check_auth_rate_limit(request)
    code = body.access_code.strip()
    if not code:
        raise HTTPException(status_code=400, detail="Access code is required")
    client = await find_client_by_access_code(db, code)
    if not client:
        raise HTTPException(status_code=401, detail="Invalid access code")
    return {
        "success": True,
        "client": {
            "company_name": client.company_name,
            "contact_name": client.contact_name,
            "email": client.email,
            "phone": client.phone,
        },
    }
