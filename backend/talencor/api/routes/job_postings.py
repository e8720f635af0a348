"""
Job postings: public intake from employers, admin review, public listing of posted jobs.
"""
from datetime import date, datetime
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talencor.api.middleware.auth import CurrentAdmin
from talencor.api.middleware.rate_limit import check_submit_rate_limit
from talencor.database.connection import get_db
from talencor.models import JobPosting
from talencor.models.job_posting import JOB_POSTING_STATUSES, EmploymentType
from talencor.services.clients import find_client_by_access_code
from talencor.services.email import (
    send_internal_job_posting_notification,
    send_job_posting_confirmation,
)
from talencor.utils.logger import get_logger
from talencor.utils.validators import sanitize_string, validate_phone

logger = get_logger(__name__)
router = APIRouter()


class JobPostingFields(BaseModel):
    """Fields an employer may set. Shared by intake and the client-portal edit."""

    job_title: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    employment_type: EmploymentType = "permanent"
    department: str | None = Field(default=None, max_length=255)
    number_of_positions: int = Field(default=1, ge=1, le=500)
    urgency: str | None = Field(default=None, max_length=50)
    anticipated_start_date: date | None = None
    salary_range: str | None = Field(default=None, max_length=255)
    job_description: str | None = Field(default=None, max_length=10000)
    special_requirements: str | None = Field(default=None, max_length=5000)

    @field_validator("job_title", "location", "department", "salary_range", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return sanitize_string(v) if isinstance(v, str) else v


class JobPostingCreate(JobPostingFields):
    contact_name: str = Field(..., min_length=1, max_length=255)
    company_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=10, max_length=50)
    access_code: str | None = Field(default=None, max_length=50)

    @field_validator("contact_name", "company_name", mode="before")
    @classmethod
    def strip_names(cls, v: Any) -> Any:
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str) -> str:
        if not validate_phone(v):
            raise ValueError("Please enter a valid phone number")
        return v.strip()


class JobPostingUpdate(BaseModel):
    """Partial edit from the client portal. Status and ownership are not editable here."""

    job_title: str | None = Field(default=None, min_length=1, max_length=255)
    location: str | None = Field(default=None, min_length=1, max_length=255)
    employment_type: EmploymentType | None = None
    department: str | None = Field(default=None, max_length=255)
    number_of_positions: int | None = Field(default=None, ge=1, le=500)
    urgency: str | None = Field(default=None, max_length=50)
    anticipated_start_date: date | None = None
    salary_range: str | None = Field(default=None, max_length=255)
    job_description: str | None = Field(default=None, max_length=10000)
    special_requirements: str | None = Field(default=None, max_length=5000)
    contact_name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=10, max_length=50)


class JobPostingResponse(BaseModel):
    id: int
    contact_name: str
    company_name: str
    email: str
    phone: str
    job_title: str
    location: str
    employment_type: str
    department: str | None
    number_of_positions: int
    urgency: str | None
    anticipated_start_date: date | None
    salary_range: str | None
    job_description: str | None
    special_requirements: str | None
    is_existing_client: bool
    client_id: int | None
    status: str
    created_at: datetime | None
    updated_at: datetime | None

    class Config:
        from_attributes = True


class PublicJobResponse(BaseModel):
    id: int
    job_title: str
    location: str
    employment_type: str
    department: str | None
    number_of_positions: int
    salary_range: str | None
    job_description: str | None
    anticipated_start_date: date | None
    created_at: datetime | None

    class Config:
        from_attributes = True


class StatusUpdateRequest(BaseModel):
    status: str = ""


@router.post("/job-postings")
async def create_job_posting(
    request: Request,
    payload: dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """
    Employer job request. Honeypot first, then schema validation.
    A valid access code links the posting to the client and fast-tracks it to "contacted".
    """
    check_submit_rate_limit(request)
    if payload.get("website"):
        logger.warning("Job posting honeypot triggered")
        raise HTTPException(status_code=400, detail="Invalid submission detected")

    body = JobPostingCreate.model_validate(payload)
    data = body.model_dump(exclude={"access_code"})
    posting = JobPosting(**data, is_existing_client=False, status="new")

    if body.access_code:
        client = await find_client_by_access_code(db, body.access_code)
        if client:
            posting.is_existing_client = True
            posting.client_id = client.id
            posting.status = "contacted"

    db.add(posting)
    await db.commit()
    await db.refresh(posting)

    logger.info(
        "Job posting created",
        extra={
            "posting_id": posting.id,
            "is_existing_client": posting.is_existing_client,
            "status": posting.status,
        },
    )

    await send_job_posting_confirmation(
        contact_name=posting.contact_name,
        email=posting.email,
        company_name=posting.company_name,
        job_title=posting.job_title,
        is_existing_client=posting.is_existing_client,
    )
    await send_internal_job_posting_notification(
        posting_id=posting.id,
        contact_name=posting.contact_name,
        email=posting.email,
        phone=posting.phone,
        company_name=posting.company_name,
        job_title=posting.job_title,
        location=posting.location,
        employment_type=posting.employment_type,
        is_existing_client=posting.is_existing_client,
        anticipated_start_date=posting.anticipated_start_date,
        salary_range=posting.salary_range,
        job_description=posting.job_description,
        special_requirements=posting.special_requirements,
    )

    return {"success": True, "id": posting.id}


@router.get("/job-postings", response_model=list[JobPostingResponse])
async def list_job_postings(
    admin: CurrentAdmin,
    status: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    query = select(JobPosting).order_by(JobPosting.created_at.desc(), JobPosting.id.desc())
    if status:
        query = query.where(JobPosting.status == status)
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/job-postings/{posting_id}", response_model=JobPostingResponse)
async def get_job_posting(
    posting_id: int,
    admin: CurrentAdmin,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(JobPosting).where(JobPosting.id == posting_id))
    posting = result.scalar_one_or_none()
    if not posting:
        raise HTTPException(status_code=404, detail="Job posting not found")
    return posting


@router.patch("/job-postings/{posting_id}/status")
async def update_job_posting_status(
    posting_id: int,
    body: StatusUpdateRequest,
    admin: CurrentAdmin,
    db: AsyncSession = Depends(get_db),
):
    if body.status not in JOB_POSTING_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status")

    result = await db.execute(select(JobPosting).where(JobPosting.id == posting_id))
    posting = result.scalar_one_or_none()
    if not posting:
        raise HTTPException(status_code=404, detail="Job posting not found")

    previous = posting.status
    posting.status = body.status
    await db.commit()
    await db.refresh(posting)
    logger.info(
        "Job posting status changed",
        extra={"posting_id": posting.id, "from": previous, "to": posting.status, "admin_id": admin["id"]},
    )
    return {"success": True, "posting": JobPostingResponse.model_validate(posting)}


@router.get("/jobs", response_model=list[PublicJobResponse])
async def list_public_jobs(db: AsyncSession = Depends(get_db)):
    """Openings currently advertised on the site."""
    result = await db.execute(
        select(JobPosting)
        .where(JobPosting.status == "posted")
        .order_by(JobPosting.created_at.desc(), JobPosting.id.desc())
    )
    return result.scalars().all()
