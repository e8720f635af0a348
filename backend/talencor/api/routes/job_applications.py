"""
Worker job applications: public submission plus admin review and office-use fields.
Mount at /api/job-applications.
"""
from datetime import date, datetime
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talencor.api.middleware.auth import CurrentAdmin
from talencor.api.middleware.rate_limit import check_submit_rate_limit
from talencor.database.connection import get_db
from talencor.models import JobApplication
from talencor.utils.logger import get_logger
from talencor.utils.validators import sanitize_string, validate_mobile_number, validate_sin

logger = get_logger(__name__)
router = APIRouter()

LegalStatus = Literal["Student", "Work Permit", "PR", "Citizen", "Other"]
TransportationMode = Literal["Car", "Transit", "Ride", "Other"]
LiftingCapability = Literal["5-10 kgs", "15-20 kgs", "25-30 kgs", "35-40 kgs"]
JobType = Literal["Short-term job", "Long-term job", "On-call shifts only"]


class JobApplicationCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    date_of_birth: date
    social_insurance_number: str

    street_address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    province: str = Field(..., min_length=1, max_length=50)
    postal_code: str = Field(..., min_length=1, max_length=20)
    major_intersection: str = Field(..., min_length=1, max_length=255)

    mobile_number: str
    whatsapp_number: str | None = Field(default=None, max_length=20)
    email: EmailStr

    emergency_contact_name: str = Field(..., min_length=1, max_length=255)
    emergency_contact_number: str = Field(..., min_length=1, max_length=50)
    emergency_contact_relationship: str = Field(..., min_length=1, max_length=100)

    legal_status: LegalStatus

    monday_schedule: str | None = Field(default=None, max_length=255)
    tuesday_schedule: str | None = Field(default=None, max_length=255)
    wednesday_schedule: str | None = Field(default=None, max_length=255)
    thursday_schedule: str | None = Field(default=None, max_length=255)
    friday_schedule: str | None = Field(default=None, max_length=255)
    saturday_schedule: str | None = Field(default=None, max_length=255)
    sunday_schedule: str | None = Field(default=None, max_length=255)

    transportation_mode: TransportationMode
    has_safety_shoes: bool
    safety_shoe_type: str | None = Field(default=None, max_length=50)
    has_forklift_certification: bool
    forklift_certification_validity: str | None = Field(default=None, max_length=100)

    background_check_consent: bool

    last_company_name: str | None = Field(default=None, max_length=255)
    last_company_type: str | None = Field(default=None, max_length=255)
    last_job_responsibilities: str | None = Field(default=None, max_length=5000)
    last_job_agency_or_direct: str | None = Field(default=None, max_length=50)
    reason_for_leaving: str | None = Field(default=None, max_length=5000)

    lifting_capability: LiftingCapability
    job_type: JobType
    commitment_months: int | None = Field(default=None, ge=0, le=120)

    morning_availability: str | None = Field(default=None, max_length=100)
    afternoon_availability: str | None = Field(default=None, max_length=100)
    night_availability: str | None = Field(default=None, max_length=100)

    referral_person_name: str | None = Field(default=None, max_length=255)
    referral_person_number: str | None = Field(default=None, max_length=50)
    referral_person_relationship: str | None = Field(default=None, max_length=100)
    found_via_internet: list[str] = Field(default_factory=list)

    agrees_to_terms: bool
    applicant_signature: str = Field(..., min_length=1, max_length=255)

    @field_validator(
        "full_name", "street_address", "city", "province", "postal_code",
        "major_intersection", "emergency_contact_name", "applicant_signature",
        mode="before",
    )
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("social_insurance_number")
    @classmethod
    def check_sin(cls, v: str) -> str:
        v = v.strip()
        if not validate_sin(v):
            raise ValueError("SIN must be 9 digits, optionally separated by spaces or dashes")
        return v

    @field_validator("mobile_number")
    @classmethod
    def check_mobile(cls, v: str) -> str:
        v = v.strip()
        if not validate_mobile_number(v):
            raise ValueError("Mobile number must be in the format 123-456-7890")
        return v

    @field_validator("agrees_to_terms")
    @classmethod
    def check_terms(cls, v: bool) -> bool:
        if not v:
            raise ValueError("You must agree to the terms and conditions")
        return v


class OfficeUseUpdate(BaseModel):
    additional_notes: str | None = Field(default=None, max_length=10000)
    recruiter_signature: str | None = Field(default=None, max_length=255)
    aptitude_test_score: int | None = Field(default=None, ge=0, le=100)


class JobApplicationSummary(BaseModel):
    id: int
    full_name: str
    email: str
    mobile_number: str
    city: str
    job_type: str
    legal_status: str
    aptitude_test_score: int | None
    created_at: datetime | None

    class Config:
        from_attributes = True


async def _get_application(db: AsyncSession, application_id: int) -> JobApplication:
    result = await db.execute(select(JobApplication).where(JobApplication.id == application_id))
    application = result.scalar_one_or_none()
    if not application:
        raise HTTPException(status_code=404, detail="Job application not found")
    return application


@router.post("")
async def submit_job_application(
    request: Request,
    body: JobApplicationCreate,
    db: AsyncSession = Depends(get_db),
):
    check_submit_rate_limit(request)
    application = JobApplication(**body.model_dump())
    db.add(application)
    await db.commit()
    await db.refresh(application)
    logger.info(
        "Job application submitted",
        extra={"application_id": application.id, "job_type": application.job_type},
    )
    return {"success": True, "id": application.id}


@router.get("", response_model=list[JobApplicationSummary])
async def list_job_applications(admin: CurrentAdmin, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(JobApplication).order_by(JobApplication.created_at.desc(), JobApplication.id.desc())
    )
    return result.scalars().all()


@router.get("/{application_id}")
async def get_job_application(
    application_id: int,
    admin: CurrentAdmin,
    db: AsyncSession = Depends(get_db),
):
    application = await _get_application(db, application_id)
    return _to_response(application)


@router.patch("/{application_id}")
async def update_office_fields(
    application_id: int,
    body: OfficeUseUpdate,
    admin: CurrentAdmin,
    db: AsyncSession = Depends(get_db),
):
    """Recruiter notes, signature and aptitude score. Applicant fields stay untouched."""
    application = await _get_application(db, application_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(application, field, value)
    await db.commit()
    await db.refresh(application)
    logger.info(
        "Job application office fields updated",
        extra={"application_id": application.id, "admin_id": admin["id"]},
    )
    return {"success": True, "application": _to_response(application)}


def _to_response(application: JobApplication) -> dict[str, Any]:
    # Plain dict so stored rows skip the intake validators
    data = {column.name: getattr(application, column.name) for column in JobApplication.__table__.columns}
    data["found_via_internet"] = list(application.found_via_internet or [])
    return data
