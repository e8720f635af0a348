"""
Contact form intake and the admin inbox.
"""
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talencor.api.middleware.auth import CurrentAdmin
from talencor.api.middleware.rate_limit import check_submit_rate_limit
from talencor.database.connection import get_db
from talencor.models import ContactSubmission
from talencor.services.site_content import INQUIRY_TYPES
from talencor.utils.logger import get_logger
from talencor.utils.validators import sanitize_string, validate_phone

logger = get_logger(__name__)
router = APIRouter()


class ContactCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=50)
    inquiry_type: str
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("first_name", "last_name", "message", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        if not validate_phone(v):
            raise ValueError("Please enter a valid phone number")
        return v.strip()

    @field_validator("inquiry_type")
    @classmethod
    def check_inquiry_type(cls, v: str) -> str:
        if v not in INQUIRY_TYPES:
            raise ValueError("Please select an inquiry type")
        return v


class ContactResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None
    inquiry_type: str
    message: str
    created_at: datetime | None

    class Config:
        from_attributes = True


@router.post("/contact")
async def submit_contact(
    request: Request,
    body: ContactCreate,
    db: AsyncSession = Depends(get_db),
):
    check_submit_rate_limit(request)
    submission = ContactSubmission(**body.model_dump())
    db.add(submission)
    await db.commit()
    await db.refresh(submission)
    logger.info(
        "Contact form submitted",
        extra={"submission_id": submission.id, "inquiry_type": submission.inquiry_type},
    )
    return {"success": True, "id": submission.id}


@router.get("/contact-submissions", response_model=list[ContactResponse])
async def list_contact_submissions(admin: CurrentAdmin, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(ContactSubmission).order_by(
            ContactSubmission.created_at.desc(), ContactSubmission.id.desc()
        )
    )
    return result.scalars().all()
