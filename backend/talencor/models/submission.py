"""
Public intake records: contact form submissions and worker job applications.
"""
from datetime import date, datetime, timezone

from sqlalchemy import Boolean, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from talencor.database.connection import Base, JSONType


class ContactSubmission(Base):
    __tablename__ = "contact_submissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    inquiry_type: Mapped[str] = mapped_column(String(100), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )


class JobApplication(Base):
    __tablename__ = "job_applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Personal information
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    social_insurance_number: Mapped[str] = mapped_column(String(11), nullable=False)

    # Address
    street_address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    province: Mapped[str] = mapped_column(String(50), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False)
    major_intersection: Mapped[str] = mapped_column(String(255), nullable=False)

    # Contact
    mobile_number: Mapped[str] = mapped_column(String(20), nullable=False)
    whatsapp_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Emergency contact
    emergency_contact_name: Mapped[str] = mapped_column(String(255), nullable=False)
    emergency_contact_number: Mapped[str] = mapped_column(String(50), nullable=False)
    emergency_contact_relationship: Mapped[str] = mapped_column(String(100), nullable=False)

    legal_status: Mapped[str] = mapped_column(String(50), nullable=False)

    # Student schedule, one free-text slot per weekday
    monday_schedule: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tuesday_schedule: Mapped[str | None] = mapped_column(String(255), nullable=True)
    wednesday_schedule: Mapped[str | None] = mapped_column(String(255), nullable=True)
    thursday_schedule: Mapped[str | None] = mapped_column(String(255), nullable=True)
    friday_schedule: Mapped[str | None] = mapped_column(String(255), nullable=True)
    saturday_schedule: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sunday_schedule: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Transportation and equipment
    transportation_mode: Mapped[str] = mapped_column(String(50), nullable=False)
    has_safety_shoes: Mapped[bool] = mapped_column(Boolean, nullable=False)
    safety_shoe_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    has_forklift_certification: Mapped[bool] = mapped_column(Boolean, nullable=False)
    forklift_certification_validity: Mapped[str | None] = mapped_column(String(100), nullable=True)

    background_check_consent: Mapped[bool] = mapped_column(Boolean, nullable=False)

    # Work history
    last_company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_company_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_job_responsibilities: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_job_agency_or_direct: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reason_for_leaving: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Capabilities and preferences
    lifting_capability: Mapped[str] = mapped_column(String(50), nullable=False)
    job_type: Mapped[str] = mapped_column(String(50), nullable=False)
    commitment_months: Mapped[int | None] = mapped_column(Integer, nullable=True)

    morning_availability: Mapped[str | None] = mapped_column(String(100), nullable=True)
    afternoon_availability: Mapped[str | None] = mapped_column(String(100), nullable=True)
    night_availability: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Referral
    referral_person_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    referral_person_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    referral_person_relationship: Mapped[str | None] = mapped_column(String(100), nullable=True)
    found_via_internet: Mapped[list] = mapped_column(JSONType, default=list, nullable=False)

    # Office use
    additional_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    recruiter_signature: Mapped[str | None] = mapped_column(String(255), nullable=True)
    aptitude_test_score: Mapped[int | None] = mapped_column(Integer, nullable=True)

    agrees_to_terms: Mapped[bool] = mapped_column(Boolean, nullable=False)
    applicant_signature: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
