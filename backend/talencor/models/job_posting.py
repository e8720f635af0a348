"""
Employer job postings submitted through the site or the client portal.
"""
from datetime import date, datetime, timezone
from typing import Literal

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from talencor.database.connection import Base

JOB_POSTING_STATUSES = ("new", "contacted", "contract_pending", "posted", "closed")
EmploymentType = Literal["permanent", "temporary", "contract-to-hire"]


class JobPosting(Base):
    __tablename__ = "job_postings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    contact_name: Mapped[str] = mapped_column(String(255), nullable=False)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    job_title: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    employment_type: Mapped[str] = mapped_column(String(50), nullable=False, default="permanent")
    department: Mapped[str | None] = mapped_column(String(255), nullable=True)
    number_of_positions: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    urgency: Mapped[str | None] = mapped_column(String(50), nullable=True)
    anticipated_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    salary_range: Mapped[str | None] = mapped_column(String(255), nullable=True)
    job_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    special_requirements: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_existing_client: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    client_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True
    )
    status: Mapped[str] = mapped_column(String(50), default="new", nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
