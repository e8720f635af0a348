"""
Resume wizard sessions and their per-section content.
"""
from datetime import datetime, timezone
from typing import Literal

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from talencor.database.connection import Base, JSONType

ResumeSectionType = Literal["summary", "experience", "education", "skills", "achievements"]


class ResumeSession(Base):
    __tablename__ = "resume_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Client-generated identifier; sections reference it directly
    session_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    target_role: Mapped[str | None] = mapped_column(String(255), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(255), nullable=True)
    overall_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    sections = relationship(
        "ResumeSection",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="ResumeSection.id",
    )


class ResumeSection(Base):
    __tablename__ = "resume_sections"
    __table_args__ = (UniqueConstraint("session_id", "section_type"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    session_id: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("resume_sessions.session_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    section_type: Mapped[str] = mapped_column(String(30), nullable=False)
    original_content: Mapped[str] = mapped_column(Text, nullable=False)
    enhanced_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    improvements: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    session = relationship("ResumeSession", back_populates="sections")
