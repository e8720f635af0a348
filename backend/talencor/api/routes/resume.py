"""
Resume wizard: client-keyed sessions, section upload, AI analysis/enhancement and
text extraction from uploaded files. Mount at /api/resume.
"""
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from talencor.database.connection import get_db
from talencor.models import ResumeSection, ResumeSession
from talencor.models.resume import ResumeSectionType
from talencor.services.llm.resume_analyzer import ResumeAnalyzer
from talencor.services.resume_parser import FileValidationError, extract_text
from talencor.utils.logger import get_logger
from talencor.utils.validators import sanitize_string

logger = get_logger(__name__)
router = APIRouter()


class SessionCreate(BaseModel):
    session_id: str = Field(..., min_length=1, max_length=100)
    target_role: str | None = Field(default=None, max_length=255)
    industry: str | None = Field(default=None, max_length=255)


class SectionUpsert(BaseModel):
    session_id: str = Field(..., min_length=1, max_length=100)
    section_type: ResumeSectionType
    content: str = Field(..., min_length=1, max_length=20000)

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, v: Any) -> Any:
        return sanitize_string(v, max_length=20000) if isinstance(v, str) else v


class KeywordsRequest(BaseModel):
    target_role: str | None = Field(default=None, max_length=255)
    industry: str | None = Field(default=None, max_length=255)


class SectionResponse(BaseModel):
    id: int
    session_id: str
    section_type: str
    original_content: str
    enhanced_content: str | None
    feedback: str | None
    score: int | None
    improvements: list[str] | None
    created_at: datetime | None

    class Config:
        from_attributes = True


class SessionResponse(BaseModel):
    id: int
    session_id: str
    target_role: str | None
    industry: str | None
    overall_score: int | None
    created_at: datetime | None
    updated_at: datetime | None

    class Config:
        from_attributes = True


class SessionWithSections(SessionResponse):
    sections: list[SectionResponse] = []


async def _find_session(db: AsyncSession, session_id: str) -> ResumeSession | None:
    result = await db.execute(
        select(ResumeSession)
        .options(selectinload(ResumeSession.sections))
        .where(ResumeSession.session_id == session_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _require_session(db: AsyncSession, session_id: str) -> ResumeSession:
    resume_session = await _find_session(db, session_id)
    if not resume_session:
        raise HTTPException(status_code=404, detail="Session not found")
    return resume_session


async def _find_section(db: AsyncSession, session_id: str, section_type: str) -> ResumeSection | None:
    result = await db.execute(
        select(ResumeSection).where(
            ResumeSection.session_id == session_id,
            ResumeSection.section_type == section_type,
        )
    )
    return result.scalar_one_or_none()


@router.post("/session")
async def create_session(body: SessionCreate, db: AsyncSession = Depends(get_db)):
    """Idempotent: an existing session is returned unchanged."""
    existing = await _find_session(db, body.session_id)
    if existing:
        return {"success": True, "session": SessionResponse.model_validate(existing)}

    resume_session = ResumeSession(
        session_id=body.session_id,
        target_role=body.target_role or None,
        industry=body.industry or None,
    )
    db.add(resume_session)
    await db.commit()
    await db.refresh(resume_session)
    logger.info("Resume session created", extra={"resume_session": resume_session.session_id[:40]})
    return {"success": True, "session": SessionResponse.model_validate(resume_session)}


@router.get("/session")
async def get_session_by_query(
    session_id: str = Query(..., min_length=1, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    resume_session = await _find_session(db, session_id)
    if not resume_session:
        return {"success": True, "session": None}
    return {"success": True, "session": SessionWithSections.model_validate(resume_session)}


@router.get("/session/{session_id}")
async def get_session(session_id: str, db: AsyncSession = Depends(get_db)):
    resume_session = await _require_session(db, session_id)
    return {"success": True, "session": SessionWithSections.model_validate(resume_session)}


@router.post("/section")
async def upsert_section(body: SectionUpsert, db: AsyncSession = Depends(get_db)):
    """New content for a section clears any previous enhancement and scoring."""
    result = await db.execute(select(ResumeSession.id).where(ResumeSession.session_id == body.session_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="Session not found")

    section = await _find_section(db, body.session_id, body.section_type)
    if section:
        section.original_content = body.content
        section.enhanced_content = None
        section.feedback = None
        section.score = None
        section.improvements = None
    else:
        section = ResumeSection(
            session_id=body.session_id,
            section_type=body.section_type,
            original_content=body.content,
        )
        db.add(section)
    await db.commit()
    await db.refresh(section)
    return {"success": True, "section": SectionResponse.model_validate(section)}


@router.post("/analyze/{session_id}")
async def analyze_resume(session_id: str, db: AsyncSession = Depends(get_db)):
    resume_session = await _require_session(db, session_id)
    sections = list(resume_session.sections)
    if not sections:
        raise HTTPException(status_code=400, detail="No sections found to analyze")

    analyzer = ResumeAnalyzer()
    analysis = await analyzer.analyze(
        [{"type": s.section_type, "content": s.original_content} for s in sections],
        target_role=resume_session.target_role,
        industry=resume_session.industry,
    )

    resume_session.overall_score = analysis["overall_score"]
    for section in sections:
        section_analysis = analysis["sections"].get(section.section_type)
        if section_analysis:
            section.score = section_analysis["score"]
            section.feedback = section_analysis["feedback"]
    await db.commit()
    logger.info(
        "Resume analyzed",
        extra={"section_count": len(sections), "overall_score": analysis["overall_score"]},
    )
    return {"success": True, "analysis": analysis}


@router.post("/enhance/{session_id}/{section_type}")
async def enhance_section(session_id: str, section_type: ResumeSectionType, db: AsyncSession = Depends(get_db)):
    resume_session = await _require_session(db, session_id)
    section = await _find_section(db, session_id, section_type)
    if not section:
        raise HTTPException(status_code=404, detail="Section not found")

    analyzer = ResumeAnalyzer()
    enhancement = await analyzer.enhance_section(
        section.original_content,
        section_type,
        target_role=resume_session.target_role,
        industry=resume_session.industry,
    )
    section.enhanced_content = enhancement["enhanced"]
    section.improvements = enhancement["improvements"]
    await db.commit()
    await db.refresh(section)
    return {
        "success": True,
        "section": SectionResponse.model_validate(section),
        "enhancement": enhancement,
    }


@router.post("/keywords/{session_id}")
async def keyword_suggestions(session_id: str, body: KeywordsRequest, db: AsyncSession = Depends(get_db)):
    target_role = (body.target_role or "").strip()
    industry = (body.industry or "").strip()
    if not target_role or not industry:
        raise HTTPException(
            status_code=400,
            detail="Target role and industry are required for keyword suggestions",
        )

    result = await db.execute(
        select(ResumeSection.original_content)
        .where(ResumeSection.session_id == session_id)
        .order_by(ResumeSection.id)
    )
    current_content = "\n\n".join(result.scalars().all())
    if not current_content.strip():
        raise HTTPException(status_code=400, detail="No resume content found for keyword analysis")

    analyzer = ResumeAnalyzer()
    keywords = await analyzer.suggest_keywords(target_role, industry, current_content)
    return {"success": True, "keywords": keywords}


@router.post("/extract-text")
async def extract_resume_text(file: UploadFile = File(...)) -> dict[str, Any]:
    """Plain text from an uploaded PDF, DOCX or TXT resume."""
    content = await file.read()
    try:
        text = extract_text(content, file.content_type, file.filename)
    except FileValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info("Resume text extracted", extra={"chars": len(text)})
    return {"success": True, "text": text, "filename": file.filename}
