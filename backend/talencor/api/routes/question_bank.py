"""
Interview question bank: categories, tags, questions and per-visitor favourites.
Mount at /api/question-bank. Favourites are keyed by the session visitor id.
"""
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from talencor.api.middleware.auth import SessionData, ensure_visitor_id
from talencor.database.connection import get_db
from talencor.models import (
    InterviewQuestion,
    QuestionCategory,
    QuestionFavorite,
    QuestionTag,
)
from talencor.models.question_bank import QUESTION_DIFFICULTIES, question_tag_relations
from talencor.utils.logger import get_logger
from talencor.utils.validators import sanitize_string, validate_hex_color

logger = get_logger(__name__)
router = APIRouter()


# ---------- Schemas ----------


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return sanitize_string(v) if isinstance(v, str) else v


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: str = "#3B82F6"

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("color")
    @classmethod
    def check_color(cls, v: str) -> str:
        if not validate_hex_color(v):
            raise ValueError("Color must be a hex value like #3B82F6")
        return v


class TagUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = None

    @field_validator("color")
    @classmethod
    def check_color(cls, v: str | None) -> str | None:
        if v is not None and not validate_hex_color(v):
            raise ValueError("Color must be a hex value like #3B82F6")
        return v


class QuestionCreate(BaseModel):
    question: str = Field(..., min_length=1, max_length=5000)
    category_id: int | None = None
    difficulty: str = "mid"
    tips: list[str] = Field(default_factory=list)
    expected_elements: list[str] = Field(default_factory=list)
    is_public: bool = True
    tag_ids: list[int] = Field(default_factory=list)

    @field_validator("question", mode="before")
    @classmethod
    def strip_question(cls, v: Any) -> Any:
        return sanitize_string(v) if isinstance(v, str) else v

    @field_validator("difficulty")
    @classmethod
    def check_difficulty(cls, v: str) -> str:
        if v not in QUESTION_DIFFICULTIES:
            raise ValueError(f"Difficulty must be one of: {', '.join(QUESTION_DIFFICULTIES)}")
        return v


class QuestionUpdate(BaseModel):
    question: str | None = Field(default=None, min_length=1, max_length=5000)
    category_id: int | None = None
    difficulty: str | None = None
    tips: list[str] | None = None
    expected_elements: list[str] | None = None
    is_public: bool | None = None
    tag_ids: list[int] | None = None

    @field_validator("difficulty")
    @classmethod
    def check_difficulty(cls, v: str | None) -> str | None:
        if v is not None and v not in QUESTION_DIFFICULTIES:
            raise ValueError(f"Difficulty must be one of: {', '.join(QUESTION_DIFFICULTIES)}")
        return v


class TagResponse(BaseModel):
    id: int
    name: str
    color: str

    class Config:
        from_attributes = True


class CategorySummary(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class QuestionResponse(BaseModel):
    id: int
    question: str
    category_id: int | None
    category: CategorySummary | None
    difficulty: str
    tips: list[str]
    expected_elements: list[str]
    is_public: bool
    created_by: str
    tags: list[TagResponse]
    is_favorited: bool = False
    created_at: datetime | None
    updated_at: datetime | None

    class Config:
        from_attributes = True


# ---------- Helpers ----------


async def _get_category(db: AsyncSession, category_id: int) -> QuestionCategory:
    result = await db.execute(select(QuestionCategory).where(QuestionCategory.id == category_id))
    category = result.scalar_one_or_none()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


async def _get_tag(db: AsyncSession, tag_id: int) -> QuestionTag:
    result = await db.execute(select(QuestionTag).where(QuestionTag.id == tag_id))
    tag = result.scalar_one_or_none()
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    return tag


async def _load_question(db: AsyncSession, question_id: int) -> InterviewQuestion:
    result = await db.execute(
        select(InterviewQuestion)
        .options(selectinload(InterviewQuestion.category), selectinload(InterviewQuestion.tags))
        .where(InterviewQuestion.id == question_id)
        .execution_options(populate_existing=True)
    )
    question = result.scalar_one_or_none()
    if not question:
        raise HTTPException(status_code=404, detail="Question not found")
    return question


async def _load_tags(db: AsyncSession, tag_ids: list[int]) -> list[QuestionTag]:
    if not tag_ids:
        return []
    result = await db.execute(select(QuestionTag).where(QuestionTag.id.in_(set(tag_ids))))
    tags = list(result.scalars().all())
    if len(tags) != len(set(tag_ids)):
        raise HTTPException(status_code=400, detail="One or more tags do not exist")
    return tags


async def _check_category_exists(db: AsyncSession, category_id: int | None) -> None:
    if category_id is not None:
        await _get_category(db, category_id)


async def _favorite_ids(db: AsyncSession, visitor_id: str | None) -> set[int]:
    if not visitor_id:
        return set()
    result = await db.execute(
        select(QuestionFavorite.question_id).where(QuestionFavorite.visitor_id == visitor_id)
    )
    return set(result.scalars().all())


def _to_response(question: InterviewQuestion, favorites: set[int]) -> QuestionResponse:
    response = QuestionResponse.model_validate(question)
    response.is_favorited = question.id in favorites
    return response


# ---------- Categories ----------


@router.get("/categories")
async def list_categories(db: AsyncSession = Depends(get_db)):
    counts = (
        select(InterviewQuestion.category_id, func.count(InterviewQuestion.id).label("question_count"))
        .group_by(InterviewQuestion.category_id)
        .subquery()
    )
    result = await db.execute(
        select(QuestionCategory, func.coalesce(counts.c.question_count, 0))
        .outerjoin(counts, counts.c.category_id == QuestionCategory.id)
        .order_by(QuestionCategory.name)
    )
    return [
        {
            "id": category.id,
            "name": category.name,
            "description": category.description,
            "question_count": int(count),
            "created_at": category.created_at,
        }
        for category, count in result.all()
    ]


@router.post("/categories", status_code=201)
async def create_category(body: CategoryCreate, db: AsyncSession = Depends(get_db)):
    category = QuestionCategory(name=body.name, description=body.description)
    db.add(category)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="A category with this name already exists")
    await db.refresh(category)
    logger.info("Question category created", extra={"category_id": category.id})
    return {"id": category.id, "name": category.name, "description": category.description, "question_count": 0}


@router.put("/categories/{category_id}")
async def update_category(category_id: int, body: CategoryUpdate, db: AsyncSession = Depends(get_db)):
    category = await _get_category(db, category_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        if field == "name":
            if not value:
                continue
            value = sanitize_string(value)
        setattr(category, field, value)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="A category with this name already exists")
    await db.refresh(category)
    return {"id": category.id, "name": category.name, "description": category.description}


@router.delete("/categories/{category_id}")
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    """Questions in the category are kept and become uncategorised."""
    await _get_category(db, category_id)
    await db.execute(
        update(InterviewQuestion)
        .where(InterviewQuestion.category_id == category_id)
        .values(category_id=None)
    )
    await db.execute(delete(QuestionCategory).where(QuestionCategory.id == category_id))
    await db.commit()
    logger.info("Question category deleted", extra={"category_id": category_id})
    return {"success": True}


# ---------- Tags ----------


@router.get("/tags", response_model=list[TagResponse])
async def list_tags(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(QuestionTag).order_by(QuestionTag.name))
    return result.scalars().all()


@router.post("/tags", response_model=TagResponse, status_code=201)
async def create_tag(body: TagCreate, db: AsyncSession = Depends(get_db)):
    tag = QuestionTag(name=body.name, color=body.color)
    db.add(tag)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="A tag with this name already exists")
    await db.refresh(tag)
    return tag


@router.put("/tags/{tag_id}", response_model=TagResponse)
async def update_tag(tag_id: int, body: TagUpdate, db: AsyncSession = Depends(get_db)):
    tag = await _get_tag(db, tag_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(tag, field, sanitize_string(value) if field == "name" else value)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="A tag with this name already exists")
    await db.refresh(tag)
    return tag


@router.delete("/tags/{tag_id}")
async def delete_tag(tag_id: int, db: AsyncSession = Depends(get_db)):
    tag = await _get_tag(db, tag_id)
    await db.execute(delete(question_tag_relations).where(question_tag_relations.c.tag_id == tag_id))
    await db.delete(tag)
    await db.commit()
    logger.info("Question tag deleted", extra={"tag_id": tag_id})
    return {"success": True}


# ---------- Questions ----------


@router.get("/questions", response_model=list[QuestionResponse])
async def list_questions(
    session: SessionData,
    search: str | None = Query(default=None, max_length=200),
    category: str | None = Query(default=None),
    difficulty: str | None = Query(default=None),
    tags: list[int] = Query(default=[]),
    favorites_only: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
):
    """
    Filters combine with AND. ``tags`` may repeat; a question must carry every one.
    ``category`` and ``difficulty`` accept ``all`` as "no filter".
    """
    visitor_id = session.get("visitor_id")
    query = select(InterviewQuestion).options(
        selectinload(InterviewQuestion.category),
        selectinload(InterviewQuestion.tags),
    )

    if search and search.strip():
        query = query.where(InterviewQuestion.question.ilike(f"%{search.strip()}%"))

    if category and category != "all":
        try:
            category_id = int(category)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid category")
        query = query.where(InterviewQuestion.category_id == category_id)

    if difficulty and difficulty != "all":
        if difficulty not in QUESTION_DIFFICULTIES:
            raise HTTPException(status_code=400, detail="Invalid difficulty")
        query = query.where(InterviewQuestion.difficulty == difficulty)

    for tag_id in set(tags):
        query = query.where(InterviewQuestion.tags.any(QuestionTag.id == tag_id))

    if favorites_only:
        if not visitor_id:
            return []
        query = query.where(
            InterviewQuestion.id.in_(
                select(QuestionFavorite.question_id).where(QuestionFavorite.visitor_id == visitor_id)
            )
        )

    result = await db.execute(
        query.order_by(InterviewQuestion.updated_at.desc(), InterviewQuestion.id.desc())
    )
    questions = result.scalars().all()
    favorites = await _favorite_ids(db, visitor_id)
    return [_to_response(q, favorites) for q in questions]


@router.get("/questions/{question_id}", response_model=QuestionResponse)
async def get_question(question_id: int, session: SessionData, db: AsyncSession = Depends(get_db)):
    question = await _load_question(db, question_id)
    favorites = await _favorite_ids(db, session.get("visitor_id"))
    return _to_response(question, favorites)


@router.post("/questions", response_model=QuestionResponse, status_code=201)
async def create_question(body: QuestionCreate, session: SessionData, db: AsyncSession = Depends(get_db)):
    await _check_category_exists(db, body.category_id)
    tags = await _load_tags(db, body.tag_ids)
    question = InterviewQuestion(
        question=body.question,
        category_id=body.category_id,
        difficulty=body.difficulty,
        tips=body.tips,
        expected_elements=body.expected_elements,
        is_public=body.is_public,
        tags=tags,
    )
    db.add(question)
    await db.commit()
    logger.info("Question created", extra={"question_id": question.id, "tag_count": len(tags)})
    question = await _load_question(db, question.id)
    return _to_response(question, await _favorite_ids(db, session.get("visitor_id")))


@router.put("/questions/{question_id}", response_model=QuestionResponse)
async def update_question(
    question_id: int,
    body: QuestionUpdate,
    session: SessionData,
    db: AsyncSession = Depends(get_db),
):
    """``tag_ids`` replaces the whole tag set when present."""
    question = await _load_question(db, question_id)
    data = body.model_dump(exclude_unset=True)

    if "category_id" in data:
        await _check_category_exists(db, data["category_id"])
    tag_ids = data.pop("tag_ids", None)
    if tag_ids is not None:
        question.tags = await _load_tags(db, tag_ids)
        # tag changes only touch the association table, so onupdate never fires
        question.updated_at = datetime.now(timezone.utc)

    for field, value in data.items():
        if value is None and field != "category_id":
            continue
        if field == "question":
            value = sanitize_string(value)
        setattr(question, field, value)

    await db.commit()
    question = await _load_question(db, question_id)
    return _to_response(question, await _favorite_ids(db, session.get("visitor_id")))


@router.delete("/questions/{question_id}")
async def delete_question(question_id: int, db: AsyncSession = Depends(get_db)):
    question = await _load_question(db, question_id)
    await db.execute(delete(QuestionFavorite).where(QuestionFavorite.question_id == question_id))
    await db.delete(question)
    await db.commit()
    logger.info("Question deleted", extra={"question_id": question_id})
    return {"success": True}


@router.post("/questions/{question_id}/favorite")
async def toggle_favorite(
    question_id: int,
    response: Response,
    session: SessionData,
    db: AsyncSession = Depends(get_db),
):
    """Flip the favourite flag for this visitor; returns the new state."""
    result = await db.execute(select(InterviewQuestion.id).where(InterviewQuestion.id == question_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="Question not found")

    visitor_id = ensure_visitor_id(session, response)
    result = await db.execute(
        select(QuestionFavorite).where(
            QuestionFavorite.visitor_id == visitor_id,
            QuestionFavorite.question_id == question_id,
        )
    )
    favorite = result.scalar_one_or_none()
    if favorite:
        await db.delete(favorite)
        is_favorited = False
    else:
        db.add(QuestionFavorite(visitor_id=visitor_id, question_id=question_id))
        is_favorited = True
    await db.commit()
    return {"is_favorited": is_favorited}
