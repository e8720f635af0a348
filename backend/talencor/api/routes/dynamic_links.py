"""
Keyed external links (e.g. the WHMIS training course). Reads are public, writes need an admin.
Mount at /api/dynamic-links.
"""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talencor.api.middleware.auth import CurrentAdmin
from talencor.database.connection import get_db
from talencor.models import DynamicLink
from talencor.services.link_updater import upsert_link
from talencor.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


class DynamicLinkCreate(BaseModel):
    key: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9_\-]+$")
    url: str = Field(..., min_length=1, max_length=1000)
    description: str | None = Field(default=None, max_length=2000)


class DynamicLinkUpdate(BaseModel):
    url: str | None = Field(default=None, max_length=1000)


class DynamicLinkResponse(BaseModel):
    id: int
    key: str
    url: str
    description: str | None
    last_checked: datetime | None
    created_at: datetime | None
    updated_at: datetime | None

    class Config:
        from_attributes = True


async def _find_link(db: AsyncSession, key: str) -> DynamicLink | None:
    result = await db.execute(select(DynamicLink).where(DynamicLink.key == key))
    return result.scalar_one_or_none()


@router.get("")
async def list_links(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(DynamicLink).order_by(DynamicLink.key))
    return {
        "success": True,
        "links": [DynamicLinkResponse.model_validate(link) for link in result.scalars().all()],
    }


@router.get("/{key}")
async def get_link(key: str, db: AsyncSession = Depends(get_db)):
    link = await _find_link(db, key)
    if not link:
        raise HTTPException(status_code=404, detail="Link not found")
    return {"success": True, "link": DynamicLinkResponse.model_validate(link)}


@router.post("", status_code=201)
async def create_link(body: DynamicLinkCreate, admin: CurrentAdmin, db: AsyncSession = Depends(get_db)):
    if await _find_link(db, body.key):
        raise HTTPException(status_code=409, detail="A link with this key already exists")
    link = await upsert_link(db, body.key, body.url.strip(), description=body.description)
    await db.commit()
    await db.refresh(link)
    return {"success": True, "link": DynamicLinkResponse.model_validate(link)}


@router.put("/{key}")
async def update_link(
    key: str,
    body: DynamicLinkUpdate,
    admin: CurrentAdmin,
    db: AsyncSession = Depends(get_db),
):
    url = (body.url or "").strip()
    if not url:
        raise HTTPException(status_code=400, detail="URL is required")
    if not await _find_link(db, key):
        raise HTTPException(status_code=404, detail="Link not found")
    link = await upsert_link(db, key, url)
    await db.commit()
    await db.refresh(link)
    logger.info("Dynamic link updated by admin", extra={"key": key, "admin_id": admin["id"]})
    return {"success": True, "link": DynamicLinkResponse.model_validate(link)}
