"""
Keeps externally hosted links (dynamic_links table) current.
Each LinkSource knows how to discover the latest URL for one key; the refresher
upserts the result and runs on an interval inside the app lifespan.
"""
import asyncio
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talencor.config import get_settings
from talencor.database.connection import transaction
from talencor.models import DynamicLink
from talencor.utils.logger import get_logger

logger = get_logger(__name__)

WHMIS_KEY = "whmis_training"
WHMIS_SITE = "https://www.whmis.ca/"
WHMIS_CURRENT_URL = (
    "https://aixsafety.com/wp-content/uploads/articulate_uploads/WMS-July27-2025Aix/story.html"
)
USER_AGENT = "Mozilla/5.0 (compatible; TalencorLinkChecker/1.0; +https://www.talencor.com)"

# Checked in order; first matching anchor wins
_WHMIS_PATTERNS = [
    re.compile(r"free.*training", re.IGNORECASE),
    re.compile(r"^https?://www\.ccohs\.ca.*training", re.IGNORECASE),
    re.compile(r"^https?://.*whmis.*free", re.IGNORECASE),
    re.compile(r"^https?://.*free.*whmis", re.IGNORECASE),
]


@dataclass
class LinkSource:
    key: str
    description: str
    fetch_latest_url: Callable[[httpx.AsyncClient], Awaitable[str | None]]


def extract_whmis_training_url(html: str, base_url: str = WHMIS_SITE) -> str:
    """
    Pick the free-training link off the WHMIS landing page.
    Relative links are resolved against the site; no match returns the site itself.
    """
    soup = BeautifulSoup(html, "html.parser")
    hrefs = [a["href"].strip() for a in soup.find_all("a", href=True) if a["href"].strip()]
    for pattern in _WHMIS_PATTERNS:
        for href in hrefs:
            if not pattern.search(href):
                continue
            if href.startswith("/"):
                return urljoin(base_url, href)
            if href.startswith("http"):
                return href
    return base_url


async def fetch_whmis_training_url(client: httpx.AsyncClient) -> str | None:
    try:
        resp = await client.get(WHMIS_SITE, follow_redirects=True)
        resp.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("WHMIS site fetch failed", extra={"error": str(e)[:200]})
        return None
    return extract_whmis_training_url(resp.text)


LINK_SOURCES = [
    LinkSource(
        key=WHMIS_KEY,
        description="WHMIS Training - Free online training link",
        fetch_latest_url=fetch_whmis_training_url,
    ),
]


async def upsert_link(
    db: AsyncSession,
    key: str,
    url: str,
    description: str | None = None,
    force_touch: bool = False,
) -> DynamicLink:
    """
    Insert or update a link. last_checked always moves; updated_at only moves
    when the URL changes (or force_touch is set).
    """
    now = datetime.now(timezone.utc)
    result = await db.execute(select(DynamicLink).where(DynamicLink.key == key))
    link = result.scalar_one_or_none()
    if link is None:
        link = DynamicLink(
            key=key,
            url=url,
            description=description,
            last_checked=now,
            created_at=now,
            updated_at=now,
        )
        db.add(link)
        logger.info("Dynamic link created", extra={"key": key, "url": url})
    else:
        if link.url != url or force_touch:
            link.updated_at = now
            if link.url != url:
                logger.info("Dynamic link changed", extra={"key": key, "url": url})
        link.url = url
        link.last_checked = now
        if description and not link.description:
            link.description = description
    await db.flush()
    return link


async def update_dynamic_link(source: LinkSource, client: httpx.AsyncClient) -> bool:
    new_url = await source.fetch_latest_url(client)
    if not new_url:
        logger.error("Could not resolve latest URL", extra={"key": source.key})
        return False
    async with transaction() as db:
        await upsert_link(db, source.key, new_url, source.description)
    return True


async def update_all_dynamic_links() -> dict[str, bool]:
    """Refresh every configured link once. Returns key -> success."""
    results: dict[str, bool] = {}
    async with httpx.AsyncClient(timeout=20.0, headers={"User-Agent": USER_AGENT}) as client:
        for source in LINK_SOURCES:
            try:
                results[source.key] = await update_dynamic_link(source, client)
            except Exception:
                logger.exception("Dynamic link update failed", extra={"key": source.key})
                results[source.key] = False
    logger.info("Dynamic link updates completed", extra={"results": results})
    return results


async def run_link_updater(interval_hours: float | None = None) -> None:
    """Refresh now, then every interval until cancelled."""
    interval = (interval_hours or get_settings().link_update_interval_hours) * 3600
    logger.info("Dynamic link updater scheduled", extra={"interval_hours": interval / 3600})
    while True:
        await update_all_dynamic_links()
        await asyncio.sleep(interval)
