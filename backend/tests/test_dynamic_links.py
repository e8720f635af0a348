"""Dynamic links API and the WHMIS link refresher."""
import httpx
import pytest
from conftest import run
from sqlalchemy import select

from talencor.database.connection import transaction
from talencor.models import DynamicLink
from talencor.services.link_updater import (
    WHMIS_SITE,
    LinkSource,
    extract_whmis_training_url,
    fetch_whmis_training_url,
    update_dynamic_link,
    upsert_link,
)


def _load_link(key):
    async def _load():
        async with transaction() as db:
            result = await db.execute(select(DynamicLink).where(DynamicLink.key == key))
            return result.scalar_one_or_none()

    return run(_load())


def _upsert(key, url, **kwargs):
    async def _run():
        async with transaction() as db:
            await upsert_link(db, key, url, **kwargs)

    run(_run())


def test_create_and_read_link(admin_client):
    resp = admin_client.post(
        "/api/dynamic-links",
        json={"key": "safety_course", "url": "https://example.com/course", "description": "Course"},
    )
    assert resp.status_code == 201
    assert resp.json()["link"]["url"] == "https://example.com/course"

    link = admin_client.get("/api/dynamic-links/safety_course").json()["link"]
    assert link["description"] == "Course"
    assert link["last_checked"] is not None
    assert [l["key"] for l in admin_client.get("/api/dynamic-links").json()["links"]] == ["safety_course"]


def test_duplicate_key_conflicts(admin_client):
    payload = {"key": "dup", "url": "https://example.com"}
    assert admin_client.post("/api/dynamic-links", json=payload).status_code == 201
    assert admin_client.post("/api/dynamic-links", json=payload).status_code == 409


def test_invalid_key_rejected(admin_client):
    resp = admin_client.post("/api/dynamic-links", json={"key": "Has Spaces", "url": "https://example.com"})
    assert resp.status_code == 400


def test_update_link(admin_client):
    admin_client.post("/api/dynamic-links", json={"key": "course", "url": "https://old.example.com"})
    resp = admin_client.put("/api/dynamic-links/course", json={"url": "https://new.example.com"})
    assert resp.status_code == 200
    assert resp.json()["link"]["url"] == "https://new.example.com"

    assert admin_client.put("/api/dynamic-links/course", json={"url": "  "}).status_code == 400
    assert admin_client.put("/api/dynamic-links/missing", json={"url": "https://x.example.com"}).status_code == 404


def test_reads_are_public_writes_are_not(client):
    _upsert("whmis_training", "https://example.com/whmis")
    assert client.get("/api/dynamic-links/whmis_training").status_code == 200
    assert client.get("/api/dynamic-links/missing").status_code == 404
    assert client.post("/api/dynamic-links", json={"key": "x", "url": "https://x.com"}).status_code == 401
    assert client.put("/api/dynamic-links/whmis_training", json={"url": "https://x.com"}).status_code == 401


def test_upsert_only_moves_updated_at_on_change():
    _upsert("course", "https://example.com/a", description="First")
    created = _load_link("course")

    _upsert("course", "https://example.com/a", description="Ignored")
    same = _load_link("course")
    assert same.updated_at == created.updated_at
    assert same.last_checked > created.last_checked
    assert same.description == "First"

    _upsert("course", "https://example.com/b")
    changed = _load_link("course")
    assert changed.url == "https://example.com/b"
    assert changed.updated_at > created.updated_at


def test_upsert_force_touch():
    _upsert("course", "https://example.com/a")
    before = _load_link("course")
    _upsert("course", "https://example.com/a", force_touch=True)
    assert _load_link("course").updated_at > before.updated_at


@pytest.mark.parametrize(
    "html,expected",
    [
        ('<a href="/free-training/">Free training</a>', "https://www.whmis.ca/free-training/"),
        ('<a href="https://www.ccohs.ca/products/training/whmis">CCOHS</a>', "https://www.ccohs.ca/products/training/whmis"),
        ('<a href="https://learn.example.com/whmis-free-course">Course</a>', "https://learn.example.com/whmis-free-course"),
        ('<a href="/about">About</a><a href="mailto:x@y.com">Mail</a>', WHMIS_SITE),
        ("", WHMIS_SITE),
    ],
)
def test_extract_whmis_training_url(html, expected):
    assert extract_whmis_training_url(html) == expected


def test_pattern_order_wins_over_document_order():
    html = (
        '<a href="https://other.example.com/whmis-free">Other</a>'
        '<a href="https://courses.example.com/free-training">Course</a>'
    )
    assert extract_whmis_training_url(html) == "https://courses.example.com/free-training"


def test_fetch_whmis_training_url():
    def handler(request):
        assert str(request.url) == WHMIS_SITE
        return httpx.Response(200, text='<a href="/free-training">Start</a>')

    async def _fetch():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_whmis_training_url(client)

    assert run(_fetch()) == "https://www.whmis.ca/free-training"


def test_fetch_whmis_training_url_http_error():
    async def _fetch():
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        async with httpx.AsyncClient(transport=transport) as client:
            return await fetch_whmis_training_url(client)

    assert run(_fetch()) is None


def test_update_dynamic_link_stores_result():
    async def latest(client):
        return "https://example.com/latest"

    async def nothing(client):
        return None

    async def _update(source):
        async with httpx.AsyncClient() as client:
            return await update_dynamic_link(source, client)

    assert run(_update(LinkSource(key="course", description="Course", fetch_latest_url=latest))) is True
    assert _load_link("course").url == "https://example.com/latest"

    assert run(_update(LinkSource(key="other", description="Other", fetch_latest_url=nothing))) is False
    assert _load_link("other") is None
