"""Sitemaps, robots.txt, page meta, JSON-LD, static site content and health."""
import re
from datetime import date

from talencor.services.seo import (
    SITEMAP_ENTRIES,
    breadcrumbs_for_path,
    generate_meta_tags,
    generate_robots_txt,
    generate_sitemap,
    meta_for_path,
)

BASE = "https://www.talencor.com"

EXPECTED_PATHS = [
    "/",
    "/about",
    "/services",
    "/services/recruiting",
    "/services/training",
    "/services/payroll-administration",
    "/services/labour-relations",
    "/services/full-time-placements",
    "/services/consulting",
    "/job-seekers",
    "/employers",
    "/contact",
    "/apply",
]


def _locs(xml):
    return re.findall(r"<loc>(.*?)</loc>", xml)


def test_sitemap_lists_every_public_page(client):
    resp = client.get("/sitemap.xml")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/xml")
    assert _locs(resp.text) == [f"{BASE}{p}" for p in EXPECTED_PATHS]
    assert resp.text.startswith('<?xml version="1.0" encoding="UTF-8"?>')


def test_sitemap_subsets(client):
    services = _locs(client.get("/sitemap-services.xml").text)
    assert services == [f"{BASE}{p}" for p in EXPECTED_PATHS if p.startswith("/services")]
    jobs = _locs(client.get("/sitemap-jobs.xml").text)
    assert jobs == [f"{BASE}/job-seekers", f"{BASE}/employers", f"{BASE}/apply"]


def test_sitemap_entry_details():
    xml = generate_sitemap(SITEMAP_ENTRIES[:2], base_url=BASE + "/", lastmod=date(2026, 1, 15))
    assert xml.count("<lastmod>2026-01-15</lastmod>") == 2
    assert "<priority>1</priority>" in xml
    assert "<priority>0.8</priority>" in xml
    assert f'hreflang="en-us" href="{BASE}/about?region=us"' in xml
    assert f'hreflang="fr-ca" href="{BASE}/fr/about"' in xml
    assert xml.count('hreflang="x-default"') == 2


def test_robots_txt(client):
    resp = client.get("/robots.txt")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    text = resp.text
    for name in ("sitemap.xml", "sitemap-services.xml", "sitemap-jobs.xml"):
        assert f"Sitemap: {BASE}/{name}" in text
    assert "Disallow: /api/" in text
    assert f"Host: {BASE}" in text


def test_robots_txt_date():
    assert "# Last updated: 2026-03-01" in generate_robots_txt(BASE, today=date(2026, 3, 1))


def test_meta_title_suffix():
    meta = generate_meta_tags("About Us", "Who we are", canonical="/about")
    assert meta["title"] == "About Us | Talencor Staffing"
    assert meta["canonical"] == f"{BASE}/about"
    assert meta["robots"] == "index,follow"
    assert "staffing agency Toronto" in meta["keywords"]

    already = generate_meta_tags("Talencor Staffing | Home", "Home")
    assert already["title"] == "Talencor Staffing | Home"
    assert already["og_url"] == BASE


def test_meta_for_path(client):
    meta = client.get("/api/seo/meta", params={"path": "/services/training/"}).json()
    assert meta["title"] == "Training Services Toronto & GTA | Talencor Staffing"
    assert meta["canonical"] == f"{BASE}/services/training"

    assert meta_for_path("/admin")["robots"] == "noindex,nofollow"
    unknown = meta_for_path("/somewhere")
    assert unknown["canonical"] == f"{BASE}/somewhere"
    assert unknown["description"].startswith("Leading staffing agency")


def test_structured_data(client):
    org = client.get("/api/seo/structured-data/organization").json()
    assert org["@type"] == "Organization"
    assert org["url"] == BASE
    assert org["address"]["addressLocality"] == "Mississauga"

    business = client.get("/api/seo/structured-data/local-business").json()
    assert business["@type"] == "EmploymentAgency"

    faq = client.get("/api/seo/structured-data/faq").json()
    assert faq["@type"] == "FAQPage"
    assert len(faq["mainEntity"]) == len(client.get("/api/site/faq").json())

    assert client.get("/api/seo/structured-data/recipe").status_code == 404


def test_breadcrumbs(client):
    data = client.get("/api/seo/structured-data/breadcrumb", params={"path": "/services/payroll-administration"}).json()
    items = data["itemListElement"]
    assert [i["name"] for i in items] == ["Home", "Services", "Payroll & Administration"]
    assert [i["position"] for i in items] == [1, 2, 3]
    assert items[2]["item"] == f"{BASE}/services/payroll-administration"

    assert breadcrumbs_for_path("/") == [{"name": "Home", "url": "/"}]
    assert breadcrumbs_for_path("/job-seekers")[1]["name"] == "Job Seekers"
    assert breadcrumbs_for_path("/post-job")[1]["name"] == "Post Job"


def test_service_structured_data(client):
    data = client.get("/api/seo/structured-data/service/recruiting").json()
    assert data["@type"] == "Service"
    assert data["name"] == "Recruiting"
    assert "postalCode" not in data["provider"]["address"]
    assert client.get("/api/seo/structured-data/service/unknown").status_code == 404


def test_site_content(client):
    company = client.get("/api/site/company").json()
    assert company["phone"] == "(647) 946-2177"
    assert len(company["statistics"]) == 4

    services = client.get("/api/site/services").json()
    assert [s["id"] for s in services][:2] == ["recruiting", "training"]
    assert client.get("/api/site/services/consulting").json()["title"] == "Consulting"
    assert client.get("/api/site/services/nope").status_code == 404

    assert "I'm looking for a job" in client.get("/api/site/inquiry-types").json()
    assert client.get("/api/site/job-positions").json()
    assert client.get("/api/site/benefits").json()


def test_health(client):
    for path in ("/health", "/api/health"):
        body = client.get(path).json()
        assert body["status"] == "ok"
        assert body["environment"] == "test"
        assert "timestamp" in body


def test_root_redirects_to_docs(client):
    resp = client.get("/", follow_redirects=False)
    assert resp.status_code == 307
    assert resp.headers["location"] == "/docs"


def test_unknown_route_gets_default_not_found(client):
    resp = client.get("/api/no-such-endpoint")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Resource not found"}
    # route-specific detail is kept
    assert client.get("/api/resume/session/nope").json() == {"detail": "Session not found"}
