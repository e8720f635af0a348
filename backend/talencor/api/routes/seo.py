"""
Crawler documents (sitemaps, robots.txt) at the site root, and page meta / JSON-LD
for the frontend under /api/seo.
"""
from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import PlainTextResponse, Response

from talencor.services.seo import (
    JOB_SITEMAP_ENTRIES,
    SERVICE_SITEMAP_ENTRIES,
    SITEMAP_ENTRIES,
    breadcrumb_structured_data,
    breadcrumbs_for_path,
    faq_structured_data,
    generate_robots_txt,
    generate_sitemap,
    local_business_structured_data,
    meta_for_path,
    organization_structured_data,
    service_structured_data,
)
from talencor.services.site_content import get_service

router = APIRouter()
api_router = APIRouter()

XML_MEDIA_TYPE = "application/xml"
SITEMAP_CACHE = {"Cache-Control": "public, max-age=3600"}


@router.get("/sitemap.xml", include_in_schema=False)
async def sitemap():
    return Response(generate_sitemap(SITEMAP_ENTRIES), media_type=XML_MEDIA_TYPE, headers=SITEMAP_CACHE)


@router.get("/sitemap-services.xml", include_in_schema=False)
async def sitemap_services():
    return Response(
        generate_sitemap(SERVICE_SITEMAP_ENTRIES), media_type=XML_MEDIA_TYPE, headers=SITEMAP_CACHE
    )


@router.get("/sitemap-jobs.xml", include_in_schema=False)
async def sitemap_jobs():
    return Response(generate_sitemap(JOB_SITEMAP_ENTRIES), media_type=XML_MEDIA_TYPE, headers=SITEMAP_CACHE)


@router.get("/robots.txt", include_in_schema=False)
async def robots():
    return PlainTextResponse(generate_robots_txt(), headers={"Cache-Control": "public, max-age=86400"})


@api_router.get("/meta")
async def page_meta(path: str = Query(default="/", max_length=500)):
    return meta_for_path(path)


@api_router.get("/structured-data/{kind}")
async def structured_data(kind: str, path: str = Query(default="/", max_length=500)):
    """JSON-LD for organization, local-business, breadcrumb (by ``path``) or faq."""
    if kind == "organization":
        return organization_structured_data()
    if kind == "local-business":
        return local_business_structured_data()
    if kind == "breadcrumb":
        return breadcrumb_structured_data(breadcrumbs_for_path(path))
    if kind == "faq":
        return faq_structured_data()
    raise HTTPException(status_code=404, detail="Unknown structured data type")


@api_router.get("/structured-data/service/{service_id}")
async def service_data(service_id: str):
    service = get_service(service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service_structured_data(service["title"], service["description"], service["title"])
