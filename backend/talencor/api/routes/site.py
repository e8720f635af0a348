"""
Static site content for the frontend. Mount at /api/site.
"""
from fastapi import APIRouter, HTTPException

from talencor.services.site_content import (
    BENEFITS,
    COMPANY_INFO,
    FAQS,
    INQUIRY_TYPES,
    JOB_POSITIONS,
    SERVICES,
    STATISTICS,
    get_service,
)

router = APIRouter()


@router.get("/company")
async def company():
    return {**COMPANY_INFO, "statistics": STATISTICS}


@router.get("/services")
async def services():
    return SERVICES


@router.get("/services/{service_id}")
async def service(service_id: str):
    item = get_service(service_id)
    if not item:
        raise HTTPException(status_code=404, detail="Service not found")
    return item


@router.get("/job-positions")
async def job_positions():
    return JOB_POSITIONS


@router.get("/benefits")
async def benefits():
    return BENEFITS


@router.get("/inquiry-types")
async def inquiry_types():
    return INQUIRY_TYPES


@router.get("/faq")
async def faq():
    return FAQS
