"""
Facility API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from cms_proxy.core.cms import CmsClient
from cms_proxy.core.config import Settings
from cms_proxy.core.dependencies import get_cms_client, get_settings

from . import service
from .schemas import FacilityDetail, FacilitySummary

router = APIRouter()


@router.get("/search-facility", response_model=list[FacilitySummary])
async def search_facility(
    name: str | None = Query(default=None),
    city: str | None = Query(default=None),
    state: str | None = Query(default=None),
    client: CmsClient = Depends(get_cms_client),
    settings: Settings = Depends(get_settings),
) -> list[FacilitySummary]:
    return await service.search_facilities(client, settings, name=name, city=city, state=state)


@router.get("/facility/{ccn}", response_model=FacilityDetail)
async def facility(
    ccn: str,
    client: CmsClient = Depends(get_cms_client),
    settings: Settings = Depends(get_settings),
) -> FacilityDetail:
    return await service.get_facility(client, settings, ccn)
