"""
Deficiency API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from cms_proxy.core.cms import CmsClient
from cms_proxy.core.config import Settings
from cms_proxy.core.dependencies import get_cms_client, get_settings

from . import service
from .schemas import Deficiency

router = APIRouter()


@router.get("/deficiencies/{ccn}", response_model=list[Deficiency])
async def deficiencies(
    ccn: str,
    client: CmsClient = Depends(get_cms_client),
    settings: Settings = Depends(get_settings),
) -> list[Deficiency]:
    return await service.list_deficiencies(client, settings, ccn)
