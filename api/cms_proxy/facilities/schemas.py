"""
Pydantic response schemas for facility endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class FacilitySummary(BaseModel):
    ccn: str
    name: str
    city: str
    state: str


class FacilityDetail(FacilitySummary):
    address: str
    phone: str
    # Relayed exactly as the upstream row holds it.
    beds: Any
    type: str
