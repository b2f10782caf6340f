"""
Pydantic response schemas for deficiency endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel


class Deficiency(BaseModel):
    ftag: str
    description: str
    date: str
