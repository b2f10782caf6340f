"""
Deficiency (inspection citation) lookups against the CMS deficiency dataset.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Sequence

from cms_proxy.core.cms import CmsApiError, CmsClient
from cms_proxy.core.columns import column_value
from cms_proxy.core.config import Settings
from cms_proxy.core.errors import ApiError
from cms_proxy.facilities import filters

from .schemas import Deficiency


DEFICIENCY_LIMIT = 20

logger = logging.getLogger(__name__)


def _parse_date(value: Any) -> datetime | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        # Numeric timestamps are epoch milliseconds.
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            return None
    return None


def format_date(value: Any) -> str:
    """
    US short date (M/D/YYYY) for a CMS date field; "N/A" when absent.

    Unparseable values are returned as-is.
    """
    if value is None:
        return "N/A"
    parsed = _parse_date(value)
    if parsed is None:
        return str(value)
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def to_deficiency(row: Sequence[Any], columns: dict[str, int]) -> Deficiency:
    ftag = column_value(row, columns, "ftag")
    description = column_value(row, columns, "description")
    return Deficiency(
        ftag="N/A" if ftag is None else str(ftag),
        description="Deficiency noted" if description is None else str(description),
        date=format_date(column_value(row, columns, "date")),
    )


async def list_deficiencies(client: CmsClient, settings: Settings, ccn: str) -> list[Deficiency]:
    try:
        rows = await client.fetch_rows(
            settings.deficiencies_dataset,
            filter_expression=filters.provider_filter(ccn),
            limit=DEFICIENCY_LIMIT,
        )
    except CmsApiError as e:
        logger.error("deficiencies_failed ccn=%s error=%s", ccn, e)
        raise ApiError(500, "Failed to fetch deficiencies", details=str(e)) from e

    columns = settings.deficiency_columns
    return [to_deficiency(row, columns) for row in rows]
