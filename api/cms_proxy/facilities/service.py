"""
Facility lookups against the CMS homes dataset.

Search flow:
1) Build a conjunctive filter from name/city/state (no filter -> no call)
2) Primary fetch
3) If it came back empty, walk the fallback ladder:
   a) state-only query -> same state predicate with a wider limit
   b) state + name/city -> drop the state predicate
4) Keep the first MAX_SEARCH_RESULTS rows and map them to summaries
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from cms_proxy.core.cms import CmsApiError, CmsClient
from cms_proxy.core.columns import column_value
from cms_proxy.core.config import Settings
from cms_proxy.core.errors import ApiError

from . import filters
from .schemas import FacilityDetail, FacilitySummary


SEARCH_LIMIT = 100
STATE_WIDE_LIMIT = 200
MAX_SEARCH_RESULTS = 20
FACILITY_TYPE = "Skilled Nursing Facility"

logger = logging.getLogger(__name__)


def _text(value: Any, fallback: str) -> str:
    return fallback if value is None else str(value)


def _present(value: str | None) -> str | None:
    """
    `value` unchanged, or None when it is missing or whitespace-only.
    """
    if value is None or not value.strip():
        return None
    return value


def to_summary(row: Sequence[Any], columns: dict[str, int]) -> FacilitySummary:
    return FacilitySummary(
        ccn=_text(column_value(row, columns, "ccn"), "UNKNOWN"),
        name=_text(column_value(row, columns, "name"), "Unknown Facility"),
        city=_text(column_value(row, columns, "city"), "Unknown"),
        state=_text(column_value(row, columns, "state"), "Unknown"),
    )


def to_detail(row: Sequence[Any], columns: dict[str, int], *, ccn: str) -> FacilityDetail:
    city = column_value(row, columns, "city")
    state = column_value(row, columns, "state")
    zip_code = column_value(row, columns, "zip")
    beds = column_value(row, columns, "beds")
    address = f"{_text(city, '')}, {_text(state, '')} {_text(zip_code, '')}".strip()
    return FacilityDetail(
        ccn=_text(column_value(row, columns, "ccn"), ccn),
        name=_text(column_value(row, columns, "name"), "Unknown"),
        city=_text(city, "Unknown"),
        state=_text(state, "Unknown"),
        address=address,
        phone=_text(column_value(row, columns, "phone"), "N/A"),
        beds="N/A" if beds is None else beds,
        type=FACILITY_TYPE,
    )


async def _fallback_fetch(
    client: CmsClient,
    dataset: str,
    *,
    strategy: str,
    filter_expression: str,
    limit: int,
) -> list[list[Any]]:
    """
    One rung of the fallback ladder. Failures are logged and read as "no rows".
    """
    logger.info("search_retry strategy=%s filter=%r limit=%s", strategy, filter_expression, limit)
    try:
        return await client.fetch_rows(dataset, filter_expression=filter_expression, limit=limit)
    except CmsApiError as e:
        logger.warning("search_retry_failed strategy=%s error=%s", strategy, e)
        return []


async def search_facilities(
    client: CmsClient,
    settings: Settings,
    *,
    name: str | None = None,
    city: str | None = None,
    state: str | None = None,
) -> list[FacilitySummary]:
    name, city, state = _present(name), _present(city), _present(state)

    filter_expression = filters.search_filter(name=name, city=city, state=state)
    if not filter_expression:
        return []

    dataset = settings.homes_dataset
    try:
        rows = await client.fetch_rows(dataset, filter_expression=filter_expression, limit=SEARCH_LIMIT)
    except CmsApiError as e:
        logger.error("search_failed filter=%r error=%s", filter_expression, e)
        raise ApiError(500, "Failed to search facilities", details=str(e)) from e

    if not rows:
        logger.info("search_empty filter=%r", filter_expression)

        if state and not name and not city:
            retry_rows = await _fallback_fetch(
                client,
                dataset,
                strategy="state_wide",
                filter_expression=filters.state_filter(state),
                limit=STATE_WIDE_LIMIT,
            )
            if retry_rows:
                rows = retry_rows

        if not rows and state and (name or city):
            retry_rows = await _fallback_fetch(
                client,
                dataset,
                strategy="drop_state",
                filter_expression=filters.search_filter(name=name, city=city, state=None),
                limit=SEARCH_LIMIT,
            )
            if retry_rows:
                rows = retry_rows

    columns = settings.facility_columns
    return [to_summary(row, columns) for row in rows[:MAX_SEARCH_RESULTS]]


async def get_facility(client: CmsClient, settings: Settings, ccn: str) -> FacilityDetail:
    try:
        rows = await client.fetch_rows(
            settings.homes_dataset,
            filter_expression=filters.provider_filter(ccn),
            limit=1,
        )
    except CmsApiError as e:
        logger.error("facility_failed ccn=%s error=%s", ccn, e)
        raise ApiError(500, "Failed to fetch facility", details=str(e)) from e

    if not rows:
        raise ApiError(404, "Facility not found")

    return to_detail(rows[0], settings.facility_columns, ccn=ccn)
