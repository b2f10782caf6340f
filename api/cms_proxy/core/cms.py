"""
CMS open-data (Socrata views) HTTP client.

Used endpoint:
- GET /{dataset}/rows.json?filter=<expression>&limit=<n>
  -> [[field, field, ...], ...]  or  {"meta": {...}, "data": [[...], ...]}

Rows are positional arrays; see `core/columns.py` for the field tables.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


# CMS failures are explicit and separable from other runtime errors.
class CmsApiError(RuntimeError):
    pass


class CmsUnavailableError(CmsApiError):
    """The CMS API could not be reached (DNS, connect, timeout, ...)."""


class CmsStatusError(CmsApiError):
    """The CMS API answered with a non-2xx status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"CMS API returned {status_code}")
        self.status_code = status_code


def _normalize_base_url(base_url: str) -> str:
    base_url = (base_url or "").strip()
    if not base_url:
        raise CmsApiError("CMS_BASE_URL is empty.")
    return base_url.rstrip("/")


def _extract_rows(data: Any) -> list[list[Any]]:
    if isinstance(data, dict):
        data = data.get("data")
    if not isinstance(data, list):
        raise CmsApiError("CMS API returned an unexpected payload.")
    return [row for row in data if isinstance(row, list)]


class CmsClient:
    """
    Thin wrapper over one shared `httpx.AsyncClient`.

    The application opens it in its lifespan and closes it on shutdown. It
    keeps no per-request state.
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout_s: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=_normalize_base_url(base_url),
            timeout=timeout_s,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def fetch_rows(self, dataset: str, *, filter_expression: str, limit: int) -> list[list[Any]]:
        """
        Fetch up to `limit` rows of `dataset` matching `filter_expression`.

        Raises `CmsUnavailableError` on transport failures and
        `CmsStatusError` on non-2xx answers. No retries happen here.
        """
        dataset = (dataset or "").strip()
        if not dataset:
            raise CmsApiError("Dataset id is empty.")

        params = {"filter": filter_expression, "limit": str(limit)}
        try:
            resp = await self._http.get(f"/{dataset}/rows.json", params=params)
        except httpx.HTTPError as e:
            raise CmsUnavailableError(str(e) or type(e).__name__) from e

        if not resp.is_success:
            # Avoid dumping huge bodies; log a small snippet.
            logger.warning(
                "cms_request_failed dataset=%s status=%s body=%s",
                dataset,
                resp.status_code,
                resp.text[:300],
            )
            raise CmsStatusError(resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise CmsApiError("CMS API returned invalid JSON.") from e

        rows = _extract_rows(data)
        logger.debug("cms_rows dataset=%s limit=%s rows=%s", dataset, limit, len(rows))
        return rows
