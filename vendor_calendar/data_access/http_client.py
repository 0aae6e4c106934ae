"""REST implementation of the calendar data-access contract."""

import logging
from datetime import date
from typing import Any, Optional

import httpx

from vendor_calendar.config import settings
from vendor_calendar.data_access.base import DataAccess, DataUnavailableError
from vendor_calendar.data_access.parsing import serialize_bulk_request, serialize_off_day_request
from vendor_calendar.schemas.off_day_schema import OffDayRequest

logger = logging.getLogger(__name__)


class HttpDataAccess(DataAccess):
    """Talks to the marketplace REST backend.

    Endpoints:
        GET    /api/bookings/vendor/{vendor_id}?startDate=&endDate=[&serviceId=]
        GET    /api/vendors/{vendor_id}/off-days
        POST   /api/vendors/{vendor_id}/off-days
        POST   /api/vendors/{vendor_id}/off-days/bulk
        DELETE /api/vendors/{vendor_id}/off-days/{off_day_id}

    Every response is an envelope ``{"success": bool, ...}``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.backend.api_base_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.backend.timeout_seconds,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpDataAccess":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise DataUnavailableError(
                f"{method} {path} failed with HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise DataUnavailableError(f"{method} {path} failed: {e}") from e
        except ValueError as e:
            raise DataUnavailableError(f"{method} {path} returned malformed JSON") from e

        if not isinstance(data, dict):
            raise DataUnavailableError(f"{method} {path} returned an unexpected payload")
        if data.get("success") is False:
            raise DataUnavailableError(
                f"{method} {path} was rejected: {data.get('message') or data.get('error') or 'unknown error'}"
            )
        return data

    @staticmethod
    def _items(data: dict[str, Any], key: str, path: str) -> list[dict[str, Any]]:
        items = data.get(key, [])
        if not isinstance(items, list):
            raise DataUnavailableError(f"{path}: '{key}' is not a list")
        return items

    async def fetch_bookings(
        self,
        vendor_id: str,
        start: date,
        end: date,
        service_id: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        path = f"/api/bookings/vendor/{vendor_id}"
        params = {"startDate": start.isoformat(), "endDate": end.isoformat()}
        if service_id:
            params["serviceId"] = service_id
        data = await self._request("GET", path, params=params)
        bookings = self._items(data, "bookings", path)
        logger.debug("Fetched %d booking(s) for vendor %s", len(bookings), vendor_id)
        return bookings

    async def fetch_off_days(self, vendor_id: str) -> list[dict[str, Any]]:
        path = f"/api/vendors/{vendor_id}/off-days"
        data = await self._request("GET", path)
        off_days = self._items(data, "offDays", path)
        logger.debug("Fetched %d off-day(s) for vendor %s", len(off_days), vendor_id)
        return off_days

    async def set_off_day(
        self,
        vendor_id: str,
        day: date,
        reason: str,
        is_recurring: bool = False,
        recurring_pattern: Optional[str] = None,
    ) -> bool:
        path = f"/api/vendors/{vendor_id}/off-days"
        body = serialize_off_day_request(day, reason, is_recurring, recurring_pattern)
        await self._request("POST", path, json=body)
        logger.info("Off-day set for vendor %s on %s", vendor_id, day)
        return True

    async def set_off_days(self, vendor_id: str, off_days: list[OffDayRequest]) -> int:
        path = f"/api/vendors/{vendor_id}/off-days/bulk"
        data = await self._request("POST", path, json={"offDays": serialize_bulk_request(off_days)})
        created = data.get("total")
        if not isinstance(created, int):
            created = len(self._items(data, "offDays", path))
        for error in data.get("errors") or []:
            logger.warning("Off-day skipped for vendor %s: %s", vendor_id, error)
        logger.info("Created %d of %d off-day(s) for vendor %s", created, len(off_days), vendor_id)
        return created

    async def remove_off_day(self, vendor_id: str, off_day_id: str) -> bool:
        path = f"/api/vendors/{vendor_id}/off-days/{off_day_id}"
        await self._request("DELETE", path)
        logger.info("Off-day %s removed for vendor %s", off_day_id, vendor_id)
        return True
