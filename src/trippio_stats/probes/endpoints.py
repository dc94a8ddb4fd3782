"""Endpoint probes: one remote query per method, each independently fallible."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from trippio_stats.domain.exceptions import ProbeShapeError
from trippio_stats.domain.interfaces import IRemoteClient
from trippio_stats.domain.models import UserRecord
from trippio_stats.utils.dates import month_to_date_window

from .decoders import decode_amount, decode_count, decode_records, decode_user_page


REVENUE_PATH = "/api/order/revenue"
ORDER_COUNT_PATH = "/api/order/count"
USER_PAGING_PATH = "/api/admin/user/paging"
HOTELS_PATH = "/api/hotel"
ORDERS_PATH = "/api/order"
BOOKINGS_PATH = "/api/booking"


class EndpointProbes:
    """Typed queries against the storefront API.

    Each method performs exactly one request and either returns its decoded
    value or raises a ``ProbeError`` subclass. Nothing here holds state
    between calls.
    """

    def __init__(self, client: IRemoteClient) -> None:
        self._client = client

    async def fetch_revenue(self, start: datetime, end: datetime) -> float:
        payload = await self._client.get_json(
            REVENUE_PATH, params=_range_params(start, end)
        )
        return decode_amount(payload, REVENUE_PATH)

    async def fetch_month_to_date_revenue(self, now: datetime) -> float:
        start, end = month_to_date_window(now)
        return await self.fetch_revenue(start, end)

    async def fetch_order_count(self, start: datetime, end: datetime) -> int:
        payload = await self._client.get_json(
            ORDER_COUNT_PATH, params=_range_params(start, end)
        )
        return decode_count(payload, ORDER_COUNT_PATH)

    async def fetch_user_count(self) -> int:
        page = decode_user_page(
            await self._client.get_json(USER_PAGING_PATH, params=_paging_params(1)),
            USER_PAGING_PATH,
        )
        if page.row_count is None:
            raise ProbeShapeError(
                "User listing has no rowCount", context={"endpoint": USER_PAGING_PATH}
            )
        return page.row_count

    async def fetch_user_page(self, page_size: int = 100) -> List[UserRecord]:
        page = decode_user_page(
            await self._client.get_json(
                USER_PAGING_PATH, params=_paging_params(page_size)
            ),
            USER_PAGING_PATH,
        )
        return list(page.results or [])

    async def fetch_hotel_list(self) -> List[Any]:
        return decode_records(await self._client.get_json(HOTELS_PATH), HOTELS_PATH)

    async def fetch_order_count_for_user(self, user_id: str | int) -> int:
        path = f"{ORDERS_PATH}/user/{user_id}"
        return len(decode_records(await self._client.get_json(path), path))

    async def fetch_booking_count_for_user(self, user_id: str | int) -> int:
        path = f"{BOOKINGS_PATH}/user/{user_id}"
        return len(decode_records(await self._client.get_json(path), path))

    async def fetch_global_order_count(self) -> int:
        payload = await self._client.get_json(ORDERS_PATH)
        return len(decode_records(payload, ORDERS_PATH))

    async def fetch_global_booking_count(self) -> int:
        payload = await self._client.get_json(BOOKINGS_PATH)
        return len(decode_records(payload, BOOKINGS_PATH))


def _range_params(start: datetime, end: datetime) -> dict[str, str]:
    return {"from": start.isoformat(), "to": end.isoformat()}


def _paging_params(page_size: int, keyword: Optional[str] = None) -> dict[str, Any]:
    return {"keyword": keyword or "", "pageIndex": 1, "pageSize": page_size}
