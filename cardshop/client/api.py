from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=5.0)


class CardsApiError(Exception):
    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict) and data.get("detail") is not None:
        detail = data["detail"]
        return detail if isinstance(detail, str) else str(detail)
    return response.text or response.reason_phrase


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_error:
        raise CardsApiError(response.status_code, _error_detail(response))


class CardsAdminClient:
    """Async client for the /admin/cards endpoints."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: httpx.Timeout | float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "CardsAdminClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _cards_path(product_id: str, suffix: str = "") -> str:
        return f"/admin/cards/{quote(product_id, safe='')}{suffix}"

    async def add_cards_batch(self, product_id: str, keys: list[str]) -> int:
        logger.debug("[cards-client] batch product_id=%s size=%s", product_id, len(keys))
        response = await self._client.post(self._cards_path(product_id, "/batch"), json={"keys": keys})
        _raise_for_status(response)
        return int(response.json()["success"])

    async def get_product_cards(self, product_id: str) -> dict[str, Any]:
        response = await self._client.get(self._cards_path(product_id))
        _raise_for_status(response)
        return response.json()

    async def delete_card(self, card_id: int) -> None:
        response = await self._client.delete(f"/admin/cards/item/{int(card_id)}")
        _raise_for_status(response)

    async def delete_all_cards(self, product_id: str) -> int:
        response = await self._client.delete(self._cards_path(product_id))
        _raise_for_status(response)
        return int(response.json()["deleted"])
