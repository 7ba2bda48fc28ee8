from __future__ import annotations

import logging
from typing import Iterable

import httpx

from cardshop.db import settings

logger = logging.getLogger(__name__)

ADMIN_DASHBOARD_PATH = "/admin"
STOREFRONT_ROOT_PATH = "/"
ADMIN_CATEGORIES_PATH = "/admin/categories"
ADMIN_REVIEWS_PATH = "/admin/reviews"

_http_timeout = httpx.Timeout(5.0, connect=3.0)


def admin_cards_path(product_id: str) -> str:
    return f"/admin/cards/{product_id}"


def card_mutation_paths(product_id: str) -> list[str]:
    return [ADMIN_DASHBOARD_PATH, admin_cards_path(product_id), STOREFRONT_ROOT_PATH]


class PathRevalidator:
    """Tells the storefront which rendered pages are stale after a mutation.

    With REVALIDATE_URL configured the paths are posted to the storefront;
    otherwise they are only logged. Delivery problems never fail the
    mutation that triggered them.
    """

    def __init__(self, url: str | None = None, secret: str | None = None) -> None:
        self.url = url
        self.secret = secret

    def revalidate(self, paths: Iterable[str]) -> None:
        unique: list[str] = []
        for path in paths:
            if path and path not in unique:
                unique.append(path)
        if not unique:
            return
        if not self.url:
            logger.debug("[revalidate] paths=%s (no REVALIDATE_URL configured)", unique)
            return

        headers = {"x-revalidate-secret": self.secret} if self.secret else {}
        try:
            with httpx.Client(timeout=_http_timeout) as client:
                resp = client.post(self.url, json={"paths": unique}, headers=headers)
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("[revalidate] failed to notify %s paths=%s: %s", self.url, unique, exc)
            return
        logger.info("[revalidate] paths=%s", unique)


_revalidator = PathRevalidator(url=settings.revalidate_url, secret=settings.revalidate_secret)


def get_revalidator() -> PathRevalidator:
    return _revalidator
