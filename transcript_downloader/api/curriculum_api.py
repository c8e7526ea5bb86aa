"""Paginated fetch of the subscriber curriculum through the logged-in browser."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List
from urllib.parse import urlencode

from pydantic import ValidationError

from ..models import CurriculumItem
from ..utils.browser import AuthenticationError, BrowserPage

CURRICULUM_PATH = "/api-2.0/courses/{course_id}/subscriber-curriculum-items/"
PAGE_SIZE = 200
MAX_PAGES = 20
PAGE_TIMEOUT_MS = 90000
PAGE_SETTLE_SECONDS = 1.5

CURRICULUM_PARAMS: Dict[str, Any] = {
    "page_size": PAGE_SIZE,
    "fields[lecture]": "title,object_index,is_published,sort_order,created,asset,supplementary_assets,is_free",
    "fields[quiz]": "title,object_index,is_published,sort_order,type",
    "fields[practice]": "title,object_index,is_published,sort_order",
    "fields[chapter]": "title,object_index,is_published,sort_order",
    "fields[asset]": "title,filename,asset_type,status,time_estimation,is_external,transcript,captions",
    "caching_intent": "True",
}


class CurriculumError(ValueError):
    """Raised when a curriculum page cannot be parsed."""


def build_curriculum_url(origin: str, course_id: str | int) -> str:
    path = CURRICULUM_PATH.format(course_id=course_id)
    return f"{origin.rstrip('/')}{path}?{urlencode(CURRICULUM_PARAMS)}"


def looks_like_html(body: str) -> bool:
    head = body.lstrip()[:32].lower()
    return head.startswith("<!doctype html") or head.startswith("<html")


def parse_curriculum_page(body: str, page_index: int) -> Dict[str, Any]:
    """Validates one listing envelope and returns it as a dict."""

    if looks_like_html(body):
        raise AuthenticationError(
            "HTML response received instead of JSON while fetching curriculum; the session is not logged in."
        )
    try:
        envelope = json.loads(body)
    except json.JSONDecodeError as exc:
        raise CurriculumError(f"Failed to parse curriculum JSON on page {page_index}: {exc}") from exc
    if not isinstance(envelope, dict) or not isinstance(envelope.get("results"), list):
        raise CurriculumError(f"Curriculum response missing results on page {page_index}")
    return envelope


class CurriculumAPI:
    """Walks the listing endpoint following ``next`` links."""

    def __init__(self, page: BrowserPage, origin: str, settle_seconds: float = PAGE_SETTLE_SECONDS) -> None:
        self._page = page
        self.origin = origin.rstrip("/")
        self.settle_seconds = settle_seconds

    def _absolute(self, next_url: str) -> str:
        if next_url.startswith("http"):
            return next_url
        return f"{self.origin}{next_url}"

    async def fetch_items(self, course_id: str | int) -> List[CurriculumItem]:
        url: str | None = build_curriculum_url(self.origin, course_id)
        raw_items: List[Dict[str, Any]] = []
        page_index = 0

        while url and page_index < MAX_PAGES:
            page_index += 1
            logging.info("Fetching curriculum page %s...", page_index)
            await self._page.goto(url, wait_until="networkidle", timeout_ms=PAGE_TIMEOUT_MS)
            await asyncio.sleep(self.settle_seconds)

            body = await self._page.body_text()
            envelope = parse_curriculum_page(body or "", page_index)
            raw_items.extend(envelope["results"])

            next_url = envelope.get("next")
            url = self._absolute(next_url) if next_url else None

        if url:
            logging.warning("Stopped after %s curriculum pages; remaining pages were not fetched", MAX_PAGES)

        try:
            return [CurriculumItem.model_validate(entry) for entry in raw_items]
        except ValidationError as exc:
            raise CurriculumError(f"Malformed curriculum item: {exc}") from exc
