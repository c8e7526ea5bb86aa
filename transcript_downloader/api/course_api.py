"""Resolves the numeric course id once the operator has logged in."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Tuple
from urllib.parse import urlparse

from ..utils.browser import AuthenticationError, BrowserPage
from ..utils.prompts import Prompter

COURSE_ID_API_PATH = "/api-2.0/courses/{slug}/?fields[course]=id"
MAX_ATTEMPTS = 3
VALIDATE_TIMEOUT_MS = 120000
VALIDATE_SETTLE_SECONDS = 2.0

DOM_COURSE_ID_SCRIPT = """() => {
    const el = document.querySelector('body[data-clp-course-id]');
    return el ? el.getAttribute('data-clp-course-id') : null;
}"""

BOOTSTRAP_COURSE_ID_SCRIPT = """() => {
    const boot = window.__udemy__ && window.__udemy__.bootstrap;
    if (boot && boot.data && boot.data.courseId) {
        return String(boot.data.courseId);
    }
    return null;
}"""

Probe = Callable[[], Awaitable[Optional[str]]]


def derive_course_slug(course_url: str) -> str:
    """Returns the path segment following ``course`` (``""`` when absent)."""

    parts = [part for part in urlparse(course_url).path.split("/") if part]
    if "course" in parts:
        position = parts.index("course")
        if position + 1 < len(parts):
            return parts[position + 1]
    return ""


def course_origin(course_url: str) -> str:
    parsed = urlparse(course_url)
    return f"{parsed.scheme}://{parsed.netloc}"


class CourseResolver:
    """Waits for a manual login, then extracts the course id from the live page."""

    def __init__(
        self,
        page: BrowserPage,
        prompter: Prompter,
        max_attempts: int = MAX_ATTEMPTS,
        settle_seconds: float = VALIDATE_SETTLE_SECONDS,
    ) -> None:
        self._page = page
        self._prompter = prompter
        self.max_attempts = max_attempts
        self.settle_seconds = settle_seconds

    async def resolve(self, course_url: str) -> str:
        logging.info("Manual login required (SSO / Okta / Google Authenticator).")
        logging.info("1) Use the opened browser window to sign in.")
        logging.info("2) After you reach the course page, come back here and press Enter.")
        await self._page.goto(course_url, wait_until="domcontentloaded")

        ready = await asyncio.to_thread(
            self._prompter.confirm,
            "Press Enter once the course page is visible and you are logged in (q to abort): ",
        )
        if not ready:
            raise AuthenticationError("Login was not confirmed by the operator.")

        last_error: Exception | None = None
        for attempt in range(1, self.max_attempts + 1):
            logging.info("Validating course access (attempt %s/%s)...", attempt, self.max_attempts)
            try:
                await self._page.goto(course_url, wait_until="networkidle", timeout_ms=VALIDATE_TIMEOUT_MS)
                await asyncio.sleep(self.settle_seconds)
                course_id = await self.extract_course_id(course_url)
            except Exception as exc:
                last_error = exc
                logging.warning("Navigation error: %s", exc)
                retry_message = "After fixing the issue in the browser, press Enter to retry: "
            else:
                if course_id:
                    return course_id
                logging.warning(
                    "Course ID not found yet. Confirm you are on the course page and logged in."
                )
                retry_message = "Press Enter to try again: "

            if attempt < self.max_attempts:
                await asyncio.to_thread(self._prompter.prompt_retry, retry_message)

        detail = str(last_error) if last_error else "Unknown issue loading the course page."
        raise AuthenticationError(f"Could not verify course access after manual login. {detail}")

    async def extract_course_id(self, course_url: str) -> Optional[str]:
        """Runs the id probes in order and returns the first hit."""

        for name, probe in self._probes(course_url):
            try:
                value = await probe()
            except Exception as exc:
                logging.warning("Course id lookup via %s failed: %s", name, exc)
                continue
            if value:
                logging.debug("Course id %s found via %s", value, name)
                return str(value)
        return None

    def _probes(self, course_url: str) -> List[Tuple[str, Probe]]:
        origin = course_origin(course_url)
        slug = derive_course_slug(course_url)
        return [
            ("DOM attribute", self._probe_dom_attribute),
            ("bootstrap data", self._probe_bootstrap),
            ("course API", lambda: self._probe_course_api(origin, slug)),
        ]

    async def _probe_dom_attribute(self) -> Optional[str]:
        return await self._page.evaluate(DOM_COURSE_ID_SCRIPT)

    async def _probe_bootstrap(self) -> Optional[str]:
        return await self._page.evaluate(BOOTSTRAP_COURSE_ID_SCRIPT)

    async def _probe_course_api(self, origin: str, slug: str) -> Optional[str]:
        if not slug:
            return None
        data = await self._page.fetch_json(f"{origin}{COURSE_ID_API_PATH.format(slug=slug)}")
        if isinstance(data, dict) and data.get("id"):
            return str(data["id"])
        return None
