"""Thin Playwright wrapper exposing the browser primitives the downloader needs."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

LAUNCH_ARGS: List[str] = [
    "--window-size=1280,720",
    "--no-sandbox",
    "--disable-gpu",
    "--disable-dev-shm-usage",
    "--disable-setuid-sandbox",
]

FETCH_TEXT_SCRIPT = """async (url) => {
    const res = await fetch(url);
    if (!res.ok) {
        throw new Error(`HTTP ${res.status} for ${url}`);
    }
    return await res.text();
}"""

FETCH_JSON_SCRIPT = """async (url) => {
    const res = await fetch(url, { credentials: 'include' });
    if (!res.ok) {
        return null;
    }
    return await res.json();
}"""

IS_VISIBLE_SCRIPT = """(selector) => {
    const el = document.querySelector(selector);
    return !!(el && el.offsetParent !== null);
}"""

TEXT_OF_SCRIPT = """(selector) => {
    const el = document.querySelector(selector);
    return el ? (el.innerText || el.textContent || '') : '';
}"""


class AuthenticationError(Exception):
    """Raised when the browser session is not (or no longer) logged in."""


class BrowserPage:
    """One tab of the shared browser context."""

    def __init__(self, page: Page) -> None:
        self._page = page

    async def goto(self, url: str, wait_until: str = "networkidle", timeout_ms: int = 60000) -> None:
        await self._page.goto(url, wait_until=wait_until, timeout=timeout_ms)

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        if arg is None:
            return await self._page.evaluate(expression)
        return await self._page.evaluate(expression, arg)

    async def body_text(self) -> str:
        return await self._page.evaluate("() => document.body ? document.body.innerText : ''")

    async def wait_for_visible(self, selector: str, timeout_ms: int) -> bool:
        try:
            await self._page.wait_for_selector(selector, state="visible", timeout=timeout_ms)
        except PlaywrightTimeoutError:
            return False
        return True

    async def has_element(self, selector: str) -> bool:
        return await self._page.query_selector(selector) is not None

    async def click(self, selector: str) -> None:
        # DOM click avoids overlay interception on the player controls.
        await self._page.eval_on_selector(selector, "el => el.click()")

    async def is_visible(self, selector: str) -> bool:
        return bool(await self._page.evaluate(IS_VISIBLE_SCRIPT, selector))

    async def text_of(self, selector: str) -> str:
        return await self._page.evaluate(TEXT_OF_SCRIPT, selector) or ""

    async def fetch_text(self, url: str) -> str:
        """Fetch a resource from inside the page so the session cookies apply."""

        return await self._page.evaluate(FETCH_TEXT_SCRIPT, url)

    async def fetch_json(self, url: str) -> Optional[Any]:
        return await self._page.evaluate(FETCH_JSON_SCRIPT, url)

    async def close(self) -> None:
        await self._page.close()


class BrowserSession:
    """Launches a visible Chromium so the operator can sign in manually.

    All pages share one context and therefore one cookie jar.
    """

    def __init__(self, headless: bool = False, default_timeout_ms: int = 60000) -> None:
        self.headless = headless
        self.default_timeout_ms = default_timeout_ms
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def start(self) -> "BrowserSession":
        logging.info("Launching browser (headless=%s)...", self.headless)
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.headless, args=LAUNCH_ARGS)
        self._context = await self._browser.new_context(no_viewport=True)
        self._context.set_default_timeout(self.default_timeout_ms)
        return self

    async def new_page(self) -> BrowserPage:
        if self._context is None:
            raise RuntimeError("Browser session has not been started")
        return BrowserPage(await self._context.new_page())

    async def close(self) -> None:
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as exc:  # pragma: no cover - browser already gone
                logging.debug("Browser close failed: %s", exc)
        if self._playwright is not None:
            await self._playwright.stop()
        self._browser = None
        self._context = None
        self._playwright = None

    async def __aenter__(self) -> "BrowserSession":
        return await self.start()

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.close()
