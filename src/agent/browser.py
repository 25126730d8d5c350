from __future__ import annotations

import logging

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from src.config import settings
from .page_snapshot import PageSnapshot, snapshot_from_capture

# Serializes the whole document element tree so tag indexes and xpaths stay
# document-wide; the element matched by the selector carries ``root: true``.
CAPTURE_SCRIPT = """
(rootSelector) => {
    const root = rootSelector ? document.querySelector(rootSelector) : (document.body || document.documentElement);
    if (!root) {
        return null;
    }
    const isVisible = (el) => {
        const style = window.getComputedStyle(el);
        if (!style || style.display === "none" || style.visibility === "hidden") {
            return false;
        }
        if (el.tagName === "INPUT" && (el.type || "").toLowerCase() === "hidden") {
            return false;
        }
        return !!(el.offsetWidth || el.offsetHeight || el.getClientRects().length);
    };
    const serialize = (el) => {
        const attributes = {};
        for (const attr of Array.from(el.attributes)) {
            attributes[attr.name] = attr.value;
        }
        if ((el.tagName === "INPUT" || el.tagName === "BUTTON") && typeof el.value === "string") {
            attributes.value = el.value;
        }
        const children = [];
        for (const child of Array.from(el.childNodes)) {
            if (child.nodeType === Node.ELEMENT_NODE) {
                children.push(serialize(child));
            } else if (child.nodeType === Node.TEXT_NODE) {
                children.push(child.nodeValue || "");
            }
        }
        return {
            tag: el.tagName,
            attributes,
            visible: isVisible(el),
            root: el === root,
            children,
        };
    };
    return serialize(document.documentElement);
}
"""


class BrowserSession:
    def __init__(self) -> None:
        self.browser: Browser | None = None
        self.context: BrowserContext | None = None
        self.page: Page | None = None
        self._playwright: Playwright | None = None

    async def __aenter__(self) -> "BrowserSession":
        self._playwright = await async_playwright().start()
        self.browser = await self._playwright.chromium.launch(headless=settings.headless)
        self.context = await self.browser.new_context()
        self.page = await self.context.new_page()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.context:
            await self.context.close()
        if self.browser:
            await self.browser.close()
        if self._playwright:
            await self._playwright.stop()

    def _require_page(self) -> Page:
        if not self.page:
            raise RuntimeError("Browser page is not initialized. Use within an async context manager.")
        return self.page

    async def goto(self, url: str, wait_ms: int | None = None) -> None:
        """
        Navigate to a URL and give the app a moment to hydrate.
        """
        page = self._require_page()

        await page.goto(url, wait_until="domcontentloaded", timeout=settings.navigation_timeout_ms)
        try:
            await page.wait_for_load_state("networkidle", timeout=5000)
        except PlaywrightTimeoutError:
            print("[browser] networkidle wait timed out, continuing anyway")

        wait_ms = settings.settle_ms if wait_ms is None else wait_ms
        if wait_ms > 0:
            await page.wait_for_timeout(wait_ms)

    def __repr__(self) -> str:
        return f"BrowserSession(headless={settings.headless})"

    async def capture_snapshot(self, root_selector: str | None = None) -> PageSnapshot | None:
        """
        Materialize the current document into a PageSnapshot rooted at
        ``root_selector`` (defaults to ``settings.root_selector``).

        Visibility is taken from computed styles at capture time. Returns None
        when the selector matches nothing.
        """

        page = self._require_page()
        selector = root_selector or settings.root_selector
        payload = await page.evaluate(CAPTURE_SCRIPT, selector)
        if not payload:
            logging.warning("capture_snapshot: root_not_found selector=%s url=%s", selector, page.url)
            return None
        return snapshot_from_capture(payload, url=page.url)
