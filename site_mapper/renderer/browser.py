# site_mapper/renderer/browser.py
"""
Headless-browser renderer built on Playwright.

One Chromium process is launched when the renderer is entered and closed when
it exits; each visit gets its own tab which is closed as soon as the visit is
over, whether it succeeded or not.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from site_mapper.crawler.errors import ExtractionError, FatalRunError, NavigationError
from site_mapper.logger import logger

__all__ = ("PlaywrightRenderer", "PlaywrightPage")

_HREF_SCRIPT = "anchors => anchors.map(a => a.href)"


class PlaywrightPage:
    """Page context wrapping a Playwright :class:`~playwright.async_api.Page`."""

    def __init__(self, page: Page) -> None:
        self._page = page

    async def navigate(self, url: str, wait_until: str, timeout: float) -> None:
        try:
            response = await self._page.goto(url, wait_until=wait_until, timeout=timeout * 1000)
        except PlaywrightTimeoutError as exc:
            raise NavigationError(f"Navigation timeout of {timeout:g} s exceeded: {url}") from exc
        except PlaywrightError as exc:
            raise NavigationError(str(exc)) from exc
        if response is not None and response.status >= 400:
            raise NavigationError(f"HTTP {response.status} for {url}")

    async def query_links(self, selector: str) -> List[str]:
        try:
            return await self._page.eval_on_selector_all(selector, _HREF_SCRIPT)
        except PlaywrightError as exc:
            raise ExtractionError(str(exc)) from exc

    async def close(self) -> None:
        if self._page.is_closed():
            return
        try:
            await self._page.close()
        except PlaywrightError as exc:
            logger.warning("Error closing tab %s: %s", self._page.url, exc)


class PlaywrightRenderer:
    """Renders pages in a headless Chromium instance."""

    def __init__(self, *, headless: bool = True, user_agent: Optional[str] = None) -> None:
        self.headless = headless
        self.user_agent = user_agent
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> PlaywrightRenderer:
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
        except PlaywrightError as exc:
            await self._shutdown()
            raise FatalRunError(f"could not launch browser: {exc}") from exc
        logger.debug("Browser launched (headless=%s)", self.headless)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._shutdown()
        logger.debug("Browser closed")

    @asynccontextmanager
    async def open_page(self) -> AsyncIterator[PlaywrightPage]:
        if self._browser is None or not self._browser.is_connected():
            raise FatalRunError("browser is not running")
        try:
            page = await self._browser.new_page(user_agent=self.user_agent)
        except PlaywrightError as exc:
            if not self._browser.is_connected():
                raise FatalRunError(f"browser disconnected: {exc}") from exc
            raise NavigationError(f"could not open a new tab: {exc}") from exc
        context = PlaywrightPage(page)
        try:
            yield context
        finally:
            await context.close()

    async def _shutdown(self) -> None:
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as exc:
                logger.warning("Error closing browser: %s", exc)
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
