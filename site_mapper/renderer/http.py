# site_mapper/renderer/http.py
"""
Static-HTML renderer: fetches pages with aiohttp, no JavaScript.

Handles HTTP requests with retry/backoff on 5xx/429 and a per-request
timeout. Links are selected from the returned markup with BeautifulSoup, so
pages that build their navigation client-side need the browser renderer.
"""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_mapper.crawler.errors import ExtractionError, FatalRunError, NavigationError
from site_mapper.logger import logger
from site_mapper.parser.html_parser import select_links

__all__ = ("HttpRenderer", "HttpPage")

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)


class HttpPage:
    """Page context holding the HTML of one fetched URL."""

    def __init__(self, session: ClientSession, retry_times: int = 0) -> None:
        self._session = session
        self._retry_times = retry_times
        self.url: Optional[str] = None
        self.content: Optional[str] = None

    async def navigate(self, url: str, wait_until: str, timeout: float) -> None:
        """
        Fetch *url*. ``wait_until`` has no meaning without a browser and is ignored.

        *timeout* bounds all attempts together: a retry whose backoff would
        run past it is not made, and the last HTTP error is raised instead.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        attempts = 0
        while True:
            remaining = max(deadline - loop.time(), 0.001)
            try:
                async with self._session.get(url, timeout=ClientTimeout(total=remaining)) as resp:
                    if resp.status in RETRY_STATUS:
                        raise ClientError(f"HTTP {resp.status} for {url}")
                    if resp.status >= 400:
                        raise NavigationError(f"HTTP {resp.status} for {url}")
                    self.url = str(resp.url)
                    self.content = await resp.text(errors="replace")
                    return
            except asyncio.TimeoutError as exc:
                # no retry on timeout
                raise NavigationError(f"Navigation timeout of {timeout:g} s exceeded: {url}") from exc
            except ClientError as exc:
                attempts += 1
                backoff = min(2 ** attempts, 60)
                if attempts > self._retry_times or loop.time() + backoff >= deadline:
                    raise NavigationError(str(exc) or type(exc).__name__) from exc
                logger.debug("Retry %d/%d for %s after %d s", attempts, self._retry_times, url, backoff)
                await asyncio.sleep(backoff)

    async def query_links(self, selector: str) -> List[str]:
        if self.content is None or self.url is None:
            raise ExtractionError("page has not been loaded")
        return select_links(self.content, self.url, selector)

    async def close(self) -> None:
        self.content = None


class HttpRenderer:
    """Fetches pages over a shared :class:`aiohttp.ClientSession`."""

    def __init__(
        self,
        *,
        user_agent: str = "SiteMapper/0.1",
        timeout: float = 30.0,
        retry_times: int = 0,
    ) -> None:
        self.user_agent = user_agent
        self.timeout = timeout
        self.retry_times = retry_times
        self.session: Optional[ClientSession] = None

    async def __aenter__(self) -> HttpRenderer:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.timeout),
            headers={"User-Agent": self.user_agent},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    @asynccontextmanager
    async def open_page(self) -> AsyncIterator[HttpPage]:
        if self.session is None or self.session.closed:
            raise FatalRunError("HTTP session is not open")
        page = HttpPage(self.session, self.retry_times)
        try:
            yield page
        finally:
            await page.close()
