# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections import Counter
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict, Iterable, List, Optional

import pytest

from site_mapper.config import CrawlerConfig
from site_mapper.crawler.errors import FatalRunError, NavigationError
from site_mapper.logger import configure
from site_mapper.parser.html_parser import select_links

BASE = "http://localhost:4321"


def url(path: str) -> str:
    """Absolute URL on the test site."""
    return BASE + path


class FakePage:
    """Page context over a synthetic link graph."""

    def __init__(self, renderer: FakeRenderer) -> None:
        self.renderer = renderer
        self.url: Optional[str] = None
        self.closed = False

    async def navigate(self, target: str, wait_until: str, timeout: float) -> None:
        r = self.renderer
        r.renders[target] += 1
        r.order.append(target)
        if r.delay:
            await asyncio.sleep(r.delay)
        if target in r.hangs:
            await asyncio.sleep(3600)
        if target in r.crashes:
            raise RuntimeError(f"renderer crashed on {target}")
        if target in r.failures or target not in r.graph:
            raise NavigationError(f"net::ERR_CONNECTION_REFUSED at {target}")
        self.url = target

    async def query_links(self, selector: str) -> List[str]:
        assert self.url is not None
        if self.url in self.renderer.broken_extraction:
            raise RuntimeError("Execution context was destroyed")
        html = "".join(f'<a href="{href}">x</a>' for href in self.renderer.graph[self.url])
        return select_links(html, self.url, selector)

    async def close(self) -> None:
        self.closed = True


class FakeRenderer:
    """
    Renderer stub over ``{url: [href, ...]}``.

    Counts renders per URL, page contexts opened/closed and the peak number
    of simultaneously open pages.
    """

    def __init__(
        self,
        graph: Dict[str, List[str]],
        *,
        failures: Iterable[str] = (),
        hangs: Iterable[str] = (),
        crashes: Iterable[str] = (),
        broken_extraction: Iterable[str] = (),
        fatal_after: Optional[int] = None,
        delay: float = 0.0,
    ) -> None:
        self.graph = graph
        self.failures = set(failures)
        self.hangs = set(hangs)
        self.crashes = set(crashes)
        self.broken_extraction = set(broken_extraction)
        self.fatal_after = fatal_after
        self.delay = delay
        self.renders: Counter[str] = Counter()
        self.order: List[str] = []
        self.opened = 0
        self.closed = 0
        self.open_now = 0
        self.max_open = 0
        self.entered = 0
        self.exited = 0

    async def __aenter__(self) -> FakeRenderer:
        self.entered += 1
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.exited += 1

    @asynccontextmanager
    async def open_page(self) -> AsyncIterator[FakePage]:
        if self.fatal_after is not None and self.opened >= self.fatal_after:
            raise FatalRunError("browser has been closed")
        self.opened += 1
        self.open_now += 1
        self.max_open = max(self.max_open, self.open_now)
        page = FakePage(self)
        try:
            yield page
        finally:
            await page.close()
            self.closed += 1
            self.open_now -= 1


@pytest.fixture(autouse=True)
def _logging_to_current_stdout():
    """Bind the project logger to the stdout of the running test."""
    configure(level="DEBUG")
    yield


@pytest.fixture()
def make_config(tmp_path: Path):
    """Factory for CrawlerConfig with fast test defaults."""

    def _make(**overrides) -> CrawlerConfig:
        values = {
            "start_url": BASE,
            "timeout": 1.0,
            "renderer": "http",
            "output_dir": tmp_path,
        }
        values.update(overrides)
        return CrawlerConfig(**values)

    return _make


@pytest.fixture()
def example_graph() -> Dict[str, List[str]]:
    """Root links to /a and /b; /a links to /b and /c; /c links to /d."""
    return {
        url("/"): ["/a", "/b"],
        url("/a"): ["/b", "/c"],
        url("/b"): [],
        url("/c"): ["/d"],
        url("/d"): [],
    }
