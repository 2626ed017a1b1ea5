# site_mapper/renderer/base.py
"""
Interfaces between the crawl orchestrator and a rendering backend.

A renderer is an async context manager acquired once per run (browser
process, HTTP session). ``open_page()`` hands out a page context that is
closed on every exit path.
"""
from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import List, Protocol, runtime_checkable

__all__ = ("PageContext", "Renderer")


@runtime_checkable
class PageContext(Protocol):
    """A single tab or request scope."""

    async def navigate(self, url: str, wait_until: str, timeout: float) -> None:
        """Load *url*; raise NavigationError on timeout, network failure or HTTP >= 400."""
        ...

    async def query_links(self, selector: str) -> List[str]:
        """Return the resolved ``href`` of every element matching *selector*, in document order."""
        ...

    async def close(self) -> None:
        ...


@runtime_checkable
class Renderer(Protocol):
    async def __aenter__(self) -> Renderer:
        ...

    async def __aexit__(self, exc_type, exc, tb) -> None:
        ...

    def open_page(self) -> AbstractAsyncContextManager[PageContext]:
        ...
