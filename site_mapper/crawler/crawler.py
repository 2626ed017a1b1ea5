# === FILE: site_mapper/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, List, Optional

from site_mapper.aggregator import CrawlReport, CrawlSession
from site_mapper.config import CrawlerConfig
from site_mapper.crawler.errors import FatalRunError, NavigationError
from site_mapper.crawler.frontier import Frontier
from site_mapper.crawler.link_extractor import extract_links
from site_mapper.crawler.normalizer import normalize_url, origin_of
from site_mapper.renderer.base import Renderer

__all__ = ("CrawlOrchestrator",)

CheckpointHook = Callable[[CrawlReport], None]


class CrawlOrchestrator:
    """
    Walks a site from its root URL through a renderer.

    Every URL passes ``Unseen -> Visited&Pending -> Rendered | Failed``
    exactly once per session: the visited set is checked and updated before
    the page is opened, so neither cycles nor concurrent workers can render a
    page twice. Page failures are recorded in the session and never stop the
    walk; a :class:`FatalRunError` from the renderer does.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        renderer: Renderer,
        session: Optional[CrawlSession] = None,
        *,
        checkpoint: Optional[CheckpointHook] = None,
    ) -> None:
        self.config = config
        self.renderer = renderer
        self.session = session if session is not None else CrawlSession(include_stack=config.include_stack)
        self.checkpoint = checkpoint
        self.logger = logging.getLogger("SiteMapper")
        self.root_origin = origin_of(config.start_url)
        self.scope_prefix = normalize_url(config.scope_prefix or config.start_url, self.root_origin)
        self._dispatched = 0
        self._fatal: Optional[FatalRunError] = None

    def normalize(self, raw: str) -> Optional[str]:
        return normalize_url(raw, self.root_origin, self.scope_prefix)

    async def crawl(self, root_url: Optional[str] = None) -> CrawlReport:
        """
        Visit everything reachable from *root_url* (default: ``config.start_url``).

        Calling it again with an already visited root is a no-op. A later call
        after a fatal error resumes from the new root with the same session.
        """
        self._fatal = None
        root = self.normalize(root_url or self.config.start_url)
        if root is None:
            raise ValueError(f"root URL is out of scope: {root_url or self.config.start_url}")
        if root in self.session.visited:
            self.logger.debug("Already visited %s, nothing to do", root)
            return self.session.report()

        self.logger.info("Starting site crawl at %s", root)
        start = time.monotonic()
        frontier = Frontier(self.config.strategy)
        frontier.push(root, 0)
        workers = [
            asyncio.create_task(self._worker(frontier), name=f"site-mapper-worker-{i}")
            for i in range(self.config.concurrency)
        ]
        try:
            await frontier.join()
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

        duration = time.monotonic() - start
        self.logger.info(
            "Crawl finished: %d pages visited, %d errors in %.2f s",
            self.session.pages_visited,
            self.session.error_count,
            duration,
        )
        if self._fatal is not None:
            raise self._fatal
        return self.session.report()

    async def _worker(self, frontier: Frontier) -> None:
        while True:
            url, depth = await frontier.pop()
            try:
                if self._fatal is None:
                    await self._process(frontier, url, depth)
            except FatalRunError as exc:
                self._fatal = exc
                dropped = frontier.drain()
                self.logger.error("Fatal error, stopping crawl (%d queued URLs dropped): %s", dropped, exc)
            except Exception as exc:
                self.session.record_error(url, exc)
                self.logger.exception("Unexpected error while processing %s", url)
            finally:
                frontier.task_done()

    async def _process(self, frontier: Frontier, url: str, depth: int) -> None:
        max_pages = self.config.max_pages
        if max_pages is not None and self._dispatched >= max_pages:
            return
        if not self.session.visited.mark_visited(url):
            return
        self._dispatched += 1
        self.session.open_entry(url)
        self.logger.info("Visiting: %s (Depth: %d)", url, depth)

        try:
            children = await self._visit(url)
        except FatalRunError:
            raise
        except Exception as exc:
            self.session.record_error(url, exc)
            self.logger.error("Error visiting %s: %s", url, exc)
        else:
            max_depth = self.config.max_depth
            if max_depth is None or depth < max_depth:
                frontier.extend(children, depth + 1)

        self._maybe_checkpoint()

    async def _visit(self, url: str) -> List[str]:
        """Render *url* and return its new in-scope links, recording them in the site map."""
        async with self.renderer.open_page() as page:
            try:
                await asyncio.wait_for(
                    page.navigate(url, self.config.wait_until, self.config.timeout),
                    timeout=self.config.timeout,
                )
            except asyncio.TimeoutError as exc:
                raise NavigationError(f"Navigation timeout of {self.config.timeout:g} s exceeded: {url}") from exc
            raw_links = await extract_links(page, self.config.start_url, self.root_origin)

        children: List[str] = []
        listed = set()
        for raw in raw_links:
            link = self.normalize(raw)
            if link is None or link in listed or link in self.session.visited:
                continue
            listed.add(link)
            self.session.add_link(url, link)
            children.append(link)
        return children

    def _maybe_checkpoint(self) -> None:
        every = self.config.checkpoint_every
        if self.checkpoint is None or not every or self.session.pages_visited % every:
            return
        try:
            self.checkpoint(self.session.report())
        except OSError as exc:
            self.logger.warning("Checkpoint failed: %s", exc)
