# site_mapper/renderer/__init__.py
"""Page renderers: a Playwright browser or a plain aiohttp client."""
from __future__ import annotations

from site_mapper.config import CrawlerConfig
from site_mapper.renderer.base import PageContext, Renderer
from site_mapper.renderer.browser import PlaywrightRenderer
from site_mapper.renderer.http import HttpRenderer

__all__ = ["PageContext", "Renderer", "PlaywrightRenderer", "HttpRenderer", "create_renderer"]


def create_renderer(config: CrawlerConfig) -> Renderer:
    """Build the renderer selected by ``config.renderer``."""
    if config.renderer == "http":
        return HttpRenderer(
            user_agent=config.user_agent,
            timeout=config.timeout,
            retry_times=config.retry_times,
        )
    return PlaywrightRenderer(headless=config.headless, user_agent=config.user_agent)
