# File: site_mapper/engine.py
"""site_mapper.engine: run lifecycle - renderer, crawl, and hand-off of the results to persistence."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from site_mapper.aggregator import CrawlReport, CrawlSession
from site_mapper.config import CrawlerConfig
from site_mapper.crawler.crawler import CrawlOrchestrator
from site_mapper.logger import logger
from site_mapper.renderer import Renderer, create_renderer
from site_mapper.report.json_report import write_error_log, write_site_map

__all__ = ["start_crawl", "save_results"]


async def start_crawl(config: CrawlerConfig, renderer: Optional[Renderer] = None) -> CrawlReport:
    """
    Run one crawl and return its report.

    The renderer is entered once for the whole run and always exited. Any
    failure that escapes the orchestrator (the renderer cannot start, the
    browser died) is recorded as a fatal error record; the partial results
    are returned rather than raised.
    """
    session = CrawlSession(include_stack=config.include_stack)
    if renderer is None:
        renderer = create_renderer(config)

    def checkpoint(report: CrawlReport) -> None:
        write_site_map(report, config.site_map_path)
        logger.debug("Checkpoint: %d pages written to %s", report.pages_visited, config.site_map_path)

    try:
        async with renderer:
            orchestrator = CrawlOrchestrator(
                config, renderer, session, checkpoint=checkpoint if config.checkpoint_every else None
            )
            await orchestrator.crawl()
    except Exception as exc:
        logger.error("Fatal error in crawl: %s", exc)
        session.record_fatal(exc)

    return session.report()


def save_results(report: CrawlReport, config: CrawlerConfig) -> Tuple[Optional[Path], Optional[Path]]:
    """
    Write the site map and the error log next to each other in ``config.output_dir``.

    Returns the paths actually written (None for a file that was not).
    """
    site_map_path: Optional[Path] = None
    error_log_path: Optional[Path] = None

    try:
        site_map_path = write_site_map(report, config.site_map_path)
        logger.info("Site map saved to %s", site_map_path)
    except OSError as exc:
        logger.error("Failed to write navigation log: %s", exc)

    try:
        error_log_path = write_error_log(report, config.error_log_path)
    except OSError as exc:
        logger.error("Failed to write error log: %s", exc)
    else:
        if error_log_path is not None:
            logger.info("Errors saved to %s", error_log_path)
        else:
            logger.info("No errors encountered during crawl.")

    return site_map_path, error_log_path
