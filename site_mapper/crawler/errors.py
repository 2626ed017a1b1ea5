# site_mapper/crawler/errors.py
"""
Exception types raised while crawling.

Navigation and extraction failures are recoverable: the orchestrator records
them against the URL being visited and moves on. ``FatalRunError`` means the
renderer itself is unusable and the run has to stop.
"""
from __future__ import annotations


class CrawlError(Exception):
    """Base class for crawl failures."""

    kind: str = "CrawlError"


class NavigationError(CrawlError):
    """Page could not be loaded: timeout, connection failure or HTTP error status."""

    kind = "NavigationError"


class ExtractionError(CrawlError):
    """Links could not be queried from a rendered page."""

    kind = "ExtractionError"


class FatalRunError(CrawlError):
    """The rendering backend cannot be started or is no longer usable."""

    kind = "FatalRunError"
