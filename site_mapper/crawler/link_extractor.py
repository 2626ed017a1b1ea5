# site_mapper/crawler/link_extractor.py
"""
Link extraction from a rendered page.
"""
from __future__ import annotations

import json
from typing import List

from site_mapper.crawler.errors import CrawlError, ExtractionError
from site_mapper.renderer.base import PageContext

__all__ = ("link_selector", "extract_links")


def link_selector(start_url: str, *aliases: str) -> str:
    """
    CSS selector for candidate internal anchors: root-relative hrefs and
    absolute hrefs under *start_url* or any other spelling of it in *aliases*
    (e.g. the canonical origin without a default port).
    """
    prefixes: List[str] = []
    for candidate in (start_url, *aliases):
        prefix = candidate.rstrip("/") or candidate
        if prefix not in prefixes:
            prefixes.append(prefix)
    parts = ['a[href^="/"]']
    parts.extend(f"a[href^={json.dumps(prefix, ensure_ascii=False)}]" for prefix in prefixes)
    return ", ".join(parts)


async def extract_links(page: PageContext, start_url: str, *aliases: str) -> List[str]:
    """
    Return the resolved href of every candidate anchor on *page*.

    Document order is kept and duplicates are not removed here; the
    orchestrator filters against the visited set and the page's own list.
    """
    selector = link_selector(start_url, *aliases)
    try:
        links = await page.query_links(selector)
    except CrawlError:
        raise
    except Exception as exc:
        raise ExtractionError(f"link query failed: {exc}") from exc
    if not isinstance(links, list) or not all(isinstance(link, str) for link in links):
        raise ExtractionError(f"link query returned {type(links).__name__}, expected a list of strings")
    return links
