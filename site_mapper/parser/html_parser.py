# === FILE: site_mapper/parser/html_parser.py ===
"""HTML link selection for SiteMapper.

The browser renderer asks the live DOM for ``a.href`` of every anchor that
matches a CSS selector. :func:`select_links` answers the same question for
static markup: the selector is evaluated with BeautifulSoup (soupsieve) and
every ``href`` is resolved against the page URL, the way a browser would
resolve the ``href`` property.
"""
from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag
from soupsieve import SelectorSyntaxError

from site_mapper.crawler.errors import ExtractionError

__all__: Sequence[str] = ("select_links",)


def select_links(html: str, base_url: str, selector: str) -> list[str]:
    """Return resolved hrefs of elements matching *selector*, in document order.

    Parameters
    ----------
    html
        Page markup.
    base_url
        URL the markup was loaded from; a ``<base href>`` in the document
        takes precedence, as in a browser.
    selector
        CSS selector, e.g. ``a[href^="/"]``.
    """
    soup = BeautifulSoup(html, "html.parser")

    base_tag = soup.find("base", href=True)
    if isinstance(base_tag, Tag):
        base_url = urljoin(base_url, str(base_tag["href"]).strip())

    try:
        matches = soup.select(selector)
    except SelectorSyntaxError as exc:
        raise ExtractionError(f"invalid selector {selector!r}: {exc}") from exc

    links: list[str] = []
    for tag in matches:
        href = tag.get("href")
        if not isinstance(href, str):
            continue
        links.append(urljoin(base_url, href.strip()))
    return links
