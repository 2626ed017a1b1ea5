# site_mapper/crawler/normalizer.py
"""
URL canonicalisation for SiteMapper.

Normalized URLs are the keys of the visited set and of the site map, so two
spellings of the same page must collapse to one string:

* ``/path`` links are resolved against the root origin;
* scheme and host are lower-cased, default ports dropped;
* the fragment is removed;
* trailing slashes are removed from the path (the root ``/`` is kept).

Anything outside the root origin or the scope prefix is reported as
out of scope by returning ``None``.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

__all__ = ("normalize_url", "origin_of")

_DEFAULT_PORTS = {"http": 80, "https": 443}


def _canonical_netloc(scheme: str, netloc: str) -> str:
    parts = urlsplit(f"{scheme}://{netloc}")
    host = (parts.hostname or "").lower()
    try:
        port = parts.port
    except ValueError:
        port = None
    if ":" in host:
        host = f"[{host}]"
    if port is None or _DEFAULT_PORTS.get(scheme) == port:
        return host
    return f"{host}:{port}"


def origin_of(url: str) -> str:
    """Return the canonical ``scheme://host[:port]`` of *url*."""
    parsed = urlsplit(url.strip())
    scheme = parsed.scheme.lower()
    return f"{scheme}://{_canonical_netloc(scheme, parsed.netloc)}"


def normalize_url(raw: str, root_origin: str, scope_prefix: Optional[str] = None) -> Optional[str]:
    """
    Canonicalise *raw* relative to *root_origin*.

    Returns the normalized URL, or ``None`` when the link is out of scope
    (other origin, outside *scope_prefix*, non-HTTP scheme or unparsable).
    """
    if not raw:
        return None
    candidate = raw.strip()
    if candidate.startswith("/"):
        candidate = urljoin(root_origin + "/", candidate)

    try:
        parsed = urlsplit(candidate)
    except ValueError:
        return None
    scheme = parsed.scheme.lower()
    if scheme not in _DEFAULT_PORTS or not parsed.netloc:
        return None

    origin = f"{scheme}://{_canonical_netloc(scheme, parsed.netloc)}"
    if origin != origin_of(root_origin):
        return None

    path = parsed.path.rstrip("/") or "/"
    normalized = urlunsplit((scheme, origin.split("://", 1)[1], path, parsed.query, ""))

    if scope_prefix and not normalized.startswith(scope_prefix):
        return None
    return normalized
