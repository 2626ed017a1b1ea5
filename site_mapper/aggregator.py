# File: site_mapper/aggregator.py
"""site_mapper.aggregator: crawl session state and the final crawl report."""

from __future__ import annotations

import traceback
from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from site_mapper.crawler.errors import CrawlError
from site_mapper.crawler.frontier import VisitedSet

__all__ = ["ErrorRecord", "CrawlReport", "CrawlSession", "FATAL_URL"]

#: placeholder URL of the record appended for a fatal run failure
FATAL_URL = "N/A"


@dataclass(frozen=True, slots=True)
class ErrorRecord:
    """One failed visit."""

    url: str
    kind: str
    error: str
    stack: Optional[str] = None

    @classmethod
    def from_exception(cls, url: str, exc: BaseException, *, include_stack: bool = True) -> ErrorRecord:
        kind = exc.kind if isinstance(exc, CrawlError) else type(exc).__name__
        stack = "".join(traceback.format_exception(exc)) if include_stack else None
        return cls(url=url, kind=kind, error=str(exc) or kind, stack=stack)

    def to_dict(self) -> Dict[str, Optional[str]]:
        data = asdict(self)
        if data["stack"] is None:
            del data["stack"]
        return data


@dataclass(frozen=True, slots=True)
class CrawlReport:
    """Read-only result of a crawl run."""

    site_map: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    errors: Tuple[ErrorRecord, ...] = ()
    fatal: bool = False

    @property
    def pages_visited(self) -> int:
        return len(self.site_map)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_site_map_dict(self) -> Dict[str, List[str]]:
        return {url: list(links) for url, links in self.site_map.items()}

    def to_error_list(self) -> List[Dict[str, Optional[str]]]:
        return [record.to_dict() for record in self.errors]


class CrawlSession:
    """
    Mutable state of one crawl run.

    Owns the visited set, the site map and the error list. Several sessions
    can live side by side in one process; nothing here is global.
    """

    def __init__(self, *, include_stack: bool = True) -> None:
        self.visited = VisitedSet()
        self.include_stack = include_stack
        self.fatal = False
        self._site_map: Dict[str, List[str]] = {}
        self._errors: List[ErrorRecord] = []

    def open_entry(self, url: str) -> None:
        """Create the (empty) site-map entry of a URL about to be rendered."""
        self._site_map.setdefault(url, [])

    def add_link(self, url: str, link: str) -> None:
        self._site_map[url].append(link)

    def record_error(self, url: str, exc: BaseException) -> ErrorRecord:
        record = ErrorRecord.from_exception(url, exc, include_stack=self.include_stack)
        self._errors.append(record)
        return record

    def record_fatal(self, exc: BaseException) -> ErrorRecord:
        """Append the sentinel record for a failure that ended the run."""
        self.fatal = True
        record = ErrorRecord(
            url=FATAL_URL,
            kind=exc.kind if isinstance(exc, CrawlError) else "FatalRunError",
            error=f"Fatal error: {exc}",
            stack="".join(traceback.format_exception(exc)) if self.include_stack else None,
        )
        self._errors.append(record)
        return record

    @property
    def pages_visited(self) -> int:
        return len(self._site_map)

    @property
    def error_count(self) -> int:
        return len(self._errors)

    def report(self) -> CrawlReport:
        """Snapshot the current state as an immutable :class:`CrawlReport`."""
        frozen = {url: tuple(links) for url, links in self._site_map.items()}
        return CrawlReport(
            site_map=MappingProxyType(frozen),
            errors=tuple(self._errors),
            fatal=self.fatal,
        )
