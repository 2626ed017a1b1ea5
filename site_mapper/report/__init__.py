# File: site_mapper/report/__init__.py
"""site_mapper.report: persistence of crawl results (JSON files and an HTML page)."""

from site_mapper.report.html_report import render_html
from site_mapper.report.json_report import write_error_log, write_site_map

__all__ = ["render_html", "write_error_log", "write_site_map"]
