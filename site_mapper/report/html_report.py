# File: site_mapper/report/html_report.py
"""site_mapper.report.html_report: HTML view of a crawl report rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from site_mapper.aggregator import CrawlReport

#: templates shipped with the package
DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def render_html(
    report: CrawlReport,
    output_path: Union[Path, str],
    template_dir: Optional[Union[Path, str]] = None,
    *,
    start_url: str = "",
) -> Path:
    """Render the HTML report from the template and save it to *output_path*.

    Args:
        report: result of the crawl.
        output_path: path of the resulting HTML file.
        template_dir: directory holding ``report.html.j2``; defaults to the
            templates bundled with the package.
        start_url: shown in the page title.

    Returns:
        Path of the saved HTML file.

    Example:
    ```python
    from site_mapper.report.html_report import render_html
    html_path = render_html(report, 'reports/site_map.html')
    ```
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir or DEFAULT_TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "start_url": start_url,
        "site_map": report.to_site_map_dict(),
        "errors": report.to_error_list(),
        "pages_visited": report.pages_visited,
        "fatal": report.fatal,
    }

    html_content = template.render(**context)
    output_path.write_text(html_content, encoding="utf-8")

    return output_path
