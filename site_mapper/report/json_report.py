# site_mapper/report/json_report.py

"""
JSON output of a crawl: the site map and the error log.

The error log only exists when there were errors; a clean run removes the
file left behind by a previous run.
"""
import json
from pathlib import Path
from typing import Any, Optional

from site_mapper.aggregator import CrawlReport
from site_mapper.logger import logger


def _dump(data: Any, output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)
    # write next to the target and swap, so a checkpoint is never half-written
    tmp = output.with_name(output.name + ".tmp")
    with tmp.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    tmp.replace(output)
    return output


def write_site_map(report: CrawlReport, output_path: Path | str) -> Path:
    """
    Save the site map ``{url: [link, ...]}`` of *report* as JSON.

    :param report: result of the crawl
    :param output_path: path of the JSON file
    :return: Path of the saved file
    """
    return _dump(report.to_site_map_dict(), Path(output_path))


def write_error_log(report: CrawlReport, output_path: Path | str) -> Optional[Path]:
    """
    Save the error records of *report*, or delete *output_path* when there are none.

    Returns the written path, or None when no file was written.
    """
    output = Path(output_path)
    if report.has_errors:
        return _dump(report.to_error_list(), output)
    try:
        output.unlink()
        logger.info("Removed stale error log %s", output)
    except FileNotFoundError:
        pass
    return None
