# === FILE: site_mapper/config.py ===
"""
Loading and validation of the SiteMapper crawl configuration.
Pydantic describes the schema and checks the data.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Optional, Union
from urllib.parse import urlsplit

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from site_mapper.logger import logger

WaitCondition = Literal["load", "domcontentloaded", "networkidle", "commit"]


class CrawlerConfig(BaseModel):
    """Configuration of one crawl run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_url: str = Field("http://localhost:4321", description="Root URL the crawl starts from.")
    scope_prefix: Optional[str] = Field(
        None, description="Only URLs starting with this prefix are followed (default: start_url)."
    )
    max_depth: Optional[int] = Field(None, ge=0, description="Maximum link depth; None means unlimited.")
    max_pages: Optional[int] = Field(None, ge=1, description="Hard cap on the number of visited pages.")
    timeout: float = Field(30.0, gt=0, description="Navigation timeout per page (seconds).")
    wait_until: WaitCondition = Field("networkidle", description="Page load condition to wait for.")
    strategy: Literal["dfs", "bfs"] = Field("dfs", description="Traversal order.")
    concurrency: int = Field(1, ge=1, description="Number of pages rendered at the same time.")
    renderer: Literal["browser", "http"] = Field("browser", description="Rendering backend.")
    headless: bool = Field(True, description="Run the browser without a window.")
    user_agent: str = Field("SiteMapper/0.1", min_length=1, description="User-Agent header.")
    retry_times: int = Field(0, ge=0, description="Retries on 5xx/429 (http renderer).")

    output_dir: Path = Field(Path("."), description="Directory for the output files.")
    site_map_file: str = Field("navigation_log.json", min_length=1)
    error_log_file: str = Field("error_log.json", min_length=1)
    checkpoint_every: int = Field(0, ge=0, description="Write the site map every N pages; 0 disables.")
    include_stack: bool = Field(True, description="Store tracebacks in the error log.")

    @field_validator("start_url", "scope_prefix", mode="before")
    def _check_http_url(cls, v: Any) -> Any:
        if v is None:
            return v
        if not isinstance(v, str):
            raise ValueError("URL must be a string")
        v = v.strip()
        parsed = urlsplit(v)
        if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"expected an absolute http(s) URL, got {v!r}")
        return v

    @model_validator(mode="after")
    def _check_scope_origin(self) -> CrawlerConfig:
        if self.scope_prefix is None:
            return self
        start, scope = urlsplit(self.start_url), urlsplit(self.scope_prefix)
        if (start.scheme.lower(), start.netloc.lower()) != (scope.scheme.lower(), scope.netloc.lower()):
            raise ValueError("scope_prefix must be on the same origin as start_url")
        return self

    @property
    def site_map_path(self) -> Path:
        return self.output_dir / self.site_map_file

    @property
    def error_log_path(self) -> Path:
        return self.output_dir / self.error_log_file


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Read YAML or JSON and return a validated CrawlerConfig.

    An explicit path that does not exist raises FileNotFoundError. Without a
    path, ``configs/default.yaml`` is used if present, built-in defaults
    otherwise.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            logger.debug("No %s, using built-in defaults", _DEFAULT_CFG)
            return CrawlerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return CrawlerConfig(**data)
