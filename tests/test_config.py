# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from site_mapper.config import CrawlerConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("start_url: http://localhost:4321\nmax_depth: 3", ".yaml", None),
        (json.dumps({"start_url": "http://localhost:4321", "strategy": "bfs"}), ".json", None),
        ("{}", ".json", None),
        ("start_url: ftp://localhost", ".yaml", ValidationError),
        ("timeout: 0", ".yaml", ValidationError),
        ("wait_until: networkidle2", ".yaml", ValidationError),
        ("unknown_key: 1", ".yaml", ValidationError),
        ("not: a: mapping", ".yaml", ValueError),
        ("- just\n- a list", ".yaml", TypeError),
        ("start_url = x", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, CrawlerConfig)
        assert cfg.start_url == "http://localhost:4321"


def test_defaults():
    cfg = CrawlerConfig()
    assert cfg.start_url == "http://localhost:4321"
    assert cfg.timeout == 30.0
    assert cfg.wait_until == "networkidle"
    assert cfg.strategy == "dfs"
    assert cfg.concurrency == 1
    assert cfg.max_depth is None
    assert cfg.site_map_path == Path(".") / "navigation_log.json"
    assert cfg.error_log_path == Path(".") / "error_log.json"


def test_config_is_frozen():
    cfg = CrawlerConfig()
    with pytest.raises(ValidationError):
        cfg.max_depth = 2


def test_scope_prefix_must_share_origin():
    with pytest.raises(ValidationError):
        CrawlerConfig(start_url="http://localhost:4321", scope_prefix="http://example.com/docs")
    cfg = CrawlerConfig(start_url="http://localhost:4321/docs/", scope_prefix="http://LOCALHOST:4321/docs")
    assert cfg.scope_prefix == "http://LOCALHOST:4321/docs"


def test_load_config_default_missing_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_config(None) == CrawlerConfig()


def test_load_config_default_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("max_depth: 2\n", encoding="utf-8")
    assert load_config(None).max_depth == 2


def test_explicit_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_shipped_default_config_is_valid():
    shipped = Path(__file__).resolve().parent.parent / "configs" / "default.yaml"
    cfg = load_config(shipped)
    assert cfg == CrawlerConfig()
