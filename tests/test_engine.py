# File: tests/test_engine.py
import json

import pytest

from site_mapper.crawler.errors import FatalRunError
from site_mapper.engine import save_results, start_crawl

from conftest import FakeRenderer, url


class BrokenRenderer(FakeRenderer):
    """Renderer whose backend cannot start."""

    async def __aenter__(self):
        raise FatalRunError("could not launch browser: executable doesn't exist")


@pytest.mark.asyncio()
async def test_start_crawl_enters_renderer_once(make_config, example_graph):
    renderer = FakeRenderer(example_graph, failures=[url("/c")])
    report = await start_crawl(make_config(), renderer)

    assert (renderer.entered, renderer.exited) == (1, 1)
    assert report.pages_visited == 4
    assert [e.url for e in report.errors] == [url("/c")]
    assert not report.fatal


@pytest.mark.asyncio()
async def test_renderer_start_failure_is_captured(make_config):
    report = await start_crawl(make_config(), BrokenRenderer({}))

    assert report.fatal
    assert report.pages_visited == 0
    assert [(e.url, e.kind) for e in report.errors] == [("N/A", "FatalRunError")]


@pytest.mark.asyncio()
async def test_fatal_mid_run_keeps_partial_results(make_config, example_graph):
    renderer = FakeRenderer(example_graph, fatal_after=1)
    report = await start_crawl(make_config(), renderer)

    assert report.fatal
    assert renderer.exited == 1
    assert url("/") in report.site_map
    assert report.errors[-1].url == "N/A"


@pytest.mark.asyncio()
async def test_checkpoint_writes_site_map_during_run(make_config, example_graph, tmp_path):
    seen = []

    class Spy(FakeRenderer):
        async def __aexit__(self, exc_type, exc, tb):
            # the final save has not happened yet; whatever is on disk is a checkpoint
            seen.append(json.loads((tmp_path / "navigation_log.json").read_text(encoding="utf-8")))
            await super().__aexit__(exc_type, exc, tb)

    await start_crawl(make_config(checkpoint_every=1), Spy(example_graph))
    assert len(seen[0]) == 5


@pytest.mark.asyncio()
async def test_save_results(make_config, example_graph, tmp_path):
    config = make_config()
    stale = config.error_log_path
    stale.write_text("[]", encoding="utf-8")

    report = await start_crawl(config, FakeRenderer(example_graph))
    site_map_path, error_log_path = save_results(report, config)

    assert site_map_path == tmp_path / "navigation_log.json"
    assert error_log_path is None
    assert not stale.exists()
    assert list(json.loads(site_map_path.read_text(encoding="utf-8"))) == [
        url("/"), url("/a"), url("/b"), url("/c"), url("/d"),
    ]


@pytest.mark.asyncio()
async def test_save_results_after_fatal(make_config):
    config = make_config()
    report = await start_crawl(config, BrokenRenderer({}))
    site_map_path, error_log_path = save_results(report, config)

    assert json.loads(site_map_path.read_text(encoding="utf-8")) == {}
    errors = json.loads(error_log_path.read_text(encoding="utf-8"))
    assert errors[0]["url"] == "N/A"
    assert errors[0]["error"].startswith("Fatal error:")
