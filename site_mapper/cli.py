# === FILE: site_mapper/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point of SiteMapper.

Commands:
  crawl     Crawl the site once, write the site map and the error log
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only if omitted)
  --log-format FORMAT Logging format string

crawl options:
  --start-url URL     Override start_url
  --max-depth N       Override max_depth
  --strategy dfs|bfs  Traversal order
  --concurrency N     Pages rendered in parallel
  --renderer NAME     browser (Playwright) or http (aiohttp, no JavaScript)
  --output-dir DIR    Where navigation_log.json / error_log.json go
  --html PATH         Also write an HTML report

Example:
  site-mapper crawl --start-url http://localhost:4321 --max-depth 3
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from site_mapper import __version__
from site_mapper.config import load_config
from site_mapper.engine import save_results, start_crawl
from site_mapper.logger import DEFAULT_FORMAT, init_logging, logger
from site_mapper.report.html_report import render_html

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMapper, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to the YAML/JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stdout only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SiteMapper: map the internal links of a locally hosted website."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Error loading configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option('--start-url', 'start_url', default=None, help='Root URL to crawl')
@click.option('--max-depth', 'max_depth', type=click.IntRange(min=0), default=None, help='Maximum link depth')
@click.option('--strategy', type=click.Choice(['dfs', 'bfs']), default=None, help='Traversal order')
@click.option('--concurrency', type=click.IntRange(min=1), default=None, help='Pages rendered in parallel')
@click.option('--renderer', type=click.Choice(['browser', 'http']), default=None, help='Rendering backend')
@click.option(
    '--output-dir', 'output_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Directory for navigation_log.json and error_log.json'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Also write an HTML report to this file'
)
@click.pass_context
def crawl(ctx, start_url, max_depth, strategy, concurrency, renderer, output_dir, html_output):
    """Crawl the site and write the site map and error log."""
    overrides = {
        'start_url': start_url,
        'max_depth': max_depth,
        'strategy': strategy,
        'concurrency': concurrency,
        'renderer': renderer,
        'output_dir': output_dir,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    try:
        cfg = ctx.obj['config'].model_validate({**ctx.obj['config'].model_dump(), **overrides})
    except ValidationError as e:
        print_error(f'Invalid option: {e}')

    logger.info('Crawl script started.')
    report = asyncio.run(start_crawl(cfg))
    save_results(report, cfg)

    if html_output:
        try:
            saved_html = render_html(report, html_output, start_url=cfg.start_url)
            click.echo(f'HTML report: {saved_html}')
        except OSError as e:
            logger.error('Failed to write HTML report: %s', e)

    click.echo(f'Visited {report.pages_visited} pages, {len(report.errors)} errors.')
    if report.fatal:
        ctx.exit(1)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(json.dumps(cfg.model_dump(mode='json'), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()
