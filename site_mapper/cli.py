#!/usr/bin/env python3
"""
Command line entry point of SiteMapper.

Commands:
  crawl     Crawl a site and print/save the site map
  config    Show the effective configuration

Common options:
  --config PATH       Path to a YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only if omitted)
  --log-format FORMAT Logging format (e.g. "%(asctime)s %(levelname)s %(message)s")

crawl options:
  URL                 Root URL (overrides root_url from the config)
  --depth INT         Maximum link depth
  --rate-limit FLOAT  Requests per second to the root host
  --timeout SEC       Timeout of a single request
  --crawl-timeout SEC Deadline for the whole crawl
  --json PATH         Save the JSON report to a file
  --html PATH         Save the HTML report to a file
  --template DIR      Folder with the Jinja2 template
  --pretty            Indent JSON output (2 spaces)

Example:
  site-mapper crawl https://example.com --depth 2 --json sitemap.json
"""
import asyncio
import signal
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from pydantic import ValidationError

from site_mapper import __version__
from site_mapper.aggregator import summarize
from site_mapper.config import CrawlConfig, load_config
from site_mapper.crawler.sitemap import SiteMap
from site_mapper.engine import make_context, start_crawl
from site_mapper.exceptions import CrawlCancelledError, ParseError
from site_mapper.logger import init_logging, logger
from site_mapper.report.html_report import render_html
from site_mapper.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
DEFAULT_CONFIG = Path("configs/default.yaml")


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def build_config(config_path: Optional[Path], overrides: Dict[str, Any]) -> CrawlConfig:
    """Merge the config file (if any) with command line overrides."""
    data: Dict[str, Any] = {}
    if config_path is not None:
        data = load_config(config_path).model_dump()
    elif DEFAULT_CONFIG.is_file():
        data = load_config(None).model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    return CrawlConfig(**data)


async def run_crawl(cfg: CrawlConfig) -> SiteMap:
    """Run the crawl with Ctrl-C wired to cooperative cancellation."""
    ctx = make_context(cfg)
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, ctx.cancel)
        installed = True
    except (NotImplementedError, RuntimeError, ValueError) as exc:
        logger.debug("SIGINT handler not installed: %s", exc)
        installed = False
    try:
        return await start_crawl(cfg, ctx)
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMapper, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML/JSON config file.'
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
    help='Log file path (stderr only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SiteMapper command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.option('--depth', '-d', 'max_depth', type=click.IntRange(min=0), default=None,
              help='Maximum link depth (root is 0)')
@click.option('--rate-limit', '-r', 'rate_limit', type=float, default=None,
              help='Requests per second to the root host')
@click.option('--timeout', 'timeout', type=float, default=None,
              help='Timeout of a single request (seconds)')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None,
              help='Deadline for the whole crawl (seconds)')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON report to a file'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the HTML report to a file'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Folder with the sitemap.html.j2 template (packaged one by default)'
)
@click.option('--pretty', is_flag=True, help='Indent JSON output (2 spaces)')
@click.pass_context
def crawl_command(ctx, url, max_depth, rate_limit, timeout, crawl_timeout,
                  json_output, html_output, template_dir, pretty):
    """Crawl a site and generate the site-map report."""
    overrides = {
        'root_url': url,
        'max_depth': max_depth,
        'rate_limit': rate_limit,
        'timeout': timeout,
        'crawl_timeout': crawl_timeout,
    }
    try:
        cfg = build_config(ctx.obj['config_path'], overrides)
    except (ValidationError, OSError, ValueError, TypeError) as e:
        print_error(f'Error loading configuration: {e}')

    try:
        site_map = asyncio.run(run_crawl(cfg))
    except CrawlCancelledError as e:
        print_error(f'Crawl aborted: {e}')
    except ParseError as e:
        print_error(f'Invalid root url: {e}')
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    report = summarize(site_map)

    # No output file: print to stdout
    if not json_output and not html_output:
        click.echo(report.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Error saving JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Error saving HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.pass_context
def show_config(ctx, url):
    """Show the effective configuration as JSON."""
    try:
        cfg = build_config(ctx.obj['config_path'], {'root_url': url})
    except (ValidationError, OSError, ValueError, TypeError) as e:
        print_error(f'Error loading configuration: {e}')
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
