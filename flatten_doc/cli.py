#!/usr/bin/env python3
"""
Command-line entry point of flatten-doc.

Commands:
  flatten   Crawl a documentation tree and save it as a single Markdown file
  config    Show the effective configuration

Common options:
  --config PATH        YAML/JSON configuration file (default: configs/default.yaml if present)
  --parallelism INT    Max concurrent page fetches (override)
  --max-retries INT    Extra attempts per request (override)
  --delay SEC          Politeness delay bound (override)
  --log-level LEVEL    Logging level (DEBUG, INFO, ...)
  --log-file PATH      Log file (console only if omitted)
  --log-format FORMAT  Log format string

flatten options:
  --json PATH          Also save the results as JSON
  --run-timeout SEC    Timeout of the whole run (seconds)

Example:
  flatten-doc flatten https://pkg.go.dev/github.com/cinar/indicator/v2 indicator.md
"""
import asyncio
import sys
from pathlib import Path

import click

from flatten_doc import __version__
from flatten_doc.config import load_config
from flatten_doc.logger import DEFAULT_FORMAT, init_logging
from flatten_doc.report.json_report import render_json
from flatten_doc.report.markdown_report import render_markdown
from flatten_doc.runner import check_available, start_flatten
from flatten_doc.utils import default_output_name, ensure_md_suffix, resolve_target_url

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='flatten-doc, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON configuration file.'
)
@click.option('--parallelism', '-p', type=click.IntRange(min=1), default=None,
              help='Max concurrent page fetches (overrides config)')
@click.option('--max-retries', '-r', 'max_retries', type=click.IntRange(min=0), default=None,
              help='Extra attempts per failed request (overrides config)')
@click.option('--delay', '-d', type=click.FloatRange(min=0), default=None,
              help='Upper bound of the random delay before each request, seconds (overrides config)')
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
    help='Log file path (console only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Log format string'
)
@click.pass_context
def cli(ctx, config_path, parallelism, max_retries, delay, log_level, log_file, log_format):
    """flatten-doc: turn a Go package documentation tree into one Markdown file."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Error loading configuration: {e}')
    overrides = {
        'parallelism': parallelism,
        'max_retries': max_retries,
        'politeness_delay': delay,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        cfg = cfg.model_copy(update=overrides)
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('flatten', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.argument('output', required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Also save the results as JSON'
)
@click.option(
    '--run-timeout', 'run_timeout',
    type=float,
    default=None,
    help='Timeout of the whole run (seconds)'
)
@click.pass_context
def flatten(ctx, url, output, json_output, run_timeout):
    """Crawl URL (a pkg.go.dev page or GitHub repository) into OUTPUT."""
    cfg = ctx.obj['config']
    target, is_github = resolve_target_url(url)
    if is_github:
        click.echo(f'Detected GitHub URL. Transformed to: {target}')
        click.echo('Verifying package availability on pkg.go.dev...')
        status = asyncio.run(check_available(cfg, target))
        if status != 200:
            print_error(f'Error: Package not available on pkg.go.dev (status: {status})')

    out_path = Path(ensure_md_suffix(str(output))) if output else Path(default_output_name(target))

    click.echo(f'Starting scraping for: {target}')
    try:
        if run_timeout:
            results = asyncio.run(
                asyncio.wait_for(start_flatten(cfg, target), timeout=run_timeout)
            )
        else:
            results = asyncio.run(start_flatten(cfg, target))
    except asyncio.TimeoutError:
        print_error(f'Run did not finish within {run_timeout} seconds')
    except Exception as e:
        print_error(f'Error flattening documentation: {e}')

    if not results:
        click.echo('Warning: No documentation found.')
        return

    for res in results:
        click.echo(f'Writing: {res.url}')
    try:
        saved = render_markdown(results, out_path)
    except OSError as e:
        print_error(f'Error writing {out_path}: {e}')
    click.echo(f'\nSuccessfully saved documentation to {saved}')

    if json_output:
        try:
            saved_json = render_json(results, json_output)
            click.echo(f'JSON results: {saved_json}')
        except OSError as e:
            print_error(f'Error saving JSON: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Print the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
