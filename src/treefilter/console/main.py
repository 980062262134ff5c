"""Command-line interface for TreeFilter.

``scan`` walks one or more roots, filters files by the configured criteria
and prints what it found with basic metadata.  Criteria come from a YAML
config file and/or command-line options; options extend the config.
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config_loader import DEFAULT_CONFIG_PATH, ConfigError, load_config, validate_config
from ..discovery.engine import walk_results
from ..discovery.errors import FileReadError
from ..discovery.walker import WalkResult
from ..logging.logger import CSVLogger, JSONLogger
from ..metadata.scanner import CHECKSUM_ALGORITHMS, get_file_metadata


console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _resolve_config(config_path: Optional[Path]) -> dict:
    try:
        if config_path is not None:
            return load_config(config_path, require_sources=False)
        return validate_config({}, require_sources=False)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging.')
def cli(verbose: bool) -> None:
    """TreeFilter CLI."""
    _setup_logging(verbose)


@cli.command()
@click.argument('roots', nargs=-1, type=click.Path(path_type=Path))
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help='Path to configuration file.')
@click.option('--ext', 'extensions', multiple=True, help='File extension to include (repeatable).')
@click.option('--prefix', 'prefixes', multiple=True, help='File name prefix to include (repeatable).')
@click.option('--glob', 'patterns', multiple=True, help='Shell pattern the file name must match (repeatable).')
@click.option('--exclude', 'exclude_patterns', multiple=True, help='Shell pattern on the full path to exclude (repeatable).')
@click.option('--min-size', type=click.IntRange(min=0), default=None, help='Minimum file size in bytes.')
@click.option('--max-size', type=click.IntRange(min=0), default=None, help='Maximum file size in bytes.')
@click.option('--checksum', 'checksum_algo', type=click.Choice(sorted(CHECKSUM_ALGORITHMS), case_sensitive=False), default=None, help='Checksum algorithm to compute.')
@click.option('--csv-log', type=click.Path(dir_okay=False, path_type=Path), default=None, help='Write results to a CSV file.')
@click.option('--json-log', type=click.Path(dir_okay=False, path_type=Path), default=None, help='Write results to a JSON file.')
@click.option('--fail-fast', is_flag=True, help='Stop at the first filesystem error.')
@click.pass_context
def scan(
    ctx: click.Context,
    roots: Tuple[Path, ...],
    config_path: Optional[Path],
    extensions: Tuple[str, ...],
    prefixes: Tuple[str, ...],
    patterns: Tuple[str, ...],
    exclude_patterns: Tuple[str, ...],
    min_size: Optional[int],
    max_size: Optional[int],
    checksum_algo: Optional[str],
    csv_log: Optional[Path],
    json_log: Optional[Path],
    fail_fast: bool,
) -> None:
    """Scan ROOTS (or the configured sources) and display matching files."""
    cfg = _resolve_config(config_path)
    sources = [str(r) for r in roots] or cfg['sources']
    if not sources:
        raise click.UsageError('No roots given and no sources configured.')
    min_size = min_size if min_size is not None else cfg['min_size']
    max_size = max_size if max_size is not None else cfg['max_size']
    if min_size is not None and max_size is not None and min_size > max_size:
        raise click.UsageError('--min-size is larger than --max-size.')
    checksum_algo = checksum_algo or cfg['checksum_algo']
    fail_fast = fail_fast or cfg['fail_fast']

    run_id = uuid.uuid4().hex
    csv_logger = CSVLogger(csv_log, run_id) if csv_log else None
    json_logger = JSONLogger(json_log, run_id) if json_log else None

    table = Table(title='Discovered files')
    table.add_column('Path')
    table.add_column('Size (bytes)', justify='right')
    table.add_column('Modified', justify='right')
    table.add_column('Checksum')

    results = walk_results(
        sources,
        [*cfg['extensions'], *extensions],
        prefixes=[*cfg['prefixes'], *prefixes],
        patterns=[*cfg['patterns'], *patterns],
        exclude_patterns=[*cfg['exclude_patterns'], *exclude_patterns],
        min_size=min_size,
        max_size=max_size,
        include_hidden=cfg['include_hidden'],
    )
    found = errors = 0
    try:
        for result in results:
            meta = None
            if result.ok:
                try:
                    meta = get_file_metadata(result.path, checksum_algo=checksum_algo)
                except OSError as exc:
                    result = WalkResult(error=FileReadError(result.path, exc))
                else:
                    found += 1
                    table.add_row(str(meta.path), str(meta.size_bytes), str(int(meta.mtime)), meta.checksum or '')
            if not result.ok:
                errors += 1
                logger.warning('%s', result.error)
            if csv_logger:
                csv_logger.log_result(result, meta)
            if json_logger:
                json_logger.log_result(result, meta)
            if not result.ok and fail_fast:
                break
    finally:
        results.close()
        if csv_logger:
            csv_logger.close()
        if json_logger:
            json_logger.flush()

    console.print(table)
    console.print(f'{found} file(s) matched, {errors} error(s).')
    if errors:
        ctx.exit(1)


@cli.command()
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False, path_type=Path), default=DEFAULT_CONFIG_PATH, help='Path to configuration file.')
def show_config(config_path: Path) -> None:
    """Print the resolved configuration."""
    cfg = _resolve_config(config_path)
    console.print_json(json.dumps(cfg, indent=2))


if __name__ == '__main__':  # pragma: no cover
    cli()
