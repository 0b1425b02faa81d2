"""Click-based CLI for VSSYNC - Vector Store Sync."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from pydantic import ValidationError
from rich.console import Console as RichConsole

from vssync import __version__
from vssync.config import (
    VssyncConfig,
    ensure_config_exists,
    generate_default_config,
    get_config_path,
    load_config,
    resolve_api_key,
    resolve_namespace_key,
    validate_config_file,
)
from vssync.errors import ConfigurationError
from vssync.logger import SyncLogger
from vssync.output.console import create_console
from vssync.remote.openai_client import OpenAIRemoteClient
from vssync.sync.engine import SyncEngine

console = create_console()


def _load(config_path: Optional[Path]) -> VssyncConfig:
    """Load configuration or exit with a readable error."""
    try:
        return load_config(config_path)
    except (FileNotFoundError, ValidationError, yaml.YAMLError) as e:
        console.print_error(str(e))
        sys.exit(1)


def _run(
    *,
    config_path: Optional[Path],
    pattern: Optional[str],
    key: Optional[str],
    token: Optional[str],
    dry_run: bool,
    verbose: bool,
    max_workers: Optional[int] = None,
    fail_on_item_errors: Optional[bool] = None,
) -> None:
    """Shared body of `sync` and `status`."""
    config = _load(config_path)

    if max_workers is not None:
        config.execution.max_workers = max_workers
    if fail_on_item_errors is not None:
        config.execution.fail_on_item_errors = fail_on_item_errors
    verbose = verbose or config.output.verbose
    console.verbose = verbose
    console.colored = config.output.colored

    try:
        namespace = resolve_namespace_key(key or config.sync.namespace_key)
        api_key = resolve_api_key(config, token)
    except ConfigurationError as e:
        console.print_error(e.message)
        sys.exit(1)

    client = OpenAIRemoteClient(
        api_key,
        base_url=config.remote.base_url,
        file_purpose=config.remote.file_purpose,
    )
    logger = SyncLogger(RichConsole(stderr=True, no_color=not config.output.colored), verbose=verbose)
    engine = SyncEngine(config, client, namespace, pattern=pattern, logger=logger)

    result = engine.sync(dry_run=dry_run)

    if not result.aborted:
        console.print_plan(result.plan, dry_run=dry_run)
    console.print_sync_result(result)

    if not result.success:
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="vssync")
def cli() -> None:
    """VSSYNC - Vector Store Sync.

    Keeps remote files and their vector store in sync with local files.

    \b
    Remote file name: {key}-{content hash}/{relative path}
    Vector store:     tagged with metadata key = {key}
    """
    pass


@cli.command()
@click.option("--pattern", "-p", default=None, help="Glob pattern of local files (default: config, **/*.md)")
@click.option("--key", "-k", default=None, help="Namespace key (default: repository name or git remote)")
@click.option("--token", default=None, help="API token (default: OPENAI_API_KEY)")
@click.option("--dry-run", "-n", is_flag=True, help="Preview changes without applying")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.option("--max-workers", type=click.IntRange(1, 64), default=None, help="Concurrent remote calls per phase")
@click.option(
    "--fail-on-item-errors/--no-fail-on-item-errors",
    default=None,
    help="Exit non-zero when individual files fail (default: config, disabled)",
)
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None, help="Config file")
def sync(
    pattern: Optional[str],
    key: Optional[str],
    token: Optional[str],
    dry_run: bool,
    verbose: bool,
    max_workers: Optional[int],
    fail_on_item_errors: Optional[bool],
    config_path: Optional[Path],
) -> None:
    """Synchronize local files into the remote vector store.

    Removes stale remote files first, then uploads and links new files,
    then links files uploaded by an earlier interrupted run.
    """
    _run(
        config_path=config_path,
        pattern=pattern,
        key=key,
        token=token,
        dry_run=dry_run,
        verbose=verbose,
        max_workers=max_workers,
        fail_on_item_errors=fail_on_item_errors,
    )


@cli.command()
@click.option("--pattern", "-p", default=None, help="Glob pattern of local files")
@click.option("--key", "-k", default=None, help="Namespace key")
@click.option("--token", default=None, help="API token (default: OPENAI_API_KEY)")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None, help="Config file")
def status(
    pattern: Optional[str],
    key: Optional[str],
    token: Optional[str],
    verbose: bool,
    config_path: Optional[Path],
) -> None:
    """Show pending changes without modifying anything."""
    _run(config_path=config_path, pattern=pattern, key=key, token=token, dry_run=True, verbose=verbose)


@cli.group()
def config() -> None:
    """Manage the configuration file."""
    pass


@config.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing config file")
def config_init(force: bool) -> None:
    """Create the default configuration file."""
    config_path = get_config_path()
    if force and config_path.exists():
        config_path.write_text(generate_default_config(), encoding="utf-8")
        console.print_success(f"Configuration overwritten: {config_path}")
        return

    config_path, created = ensure_config_exists()
    if created:
        console.print_success(f"Configuration created: {config_path}")
    else:
        console.print_info(f"Configuration already exists: {config_path}")


@config.command("show")
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None, help="Config file")
def config_show(config_path: Optional[Path]) -> None:
    """Show the effective configuration."""
    data = _load(config_path).model_dump(mode="json")
    if data["remote"].get("api_key"):
        data["remote"]["api_key"] = "***"
    console.print(yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True), markup=False)


@config.command("path")
def config_path_cmd() -> None:
    """Show the configuration file path."""
    console.print(str(get_config_path()), markup=False)


@config.command("check")
@click.argument("file", type=click.Path(exists=True, path_type=Path))
def config_check(file: Path) -> None:
    """Validate a configuration file."""
    is_valid, errors = validate_config_file(file)
    if is_valid:
        console.print_success(f"Configuration is valid: {file}")
        return

    console.print_error(f"Configuration is invalid: {file}")
    for error in errors:
        console.print(f"  • {error}", markup=False)
    sys.exit(1)
