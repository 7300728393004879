"""
CLI interface for Ignore Committer.

This module provides the command-line interface using Typer with Rich output:
- `ignore-committer decide` - Decide whether a branch needs an automatic build
- `ignore-committer strategies` - List registered build strategies
- `ignore-committer --version` - Show version

Exit codes for `decide`: 0 when a build is required, 1 when it is not,
2 on configuration errors.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from ignore_committer import __version__
from ignore_committer.changeset import GitChangesetProvider, rev_parse
from ignore_committer.config import (
    DEFAULT_CONFIG_FILE,
    ConfigError,
    GitConfig,
    IgnoreCommitterConfig,
    load_config,
)
from ignore_committer.models import BranchHead, RevisionRef, SourceContext, Verdict
from ignore_committer.registry import get_strategy, list_strategies
from ignore_committer.strategy import STRATEGY_NAME
from ignore_committer.trace import LoggingTraceSink, RecordingTraceSink

EXIT_BUILD_REQUIRED = 0
EXIT_BUILD_NOT_REQUIRED = 1
EXIT_CONFIG_ERROR = 2

# Create Typer app
app = typer.Typer(
    name="ignore-committer",
    help="Decide whether commits by ignored authors should trigger a build",
    add_completion=False,
)

# Rich console for output
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"ignore-committer version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Ignore Committer - skip builds caused only by ignored commit authors.
    """


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_config_for_cli(config_path: Optional[str]) -> IgnoreCommitterConfig:
    """Explicit --config must exist; the default file is optional."""
    if config_path is not None:
        return load_config(config_path)
    if Path(DEFAULT_CONFIG_FILE).exists():
        return load_config(DEFAULT_CONFIG_FILE)
    return IgnoreCommitterConfig()


def _parse_revision(git: GitConfig, repo_path: str, text: str) -> RevisionRef:
    """Full hashes are native; other forms are native only once git confirms them."""
    ref = RevisionRef.parse(text)
    if ref.is_native:
        return ref

    full_hash = rev_parse(repo_path, text, binary=git.binary, timeout_seconds=git.timeout_seconds)
    if full_hash is None:
        return ref
    return RevisionRef.native(full_hash)


def _print_verdict(verdict: Verdict) -> None:
    for line in verdict.trace:
        style = "red" if line.is_error else "dim"
        console.print(Text(line.render(), style=style))

    if verdict.build_required:
        console.print(Text("Build required", style="green bold"))
    else:
        console.print(Text("Build not required", style="yellow bold"))


@app.command()
def decide(
    repo: str = typer.Option(".", "--repo", "-r", help="Git work tree holding the branch"),
    branch: str = typer.Option(..., "--branch", "-b", help="Branch being evaluated"),
    current: str = typer.Option(..., "--current", "-c", help="Current revision of the branch"),
    last_built: Optional[str] = typer.Option(
        None, "--last-built", help="Last built revision (omit for the first build)"
    ),
    last_seen: Optional[str] = typer.Option(
        None, "--last-seen", help="Last seen revision (accepted, not used)"
    ),
    ignored_authors: Optional[str] = typer.Option(
        None, "--ignored-authors", "-i", help="Comma-separated ignored author emails"
    ),
    allow_build: Optional[bool] = typer.Option(
        None,
        "--allow-build-if-not-excluded-author/--no-allow-build-if-not-excluded-author",
        help="Build when at least one author is not ignored",
    ),
    check_only_head: Optional[bool] = typer.Option(
        None,
        "--check-only-head/--check-all-commits",
        help="Only look at the most recent commit",
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", help=f"Config file (default: {DEFAULT_CONFIG_FILE} if present)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the verdict as JSON"),
) -> None:
    """Decide whether the changeset since the last build needs a build."""
    try:
        config = _load_config_for_cli(config_path)
    except ConfigError as e:
        err_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(EXIT_CONFIG_ERROR)

    _setup_logging(config.logging.level)

    # Command-line flags override config values
    if ignored_authors is not None:
        config.strategy.ignored_authors = ignored_authors
    if allow_build is not None:
        config.strategy.allow_build_if_not_excluded_author = allow_build
    if check_only_head is not None:
        config.strategy.check_only_head = check_only_head

    provider = GitChangesetProvider(
        binary=config.git.binary,
        timeout_seconds=config.git.timeout_seconds,
    )
    strategy = get_strategy(STRATEGY_NAME).create(config.strategy.to_policy(), provider)

    repo_path = str(Path(repo).absolute())
    recorder = RecordingTraceSink()
    build_required = strategy.decide(
        SourceContext(source="git", owner=repo_path),
        BranchHead(branch),
        _parse_revision(config.git, repo_path, current),
        _parse_revision(config.git, repo_path, last_built) if last_built else None,
        _parse_revision(config.git, repo_path, last_seen) if last_seen else None,
        LoggingTraceSink(delegate=recorder),
    )
    verdict = Verdict(build_required=build_required, trace=recorder.lines)

    if as_json:
        typer.echo(json.dumps(verdict.to_dict(), indent=2))
    else:
        _print_verdict(verdict)

    raise typer.Exit(EXIT_BUILD_REQUIRED if verdict.build_required else EXIT_BUILD_NOT_REQUIRED)


@app.command()
def strategies() -> None:
    """List registered build strategies."""
    table = Table(title="Build Strategies")
    table.add_column("Name", style="cyan")
    table.add_column("Display Name")

    for descriptor in list_strategies():
        table.add_row(descriptor.name, descriptor.display_name)

    console.print(table)


def cli_main() -> None:
    """Entry point for the console script."""
    app()
