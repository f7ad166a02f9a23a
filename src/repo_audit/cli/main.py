"""Main CLI interface for Repo Audit."""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.table import Table

from repo_audit import __version__
from repo_audit.core.checks import AuditContext, run_checks
from repo_audit.core.log import console, setup_logging
from repo_audit.core.repository import AuditRepository
from repo_audit.core.runner import CommandError
from repo_audit.core.secret_scan import scan_secrets
from repo_audit.core.snapshots import SnapshotStore
from repo_audit.models.config import AuditConfig

project_path_option = click.option(
    "--project-path",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Path to the git checkout to audit",
)
config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON config file (default: .repo-audit.json in the project)",
)


def load_config_or_exit(project_root: Path, config_path: Optional[str]) -> AuditConfig:
    """Load the audit config or exit with an error message."""
    try:
        return AuditConfig.load(project_root, Path(config_path) if config_path else None)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Invalid config: {e}[/red]")
        raise click.Abort() from e


def get_repository_or_exit(project_path: str, config: AuditConfig) -> AuditRepository:
    """Get AuditRepository instance or exit with error message."""
    repository = AuditRepository(
        Path(project_path), config.field_separator, config.end_marker
    )
    if not repository.exists():
        console.print(f"[red]Error: {repository.project_root} is not a git repository[/red]")
        raise click.Abort()
    return repository


@click.group()
@click.version_option(__version__)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level (default: $LOG_LEVEL or WARNING)",
)
def main(log_level: Optional[str]):
    """Repo Audit - check a repository's history and tracked files."""
    setup_logging(log_level)


@main.command()
@project_path_option
@config_option
@click.option(
    "--update-snapshots",
    is_flag=True,
    help="Record commit messages and author dates instead of comparing them",
)
def check(project_path: str, config_path: Optional[str], update_snapshots: bool):
    """Run every repository check."""
    project_root = Path(project_path).resolve()
    config = load_config_or_exit(project_root, config_path)
    repository = get_repository_or_exit(project_path, config)
    snapshots = SnapshotStore(project_root / config.snapshot_file, update=update_snapshots)

    results = run_checks(AuditContext(repository, config, snapshots))

    table = Table(title=f"Repo Audit: {project_root.name}")
    table.add_column("Group", style="cyan")
    table.add_column("Check", style="magenta")
    table.add_column("Result")
    table.add_column("Detail", style="yellow")
    for result in results:
        status = "[green]PASS[/green]" if result.passed else "[red]FAIL[/red]"
        table.add_row(result.group, result.name, status, result.detail or "")
    console.print(table)

    failed = [result for result in results if not result.passed]
    if failed:
        console.print(f"[red]{len(failed)} of {len(results)} checks failed[/red]")
        sys.exit(1)
    console.print(f"[green]All {len(results)} checks passed[/green]")


@main.command()
@project_path_option
@config_option
@click.option("-n", "--limit", type=int, default=None, help="Show at most N commits")
def log(project_path: str, config_path: Optional[str], limit: Optional[int]):
    """Show the parsed commit history."""
    config = load_config_or_exit(Path(project_path).resolve(), config_path)
    repository = get_repository_or_exit(project_path, config)

    commits = repository.commits
    if limit is not None:
        commits = commits[:limit]
    if not commits:
        console.print("[yellow]No commits found[/yellow]")
        return

    table = Table(title="Commits")
    table.add_column("Hash", style="cyan", no_wrap=True)
    table.add_column("Author", style="green")
    table.add_column("Committer", style="green")
    table.add_column("Author Date", style="magenta")
    table.add_column("Subject")
    for commit in commits:
        table.add_row(
            commit.short_hash,
            commit.author,
            commit.committer,
            commit.author_date,
            commit.subject,
        )
    console.print(table)


@main.command()
@project_path_option
@config_option
@click.argument("commit_hash")
def files(project_path: str, config_path: Optional[str], commit_hash: str):
    """List files touched by COMMIT_HASH."""
    config = load_config_or_exit(Path(project_path).resolve(), config_path)
    repository = get_repository_or_exit(project_path, config)
    try:
        paths = repository.files_for_commit(commit_hash)
    except CommandError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e
    for path in paths:
        click.echo(path)


@main.command()
@project_path_option
@config_option
@click.option("--json", "as_json", is_flag=True, help="Print findings as JSON")
def scan(project_path: str, config_path: Optional[str], as_json: bool):
    """Run the secret scanner over the repository."""
    project_root = Path(project_path).resolve()
    config = load_config_or_exit(project_root, config_path)
    try:
        findings = scan_secrets(config.scanner_command, cwd=project_root)
    except CommandError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e

    if as_json:
        click.echo(json.dumps(findings, indent=2))
    elif findings:
        console.print(f"[red]{len(findings)} secret(s) detected[/red]")
    else:
        console.print("[green]No secrets detected[/green]")
    if findings:
        sys.exit(1)


if __name__ == "__main__":
    main()
