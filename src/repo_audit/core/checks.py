"""Repository checks.

Each check takes an ``AuditContext`` and raises ``CheckFailed`` when the
repository does not meet the configured expectation.
"""

import json
import re
from dataclasses import dataclass
from typing import Callable, List, NamedTuple

from repo_audit.core.log import get_logger
from repo_audit.core.repository import AuditRepository
from repo_audit.core.runner import CommandError
from repo_audit.core.secret_scan import scan_secrets
from repo_audit.core.snapshots import SnapshotStore
from repo_audit.models.check import CheckResult
from repo_audit.models.config import AuditConfig

logger = get_logger(__name__)

MESSAGE_PATTERN = re.compile(r"^[A-Z].+")
SIGNATURE_PATTERN = re.compile(r"gpg: Signature made")


class CheckFailed(AssertionError):
    """A repository expectation was not met."""


@dataclass
class AuditContext:
    """Everything a check needs, passed explicitly."""

    repository: AuditRepository
    config: AuditConfig
    snapshots: SnapshotStore


class Check(NamedTuple):
    group: str
    name: str
    func: Callable[[AuditContext], None]


# Branches


def check_single_branch(ctx: AuditContext) -> None:
    branches = ctx.repository.branches()
    expected = ctx.config.expected_branch_count
    if len(branches) != expected:
        raise CheckFailed(
            f"Expected {expected} branch(es), found {len(branches)}: {', '.join(branches)}"
        )


def check_first_commit_signed(ctx: AuditContext) -> None:
    first_commit = ctx.repository.first_commit
    if first_commit is None:
        raise CheckFailed("1st commit not found")
    signature = ctx.repository.signature(first_commit.hash)
    if not signature:
        raise CheckFailed("1st commit signature not found")
    if not SIGNATURE_PATTERN.search(signature):
        raise CheckFailed(f"1st commit {first_commit.short_hash} is not GPG signed")


# Commit messages


def check_message_format(ctx: AuditContext) -> None:
    for commit in ctx.repository.commits:
        if not commit.message:
            raise CheckFailed(f"Commit message is empty ({commit.short_hash})")
        if not MESSAGE_PATTERN.match(commit.message):
            raise CheckFailed(
                f"Commit message did not start with a capital letter "
                f"({commit.short_hash}: {commit.subject!r})"
            )


def check_message_snapshot(ctx: AuditContext) -> None:
    messages = [commit.message for commit in ctx.repository.commits]
    ctx.snapshots.assert_matches("commit_messages", messages)


# Files touched


def check_file_scopes(ctx: AuditContext) -> None:
    for rule in ctx.config.file_scopes:
        commit = ctx.repository.find_commit(rule.message_prefix)
        if commit is None:
            raise CheckFailed(f"Could not find commit starting with {rule.message_prefix!r}")
        files = ctx.repository.files_for_commit(commit.hash)
        if files != rule.files:
            raise CheckFailed(
                f"{commit.short_hash} ({rule.message_prefix!r}) touched {files}, "
                f"expected {rule.files}"
            )


# Tags and sign-off


def check_no_tags(ctx: AuditContext) -> None:
    tags = ctx.repository.tags()
    if tags:
        raise CheckFailed(f"There should be no tags in the repository, found: {', '.join(tags)}")


def check_signoff_count(ctx: AuditContext) -> None:
    signed = [commit for commit in ctx.repository.commits if commit.has_sign_off]
    expected = ctx.config.expected_signoff_count
    if len(signed) != expected:
        raise CheckFailed(f"Expected {expected} commit(s) with sign-off, found {len(signed)}")


# Author dates


def check_author_dates_valid(ctx: AuditContext) -> None:
    for commit in ctx.repository.commits:
        try:
            commit.parsed_author_date()
        except ValueError as e:
            raise CheckFailed(f"Invalid author date: {commit.author_date!r}") from e


def check_author_date_snapshot(ctx: AuditContext) -> None:
    dates = [commit.author_date for commit in ctx.repository.commits]
    ctx.snapshots.assert_matches("author_dates", dates)


# Content


def _read_tracked_file(ctx: AuditContext, relative_path: str) -> str:
    try:
        return ctx.repository.read_file(relative_path)
    except FileNotFoundError as e:
        raise CheckFailed(f"{relative_path} not found") from e
    except UnicodeDecodeError as e:
        raise CheckFailed(f"{relative_path} is not valid UTF-8: {e}") from e


def check_package_scripts(ctx: AuditContext) -> None:
    expected = ctx.config.package_scripts
    if expected is None:
        return
    _read_tracked_file(ctx, "package.json")
    try:
        scripts = ctx.repository.package_scripts()
    except json.JSONDecodeError as e:
        raise CheckFailed(f"package.json is not valid JSON: {e}") from e
    if scripts != expected:
        raise CheckFailed(f"package.json scripts {scripts} != {expected}")


def check_gitignore(ctx: AuditContext) -> None:
    body = _read_tracked_file(ctx, ".gitignore")
    for pattern in ctx.config.gitignore_patterns:
        if not re.search(pattern, body):
            raise CheckFailed(f".gitignore does not match {pattern!r}")


def check_license(ctx: AuditContext) -> None:
    body = _read_tracked_file(ctx, "LICENSE")
    if not re.search(ctx.config.license_header, body):
        raise CheckFailed("LICENSE does not start with the expected header")
    if not re.search(ctx.config.license_footer, body):
        raise CheckFailed("LICENSE does not contain the expected footer")


def check_no_secrets(ctx: AuditContext) -> None:
    leaks = scan_secrets(ctx.config.scanner_command, cwd=ctx.repository.project_root)
    if leaks:
        raise CheckFailed(f"Secrets detected in the repository ({len(leaks)} finding(s))")


ALL_CHECKS: List[Check] = [
    Check("branches", "only one branch", check_single_branch),
    Check("branches", "1st commit is GPG signed", check_first_commit_signed),
    Check("commit messages", "messages start with a capital letter", check_message_format),
    Check("commit messages", "messages match snapshot", check_message_snapshot),
    Check("files touched", "scoped commits touch only their files", check_file_scopes),
    Check("tags and sign-off", "no tags", check_no_tags),
    Check("tags and sign-off", "sign-off count", check_signoff_count),
    Check("author dates", "author dates are valid", check_author_dates_valid),
    Check("author dates", "author dates match snapshot", check_author_date_snapshot),
    Check("content", "package.json scripts", check_package_scripts),
    Check("content", ".gitignore entries", check_gitignore),
    Check("content", "LICENSE text", check_license),
    Check("content", "no secrets", check_no_secrets),
]


def run_checks(ctx: AuditContext, checks: List[Check] = ALL_CHECKS) -> List[CheckResult]:
    """Run checks in order; a failing check never stops the rest.

    Unparseable history and unreadable files are reported as failures.
    Malformed JSON from the secret scanner is re-raised. Snapshots recorded
    before that point are still saved.
    """
    results = []
    try:
        for check in checks:
            try:
                check.func(ctx)
            except json.JSONDecodeError:
                raise
            except (AssertionError, CommandError, ValueError) as e:
                logger.info("FAIL %s / %s: %s", check.group, check.name, e)
                results.append(
                    CheckResult(group=check.group, name=check.name, passed=False, detail=str(e))
                )
            else:
                logger.info("PASS %s / %s", check.group, check.name)
                results.append(CheckResult(group=check.group, name=check.name, passed=True))
    finally:
        ctx.snapshots.save()
    return results
