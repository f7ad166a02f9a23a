"""Access to the git checkout under audit."""

import json
from pathlib import Path
from typing import Dict, List, Optional

from git import Repo

from repo_audit.core.git_log import (
    DEFAULT_END_MARKER,
    DEFAULT_FIELD_SEPARATOR,
    build_log_format,
    parse_commit_log,
    parse_file_list,
)
from repo_audit.core.log import get_logger
from repo_audit.core.runner import run_command
from repo_audit.models.commit import CommitRecord

logger = get_logger(__name__)


class AuditRepository:
    """A git checkout plus the derived data the checks share.

    The commit list is parsed on first access and reused afterwards; every
    other accessor runs its command each time it is called.
    """

    def __init__(
        self,
        project_root: Path,
        field_separator: str = DEFAULT_FIELD_SEPARATOR,
        end_marker: str = DEFAULT_END_MARKER,
    ):
        self.project_root = Path(project_root).resolve()
        self.field_separator = field_separator
        self.end_marker = end_marker
        self._repo: Optional[Repo] = None
        self._commits: Optional[List[CommitRecord]] = None

    @property
    def repo(self) -> Repo:
        """Get the GitPython repository."""
        if self._repo is None:
            self._repo = Repo(self.project_root)
        return self._repo

    def exists(self) -> bool:
        """Check if the project root is a git checkout."""
        return (self.project_root / ".git").exists()

    def git(self, *args: str) -> str:
        """Run a git command in the checkout and return its output."""
        return run_command(["git", "-C", str(self.project_root), *args])

    @property
    def commits(self) -> List[CommitRecord]:
        """Commits on the current branch, newest first."""
        if self._commits is None:
            self._commits = self._read_commits()
            logger.debug("Parsed %d commits", len(self._commits))
        return self._commits

    def _read_commits(self) -> List[CommitRecord]:
        if not self.repo.head.is_valid():
            # No commits yet; git log would fail
            return []
        log_format = build_log_format(self.field_separator, self.end_marker)
        output = self.git("log", f"--pretty=format:{log_format}", "--date=iso8601-strict")
        return parse_commit_log(output, self.field_separator, self.end_marker)

    @property
    def first_commit(self) -> Optional[CommitRecord]:
        """The oldest commit in the log, if any."""
        return self.commits[-1] if self.commits else None

    def find_commit(self, message_prefix: str) -> Optional[CommitRecord]:
        """Newest commit whose message starts with ``message_prefix``."""
        for commit in self.commits:
            if commit.message.startswith(message_prefix):
                return commit
        return None

    def files_for_commit(self, commit_hash: str) -> List[str]:
        """Paths touched by a commit, in git's order."""
        return parse_file_list(self.git("show", "--pretty=", "--name-only", commit_hash))

    def signature(self, commit_hash: str) -> str:
        """``git log --show-signature`` output for a single commit."""
        return self.git("log", "--show-signature", "-n", "1", commit_hash)

    def branches(self) -> List[str]:
        """Lines of ``git branch --list``, including a detached HEAD entry."""
        branches = []
        for line in self.git("branch", "--list").split("\n"):
            line = line.strip()
            if line[:2] in ("* ", "+ "):
                line = line[2:]
            if line:
                branches.append(line)
        return branches

    def tags(self) -> List[str]:
        return [tag.name for tag in self.repo.tags]

    def read_file(self, relative_path: str) -> str:
        """Read a file from the working tree, stripped of surrounding whitespace."""
        return (self.project_root / relative_path).read_text(encoding="utf-8").strip()

    def package_scripts(self) -> Dict[str, str]:
        """The ``scripts`` table of package.json ({} when absent)."""
        package = json.loads(self.read_file("package.json"))
        return package.get("scripts", {})
