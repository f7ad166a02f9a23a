"""Tests for AuditRepository against real git repositories."""

import json
import tempfile
from pathlib import Path

import pytest
from git import Actor, Repo

from repo_audit.core.repository import AuditRepository

ALICE = Actor("Alice Example", "alice@example.com")
BOB = Actor("Bob Example", "bob@example.com")


@pytest.fixture
def temp_git_project():
    """Create a temporary git project with a small history."""
    with tempfile.TemporaryDirectory() as temp_dir:
        project_path = Path(temp_dir)
        repo = Repo.init(project_path)

        (project_path / "README.md").write_text("# Test Project\n")
        (project_path / "package.json").write_text(
            json.dumps({"name": "demo", "scripts": {"dev": "vite"}})
        )
        repo.index.add(["README.md", "package.json"])
        repo.index.commit("Initial commit", author=ALICE, committer=BOB)

        (project_path / "LICENSE").write_text("License text\n")
        repo.index.add(["LICENSE"])
        repo.index.commit(
            "Add license\n\nPipes | in | the body.\n\nSigned-off-by: Alice Example <alice@example.com>",
            author=ALICE,
            committer=ALICE,
        )

        yield project_path


def test_commits_newest_first(temp_git_project):
    repository = AuditRepository(temp_git_project)

    commits = repository.commits

    assert [c.subject for c in commits] == ["Add license", "Initial commit"]
    assert commits[1].author == "Alice Example"
    assert commits[1].committer == "Bob Example"
    assert commits[0].hash == Repo(temp_git_project).head.commit.hexsha
    assert commits[0].message.endswith("Signed-off-by: Alice Example <alice@example.com>")
    assert "Pipes | in | the body." in commits[0].message
    for commit in commits:
        commit.parsed_author_date()


def test_commits_are_memoized(temp_git_project):
    """Test that the history is read once per repository object."""
    repository = AuditRepository(temp_git_project)
    first = repository.commits

    repo = Repo(temp_git_project)
    (temp_git_project / "new.txt").write_text("new\n")
    repo.index.add(["new.txt"])
    repo.index.commit("Later commit", author=ALICE, committer=ALICE)

    assert repository.commits is first
    assert len(AuditRepository(temp_git_project).commits) == 3


def test_custom_separators(temp_git_project):
    repository = AuditRepository(temp_git_project, field_separator="\x1f", end_marker="\x1e\x1e")

    assert [c.subject for c in repository.commits] == ["Add license", "Initial commit"]


def test_first_commit_and_find_commit(temp_git_project):
    repository = AuditRepository(temp_git_project)

    assert repository.first_commit.subject == "Initial commit"
    assert repository.find_commit("Add lic").subject == "Add license"
    assert repository.find_commit("Nothing like this") is None


def test_files_for_commit(temp_git_project):
    repository = AuditRepository(temp_git_project)
    license_commit, initial_commit = repository.commits

    assert repository.files_for_commit(license_commit.hash) == ["LICENSE"]
    assert repository.files_for_commit(initial_commit.hash) == ["README.md", "package.json"]


def test_branches_and_tags(temp_git_project):
    repository = AuditRepository(temp_git_project)
    assert len(repository.branches()) == 1
    assert repository.tags() == []

    Repo(temp_git_project).create_tag("v1.0")
    assert repository.tags() == ["v1.0"]


def test_signature_of_unsigned_commit(temp_git_project):
    repository = AuditRepository(temp_git_project)

    signature = repository.signature(repository.first_commit.hash)

    assert "Initial commit" in signature
    assert "gpg: Signature made" not in signature


def test_tracked_files(temp_git_project):
    repository = AuditRepository(temp_git_project)

    assert repository.read_file("LICENSE") == "License text"
    assert repository.package_scripts() == {"dev": "vite"}


def test_empty_repository(tmp_path):
    """Test that a repository without commits has an empty history."""
    Repo.init(tmp_path)
    repository = AuditRepository(tmp_path)

    assert repository.exists()
    assert repository.commits == []
    assert repository.first_commit is None
    assert repository.branches() == []


def test_not_a_repository(tmp_path):
    assert not AuditRepository(tmp_path).exists()


def test_branches_include_detached_head(temp_git_project):
    """Test that a detached checkout is listed like git branch --list shows it."""
    repo = Repo(temp_git_project)
    repo.create_head("feature")
    repo.git.checkout(repo.head.commit.hexsha)

    branches = AuditRepository(temp_git_project).branches()

    assert len(branches) == 3
    assert "feature" in branches
    assert any(branch.startswith("(HEAD detached") for branch in branches)


def test_read_file_strips_whitespace(temp_git_project):
    (temp_git_project / "LICENSE").write_text("\n  License text  \n\n", encoding="utf-8")

    assert AuditRepository(temp_git_project).read_file("LICENSE") == "License text"
