"""Parse ``git log --pretty=format`` output into commit records.

Each commit is rendered as::

    hash SEP author SEP committer SEP author-date SEP message END

The separators are plain text, so they are a heuristic rather than an
encoding: a message containing ``END`` will still split in the wrong place.
Pick separators that cannot appear in hashes, names or dates (for example
``\\x1f`` and ``\\x1e``) when the history is not trusted.
"""

from typing import List

from repo_audit.models.commit import CommitRecord

DEFAULT_FIELD_SEPARATOR = "|"
DEFAULT_END_MARKER = "----END----"
FIELD_COUNT = 5


class CommitLogParseError(ValueError):
    """A log entry did not contain the expected fields."""


def build_log_format(
    field_separator: str = DEFAULT_FIELD_SEPARATOR,
    end_marker: str = DEFAULT_END_MARKER,
) -> str:
    """Return the ``--pretty=format:`` string matching ``parse_commit_log``."""
    return field_separator.join(["%H", "%an", "%cn", "%ad", "%B"]) + end_marker


def parse_commit_log(
    output: str,
    field_separator: str = DEFAULT_FIELD_SEPARATOR,
    end_marker: str = DEFAULT_END_MARKER,
) -> List[CommitRecord]:
    """Parse log output into records, preserving the log's order.

    Blank fragments (empty input, a trailing end marker) are skipped. A
    message that itself contains the field separator is kept whole: fields
    past the fourth are joined back together. Fewer than five fields raises
    CommitLogParseError.
    """
    if not field_separator or not end_marker:
        raise ValueError("field separator and end marker must be non-empty")

    commits = []
    for entry in output.split(end_marker):
        if not entry.strip():
            continue
        parts = entry.split(field_separator, FIELD_COUNT - 1)
        if len(parts) < FIELD_COUNT:
            raise CommitLogParseError(
                f"Expected {FIELD_COUNT} fields in log entry, got {len(parts)}: "
                f"{entry.strip()[:60]!r}"
            )
        hash_, author, committer, author_date, message = parts
        commits.append(
            CommitRecord(
                hash=hash_.strip(),
                author=author.strip(),
                committer=committer.strip(),
                author_date=author_date.strip(),
                message=message.strip(),
            )
        )
    return commits


def parse_file_list(output: str) -> List[str]:
    """Split ``git show --name-only`` output into paths, dropping blank lines."""
    return [line for line in output.split("\n") if line]
