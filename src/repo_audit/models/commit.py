"""Commit model parsed from git log output."""

import re
from datetime import datetime
from typing import List

from pydantic import BaseModel

SIGN_OFF_PATTERN = re.compile(r"^Signed-off-by:\s*(.+)$", re.MULTILINE)


class CommitRecord(BaseModel):
    """One commit as emitted by ``git log``."""

    hash: str
    author: str
    committer: str
    author_date: str  # ISO-8601 strict, unvalidated
    message: str

    model_config = {"frozen": True}

    @property
    def short_hash(self) -> str:
        return self.hash[:8]

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]

    @property
    def has_sign_off(self) -> bool:
        return "Signed-off-by:" in self.message

    @property
    def sign_offs(self) -> List[str]:
        """Names from the ``Signed-off-by:`` trailers of the message."""
        return [name.strip() for name in SIGN_OFF_PATTERN.findall(self.message)]

    def parsed_author_date(self) -> datetime:
        """Parse the author date, raising ValueError when it is not ISO-8601."""
        value = self.author_date
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
