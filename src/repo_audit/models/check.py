"""Outcome of a single repository check."""

from typing import Optional

from pydantic import BaseModel


class CheckResult(BaseModel):
    """Represents the result of running one check."""

    group: str
    name: str
    passed: bool
    detail: Optional[str] = None

    @property
    def status(self) -> str:
        return "PASS" if self.passed else "FAIL"
