"""Data models for Repo Audit."""

from .check import CheckResult
from .commit import CommitRecord
from .config import AuditConfig, FileScopeRule

__all__ = ["AuditConfig", "CheckResult", "CommitRecord", "FileScopeRule"]
