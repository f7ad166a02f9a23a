"""Repo Audit - assertions over a git repository's history and tracked files."""

__version__ = "0.1.0"
