"""Core functionality for Repo Audit."""
