"""Command-line interface for Repo Audit."""
