"""Audit configuration model."""

import json
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

DEFAULT_CONFIG_NAME = ".repo-audit.json"


class FileScopeRule(BaseModel):
    """A commit found by message prefix must touch exactly these files."""

    message_prefix: str
    files: List[str]

    model_config = {"extra": "forbid"}


def _default_file_scopes() -> List[FileScopeRule]:
    return [
        FileScopeRule(message_prefix="License as CC", files=["LICENSE"]),
        FileScopeRule(
            message_prefix="Update Node.js dependencies", files=["package.json"]
        ),
    ]


def _default_package_scripts() -> Dict[str, str]:
    return {
        "dev": "vite",
        "build": "tsc -b && vite build",
        "lint": "eslint .",
        "preview": "vite preview",
    }


class AuditConfig(BaseModel):
    """Expectations checked against a repository."""

    # git log parsing
    field_separator: str = "|"
    end_marker: str = "----END----"

    # history
    expected_branch_count: int = 1
    expected_signoff_count: int = 2
    file_scopes: List[FileScopeRule] = Field(default_factory=_default_file_scopes)

    # tracked files
    package_scripts: Optional[Dict[str, str]] = Field(
        default_factory=_default_package_scripts
    )
    gitignore_patterns: List[str] = Field(
        default_factory=lambda: ["node_modules", "dist"]
    )
    license_header: str = r"^Attribution-ShareAlike 4\.0 International"
    license_footer: str = (
        r"Creative Commons may be contacted at creativecommons\.org\."
    )

    scanner_command: List[str] = Field(
        default_factory=lambda: [
            "gitleaks",
            "git",
            "--no-banner",
            "--report-format",
            "json",
            "--report-path",
            "-",
        ]
    )
    snapshot_file: str = ".repo-audit-snapshots.json"

    model_config = {"extra": "forbid"}

    @classmethod
    def load(cls, project_root: Path, config_path: Optional[Path] = None) -> "AuditConfig":
        """Load config from ``config_path`` or the project's default file.

        An explicit path must exist; the default file is optional.
        """
        if config_path is None:
            config_path = Path(project_root) / DEFAULT_CONFIG_NAME
            if not config_path.exists():
                return cls()
        data = json.loads(Path(config_path).read_text())
        return cls.model_validate(data)
