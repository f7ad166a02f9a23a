"""Secret scanner invocation and report parsing."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from repo_audit.core.log import get_logger
from repo_audit.core.runner import run_command

logger = get_logger(__name__)


def parse_scan_output(output: Optional[str]) -> List[Dict[str, Any]]:
    """Return the scanner's JSON findings, or [] when it printed nothing.

    Malformed JSON is not caught.
    """
    if not output:
        return []
    return json.loads(output)


def scan_secrets(command: List[str], cwd: Optional[Path] = None) -> List[Dict[str, Any]]:
    """Run the secret scanner and return its findings."""
    findings = parse_scan_output(run_command(command, cwd=cwd))
    logger.info("Secret scan reported %d finding(s)", len(findings))
    return findings
