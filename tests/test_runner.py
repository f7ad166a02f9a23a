"""Tests for external command execution and secret scan parsing."""

import json
import sys

import pytest

from repo_audit.core.runner import CommandError, run_command
from repo_audit.core.secret_scan import parse_scan_output, scan_secrets


def python_command(code: str):
    return [sys.executable, "-c", code]


def test_run_command_returns_stripped_stdout():
    assert run_command(python_command("print('  hello  ')")) == "hello"


def test_failed_command_with_output_is_tolerated():
    """Test that a non-zero exit still yields what the process printed."""
    output = run_command(python_command("import sys; print('findings'); sys.exit(1)"))

    assert output == "findings"


def test_failed_command_without_output_raises():
    command = python_command("import sys; sys.stderr.write('boom'); sys.exit(2)")

    with pytest.raises(CommandError, match="boom") as excinfo:
        run_command(command)

    assert excinfo.value.command == command


def test_missing_binary_raises():
    with pytest.raises(CommandError, match="Command failed: no-such-binary-xyz"):
        run_command(["no-such-binary-xyz", "--version"])


def test_parse_scan_output_empty():
    assert parse_scan_output("") == []
    assert parse_scan_output(None) == []
    assert parse_scan_output("[]") == []


def test_parse_scan_output_finding():
    finding = {"RuleID": "generic-api-key", "File": "config.js", "StartLine": 3}

    assert parse_scan_output(json.dumps([finding])) == [finding]


def test_parse_scan_output_malformed_json_propagates():
    with pytest.raises(json.JSONDecodeError):
        parse_scan_output("not json")


def test_scan_secrets_uses_output_of_failing_scanner(tmp_path):
    """Test a scanner that exits 1 because it found leaks."""
    report = json.dumps([{"RuleID": "aws-access-token"}])
    command = python_command(f"import sys; print({report!r}); sys.exit(1)")

    findings = scan_secrets(command, cwd=tmp_path)

    assert findings == [{"RuleID": "aws-access-token"}]
