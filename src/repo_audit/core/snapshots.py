"""Recorded snapshots of ordered history values."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from repo_audit.core.log import get_logger

logger = get_logger(__name__)


class SnapshotMismatch(AssertionError):
    """A value differs from its recorded snapshot."""


class SnapshotStore:
    """JSON file mapping snapshot names to recorded lists.

    With ``update`` set, ``assert_matches`` records the value instead of
    comparing it; call ``save`` afterwards to write the file.
    """

    def __init__(self, path: Path, update: bool = False):
        self.path = Path(path)
        self.update = update
        self._data: Optional[Dict[str, Any]] = None
        self._dirty = False

    @property
    def data(self) -> Dict[str, Any]:
        if self._data is None:
            if self.path.exists():
                self._data = json.loads(self.path.read_text())
            else:
                self._data = {}
        return self._data

    def assert_matches(self, name: str, value: List[Any]) -> None:
        if self.update:
            self.data[name] = value
            self._dirty = True
            return

        if name not in self.data:
            raise SnapshotMismatch(
                f"No snapshot '{name}' in {self.path.name}; run with --update-snapshots"
            )
        expected = self.data[name]
        if expected != value:
            raise SnapshotMismatch(_describe_difference(name, expected, value))

    def save(self) -> bool:
        """Write recorded snapshots; returns whether anything was written."""
        if not self._dirty:
            return False
        self.path.write_text(json.dumps(self.data, indent=2, ensure_ascii=False) + "\n")
        logger.info("Updated snapshots in %s", self.path)
        self._dirty = False
        return True


def _describe_difference(name: str, expected: List[Any], actual: List[Any]) -> str:
    if len(expected) != len(actual):
        return (
            f"Snapshot '{name}' has {len(expected)} entries, "
            f"repository has {len(actual)}"
        )
    for index, (old, new) in enumerate(zip(expected, actual)):
        if old != new:
            return f"Snapshot '{name}' differs at entry {index}: {old!r} != {new!r}"
    return f"Snapshot '{name}' differs"
