"""
Audit ledger — one NDJSON line per generation run.

The ledger lives under the output root (``.matchergen/audit.ndjson``) so
it travels with the generated matchers it describes. Lines are only ever
appended; a line that no longer parses is skipped with a warning instead
of hiding the rest of the history.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_AUDIT_DIR = ".matchergen"
DEFAULT_AUDIT_FILE = "audit.ndjson"


class AuditEntry(BaseModel):
    """Summary of one pipeline run."""

    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    run_id: str = ""
    inputs: list[str] = Field(default_factory=list)

    status: str = ""               # ok | partial | failed
    candidates_found: int = 0
    candidates_eligible: int = 0
    matchers_generated: int = 0
    matchers_failed: int = 0
    duration_ms: int = 0

    errors: list[str] = Field(default_factory=list)      # "<candidate> [<kind>] <cause>"
    artifacts: list[str] = Field(default_factory=list)   # loaded module names

    context: dict[str, Any] = Field(default_factory=dict)


class AuditWriter:
    """Appends to and reads back one ledger file.

    Args:
        path: Ledger file. Takes precedence over *output_root*.
        output_root: Output root whose default ledger to use.
    """

    def __init__(self, path: Path | None = None, output_root: Path | None = None):
        if path is None:
            base = output_root if output_root is not None else Path()
            path = base / DEFAULT_AUDIT_DIR / DEFAULT_AUDIT_FILE
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entry: AuditEntry) -> None:
        """Append *entry*. I/O errors are logged, never raised."""
        record = json.dumps(entry.model_dump(mode="json"), ensure_ascii=False)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as ledger:
                ledger.write(record + "\n")
        except OSError as e:
            logger.error("Failed to write audit entry %s to %s: %s", entry.run_id, self._path, e)
            return
        logger.debug("Audit entry %s appended to %s", entry.run_id, self._path)

    def read_all(self) -> list[AuditEntry]:
        """Every readable entry, oldest first."""
        entries = []
        for line_num, record in self._records():
            try:
                entries.append(AuditEntry.model_validate(json.loads(record)))
            except (json.JSONDecodeError, ValidationError) as e:
                logger.warning("Skipping corrupt audit entry at line %d: %s", line_num, e)
        return entries

    def read_recent(self, n: int = 20) -> list[AuditEntry]:
        """The newest *n* entries, oldest first."""
        return self.read_all()[-n:] if n > 0 else []

    def entry_count(self) -> int:
        """Number of non-blank lines, parsed or not."""
        return sum(1 for _ in self._records())

    def _records(self) -> Iterator[tuple[int, str]]:
        if not self._path.is_file():
            return
        try:
            with self._path.open("r", encoding="utf-8") as ledger:
                for line_num, line in enumerate(ledger, start=1):
                    if line.strip():
                        yield line_num, line.strip()
        except OSError as e:
            logger.error("Failed to read audit ledger %s: %s", self._path, e)
