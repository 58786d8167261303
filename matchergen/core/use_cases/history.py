"""
History use case — read recent runs from the audit ledger.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from matchergen.core.config.loader import ConfigError, load_config
from matchergen.core.persistence.audit import AuditEntry, AuditWriter


@dataclass
class HistoryResult:
    entries: list[AuditEntry] = field(default_factory=list)
    ledger_path: Path | None = None
    total: int = 0
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "ledger_path": str(self.ledger_path) if self.ledger_path else None,
            "total": self.total,
            "entries": [e.model_dump(mode="json") for e in self.entries],
        }


def recent_runs(
    config_path: Path | None = None,
    limit: int = 10,
    output_root: Path | str | None = None,
) -> HistoryResult:
    """Most recent ledger entries, oldest first."""
    result = HistoryResult()
    try:
        config = load_config(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    if output_root is not None:
        config = config.model_copy(update={"output_root": Path(output_root).resolve()})

    writer = AuditWriter(path=config.audit_path)
    result.ledger_path = writer.path
    result.total = writer.entry_count()
    result.entries = writer.read_recent(limit)
    return result
