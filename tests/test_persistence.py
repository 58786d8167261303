"""
Tests for the audit ledger and the history use case.
"""

from pathlib import Path

from matchergen.core.persistence.audit import AuditEntry, AuditWriter
from matchergen.core.use_cases.history import recent_runs


def _entry(run_id: str, status: str = "ok") -> AuditEntry:
    return AuditEntry(run_id=run_id, inputs=["shop.models"], status=status, matchers_generated=2)


class TestAuditWriter:
    def test_default_location_under_output_root(self, tmp_path: Path):
        writer = AuditWriter(output_root=tmp_path)
        assert writer.path == tmp_path / ".matchergen" / "audit.ndjson"

    def test_append_and_read(self, tmp_path: Path):
        writer = AuditWriter(path=tmp_path / "nested" / "audit.ndjson")
        writer.write(_entry("run-1"))
        writer.write(_entry("run-2", status="partial"))
        entries = writer.read_all()
        assert [e.run_id for e in entries] == ["run-1", "run-2"]
        assert entries[1].status == "partial"
        assert writer.entry_count() == 2

    def test_read_missing_ledger(self, tmp_path: Path):
        writer = AuditWriter(path=tmp_path / "audit.ndjson")
        assert writer.read_all() == []
        assert writer.entry_count() == 0

    def test_corrupt_lines_skipped(self, tmp_path: Path, caplog):
        path = tmp_path / "audit.ndjson"
        writer = AuditWriter(path=path)
        writer.write(_entry("run-1"))
        with path.open("a", encoding="utf-8") as f:
            f.write("{not json\n")
            f.write('{"matchers_generated": "many"}\n')
        writer.write(_entry("run-2"))

        with caplog.at_level("WARNING"):
            entries = writer.read_all()
        assert [e.run_id for e in entries] == ["run-1", "run-2"]
        assert "Skipping corrupt audit entry at line 2" in caplog.text

    def test_read_recent(self, tmp_path: Path):
        writer = AuditWriter(path=tmp_path / "audit.ndjson")
        for i in range(5):
            writer.write(_entry(f"run-{i}"))
        assert [e.run_id for e in writer.read_recent(2)] == ["run-3", "run-4"]
        assert writer.read_recent(0) == []

    def test_write_failure_is_logged(self, tmp_path: Path, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        writer = AuditWriter(path=blocker / "audit.ndjson")
        with caplog.at_level("ERROR"):
            writer.write(_entry("run-1"))
        assert "Failed to write audit entry" in caplog.text


class TestRecentRuns:
    def test_reads_ledger_of_output_root(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        out = tmp_path / "out"
        writer = AuditWriter(output_root=out)
        for i in range(3):
            writer.write(_entry(f"run-{i}"))

        result = recent_runs(limit=2, output_root=out)
        assert result.error is None
        assert result.total == 3
        assert [e.run_id for e in result.entries] == ["run-1", "run-2"]
        assert result.to_dict()["ledger_path"] == str(out / ".matchergen" / "audit.ndjson")

    def test_config_error(self, tmp_path: Path):
        result = recent_runs(config_path=tmp_path / "missing.yml")
        assert result.error
        assert result.to_dict() == {"error": result.error}
