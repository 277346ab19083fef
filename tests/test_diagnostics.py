"""Tests for structured diagnostics."""

import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from access_setter.engine import DiagnosticCode, DiagnosticLog, Severity
from access_setter.engine.diagnostics import report


@pytest.fixture
def populated_log() -> DiagnosticLog:
    log = DiagnosticLog()
    log.record(Severity.WARNING, DiagnosticCode.LENIENT_PREFIX, "lenient", namespace="a.ras")
    log.record(Severity.INFO, DiagnosticCode.NAMESPACE_LOADED, "loaded a", namespace="a.ras")
    log.record(Severity.INFO, DiagnosticCode.NAMESPACE_LOADED, "loaded b", namespace="b.ras")
    log.record(
        Severity.ERROR,
        DiagnosticCode.TRANSFORM_FAILURE,
        "failed",
        target='class "com/example/Foo"',
        sources=["a.ras", "b.ras"],
    )
    return log


class TestDiagnosticLog:
    """Tests for recording and querying events."""

    def test_record(self) -> None:
        log = DiagnosticLog()
        event = log.record(Severity.WARNING, DiagnosticCode.ORIGIN_MISMATCH, "mismatch")

        assert len(log) == 1
        assert event.severity == Severity.WARNING
        assert event.sources == []
        assert event.timestamp.endswith("+00:00")

    def test_events_are_immutable(self) -> None:
        event = DiagnosticLog().record(Severity.INFO, DiagnosticCode.NAMESPACE_LOADED, "loaded")
        with pytest.raises(ValidationError):
            event.message = "changed"  # type: ignore[misc]

    def test_filter_by_severity(self, populated_log: DiagnosticLog) -> None:
        assert len(populated_log.get_events(severity=Severity.INFO)) == 2
        assert len(populated_log.get_events(severity=Severity.DEBUG)) == 0

    def test_filter_by_code(self, populated_log: DiagnosticLog) -> None:
        events = populated_log.get_events(code=DiagnosticCode.TRANSFORM_FAILURE)
        assert [e.sources for e in events] == [["a.ras", "b.ras"]]

    def test_combined_filters(self, populated_log: DiagnosticLog) -> None:
        events = populated_log.get_events(
            code=DiagnosticCode.NAMESPACE_LOADED, namespace="b.ras"
        )
        assert [e.message for e in events] == ["loaded b"]

    def test_clear(self, populated_log: DiagnosticLog) -> None:
        populated_log.clear()
        assert len(populated_log) == 0

    def test_export_to_file(self, populated_log: DiagnosticLog, tmp_path: Path) -> None:
        path = tmp_path / "reports" / "diagnostics.json"

        populated_log.export_to_file(path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert len(data) == 4
        assert data[0]["severity"] == "warning"
        assert data[0]["code"] == "lenient-prefix"
        assert data[3]["target"] == 'class "com/example/Foo"'


class TestReport:
    """Tests for the combined logging and recording helper."""

    def test_report_logs_and_records(self, caplog: pytest.LogCaptureFixture) -> None:
        log = DiagnosticLog()
        logger = logging.getLogger("access_setter.test")

        with caplog.at_level(logging.ERROR, logger="access_setter.test"):
            report(
                logger, log, Severity.ERROR, DiagnosticCode.LINE_DROPPED, "dropped", line_number=4
            )

        assert caplog.records[0].levelno == logging.ERROR
        assert caplog.records[0].getMessage() == "dropped"
        assert log.events[0].line_number == 4

    def test_report_without_sink(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("access_setter.test")

        with caplog.at_level(logging.WARNING, logger="access_setter.test"):
            report(logger, None, Severity.WARNING, DiagnosticCode.ORIGIN_MISMATCH, "mismatch")

        assert "mismatch" in caplog.text

    @pytest.mark.parametrize(
        ("severity", "level"),
        [
            (Severity.DEBUG, logging.DEBUG),
            (Severity.INFO, logging.INFO),
            (Severity.WARNING, logging.WARNING),
            (Severity.ERROR, logging.ERROR),
        ],
    )
    def test_log_levels(self, severity: Severity, level: int) -> None:
        assert severity.log_level == level
