"""Structured diagnostics emitted while loading, applying and rewriting access setters.

Every diagnostic is written to the standard logging system. Callers that want
to inspect diagnostics programmatically (build tools, tests, IDE integrations)
can additionally pass a DiagnosticLog, which keeps the events as structured
records.

Example:
    >>> log = DiagnosticLog()
    >>> registry = RuleRegistry(Scope.RUNTIME, diagnostics=log)
    >>> registry.load("mymod", text)
    >>> for event in log.get_events(code=DiagnosticCode.LENIENT_PREFIX):
    ...     print(event.line_number, event.message)
"""

import json
import logging
import threading
from collections.abc import Iterable
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Severity of a diagnostic event."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def log_level(self) -> int:
        level: int = getattr(logging, self.name)
        return level


class DiagnosticCode(str, Enum):
    """Machine readable diagnostic identifiers."""

    LENIENT_PREFIX = "lenient-prefix"  # Missing special prefix accepted
    ORIGIN_MISMATCH = "origin-mismatch"  # Warn-level transform did not apply
    TRANSFORM_FAILURE = "transform-failure"  # Hard-level transform did not apply
    LINE_DROPPED = "line-dropped"  # Rewrite skipped an invalid line
    NAMESPACE_LOADED = "namespace-loaded"


class DiagnosticEvent(BaseModel):
    """A single diagnostic record.

    Attributes:
        timestamp: ISO 8601 timestamp of the event
        severity: Severity of the event
        code: Diagnostic identifier
        message: Human-readable message
        namespace: Namespace of the access setter involved, if any
        line_number: Line number within the namespace, if any
        target: Entity the event refers to, if any
        sources: Namespaces that contributed the transform involved, if any
    """

    model_config = ConfigDict(frozen=True)

    timestamp: str = Field(description="ISO 8601 timestamp of the event")
    severity: Severity = Field(description="Severity of the event")
    code: DiagnosticCode = Field(description="Diagnostic identifier")
    message: str = Field(description="Human-readable message")
    namespace: str | None = Field(default=None, description="Namespace involved")
    line_number: int | None = Field(default=None, description="Line number within the namespace")
    target: str | None = Field(default=None, description="Entity the event refers to")
    sources: list[str] = Field(default_factory=list, description="Contributing namespaces")


class DiagnosticLog:
    """In-memory, thread-safe collection of diagnostic events."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.events: list[DiagnosticEvent] = []

    def record(
        self,
        severity: Severity,
        code: DiagnosticCode,
        message: str,
        namespace: str | None = None,
        line_number: int | None = None,
        target: str | None = None,
        sources: Iterable[str] = (),
    ) -> DiagnosticEvent:
        """Store a diagnostic event and return it."""
        event = DiagnosticEvent(
            timestamp=datetime.now(timezone.utc).isoformat(),
            severity=severity,
            code=code,
            message=message,
            namespace=namespace,
            line_number=line_number,
            target=target,
            sources=list(sources),
        )
        with self._lock:
            self.events.append(event)
        return event

    def get_events(
        self,
        severity: Severity | None = None,
        code: DiagnosticCode | None = None,
        namespace: str | None = None,
    ) -> list[DiagnosticEvent]:
        """Query events, combining the given filters with AND logic."""
        with self._lock:
            filtered_events = list(self.events)

        if severity is not None:
            filtered_events = [e for e in filtered_events if e.severity == severity]
        if code is not None:
            filtered_events = [e for e in filtered_events if e.code == code]
        if namespace is not None:
            filtered_events = [e for e in filtered_events if e.namespace == namespace]

        return filtered_events

    def export_to_file(self, file_path: str | Path) -> None:
        """Write all events to a JSON file.

        Raises:
            OSError: If the file cannot be written
        """
        path = Path(file_path)
        with self._lock:
            data = [event.model_dump(mode="json") for event in self.events]

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

        logger.info(f"Exported {len(data)} diagnostic events to {path}")

    def clear(self) -> None:
        with self._lock:
            self.events.clear()

    def __len__(self) -> int:
        return len(self.events)


def report(
    log: logging.Logger,
    sink: DiagnosticLog | None,
    severity: Severity,
    code: DiagnosticCode,
    message: str,
    **context: object,
) -> None:
    """Emit a diagnostic to ``log`` and, if given, record it in ``sink``.

    Args:
        log: Logger of the emitting module
        sink: Optional structured diagnostic sink
        severity: Severity, mapped onto the logging level
        code: Diagnostic identifier
        message: Human-readable message
        **context: namespace, line_number, target and sources for the event
    """
    log.log(severity.log_level, message)
    if sink is not None:
        sink.record(severity, code, message, **context)  # type: ignore[arg-type]


__all__ = ["DiagnosticCode", "DiagnosticEvent", "DiagnosticLog", "Severity", "report"]
