from collections.abc import Mapping
import logging
from typing import Any

from bibsmith.core import ConversionWarning, DiagnosticEmitter, LoggingEmitter, NullEmitter
from bibsmith.core.diagnostics import emit_warnings, format_event_message


class RecordingEmitter:
    def __init__(self, *, debug_enabled: bool = False) -> None:
        self.debug_enabled = debug_enabled
        self.messages: list[tuple[str, str]] = []
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.messages.append(("error", message))

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))


WARNINGS = [
    ConversionWarning("a", "error", "parse-error", "Unbalanced braces."),
    ConversionWarning("b", "warning", "parse-error", "Unknown type 'thing'.", "type"),
    ConversionWarning("c", "info", "field-loss", "Field 'event' has no ris equivalent.", "event"),
]


def test_emitters_satisfy_the_protocol() -> None:
    assert isinstance(NullEmitter(), DiagnosticEmitter)
    assert isinstance(LoggingEmitter(), DiagnosticEmitter)
    assert isinstance(RecordingEmitter(), DiagnosticEmitter)


def test_emit_warnings_routes_by_severity() -> None:
    emitter = RecordingEmitter()
    emit_warnings(emitter, WARNINGS)
    assert emitter.messages == [
        ("error", "a: Unbalanced braces."),
        ("warning", "b: Unknown type 'thing'."),
    ]
    assert emitter.events == []


def test_info_notes_are_events_in_debug_mode() -> None:
    emitter = RecordingEmitter(debug_enabled=True)
    emit_warnings(emitter, WARNINGS)
    assert emitter.events == [
        (
            "conversion_note",
            {
                "entryId": "c",
                "severity": "info",
                "type": "field-loss",
                "message": "Field 'event' has no ris equivalent.",
                "field": "event",
            },
        )
    ]


def test_format_event_message() -> None:
    payload = {"source": "bibtex", "target": "ris", "total": 3, "successful": 2, "failed": 1}
    assert format_event_message("conversion", payload) == "Converted bibtex -> ris (2/3 entries, 1 failed)"
    payload["failed"] = 0
    assert format_event_message("conversion", payload) == "Converted bibtex -> ris (2/3 entries)"
    assert format_event_message("other", payload) is None


def test_logging_emitter(caplog) -> None:
    emitter = LoggingEmitter(logger_obj=logging.getLogger("tests.diagnostics"))
    with caplog.at_level(logging.DEBUG, logger="tests.diagnostics"):
        emitter.warning("careful")
        emitter.error("broken")
        emitter.event("conversion", {"source": "ris", "target": "bibtex", "total": 1, "successful": 1})
        emitter.event("custom", {"value": 1})

    records = [(record.levelno, record.getMessage()) for record in caplog.records]
    assert records == [
        (logging.WARNING, "careful"),
        (logging.ERROR, "broken"),
        (logging.INFO, "Converted ris -> bibtex (1/1 entries)"),
        (logging.DEBUG, "diagnostic event custom: {'value': 1}"),
    ]
