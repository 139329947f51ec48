# --- gridcsv_lib/diagnostics.py ---
"""
gridcsv_lib/diagnostics.py: Optional diagnostic events emitted while a table
is reconstructed (collected coordinates, cell mappings, serialized content).

The core only ever calls `sink.event(...)`, which builds the event and hands it
to `emit`. Whether anything is recorded is up to the sink the caller injects.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class DiagnosticEvent:
    """One observation made by the pipeline."""

    topic: str  # e.g., "grid", "assign", "serialize"
    name: str  # e.g., "label_dropped"
    message: str
    data: Dict[str, Any] = field(default_factory=dict)


class DiagnosticSink:
    """Receives diagnostic events. The base class discards them."""

    def emit(self, event: DiagnosticEvent):
        pass

    def event(self, topic, name, message, **data):
        """Convenience wrapper building and emitting a DiagnosticEvent."""
        self.emit(DiagnosticEvent(topic, name, message, data))


class NullSink(DiagnosticSink):
    """Explicit no-op sink, used when the caller does not provide one."""


class LoggingSink(DiagnosticSink):
    """Forwards events to the `<project>.<topic>` loggers at DEBUG level."""

    def __init__(self, project_name="gridcsv", level=logging.DEBUG):
        self.project_name = project_name
        self.level = level

    def emit(self, event: DiagnosticEvent):
        logger = logging.getLogger(f"{self.project_name}.{event.topic}")
        if logger.isEnabledFor(self.level):
            logger.log(self.level, "%s", event.message)


class CollectingSink(DiagnosticSink):
    """Keeps every event in memory, in emission order."""

    def __init__(self):
        self.events: List[DiagnosticEvent] = []

    def emit(self, event: DiagnosticEvent):
        self.events.append(event)

    def named(self, name) -> List[DiagnosticEvent]:
        """Returns the events with the given name."""
        return [e for e in self.events if e.name == name]

