"""Injectable tracing sinks for state transitions and suppressed input."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

from . import telemetry


class TraceSink(Protocol):
    """Receives one structured record per traced engine event."""

    def record(self, event: str, data: Mapping[str, Any]) -> None:
        ...


class TelemetryTraceSink:
    """Default sink: forwards records to the telemetry logger at debug level."""

    def __init__(
        self, *, logger_name: str = "modal_engine.trace", level: str = "debug"
    ) -> None:
        self.logger_name = logger_name
        self.level = level

    def record(self, event: str, data: Mapping[str, Any]) -> None:
        telemetry.record_event(
            event, level=self.level, data=dict(data), logger_name=self.logger_name
        )


class NullTraceSink:
    def record(self, event: str, data: Mapping[str, Any]) -> None:
        del event, data


@dataclass
class RecordingTraceSink:
    """Keeps records in memory; handy for hosts that display a debug pane."""

    records: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)
    limit: Optional[int] = None

    def record(self, event: str, data: Mapping[str, Any]) -> None:
        self.records.append((event, dict(data)))
        if self.limit is not None and len(self.records) > self.limit:
            del self.records[: len(self.records) - self.limit]

    def events(self, name: Optional[str] = None) -> List[Dict[str, Any]]:
        return [data for event, data in self.records if name is None or event == name]

    def clear(self) -> None:
        self.records.clear()


__all__ = [
    "TraceSink",
    "TelemetryTraceSink",
    "NullTraceSink",
    "RecordingTraceSink",
]
