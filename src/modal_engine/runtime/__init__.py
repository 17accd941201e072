"""Runtime services: structlog telemetry and tracing sinks."""

from . import telemetry
from .tracing import NullTraceSink, RecordingTraceSink, TelemetryTraceSink, TraceSink

__all__ = [
    "telemetry",
    "TraceSink",
    "TelemetryTraceSink",
    "NullTraceSink",
    "RecordingTraceSink",
]
