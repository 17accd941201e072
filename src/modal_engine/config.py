"""Engine configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from modal_engine.commands import Mode
from modal_engine.runtime.tracing import TraceSink

DEFAULT_MODE = Mode.emacs()


@dataclass(slots=True)
class EngineConfig:
    """Initial state of a session.

    ``telemetry_preset`` names a telemetry preset (``development``,
    ``production`` or ``performance``) applied when the session is built;
    ``None`` leaves the environment-driven logging setup alone.
    """

    initial_mode: Mode = field(default_factory=lambda: DEFAULT_MODE)
    initial_text: str = ""
    trace: Optional[TraceSink] = None
    telemetry_preset: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EngineConfig":
        """Build from ``{"mode": "vim-normal", "text": "...", "telemetry": "..."}``.

        Unknown keys raise ``ValueError`` so typos surface early.
        """

        known = {"mode", "text", "telemetry", "trace"}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")

        mode = data.get("mode", DEFAULT_MODE)
        if not isinstance(mode, Mode):
            mode = Mode.parse(str(mode))
        return cls(
            initial_mode=mode,
            initial_text=str(data.get("text", "")),
            trace=data.get("trace"),
            telemetry_preset=data.get("telemetry"),
        )


__all__ = ["EngineConfig", "DEFAULT_MODE"]
