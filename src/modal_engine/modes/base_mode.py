"""Base classes and shared utilities for the mode machines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from modal_engine.buffer import RegisterBank, SelectionState, TextBuffer
from modal_engine.commands import EditorCommand, InsertChar, NewLine
from modal_engine.runtime.tracing import NullTraceSink, TraceSink


@dataclass(slots=True)
class KeyInput:
    """Key press handed to a machine; ``text`` is the paired text, if any."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None


@dataclass(slots=True)
class ModeResult:
    """Outcome of one key or text input.

    ``consumed`` tells the translator to suppress the raw event; ``commands``
    are applied to the buffer in order.
    """

    consumed: bool
    commands: Tuple[EditorCommand, ...] = ()
    status: str = "ok"
    message: Optional[str] = None


@dataclass(slots=True)
class ModeContext:
    """Shared services every machine and action can read."""

    buffer: TextBuffer
    registers: RegisterBank
    bus: "ModeBus"
    selection: SelectionState = field(default_factory=SelectionState)
    extras: Dict[str, object] = field(default_factory=dict)


class ModeBus:
    """Minimal event bus letting machines and hosts exchange structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[[object], None]) -> None:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


class ModeMachine:
    """Base class for the Vim and Emacs state machines."""

    name: str = "machine"

    def __init__(self, context: ModeContext, *, trace: TraceSink | None = None) -> None:
        self.context = context
        self.trace: TraceSink = trace or NullTraceSink()

    @property
    def is_insert_mode(self) -> bool:
        return False

    @property
    def pending_keys(self) -> str:
        return ""

    def reset(self) -> None:  # pragma: no cover - default no-op
        pass

    def handle_key(self, key: KeyInput) -> ModeResult:  # pragma: no cover - abstract
        raise NotImplementedError

    def handle_text(self, text: str) -> ModeResult:
        """Turn typed text into insert commands when the machine is inserting."""

        if not self.is_insert_mode:
            return ModeResult(consumed=False, status="ignored")
        return ModeResult(consumed=True, commands=text_commands(text))


def text_commands(text: str) -> Tuple[EditorCommand, ...]:
    commands: list[EditorCommand] = []
    for char in text.replace("\r\n", "\n"):
        if char == "\n":
            commands.append(NewLine())
        elif char != "\r":
            commands.append(InsertChar(char))
    return tuple(commands)


__all__ = [
    "KeyInput",
    "ModeResult",
    "ModeContext",
    "ModeBus",
    "ModeMachine",
    "text_commands",
]
