"""Public facade wiring buffer, keymaps, machines and translator together."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from modal_engine.buffer import RegisterBank, SelectionState, Span, TextBuffer
from modal_engine.commands import Custom, EditorCommand, Mode
from modal_engine.config import EngineConfig
from modal_engine.keymaps import KeymapRegistry, KeymapResolver, load_default_keymaps
from modal_engine.modes import (
    EmacsStateMachine,
    ModeBus,
    ModeContext,
    OperatorPipeline,
    VimStateMachine,
)
from modal_engine.runtime import telemetry
from modal_engine.runtime.tracing import TelemetryTraceSink, TraceSink
from modal_engine.translation import (
    CommandExecutor,
    InputEvent,
    KeyEvent,
    KeyTranslator,
    TextEvent,
    TranslationResult,
)


@dataclass(frozen=True, slots=True)
class EngineView:
    """Everything a host needs to render one frame."""

    text: str
    cursor: int
    line: int
    column: int
    line_count: int
    char_count: int
    mode: Mode
    mode_label: str
    selection: Optional[Span]
    pending: str


class EditorSession:
    """One independent editing session.

    Owns its buffer, registers, selection, keymaps and both machines; nothing
    is shared between sessions.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        keymap_registry: KeymapRegistry | None = None,
    ) -> None:
        config = config or EngineConfig()
        if config.telemetry_preset:
            telemetry.configure(preset=config.telemetry_preset)
        self.config = config
        self.trace: TraceSink = config.trace or TelemetryTraceSink()

        self.buffer = TextBuffer(config.initial_text)
        self.registers = RegisterBank()
        self.selection = SelectionState()
        self.bus = ModeBus()

        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="modal_engine.keymaps"
        )
        if keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = KeymapResolver(
            self.keymap_registry, logger_name="modal_engine.keymaps"
        )

        self.context = ModeContext(
            buffer=self.buffer,
            registers=self.registers,
            bus=self.bus,
            selection=self.selection,
        )
        self.context.extras["keymap_registry"] = self.keymap_registry
        self.context.extras["keymap_resolver"] = self.keymap_resolver
        self.context.extras["keymap_flags"] = {}
        self.context.extras["operator_pipeline"] = OperatorPipeline(trace=self.trace)

        self.vim = VimStateMachine(self.context, trace=self.trace)
        self.emacs = EmacsStateMachine(self.context, trace=self.trace)
        self.executor = CommandExecutor(
            self.buffer,
            self.registers,
            self.selection,
            bus=self.bus,
            on_mode_change=self.set_mode,
            trace=self.trace,
        )
        self.translator = KeyTranslator(
            self.vim,
            self.emacs,
            self.executor,
            mode=config.initial_mode,
            trace=self.trace,
        )
        telemetry.record_event(
            "session.start",
            level="debug",
            data={"mode": config.initial_mode.name, "chars": len(self.buffer)},
            logger_name="modal_engine.session",
        )

    @classmethod
    def from_config(cls, data: EngineConfig | dict) -> "EditorSession":
        if isinstance(data, EngineConfig):
            return cls(data)
        return cls(EngineConfig.from_mapping(data))

    @property
    def mode(self) -> Mode:
        return self.translator.mode

    def set_mode(self, mode: Mode | str) -> None:
        if not isinstance(mode, Mode):
            mode = Mode.parse(mode)
        self.translator.set_mode(mode)

    def process(self, events: Sequence[InputEvent]) -> TranslationResult:
        """Run one input cycle over ``events`` and report what happened."""

        return self.translator.translate(tuple(events))

    def press(
        self, key: str, *modifiers: str, text: str | None = None
    ) -> TranslationResult:
        """Convenience for a single key, optionally paired with its text."""

        events: list[InputEvent] = [KeyEvent(key, tuple(modifiers))]
        if text is not None:
            events.append(TextEvent(text))
        return self.process(events)

    def type_text(self, text: str) -> TranslationResult:
        return self.process([TextEvent(text)])

    def execute(self, commands: EditorCommand | Iterable[EditorCommand]) -> None:
        if isinstance(commands, EditorCommand):
            commands = (commands,)
        self.translator.apply(tuple(commands))

    def on_custom(self, callback: Callable[[Custom], None]) -> None:
        """Call ``callback`` for every ``Custom`` command, e.g. ``save_buffer``."""

        def _forward(payload: object) -> None:
            if isinstance(payload, Custom):
                callback(payload)

        self.bus.subscribe("command.custom", _forward)

    def view(self) -> EngineView:
        snapshot = self.buffer.snapshot()
        mode = self.mode
        return EngineView(
            text=snapshot.text,
            cursor=snapshot.cursor,
            line=snapshot.line,
            column=snapshot.column,
            line_count=snapshot.line_count,
            char_count=snapshot.char_count,
            mode=mode,
            mode_label=mode.label,
            selection=self.selection.span(snapshot.cursor, snapshot.char_count),
            pending=self.translator.active_machine.pending_keys,
        )


__all__ = ["EditorSession", "EngineView"]
