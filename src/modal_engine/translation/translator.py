"""Routes host events to the active machine and applies what comes back."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from modal_engine.commands import ChangeMode, EditorCommand, Mode, VimSubMode
from modal_engine.keymaps import MODIFIERS
from modal_engine.modes import (
    EmacsStateMachine,
    KeyInput,
    ModeMachine,
    ModeResult,
    VimStateMachine,
)
from modal_engine.runtime import telemetry
from modal_engine.runtime.tracing import NullTraceSink, TraceSink

from .events import InputEvent, KeyEvent, TextEvent, TranslationResult
from .executor import CommandExecutor


class KeyTranslator:
    """Owns the active ``Mode`` and drives one input cycle at a time.

    Commands are applied as soon as the event that produced them is handled,
    so a mode change triggered by one key already governs the next event in
    the same batch.
    """

    def __init__(
        self,
        vim: VimStateMachine,
        emacs: EmacsStateMachine,
        executor: CommandExecutor,
        *,
        mode: Optional[Mode] = None,
        trace: TraceSink | None = None,
    ) -> None:
        self.vim = vim
        self.emacs = emacs
        self.executor = executor
        self.trace: TraceSink = trace or NullTraceSink()
        self._mode = mode or Mode.emacs()
        submode = self._mode.submode
        if submode is not None:
            self.vim.set_mode(submode)
            if submode is VimSubMode.VISUAL:
                executor.selection.set_anchor(executor.buffer.cursor)

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def active_machine(self) -> ModeMachine:
        return self._machine_for(self._mode)

    def _machine_for(self, mode: Mode) -> ModeMachine:
        if mode.is_vim:
            return self.vim
        elif mode.is_emacs:
            return self.emacs
        raise ValueError(f"Unknown mode family '{mode.family}'")

    def set_mode(self, mode: Mode) -> None:
        """Switch modes; the selection anchor follows Visual entry and exit."""

        previous = self._mode
        if mode == previous:
            return
        selection = self.executor.selection
        if previous.is_emacs:
            self.emacs.reset()
            selection.clear()
        # only Vim modes carry a submode
        if mode.submode is not None:
            self.vim.set_mode(mode.submode)
            if mode.submode is VimSubMode.VISUAL:
                selection.set_anchor(self.executor.buffer.cursor)
            elif previous.submode is VimSubMode.VISUAL:
                selection.clear()
        else:
            self.vim.reset()
            selection.clear()
        self._mode = mode
        self.trace.record("mode.transition", {"from": previous.name, "to": mode.name})
        if self.executor.bus is not None:
            self.executor.bus.emit("mode.changed", mode)

    def apply(self, commands: Sequence[EditorCommand]) -> Tuple[EditorCommand, ...]:
        for command in commands:
            if isinstance(command, ChangeMode):
                self.set_mode(command.mode)
            else:
                self.executor.execute(command)
        return tuple(commands)

    def translate(self, events: Sequence[InputEvent]) -> TranslationResult:
        commands: List[EditorCommand] = []
        forwarded: List[InputEvent] = []
        suppressed: List[InputEvent] = []
        last_key_consumed: Optional[bool] = None

        for index, event in enumerate(events):
            if isinstance(event, KeyEvent):
                following = events[index + 1] if index + 1 < len(events) else None
                text = following.text if isinstance(following, TextEvent) else None
                result = self._handle_key(event, text)
                commands.extend(self.apply(result.commands))
                if result.consumed:
                    self._suppress(suppressed, event, "consumed")
                else:
                    forwarded.append(event)
                last_key_consumed = result.consumed
            elif isinstance(event, TextEvent):
                if last_key_consumed:
                    self._suppress(suppressed, event, "paired_key_consumed")
                elif not self.active_machine.is_insert_mode:
                    self._suppress(suppressed, event, "not_inserting")
                else:
                    result = self.active_machine.handle_text(event.text)
                    commands.extend(self.apply(result.commands))
                    if result.consumed:
                        self._suppress(suppressed, event, "inserted")
                    else:
                        forwarded.append(event)
                last_key_consumed = None
            else:
                raise TypeError(f"Unsupported event {event!r}")

        return TranslationResult(
            commands=tuple(commands),
            forwarded=tuple(forwarded),
            suppressed=tuple(suppressed),
            mode=self._mode,
        )

    def _handle_key(self, event: KeyEvent, text: Optional[str]) -> ModeResult:
        stroke = event.stroke
        with telemetry.span(
            "translate::key",
            logger_name="modal_engine.translation",
            component="translation",
            metadata={"key": stroke.token, "mode": self._mode.name},
        ) as handle:
            if stroke.key in MODIFIERS:
                handle.add_metadata("status", "modifier_only")
                return ModeResult(consumed=False, status="modifier_only")
            machine = self.active_machine
            result = machine.handle_key(
                KeyInput(key=event.key, modifiers=event.modifiers, text=text)
            )
            handle.add_metadata("status", result.status)
            return result

    def _suppress(
        self, suppressed: List[InputEvent], event: InputEvent, reason: str
    ) -> None:
        suppressed.append(event)
        self.trace.record(
            "event.suppressed",
            {"event": repr(event), "reason": reason, "mode": self._mode.name},
        )


__all__ = ["KeyTranslator"]
