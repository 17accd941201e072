"""Applies editor commands to a buffer, its registers and its selection."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Optional

from modal_engine.buffer import RegisterBank, SelectionState, TextBuffer
from modal_engine.commands import (
    ChangeMode,
    Copy,
    CursorMovement,
    Custom,
    Cut,
    DeleteChar,
    DeleteCharForward,
    DeleteLine,
    DeleteWord,
    EditorCommand,
    InsertChar,
    Mode,
    MoveCursor,
    NewLine,
    Operator,
    OperatorSpan,
    Paste,
)
from modal_engine.modes.base_mode import ModeBus
from modal_engine.runtime.tracing import NullTraceSink, TraceSink

_MOVES: Dict[CursorMovement, Callable[[TextBuffer], None]] = {
    CursorMovement.LEFT: TextBuffer.move_cursor_left,
    CursorMovement.RIGHT: TextBuffer.move_cursor_right,
    CursorMovement.UP: TextBuffer.move_cursor_up,
    CursorMovement.DOWN: TextBuffer.move_cursor_down,
    CursorMovement.WORD_LEFT: TextBuffer.move_cursor_word_left,
    CursorMovement.WORD_RIGHT: TextBuffer.move_cursor_word_right,
    CursorMovement.LINE_START: TextBuffer.move_to_line_start,
    CursorMovement.LINE_END: TextBuffer.move_to_line_end,
    CursorMovement.DOCUMENT_START: TextBuffer.move_cursor_document_start,
    CursorMovement.DOCUMENT_END: TextBuffer.move_cursor_document_end,
}

LINE = "line"


def _as_linewise(removed: str) -> str:
    # a removed last line arrives as "\n<line>"
    if removed.startswith("\n") and not removed.endswith("\n"):
        removed = removed[1:]
    return removed if removed.endswith("\n") else removed + "\n"


class CommandExecutor:
    """Single place where commands touch the buffer.

    ``ChangeMode`` is handed to ``on_mode_change``; without a callback it is
    traced and ignored. ``Custom`` commands are announced on the bus as
    ``command.custom`` after the built-in names are handled.
    """

    def __init__(
        self,
        buffer: TextBuffer,
        registers: RegisterBank,
        selection: SelectionState,
        *,
        bus: Optional[ModeBus] = None,
        on_mode_change: Optional[Callable[[Mode], None]] = None,
        trace: TraceSink | None = None,
    ) -> None:
        self.buffer = buffer
        self.registers = registers
        self.selection = selection
        self.bus = bus
        self.on_mode_change = on_mode_change
        self.trace: TraceSink = trace or NullTraceSink()

    def execute_all(self, commands: Iterable[EditorCommand]) -> None:
        for command in commands:
            self.execute(command)

    def execute(self, command: EditorCommand) -> None:
        buffer = self.buffer
        if isinstance(command, InsertChar):
            buffer.insert_char(command.char)
        elif isinstance(command, NewLine):
            buffer.insert_newline()
        elif isinstance(command, DeleteChar):
            buffer.delete_char()
        elif isinstance(command, DeleteCharForward):
            buffer.delete_char_forward()
        elif isinstance(command, MoveCursor):
            _MOVES[command.movement](buffer)
        elif isinstance(command, DeleteLine):
            self._delete_line()
        elif isinstance(command, DeleteWord):
            removed = buffer.delete_word()
            if removed:
                self.registers.yank_to(None, removed)
        elif isinstance(command, Copy):
            self._copy(command.register, cut=False)
        elif isinstance(command, Cut):
            self._copy(command.register, cut=True)
        elif isinstance(command, Paste):
            self._paste(command)
        elif isinstance(command, ChangeMode):
            if self.on_mode_change is None:
                self.trace.record("mode.unhandled", {"mode": command.mode.name})
            else:
                self.on_mode_change(command.mode)
        elif isinstance(command, Custom):
            self._custom(command)
        elif isinstance(command, OperatorSpan):
            self._operator_span(command)
        else:
            raise TypeError(f"Unsupported command {command!r}")

    def _delete_line(self) -> None:
        if not self.buffer.text:
            self.trace.record("command.skipped", {"command": DeleteLine.kind})
            return
        removed = self.buffer.delete_line()
        self.registers.yank_to(None, _as_linewise(removed), register_type=LINE)

    def _copy(self, register: Optional[str], *, cut: bool) -> None:
        buffer = self.buffer
        span = self.selection.span(buffer.cursor, len(buffer))
        if span is None or span[0] == span[1]:
            self.trace.record(
                "command.skipped",
                {"command": Cut.kind if cut else Copy.kind, "reason": "no_selection"},
            )
            return
        text = buffer.delete_range(*span) if cut else buffer.text_range(*span)
        self.selection.clear()
        self.registers.yank_to(register, text)

    def _paste(self, command: Paste) -> None:
        buffer = self.buffer
        value = self.registers.get(command.register)
        if command.replace_selection:
            span = self.selection.span(buffer.cursor, len(buffer))
            self.selection.clear()
            if not value.text:
                self.trace.record(
                    "command.skipped", {"command": Paste.kind, "reason": "empty_register"}
                )
                return
            if span is not None:
                buffer.delete_range(*span)
        if not value.text:
            return
        if value.linewise and not command.replace_selection:
            buffer.move_to_line_end()
            if buffer.cursor == len(buffer):
                buffer.insert_text("\n")
                start = buffer.cursor
                buffer.insert_text(value.text.rstrip("\n"))
            else:
                buffer.move_cursor_right()
                start = buffer.cursor
                buffer.insert_text(value.text)
            buffer.set_cursor(start)
            return
        buffer.insert_text(value.text)

    def _custom(self, command: Custom) -> None:
        if command.name == "set_mark":
            self.selection.set_anchor(self.buffer.cursor)
        elif command.name == "keyboard_quit":
            self.selection.clear()
        if self.bus is not None:
            self.bus.emit("command.custom", command)

    def _operator_span(self, command: OperatorSpan) -> None:
        operator = command.operator
        if operator in (Operator.INDENT, Operator.OUTDENT):
            self.trace.record("operator.unsupported", {"operator": operator.value})
            return
        if command.movement is None:
            self._operate_on_lines(command)
            return

        buffer = self.buffer
        origin = buffer.cursor
        move = _MOVES[command.movement]
        for _ in range(max(1, command.count)):
            move(buffer)
        destination = buffer.cursor
        buffer.set_cursor(origin)

        start, end = min(origin, destination), max(origin, destination)
        if start == end:
            self.trace.record(
                "command.skipped", {"command": OperatorSpan.kind, "reason": "empty_span"}
            )
            return
        if operator is Operator.YANK:
            self.registers.yank_to(command.register, buffer.text_range(start, end))
            buffer.set_cursor(start)
        else:
            removed = buffer.delete_range(start, end)
            self.registers.yank_to(command.register, removed)

    def _operate_on_lines(self, command: OperatorSpan) -> None:
        buffer = self.buffer
        first = buffer.current_line()
        last = min(first + max(1, command.count) - 1, buffer.line_count() - 1)
        start = buffer.line_span(first)[0]
        end = buffer.line_span(last)[1]
        text = buffer.text_range(start, end) + "\n"
        operator = command.operator

        if operator is Operator.DELETE:
            if not buffer.text:
                return
            if end < len(buffer):
                end += 1
            elif start > 0:
                start -= 1
            buffer.delete_range(start, end)
            buffer.move_cursor_to(min(first, buffer.line_count() - 1), 0)
        elif operator is Operator.CHANGE:
            buffer.delete_range(start, end)
        self.registers.yank_to(command.register, text, register_type=LINE)


__all__ = ["CommandExecutor"]
