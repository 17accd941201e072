"""Mode-switching actions shared by the Vim keymaps."""

from __future__ import annotations

from modal_engine.commands import (
    ChangeMode,
    CursorMovement,
    Mode,
    MoveCursor,
    NewLine,
    VimSubMode,
)
from modal_engine.keymaps import ResolutionMatch
from modal_engine.modes.base_mode import ModeContext, ModeResult

_NORMAL = ChangeMode(Mode.vim(VimSubMode.NORMAL))
_INSERT = ChangeMode(Mode.vim(VimSubMode.INSERT))
_VISUAL = ChangeMode(Mode.vim(VimSubMode.VISUAL))


def enter_insert_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, commands=(_INSERT,), message="enter_insert")


def append_after_cursor(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    at_line_end = buffer.text[buffer.cursor : buffer.cursor + 1] in ("", "\n")
    commands = (_INSERT,) if at_line_end else (MoveCursor(CursorMovement.RIGHT), _INSERT)
    return ModeResult(consumed=True, commands=commands, message="append")


def insert_at_line_start(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(
        consumed=True,
        commands=(MoveCursor(CursorMovement.LINE_START), _INSERT),
        message="insert_line_start",
    )


def append_at_line_end(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(
        consumed=True,
        commands=(MoveCursor(CursorMovement.LINE_END), _INSERT),
        message="append_line_end",
    )


def open_line_below(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(
        consumed=True,
        commands=(MoveCursor(CursorMovement.LINE_END), NewLine(), _INSERT),
        message="open_below",
    )


def open_line_above(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(
        consumed=True,
        commands=(
            MoveCursor(CursorMovement.LINE_START),
            NewLine(),
            MoveCursor(CursorMovement.UP),
            _INSERT,
        ),
        message="open_above",
    )


def enter_visual_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, commands=(_VISUAL,), message="enter_visual")


def exit_to_normal_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, commands=(_NORMAL,), message="exit_to_normal")


def noop_action(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, status="noop")


__all__ = [
    "enter_insert_mode",
    "append_after_cursor",
    "insert_at_line_start",
    "append_at_line_end",
    "open_line_below",
    "open_line_above",
    "enter_visual_mode",
    "exit_to_normal_mode",
    "noop_action",
]
