"""Actions that finish a Visual selection."""

from __future__ import annotations

from modal_engine.commands import ChangeMode, Copy, Cut, Mode, Paste, VimSubMode
from modal_engine.keymaps import ResolutionMatch
from modal_engine.modes.base_mode import ModeContext, ModeResult


def _selection_payload(context: ModeContext) -> dict[str, object]:
    buffer = context.buffer
    span = context.selection.span(buffer.cursor, len(buffer))
    return {"anchor": context.selection.anchor, "cursor": buffer.cursor, "span": span}


def yank_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.bus.emit("visual.yank", _selection_payload(context))
    return ModeResult(
        consumed=True,
        commands=(Copy(), ChangeMode(Mode.vim(VimSubMode.NORMAL))),
        status="visual_yank",
    )


def delete_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.bus.emit("visual.delete", _selection_payload(context))
    return ModeResult(
        consumed=True,
        commands=(Cut(), ChangeMode(Mode.vim(VimSubMode.NORMAL))),
        status="visual_delete",
    )


def change_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.bus.emit("visual.change", _selection_payload(context))
    return ModeResult(
        consumed=True,
        commands=(Cut(), ChangeMode(Mode.vim(VimSubMode.INSERT))),
        status="visual_change",
    )


def replace_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.bus.emit("visual.replace", _selection_payload(context))
    return ModeResult(
        consumed=True,
        commands=(
            Paste(replace_selection=True),
            ChangeMode(Mode.vim(VimSubMode.NORMAL)),
        ),
        status="visual_replace",
    )


__all__ = [
    "yank_selection",
    "delete_selection",
    "change_selection",
    "replace_selection",
]
