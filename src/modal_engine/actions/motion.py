"""Cursor motions; bound per movement through ``functools.partial``."""

from __future__ import annotations

from modal_engine.commands import CursorMovement, MoveCursor
from modal_engine.keymaps import ResolutionMatch
from modal_engine.modes.base_mode import ModeContext, ModeResult


def move_cursor(
    context: ModeContext, match: ResolutionMatch, *, movement: CursorMovement
) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, commands=(MoveCursor(movement),), status="motion")


__all__ = ["move_cursor"]
