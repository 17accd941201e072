"""Emacs chord actions: mark handling, region kill/copy and named hooks."""

from __future__ import annotations

from modal_engine.commands import Copy, Custom, Cut, Paste
from modal_engine.keymaps import ResolutionMatch
from modal_engine.modes.base_mode import ModeContext, ModeResult
from modal_engine.modes.keymap_helpers import update_flag


def begin_prefix(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Report the prefix named in the metadata; the machine records it."""

    del context
    return ModeResult(
        consumed=True, status="prefix", message=str(match.metadata["prefix"])
    )


def set_mark(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    update_flag(context, "mark_active", True)
    return ModeResult(consumed=True, commands=(Custom("set_mark"),), status="mark")


def keyboard_quit(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    update_flag(context, "mark_active", False)
    return ModeResult(
        consumed=True, commands=(Custom("keyboard_quit"),), status="quit"
    )


def kill_region(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    update_flag(context, "mark_active", False)
    return ModeResult(consumed=True, commands=(Cut(),), status="kill_region")


def copy_region(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    update_flag(context, "mark_active", False)
    return ModeResult(consumed=True, commands=(Copy(),), status="copy_region")


def yank(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, commands=(Paste(),), status="yank")


def save_buffer(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, commands=(Custom("save_buffer"),), status="save")


__all__ = [
    "begin_prefix",
    "set_mark",
    "keyboard_quit",
    "kill_region",
    "copy_region",
    "yank",
    "save_buffer",
]
