"""Editing verbs: deletes, newline, paste, operators and register selection."""

from __future__ import annotations

from modal_engine.commands import DeleteChar, DeleteCharForward, NewLine, Operator, Paste
from modal_engine.keymaps import ResolutionMatch
from modal_engine.modes.base_mode import ModeContext, ModeResult
from modal_engine.modes.keymap_helpers import require_operator_pipeline


def delete_char(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, commands=(DeleteChar(),))


def delete_char_forward(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, commands=(DeleteCharForward(),))


def newline(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, commands=(NewLine(),))


def paste(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, commands=(Paste(),))


def begin_operator(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Arm the operator named in the action metadata and wait for a motion."""

    operator = Operator(match.metadata["operator"])
    pipeline = require_operator_pipeline(context)
    pipeline.begin(operator, match.binding.key_signature)
    return ModeResult(consumed=True, status="operator_pending", message=operator.value)


def select_register(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    require_operator_pipeline(context).await_register()
    return ModeResult(consumed=True, status="register_pending")


__all__ = [
    "delete_char",
    "delete_char_forward",
    "newline",
    "paste",
    "begin_operator",
    "select_register",
]
