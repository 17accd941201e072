"""Command model: the contract between mode machines and the buffer."""

from .models import (
    REGISTER_COMMANDS,
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
    VimSubMode,
)

__all__ = [
    "CursorMovement",
    "VimSubMode",
    "Operator",
    "Mode",
    "EditorCommand",
    "InsertChar",
    "DeleteChar",
    "DeleteCharForward",
    "MoveCursor",
    "NewLine",
    "DeleteLine",
    "DeleteWord",
    "Copy",
    "Cut",
    "Paste",
    "ChangeMode",
    "Custom",
    "OperatorSpan",
    "REGISTER_COMMANDS",
]
