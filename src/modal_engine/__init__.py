"""UI-agnostic modal editing engine with Vim and Emacs key semantics."""

# keymaps first: its defaults import the action and mode modules
from .keymaps import KeymapRegistry, KeymapResolver, load_default_keymaps
from .buffer import RegisterBank, SelectionState, TextBuffer
from .commands import (
    ChangeMode,
    CursorMovement,
    EditorCommand,
    Mode,
    Operator,
    VimSubMode,
)
from .config import EngineConfig
from .session import EditorSession, EngineView
from .translation import KeyEvent, TextEvent, TranslationResult

__all__ = [
    "KeymapRegistry",
    "KeymapResolver",
    "load_default_keymaps",
    "TextBuffer",
    "RegisterBank",
    "SelectionState",
    "ChangeMode",
    "CursorMovement",
    "EditorCommand",
    "Mode",
    "Operator",
    "VimSubMode",
    "EngineConfig",
    "EditorSession",
    "EngineView",
    "KeyEvent",
    "TextEvent",
    "TranslationResult",
]

__version__ = "0.1.0"
