"""Key translation: event routing, command execution and suppression."""

from .events import InputEvent, KeyEvent, TextEvent, TranslationResult
from .executor import CommandExecutor
from .translator import KeyTranslator

__all__ = [
    "InputEvent",
    "KeyEvent",
    "TextEvent",
    "TranslationResult",
    "CommandExecutor",
    "KeyTranslator",
]
