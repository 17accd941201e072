"""Raw host events in, filtered event sequences out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from modal_engine.commands import EditorCommand, Mode
from modal_engine.keymaps import KeyStroke


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """A key press as the host reports it, e.g. ``KeyEvent("x", ("ctrl",))``.

    Construction validates the key and modifier names and raises
    ``ValueError`` for anything the keymap layer cannot normalize.
    """

    key: str
    modifiers: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "modifiers", tuple(self.modifiers))
        KeyStroke(self.key, self.modifiers)

    @property
    def stroke(self) -> KeyStroke:
        return KeyStroke(self.key, self.modifiers)


@dataclass(frozen=True, slots=True)
class TextEvent:
    text: str


InputEvent = Union[KeyEvent, TextEvent]


@dataclass(frozen=True, slots=True)
class TranslationResult:
    """What one input cycle did.

    ``forwarded`` and ``suppressed`` partition the input events in their
    original order; ``mode`` is the mode after the last event.
    """

    commands: Tuple[EditorCommand, ...]
    forwarded: Tuple[InputEvent, ...]
    suppressed: Tuple[InputEvent, ...]
    mode: Mode


__all__ = ["KeyEvent", "TextEvent", "InputEvent", "TranslationResult"]
