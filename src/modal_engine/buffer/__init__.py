"""Buffer abstractions: text storage, registers and selection state."""

from .registers import UNNAMED, RegisterBank, RegisterValue
from .selection import SelectionState, Span
from .text_buffer import BufferView, TextBuffer

__all__ = [
    "TextBuffer",
    "BufferView",
    "RegisterBank",
    "RegisterValue",
    "UNNAMED",
    "SelectionState",
    "Span",
]
