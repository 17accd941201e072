"""Closed command vocabulary shared by the mode machines and the buffer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional


class CursorMovement(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    WORD_LEFT = "word_left"
    WORD_RIGHT = "word_right"
    LINE_START = "line_start"
    LINE_END = "line_end"
    DOCUMENT_START = "document_start"
    DOCUMENT_END = "document_end"


class VimSubMode(str, Enum):
    NORMAL = "normal"
    INSERT = "insert"
    VISUAL = "visual"


class Operator(str, Enum):
    """Pending edit actions that wait for a motion to define their span."""

    DELETE = "delete"
    CHANGE = "change"
    YANK = "yank"
    INDENT = "indent"
    OUTDENT = "outdent"


VIM = "vim"
EMACS = "emacs"


@dataclass(frozen=True, slots=True)
class Mode:
    """Tagged mode value: ``Vim(submode)`` or ``Emacs``."""

    family: str
    submode: Optional[VimSubMode] = None

    def __post_init__(self) -> None:
        if self.family == VIM and self.submode is None:
            raise ValueError("Vim mode requires a submode")
        if self.family == EMACS and self.submode is not None:
            raise ValueError("Emacs mode takes no submode")
        if self.family not in (VIM, EMACS):
            raise ValueError(f"Unknown mode family '{self.family}'")

    @classmethod
    def vim(cls, submode: VimSubMode = VimSubMode.NORMAL) -> "Mode":
        return cls(VIM, VimSubMode(submode))

    @classmethod
    def emacs(cls) -> "Mode":
        return cls(EMACS)

    @classmethod
    def parse(cls, name: str) -> "Mode":
        """Parse ``vim-normal``, ``vim-insert``, ``vim-visual`` or ``emacs``."""

        key = "".join(name.split()).lower().replace("_", "-").replace(":", "-")
        if key == EMACS:
            return cls.emacs()
        family, _, sub = key.partition("-")
        if family == VIM:
            try:
                return cls.vim(VimSubMode(sub or VimSubMode.NORMAL.value))
            except ValueError:
                pass
        raise ValueError(f"Unknown mode '{name}'")

    @property
    def is_vim(self) -> bool:
        return self.family == VIM

    @property
    def is_emacs(self) -> bool:
        return self.family == EMACS

    @property
    def name(self) -> str:
        if self.submode is None:
            return self.family
        return f"{self.family}-{self.submode.value}"

    @property
    def label(self) -> str:
        if self.submode is None:
            return self.family.upper()
        return f"{self.family.upper()}: {self.submode.value.upper()}"

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class EditorCommand:
    """Base class of every buffer-affecting command."""

    kind: ClassVar[str] = "command"


@dataclass(frozen=True, slots=True)
class InsertChar(EditorCommand):
    char: str
    kind: ClassVar[str] = "insert_char"

    def __post_init__(self) -> None:
        if len(self.char) != 1:
            raise ValueError("InsertChar takes exactly one character")


@dataclass(frozen=True, slots=True)
class DeleteChar(EditorCommand):
    kind: ClassVar[str] = "delete_char"


@dataclass(frozen=True, slots=True)
class DeleteCharForward(EditorCommand):
    kind: ClassVar[str] = "delete_char_forward"


@dataclass(frozen=True, slots=True)
class MoveCursor(EditorCommand):
    movement: CursorMovement
    kind: ClassVar[str] = "move_cursor"


@dataclass(frozen=True, slots=True)
class NewLine(EditorCommand):
    kind: ClassVar[str] = "new_line"


@dataclass(frozen=True, slots=True)
class DeleteLine(EditorCommand):
    kind: ClassVar[str] = "delete_line"


@dataclass(frozen=True, slots=True)
class DeleteWord(EditorCommand):
    kind: ClassVar[str] = "delete_word"


@dataclass(frozen=True, slots=True)
class Copy(EditorCommand):
    register: Optional[str] = None
    kind: ClassVar[str] = "copy"


@dataclass(frozen=True, slots=True)
class Cut(EditorCommand):
    register: Optional[str] = None
    kind: ClassVar[str] = "cut"


@dataclass(frozen=True, slots=True)
class Paste(EditorCommand):
    register: Optional[str] = None
    replace_selection: bool = False
    kind: ClassVar[str] = "paste"


@dataclass(frozen=True, slots=True)
class ChangeMode(EditorCommand):
    mode: Mode
    kind: ClassVar[str] = "change_mode"


@dataclass(frozen=True, slots=True)
class Custom(EditorCommand):
    """Named hook for operations the vocabulary does not model (e.g. save)."""

    name: str
    kind: ClassVar[str] = "custom"


@dataclass(frozen=True, slots=True)
class OperatorSpan(EditorCommand):
    """Apply ``operator`` from the cursor to ``movement`` repeated ``count`` times.

    ``movement=None`` selects ``count`` whole lines starting at the cursor line.
    """

    operator: Operator
    movement: Optional[CursorMovement] = None
    count: int = 1
    register: Optional[str] = None
    kind: ClassVar[str] = "operator_span"


REGISTER_COMMANDS = (Copy, Cut, Paste, OperatorSpan)

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
