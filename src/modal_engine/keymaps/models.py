"""Dataclasses describing keymap bindings and action metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, MutableMapping

MODIFIERS = ("alt", "command", "ctrl", "shift")

# keymap tables, one per machine state
VIM_NORMAL = "vim.normal"
VIM_INSERT = "vim.insert"
VIM_VISUAL = "vim.visual"
EMACS = "emacs"

_MODIFIER_ALIASES = {
    "control": "ctrl",
    "ctl": "ctrl",
    "meta": "alt",
    "option": "alt",
    "opt": "alt",
    "cmd": "command",
    "super": "command",
    "mac_cmd": "command",
}

_KEY_ALIASES = {
    "esc": "escape",
    "<esc>": "escape",
    "return": "enter",
    "<cr>": "enter",
    "bs": "backspace",
    "del": "delete",
    "spacebar": "space",
    "arrowleft": "left",
    "arrowright": "right",
    "arrowup": "up",
    "arrowdown": "down",
    "dollar": "$",
    "caret": "^",
    "comma": ",",
    "period": ".",
    "minus": "-",
    "slash": "/",
    "semicolon": ";",
    "quote": "'",
    "backtick": "`",
    **{f"num{digit}": str(digit) for digit in range(10)},
}

# US layout: a shifted physical key folds into the symbol it types
_SHIFTED = dict(zip("1234567890-=[]\\;',./`", '!@#$%^&*()_+{}|:"<>?~'))


def normalize_key(key: str) -> str:
    if key == " ":
        return "space"
    if len(key) == 1:
        return key
    cleaned = key.strip().lower()
    return _KEY_ALIASES.get(cleaned, cleaned)


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = []
    for raw in modifiers:
        name = raw.strip().lower()
        if not name:
            continue
        name = _MODIFIER_ALIASES.get(name, name)
        if name not in MODIFIERS:
            raise ValueError(f"Unknown modifier '{raw}'")
        values.append(name)
    return tuple(sorted(dict.fromkeys(values)))


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press used by key sequences.

    ASCII capitals fold into ``shift+<lower>`` so ``G`` and ``shift+g`` are the
    same stroke. Shifted digits and punctuation fold into the symbol they
    type (``shift+4`` is ``$``, ``alt+shift+,`` is ``alt+<``), and a symbol
    never carries ``shift`` itself.
    """

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        key = normalize_key(self.key)
        modifiers = _normalize_modifiers(self.modifiers)
        if len(key) == 1 and key.isascii() and key.isalpha() and key.isupper():
            key = key.lower()
            modifiers = _normalize_modifiers(modifiers + ("shift",))
        elif "shift" in modifiers and key in _SHIFTED:
            key = _SHIFTED[key]
            modifiers = tuple(m for m in modifiers if m != "shift")
        elif len(key) == 1 and not key.isalnum() and "shift" in modifiers:
            modifiers = tuple(m for m in modifiers if m != "shift")
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "modifiers", modifiers)

    @classmethod
    def parse(cls, token: str) -> "KeyStroke":
        """Parse ``"ctrl+x"``, ``"alt+shift+,"``, ``"G"`` or ``"ctrl++"``."""

        if not token:
            raise ValueError("token cannot be empty")
        if token == "+":
            return cls("+")
        if token.endswith("++"):
            return cls("+", tuple(token[:-2].split("+")))
        *modifiers, key = token.split("+")
        return cls(key, tuple(modifiers))

    @property
    def token(self) -> str:
        if self.modifiers:
            modifier = "+".join(self.modifiers)
            return f"{modifier}+{self.key}"
        return self.key

    @property
    def printable(self) -> bool:
        """True for a bare (or shifted) single character."""

        bare = not (set(self.modifiers) - {"shift"})
        return bare and (len(self.key) == 1 or self.key == "space")

    def with_modifier(self, modifier: str) -> "KeyStroke":
        return KeyStroke(self.key, self.modifiers + (modifier,))


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Immutable collection of keystrokes."""

    strokes: tuple[KeyStroke, ...]

    def __post_init__(self) -> None:
        if not self.strokes:
            raise ValueError("KeySequence requires at least one stroke")

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(stroke.token for stroke in self.strokes)

    @classmethod
    def from_strings(cls, *keys: str) -> "KeySequence":
        strokes = tuple(KeyStroke.parse(key) for key in keys if key)
        return cls(strokes=strokes)


@dataclass(frozen=True, slots=True)
class WhenClause:
    """Simple boolean condition used to gate bindings."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        expr = expression.strip()
        if not expr:
            raise ValueError("expression cannot be empty")
        expected = True
        if expr.startswith("!"):
            expected = False
            expr = expr[1:]
        return cls(expr, expected)

    def evaluate(self, context: Mapping[str, bool]) -> bool:
        return bool(context.get(self.flag, False)) is self.expected


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Callable metadata used during binding execution.

    ``metadata`` lets mode machines read intent without calling the handler:
    ``movement`` marks motions usable after an operator, ``operator`` marks an
    operator key, ``repeatable`` lets a numeric count repeat the result.
    """

    id: str
    handler: Callable[..., object]
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


def _normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    seen: MutableMapping[str, None] = {}
    result: list[str] = []
    for tag in tags:
        cleaned = tag.strip()
        if cleaned and cleaned not in seen:
            seen[cleaned] = None
            result.append(cleaned)
    return tuple(result)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key sequence with an action and context."""

    id: str
    mode: str
    sequence: KeySequence
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    tags: tuple[str, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.mode:
            raise ValueError("binding mode cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        object.__setattr__(self, "tags", _normalize_tags(self.tags))
        normalized_when = tuple(
            clause if isinstance(clause, WhenClause) else WhenClause.parse(str(clause))
            for clause in self.when
        )
        object.__setattr__(self, "when", normalized_when)

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({clause.flag: clause.expected for clause in self.when})

    def allows(self, context: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(context) for clause in self.when)

    @property
    def key_signature(self) -> str:
        return " ".join(self.sequence.tokens)


__all__ = [
    "MODIFIERS",
    "VIM_NORMAL",
    "VIM_INSERT",
    "VIM_VISUAL",
    "EMACS",
    "normalize_key",
    "KeyStroke",
    "KeySequence",
    "WhenClause",
    "ActionRef",
    "Binding",
]
