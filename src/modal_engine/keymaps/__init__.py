"""Declarative keymap registry and default bindings."""

from .models import (
    EMACS,
    MODIFIERS,
    VIM_INSERT,
    VIM_NORMAL,
    VIM_VISUAL,
    ActionRef,
    Binding,
    KeySequence,
    KeyStroke,
    WhenClause,
    normalize_key,
)
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult

# defaults pull in the action modules, which need the names above
from .defaults import DEFAULT_ACTIONS, DEFAULT_BINDINGS, load_default_keymaps

__all__ = [
    "MODIFIERS",
    "VIM_NORMAL",
    "VIM_INSERT",
    "VIM_VISUAL",
    "EMACS",
    "normalize_key",
    "ActionRef",
    "Binding",
    "KeySequence",
    "KeyStroke",
    "WhenClause",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "load_default_keymaps",
]
