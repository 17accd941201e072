"""Built-in keymaps that seed every machine state with its bindings."""

from __future__ import annotations

from functools import partial
from typing import Iterable, Mapping, Sequence

from modal_engine.actions import core as core_actions
from modal_engine.actions import editing as edit_actions
from modal_engine.actions import emacs as emacs_actions
from modal_engine.actions import motion as motion_actions
from modal_engine.actions import visual as visual_actions
from modal_engine.commands import CursorMovement, Operator

from .models import (
    EMACS,
    VIM_INSERT,
    VIM_NORMAL,
    VIM_VISUAL,
    ActionRef,
    Binding,
    KeySequence,
    WhenClause,
)
from .registry import KeymapRegistry

_JUMPS = (CursorMovement.DOCUMENT_START, CursorMovement.DOCUMENT_END)

MOTION_ACTIONS: tuple[ActionRef, ...] = tuple(
    ActionRef(
        id=f"motion.{movement.value}",
        handler=partial(motion_actions.move_cursor, movement=movement),
        description=f"Move cursor {movement.value.replace('_', ' ')}",
        metadata={"movement": movement, "repeatable": movement not in _JUMPS},
    )
    for movement in CursorMovement
)

DEFAULT_ACTIONS: tuple[ActionRef, ...] = MOTION_ACTIONS + (
    ActionRef(
        id="core.enter_insert",
        handler=core_actions.enter_insert_mode,
        description="Insert before the cursor",
    ),
    ActionRef(
        id="core.append",
        handler=core_actions.append_after_cursor,
        description="Insert after the cursor",
    ),
    ActionRef(
        id="core.insert_line_start",
        handler=core_actions.insert_at_line_start,
        description="Insert at the start of the line",
    ),
    ActionRef(
        id="core.append_line_end",
        handler=core_actions.append_at_line_end,
        description="Insert at the end of the line",
    ),
    ActionRef(
        id="core.open_below",
        handler=core_actions.open_line_below,
        description="Open a line below and insert",
    ),
    ActionRef(
        id="core.open_above",
        handler=core_actions.open_line_above,
        description="Open a line above and insert",
    ),
    ActionRef(
        id="core.enter_visual",
        handler=core_actions.enter_visual_mode,
        description="Enter visual mode",
    ),
    ActionRef(
        id="core.exit_to_normal",
        handler=core_actions.exit_to_normal_mode,
        description="Return to normal mode",
    ),
    ActionRef(
        id="core.cancel",
        handler=core_actions.noop_action,
        description="Discard pending count and operator",
    ),
    ActionRef(
        id="edit.delete_char",
        handler=edit_actions.delete_char,
        description="Delete the character before the cursor",
    ),
    ActionRef(
        id="edit.delete_char_forward",
        handler=edit_actions.delete_char_forward,
        description="Delete the character under the cursor",
        metadata={"repeatable": True},
    ),
    ActionRef(
        id="edit.newline",
        handler=edit_actions.newline,
        description="Insert a line break",
    ),
    ActionRef(
        id="edit.paste",
        handler=edit_actions.paste,
        description="Paste from the active register",
        metadata={"repeatable": True},
    ),
    ActionRef(
        id="edit.select_register",
        handler=edit_actions.select_register,
        description="Name the register used by the next command",
        metadata={"register_prefix": True},
    ),
    ActionRef(
        id="operator.delete",
        handler=edit_actions.begin_operator,
        description="Delete over a motion",
        metadata={"operator": Operator.DELETE},
    ),
    ActionRef(
        id="operator.change",
        handler=edit_actions.begin_operator,
        description="Change over a motion",
        metadata={"operator": Operator.CHANGE},
    ),
    ActionRef(
        id="operator.yank",
        handler=edit_actions.begin_operator,
        description="Yank over a motion",
        metadata={"operator": Operator.YANK},
    ),
    ActionRef(
        id="visual.yank_selection",
        handler=visual_actions.yank_selection,
        description="Yank current visual selection",
    ),
    ActionRef(
        id="visual.delete_selection",
        handler=visual_actions.delete_selection,
        description="Delete current selection",
    ),
    ActionRef(
        id="visual.change_selection",
        handler=visual_actions.change_selection,
        description="Change current selection",
    ),
    ActionRef(
        id="visual.replace_selection",
        handler=visual_actions.replace_selection,
        description="Replace selection with the register",
    ),
    ActionRef(
        id="emacs.prefix.buffer",
        handler=emacs_actions.begin_prefix,
        description="C-x prefix",
        metadata={"prefix": "buffer"},
    ),
    ActionRef(
        id="emacs.prefix.copy",
        handler=emacs_actions.begin_prefix,
        description="C-c prefix",
        metadata={"prefix": "copy"},
    ),
    ActionRef(
        id="emacs.prefix.meta",
        handler=emacs_actions.begin_prefix,
        description="ESC acts as Meta for the next key",
        metadata={"prefix": "meta"},
    ),
    ActionRef(
        id="emacs.set_mark",
        handler=emacs_actions.set_mark,
        description="Set the mark at the cursor",
        metadata={"mark": True},
    ),
    ActionRef(
        id="emacs.keyboard_quit",
        handler=emacs_actions.keyboard_quit,
        description="Abort prefix and deactivate the mark",
        metadata={"mark": False},
    ),
    ActionRef(
        id="emacs.kill_region",
        handler=emacs_actions.kill_region,
        description="Kill the region between mark and cursor",
        metadata={"mark": False},
    ),
    ActionRef(
        id="emacs.copy_region",
        handler=emacs_actions.copy_region,
        description="Copy the region between mark and cursor",
    ),
    ActionRef(
        id="emacs.yank",
        handler=emacs_actions.yank,
        description="Yank the last kill",
    ),
    ActionRef(
        id="emacs.save_buffer",
        handler=emacs_actions.save_buffer,
        description="Request a save from the host",
    ),
)


def _bind(
    mode: str,
    keys: Iterable[str],
    action_id: str,
    *,
    when: Sequence[str] = (),
) -> tuple[Binding, ...]:
    """One binding per entry of ``keys``; a space separates chord strokes."""

    bindings = []
    for key in keys:
        strokes = key.split(" ")
        sequence = KeySequence.from_strings(*strokes)
        bindings.append(
            Binding(
                id=f"{mode}.{action_id}.{'_'.join(sequence.tokens)}",
                mode=mode,
                sequence=sequence,
                action_id=action_id,
                when=tuple(WhenClause.parse(clause) for clause in when),
            )
        )
    return tuple(bindings)


_VIM_MOTION_KEYS: Mapping[CursorMovement, tuple[str, ...]] = {
    CursorMovement.LEFT: ("h", "left", "backspace"),
    CursorMovement.RIGHT: ("l", "right"),
    CursorMovement.UP: ("k", "up"),
    CursorMovement.DOWN: ("j", "down"),
    CursorMovement.WORD_RIGHT: ("w",),
    CursorMovement.WORD_LEFT: ("b",),
    CursorMovement.LINE_START: ("0", "^", "home"),
    CursorMovement.LINE_END: ("$", "end"),
    CursorMovement.DOCUMENT_START: ("g",),
    CursorMovement.DOCUMENT_END: ("G",),
}

_INSERT_MOTION_KEYS: Mapping[CursorMovement, tuple[str, ...]] = {
    CursorMovement.LEFT: ("left",),
    CursorMovement.RIGHT: ("right",),
    CursorMovement.UP: ("up",),
    CursorMovement.DOWN: ("down",),
    CursorMovement.LINE_START: ("home",),
    CursorMovement.LINE_END: ("end",),
}

_EMACS_MOTION_KEYS: Mapping[CursorMovement, tuple[str, ...]] = {
    CursorMovement.LEFT: ("ctrl+b", "left"),
    CursorMovement.RIGHT: ("ctrl+f", "right"),
    CursorMovement.UP: ("ctrl+p", "up"),
    CursorMovement.DOWN: ("ctrl+n", "down"),
    CursorMovement.WORD_RIGHT: ("alt+f",),
    CursorMovement.WORD_LEFT: ("alt+b",),
    CursorMovement.LINE_START: ("ctrl+a", "home"),
    CursorMovement.LINE_END: ("ctrl+e", "end"),
    CursorMovement.DOCUMENT_START: ("alt+<", "ctrl+home"),
    CursorMovement.DOCUMENT_END: ("alt+>", "ctrl+end"),
}


def _motion_bindings(
    mode: str, table: Mapping[CursorMovement, tuple[str, ...]]
) -> tuple[Binding, ...]:
    bindings: tuple[Binding, ...] = ()
    for movement, keys in table.items():
        bindings += _bind(mode, keys, f"motion.{movement.value}")
    return bindings


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    # vim normal
    _motion_bindings(VIM_NORMAL, _VIM_MOTION_KEYS)
    + _bind(VIM_NORMAL, ("i",), "core.enter_insert")
    + _bind(VIM_NORMAL, ("a",), "core.append")
    + _bind(VIM_NORMAL, ("I",), "core.insert_line_start")
    + _bind(VIM_NORMAL, ("A",), "core.append_line_end")
    + _bind(VIM_NORMAL, ("o",), "core.open_below")
    + _bind(VIM_NORMAL, ("O",), "core.open_above")
    + _bind(VIM_NORMAL, ("v",), "core.enter_visual")
    + _bind(VIM_NORMAL, ("escape",), "core.cancel")
    + _bind(VIM_NORMAL, ("x", "delete"), "edit.delete_char_forward")
    + _bind(VIM_NORMAL, ("p",), "edit.paste")
    + _bind(VIM_NORMAL, ('"',), "edit.select_register")
    + _bind(VIM_NORMAL, ("d",), "operator.delete")
    + _bind(VIM_NORMAL, ("c",), "operator.change")
    + _bind(VIM_NORMAL, ("y",), "operator.yank")
    # vim visual
    + _motion_bindings(VIM_VISUAL, _VIM_MOTION_KEYS)
    + _bind(VIM_VISUAL, ("v", "escape"), "core.exit_to_normal")
    + _bind(VIM_VISUAL, ("y",), "visual.yank_selection")
    + _bind(VIM_VISUAL, ("x", "d", "delete"), "visual.delete_selection")
    + _bind(VIM_VISUAL, ("c",), "visual.change_selection")
    + _bind(VIM_VISUAL, ("p",), "visual.replace_selection")
    + _bind(VIM_VISUAL, ('"',), "edit.select_register")
    # vim insert
    + _motion_bindings(VIM_INSERT, _INSERT_MOTION_KEYS)
    + _bind(VIM_INSERT, ("escape",), "core.exit_to_normal")
    + _bind(VIM_INSERT, ("backspace",), "edit.delete_char")
    + _bind(VIM_INSERT, ("delete",), "edit.delete_char_forward")
    + _bind(VIM_INSERT, ("enter",), "edit.newline")
    # emacs
    + _motion_bindings(EMACS, _EMACS_MOTION_KEYS)
    + _bind(EMACS, ("ctrl+d", "delete"), "edit.delete_char_forward")
    + _bind(EMACS, ("ctrl+h", "backspace"), "edit.delete_char")
    + _bind(EMACS, ("enter",), "edit.newline")
    + _bind(EMACS, ("ctrl+space",), "emacs.set_mark")
    + _bind(EMACS, ("ctrl+g",), "emacs.keyboard_quit")
    + _bind(EMACS, ("ctrl+x",), "emacs.prefix.buffer")
    + _bind(EMACS, ("ctrl+c",), "emacs.prefix.copy")
    + _bind(EMACS, ("escape",), "emacs.prefix.meta")
    + _bind(EMACS, ("ctrl+x ctrl+s",), "emacs.save_buffer")
    + _bind(EMACS, ("ctrl+x ctrl+k",), "emacs.kill_region", when=("mark_active",))
    + _bind(EMACS, ("ctrl+x c",), "emacs.copy_region")
    + _bind(EMACS, ("ctrl+x v",), "emacs.yank")
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    per_mode_overrides: Mapping[str, Iterable[Binding]] | None = None,
) -> None:
    """Register built-in actions and bindings for every machine state.

    ``extra_bindings`` are added after the defaults and must not conflict;
    ``per_mode_overrides`` replace whatever they collide with.
    """

    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        registry.register_binding(binding, replace=replace)

    if extra_bindings:
        for binding in extra_bindings:
            registry.register_binding(binding, replace=replace)

    if per_mode_overrides:
        for mode, bindings in per_mode_overrides.items():
            for binding in bindings:
                if binding.mode != mode:
                    raise ValueError(
                        f"Override binding '{binding.id}' must target mode '{mode}'"
                    )
                registry.register_binding(binding, replace=True)


__all__ = [
    "load_default_keymaps",
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "MOTION_ACTIONS",
]
