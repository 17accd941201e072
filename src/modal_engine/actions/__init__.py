"""High-level editing verbs bound to keys by the default keymaps."""

from .core import (
    append_after_cursor,
    append_at_line_end,
    enter_insert_mode,
    enter_visual_mode,
    exit_to_normal_mode,
    insert_at_line_start,
    noop_action,
    open_line_above,
    open_line_below,
)
from .editing import (
    begin_operator,
    delete_char,
    delete_char_forward,
    newline,
    paste,
    select_register,
)
from .emacs import (
    begin_prefix,
    copy_region,
    keyboard_quit,
    kill_region,
    save_buffer,
    set_mark,
    yank,
)
from .motion import move_cursor
from .visual import (
    change_selection,
    delete_selection,
    replace_selection,
    yank_selection,
)

__all__ = [
    "enter_insert_mode",
    "append_after_cursor",
    "insert_at_line_start",
    "append_at_line_end",
    "open_line_below",
    "open_line_above",
    "enter_visual_mode",
    "exit_to_normal_mode",
    "noop_action",
    "delete_char",
    "delete_char_forward",
    "newline",
    "paste",
    "begin_operator",
    "select_register",
    "begin_prefix",
    "set_mark",
    "keyboard_quit",
    "kill_region",
    "copy_region",
    "yank",
    "save_buffer",
    "move_cursor",
    "yank_selection",
    "delete_selection",
    "change_selection",
    "replace_selection",
]
