"""Mode state machines and the context they share."""

from .base_mode import (
    KeyInput,
    ModeBus,
    ModeContext,
    ModeMachine,
    ModeResult,
    text_commands,
)
from .operator_pipeline import CountParser, ExecutionPlan, OperatorDraft, OperatorPipeline
from .keymap_helpers import (
    key_to_stroke,
    keymap_flag_context,
    require_keymap_resolver,
    require_operator_pipeline,
    update_flag,
)
from .vim_mode import VimStateMachine
from .emacs_mode import EmacsPrefix, EmacsStateMachine

__all__ = [
    "KeyInput",
    "ModeBus",
    "ModeContext",
    "ModeMachine",
    "ModeResult",
    "text_commands",
    "CountParser",
    "ExecutionPlan",
    "OperatorDraft",
    "OperatorPipeline",
    "key_to_stroke",
    "keymap_flag_context",
    "require_keymap_resolver",
    "require_operator_pipeline",
    "update_flag",
    "VimStateMachine",
    "EmacsStateMachine",
    "EmacsPrefix",
]
