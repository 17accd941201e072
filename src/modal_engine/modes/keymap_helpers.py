"""Helper utilities for keymap-driven machines and their actions."""

from __future__ import annotations

from typing import Mapping, MutableMapping, cast

from modal_engine.keymaps import KeymapResolver, KeyStroke

from .base_mode import KeyInput, ModeContext
from .operator_pipeline import OperatorPipeline


def key_to_stroke(key: KeyInput) -> KeyStroke:
    return KeyStroke(key.key, tuple(key.modifiers))


def require_keymap_resolver(context: ModeContext) -> KeymapResolver:
    resolver = context.extras.get("keymap_resolver")
    if not isinstance(resolver, KeymapResolver):
        raise RuntimeError("ModeContext.extras missing 'keymap_resolver'")
    return resolver


def require_operator_pipeline(context: ModeContext) -> OperatorPipeline:
    pipeline = context.extras.get("operator_pipeline")
    if not isinstance(pipeline, OperatorPipeline):
        raise RuntimeError("ModeContext.extras missing 'operator_pipeline'")
    return pipeline


def keymap_flag_context(context: ModeContext) -> Mapping[str, bool]:
    flags = context.extras.setdefault("keymap_flags", {})
    return cast(Mapping[str, bool], flags)


def update_flag(context: ModeContext, key: str, value: bool) -> None:
    flags = cast(
        MutableMapping[str, bool], context.extras.setdefault("keymap_flags", {})
    )
    flags[key] = value


__all__ = [
    "key_to_stroke",
    "require_keymap_resolver",
    "require_operator_pipeline",
    "keymap_flag_context",
    "update_flag",
]
