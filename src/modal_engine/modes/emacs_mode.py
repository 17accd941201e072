"""Emacs state machine: chords, one-level prefixes and the mark flag."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from modal_engine.keymaps import EMACS, ResolutionMatch
from modal_engine.runtime import telemetry
from modal_engine.runtime.tracing import TraceSink

from .base_mode import KeyInput, ModeContext, ModeMachine, ModeResult
from .keymap_helpers import (
    key_to_stroke,
    keymap_flag_context,
    require_keymap_resolver,
    update_flag,
)


class EmacsPrefix(str, Enum):
    BUFFER = "buffer"
    COPY = "copy"
    META = "meta"


_PREFIX_TOKENS = {
    EmacsPrefix.BUFFER: "ctrl+x",
    EmacsPrefix.COPY: "ctrl+c",
    EmacsPrefix.META: "escape",
}

_QUIT_TOKEN = "ctrl+g"


class EmacsStateMachine(ModeMachine):
    """Always inserting; chords resolve against the ``emacs`` keymap.

    A prefix lasts for exactly one follow-up key. ``C-x`` and ``C-c`` look the
    follow-up up as the second stroke of a two-stroke binding, ``ESC`` looks it
    up as if Alt were held. The prefix is dropped whether or not the follow-up
    matched; a follow-up that matched nothing is left unconsumed so its text
    still inserts.
    """

    name = "emacs"

    def __init__(self, context: ModeContext, *, trace: TraceSink | None = None) -> None:
        super().__init__(context, trace=trace)
        self._resolver = require_keymap_resolver(context)
        self._flags = keymap_flag_context(context)
        self._prefix: Optional[EmacsPrefix] = None

    @property
    def pending_prefix(self) -> Optional[EmacsPrefix]:
        return self._prefix

    @property
    def mark_active(self) -> bool:
        return bool(self._flags.get("mark_active", False))

    @property
    def is_insert_mode(self) -> bool:
        return True

    @property
    def pending_keys(self) -> str:
        return _PREFIX_TOKENS[self._prefix] if self._prefix else ""

    def reset(self) -> None:
        self._prefix = None
        update_flag(self.context, "mark_active", False)

    def handle_key(self, key: KeyInput) -> ModeResult:
        stroke = key_to_stroke(key)
        prefix, self._prefix = self._prefix, None

        if prefix is None or stroke.token == _QUIT_TOKEN:
            tokens: tuple[str, ...] = (stroke.token,)
        elif prefix is EmacsPrefix.META:
            tokens = (stroke.with_modifier("alt").token,)
        else:
            tokens = (_PREFIX_TOKENS[prefix], stroke.token)

        result = self._resolver.resolve(EMACS, tokens, context=self._flags)
        if result.status != "match" or result.match is None:
            if prefix is not None or not stroke.printable:
                self.trace.record(
                    "key.unmatched",
                    {
                        "mode": EMACS,
                        "key": " ".join(tokens),
                        "prefix": prefix.value if prefix else None,
                    },
                )
            return ModeResult(consumed=False, status="unmatched")

        outcome = self._execute_match(result.match)
        if outcome.status == "prefix" and outcome.message:
            self._prefix = EmacsPrefix(outcome.message)
        return outcome

    def _execute_match(self, match: ResolutionMatch) -> ModeResult:
        with telemetry.span(
            "keymaps::execute",
            logger_name="modal_engine.modes.emacs",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.context, match)

        if isinstance(outcome, ModeResult):
            return outcome
        return ModeResult(consumed=True)


__all__ = ["EmacsStateMachine", "EmacsPrefix"]
