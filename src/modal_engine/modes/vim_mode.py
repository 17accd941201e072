"""Vim state machine: Normal, Insert and Visual with counts and operators."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Tuple

from modal_engine.commands import (
    REGISTER_COMMANDS,
    CursorMovement,
    EditorCommand,
    VimSubMode,
)
from modal_engine.keymaps import (
    VIM_INSERT,
    VIM_NORMAL,
    VIM_VISUAL,
    KeyStroke,
    ResolutionMatch,
)
from modal_engine.runtime import telemetry
from modal_engine.runtime.tracing import TraceSink

from .base_mode import KeyInput, ModeContext, ModeMachine, ModeResult
from .keymap_helpers import (
    key_to_stroke,
    keymap_flag_context,
    require_keymap_resolver,
)
from .operator_pipeline import OperatorPipeline

_KEYMAPS = {
    VimSubMode.NORMAL: VIM_NORMAL,
    VimSubMode.VISUAL: VIM_VISUAL,
    VimSubMode.INSERT: VIM_INSERT,
}


class VimStateMachine(ModeMachine):
    """Resolves keys against the keymap of the current submode.

    Normal and Visual share the count/register/operator pipeline; Insert only
    resolves its few bindings and lets everything else through as text. The
    machine never touches the buffer: it returns commands and the translator
    applies them.
    """

    name = "vim"

    def __init__(
        self,
        context: ModeContext,
        *,
        submode: VimSubMode = VimSubMode.NORMAL,
        trace: TraceSink | None = None,
    ) -> None:
        super().__init__(context, trace=trace)
        self._resolver = require_keymap_resolver(context)
        self._flags = keymap_flag_context(context)
        pipeline = context.extras.get("operator_pipeline")
        if not isinstance(pipeline, OperatorPipeline):
            pipeline = OperatorPipeline(trace=self.trace)
            context.extras["operator_pipeline"] = pipeline
        self._pipeline = pipeline
        self._submode = VimSubMode(submode)

    @property
    def submode(self) -> VimSubMode:
        return self._submode

    @property
    def pipeline(self) -> OperatorPipeline:
        return self._pipeline

    @property
    def is_insert_mode(self) -> bool:
        return self._submode is VimSubMode.INSERT

    @property
    def pending_keys(self) -> str:
        return self._pipeline.pending_keys

    def set_mode(self, submode: VimSubMode) -> None:
        """Force the submode and drop any half-typed count, register or operator."""

        self._pipeline.cancel("mode_change")
        self._submode = VimSubMode(submode)

    def reset(self) -> None:
        self._pipeline.reset()

    def handle_key(self, key: KeyInput) -> ModeResult:
        stroke = key_to_stroke(key)
        if self._submode is VimSubMode.INSERT:
            return self._handle_insert(stroke)
        return self._handle_command(stroke)

    def _handle_insert(self, stroke: KeyStroke) -> ModeResult:
        result = self._resolver.resolve(VIM_INSERT, (stroke.token,), context=self._flags)
        if result.status == "match" and result.match:
            return self._execute_match(result.match)
        return ModeResult(consumed=False, status="unmatched")

    def _handle_command(self, stroke: KeyStroke) -> ModeResult:
        token = stroke.token
        pipeline = self._pipeline
        if pipeline.awaiting_register:
            return self._finish_register(stroke)
        if pipeline.feed_count(token):
            return ModeResult(consumed=True, status="count", message=pipeline.pending_keys)

        result = self._resolver.resolve(
            _KEYMAPS[self._submode], (token,), context=self._flags
        )
        match = result.match if result.status == "match" else None
        if pipeline.awaiting_motion:
            return self._complete_operator(match, token)
        if match is None:
            pipeline.cancel("unmatched_key")
            if not stroke.printable:
                self.trace.record(
                    "key.unmatched", {"mode": f"vim-{self._submode.value}", "key": token}
                )
            return ModeResult(consumed=False, status="unmatched")
        return self._run(match)

    def _finish_register(self, stroke: KeyStroke) -> ModeResult:
        key = stroke.key
        if stroke.printable and len(key) == 1 and (key.isalnum() or key == '"'):
            name = key.upper() if "shift" in stroke.modifiers else key
            self._pipeline.select_register(name)
            return ModeResult(consumed=True, status="register", message=name)
        self._pipeline.cancel("invalid_register")
        return ModeResult(consumed=True, status="cancelled")

    def _complete_operator(
        self, match: Optional[ResolutionMatch], token: str
    ) -> ModeResult:
        pipeline = self._pipeline
        metadata = match.metadata if match else {}
        if metadata.get("operator") == pipeline.draft.operator:
            plan = pipeline.resolve_line(token)
        elif "movement" in metadata:
            plan = pipeline.resolve_motion(CursorMovement(metadata["movement"]), token)
        else:
            pipeline.cancel("invalid_motion")
            return ModeResult(consumed=True, status="cancelled")
        return ModeResult(
            consumed=True,
            commands=plan.commands(),
            status="operator",
            message=plan.operator.value,
        )

    def _run(self, match: ResolutionMatch) -> ModeResult:
        metadata = match.metadata
        keeps_pending = "operator" in metadata or bool(metadata.get("register_prefix"))
        count = 1
        if not keeps_pending:
            count = self._pipeline.take_count()
            if not metadata.get("repeatable"):
                count = 1

        outcome = self._execute_match(match)
        if keeps_pending:
            return outcome

        commands = self._apply_register(outcome.commands * count)
        self._pipeline.reset()
        return ModeResult(
            consumed=outcome.consumed,
            commands=commands,
            status=outcome.status,
            message=outcome.message,
        )

    def _apply_register(
        self, commands: Tuple[EditorCommand, ...]
    ) -> Tuple[EditorCommand, ...]:
        register = self._pipeline.register
        if register is None:
            return commands
        return tuple(
            replace(command, register=register)
            if isinstance(command, REGISTER_COMMANDS) and command.register is None
            else command
            for command in commands
        )

    def _execute_match(self, match: ResolutionMatch) -> ModeResult:
        with telemetry.span(
            "keymaps::execute",
            logger_name="modal_engine.modes.vim",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.context, match)

        if isinstance(outcome, ModeResult):
            return outcome
        return ModeResult(consumed=True)


__all__ = ["VimStateMachine"]
