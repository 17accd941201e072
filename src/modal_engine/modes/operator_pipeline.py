"""Count, register and operator-pending state for the Vim machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from modal_engine.commands import (
    ChangeMode,
    CursorMovement,
    DeleteLine,
    DeleteWord,
    EditorCommand,
    Mode,
    Operator,
    OperatorSpan,
    VimSubMode,
)
from modal_engine.runtime import telemetry
from modal_engine.runtime.tracing import NullTraceSink, TraceSink


@dataclass(slots=True)
class OperatorDraft:
    """Everything typed since the last completed command."""

    count: Optional[int] = None
    operator: Optional[Operator] = None
    operator_token: Optional[str] = None
    operator_count: int = 1
    register: Optional[str] = None
    awaiting_register: bool = False
    raw_keys: List[str] = field(default_factory=list)

    @property
    def awaiting_motion(self) -> bool:
        return self.operator is not None


@dataclass(frozen=True, slots=True)
class ExecutionPlan:
    """Operator plus motion, ready to become commands.

    ``motion=None`` is the doubled-operator form that works on whole lines.
    """

    operator: Operator
    motion: Optional[CursorMovement]
    count: int
    register: Optional[str]
    raw_input: Tuple[str, ...]

    def commands(self) -> Tuple[EditorCommand, ...]:
        # a counted delete stays one span so the register keeps every removed line
        single = self.count == 1 and self.register is None
        if self.operator is Operator.DELETE and single:
            if self.motion is None:
                return (DeleteLine(),)
            if self.motion is CursorMovement.WORD_RIGHT:
                return (DeleteWord(),)
        span = OperatorSpan(self.operator, self.motion, self.count, self.register)
        if self.operator is Operator.CHANGE:
            return (span, ChangeMode(Mode.vim(VimSubMode.INSERT)))
        return (span,)


class CountParser:
    def feed(self, token: str, draft: OperatorDraft) -> bool:
        """Accumulate ``token`` into the count; a leading ``0`` is not a digit."""

        if len(token) != 1 or not token.isdigit():
            return False
        if token == "0" and draft.count is None:
            return False
        draft.count = (draft.count or 0) * 10 + int(token)
        draft.raw_keys.append(token)
        return True


class OperatorPipeline:
    """Accumulates counts and an operator until a motion completes the plan."""

    def __init__(self, *, trace: TraceSink | None = None) -> None:
        self.draft = OperatorDraft()
        self.count_parser = CountParser()
        self.trace: TraceSink = trace or NullTraceSink()

    @property
    def awaiting_motion(self) -> bool:
        return self.draft.awaiting_motion

    @property
    def awaiting_register(self) -> bool:
        return self.draft.awaiting_register

    @property
    def register(self) -> Optional[str]:
        return self.draft.register

    @property
    def pending_keys(self) -> str:
        return "".join(self.draft.raw_keys)

    def feed_count(self, token: str) -> bool:
        return self.count_parser.feed(token, self.draft)

    def take_count(self) -> int:
        count = self.draft.count or 1
        self.draft.count = None
        return count

    def await_register(self) -> None:
        self.draft.awaiting_register = True
        self.draft.raw_keys.append('"')

    def select_register(self, name: str) -> None:
        self.draft.awaiting_register = False
        self.draft.register = name
        self.draft.raw_keys.append(name)

    def begin(self, operator: Operator, token: str) -> None:
        self.draft.operator_count = self.take_count()
        self.draft.operator = operator
        self.draft.operator_token = token
        self.draft.raw_keys.append(token)

    def resolve_motion(self, motion: CursorMovement, token: str) -> ExecutionPlan:
        return self._complete(motion, token)

    def resolve_line(self, token: str) -> ExecutionPlan:
        return self._complete(None, token)

    def cancel(self, reason: str) -> None:
        draft = self.draft
        if draft.operator is not None or draft.awaiting_register:
            self.trace.record(
                "operator.cancelled",
                {
                    "operator": draft.operator.value if draft.operator else None,
                    "keys": self.pending_keys,
                    "reason": reason,
                },
            )
        self.reset()

    def reset(self) -> None:
        self.draft = OperatorDraft()

    def _complete(self, motion: Optional[CursorMovement], token: str) -> ExecutionPlan:
        draft = self.draft
        if draft.operator is None:
            raise RuntimeError("No operator is pending")
        raw = tuple(draft.raw_keys) + (token,)
        plan = ExecutionPlan(
            operator=draft.operator,
            motion=motion,
            count=draft.operator_count * self.take_count(),
            register=draft.register,
            raw_input=raw,
        )
        telemetry.record_event(
            "operator.plan",
            level="debug",
            data={
                "operator": plan.operator.value,
                "motion": motion.value if motion else "line",
                "count": plan.count,
                "keys": "".join(raw),
            },
            logger_name="modal_engine.modes.operator",
        )
        self.reset()
        return plan


__all__ = [
    "OperatorDraft",
    "ExecutionPlan",
    "CountParser",
    "OperatorPipeline",
]
