from __future__ import annotations

import pytest

from modal_engine import (
    EditorSession,
    EngineConfig,
    KeyEvent,
    Mode,
    TextEvent,
    VimSubMode,
)
from modal_engine.commands import ChangeMode, DeleteCharForward, InsertChar, NewLine
from modal_engine.runtime.tracing import RecordingTraceSink

NORMAL = Mode.vim(VimSubMode.NORMAL)
INSERT = Mode.vim(VimSubMode.INSERT)
VISUAL = Mode.vim(VimSubMode.VISUAL)


def make_session(
    text: str = "", mode: Mode = NORMAL
) -> tuple[EditorSession, RecordingTraceSink]:
    trace = RecordingTraceSink()
    session = EditorSession(EngineConfig(initial_mode=mode, initial_text=text, trace=trace))
    return session, trace


def suppression_reasons(trace: RecordingTraceSink) -> list[str]:
    return [data["reason"] for data in trace.events("event.suppressed")]


def test_consumed_key_suppresses_paired_text() -> None:
    session, trace = make_session("abc")

    result = session.process([KeyEvent("x"), TextEvent("x")])

    assert result.commands == (DeleteCharForward(),)
    assert result.forwarded == ()
    assert result.suppressed == (KeyEvent("x"), TextEvent("x"))
    assert suppression_reasons(trace) == ["consumed", "paired_key_consumed"]


def test_unbound_normal_key_forwards_key_and_drops_text() -> None:
    session, trace = make_session("abc")

    result = session.process([KeyEvent("z"), TextEvent("z")])

    assert session.view().text == "abc"
    assert result.forwarded == (KeyEvent("z"),)
    assert result.suppressed == (TextEvent("z"),)
    assert suppression_reasons(trace) == ["not_inserting"]


def test_insert_mode_types_text() -> None:
    session, trace = make_session(mode=INSERT)

    result = session.process([KeyEvent("h"), TextEvent("h"), TextEvent("i\r\n")])

    assert session.view().text == "hi\n"
    assert result.commands == (InsertChar("h"), InsertChar("i"), NewLine())
    assert result.forwarded == (KeyEvent("h"),)
    assert suppression_reasons(trace) == ["inserted", "inserted"]


def test_mode_change_applies_to_rest_of_batch() -> None:
    session, _ = make_session("abc")

    result = session.process(
        [KeyEvent("i"), TextEvent("i"), KeyEvent("q"), TextEvent("q")]
    )

    assert session.view().text == "qabc"
    assert result.mode == INSERT
    assert result.commands == (ChangeMode(INSERT), InsertChar("q"))
    assert result.suppressed == (KeyEvent("i"), TextEvent("i"), TextEvent("q"))


def test_modifier_only_key_is_forwarded() -> None:
    session, _ = make_session("abc")

    result = session.process([KeyEvent("shift", ("shift",))])

    assert result.forwarded == (KeyEvent("shift", ("shift",)),)
    assert result.commands == ()


def test_visual_yank_returns_to_normal() -> None:
    session, _ = make_session("hello world")

    session.press("v")
    for _ in range(5):
        session.press("l", text="l")
    assert session.view().selection == (0, 5)
    session.press("y", text="y")

    view = session.view()
    assert session.mode == NORMAL
    assert view.cursor == 5
    assert view.selection is None
    assert session.registers.get().text == "hello"


def test_visual_delete_cuts_selection() -> None:
    session, _ = make_session("hello world")
    session.buffer.set_cursor(5)

    session.press("v")
    session.press("$")
    session.press("d")

    assert session.view().text == "hello"
    assert session.registers.get().text == " world"
    assert session.mode == NORMAL


def test_visual_paste_replaces_selection() -> None:
    session, _ = make_session("one two")
    session.press("y")
    session.press("w")

    session.buffer.set_cursor(4)
    session.press("v")
    session.press("$")
    session.press("p")

    assert session.view().text == "one one"


def test_visual_paste_with_empty_register_keeps_text() -> None:
    session, trace = make_session("hello world")

    for key in "vllp":
        session.press(key, text=key)

    view = session.view()
    assert view.text == "hello world"
    assert view.selection is None
    assert session.mode == NORMAL
    assert trace.events("command.skipped") == [
        {"command": "paste", "reason": "empty_register"}
    ]


def test_visual_change_enters_insert() -> None:
    session, _ = make_session("abc")

    session.press("v")
    session.press("l")
    session.press("c")
    session.type_text("X")

    assert session.view().text == "Xbc"
    assert session.mode == INSERT


def test_set_mode_traces_and_announces() -> None:
    session, trace = make_session()
    seen: list[object] = []
    session.bus.subscribe("mode.changed", seen.append)

    session.set_mode("emacs")
    session.set_mode(Mode.emacs())

    assert seen == [Mode.emacs()]
    assert trace.events("mode.transition") == [{"from": "vim-normal", "to": "emacs"}]


def test_leaving_emacs_drops_mark_and_prefix() -> None:
    session, _ = make_session("abc", mode=Mode.emacs())
    session.press("space", "ctrl")
    session.press("x", "ctrl")

    session.set_mode("vim-normal")

    assert session.view().selection is None
    assert not session.emacs.mark_active
    assert session.emacs.pending_prefix is None


def test_switching_to_emacs_drops_pending_operator() -> None:
    session, _ = make_session("abc")
    session.press("d")
    assert session.view().pending == "d"

    session.set_mode(Mode.emacs())
    session.set_mode(NORMAL)
    session.press("w")

    assert session.view().text == "abc"
    assert session.view().cursor == 3
    assert session.view().pending == ""


def test_entering_visual_directly_anchors_at_cursor() -> None:
    session, _ = make_session("abcd", mode=VISUAL)

    session.press("l")
    session.press("l")

    assert session.view().selection == (0, 2)


def test_switching_from_emacs_to_visual_anchors_at_cursor() -> None:
    session, _ = make_session("abcd", mode=Mode.emacs())
    session.buffer.set_cursor(1)

    session.set_mode(VISUAL)
    session.press("l")

    assert session.mode == VISUAL
    assert session.view().selection == (1, 2)


def test_unknown_event_type_raises() -> None:
    session, _ = make_session()

    with pytest.raises(TypeError):
        session.process(["x"])  # type: ignore[list-item]
