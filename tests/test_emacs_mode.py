from __future__ import annotations

from modal_engine import EditorSession, EngineConfig, KeyEvent, TextEvent
from modal_engine.commands import Custom
from modal_engine.modes import EmacsPrefix
from modal_engine.runtime.tracing import RecordingTraceSink


def make_session(text: str = "", cursor: int = 0) -> EditorSession:
    session = EditorSession(EngineConfig(initial_text=text, trace=RecordingTraceSink()))
    session.buffer.set_cursor(cursor)
    return session


def make_trace(session: EditorSession) -> RecordingTraceSink:
    assert isinstance(session.trace, RecordingTraceSink)
    return session.trace


def test_emacs_is_default_and_always_inserting() -> None:
    session = make_session()

    result = session.press("h", text="h")

    assert session.mode.is_emacs
    assert session.view().text == "h"
    assert result.forwarded == (KeyEvent("h"),)
    assert result.suppressed == (TextEvent("h"),)


def test_control_chords_move_and_delete() -> None:
    session = make_session("hello")

    session.press("e", "ctrl")
    assert session.view().cursor == 5
    session.press("a", "ctrl")
    assert session.view().cursor == 0
    session.press("f", "ctrl")
    session.press("d", "ctrl")

    assert session.view().text == "hllo"
    assert session.view().cursor == 1


def test_chord_text_is_suppressed() -> None:
    session = make_session("abc")

    result = session.press("b", "ctrl", text="b")

    assert session.view().text == "abc"
    assert result.forwarded == ()
    assert len(result.suppressed) == 2


def test_save_chord_reaches_custom_callback() -> None:
    session = make_session("abc")
    received: list[Custom] = []
    session.on_custom(received.append)

    session.press("x", "ctrl")
    assert session.emacs.pending_prefix is EmacsPrefix.BUFFER
    assert session.view().pending == "ctrl+x"
    session.press("s", "ctrl")

    assert received == [Custom("save_buffer")]
    assert session.emacs.pending_prefix is None
    assert session.view().text == "abc"


def test_unbound_follow_up_clears_prefix_and_inserts() -> None:
    session = make_session()

    session.press("x", "ctrl")
    result = session.press("a", text="a")

    assert session.view().text == "a"
    assert session.emacs.pending_prefix is None
    assert result.forwarded == (KeyEvent("a"),)
    (unmatched,) = make_trace(session).events("key.unmatched")
    assert unmatched["key"] == "ctrl+x a"
    assert unmatched["prefix"] == "buffer"


def test_kill_region_requires_mark() -> None:
    session = make_session("hello world")

    session.press("x", "ctrl")
    result = session.press("k", "ctrl")
    assert session.view().text == "hello world"
    assert result.forwarded == (KeyEvent("k", ("ctrl",)),)

    session.press("space", "ctrl")
    assert session.emacs.mark_active
    for _ in range(5):
        session.press("f", "ctrl")
    session.press("x", "ctrl")
    session.press("k", "ctrl")

    view = session.view()
    assert view.text == " world"
    assert view.selection is None
    assert session.registers.get().text == "hello"
    assert not session.emacs.mark_active


def test_copy_region_then_yank() -> None:
    session = make_session("abc")

    session.press(" ", "ctrl")
    session.press("e", "ctrl")
    assert session.view().selection == (0, 3)
    session.press("x", "ctrl")
    session.press("c", text="c")
    session.press("x", "ctrl")
    session.press("v", text="v")

    assert session.view().text == "abcabc"
    assert session.registers.get().text == "abc"


def test_copy_region_deactivates_mark_like_kill() -> None:
    session = make_session("abc def")

    session.press(" ", "ctrl")
    session.press("e", "ctrl")
    session.press("x", "ctrl")
    session.press("c", text="c")

    assert not session.emacs.mark_active
    assert session.view().selection is None
    assert session.registers.get().text == "abc def"

    session.press("x", "ctrl")
    session.press("k", "ctrl")
    assert session.view().text == "abc def"


def test_escape_acts_as_meta() -> None:
    session = make_session("foo bar")

    session.press("escape")
    assert session.emacs.pending_prefix is EmacsPrefix.META
    result = session.press("f", text="f")

    assert session.view().cursor == 3
    assert session.view().text == "foo bar"
    assert result.forwarded == ()


def test_meta_shifted_punctuation_jumps() -> None:
    session = make_session("one\ntwo", 2)

    session.press(",", "alt", "shift")
    assert session.view().cursor == 0
    session.press(".", "alt", "shift")
    assert session.view().cursor == 7


def test_keyboard_quit_cancels_prefix_and_mark() -> None:
    session = make_session("abc")
    session.press("space", "ctrl")

    session.press("x", "ctrl")
    session.press("g", "ctrl")

    assert session.emacs.pending_prefix is None
    assert not session.emacs.mark_active
    assert session.view().selection is None
    session.press("z", text="z")
    assert session.view().text == "zabc"


def test_enter_and_backspace() -> None:
    session = make_session("ab", 1)

    session.press("enter", text="\n")
    assert session.view().text == "a\nb"
    session.press("backspace")

    assert session.view().text == "ab"
    assert session.view().cursor == 1
