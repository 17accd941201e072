from __future__ import annotations

import pytest

from modal_engine import EditorSession, EngineConfig, KeymapRegistry, Mode, VimSubMode
from modal_engine.commands import Custom, CursorMovement, InsertChar, MoveCursor
from modal_engine.keymaps import VIM_NORMAL, Binding, KeySequence, load_default_keymaps
from modal_engine.runtime import telemetry
from modal_engine.runtime.tracing import RecordingTraceSink


def make_session(**config: object) -> EditorSession:
    config.setdefault("trace", RecordingTraceSink())
    return EditorSession.from_config(config)


def test_from_config_mapping() -> None:
    session = make_session(mode="vim-insert", text="abc")

    view = session.view()
    assert session.mode == Mode.vim(VimSubMode.INSERT)
    assert view.mode_label == "VIM: INSERT"
    assert view.text == "abc"
    assert view.cursor == 0


def test_from_config_rejects_unknown_keys() -> None:
    with pytest.raises(ValueError):
        EditorSession.from_config({"mood": "vim"})
    with pytest.raises(ValueError):
        EditorSession.from_config({"mode": "notepad"})


def test_default_session_starts_in_emacs() -> None:
    session = EditorSession(EngineConfig(trace=RecordingTraceSink()))

    view = session.view()
    assert view.mode == Mode.emacs()
    assert view.mode_label == "EMACS"
    assert (view.line, view.column, view.line_count, view.char_count) == (0, 0, 1, 0)
    assert view.pending == ""
    assert view.selection is None


def test_view_reports_line_and_column() -> None:
    session = make_session(text="ab\ncde")
    session.buffer.set_cursor(5)

    view = session.view()

    assert (view.line, view.column, view.line_count, view.char_count) == (1, 2, 2, 6)


def test_view_shows_pending_vim_keys() -> None:
    session = make_session(mode="vim-normal", text="abc")

    session.press("3")
    session.press("d")

    assert session.view().pending == "3d"


def test_type_text_inserts_in_emacs() -> None:
    session = make_session()

    session.type_text("hi\nthere")

    assert session.view().text == "hi\nthere"
    assert session.view().line == 1


def test_execute_applies_commands_directly() -> None:
    session = make_session(text="ac")

    session.execute([MoveCursor(CursorMovement.RIGHT), InsertChar("b")])
    session.execute(InsertChar("!"))

    assert session.view().text == "ab!c"


def test_on_custom_only_sees_custom_commands() -> None:
    session = make_session(text="abc")
    received: list[Custom] = []
    session.on_custom(received.append)

    session.press("x", "ctrl")
    session.press("s", "ctrl")
    session.type_text("z")

    assert received == [Custom("save_buffer")]


def test_sessions_are_independent() -> None:
    first = make_session(mode="vim-normal", text="abc")
    second = make_session(mode="vim-normal", text="abc")

    first.press("d")
    first.press("d")
    second.press("x")

    assert first.view().text == ""
    assert second.view().text == "bc"
    assert second.registers.get().text == ""


def test_custom_keymap_registry() -> None:
    registry = KeymapRegistry()
    remap = Binding(
        id="normal.custom_x",
        mode=VIM_NORMAL,
        sequence=KeySequence.from_strings("x"),
        action_id="motion.line_end",
    )
    load_default_keymaps(registry, per_mode_overrides={VIM_NORMAL: (remap,)})
    session = EditorSession(
        EngineConfig(initial_mode=Mode.vim(), initial_text="abc", trace=RecordingTraceSink()),
        keymap_registry=registry,
    )

    session.press("x")

    assert session.view().text == "abc"
    assert session.view().cursor == 3


def test_set_mode_accepts_names() -> None:
    session = make_session()

    session.set_mode("vim-visual")

    assert session.mode == Mode.vim(VimSubMode.VISUAL)
    assert session.view().selection == (0, 0)


def test_telemetry_preset_from_config(tmp_path, monkeypatch) -> None:
    log_file = tmp_path / "engine.log"
    monkeypatch.setenv("MODAL_ENGINE_LOG_FILE", str(log_file))

    try:
        make_session(telemetry="production")
        config = telemetry.active_config()
        assert config.log_file == str(log_file)
        assert not config.console
    finally:
        monkeypatch.delenv("MODAL_ENGINE_LOG_FILE")
        telemetry.configure()
