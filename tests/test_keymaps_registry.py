import pytest

from modal_engine.keymaps import (
    DEFAULT_BINDINGS,
    VIM_NORMAL,
    ActionRef,
    Binding,
    KeySequence,
    KeyStroke,
    KeymapConflictError,
    KeymapRegistry,
    WhenClause,
    load_default_keymaps,
)


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_sequence(*keys: str) -> KeySequence:
    return KeySequence.from_strings(*keys)


def make_binding(
    *,
    binding_id: str,
    mode: str = VIM_NORMAL,
    sequence: KeySequence | None = None,
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=sequence or make_sequence("ctrl+x", "ctrl+s"),
        action_id=action_id,
        when=when,
    )


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="normal.save")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings(mode=VIM_NORMAL)) == [binding]


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="normal.save"))

    with pytest.raises(KeymapConflictError) as excinfo:
        registry.register_binding(make_binding(binding_id="normal.save.duplicate"))

    assert [b.id for b in excinfo.value.conflicts] == ["normal.save"]


def test_register_binding_non_overlapping_when() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="default"))
    registry.register_binding(
        make_binding(binding_id="marked", when=(WhenClause("mark_active"),))
    )
    registry.register_binding(
        make_binding(binding_id="unmarked", when=(WhenClause.parse("!mark_active"),))
    )

    assert registry.stats().binding_count == 3


def test_register_binding_same_when_conflicts() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(
        make_binding(binding_id="first", when=(WhenClause("mark_active"),))
    )

    with pytest.raises(KeymapConflictError):
        registry.register_binding(
            make_binding(binding_id="second", when=(WhenClause("mark_active"),))
        )


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]


def test_register_binding_duplicate_id_without_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="binding"))

    with pytest.raises(ValueError):
        registry.register_binding(
            make_binding(binding_id="binding", sequence=make_sequence("q"))
        )


def test_register_binding_unknown_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="orphan"))


def test_register_action_twice_requires_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    with pytest.raises(ValueError):
        registry.register_action(make_action())

    registry.register_action(make_action(), replace=True)
    assert registry.stats().action_count == 1


def test_update_binding_changes_sequence() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="binding"))
    before = registry.revision()

    updated = registry.update_binding(
        "binding", sequence=make_sequence("d", "d"), description="delete line"
    )

    assert updated.sequence.tokens == ("d", "d")
    assert updated.description == "delete line"
    assert registry.revision() == before + 1


def test_update_binding_conflict_keeps_original() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="a", sequence=make_sequence("a")))
    registry.register_binding(make_binding(binding_id="b", sequence=make_sequence("b")))

    with pytest.raises(KeymapConflictError):
        registry.update_binding("b", sequence=make_sequence("a"))

    assert registry.get_binding("b").sequence.tokens == ("b",)


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.unregister_binding("binding") is None


def test_load_default_keymaps_registers_every_binding() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    stats = registry.stats()
    assert stats.binding_count == len(DEFAULT_BINDINGS)
    assert stats.modes == ("emacs", "vim.insert", "vim.normal", "vim.visual")


def test_load_default_keymaps_per_mode_override() -> None:
    registry = KeymapRegistry()
    custom_binding = Binding(
        id="normal.custom_insert",
        mode=VIM_NORMAL,
        sequence=KeySequence.from_strings("i"),
        action_id="core.append",
    )

    load_default_keymaps(registry, per_mode_overrides={VIM_NORMAL: (custom_binding,)})

    (binding,) = [
        b for b in registry.iter_bindings(VIM_NORMAL) if b.sequence.tokens == ("i",)
    ]
    assert binding.action_id == "core.append"


def test_load_default_keymaps_override_must_match_mode() -> None:
    registry = KeymapRegistry()
    stray = Binding(
        id="stray",
        mode="emacs",
        sequence=KeySequence.from_strings("ctrl+q"),
        action_id="emacs.yank",
    )

    with pytest.raises(ValueError):
        load_default_keymaps(registry, per_mode_overrides={VIM_NORMAL: (stray,)})


def test_load_default_keymaps_extra_binding_conflict() -> None:
    registry = KeymapRegistry()
    extra = Binding(
        id="normal.extra_x",
        mode=VIM_NORMAL,
        sequence=KeySequence.from_strings("x"),
        action_id="edit.paste",
    )

    with pytest.raises(KeymapConflictError):
        load_default_keymaps(registry, extra_bindings=(extra,))


def test_keystroke_normalization() -> None:
    assert KeyStroke.parse("G").token == "shift+g"
    assert KeyStroke("g", ("shift",)).token == "shift+g"
    assert KeyStroke("4", ("shift",)).token == "$"
    assert KeyStroke(",", ("alt", "shift")).token == "alt+<"
    assert KeyStroke("Escape").token == "escape"
    assert KeyStroke("<Esc>").token == "escape"
    assert KeyStroke("ArrowLeft").token == "left"
    assert KeyStroke("x", ("Control",)).token == "ctrl+x"
    assert KeyStroke.parse("shift+ctrl+x").token == "ctrl+shift+x"
    assert KeyStroke.parse("ctrl++").token == "ctrl++"


def test_keystroke_rejects_unknown_modifier() -> None:
    with pytest.raises(ValueError):
        KeyStroke("x", ("hyper",))
    with pytest.raises(ValueError):
        KeyStroke("")
