"""Register storage for cut, copied and yanked text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

UNNAMED = '"'


@dataclass(frozen=True, slots=True)
class RegisterValue:
    text: str
    type: str = "character"  # character or line

    @property
    def linewise(self) -> bool:
        return self.type == "line"


def _register_key(name: str | None) -> str:
    # "A" names the same storage as "a"
    return (name or UNNAMED).lower()


class RegisterBank:
    """Tracks the unnamed register plus any named registers a session used.

    Writing to an uppercase name appends to the lowercase register instead of
    replacing it. When either side is linewise the result is linewise.
    """

    def __init__(self) -> None:
        self._registers: Dict[str, RegisterValue] = {UNNAMED: RegisterValue(text="")}

    def get(self, name: str | None = None) -> RegisterValue:
        return self._registers.get(_register_key(name), RegisterValue(text=""))

    def set(self, name: str | None, value: RegisterValue) -> None:
        key = _register_key(name)
        self._registers[key] = value
        if key != UNNAMED:
            self._registers[UNNAMED] = value

    def append(self, name: str, text: str, *, register_type: str = "character") -> None:
        existing = self.get(name)
        if not existing.text:
            self.set(name, RegisterValue(text=text, type=register_type))
            return
        if not existing.linewise and register_type != "line":
            self.set(name, RegisterValue(text=existing.text + text))
            return
        head = existing.text if existing.text.endswith("\n") else existing.text + "\n"
        tail = text if text.endswith("\n") else text + "\n"
        self.set(name, RegisterValue(text=head + tail, type="line"))

    def yank_to(
        self, name: str | None, text: str, *, register_type: str = "character"
    ) -> None:
        if name is not None and name.isupper():
            self.append(name, text, register_type=register_type)
            return
        self.set(name, RegisterValue(text=text, type=register_type))


__all__ = ["RegisterBank", "RegisterValue", "UNNAMED"]
