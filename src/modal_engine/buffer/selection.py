"""Anchor-based selection shared by Vim Visual mode and the Emacs mark."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

Span = Tuple[int, int]


@dataclass(slots=True)
class SelectionState:
    """Optional anchor offset; the selection runs from anchor to cursor."""

    anchor: Optional[int] = None

    @property
    def active(self) -> bool:
        return self.anchor is not None

    def set_anchor(self, offset: int) -> None:
        self.anchor = offset

    def clear(self) -> None:
        self.anchor = None

    def span(self, cursor: int, length: int) -> Optional[Span]:
        """Half-open ``(start, end)`` between anchor and cursor, clamped."""

        if self.anchor is None:
            return None
        anchor = max(0, min(self.anchor, length))
        cursor = max(0, min(cursor, length))
        return (anchor, cursor) if anchor <= cursor else (cursor, anchor)


__all__ = ["SelectionState", "Span"]
