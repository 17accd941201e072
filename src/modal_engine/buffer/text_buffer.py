"""Character buffer with a single cursor and a lazily rebuilt line index."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True, slots=True)
class BufferView:
    """Read-only snapshot of the buffer for hosts and status displays."""

    text: str
    cursor: int
    line: int
    column: int
    line_count: int
    char_count: int


class TextBuffer:
    """Text content plus a cursor expressed as a character offset.

    Every operation is total: requests that would leave the buffer (moving
    past either end, deleting at a boundary, jumping to a missing line) are
    clamped to the nearest valid position instead of raising.

    ``line_starts`` holds the offset at which each line begins. It is only
    rebuilt when a line or column query arrives after the content changed.
    """

    def __init__(self, text: str = "", *, name: str = "default") -> None:
        self.name = name
        self._text = text
        self._cursor = 0
        self._line_starts: List[int] = [0]
        self._dirty = bool(text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def line_starts(self) -> Tuple[int, ...]:
        self._update_line_starts()
        return tuple(self._line_starts)

    def __len__(self) -> int:
        return len(self._text)

    def set_text(self, text: str) -> None:
        self._text = text
        self._cursor = min(self._cursor, len(text))
        self._dirty = True

    def set_cursor(self, position: int) -> None:
        self._cursor = max(0, min(position, len(self._text)))

    # -- editing -------------------------------------------------------------

    def insert_char(self, char: str) -> None:
        self.insert_text(char)

    def insert_text(self, text: str) -> None:
        if not text:
            return
        pos = self._cursor
        self._text = self._text[:pos] + text + self._text[pos:]
        self._cursor = pos + len(text)
        self._dirty = True

    def insert_newline(self) -> None:
        self.insert_char("\n")

    def delete_char(self) -> None:
        if self._cursor > 0:
            self._cursor -= 1
            self._remove(self._cursor, self._cursor + 1)

    def delete_char_forward(self) -> None:
        if self._cursor < len(self._text):
            self._remove(self._cursor, self._cursor + 1)

    def text_range(self, start: int, end: int) -> str:
        start, end = self._clamp_span(start, end)
        return self._text[start:end]

    def delete_range(self, start: int, end: int) -> str:
        """Remove ``[start, end)`` and leave the cursor at ``start``."""

        start, end = self._clamp_span(start, end)
        removed = self._text[start:end]
        if removed:
            self._remove(start, end)
        self._cursor = start
        return removed

    def delete_line(self) -> str:
        """Remove the current line together with its line break.

        The cursor lands at the start of the line that moved into its place,
        or at the start of the new last line when the final line was removed.
        """

        line = self.current_line()
        start, end = self.line_span(line)
        if end < len(self._text):
            end += 1  # trailing newline
        elif start > 0:
            start -= 1  # last line: take the newline that precedes it
        removed = self._text[start:end]
        self._remove(start, end)
        self.move_cursor_to(min(line, self.line_count() - 1), 0)
        return removed

    def delete_word(self) -> str:
        return self.delete_range(self._cursor, self.word_right_offset(self._cursor))

    def _remove(self, start: int, end: int) -> None:
        self._text = self._text[:start] + self._text[end:]
        self._cursor = min(self._cursor, len(self._text))
        self._dirty = True

    def _clamp_span(self, start: int, end: int) -> Tuple[int, int]:
        if start > end:
            start, end = end, start
        size = len(self._text)
        return max(0, min(start, size)), max(0, min(end, size))

    # -- horizontal movement ------------------------------------------------

    def move_cursor_left(self) -> None:
        if self._cursor > 0:
            self._cursor -= 1

    def move_cursor_right(self) -> None:
        if self._cursor < len(self._text):
            self._cursor += 1

    def move_to_line_start(self) -> None:
        self._cursor = self._text.rfind("\n", 0, self._cursor) + 1

    def move_to_line_end(self) -> None:
        end = self._text.find("\n", self._cursor)
        self._cursor = len(self._text) if end == -1 else end

    def word_left_offset(self, position: int) -> int:
        text = self._text
        pos = max(0, min(position, len(text)))
        while pos > 0 and text[pos - 1].isspace():
            pos -= 1
        while pos > 0 and not text[pos - 1].isspace():
            pos -= 1
        return pos

    def word_right_offset(self, position: int) -> int:
        text = self._text
        size = len(text)
        pos = max(0, min(position, size))
        while pos < size and text[pos].isspace():
            pos += 1
        while pos < size and not text[pos].isspace():
            pos += 1
        return pos

    def move_cursor_word_left(self) -> None:
        self._cursor = self.word_left_offset(self._cursor)

    def move_cursor_word_right(self) -> None:
        self._cursor = self.word_right_offset(self._cursor)

    def move_cursor_document_start(self) -> None:
        self._cursor = 0

    def move_cursor_document_end(self) -> None:
        self._cursor = len(self._text)

    # -- line bookkeeping ---------------------------------------------------

    def _update_line_starts(self) -> None:
        if not self._dirty:
            return
        starts = [0]
        find = self._text.find
        index = find("\n")
        while index != -1:
            starts.append(index + 1)
            index = find("\n", index + 1)
        self._line_starts = starts
        self._dirty = False

    def line_count(self) -> int:
        self._update_line_starts()
        return len(self._line_starts)

    def line_of(self, position: int) -> int:
        self._update_line_starts()
        # bisect_right lands one past an exact match, so both cases reduce to -1
        return bisect_right(self._line_starts, position) - 1

    def current_line(self) -> int:
        return self.line_of(self._cursor)

    def current_column(self) -> int:
        line = self.current_line()
        return self._cursor - self._line_starts[line]

    def line_span(self, line: int) -> Tuple[int, int]:
        """Return ``(start, end)`` of ``line``, excluding its newline."""

        self._update_line_starts()
        last = len(self._line_starts) - 1
        line = max(0, min(line, last))
        start = self._line_starts[line]
        end = self._line_starts[line + 1] - 1 if line < last else len(self._text)
        return start, end

    def move_cursor_to(self, line: int, column: int) -> None:
        start, end = self.line_span(line)
        self._cursor = start + max(0, min(column, end - start))

    def move_cursor_up(self) -> None:
        line = self.current_line()
        if line > 0:
            self.move_cursor_to(line - 1, self.current_column())

    def move_cursor_down(self) -> None:
        line = self.current_line()
        if line < self.line_count() - 1:
            self.move_cursor_to(line + 1, self.current_column())

    def char_count(self) -> int:
        return len(self._text)

    def snapshot(self) -> BufferView:
        return BufferView(
            text=self._text,
            cursor=self._cursor,
            line=self.current_line(),
            column=self.current_column(),
            line_count=self.line_count(),
            char_count=self.char_count(),
        )

    def __repr__(self) -> str:
        return f"TextBuffer(name={self.name!r}, cursor={self._cursor}, chars={len(self._text)})"


__all__ = ["TextBuffer", "BufferView"]
