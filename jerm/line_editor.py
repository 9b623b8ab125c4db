"""Editable input line with cursor and command history."""

from __future__ import annotations

MAX_HISTORY = 1000


class LineEditor:
    def __init__(self, max_history: int = MAX_HISTORY) -> None:
        self.text = ""
        self.cursor = 0
        self.history: list[str] = []
        self.history_index: int | None = None
        self.max_history = max(1, max_history)

    def insert(self, chars: str) -> None:
        self.text = self.text[: self.cursor] + chars + self.text[self.cursor :]
        self.cursor += len(chars)

    def backspace(self) -> None:
        if self.cursor == 0:
            return
        self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
        self.cursor -= 1

    def delete(self) -> None:
        self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]

    def move_left(self) -> None:
        self.cursor = max(0, self.cursor - 1)

    def move_right(self) -> None:
        self.cursor = min(len(self.text), self.cursor + 1)

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.text)

    def clear(self) -> None:
        self.text = ""
        self.cursor = 0
        self.history_index = None

    def submit(self) -> str:
        """Return the current line, record it in history, and clear the buffer."""
        line = self.text
        if line.strip() and (not self.history or self.history[-1] != line):
            self.history.append(line)
            overflow = len(self.history) - self.max_history
            if overflow > 0:
                del self.history[:overflow]
        self.clear()
        return line

    def _load_history(self, index: int) -> None:
        self.history_index = index
        self.text = self.history[index]
        self.cursor = len(self.text)

    def history_prev(self) -> None:
        if not self.history:
            return
        if self.history_index is None:
            self._load_history(len(self.history) - 1)
        else:
            self._load_history(max(0, self.history_index - 1))

    def history_next(self) -> None:
        if self.history_index is None:
            return
        if self.history_index >= len(self.history) - 1:
            self.clear()
            return
        self._load_history(self.history_index + 1)
