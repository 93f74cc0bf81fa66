"""Single-line text editing for free-form entry (keybind lines, list filters)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class LineEditor:
    text: str = ""
    cursor: int = 0

    @classmethod
    def seeded(cls, text: str) -> LineEditor:
        """Return an editor holding ``text`` with the cursor at its end."""
        return cls(text=text, cursor=len(text))

    def set_text(self, text: str) -> None:
        self.text = text
        self.cursor = len(text)

    def handle_key(self, key: str) -> bool:
        """Apply one editing key; return whether the key was consumed."""
        if key == "LEFT":
            self.cursor = max(0, self.cursor - 1)
        elif key == "RIGHT":
            self.cursor = min(len(self.text), self.cursor + 1)
        elif key in {"HOME", "CTRL_A"}:
            self.cursor = 0
        elif key in {"END", "CTRL_E"}:
            self.cursor = len(self.text)
        elif key == "BACKSPACE":
            if self.cursor > 0:
                self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
                self.cursor -= 1
        elif key == "DELETE":
            self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]
        elif key == "CTRL_U":
            self.text = self.text[self.cursor :]
            self.cursor = 0
        elif key == "CTRL_K":
            self.text = self.text[: self.cursor]
        elif key == "CTRL_W":
            head = self.text[: self.cursor].rstrip()
            cut = head.rfind(" ") + 1
            self.text = self.text[:cut] + self.text[self.cursor :]
            self.cursor = cut
        elif len(key) == 1 and key.isprintable():
            self.text = self.text[: self.cursor] + key + self.text[self.cursor :]
            self.cursor += 1
        else:
            return False
        return True

    def viewport(self, width: int) -> tuple[str, int]:
        """Return the visible slice of the text and the cursor column inside it.

        The slice scrolls horizontally so the cursor always stays on screen.
        """
        width = max(1, width)
        start = max(0, self.cursor - width + 1)
        return self.text[start : start + width], self.cursor - start
