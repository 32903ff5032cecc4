# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Line editor: applies buffer edits and keeps the terminal display in sync.

The display is resynchronized with redraw(): CR, prompt, full content.
Out-of-bounds edits emit a single BEL.
"""

from __future__ import annotations

from .buffer import LineBuffer, Snapshot
from .interfaces import ByteSink
from .utils import encode_text

BEL = 0x07
BS = 0x08
CR = 0x0D
LF = 0x0A
SPACE = 0x20

CRLF = b"\r\n"
DEFAULT_PROMPT = "lineshell> "


class LineEditor:
    """Line buffer plus the output sink it is displayed on."""

    def __init__(
        self,
        sink: ByteSink | None = None,
        capacity: int = 512,
        prompt: str = DEFAULT_PROMPT,
        echo: bool = True,
    ):
        self.buffer = LineBuffer(capacity)
        self.sink = sink
        self.prompt = prompt
        self.echo = echo

    # ---------- output primitives ----------

    def put(self, data: bytes) -> None:
        if self.sink is not None and data:
            self.sink.write(data)

    def putc(self, ch: int) -> None:
        self.put(bytes((ch,)))

    def alert(self) -> None:
        self.putc(BEL)

    def newline(self) -> None:
        self.put(CRLF)

    def emit_prompt(self) -> None:
        if not self.echo:
            return
        self.put(encode_text(self.prompt))

    def redraw(self) -> None:
        self.putc(CR)
        self.emit_prompt()
        self.put(self.buffer.content())

    def erase(self) -> None:
        """Blank out the displayed line."""
        self.putc(CR)
        self.emit_prompt()
        self.put(b" " * self.buffer.length)

    # ---------- edits ----------

    def insert(self, ch: int) -> bool:
        buf = self.buffer
        if buf.full:
            self.alert()
            return False

        if buf.at_end:
            buf.insert(ch)
            self.putc(ch)
            return True

        buf.insert(ch)
        self.redraw()
        self.put(bytes((BS,)) * (buf.length - buf.cursor))
        return True

    def backspace(self) -> bool:
        buf = self.buffer
        if buf.cursor == 0:
            self.alert()
            return False

        if buf.at_end:
            buf.delete_before_cursor()
            self.put(bytes((BS, SPACE, BS)))
            return True

        buf.delete_before_cursor()
        self.redraw()
        # clear the stale last column, then walk back over the tail
        self.putc(SPACE)
        self.put(bytes((BS,)) * (buf.length - buf.cursor + 1))
        return True

    def cursor_left(self) -> bool:
        if not self.buffer.move_left():
            self.alert()
            return False
        self.putc(BS)
        return True

    def cursor_right(self) -> bool:
        buf = self.buffer
        if buf.at_end:
            self.alert()
            return False
        self.putc(buf.byte_at_cursor())
        buf.move_right()
        return True

    def replace(self, data: bytes) -> None:
        """Show data in place of the current line, cursor at end."""
        self.erase()
        self.buffer.load(data)
        self.redraw()

    def restore(self, snap: Snapshot) -> None:
        """Bring back a saved line, cursor where it was."""
        self.erase()
        self.buffer.restore(snap)
        self.redraw()
        self.put(bytes((BS,)) * (self.buffer.length - self.buffer.cursor))

    def reset(self) -> None:
        self.buffer.clear()
