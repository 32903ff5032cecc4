# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Character-driven input state machine.

consume() takes one byte at a time and never blocks. Escape sequences
are decoded with three states:

    NORMAL --ESC--> ESC_SEEN --'['--> CSI_SEEN --final--> NORMAL

Any other byte after ESC is dropped. CSI finals A/B/C/D map to history
older/newer and cursor right/left; unknown finals are ignored.

History scrollback overlays the line being composed: the first step
into history snapshots the live buffer, stepping back past the newest
entry restores it.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum, auto

from .buffer import Snapshot
from .editor import BS, CR, LF, LineEditor
from .history import History
from .utils import encode_text

NUL = 0x00
CTRL_C = 0x03
TAB = 0x09
ESC = 0x1B
DEL = 0x7F

CSI_UP = ord("A")
CSI_DOWN = ord("B")
CSI_RIGHT = ord("C")
CSI_LEFT = ord("D")


class DecoderState(Enum):
    NORMAL = auto()
    ESC_SEEN = auto()
    CSI_SEEN = auto()


class InputStateMachine:
    """Drives a LineEditor and history scrollback from raw input bytes."""

    def __init__(
        self,
        editor: LineEditor,
        history: History,
        on_line: Callable[[str], None],
    ):
        self.editor = editor
        self.history = history
        self.on_line = on_line
        self.state = DecoderState.NORMAL
        self.scrollback_depth = 0
        self._saved: Snapshot | None = None
        # set once the session has ended; no further prompt is drawn
        self.closed = False

    def consume(self, ch: int) -> None:
        if self.state is DecoderState.CSI_SEEN:
            self.state = DecoderState.NORMAL
            self._handle_csi(ch)
            return

        if self.state is DecoderState.ESC_SEEN:
            self.state = (
                DecoderState.CSI_SEEN if ch == ord("[")
                else DecoderState.NORMAL
            )
            return

        self._handle_normal(ch)

    def feed(self, data: bytes) -> None:
        for ch in data:
            self.consume(ch)

    # ---------- normal state ----------

    def _handle_normal(self, ch: int) -> None:
        editor = self.editor

        if ch == CR:
            editor.newline()
            line = editor.buffer.text()
            try:
                self.on_line(line)
            finally:
                self._reset_line()
                if not self.closed:
                    editor.emit_prompt()
            return

        if ch in (DEL, BS):
            editor.backspace()
            return

        if ch == ESC:
            self.state = DecoderState.ESC_SEEN
            return

        if ch == CTRL_C:
            if editor.echo:
                editor.newline()
                self._reset_line()
                editor.emit_prompt()
            return

        if ch in (LF, NUL):
            return

        if ch == TAB:
            ch = ord(" ")

        editor.insert(ch)

    def _reset_line(self) -> None:
        self.editor.reset()
        self.scrollback_depth = 0
        self._saved = None

    # ---------- CSI ----------

    def _handle_csi(self, ch: int) -> None:
        if ch == CSI_UP:
            self.history_older()
        elif ch == CSI_DOWN:
            self.history_newer()
        elif ch == CSI_RIGHT:
            self.editor.cursor_right()
        elif ch == CSI_LEFT:
            self.editor.cursor_left()

    def history_older(self) -> None:
        if self.scrollback_depth >= len(self.history):
            self.editor.alert()
            return
        if self.scrollback_depth == 0:
            self._saved = self.editor.buffer.snapshot()
        self.scrollback_depth += 1
        self._show_history_entry()

    def history_newer(self) -> None:
        if self.scrollback_depth <= 0:
            self.scrollback_depth = 0
            self.editor.alert()
            return
        self.scrollback_depth -= 1
        if self.scrollback_depth == 0:
            if self._saved is not None:
                self.editor.restore(self._saved)
            self._saved = None
            return
        self._show_history_entry()

    def _show_history_entry(self) -> None:
        line = self.history.recall(self.scrollback_depth)
        self.editor.replace(encode_text(line))
