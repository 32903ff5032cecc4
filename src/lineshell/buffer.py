# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Fixed-capacity line buffer.

Invariant: 0 <= cursor <= length <= capacity. Every mutator checks its
bound first and returns False without touching the buffer when the edit
is not possible.
"""

from __future__ import annotations

from dataclasses import dataclass

from .utils import decode_bytes

DEFAULT_CAPACITY = 512


@dataclass(frozen=True)
class Snapshot:
    """Saved buffer state for history scrollback."""

    data: bytes
    cursor: int
    length: int


class LineBuffer:
    """Byte buffer with a cursor and a logical length."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._data = bytearray(capacity)
        self.cursor = 0
        self.length = 0

    def __len__(self) -> int:
        return self.length

    @property
    def full(self) -> bool:
        return self.length >= self.capacity

    @property
    def at_end(self) -> bool:
        return self.cursor == self.length

    def content(self) -> bytes:
        return bytes(self._data[:self.length])

    def text(self) -> str:
        return decode_bytes(self.content())

    def tail(self) -> bytes:
        """Bytes from the cursor to the logical end."""
        return bytes(self._data[self.cursor:self.length])

    def byte_at_cursor(self) -> int:
        return self._data[self.cursor]

    def clear(self) -> None:
        self.cursor = 0
        self.length = 0

    def insert(self, ch: int) -> bool:
        """Insert one byte at the cursor and advance it."""
        if self.full:
            return False
        if self.cursor < self.length:
            self._data[self.cursor + 1:self.length + 1] = (
                self._data[self.cursor:self.length]
            )
        self._data[self.cursor] = ch
        self.cursor += 1
        self.length += 1
        return True

    def delete_before_cursor(self) -> bool:
        """Remove the byte left of the cursor (backspace)."""
        if self.cursor == 0:
            return False
        self._data[self.cursor - 1:self.length - 1] = (
            self._data[self.cursor:self.length]
        )
        self.cursor -= 1
        self.length -= 1
        return True

    def move_left(self) -> bool:
        if self.cursor == 0:
            return False
        self.cursor -= 1
        return True

    def move_right(self) -> bool:
        if self.cursor >= self.length:
            return False
        self.cursor += 1
        return True

    def load(self, data: bytes) -> None:
        """Replace the content; cursor goes to the end."""
        data = data[:self.capacity]
        self._data[:len(data)] = data
        self.length = len(data)
        self.cursor = self.length

    def snapshot(self) -> Snapshot:
        return Snapshot(
            data=self.content(), cursor=self.cursor, length=self.length
        )

    def restore(self, snap: Snapshot) -> None:
        self._data[:snap.length] = snap.data
        self.length = snap.length
        self.cursor = snap.cursor
