# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Command history for a single shell session.

Entries are kept in chronological order. Consecutive duplicates are
suppressed on add. Persistence is plain newline-delimited text.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from .utils import ENCODING, ENCODING_ERRORS


@dataclass
class History:
    """Ordered log of executed lines."""

    _entries: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __getitem__(self, index: int) -> str:
        return self._entries[index]

    def add(self, line: str) -> bool:
        """Append a line unless it repeats the most recent entry.

        Returns:
            True if the line was recorded
        """
        if self._entries and self._entries[-1] == line:
            return False
        self._entries.append(line)
        return True

    def entries(self) -> list[str]:
        return list(self._entries)

    def last(self) -> str | None:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries = []

    def delete_last(self, n: int) -> None:
        """Remove the last n entries (all of them if n exceeds the log)."""
        if n <= 0:
            return
        n = min(n, len(self._entries))
        del self._entries[len(self._entries) - n:]

    def recall(self, depth: int) -> str:
        """Entry ``depth`` steps back from the end (1 = most recent)."""
        if depth < 1 or depth > len(self._entries):
            raise IndexError(f"history depth out of range: {depth}")
        return self._entries[-depth]

    def search(self, prefix: str) -> str | None:
        """Most recent entry starting with prefix, or None."""
        for line in reversed(self._entries):
            if line.startswith(prefix):
                return line
        return None

    def resolve_bang(self, line: str) -> str | None:
        """Expand a ``!`` history reference.

        - ``!!``   most recent entry
        - ``!N``   1-based entry N, when in range
        - ``!pfx`` most recent entry starting with pfx

        Returns:
            The expanded line, or None if nothing matches
        """
        ref = line[1:]
        if ref == "!":
            return self.last()

        if ref.isdecimal():
            n = int(ref)
            if 0 < n <= len(self._entries):
                return self._entries[n - 1]

        return self.search(ref)

    # -----------------------
    # Persistence
    # -----------------------

    def save(self, path: str | Path) -> None:
        """Write the log to path, one entry per line.

        Does nothing when the log is empty. OSError propagates.
        """
        if not self._entries:
            return
        with Path(path).open(
            "w", encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n"
        ) as f:
            for line in self._entries:
                f.write(line + "\n")

    def load(self, path: str | Path) -> None:
        """Replace the log with the lines of path. OSError propagates."""
        with Path(path).open(
            "r", encoding=ENCODING, errors=ENCODING_ERRORS, newline=""
        ) as f:
            content = f.read()
        self._entries = [
            line.rstrip("\r") for line in content.split("\n")
        ]
        # trailing newline leaves one empty element
        if self._entries and self._entries[-1] == "":
            self._entries.pop()
