# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Protocol definitions for dependency injection.

These interfaces keep the shell core independent of the transport that
feeds it (terminal, telnet, SSH, tests) and of the commands it runs.
"""

from __future__ import annotations

from typing import Protocol


class ByteSource(Protocol):
    """Blocking source of input bytes."""

    def read(self, size: int) -> bytes:
        """Read up to size bytes, blocking until at least one is available.

        Returns b"" at end of stream.
        """
        ...


class ByteSink(Protocol):
    """Destination for output bytes."""

    def write(self, data: bytes) -> object:
        """Write all of data."""
        ...


class CommandHandler(Protocol):
    """A registered command.

    Handlers receive the argument vector (argv[0] is the typed command
    name) and signal failure by raising CommandError.
    """

    def __call__(self, args: list[str]) -> None:
        ...
