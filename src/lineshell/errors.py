# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Exception taxonomy for LineShell.

- ParseError: unterminated quote or dangling escape in a line
- CommandNotFound: dispatch failures (no such command / ambiguous prefix)
- CommandError: a command handler reports failure

History persistence failures surface as plain OSError.
"""

from __future__ import annotations


class ShellError(Exception):
    """Base class for recoverable shell errors."""


class ParseError(ShellError):
    """A line could not be tokenized."""

    def __init__(self, message: str, args_so_far: list[str] | None = None):
        super().__init__(message)
        self.args_so_far: list[str] = list(args_so_far or [])


class CommandNotFound(ShellError):
    """Command resolution failed."""

    def __init__(self, token: str):
        super().__init__(token)
        self.token = token


class NoSuchCommand(CommandNotFound):
    def __str__(self) -> str:
        return f"No such command: {self.token}"


class AmbiguousCommand(CommandNotFound):
    def __init__(self, token: str, matches: list[str]):
        super().__init__(token)
        self.matches = list(matches)

    def __str__(self) -> str:
        return f"Error: multiple matches for {self.token}"


class CommandError(ShellError):
    """Raised by command handlers to report failure."""
