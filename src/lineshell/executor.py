# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Line executor: turns a completed line into a command invocation.

Order of operations for each line:
1. bang expansion (!!, !N, !prefix)
2. strip leading spaces/tabs
3. '@' prefix: run without recording to history
4. record to history (no consecutive duplicates)
5. '#' prefix: comment, nothing runs
6. tokenize, resolve, invoke

Every failure is reported as a single line on the output; none of them
ends the session.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .crashlog import write_crash_log
from .errors import CommandError, CommandNotFound, ParseError
from .history import History
from .registry import CommandRegistry
from .tokenizer import parse_line


@dataclass
class LineExecutor:
    """Executes completed lines against a registry."""

    history: History
    registry: CommandRegistry
    println: Callable[[str], None]
    session: str = ""

    def execute_line(self, line: str) -> None:
        if not line:
            return

        if line.startswith("!"):
            expanded = self.history.resolve_bang(line)
            if expanded is None:
                self.println(f"{line}: not found")
                return
            line = expanded

        line = line.lstrip(" \t")
        if not line:
            return

        record = True
        if line.startswith("@"):
            record = False
            line = line[1:]
            if not line:
                return

        if record:
            self.history.add(line)

        if line.startswith("#"):
            return

        try:
            args = parse_line(line)
        except ParseError as e:
            self.println(f"Parse error: {e}")
            return
        if not args:
            return

        try:
            cmd = self.registry.resolve(args[0])
        except CommandNotFound as e:
            self.println(str(e))
            return

        name = args[0]
        if cmd.raw_line:
            args = [line]

        try:
            cmd.handler(args)
        except CommandError as e:
            self.println(f"Command {name} error: {e}")
        except Exception as e:
            write_crash_log(
                e, session=self.session, line=line, command=cmd.name
            )
            self.println(f"Command {name} error: {type(e).__name__}: {e}")
