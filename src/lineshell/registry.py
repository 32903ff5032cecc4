# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Command registry and name resolution.

Commands are kept in registration order. Resolution looks for an exact
name match first, accepts a unique prefix match, and falls back to the
command named "*" when present.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Flag, auto

from .errors import AmbiguousCommand, NoSuchCommand
from .interfaces import CommandHandler

DEFAULT_COMMAND = "*"


class CommandFlag(Flag):
    NONE = 0
    HIDDEN = auto()  # left out of help
    RAW_LINE = auto()  # handler gets [line] instead of tokens
    ALIAS = auto()


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    handler: CommandHandler
    flags: CommandFlag = CommandFlag.NONE

    @property
    def hidden(self) -> bool:
        return bool(self.flags & CommandFlag.HIDDEN)

    @property
    def raw_line(self) -> bool:
        return bool(self.flags & CommandFlag.RAW_LINE)


@dataclass
class CommandRegistry:
    """Ordered collection of commands owned by one shell."""

    _commands: list[Command] = field(default_factory=list)

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self._commands))

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: object) -> bool:
        return any(c.name == name for c in self._commands)

    def register(
        self,
        name: str,
        description: str,
        handler: CommandHandler,
        flags: CommandFlag = CommandFlag.NONE,
    ) -> Command:
        cmd = Command(
            name=name, description=description, handler=handler, flags=flags
        )
        self._commands.append(cmd)
        return cmd

    def register_raw(
        self, name: str, description: str, handler: CommandHandler
    ) -> Command:
        """Register a command that receives the untokenized line."""
        return self.register(
            name, description, handler, flags=CommandFlag.RAW_LINE
        )

    def register_alias(self, name: str, target: str) -> Command:
        """Register name as another way to invoke target.

        Raises:
            NoSuchCommand: if target is not registered
        """
        original = self.get(target)
        return self.register(
            name,
            f"alias for {original.name}",
            original.handler,
            flags=original.flags | CommandFlag.ALIAS,
        )

    def get(self, name: str) -> Command:
        for cmd in self._commands:
            if cmd.name == name:
                return cmd
        raise NoSuchCommand(name)

    def set_flags(self, name: str, flags: CommandFlag) -> Command:
        """Replace the flags of the first command called name."""
        for i, cmd in enumerate(self._commands):
            if cmd.name == name:
                updated = dataclasses.replace(cmd, flags=flags)
                self._commands[i] = updated
                return updated
        raise NoSuchCommand(name)

    def longest_name(self) -> int:
        return max((len(c.name) for c in self._commands), default=0)

    def resolve(self, token: str) -> Command:
        """Find the command for a typed name.

        Pass 1 scans in registration order: an exact match wins at once;
        a second prefix match seen before any exact match is ambiguous.
        Pass 2 falls back to the "*" command.

        Raises:
            AmbiguousCommand: more than one prefix match
            NoSuchCommand: nothing matched and no "*" command exists
        """
        found: Command | None = None
        for cmd in self._commands:
            if cmd.name == token:
                return cmd
            if cmd.name.startswith(token):
                if found is not None and found.name != cmd.name:
                    raise AmbiguousCommand(token, [found.name, cmd.name])
                if found is None:
                    found = cmd

        if found is not None:
            return found

        for cmd in self._commands:
            if cmd.name == DEFAULT_COMMAND:
                return cmd

        raise NoSuchCommand(token)
