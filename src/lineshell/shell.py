# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
LineShell session engine.

One Shell per session (terminal, telnet connection, test). It owns:
- the line editor and input state machine
- the command history
- the command registry (help + history built in)
- the blocking read loop

Important boundary:
- Shell never opens terminals or sockets; the embedder passes a byte
  source and sink (see interfaces.ByteSource / ByteSink).
- Shell never loads YAML; from_config() consumes a ShellConfig.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import ShellConfig
from .crashlog import write_crash_log
from .editor import DEFAULT_PROMPT, LineEditor
from .errors import CommandError
from .executor import LineExecutor
from .history import History
from .interfaces import ByteSink, ByteSource, CommandHandler
from .machine import InputStateMachine
from .registry import Command, CommandFlag, CommandRegistry
from .utils import encode_text, format_help_line, parse_int, to_crlf

CTRL_D = 0x04

HISTORY_USAGE = (
    "[n|del [n]|-c|clear|save <file>|load <file>] Command history"
)


@dataclass
class Shell:
    """Interactive line-editing command shell."""

    prompt: str = DEFAULT_PROMPT
    echo: bool = True
    capacity: int = 512
    read_size: int = 8
    kill_byte: int | None = CTRL_D
    session: str = ""

    source: ByteSource | None = None
    sink: ByteSink | None = None

    history: History = field(default_factory=History)
    registry: CommandRegistry = field(default_factory=CommandRegistry)
    running: bool = False

    editor: LineEditor = field(init=False)
    machine: InputStateMachine = field(init=False)
    executor: LineExecutor = field(init=False)

    def __post_init__(self) -> None:
        self.editor = LineEditor(
            sink=self.sink,
            capacity=self.capacity,
            prompt=self.prompt,
            echo=self.echo,
        )
        self.executor = LineExecutor(
            history=self.history,
            registry=self.registry,
            println=self.println,
            session=self.session,
        )
        self.machine = InputStateMachine(
            self.editor, self.history, self.execute_line
        )

        self.command("help", "Print commands", self.help)
        self.command("history", HISTORY_USAGE, self.history_command)

    @classmethod
    def from_config(cls, cfg: ShellConfig, **overrides) -> Shell:
        """Build a shell from the ``shell`` section of a ShellConfig."""
        shell_cfg = cfg.shell
        kwargs = {
            "prompt": str(shell_cfg.get("prompt", DEFAULT_PROMPT)),
            "echo": bool(shell_cfg.get("echo", True)),
            "capacity": int(shell_cfg.get("capacity", 512)),
            "read_size": int(shell_cfg.get("read_size", 8)),
            "kill_byte": shell_cfg.get("kill_byte", CTRL_D),
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    # -----------------------
    # Registration API
    # -----------------------

    def command(
        self, name: str, description: str, handler: CommandHandler
    ) -> Command:
        return self.registry.register(name, description, handler)

    def command_raw(
        self, name: str, description: str, handler: CommandHandler
    ) -> Command:
        """Register a command that receives [whole line] as its args."""
        return self.registry.register_raw(name, description, handler)

    def alias(self, name: str, target: str) -> Command:
        return self.registry.register_alias(name, target)

    def set_flags(self, name: str, flags: CommandFlag) -> Command:
        return self.registry.set_flags(name, flags)

    # -----------------------
    # IO + settings
    # -----------------------

    def set_io(self, source: ByteSource, sink: ByteSink) -> None:
        self.source = source
        self.sink = sink
        self.editor.sink = sink

    def set_echo(self, echo: bool) -> None:
        self.echo = echo
        self.editor.echo = echo

    def set_prompt(self, prompt: str) -> None:
        self.prompt = prompt
        self.editor.prompt = prompt

    def write(self, text: str) -> None:
        """Send text to the sink; bare LF goes out as CRLF."""
        if self.sink is None or not text:
            return
        self.sink.write(encode_text(to_crlf(text)))

    def println(self, text: str = "") -> None:
        self.write(text + "\n")

    def printf(self, fmt: str, *args) -> None:
        self.write(fmt % args if args else fmt)

    # -----------------------
    # Session loop
    # -----------------------

    def execute_line(self, line: str) -> None:
        self.executor.execute_line(line)

    def consume(self, ch: int) -> None:
        self.machine.consume(ch)

    def terminate(self) -> None:
        self.running = False
        self.machine.closed = True

    def run(
        self,
        source: ByteSource | None = None,
        sink: ByteSink | None = None,
    ) -> None:
        """Read and process input until the session ends.

        Ends on terminate(), end of stream, the kill byte (after a line
        break) or a stream error. Errors raised by the source, and
        OSError raised by the sink, are written to the crash log.
        """
        if source is not None or sink is not None:
            self.set_io(
                source if source is not None else self.source,
                sink if sink is not None else self.sink,
            )
        if self.source is None:
            raise ValueError("Shell.run() needs an input source")

        self.running = True
        self.machine.closed = False
        try:
            self._read_loop()
        except OSError as e:
            write_crash_log(e, session=self.session)
        finally:
            self.running = False

    def _read_loop(self) -> None:
        self.editor.emit_prompt()
        while self.running:
            try:
                data = self.source.read(self.read_size)
            except Exception as e:
                write_crash_log(e, session=self.session)
                return

            if not data:
                return

            for ch in data:
                if not self.running:
                    break
                if self.kill_byte is not None and ch == self.kill_byte:
                    self.editor.newline()
                    return
                self.machine.consume(ch)

    # -----------------------
    # Built-in commands
    # -----------------------

    def help(self, args: list[str]) -> None:
        width = max(10, self.registry.longest_name())
        for cmd in self.registry:
            if cmd.hidden:
                continue
            self.println(format_help_line(cmd.name, width, cmd.description))

    def history_command(self, args: list[str]) -> None:
        entries = self.history.entries()
        start = 0

        if len(args) > 1:
            sub = args[1]
            if sub in ("clear", "-c"):
                self.history.clear()
                return

            if sub == "save":
                if len(args) > 2:
                    try:
                        self.history.save(args[2])
                    except OSError as e:
                        self.println(f"Save {args[2]}: {e}")
                return

            if sub == "load":
                if len(args) > 2:
                    try:
                        self.history.load(args[2])
                    except OSError as e:
                        self.println(f"Load {args[2]}: {e}")
                return

            if sub == "del":
                if len(args) > 2:
                    n = parse_int(args[2])
                    if n is None:
                        raise CommandError(f"bad count: {args[2]}")
                    self.history.delete_last(n + 1)
                else:
                    # this "history del" line plus the one before it
                    self.history.delete_last(2)
                return

            n = parse_int(sub)
            if n is not None and 0 < n < len(entries):
                start = len(entries) - n

        for i in range(start, len(entries)):
            self.println(f"{i + 1:6d}  {entries[i]}")
