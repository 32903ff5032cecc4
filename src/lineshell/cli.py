# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
LineShell CLI entry point.

Design:
- CLI owns process startup, config loading and history file wiring.
- Shell is the session engine (byte source + sink injected).
- `lineshell` runs on the local terminal in raw mode.
- `lineshell serve [--host H] [--port P]` runs one shell per telnet
  connection.
"""

from __future__ import annotations

import sys
from pathlib import Path

from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.shortcuts import print_formatted_text

from . import config
from .config import ShellConfig
from .errors import CommandError
from .shell import Shell
from .transports import TerminalStream, serve

USAGE = "usage: lineshell [serve [--host HOST] [--port PORT]]"


def register_demo_commands(shell: Shell) -> None:
    """Commands every LineShell session gets beyond help/history."""

    def echo(args: list[str]) -> None:
        shell.println(" ".join(args[1:]))

    def show_args(args: list[str]) -> None:
        shell.println(f"len(args) = {len(args)}")
        shell.println(f"args={args!r}")

    def exit_(args: list[str]) -> None:
        shell.terminate()

    shell.command("echo", "Print the arguments", echo)
    shell.command_raw("args", "Show the raw line as received", show_args)
    shell.command("exit", "End the session", exit_)
    shell.alias("quit", "exit")


def build_shell(cfg: ShellConfig, **overrides) -> Shell:
    shell = Shell.from_config(cfg, **overrides)
    register_demo_commands(shell)
    return shell


def _colored_prompt(cfg: ShellConfig, prompt: str) -> str:
    return config.colorize(prompt, cfg.get_path("ui.prompt_color"))


def _load_history(shell: Shell, path: Path) -> None:
    if not path.exists():
        return
    try:
        shell.history.load(path)
    except OSError as e:
        print_formatted_text(f"[history] could not load {path}: {e}")


def _save_history(shell: Shell, path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        shell.history.save(path)
    except OSError as e:
        print_formatted_text(f"[history] could not save {path}: {e}")


def run_terminal(cfg: ShellConfig, data_root: Path) -> None:
    """Run one shell on the controlling terminal."""
    shell = build_shell(cfg, session="tty")
    shell.set_prompt(_colored_prompt(cfg, shell.prompt))

    autosave = bool(cfg.get_path("history.autosave", False))
    hist_file = config.resolve_history_file(cfg, data_root)
    if autosave:
        _load_history(shell, hist_file)

    banner = cfg.get_path("ui.banner", "")
    if banner:
        print_formatted_text(ANSI(config.colorize(banner, "dim")))

    with TerminalStream() as stream:
        shell.run(stream, stream)

    if autosave:
        _save_history(shell, hist_file)


def _parse_serve_args(argv: list[str], cfg: ShellConfig) -> tuple[str, int]:
    host = str(cfg.get_path("server.host", "127.0.0.1"))
    port = int(cfg.get_path("server.port", 2323))

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in ("--host", "--port") and i + 1 < len(argv):
            if arg == "--host":
                host = argv[i + 1]
            else:
                try:
                    port = int(argv[i + 1])
                except ValueError:
                    raise CommandError(f"bad port: {argv[i + 1]}")
            i += 2
            continue
        raise CommandError(f"unexpected argument: {arg}")
    return host, port


def run_server(cfg: ShellConfig, argv: list[str]) -> None:
    host, port = _parse_serve_args(argv, cfg)
    prompt = str(cfg.get_path("server.prompt", "telnet shell% "))
    motd = str(cfg.get_path("server.motd", "") or "")

    def factory() -> Shell:
        return build_shell(cfg, prompt=prompt)

    print_formatted_text(
        ANSI(config.colorize(f"lineshell: listening on {host}:{port}", "green"))
    )
    serve(factory, host=host, port=port, motd=motd)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the LineShell CLI."""
    if argv is None:
        argv = sys.argv[1:]

    data_root = config.get_data_root()
    cfg = config.load_shell_config(data_root)

    try:
        if argv and argv[0] == "serve":
            run_server(cfg, argv[1:])
        elif not argv:
            run_terminal(cfg, data_root)
        else:
            print_formatted_text(USAGE)
            return 2
    except CommandError as e:
        print_formatted_text(f"lineshell: {e}")
        print_formatted_text(USAGE)
        return 2
    except KeyboardInterrupt:
        print_formatted_text("\nBye!")
    return 0
