# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Byte streams for embedding a Shell.

This module provides:
- TerminalStream: the local TTY in raw mode (prompt_toolkit raw_mode)
- TelnetStream: a TCP socket speaking just enough telnet for
  character-at-a-time input with server-side echo
- serve(): a threaded TCP server running one Shell per connection
"""

from __future__ import annotations

import os
import socket
import socketserver
import sys
from collections.abc import Callable
from typing import BinaryIO

from prompt_toolkit.input.vt100 import raw_mode

from .crashlog import write_crash_log
from .shell import Shell

# telnet protocol bytes
IAC = 255
DONT = 254
DO = 253
WONT = 252
WILL = 251
SB = 250
SE = 240
OPT_ECHO = 1
OPT_SGA = 3


class TerminalStream:
    """Local terminal as a byte source/sink.

    Use as a context manager; the TTY is in raw mode inside the block.
    """

    def __init__(
        self,
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
    ):
        self._stdin = stdin if stdin is not None else sys.stdin.buffer
        self._stdout = stdout if stdout is not None else sys.stdout.buffer
        self._raw: raw_mode | None = None

    def __enter__(self) -> TerminalStream:
        if self._stdin.isatty():
            self._raw = raw_mode(self._stdin.fileno())
            self._raw.__enter__()
        return self

    def __exit__(self, *exc) -> None:
        if self._raw is not None:
            self._raw.__exit__(*exc)
            self._raw = None

    def read(self, size: int) -> bytes:
        return os.read(self._stdin.fileno(), size)

    def write(self, data: bytes) -> int:
        n = self._stdout.write(data)
        self._stdout.flush()
        return n


class TelnetStream:
    """Socket wrapper that hides telnet option negotiation.

    Input:
    - IAC <verb> <option> and IAC SB ... IAC SE are dropped
    - IAC IAC is a literal 0xFF
    - NUL after CR is dropped by the shell itself
    Output:
    - a literal 0xFF is doubled
    """

    def __init__(self, sock: socket.socket):
        self.sock = sock
        self._state = "data"

    def negotiate(self) -> None:
        """Ask the client for character mode with server-side echo."""
        self.sock.sendall(
            bytes((IAC, WILL, OPT_ECHO, IAC, WILL, OPT_SGA,
                   IAC, DO, OPT_SGA))
        )

    def read(self, size: int) -> bytes:
        while True:
            chunk = self.sock.recv(size)
            if not chunk:
                return b""
            data = self._filter(chunk)
            if data:
                return data

    def write(self, data: bytes) -> int:
        self.sock.sendall(data.replace(bytes((IAC,)), bytes((IAC, IAC))))
        return len(data)

    def _filter(self, chunk: bytes) -> bytes:
        out = bytearray()
        for b in chunk:
            state = self._state
            if state == "data":
                if b == IAC:
                    self._state = "iac"
                else:
                    out.append(b)
            elif state == "iac":
                if b == IAC:
                    out.append(b)
                    self._state = "data"
                elif b in (WILL, WONT, DO, DONT):
                    self._state = "option"
                elif b == SB:
                    self._state = "sb"
                else:
                    self._state = "data"
            elif state == "option":
                self._state = "data"
            elif state == "sb":
                if b == IAC:
                    self._state = "sb_iac"
            elif state == "sb_iac":
                self._state = "data" if b == SE else "sb"
        return bytes(out)


ShellFactory = Callable[[], Shell]


class _SessionHandler(socketserver.BaseRequestHandler):
    server: _ShellServer

    def handle(self) -> None:
        stream = TelnetStream(self.request)
        shell = self.server.factory()
        shell.session = "%s:%s" % self.client_address[:2]
        shell.executor.session = shell.session
        try:
            stream.negotiate()
            if self.server.motd:
                shell.set_io(stream, stream)
                shell.write(self.server.motd)
            shell.run(stream, stream)
        except OSError as e:
            write_crash_log(e, session=shell.session)


class _ShellServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True

    def __init__(
        self,
        address: tuple[str, int],
        factory: ShellFactory,
        motd: str = "",
    ):
        self.factory = factory
        self.motd = motd
        super().__init__(address, _SessionHandler)


def make_server(
    factory: ShellFactory,
    host: str = "127.0.0.1",
    port: int = 2323,
    motd: str = "",
) -> _ShellServer:
    """Create (but do not start) a telnet server.

    factory is called once per connection; each session gets a
    private Shell.
    """
    return _ShellServer((host, port), factory, motd)


def serve(
    factory: ShellFactory,
    host: str = "127.0.0.1",
    port: int = 2323,
    motd: str = "",
) -> None:
    with make_server(factory, host, port, motd) as server:
        server.serve_forever()
