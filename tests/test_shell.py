# tests/test_shell.py
"""
Shell tests: read loop, registration API, built-in help/history.
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from lineshell.config import ShellConfig
from lineshell.errors import CommandError
from lineshell.registry import CommandFlag
from lineshell.shell import Shell


class ChunkedSource:
    """Byte source that hands out pre-set chunks, then EOF."""

    def __init__(self, *chunks: bytes):
        self.chunks = list(chunks)
        self.reads = 0

    def read(self, size: int) -> bytes:
        self.reads += 1
        if not self.chunks:
            return b""
        return self.chunks.pop(0)[:size]


class FailingSource:
    def read(self, size: int) -> bytes:
        raise OSError("connection reset")


@pytest.fixture
def shell() -> Shell:
    return Shell(prompt="> ")


def run(shell: Shell, data: bytes) -> str:
    sink = io.BytesIO()
    shell.run(io.BytesIO(data), sink)
    return sink.getvalue().decode("utf-8")


def test_run_dispatches_lines(shell: Shell) -> None:
    seen: list[list[str]] = []
    shell.command("test1", "a test command [args]", seen.append)
    shell.command("test2", "another", seen.append)

    run(shell, b'\r\rtest1 "foo bar baz"\r\rtest2\r\r')

    assert seen == [["test1", "foo bar baz"], ["test2"]]
    assert shell.history.entries() == ['test1 "foo bar baz"', "test2"]
    assert shell.running is False


def test_run_emits_prompt_first(shell: Shell) -> None:
    out = run(shell, b"")
    assert out == "> "


def test_kill_byte_ends_session_with_line_break(shell: Shell) -> None:
    seen: list[list[str]] = []
    shell.command("never", "", seen.append)
    out = run(shell, b"ab\x04never\r")
    assert out == "> ab\r\n"
    assert seen == []


def test_terminate_stops_processing(shell: Shell) -> None:
    seen: list[list[str]] = []
    shell.command("exit", "", lambda args: shell.terminate())
    shell.command("after", "", seen.append)
    run(shell, b"exit\rafter\r")
    assert seen == []
    assert shell.running is False


def test_read_size_chunks_are_consumed() -> None:
    shell = Shell(prompt="> ", read_size=2)
    src = ChunkedSource(b"he", b"lp", b"\r")
    shell.run(src, io.BytesIO())
    assert shell.history.entries() == ["help"]
    assert src.reads == 4


def test_read_error_ends_loop_and_logs(
    shell: Shell, lineshell_data_home: Path
) -> None:
    shell.session = "peer:1"
    shell.run(FailingSource(), io.BytesIO())
    assert shell.running is False
    log = (lineshell_data_home / "lineshell" / "logs" / "crash.log").read_text(
        encoding="utf-8"
    )
    assert "session=peer:1" in log
    assert "connection reset" in log


class ClosedSource:
    def read(self, size: int) -> bytes:
        raise ValueError("I/O operation on closed file")


class BrokenSink:
    def write(self, data: bytes) -> int:
        raise BrokenPipeError("client went away")


def _crash_log(data_home: Path) -> str:
    return (data_home / "lineshell" / "logs" / "crash.log").read_text(
        encoding="utf-8"
    )


def test_any_source_error_ends_loop_and_logs(
    shell: Shell, lineshell_data_home: Path
) -> None:
    shell.run(ClosedSource(), io.BytesIO())
    assert shell.running is False
    log = _crash_log(lineshell_data_home)
    assert "error=ValueError: I/O operation on closed file" in log


def test_sink_error_ends_loop_and_logs(
    shell: Shell, lineshell_data_home: Path
) -> None:
    src = ChunkedSource(b"help\r", b"help\r")
    shell.run(src, BrokenSink())
    assert shell.running is False
    assert src.reads == 0
    assert "error=BrokenPipeError: client went away" in _crash_log(
        lineshell_data_home
    )


class TrippingSink:
    """Sink that fails for good once it sees a given payload."""

    def __init__(self, trigger: bytes):
        self.trigger = trigger
        self.broken = False
        self.out = io.BytesIO()

    def write(self, data: bytes) -> int:
        if self.broken or self.trigger in data:
            self.broken = True
            raise BrokenPipeError("client went away")
        return self.out.write(data)


def test_sink_error_inside_handler_ends_loop(
    shell: Shell, lineshell_data_home: Path
) -> None:
    src = ChunkedSource(b"help\r", b"help\r")
    shell.run(src, TrippingSink(b"Print commands"))
    assert shell.running is False
    assert src.reads == 1
    assert "BrokenPipeError" in _crash_log(lineshell_data_home)


def test_no_prompt_after_terminate(shell: Shell) -> None:
    shell.command("bye", "", lambda args: shell.terminate())
    out = run(shell, b"bye\r")
    assert out == "> bye\r\n"


def test_run_again_after_terminate_prompts(shell: Shell) -> None:
    shell.command("bye", "", lambda args: shell.terminate())
    run(shell, b"bye\r")
    assert run(shell, b"help\r").startswith("> help\r\n")
    assert run(shell, b"x\r").endswith("\r\n> ")


def test_non_utf8_bytes_round_trip(shell: Shell) -> None:
    seen: list[list[str]] = []
    shell.command("say", "", seen.append)
    shell.command("echo", "", lambda args: shell.println(" ".join(args[1:])))
    sink = io.BytesIO()
    shell.run(io.BytesIO(b"say a\xffb\recho \xfe\r"), sink)
    assert seen == [["say", "a\udcffb"]]
    assert b"> echo \xfe\r\n\xfe\r\n> " in sink.getvalue()


def test_run_without_source_raises() -> None:
    with pytest.raises(ValueError):
        Shell().run()


def test_handler_output_uses_crlf(shell: Shell) -> None:
    shell.command("hi", "", lambda args: shell.println("one\ntwo"))
    out = run(shell, b"hi\r")
    assert "one\r\ntwo\r\n" in out


def test_printf(shell: Shell) -> None:
    shell.command("num", "", lambda args: shell.printf("%d items\n", 3))
    out = run(shell, b"num\r")
    assert "3 items\r\n" in out


def test_set_prompt_and_echo(shell: Shell) -> None:
    shell.set_prompt("$ ")
    out = run(shell, b"")
    assert out == "$ "
    shell.set_echo(False)
    out = run(shell, b"")
    assert out == ""


def test_independent_instances_share_nothing() -> None:
    a = Shell()
    b = Shell()
    a.command("only-a", "", lambda args: None)
    a.history.add("x")
    assert "only-a" not in b.registry
    assert len(b.history) == 0


# ----------------------------------------------------------------
# help
# ----------------------------------------------------------------


def test_help_lists_visible_commands_padded(shell: Shell) -> None:
    shell.command("foo", "do foo", lambda args: None)
    shell.command("secret", "hidden thing", lambda args: None)
    shell.set_flags("secret", CommandFlag.HIDDEN)

    out = run(shell, b"help\r")

    assert "help".ljust(10) + "  Print commands\r\n" in out
    assert "foo".ljust(10) + "  do foo\r\n" in out
    assert "history".ljust(10) + "  [n|del [n]" in out
    assert "secret" not in out.split("help\r\n", 1)[1]


def test_help_width_follows_longest_name(shell: Shell) -> None:
    shell.command("a-very-long-command", "long", lambda args: None)
    out = run(shell, b"help\r")
    assert "help" + " " * 15 + "  Print commands" in out


# ----------------------------------------------------------------
# history built-in
# ----------------------------------------------------------------


def test_history_listing(shell: Shell) -> None:
    shell.command("ls", "", lambda args: None)
    out = run(shell, b"ls\rls -l\rhistory\r")
    assert "     1  ls\r\n" in out
    assert "     2  ls -l\r\n" in out
    assert "     3  history\r\n" in out


def test_history_last_n(shell: Shell) -> None:
    for line in ["a", "b", "c", "d"]:
        shell.history.add(line)
    out = run(shell, b"history 2\r")
    assert "     4  d\r\n" in out
    assert "     5  history 2\r\n" in out
    assert "  c\r\n" not in out


def test_history_clear(shell: Shell) -> None:
    shell.history.add("a")
    run(shell, b"history -c\r")
    assert len(shell.history) == 0
    shell.history.add("a")
    run(shell, b"history clear\r")
    assert len(shell.history) == 0


def test_history_del_default_removes_current_and_previous(shell: Shell) -> None:
    for line in ["a", "b", "oops"]:
        shell.history.add(line)
    run(shell, b"history del\r")
    assert shell.history.entries() == ["a", "b"]


def test_history_del_n(shell: Shell) -> None:
    for line in ["a", "b", "c", "d"]:
        shell.history.add(line)
    run(shell, b"history del 2\r")
    assert shell.history.entries() == ["a", "b"]


def test_history_del_bad_count(shell: Shell) -> None:
    out = run(shell, b"history del x\r")
    assert "Command history error: bad count: x" in out


def test_history_save_and_load(shell: Shell, tmp_path: Path) -> None:
    path = tmp_path / "saved"
    shell.history.add("first")
    run(shell, f"history save {path}\r".encode())
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == ["first", f"history save {path}"]

    other = Shell()
    other.history.add("gone")
    run(other, f"@history load {path}\r".encode())
    assert other.history.entries() == lines


def test_history_load_failure_is_reported(shell: Shell, tmp_path: Path) -> None:
    missing = tmp_path / "missing"
    out = run(shell, f"history load {missing}\r".encode())
    assert f"Load {missing}: " in out


def test_history_save_failure_is_reported(shell: Shell, tmp_path: Path) -> None:
    out = run(shell, f"history save {tmp_path}\r".encode())
    assert f"Save {tmp_path}: " in out


# ----------------------------------------------------------------
# registration + config
# ----------------------------------------------------------------


def test_command_raw_and_alias(shell: Shell) -> None:
    seen: list[list[str]] = []
    shell.command_raw("say", "say it", seen.append)
    shell.alias("speak", "say")
    run(shell, b"say  hello   world\rspeak 'x y'\r")
    assert seen == [["say  hello   world"], ["speak 'x y'"]]


def test_handler_failure_message(shell: Shell) -> None:
    def fail(args: list[str]) -> None:
        raise CommandError("nope")

    shell.command("fail", "", fail)
    out = run(shell, b"fail\r")
    assert "Command fail error: nope\r\n" in out


def test_from_config() -> None:
    cfg = ShellConfig(
        {"shell": {"prompt": "cfg> ", "echo": False, "capacity": 4,
                   "read_size": 1, "kill_byte": None}}
    )
    shell = Shell.from_config(cfg, session="s1")
    assert shell.prompt == "cfg> "
    assert shell.echo is False
    assert shell.editor.buffer.capacity == 4
    assert shell.read_size == 1
    assert shell.kill_byte is None
    assert shell.session == "s1"

    sink = io.BytesIO()
    shell.run(io.BytesIO(b"abcde\x04"), sink)
    assert sink.getvalue() == b"abcd\x07\x07"
