# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Quote-aware line tokenizer.

Rules, in priority order:
- an escaped character is taken literally
- backslash escapes the next character, except inside single quotes
- whitespace outside quotes separates arguments
- double quotes toggle unless inside single quotes (and vice versa);
  the quote characters themselves are dropped
- everything else is taken literally
"""

from __future__ import annotations

from .errors import ParseError


def parse_line(line: str) -> list[str]:
    """Split a command line into an argument vector.

    Args:
        line: The raw command line

    Returns:
        List of arguments (possibly empty)

    Raises:
        ParseError: on an unterminated quote or a trailing backslash
    """
    args: list[str] = []
    buf: list[str] = []
    escaped = False
    double_quoted = False
    single_quoted = False

    for ch in line:
        if escaped:
            buf.append(ch)
            escaped = False
            continue

        if ch == "\\":
            if single_quoted:
                buf.append(ch)
            else:
                escaped = True
            continue

        if ch.isspace():
            if single_quoted or double_quoted:
                buf.append(ch)
                continue
            if buf:
                args.append("".join(buf))
                buf = []
            continue

        if ch == '"' and not single_quoted:
            double_quoted = not double_quoted
            continue
        if ch == "'" and not double_quoted:
            single_quoted = not single_quoted
            continue

        buf.append(ch)

    if buf:
        args.append("".join(buf))

    if escaped:
        raise ParseError("dangling escape", args)
    if double_quoted or single_quoted:
        raise ParseError("unterminated quote", args)

    return args
