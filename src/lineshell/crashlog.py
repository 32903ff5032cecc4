# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Process-level diagnostic channel.

Unexpected failures (input stream errors, handler exceptions that are
not CommandError) are appended to <data_root>/lineshell/logs/crash.log.
"""

from __future__ import annotations

import traceback
from datetime import datetime

from . import config as cfg_module


def write_crash_log(
    error: BaseException,
    session: str = "",
    line: str = "",
    command: str = "",
) -> None:
    """Write an entry to the crash log.

    Only creates the log directory when actually needed.
    Appends to crash.log (never overwrites).
    """
    try:
        crash_log_path = cfg_module.crash_log_path(cfg_module.get_data_root())
        crash_log_path.parent.mkdir(parents=True, exist_ok=True)

        lines = [
            datetime.now().isoformat(),
        ]
        if session:
            lines.append(f"session={session}")
        if line:
            lines.append(f"line={line}")
        if command:
            lines.append(f"command={command}")

        lines.append(f"error={type(error).__name__}: {error}")
        lines.append("traceback:")
        lines.append(
            "".join(
                traceback.format_exception(
                    type(error), error, error.__traceback__
                )
            )
        )
        lines.append("----")

        with crash_log_path.open(
            "a", encoding="utf-8", errors="backslashreplace"
        ) as f:
            f.write("\n".join(lines) + "\n")

    except Exception:
        # already in an error state; nowhere left to report
        pass
