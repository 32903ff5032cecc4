# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
LineShell core package.

An embeddable line-editing command shell driven by a byte source and
sink: single-line editing, history with scrollback and ! expansion,
quote-aware tokenizing and prefix-matched command dispatch.
"""
from .errors import CommandError as CommandError  # noqa: F401
from .registry import CommandFlag as CommandFlag  # noqa: F401
from .shell import Shell as Shell  # noqa: F401 (re-export)
from .tokenizer import parse_line as parse_line  # noqa: F401
