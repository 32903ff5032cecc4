# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Utility functions for LineShell.
"""

from __future__ import annotations

import re

_BARE_LF = re.compile(r"(?<!\r)\n")
_INT = re.compile(r"[+-]?\d+")

# Line text round-trips arbitrary input bytes: bytes that are not valid
# UTF-8 become lone surrogates and encode back to the same byte.
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


def decode_bytes(data: bytes) -> str:
    return data.decode(ENCODING, errors=ENCODING_ERRORS)


def encode_text(text: str) -> bytes:
    return text.encode(ENCODING, errors=ENCODING_ERRORS)


def to_crlf(text: str) -> str:
    """Turn bare LF into CRLF for raw-mode terminals.

    Existing CRLF pairs are left alone.
    """
    return _BARE_LF.sub("\r\n", text)


def parse_int(text: str) -> int | None:
    """Parse a signed decimal integer, or return None."""
    text = text.strip()
    if not _INT.fullmatch(text):
        return None
    return int(text)


def format_help_line(name: str, width: int, description: str) -> str:
    """Left-align name in a fixed width column (truncating if longer)."""
    return f"{name[:width]:<{width}}  {description}"
