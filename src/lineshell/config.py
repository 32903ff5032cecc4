# LineShell — Embeddable Line-Editing Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Configuration and data root resolution for LineShell.

Handles:
- Data root resolution (LINESHELL_DATA_HOME, ~/.local/share)
- History file and crash log paths
- Packaged YAML defaults loading (lineshell/defaults/shell.yaml)
- Optional user override file merged over the defaults
- Prompt coloring constants
"""

from __future__ import annotations

import copy
import os
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any

import yaml


# -----------------------
# UI constants
# -----------------------

ANSI_COLORS: dict[str, str] = {
    "cyan": "\033[38;5;69;1m",
    "pink": "\033[38;5;169;1m",
    "magenta": "\033[38;5;126;1m",
    "yellow": "\033[38;5;226;1m",
    "green": "\033[32m",
    "red": "\033[31m",
    "dim": "\033[2m",
    "reset": "\033[0m",
}


def colorize(text: str, color: str | None) -> str:
    """Wrap text in an ANSI color; unknown or empty colors leave it alone."""
    if not color or color not in ANSI_COLORS:
        return text
    return ANSI_COLORS[color] + text + ANSI_COLORS["reset"]


# -----------------------
# Config model wrapper
# -----------------------


class ShellConfig:
    """Thin wrapper around the merged configuration mapping."""

    def __init__(self, config_dict: dict[str, Any]):
        self._config = config_dict

    @property
    def shell(self) -> dict[str, Any]:
        return self._section("shell")

    @property
    def history(self) -> dict[str, Any]:
        return self._section("history")

    @property
    def server(self) -> dict[str, Any]:
        return self._section("server")

    @property
    def ui(self) -> dict[str, Any]:
        return self._section("ui")

    def _section(self, key: str) -> dict[str, Any]:
        val = self._config.get(key, {})
        return val if isinstance(val, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def get_path(self, path: str, default: Any = None) -> Any:
        """
        Nested lookup using dot-separated path.
        Example: get_path("shell.prompt", "> ")
        """
        if not path:
            return default

        cur: Any = self._config
        for part in path.split("."):
            if not isinstance(cur, dict):
                return default
            if part not in cur:
                return default
            cur = cur[part]
        return cur

    def as_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._config)


# -----------------------
# Data root + paths
# -----------------------


def get_data_root() -> Path:
    """Get the data root directory for LineShell.

    Resolution order:
    1. LINESHELL_DATA_HOME environment variable (if set)
    2. ~/.local/share (default)
    """
    data_home = os.getenv("LINESHELL_DATA_HOME")
    if data_home:
        root = Path(data_home)
    else:
        root = Path.home() / ".local" / "share"

    root.mkdir(parents=True, exist_ok=True)
    return root


def history_path(data_root: Path) -> Path:
    """<data_root>/lineshell/history"""
    return data_root / "lineshell" / "history"


def crash_log_path(data_root: Path) -> Path:
    """<data_root>/lineshell/logs/crash.log"""
    return data_root / "lineshell" / "logs" / "crash.log"


def user_config_path(data_root: Path) -> Path:
    """<data_root>/lineshell/shell.yaml"""
    return data_root / "lineshell" / "shell.yaml"


def resolve_history_file(cfg: ShellConfig, data_root: Path) -> Path:
    """History file from config; relative paths hang off the data root."""
    configured = cfg.get_path("history.file")
    if not configured:
        return history_path(data_root)

    path = Path(os.path.expanduser(str(configured)))
    if not path.is_absolute():
        path = data_root / "lineshell" / path
    return path


# -----------------------
# YAML loading
# -----------------------


def _defaults_dir() -> Path:
    """Return the installed path to the packaged defaults directory."""
    return Path(
        importlib_resources.files("lineshell.defaults")
    )  # type: ignore[arg-type]


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must load to a mapping/dict.")
    return data


def load_defaults_yaml(filename: str) -> dict[str, Any]:
    """
    Load a YAML file from lineshell/defaults/.
    """
    defaults_dir = _defaults_dir()
    path = defaults_dir / filename
    if not path.exists():
        raise FileNotFoundError(
            f"Missing defaults YAML: {filename} "
            f"(looked in {defaults_dir})"
        )
    return _load_yaml_mapping(path)


def merge_config(
    base: dict[str, Any], override: dict[str, Any]
) -> dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_shell_config(data_root: Path | None = None) -> ShellConfig:
    """
    Load shell.yaml from packaged defaults, then merge the user's
    <data_root>/lineshell/shell.yaml over it when present.
    """
    data = load_defaults_yaml("shell.yaml")

    if data_root is None:
        data_root = get_data_root()
    override_path = user_config_path(data_root)
    if override_path.exists():
        data = merge_config(data, _load_yaml_mapping(override_path))

    return ShellConfig(data)
