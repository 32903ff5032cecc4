from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def lineshell_data_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep crash logs and history files out of the real home directory."""
    data = tmp_path / "lineshell_data_home"
    data.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("LINESHELL_DATA_HOME", str(data))
    return data
