"""
Shared fixtures for the test suite.
"""
from pathlib import Path
from typing import Callable, List

import pytest

from core.config import reset_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Fresh settings per test, with uploads going to a temp directory."""
    monkeypatch.setenv("STORAGE_PATH", str(tmp_path / "files"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def write_csv(tmp_path) -> Callable[..., Path]:
    """Write lines to a CSV file and return its path."""
    def _write(lines: List[str], name: str = "transactions.csv", encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding=encoding)
        return path
    return _write
