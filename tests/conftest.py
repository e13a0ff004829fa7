"""Pytest configuration for test environment setup.

- Forces ``DISABLE_FILE_LOGS=1`` to avoid writing log files during tests.
- Ensures the project root is available on ``sys.path`` for imports.
- Points the per-user configuration directory at a temporary folder so no
  test reads or writes the real ``~/.config/busccpy``.
"""

import os
import sys

os.environ.setdefault("DISABLE_FILE_LOGS", "1")  # Avoid creating log files during tests
from pathlib import Path

import pytest

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """Redirect the config directory and working directory to temp folders."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("BUSCCPY_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("BUSCCPY_CONTACT_EMAIL", raising=False)
    monkeypatch.delenv("BUSCCPY_CONTACT_PHONE", raising=False)
    monkeypatch.delenv("BUSCCPY_LOG_LEVEL", raising=False)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return config_dir


@pytest.fixture
def box_root(tmp_path):
    """Return an empty storage root with one project folder inside it."""
    root = tmp_path / "Box" / "SCC"
    (root / "Projects" / "retention").mkdir(parents=True)
    return root


@pytest.fixture
def store(box_root):
    """Return a ``RecordStore`` on the temporary storage root."""
    from busccpy.registry.record_store import RecordStore

    return RecordStore(box_root)
