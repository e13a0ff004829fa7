"""Runtime settings loaded from the environment.

This module provides ``Settings``, which resolves the per-user configuration
directory, the default log level and the contact defaults used by the report
generator. Values come from process environment variables and an optional
``.env`` file in the working directory.

Examples
--------
>>> from busccpy.settings import Settings
>>> settings = Settings()
>>> settings.config_file.name
'config.json'
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from busccpy.config import (
    APP_NAME,
    CONFIG_DIR_ENV_VAR,
    CONFIG_FILENAME,
    DEFAULT_CONFIG_DIR,
    DEFAULT_CONTACT_EMAIL,
    DEFAULT_CONTACT_PHONE,
    LOG_FILENAME,
    LOG_SUBDIR,
)


class Settings:
    r"""Environment-backed settings for the command line and config store.

    Attributes
    ----------
    config_dir : Path
        Directory holding ``config.json`` and the optional log directory.
        ``$BUSCCPY_CONFIG_DIR`` wins, then ``$XDG_CONFIG_HOME/busccpy``,
        then ``~/.config/busccpy``.
    log_level : str
        Default log level for the command line (``BUSCCPY_LOG_LEVEL``).
    contact_email : str
        Contact e-mail printed on report title pages (``BUSCCPY_CONTACT_EMAIL``).
    contact_phone : str
        Contact phone printed on report title pages (``BUSCCPY_CONTACT_PHONE``).

    Notes
    -----
    Instantiate once per command invocation. A ``.env`` file never overrides
    variables already present in the environment.
    """

    def __init__(self, env_file: Path | None = None) -> None:
        env_path = Path(env_file) if env_file is not None else Path.cwd() / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=False)
        self.config_dir: Path = self._resolve_config_dir()
        self.log_level: str = os.getenv("BUSCCPY_LOG_LEVEL", "INFO")
        self.contact_email: str = os.getenv(
            "BUSCCPY_CONTACT_EMAIL", DEFAULT_CONTACT_EMAIL
        )
        self.contact_phone: str = os.getenv(
            "BUSCCPY_CONTACT_PHONE", DEFAULT_CONTACT_PHONE
        )

    @staticmethod
    def _resolve_config_dir() -> Path:
        explicit = os.getenv(CONFIG_DIR_ENV_VAR)
        if explicit:
            return Path(explicit).expanduser()
        xdg = os.getenv("XDG_CONFIG_HOME")
        if xdg:
            return Path(xdg).expanduser() / APP_NAME
        return DEFAULT_CONFIG_DIR

    @property
    def config_file(self) -> Path:
        """Path of the JSON file that stores the storage root."""
        return self.config_dir / CONFIG_FILENAME

    @property
    def log_file(self) -> Path:
        """Path of the optional command-line log file."""
        return self.config_dir / LOG_SUBDIR / LOG_FILENAME
