"""Persisted storage-root ("Box root") configuration.

The storage root is the single base directory under which every consulting
project and the project registry live. It is stored per user in a small JSON
file, ``{"box_root": ..., "updated_at": ..., "user": ...}``, and validated to
still exist each time it is read.

Examples
--------
>>> from busccpy.storage.box_root import BoxRootStore
>>> store = BoxRootStore()
>>> store.set_root("/path/to/Box/SCC")  # doctest: +SKIP
>>> store.get_root()  # doctest: +SKIP
PosixPath('/path/to/Box/SCC')
"""

from __future__ import annotations

import getpass
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from busccpy.config import UPDATED_AT_FORMAT
from busccpy.exceptions import InvalidPathError, NotConfiguredError, PathMissingError
from busccpy.settings import Settings

if TYPE_CHECKING:
    from busccpy.ui.pickers import PathPicker

logger = logging.getLogger(__name__)

SELECT_ROOT_MESSAGE = (
    "Select the local file path to the Statistical Consulting Center Box folder."
)


class BoxRootStore:
    r"""Read and write the configured storage root.

    Parameters
    ----------
    config_file : Path | None, optional
        JSON file holding the configuration. Defaults to
        ``Settings().config_file``.
    """

    def __init__(self, config_file: Path | None = None) -> None:
        self.config_file = (
            Path(config_file) if config_file is not None else Settings().config_file
        )

    def set_root(
        self, path: Path | str | None = None, picker: PathPicker | None = None
    ) -> Path:
        r"""Validate and persist the storage root.

        Parameters
        ----------
        path : Path | str | None, optional
            Directory to use. When ``None`` the ``picker`` is asked.
        picker : PathPicker | None, optional
            Interactive chooser used only when ``path`` is ``None``.

        Returns
        -------
        Path
            The resolved storage root that was saved.

        Raises
        ------
        InvalidPathError
            If no path was given and no picker is available, or the path is
            not an existing directory.
        """
        if path is None:
            if picker is None:
                raise InvalidPathError(
                    "No directory selected. Box root was not set."
                )
            path = picker.choose_directory(SELECT_ROOT_MESSAGE)
        candidate = Path(path).expanduser()
        if not candidate.is_dir():
            raise InvalidPathError(
                f"Directory does not exist: {candidate}",
                context={"path": str(candidate)},
            )
        resolved = candidate.resolve()
        payload = {
            "box_root": resolved.as_posix(),
            "updated_at": datetime.now(timezone.utc).strftime(UPDATED_AT_FORMAT),
            "user": getpass.getuser(),
        }
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(
            json.dumps(payload, indent=2) + "\n", encoding="utf-8"
        )
        logger.info(f"Box root set to: {resolved}")
        return resolved

    def get_root(
        self, error_if_missing: bool = True, picker: PathPicker | None = None
    ) -> Path | None:
        r"""Return the configured storage root, guaranteed to exist right now.

        Parameters
        ----------
        error_if_missing : bool, optional
            Raise when the root is not configured or no longer exists. With
            ``False`` a warning is logged and ``None`` is returned instead.
        picker : PathPicker | None, optional
            When given, a missing or stale configuration is repaired by asking
            the user for a new root.

        Returns
        -------
        Path | None
            The resolved storage root, or ``None`` (only when
            ``error_if_missing`` is ``False``).

        Raises
        ------
        NotConfiguredError
            If no configuration file exists or it cannot be read.
        PathMissingError
            If the configured directory no longer exists.
        """
        if not self.config_file.exists():
            if picker is not None:
                logger.info("Box root is not set. Asking for the Box folder.")
                return self.set_root(picker=picker)
            message = (
                "Box root is not configured. Run `busccpy set-root` first."
            )
            if error_if_missing:
                raise NotConfiguredError(
                    message, context={"config_file": str(self.config_file)}
                )
            logger.warning(message)
            return None

        configured = self._read_configured_path()
        if not configured.is_dir():
            if picker is not None:
                logger.info(
                    "The configured Box root directory no longer exists. "
                    "Asking for the Box folder again."
                )
                return self.set_root(picker=picker)
            message = f"Configured Box path no longer exists: {configured}"
            if error_if_missing:
                raise PathMissingError(message, context={"box_root": str(configured)})
            logger.warning(message)
            return None
        return configured.resolve()

    def clear(self) -> bool:
        """Remove the configuration file; return whether one existed."""
        if self.config_file.exists():
            self.config_file.unlink()
            logger.info(f"Removed Box root configuration: {self.config_file}")
            return True
        return False

    def _read_configured_path(self) -> Path:
        try:
            data = json.loads(self.config_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise NotConfiguredError(
                f"Could not read Box root configuration: {exc}",
                context={"config_file": str(self.config_file)},
            ) from exc
        box_root = data.get("box_root") if isinstance(data, dict) else None
        if not isinstance(box_root, str) or not box_root.strip():
            raise NotConfiguredError(
                "Box root configuration has no `box_root` entry.",
                context={"config_file": str(self.config_file)},
            )
        return Path(box_root).expanduser()


__all__ = ["BoxRootStore", "SELECT_ROOT_MESSAGE"]
