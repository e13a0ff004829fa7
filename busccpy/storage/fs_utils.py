"""Filesystem utilities for paths under the storage root.

This module validates that project folders live inside the configured
storage root, converts them to portable root-relative strings and writes
small files atomically.

Functions
---------
- ``resolve_inside_root``: Validate and stamp a path as inside the root.
- ``to_root_relative``: Render a validated path relative to the root.
- ``atomic_write_text``: Replace a file's content in one step.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import NewType

from busccpy.exceptions import PathOutsideRootError, ValidationError

logger = logging.getLogger(__name__)

# NewType used as a static "seal" to indicate the path is validated as inside the root.
_RootedPath = NewType("_RootedPath", Path)


def resolve_inside_root(path_to_validate: Path | str, root: Path) -> _RootedPath:
    r"""Validate and stamp a path as an existing location inside ``root``.

    Relative paths are interpreted relative to ``root``; absolute paths are
    used as given. Both sides are fully resolved (symlinks included) before
    the containment check, so ``/Box1`` is never mistaken for a child of
    ``/Box``.

    Parameters
    ----------
    path_to_validate : Path or str
        Candidate project folder.
    root : Path
        The configured storage root.

    Returns
    -------
    _RootedPath
        The resolved path, stamped for use by ``to_root_relative``.

    Raises
    ------
    ValidationError
        If the path does not exist.
    PathOutsideRootError
        If the resolved path is not the root or one of its descendants.

    Examples
    --------
    >>> from pathlib import Path
    >>> resolve_inside_root("/", Path("/tmp"))  # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    PathOutsideRootError: PATH_OUTSIDE_ROOT: ...
    """
    root_resolved = Path(root).resolve()
    candidate = Path(path_to_validate).expanduser()
    if not candidate.is_absolute():
        candidate = root_resolved / candidate
    if not candidate.exists():
        raise ValidationError(
            f"Project folder does not exist: {candidate}",
            context={"path": str(candidate)},
        )
    target_path = candidate.resolve()
    if not target_path.is_relative_to(root_resolved):
        raise PathOutsideRootError(
            "Selected project folder is not inside the configured Box root.\n"
            f"Box root: {root_resolved}\nSelected: {target_path}",
            context={"root": str(root_resolved), "path": str(target_path)},
        )
    return _RootedPath(target_path)


def to_root_relative(path: _RootedPath, root: Path) -> str:
    """Return ``path`` as a POSIX string relative to ``root`` (``"."`` for the root)."""
    return path.relative_to(Path(root).resolve()).as_posix()


def atomic_write_text(target: Path, content: str, encoding: str = "utf-8") -> None:
    r"""Write ``content`` to ``target`` through a sibling temp file and ``os.replace``.

    The target is either fully rewritten or left untouched; a failed write
    removes the temp file and re-raises.

    Parameters
    ----------
    target : Path
        File to create or replace. Its parent directory must exist.
    content : str
        Complete new file content.
    encoding : str, optional
        Text encoding, default UTF-8.
    """
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
    )
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="\n") as fh:
            fh.write(content)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug(f"Wrote {target}")


__all__ = ["atomic_write_text", "resolve_inside_root", "to_root_relative"]
