"""Shared helpers for the document generators."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from busccpy.config import QMD_SUFFIX
from busccpy.exceptions import AlreadyExistsError, ValidationError


def ensure_qmd_name(file_name: str | Path) -> str:
    """Return ``file_name`` with a ``.qmd`` suffix.

    Examples
    --------
    >>> ensure_qmd_name("final_report")
    'final_report.qmd'
    >>> ensure_qmd_name("slides.qmd")
    'slides.qmd'
    """
    name = str(file_name).strip()
    if not name:
        raise ValidationError("A file name is required.")
    if not name.endswith(QMD_SUFFIX):
        name += QMD_SUFFIX
    return name


def prepare_output(
    file_name: str, output_dir: Path | str | None, overwrite: bool
) -> Path:
    r"""Resolve the target file and create its directory.

    Raises
    ------
    AlreadyExistsError
        If the target exists and ``overwrite`` is False.
    """
    directory = Path(output_dir) if output_dir is not None else Path.cwd()
    target = directory / file_name
    if target.exists() and not overwrite:
        raise AlreadyExistsError(
            f"File already exists: {target}. Use overwrite=True to replace it.",
            context={"path": str(target)},
        )
    target.parent.mkdir(parents=True, exist_ok=True)
    return target


def yaml_string_list(values: Iterable[str]) -> str:
    """Render values as an inline YAML list of double-quoted strings.

    Examples
    --------
    >>> yaml_string_list(["Ada", 'B "Bo" C'])
    '["Ada", "B \\\\"Bo\\\\" C"]'
    """
    return "[" + ", ".join(json.dumps(str(v), ensure_ascii=False) for v in values) + "]"


__all__ = ["ensure_qmd_name", "prepare_output", "yaml_string_list"]
