"""Compile every project record into one tabular snapshot.

The compiler reads each ``*.json`` file directly under
``<root>/project_registry/`` with the restricted extractor of
``field_extractor`` and writes ``<root>/project_registry.csv``.

Design Principles
-----------------
- Schema-aware shortcut, not a general decoder: unsupported value shapes
  compile to blank cells.
- Multi-valued fields are flattened: empty → blank, one value → itself,
  several → deduplicated values joined with ``"; "``.
- The column set is the union over all records: the record field order
  first, then any extra keys in first-seen order. No row is ragged.

Usage
-----
>>> from pathlib import Path
>>> frame = RegistryCompiler(Path("/path/to/Box/SCC")).compile(overwrite=True)  # doctest: +SKIP
>>> list(frame.columns)[:3]  # doctest: +SKIP
['id', 'term', 'start_date']
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from busccpy.config import (
    CSV_ENCODING,
    MULTI_VALUE_SEPARATOR,
    RECORD_FIELDS,
    RECORD_SUFFIX,
    REGISTRY_CSV_FILENAME,
    REGISTRY_DIRNAME,
)
from busccpy.exceptions import AlreadyExistsError, EmptyRegistryError

from .field_extractor import discover_keys, extract_values

logger = logging.getLogger(__name__)


def flatten_values(values: list[str]) -> str:
    """Render a list of values as one display string.

    Examples
    --------
    >>> flatten_values([])
    ''
    >>> flatten_values(["x", "x", "y"])
    'x; y'
    """
    unique = list(dict.fromkeys(values))
    return MULTI_VALUE_SEPARATOR.join(unique)


def find_record_files(registry_dir: Path) -> list[Path]:
    """Return the record files directly under ``registry_dir``, sorted by name."""
    if not registry_dir.is_dir():
        return []
    return sorted(p for p in registry_dir.glob(f"*{RECORD_SUFFIX}") if p.is_file())


def read_record_row(record_file: Path) -> dict[str, str]:
    r"""Extract one CSV row from a record file.

    Parameters
    ----------
    record_file : Path
        A JSON project record.

    Returns
    -------
    dict[str, str]
        Column name to flattened display value, in first-seen key order with
        ``id`` falling back to the file stem.
    """
    text = record_file.read_text(encoding="utf-8")
    row = {key: flatten_values(extract_values(text, key)) for key in discover_keys(text)}
    if not row.get("id"):
        row["id"] = record_file.stem
    return row


def union_columns(rows: list[dict[str, str]]) -> list[str]:
    """Return the preferred record fields followed by extra keys in first-seen order."""
    columns = list(RECORD_FIELDS)
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    return columns


class RegistryCompiler:
    r"""Build the project registry CSV from the record files.

    Parameters
    ----------
    root : Path
        The storage root (injected; never looked up here).
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self.registry_dir = self.root / REGISTRY_DIRNAME
        self.output_file = self.root / REGISTRY_CSV_FILENAME

    def collect(self) -> pd.DataFrame:
        r"""Read all records into a DataFrame without writing anything.

        Raises
        ------
        EmptyRegistryError
            If there are no record files.
        """
        record_files = find_record_files(self.registry_dir)
        if not record_files:
            raise EmptyRegistryError(
                f"No project records found in {self.registry_dir}",
                context={"registry_dir": str(self.registry_dir)},
            )
        rows = [read_record_row(path) for path in record_files]
        columns = union_columns(rows)
        filled = [{column: row.get(column, "") for column in columns} for row in rows]
        return pd.DataFrame(filled, columns=columns)

    def compile(self, overwrite: bool = False) -> pd.DataFrame:
        r"""Compile all records and write ``project_registry.csv``.

        Parameters
        ----------
        overwrite : bool, optional
            Replace an existing CSV snapshot.

        Returns
        -------
        pd.DataFrame
            One row per record, every column present, blanks as ``""``.

        Raises
        ------
        EmptyRegistryError
            If there are no record files.
        AlreadyExistsError
            If the CSV exists and ``overwrite`` is False.
        """
        frame = self.collect()
        if self.output_file.exists() and not overwrite:
            raise AlreadyExistsError(
                f"Registry file already exists: {self.output_file}. "
                "Use overwrite=True to replace it.",
                context={"output_file": str(self.output_file)},
            )
        frame.to_csv(self.output_file, index=False, encoding=CSV_ENCODING)
        logger.info(
            f"Compiled {len(frame)} project records into {self.output_file}"
        )
        return frame


__all__ = [
    "RegistryCompiler",
    "find_record_files",
    "flatten_values",
    "read_record_row",
    "union_columns",
]
