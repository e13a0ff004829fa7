"""Public project-registry operations.

This module is the boundary between callers (command line, notebooks,
scripts) and the registry core. It resolves the storage root from the
configuration store when none is injected, consults an optional
``PathPicker`` for the interactive modes and delegates everything else to
``RecordStore`` and ``RegistryCompiler``.

Interactive input is never inferred from the environment: choosing a record,
choosing a new project folder and asking for methods all require an explicit
``picker``.

Examples
--------
>>> from busccpy.registry.api import create_project, complete_project
>>> create_project("Retention study", "Student Success", "jdoe@example.edu",
...                project_dir="Projects/retention")  # doctest: +SKIP
>>> complete_project("2026fa_student_success_jdoe_example_edu",
...                  methods=["logistic regression"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, cast

import pandas as pd

from busccpy.config import DEFAULT_STATUS, RECORD_SUFFIX
from busccpy.exceptions import MissingMethodsError, ValidationError
from busccpy.storage.box_root import BoxRootStore

from .compiler import RegistryCompiler
from .record_store import RecordStore

if TYPE_CHECKING:
    from busccpy.registry.records import ProjectRecord
    from busccpy.ui.pickers import PathPicker

logger = logging.getLogger(__name__)

SELECT_PROJECT_DIR_MESSAGE = (
    "Select the project folder (must be inside the SCC Box root)"
)
SELECT_RECORD_MESSAGE = "Select the project record to modify"
METHODS_MESSAGE = "Statistical methods used (comma separated):"


def resolve_root(root: Path | str | None = None) -> Path:
    """Return ``root`` as a Path, or the configured storage root when ``None``."""
    if root is not None:
        return Path(root)
    return cast(Path, BoxRootStore().get_root(error_if_missing=True))


def _choose_project_id(store: RecordStore, picker: PathPicker | None) -> str:
    if picker is None:
        raise ValidationError(
            "`project_id` must be provided when no interactive picker is available."
        )
    chosen = picker.choose_file(SELECT_RECORD_MESSAGE, start=store.registry_dir)
    if chosen.suffix != RECORD_SUFFIX:
        raise ValidationError(
            f"Selected file is not a project record: {chosen}",
            context={"path": str(chosen)},
        )
    return chosen.stem


def create_project(
    project_name: str,
    department: str,
    contact: str,
    *,
    project_dir: Path | str | None = None,
    term: str | None = None,
    start_date: date | str | None = None,
    category: str | None = None,
    organization: str | None = None,
    status: str = DEFAULT_STATUS,
    consultants: Iterable[str] | str | None = None,
    notes: str | None = None,
    root: Path | str | None = None,
    picker: PathPicker | None = None,
) -> dict[str, Any]:
    r"""Create a new consulting project record.

    Parameters
    ----------
    project_name, department, contact : str
        Required. The id is ``<term>_<department>_<contact>`` slugified.
    project_dir : Path | str | None, optional
        Project folder inside the storage root. When ``None`` and a
        ``picker`` is given the user is asked to select it; otherwise the
        record is created without a project path.
    root : Path | str | None, optional
        Storage root; defaults to the configured Box root.
    picker : PathPicker | None, optional
        Interactive chooser for the project folder.

    Returns
    -------
    dict
        ``{"id", "project_path", "registry_file"}``.
    """
    store = RecordStore(resolve_root(root))
    if project_dir is None and picker is not None:
        project_dir = picker.choose_directory(
            SELECT_PROJECT_DIR_MESSAGE, start=store.root
        )
    return store.create(
        project_name,
        department,
        contact,
        project_dir=project_dir,
        term=term,
        start_date=start_date,
        category=category,
        organization=organization,
        status=status,
        consultants=consultants,
        notes=notes,
    )


def update_project(
    project_id: str | None = None,
    *,
    append: bool = False,
    overwrite: bool = False,
    choose_path: bool = False,
    root: Path | str | None = None,
    picker: PathPicker | None = None,
    **fields: Any,
) -> dict[str, Any]:
    r"""Update fields of an existing project.

    Keyword fields left as ``None`` are not part of the update.

    Parameters
    ----------
    project_id : str | None, optional
        Record to update; with ``None`` the ``picker`` chooses a record file.
    append : bool, optional
        Union ``topics``/``methods``/``keywords`` with existing values.
    overwrite : bool, optional
        Ignore a concurrent modification and write anyway.
    choose_path : bool, optional
        Ask the ``picker`` for a new project folder.
    **fields
        Record fields to change (e.g. ``keywords=["survey"]``, ``status="analysis"``).

    Returns
    -------
    dict
        ``{"id", "registry_file", "updated_fields"}``.

    Raises
    ------
    ValidationError
        If an interactive mode is requested without a picker.
    NoOpError
        If nothing is supplied to change.
    """
    store = RecordStore(resolve_root(root))
    if project_id is None:
        project_id = _choose_project_id(store, picker)
    patch = {key: value for key, value in fields.items() if value is not None}
    if choose_path:
        if picker is None:
            raise ValidationError(
                "`choose_path` needs an interactive picker; pass `project_path` instead."
            )
        patch["project_path"] = picker.choose_directory(
            SELECT_PROJECT_DIR_MESSAGE, start=store.root
        )
    return store.update(project_id, patch, append=append, overwrite=overwrite)


def complete_project(
    project_id: str | None = None,
    *,
    end_date: date | str | None = None,
    methods: Iterable[str] | str | None = None,
    overwrite: bool = False,
    root: Path | str | None = None,
    picker: PathPicker | None = None,
) -> dict[str, Any]:
    r"""Mark a project complete.

    When the record has no methods and none are supplied, the ``picker`` is
    asked for them; without a picker the call fails with
    ``MissingMethodsError``.

    Returns
    -------
    dict
        ``{"id", "registry_file", "end_date", "methods"}``.
    """
    store = RecordStore(resolve_root(root))
    if project_id is None:
        project_id = _choose_project_id(store, picker)
    if not methods and picker is not None:
        record = store.read(project_id)
        if not record.methods:
            methods = picker.ask_methods(METHODS_MESSAGE)
            if not methods:
                raise MissingMethodsError(
                    f"Project {project_id} cannot be completed without methods.",
                    context={"id": project_id},
                )
    return store.complete(
        project_id, end_date=end_date, methods=methods, overwrite=overwrite
    )


def build_registry(
    overwrite: bool = False, *, root: Path | str | None = None
) -> pd.DataFrame:
    """Compile all project records into ``<root>/project_registry.csv``."""
    return RegistryCompiler(resolve_root(root)).compile(overwrite=overwrite)


def get_project(project_id: str, *, root: Path | str | None = None) -> ProjectRecord:
    """Return one project record."""
    return RecordStore(resolve_root(root)).read(project_id)


def list_projects(*, root: Path | str | None = None) -> list[str]:
    """Return the ids of all registered projects."""
    return RecordStore(resolve_root(root)).list_ids()


__all__ = [
    "build_registry",
    "complete_project",
    "create_project",
    "get_project",
    "list_projects",
    "resolve_root",
    "update_project",
]
