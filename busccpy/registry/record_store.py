"""Flat-file project registry: one JSON record per project.

``RecordStore`` owns the lifecycle of the records under
``<root>/project_registry/``. Records are created once, updated any number of
times, completed, and never deleted. Nothing is cached: every operation
re-reads the record from disk before mutating it.

Writes are guarded by an optimistic check. The record file's modification
time (``st_mtime_ns``) is captured when it is read and compared with the
on-disk value right before the write; a difference means someone else wrote
the file in between and the write is refused unless ``overwrite=True``. The
check only detects a conflict after the fact; it is not a lock.

Examples
--------
>>> from pathlib import Path
>>> store = RecordStore(Path("/path/to/Box/SCC"))  # doctest: +SKIP
>>> store.create("Retention study", department="Student Success",
...              contact="jdoe@example.edu", project_dir="Projects/retention")  # doctest: +SKIP
"""

from __future__ import annotations

import getpass
import logging
import re
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Mapping

from busccpy.config import (
    COMPLETE_STATUS,
    DEFAULT_STATUS,
    PROTECTED_FIELDS,
    RECORD_FIELDS,
    RECORD_SUFFIX,
    REGISTRY_DIRNAME,
    SET_FIELDS,
)
from busccpy.exceptions import (
    ConcurrentModificationError,
    DuplicateRecordError,
    MissingMethodsError,
    NoOpError,
    RecordNotFoundError,
    ValidationError,
)
from busccpy.registry.identifiers import build_project_id, infer_term
from busccpy.registry.records import (
    ProjectRecord,
    clean_list,
    merge_terms,
    normalize_terms,
    parse_date,
    utc_timestamp,
)
from busccpy.storage.fs_utils import (
    atomic_write_text,
    resolve_inside_root,
    to_root_relative,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS: tuple[str, ...] = tuple(
    name for name in RECORD_FIELDS if name not in PROTECTED_FIELDS
)
REQUIRED_SCALARS: tuple[str, ...] = (
    "term",
    "project_name",
    "contact",
    "department",
    "status",
)
_SAFE_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


class RecordStore:
    r"""Create, read, update and complete project records.

    Parameters
    ----------
    root : Path
        The storage root. The store never looks up the configured root
        itself; callers inject it.

    Attributes
    ----------
    root : Path
        The storage root.
    registry_dir : Path
        ``<root>/project_registry``.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self.registry_dir = self.root / REGISTRY_DIRNAME

    # ------------------------------------------------------------------ reads

    def record_path(self, project_id: str) -> Path:
        """Return the JSON file path for ``project_id``."""
        if not project_id or not _SAFE_ID.match(project_id):
            raise ValidationError(
                f"Invalid project id: {project_id!r}",
                context={"id": project_id},
            )
        return self.registry_dir / f"{project_id}{RECORD_SUFFIX}"

    def exists(self, project_id: str) -> bool:
        return self.record_path(project_id).is_file()

    def list_ids(self) -> list[str]:
        """Return the ids of all records, sorted."""
        if not self.registry_dir.is_dir():
            return []
        return sorted(p.stem for p in self.registry_dir.glob(f"*{RECORD_SUFFIX}"))

    def read(self, project_id: str) -> ProjectRecord:
        """Load one record from disk.

        Raises
        ------
        RecordNotFoundError
            If the record file does not exist.
        """
        record, _, _ = self._load(project_id)
        return record

    # ----------------------------------------------------------------- create

    def create(
        self,
        project_name: str,
        department: str,
        contact: str,
        project_dir: Path | str | None = None,
        term: str | None = None,
        start_date: date | str | None = None,
        category: str | None = None,
        organization: str | None = None,
        status: str = DEFAULT_STATUS,
        consultants: Iterable[str] | str | None = None,
        notes: str | None = None,
        today: date | None = None,
    ) -> dict[str, Any]:
        r"""Register a new project.

        Parameters
        ----------
        project_name, department, contact : str
            Required, non-blank. ``department`` and ``contact`` form the id.
        project_dir : Path | str | None, optional
            Project folder, absolute or relative to the root. Must exist and
            be inside the root; it is stored relative to the root.
        term : str | None, optional
            Academic term label; inferred from the date when omitted.
        start_date : date | str | None, optional
            Defaults to today.
        category, organization, notes : str | None, optional
            Free-text metadata.
        status : str, optional
            Initial status, default ``"intake"``.
        consultants : Iterable[str] | str | None, optional
            Defaults to the current OS user.
        today : date | None, optional
            Reference date for term inference.

        Returns
        -------
        dict
            ``{"id", "project_path", "registry_file"}``.

        Raises
        ------
        ValidationError
            If a required field is blank or the project folder does not exist.
        InvalidDateError
            If ``start_date`` is not a valid date.
        PathOutsideRootError
            If the project folder is outside the root.
        DuplicateRecordError
            If a record with the derived id already exists.
        """
        for name, value in (
            ("project_name", project_name),
            ("department", department),
            ("contact", contact),
        ):
            if value is None or not str(value).strip():
                raise ValidationError(
                    f"`{name}` must be provided.", context={"field": name}
                )
        status = _required_text("status", status)
        if status == COMPLETE_STATUS:
            raise ValidationError(
                "A new project cannot start as complete; use complete_project().",
                context={"status": status},
            )
        start = parse_date(start_date, "start_date")
        if term is None or not str(term).strip():
            term = infer_term(today)
        term = str(term).strip()
        project_id = build_project_id(department, contact, term=term)

        project_path = (
            self.resolve_project_path(project_dir) if project_dir is not None else None
        )

        registry_file = self.record_path(project_id)
        if registry_file.exists():
            raise DuplicateRecordError(
                f"A project with this id already exists in the registry: {project_id}",
                context={"id": project_id, "registry_file": str(registry_file)},
            )
        self.registry_dir.mkdir(parents=True, exist_ok=True)

        record = ProjectRecord(
            id=project_id,
            term=term,
            start_date=start,
            end_date=None,
            category=_optional_text(category),
            project_name=str(project_name).strip(),
            contact=str(contact).strip(),
            department=str(department).strip(),
            organization=_optional_text(organization),
            status=status,
            consultants=(
                clean_list(consultants)
                if consultants is not None
                else [getpass.getuser()]
            ),
            project_path=project_path,
            notes=_optional_text(notes),
        )
        atomic_write_text(registry_file, record.to_json())
        logger.info(f"Project created: {project_id}")
        return {
            "id": project_id,
            "project_path": project_path,
            "registry_file": registry_file,
        }

    # ----------------------------------------------------------------- update

    def update(
        self,
        project_id: str,
        patch: Mapping[str, Any],
        append: bool = False,
        overwrite: bool = False,
    ) -> dict[str, Any]:
        r"""Apply a partial update to an existing record.

        Only keys present in ``patch`` are changed. For ``topics``,
        ``methods`` and ``keywords`` the new values are normalized and, with
        ``append=True``, unioned with the existing ones; otherwise they
        replace them. Nullable text fields may be cleared with ``None``.

        Parameters
        ----------
        project_id : str
            Record to update.
        patch : Mapping[str, Any]
            Field names to new values.
        append : bool, optional
            Union multi-valued fields instead of replacing them.
        overwrite : bool, optional
            Skip the concurrent-modification check.

        Returns
        -------
        dict
            ``{"id", "registry_file", "updated_fields"}``.

        Raises
        ------
        RecordNotFoundError
            If the record does not exist.
        NoOpError
            If ``patch`` is empty.
        ValidationError
            For unknown or protected fields, blank required fields or
            ``status="complete"``.
        InvalidDateError
            If ``start_date`` is not a valid date.
        PathOutsideRootError
            If ``project_path`` is outside the root.
        ConcurrentModificationError
            If the file changed since it was read and ``overwrite`` is False.
        """
        record, mtime_ns, registry_file = self._load(project_id)
        if not patch:
            raise NoOpError(
                "No fields supplied; nothing to update.", context={"id": project_id}
            )

        for key in patch:
            if key in PROTECTED_FIELDS:
                raise ValidationError(
                    f"`{key}` cannot be changed with update_project().",
                    context={"field": key},
                )
            if key not in UPDATABLE_FIELDS:
                raise ValidationError(
                    f"Unknown project field: `{key}`", context={"field": key}
                )

        for key, value in patch.items():
            if key in SET_FIELDS:
                current = getattr(record, key)
                new_values = (
                    merge_terms(current, value) if append else normalize_terms(value)
                )
                setattr(record, key, new_values)
            elif key == "consultants":
                record.consultants = clean_list(value)
            elif key == "start_date":
                if value is None:
                    raise ValidationError("`start_date` cannot be cleared.")
                record.start_date = parse_date(value, "start_date")
            elif key == "project_path":
                record.project_path = (
                    self.resolve_project_path(value) if value is not None else None
                )
            elif key in REQUIRED_SCALARS:
                text = _required_text(key, value)
                if key == "status" and text == COMPLETE_STATUS:
                    raise ValidationError(
                        "Use complete_project() to mark a project complete.",
                        context={"status": text},
                    )
                setattr(record, key, text)
            else:
                setattr(record, key, _optional_text(value))

        record.updated_at = utc_timestamp()
        self._write(record, registry_file, mtime_ns, overwrite)
        updated_fields = list(patch)
        logger.info(f"Project updated: {project_id} ({', '.join(updated_fields)})")
        return {
            "id": project_id,
            "registry_file": registry_file,
            "updated_fields": updated_fields,
        }

    # --------------------------------------------------------------- complete

    def complete(
        self,
        project_id: str,
        end_date: date | str | None = None,
        methods: Iterable[str] | str | None = None,
        overwrite: bool = False,
    ) -> dict[str, Any]:
        r"""Mark a project complete.

        Sets ``end_date`` (default today) and ``status="complete"``. At least
        one method must be on the record already or be supplied here;
        supplied methods are merged into the existing ones.

        Returns
        -------
        dict
            ``{"id", "registry_file", "end_date", "methods"}``.

        Raises
        ------
        RecordNotFoundError
            If the record does not exist.
        MissingMethodsError
            If no methods are recorded or supplied.
        InvalidDateError
            If ``end_date`` is not a valid date.
        ConcurrentModificationError
            If the file changed since it was read and ``overwrite`` is False.
        """
        record, mtime_ns, registry_file = self._load(project_id)
        merged = merge_terms(record.methods, methods)
        if not merged:
            raise MissingMethodsError(
                f"Project {project_id} has no methods recorded. "
                "Supply the statistical methods used before completing it.",
                context={"id": project_id},
            )
        end = parse_date(end_date, "end_date")

        record.methods = merged
        record.end_date = end
        record.status = COMPLETE_STATUS
        record.updated_at = utc_timestamp()
        self._write(record, registry_file, mtime_ns, overwrite)
        logger.info(f"Project completed: {project_id} (end_date={end})")
        return {
            "id": project_id,
            "registry_file": registry_file,
            "end_date": end,
            "methods": merged,
        }

    # ---------------------------------------------------------------- helpers

    def resolve_project_path(self, project_dir: Path | str) -> str:
        """Validate a project folder against the root and return it root-relative."""
        return to_root_relative(resolve_inside_root(project_dir, self.root), self.root)

    def _load(self, project_id: str) -> tuple[ProjectRecord, int, Path]:
        registry_file = self.record_path(project_id)
        try:
            mtime_ns = registry_file.stat().st_mtime_ns
            text = registry_file.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise RecordNotFoundError(
                f"No project record found for id: {project_id}",
                context={"id": project_id, "registry_file": str(registry_file)},
            ) from exc
        record = ProjectRecord.from_json(text, fallback_id=registry_file.stem)
        return record, mtime_ns, registry_file

    def _write(
        self,
        record: ProjectRecord,
        registry_file: Path,
        read_mtime_ns: int,
        overwrite: bool,
    ) -> None:
        """Rewrite the file the record was loaded from, after the concurrency check."""
        try:
            current_mtime_ns = registry_file.stat().st_mtime_ns
        except FileNotFoundError:
            current_mtime_ns = None
        if current_mtime_ns != read_mtime_ns:
            if not overwrite:
                raise ConcurrentModificationError(
                    f"Project record {record.id} was modified by someone else since it "
                    "was read. Re-run the command, or pass overwrite=True to replace it.",
                    context={
                        "id": record.id,
                        "read_mtime_ns": read_mtime_ns,
                        "current_mtime_ns": current_mtime_ns,
                    },
                )
            logger.warning(f"Overwriting concurrent changes to {registry_file}")
        atomic_write_text(registry_file, record.to_json())


def _required_text(name: str, value: Any) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"`{name}` cannot be empty.", context={"field": name})
    return str(value).strip()


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = ["RecordStore", "UPDATABLE_FIELDS"]
