"""Project record model and value normalization.

A project record is one JSON document per consulting project. This module
owns its in-memory shape (``ProjectRecord``), the stable on-disk field order
and the normalization rules for dates and multi-valued fields.
"""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Iterable

from busccpy.config import DEFAULT_STATUS, LIST_FIELDS, RECORD_FIELDS, UPDATED_AT_FORMAT
from busccpy.exceptions import InvalidDateError, ValidationError

_WHITESPACE_RUN = re.compile(r"\s+")


@dataclass
class ProjectRecord:
    """In-memory representation of one registry record.

    Field declaration order is the on-disk JSON order.
    """

    id: str
    term: str
    start_date: str
    end_date: str | None = None
    category: str | None = None
    project_name: str = ""
    contact: str = ""
    department: str = ""
    organization: str | None = None
    status: str = DEFAULT_STATUS
    consultants: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)
    methods: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    abstract: str | None = None
    project_path: str | None = None
    notes: str | None = None
    updated_at: str | None = None
    # Keys outside the record schema, written back after the schema fields
    extras: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the record as a plain dict: schema fields in order, then extra keys."""
        data = asdict(self)
        ordered = {name: data[name] for name in RECORD_FIELDS}
        for key, value in self.extras.items():
            if key not in ordered:
                ordered[key] = value
        return ordered

    def to_json(self) -> str:
        """Serialize with stable field order, ``null`` scalars and ``[]`` lists."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], fallback_id: str | None = None
    ) -> "ProjectRecord":
        r"""Build a record from decoded JSON.

        Single strings in list fields (as written by tools that unbox
        length-one vectors) become one-element lists. Keys outside the
        schema are kept in ``extras``.

        Parameters
        ----------
        data : dict
            Decoded record object.
        fallback_id : str | None, optional
            Id to use when ``data`` has none, normally the file stem.

        Raises
        ------
        ValidationError
            If ``id`` is missing and no ``fallback_id`` is given.
        """
        if not data.get("id") and not fallback_id:
            raise ValidationError("Project record has no `id`.", context={"data": data})
        values: dict[str, Any] = {}
        for name in RECORD_FIELDS:
            if name not in data:
                continue
            value = data[name]
            if name in LIST_FIELDS:
                value = _as_string_list(value)
            values[name] = value
        if not values.get("id"):
            values["id"] = fallback_id
        values.setdefault("term", "")
        values.setdefault("start_date", "")
        values["extras"] = {k: v for k, v in data.items() if k not in RECORD_FIELDS}
        return cls(**values)

    @classmethod
    def from_json(cls, text: str, fallback_id: str | None = None) -> "ProjectRecord":
        """Decode a record file's content."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Project record is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValidationError("Project record must be a JSON object.")
        return cls.from_dict(data, fallback_id=fallback_id)


def normalize_terms(values: Iterable[str] | str | None) -> list[str]:
    """Normalize a multi-valued field into a deduplicated, order-stable list.

    Values are trimmed and internal whitespace runs collapse to one space;
    empty values are dropped; duplicates are detected case-insensitively and
    the first-seen spelling is kept.

    Examples
    --------
    >>> normalize_terms([" ANOVA ", "anova", "", "mixed   models"])
    ['ANOVA', 'mixed models']
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    seen: set[str] = set()
    normalized: list[str] = []
    for value in values:
        if value is None:
            continue
        cleaned = _WHITESPACE_RUN.sub(" ", str(value)).strip()
        key = cleaned.casefold()
        if not cleaned or key in seen:
            continue
        seen.add(key)
        normalized.append(cleaned)
    return normalized


def merge_terms(existing: Iterable[str], new: Iterable[str] | str | None) -> list[str]:
    """Union ``new`` into ``existing`` keeping first-seen order."""
    return normalize_terms([*existing, *normalize_terms(new)])


def clean_list(values: Iterable[str] | str | None) -> list[str]:
    """Trim an ordered list (e.g. consultants), dropping blanks but keeping order and repeats."""
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    return [str(v).strip() for v in values if v is not None and str(v).strip()]


def parse_date(value: date | str | None, field_name: str = "date") -> str:
    r"""Return ``value`` as an ISO ``YYYY-MM-DD`` string, defaulting to today.

    Raises
    ------
    InvalidDateError
        If ``value`` is not a valid calendar date.
    """
    if value is None:
        return date.today().isoformat()
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError as exc:
        raise InvalidDateError(
            f"`{field_name}` must be a valid date (YYYY-MM-DD), got {value!r}.",
            context={"field": field_name, "value": str(value)},
        ) from exc


def utc_timestamp(now: datetime | None = None) -> str:
    """Return the current UTC time in the record ``updated_at`` format."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime(UPDATED_AT_FORMAT)


def _as_string_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(v) for v in value if v is not None]
    return []


__all__ = [
    "ProjectRecord",
    "clean_list",
    "merge_terms",
    "normalize_terms",
    "parse_date",
    "utc_timestamp",
]
