"""Project identifier derivation.

A project id has the form ``<term>_<department>_<contact>`` where every part
is slugified. The only time-dependent input is the academic term, which is
inferred from the date when not supplied.

Examples
--------
>>> from datetime import date
>>> build_project_id("Student Success", "jdoe@example.edu", term="2026SP")
'2026sp_student_success_jdoe_example_edu'
>>> infer_term(date(2026, 7, 1))
'2026SU'
"""

from __future__ import annotations

import re
from datetime import date

from busccpy.exceptions import ValidationError

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase, trim and collapse non-alphanumeric runs into single underscores."""
    slug = _NON_ALNUM.sub("_", str(text).strip().lower())
    return slug.strip("_")


def infer_term(today: date | None = None) -> str:
    """Return the academic term label for ``today``.

    January to May is spring (``SP``), June to August summer (``SU``) and
    September to December fall (``FA``).
    """
    today = today or date.today()
    if today.month <= 5:
        suffix = "SP"
    elif today.month <= 8:
        suffix = "SU"
    else:
        suffix = "FA"
    return f"{today.year}{suffix}"


def build_project_id(
    department: str,
    contact: str,
    term: str | None = None,
    today: date | None = None,
) -> str:
    r"""Derive the filesystem-safe project id.

    Parameters
    ----------
    department : str
        Department name.
    contact : str
        Primary contact name or e-mail.
    term : str | None, optional
        Academic term label; inferred from ``today`` when ``None`` or blank.
    today : date | None, optional
        Reference date for term inference, default the current date.

    Returns
    -------
    str
        ``slug(term) + "_" + slug(department) + "_" + slug(contact)``.

    Raises
    ------
    ValidationError
        If any part slugifies to an empty string.
    """
    if term is None or not str(term).strip():
        term = infer_term(today)
    parts = {
        "term": slugify(term),
        "department": slugify(department),
        "contact": slugify(contact),
    }
    empty = [name for name, slug in parts.items() if not slug]
    if empty:
        raise ValidationError(
            f"Cannot build a project id: no letters or digits in {', '.join(empty)}.",
            context=parts,
        )
    return "_".join(parts.values())


__all__ = ["build_project_id", "infer_term", "slugify"]
