"""Command-line entrypoint for the consulting workflow tools.

This module parses arguments, configures logging and translates errors into
exit codes. All behaviour lives in ``busccpy.registry``,
``busccpy.storage`` and ``busccpy.templates``; the CLI only wires options
to those calls and renders results with Rich.

Exit codes
----------
- ``0``: success.
- ``1``: any ``AppError`` (logged and printed in red).
- ``2``: usage errors reported by argparse.

Examples
--------
>>> # In shell
>>> busccpy set-root ~/Box/SCC
>>> busccpy create "Retention study" --department "Student Success" --contact jdoe@baylor.edu --project-dir Projects/retention
>>> busccpy complete 2026fa_student_success_jdoe_baylor_edu --methods "logistic regression"
>>> busccpy build-registry --overwrite
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Any, Callable, Sequence

from rich.panel import Panel
from rich.text import Text

from busccpy import __version__
from busccpy.config import LOG_FORMAT
from busccpy.exceptions import AppError
from busccpy.registry import (
    build_registry,
    complete_project,
    create_project,
    get_project,
    update_project,
)
from busccpy.settings import Settings
from busccpy.storage.box_root import BoxRootStore
from busccpy.templates import create_presentation, create_report
from busccpy.ui.console import (
    render_record_table,
    render_registry_summary,
    rprint,
    ui_error,
    ui_success,
)
from busccpy.ui.pickers import PathPicker, QuestionaryPathPicker, split_methods

logger = logging.getLogger(__name__)


def configure_logging(log_level: str = "INFO", enable_file: bool = True) -> None:
    r"""Configure the root logger for a command invocation.

    Existing root handlers are removed. A stream handler is always installed;
    a file handler writing to ``Settings().log_file`` is added when
    ``enable_file`` is True and ``DISABLE_FILE_LOGS`` is not set.

    Parameters
    ----------
    log_level : str, optional
        Logging level name, e.g. ``"DEBUG"``. Unknown names fall back to INFO.
    enable_file : bool, optional
        Whether to also log to the per-user log file.

    Examples
    --------
    >>> configure_logging("DEBUG", enable_file=False)
    """
    for h in logging.root.handlers[:]:
        logging.root.removeHandler(h)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if enable_file and not os.getenv("DISABLE_FILE_LOGS"):
        log_file = Settings().log_file
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.insert(0, logging.FileHandler(log_file, mode="a"))
        except OSError as exc:
            logging.getLogger(__name__).debug(f"File logging unavailable: {exc}")
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def _split_list(value: str | None) -> list[str] | None:
    return split_methods(value) if value is not None else None


def _picker(args: argparse.Namespace) -> PathPicker | None:
    return QuestionaryPathPicker() if args.interactive else None


def cmd_set_root(args: argparse.Namespace) -> int:
    root = BoxRootStore().set_root(args.path, picker=_picker(args))
    ui_success(f"Box root set to: {root}")
    return 0


def cmd_get_root(args: argparse.Namespace) -> int:
    root = BoxRootStore().get_root(error_if_missing=True, picker=_picker(args))
    rprint(str(root), markup=False)
    return 0


def cmd_create(args: argparse.Namespace) -> int:
    result = create_project(
        args.project_name,
        args.department,
        args.contact,
        project_dir=args.project_dir,
        term=args.term,
        start_date=args.start_date,
        category=args.category,
        organization=args.organization,
        status=args.status,
        consultants=_split_list(args.consultants),
        notes=args.notes,
        root=args.root,
        picker=_picker(args),
    )
    ui_success(f"Project created: {result['id']}")
    rprint(f"Registry file: {result['registry_file']}", markup=False)
    return 0


def cmd_update(args: argparse.Namespace) -> int:
    fields: dict[str, Any] = {
        "term": args.term,
        "start_date": args.start_date,
        "category": args.category,
        "project_name": args.project_name,
        "contact": args.contact,
        "department": args.department,
        "organization": args.organization,
        "status": args.status,
        "consultants": _split_list(args.consultants),
        "topics": _split_list(args.topics),
        "methods": _split_list(args.methods),
        "keywords": _split_list(args.keywords),
        "abstract": args.abstract,
        "project_path": args.project_path,
        "notes": args.notes,
    }
    result = update_project(
        args.project_id,
        append=args.append,
        overwrite=args.overwrite,
        choose_path=args.choose_path,
        root=args.root,
        picker=_picker(args),
        **fields,
    )
    ui_success(
        f"Project updated: {result['id']} ({', '.join(result['updated_fields'])})"
    )
    return 0


def cmd_complete(args: argparse.Namespace) -> int:
    result = complete_project(
        args.project_id,
        end_date=args.end_date,
        methods=_split_list(args.methods),
        overwrite=args.overwrite,
        root=args.root,
        picker=_picker(args),
    )
    ui_success(f"Project completed: {result['id']} on {result['end_date']}")
    return 0


def cmd_build_registry(args: argparse.Namespace) -> int:
    frame = build_registry(overwrite=args.overwrite, root=args.root)
    rprint(render_registry_summary(frame))
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    record = get_project(args.project_id, root=args.root)
    rprint(render_record_table(record.to_dict()))
    return 0


def cmd_report(args: argparse.Namespace) -> int:
    settings = Settings()
    path = create_report(
        args.file_name,
        title=args.title,
        client=args.client,
        authors=args.authors,
        email=args.email or settings.contact_email,
        phone=args.phone or settings.contact_phone,
        keywords=_split_list(args.keywords),
        output_dir=args.output_dir,
        overwrite=args.overwrite,
    )
    ui_success(f"Created report: {path}")
    return 0


def cmd_presentation(args: argparse.Namespace) -> int:
    path = create_presentation(
        args.file_name,
        title=args.title,
        authors=args.authors,
        subtitle=args.subtitle,
        output_dir=args.output_dir,
        overwrite=args.overwrite,
    )
    ui_success(f"Created presentation: {path}")
    return 0


def _add_root_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root", default=None, help="Storage root (default: configured Box root)"
    )


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="busccpy",
        description="Statistical consulting project registry and document templates.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level", default=None, help="Logging level (default: BUSCCPY_LOG_LEVEL or INFO)"
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Prompt for missing paths, records and methods",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("set-root", help="Save the Box storage root")
    p.add_argument("path", nargs="?", default=None)
    p.set_defaults(func=cmd_set_root)

    p = sub.add_parser("get-root", help="Print the configured Box storage root")
    p.set_defaults(func=cmd_get_root)

    p = sub.add_parser("create", help="Create a project record")
    p.add_argument("project_name")
    p.add_argument("--department", required=True)
    p.add_argument("--contact", required=True)
    p.add_argument("--project-dir", default=None)
    p.add_argument("--term", default=None)
    p.add_argument("--start-date", default=None)
    p.add_argument("--category", default=None)
    p.add_argument("--organization", default=None)
    p.add_argument("--status", default="intake")
    p.add_argument("--consultants", default=None, help="Comma separated")
    p.add_argument("--notes", default=None)
    _add_root_option(p)
    p.set_defaults(func=cmd_create)

    p = sub.add_parser("update", help="Update fields of a project record")
    p.add_argument("project_id", nargs="?", default=None)
    for name in (
        "term",
        "start-date",
        "category",
        "project-name",
        "contact",
        "department",
        "organization",
        "status",
        "abstract",
        "project-path",
        "notes",
    ):
        p.add_argument(f"--{name}", default=None)
    for name in ("consultants", "topics", "methods", "keywords"):
        p.add_argument(f"--{name}", default=None, help="Comma separated")
    p.add_argument("--append", action="store_true", help="Union list fields")
    p.add_argument("--choose-path", action="store_true")
    p.add_argument("--overwrite", action="store_true")
    _add_root_option(p)
    p.set_defaults(func=cmd_update)

    p = sub.add_parser("complete", help="Mark a project complete")
    p.add_argument("project_id", nargs="?", default=None)
    p.add_argument("--end-date", default=None)
    p.add_argument("--methods", default=None, help="Comma separated")
    p.add_argument("--overwrite", action="store_true")
    _add_root_option(p)
    p.set_defaults(func=cmd_complete)

    p = sub.add_parser("build-registry", help="Compile project_registry.csv")
    p.add_argument("--overwrite", action="store_true")
    _add_root_option(p)
    p.set_defaults(func=cmd_build_registry)

    p = sub.add_parser("show", help="Display one project record")
    p.add_argument("project_id")
    _add_root_option(p)
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("report", help="Create a Quarto report skeleton")
    p.add_argument("file_name")
    p.add_argument("--title", required=True)
    p.add_argument("--client", required=True)
    p.add_argument("--authors", nargs="+", required=True)
    p.add_argument("--email", default=None)
    p.add_argument("--phone", default=None)
    p.add_argument("--keywords", default=None, help="Comma separated")
    p.add_argument("--output-dir", default=None)
    p.add_argument("--overwrite", action="store_true")
    p.set_defaults(func=cmd_report)

    p = sub.add_parser("presentation", help="Create a Quarto presentation skeleton")
    p.add_argument("file_name")
    p.add_argument("--title", required=True)
    p.add_argument("--authors", nargs="+", required=True)
    p.add_argument("--subtitle", default="")
    p.add_argument("--output-dir", default=None)
    p.add_argument("--overwrite", action="store_true")
    p.set_defaults(func=cmd_presentation)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    r"""Run the command line and return its exit code.

    Parameters
    ----------
    argv : Sequence[str] | None, optional
        Arguments without the program name; ``None`` reads ``sys.argv``.

    Returns
    -------
    int
        ``0`` on success, ``1`` when an ``AppError`` aborted the command.
        argparse exits with ``2`` on usage errors.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level or Settings().log_level)
    func: Callable[[argparse.Namespace], int] = args.func
    try:
        return func(args)
    except AppError as exc:
        logger.error(str(exc))
        ui_error(str(exc))
        if exc.context:
            details = "\n".join(f"{k}: {v}" for k, v in exc.context.items())
            rprint(Panel(Text(details), title=exc.code, border_style="red"))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
