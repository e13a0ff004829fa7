"""Generate a standardized Quarto PDF report skeleton.

The report uses the consulting center's title page (KOMA ``scrreprt`` class,
framed title block, contact details and stacked logo) followed by an empty
Introduction / Methods / Results / Conclusion / References / Appendix
outline.
"""

from __future__ import annotations

import logging
import shutil
from datetime import date
from pathlib import Path
from typing import Iterable

from busccpy.config import (
    CENTER_URL,
    DEFAULT_CONTACT_EMAIL,
    DEFAULT_CONTACT_PHONE,
    REPORT_IMAGES_DIRNAME,
    REPORT_LOGO_FILENAME,
    REPORT_TEMPLATE_FILE,
    TEMPLATES_DIR,
)

from .templating import load_template, render_template
from .utils import ensure_qmd_name, prepare_output, yaml_string_list

logger = logging.getLogger(__name__)


def keywords_block(keywords: Iterable[str] | None) -> str:
    """Return the LaTeX keywords line for the title page, or an empty string."""
    values = [k for k in (keywords or []) if str(k).strip()]
    if not values:
        return ""
    return (
        "\\vspace{0.25cm}\n\n"
        f"      {{\\small Keywords: {', '.join(values)}\\par}}\n"
    )


def escape_latex_underscores(text: str) -> str:
    """Escape underscores for LaTeX (``jane_doe`` becomes ``jane\\_doe``)."""
    return text.replace("_", "\\_")


def build_report_context(
    title: str,
    client: str,
    authors: list[str],
    email: str,
    phone: str,
    keywords: Iterable[str] | None,
    today: date,
) -> dict[str, str]:
    """Assemble the placeholder values for the report template."""
    return {
        "title": title,
        "title_upper": title.upper(),
        "client": client,
        "authors_yaml": yaml_string_list(authors),
        "authors_text": ", ".join(authors),
        "date": today.isoformat(),
        "keywords_block": keywords_block(keywords),
        "email": escape_latex_underscores(email),
        "phone": phone,
        "center_url": CENTER_URL,
        "logo_path": f"{REPORT_IMAGES_DIRNAME}/{REPORT_LOGO_FILENAME}",
    }


def create_report(
    file_name: str | Path,
    title: str,
    client: str,
    authors: Iterable[str] | str,
    email: str = DEFAULT_CONTACT_EMAIL,
    phone: str = DEFAULT_CONTACT_PHONE,
    keywords: Iterable[str] | None = None,
    output_dir: Path | str | None = None,
    today: date | None = None,
    overwrite: bool = False,
) -> Path:
    r"""Create a new report ``.qmd`` file with the center's title page.

    Parameters
    ----------
    file_name : str | Path
        Name of the file to create; ``.qmd`` is appended when missing.
    title : str
        Report title (upper-cased on the title page).
    client : str
        Client name.
    authors : Iterable[str] | str
        Author names.
    email, phone : str, optional
        Contact details printed on the title page.
    keywords : Iterable[str] | None, optional
        Keywords listed on the title page when given.
    output_dir : Path | str | None, optional
        Directory for the report and its ``images/`` folder; default the
        current working directory.
    today : date | None, optional
        Date written into the YAML ``params``.
    overwrite : bool, optional
        Replace an existing report file.

    Returns
    -------
    Path
        The created report file.

    Raises
    ------
    AlreadyExistsError
        If the file exists and ``overwrite`` is False.
    """
    target = prepare_output(ensure_qmd_name(file_name), output_dir, overwrite)
    author_list = [authors] if isinstance(authors, str) else list(authors)

    images_dir = target.parent / REPORT_IMAGES_DIRNAME
    images_dir.mkdir(exist_ok=True)
    logo_source = TEMPLATES_DIR / REPORT_LOGO_FILENAME
    logo_target = images_dir / REPORT_LOGO_FILENAME
    if not logo_source.exists():
        logger.warning(
            f"Logo not found in package ({REPORT_LOGO_FILENAME}); "
            f"place it at {logo_target} before rendering."
        )
    elif not logo_target.exists():
        shutil.copyfile(logo_source, logo_target)

    context = build_report_context(
        title,
        client,
        author_list,
        email,
        phone,
        keywords,
        today or date.today(),
    )
    content = render_template(load_template(REPORT_TEMPLATE_FILE), context)
    target.write_text(content, encoding="utf-8")
    logger.info(f"Created report: {target}")
    return target


__all__ = ["build_report_context", "create_report", "escape_latex_underscores"]
