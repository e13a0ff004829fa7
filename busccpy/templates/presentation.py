"""Generate a RevealJS Quarto presentation skeleton with the center's theme."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable

from busccpy.config import (
    CENTER_NAME,
    PRESENTATION_ASSETS_DIRNAME,
    PRESENTATION_LOGO_SOURCE,
    PRESENTATION_LOGO_TARGET,
    PRESENTATION_MACROS_FILENAME,
    PRESENTATION_TEMPLATE_FILE,
    PRESENTATION_THEME_FILENAME,
    TEMPLATES_DIR,
)

from .templating import load_template, render_template
from .utils import ensure_qmd_name, prepare_output, yaml_string_list

logger = logging.getLogger(__name__)

# (packaged source name, name inside the assets folder)
PRESENTATION_ASSETS: tuple[tuple[str, str], ...] = (
    (PRESENTATION_THEME_FILENAME, PRESENTATION_THEME_FILENAME),
    (PRESENTATION_MACROS_FILENAME, PRESENTATION_MACROS_FILENAME),
    (PRESENTATION_LOGO_SOURCE, PRESENTATION_LOGO_TARGET),
)


def copy_presentation_assets(assets_dir: Path, overwrite: bool = False) -> list[Path]:
    r"""Copy the theme, macros and logo into ``assets_dir``.

    Existing files are kept unless ``overwrite`` is True. A packaged asset
    that cannot be found is logged as a warning and skipped.

    Returns
    -------
    list[Path]
        The asset files present in ``assets_dir`` after copying.
    """
    assets_dir.mkdir(parents=True, exist_ok=True)
    present: list[Path] = []
    for source_name, target_name in PRESENTATION_ASSETS:
        source = TEMPLATES_DIR / source_name
        target = assets_dir / target_name
        if target.exists() and not overwrite:
            present.append(target)
            continue
        if not source.exists():
            logger.warning(
                f"Presentation asset not found in package: {source_name}; "
                f"add {target} before rendering."
            )
            continue
        shutil.copyfile(source, target)
        present.append(target)
    return present


def create_presentation(
    file_name: str | Path,
    title: str,
    authors: Iterable[str] | str,
    subtitle: str = "",
    output_dir: Path | str | None = None,
    overwrite: bool = False,
) -> Path:
    r"""Create a new RevealJS presentation ``.qmd`` file.

    Parameters
    ----------
    file_name : str | Path
        Name of the file to create; ``.qmd`` is appended when missing.
    title : str
        Presentation title.
    authors : Iterable[str] | str
        Author names.
    subtitle : str, optional
        Presentation subtitle.
    output_dir : Path | str | None, optional
        Directory for the presentation and its ``quarto-assets/`` folder;
        default the current working directory.
    overwrite : bool, optional
        Replace an existing presentation file and its copied assets.

    Returns
    -------
    Path
        The created presentation file.

    Raises
    ------
    AlreadyExistsError
        If the file exists and ``overwrite`` is False.
    """
    target = prepare_output(ensure_qmd_name(file_name), output_dir, overwrite)
    author_list = [authors] if isinstance(authors, str) else list(authors)

    copy_presentation_assets(target.parent / PRESENTATION_ASSETS_DIRNAME, overwrite)

    context = {
        "assets_dir": PRESENTATION_ASSETS_DIRNAME,
        "theme_file": PRESENTATION_THEME_FILENAME,
        "macros_file": PRESENTATION_MACROS_FILENAME,
        "logo_file": PRESENTATION_LOGO_TARGET,
        "center_name": CENTER_NAME,
        "title": title,
        "subtitle": subtitle,
        "authors_yaml": yaml_string_list(author_list),
    }
    content = render_template(load_template(PRESENTATION_TEMPLATE_FILE), context)
    target.write_text(content, encoding="utf-8")
    logger.info(f"Created presentation: {target}")
    return target


__all__ = ["copy_presentation_assets", "create_presentation"]
