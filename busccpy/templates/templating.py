"""Templating utilities for document generation.

Loads packaged template files, extracts ``{{name}}`` placeholders and renders
them from a context mapping. Double braces are used because report templates
are LaTeX-heavy and single braces appear everywhere in them; Quarto shortcodes
such as ``{{< include ... >}}`` are left untouched because placeholders only
contain letters, digits and underscores.

Boundaries
----------
- Does not write to disk; only reads template files.
- Deterministic given its inputs.

Examples
--------
>>> render_template("Title: {{title}}", {"title": "Retention"})
'Title: Retention'
>>> extract_placeholders("{{b}} {{a}} {{< include x.tex >}}")
['a', 'b']
"""

import re
from pathlib import Path

_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z0-9_]+)\s*\}\}")


def load_template(path: Path) -> str:
    r"""Read the contents of a template file as a string.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    with path.open("r", encoding="utf-8") as fh:
        return fh.read()


def extract_placeholders(content: str) -> list[str]:
    """Return a sorted list of unique placeholder names found in the template."""
    return sorted(set(_PLACEHOLDER.findall(content)))


def render_template(template_content: str, context: dict[str, str]) -> str:
    """Replace every ``{{name}}`` with ``context[name]``; missing names render empty."""

    def replace_func(match: re.Match[str]) -> str:
        return str(context.get(match.group(1), ""))

    return _PLACEHOLDER.sub(replace_func, template_content)


def load_template_and_placeholders(path: Path) -> tuple[str, list[str]]:
    """Load a template and return its content along with found placeholders.

    Raises
    ------
    ValueError
        If no placeholders are found in the template.
    """
    content = load_template(path)
    placeholders = extract_placeholders(content)
    if not placeholders:
        raise ValueError(f"No placeholders found in the template: {path}")
    return content, placeholders
