"""Global configuration constants for the project.

Defines directory names, file names and defaults used across the registry,
the storage-root configuration and the template generators.
"""

from __future__ import annotations

from pathlib import Path

# Package directories
PACKAGE_ROOT: Path = Path(__file__).resolve().parent
TEMPLATES_DIR: Path = PACKAGE_ROOT / "templates" / "assets"

# Per-user configuration
APP_NAME: str = "busccpy"
CONFIG_DIR_ENV_VAR: str = "BUSCCPY_CONFIG_DIR"
CONFIG_FILENAME: str = "config.json"
DEFAULT_CONFIG_DIR: Path = Path.home() / ".config" / APP_NAME

# Registry layout (relative to the storage root)
REGISTRY_DIRNAME: str = "project_registry"
REGISTRY_CSV_FILENAME: str = "project_registry.csv"
RECORD_SUFFIX: str = ".json"

# Record lifecycle
DEFAULT_STATUS: str = "intake"
COMPLETE_STATUS: str = "complete"

# Field order of a project record; also the preferred CSV column order
RECORD_FIELDS: list[str] = [
    "id",
    "term",
    "start_date",
    "end_date",
    "category",
    "project_name",
    "contact",
    "department",
    "organization",
    "status",
    "consultants",
    "topics",
    "methods",
    "keywords",
    "abstract",
    "project_path",
    "notes",
    "updated_at",
]
SET_FIELDS: tuple[str, ...] = ("topics", "methods", "keywords")
LIST_FIELDS: tuple[str, ...] = ("consultants", *SET_FIELDS)
REQUIRED_FIELDS: tuple[str, ...] = ("project_name", "department", "contact")
PROTECTED_FIELDS: tuple[str, ...] = ("id", "end_date", "updated_at")

# CSV compilation
MULTI_VALUE_SEPARATOR: str = "; "
CSV_ENCODING: str = "utf-8"

# Timestamps
UPDATED_AT_FORMAT: str = "%Y-%m-%dT%H:%M:%SZ"

# Logging
LOG_SUBDIR: str = "logs"
LOG_FILENAME: str = "busccpy.log"
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Template generators
REPORT_TEMPLATE_FILE: Path = TEMPLATES_DIR / "report.qmd"
PRESENTATION_TEMPLATE_FILE: Path = TEMPLATES_DIR / "presentation.qmd"
QMD_SUFFIX: str = ".qmd"
REPORT_IMAGES_DIRNAME: str = "images"
REPORT_LOGO_FILENAME: str = "bscc_logo_stacked.png"
PRESENTATION_ASSETS_DIRNAME: str = "quarto-assets"
PRESENTATION_LOGO_SOURCE: str = "baylor_logo_horizontal.png"
PRESENTATION_LOGO_TARGET: str = "baylor.png"
PRESENTATION_THEME_FILENAME: str = "presentation-theme.scss"
PRESENTATION_MACROS_FILENAME: str = "_macros.tex"
DEFAULT_CONTACT_EMAIL: str = "rodney_strudivant@baylor.edu"
DEFAULT_CONTACT_PHONE: str = "(254) 710-1663"
CENTER_NAME: str = "Baylor Statistics Consulting Center"
CENTER_URL: str = "https://statistics.artsandsciences.baylor.edu/consulting"
