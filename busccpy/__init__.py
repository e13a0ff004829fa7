"""Statistical consulting workflow package.

Tools for a university statistical consulting center: a per-user storage
root ("Box root") configuration, a project registry kept as one JSON file
per project with a compiled CSV snapshot, and Quarto report and
presentation generators.

Package Structure
-----------------
- `storage/`: Box root configuration store and filesystem helpers.
- `registry/`: Identifier builder, record store, CSV compiler and the public
  registry operations.
- `templates/`: Quarto report and presentation generators.
- `ui/`: Rich console output and interactive path pickers.
- `config.py`: Configuration constants, as UPPER_SNAKE_CASE.
- `settings.py`: Environment-backed runtime settings.
- `exceptions.py`: Application exception hierarchy.
- `cli.py`: The ``busccpy`` command line.

Examples
--------
>>> from busccpy import create_project, build_registry
>>> create_project("Retention study", "Student Success", "jdoe@baylor.edu",
...                project_dir="Projects/retention")  # doctest: +SKIP
>>> build_registry(overwrite=True)  # doctest: +SKIP
"""

__version__ = "0.1.0"

from busccpy.registry import (  # noqa: E402
    build_registry,
    complete_project,
    create_project,
    get_project,
    list_projects,
    update_project,
)
from busccpy.templates import create_presentation, create_report  # noqa: E402

__all__ = [
    "__version__",
    "build_registry",
    "complete_project",
    "create_presentation",
    "create_project",
    "create_report",
    "get_project",
    "list_projects",
    "update_project",
]
