"""Terminal interface layer: Rich output and interactive pickers.

Nothing in the registry core imports from here except the ``PathPicker``
protocol, which is only used for type checking.
"""

from .console import (
    console,
    render_record_table,
    render_registry_summary,
    rprint,
    ui_error,
    ui_success,
    ui_warning,
)
from .pickers import PathPicker, QuestionaryPathPicker, StaticPathPicker, split_methods

__all__ = [
    "PathPicker",
    "QuestionaryPathPicker",
    "StaticPathPicker",
    "console",
    "render_record_table",
    "render_registry_summary",
    "rprint",
    "split_methods",
    "ui_error",
    "ui_success",
    "ui_warning",
]
