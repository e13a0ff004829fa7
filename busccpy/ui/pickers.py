"""Interactive path and methods selection behind a single capability.

The registry core never prompts: it only consumes resolved paths. Callers
that want interactive behaviour pass a ``PathPicker`` to the functional API
or the configuration store, which is the only place it is consulted.

Two implementations are provided:

- ``QuestionaryPathPicker`` asks in the terminal through questionary.
- ``StaticPathPicker`` returns preset answers for scripted use and tests.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

import questionary

from busccpy.exceptions import UserInputError

logger = logging.getLogger(__name__)


@runtime_checkable
class PathPicker(Protocol):
    """Capability for choosing folders, files and methods interactively."""

    def choose_directory(self, message: str, start: Path | None = None) -> Path:
        """Return an existing directory chosen by the user."""
        ...

    def choose_file(self, message: str, start: Path | None = None) -> Path:
        """Return an existing file chosen by the user."""
        ...

    def ask_methods(self, message: str) -> list[str]:
        """Return statistical methods entered by the user."""
        ...


def split_methods(answer: str) -> list[str]:
    """Split a comma or semicolon separated answer into trimmed values.

    Examples
    --------
    >>> split_methods("ANOVA; mixed models, , t-test")
    ['ANOVA', 'mixed models', 't-test']
    """
    parts = answer.replace(";", ",").split(",")
    return [part.strip() for part in parts if part.strip()]


class QuestionaryPathPicker:
    r"""Terminal picker built on questionary prompts.

    Every prompt is a single question. A cancelled prompt (Ctrl-C returns
    ``None`` from ``ask()``) or a blank answer raises ``UserInputError`` so
    the calling operation aborts before anything is written.
    """

    def choose_directory(self, message: str, start: Path | None = None) -> Path:
        answer = questionary.path(
            message,
            default=_default_for(start),
            only_directories=True,
        ).ask()
        path = _require_answer(answer, "No directory selected.")
        if not path.is_dir():
            raise UserInputError(
                f"Selected path is not a directory: {path}",
                context={"path": str(path)},
            )
        return path

    def choose_file(self, message: str, start: Path | None = None) -> Path:
        if start is not None and Path(start).is_dir():
            choices = sorted(p.name for p in Path(start).iterdir() if p.is_file())
            if choices:
                answer = questionary.select(message, choices=choices).ask()
                if answer is None:
                    raise UserInputError("No file selected.")
                return Path(start) / answer
        answer = questionary.path(message, default=_default_for(start)).ask()
        path = _require_answer(answer, "No file selected.")
        if not path.is_file():
            raise UserInputError(
                f"Selected path is not a file: {path}", context={"path": str(path)}
            )
        return path

    def ask_methods(self, message: str) -> list[str]:
        answer = questionary.text(message).ask()
        if answer is None:
            raise UserInputError("Methods prompt was cancelled.")
        return split_methods(answer)


class StaticPathPicker:
    """Picker that answers every prompt from preset values.

    Parameters
    ----------
    directory : Path | str | None
        Answer for ``choose_directory``.
    file : Path | str | None
        Answer for ``choose_file``.
    methods : list[str] | None
        Answer for ``ask_methods``.
    """

    def __init__(
        self,
        directory: Path | str | None = None,
        file: Path | str | None = None,
        methods: list[str] | None = None,
    ) -> None:
        self.directory = Path(directory) if directory is not None else None
        self.file = Path(file) if file is not None else None
        self.methods = list(methods) if methods is not None else None
        self.asked: list[str] = []

    def choose_directory(self, message: str, start: Path | None = None) -> Path:
        self.asked.append(message)
        if self.directory is None:
            raise UserInputError("No directory selected.")
        return self.directory

    def choose_file(self, message: str, start: Path | None = None) -> Path:
        self.asked.append(message)
        if self.file is None:
            raise UserInputError("No file selected.")
        if start is not None and not self.file.is_absolute():
            return Path(start) / self.file
        return self.file

    def ask_methods(self, message: str) -> list[str]:
        self.asked.append(message)
        return list(self.methods or [])


def _default_for(start: Path | None) -> str:
    if start is None:
        return ""
    text = str(start)
    return text if text.endswith(("/", "\\")) else text + "/"


def _require_answer(answer: str | None, message: str) -> Path:
    if answer is None or not answer.strip():
        raise UserInputError(message)
    return Path(answer.strip()).expanduser()


__all__ = [
    "PathPicker",
    "QuestionaryPathPicker",
    "StaticPathPicker",
    "split_methods",
]
