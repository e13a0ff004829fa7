"""Project registry package.

Exposes the public registry operations (create, update, complete, compile)
and the building blocks they are made of: the identifier builder, the record
store with its optimistic concurrency guard, and the restricted-extraction
CSV compiler.

A consumer should import from this package rather than from submodules.

Examples
--------
>>> from busccpy.registry import RecordStore, RegistryCompiler
>>> store = RecordStore("/path/to/Box/SCC")  # doctest: +SKIP
>>> RegistryCompiler(store.root).compile(overwrite=True)  # doctest: +SKIP
"""

from .api import (
    build_registry,
    complete_project,
    create_project,
    get_project,
    list_projects,
    update_project,
)
from .compiler import RegistryCompiler, flatten_values
from .identifiers import build_project_id, infer_term, slugify
from .record_store import RecordStore
from .records import ProjectRecord, normalize_terms

__all__ = [
    "ProjectRecord",
    "RecordStore",
    "RegistryCompiler",
    "build_project_id",
    "build_registry",
    "complete_project",
    "create_project",
    "flatten_values",
    "get_project",
    "infer_term",
    "list_projects",
    "normalize_terms",
    "slugify",
    "update_project",
]
