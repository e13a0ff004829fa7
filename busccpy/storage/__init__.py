"""Storage-root configuration and filesystem helpers."""

from .box_root import BoxRootStore
from .fs_utils import atomic_write_text, resolve_inside_root, to_root_relative

__all__ = [
    "BoxRootStore",
    "atomic_write_text",
    "resolve_inside_root",
    "to_root_relative",
]
