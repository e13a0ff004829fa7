"""Tests for the registry CSV compiler."""

import json

import pandas as pd
import pytest

from busccpy.config import RECORD_FIELDS
from busccpy.exceptions import AlreadyExistsError, EmptyRegistryError
from busccpy.registry.compiler import RegistryCompiler, flatten_values


def _write_record(root, name, data):
    registry = root / "project_registry"
    registry.mkdir(parents=True, exist_ok=True)
    path = registry / f"{name}.json"
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def _read_csv(path):
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def test_flatten_values():
    """Test flattening of multi-valued fields."""
    assert flatten_values([]) == ""
    assert flatten_values(["z"]) == "z"
    assert flatten_values(["x", "x", "y"]) == "x; y"


def test_compile_flattens_and_unions(box_root):
    """Test values flatten per record and missing columns are blank."""
    _write_record(box_root, "a", {"id": "a", "keywords": ["x", "x", "y"]})
    _write_record(box_root, "b", {"id": "b", "keywords": "z", "budget": "100"})
    _write_record(box_root, "c", {"id": "c"})

    frame = RegistryCompiler(box_root).compile()

    assert list(frame["keywords"]) == ["x; y", "z", ""]
    assert list(frame.columns) == RECORD_FIELDS + ["budget"]
    assert list(frame["budget"]) == ["", "100", ""]

    written = _read_csv(box_root / "project_registry.csv")
    assert list(written.columns) == list(frame.columns)
    assert list(written["keywords"]) == ["x; y", "z", ""]
    assert list(written["id"]) == ["a", "b", "c"]


def test_compile_id_falls_back_to_file_stem(box_root):
    """Test records without an id use the file name."""
    _write_record(box_root, "2026fa_math_ann", {"project_name": "P"})
    frame = RegistryCompiler(box_root).compile()
    assert frame.loc[0, "id"] == "2026fa_math_ann"


def test_compile_unsupported_values_are_blank(box_root):
    """Test numbers and objects compile to blank cells."""
    _write_record(box_root, "a", {"id": "a", "notes": 5, "abstract": {"x": "y"}})
    frame = RegistryCompiler(box_root).compile()
    assert frame.loc[0, "notes"] == ""
    assert frame.loc[0, "abstract"] == ""


def test_compile_refuses_existing_csv(box_root):
    """Test the CSV is only replaced with overwrite=True."""
    _write_record(box_root, "a", {"id": "a"})
    compiler = RegistryCompiler(box_root)
    compiler.compile()
    with pytest.raises(AlreadyExistsError):
        compiler.compile()
    _write_record(box_root, "b", {"id": "b"})
    frame = compiler.compile(overwrite=True)
    assert len(frame) == 2


def test_compile_empty_registry(box_root):
    """Test an empty or missing registry directory."""
    with pytest.raises(EmptyRegistryError):
        RegistryCompiler(box_root).compile()
    (box_root / "project_registry").mkdir()
    with pytest.raises(EmptyRegistryError):
        RegistryCompiler(box_root).compile()
    assert not (box_root / "project_registry.csv").exists()


def test_compile_ignores_subdirectories_and_other_files(box_root):
    """Test only top-level JSON files are compiled."""
    _write_record(box_root, "a", {"id": "a"})
    (box_root / "project_registry" / "archive").mkdir()
    (box_root / "project_registry" / "archive" / "old.json").write_text('{"id": "old"}')
    (box_root / "project_registry" / "readme.txt").write_text("x")
    frame = RegistryCompiler(box_root).compile()
    assert list(frame["id"]) == ["a"]


def test_compile_nested_object_adds_no_columns(box_root):
    """Test keys inside a nested object do not become CSV columns."""
    _write_record(box_root, "a", {"id": "a", "meta": {"owner": "x"}})
    frame = RegistryCompiler(box_root).compile()
    assert "owner" not in frame.columns
    assert "meta" not in frame.columns
    assert list(frame.columns) == RECORD_FIELDS
