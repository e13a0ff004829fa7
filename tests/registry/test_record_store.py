"""Tests for RecordStore create/update/complete and the concurrency guard."""

import json
import os
from datetime import date

import pytest

from busccpy.exceptions import (
    ConcurrentModificationError,
    DuplicateRecordError,
    InvalidDateError,
    MissingMethodsError,
    NoOpError,
    PathOutsideRootError,
    RecordNotFoundError,
    ValidationError,
)
from busccpy.registry.record_store import RecordStore

TODAY = date(2026, 10, 19)


def _create(store, **kwargs):
    params = {
        "project_name": "Retention study",
        "department": "Student Success",
        "contact": "jdoe@example.edu",
        "consultants": ["ann"],
        "today": TODAY,
    }
    params.update(kwargs)
    return store.create(**params)


def _bump_mtime(path):
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))


def test_create_writes_record(store, box_root):
    """Test create writes one JSON record with defaults."""
    result = _create(store, project_dir=box_root / "Projects" / "retention")
    assert result["id"] == "2026fa_student_success_jdoe_example_edu"
    assert result["project_path"] == "Projects/retention"
    registry_file = result["registry_file"]
    assert registry_file == box_root / "project_registry" / f"{result['id']}.json"

    data = json.loads(registry_file.read_text(encoding="utf-8"))
    assert data["term"] == "2026FA"
    assert data["status"] == "intake"
    assert data["start_date"] == date.today().isoformat()
    assert data["end_date"] is None
    assert data["updated_at"] is None
    assert data["consultants"] == ["ann"]
    assert data["methods"] == []


def test_create_relative_project_dir(store):
    """Test relative project folders are resolved against the root."""
    result = _create(store, project_dir="Projects/retention")
    assert result["project_path"] == "Projects/retention"


def test_create_root_itself_is_dot(store, box_root):
    """Test the root as project folder is stored as '.'."""
    assert _create(store, project_dir=box_root)["project_path"] == "."


def test_create_defaults_consultant_to_current_user(store, monkeypatch):
    """Test consultants default to the OS user."""
    monkeypatch.setattr("getpass.getuser", lambda: "scc_user")
    result = _create(store, consultants=None)
    assert store.read(result["id"]).consultants == ["scc_user"]


def test_create_duplicate(store):
    """Test a second create with the same id is rejected."""
    _create(store)
    with pytest.raises(DuplicateRecordError):
        _create(store, project_name="Another name")


def test_create_path_outside_root(store, tmp_path):
    """Test project folders outside the root are rejected without writing."""
    outside = tmp_path / "elsewhere"
    outside.mkdir()
    with pytest.raises(PathOutsideRootError):
        _create(store, project_dir=outside)
    assert store.list_ids() == []


def test_create_sibling_with_common_prefix_is_outside(store, box_root):
    """Test '/Box/SCC2' is not treated as inside '/Box/SCC'."""
    sibling = box_root.parent / (box_root.name + "2")
    sibling.mkdir()
    with pytest.raises(PathOutsideRootError):
        _create(store, project_dir=sibling)


def test_create_missing_project_dir(store):
    """Test nonexistent project folders are rejected."""
    with pytest.raises(ValidationError):
        _create(store, project_dir="Projects/missing")


@pytest.mark.parametrize("field", ["project_name", "department", "contact"])
def test_create_requires_fields(store, field):
    """Test blank required fields are rejected."""
    with pytest.raises(ValidationError):
        _create(store, **{field: "  "})


def test_create_rejects_complete_status(store):
    """Test a project cannot start complete."""
    with pytest.raises(ValidationError):
        _create(store, status="complete")


def test_create_invalid_start_date(store):
    """Test invalid start dates."""
    with pytest.raises(InvalidDateError):
        _create(store, start_date="2026-13-01")


def test_read_missing(store):
    """Test reading an unknown id."""
    with pytest.raises(RecordNotFoundError):
        store.read("2026fa_nobody_none")


def test_record_path_rejects_traversal(store):
    """Test ids cannot escape the registry directory."""
    with pytest.raises(ValidationError):
        store.record_path("../config")


def test_update_replaces_and_appends(store):
    """Test replace and append modes for multi-valued fields."""
    pid = _create(store)["id"]
    store.update(pid, {"keywords": ["survey", "Survey ", "retention"]})
    assert store.read(pid).keywords == ["survey", "retention"]

    store.update(pid, {"keywords": ["RETENTION", "cohort"]}, append=True)
    assert store.read(pid).keywords == ["survey", "retention", "cohort"]

    store.update(pid, {"keywords": ["only"]})
    assert store.read(pid).keywords == ["only"]


def test_update_sets_updated_at_and_returns_fields(store):
    """Test update bookkeeping."""
    pid = _create(store)["id"]
    result = store.update(pid, {"status": "analysis", "notes": "kickoff done"})
    assert result["updated_fields"] == ["status", "notes"]
    record = store.read(pid)
    assert record.status == "analysis"
    assert record.notes == "kickoff done"
    assert record.updated_at is not None and record.updated_at.endswith("Z")


def test_update_clears_optional_text(store):
    """Test nullable text fields can be cleared."""
    pid = _create(store, notes="first")["id"]
    store.update(pid, {"notes": ""})
    assert store.read(pid).notes is None


def test_update_project_path(store, tmp_path):
    """Test project_path is validated against the root."""
    pid = _create(store)["id"]
    store.update(pid, {"project_path": "Projects/retention"})
    assert store.read(pid).project_path == "Projects/retention"
    with pytest.raises(PathOutsideRootError):
        store.update(pid, {"project_path": tmp_path})


def test_update_noop(store):
    """Test an empty patch is a no-op error."""
    pid = _create(store)["id"]
    with pytest.raises(NoOpError):
        store.update(pid, {})


def test_update_missing_record(store):
    """Test updates to unknown ids."""
    with pytest.raises(RecordNotFoundError):
        store.update("2026fa_x_y", {"notes": "n"})


@pytest.mark.parametrize(
    "patch",
    [
        {"id": "other"},
        {"end_date": "2026-12-01"},
        {"updated_at": "2026-12-01T00:00:00Z"},
        {"budget": "100"},
        {"project_name": "  "},
        {"status": "complete"},
    ],
)
def test_update_rejects_invalid_patches(store, patch):
    """Test protected, unknown and blank required fields are rejected."""
    pid = _create(store)["id"]
    before = store.record_path(pid).read_text(encoding="utf-8")
    with pytest.raises(ValidationError):
        store.update(pid, patch)
    assert store.record_path(pid).read_text(encoding="utf-8") == before


def test_complete_requires_methods(store):
    """Test completion without methods fails and leaves the record unchanged."""
    pid = _create(store)["id"]
    with pytest.raises(MissingMethodsError):
        store.complete(pid)
    assert store.read(pid).status == "intake"


def test_complete_merges_methods(store):
    """Test supplied methods are merged with recorded ones."""
    pid = _create(store)["id"]
    store.update(pid, {"methods": ["ANOVA"]})
    result = store.complete(pid, end_date="2026-12-15", methods=["anova", "t-test"])
    assert result["end_date"] == "2026-12-15"
    assert result["methods"] == ["ANOVA", "t-test"]
    record = store.read(pid)
    assert record.status == "complete"
    assert record.end_date == "2026-12-15"


def test_complete_defaults_end_date_to_today(store):
    """Test end_date default."""
    pid = _create(store)["id"]
    assert store.complete(pid, methods="regression")["end_date"] == date.today().isoformat()


def test_complete_invalid_end_date(store):
    """Test invalid end dates."""
    pid = _create(store)["id"]
    with pytest.raises(InvalidDateError):
        store.complete(pid, end_date="2026-02-30", methods=["ANOVA"])


def test_concurrent_modification_detected(store, monkeypatch):
    """Test a change between read and write aborts the update."""
    pid = _create(store)["id"]
    path = store.record_path(pid)
    original_load = RecordStore._load

    def load_then_touch(self, project_id):
        result = original_load(self, project_id)
        _bump_mtime(path)
        return result

    monkeypatch.setattr(RecordStore, "_load", load_then_touch)
    before = path.read_text(encoding="utf-8")
    with pytest.raises(ConcurrentModificationError):
        store.update(pid, {"notes": "mine"})
    assert path.read_text(encoding="utf-8") == before

    with pytest.raises(ConcurrentModificationError):
        store.complete(pid, methods=["ANOVA"])


def test_concurrent_modification_overwrite(store, monkeypatch):
    """Test overwrite=True writes despite a concurrent change."""
    pid = _create(store)["id"]
    path = store.record_path(pid)
    original_load = RecordStore._load

    def load_then_touch(self, project_id):
        result = original_load(self, project_id)
        _bump_mtime(path)
        return result

    monkeypatch.setattr(RecordStore, "_load", load_then_touch)
    store.update(pid, {"notes": "mine"}, overwrite=True)
    assert json.loads(path.read_text(encoding="utf-8"))["notes"] == "mine"


def test_list_ids(store):
    """Test ids are listed sorted."""
    _create(store, contact="zed")
    _create(store, contact="amy")
    assert store.list_ids() == [
        "2026fa_student_success_amy",
        "2026fa_student_success_zed",
    ]


def test_round_trip_preserves_populated_fields(store):
    """Test a written record reads back field for field."""
    pid = _create(store, category="thesis", organization="Baylor", notes="n")["id"]
    store.update(pid, {"topics": ["retention"], "abstract": "Short abstract."})
    record = store.read(pid)
    again = RecordStore(store.root).read(pid)
    assert again == record
    assert record.id == pid
    assert record.category == "thesis"
    assert record.topics == ["retention"]
    assert record.abstract == "Short abstract."


def _write_raw(store, name, data):
    store.registry_dir.mkdir(parents=True, exist_ok=True)
    path = store.registry_dir / f"{name}.json"
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def test_update_keeps_keys_outside_schema(store):
    """Test an update rewrites the record without dropping extra keys."""
    pid = _create(store)["id"]
    path = store.record_path(pid)
    data = json.loads(path.read_text(encoding="utf-8"))
    data["funding"] = "NSF"
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    store.update(pid, {"notes": "x"})
    store.complete(pid, methods=["ANOVA"])

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["funding"] == "NSF"
    assert data["notes"] == "x"
    assert list(data)[-1] == "funding"


def test_update_writes_the_file_it_read(store):
    """Test a record whose stem differs from its id is updated in place."""
    path = _write_raw(
        store,
        "legacy_file",
        {"id": "2026fa_math_ann", "term": "2026FA", "start_date": "2026-09-01",
         "project_name": "P", "contact": "ann", "department": "Math", "status": "intake"},
    )
    result = store.update("legacy_file", {"notes": "x"})
    assert result["registry_file"] == path
    assert sorted(p.name for p in store.registry_dir.iterdir()) == ["legacy_file.json"]
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["notes"] == "x"
    assert data["id"] == "2026fa_math_ann"


def test_read_record_without_id_uses_file_stem(store):
    """Test the store agrees with the compiler on a missing id."""
    _write_raw(store, "2026fa_math_bo", {"term": "2026FA", "project_name": "P"})
    assert store.read("2026fa_math_bo").id == "2026fa_math_bo"
    store.update("2026fa_math_bo", {"notes": "n"})
    data = json.loads((store.registry_dir / "2026fa_math_bo.json").read_text())
    assert data["id"] == "2026fa_math_bo"
