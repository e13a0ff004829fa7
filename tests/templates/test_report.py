"""Tests for the Quarto report generator."""

import logging
from datetime import date

import pytest

from busccpy.exceptions import AlreadyExistsError
from busccpy.templates.report import create_report, escape_latex_underscores


def test_create_report_renders_metadata(tmp_path):
    """Test the report file contains the supplied metadata."""
    path = create_report(
        "final_report",
        title="Retention Study",
        client="Student Success",
        authors=["Ann Lee", "Bo Park"],
        email="jane_doe@baylor.edu",
        phone="(254) 555-0100",
        keywords=["survey", "retention"],
        output_dir=tmp_path,
        today=date(2026, 10, 19),
    )
    assert path == tmp_path / "final_report.qmd"
    content = path.read_text(encoding="utf-8")
    assert 'title: "Retention Study"' in content
    assert 'authors: ["Ann Lee", "Bo Park"]' in content
    assert 'date: "2026-10-19"' in content
    assert "RETENTION STUDY" in content
    assert "Authors: Ann Lee, Bo Park" in content
    assert "Keywords: survey, retention" in content
    assert r"jane\_doe@baylor.edu" in content
    assert "{{" not in content.replace("{{<", "")
    assert (tmp_path / "images").is_dir()


def test_create_report_without_keywords(tmp_path):
    """Test the keywords line is omitted when none are given."""
    path = create_report(
        "r.qmd", title="T", client="C", authors="Ann", output_dir=tmp_path
    )
    content = path.read_text(encoding="utf-8")
    assert "Keywords:" not in content
    assert 'authors: ["Ann"]' in content


def test_create_report_warns_for_missing_logo(tmp_path, caplog):
    """Test a missing packaged logo is reported, not fatal."""
    with caplog.at_level(logging.WARNING):
        create_report("r", title="T", client="C", authors=["A"], output_dir=tmp_path)
    assert "Logo not found" in caplog.text


def test_create_report_refuses_overwrite(tmp_path):
    """Test existing reports are protected."""
    create_report("r", title="T", client="C", authors=["A"], output_dir=tmp_path)
    with pytest.raises(AlreadyExistsError):
        create_report("r", title="T2", client="C", authors=["A"], output_dir=tmp_path)
    path = create_report(
        "r", title="T2", client="C", authors=["A"], output_dir=tmp_path, overwrite=True
    )
    assert 'title: "T2"' in path.read_text(encoding="utf-8")


def test_create_report_defaults_to_cwd(isolated_config_dir, tmp_path):
    """Test the working directory is the default output folder."""
    path = create_report("r", title="T", client="C", authors=["A"])
    assert path == tmp_path / "work" / "r.qmd"


def test_escape_latex_underscores():
    """Test underscore escaping."""
    assert escape_latex_underscores("a_b_c") == r"a\_b\_c"
