"""Tests for creatif_cli.utils."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from creatif_cli.utils import (
    create_progress,
    format_duration,
    print_summary_table,
    remove_path,
)


pytestmark = pytest.mark.unit


class TestRemovePath:
    def test_removes_tree(self, tmp_path):
        tree = tmp_path / "tree"
        (tree / "sub").mkdir(parents=True)
        (tree / "sub" / "f.txt").write_text("x", encoding="utf-8")
        assert remove_path(tree) is None
        assert not tree.exists()

    def test_removes_file(self, tmp_path):
        target = tmp_path / "f.txt"
        target.write_text("x", encoding="utf-8")
        assert remove_path(target) is None
        assert not target.exists()

    def test_missing_is_success(self, tmp_path):
        assert remove_path(tmp_path / "missing") is None

    def test_reports_os_error(self, tmp_path):
        target = tmp_path / "tree"
        target.mkdir()
        with patch("creatif_cli.utils.shutil.rmtree", side_effect=PermissionError("denied")):
            error = remove_path(target)
        assert error is not None
        assert "denied" in error
        assert str(target) in error


class TestFormatDuration:
    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "0.0s"),
            (3.7, "3.7s"),
            (65.2, "1m 5s"),
            (-1, "0.0s"),
        ],
    )
    def test_format(self, seconds, expected):
        assert format_duration(seconds) == expected


class TestRichHelpers:
    def test_summary_table(self, capsys):
        print_summary_table({"Project": "demo"}, title="Scaffold Summary")
        out = capsys.readouterr().out
        assert "Scaffold Summary" in out
        assert "demo" in out

    def test_progress_is_transient(self):
        progress = create_progress()
        assert progress.live.transient is True
