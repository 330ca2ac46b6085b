"""
Tests for launch file patching.
"""

import os
import stat
from unittest.mock import patch

import pytest

from serverpack_updater.errors import PatchTargetError
from serverpack_updater.models import Candidate
from serverpack_updater.patcher import patch_launch_file, render


@pytest.fixture
def candidate():
    return Candidate(id=101, fileName="ServerFiles-0.10.0-beta.zip", serverVersion="0.10.0-beta")


class TestRender:

    def test_replaces_both_lines(self, candidate):
        text = 'A=1\nSERVER_VERSION="0.9.0"\nSERVER_FILE_ID=50\nB=2\n'
        out = render(text, candidate)
        assert out == 'A=1\nSERVER_VERSION="0.10.0-beta"\nSERVER_FILE_ID=101\nB=2\n'

    def test_only_first_occurrence(self, candidate):
        text = 'SERVER_VERSION="1"\nSERVER_FILE_ID=1\nSERVER_VERSION="2"\n'
        out = render(text, candidate)
        assert out.splitlines() == ['SERVER_VERSION="0.10.0-beta"', "SERVER_FILE_ID=101", 'SERVER_VERSION="2"']

    def test_indented_or_exported_lines_are_not_matched(self, candidate):
        text = '  SERVER_VERSION="1"\nexport SERVER_FILE_ID=1\n'
        with pytest.raises(PatchTargetError):
            render(text, candidate)

    def test_strict_requires_quoted_version(self, candidate):
        text = "SERVER_VERSION=0.9.0\nSERVER_FILE_ID=50\n"
        with pytest.raises(PatchTargetError, match="SERVER_VERSION"):
            render(text, candidate, strict=True)

    def test_strict_requires_numeric_file_id(self, candidate):
        text = 'SERVER_VERSION="0.9.0"\nSERVER_FILE_ID=${FILE_ID}\n'
        with pytest.raises(PatchTargetError, match="SERVER_FILE_ID"):
            render(text, candidate, strict=True)

    def test_loose_accepts_any_value(self, candidate):
        text = "SERVER_VERSION=0.9.0\nSERVER_FILE_ID=${FILE_ID}\n"
        out = render(text, candidate, strict=False)
        assert out == 'SERVER_VERSION="0.10.0-beta"\nSERVER_FILE_ID=101\n'

    def test_reports_first_missing_pattern(self, candidate):
        with pytest.raises(PatchTargetError) as exc:
            render("nothing here\n", candidate)
        assert "SERVER_VERSION" in exc.value.pattern

    def test_version_is_inserted_literally(self):
        odd = Candidate(id=1, fileName="x", serverVersion=r"1.0\1")
        out = render('SERVER_VERSION="0"\nSERVER_FILE_ID=0\n', odd)
        assert 'SERVER_VERSION="1.0\\1"' in out

    def test_crlf_line_endings_preserved(self, candidate):
        text = 'SERVER_VERSION="0.9.0"\r\nSERVER_FILE_ID=50\r\n'
        out = render(text, candidate)
        assert out == 'SERVER_VERSION="0.10.0-beta"\r\nSERVER_FILE_ID=101\r\n'


class TestPatchLaunchFile:

    def test_writes_new_values(self, launch_file, candidate):
        result = patch_launch_file(launch_file, candidate)
        content = launch_file.read_text(encoding="utf-8")
        assert 'SERVER_VERSION="0.10.0-beta"' in content
        assert "SERVER_FILE_ID=101" in content
        assert result.changed and result.written

    def test_idempotent(self, launch_file, candidate, caplog):
        patch_launch_file(launch_file, candidate)
        after_first = launch_file.read_bytes()

        with caplog.at_level("INFO"):
            result = patch_launch_file(launch_file, candidate)

        assert not result.changed
        assert not result.written
        assert launch_file.read_bytes() == after_first
        assert "No changes needed." in caplog.text

    def test_missing_file_id_leaves_file_untouched(self, tmp_path, candidate):
        path = tmp_path / "launch.sh"
        path.write_text('#!/bin/sh\nSERVER_VERSION="0.9.0"\n', encoding="utf-8")
        before = path.read_bytes()

        with pytest.raises(PatchTargetError, match="SERVER_FILE_ID"):
            patch_launch_file(path, candidate)

        assert path.read_bytes() == before
        assert not (tmp_path / "launch.sh.tmp").exists()

    def test_dry_run_does_not_write(self, launch_file, candidate):
        before = launch_file.read_bytes()
        result = patch_launch_file(launch_file, candidate, dry_run=True)
        assert result.changed
        assert not result.written
        assert launch_file.read_bytes() == before

    def test_no_temp_file_left_behind(self, launch_file, candidate):
        patch_launch_file(launch_file, candidate)
        assert [p.name for p in launch_file.parent.iterdir()] == ["launch.sh"]

    def test_keeps_executable_bit(self, launch_file, candidate):
        os.chmod(launch_file, 0o755)
        patch_launch_file(launch_file, candidate)
        assert stat.S_IMODE(launch_file.stat().st_mode) == 0o755

    def test_failed_write_removes_temp_file(self, launch_file, candidate):
        before = launch_file.read_bytes()
        with patch("serverpack_updater.patcher.shutil.copymode", side_effect=PermissionError("denied")):
            with pytest.raises(PermissionError):
                patch_launch_file(launch_file, candidate)
        assert launch_file.read_bytes() == before
        assert [p.name for p in launch_file.parent.iterdir()] == ["launch.sh"]

    def test_missing_launch_file(self, tmp_path, candidate):
        with pytest.raises(FileNotFoundError):
            patch_launch_file(tmp_path / "missing.sh", candidate)
