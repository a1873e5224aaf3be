"""Tests for the filesystem accessor."""

import zipfile

import pytest

from .lib import COCOAPODS_FIXTURE_ARCHIVE, FileSystem


@pytest.mark.integration
class TestFileSystem:
    """Tests against a temporary directory."""

    def test_exists(self, tmp_path):
        fs = FileSystem()
        assert fs.exists(tmp_path) is True
        assert fs.exists(tmp_path / "missing") is False

    def test_unset_path_does_not_exist(self):
        fs = FileSystem()
        assert fs.exists(None) is False
        assert fs.exists("") is False

    def test_list_directory_is_sorted(self, tmp_path):
        for name in ("b", "a", "c"):
            (tmp_path / name).mkdir()
        assert FileSystem().list_directory(tmp_path) == ["a", "b", "c"]

    def test_list_missing_directory_raises(self, tmp_path):
        with pytest.raises(OSError):
            FileSystem().list_directory(tmp_path / "missing")

    @pytest.mark.asyncio
    async def test_extract_archive(self, tmp_path):
        archive = tmp_path / "sample.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("project/Podfile", "platform :ios, '9.0'\n")

        dest = tmp_path / "out"
        await FileSystem().extract_archive(archive, dest)
        assert (dest / "project" / "Podfile").read_text().startswith("platform")


@pytest.mark.unit
def test_fixture_archive_is_bundled():
    """The CocoaPods verification project ships with the package."""
    assert COCOAPODS_FIXTURE_ARCHIVE.exists()
    with zipfile.ZipFile(COCOAPODS_FIXTURE_ARCHIVE) as zf:
        names = zf.namelist()
    assert "cocoapods/Podfile" in names
    assert "cocoapods/cocoapods.xcodeproj/project.pbxproj" in names
