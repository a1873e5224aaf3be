"""Filesystem accessor.

A thin seam over os/zipfile so probes can be exercised against an
in-memory tree in tests.
"""

from __future__ import annotations

import asyncio
import logging
import os
import zipfile
from pathlib import Path

logger = logging.getLogger(__name__)

RESOURCES_DIR = Path(__file__).resolve().parent.parent / "resources"

# Sample Xcode project with a Podfile, used to smoke-test `pod install`
COCOAPODS_FIXTURE_ARCHIVE = RESOURCES_DIR / "cocoapods-verification" / "cocoapods.zip"


class FileSystem:
    """Read-only view of the host filesystem plus archive extraction."""

    def exists(self, path: str | os.PathLike | None) -> bool:
        """True if ``path`` exists. An unset path never exists."""
        if not path:
            return False
        return os.path.exists(path)

    def list_directory(self, path: str | os.PathLike) -> list[str]:
        """Entry names of ``path`` in sorted order.

        Raises:
            OSError: If the directory cannot be read.
        """
        return sorted(os.listdir(path))

    async def extract_archive(
        self, archive_path: str | os.PathLike, dest_dir: str | os.PathLike
    ) -> None:
        """Extract a zip archive into ``dest_dir`` off the event loop.

        Raises:
            OSError: If the archive cannot be read or written out.
            zipfile.BadZipFile: If the archive is corrupt.
        """
        await asyncio.to_thread(self._extract_zip, Path(archive_path), Path(dest_dir))

    @staticmethod
    def _extract_zip(archive_path: Path, dest_dir: Path) -> None:
        logger.debug(f"Extracting {archive_path.name} to {dest_dir}")
        dest_dir.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive_path, "r") as zf:
            zf.extractall(path=dest_dir)
