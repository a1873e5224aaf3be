"""Filesystem access used by the probes and the SDK resolver."""

from .lib import COCOAPODS_FIXTURE_ARCHIVE, FileSystem, RESOURCES_DIR

__all__ = ["FileSystem", "RESOURCES_DIR", "COCOAPODS_FIXTURE_ARCHIVE"]
