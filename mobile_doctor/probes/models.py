"""Data records produced by the system probes."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class XcprojInfo:
    """Whether the xcproj bridging tool is needed and present.

    Attributes:
        should_use_xcproj: CocoaPods is older than 1.0.0 while Xcode is 7.3.0
            or newer, so projects touched by CocoaPods must be converted back
            with xcproj.
        xcproj_available: Result of probing xcproj. None when it was not
            probed because it is not needed.
    """

    should_use_xcproj: bool
    xcproj_available: bool | None = None


class EnvironmentSnapshot(BaseModel):
    """Every probe result taken at one point in time.

    Built once per evaluation so all checks read consistent data.
    """

    model_config = ConfigDict(frozen=True)

    # Host
    platform: str = Field(description="Raw interpreter platform identifier")
    shell: str | None = Field(default=None, description="User shell")
    os_name: str | None = Field(default=None, description="Host OS name and version")
    proc_arch: str | None = Field(default=None, description="Machine architecture")

    # JavaScript toolchain
    node_ver: str | None = None
    npm_ver: str | None = None
    node_gyp_ver: str | None = None

    # Compilers and SDKs
    dotnet_ver: str | None = None
    java_ver: str | None = None
    javac_version: str | None = None
    xcode_ver: str | None = None
    xcodeproj_gem_location: str | None = None
    itunes_installed: bool | None = None
    cocoapods_ver: str | None = None
    adb_ver: str | None = None
    android_installed: bool | None = None
    mono_ver: str | None = None
    git_ver: str | None = None
    gradle_ver: str | None = None
    nativescript_cli_version: str | None = None

    # Derived compatibility flags
    is_cocoapods_working_correctly: bool | None = Field(
        default=None,
        description="CocoaPods smoke test; None when Xcode or CocoaPods is missing",
    )
    is_cocoapods_update_required: bool | None = None
