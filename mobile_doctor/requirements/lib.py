"""Per-platform checks for whether a local build can run."""

from __future__ import annotations

import logging

from mobile_doctor.android import SdkCapabilityResolver
from mobile_doctor.host import HostInfo
from mobile_doctor.probes import SystemProbe

logger = logging.getLogger(__name__)


class AndroidLocalBuildRequirements:
    """Android builds need a compile target, build tools and support library."""

    def __init__(self, resolver: SdkCapabilityResolver):
        self.resolver = resolver

    async def check_requirements(self) -> bool:
        data = self.resolver.get_sdk_capability_data()
        if not data.is_complete:
            logger.debug(f"Android SDK is incomplete: {data}")
        return data.is_complete


class IosLocalBuildRequirements:
    """iOS builds need a macOS host with Xcode, xcodeproj and CocoaPods.

    CocoaPods must also not need the xcproj shim that is missing.
    """

    def __init__(self, probe: SystemProbe, host: HostInfo):
        self.probe = probe
        self.host = host

    async def check_requirements(self) -> bool:
        if not self.host.is_darwin:
            return False

        xcode_ver = await self.probe.get_xcode_version()
        xcodeproj_location = await self.probe.get_xcodeproj_gem_location()
        cocoapods_ver = await self.probe.get_cocoapods_version()
        if not (xcode_ver and xcodeproj_location and cocoapods_ver):
            logger.debug(
                f"iOS toolchain incomplete: xcode={xcode_ver} "
                f"xcodeproj={xcodeproj_location} cocoapods={cocoapods_ver}"
            )
            return False

        return not await self.probe.is_cocoapods_update_required()
