"""CLI entry point for mobile-doctor.

This module acts as the central entry point for the project's CLI tools.
It delegates commands to the doctor and runs development tasks.
"""

import argparse
import asyncio
import json
import subprocess
import sys

from dotenv import load_dotenv

from mobile_doctor.config import EnvVar, get_environment
from mobile_doctor.core import get_logger, setup_logging
from mobile_doctor.diagnostics import SUPPORTED_PLATFORMS, DoctorWarning, ValidationError, validate_platform
from mobile_doctor.doctor import Doctor, create_doctor
from mobile_doctor.host import HostInfo
from mobile_doctor.probes import EnvironmentSnapshot

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")

NO_CACHE_FLAG = "--no-cache"

SNAPSHOT_LABELS: dict[str, str] = {
    "platform": "Platform",
    "os_name": "OS",
    "proc_arch": "Architecture",
    "shell": "Shell",
    "node_ver": "Node.js",
    "npm_ver": "npm",
    "node_gyp_ver": "node-gyp",
    "nativescript_cli_version": "NativeScript CLI",
    "java_ver": "Java",
    "javac_version": "javac",
    "gradle_ver": "Gradle",
    "adb_ver": "adb",
    "android_installed": "Android SDK tool",
    "xcode_ver": "Xcode",
    "xcodeproj_gem_location": "xcodeproj gem",
    "cocoapods_ver": "CocoaPods",
    "is_cocoapods_working_correctly": "CocoaPods working",
    "is_cocoapods_update_required": "CocoaPods update required",
    "itunes_installed": "iTunes",
    "mono_ver": "Mono",
    "dotnet_ver": ".NET",
    "git_ver": "Git",
}


def _format_value(value: object) -> str:
    if value is None:
        return "not found"
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def print_warnings(warnings: list[DoctorWarning]) -> None:
    """Print the doctor report to stdout."""
    print("=" * 60)
    print("Doctor Report")
    print("=" * 60)
    print()

    if not warnings:
        print("No issues were detected.")
        print()
        return

    for w in warnings:
        scope = ", ".join(sorted(w.platforms)) or "all platforms"
        print(f"  ! {w.message.strip()} [{scope}]")
        for line in w.remediation.strip().splitlines():
            print(f"    > {line.strip()}")
        print()

    print(f"Status: {len(warnings)} issue(s) found")
    print()


def print_snapshot(snapshot: EnvironmentSnapshot, host: HostInfo) -> None:
    """Print the environment snapshot to stdout."""
    print("=" * 60)
    print("Environment Report")
    print("=" * 60)
    print()
    print(f"{'Host:':<28}{host.summary}")
    for field, label in SNAPSHOT_LABELS.items():
        print(f"{label + ':':<28}{_format_value(getattr(snapshot, field))}")
    print()


# =============================================================================
# Commands
# =============================================================================


def cmd_doctor(doctor: Doctor, args: argparse.Namespace) -> int:
    """Handle the doctor command."""
    platform = None
    if args.platform is not None:
        try:
            platform = validate_platform(args.platform)
        except ValidationError as e:
            logger.error(str(e))
            return 2

    warnings = asyncio.run(doctor.get_warnings())
    if platform:
        warnings = [w for w in warnings if w.applies_to(platform)]
    if args.json:
        print(json.dumps([w.to_dict() for w in warnings], indent=2))
    else:
        print_warnings(warnings)
    return 0 if not warnings else 1


def cmd_info(doctor: Doctor, args: argparse.Namespace) -> int:
    """Handle the info command."""
    snapshot = asyncio.run(doctor.get_sys_info())
    if args.json:
        print(snapshot.model_dump_json(indent=2))
    else:
        print_snapshot(snapshot, doctor.host)
    return 0


def cmd_can_build(doctor: Doctor, args: argparse.Namespace) -> int:
    """Handle the can-build command."""
    try:
        result = asyncio.run(doctor.can_build_locally(args.platform))
    except ValidationError as e:
        logger.error(str(e))
        return 2

    status = "can" if result else "cannot"
    print(f"This host {status} build {args.platform} projects locally.")
    return 0 if result else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python .",
        description="Diagnose a mobile development environment",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    doctor_parser = subparsers.add_parser("doctor", help="List environment problems")
    doctor_parser.add_argument("--json", action="store_true", help="Print warnings as JSON")
    doctor_parser.add_argument(
        "--platform",
        help=f"Only show warnings affecting one platform ({', '.join(SUPPORTED_PLATFORMS)})",
    )
    doctor_parser.set_defaults(func=cmd_doctor)

    info_parser = subparsers.add_parser("info", help="Show detected tools and versions")
    info_parser.add_argument("--json", action="store_true", help="Print the snapshot as JSON")
    info_parser.set_defaults(func=cmd_info)

    build_parser = subparsers.add_parser(
        "can-build", help="Check whether a local build can run for a platform"
    )
    build_parser.add_argument(
        "platform",
        nargs="?",
        default="",
        help=f"Target platform ({', '.join(SUPPORTED_PLATFORMS)})",
    )
    build_parser.set_defaults(func=cmd_can_build)

    return parser


def handle_doctor_command(argv: list[str], caching: bool = True) -> int:
    """Parse and run one of the doctor commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    doctor = create_doctor(caching=None if caching else False)
    return args.func(doctor, args)


# =============================================================================
# Development Commands
# =============================================================================


def cmd_test(extra_args: list[str]) -> int:
    """Run pytest with provided arguments and test tier options.

    Usage:
        python . dev test                # Run all tests
        python . dev test --unit         # Run only unit tests (fast, fakes only)
        python . dev test --integration  # Run integration tests (real processes and files)
        python . dev test --all          # Run all tests explicitly
        python . dev test -v             # Run with verbose output
        python . dev test -k "resolver"  # Run tests matching pattern

    Test Tiers:
        unit        - Fast tests against in-memory fakes
        integration - Tests spawning real processes or touching the filesystem
    """
    tier_markers = {
        "--unit": ["-m", "unit"],
        "--integration": ["-m", "integration"],
        "--all": [],
    }

    pytest_args: list[str] = []
    remaining_args: list[str] = []

    for arg in extra_args:
        if arg in tier_markers:
            pytest_args.extend(tier_markers[arg])
        else:
            remaining_args.append(arg)

    cmd = [sys.executable, "-m", "pytest", *pytest_args, *remaining_args]
    logger.info(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 130


def handle_dev_command(argv: list[str]) -> int:
    """Handle development workflow commands.

    Usage:
        python . dev test [args]       # Run pytest
    """
    if not argv:
        print("Development workflow commands")
        print("\nUsage: python . dev {command} [args]")
        print("\nCommands:")
        print("  test       Run pytest with tier options")
        print("\nExamples:")
        print("  python . dev test --unit           # Fast unit tests")
        print("  python . dev test --integration    # Integration tests")
        return 1

    subcommand = argv[0]
    subargs = argv[1:]

    dev_commands = {
        "test": lambda: cmd_test(subargs),
    }

    if subcommand in dev_commands:
        return dev_commands[subcommand]()

    logger.error(f"Unknown dev command: {subcommand}")
    return handle_dev_command([])


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . [--no-cache] {command} [args]")
    print("\n=== Diagnostics ===")
    print("  doctor     List problems with the development environment")
    print("  info       Show detected tools and versions")
    print("  can-build  Check whether a local build can run for a platform")
    print("\n=== Development ===")
    print("  dev        Development workflows (test)")
    print("\nExamples:")
    print("  python . doctor")
    print("  python . doctor --platform ios")
    print("  python . info --json")
    print("  python . can-build android")
    print("  python . --no-cache doctor       # Probe every tool again")
    print("  python . dev test --unit")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    argv = list(sys.argv[1:] if argv is None else argv)
    caching = NO_CACHE_FLAG not in argv
    argv = [arg for arg in argv if arg != NO_CACHE_FLAG]

    if not argv:
        show_help()
        return 1

    command = argv[0]

    if command in ("-h", "--help"):
        show_help()
        return 0

    if command == "dev":
        return handle_dev_command(argv[1:])

    if command in ("doctor", "info", "can-build"):
        setup_logging(get_environment(EnvVar.MOBILE_DOCTOR_LOG_LEVEL))
        return handle_doctor_command(argv, caching=caching)

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
