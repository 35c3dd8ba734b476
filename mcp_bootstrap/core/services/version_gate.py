"""
Version gate — require a minimum interpreter version.

Distro repositories may not carry the required version, so when the
package manager's upgrade still leaves the interpreter too old the gate
stops with manual-remediation instructions instead of retrying.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from mcp_bootstrap.adapters.base import CommandLocator, ProcessLauncher
from mcp_bootstrap.core.errors import MissingToolError, VersionTooOldError
from mcp_bootstrap.core.models.package import PackageSpec
from mcp_bootstrap.core.services.resolver import DependencyResolver, raise_for

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"(\d+)\.(\d+)")

_MANUAL_HINTS = {
    "linux": (
        "Please install Python {want}+ manually (e.g. the deadsnakes PPA on Ubuntu, "
        "pyenv, or building from source) and ensure '{cmd}' points to it."
    ),
    "macos": "Please install Python {want}+ manually (e.g. 'brew install python@{want}' or python.org).",
    "windows": "Please install Python {want}+ from python.org or with winget and re-run.",
}


@dataclass
class VersionCheck:
    """Result of the version gate."""

    command: str
    version: tuple[int, int]
    search_path: str
    upgraded: bool = False

    @property
    def version_string(self) -> str:
        return f"{self.version[0]}.{self.version[1]}"

    def to_dict(self) -> dict:
        return {
            "command": self.command,
            "version": self.version_string,
            "upgraded": self.upgraded,
        }


def parse_version(output: str) -> tuple[int, int] | None:
    """Extract ``(major, minor)`` from ``--version`` output."""
    match = _VERSION_RE.search(output)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def probe_version(
    command: str,
    launcher: ProcessLauncher,
    search_path: str,
) -> tuple[int, int] | None:
    """Run ``<command> --version`` and parse it. None if it can't be determined."""
    result = launcher.run([command, "--version"], env_overrides={"PATH": search_path}, capture=True)
    if result.failed:
        logger.debug("Version probe failed for %s: %s", command, result.describe_failure())
        return None
    # Python 2 printed its version on stderr
    return parse_version(f"{result.stdout}\n{result.stderr}")


def ensure_minimum_version(
    resolver: DependencyResolver,
    locator: CommandLocator,
    launcher: ProcessLauncher,
    spec: PackageSpec,
    minimum: tuple[int, int],
    search_path: str,
    candidates: list[str] | None = None,
    platform: str = "linux",
) -> VersionCheck:
    """Find an interpreter at least ``minimum``, upgrading once if needed.

    Args:
        resolver: Used to install (or upgrade) ``spec``.
        spec: What to install when no candidate exists or it is too old.
        minimum: ``(major, minor)`` lower bound, inclusive.
        candidates: Commands to try in order (default: ``[spec.command]``).

    Raises:
        MissingToolError / InstallerError: No interpreter could be installed.
        VersionTooOldError: Still below ``minimum`` after the upgrade attempt.
    """
    names = candidates or [spec.command]
    want = f"{minimum[0]}.{minimum[1]}"

    command = next((c for c in names if locator.exists(c, search_path)), None)
    if command is None:
        logger.warning("None of %s found", ", ".join(repr(c) for c in names))
        result = resolver.ensure(spec, search_path)
        if result.failed:
            raise_for(result)
        search_path = result.search_path
        command = next((c for c in names if locator.exists(c, search_path)), spec.command)

    version = probe_version(command, launcher, search_path)
    if version is None:
        raise MissingToolError(
            f"Could not determine the version of '{command}'",
            hint=_MANUAL_HINTS.get(platform, _MANUAL_HINTS["linux"]).format(want=want, cmd=command),
        )
    logger.info("Found Python version: %d.%d (using '%s')", *version, command)

    if version >= minimum:
        return VersionCheck(command=command, version=version, search_path=search_path)

    logger.warning("Version %d.%d is older than %s, attempting upgrade", *version, want)
    result = resolver.install(spec, search_path)
    if result.ok:
        search_path = result.search_path
    else:
        logger.warning("Upgrade attempt failed: %s", result.reason)

    version_after = probe_version(command, launcher, search_path) or version
    if version_after < minimum:
        raise VersionTooOldError(
            f"Installed version of '{command}' ({version_after[0]}.{version_after[1]}) "
            f"is still less than {want}",
            hint=_MANUAL_HINTS.get(platform, _MANUAL_HINTS["linux"]).format(want=want, cmd=command),
        )

    return VersionCheck(command=command, version=version_after, search_path=search_path, upgraded=True)
