"""
Package manager strategies and the one-time native manager detection.

    from mcp_bootstrap.adapters.package_managers import detect_native_manager
"""

from __future__ import annotations

import logging

from mcp_bootstrap.adapters.base import CommandLocator
from mcp_bootstrap.adapters.package_managers.base import PackageManager
from mcp_bootstrap.adapters.package_managers.native import (
    AptManager,
    BrewManager,
    DnfManager,
    PacmanManager,
    WingetManager,
    YumManager,
    ZypperManager,
)
from mcp_bootstrap.adapters.package_managers.universal import (
    InstallScriptManager,
    UvToolManager,
    prepend_path,
    uv_tool_bin_dir,
)

logger = logging.getLogger(__name__)

# Probe order per platform, first hit wins
NATIVE_PRIORITY: dict[str, list[type[PackageManager]]] = {
    "linux": [AptManager, DnfManager, YumManager, PacmanManager, ZypperManager],
    "macos": [BrewManager],
    "windows": [WingetManager],
}


def detect_native_manager(
    locator: CommandLocator,
    search_path: str,
    platform: str,
    use_sudo: bool | None = None,
) -> PackageManager | None:
    """Return the host's native package manager, or None if unknown.

    Args:
        locator: Executable lookup capability.
        search_path: Search path to probe.
        platform: ``linux``, ``macos`` or ``windows``.
        use_sudo: Passed to the selected manager (None = automatic).
    """
    for manager_cls in NATIVE_PRIORITY.get(platform, []):
        manager = manager_cls(use_sudo=use_sudo)
        if manager.is_available(locator, search_path):
            logger.debug("Detected package manager: %s", manager.name)
            return manager
    logger.debug("No known package manager found for platform %s", platform)
    return None


__all__ = [
    "NATIVE_PRIORITY",
    "AptManager",
    "BrewManager",
    "DnfManager",
    "InstallScriptManager",
    "PackageManager",
    "PacmanManager",
    "UvToolManager",
    "WingetManager",
    "YumManager",
    "ZypperManager",
    "detect_native_manager",
    "prepend_path",
    "uv_tool_bin_dir",
]
