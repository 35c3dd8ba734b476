"""
Universal fallbacks — ``uv tool install`` and the direct install script.

``uv`` installs Python command-line tools on any host. When ``uv``
itself is missing and no native manager provides it, the ``script``
strategy downloads and runs its installer. The installer puts ``uv``
in a per-user directory that is not on the search path yet, so the
strategy reports that directory for the resolver to prepend. The same
goes for the executables ``uv tool install`` links into ``~/.local/bin``.
"""

from __future__ import annotations

import os
from pathlib import Path

from mcp_bootstrap.adapters.base import CommandLocator
from mcp_bootstrap.adapters.package_managers.base import PackageManager


def uv_tool_bin_dir(home: Path | None = None) -> str:
    """Where ``uv tool install`` puts executables (its default tool bin dir)."""
    return str((home or Path.home()) / ".local" / "bin")


class UvToolManager(PackageManager):
    """``uv tool install <pkg>`` — one invocation per package.

    Args:
        home: Home directory used to compute the tool bin directory.
    """

    name = "uv"
    binary = "uv"

    def __init__(self, home: Path | None = None, use_sudo: bool | None = None):
        super().__init__(use_sudo=use_sudo)
        self._home = home or Path.home()

    @property
    def path_additions(self) -> list[str]:
        return [uv_tool_bin_dir(self._home)]

    def install_commands(self, packages: tuple[str, ...]) -> list[list[str]]:
        return [["uv", "tool", "install", pkg] for pkg in packages]


class InstallScriptManager(PackageManager):
    """Download-and-execute installer. The PackageSpec value is the script URL.

    Args:
        windows: Use PowerShell (``irm | iex``) instead of ``curl | sh``.
        home: Home directory used to compute the install locations.
    """

    name = "script"

    def __init__(
        self,
        windows: bool = False,
        home: Path | None = None,
        use_sudo: bool | None = None,
    ):
        super().__init__(use_sudo=use_sudo)
        self._windows = windows
        self._home = home or Path.home()

    @property
    def binary(self) -> str:  # type: ignore[override]
        return "powershell" if self._windows else "curl"

    @property
    def path_additions(self) -> list[str]:
        return [
            str(self._home / ".local" / "bin"),
            str(self._home / ".cargo" / "bin"),
        ]

    def is_available(self, locator: CommandLocator, search_path: str) -> bool:
        if self._windows:
            return locator.exists("powershell", search_path)
        return locator.exists("curl", search_path) and locator.exists("sh", search_path)

    def install_commands(self, packages: tuple[str, ...]) -> list[list[str]]:
        if self._windows:
            return [
                ["powershell", "-ExecutionPolicy", "ByPass", "-c", f"irm {url} | iex"]
                for url in packages
            ]
        return [["sh", "-c", f"curl -LsSf {url} | sh"] for url in packages]


def prepend_path(search_path: str, directories: list[str]) -> str:
    """Put ``directories`` in front of ``search_path``, dropping duplicates."""
    existing = [p for p in search_path.split(os.pathsep) if p] if search_path else []
    front = [d for d in directories if d]
    rest = [p for p in existing if p not in front]
    return os.pathsep.join([*front, *rest])
