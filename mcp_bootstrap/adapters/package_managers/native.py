"""
Native OS package managers — apt, dnf, yum, pacman, zypper, brew, winget.
"""

from __future__ import annotations

from mcp_bootstrap.adapters.package_managers.base import PackageManager


class AptManager(PackageManager):
    """Debian / Ubuntu. Refreshes the index first; a failed refresh is tolerated."""

    name = "apt"
    binary = "apt"
    needs_elevation = True

    def prepare_commands(self) -> list[list[str]]:
        return [["apt", "update"]]

    def install_commands(self, packages: tuple[str, ...]) -> list[list[str]]:
        return [["apt", "install", "-y", *packages]]


class DnfManager(PackageManager):
    """Fedora / RHEL 8+."""

    name = "dnf"
    binary = "dnf"
    needs_elevation = True

    def install_commands(self, packages: tuple[str, ...]) -> list[list[str]]:
        return [[self.binary, "install", "-y", *packages]]


class YumManager(DnfManager):
    """Older Fedora / CentOS. Shares package names with dnf."""

    name = "yum"
    binary = "yum"
    package_key = "dnf"


class PacmanManager(PackageManager):
    """Arch Linux."""

    name = "pacman"
    binary = "pacman"
    needs_elevation = True

    def install_commands(self, packages: tuple[str, ...]) -> list[list[str]]:
        return [["pacman", "-Syu", "--noconfirm", *packages]]


class ZypperManager(PackageManager):
    """openSUSE."""

    name = "zypper"
    binary = "zypper"
    needs_elevation = True

    def install_commands(self, packages: tuple[str, ...]) -> list[list[str]]:
        return [["zypper", "install", "-y", *packages]]


class BrewManager(PackageManager):
    """Homebrew (macOS). Runs as the user, never with sudo."""

    name = "brew"
    binary = "brew"

    def install_commands(self, packages: tuple[str, ...]) -> list[list[str]]:
        return [["brew", "install", *packages]]


class WingetManager(PackageManager):
    """Windows Package Manager. Takes one package id per invocation."""

    name = "winget"
    binary = "winget"

    def install_commands(self, packages: tuple[str, ...]) -> list[list[str]]:
        return [
            [
                "winget", "install", "--id", pkg, "-e",
                "--accept-source-agreements", "--accept-package-agreements",
            ]
            for pkg in packages
        ]
