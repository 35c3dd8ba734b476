"""
Package manager strategy — one subclass per installer ecosystem.

A strategy knows three things: which executable reveals that it is
present, which key it reads from a PackageSpec, and the argv that
installs a list of packages. It is selected once per run; the resolver
never re-dispatches on manager names.
"""

from __future__ import annotations

import logging
import os
import sys
from abc import ABC, abstractmethod

from mcp_bootstrap.adapters.base import CommandLocator, ProcessLauncher
from mcp_bootstrap.core.models.command import CommandResult

logger = logging.getLogger(__name__)


def running_as_root() -> bool:
    """True when the process already has root privileges (never on Windows)."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


class PackageManager(ABC):
    """Abstract base class for all package managers.

    Args:
        use_sudo: Force (True) or suppress (False) the ``sudo`` prefix for
            managers that need elevation. None decides automatically:
            elevate unless already root or on Windows.
    """

    #: identifier used in logs and reports
    name: str = ""
    #: executable whose presence means this manager is usable
    binary: str = ""
    #: PackageSpec key this manager reads (defaults to ``name``)
    package_key: str = ""
    #: whether installs need root
    needs_elevation: bool = False

    def __init__(self, use_sudo: bool | None = None):
        self._use_sudo = use_sudo

    @property
    def key(self) -> str:
        return self.package_key or self.name

    @property
    def path_additions(self) -> list[str]:
        """Directories to prepend to the search path after a successful install."""
        return []

    def is_available(self, locator: CommandLocator, search_path: str) -> bool:
        return locator.exists(self.binary, search_path)

    def elevate(self, argv: list[str]) -> list[str]:
        if not self.needs_elevation:
            return argv
        use_sudo = self._use_sudo
        if use_sudo is None:
            use_sudo = not running_as_root() and sys.platform != "win32"
        return ["sudo", *argv] if use_sudo else argv

    def prepare_commands(self) -> list[list[str]]:
        """Commands run before installing. Their failure is only logged."""
        return []

    @abstractmethod
    def install_commands(self, packages: tuple[str, ...]) -> list[list[str]]:
        """The argv list(s) that install ``packages``."""

    def install(
        self,
        packages: tuple[str, ...],
        launcher: ProcessLauncher,
        search_path: str,
    ) -> CommandResult:
        """Install ``packages``. Returns the first failing result, or the last one."""
        env = {"PATH": search_path}

        for argv in self.prepare_commands():
            result = launcher.run(self.elevate(argv), env_overrides=env)
            if result.failed:
                logger.warning(
                    "%s failed, proceeding anyway: %s", " ".join(argv), result.describe_failure()
                )

        result = CommandResult.failure([], error=f"{self.name}: nothing to install")
        for argv in self.install_commands(packages):
            result = launcher.run(self.elevate(argv), env_overrides=env)
            if result.failed:
                return result
        return result

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
