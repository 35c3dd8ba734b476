"""
Dependency resolver — make sure a command exists, installing it if not.

Flow for one prerequisite:
    probe → pick installer (native → uv → install script) → install → re-probe

The resolver holds no ambient state. The search path comes in as an
argument and goes out in the EnsureResult; when an installer puts a
tool in a new directory (the uv install script), the returned path has
that directory in front and later calls must use it.
"""

from __future__ import annotations

import logging

from mcp_bootstrap.adapters.base import CommandLocator, ProcessLauncher
from mcp_bootstrap.adapters.package_managers import (
    InstallScriptManager,
    PackageManager,
    UvToolManager,
    prepend_path,
)
from mcp_bootstrap.core.errors import InstallerError, MissingToolError
from mcp_bootstrap.core.models.package import EnsureResult, PackageSpec

logger = logging.getLogger(__name__)


class DependencyResolver:
    """Ensures commands are available through a fixed chain of installers.

    Args:
        native: The host's native manager (detected once), or None.
        locator: Executable lookup capability.
        launcher: Process execution capability.
        fallbacks: Strategies tried after the native manager. Defaults to
            ``uv tool install`` then the direct install script.
    """

    def __init__(
        self,
        native: PackageManager | None,
        locator: CommandLocator,
        launcher: ProcessLauncher,
        fallbacks: list[PackageManager] | None = None,
    ):
        self.native = native
        self._locator = locator
        self._launcher = launcher
        self._fallbacks = fallbacks if fallbacks is not None else [
            UvToolManager(),
            InstallScriptManager(),
        ]

    @property
    def manager_name(self) -> str:
        return self.native.name if self.native else "unknown"

    def candidates(self) -> list[PackageManager]:
        """Installers in priority order."""
        chain = [self.native] if self.native else []
        return [*chain, *self._fallbacks]

    def select(self, spec: PackageSpec, search_path: str) -> PackageManager | None:
        """First installer that has a package for ``spec`` and is usable now."""
        for manager in self.candidates():
            if spec.package_for(manager.key) is None:
                continue
            if not manager.is_available(self._locator, search_path):
                logger.debug("%s has a package for %s but is not available", manager.name, spec.command)
                continue
            return manager
        return None

    def ensure(self, spec: PackageSpec, search_path: str) -> EnsureResult:
        """Make ``spec.command`` available. Never invokes an installer if it already is."""
        if self._locator.exists(spec.command, search_path):
            logger.info("'%s' is already installed", spec.command)
            return EnsureResult.present(spec.command, search_path)

        logger.warning("'%s' not found", spec.command)
        return self.install(spec, search_path)

    def install(self, spec: PackageSpec, search_path: str) -> EnsureResult:
        """Install ``spec`` unconditionally, then verify the command exists."""
        manager = self.select(spec, search_path)
        if manager is None:
            return EnsureResult.failure(
                spec.command,
                search_path,
                reason=(
                    f"No installer available for '{spec.command}' "
                    f"(package manager: {self.manager_name})"
                ),
            )

        packages = spec.package_for(manager.key) or ()
        logger.info("Installing '%s' using %s...", " ".join(packages), manager.name)
        result = manager.install(packages, self._launcher, search_path)
        if result.failed:
            return EnsureResult.failure(
                spec.command,
                search_path,
                reason=f"Failed to install '{' '.join(packages)}' using {manager.name}: "
                       f"{result.describe_failure()}",
                manager=manager.name,
            )

        new_path = prepend_path(search_path, manager.path_additions) if manager.path_additions else search_path

        # The package name may differ from the command it provides
        if not self._locator.exists(spec.command, new_path):
            return EnsureResult.failure(
                spec.command,
                new_path,
                reason=f"Installation of '{spec.command}' via {manager.name} finished, "
                       "but the command is still not found",
                manager=manager.name,
            )

        logger.info("'%s' installed successfully via %s", spec.command, manager.name)
        return EnsureResult.installed(spec.command, new_path, manager.name)

    def require(self, spec: PackageSpec, search_path: str) -> EnsureResult:
        """Like ``ensure`` but raise on failure. Every later step needs the tool."""
        result = self.ensure(spec, search_path)
        if result.failed:
            raise_for(result)
        return result


def raise_for(result: EnsureResult) -> None:
    """Convert a failed EnsureResult into the matching fatal error."""
    if result.manager is None:
        raise MissingToolError(
            result.reason,
            hint=f"Please install '{result.command}' manually and re-run.",
        )
    raise InstallerError(
        result.reason,
        hint=f"Please check PATH or install '{result.command}' manually and re-run.",
    )
