"""
Check use case — install every prerequisite the server checkout needs.

Detects the platform's package manager once, then walks the platform's
prerequisite list in order, stopping at the first tool that can't be
provided. Used on its own by ``mcp-bootstrap check`` and as the first
half of ``mcp-bootstrap setup``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mcp_bootstrap.adapters.base import CommandLocator, Console, PortProbe, ProcessLauncher
from mcp_bootstrap.adapters.package_managers import (
    InstallScriptManager,
    UvToolManager,
    detect_native_manager,
)
from mcp_bootstrap.core.errors import BootstrapError
from mcp_bootstrap.core.models.config import BootstrapConfig
from mcp_bootstrap.core.models.package import PackageSpec
from mcp_bootstrap.core.models.report import SetupReport
from mcp_bootstrap.core.services import prerequisites
from mcp_bootstrap.core.services.resolver import DependencyResolver
from mcp_bootstrap.core.services.version_gate import ensure_minimum_version

logger = logging.getLogger(__name__)


@dataclass
class Host:
    """The capabilities a run uses to touch the machine."""

    locator: CommandLocator
    launcher: ProcessLauncher
    probe: PortProbe
    console: Console


@dataclass
class PrerequisiteState:
    """What later steps need from the prerequisite phase."""

    search_path: str
    resolver: DependencyResolver
    python: str = "python3"


def build_resolver(
    host: Host,
    platform: str,
    search_path: str,
    use_sudo: bool | None = None,
) -> DependencyResolver:
    """Detect the native manager once and wire up the fallback chain."""
    native = detect_native_manager(host.locator, search_path, platform, use_sudo=use_sudo)
    return DependencyResolver(
        native,
        host.locator,
        host.launcher,
        fallbacks=[UvToolManager(), InstallScriptManager(windows=platform == "windows")],
    )


def _ensure(
    report: SetupReport,
    host: Host,
    resolver: DependencyResolver,
    spec: PackageSpec,
    search_path: str,
) -> str:
    result = resolver.require(spec, search_path)
    if result.status == "already_present":
        host.console.info(f"'{spec.command}' is already installed.")
        report.record(spec.display_name, "ok", "already present")
    else:
        host.console.info(f"'{spec.command}' installed successfully via {result.manager}.")
        report.record(spec.display_name, "ok", f"installed via {result.manager}", manager=result.manager)
    return result.search_path


def install_prerequisites(
    config: BootstrapConfig,
    host: Host,
    platform: str,
    search_path: str,
    report: SetupReport,
    use_sudo: bool | None = None,
) -> PrerequisiteState:
    """Install all prerequisites. Raises BootstrapError on the first fatal failure."""
    console = host.console
    report.platform = platform
    console.info("Checking system prerequisites...")

    if platform == "macos":
        status, search_path = prerequisites.ensure_homebrew(
            host.locator, host.launcher, console, search_path
        )
        report.record("homebrew", "skipped" if status == "declined" else "ok", status)

    resolver = build_resolver(host, platform, search_path, use_sudo=use_sudo)
    report.package_manager = resolver.native.name if resolver.native else None
    console.info(f"Detected package manager: {resolver.manager_name}")
    if resolver.native is None:
        console.warning(
            "Could not detect a known package manager. "
            "You may need to install prerequisites manually."
        )

    for spec in prerequisites.base_tools(platform):
        search_path = _ensure(report, host, resolver, spec, search_path)

    # Compilers for packages without wheels
    if platform == "macos":
        console.info("Checking for Xcode Command Line Tools...")
        status = prerequisites.ensure_xcode_tools(host.launcher, console, search_path)
        report.record("xcode command line tools", "ok", status)
    elif platform == "linux":
        console.info("Checking for build tools...")
        specs = prerequisites.build_tools(report.package_manager)
        if specs is None:
            console.warning(
                f"Cannot automatically check/install build tools for {resolver.manager_name}. "
                "Ensure you have gcc, make, etc."
            )
            report.record("build tools", "skipped", f"unsupported manager {resolver.manager_name}")
        else:
            for spec in specs:
                search_path = _ensure(report, host, resolver, spec, search_path)

    minimum = config.python.minimum
    console.info(f"Checking for Python {config.python.min_version}+...")
    check = ensure_minimum_version(
        resolver,
        host.locator,
        host.launcher,
        prerequisites.python_spec(minimum),
        minimum,
        search_path,
        candidates=config.python.candidates,
        platform=platform,
    )
    search_path = check.search_path
    console.info(f"Python version {check.version_string} is sufficient (using '{check.command}').")
    report.record("python", "ok", check.version_string, **check.to_dict())

    for spec in prerequisites.post_python_tools(platform):
        search_path = _ensure(report, host, resolver, spec, search_path)

    report.search_path = search_path
    return PrerequisiteState(search_path=search_path, resolver=resolver, python=check.command)


def run_check(
    config: BootstrapConfig,
    host: Host,
    platform: str,
    search_path: str,
    use_sudo: bool | None = None,
) -> SetupReport:
    """Install prerequisites only. Errors are captured in the report."""
    report = SetupReport(platform=platform, search_path=search_path)
    try:
        install_prerequisites(config, host, platform, search_path, report, use_sudo=use_sudo)
    except BootstrapError as e:
        logger.debug("Prerequisite check failed: %s", e.message)
        report.error = e.message
        report.hint = e.hint
    return report
