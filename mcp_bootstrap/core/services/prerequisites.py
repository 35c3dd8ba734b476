"""
Prerequisite catalog — what each platform needs before the clone.

Pure data plus the two macOS-only steps (Homebrew and the Xcode command
line tools) that don't fit the "command + package names" shape.
Package names follow each distro's own naming.
"""

from __future__ import annotations

import logging

from mcp_bootstrap.adapters.base import CommandLocator, Console, ProcessLauncher
from mcp_bootstrap.adapters.package_managers import prepend_path
from mcp_bootstrap.core.errors import InstallerError
from mcp_bootstrap.core.models.package import PackageSpec

logger = logging.getLogger(__name__)

UV_INSTALL_SCRIPT = "https://astral.sh/uv/install.sh"
UV_INSTALL_SCRIPT_WINDOWS = "https://astral.sh/uv/install.ps1"
HOMEBREW_INSTALL_SCRIPT = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"

# Where the Homebrew installer puts brew (Apple silicon, then Intel)
HOMEBREW_BIN_DIRS = ["/opt/homebrew/bin", "/usr/local/bin"]


# ── Basic tools ────────────────────────────────────────────────

CURL = PackageSpec(
    command="curl",
    packages={m: "curl" for m in ("apt", "dnf", "pacman", "zypper", "brew")}
    | {"winget": "cURL.cURL"},
)

GIT = PackageSpec(
    command="git",
    packages={m: "git" for m in ("apt", "dnf", "pacman", "zypper", "brew")}
    | {"winget": "Git.Git"},
)

# ── Build tools (compilers for packages without wheels) ────────

BUILD_TOOLS: dict[str, list[PackageSpec]] = {
    # gcc ships in build-essential on Debian
    "apt": [PackageSpec(command="gcc", packages={"apt": "build-essential"}, label="build tools")],
    "dnf": [
        PackageSpec(command="gcc", packages={"dnf": "gcc"}),
        PackageSpec(command="make", packages={"dnf": "make"}),
    ],
    "pacman": [PackageSpec(command="gcc", packages={"pacman": "base-devel"}, label="build tools")],
    "zypper": [
        PackageSpec(
            command="gcc",
            packages={"zypper": "patterns-devel-base-devel_basis"},
            label="build tools",
        )
    ],
}
BUILD_TOOLS["yum"] = BUILD_TOOLS["dnf"]

# ── Python ────────────────────────────────────────────────────

PYTHON = PackageSpec(
    command="python3",
    label="Python 3",
    packages={
        "apt": "python3 python3-pip python3-venv",
        "dnf": "python3 python3-pip python3-wheel",
        "pacman": "python python-pip",
        "zypper": "python3 python3-pip python3-devel",
        "brew": "python@3.11",
        "winget": "Python.Python.3.11",
    },
)

PIP = PackageSpec(
    command="pip3",
    packages={
        "apt": "python3-pip",
        "dnf": "python3-pip",
        "pacman": "python-pip",
        "zypper": "python3-pip",
    },
)

# ── uv and tools installed through it ──────────────────────────

UV = PackageSpec(command="uv", packages={"script": UV_INSTALL_SCRIPT})
UV_WINDOWS = PackageSpec(command="uv", packages={"script": UV_INSTALL_SCRIPT_WINDOWS})

MCP_PROXY = PackageSpec(command="mcp-proxy", packages={"uv": "mcp-proxy"})


def python_spec(min_version: tuple[int, int]) -> PackageSpec:
    """PYTHON with the brew/winget package pinned to ``min_version``."""
    want = f"{min_version[0]}.{min_version[1]}"
    packages = {k: " ".join(v) for k, v in PYTHON.packages.items()}
    packages["brew"] = f"python@{want}"
    packages["winget"] = f"Python.Python.{want}"
    return PackageSpec(command=PYTHON.command, label=PYTHON.label, packages=packages)


def base_tools(platform: str) -> list[PackageSpec]:
    """Tools checked before the build tools and Python."""
    if platform == "linux":
        return [CURL, GIT]
    if platform == "windows":
        return [GIT]
    # macOS ships curl; git comes with the Xcode command line tools or brew
    return [GIT]


def build_tools(manager: str | None) -> list[PackageSpec] | None:
    """Build tool specs for ``manager``, or None when we can't handle it."""
    if manager is None:
        return None
    return BUILD_TOOLS.get(manager)


def post_python_tools(platform: str) -> list[PackageSpec]:
    """Tools checked after the Python version gate, in order."""
    tools: list[PackageSpec] = []
    if platform == "linux":
        tools.append(PIP)
    tools.append(UV_WINDOWS if platform == "windows" else UV)
    tools.append(MCP_PROXY)
    return tools


# ── macOS extras ──────────────────────────────────────────────

def ensure_homebrew(
    locator: CommandLocator,
    launcher: ProcessLauncher,
    console: Console,
    search_path: str,
) -> tuple[str, str]:
    """Offer to install Homebrew when it is missing.

    Returns:
        ``(status, search_path)`` where status is ``present``,
        ``installed`` or ``declined``.

    Raises:
        InstallerError: The installer ran but ``brew`` is still missing.
    """
    if locator.exists("brew", search_path):
        console.info("'brew' is already installed.")
        return "present", search_path

    console.warning("'brew' (Homebrew) not found.")
    console.info("Homebrew is recommended for installing Python and other tools.")
    if not console.confirm("Do you want to attempt to install Homebrew now? (Requires sudo)"):
        console.warning("Skipping Homebrew installation. Some dependencies might fail if not installed manually.")
        return "declined", search_path

    console.info("Running the Homebrew installation script...")
    result = launcher.run(
        ["/bin/bash", "-c", f'/bin/bash -c "$(curl -fsSL {HOMEBREW_INSTALL_SCRIPT})"'],
        env_overrides={"PATH": search_path},
    )
    if result.failed:
        logger.warning("Homebrew installer failed: %s", result.describe_failure())

    # Same effect as eval "$(brew shellenv)" for this run only
    search_path = prepend_path(search_path, HOMEBREW_BIN_DIRS)
    if not locator.exists("brew", search_path):
        raise InstallerError(
            "Homebrew installation finished, but 'brew' command not found.",
            hint="Please check the installation and your PATH.",
        )
    return "installed", search_path


def ensure_xcode_tools(
    launcher: ProcessLauncher,
    console: Console,
    search_path: str,
) -> str:
    """Check for the Xcode command line tools; trigger their installer if missing.

    A failed or cancelled install is only a warning. Returns ``present``
    or ``requested``.
    """
    env = {"PATH": search_path}
    if launcher.run(["xcode-select", "-p"], env_overrides=env, capture=True).ok:
        console.info("Xcode Command Line Tools are installed.")
        return "present"

    console.warning("Xcode Command Line Tools not found or not configured.")
    console.info("Attempting to install. Please follow the prompts in the new window.")
    if launcher.run(["xcode-select", "--install"], env_overrides=env).failed:
        console.warning(
            "Xcode Command Line Tools installation might have failed or was cancelled. "
            "Some packages may fail to build."
        )
    console.pause(
        "Waiting for potential Xcode tools installation... "
        "(Press Enter to continue if you cancelled or it finished quickly)"
    )
    return "requested"
