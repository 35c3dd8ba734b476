"""
Host detection — which platform we're on and where executables live.
"""

from __future__ import annotations

import os
import platform as _platform

from mcp_bootstrap.core.errors import UnsupportedPlatformError

SUPPORTED_PLATFORMS = ("linux", "macos", "windows")

_SYSTEM_TO_PLATFORM = {
    "Linux": "linux",
    "Darwin": "macos",
    "Windows": "windows",
}


def detect_platform(system: str | None = None) -> str:
    """Map ``platform.system()`` to ``linux`` / ``macos`` / ``windows``."""
    name = system if system is not None else _platform.system()
    try:
        return _SYSTEM_TO_PLATFORM[name]
    except KeyError:
        raise UnsupportedPlatformError(
            f"Unsupported operating system: {name or 'unknown'}"
        ) from None


def current_search_path(environ: dict[str, str] | None = None) -> str:
    """The process search path at startup. Only read once, by the CLI."""
    env = os.environ if environ is None else environ
    return env.get("PATH", os.defpath)


def venv_bin_dir(venv: str, platform: str) -> str:
    """Executable directory inside a virtual environment."""
    return os.path.join(venv, "Scripts" if platform == "windows" else "bin")
