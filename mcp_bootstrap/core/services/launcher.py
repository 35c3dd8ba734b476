"""
Server launcher — build the downstream command line and run it.

The server is the only external contract here: it accepts
``--stdio --port <p> --proxy-port <p+1>``, or no flags at all to start
its default network listener.
"""

from __future__ import annotations

import logging

from mcp_bootstrap.adapters.base import ProcessLauncher
from mcp_bootstrap.core.models.config import ServerConfig
from mcp_bootstrap.core.models.port import PortAllocation
from mcp_bootstrap.core.services.configurator import ProvisionedEnv

logger = logging.getLogger(__name__)

# Shown in manual instructions when no port has been scanned
EXAMPLE_PORT = 8000


def base_command(server: ServerConfig, global_install: bool) -> list[str]:
    """Installed tool entry point, or the script inside the checkout."""
    return list(server.global_command if global_install else server.local_command)


def server_command(
    server: ServerConfig,
    global_install: bool,
    allocation: PortAllocation | None = None,
) -> list[str]:
    """Full argv for the server.

    In ``network`` mode no flags are passed. In ``stdio`` mode the port
    flags are added when an allocation is given.
    """
    argv = base_command(server, global_install)
    if server.mode == "network":
        return argv
    argv.append("--stdio")
    if allocation is not None:
        argv += ["--port", str(allocation.port), "--proxy-port", str(allocation.proxy_port)]
    return argv


def activation_command(platform: str, venv: str = ".venv") -> str:
    """Shell line that activates the project venv, for manual instructions."""
    if platform == "windows":
        return f"{venv}\\Scripts\\activate"
    return f"source {venv}/bin/activate"


def manual_command(server: ServerConfig, global_install: bool) -> list[str]:
    """Example command for the "start it yourself later" instructions."""
    return server_command(server, global_install, PortAllocation(port=EXAMPLE_PORT))


def launch(launcher: ProcessLauncher, argv: list[str], env: ProvisionedEnv) -> int:
    """Run the server in the foreground from the project directory."""
    logger.info("Launching server: %s", " ".join(argv))
    return launcher.replace(argv, cwd=str(env.project_dir), env_overrides=env.env_overrides)
