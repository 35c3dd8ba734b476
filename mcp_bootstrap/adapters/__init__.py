"""Adapters — host capabilities (processes, executables, ports, terminal).

Public re-exports for convenient access.
"""

from mcp_bootstrap.adapters.base import CommandLocator, Console, PortProbe, ProcessLauncher
from mcp_bootstrap.adapters.mock import (
    MockConsole,
    MockLauncher,
    MockLocator,
    MockPortProbe,
)

__all__ = [
    "CommandLocator",
    "Console",
    "MockConsole",
    "MockLauncher",
    "MockLocator",
    "MockPortProbe",
    "PortProbe",
    "ProcessLauncher",
]
