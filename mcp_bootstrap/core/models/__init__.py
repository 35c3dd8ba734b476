"""
Domain models — Pydantic types for the bootstrap run.

All models are re-exported here for convenient access:

    from mcp_bootstrap.core.models import PackageSpec, EnsureResult, EnvFile
"""

from mcp_bootstrap.core.models.command import CommandResult
from mcp_bootstrap.core.models.config import (
    BootstrapConfig,
    EnvConfig,
    PlaywrightConfig,
    PortsConfig,
    PythonConfig,
    RepositoryConfig,
    ServerConfig,
)
from mcp_bootstrap.core.models.env_file import EnvFile
from mcp_bootstrap.core.models.package import EnsureResult, PackageSpec
from mcp_bootstrap.core.models.port import PortAllocation, PortRange
from mcp_bootstrap.core.models.report import SetupReport, StepRecord

__all__ = [
    # config.py
    "BootstrapConfig",
    # command.py
    "CommandResult",
    "EnsureResult",
    "EnvConfig",
    # env_file.py
    "EnvFile",
    # package.py
    "PackageSpec",
    "PlaywrightConfig",
    # port.py
    "PortAllocation",
    "PortRange",
    "PortsConfig",
    "PythonConfig",
    "RepositoryConfig",
    "ServerConfig",
    # report.py
    "SetupReport",
    "StepRecord",
]
