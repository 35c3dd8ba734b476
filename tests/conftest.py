"""
Shared test fixtures and configuration.
"""

import logging
import os

import pytest

from mcp_bootstrap.adapters.mock import MockConsole, MockLauncher, MockLocator, MockPortProbe
from mcp_bootstrap.core.models.config import BootstrapConfig
from mcp_bootstrap.core.use_cases.check import Host


@pytest.fixture
def search_path() -> str:
    """A fixed search path; mocks never look at the real one."""
    return os.pathsep.join(["/usr/local/bin", "/usr/bin", "/bin"])


@pytest.fixture
def config() -> BootstrapConfig:
    return BootstrapConfig()


@pytest.fixture
def host() -> Host:
    """Host with no tools installed and every command succeeding."""
    return Host(
        locator=MockLocator(),
        launcher=MockLauncher(),
        probe=MockPortProbe(),
        console=MockConsole(),
    )


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging() replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
