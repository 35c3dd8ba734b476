"""
Bootstrap configuration model — loaded from bootstrap.yml.

Every field has a default, so a missing file means "bootstrap the
browser MCP server the standard way". The file only exists to point
the run at a fork, a different port window, or another server mode.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from mcp_bootstrap.core.models.port import MAX_SERVER_PORT

DEFAULT_REPO_URL = "https://github.com/demcp/brower-use-mcp"


class RepositoryConfig(BaseModel):
    """The external repository holding the server."""

    url: str = DEFAULT_REPO_URL

    @property
    def directory_name(self) -> str:
        """Clone directory: URL basename without a trailing ``.git``."""
        name = self.url.rstrip("/").rsplit("/", 1)[-1]
        return name[: -len(".git")] if name.endswith(".git") else name


class PythonConfig(BaseModel):
    """Minimum interpreter version for the server's environment."""

    min_version: str = "3.11"
    candidates: list[str] = Field(default_factory=lambda: ["python3", "python"])

    @field_validator("min_version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        if not re.fullmatch(r"\d+\.\d+", value.strip()):
            raise ValueError(f"min_version must look like '3.11', got {value!r}")
        return value.strip()

    @property
    def minimum(self) -> tuple[int, int]:
        major, minor = self.min_version.split(".")
        return int(major), int(minor)


class ServerConfig(BaseModel):
    """How the downstream server is built, installed and started."""

    package_name: str = "demcp_browser_mcp"
    global_command: list[str] = Field(
        default_factory=lambda: ["demcp_browser_mcp", "run", "server"]
    )
    local_command: list[str] = Field(
        default_factory=lambda: ["python", "server/server.py"]
    )
    mode: Literal["stdio", "network"] = "stdio"
    dist_dir: str = "dist"


class PortsConfig(BaseModel):
    """Port scan window: ``start`` through ``start + span`` inclusive."""

    start: int = Field(default=8000, ge=1, le=MAX_SERVER_PORT)
    span: int = Field(default=1000, ge=0)

    @property
    def ceiling(self) -> int:
        return min(self.start + self.span, MAX_SERVER_PORT)


class EnvConfig(BaseModel):
    """The secrets file written into the project directory."""

    file: str = ".env"
    required_key: str = "OPENAI_API_KEY"
    prompt: str = "Please enter your OpenAI API Key"
    optional: dict[str, str] = Field(
        default_factory=lambda: {
            "OPENAI_MODEL": "gpt-4o",
            "OPENAI_API_BASE": "your_custom_openai_api_base_url",
        }
    )


class PlaywrightConfig(BaseModel):
    package: str = "playwright"
    browser: str = "chromium"


class BootstrapConfig(BaseModel):
    """Root configuration for a bootstrap run."""

    version: int = 1

    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    python: PythonConfig = Field(default_factory=PythonConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    ports: PortsConfig = Field(default_factory=PortsConfig)
    env: EnvConfig = Field(default_factory=EnvConfig)
    playwright: PlaywrightConfig = Field(default_factory=PlaywrightConfig)
