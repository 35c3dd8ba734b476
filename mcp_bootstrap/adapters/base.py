"""
Capability interfaces — the contract between services and the host.

Services never call ``subprocess``, ``shutil.which``, sockets or
``input()`` directly. They receive these capabilities as constructor
or function arguments, so tests substitute the mocks in
``mcp_bootstrap.adapters.mock`` and assert call sequencing without
touching a real host.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from mcp_bootstrap.core.models.command import CommandResult


class CommandLocator(ABC):
    """Executable lookup against an explicit search path."""

    @abstractmethod
    def which(self, command: str, search_path: str) -> str | None:
        """Full path of ``command`` on ``search_path``, or None.

        Must never raise.
        """

    def exists(self, command: str, search_path: str) -> bool:
        return self.which(command, search_path) is not None


class ProcessLauncher(ABC):
    """Blocking execution of external commands.

    To create a new launcher:
        1. Subclass ProcessLauncher
        2. Implement run and replace
    """

    @abstractmethod
    def run(
        self,
        argv: list[str],
        *,
        cwd: str | None = None,
        env_overrides: dict[str, str] | None = None,
        capture: bool = False,
    ) -> CommandResult:
        """Run ``argv`` to completion and return its result.

        ``env_overrides`` are layered on top of the current environment;
        ``PATH`` in it is also used to resolve ``argv[0]``. With
        ``capture=False`` the child shares the terminal (installers may
        prompt for a sudo password).

        MUST never raise for a failing or missing command. Failures are
        captured in the CommandResult.
        """

    @abstractmethod
    def replace(
        self,
        argv: list[str],
        *,
        cwd: str | None = None,
        env_overrides: dict[str, str] | None = None,
    ) -> int:
        """Run a long-lived foreground process and return its exit code."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class PortProbe(ABC):
    """Local TCP port occupancy check."""

    @abstractmethod
    def is_in_use(self, port: int, host: str = "127.0.0.1") -> bool:
        """True if something accepts connections on ``host:port``."""


class Console(ABC):
    """Interactive terminal: progress messages and prompts."""

    @abstractmethod
    def info(self, message: str) -> None:
        """Report progress."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Report a recoverable problem."""

    @abstractmethod
    def confirm(self, question: str, default: bool = False) -> bool:
        """Ask a yes/no question."""

    @abstractmethod
    def secret(self, question: str) -> str:
        """Read a value without echoing it. May return an empty string."""

    @abstractmethod
    def pause(self, message: str) -> None:
        """Block until the user presses Enter."""
