"""
Shell adapters — run external commands and look up executables.

This is the only module that calls ``subprocess`` and ``shutil.which``.
Every installer, git clone, uv invocation and server launch in the run
goes through it.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time

from mcp_bootstrap.adapters.base import CommandLocator, ProcessLauncher
from mcp_bootstrap.core.models.command import CommandResult

logger = logging.getLogger(__name__)

# Exit status shells use for "command not found"
NOT_FOUND_EXIT = 127


class PathLocator(CommandLocator):
    """Executable lookup backed by ``shutil.which``."""

    def which(self, command: str, search_path: str) -> str | None:
        try:
            return shutil.which(command, path=search_path or None)
        except OSError:
            return None


class SubprocessLauncher(ProcessLauncher):
    """Run commands with ``subprocess.run``.

    Args:
        timeout: Optional per-command timeout in seconds. None (default)
            blocks until the command finishes or the user interrupts.
    """

    def __init__(self, timeout: int | None = None):
        self._timeout = timeout

    def _environment(self, env_overrides: dict[str, str] | None) -> dict[str, str]:
        env = os.environ.copy()
        if env_overrides:
            env.update(env_overrides)
        return env

    def _resolve(self, argv: list[str], env: dict[str, str]) -> str | None:
        # argv[0] must be found on the *overridden* PATH, not the parent's
        program = argv[0]
        if os.sep in program or (os.altsep and os.altsep in program):
            return program if os.path.exists(program) else None
        return shutil.which(program, path=env.get("PATH"))

    def run(
        self,
        argv: list[str],
        *,
        cwd: str | None = None,
        env_overrides: dict[str, str] | None = None,
        capture: bool = False,
    ) -> CommandResult:
        if not argv:
            return CommandResult.failure(argv, error="Empty command")

        env = self._environment(env_overrides)
        program = self._resolve(argv, env)
        if program is None:
            return CommandResult.failure(
                argv,
                returncode=NOT_FOUND_EXIT,
                error=f"Command not found: {argv[0]}",
            )

        logger.debug("Executing: %s (cwd=%s)", " ".join(argv), cwd or ".")
        start = time.monotonic()

        try:
            result = subprocess.run(
                [program, *argv[1:]],
                cwd=cwd,
                env=env,
                capture_output=capture,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            return CommandResult.failure(
                argv,
                error=f"Command timed out after {self._timeout}s",
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        except OSError as e:
            return CommandResult.failure(
                argv,
                error=f"Command execution error: {e}",
                duration_ms=int((time.monotonic() - start) * 1000),
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("Exit %d after %dms: %s", result.returncode, elapsed_ms, argv[0])

        return CommandResult(
            argv=list(argv),
            returncode=result.returncode,
            stdout=(result.stdout or "").strip() if capture else "",
            stderr=(result.stderr or "").strip() if capture else "",
            duration_ms=elapsed_ms,
        )

    def replace(
        self,
        argv: list[str],
        *,
        cwd: str | None = None,
        env_overrides: dict[str, str] | None = None,
    ) -> int:
        env = self._environment(env_overrides)
        program = self._resolve(argv, env) if argv else None
        if program is None:
            logger.error("Cannot start server, command not found: %s", argv[:1])
            return NOT_FOUND_EXIT

        logger.info("Starting: %s (cwd=%s)", " ".join(argv), cwd or ".")
        try:
            return subprocess.run([program, *argv[1:]], cwd=cwd, env=env).returncode
        except KeyboardInterrupt:
            # Ctrl+C is the normal way to stop the server
            return 130
