"""
CommandResult — the receipt for one external command.

Launchers run commands and return results. A non-zero exit code is
data, not an exception: the calling service decides whether it is
fatal, a warning, or expected.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class CommandResult(BaseModel):
    """Outcome of a single subprocess invocation."""

    argv: list[str] = Field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0
    error: str | None = None    # launch-level error (binary missing, OS error)

    @property
    def ok(self) -> bool:
        """Whether the command exited with status 0."""
        return self.returncode == 0 and self.error is None

    @property
    def failed(self) -> bool:
        return not self.ok

    @property
    def command_line(self) -> str:
        """The argv joined for display."""
        return " ".join(self.argv)

    def describe_failure(self) -> str:
        """Short human-readable reason for a failed command."""
        if self.error:
            return self.error
        detail = self.stderr.strip().splitlines()[-1] if self.stderr.strip() else ""
        base = f"'{self.command_line}' exited with code {self.returncode}"
        return f"{base}: {detail}" if detail else base

    @classmethod
    def success(cls, argv: list[str], stdout: str = "", **kwargs: Any) -> CommandResult:
        """Create a success result."""
        return cls(argv=list(argv), returncode=0, stdout=stdout, **kwargs)

    @classmethod
    def failure(
        cls,
        argv: list[str],
        returncode: int = 1,
        stderr: str = "",
        **kwargs: Any,
    ) -> CommandResult:
        """Create a failure result."""
        return cls(argv=list(argv), returncode=returncode, stderr=stderr, **kwargs)
