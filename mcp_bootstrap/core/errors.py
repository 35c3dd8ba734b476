"""
Fatal error taxonomy for the bootstrap run.

Every error here terminates the whole run. Nothing is rolled back:
re-running after fixing the root cause skips the steps that already
left evidence behind (installed tools, existing clone directory).
"""

from __future__ import annotations


class BootstrapError(Exception):
    """Base class for unrecoverable bootstrap failures.

    ``hint`` is an optional manual-remediation line shown under the
    error message by the CLI.
    """

    def __init__(self, message: str, hint: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def to_dict(self) -> dict:
        result = {"error": self.message, "kind": self.__class__.__name__}
        if self.hint:
            result["hint"] = self.hint
        return result


class MissingToolError(BootstrapError):
    """A command is absent and no installer path can provide it."""


class InstallerError(BootstrapError):
    """An installer ran but failed, or the tool is still absent afterwards."""


class VersionTooOldError(InstallerError):
    """A tool is present but below the required version, even after upgrading."""


class PortExhaustedError(BootstrapError):
    """No free TCP port was found in the scanned range."""


class UnsupportedPlatformError(BootstrapError):
    """The host OS is not one the installers know how to handle."""
