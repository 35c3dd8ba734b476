"""
Package models — what to install and what happened.

A PackageSpec names a command that must end up on the search path and,
per package manager, which packages provide it. An EnsureResult is the
resolver's answer, including the search path later steps must use.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PackageSpec(BaseModel):
    """Immutable description of one prerequisite.

    ``packages`` maps a package manager name (``apt``, ``brew``, ``uv``,
    ``script`` ...) to the package names to request from it. A missing
    key means the command cannot be installed through that manager.
    """

    model_config = ConfigDict(frozen=True)

    command: str
    packages: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    label: str = ""

    @field_validator("packages", mode="before")
    @classmethod
    def _split_package_names(cls, value: object) -> object:
        # "python3 python3-pip" is two packages; empty entries are dropped
        if not isinstance(value, dict):
            return value
        normalized: dict[str, tuple[str, ...]] = {}
        for manager, names in value.items():
            if isinstance(names, str):
                names = names.split()
            names = tuple(n for n in names if n)
            if names:
                normalized[manager] = names
        return normalized

    @property
    def display_name(self) -> str:
        return self.label or self.command

    def package_for(self, manager: str) -> tuple[str, ...] | None:
        """Packages to request from ``manager``, or None if unsupported."""
        return self.packages.get(manager)


EnsureStatus = Literal["already_present", "installed", "failed"]


class EnsureResult(BaseModel):
    """Outcome of ensuring a command is available."""

    command: str
    status: EnsureStatus
    search_path: str
    manager: str | None = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status != "failed"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def present(cls, command: str, search_path: str) -> EnsureResult:
        return cls(command=command, status="already_present", search_path=search_path)

    @classmethod
    def installed(cls, command: str, search_path: str, manager: str) -> EnsureResult:
        return cls(
            command=command,
            status="installed",
            search_path=search_path,
            manager=manager,
        )

    @classmethod
    def failure(
        cls,
        command: str,
        search_path: str,
        reason: str,
        manager: str | None = None,
    ) -> EnsureResult:
        return cls(
            command=command,
            status="failed",
            search_path=search_path,
            manager=manager,
            reason=reason,
        )
