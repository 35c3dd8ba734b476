"""
Setup report — what each step of a bootstrap run did.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

StepStatus = Literal["ok", "skipped", "failed"]


@dataclass
class StepRecord:
    """One step of the run (a prerequisite, the clone, the env file ...)."""

    name: str
    status: StepStatus = "ok"
    detail: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        result: dict = {"name": self.name, "status": self.status}
        if self.detail:
            result["detail"] = self.detail
        if self.metadata:
            result["metadata"] = self.metadata
        return result


@dataclass
class SetupReport:
    """Result of a bootstrap run."""

    platform: str = ""
    package_manager: str | None = None
    steps: list[StepRecord] = field(default_factory=list)
    project_dir: str | None = None
    search_path: str = ""
    run_command: list[str] = field(default_factory=list)
    server_exit_code: int | None = None
    error: str | None = None
    hint: str = ""

    def record(
        self,
        name: str,
        status: StepStatus = "ok",
        detail: str = "",
        **metadata: Any,
    ) -> StepRecord:
        step = StepRecord(name=name, status=status, detail=detail, metadata=metadata)
        self.steps.append(step)
        return step

    def step(self, name: str) -> StepRecord | None:
        """Most recent record for ``name``."""
        for step in reversed(self.steps):
            if step.name == name:
                return step
        return None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {
            "ok": self.ok,
            "platform": self.platform,
            "package_manager": self.package_manager,
            "steps": [s.to_dict() for s in self.steps],
        }
        if self.project_dir:
            result["project_dir"] = self.project_dir
        if self.run_command:
            result["run_command"] = self.run_command
        if self.server_exit_code is not None:
            result["server_exit_code"] = self.server_exit_code
        if self.error:
            result["error"] = self.error
            if self.hint:
                result["hint"] = self.hint
        return result
