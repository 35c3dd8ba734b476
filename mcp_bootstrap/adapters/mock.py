"""
Mock capabilities — test doubles for every host interaction.

Used by the test suite to exercise services without touching the host.
Each mock records what it was asked to do, and can be scripted with
results and side effects.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from mcp_bootstrap.adapters.base import CommandLocator, Console, PortProbe, ProcessLauncher
from mcp_bootstrap.core.models.command import CommandResult


class MockLocator(CommandLocator):
    """Command lookup against an in-memory set of executables.

    Commands added without a directory are found on any search path.
    Commands added with a directory are found only when that directory
    is part of the search path, which lets tests check that search-path
    updates are threaded through correctly.
    """

    def __init__(self, present: Iterable[str] = ()):
        self._anywhere: set[str] = set(present)
        self._by_dir: dict[str, set[str]] = {}
        self._call_log: list[tuple[str, str]] = []

    @property
    def call_log(self) -> list[tuple[str, str]]:
        """All (command, search_path) lookups received."""
        return self._call_log

    def add(self, command: str, directory: str | None = None) -> None:
        if directory is None:
            self._anywhere.add(command)
        else:
            self._by_dir.setdefault(directory, set()).add(command)

    def remove(self, command: str) -> None:
        self._anywhere.discard(command)
        for commands in self._by_dir.values():
            commands.discard(command)

    def which(self, command: str, search_path: str) -> str | None:
        self._call_log.append((command, search_path))
        if command in self._anywhere:
            return f"/usr/bin/{command}"
        for directory in search_path.split(os.pathsep):
            if command in self._by_dir.get(directory, set()):
                return os.path.join(directory, command)
        return None


@dataclass
class MockCall:
    """One recorded ProcessLauncher invocation."""

    argv: list[str]
    cwd: str | None = None
    env_overrides: dict[str, str] = field(default_factory=dict)
    capture: bool = False
    foreground: bool = False


class MockLauncher(ProcessLauncher):
    """Scripted process launcher.

    By default every command succeeds with empty output. Rules match on
    an argv prefix; the longest matching prefix wins, and among equally
    long prefixes the rule added last wins.
    """

    def __init__(self, default_returncode: int = 0, server_exit_code: int = 0):
        self._default_returncode = default_returncode
        self._server_exit_code = server_exit_code
        self._rules: list[tuple[list[str], CommandResult | None, Callable[[MockCall], None] | None]] = []
        self._call_log: list[MockCall] = []

    @property
    def call_log(self) -> list[MockCall]:
        return self._call_log

    @property
    def commands(self) -> list[list[str]]:
        """Just the argv of every call, in order."""
        return [call.argv for call in self._call_log]

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_result(
        self,
        prefix: list[str],
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        """Return a fixed result for commands starting with ``prefix``."""
        result = CommandResult(argv=prefix, returncode=returncode, stdout=stdout, stderr=stderr)
        self._rules.append((list(prefix), result, None))

    def set_failure(self, prefix: list[str], returncode: int = 1, stderr: str = "mock failure") -> None:
        self.set_result(prefix, returncode=returncode, stderr=stderr)

    def on_run(self, prefix: list[str], effect: Callable[[MockCall], None]) -> None:
        """Call ``effect`` when a command starting with ``prefix`` runs."""
        self._rules.append((list(prefix), None, effect))

    def ran(self, prefix: list[str]) -> bool:
        """Whether any recorded command starts with ``prefix``."""
        return any(argv[: len(prefix)] == prefix for argv in self.commands)

    def _match(self, argv: list[str]):
        best_result: CommandResult | None = None
        best_len = -1
        effects = []
        for prefix, result, effect in self._rules:
            if argv[: len(prefix)] != prefix:
                continue
            if effect is not None:
                effects.append(effect)
            if result is not None and len(prefix) >= best_len:
                best_result, best_len = result, len(prefix)
        return best_result, effects

    def run(
        self,
        argv: list[str],
        *,
        cwd: str | None = None,
        env_overrides: dict[str, str] | None = None,
        capture: bool = False,
    ) -> CommandResult:
        call = MockCall(
            argv=list(argv),
            cwd=cwd,
            env_overrides=dict(env_overrides or {}),
            capture=capture,
        )
        self._call_log.append(call)

        scripted, effects = self._match(list(argv))
        if scripted is None or scripted.ok:
            for effect in effects:
                effect(call)

        if scripted is not None:
            return scripted.model_copy(update={"argv": list(argv)})
        return CommandResult(argv=list(argv), returncode=self._default_returncode)

    def replace(
        self,
        argv: list[str],
        *,
        cwd: str | None = None,
        env_overrides: dict[str, str] | None = None,
    ) -> int:
        self._call_log.append(
            MockCall(
                argv=list(argv),
                cwd=cwd,
                env_overrides=dict(env_overrides or {}),
                foreground=True,
            )
        )
        return self._server_exit_code

    def reset(self) -> None:
        """Clear call log and scripted rules."""
        self._call_log.clear()
        self._rules.clear()


class MockPortProbe(PortProbe):
    """Port probe with a fixed set of occupied ports."""

    def __init__(self, in_use: Iterable[int] = ()):
        self.in_use = set(in_use)
        self.probed: list[int] = []

    def is_in_use(self, port: int, host: str = "127.0.0.1") -> bool:
        self.probed.append(port)
        return port in self.in_use


class MockConsole(Console):
    """Console with scripted answers.

    ``confirms`` and ``secrets`` are consumed in order. When ``confirms``
    runs out the question's default is used. Running out of ``secrets``
    raises, so a broken prompt loop fails the test instead of spinning.
    """

    def __init__(
        self,
        confirms: Iterable[bool] = (),
        secrets: Iterable[str] = (),
    ):
        self._confirms = list(confirms)
        self._secrets = list(secrets)
        self.infos: list[str] = []
        self.warnings: list[str] = []
        self.questions: list[str] = []
        self.pauses: list[str] = []

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def confirm(self, question: str, default: bool = False) -> bool:
        self.questions.append(question)
        if self._confirms:
            return self._confirms.pop(0)
        return default

    def secret(self, question: str) -> str:
        self.questions.append(question)
        if not self._secrets:
            raise RuntimeError(f"No scripted answer left for secret prompt: {question}")
        return self._secrets.pop(0)

    def pause(self, message: str) -> None:
        self.pauses.append(message)
