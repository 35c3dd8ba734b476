"""
Tests for capability adapters — mocks, shell launcher, locator, port probe.
"""

import os
import socket
import sys
from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from mcp_bootstrap.adapters.mock import MockConsole, MockLauncher, MockLocator, MockPortProbe
from mcp_bootstrap.adapters.network.port import SocketPortProbe
from mcp_bootstrap.adapters.shell.command import NOT_FOUND_EXIT, PathLocator, SubprocessLauncher
from mcp_bootstrap.core.errors import UnsupportedPlatformError
from mcp_bootstrap.core.services.host import current_search_path, detect_platform, venv_bin_dir
from mcp_bootstrap.ui.cli.console import ClickConsole

# ── Mock Tests ───────────────────────────────────────────────────────


class TestMockLocator:
    def test_present_anywhere(self):
        loc = MockLocator(present=["git"])
        assert loc.exists("git", "")
        assert not loc.exists("uv", "")

    def test_directory_scoped(self):
        loc = MockLocator()
        loc.add("uv", directory="/home/u/.local/bin")
        assert not loc.exists("uv", "/usr/bin")
        assert loc.which("uv", os.pathsep.join(["/home/u/.local/bin", "/usr/bin"])) == os.path.join(
            "/home/u/.local/bin", "uv"
        )

    def test_remove(self):
        loc = MockLocator(present=["git"])
        loc.remove("git")
        assert not loc.exists("git", "")

    def test_call_log(self):
        loc = MockLocator()
        loc.which("curl", "/bin")
        assert loc.call_log == [("curl", "/bin")]


class TestMockLauncher:
    def test_default_success(self):
        mock = MockLauncher()
        result = mock.run(["echo", "hi"])
        assert result.ok
        assert mock.call_count == 1
        assert mock.commands == [["echo", "hi"]]

    def test_longest_prefix_wins(self):
        mock = MockLauncher()
        mock.set_failure(["uv"])
        mock.set_result(["uv", "sync"], stdout="synced")
        assert mock.run(["uv", "sync"]).stdout == "synced"
        assert mock.run(["uv", "venv"]).failed

    def test_effect_runs_only_on_success(self):
        mock = MockLauncher()
        seen = []
        mock.on_run(["apt", "install"], lambda call: seen.append(call.argv))
        mock.run(["apt", "install", "-y", "git"])
        mock.set_failure(["apt", "install"])
        mock.run(["apt", "install", "-y", "curl"])
        assert seen == [["apt", "install", "-y", "git"]]

    def test_replace_records_foreground_call(self):
        mock = MockLauncher(server_exit_code=3)
        assert mock.replace(["server"], cwd="/p") == 3
        assert mock.call_log[0].foreground
        assert mock.call_log[0].cwd == "/p"

    def test_ran(self):
        mock = MockLauncher()
        mock.run(["git", "clone", "url"])
        assert mock.ran(["git", "clone"])
        assert not mock.ran(["git", "pull"])

    def test_reset(self):
        mock = MockLauncher()
        mock.set_failure(["x"])
        mock.run(["x"])
        mock.reset()
        assert mock.call_count == 0
        assert mock.run(["x"]).ok


class TestMockConsole:
    def test_confirm_uses_script_then_default(self):
        console = MockConsole(confirms=[True])
        assert console.confirm("first?")
        assert not console.confirm("second?")
        assert console.confirm("third?", default=True)

    def test_secret_runs_out(self):
        console = MockConsole(secrets=["a"])
        assert console.secret("key") == "a"
        try:
            console.secret("key")
        except RuntimeError as e:
            assert "No scripted answer" in str(e)
        else:
            raise AssertionError("expected RuntimeError")


class TestMockPortProbe:
    def test_in_use(self):
        probe = MockPortProbe(in_use=[8000])
        assert probe.is_in_use(8000)
        assert not probe.is_in_use(8001)
        assert probe.probed == [8000, 8001]


# ── Real Adapter Tests ───────────────────────────────────────────────


class TestPathLocator:
    def test_finds_interpreter(self):
        directory = str(Path(sys.executable).parent)
        name = Path(sys.executable).name
        assert PathLocator().which(name, directory) is not None

    def test_missing(self, tmp_path: Path):
        assert PathLocator().which("definitely-not-a-command", str(tmp_path)) is None


class TestSubprocessLauncher:
    def test_capture_stdout(self, tmp_path: Path):
        result = SubprocessLauncher().run(
            [sys.executable, "-c", "print('hello world')"],
            cwd=str(tmp_path),
            capture=True,
        )
        assert result.ok
        assert result.stdout == "hello world"

    def test_failure_exit_code(self):
        result = SubprocessLauncher().run(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"],
            capture=True,
        )
        assert result.failed
        assert result.returncode == 3
        assert "boom" in result.describe_failure()

    def test_missing_command_does_not_raise(self, tmp_path: Path):
        result = SubprocessLauncher().run(
            ["definitely-not-a-command"],
            env_overrides={"PATH": str(tmp_path)},
        )
        assert result.failed
        assert result.returncode == NOT_FOUND_EXIT
        assert "not found" in result.error

    def test_resolves_program_on_overridden_path(self):
        directory = str(Path(sys.executable).parent)
        result = SubprocessLauncher().run(
            [Path(sys.executable).name, "-c", "import os; print(os.environ['MARKER'])"],
            env_overrides={"PATH": directory, "MARKER": "seen"},
            capture=True,
        )
        assert result.ok
        assert result.stdout == "seen"

    def test_empty_command(self):
        assert SubprocessLauncher().run([]).failed

    def test_replace_returns_exit_code(self, tmp_path: Path):
        code = SubprocessLauncher().replace(
            [sys.executable, "-c", "import sys; sys.exit(4)"],
            cwd=str(tmp_path),
        )
        assert code == 4


class TestSocketPortProbe:
    def test_listening_port_is_in_use(self):
        server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        server.bind(("127.0.0.1", 0))
        server.listen(1)
        port = server.getsockname()[1]
        try:
            assert SocketPortProbe().is_in_use(port)
        finally:
            server.close()

    def test_closed_port_is_free(self):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
        sock.close()
        assert not SocketPortProbe(timeout=0.2).is_in_use(port)


# ── Host Detection ───────────────────────────────────────────────


class TestHost:
    def test_platform_mapping(self):
        assert detect_platform("Linux") == "linux"
        assert detect_platform("Darwin") == "macos"
        assert detect_platform("Windows") == "windows"

    def test_unsupported_platform(self):
        with pytest.raises(UnsupportedPlatformError, match="FreeBSD"):
            detect_platform("FreeBSD")

    def test_search_path_from_environ(self):
        assert current_search_path({"PATH": "/x"}) == "/x"

    def test_venv_bin_dir(self):
        assert venv_bin_dir("/p/.venv", "linux") == os.path.join("/p/.venv", "bin")
        assert venv_bin_dir("/p/.venv", "windows") == os.path.join("/p/.venv", "Scripts")


# ── Click Console ────────────────────────────────────────────────


class TestClickConsole:
    def _run(self, fn, input=None):
        @click.command()
        def cmd():
            fn()

        return CliRunner().invoke(cmd, [], input=input)

    def test_info_and_warning(self):
        def fn():
            console = ClickConsole()
            console.info("hello")
            console.warning("careful")

        result = self._run(fn)
        assert "INFO: hello" in result.output
        assert "WARNING: careful" in result.output

    def test_quiet_hides_info(self):
        def fn():
            console = ClickConsole(quiet=True)
            console.info("hello")
            console.warning("careful")

        result = self._run(fn)
        assert "hello" not in result.output
        assert "careful" in result.output

    def test_secret_returns_empty_on_blank_line(self):
        answers = []
        result = self._run(lambda: answers.append(ClickConsole().secret("Key")), input="\n")
        assert result.exit_code == 0
        assert answers == [""]

    def test_nothing_on_stdout(self):
        def fn():
            console = ClickConsole(quiet=True)
            console.info("hello")
            console.warning("careful")

        result = self._run(fn)
        assert result.stdout == ""
        assert "WARNING: careful" in result.stderr
