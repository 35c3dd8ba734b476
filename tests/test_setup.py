"""
Tests for the check and setup use cases, driven entirely through mocks.
"""

import os
from pathlib import Path

import pytest

from mcp_bootstrap.adapters.mock import MockConsole, MockLauncher, MockLocator, MockPortProbe
from mcp_bootstrap.adapters.package_managers import uv_tool_bin_dir
from mcp_bootstrap.core.models.config import BootstrapConfig
from mcp_bootstrap.core.services.launcher import activation_command
from mcp_bootstrap.core.use_cases.check import Host, run_check
from mcp_bootstrap.core.use_cases.setup import run_setup

SEARCH_PATH = os.pathsep.join(["/usr/local/bin", "/usr/bin", "/bin"])
LINUX_TOOLS = ["apt", "curl", "git", "gcc", "python3", "pip3", "uv", "mcp-proxy", "sh"]


def make_host(locator, launcher, console, in_use=()):
    return Host(locator=locator, launcher=launcher, probe=MockPortProbe(in_use=in_use), console=console)


def _linux_host(console=None, in_use=(), present=LINUX_TOOLS, server_exit_code=0):
    locator = MockLocator(present)
    launcher = MockLauncher(server_exit_code=server_exit_code)
    launcher.set_result(["python3", "--version"], stdout="Python 3.12.3")
    # git clone creates the project directory
    launcher.on_run(
        ["git", "clone"],
        lambda call: (Path(call.cwd) / "brower-use-mcp").mkdir(),
    )
    return make_host(locator, launcher, console or MockConsole(), in_use=in_use)


# ── Check ───────────────────────────────────────────────────────


class TestRunCheck:
    def test_everything_present(self):
        host = _linux_host()
        report = run_check(BootstrapConfig(), host, "linux", SEARCH_PATH)

        assert report.ok
        assert report.package_manager == "apt"
        names = [s.name for s in report.steps]
        assert names == ["curl", "git", "build tools", "python", "pip3", "uv", "mcp-proxy"]
        # Only the version probe ran
        assert host.launcher.commands == [["python3", "--version"]]

    def test_idempotent(self):
        host = _linux_host()
        run_check(BootstrapConfig(), host, "linux", SEARCH_PATH)
        first = host.launcher.call_count
        run_check(BootstrapConfig(), host, "linux", SEARCH_PATH)
        assert host.launcher.call_count == 2 * first

    def test_uv_installed_by_script_reaches_later_steps(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        local_bin = str(tmp_path / ".local" / "bin")
        present = [t for t in LINUX_TOOLS if t not in ("uv", "mcp-proxy")]
        host = _linux_host(present=present)
        host.launcher.on_run(["sh", "-c"], lambda call: host.locator.add("uv", directory=local_bin))
        host.launcher.on_run(["uv", "tool", "install"], lambda call: host.locator.add("mcp-proxy"))

        report = run_check(BootstrapConfig(), host, "linux", SEARCH_PATH)

        assert report.ok, report.error
        assert report.step("uv").metadata["manager"] == "script"
        assert report.step("mcp-proxy").metadata["manager"] == "uv"
        assert report.search_path.split(os.pathsep)[0] == local_bin
        uv_call = next(c for c in host.launcher.call_log if c.argv[:2] == ["uv", "tool"])
        assert uv_call.env_overrides["PATH"].split(os.pathsep)[0] == local_bin

    def test_unknown_manager_warns_and_skips_build_tools(self):
        present = [t for t in LINUX_TOOLS if t != "apt"]
        console = MockConsole()
        host = _linux_host(console=console, present=present)

        report = run_check(BootstrapConfig(), host, "linux", SEARCH_PATH)

        assert report.ok
        assert report.package_manager is None
        assert report.step("build tools").status == "skipped"
        assert any("Could not detect a known package manager" in w for w in console.warnings)

    def test_missing_tool_stops_run(self):
        present = [t for t in LINUX_TOOLS if t != "git"]
        host = _linux_host(present=present)
        host.launcher.set_failure(["apt", "install"], returncode=100)

        report = run_check(BootstrapConfig(), host, "linux", SEARCH_PATH)

        assert not report.ok
        assert "git" in report.error
        assert report.step("python") is None

    def test_macos_flow(self):
        console = MockConsole()
        locator = MockLocator(["brew", "git", "python3", "uv", "mcp-proxy"])
        launcher = MockLauncher()
        launcher.set_result(["python3", "--version"], stdout="Python 3.11.8")
        host = make_host(locator, launcher, console)

        report = run_check(BootstrapConfig(), host, "macos", SEARCH_PATH)

        assert report.ok, report.error
        assert report.step("homebrew").detail == "present"
        assert report.step("xcode command line tools").detail == "present"
        assert report.step("pip3") is None
        assert launcher.ran(["xcode-select", "-p"])

    def test_macos_homebrew_declined(self):
        console = MockConsole(confirms=[False])
        locator = MockLocator(["git", "python3", "uv", "mcp-proxy"])
        launcher = MockLauncher()
        launcher.set_result(["python3", "--version"], stdout="Python 3.11.8")
        host = make_host(locator, launcher, console)

        report = run_check(BootstrapConfig(), host, "macos", SEARCH_PATH)

        assert report.ok
        assert report.step("homebrew").status == "skipped"
        assert not launcher.ran(["/bin/bash"])

    def test_macos_homebrew_installed(self):
        console = MockConsole(confirms=[True])
        locator = MockLocator(["git", "python3", "uv", "mcp-proxy"])
        launcher = MockLauncher()
        launcher.set_result(["python3", "--version"], stdout="Python 3.11.8")
        launcher.on_run(["/bin/bash"], lambda call: locator.add("brew", directory="/opt/homebrew/bin"))
        host = make_host(locator, launcher, console)

        report = run_check(BootstrapConfig(), host, "macos", SEARCH_PATH)

        assert report.ok
        assert report.package_manager == "brew"
        assert report.search_path.startswith("/opt/homebrew/bin")

    def test_macos_xcode_missing_pauses(self):
        console = MockConsole()
        locator = MockLocator(["brew", "git", "python3", "uv", "mcp-proxy"])
        launcher = MockLauncher()
        launcher.set_result(["python3", "--version"], stdout="Python 3.11.8")
        launcher.set_failure(["xcode-select", "-p"], returncode=2)
        launcher.set_failure(["xcode-select", "--install"])
        host = make_host(locator, launcher, console)

        report = run_check(BootstrapConfig(), host, "macos", SEARCH_PATH)

        assert report.ok
        assert report.step("xcode command line tools").detail == "requested"
        assert len(console.pauses) == 1


# ── Setup ───────────────────────────────────────────────────────


class TestRunSetup:
    def test_full_run_without_launch(self, tmp_path: Path):
        host = _linux_host()
        report = run_setup(
            BootstrapConfig(),
            host,
            "linux",
            SEARCH_PATH,
            tmp_path,
            api_key="sk-test",
            install_global=False,
            start_server=False,
        )

        assert report.ok, report.error
        project = tmp_path / "brower-use-mcp"
        assert report.project_dir == str(project)
        assert (project / ".env").read_text().startswith("OPENAI_API_KEY=sk-test\n")
        assert report.step("clone").status == "ok"
        assert report.step("global install").status == "skipped"
        assert report.step("launch").status == "skipped"
        assert report.run_command == [
            "python", "server/server.py", "--stdio", "--port", "8000", "--proxy-port", "8001",
        ]
        assert "  source .venv/bin/activate" in host.console.infos
        activate = host.console.infos.index("  source .venv/bin/activate")
        assert host.console.infos[activate + 1].startswith("  python server/server.py --stdio")
        assert not any(call.foreground for call in host.launcher.call_log)

    def test_prompts_when_choices_unset(self, tmp_path: Path):
        console = MockConsole(secrets=["sk-typed"])
        host = _linux_host(console=console)

        report = run_setup(BootstrapConfig(), host, "linux", SEARCH_PATH, tmp_path)

        assert report.ok
        # secret, global install, start server
        assert len(console.questions) == 3
        assert report.step("launch").status == "skipped"

    def test_launch_on_next_free_port(self, tmp_path: Path):
        host = _linux_host(in_use=[8000], server_exit_code=0)
        report = run_setup(
            BootstrapConfig(),
            host,
            "linux",
            SEARCH_PATH,
            tmp_path,
            api_key="sk-test",
            install_global=False,
            start_server=True,
        )

        assert report.ok, report.error
        server = host.launcher.call_log[-1]
        assert server.foreground
        assert server.argv == [
            "python", "server/server.py", "--stdio", "--port", "8001", "--proxy-port", "8002",
        ]
        assert server.cwd == str(tmp_path / "brower-use-mcp")
        assert server.env_overrides["VIRTUAL_ENV"] == str(tmp_path / "brower-use-mcp" / ".venv")
        assert report.step("launch").metadata == {"port": 8001, "proxy_port": 8002}
        assert report.server_exit_code == 0

    def test_global_launch(self, tmp_path: Path):
        host = _linux_host()

        def build(call):
            dist = Path(call.cwd) / "dist"
            dist.mkdir()
            (dist / "demcp_browser_mcp-0.1.0-py3-none-any.whl").write_text("")

        host.launcher.on_run(["uv", "build"], build)

        report = run_setup(
            BootstrapConfig(),
            host,
            "linux",
            SEARCH_PATH,
            tmp_path,
            api_key="sk-test",
            install_global=True,
            start_server=True,
        )

        assert report.ok, report.error
        assert report.step("global install").status == "ok"
        assert host.launcher.call_log[-1].argv[:3] == ["demcp_browser_mcp", "run", "server"]
        server_path = host.launcher.call_log[-1].env_overrides["PATH"]
        assert server_path.split(os.pathsep)[0] == uv_tool_bin_dir()

    def test_network_mode_has_no_flags(self, tmp_path: Path):
        config = BootstrapConfig.model_validate({"server": {"mode": "network"}})
        host = _linux_host()
        report = run_setup(
            config, host, "linux", SEARCH_PATH, tmp_path,
            api_key="sk-test", install_global=False, start_server=True,
        )
        assert report.ok
        assert host.launcher.call_log[-1].argv == ["python", "server/server.py"]
        assert host.probe.probed == []

    def test_second_run_reuses_checkout(self, tmp_path: Path):
        host = _linux_host()
        kwargs = dict(api_key="sk-test", install_global=False, start_server=False)
        run_setup(BootstrapConfig(), host, "linux", SEARCH_PATH, tmp_path, **kwargs)
        host.launcher.reset()
        host.launcher.set_result(["python3", "--version"], stdout="Python 3.12.3")

        report = run_setup(BootstrapConfig(), host, "linux", SEARCH_PATH, tmp_path, **kwargs)

        assert report.ok
        assert report.step("clone").status == "skipped"
        assert not host.launcher.ran(["git", "clone"])
        assert host.launcher.ran(["uv", "sync"])

    def test_ports_exhausted(self, tmp_path: Path):
        host = _linux_host(in_use=range(8000, 9001))
        report = run_setup(
            BootstrapConfig(), host, "linux", SEARCH_PATH, tmp_path,
            api_key="sk-test", install_global=False, start_server=True,
        )
        assert not report.ok
        assert "available port" in report.error
        assert not any(call.foreground for call in host.launcher.call_log)

    @pytest.mark.parametrize("prefix", [["git", "clone"], ["uv", "sync"]])
    def test_fatal_step_stops_run(self, tmp_path: Path, prefix):
        host = _linux_host()
        host.launcher.set_failure(prefix)
        report = run_setup(
            BootstrapConfig(), host, "linux", SEARCH_PATH, tmp_path,
            api_key="sk-test", install_global=False, start_server=True,
        )
        assert not report.ok
        assert report.step("env file") is None
        assert report.step("launch") is None

    def test_bare_host_fails_on_first_tool(self, config, host, search_path):
        report = run_check(config, host, "linux", search_path)

        assert not report.ok
        assert report.package_manager is None
        assert "curl" in report.error
        assert host.launcher.call_count == 0


class TestActivationCommand:
    def test_posix(self):
        assert activation_command("linux") == "source .venv/bin/activate"
        assert activation_command("macos") == "source .venv/bin/activate"

    def test_windows(self):
        assert activation_command("windows") == r".venv\Scripts\activate"
