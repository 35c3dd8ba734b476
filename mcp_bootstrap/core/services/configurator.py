"""
Environment configurator — clone, provision, configure, optionally install.

All steps are idempotent by presence at best: an existing clone
directory is reused as-is (never pulled), and the ``.env`` file is
rewritten from scratch on every run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from mcp_bootstrap.adapters.base import Console, ProcessLauncher
from mcp_bootstrap.adapters.package_managers import prepend_path, uv_tool_bin_dir
from mcp_bootstrap.core.errors import InstallerError
from mcp_bootstrap.core.models.config import BootstrapConfig
from mcp_bootstrap.core.models.env_file import EnvFile
from mcp_bootstrap.core.services.host import venv_bin_dir

logger = logging.getLogger(__name__)

# Typical Chrome locations, documented (commented out) in the env file
CHROME_PATHS = {
    "macos": "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
    "linux": "/usr/bin/google-chrome-stable",
    "windows": r"C:\Program Files\Google\Chrome\Application\chrome.exe",
}


@dataclass
class ProvisionedEnv:
    """The project directory and the environment every later command runs in."""

    project_dir: Path
    venv_dir: Path
    search_path: str

    @property
    def env_overrides(self) -> dict[str, str]:
        return {"PATH": self.search_path, "VIRTUAL_ENV": str(self.venv_dir)}


class EnvironmentConfigurator:
    """Turns a bare checkout location into a configured server project.

    Args:
        config: Bootstrap configuration (repository, env file, server).
        launcher: Process execution capability.
        console: Interactive terminal capability.
        platform: ``linux``, ``macos`` or ``windows``.
        home: Home directory holding the uv tool bin dir (default: the user's).
    """

    def __init__(
        self,
        config: BootstrapConfig,
        launcher: ProcessLauncher,
        console: Console,
        platform: str = "linux",
        home: Path | None = None,
    ):
        self.config = config
        self._launcher = launcher
        self._console = console
        self._platform = platform
        self._home = home

    def _run_or_fail(
        self,
        argv: list[str],
        message: str,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        hint: str = "",
    ) -> None:
        result = self._launcher.run(argv, cwd=str(cwd) if cwd else None, env_overrides=env)
        if result.failed:
            logger.debug("Fatal step failed: %s", result.describe_failure())
            raise InstallerError(message, hint=hint)

    # ── Clone ───────────────────────────────────────────────────

    def project_dir(self, workdir: Path) -> Path:
        return workdir / self.config.repository.directory_name

    def clone(self, workdir: Path, search_path: str) -> tuple[Path, bool]:
        """Clone the repository into ``workdir`` unless its directory exists.

        Returns:
            ``(project_dir, cloned)``. ``cloned`` is False when skipped.
        """
        url = self.config.repository.url
        target = self.project_dir(workdir)
        self._console.info(f"Using hardcoded repository URL: {url}")

        if target.is_dir():
            self._console.warning(f"Directory '{target.name}' already exists. Skipping git clone.")
            return target, False

        self._console.info(f"Cloning repository {url}...")
        self._run_or_fail(
            ["git", "clone", url],
            "Failed to clone repository.",
            cwd=workdir,
            env={"PATH": search_path},
            hint="Please check the URL and your network connection.",
        )
        return target, True

    # ── Dependencies ────────────────────────────────────────────

    def provision(self, project_dir: Path, search_path: str) -> ProvisionedEnv:
        """Create the venv and install the project, Playwright and its browser."""
        env = {"PATH": search_path}
        self._console.info("Setting up Python virtual environment using uv...")
        self._run_or_fail(["uv", "venv"], "Failed to create virtual environment.", project_dir, env)

        # Equivalent of activating the venv, but explicit
        venv_dir = project_dir / ".venv"
        provisioned = ProvisionedEnv(
            project_dir=project_dir,
            venv_dir=venv_dir,
            search_path=prepend_path(search_path, [venv_bin_dir(str(venv_dir), self._platform)]),
        )
        env = provisioned.env_overrides

        self._console.info("Running 'uv sync' to install Python dependencies...")
        self._run_or_fail(
            ["uv", "sync"],
            "Failed to install Python dependencies with 'uv sync'.",
            project_dir,
            env,
        )

        pw = self.config.playwright
        self._console.info("Installing Playwright library...")
        result = self._launcher.run(["uv", "pip", "install", pw.package], cwd=str(project_dir), env_overrides=env)
        if result.failed:
            self._console.warning("Failed to install Playwright library (might already be installed).")

        self._console.info(f"Installing Playwright browser dependencies ({pw.browser})...")
        if self._platform == "linux":
            self._console.warning("Playwright will now attempt to install system dependencies. This might fail.")
        self._run_or_fail(
            ["uv", "run", "playwright", "install", "--with-deps", "--no-shell", pw.browser],
            "Failed to install Playwright browsers.",
            project_dir,
            env,
            hint="Install the missing system libraries manually; see https://playwright.dev/docs/intro",
        )
        return provisioned

    # ── Configuration ───────────────────────────────────────────

    def prompt_secret(self) -> str:
        """Ask for the required secret until a non-empty value is given."""
        prompt = self.config.env.prompt
        while True:
            value = self._console.secret(prompt)
            if value.strip():
                return value
            self._console.warning(f"{self.config.env.required_key} cannot be empty.")

    def build_env_file(self, secret: str) -> EnvFile:
        env_cfg = self.config.env
        env_file = EnvFile()
        env_file.set(env_cfg.required_key, secret, required=True)

        env_file.comments.append("# Optional: Uncomment and set if needed")
        chrome = CHROME_PATHS.get(self._platform)
        if chrome:
            if self._platform == "linux":
                env_file.comments.append("# Typical Linux Chrome path (may vary):")
            env_file.comments.append(f"# CHROME_PATH={chrome}")
        for key, example in env_cfg.optional.items():
            env_file.comments.append(f"# {key}={example}")
        return env_file

    def write_env_file(self, project_dir: Path, secret: str | None = None) -> Path:
        """Write the env file, prompting for the secret if not supplied."""
        path = project_dir / self.config.env.file
        self._console.info(f"Creating {self.config.env.file} file...")

        if not secret or not secret.strip():
            secret = self.prompt_secret()

        self.build_env_file(secret).write(path)
        self._console.info(f"{self.config.env.file} created successfully with API Key.")
        self._console.warning(
            f"Review {self.config.env.file} to set optional variables like CHROME_PATH if needed."
        )
        return path

    # ── Global install ──────────────────────────────────────────

    def find_wheel(self, project_dir: Path) -> Path | None:
        dist = project_dir / self.config.server.dist_dir
        matches = sorted(dist.glob(f"{self.config.server.package_name}-*.whl"))
        return matches[0] if matches else None

    def install_globally(self, env: ProvisionedEnv) -> tuple[Path, ProvisionedEnv]:
        """Build the wheel and install it as a global uv tool.

        Returns:
            ``(wheel, env)`` where ``env`` has the uv tool bin directory in
            front of its search path, so the installed command resolves.
        """
        name = self.config.server.package_name
        self._console.info("Building the project wheel...")
        self._run_or_fail(["uv", "build"], "Failed to build the project.", env.project_dir, env.env_overrides)

        wheel = self.find_wheel(env.project_dir)
        if wheel is None:
            raise InstallerError(
                f"Could not find the built wheel file in {self.config.server.dist_dir} directory.",
                hint=f"Expected {self.config.server.dist_dir}/{name}-*.whl after 'uv build'.",
            )

        self._console.info("Installing the tool globally using uv...")
        self._run_or_fail(
            ["uv", "tool", "install", str(wheel), "--force"],
            "Failed to install the tool globally.",
            env.project_dir,
            env.env_overrides,
        )
        self._console.info(f"'{name}' installed globally.")
        self._console.warning(
            "Remember to ensure the uv tool bin path ('~/.local/bin' or similar) is in your main shell's PATH."
        )
        return wheel, replace(
            env,
            search_path=prepend_path(env.search_path, [uv_tool_bin_dir(self._home)]),
        )
