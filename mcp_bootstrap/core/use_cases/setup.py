"""
Setup use case — the whole bootstrap, top to bottom.

    prerequisites → clone → venv + deps → .env → [global install] → [launch]

Strictly sequential. Any fatal step stops the run; nothing already
done is undone. Declining an optional step is not a failure.
"""

from __future__ import annotations

import logging
from pathlib import Path

from mcp_bootstrap.core.errors import BootstrapError
from mcp_bootstrap.core.models.config import BootstrapConfig
from mcp_bootstrap.core.models.report import SetupReport
from mcp_bootstrap.core.services.configurator import EnvironmentConfigurator, ProvisionedEnv
from mcp_bootstrap.core.services.launcher import (
    activation_command,
    launch,
    manual_command,
    server_command,
)
from mcp_bootstrap.core.services.port_scanner import find_available_port
from mcp_bootstrap.core.use_cases.check import Host, install_prerequisites

logger = logging.getLogger(__name__)


def _ask(host: Host, choice: bool | None, question: str) -> bool:
    """Use a preset answer when given, otherwise prompt (default: no)."""
    if choice is not None:
        return choice
    return host.console.confirm(question, default=False)


def _next_steps(
    host: Host,
    config: BootstrapConfig,
    env: ProvisionedEnv,
    global_install: bool,
) -> None:
    console = host.console
    base = server_command(config.server, global_install)
    env_name = config.env.file

    console.info("------------------------------------------")
    console.info("Setup Complete!")
    console.info("------------------------------------------")
    console.info("Next Steps:")
    console.warning(
        "1. Restart your terminal (or re-source your shell profile) so PATH changes "
        "for uv and installed tools take effect."
    )
    console.info(f"2. Review the '{env_name}' file in '{env.project_dir}' (e.g. CHROME_PATH).")
    console.info("3. Configure your MCP client (e.g. Cursor: Settings -> MCP Servers):")
    if global_install:
        console.info(f"   command: '{base[0]}', args: {base[1:]}")
    else:
        console.info(
            f"   command: '{base[0]}', args: {base[1:]} "
            "(set the working directory to the project root)"
        )
    console.info(
        f"   Add {config.env.required_key} to the client's 'env' section, "
        f"or make sure the server reads the {env_name} file."
    )


def run_setup(
    config: BootstrapConfig,
    host: Host,
    platform: str,
    search_path: str,
    workdir: Path,
    api_key: str | None = None,
    install_global: bool | None = None,
    start_server: bool | None = None,
    use_sudo: bool | None = None,
) -> SetupReport:
    """Run the full bootstrap.

    Args:
        config: Bootstrap configuration.
        host: Capabilities used to touch the machine.
        platform: ``linux``, ``macos`` or ``windows``.
        search_path: Executable search path at startup.
        workdir: Directory the repository is cloned into.
        api_key: Secret for the env file. Prompted for when empty.
        install_global: Build and install the wheel. None = ask.
        start_server: Launch the server at the end. None = ask.
        use_sudo: Force or suppress sudo for native managers. None = automatic.

    Returns:
        SetupReport. ``report.error`` is set if a fatal step failed.
    """
    report = SetupReport(platform=platform, search_path=search_path)
    console = host.console
    package = config.server.package_name

    try:
        console.info(f"Starting {package} setup for {platform}...")
        state = install_prerequisites(config, host, platform, search_path, report, use_sudo=use_sudo)

        configurator = EnvironmentConfigurator(config, host.launcher, console, platform)

        console.info("Setting up the project...")
        project_dir, cloned = configurator.clone(workdir, state.search_path)
        report.project_dir = str(project_dir)
        report.record("clone", "ok" if cloned else "skipped", str(project_dir))

        console.info("Installing project dependencies...")
        env = configurator.provision(project_dir, state.search_path)
        report.search_path = env.search_path
        report.record("dependencies", "ok", str(env.venv_dir))

        console.info("Configuring environment...")
        env_path = configurator.write_env_file(project_dir, api_key)
        report.record("env file", "ok", str(env_path))

        global_install = _ask(
            host,
            install_global,
            f"Do you want to build and install '{package}' as a global tool using uv? "
            "(Useful for running outside the project dir)",
        )
        if global_install:
            wheel, env = configurator.install_globally(env)
            report.search_path = env.search_path
            report.record("global install", "ok", wheel.name)
        else:
            console.info("Skipping global installation.")
            report.record("global install", "skipped")

        _next_steps(host, config, env, global_install)

        start = _ask(
            host,
            start_server,
            f"Do you want to attempt to start the server now in {config.server.mode} mode?",
        )
        if not start:
            report.run_command = manual_command(config.server, global_install)
            console.info("Server not started. You can start it manually using:")
            console.info(f"  cd {project_dir}")
            if not global_install:
                console.info(f"  {activation_command(platform)}")
            console.info(f"  {' '.join(report.run_command)}  # adjust the port if needed")
            report.record("launch", "skipped")
            return report

        allocation = None
        if config.server.mode == "stdio":
            allocation = find_available_port(host.probe, config.ports.start, config.ports.ceiling)
            console.info(
                f"Found available port: {allocation.port} "
                f"(using {allocation.proxy_port} for proxy if needed by the server)"
            )

        report.run_command = server_command(config.server, global_install, allocation)
        console.info(f"Attempting to start the server using command: '{' '.join(report.run_command)}'")
        console.warning("The server will now run. Press Ctrl+C to stop it when finished.")
        report.server_exit_code = launch(host.launcher, report.run_command, env)
        report.record(
            "launch",
            "ok",
            f"exit code {report.server_exit_code}",
            **(allocation.to_dict() if allocation else {}),
        )

    except BootstrapError as e:
        logger.debug("Setup stopped: %s", e.message)
        report.error = e.message
        report.hint = e.hint

    return report
