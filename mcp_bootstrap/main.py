"""
mcp-bootstrap — CLI entrypoint.

Usage:
    mcp-bootstrap --help
    mcp-bootstrap setup
    mcp-bootstrap check
    mcp-bootstrap find-port --start 8000
    mcp-bootstrap env --dir ./brower-use-mcp
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from mcp_bootstrap import __version__
from mcp_bootstrap.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)

# Exit status of a server stopped with Ctrl+C
_INTERRUPTED = 130


@click.group()
@click.version_option(version=__version__, prog_name="mcp-bootstrap")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to bootstrap.yml (default: auto-detect, else built-in defaults).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """mcp-bootstrap — install prerequisites and set up the browser MCP server."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
        quiet_third_party=not debug,
    )


def _load_config(ctx: click.Context):
    """Load bootstrap.yml or exit with the config error."""
    from mcp_bootstrap.core.config.loader import ConfigError, load_config

    try:
        return load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


def _build_host(ctx: click.Context, quiet: bool = False):
    from mcp_bootstrap.adapters.network.port import SocketPortProbe
    from mcp_bootstrap.adapters.shell.command import PathLocator, SubprocessLauncher
    from mcp_bootstrap.core.use_cases.check import Host
    from mcp_bootstrap.ui.cli.console import ClickConsole

    return Host(
        locator=PathLocator(),
        launcher=SubprocessLauncher(),
        probe=SocketPortProbe(),
        console=ClickConsole(quiet=quiet or ctx.obj.get("quiet", False)),
    )


def _detect_platform() -> str:
    from mcp_bootstrap.core.errors import BootstrapError
    from mcp_bootstrap.core.services.host import detect_platform

    try:
        return detect_platform()
    except BootstrapError as e:
        click.secho(f"❌ {e.message}", fg="red")
        sys.exit(1)


def _print_failure(error: str, hint: str = "") -> None:
    click.echo()
    click.secho(f"❌ {error}", fg="red", bold=True)
    if hint:
        click.echo(f"   {hint}")


def _print_steps(report) -> None:
    icons = {"ok": ("✓", "green"), "skipped": ("⊘", "yellow"), "failed": ("✗", "red")}
    for step in report.steps:
        icon, color = icons.get(step.status, ("?", "white"))
        click.secho(f"   {icon} {step.name}", fg=color, nl=False)
        click.echo(f"  {step.detail}" if step.detail else "")


def _sudo_choice(sudo: str) -> bool | None:
    return {"auto": None, "always": True, "never": False}[sudo]


_sudo_option = click.option(
    "--sudo",
    type=click.Choice(["auto", "always", "never"]),
    default="auto",
    show_default=True,
    help="Prefix native package manager installs with sudo.",
)


# ── Setup ───────────────────────────────────────────────────────


@cli.command()
@click.option(
    "--workdir",
    "-w",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to clone into (default: current directory).",
)
@click.option("--repo-url", default=None, help="Override the repository to clone.")
@click.option(
    "--api-key",
    envvar="OPENAI_API_KEY",
    default=None,
    help="OpenAI API key for the .env file (default: prompt, or $OPENAI_API_KEY).",
)
@click.option(
    "--install-global/--no-install-global",
    default=None,
    help="Build and install the server as a global uv tool (default: ask).",
)
@click.option("--start/--no-start", default=None, help="Start the server at the end (default: ask).")
@_sudo_option
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.pass_context
def setup(
    ctx: click.Context,
    workdir: Path | None,
    repo_url: str | None,
    api_key: str | None,
    install_global: bool | None,
    start: bool | None,
    sudo: str,
    as_json: bool,
) -> None:
    """Install prerequisites, clone, provision, configure and optionally run the server.

    Examples:

        mcp-bootstrap setup

        mcp-bootstrap setup --no-install-global --no-start

        OPENAI_API_KEY=sk-... mcp-bootstrap setup --workdir ~/src --start
    """
    from mcp_bootstrap.core.services.host import current_search_path
    from mcp_bootstrap.core.use_cases.setup import run_setup

    config = _load_config(ctx)
    if repo_url:
        config.repository.url = repo_url

    target = (workdir or Path.cwd()).resolve()
    target.mkdir(parents=True, exist_ok=True)

    report = run_setup(
        config,
        _build_host(ctx, quiet=as_json),
        _detect_platform(),
        current_search_path(),
        target,
        api_key=api_key,
        install_global=install_global,
        start_server=start,
        use_sudo=_sudo_choice(sudo),
    )

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    elif ctx.obj.get("verbose"):
        click.echo()
        _print_steps(report)

    if report.error:
        if not as_json:
            _print_failure(report.error, report.hint)
        sys.exit(1)

    code = report.server_exit_code
    if code not in (None, 0, _INTERRUPTED):
        sys.exit(code)


# ── Check ───────────────────────────────────────────────────────


@cli.command()
@_sudo_option
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.pass_context
def check(ctx: click.Context, sudo: str, as_json: bool) -> None:
    """Check and install prerequisites only (no clone, no configuration)."""
    from mcp_bootstrap.core.services.host import current_search_path
    from mcp_bootstrap.core.use_cases.check import run_check

    config = _load_config(ctx)
    report = run_check(
        config,
        _build_host(ctx, quiet=as_json),
        _detect_platform(),
        current_search_path(),
        use_sudo=_sudo_choice(sudo),
    )

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(1 if report.error else 0)

    click.secho(f"\n🔍 Prerequisites ({report.platform})", fg="cyan", bold=True)
    click.echo(f"   Package manager: {report.package_manager or 'unknown'}")
    _print_steps(report)

    if report.error:
        _print_failure(report.error, report.hint)
        sys.exit(1)

    click.echo()


# ── Find port ───────────────────────────────────────────────────


@cli.command("find-port")
@click.option("--start", "-s", type=click.IntRange(1, 65534), default=None, help="First port to try.")
@click.option("--ceiling", type=click.IntRange(1, 65535), default=None, help="Last port to try (inclusive).")
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to probe.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def find_port(
    ctx: click.Context,
    start: int | None,
    ceiling: int | None,
    host: str,
    as_json: bool,
) -> None:
    """Find a free TCP port (and the proxy port next to it)."""
    from mcp_bootstrap.adapters.network.port import SocketPortProbe
    from mcp_bootstrap.core.errors import PortExhaustedError
    from mcp_bootstrap.core.services.port_scanner import find_available_port

    config = _load_config(ctx)
    first = start if start is not None else config.ports.start
    last = ceiling if ceiling is not None else (config.ports.ceiling if start is None else None)

    if last is not None and last < first:
        click.secho(f"❌ --ceiling ({last}) is below --start ({first})", fg="red")
        sys.exit(2)

    try:
        allocation = find_available_port(SocketPortProbe(), first, last, host=host)
    except PortExhaustedError as e:
        if as_json:
            click.echo(json.dumps(e.to_dict(), indent=2))
        else:
            _print_failure(e.message, e.hint)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(allocation.to_dict(), indent=2))
        return

    click.secho(f"🔌 Port {allocation.port}", fg="green", bold=True, nl=False)
    click.echo(f"  (proxy port {allocation.proxy_port}, not checked)")


# ── Env file ────────────────────────────────────────────────────


@cli.command("env")
@click.option(
    "--dir",
    "-d",
    "directory",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    default=None,
    help="Project directory to write into (default: current directory).",
)
@click.option(
    "--api-key",
    envvar="OPENAI_API_KEY",
    default=None,
    help="OpenAI API key (default: prompt, or $OPENAI_API_KEY).",
)
@click.pass_context
def env_file(ctx: click.Context, directory: Path | None, api_key: str | None) -> None:
    """Write (overwrite) the server's .env file."""
    from mcp_bootstrap.core.services.configurator import EnvironmentConfigurator

    config = _load_config(ctx)
    host = _build_host(ctx)
    configurator = EnvironmentConfigurator(config, host.launcher, host.console, _detect_platform())

    path = configurator.write_env_file((directory or Path.cwd()).resolve(), api_key)
    click.secho(f"✅ Wrote {path}", fg="green")


if __name__ == "__main__":
    cli()
