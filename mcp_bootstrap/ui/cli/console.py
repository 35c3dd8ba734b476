"""
Click-backed console — progress lines and prompts on the terminal.

Everything goes to stderr so stdout carries only command output
(e.g. the ``--json`` report).
"""

from __future__ import annotations

import click

from mcp_bootstrap.adapters.base import Console


class ClickConsole(Console):
    """Terminal console.

    Args:
        quiet: Suppress info lines (warnings and prompts still show).
    """

    def __init__(self, quiet: bool = False):
        self._quiet = quiet

    def info(self, message: str) -> None:
        if not self._quiet:
            click.echo(f"INFO: {message}", err=True)

    def warning(self, message: str) -> None:
        click.secho(f"WARNING: {message}", fg="yellow", err=True)

    def confirm(self, question: str, default: bool = False) -> bool:
        return click.confirm(question, default=default, err=True)

    def secret(self, question: str) -> str:
        # default="" makes click return empty input instead of re-asking
        return click.prompt(question, hide_input=True, default="", show_default=False, err=True)

    def pause(self, message: str) -> None:
        click.echo(message, err=True)
        click.prompt("", default="", show_default=False, prompt_suffix="", err=True)
