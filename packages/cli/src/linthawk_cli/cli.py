"""CLI entry point for linthawk.

Commands:
  submit   — post the problems from a report file as a pull request review
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from linthawk_cli.commands.submit import submit_cmd

console = Console(stderr=True)

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def setup_logging(level: str) -> None:
    """Configure the root logger once per process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("linthawk"),
    prog_name="linthawk",
)
@click.option(
    "--config",
    "config_path",
    default=".linthawk.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="LINTHAWK_CONFIG",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
@click.pass_context
def main(ctx: click.Context, config_path: str, log_level: str):
    """Report rule linter problems as GitHub pull request reviews."""
    setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(submit_cmd)
