"""tiertrace CLI — main entry point.

Usage::

    tiertrace trace demo --out result.json
    tiertrace trace show result.json
    tiertrace validate result.json --strict
"""

from __future__ import annotations

import logging

import click

from tiertrace.cli.commands_trace import trace
from tiertrace.cli.commands_validate import validate
from tiertrace.config import load_settings


@click.group()
@click.version_option(package_name="tiertrace")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="pyproject.toml holding a [tool.tiertrace] table.")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              default=None, help="Override the configured log level.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_level: str | None) -> None:
    """tiertrace — hierarchical execution traces (core → repo → agent)."""
    try:
        settings = load_settings(config_path)
    except (OSError, ValueError) as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc

    logging.basicConfig(
        level=getattr(logging, (log_level or settings.log_level).upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    ctx.obj = settings


cli.add_command(trace)
cli.add_command(validate)

if __name__ == "__main__":
    cli()
