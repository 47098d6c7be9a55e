"""Top-level CLI entry point for AssetFlow."""

from __future__ import annotations

import logging

import click

from assetflow import __version__


@click.group()
@click.version_option(version=__version__, prog_name="assetflow")
@click.option(
    "--config",
    type=click.Path(),
    default=None,
    envvar="ASSETFLOW_CONFIG",
    help="Path to config.yaml",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """AssetFlow -- portfolio valuation and performance engine."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# Register sub-commands
from assetflow.cli.config_cmd import config_group  # noqa: E402
from assetflow.cli.report_cmd import report_cmd, resolve_cmd  # noqa: E402

cli.add_command(config_group, "config")
cli.add_command(report_cmd, "report")
cli.add_command(resolve_cmd, "resolve")
