"""Config CLI commands: show, validate."""

from __future__ import annotations

import json

import click


@click.group("config")
def config_group() -> None:
    """Manage configuration."""
    pass


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the resolved configuration."""
    from assetflow.config.loader import load_config

    config = load_config(ctx.obj.get("config_path"))
    click.echo(json.dumps(config.model_dump(mode="json"), indent=2))


@config_group.command("validate")
@click.pass_context
def config_validate(ctx: click.Context) -> None:
    """Validate config.yaml against the schema."""
    from pydantic import ValidationError

    from assetflow.config.loader import load_config

    try:
        config = load_config(ctx.obj.get("config_path"))
    except (ValidationError, OSError) as e:
        click.echo(f"Config validation failed: {e}", err=True)
        raise SystemExit(1) from None

    perf = config.performance
    click.echo("Config is valid.")
    click.echo(f"  Version: {config.version}")
    click.echo(f"  Staleness threshold: {perf.staleness_threshold_days} days")
    click.echo(f"  Lookbacks: {', '.join(f'{k}={v}m' for k, v in perf.lookback_months.items())}")
    click.echo(f"  Decimal precision: {config.precision.decimal_precision} digits")
