"""Report CLI commands: report, resolve."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import click

from assetflow.engine.outcomes import Unavailable, format_metric


def _money(value: Decimal | Unavailable) -> str:
    if isinstance(value, Unavailable):
        return value.label
    return f"{value.quantize(Decimal('0.01')):,}"


def _load_index(ctx: click.Context, records_path: str):
    """Load config, records and index; exit 1 on any loading failure."""
    from pydantic import ValidationError

    from assetflow.config.loader import load_config
    from assetflow.data.records_file import load_records
    from assetflow.engine.faults import EngineFault
    from assetflow.engine.index import build_index

    try:
        config = load_config(ctx.obj.get("config_path"))
    except (ValidationError, OSError) as e:
        click.echo(f"Invalid config: {e}", err=True)
        raise SystemExit(1) from None

    try:
        records = load_records(records_path)
        index = build_index(records.snapshots)
    except FileNotFoundError as e:
        click.echo(str(e), err=True)
        raise SystemExit(1) from None
    except ValidationError as e:
        click.echo(f"Invalid records file: {e}", err=True)
        raise SystemExit(1) from None
    except EngineFault as e:
        click.echo(f"[{e.code.value}] {e}", err=True)
        raise SystemExit(1) from None
    except ValueError as e:
        click.echo(f"Invalid records file: {e}", err=True)
        raise SystemExit(1) from None
    return config, records, index


@click.command("report")
@click.argument("records_path", type=click.Path())
@click.pass_context
def report_cmd(ctx: click.Context, records_path: str) -> None:
    """Print the performance report for a records file."""
    from assetflow.engine.periods import PERIOD_LABELS, Period
    from assetflow.portfolio.performance import generate_performance_report

    config, records, index = _load_index(ctx, records_path)
    places = config.precision.percent_places
    report = generate_performance_report(
        index, records.categories, config=config, goal=records.goal
    )

    if report.is_empty:
        click.echo("No snapshots recorded.")
        return

    click.echo(f"As of {report.as_of_date} ({report.snapshots_count} snapshots)")
    click.echo(f"  Total value: {_money(report.total_value)}")
    click.echo(f"  Assets:      {report.asset_count}")

    click.echo("\nPeriods")
    known = {p.value: p for p in Period}
    for label, pm in report.periods.items():
        name = PERIOD_LABELS[known[label]] if label in known else label
        click.echo(
            f"  {name:<10} growth {format_metric(pm.growth, places)}"
            f"  |  return {format_metric(pm.return_rate, places)}"
        )

    click.echo("\nSince inception")
    click.echo(f"  TWR:  {format_metric(report.cumulative_twr, places)}")
    click.echo(f"  CAGR: {format_metric(report.cagr, places)}")

    if report.goal is not None:
        g = report.goal
        click.echo(
            f"\nGoal {_money(g.goal)}: {g.achievement_pct.quantize(Decimal('0.01'))}% "
            f"({'reached' if g.reached else _money(g.remaining) + ' to go'})"
        )

    plan = report.rebalancing
    if plan is not None and plan.suggestions:
        click.echo("\nRebalancing")
        for s in plan.suggestions:
            click.echo(
                f"  {s.name:<16} target {s.target_pct}%  "
                f"current {format_metric(_fraction(s.current_pct), places)}  "
                f"{s.action.value.upper()} {_money(s.adjustment)}"
            )
        for h in plan.informational:
            name = h.category or config.report.uncategorized_label
            click.echo(f"  {name:<16} (no target) {_money(h.current_value)}")


def _fraction(pct: Decimal | Unavailable) -> Decimal | Unavailable:
    """Percent figure back to a fraction for ``format_metric``."""
    if isinstance(pct, Unavailable):
        return pct
    return pct / 100


@click.command("resolve")
@click.argument("records_path", type=click.Path())
@click.argument("snapshot_date", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.pass_context
def resolve_cmd(ctx: click.Context, records_path: str, snapshot_date) -> None:
    """Print the composite view for SNAPSHOT_DATE (YYYY-MM-DD)."""
    from assetflow.engine.carry_forward import resolve
    from assetflow.engine.faults import SnapshotNotFound

    _, _, index = _load_index(ctx, records_path)
    target: date = snapshot_date.date()
    try:
        view = resolve(target, index)
    except SnapshotNotFound as e:
        click.echo(f"[{e.code.value}] {e}", err=True)
        raise SystemExit(1) from None

    click.echo(f"Composite view {view.date}: total {_money(view.total)}")
    for platform in sorted(view.platforms):
        pv = view.platforms[platform]
        origin = f"carried from {pv.source_date}" if pv.is_carried_forward else "direct"
        click.echo(f"  {platform or '(no platform)':<20} {_money(pv.total):>16}  {origin}")
    click.echo("Categories")
    for key in sorted(view.category_totals):
        click.echo(f"  {key or '(uncategorized)':<20} {_money(view.category_totals[key]):>16}")
