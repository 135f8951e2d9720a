# src/cloudinventory/cli.py
"""Cloud inventory CLI - snapshots, compliance scoring and the AI advisor."""

import asyncio
import click
import json
import sys
from pathlib import Path
from typing import Optional
import structlog

from cloudinventory.advisor.client import AdvisorClient
from cloudinventory.analytics.queries import InventoryQuery
from cloudinventory.analytics.topology import build_topology
from cloudinventory.auth.roles import AuthService, MOCK_USERS
from cloudinventory.compliance.posture import POSTURE_FILTERS, filter_issues, summarize_posture
from cloudinventory.config.settings import Settings, validate_environment
from cloudinventory.core.exceptions import (
    ConfigurationException,
    InventoryException,
    InventoryImportError,
    PermissionDeniedError,
)
from cloudinventory.core.utils import format_currency, setup_logging
from cloudinventory.discovery.orchestrator import AutoSyncScheduler, InventoryOrchestrator, InventorySnapshot
from cloudinventory.discovery.snapshot import InventorySource, export_filename, export_resource

logger = structlog.get_logger(__name__)

RISK_EMOJI = {
    "Critical": "🔴",
    "High": "🟠",
    "Medium": "🟡",
    "Low": "🔵",
    "Secure": "🟢",
}


def _build_orchestrator(settings: Settings, user: Optional[str]) -> InventoryOrchestrator:
    source = InventorySource(settings.sync.model_dump())
    auth = AuthService(current_user_id=user)
    return InventoryOrchestrator(source, auth=auth, account_label=settings.sync.account_label)


async def _load(orchestrator: InventoryOrchestrator, input_path: Optional[str], provider: str = "All") -> InventorySnapshot:
    """Load the inventory from an import file, or fetch a snapshot."""
    if input_path:
        text = Path(input_path).read_text(encoding="utf-8-sig")
        return orchestrator.import_inventory(text)
    return await orchestrator.refresh(provider)


def _print_summary(snapshot: InventorySnapshot) -> None:
    stats = snapshot.stats
    click.echo("📈 Inventory Summary:")
    click.echo(f"   📦 Resources: {stats.total_resources}")
    click.echo(f"   💰 Monthly cost: {format_currency(stats.total_cost)}")
    click.echo(f"   🏷️  Untagged: {stats.untagged_count}")
    click.echo(f"   🚨 Critical/High risk: {stats.critical_risk_count}")
    for split in stats.provider_split:
        click.echo(f"   ☁️  {split.name}: {split.value}")


def _run(coro_factory, debug: bool) -> None:
    """Run an async command body with the shared error reporting."""

    async def runner():
        try:
            return await coro_factory()
        except InventoryImportError as e:
            click.echo("❌ Failed to import data. Please check JSON format.")
            click.echo(f"   {e.message}")
            return 1
        except PermissionDeniedError as e:
            click.echo(f"🔒 {e.message}")
            return 1
        except (InventoryException, OSError) as e:
            click.echo(f"❌ {e}")
            if debug:
                import traceback
                click.echo(traceback.format_exc())
            return 1

    sys.exit(asyncio.run(runner()) or 0)


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--user', '-u', default=None, help='Simulated user id (u1 Admin, u2 Editor, u3 Viewer)')
@click.pass_context
def cli(ctx, debug, user):
    """Multi-cloud inventory with automated compliance scoring."""
    try:
        settings = Settings.create_from_env()
    except ConfigurationException as e:
        click.echo(f"❌ {e.message}")
        for error in e.details.get("errors", []):
            click.echo(f"   • {error}")
        ctx.exit(1)
    if debug:
        settings.debug = True
    log_level = "DEBUG" if settings.debug else settings.log_level.value
    setup_logging(log_level=log_level, log_format=settings.log_format)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["debug"] = settings.debug
    ctx.obj["user"] = user


@cli.command()
@click.option('--provider', '-p', type=click.Choice(['All', 'AWS', 'Azure', 'GCP']), default='All', help='Show and save only this provider\'s resources')
@click.option('--output', '-o', default=None, help='Write the scored resources to this JSON file')
@click.pass_context
def sync(ctx, provider, output):
    """Fetch a cloud snapshot and score every resource."""
    settings = ctx.obj["settings"]

    async def body():
        orchestrator = _build_orchestrator(settings, ctx.obj["user"])
        click.echo(f"🔍 Synchronizing infrastructure ({settings.sync.account_label}, {provider})...")
        snapshot = await orchestrator.refresh(provider)
        view = InventoryQuery(provider=provider).apply(snapshot.resources)
        click.echo(f"✅ Synced {len(snapshot.resources)} resources")
        if provider != 'All':
            click.echo(f"   🔎 {provider}: {len(view)} resources")
        _print_summary(snapshot)

        if output:
            output_path = Path(output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w') as f:
                json.dump([r.to_wire() for r in view], f, indent=2)
            click.echo(f"📁 Inventory saved to: {output_path}")
        return 0

    _run(body, ctx.obj["debug"])


@cli.command()
@click.argument('provider', type=click.Choice(['AWS', 'Azure', 'GCP']))
@click.pass_context
def connect(ctx, provider):
    """Connect a provider account (Admin or Editor) and sync it."""

    async def body():
        orchestrator = _build_orchestrator(ctx.obj["settings"], ctx.obj["user"])
        click.echo(f"🔌 Connecting to {provider}...")
        snapshot = await orchestrator.connect(provider)
        click.echo(f"✅ Successfully connected to {provider}")
        _print_summary(snapshot)
        return 0

    _run(body, ctx.obj["debug"])


@cli.command(name='import')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_(ctx, path):
    """Import a JSON array of resources (Admin only)."""

    async def body():
        orchestrator = _build_orchestrator(ctx.obj["settings"], ctx.obj["user"])
        snapshot = await _load(orchestrator, path)
        click.echo(f"✅ Imported {len(snapshot.resources)} resources")
        _print_summary(snapshot)
        return 0

    _run(body, ctx.obj["debug"])


@cli.command()
@click.option('--input', '-i', 'input_path', default=None, help='Inventory JSON file instead of a snapshot')
@click.option('--json', 'as_json', is_flag=True, help='Print statistics as JSON')
@click.pass_context
def stats(ctx, input_path, as_json):
    """Show aggregate statistics."""

    async def body():
        orchestrator = _build_orchestrator(ctx.obj["settings"], ctx.obj["user"])
        snapshot = await _load(orchestrator, input_path)
        if as_json:
            click.echo(json.dumps(snapshot.stats.model_dump(mode="json", by_alias=True), indent=2))
        else:
            _print_summary(snapshot)
        return 0

    _run(body, ctx.obj["debug"])


@cli.command()
@click.option('--input', '-i', 'input_path', default=None, help='Inventory JSON file instead of a snapshot')
@click.option('--view', type=click.Choice(list(POSTURE_FILTERS)), default='All', help='Issue filter')
@click.pass_context
def compliance(ctx, input_path, view):
    """Show the compliance posture and flagged resources."""

    async def body():
        orchestrator = _build_orchestrator(ctx.obj["settings"], ctx.obj["user"])
        snapshot = await _load(orchestrator, input_path)
        posture = summarize_posture(snapshot.resources)

        click.echo(f"🛡️  Compliance Score: {posture['security_score']}%")
        for level, count in posture['by_risk_level'].items():
            click.echo(f"   {RISK_EMOJI[level]} {level}: {count}")
        click.echo(f"   🏷️  Untagged: {posture['untagged_count']}")

        issues = filter_issues(snapshot.resources, view)
        if issues:
            click.echo(f"\n🔍 Findings ({view}):")
        for resource in issues:
            click.echo(f"   {RISK_EMOJI[resource.risk_level.value]} {resource.name} [{resource.id}] - {resource.risk_level.value}")
            for issue in resource.security_issues:
                click.echo(f"      • {issue}")
        return 0

    _run(body, ctx.obj["debug"])


@cli.command(name='list')
@click.option('--input', '-i', 'input_path', default=None, help='Inventory JSON file instead of a snapshot')
@click.option('--search', '-s', default='', help='Match name or id')
@click.option('--provider', default='All', help='Provider filter')
@click.option('--status', default='All', help='Status filter')
@click.option('--risk', default='All', help='Risk level filter')
@click.option('--tag', default='', help='Tag filter, "key:value" or a bare substring')
@click.option('--since', type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help='Created on or after')
@click.option('--until', type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help='Created on or before')
@click.option('--sort', 'sort_field', default='cost', help='Sort field')
@click.option('--asc', is_flag=True, help='Sort ascending')
@click.pass_context
def list_(ctx, input_path, search, provider, status, risk, tag, since, until, sort_field, asc):
    """List resources with search, filters and sorting."""

    async def body():
        orchestrator = _build_orchestrator(ctx.obj["settings"], ctx.obj["user"])
        snapshot = await _load(orchestrator, input_path)
        query = InventoryQuery(
            search=search,
            provider=provider,
            status=status,
            risk_level=risk,
            tags=tag,
            start_date=since.date() if since else None,
            end_date=until.date() if until else None,
            sort_field=sort_field,
            descending=not asc,
        )
        try:
            rows = query.apply(snapshot.resources)
        except ValueError as e:
            click.echo(f"❌ {e}")
            return 1

        click.echo(f"📋 {len(rows)} of {len(snapshot.resources)} resources ({query.active_filter_count} filters)")
        for r in rows:
            rtype = getattr(r.resource_type, "value", r.resource_type)
            provider_name = r.provider_name or "-"
            click.echo(
                f"   {RISK_EMOJI[r.risk_level.value]} {r.id:<22} {r.name or '-':<30} "
                f"{provider_name:<6} {rtype or '-':<20} {format_currency(r.cost_per_month):>12}"
            )
        return 0

    _run(body, ctx.obj["debug"])


@cli.command()
@click.argument('resource_id')
@click.option('--input', '-i', 'input_path', default=None, help='Inventory JSON file instead of a snapshot')
@click.option('--output-dir', '-o', default='.', help='Directory for the exported file')
@click.pass_context
def export(ctx, resource_id, input_path, output_dir):
    """Export one resource's metadata as JSON."""

    async def body():
        orchestrator = _build_orchestrator(ctx.obj["settings"], ctx.obj["user"])
        snapshot = await _load(orchestrator, input_path)
        resource = next((r for r in snapshot.resources if r.id == resource_id), None)
        if resource is None:
            click.echo(f"❌ Resource not found: {resource_id}")
            return 1

        output_path = Path(output_dir) / export_filename(resource)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(export_resource(resource), encoding="utf-8")
        click.echo(f"📁 Metadata exported to: {output_path}")
        return 0

    _run(body, ctx.obj["debug"])


@cli.command()
@click.option('--input', '-i', 'input_path', default=None, help='Inventory JSON file instead of a snapshot')
@click.pass_context
def topology(ctx, input_path):
    """Print the provider / type / resource hierarchy as JSON."""

    async def body():
        orchestrator = _build_orchestrator(ctx.obj["settings"], ctx.obj["user"])
        snapshot = await _load(orchestrator, input_path)
        click.echo(json.dumps(build_topology(snapshot.resources), indent=2))
        return 0

    _run(body, ctx.obj["debug"])


@cli.command()
@click.argument('question')
@click.option('--input', '-i', 'input_path', default=None, help='Inventory JSON file instead of a snapshot')
@click.pass_context
def ask(ctx, question, input_path):
    """Ask the AI advisor about the inventory."""
    settings = ctx.obj["settings"]

    async def body():
        env = validate_environment(settings)
        for warning in env["warnings"]:
            click.echo(f"⚠️  {warning}")

        orchestrator = _build_orchestrator(settings, ctx.obj["user"])
        snapshot = await _load(orchestrator, input_path)
        async with AdvisorClient(settings.advisor.model_dump()) as advisor:
            answer = await advisor.analyze_inventory(snapshot.resources, question)
        click.echo(answer)
        return 0

    _run(body, ctx.obj["debug"])


@cli.command()
@click.option('--interval', type=float, default=None, help='Auto-sync interval in minutes')
@click.option('--cycles', type=int, default=None, help='Stop after this many auto-syncs')
@click.pass_context
def watch(ctx, interval, cycles):
    """Sync once, then keep the inventory fresh on a timer."""
    settings = ctx.obj["settings"]
    interval_minutes = interval or settings.sync.interval_minutes

    async def body():
        orchestrator = _build_orchestrator(settings, ctx.obj["user"])
        snapshot = await orchestrator.refresh()
        _print_summary(snapshot)

        scheduler = AutoSyncScheduler(orchestrator, interval_minutes)
        click.echo(f"⚡ Auto-sync every {interval_minutes}m (Ctrl+C to stop)")
        scheduler.start()
        try:
            while cycles is None or scheduler.runs + scheduler.failures < cycles:
                await asyncio.sleep(min(scheduler.interval_seconds, 1.0))
        finally:
            await scheduler.stop()

        click.echo(f"✅ Auto-sync finished after {scheduler.runs} refreshes, last at {orchestrator.state.last_sync_time}")
        return 0

    _run(body, ctx.obj["debug"])


@cli.command()
def users():
    """List the simulated users and their roles."""
    for user in MOCK_USERS:
        click.echo(f"   {user.id}  {user.name:<16} {user.role.value}")


if __name__ == '__main__':
    cli()
