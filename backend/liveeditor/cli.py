"""
Live Editor CLI - Command line interface for the live editor dashboard.

Usage:
    liveeditor run                          Start the dashboard server
    liveeditor dump PalPlayerState          Dump properties of an instance
    liveeditor dump PalPlayerState -f       Dump callable functions instead
    liveeditor probe --force                Re-run property auto-discovery
"""

import asyncio
import logging
import sys

import click

from liveeditor import __version__, config
from liveeditor.explorer.bridge import BridgeClient
from liveeditor.explorer.discovery import DiscoveryProbe
from liveeditor.explorer.render import ExplorerView, build_view
from liveeditor.explorer.session import DumpMode, DumpOutcome, ExplorerSession

bridge_option = click.option(
    "--bridge-url", "-b", default=config.BRIDGE_URL, show_default=True,
    help="Reflection bridge base URL",
)


@click.group()
@click.version_option(version=__version__, prog_name="liveeditor")
def main():
    """Live Editor - admin dashboard for a live game server."""
    pass


@main.command()
@click.option("--host", "-h", default=config.HOST, help="Host to bind to")
@click.option("--port", "-p", default=config.PORT, type=int, help="Port to bind to")
@click.option("--reload", "-r", is_flag=True, help="Enable auto-reload for development")
def run(host: str, port: int, reload: bool):
    """Start the dashboard server."""
    import uvicorn

    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    click.echo(f"⏳ Starting live editor on http://{host}:{port} (bridge: {config.BRIDGE_URL})")
    uvicorn.run(
        "liveeditor.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=config.LOG_LEVEL.lower(),
    )


@main.command()
@click.argument("class_name")
@click.option("--index", "-i", "instance_index", default=0, type=int, help="Instance index")
@click.option("--path", "-p", "property_path", default="", help="Dotted property path")
@click.option("--max-items", "-n", default=config.DEFAULT_MAX_ITEMS, type=int, help="Row limit")
@click.option("--functions", "-f", is_flag=True, help="List callable functions instead of properties")
@click.option("--filter", "name_filter", default=None, help="Function name filter (with --functions)")
@bridge_option
def dump(
    class_name: str,
    instance_index: int,
    property_path: str,
    max_items: int,
    functions: bool,
    name_filter: str | None,
    bridge_url: str,
):
    """Dump one path of the live object graph.

    Examples:
        liveeditor dump PalPlayerState
        liveeditor dump PalPlayerState -p PlayerCharacter.CharacterParameterComponent
        liveeditor dump PalPlayerCharacter -f --filter Heal
    """
    mode = DumpMode.FUNCTIONS if functions else DumpMode.PROPERTIES

    async def _dump() -> tuple[DumpOutcome, ExplorerView]:
        async with BridgeClient(bridge_url) as bridge:
            session = ExplorerSession(bridge, default_class=class_name, max_items=max_items)
            outcome = await session.submit(
                class_name,
                instance_index,
                property_path,
                max_items=max_items,
                mode=mode,
                name_filter=name_filter,
            )
            return outcome, build_view(session)

    outcome, view = asyncio.run(_dump())
    _echo_view(view)
    if outcome is not DumpOutcome.APPLIED:
        sys.exit(1)


@main.command()
@click.option("--force", is_flag=True, help="Re-run every lookup even if the bridge has a cached result")
@bridge_option
def probe(force: bool, bridge_url: str):
    """Run property auto-discovery on the bridge."""

    async def _probe() -> DiscoveryProbe:
        async with BridgeClient(bridge_url) as bridge:
            discovery = DiscoveryProbe(bridge)
            await discovery.probe(force=force)
            return discovery

    discovery = asyncio.run(_probe())
    indicator = discovery.indicator()

    if discovery.result is None:
        click.echo(click.style(f"⚠️  {indicator.title}", fg="red"))
        sys.exit(1)

    click.echo(click.style(indicator.text, bold=True) + f"  {indicator.title}")
    for role, path in sorted(discovery.result.properties.items()):
        found = discovery.result.resolve(role) is not None
        click.echo(f"  {role:<24} " + click.style(path, fg="green" if found else "yellow"))


# ============================================================================
# Output
# ============================================================================

VALUE_COLORS = {
    "numeric": "cyan",
    "bool-true": "green",
    "bool-false": "red",
    "text": "yellow",
    "error": "red",
}


def _echo_view(view: ExplorerView) -> None:
    if view.breadcrumb:
        click.echo(" . ".join(item.label for item in view.breadcrumb))

    color = {"ok": "green", "err": "red"}.get(view.status.kind)
    click.echo(click.style(view.status.text, fg=color))

    info = view.results_info
    if info.visible:
        click.echo(f"Path: {info.class_path}  Instances: {info.instances}  {info.noun} shown: {info.shown}")

    for row in view.properties:
        marker = " ->" if row.drillable else ""
        value = click.style(row.value, fg=VALUE_COLORS.get(row.value_class))
        click.echo(f"{row.offset}  {row.type:<20} {row.name:<32} {value}{marker}")

    for row in view.functions:
        flags = f"  [{', '.join(row.flags)}]" if row.flags else ""
        click.echo(click.style(row.signature, fg="red" if row.error else None) + flags)

    if view.empty_message and not view.error:
        click.echo(view.empty_message)
