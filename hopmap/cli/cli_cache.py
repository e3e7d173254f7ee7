"""
Cache interface:
* hopmap cache stats
* hopmap cache get <ip>
* hopmap cache clear
"""

import typer

from hopmap.cache.location_cache import LocationCache
from hopmap.cli.impl.common import console
from hopmap.config_paths import hopmap_config

app = typer.Typer(name="hopmap-cache")


@app.command()
def stats():
    """Count cached addresses by classification."""
    with LocationCache(hopmap_config.cache_path) as cache:
        counts = cache.stats()
    console.print(f"[bold]Cache:[/bold] [bright_black]{hopmap_config.cache_path}[/bright_black]")
    for state, count in counts.items():
        console.print(f"[bold][blue]{state}[/blue] = [green]{count}[/green][/bold]")


@app.command()
def get(ip: str = typer.Argument(..., help="Address to look up")):
    """Show the cached classification of an address."""
    with LocationCache(hopmap_config.cache_path) as cache:
        entry = cache.get(ip)
    if entry is None:
        console.print(f"[yellow]{ip} is not cached[/yellow]")
        raise typer.Exit(code=1)
    coordinates = f" at {entry.coordinates[0]}, {entry.coordinates[1]}" if entry.coordinates else ""
    console.print(f"[bold][blue]{ip}[/blue] = [green]{entry.state.value}[/green][/bold]{coordinates}")


@app.command()
def clear(yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation")):
    """Delete every cached address. Addresses will be looked up again on their next trace."""
    if not yes and not typer.confirm(f"Delete all cached addresses in {hopmap_config.cache_path}?", default=False):
        raise typer.Abort()
    with LocationCache(hopmap_config.cache_path) as cache:
        n_deleted = cache.clear()
    console.print(f"[green]Deleted {n_deleted} cached addresses[/green]")
