import sys
import traceback as tb
from typing import List

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from hopmap.cache.location_cache import LocationCache
from hopmap.config import HopmapConfig
from hopmap.models import ResolvedHop
from hopmap.pipeline import TracePipeline
from hopmap.reference.tables import load_reference_tables
from hopmap.utils import logger
from hopmap.utils.definitions import format_delay

console = Console()


def build_pipeline(config: HopmapConfig, cache: LocationCache) -> TracePipeline:
    config.check_config()
    tables = load_reference_tables(config.get_flag("cities_path") or None, config.get_flag("airports_path") or None)
    return TracePipeline.from_config(config, tables, cache)


def print_hops_table(hops: List[ResolvedHop]):
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Host")
    table.add_column("Address")
    table.add_column("Delay", justify="right")
    table.add_column("Location")
    table.add_column("Coordinates", justify="right")
    for resolved in hops:
        hop, guess = resolved.hop, resolved.guess
        location = guess.label if guess else "[bright_black]-[/bright_black]"
        coordinates = f"{guess.coordinates[0]:.4f}, {guess.coordinates[1]:.4f}" if guess else ""
        table.add_row(str(hop.index), hop.hostname, hop.address, format_delay(hop.delay_ms), location, coordinates)
    console.print(table)
    n_located = sum(1 for hop in hops if hop.located)
    console.print(f"[bright_black]{n_located}/{len(hops)} hops located. Coordinates are heuristic and may be inaccurate.[/bright_black]")


def register_exception_handler():
    def exception_handler(exception_type, exception, traceback, debug_hook=sys.excepthook):
        # write full traceback infomation to the log file
        logger.fs.error(f"Uncaught exception: {exception_type.__name__}: {exception}")
        logger.fs.error("Traceback:\n" + "".join(tb.format_exception(exception_type, exception, traceback)))
        rprint(f"[red][bold]Uncaught exception:[/bold] ({exception_type.__name__}) {exception}[/red]", file=sys.stderr)
        typer.secho("Please check the log file for more information.", fg=typer.colors.YELLOW)
        sys.exit(1)

    sys.excepthook = exception_handler
