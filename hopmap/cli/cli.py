import json
import sys
from pathlib import Path
from typing import List

import typer

import hopmap
import hopmap.cli.cli_cache
import hopmap.cli.cli_config
from hopmap.api.server import TraceAPI, create_app
from hopmap.cache.location_cache import LocationCache
from hopmap.cli.impl.common import build_pipeline, console, print_hops_table, register_exception_handler
from hopmap.config_paths import hopmap_config, log_path
from hopmap.exceptions import HopmapException
from hopmap.models import ResolvedHop
from hopmap.probe import run_traceroute, validate_target
from hopmap.utils import logger

app = typer.Typer(name="hopmap")
app.add_typer(hopmap.cli.cli_cache.app, name="cache")
app.add_typer(hopmap.cli.cli_config.app, name="config")


def _emit(hops: List[ResolvedHop], as_json: bool):
    if as_json:
        typer.echo(json.dumps([hop.as_dict() for hop in hops], indent=2))
    else:
        print_hops_table(hops)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", help="Also write the debug log to hopmap.log")):
    if verbose:
        logger.open_log_file(log_path)
    register_exception_handler()


@app.command()
def resolve(
    trace_file: str = typer.Argument("-", help="File holding traceroute output, or - for stdin"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON records instead of a table"),
):
    """Locate the hops of a saved traceroute."""
    if trace_file == "-":
        text = sys.stdin.read()
    else:
        path = Path(trace_file).expanduser()
        if not path.exists():
            typer.secho(f"{path} does not exist", fg="red", err=True)
            raise typer.Exit(code=1)
        text = path.read_text()

    try:
        with LocationCache(hopmap_config.cache_path) as cache:
            hops = build_pipeline(hopmap_config, cache).run_text(text)
    except HopmapException as e:
        console.print(e.pretty_print_str())
        raise typer.Exit(code=1)
    _emit(hops, as_json)


@app.command()
def trace(
    target: str = typer.Argument(..., help="IPv4 or IPv6 address to trace"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON records instead of a table"),
):
    """Run traceroute to TARGET and locate each hop."""
    try:
        target = validate_target(target)
        output = run_traceroute(
            target,
            max_hops=hopmap_config.get_flag("probe_max_hops"),
            wait_seconds=hopmap_config.get_flag("probe_wait_seconds"),
            queries=hopmap_config.get_flag("probe_queries"),
        )
        with LocationCache(hopmap_config.cache_path) as cache:
            hops = build_pipeline(hopmap_config, cache).run_text(output)
    except HopmapException as e:
        console.print(e.pretty_print_str())
        raise typer.Exit(code=1)
    _emit(hops, as_json)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Address to listen on"),
    port: int = typer.Option(8080, "--port", "-p", help="Port to listen on"),
):
    """Serve GET /api, which traces back to the caller and returns located hops."""
    cache = LocationCache(hopmap_config.cache_path)
    try:
        pipeline = build_pipeline(hopmap_config, cache)
    except HopmapException as e:
        console.print(e.pretty_print_str())
        cache.close()
        raise typer.Exit(code=1)

    api = TraceAPI(create_app(pipeline, config=hopmap_config), host=host, port=port)
    mode = " (dev mode, serving the sample trace)" if hopmap_config.dev_mode else ""
    typer.secho(f"hopmap {hopmap.__version__} serving on {api.url}{mode}", fg="green")
    api.start()
    try:
        api.join()
    except KeyboardInterrupt:
        typer.secho("Shutting down", fg="yellow", err=True)
    finally:
        api.shutdown()
        cache.close()


typer_click_object = typer.main.get_command(app)

if __name__ == "__main__":
    app()
