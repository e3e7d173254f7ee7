"""
Config interface:
* hopmap config list
* hopmap config get <key>
* hopmap config set <key> <value>

Available keys include:
* heuristic_before_address (bool): Try hostname city/airport matching before address geolocation
* cache_path (str): SQLite file memoizing address lookups
"""

import typer

from hopmap.cli.impl.common import console
from hopmap.config import HopmapConfig
from hopmap.config_paths import config_path, hopmap_config
from hopmap.exceptions import BadConfigException

app = typer.Typer(name="hopmap-config")


def _file_config() -> HopmapConfig:
    # edit the file contents only, without environment overrides
    return HopmapConfig.load_config(config_path) if config_path.exists() else HopmapConfig.default_config()


@app.command()
def list():
    """List all available config keys and their effective values"""
    for key in hopmap_config.valid_flags():
        value = hopmap_config.get_flag(key)
        console.print(f"[bold][blue]{key}[/blue] = [italic][green]{value}[/italic][/green][/bold]")


@app.command()
def get(key: str):
    """Get a config value."""
    try:
        value = hopmap_config.get_flag(key)
        console.print(f"[bold][blue]{key}[/blue] = [italic][green]{value}[/italic][/green]")
    except KeyError:
        console.print(f"[red][bold]{key}[/bold] is not a valid config key[/red]")
        raise typer.Exit(code=1)


@app.command()
def set(key: str, value: str):
    """Set a config value."""
    config = _file_config()
    try:
        old = config.get_flag(key)
        config.set_flag(key, value)
        config.check_config()
    except KeyError:
        console.print(f"[red][bold]{key}[/bold] is not a valid config key[/red]")
        raise typer.Exit(code=1)
    except BadConfigException as e:
        console.print(e.pretty_print_str())
        raise typer.Exit(code=1)
    new = config.get_flag(key)
    config.to_config_file(config_path)
    console.print(f"[bold][blue]{key}[/blue] = [italic][green]{new}[/italic][/green][/bold] [bright_black](was {old})[/bright_black]")
