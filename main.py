import logging
import os
import sys

import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.theme import Theme

# Import Engine Components
from adventure import listener
from adventure.builder import load_world_definition
from adventure.director import Director
from adventure.errors import FatalInputError, WorldBuildError

# --- CONFIGURATION ---
CONFIG_PATH = "config.yaml"
DEFAULT_CONFIG = {
    'world_file': "data/worlds/default.yaml",
    'save_file': "savegame.json",
    'log_file': "adventure.log",
    'log_level': "INFO",
    'debug_mode': False,
}
ENV_OVERRIDES = {
    'ADVENTURE_WORLD_FILE': 'world_file',
    'ADVENTURE_SAVE_FILE': 'save_file',
}

custom_theme = Theme({
    "info": "bold #b0d8e3",       # Pale Cyan
    "text": "default",
    "dim": "dim",
    "warning": "bold #ffafaf",    # Soft red
    "success": "bold #a3be8c",    # Soft green
})

logger = logging.getLogger(__name__)


def load_config(config_path=CONFIG_PATH):
    """
    Loads config.yaml or creates default if missing. Environment variables
    (including those from .env) override the file.
    """
    if not os.path.exists(config_path):
        default_yaml = """
# TEXT ADVENTURE CONFIGURATION
# ----------------------------
# world_file: the YAML world definition to play
# save_file: where 'save' writes and 'load' reads the snapshot

world_file: data/worlds/default.yaml
save_file: savegame.json
log_file: adventure.log
log_level: INFO
debug_mode: false
"""
        with open(config_path, "w") as f:
            f.write(default_yaml.strip() + "\n")

    with open(config_path, "r") as f:
        loaded = yaml.safe_load(f) or {}

    config = dict(DEFAULT_CONFIG)
    config.update(loaded)
    for env_name, key in ENV_OVERRIDES.items():
        if os.getenv(env_name):
            config[key] = os.getenv(env_name)
    return config


def _log_level(name):
    """Maps a level name from config.yaml to a logging level, or None if unknown."""
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else None


def setup_logging(config, console):
    """Warnings go to the terminal, everything from log_level up goes to the log file."""
    console_handler = RichHandler(console=console, show_path=False)
    console_handler.setLevel(logging.INFO if config.get('debug_mode') else logging.WARNING)

    level_name = config.get('log_level', "INFO")
    file_level = _log_level(level_name)
    file_handler = logging.FileHandler(config['log_file'])
    file_handler.setLevel(logging.INFO if file_level is None else file_level)
    file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.addHandler(console_handler)
    root.addHandler(file_handler)

    if file_level is None:
        logger.warning("Unknown log_level %r in config, using INFO", level_name)
    return console_handler, file_handler


def read_command(prompt=Prompt.ask):
    """Reads one line of input. Any failure of the input source is fatal."""
    try:
        return prompt("[info]>[/info]")
    except (EOFError, KeyboardInterrupt) as e:
        raise FatalInputError("Input closed") from e
    except OSError as e:
        raise FatalInputError(f"Could not read input: {e}") from e


# ============================================
# GAME LOOP
# ============================================
def run_session(director, console, read=read_command, debug=False):
    """
    Runs the read/parse/execute/print loop until the player exits.
    Returns the process exit status.
    """
    console.print(f"\n{director.world.describe_room()}\n")

    while True:
        try:
            user_input = read()
        except FatalInputError as e:
            logger.error("Session ended: %s", e.message)
            console.print(f"\n[warning]{e.message}. Goodbye.[/warning]")
            return 1

        if not user_input.strip():
            continue

        action = listener.parse(user_input)
        result = director.execute(action)

        if debug:
            console.print(Panel(f"[dim]{action!r}\n{result}[/dim]", title="[DEBUG]", border_style="dim"))

        if result['event_type'] == 'exit':
            console.print(f"[dim]{result['message']}[/dim]")
            return 0

        if result['status'] == 'FAILURE':
            console.print(f"[warning]{result['message']}[/warning]")
            continue

        if result['event_type'] == 'inventory_report':
            console.print(Panel(result['message'].rstrip() or "(Empty)", title="Inventory", border_style="info"))
            continue

        console.print(f"[success]{result['message']}[/success]")
        if result['event_type'] in ('scene_change', 'loaded'):
            console.print(f"\n{director.world.describe_room()}\n")


# ============================================
# MAIN
# ============================================
def main():
    load_dotenv()
    console = Console(theme=custom_theme)
    config = load_config()
    setup_logging(config, console)

    try:
        world = load_world_definition(config['world_file'])
    except WorldBuildError as e:
        console.print(Panel(f"[warning]WORLD LOAD ERROR:[/]\n{e.message}", border_style="warning"))
        return 1

    console.print(Panel(
        f"[bold blue]{world.title}[/bold blue]\n[dim]Type 'quit' to leave.[/dim]",
        title="ADVENTURE STARTED",
        border_style="info"
    ))

    director = Director(world, save_file=config['save_file'])
    return run_session(director, console, debug=config.get('debug_mode', False))


if __name__ == "__main__":
    sys.exit(main())
