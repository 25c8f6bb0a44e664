#!/usr/bin/env python3
"""
WiZard CLI - control a WiZ bulb from the command line

Usage:
    wizard <ip> on                    # Turn on the bulb
    wizard <ip> off                   # Turn off the bulb
    wizard <ip> toggle                # Toggle the bulb state
    wizard <ip> status                # Show bulb status
    wizard <ip> brightness <0-100>    # Set brightness
    wizard <ip> sceneid <id>          # Set scene by id
    wizard <ip> scene <name>          # Set scene by name
    wizard <ip> scenes                # List available scenes
    wizard <ip> speed <1-200>         # Set scene speed
    wizard <ip> color <hex|name>      # Set color by hex code (no #) or name
    wizard <ip> rgb <r> <g> <b>       # Set color by RGB values
    wizard <ip> temp <value>          # Set color temperature (2700-6500 or warm, neutral, cool)
    wizard help                       # Show this message

Environment:
    WIZARD_LOG_LEVEL (or LOG_LEVEL)   Logging level, default WARNING
    WIZARD_TIMEOUT                    Reply timeout in seconds, default 2
"""

import argparse
import logging
from typing import Callable, List, Optional

from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .colors import NAMED_COLORS, TEMPERATURE_PRESETS, is_hex_color
from .errors import InvalidInputError, WizardError
from .light import Light
from .models import Configuration
from .scenes import SCENES, scene_name
from .settings import Settings, setup_logging

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

NOT_APPLICABLE = "N/A for current mode."

COMMANDS = (
    "on", "off", "toggle", "status", "brightness", "sceneid", "scene",
    "scenes", "speed", "color", "rgb", "temp", "help",
)

Action = Callable[[Light], Optional[Configuration]]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='wizard',
        description='WiZard - Control WiZ bulbs over your LAN',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument('ip', nargs='?', help='IP address of the bulb')
    parser.add_argument('command', nargs='?', help='Command to run (see below)')
    parser.add_argument('values', nargs='*', help='Command arguments')

    parser.add_argument(
        '-t', '--timeout',
        type=float,
        default=None,
        help='Reply timeout in seconds (default: 2)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )
    return parser


def _int_value(values: List[str], index: int, low: int, high: int, message: str) -> int:
    try:
        value = int(values[index])
    except (IndexError, ValueError):
        raise InvalidInputError(message)
    if not low <= value <= high:
        raise InvalidInputError(message)
    return value


def build_action(command: str, values: List[str]) -> Action:
    """
    Validate command arguments and return the call to make on the light

    Raises:
        InvalidInputError: If the command is unknown or an argument is invalid
    """
    if command == "on":
        return lambda light: light.turn_on()

    if command == "off":
        return lambda light: light.turn_off()

    if command == "toggle":
        return lambda light: light.toggle()

    if command == "status":
        return lambda light: light.get_status()

    if command == "brightness":
        level = _int_value(values, 0, 0, 100,
                           "Invalid brightness value. Must be between 0 and 100.")
        return lambda light: light.set_brightness(level)

    if command == "sceneid":
        try:
            scene_id = int(values[0])
        except (IndexError, ValueError):
            scene_id = None
        if scene_id not in SCENES.values():
            raise InvalidInputError("Invalid scene ID. Please choose from the following:")
        return lambda light: light.set_scene(scene_id=scene_id)

    if command == "scene":
        name = " ".join(values)
        if name not in SCENES:
            raise InvalidInputError("Invalid scene value. Please choose from the following:")
        return lambda light: light.set_scene_by_name(name)

    if command == "speed":
        speed = _int_value(values, 0, 1, 200,
                           "Invalid speed value. Must be numeric and between 1 and 200.")
        return lambda light: light.set_speed(speed)

    if command == "color":
        value = values[0] if values else ""
        if is_hex_color(value):
            return lambda light: light.set_color(hex_code=value)
        if value.lower() in NAMED_COLORS:
            return lambda light: light.set_color(name=value)
        raise InvalidInputError(
            "Invalid color value. Must be a valid hex code or one of: " + ", ".join(NAMED_COLORS)
        )

    if command == "rgb":
        message = "Invalid RGB values. Must be numeric and between 0 and 255."
        red = _int_value(values, 0, 0, 255, message)
        green = _int_value(values, 1, 0, 255, message)
        blue = _int_value(values, 2, 0, 255, message)
        return lambda light: light.set_color(red=red, green=green, blue=blue)

    if command == "temp":
        value = values[0].lower() if values else ""
        if value in TEMPERATURE_PRESETS:
            kelvin = TEMPERATURE_PRESETS[value]
        else:
            kelvin = _int_value(values, 0, 2700, 6500,
                                "Invalid temperature value. Must be numeric and between 2700K and 6500K.")
        return lambda light: light.set_color_temperature(kelvin)

    raise InvalidInputError(f"Unknown command: {command}")


def _format_value(field: str, value) -> str:
    if value is None:
        return f"[dim]{NOT_APPLICABLE}[/dim]"
    if field == "power":
        return "[green]on[/green]" if value else "[red]off[/red]"
    if field == "scene_id":
        return f"{value} ({escape(scene_name(value) or 'Unknown')})"
    return str(value)


def print_status(config: Configuration, address: str):
    """Print the bulb status as a table"""
    labels = {
        "power": "Power",
        "scene_id": "Scene",
        "red": "Red",
        "green": "Green",
        "blue": "Blue",
        "speed": "Speed",
        "color_temp": "Temperature (K)",
        "brightness": "Brightness (%)",
    }

    table = Table(title=f"Status of {escape(address)}", box=box.ROUNDED)
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    for field, label in labels.items():
        table.add_row(label, _format_value(field, getattr(config, field)))

    console.print(table)


def print_scenes(target: Optional[Console] = None):
    """Print the scene catalog"""
    table = Table(title="Available scenes", box=box.ROUNDED)
    table.add_column("Name", style="cyan")
    table.add_column("ID", justify="right")

    for name, scene_id in SCENES.items():
        table.add_row(name, str(scene_id))

    (target or console).print(table)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env(
            log_level="DEBUG" if args.verbose else None,
            timeout=args.timeout
        )
    except ValidationError as e:
        err_console.print(f"[red]Invalid settings: {escape(str(e))}[/red]")
        return 1

    setup_logging(settings.log_level)

    if args.ip in (None, "help") or args.command in (None, "help"):
        parser.print_help()
        return 1

    if args.command not in COMMANDS:
        err_console.print(f"[red]Unknown command: {escape(args.command)}[/red]")
        parser.print_help()
        return 1

    if args.command == "scenes":
        print_scenes()
        return 0

    try:
        action = build_action(args.command, args.values)
    except InvalidInputError as e:
        err_console.print(f"[red]{escape(e.message)}[/red]")
        if args.command in ("scene", "sceneid"):
            print_scenes(err_console)
        return 1

    try:
        with Light(args.ip, timeout=settings.timeout) as light:
            config = action(light)
    except WizardError as e:
        logger.debug("Command failed", exc_info=True)
        err_console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
        return 1

    if args.command == "status":
        print_status(config, args.ip)
    else:
        console.print(f"[green]✓[/green] {escape(args.command)} sent to {escape(args.ip)}")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
