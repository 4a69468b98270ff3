"""Command line interface for hue-console.

Usage:
    hue-console color '#ff8800' --profile srgb
    hue-console --registry bridge.yaml resolve 'g1,3,l5'
    hue-console --registry bridge.yaml plan 'LivingRoom,l10-l12' '#08f'
    hue-console --registry bridge.yaml plan g1 Relax
    hue-console --registry bridge.yaml plan AbC123
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .color import get_profile, parse_hex_color, to_color_temp, to_hsv, to_xy
from .config import DEFAULT_CONFIG_FILE, ConsoleConfig
from .exceptions import ColorFormatError, ConfigError, HueConsoleError
from .identifiers import IdentifierResolver, format_group_id, format_light_id
from .registry import EntityRegistry
from .snapshot import load_snapshot
from .state import (
    Command,
    StateUpdate,
    apply_commands,
    plan_color,
    plan_group_scene,
    plan_scene,
)

_LOGGER = logging.getLogger(__name__)


class DryRunSink:
    """State sink that records commands instead of sending them."""

    def __init__(self) -> None:
        self.rows: list[tuple[str, str, str]] = []

    def set_state(self, light_id: int, update: StateUpdate) -> None:
        self.rows.append((f"l{light_id}", "set", _format_update(update)))

    def turn_off(self, light_id: int) -> None:
        self.rows.append((f"l{light_id}", "off", ""))

    def recall_scene(self, group_id: int, scene_id: str) -> None:
        self.rows.append((f"g{group_id}", "scene", scene_id))


def _format_update(update: StateUpdate) -> str:
    return " ".join(f"{key}={value}" for key, value in update.to_dict().items())


def _print_output(console: Console, title: str, columns: Sequence[str], rows: list[Sequence[Any]]) -> None:
    """Print rows as a table."""
    table = Table(title=title, box=box.SIMPLE_HEAVY, show_header=True, header_style="bold cyan")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*(str(cell) for cell in row))
    console.print(table)


def _setup_logging(level: str) -> None:
    """Send package logs to stderr through rich."""
    logger = logging.getLogger("hue_console")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))


def _load_registry(config: ConsoleConfig) -> EntityRegistry:
    if config.registry_file is None:
        raise ConfigError(
            "no registry snapshot configured (use --registry or set registry_file)"
        )
    return load_snapshot(config.registry_file)


def cmd_color(args: argparse.Namespace, config: ConsoleConfig, console: Console) -> int:
    color = parse_hex_color(args.color)
    profile = get_profile(args.profile or config.color_profile)

    hsv = to_hsv(color)
    temp = to_color_temp(color)
    xy = to_xy(color, profile)

    rows = [
        ("rgba", f"{color.r} {color.g} {color.b} {color.a}"),
        ("hsv", f"hue={hsv.hue} sat={hsv.sat} value={hsv.value}"),
        ("ct", f"t={temp.temperature} value={temp.value}"),
        (f"xy ({profile.name})", f"x={xy.x:.4f} y={xy.y:.4f} value={xy.value}"),
    ]
    _print_output(console, color.to_hex(), ["Model", "Value"], rows)
    return 0


def cmd_resolve(args: argparse.Namespace, config: ConsoleConfig, console: Console) -> int:
    registry = _load_registry(config)
    resolver = IdentifierResolver(registry)

    if args.lights:
        lights = resolver.resolve_lights(args.expression)
        rows = [(format_light_id(light), light.name) for _, light in sorted(lights.items())]
    else:
        groups, lights = resolver.resolve(args.expression)
        rows = [(format_group_id(group), group.name) for _, group in sorted(groups.items())]
        rows += [(format_light_id(light), light.name) for _, light in sorted(lights.items())]

    _print_output(console, "Selection", ["ID", "Name"], rows)
    return 0


def cmd_plan(args: argparse.Namespace, config: ConsoleConfig, console: Console) -> int:
    registry = _load_registry(config)
    commands: list[Command]

    if args.value is None:
        commands = plan_scene(registry, args.target)
    else:
        resolver = IdentifierResolver(registry)
        try:
            color = parse_hex_color(args.value)
        except ColorFormatError:
            color = None

        if color is not None:
            profile = get_profile(config.color_profile)
            lights = resolver.resolve_lights(args.target)
            commands = plan_color(lights.values(), color, profile)
        else:
            groups, lights = resolver.resolve(args.target)
            if lights:
                raise HueConsoleError("specified lights, scenes only apply to groups")
            commands = plan_group_scene(groups.values(), args.value)

    sink = DryRunSink()
    apply_commands(sink, commands)
    _LOGGER.info("Planned %d commands", len(commands))

    _print_output(console, "Planned commands", ["Target", "Action", "State"], sink.rows)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="hue-console", description="Hue bridge color and scene console")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_FILE, help="Configuration file")
    p.add_argument("--registry", type=Path, default=None, help="Bridge snapshot (YAML/JSON)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = p.add_subparsers(dest="command", required=True)

    pc = sub.add_parser("color", help="Show the device representations of a hex color")
    pc.add_argument("color", help="Hex color: RGB, RGBA, RRGGBB or RRGGBBAA, '#' optional")
    pc.add_argument("--profile", default=None, help="Color profile for xy (default from config)")
    pc.set_defaults(func=cmd_color)

    pr = sub.add_parser("resolve", help="Resolve an identifier expression")
    pr.add_argument("expression", help="e.g. 'LivingRoom', 'g1,2,3', 'l10-l12'")
    pr.add_argument("--lights", action="store_true", help="Expand groups into their lights")
    pr.set_defaults(func=cmd_resolve)

    pp = sub.add_parser("plan", help="Show the commands for a color or scene")
    pp.add_argument("target", help="Identifier expression, or a scene id when alone")
    pp.add_argument("value", nargs="?", default=None, help="Hex color or scene name")
    pp.set_defaults(func=cmd_plan)

    return p


def main(argv: Optional[Sequence[str]] = None, console: Optional[Console] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = ConsoleConfig.load(args.config)
    if args.registry is not None:
        config.registry_file = args.registry
    _setup_logging("DEBUG" if args.verbose else config.log_level)

    console = console or Console()
    try:
        return args.func(args, config, console)
    except HueConsoleError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
