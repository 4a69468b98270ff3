"""Turning colors and scenes into light commands.

This module applies the device policy on top of the color conversions and
plans the commands to send for a selection. Sending them is left to a
:class:`StateSink` supplied by the caller; hue-console itself ships only the
dry-run sink used by the CLI.

Device policy:

- hue 0 means "keep the current hue" to the bridge, so red is sent as 65535
- saturation 0 and temperature 0 are sent as 1 for the same reason
- a value of 0 turns the light off instead of changing its color
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Union

from .color import (
    DEFAULT_PROFILE,
    HUE_MAX,
    ColorProfile,
    RGBAColor,
    to_color_temp,
    to_hsv,
    to_xy,
)
from .exceptions import SceneNotFoundError
from .models import COLOR_MODE_CT, COLOR_MODE_XY, Group, Light
from .registry import EntityRegistry

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateUpdate:
    """Fields of a light state update; None fields are not sent."""

    on: Optional[bool] = None
    hue: Optional[int] = None
    sat: Optional[int] = None
    ct: Optional[int] = None
    xy: Optional[tuple[float, float]] = None
    bri: Optional[int] = None

    def to_dict(self) -> dict[str, object]:
        """Convert to the bridge's state body, omitting unset fields."""
        data: dict[str, object] = {}
        for key in ("on", "hue", "sat", "ct", "xy", "bri"):
            value = getattr(self, key)
            if value is not None:
                data[key] = list(value) if key == "xy" else value
        return data


@dataclass(frozen=True)
class SetState:
    light_id: int
    update: StateUpdate


@dataclass(frozen=True)
class TurnOff:
    light_id: int


@dataclass(frozen=True)
class RecallScene:
    group_id: int
    scene_id: str


Command = Union[SetState, TurnOff, RecallScene]


class StateSink(Protocol):
    """Something that can actuate lights, e.g. a bridge client."""

    def set_state(self, light_id: int, update: StateUpdate) -> None: ...

    def turn_off(self, light_id: int) -> None: ...

    def recall_scene(self, group_id: int, scene_id: str) -> None: ...


def plan_color(
    lights: Iterable[Light],
    color: RGBAColor,
    profile: ColorProfile = DEFAULT_PROFILE,
) -> list[Command]:
    """Plan the commands that set ``lights`` to ``color``.

    Every light gets hue and saturation first, then the temperature or
    chromaticity matching its color mode, then brightness. A color whose
    value is 0 (black or transparent) turns the lights off instead.

    Args:
        lights: Target lights; commands are planned in id order
        color: Color to set
        profile: Color profile for lights in ``xy`` mode

    Returns:
        Commands in the order they should be sent
    """
    targets = sorted(lights, key=lambda light: light.id)
    hsv = to_hsv(color)

    if hsv.value == 0:
        _LOGGER.debug("Color %s has no value, turning %d lights off", color.to_hex(), len(targets))
        return [TurnOff(light.id) for light in targets]

    hue = HUE_MAX if hsv.hue == 0 else hsv.hue
    sat = 1 if hsv.sat == 0 else hsv.sat

    commands: list[Command] = []
    for light in targets:
        commands.append(SetState(light.id, StateUpdate(on=True, hue=hue, sat=sat)))

        if light.color_mode == COLOR_MODE_CT:
            temp = to_color_temp(color)
            ct = 1 if temp.temperature == 0 else temp.temperature
            commands.append(SetState(light.id, StateUpdate(on=True, ct=ct)))
        elif light.color_mode == COLOR_MODE_XY:
            xy = to_xy(color, profile)
            commands.append(SetState(light.id, StateUpdate(on=True, xy=(xy.x, xy.y))))

        commands.append(SetState(light.id, StateUpdate(bri=hsv.value)))

    _LOGGER.debug("Planned %d commands for %d lights", len(commands), len(targets))
    return commands


def plan_scene(registry: EntityRegistry, scene_id: str) -> list[Command]:
    """Plan recalling a scene by id.

    Raises:
        SceneNotFoundError: If no group owns the scene
    """
    group, scene = registry.scene(scene_id)
    return [RecallScene(group.id, scene.id)]


def plan_group_scene(groups: Iterable[Group], name: str) -> list[Command]:
    """Plan recalling the first scene named ``name`` among ``groups``.

    Groups are searched in id order and scenes in id order within a group.

    Raises:
        SceneNotFoundError: If none of the groups has such a scene
    """
    for group in sorted(groups, key=lambda g: g.id):
        for scene in EntityRegistry.sorted_scenes(group):
            if scene.name == name:
                return [RecallScene(group.id, scene.id)]
    raise SceneNotFoundError(f"no such scene: {name}")


def apply_commands(sink: StateSink, commands: Iterable[Command]) -> int:
    """Send planned commands to ``sink`` in order.

    Errors raised by the sink propagate and stop the remaining commands.

    Returns:
        Number of commands sent
    """
    sent = 0
    for command in commands:
        if isinstance(command, TurnOff):
            sink.turn_off(command.light_id)
        elif isinstance(command, RecallScene):
            sink.recall_scene(command.group_id, command.scene_id)
        else:
            sink.set_state(command.light_id, command.update)
        sent += 1
    return sent
