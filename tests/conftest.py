"""Shared fixtures for hue-console tests."""

from __future__ import annotations

import pytest

from hue_console.models import Group, Light, LightState, Scene
from hue_console.registry import EntityRegistry

SNAPSHOT_YAML = """\
lights:
  "1": {name: Spot 1, state: {on: true, bri: 254, colormode: hs}}
  "2": {name: Spot 2, state: {on: false, bri: 10, colormode: hs}}
  "5": {name: Desk, state: {on: true, bri: 200, colormode: ct}}
  "10": {name: Ceiling, state: {on: true, bri: 100, colormode: xy}}
  "11": {name: Counter, state: {on: false, bri: 0}}
  "12": {name: Office, state: {on: true, bri: 50, colormode: xy}}
groups:
  "1": {name: LivingRoom, lights: ["1", "2"]}
  "2": {name: Kitchen, lights: ["11", "12"]}
  "3": {name: Office, lights: ["5", "10"]}
scenes:
  relax1: {name: Relax, group: "1"}
  bright3: {name: Bright, group: "3"}
  relax3: {name: Relax, group: "3"}
  orphan: {name: Lost, group: "9"}
  global: {name: Everywhere}
"""


@pytest.fixture
def lights():
    return [
        Light(1, "Spot 1", LightState(on=True, brightness=254, color_mode="hs")),
        Light(2, "Spot 2", LightState(on=False, brightness=10, color_mode="hs")),
        Light(5, "Desk", LightState(on=True, brightness=200, color_mode="ct")),
        Light(10, "Ceiling", LightState(on=True, brightness=100, color_mode="xy")),
        Light(11, "Counter"),
        Light(12, "Office", LightState(on=True, brightness=50, color_mode="xy")),
    ]


@pytest.fixture
def groups():
    return [
        Group(1, "LivingRoom", (1, 2)),
        Group(2, "Kitchen", (11, 12)),
        Group(3, "Office", (5, 10)),
    ]


@pytest.fixture
def scenes():
    return [
        Scene("relax1", "Relax", 1),
        Scene("bright3", "Bright", 3),
        Scene("relax3", "Relax", 3),
        Scene("orphan", "Lost", 9),
    ]


@pytest.fixture
def registry(lights, groups, scenes):
    """Registry with lights {1,2,5,10,11,12} and groups {1,2,3}."""
    return EntityRegistry(lights, groups, scenes)


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "bridge.yaml"
    path.write_text(SNAPSHOT_YAML)
    return path
