"""Tests for the entity registry and models."""

import logging

import pytest

from hue_console.exceptions import (
    EntityLookupError,
    GroupNotFoundError,
    LightNotFoundError,
    RegistryConsistencyError,
    SceneNotFoundError,
)
from hue_console.models import Group, Light, LightState, Scene
from hue_console.registry import EntityRegistry, Property


def test_lookup_by_id(registry):
    assert registry.light(10).name == "Ceiling"
    assert registry.group(3).name == "Office"


def test_missing_ids_raise_lookup_errors(registry):
    with pytest.raises(LightNotFoundError):
        registry.light(99)
    with pytest.raises(GroupNotFoundError) as exc_info:
        registry.group(7)
    assert isinstance(exc_info.value, EntityLookupError)
    assert isinstance(exc_info.value, LookupError)


def test_group_with_unknown_light_is_rejected(lights):
    """Test that every group member must be a known light."""
    with pytest.raises(RegistryConsistencyError, match="missing light 42"):
        EntityRegistry(lights, [Group(1, "Broken", (1, 42))])


def test_duplicate_light_id_is_rejected(lights):
    with pytest.raises(RegistryConsistencyError, match="duplicate light id 5"):
        EntityRegistry(lights + [Light(5, "Desk copy")])


def test_duplicate_group_id_is_rejected(lights, groups):
    with pytest.raises(RegistryConsistencyError, match="duplicate group id 2"):
        EntityRegistry(lights, groups + [Group(2, "Pantry", (11,))])


def test_lookup_by_name(registry):
    assert [g.id for g in registry.groups_by_name("Office")] == [3]
    assert [light.id for light in registry.lights_by_name("Office")] == [12]
    assert registry.lights_by_name("Nope") == []


def test_sorting(registry):
    assert [light.id for light in registry.sorted_lights()] == [1, 2, 5, 10, 11, 12]
    assert [light.name for light in registry.sorted_lights(Property.NAME)] == [
        "Ceiling",
        "Counter",
        "Desk",
        "Office",
        "Spot 1",
        "Spot 2",
    ]
    assert [g.name for g in registry.sorted_groups(Property.NAME)] == ["Kitchen", "LivingRoom", "Office"]


def test_group_lights(registry):
    assert [light.id for light in registry.group_lights(registry.group(2))] == [11, 12]


def test_listing_returns_copies(registry):
    """Test that callers cannot mutate the registry through its listings."""
    registry.lights.clear()
    registry.groups.clear()
    assert len(registry.lights) == 6
    assert len(registry.groups) == 3


def test_scenes_are_attached_to_groups(registry):
    assert set(registry.group(3).scenes) == {"bright3", "relax3"}
    assert set(registry.group(1).scenes) == {"relax1"}
    assert registry.group(2).scenes == {}


def test_scene_lookup(registry):
    group, scene = registry.scene("relax3")
    assert group.id == 3
    assert scene.name == "Relax"


def test_scene_of_unknown_group_is_skipped(registry):
    with pytest.raises(SceneNotFoundError):
        registry.scene("orphan")


def test_skipped_scene_is_logged_as_warning(lights, groups, caplog):
    with caplog.at_level(logging.WARNING, logger="hue_console.registry"):
        EntityRegistry(lights, groups, [Scene("orphan", "Lost", 9)])
    assert [r.levelno for r in caplog.records] == [logging.WARNING]
    assert "Skipping scene orphan (Lost): group 9 not found" in caplog.text


def test_sorted_scenes(registry):
    group = registry.group(3)
    assert [s.id for s in EntityRegistry.sorted_scenes(group)] == ["bright3", "relax3"]
    assert [s.name for s in EntityRegistry.sorted_scenes(group, Property.NAME)] == ["Bright", "Relax"]


def test_light_from_dict():
    light = Light.from_dict("7", {"name": "Lamp", "state": {"on": True, "bri": 77, "colormode": "ct"}})
    assert light == Light(7, "Lamp", LightState(on=True, brightness=77, color_mode="ct"))
    assert light.color_mode == "ct"


def test_group_from_dict_parses_light_ids():
    group = Group.from_dict("2", {"name": "Hall", "lights": ["3", "1"]})
    assert group.id == 2
    assert group.light_ids == (3, 1)


@pytest.mark.parametrize("raw", ["x", "", "-1"])
def test_invalid_entity_ids(raw):
    with pytest.raises(RegistryConsistencyError):
        Light.from_dict(raw, {"name": "Bad"})


def test_light_with_null_state_uses_defaults():
    light = Light.from_dict("4", {"name": "Lamp", "state": None})
    assert light.state == LightState()


def test_light_with_null_brightness():
    light = Light.from_dict("4", {"name": "Lamp", "state": {"on": True, "bri": None}})
    assert light.state == LightState(on=True, brightness=0)


@pytest.mark.parametrize("state", [{"bri": "x"}, {"bri": [1]}, "on"])
def test_light_with_malformed_state(state):
    with pytest.raises(RegistryConsistencyError, match="invalid state for light 4"):
        Light.from_dict("4", {"name": "Lamp", "state": state})


def test_group_with_null_lights():
    assert Group.from_dict("2", {"name": "Empty", "lights": None}).light_ids == ()


def test_scene_from_dict_requires_integer_group():
    with pytest.raises(RegistryConsistencyError, match="scene 'Party'"):
        Scene.from_dict("abc", {"name": "Party", "group": "living"})


def test_light_state_to_dict():
    assert LightState(on=True, brightness=3, color_mode="xy").to_dict() == {
        "on": True,
        "bri": 3,
        "colormode": "xy",
    }
