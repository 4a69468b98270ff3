"""Registry sources.

A registry source returns the bridge's lights, groups and scenes objects.
:func:`load_registry` fetches groups and lights concurrently and only builds
the registry once both succeeded, so callers never see a partial registry.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional, Protocol

import yaml

from .exceptions import ConfigError
from .models import Group, Light, Scene
from .registry import EntityRegistry

_LOGGER = logging.getLogger(__name__)


class RegistrySource(Protocol):
    """Asynchronous provider of bridge documents keyed by entity id."""

    async def fetch_lights(self) -> dict[str, dict[str, Any]]: ...

    async def fetch_groups(self) -> dict[str, dict[str, Any]]: ...

    async def fetch_scenes(self) -> dict[str, dict[str, Any]]: ...


async def load_registry(source: RegistrySource) -> EntityRegistry:
    """Build a registry from ``source``.

    Groups and lights are fetched concurrently; the first failure is raised
    and no registry is built. Scenes are fetched afterwards and attached to
    their groups. Scenes without a group are skipped.

    Raises:
        RegistryConsistencyError: If a group references an unknown light or
            an id cannot be parsed
    """
    groups_data, lights_data = await asyncio.gather(
        source.fetch_groups(), source.fetch_lights()
    )
    _LOGGER.debug("Fetched %d groups and %d lights", len(groups_data), len(lights_data))

    lights = [Light.from_dict(light_id, data) for light_id, data in lights_data.items()]
    groups = [Group.from_dict(group_id, data) for group_id, data in groups_data.items()]
    registry = EntityRegistry(lights, groups)

    scenes_data = await source.fetch_scenes()
    scenes = [
        Scene.from_dict(scene_id, data)
        for scene_id, data in scenes_data.items()
        if data.get("group")
    ]
    return EntityRegistry(registry.lights.values(), registry.groups.values(), scenes)


class SnapshotSource:
    """Registry source backed by a YAML (or JSON) snapshot of the bridge.

    The document has ``lights``, ``groups`` and ``scenes`` sections in the
    bridge's own shape, e.g.:

        lights:
          "1": {name: Spot 1, state: {on: true, bri: 254, colormode: xy}}
        groups:
          "1": {name: LivingRoom, lights: ["1"]}
        scenes:
          AbC123: {name: Relax, group: "1"}
    """

    SECTIONS = ("lights", "groups", "scenes")

    def __init__(self, path: Path):
        self.path = Path(path)
        self._data: Optional[dict[str, Any]] = None

    def _load(self) -> dict[str, Any]:
        if self._data is None:
            try:
                with open(self.path, "r") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"failed to read registry snapshot {self.path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"registry snapshot {self.path} is not a mapping")
            for section in self.SECTIONS:
                if not isinstance(data.get(section) or {}, dict):
                    raise ConfigError(f"section '{section}' of {self.path} is not a mapping")
            self._data = data
        return self._data

    def _section(self, name: str) -> dict[str, dict[str, Any]]:
        return {str(key): value or {} for key, value in (self._load().get(name) or {}).items()}

    async def fetch_lights(self) -> dict[str, dict[str, Any]]:
        return self._section("lights")

    async def fetch_groups(self) -> dict[str, dict[str, Any]]:
        return self._section("groups")

    async def fetch_scenes(self) -> dict[str, dict[str, Any]]:
        return self._section("scenes")


def load_snapshot(path: Path) -> EntityRegistry:
    """Build a registry from a snapshot file."""
    return asyncio.run(load_registry(SnapshotSource(path)))
