"""In-memory registry of bridge lights, groups and scenes.

The registry is built once from a bridge snapshot and is read-only
afterwards. Entities are keyed by id; a name index is built at construction
since names are not unique.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from enum import Enum
from typing import Iterable, Optional

from .exceptions import (
    GroupNotFoundError,
    LightNotFoundError,
    RegistryConsistencyError,
    SceneNotFoundError,
)
from .models import Group, Light, Scene

_LOGGER = logging.getLogger(__name__)


class Property(Enum):
    """Sort keys for registry listings."""

    ID = "id"
    NAME = "name"


def _sort_key(prop: Property):
    if prop is Property.NAME:
        return lambda entity: (entity.name, entity.id)
    return lambda entity: entity.id


class EntityRegistry:
    """Lights and groups of one bridge.

    Example:
        ```python
        registry = EntityRegistry(lights, groups)
        office = registry.groups_by_name("Office")
        for light in registry.group_lights(office[0]):
            print(light.name)
        ```
    """

    def __init__(
        self,
        lights: Iterable[Light] = (),
        groups: Iterable[Group] = (),
        scenes: Iterable[Scene] = (),
    ) -> None:
        """Build the registry.

        Args:
            lights: Light snapshots with unique ids
            groups: Group snapshots with unique ids, every member light id
                must be in ``lights``
            scenes: Scenes to attach to their owning group; scenes of unknown
                groups are skipped

        Raises:
            RegistryConsistencyError: If an id is repeated or a group references
                an unknown light
        """
        self._lights: dict[int, Light] = {}
        for light in lights:
            if light.id in self._lights:
                raise RegistryConsistencyError(f"duplicate light id {light.id}")
            self._lights[light.id] = light

        self._groups: dict[int, Group] = {}
        for group in groups:
            if group.id in self._groups:
                raise RegistryConsistencyError(f"duplicate group id {group.id}")
            for light_id in group.light_ids:
                if light_id not in self._lights:
                    raise RegistryConsistencyError(
                        f"group {group.id} ({group.name}) references missing light {light_id}"
                    )
            self._groups[group.id] = group

        owned: dict[int, dict[str, Scene]] = defaultdict(dict)
        for scene in scenes:
            if scene.group_id not in self._groups:
                _LOGGER.warning(
                    "Skipping scene %s (%s): group %d not found",
                    scene.id,
                    scene.name,
                    scene.group_id,
                )
                continue
            owned[scene.group_id][scene.id] = scene
        for group_id, group_scenes in owned.items():
            group = self._groups[group_id]
            self._groups[group_id] = group.with_scenes({**group.scenes, **group_scenes})

        self._light_names: dict[str, list[int]] = defaultdict(list)
        for light in self._lights.values():
            self._light_names[light.name].append(light.id)
        self._group_names: dict[str, list[int]] = defaultdict(list)
        for group in self._groups.values():
            self._group_names[group.name].append(group.id)

        _LOGGER.debug(
            "Registry built: %d lights, %d groups, %d scenes",
            len(self._lights),
            len(self._groups),
            sum(len(g.scenes) for g in self._groups.values()),
        )

    def __repr__(self) -> str:
        return f"EntityRegistry(lights={len(self._lights)}, groups={len(self._groups)})"

    # Lights

    @property
    def lights(self) -> dict[int, Light]:
        return dict(self._lights)

    def light(self, light_id: int) -> Light:
        """Get a light by id.

        Raises:
            LightNotFoundError: If no light has that id
        """
        try:
            return self._lights[light_id]
        except KeyError:
            raise LightNotFoundError(f"no such light: {light_id}") from None

    def lights_by_name(self, name: str) -> list[Light]:
        """Return every light named exactly ``name``, ordered by id."""
        return [self._lights[i] for i in sorted(self._light_names.get(name, ()))]

    def sorted_lights(self, prop: Property = Property.ID) -> list[Light]:
        return sorted(self._lights.values(), key=_sort_key(prop))

    # Groups

    @property
    def groups(self) -> dict[int, Group]:
        return dict(self._groups)

    def group(self, group_id: int) -> Group:
        """Get a group by id.

        Raises:
            GroupNotFoundError: If no group has that id
        """
        try:
            return self._groups[group_id]
        except KeyError:
            raise GroupNotFoundError(f"no such group: {group_id}") from None

    def groups_by_name(self, name: str) -> list[Group]:
        """Return every group named exactly ``name``, ordered by id."""
        return [self._groups[i] for i in sorted(self._group_names.get(name, ()))]

    def sorted_groups(self, prop: Property = Property.ID) -> list[Group]:
        return sorted(self._groups.values(), key=_sort_key(prop))

    def group_lights(self, group: Group, prop: Property = Property.ID) -> list[Light]:
        """Return the member lights of ``group``."""
        return sorted((self._lights[i] for i in group.light_ids), key=_sort_key(prop))

    # Scenes

    def scene(self, scene_id: str) -> tuple[Group, Scene]:
        """Find a scene and its owning group.

        Raises:
            SceneNotFoundError: If no group owns a scene with that id
        """
        for group in self.sorted_groups():
            scene: Optional[Scene] = group.scenes.get(scene_id)
            if scene is not None:
                return group, scene
        raise SceneNotFoundError(f"no such scene: {scene_id}")

    @staticmethod
    def sorted_scenes(group: Group, prop: Property = Property.ID) -> list[Scene]:
        return sorted(group.scenes.values(), key=_sort_key(prop))
