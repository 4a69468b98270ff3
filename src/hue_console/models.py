"""Bridge entity models.

Snapshots of lights, groups and scenes as reported by the bridge. Each model
knows how to build itself from the bridge's JSON shape, where ids are the
keys of the enclosing object and light references are strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .exceptions import RegistryConsistencyError

# Color modes reported by the bridge
COLOR_MODE_HS = "hs"
COLOR_MODE_CT = "ct"
COLOR_MODE_XY = "xy"


def parse_entity_id(raw: Any, kind: str) -> int:
    """Parse a bridge-assigned integer id.

    Raises:
        RegistryConsistencyError: If the id is not a non-negative integer
    """
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise RegistryConsistencyError(f"invalid {kind} id '{raw}'") from None
    if value < 0:
        raise RegistryConsistencyError(f"invalid {kind} id '{raw}'")
    return value


@dataclass(frozen=True)
class LightState:
    """Current device state of a light."""

    on: bool = False
    brightness: int = 0
    color_mode: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LightState:
        """Create from the bridge's ``state`` object.

        Raises:
            RegistryConsistencyError: If ``bri`` is not an integer
        """
        try:
            brightness = int(data.get("bri") or 0)
        except (TypeError, ValueError):
            raise RegistryConsistencyError(f"invalid brightness '{data.get('bri')}'") from None
        return cls(
            on=bool(data.get("on", False)),
            brightness=brightness,
            color_mode=data.get("colormode"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"on": self.on, "bri": self.brightness}
        if self.color_mode:
            data["colormode"] = self.color_mode
        return data


@dataclass(frozen=True)
class Light:
    id: int
    name: str
    state: LightState = field(default_factory=LightState)

    @property
    def color_mode(self) -> Optional[str]:
        return self.state.color_mode

    @classmethod
    def from_dict(cls, light_id: Any, data: dict[str, Any]) -> Light:
        """Create from one entry of the bridge's lights object.

        Raises:
            RegistryConsistencyError: If the id or the state is malformed
        """
        lid = parse_entity_id(light_id, "light")
        state = data.get("state") or {}
        if not isinstance(state, dict):
            raise RegistryConsistencyError(f"invalid state for light {lid}")
        try:
            light_state = LightState.from_dict(state)
        except RegistryConsistencyError as e:
            raise RegistryConsistencyError(f"invalid state for light {lid}: {e}") from e
        return cls(id=lid, name=data.get("name", ""), state=light_state)


@dataclass(frozen=True)
class Scene:
    id: str
    name: str
    group_id: int

    @classmethod
    def from_dict(cls, scene_id: str, data: dict[str, Any]) -> Scene:
        """Create from one entry of the bridge's scenes object.

        Raises:
            RegistryConsistencyError: If the owning group id is not an integer
        """
        try:
            group_id = parse_entity_id(data.get("group", ""), "group")
        except RegistryConsistencyError as e:
            raise RegistryConsistencyError(
                f"failed to parse group id '{data.get('group')}' "
                f"for scene '{data.get('name', scene_id)}'"
            ) from e
        return cls(id=str(scene_id), name=data.get("name", ""), group_id=group_id)


@dataclass(frozen=True)
class Group:
    """A bridge group (room, zone, ...).

    Attributes:
        id: Bridge-assigned group id
        name: Display name
        light_ids: Member light ids in bridge order
        scenes: Scenes owned by this group, keyed by scene id
    """

    id: int
    name: str
    light_ids: tuple[int, ...] = ()
    scenes: dict[str, Scene] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, group_id: Any, data: dict[str, Any]) -> Group:
        """Create from one entry of the bridge's groups object."""
        gid = parse_entity_id(group_id, "group")
        light_ids = tuple(
            parse_entity_id(light_id, "light") for light_id in data.get("lights") or []
        )
        return cls(id=gid, name=data.get("name", ""), light_ids=light_ids)

    def with_scenes(self, scenes: dict[str, Scene]) -> Group:
        """Return a copy owning ``scenes``."""
        return Group(id=self.id, name=self.name, light_ids=self.light_ids, scenes=dict(scenes))
