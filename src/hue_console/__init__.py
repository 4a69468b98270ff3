"""hue-console - color and scene console for Hue bridges.

This package converts hex colors into the representations Hue lights
accept and resolves identifier expressions (names, ``g1``/``l2`` ids,
ranges) into groups and lights of a bridge snapshot.
"""

__version__ = "0.1.0"

from .color import (
    HSV16,
    PROFILES,
    Chromaticity,
    ColorProfile,
    ColorTempValue,
    RGBAColor,
    get_profile,
    parse_hex_color,
    to_color_temp,
    to_hsv,
    to_xy,
)
from .config import ConsoleConfig
from .exceptions import (
    ColorFormatError,
    ConfigError,
    EntityLookupError,
    HueConsoleError,
    RegistryConsistencyError,
    SceneNotFoundError,
    UnknownProfileError,
    UnresolvedTokensError,
)
from .identifiers import IdentifierResolver, Resolution
from .models import Group, Light, LightState, Scene
from .registry import EntityRegistry, Property
from .snapshot import SnapshotSource, load_registry
from .state import StateSink, StateUpdate, apply_commands, plan_color
from .cli import main

__all__ = [
    "__version__",
    # Color
    "RGBAColor",
    "HSV16",
    "ColorTempValue",
    "Chromaticity",
    "ColorProfile",
    "PROFILES",
    "get_profile",
    "parse_hex_color",
    "to_hsv",
    "to_color_temp",
    "to_xy",
    # Registry
    "Light",
    "LightState",
    "Group",
    "Scene",
    "EntityRegistry",
    "Property",
    "SnapshotSource",
    "load_registry",
    # Identifiers
    "IdentifierResolver",
    "Resolution",
    # Commands
    "StateSink",
    "StateUpdate",
    "plan_color",
    "apply_commands",
    # CLI
    "ConsoleConfig",
    "main",
    # Exceptions
    "HueConsoleError",
    "ColorFormatError",
    "UnknownProfileError",
    "EntityLookupError",
    "SceneNotFoundError",
    "UnresolvedTokensError",
    "RegistryConsistencyError",
    "ConfigError",
]
