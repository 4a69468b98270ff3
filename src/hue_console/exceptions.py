"""Exceptions raised by hue-console."""

from __future__ import annotations

from typing import Iterable


class HueConsoleError(Exception):
    """Base exception for all hue-console errors."""


class ColorFormatError(HueConsoleError, ValueError):
    """Raised when a hex color string is malformed."""


class UnknownProfileError(HueConsoleError, KeyError):
    """Raised when a color profile name is not one of the presets."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead
        return str(self.args[0]) if self.args else ""


class EntityLookupError(HueConsoleError, LookupError):
    """Raised when an id is not present in the registry."""


class GroupNotFoundError(EntityLookupError):
    """No such group."""


class LightNotFoundError(EntityLookupError):
    """No such light."""


class SceneNotFoundError(EntityLookupError):
    """No such scene."""


class UnresolvedTokensError(HueConsoleError):
    """Raised when identifier tokens match neither ids nor names.

    Attributes:
        tokens: Every token that could not be resolved, in input order
    """

    def __init__(self, tokens: Iterable[str]):
        self.tokens = list(tokens)
        super().__init__(
            f"some entries could not be parsed: '{', '.join(self.tokens)}'"
        )


class RegistryConsistencyError(HueConsoleError):
    """Raised when bridge data violates registry invariants."""


class ConfigError(HueConsoleError):
    """Raised when a configuration or snapshot document cannot be used."""
