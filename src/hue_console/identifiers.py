"""Identifier expressions for selecting groups and lights.

An expression is a comma-separated list of tokens:

- typed ids: ``g1`` (group 1), ``l23`` (light 23)
- bare ids: ``2`` takes the type of the last typed token, so ``g1,2,3``
  selects groups 1 to 3
- ranges: ``l10-l12`` or ``g1-3``, inclusive on both ends
- names: ``Office``, matched exactly against groups and lights

Resolution runs in two phases. Tokens with id or range syntax are expanded
and looked up by id; everything else (and any id that is not in the
registry) is then matched by name. Tokens that survive both phases are
reported together.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .exceptions import EntityLookupError, UnresolvedTokensError
from .models import Group, Light
from .registry import EntityRegistry

_LOGGER = logging.getLogger(__name__)

GROUP = "g"
LIGHT = "l"

_TYPED_ID = re.compile(r"([gl])(\d+)")
_BARE_INT = re.compile(r"\d+")


def format_group_id(group: Group) -> str:
    return f"{GROUP}{group.id}"


def format_light_id(light: Light) -> str:
    return f"{LIGHT}{light.id}"


def split_expression(expression: str) -> list[str]:
    """Split on commas, trimming whitespace and dropping empty tokens."""
    return [token.strip() for token in expression.split(",") if token.strip()]


@dataclass(frozen=True)
class TypedId:
    kind: str
    number: int

    def __str__(self) -> str:
        return f"{self.kind}{self.number}"


@dataclass(frozen=True)
class IdRange:
    """Inclusive run of ids of one type; a single id has ``start == end``."""

    kind: str
    start: int
    end: int

    def __iter__(self) -> Iterator[TypedId]:
        for number in range(self.start, self.end + 1):
            yield TypedId(self.kind, number)

    def __str__(self) -> str:
        if self.start == self.end:
            return f"{self.kind}{self.start}"
        return f"{self.kind}{self.start}-{self.kind}{self.end}"


def _parse_endpoint(text: str, last_type: Optional[str]) -> Optional[TypedId]:
    """Parse a typed or bare integer, the latter typed by ``last_type``."""
    text = text.strip()
    match = _TYPED_ID.fullmatch(text)
    if match:
        return TypedId(match.group(1), int(match.group(2)))
    if _BARE_INT.fullmatch(text) and last_type is not None:
        return TypedId(last_type, int(text))
    return None


def scan_token(
    token: str, last_type: Optional[str]
) -> tuple[Optional[IdRange], Optional[str]]:
    """Expand one token into a run of typed ids.

    The ids of a range all take the type of its start; a type letter on the
    end is ignored, so ``g1-l3`` selects groups 1 to 3.

    Args:
        token: A trimmed token
        last_type: Type letter carried from the previous tokens

    Returns:
        ``(ids, last_type)`` where ``ids`` is None when the token has no
        structural meaning and must be resolved by name, and ``last_type``
        is the type letter to carry into the next token
    """
    if "-" not in token:
        typed = _parse_endpoint(token, last_type)
        if typed is None:
            return None, last_type
        return IdRange(typed.kind, typed.number, typed.number), typed.kind

    start_text, end_text = token.split("-", 1)
    start = _parse_endpoint(start_text, last_type)
    if start is None:
        return None, last_type
    end = _parse_endpoint(end_text, start.kind)
    if end is None or end.number < start.number:
        return None, last_type

    return IdRange(start.kind, start.number, end.number), start.kind


@dataclass
class Resolution:
    """Outcome of resolving an expression.

    Attributes:
        groups: Selected groups keyed by id
        lights: Selected lights keyed by id
        unresolved: Tokens matched by neither phase, in input order
    """

    groups: dict[int, Group] = field(default_factory=dict)
    lights: dict[int, Light] = field(default_factory=dict)
    unresolved: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.unresolved

    def raise_for_unresolved(self) -> None:
        """Raise UnresolvedTokensError if any token was not resolved."""
        if self.unresolved:
            raise UnresolvedTokensError(self.unresolved)

    def add_group(self, group: Group) -> None:
        self.groups[group.id] = group

    def add_light(self, light: Light) -> None:
        self.lights[light.id] = light


class IdentifierResolver:
    """Resolves identifier expressions against a registry."""

    def __init__(self, registry: EntityRegistry):
        self.registry = registry

    def _lookup(self, typed: TypedId) -> Group | Light:
        if typed.kind == GROUP:
            return self.registry.group(typed.number)
        return self.registry.light(typed.number)

    def _max_id(self, kind: str) -> int:
        ids = self.registry.groups if kind == GROUP else self.registry.lights
        return max(ids, default=-1)

    def _resolve_ids(self, tokens: list[str], resolution: Resolution) -> list[str]:
        """Phase 1: typed ids, bare ids and ranges. Returns leftover tokens.

        Ids above the largest registered id of their type are not looked up
        one by one; such a tail is left over as a single range token.
        """
        leftover: list[str] = []
        last_type: Optional[str] = None

        for token in tokens:
            ids, last_type = scan_token(token, last_type)
            if ids is None:
                leftover.append(token)
                continue

            max_id = self._max_id(ids.kind)
            tail: Optional[IdRange] = None
            if ids.end > max_id:
                tail = IdRange(ids.kind, max(ids.start, max_id + 1), ids.end)
                ids = IdRange(ids.kind, ids.start, max_id)

            for typed in ids:
                try:
                    entity = self._lookup(typed)
                except EntityLookupError:
                    leftover.append(str(typed))
                    continue
                if typed.kind == GROUP:
                    resolution.add_group(entity)
                else:
                    resolution.add_light(entity)

            if tail is not None:
                leftover.append(str(tail))

        return leftover

    def _resolve_names(self, tokens: list[str], resolution: Resolution) -> list[str]:
        """Phase 2: exact names in both registries. Returns unmatched tokens."""
        unmatched: list[str] = []
        for token in tokens:
            groups = self.registry.groups_by_name(token)
            lights = self.registry.lights_by_name(token)
            for group in groups:
                resolution.add_group(group)
            for light in lights:
                resolution.add_light(light)
            if not groups and not lights and token not in unmatched:
                unmatched.append(token)
        return unmatched

    def evaluate(self, expression: str) -> Resolution:
        """Resolve ``expression`` without raising on unknown tokens."""
        resolution = Resolution()
        tokens = split_expression(expression)

        leftover = self._resolve_ids(tokens, resolution)
        _LOGGER.debug("Structural phase left %d of %d tokens", len(leftover), len(tokens))

        resolution.unresolved = self._resolve_names(leftover, resolution)
        if resolution.unresolved:
            _LOGGER.debug("Unresolved tokens: %s", resolution.unresolved)
        return resolution

    def resolve(self, expression: str) -> tuple[dict[int, Group], dict[int, Light]]:
        """Resolve ``expression`` into selected groups and lights.

        Raises:
            UnresolvedTokensError: Listing every token that matched nothing
        """
        resolution = self.evaluate(expression)
        resolution.raise_for_unresolved()
        return resolution.groups, resolution.lights

    def resolve_lights(self, expression: str) -> dict[int, Light]:
        """Resolve ``expression`` and expand groups into their member lights.

        Raises:
            UnresolvedTokensError: Listing every token that matched nothing
        """
        groups, lights = self.resolve(expression)
        selected = dict(lights)
        for group in groups.values():
            for light in self.registry.group_lights(group):
                selected[light.id] = light
        return selected
