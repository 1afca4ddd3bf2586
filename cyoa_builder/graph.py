"""Adventure graph mutators.

Every function takes a GameData value and returns a new one; the input
mapping and the locations in it are never modified. The host decides which
revision is current and persists it.

Mutators accept a graph that is mid-edit: empty or dangling destinations,
cycles and unreachable locations are all valid stored states. The only
invariant enforced here is that at most one location carries the start flag.

Deleting a location cascades: every choice elsewhere in the graph that
pointed at it is removed as well. Dangling references that existed before
the deletion are left alone.
"""

from __future__ import annotations

import secrets
import time
from collections.abc import Iterable
from typing import Any, TypeVar

from pydantic import BaseModel

from cyoa_builder.models import Choice, GameData, Location

DEFAULT_LOCATION_NAME = "New Location"
DEFAULT_CHOICE_TEXT = "A new path..."

# Fields update_location() will touch. The start flag is owned by set_start().
LOCATION_FIELDS = frozenset({
    "name",
    "description",
    "is_finish",
    "finish_message",
    "adds_item",
    "choices",
})

_CHOICE_FIELDS = {
    "text": "text",
    "destination_id": "destination_id",
    "destinationId": "destination_id",
    "requires_item": "requires_item",
    "requiresItem": "requires_item",
}

M = TypeVar("M", bound=BaseModel)


class NotFoundError(LookupError):
    """Raised when an operation targets a location or choice that doesn't exist."""


def new_id(prefix: str) -> str:
    """Return a fresh id: nanosecond timestamp plus a random suffix.

    "loc" → "loc_1729345112000000000_9f2c41ab"
    """
    return f"{prefix}_{time.time_ns()}_{secrets.token_hex(4)}"


def _replace(model: M, **changes: Any) -> M:
    """Copy a frozen model with changes applied, re-running validation."""
    return type(model).model_validate({**model.model_dump(), **changes})


def _require(game_data: GameData, location_id: str) -> Location:
    try:
        return game_data[location_id]
    except KeyError:
        raise NotFoundError(f"Location {location_id!r} not found") from None


# ── Locations ────────────────────────────────────────────


def add_location(
    game_data: GameData, name: str = DEFAULT_LOCATION_NAME
) -> tuple[GameData, str]:
    """Insert a blank location. It becomes the start if the graph was empty."""
    loc_id = new_id("loc")
    location = Location(id=loc_id, name=name, is_start=not game_data)
    return {**game_data, loc_id: location}, loc_id


def delete_location(game_data: GameData, location_id: str) -> GameData:
    """Remove a location and every choice that led to it. No-op if absent."""
    if location_id not in game_data:
        return dict(game_data)

    result: GameData = {}
    for loc_id, loc in game_data.items():
        if loc_id == location_id:
            continue
        kept = [c for c in loc.choices if c.destination_id != location_id]
        if len(kept) != len(loc.choices):
            loc = _replace(loc, choices=kept)
        result[loc_id] = loc
    return result


def set_start(game_data: GameData, location_id: str) -> GameData:
    """Flag one location as the start and clear the flag everywhere else."""
    _require(game_data, location_id)
    result: GameData = {}
    for loc_id, loc in game_data.items():
        is_start = loc_id == location_id
        result[loc_id] = loc if loc.is_start == is_start else _replace(loc, is_start=is_start)
    return result


def update_location(
    game_data: GameData, location_id: str, patch: dict[str, Any]
) -> GameData:
    """Apply field edits to one location. Unknown fields are ignored.

    Turning a location into a finish location drops its choices.
    """
    location = _require(game_data, location_id)
    changes = {k: v for k, v in patch.items() if k in LOCATION_FIELDS}
    if changes.get("is_finish") and not location.is_finish:
        changes["choices"] = []
    return {**game_data, location_id: _replace(location, **changes)}


# ── Choices ──────────────────────────────────────────────


def add_choice(
    game_data: GameData, location_id: str, text: str = DEFAULT_CHOICE_TEXT
) -> GameData:
    """Append a choice with no destination to a location."""
    return append_choices(game_data, location_id, [text])


def append_choices(
    game_data: GameData, location_id: str, texts: Iterable[str]
) -> GameData:
    """Append one destination-less choice per text, in order."""
    location = _require(game_data, location_id)
    added = [Choice(id=new_id("choice"), text=text) for text in texts]
    updated = _replace(location, choices=[*location.choices, *added])
    return {**game_data, location_id: updated}


def update_choice(
    game_data: GameData, location_id: str, choice_id: str, field: str, value: Any
) -> GameData:
    """Edit one field (text, destination, required item) of one choice."""
    attr = _CHOICE_FIELDS.get(field)
    if attr is None:
        raise ValueError(f"Unknown choice field {field!r}")
    location = _require(game_data, location_id)

    choices = list(location.choices)
    for i, choice in enumerate(choices):
        if choice.id == choice_id:
            choices[i] = _replace(choice, **{attr: value})
            break
    else:
        raise NotFoundError(f"Choice {choice_id!r} not found in {location_id!r}")

    return {**game_data, location_id: _replace(location, choices=choices)}


def delete_choice(game_data: GameData, location_id: str, choice_id: str) -> GameData:
    """Remove one choice from a location. No-op if the choice is absent."""
    location = _require(game_data, location_id)
    kept = [c for c in location.choices if c.id != choice_id]
    if len(kept) == len(location.choices):
        return dict(game_data)
    return {**game_data, location_id: _replace(location, choices=kept)}


# ── Read helpers for the editor ──────────────────────────


def list_items(game_data: GameData) -> set[str]:
    """Every distinct item some location hands out."""
    return {loc.adds_item for loc in game_data.values() if loc.adds_item}


def sorted_locations(game_data: GameData) -> list[Location]:
    return sorted(game_data.values(), key=lambda loc: (loc.name.casefold(), loc.id))


def destination_options(game_data: GameData, location_id: str) -> list[Location]:
    """Locations a choice on `location_id` may point at (all but itself)."""
    return [loc for loc in sorted_locations(game_data) if loc.id != location_id]
