"""Adventure editor endpoints: locations, choices, start flag, item list.

Each edit loads the stored graph, applies one cyoa_builder.graph mutator and
saves the resulting revision in place of the old one.
"""

from fastapi import APIRouter, HTTPException

from cyoa_builder import graph
from cyoa_builder.models import GameData, Location

from backend import storage

from .adventures import require_adventure
from .models import CreateChoice, CreateLocation, UpdateChoice, UpdateLocation

router = APIRouter()


def _location_out(location: Location) -> dict:
    return location.model_dump(by_alias=True, exclude_none=True)


def _require_location(game_data: GameData, location_id: str) -> Location:
    location = game_data.get(location_id)
    if location is None:
        raise HTTPException(404, "Location not found")
    return location


def _commit(adventure_id: str, game_data: GameData) -> GameData:
    storage.save_game_data(adventure_id, game_data)
    return game_data


# ── Locations ────────────────────────────────────────────


@router.get("/adventures/{adventure_id}/locations")
async def list_locations(adventure_id: str):
    """List locations sorted by name."""
    adventure = require_adventure(adventure_id)
    return [_location_out(loc) for loc in graph.sorted_locations(adventure.game_data)]


@router.post("/adventures/{adventure_id}/locations", status_code=201)
async def add_location(adventure_id: str, body: CreateLocation):
    """Add a blank location. The first location of a graph becomes the start."""
    adventure = require_adventure(adventure_id)
    game_data, loc_id = graph.add_location(adventure.game_data, name=body.name)
    _commit(adventure_id, game_data)
    return {"id": loc_id, "location": _location_out(game_data[loc_id])}


@router.get("/adventures/{adventure_id}/locations/{location_id}")
async def get_location(adventure_id: str, location_id: str):
    """Get one location plus the destinations its choices may point at."""
    game_data = require_adventure(adventure_id).game_data
    location = _require_location(game_data, location_id)
    return {
        "location": _location_out(location),
        "destinations": [
            {"id": loc.id, "name": loc.name}
            for loc in graph.destination_options(game_data, location_id)
        ],
        "items": sorted(graph.list_items(game_data)),
    }


@router.patch("/adventures/{adventure_id}/locations/{location_id}")
async def update_location(adventure_id: str, location_id: str, body: UpdateLocation):
    """Edit location fields. Marking it a finish location clears its choices."""
    game_data = require_adventure(adventure_id).game_data
    _require_location(game_data, location_id)
    # null only means "clear" for the optional text fields
    patch = {
        k: v for k, v in body.model_dump(exclude_unset=True).items()
        if v is not None or k in ("finish_message", "adds_item")
    }
    game_data = graph.update_location(game_data, location_id, patch)
    _commit(adventure_id, game_data)
    return _location_out(game_data[location_id])


@router.delete("/adventures/{adventure_id}/locations/{location_id}")
async def delete_location(adventure_id: str, location_id: str):
    """Delete a location and every choice that led to it."""
    game_data = require_adventure(adventure_id).game_data
    _require_location(game_data, location_id)
    _commit(adventure_id, graph.delete_location(game_data, location_id))
    return {"ok": True}


@router.post("/adventures/{adventure_id}/locations/{location_id}/start")
async def set_start(adventure_id: str, location_id: str):
    """Make a location the start (and no other)."""
    game_data = require_adventure(adventure_id).game_data
    try:
        game_data = graph.set_start(game_data, location_id)
    except graph.NotFoundError:
        raise HTTPException(404, "Location not found")
    _commit(adventure_id, game_data)
    return _location_out(game_data[location_id])


# ── Choices ──────────────────────────────────────────────


@router.post("/adventures/{adventure_id}/locations/{location_id}/choices", status_code=201)
async def add_choice(adventure_id: str, location_id: str, body: CreateChoice):
    """Append a choice with no destination."""
    game_data = require_adventure(adventure_id).game_data
    try:
        game_data = graph.add_choice(game_data, location_id, text=body.text)
    except graph.NotFoundError:
        raise HTTPException(404, "Location not found")
    _commit(adventure_id, game_data)
    return _location_out(game_data[location_id])


@router.patch("/adventures/{adventure_id}/locations/{location_id}/choices/{choice_id}")
async def update_choice(
    adventure_id: str, location_id: str, choice_id: str, body: UpdateChoice
):
    """Edit one field of one choice (text, destinationId or requiresItem)."""
    game_data = require_adventure(adventure_id).game_data
    value = body.value
    if value is None and body.field != "requiresItem":
        value = ""
    try:
        game_data = graph.update_choice(game_data, location_id, choice_id, body.field, value)
    except graph.NotFoundError as e:
        raise HTTPException(404, str(e))
    _commit(adventure_id, game_data)
    return _location_out(game_data[location_id])


@router.delete("/adventures/{adventure_id}/locations/{location_id}/choices/{choice_id}")
async def delete_choice(adventure_id: str, location_id: str, choice_id: str):
    """Remove one choice."""
    game_data = require_adventure(adventure_id).game_data
    try:
        game_data = graph.delete_choice(game_data, location_id, choice_id)
    except graph.NotFoundError:
        raise HTTPException(404, "Location not found")
    _commit(adventure_id, game_data)
    return _location_out(game_data[location_id])


@router.get("/adventures/{adventure_id}/items")
async def list_items(adventure_id: str):
    """Every item some location hands out, for autocomplete."""
    return sorted(graph.list_items(require_adventure(adventure_id).game_data))
