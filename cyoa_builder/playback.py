"""Playback state machine: walks an adventure graph one choice at a time.

States:
  not_started   fresh PlayState(), before start()
  at_location   the player stands somewhere and may pick a choice
  ended         the player reached a finish location; nothing is offered
  no_content    start() found an empty graph

Transitions:
  start(game_data)                 → fresh inventory, resolve the start
                                     location from the graph passed in, arrive
  choose(state, game_data, id)     → follow an offered choice. A destination
                                     that is empty or missing leaves the player
                                     in place with a short-lived notice.

Arrival picks up the location's item (inventory is a set kept in pickup
order) and ends the game on a finish location.

PlayState is an immutable value. Nothing here holds on to a graph: start()
and choose() resolve against the revision they are handed, and render()
only reads. The host keeps the current PlayState and the current graph.
"""

from __future__ import annotations

import time
from typing import Literal

from pydantic import BaseModel, ConfigDict

from cyoa_builder.graph import NotFoundError
from cyoa_builder.models import Choice, GameData, Location

Status = Literal["not_started", "at_location", "ended", "no_content"]

NOTICE_SECONDS = 3.0

NO_LOCATIONS_MESSAGE = "No locations have been created for this game yet."
DEFAULT_FINISH_MESSAGE = "The end."
DEAD_END_NOTICE = "This path leads nowhere... (Destination not set)."
MISSING_LOCATION_MESSAGE = "This location no longer exists. Start again to continue."
NO_CHOICES_TEXT = "The path ends here."


class PlayState(BaseModel):
    """One playthrough, as of its last transition."""

    model_config = ConfigDict(frozen=True)

    status: Status = "not_started"
    location_id: str | None = None
    inventory: tuple[str, ...] = ()
    notice: str | None = None
    notice_until: float | None = None  # clock value after which notice is hidden

    @property
    def game_ended(self) -> bool:
        return self.status == "ended"


class PlayView(BaseModel):
    """Everything a player-facing surface needs to draw the current screen."""

    status: Status
    location_id: str | None
    title: str
    text: str
    choices: list[Choice]
    inventory: list[str]
    game_ended: bool
    notice: str | None = None
    no_choices_text: str | None = None


def _now(now: float | None) -> float:
    return time.monotonic() if now is None else now


def find_start(game_data: GameData) -> str | None:
    """Id of the start location.

    The flagged location wins. With no flag, fall back to the smallest id.
    If stored data flags more than one, the smallest flagged id wins.
    """
    if not game_data:
        return None
    flagged = [loc_id for loc_id, loc in game_data.items() if loc.is_start]
    return min(flagged or game_data)


def available_choices(location: Location, inventory: tuple[str, ...]) -> list[Choice]:
    """Choices the player can see, in stored order. Gated ones are hidden."""
    return [
        c for c in location.choices
        if not c.requires_item or c.requires_item in inventory
    ]


def offered_choices(state: PlayState, game_data: GameData) -> list[Choice]:
    """Choices offered right now. Always empty unless standing at a live,
    non-finish location."""
    if state.status != "at_location" or state.location_id is None:
        return []
    location = game_data.get(state.location_id)
    if location is None or location.is_finish:
        return []
    return available_choices(location, state.inventory)


def _arrive(state: PlayState, location: Location, location_id: str) -> PlayState:
    inventory = state.inventory
    if location.adds_item and location.adds_item not in inventory:
        inventory = (*inventory, location.adds_item)
    return PlayState(
        status="ended" if location.is_finish else "at_location",
        location_id=location_id,
        inventory=inventory,
    )


def start(game_data: GameData) -> PlayState:
    """Begin a fresh playthrough. Also used for "play again"."""
    start_id = find_start(game_data)
    if start_id is None:
        return PlayState(status="no_content")
    return _arrive(PlayState(), game_data[start_id], start_id)


def choose(
    state: PlayState,
    game_data: GameData,
    choice_id: str,
    now: float | None = None,
) -> PlayState:
    """Follow one of the currently offered choices.

    Raises NotFoundError if `choice_id` isn't offered (unknown, gated, or
    the game is over).
    """
    for choice in offered_choices(state, game_data):
        if choice.id == choice_id:
            break
    else:
        raise NotFoundError(f"Choice {choice_id!r} is not available")

    destination = game_data.get(choice.destination_id) if choice.destination_id else None
    if destination is None:
        return state.model_copy(update={
            "notice": DEAD_END_NOTICE,
            "notice_until": _now(now) + NOTICE_SECONDS,
        })
    return _arrive(state, destination, choice.destination_id)


def current_notice(state: PlayState, now: float | None = None) -> str | None:
    if state.notice is None:
        return None
    if state.notice_until is not None and _now(now) >= state.notice_until:
        return None
    return state.notice


def render(state: PlayState, game_data: GameData, now: float | None = None) -> PlayView:
    """Build the player's view. Never moves the player."""
    inventory = list(state.inventory)

    if state.status in ("not_started", "no_content") or state.location_id is None:
        return PlayView(
            status=state.status,
            location_id=None,
            title="",
            text=NO_LOCATIONS_MESSAGE if state.status == "no_content" else "",
            choices=[],
            inventory=inventory,
            game_ended=False,
        )

    location = game_data.get(state.location_id)
    if location is None:
        return PlayView(
            status=state.status,
            location_id=state.location_id,
            title="",
            text=MISSING_LOCATION_MESSAGE,
            choices=[],
            inventory=inventory,
            game_ended=state.game_ended,
        )

    if state.game_ended:
        return PlayView(
            status=state.status,
            location_id=state.location_id,
            title=location.name,
            text=location.finish_message or DEFAULT_FINISH_MESSAGE,
            choices=[],
            inventory=inventory,
            game_ended=True,
        )

    choices = offered_choices(state, game_data)
    return PlayView(
        status=state.status,
        location_id=state.location_id,
        title=location.name,
        text=location.description,
        choices=choices,
        inventory=inventory,
        game_ended=False,
        notice=current_notice(state, now),
        no_choices_text=None if choices else NO_CHOICES_TEXT,
    )
