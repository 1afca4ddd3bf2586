"""Core domain models.

The graph mutators, the playback state machine and the storage layer all
operate on these types. Pydantic is used for validation and serialisation at
every data boundary.

Field names are snake_case in Python and camelCase on the wire, so files
exported by older builds of the editor load unchanged:

    {
      "title": "...",
      "gameData": {
        "<location id>": {
          "id": "...", "name": "...", "description": "...",
          "choices": [{"id": "...", "text": "...", "destinationId": "...",
                       "requiresItem": "..."}],
          "isStart": true, "isFinish": false,
          "finishMessage": "...", "addsItem": "..."
        }
      }
    }
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

_WIRE = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and value == "":
        return None
    return value


class Choice(BaseModel):
    """A directed edge from its owning location to another location."""

    model_config = _WIRE

    id: str
    text: str = ""
    destination_id: str = ""  # may be empty or dangling; resolved at play time
    requires_item: str | None = None

    @field_validator("requires_item", mode="before")
    @classmethod
    def blank_item_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class Location(BaseModel):
    """A node in the adventure graph."""

    model_config = _WIRE

    id: str
    name: str = ""
    description: str = ""
    choices: list[Choice] = Field(default_factory=list)
    is_start: bool = False
    is_finish: bool = False
    finish_message: str | None = None
    adds_item: str | None = None

    @field_validator("adds_item", mode="before")
    @classmethod
    def blank_item_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


# The whole graph: location id → Location. Edges live in each location's
# choice list; there is no separate edge index.
GameData = dict[str, Location]

_game_data_adapter: TypeAdapter[GameData] = TypeAdapter(GameData)


def parse_game_data(raw: Any) -> GameData:
    """Validate a wire-format mapping into a GameData value."""
    return _game_data_adapter.validate_python(raw)


def dump_game_data(game_data: GameData) -> dict[str, Any]:
    """Serialise a GameData value to its wire format."""
    return {
        loc_id: loc.model_dump(by_alias=True, exclude_none=True)
        for loc_id, loc in game_data.items()
    }


class Adventure(BaseModel):
    """A stored adventure: host id, title and the full graph."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    game_data: GameData = Field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "gameData": dump_game_data(self.game_data),
        }


class PortableAdventure(BaseModel):
    """The export/import file shape. Carries no host id."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    game_data: GameData

    def to_wire(self) -> dict[str, Any]:
        return {"title": self.title, "gameData": dump_game_data(self.game_data)}


class GeneratedChoice(BaseModel):
    """A choice text proposed by the content generator."""

    text: str
