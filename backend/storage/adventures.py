"""Adventure CRUD, graph revisions, and import/export.

One JSON file per adventure: adventures/<id>.json holding
{"id", "title", "gameData"}. Saving a graph replaces the stored revision
wholesale; there is no history.

Export drops the host id. Import assigns a fresh one.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cyoa_builder.graph import new_id
from cyoa_builder.models import Adventure, GameData, PortableAdventure

from .core import adventures_dir, slugify

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "My New Adventure"

_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class MalformedImportError(ValueError):
    """Raised when an imported payload doesn't have the adventure file shape."""


def _path(adventure_id: str) -> Path:
    return adventures_dir() / f"{adventure_id}.json"


def _write(adventure: Adventure) -> None:
    _path(adventure.id).write_text(json.dumps(adventure.to_wire(), indent=2))


def list_adventures() -> list[Adventure]:
    """All adventures, oldest first (ids start with a creation timestamp)."""
    return [
        Adventure.model_validate_json(path.read_text())
        for path in sorted(adventures_dir().glob("*.json"))
    ]


def get_adventure(adventure_id: str) -> Adventure | None:
    if not _ID_RE.match(adventure_id):
        return None
    path = _path(adventure_id)
    if not path.is_file():
        return None
    return Adventure.model_validate_json(path.read_text())


def create_adventure(
    title: str = DEFAULT_TITLE, game_data: GameData | None = None
) -> Adventure:
    adventure = Adventure(id=new_id("adv"), title=title, game_data=game_data or {})
    _write(adventure)
    logger.info("created adventure %s (%r, %d locations)",
                adventure.id, title, len(adventure.game_data))
    return adventure


def update_adventure(adventure_id: str, fields: dict[str, Any]) -> Adventure | None:
    """Update mutable adventure fields (title). Returns the updated adventure."""
    adventure = get_adventure(adventure_id)
    if adventure is None:
        return None
    if isinstance(fields.get("title"), str):
        adventure.title = fields["title"]
    _write(adventure)
    return adventure


def save_game_data(adventure_id: str, game_data: GameData) -> Adventure | None:
    """Replace an adventure's graph with a new revision."""
    adventure = get_adventure(adventure_id)
    if adventure is None:
        return None
    adventure.game_data = game_data
    _write(adventure)
    return adventure


def delete_adventure(adventure_id: str) -> bool:
    adventure = get_adventure(adventure_id)
    if adventure is None:
        return False
    _path(adventure_id).unlink()
    logger.info("deleted adventure %s", adventure_id)
    return True


# ── Import / export ──────────────────────────────────────


def export_adventure(adventure_id: str) -> dict[str, Any] | None:
    """Portable form of an adventure: title and graph, no host id."""
    adventure = get_adventure(adventure_id)
    if adventure is None:
        return None
    return PortableAdventure(
        title=adventure.title, game_data=adventure.game_data
    ).to_wire()


def export_filename(title: str) -> str:
    return f"{slugify(title)}.json"


def import_adventure(payload: str | bytes | dict[str, Any]) -> Adventure:
    """Store an exported adventure under a new id.

    Accepts raw file contents or an already-decoded object. Nothing is
    written unless the whole payload validates.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            raise MalformedImportError("The file is not valid JSON.") from e

    if (
        not isinstance(payload, dict)
        or not isinstance(payload.get("title"), str)
        or not isinstance(payload.get("gameData"), dict)
    ):
        raise MalformedImportError("Invalid adventure file format.")

    try:
        portable = PortableAdventure.model_validate(payload)
    except ValidationError as e:
        raise MalformedImportError(
            f"Invalid adventure file format ({e.error_count()} invalid field(s))."
        ) from e

    # Locations are addressed by key in the editor and by id in choices.
    mismatched = [key for key, loc in portable.game_data.items() if loc.id != key]
    if mismatched:
        raise MalformedImportError(
            f"Invalid adventure file format (location key {mismatched[0]!r} "
            "does not match its id)."
        )

    adventure = create_adventure(portable.title, portable.game_data)
    logger.info("imported adventure %s", adventure.id)
    return adventure
