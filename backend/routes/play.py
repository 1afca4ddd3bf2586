"""Playthrough endpoints.

A playthrough is started against an adventure and addressed by session id
afterwards. Every transition re-reads the adventure's current graph.
"""

from fastapi import APIRouter, HTTPException

from cyoa_builder import playback
from cyoa_builder.graph import NotFoundError

from backend import sessions

from .adventures import require_adventure
from .models import ChooseBody

router = APIRouter()


def _require_session(session_id: str) -> sessions.PlaySession:
    session = sessions.get_session(session_id)
    if session is None:
        raise HTTPException(404, "Playthrough not found")
    return session


def _view(session: sessions.PlaySession, game_data) -> dict:
    view = playback.render(session.state, game_data)
    return {"session_id": session.id, **view.model_dump(by_alias=True)}


@router.post("/adventures/{adventure_id}/play", status_code=201)
async def start_playthrough(adventure_id: str):
    """Start a fresh playthrough from the adventure's start location."""
    game_data = require_adventure(adventure_id).game_data
    session = sessions.open_session(adventure_id, playback.start(game_data))
    return _view(session, game_data)


@router.get("/play/{session_id}")
async def get_playthrough(session_id: str):
    """Current screen of a playthrough."""
    session = _require_session(session_id)
    game_data = require_adventure(session.adventure_id).game_data
    return _view(session, game_data)


@router.post("/play/{session_id}/choose")
async def choose(session_id: str, body: ChooseBody):
    """Follow one of the offered choices."""
    session = _require_session(session_id)
    game_data = require_adventure(session.adventure_id).game_data
    try:
        state = playback.choose(session.state, game_data, body.choice_id)
    except NotFoundError:
        raise HTTPException(404, "Choice not available")
    session = sessions.update_session(session_id, state)
    return _view(session, game_data)


@router.post("/play/{session_id}/restart")
async def restart(session_id: str):
    """Play again: empty inventory, start location re-resolved from the graph."""
    session = _require_session(session_id)
    game_data = require_adventure(session.adventure_id).game_data
    session = sessions.update_session(session_id, playback.start(game_data))
    return _view(session, game_data)
