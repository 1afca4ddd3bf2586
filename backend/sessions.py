"""In-memory registry of playthroughs.

A session pairs an adventure id with the PlayState produced by its last
transition. The graph itself is never cached here: every transition reads
the adventure's current revision from storage, so edits made in the editor
show up on the next start or choice.

Sessions live for the lifetime of the process, up to MAX_SESSIONS. Opening
one more evicts the session that has gone longest without a transition.
clear_sessions() exists for tests.
"""

import logging

from pydantic import BaseModel

from cyoa_builder.graph import new_id
from cyoa_builder.playback import PlayState

logger = logging.getLogger(__name__)

MAX_SESSIONS = 256

# Insertion order is recency order: update_session() moves a session to the end.
_sessions: dict[str, "PlaySession"] = {}


class PlaySession(BaseModel):
    id: str
    adventure_id: str
    state: PlayState


def open_session(adventure_id: str, state: PlayState) -> PlaySession:
    while len(_sessions) >= MAX_SESSIONS:
        stale_id = next(iter(_sessions))
        del _sessions[stale_id]
        logger.info("evicted idle playthrough %s", stale_id)
    session = PlaySession(id=new_id("play"), adventure_id=adventure_id, state=state)
    _sessions[session.id] = session
    return session


def get_session(session_id: str) -> PlaySession | None:
    return _sessions.get(session_id)


def update_session(session_id: str, state: PlayState) -> PlaySession | None:
    session = _sessions.pop(session_id, None)
    if session is None:
        return None
    session = session.model_copy(update={"state": state})
    _sessions[session_id] = session
    return session


def drop_sessions_for(adventure_id: str) -> None:
    """Forget every playthrough of a deleted adventure."""
    for session_id in [s.id for s in _sessions.values() if s.adventure_id == adventure_id]:
        del _sessions[session_id]


def clear_sessions() -> None:
    _sessions.clear()
