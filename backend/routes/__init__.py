"""FastAPI API endpoints under /api.

Endpoint groups: settings (health, check-connection, settings), adventures
(list, CRUD, import, export), builder (locations, choices, start flag,
items), generate (AI descriptions and choices), play (playthrough
sessions). Editor and play endpoints for one adventure are nested under
/api/adventures/{adventure_id}/; running playthroughs live under
/api/play/{session_id}.
"""

from fastapi import APIRouter

from .adventures import router as adventures_router
from .builder import router as builder_router
from .generate import router as generate_router
from .play import router as play_router
from .settings import router as settings_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(adventures_router)
router.include_router(builder_router)
router.include_router(generate_router)
router.include_router(play_router)
