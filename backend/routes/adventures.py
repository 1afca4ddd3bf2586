"""Adventure list endpoints: CRUD, import and export."""

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from cyoa_builder.models import Adventure

from backend import sessions, storage

from .models import CreateAdventure, UpdateAdventure

router = APIRouter()


def require_adventure(adventure_id: str) -> Adventure:
    adventure = storage.get_adventure(adventure_id)
    if adventure is None:
        raise HTTPException(404, "Adventure not found")
    return adventure


@router.get("/adventures")
async def list_adventures():
    """List all adventures (id, title, location count)."""
    return [
        {"id": a.id, "title": a.title, "location_count": len(a.game_data)}
        for a in storage.list_adventures()
    ]


@router.post("/adventures", status_code=201)
async def create_adventure(body: CreateAdventure):
    """Create an empty adventure."""
    return storage.create_adventure(body.title).to_wire()


@router.post("/adventures/import", status_code=201)
async def import_adventure(request: Request):
    """Import an exported adventure file (raw JSON body). Assigns a new id."""
    try:
        adventure = storage.import_adventure(await request.body())
    except storage.MalformedImportError as e:
        raise HTTPException(
            400,
            f"Could not import adventure. The file may be corrupted or in the wrong format. {e}",
        )
    return adventure.to_wire()


@router.get("/adventures/{adventure_id}")
async def get_adventure(adventure_id: str):
    """Get a single adventure with its full graph."""
    return require_adventure(adventure_id).to_wire()


@router.patch("/adventures/{adventure_id}")
async def update_adventure(adventure_id: str, body: UpdateAdventure):
    """Rename an adventure."""
    updated = storage.update_adventure(adventure_id, body.model_dump(exclude_none=True))
    if updated is None:
        raise HTTPException(404, "Adventure not found")
    return updated.to_wire()


@router.delete("/adventures/{adventure_id}")
async def delete_adventure(adventure_id: str):
    """Delete an adventure and end its playthroughs."""
    if not storage.delete_adventure(adventure_id):
        raise HTTPException(404, "Adventure not found")
    sessions.drop_sessions_for(adventure_id)
    return {"ok": True}


@router.get("/adventures/{adventure_id}/export")
async def export_adventure(adventure_id: str):
    """Download an adventure as a portable JSON file (title + gameData)."""
    exported = storage.export_adventure(adventure_id)
    if exported is None:
        raise HTTPException(404, "Adventure not found")
    filename = storage.export_filename(exported["title"])
    return JSONResponse(
        exported,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
