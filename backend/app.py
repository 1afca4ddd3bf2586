import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI

from backend import storage
from backend.demo import ensure_example_adventure
from backend.routes import router

load_dotenv(Path(__file__).parent.parent / ".env")

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


def create_app(data_dir: Path | None = None) -> FastAPI:
    """Build the API app. Seeds the example adventure into empty storage.

    Run with: uvicorn backend.app:create_app --factory
    """
    resolved = data_dir or Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR)))
    storage.init_storage(resolved)
    ensure_example_adventure()

    app = FastAPI(title="Adventure Builder")
    app.include_router(router, prefix="/api")
    return app
