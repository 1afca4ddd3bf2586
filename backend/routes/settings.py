"""Settings endpoints: health, LLM connection probe, config, prompt defaults."""

import logging

import httpx
from fastapi import APIRouter

from backend import storage
from backend.prompts import DEFAULT_PROMPTS

from .models import CheckConnectionBody, UpdateSettings

logger = logging.getLogger(__name__)

router = APIRouter()

# Cheap GET that every backend of the format answers without generating text.
_PROBE_PATHS = {
    "koboldcpp": "/api/v1/model",
    "openai": "/v1/models",
}


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.post("/check-connection")
async def check_connection(body: CheckConnectionBody):
    """Probe an LLM provider before saving it as a connection."""
    url = body.provider_url.rstrip("/") + _PROBE_PATHS[body.provider_format]
    headers = {"Authorization": f"Bearer {body.api_key}"} if body.api_key else {}
    try:
        async with httpx.AsyncClient(timeout=5) as client:
            resp = await client.get(url, headers=headers)
            resp.raise_for_status()
    except httpx.HTTPError as e:
        logger.info("Connection check failed for %s: %s", url, e)
        return {"ok": False}
    return {"ok": True}


@router.get("/settings")
async def get_settings():
    """LLM connections, generation roles, prompt overrides and theme."""
    return storage.get_config()


@router.patch("/settings")
async def update_settings(body: UpdateSettings):
    """Partial update. Connections are replaced, roles and prompts merged."""
    return storage.update_config(body.model_dump(exclude_none=True))


@router.get("/settings/default-prompts")
async def default_prompts():
    """Built-in templates used when a prompt override is empty."""
    return DEFAULT_PROMPTS
