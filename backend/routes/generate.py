"""AI-assisted content endpoints.

Connection resolution: the generation_roles mapping in config.json names an
LLM connection per role ("description", "choices"). A role with no
connection is a 400; a failing connection degrades to the generator's
fallback result.
"""

from fastapi import APIRouter, HTTPException

from cyoa_builder import graph
from cyoa_builder.llm import HttpLLM

from backend import storage
from backend.generation import generate_choices, generate_description
from backend.prompts import prompt_template

from .adventures import require_adventure
from .models import GenerateChoicesBody, GenerateDescriptionBody

router = APIRouter()


def _llm_for(config: dict, role: str) -> HttpLLM:
    conn = storage.resolve_connection(config, role)
    if conn is None:
        raise HTTPException(
            400, f"No LLM connection assigned to {role} generation. Configure it in Settings."
        )
    return HttpLLM.from_connection(conn)


@router.post("/generate/description")
async def post_generate_description(body: GenerateDescriptionBody):
    """Draft a location description from its name."""
    config = storage.get_config()
    text = await generate_description(
        _llm_for(config, "description"),
        body.location_name,
        body.theme or config["theme"],
        template=prompt_template("description", config["prompts"]),
    )
    return {"description": text}


@router.post("/generate/choices")
async def post_generate_choices(body: GenerateChoicesBody):
    """Draft choice texts for a description."""
    config = storage.get_config()
    choices = await generate_choices(
        _llm_for(config, "choices"),
        body.description,
        body.theme or config["theme"],
        template=prompt_template("choices", config["prompts"]),
    )
    return {"choices": [c.model_dump() for c in choices]}


@router.post("/adventures/{adventure_id}/locations/{location_id}/generated-choices")
async def append_generated_choices(adventure_id: str, location_id: str):
    """Generate choices from a location's description and append them."""
    game_data = require_adventure(adventure_id).game_data
    location = game_data.get(location_id)
    if location is None:
        raise HTTPException(404, "Location not found")
    if not location.description:
        raise HTTPException(400, "Write or generate a description first")

    config = storage.get_config()
    choices = await generate_choices(
        _llm_for(config, "choices"),
        location.description,
        config["theme"],
        template=prompt_template("choices", config["prompts"]),
    )
    if choices:
        game_data = graph.append_choices(game_data, location_id, [c.text for c in choices])
        storage.save_game_data(adventure_id, game_data)
    return game_data[location_id].model_dump(by_alias=True, exclude_none=True)
