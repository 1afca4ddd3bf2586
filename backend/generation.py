"""AI-assisted content for the adventure editor.

Two generators, both backed by an injected LLM callable:

  generate_description(llm, location_name, theme) → paragraph of prose
  generate_choices(llm, description, theme)       → short choice texts

Neither raises. A failed call (backend down, bad template, unparsable
output) is logged and turned into a safe fallback: an error-flavoured
description the author can overwrite, or an empty choice list.
"""

import json
import logging

from cyoa_builder.llm import LLM, LLMError
from cyoa_builder.models import GeneratedChoice

from backend.prompts import PromptError, build_context, prompt_template, render_prompt

logger = logging.getLogger(__name__)

FAILED_DESCRIPTION = "Failed to generate a description. Please try again."
DEFAULT_CHOICE_COUNT = 3


async def generate_description(
    llm: LLM,
    location_name: str,
    theme: str,
    template: str | None = None,
) -> str:
    try:
        prompt = render_prompt(
            template or prompt_template("description"),
            build_context(theme, location_name=location_name),
        )
        text = await llm("description", prompt)
    except (LLMError, PromptError) as e:
        logger.warning("Description generation failed for %r: %s", location_name, e)
        return FAILED_DESCRIPTION
    return text.strip()


async def generate_choices(
    llm: LLM,
    description: str,
    theme: str,
    template: str | None = None,
    count: int = DEFAULT_CHOICE_COUNT,
) -> list[GeneratedChoice]:
    try:
        prompt = render_prompt(
            template or prompt_template("choices"),
            build_context(theme, description=description, count=count),
        )
        output = await llm("choices", prompt)
    except (LLMError, PromptError) as e:
        logger.warning("Choice generation failed: %s", e)
        return []
    return parse_choices_output(output)


def parse_choices_output(text: str) -> list[GeneratedChoice]:
    """Parse a JSON array of {"text": ...} objects, stripping markdown fences.

    Bare strings in the array are accepted too. Blank entries are dropped.
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning("Choice generator output is not valid JSON: %s", e)
        return []
    if not isinstance(data, list):
        logger.warning("Choice generator output must be a JSON array, got %s",
                       type(data).__name__)
        return []

    choices: list[GeneratedChoice] = []
    for entry in data:
        if isinstance(entry, dict):
            entry = entry.get("text")
        if isinstance(entry, str) and entry.strip():
            choices.append(GeneratedChoice(text=entry.strip()))
    return choices
