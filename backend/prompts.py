"""Handlebars prompt rendering for content generation."""

from collections.abc import Callable
from typing import Any

import pybars


_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}


class PromptError(Exception):
    """Raised when a Handlebars template fails to compile or render."""


DEFAULT_DESCRIPTION_PROMPT = """\
Generate a compelling and descriptive paragraph for a location named \
"{{{location_name}}}" in a choose-your-own-adventure game with a "{{{theme}}}" \
theme. The description should be immersive, atmospheric, and hint at \
possible actions or paths without explicitly stating them. Write only the \
description text.\
"""

DEFAULT_CHOICES_PROMPT = """\
Based on the following location description from a "{{{theme}}}" \
choose-your-own-adventure game, generate {{count}} distinct and interesting \
choices for the player to make. Each choice should be a short, actionable \
phrase.

Description:
{{{description}}}

Return only a JSON array, no other text:
[{"text": "<choice>"}, ...]\
"""

DEFAULT_PROMPTS: dict[str, str] = {
    "description": DEFAULT_DESCRIPTION_PROMPT,
    "choices": DEFAULT_CHOICES_PROMPT,
}


def render_prompt(template_str: str, context: dict[str, Any]) -> str:
    """Compile and render a Handlebars template with the given context.

    Templates are cached by source string to avoid recompilation.
    """
    try:
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return compiled(context)
    except Exception as e:
        raise PromptError(f"Template error: {e}") from e


def prompt_template(role: str, overrides: dict[str, str] | None = None) -> str:
    """The configured template for a generation role, or the built-in one."""
    override = (overrides or {}).get(role, "")
    return override or DEFAULT_PROMPTS[role]


def build_context(
    theme: str,
    location_name: str | None = None,
    description: str | None = None,
    count: int | None = None,
) -> dict[str, Any]:
    """Assemble template variables for a generation prompt."""
    ctx: dict[str, Any] = {"theme": theme}
    if location_name is not None:
        ctx["location_name"] = location_name
    if description is not None:
        ctx["description"] = description
    if count is not None:
        ctx["count"] = count
    return ctx
