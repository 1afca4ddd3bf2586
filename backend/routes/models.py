"""Pydantic request/response models for API endpoints."""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from cyoa_builder.graph import DEFAULT_CHOICE_TEXT, DEFAULT_LOCATION_NAME
from cyoa_builder.llm import ProviderFormat
from cyoa_builder.models import Choice

from backend.storage import DEFAULT_TITLE

GenerationRole = Literal["description", "choices"]


class CreateAdventure(BaseModel):
    title: str = DEFAULT_TITLE


class UpdateAdventure(BaseModel):
    title: str | None = None


class CreateLocation(BaseModel):
    name: str = DEFAULT_LOCATION_NAME


class UpdateLocation(BaseModel):
    """Partial location edit. Accepts the camelCase names used in adventure files."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    description: str | None = None
    is_finish: bool | None = None
    finish_message: str | None = None
    adds_item: str | None = None
    choices: list[Choice] | None = None


class CreateChoice(BaseModel):
    text: str = DEFAULT_CHOICE_TEXT


class UpdateChoice(BaseModel):
    field: Literal["text", "destinationId", "requiresItem"]
    value: str | None = None


class ChooseBody(BaseModel):
    choice_id: str


class GenerateDescriptionBody(BaseModel):
    location_name: str
    theme: str | None = None


class GenerateChoicesBody(BaseModel):
    description: str
    theme: str | None = None


class CheckConnectionBody(BaseModel):
    provider_url: str
    api_key: str = ""
    provider_format: ProviderFormat = "koboldcpp"


class LLMConnection(BaseModel):
    name: str
    provider_url: str
    api_key: str = ""
    provider_format: ProviderFormat = "koboldcpp"
    model: str = ""
    max_tokens: int | None = None


class UpdateSettings(BaseModel):
    llm_connections: list[LLMConnection] | None = None
    generation_roles: dict[GenerationRole, str] | None = None
    prompts: dict[GenerationRole, str] | None = None
    theme: str | None = None
