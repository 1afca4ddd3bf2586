"""Tests for backend.generation — AI description and choice drafting."""

from unittest.mock import AsyncMock, patch

import httpx

from cyoa_builder.llm import HttpLLM, LLMError
from cyoa_builder.models import GeneratedChoice

from backend.generation import (
    FAILED_DESCRIPTION,
    generate_choices,
    generate_description,
    parse_choices_output,
)


class TestGenerateDescription:
    async def test_returns_stripped_text(self) -> None:
        llm = AsyncMock(return_value="  Mist curls over the marsh.\n")
        text = await generate_description(llm, "The Marsh", "Fantasy Quest")
        assert text == "Mist curls over the marsh."

    async def test_calls_llm_with_description_task(self) -> None:
        llm = AsyncMock(return_value="x")
        await generate_description(llm, "The Marsh", "Fantasy Quest")
        task, prompt = llm.call_args[0]
        assert task == "description"
        assert "The Marsh" in prompt
        assert "Fantasy Quest" in prompt

    async def test_custom_template(self) -> None:
        llm = AsyncMock(return_value="x")
        await generate_description(llm, "Attic", "Noir", template="{{location_name}}/{{theme}}")
        assert llm.call_args[0][1] == "Attic/Noir"

    async def test_llm_failure_falls_back(self) -> None:
        llm = AsyncMock(side_effect=LLMError("down"))
        assert await generate_description(llm, "Attic", "Noir") == FAILED_DESCRIPTION

    async def test_bad_template_falls_back(self) -> None:
        llm = AsyncMock(return_value="x")
        text = await generate_description(llm, "Attic", "Noir", template="{{> nope}}")
        assert text == FAILED_DESCRIPTION
        llm.assert_not_called()

    async def test_url_without_scheme_falls_back(self) -> None:
        llm = HttpLLM(provider_url="localhost:5001")
        assert await generate_description(llm, "Cave", "Fantasy Quest") == FAILED_DESCRIPTION


class TestGenerateChoices:
    async def test_parses_json_array(self) -> None:
        llm = AsyncMock(return_value='[{"text": "Wade in"}, {"text": "Turn back"}]')
        choices = await generate_choices(llm, "A dark marsh.", "Fantasy Quest")
        assert choices == [GeneratedChoice(text="Wade in"), GeneratedChoice(text="Turn back")]
        assert llm.call_args[0][0] == "choices"

    async def test_llm_failure_returns_empty(self) -> None:
        llm = AsyncMock(side_effect=LLMError("down"))
        assert await generate_choices(llm, "A dark marsh.", "Fantasy Quest") == []

    async def test_dropped_connection_returns_empty(self) -> None:
        llm = HttpLLM(provider_url="http://localhost:5001")
        broken = AsyncMock(side_effect=httpx.RemoteProtocolError("peer closed connection"))
        with patch("httpx.AsyncClient.post", broken):
            assert await generate_choices(llm, "A dark marsh.", "Fantasy Quest") == []

    async def test_garbage_output_returns_empty(self) -> None:
        llm = AsyncMock(return_value="Sure! Here are some choices: wade, swim")
        assert await generate_choices(llm, "A dark marsh.", "Fantasy Quest") == []


class TestParseChoicesOutput:
    def test_markdown_fences_stripped(self) -> None:
        text = '```json\n[{"text": "Climb the tower"}]\n```'
        assert parse_choices_output(text) == [GeneratedChoice(text="Climb the tower")]

    def test_bare_strings_accepted(self) -> None:
        assert [c.text for c in parse_choices_output('["Run", "Hide"]')] == ["Run", "Hide"]

    def test_blank_and_malformed_entries_dropped(self) -> None:
        text = '[{"text": "  "}, {"label": "x"}, 7, {"text": " Swim "}]'
        assert [c.text for c in parse_choices_output(text)] == ["Swim"]

    def test_non_array_rejected(self) -> None:
        assert parse_choices_output('{"text": "Run"}') == []
