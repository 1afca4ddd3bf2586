"""Tests for cyoa_builder.llm — HttpLLM and EchoLLM."""

import pytest
import httpx
from unittest.mock import AsyncMock, MagicMock, patch

from cyoa_builder.llm import EchoLLM, HttpLLM, LLMError


def _mock_response(body: dict, status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body
    resp.raise_for_status = MagicMock(
        side_effect=None if status < 400 else httpx.HTTPStatusError(
            "", request=MagicMock(), response=resp
        )
    )
    return resp


def _patched_post(body: dict, status: int = 200) -> AsyncMock:
    return AsyncMock(return_value=_mock_response(body, status))


KOBOLD_OK = {"results": [{"text": "A fog-bound harbour."}]}
OPENAI_OK = {"choices": [{"text": "A fog-bound harbour."}]}


# ---------------------------------------------------------------------------
# EchoLLM
# ---------------------------------------------------------------------------

class TestEchoLLM:
    async def test_returns_prompt_unchanged(self) -> None:
        assert await EchoLLM()("description", "Describe the docks.") == "Describe the docks."

    async def test_task_ignored(self) -> None:
        llm = EchoLLM()
        assert await llm("description", "x") == await llm("choices", "x")


# ---------------------------------------------------------------------------
# HttpLLM — KoboldCpp format
# ---------------------------------------------------------------------------

class TestHttpLLMKoboldCpp:
    @pytest.fixture
    def llm(self) -> HttpLLM:
        return HttpLLM(provider_url="http://localhost:5001/")

    async def test_happy_path(self, llm: HttpLLM) -> None:
        with patch("httpx.AsyncClient.post", _patched_post(KOBOLD_OK)):
            assert await llm("description", "Describe the harbour.") == "A fog-bound harbour."

    async def test_request_shape(self, llm: HttpLLM) -> None:
        mock_post = _patched_post(KOBOLD_OK)
        with patch("httpx.AsyncClient.post", mock_post):
            await llm("choices", "my prompt")
        assert mock_post.call_args[0][0] == "http://localhost:5001/api/v1/generate"
        assert mock_post.call_args.kwargs["json"] == {"prompt": "my prompt"}
        assert "Authorization" not in mock_post.call_args.kwargs["headers"]

    async def test_bearer_token_sent_when_api_key_set(self) -> None:
        llm = HttpLLM(provider_url="http://localhost:5001", api_key="secret")
        mock_post = _patched_post(KOBOLD_OK)
        with patch("httpx.AsyncClient.post", mock_post):
            await llm("description", "prompt")
        assert mock_post.call_args.kwargs["headers"]["Authorization"] == "Bearer secret"

    @pytest.mark.parametrize("exc, message", [
        (httpx.ConnectError("refused"), "Cannot connect"),
        (httpx.TimeoutException("slow"), "timed out"),
        (httpx.UnsupportedProtocol("missing scheme"), "request failed: missing scheme"),
        (httpx.RemoteProtocolError("boom"), "request failed: boom"),
        (httpx.ReadError("reset"), "request failed: reset"),
    ])
    async def test_transport_errors(self, llm: HttpLLM, exc, message) -> None:
        with patch("httpx.AsyncClient.post", AsyncMock(side_effect=exc)):
            with pytest.raises(LLMError, match=message):
                await llm("description", "prompt")

    async def test_http_error_raises_llm_error(self, llm: HttpLLM) -> None:
        with patch("httpx.AsyncClient.post", _patched_post({}, status=503)):
            with pytest.raises(LLMError, match="HTTP 503"):
                await llm("description", "prompt")

    async def test_malformed_response_raises_llm_error(self, llm: HttpLLM) -> None:
        with patch("httpx.AsyncClient.post", _patched_post({"unexpected": "format"})):
            with pytest.raises(LLMError, match="Unexpected response format"):
                await llm("description", "prompt")


# ---------------------------------------------------------------------------
# HttpLLM — OpenAI format
# ---------------------------------------------------------------------------

class TestHttpLLMOpenAI:
    @pytest.fixture
    def llm(self) -> HttpLLM:
        return HttpLLM(
            provider_url="http://localhost:8080",
            provider_format="openai",
            model="mistral-7b",
        )

    async def test_request_shape(self, llm: HttpLLM) -> None:
        mock_post = _patched_post(OPENAI_OK)
        with patch("httpx.AsyncClient.post", mock_post):
            result = await llm("description", "prompt")
        assert result == "A fog-bound harbour."
        assert mock_post.call_args[0][0] == "http://localhost:8080/v1/completions"
        assert mock_post.call_args.kwargs["json"]["model"] == "mistral-7b"

    async def test_kobold_shaped_response_rejected(self, llm: HttpLLM) -> None:
        with patch("httpx.AsyncClient.post", _patched_post(KOBOLD_OK)):
            with pytest.raises(LLMError, match="Unexpected response format"):
                await llm("description", "prompt")


# ---------------------------------------------------------------------------
# from_connection
# ---------------------------------------------------------------------------

class TestFromConnection:
    async def test_builds_client_from_config_entry(self) -> None:
        llm = HttpLLM.from_connection({
            "name": "Local",
            "provider_url": "http://localhost:8080",
            "api_key": "k",
            "provider_format": "openai",
            "model": "m",
        })
        mock_post = _patched_post(OPENAI_OK)
        with patch("httpx.AsyncClient.post", mock_post):
            await llm("choices", "prompt")
        assert mock_post.call_args[0][0] == "http://localhost:8080/v1/completions"
        assert mock_post.call_args.kwargs["headers"]["Authorization"] == "Bearer k"

    async def test_defaults_to_koboldcpp(self) -> None:
        llm = HttpLLM.from_connection({"provider_url": "http://localhost:5001"})
        mock_post = _patched_post(KOBOLD_OK)
        with patch("httpx.AsyncClient.post", mock_post):
            await llm("description", "prompt")
        assert mock_post.call_args[0][0] == "http://localhost:5001/api/v1/generate"

    async def test_max_tokens_passed_through(self) -> None:
        llm = HttpLLM.from_connection({"provider_url": "http://localhost:5001", "max_tokens": 200})
        mock_post = _patched_post(KOBOLD_OK)
        with patch("httpx.AsyncClient.post", mock_post):
            await llm("description", "prompt")
        assert mock_post.call_args.kwargs["json"] == {"prompt": "prompt", "max_length": 200}


class TestNonJsonBody:
    async def test_raises_llm_error(self) -> None:
        resp = _mock_response({})
        resp.json.side_effect = ValueError("not json")
        with patch("httpx.AsyncClient.post", AsyncMock(return_value=resp)):
            with pytest.raises(LLMError, match="did not return JSON"):
                await HttpLLM(provider_url="http://localhost:5001")("choices", "prompt")
