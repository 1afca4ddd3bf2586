"""Text-completion client used to draft location descriptions and choices.

Anything that generates content takes a callable shaped like

    async def __call__(self, task: str, prompt: str) -> str: ...

where `task` is "description" or "choices". HttpLLM only uses it for log
lines; a test double can use it to return canned output per task.

Backends are spoken to in one of two wire formats:

    koboldcpp   POST {base}/api/v1/generate   {"prompt", "max_length"?}
                → {"results": [{"text": ...}]}
    openai      POST {base}/v1/completions    {"prompt", "model"?, "max_tokens"?}
                → {"choices": [{"text": ...}]}

Every failure (unreachable host, HTTP error status, timeout, unexpected
body) surfaces as LLMError so callers only need one except clause.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Protocol

import httpx

logger = logging.getLogger(__name__)

ProviderFormat = Literal["koboldcpp", "openai"]

DEFAULT_TIMEOUT = 60.0


class LLMError(RuntimeError):
    """The completion backend could not produce text."""


class LLM(Protocol):
    async def __call__(self, task: str, prompt: str) -> str: ...


@dataclass(frozen=True)
class _WireFormat:
    label: str
    path: str
    results_key: str
    length_param: str


_FORMATS: dict[str, _WireFormat] = {
    "koboldcpp": _WireFormat("KoboldCpp", "/api/v1/generate", "results", "max_length"),
    "openai": _WireFormat("OpenAI-compatible", "/v1/completions", "choices", "max_tokens"),
}


class HttpLLM:
    """Async client for a KoboldCpp or OpenAI-compatible completion endpoint.

    Args:
        provider_url:    Base URL, e.g. "http://localhost:5001". A trailing
                         slash is ignored.
        api_key:         Sent as a Bearer token when non-empty.
        provider_format: "koboldcpp" (default) or "openai".
        model:           Model name; only sent in the openai format.
        max_tokens:      Optional completion length cap.
        timeout:         Seconds before the request is abandoned.
    """

    def __init__(
        self,
        provider_url: str,
        api_key: str = "",
        provider_format: ProviderFormat = "koboldcpp",
        model: str = "",
        max_tokens: int | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = provider_url.rstrip("/")
        self.api_key = api_key
        self.wire = _FORMATS[provider_format]
        self.model = model if provider_format == "openai" else ""
        self.max_tokens = max_tokens
        self.timeout = timeout

    @classmethod
    def from_connection(cls, conn: dict) -> HttpLLM:
        """Build a client from one entry of config.json's llm_connections."""
        return cls(
            provider_url=conn["provider_url"],
            api_key=conn.get("api_key", ""),
            provider_format=conn.get("provider_format", "koboldcpp"),
            model=conn.get("model", ""),
            max_tokens=conn.get("max_tokens"),
        )

    @property
    def url(self) -> str:
        return self.base_url + self.wire.path

    def _payload(self, prompt: str) -> dict:
        payload: dict = {"prompt": prompt}
        if self.model:
            payload["model"] = self.model
        if self.max_tokens:
            payload[self.wire.length_param] = self.max_tokens
        return payload

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _completion_text(self, data: object) -> str:
        entries = data.get(self.wire.results_key) if isinstance(data, dict) else None
        if not entries or not isinstance(entries[0], dict) or "text" not in entries[0]:
            raise LLMError(f"Unexpected response format from {self.wire.label} backend")
        return entries[0]["text"]

    async def __call__(self, task: str, prompt: str) -> str:
        logger.debug("llm request task=%s url=%s prompt_len=%d", task, self.url, len(prompt))
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    self.url, json=self._payload(prompt), headers=self._headers()
                )
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise LLMError(f"Cannot connect to LLM backend at {self.base_url}") from e
        except httpx.TimeoutException as e:
            raise LLMError(f"LLM backend timed out after {self.timeout:g}s") from e
        except httpx.HTTPStatusError as e:
            raise LLMError(f"LLM backend returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise LLMError(f"LLM backend request failed: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise LLMError(f"{self.wire.label} backend did not return JSON") from e
        text = self._completion_text(data)
        logger.debug("llm response task=%s len=%d", task, len(text))
        return text


class EchoLLM:
    """Hands the prompt straight back. Shows exactly what the editor would
    send without a model running. Its output is never a JSON array, so
    choice generation yields no choices."""

    async def __call__(self, task: str, prompt: str) -> str:
        logger.debug("echo task=%s prompt_len=%d", task, len(prompt))
        return prompt
