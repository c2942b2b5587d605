"""HTTP client for the streaming text-generation service."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from verdict.config import Settings
from verdict.errors import (
    ApiKeyNotConfiguredError,
    MalformedResponseError,
    RateLimitExhaustedError,
    ServerError,
    TransportError,
)
from verdict.inference.backoff import BackoffController, BackoffPolicy, RetryCallback

DEFAULT_RATE_LIMIT_MESSAGE = "API 요청 제한을 초과했습니다. 잠시 후 다시 시도해주세요."


@dataclass(frozen=True)
class GenerationRequest:
    """One system instruction plus one user content block."""

    system_prompt: str
    user_text: str
    temperature: float = 0.7
    max_output_tokens: int | None = None
    json_response: bool = False
    label: str = "-"
    rate_limit_message: str = DEFAULT_RATE_LIMIT_MESSAGE

    def to_payload(self) -> dict[str, Any]:
        generation_config: dict[str, Any] = {"temperature": self.temperature}
        if self.max_output_tokens is not None:
            generation_config["maxOutputTokens"] = self.max_output_tokens
        if self.json_response:
            generation_config["responseMimeType"] = "application/json"
        return {
            "systemInstruction": {"parts": [{"text": self.system_prompt}]},
            "contents": [{"parts": [{"text": self.user_text}]}],
            "generationConfig": generation_config,
        }


class GenerationClient:
    """Issues generation calls, retrying rate-limited attempts with the same payload."""

    def __init__(
        self,
        settings: Settings,
        *,
        http: httpx.AsyncClient | None = None,
        backoff: BackoffController | None = None,
    ) -> None:
        self._settings = settings
        self._http = http or httpx.AsyncClient(timeout=httpx.Timeout(settings.timeout_seconds))
        self._owns_http = http is None
        self._backoff = backoff or BackoffController(BackoffPolicy.from_schedule(settings.backoff_schedule))

    @property
    def configured(self) -> bool:
        return bool(self._settings.api_key)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    @asynccontextmanager
    async def open_stream(
        self,
        request: GenerationRequest,
        *,
        on_retry: RetryCallback | None = None,
    ) -> AsyncIterator[AsyncIterator[str]]:
        """Open a streaming call and yield its raw text chunks."""
        url = self._endpoint("streamGenerateContent")
        response = await self._send(url, request, params={"alt": "sse"}, stream=True, on_retry=on_retry)
        try:
            yield self._iter_text(response)
        finally:
            await response.aclose()

    async def generate(self, request: GenerationRequest, *, on_retry: RetryCallback | None = None) -> str:
        """Run a single-shot call and return the first candidate's text."""
        url = self._endpoint("generateContent")
        response = await self._send(url, request, params=None, stream=False, on_retry=on_retry)
        try:
            body = response.json()
            text = body["candidates"][0]["content"]["parts"][0]["text"]
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as exc:
            raise MalformedResponseError(f"unexpected response body: {exc!s}") from exc
        if not isinstance(text, str):
            raise MalformedResponseError("candidate text is not a string")
        return text

    def _endpoint(self, method: str) -> str:
        return f"{self._settings.api_base.rstrip('/')}/models/{self._settings.model}:{method}"

    async def _send(
        self,
        url: str,
        request: GenerationRequest,
        *,
        params: dict[str, str] | None,
        stream: bool,
        on_retry: RetryCallback | None,
    ) -> httpx.Response:
        api_key = self._settings.api_key
        if not api_key:
            raise ApiKeyNotConfiguredError()

        payload = request.to_payload()
        state = self._backoff.start()
        while True:
            http_request = self._http.build_request(
                "POST",
                url,
                params=params,
                json=payload,
                headers={"x-goog-api-key": api_key},
            )
            try:
                response = await self._http.send(http_request, stream=stream)
            except httpx.HTTPError as exc:
                logger.warning("inference.transport.error label={} error={}", request.label, exc)
                raise TransportError(f"{type(exc).__name__}: {exc!s}") from exc

            if response.is_success:
                logger.debug("inference.response label={} status={}", request.label, response.status_code)
                return response

            await response.aclose()
            if await self._backoff.wait_if_retryable(
                state, response.status_code, on_retry=on_retry, label=request.label
            ):
                continue

            if self._backoff.policy.is_rate_limited(response.status_code):
                logger.error("inference.rate_limit.exhausted label={} attempts={}", request.label, state.attempt)
                raise RateLimitExhaustedError(request.rate_limit_message, attempts=state.attempt)
            logger.error("inference.server.error label={} status={}", request.label, response.status_code)
            raise ServerError(response.status_code)

    @staticmethod
    async def _iter_text(response: httpx.Response) -> AsyncIterator[str]:
        try:
            async for chunk in response.aiter_text():
                yield chunk
        except httpx.HTTPError as exc:
            raise TransportError(f"stream interrupted: {exc!s}") from exc
