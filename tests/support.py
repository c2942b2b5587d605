from __future__ import annotations

import json
from collections.abc import Callable, Iterable

import httpx


class ChunkStream(httpx.AsyncByteStream):
    """Response body delivered in the given chunks."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks = list(chunks)

    async def __aiter__(self):
        for chunk in self._chunks:
            yield chunk


def sse_frame(*texts: str) -> str:
    payload = {"candidates": [{"content": {"parts": [{"text": text} for text in texts]}}]}
    return "data: " + json.dumps(payload, ensure_ascii=False) + "\n\n"


def sse_response(*frames: str, chunk_size: int = 0) -> httpx.Response:
    body = "".join(frames).encode("utf-8")
    if chunk_size:
        chunks = [body[i : i + chunk_size] for i in range(0, len(body), chunk_size)]
    else:
        chunks = [body]
    return httpx.Response(200, stream=ChunkStream(chunks), headers={"content-type": "text/event-stream"})


def analysis_response(payload: object) -> httpx.Response:
    text = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


class ScriptedTransport:
    """Replays responses in order and records every request."""

    def __init__(self, responses: Iterable[httpx.Response | Callable[[httpx.Request], httpx.Response]]) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"unexpected request to {request.url}")
        response = self._responses.pop(0)
        if callable(response):
            return response(request)
        return response

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    def payloads(self) -> list[dict]:
        return [json.loads(request.content) for request in self.requests]


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
