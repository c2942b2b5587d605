"""Incremental decoder for server-sent-event generation streams."""

from __future__ import annotations

import json
import re
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

FRAME_PREFIX = "data: "
EMPHASIS_RE = re.compile(r"\*\*(.*?)\*\*")


def escape_markup(text: str) -> str:
    return text.replace("<", "&lt;").replace(">", "&gt;")


def emphasize(text: str) -> str:
    return EMPHASIS_RE.sub(r"<strong>\1</strong>", text)


def render_display(raw: str) -> str:
    """Escaped and emphasized display value for the full raw text."""
    return emphasize(escape_markup(raw))


def frame_fragments(payload: Any) -> list[str] | None:
    """Text fragments of one frame, or None when it carries no candidate output."""
    if not isinstance(payload, dict):
        return None
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return None
    return [part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)]


class StreamDecoder:
    """Rebuilds generated text from `data: <json>` frames.

    Chunk boundaries need not line up with frames: the trailing partial line of
    a chunk is held until the rest of it arrives. A complete line whose JSON does
    not parse is dropped. Every accepted frame yields a display snapshot rendered
    from the whole raw text, so snapshots never depend on how the input was sliced.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._parts: list[str] = []
        self._finished = False

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def display(self) -> str:
        return render_display(self.text)

    def feed(self, chunk: str) -> list[str]:
        if self._finished:
            raise RuntimeError("decoder already finished")
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split("\n")
        return self._consume(lines)

    def finish(self) -> list[str]:
        """Flush the held partial line and freeze the text."""
        if self._finished:
            return []
        tail, self._buffer = self._buffer, ""
        self._finished = True
        return self._consume([tail]) if tail else []

    def _consume(self, lines: list[str]) -> list[str]:
        snapshots: list[str] = []
        for line in lines:
            line = line.removesuffix("\r")
            if not line.startswith(FRAME_PREFIX):
                continue
            try:
                payload = json.loads(line[len(FRAME_PREFIX) :])
            except json.JSONDecodeError:
                continue
            fragments = frame_fragments(payload)
            if fragments is None:
                continue
            self._parts.extend(fragments)
            snapshots.append(self.display)
        return snapshots


async def decode_stream(chunks: AsyncIterable[str], decoder: StreamDecoder | None = None) -> AsyncIterator[str]:
    """Yield a fresh display snapshot for every decoded frame."""
    decoder = decoder or StreamDecoder()
    async for chunk in chunks:
        for snapshot in decoder.feed(chunk):
            yield snapshot
    for snapshot in decoder.finish():
        yield snapshot
