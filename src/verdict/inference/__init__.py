"""Inference orchestration primitives for verdict."""

from .backoff import BackoffController, BackoffPolicy, RetryState
from .client import GenerationClient, GenerationRequest
from .queue import RequestQueue
from .stream import StreamDecoder, decode_stream, render_display

__all__ = [
    "BackoffController",
    "BackoffPolicy",
    "GenerationClient",
    "GenerationRequest",
    "RequestQueue",
    "RetryState",
    "StreamDecoder",
    "decode_stream",
    "render_display",
]
