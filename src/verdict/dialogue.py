"""Turn-taking dialogue between the judge and the model-played roles."""

from __future__ import annotations

from functools import partial

from loguru import logger

from verdict.config import Settings
from verdict.errors import ApiKeyNotConfiguredError, InferenceError
from verdict.inference.client import GenerationClient, GenerationRequest
from verdict.inference.queue import RequestQueue
from verdict.inference.stream import StreamDecoder, decode_stream
from verdict.prompts import OPENING_USER_TEXT, opening_prompt, reply_prompt
from verdict.render import DialogueSink
from verdict.session import CourtSession
from verdict.types import DialogueTurn, Role, Speaker

ERROR_PREFIX = "오류가 발생했습니다: "
STALE_QUESTION_MESSAGE = "사건이 변경되어 이전 질문에 대한 답변을 취소했습니다."


class DialogueOrchestrator:
    """Queues opening statements and replies, streaming each into the sink.

    A failed turn is shown as an error line and left out of the history; the
    conversation carries on with the next question.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        session: CourtSession,
        client: GenerationClient,
        queue: RequestQueue,
        sink: DialogueSink,
    ) -> None:
        self._settings = settings
        self._session = session
        self._client = client
        self._queue = queue
        self._sink = sink

    def open(self) -> None:
        """Queue an opening statement for every role that has not spoken yet."""
        for role in Role:
            if not self._session.history(role):
                self._queue.submit(partial(self._opening, role))

    def ask(self, role: Role, question: str) -> None:
        question = question.strip()
        if not question:
            return
        turn = DialogueTurn(speaker=Speaker.USER, role=role, text=question)
        self._session.record(turn)
        self._queue.submit(partial(self._reply, turn))

    async def _opening(self, role: Role) -> None:
        request = GenerationRequest(
            system_prompt=opening_prompt(self._session.case, role),
            user_text=OPENING_USER_TEXT,
            temperature=self._settings.temperature,
            max_output_tokens=self._settings.max_output_tokens,
            label=f"opening.{role}",
            rate_limit_message=self._settings.opening_rate_limit_message,
        )
        await self._stream_turn(role, request)

    async def _reply(self, question: DialogueTurn) -> None:
        role = question.role
        prior = self._prior_turns(question)
        if prior is None:
            logger.warning("dialogue.reply.stale role={}", role)
            self._sink.error(role, STALE_QUESTION_MESSAGE)
            return
        request = GenerationRequest(
            system_prompt=reply_prompt(self._session.case, role, prior, question.text),
            user_text=question.text,
            temperature=self._settings.temperature,
            max_output_tokens=self._settings.max_output_tokens,
            label=f"reply.{role}",
            rate_limit_message=self._settings.reply_rate_limit_message,
        )
        await self._stream_turn(role, request)

    def _prior_turns(self, question: DialogueTurn) -> list[DialogueTurn] | None:
        # Questions queued after this one have not been heard yet.
        turns = self._session.history(question.role)
        index = next((i for i, turn in enumerate(turns) if turn is question), None)
        if index is None:
            return None
        later_answers = [turn for turn in turns[index + 1 :] if turn.speaker is Speaker.AI]
        return [*turns[:index], *later_answers]

    async def _stream_turn(self, role: Role, request: GenerationRequest) -> None:
        self._sink.pending(role)
        decoder = StreamDecoder()
        try:
            async with self._client.open_stream(request, on_retry=partial(self._sink.retrying, role)) as chunks:
                async for display in decode_stream(chunks, decoder):
                    self._sink.update(role, display)
        except ApiKeyNotConfiguredError as exc:
            logger.warning("dialogue.turn.unconfigured label={}", request.label)
            self._sink.error(role, str(exc))
            return
        except InferenceError as exc:
            logger.warning("dialogue.turn.error label={} error={}", request.label, exc)
            self._sink.error(role, f"{ERROR_PREFIX}{exc}")
            return
        except Exception as exc:
            logger.exception("dialogue.turn.crash label={}", request.label)
            self._sink.error(role, f"{ERROR_PREFIX}{exc}")
            return

        turn = DialogueTurn(speaker=Speaker.AI, role=role, text=decoder.text)
        self._session.record(turn)
        self._sink.complete(turn)
