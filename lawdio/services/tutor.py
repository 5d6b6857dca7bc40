"""
Tutor service: answer a law student's question, optionally with speech.

Public API
----------
TutorService.ask(question)      -> str           answer text
TutorService.synthesize(text)   -> bytes         encoded audio
TutorService.answer(question)   -> AnswerResult  ask, then synthesize when enabled
"""
from __future__ import annotations

import base64
import dataclasses
import logging
from typing import Any, Dict, List, Optional

from lawdio.errors import UpstreamError, ValidationError
from lawdio.services.openai_client import OpenAIService

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful tutor for law students. "
    "Explain legal concepts clearly and concisely."
)
FALLBACK_ANSWER = "Sorry, I couldn't generate an answer."
AUDIO_UNAVAILABLE_WARNING = "Audio unavailable"


@dataclasses.dataclass
class AnswerResult:
    answer_text: str
    audio_base64: Optional[str] = None
    warning: Optional[str] = None


def extract_answer_text(completion: Dict[str, Any]) -> str:
    """First choice's message content, or the fallback answer."""
    choices = completion.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return FALLBACK_ANSWER
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content.strip():
        return FALLBACK_ANSWER
    return content.strip()


class TutorService:
    """
    Question answering and speech synthesis against one provider.

    Text and speech calls run sequentially; speech starts only after the
    answer text is available.
    """

    def __init__(
        self,
        provider: OpenAIService,
        tts_enabled: bool = True,
        text_only_fallback: bool = False,
    ) -> None:
        self.provider = provider
        self.tts_enabled = tts_enabled
        self.text_only_fallback = text_only_fallback

    async def ask(self, question: Any) -> str:
        if not question:
            raise ValidationError("No question provided")

        messages: List[Dict[str, str]] = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": str(question)},
        ]
        completion = await self.provider.chat_completion(messages)
        return extract_answer_text(completion)

    async def synthesize(self, text: str) -> bytes:
        return await self.provider.speech(text)

    async def answer(self, question: Any) -> AnswerResult:
        answer_text = await self.ask(question)
        if not self.tts_enabled:
            return AnswerResult(answer_text=answer_text)

        try:
            audio = await self.synthesize(answer_text)
        except UpstreamError:
            if not self.text_only_fallback:
                raise
            logger.warning("Speech synthesis failed; returning text-only answer")
            return AnswerResult(answer_text=answer_text, warning=AUDIO_UNAVAILABLE_WARNING)

        return AnswerResult(
            answer_text=answer_text,
            audio_base64=base64.b64encode(audio).decode("ascii"),
        )
