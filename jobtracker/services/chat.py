"""Conversational replies for messages that are not job postings."""

from __future__ import annotations

import logging
import threading
from typing import Optional, Sequence

from jobtracker.models import ChatMessage, MessageAuthor
from jobtracker.services.base import ModelCallError, ModelClient
from jobtracker.services.prompts import (
    CANNED_REPLIES,
    CHAT_SYSTEM_PROMPT,
    DEFAULT_CANNED_REPLY,
    EMPTY_CHAT_REPLY,
    IMAGE_PLACEHOLDER,
)

logger = logging.getLogger(__name__)

HISTORY_WINDOW = 10

JOB_KEYWORDS = ("职位", "岗位", "JD", "招聘", "薪资", "要求", "职责", "工程师", "经理", "总监", "专员")


def should_parse_job(text: str, has_image: bool) -> bool:
    """Route to extraction for screenshots and anything mentioning job terms."""
    if has_image:
        return True
    return any(keyword in (text or "") for keyword in JOB_KEYWORDS)


def canned_reply(text: str) -> str:
    """Keyword-selected offline reply."""
    lowered = (text or "").lower()
    for keywords, reply in CANNED_REPLIES:
        if any(keyword in lowered for keyword in keywords):
            return reply
    return DEFAULT_CANNED_REPLY


class ChatResponder:
    """Multi-turn chat with the model, with canned replies as fallback."""

    def __init__(self, client: ModelClient):
        self.client = client

    def reply(
        self,
        history: Sequence[ChatMessage],
        text: str,
        *,
        cancel: Optional[threading.Event] = None,
    ) -> str:
        if not self.client.enabled:
            logger.warning("No model credential configured, using canned chat reply")
            return canned_reply(text)

        messages = self.build_messages(history, text)
        try:
            content = self.client.complete(
                self.client.config.chat_model,
                messages,
                temperature=self.client.config.chat_temperature,
                max_tokens=self.client.config.chat_max_tokens,
                cancel=cancel,
            )
        except ModelCallError as exc:
            logger.error("Chat call failed: %s", exc)
            return canned_reply(text)
        except Exception as exc:
            logger.error("Unexpected error during chat call: %s", exc)
            return canned_reply(text)

        if not isinstance(content, str):
            content = ModelClient.content_text(content)
        return content.strip() or EMPTY_CHAT_REPLY

    @staticmethod
    def build_messages(history: Sequence[ChatMessage], text: str) -> list[dict]:
        """System prompt, the recent transcript, then the new user turn.

        Assistant messages that carried a parsed job card are skipped; the
        card is not conversational text.
        """
        messages: list[dict] = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}]
        for message in list(history)[-HISTORY_WINDOW:]:
            if message.author is MessageAuthor.USER:
                messages.append({"role": "user", "content": message.content or IMAGE_PLACEHOLDER})
            elif message.parsed_job is None:
                messages.append({"role": "assistant", "content": message.content})
        messages.append({"role": "user", "content": text})
        return messages
