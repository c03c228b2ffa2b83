"""Assistant orchestrator: routes user input and bookmarks parsed jobs.

This is the core conversational loop:
  1. Append the user's message to the store transcript
  2. Route: screenshots and job-like text go to the extractor, the rest
     to the chat responder
  3. Append the assistant reply (carrying the parsed job card, if any)
  4. Remember the parsed job until the user files it into a folder
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Optional

from jobtracker.models import (
    ChatMessage,
    JobRecord,
    JobStatus,
    MessageAuthor,
    NotificationAction,
    Severity,
    new_id,
    now_ms,
)
from jobtracker.services.chat import ChatResponder, should_parse_job
from jobtracker.services.extractor import ImageInput, JobExtractor, image_to_data_url
from jobtracker.store import AppStore, Tab

logger = logging.getLogger(__name__)

PARSED_REPLY = "已为您解析该职位信息"
SEND_FAILED = "发送失败，请重试"
VIEW_ACTION_LABEL = "去查看"


class Assistant:
    """Connects the store transcript to the extractor and chat responder."""

    def __init__(self, store: AppStore, extractor: JobExtractor, chat: ChatResponder):
        self.store = store
        self.extractor = extractor
        self.chat = chat

    def send(
        self,
        text: str,
        image: ImageInput = None,
        *,
        cancel: Optional[threading.Event] = None,
    ) -> Optional[ChatMessage]:
        """Handle one user turn; returns the assistant reply, or None.

        Blank text without an image is ignored. Failures surface as an
        error notification and leave the user's message in place.
        """
        text = text or ""
        image_url = image_to_data_url(image)
        if not text.strip() and not image_url:
            logger.debug("Ignoring empty input")
            return None

        history = list(self.store.messages)
        self.store.add_message(ChatMessage(
            id=new_id("msg"),
            author=MessageAuthor.USER,
            content=text,
            image=image_url,
        ))

        try:
            if should_parse_job(text, bool(image_url)):
                job = self.extractor.extract(text, image_url, cancel=cancel)
                reply = ChatMessage(
                    id=new_id("msg"),
                    author=MessageAuthor.ASSISTANT,
                    content=PARSED_REPLY,
                    parsed_job=job,
                )
                self.store.add_message(reply)
                self.store.set_pending_job(job)
                logger.info("Parsed job %r", job)
            else:
                content = self.chat.reply(history, text, cancel=cancel)
                reply = ChatMessage(id=new_id("msg"), author=MessageAuthor.ASSISTANT, content=content)
                self.store.add_message(reply)
        except Exception as exc:
            logger.error("Failed to handle message: %s", exc)
            self.store.notify(SEND_FAILED, Severity.ERROR)
            return None

        return reply

    def confirm_add(self, folder_id: str, job: Optional[JobRecord] = None) -> Optional[JobRecord]:
        """File the pending (or given) job into a folder as a fresh record."""
        job = job or self.store.pending_job
        if job is None:
            logger.debug("confirm_add: nothing pending")
            return None
        folder = self.store.get_folder(folder_id)
        if folder is None:
            logger.warning("confirm_add: no folder %s", folder_id)
            return None

        record = replace(
            job,
            id=new_id("job"),
            folder_id=folder.id,
            created_at=now_ms(),
            has_reminder=False,
            reminder_event=None,
            is_archived=False,
            position=replace(job.position, status=JobStatus.NEW),
        )
        self.store.add_job(record)
        self.store.set_pending_job(None)
        self.store.notify(
            f"已添加至「{folder.name}」",
            Severity.SUCCESS,
            action=NotificationAction(
                label=VIEW_ACTION_LABEL,
                callback=lambda: self.store.set_active_tab(Tab.BOOKMARK),
            ),
        )
        return record
