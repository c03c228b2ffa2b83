"""Job-posting extraction: model call, JSON salvage, heuristic fallback.

``JobExtractor.extract`` always returns a complete ``JobRecord``. Missing
credentials, transport failures, API errors, cancellation and unusable
model output all degrade to the heuristic parser; nothing is raised to
the caller.
"""

from __future__ import annotations

import base64
import logging
import threading
from typing import Any, Optional, Union

from jobtracker.models import (
    AIAnalysis,
    Company,
    JobRecord,
    JobStatus,
    Position,
    Suggestions,
    new_id,
    now_ms,
)
from jobtracker.services.base import ModelCallCancelled, ModelCallError, ModelClient
from jobtracker.services.heuristics import heuristic_extract, html_to_text, looks_like_html
from jobtracker.services.prompts import (
    EXTRACTION_SYSTEM_PROMPT,
    IMAGE_ONLY_USER_PROMPT,
    IMAGE_USER_TEMPLATE,
    TEXT_USER_TEMPLATE,
)
from jobtracker.services.salvage import extract_json

logger = logging.getLogger(__name__)

PLACEHOLDER_SUGGESTION = "请提供更多职位信息以获取建议"

ImageInput = Union[bytes, str, None]


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def image_to_data_url(image: ImageInput) -> Optional[str]:
    """Encode raw bytes, bare base64 or a data URL as a data URL."""
    if not image:
        return None
    if isinstance(image, bytes):
        mime = "image/png" if image.startswith(b"\x89PNG") else "image/jpeg"
        encoded = base64.b64encode(image).decode("ascii")
        return f"data:{mime};base64,{encoded}"
    image = image.strip()
    if image.startswith("data:"):
        return image
    return f"data:image/jpeg;base64,{image}"


def build_record(payload: dict) -> JobRecord:
    """Normalize a model or heuristic payload into a complete JobRecord.

    Every declared field is present: missing scalars become "", missing
    lists become [], missing suggestions get a placeholder. Status starts
    at ``new``; id and timestamp are always fresh.
    """
    payload = _as_dict(payload)
    analysis = AIAnalysis.from_dict(
        _as_dict(payload.get("aiAnalysis") or payload.get("ai_analysis"))
    )
    suggestions = analysis.suggestions

    position = Position.from_dict(_as_dict(payload.get("position")))
    position.status = JobStatus.NEW
    position.deadline = None

    return JobRecord(
        id=new_id("job"),
        company=Company.from_dict(_as_dict(payload.get("company"))),
        position=position,
        ai_analysis=AIAnalysis(
            responsibilities=analysis.responsibilities,
            requirements=analysis.requirements,
            suggestions=Suggestions(
                resume=suggestions.resume or PLACEHOLDER_SUGGESTION,
                interview=suggestions.interview or PLACEHOLDER_SUGGESTION,
                negotiation=suggestions.negotiation or PLACEHOLDER_SUGGESTION,
            ),
        ),
        created_at=now_ms(),
        has_reminder=False,
    )


class JobExtractor:
    """Turns pasted job text and/or a screenshot into a JobRecord."""

    def __init__(self, client: ModelClient):
        self.client = client

    def extract(
        self,
        text: str,
        image: ImageInput = None,
        *,
        cancel: Optional[threading.Event] = None,
    ) -> JobRecord:
        text = text or ""
        if looks_like_html(text):
            text = html_to_text(text)
        image_url = image_to_data_url(image)

        payload: Optional[dict] = None
        if not self.client.enabled:
            logger.warning("No model credential configured, using heuristic extraction")
        else:
            payload = self._extract_with_model(text, image_url, cancel)

        if payload is None:
            payload = heuristic_extract(text)
            logger.info("Used heuristic extraction for %d chars of input", len(text))

        try:
            return build_record(payload)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.error("Could not normalize extracted payload, using heuristics: %s", exc)
            return build_record(heuristic_extract(text))

    def _extract_with_model(
        self,
        text: str,
        image_url: Optional[str],
        cancel: Optional[threading.Event],
    ) -> Optional[dict]:
        model = self.client.config.vision_model if image_url else self.client.config.text_model
        messages = self.build_messages(text, image_url)
        try:
            content = self.client.complete(
                model,
                messages,
                temperature=self.client.config.extract_temperature,
                max_tokens=self.client.config.extract_max_tokens,
                cancel=cancel,
            )
        except ModelCallCancelled:
            logger.info("Extraction cancelled, falling back to heuristics")
            return None
        except ModelCallError as exc:
            logger.error("Model extraction failed (model=%s): %s", model, exc)
            return None
        except Exception as exc:
            logger.error("Unexpected error calling model (model=%s): %s", model, exc)
            return None

        payload = extract_json(content)
        if payload is None:
            logger.warning("Could not parse JSON from model output, falling back to heuristics")
        return payload

    @staticmethod
    def build_messages(text: str, image_url: Optional[str]) -> list[dict]:
        """Compose the system prompt and the (possibly multimodal) user turn."""
        messages: list[dict] = [{"role": "system", "content": EXTRACTION_SYSTEM_PROMPT}]
        if image_url:
            prompt = IMAGE_USER_TEMPLATE.format(text=text) if text.strip() else IMAGE_ONLY_USER_PROMPT
            messages.append({
                "role": "user",
                "content": [
                    {"type": "image_url", "image_url": {"url": image_url}},
                    {"type": "text", "text": prompt},
                ],
            })
        else:
            messages.append({"role": "user", "content": TEXT_USER_TEMPLATE.format(text=text)})
        return messages
