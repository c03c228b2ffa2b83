"""HTTP client for the hosted chat-completions model."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Optional

import requests

from jobtracker.config import ModelConfig

logger = logging.getLogger(__name__)


class ModelCallError(RuntimeError):
    """The model could not produce a usable completion.

    Raised for missing credentials, transport failures, non-2xx responses,
    explicit ``error`` payloads and bodies without a completion.
    """


class ModelCallCancelled(ModelCallError):
    """The caller's cancellation token was set."""


class ModelClient:
    """Thin wrapper over an OpenAI-compatible ``/chat/completions`` endpoint.

    Owns a ``requests.Session``, applies the configured (connect, read)
    timeout to every call and retries transport errors up to
    ``max_attempts`` times. Callers get text back or a ``ModelCallError``.
    """

    def __init__(self, config: ModelConfig, session: Optional[requests.Session] = None):
        if not config.api_url:
            raise ValueError("Model client requires model.api_url in config")
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def complete(
        self,
        model: str,
        messages: list[dict[str, Any]],
        *,
        temperature: float,
        max_tokens: int,
        cancel: Optional[threading.Event] = None,
    ) -> str:
        """Send one chat-completions request and return the reply text."""
        if not self.enabled:
            raise ModelCallError("No model credential configured")
        self._check_cancelled(cancel)

        payload = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        logger.debug(
            "POST %s model=%s messages=%d max_tokens=%d",
            self.config.api_url, model, len(messages), max_tokens,
        )
        resp = self._post(
            self.config.api_url,
            json=payload,
            headers={"Authorization": f"Bearer {self.config.api_key}"},
        )
        self._check_cancelled(cancel)

        try:
            data = resp.json()
        except ValueError as exc:
            raise ModelCallError(f"Response is not JSON (HTTP {resp.status_code})") from exc
        if not isinstance(data, dict):
            raise ModelCallError(f"Unexpected response body type: {type(data).__name__}")

        error = data.get("error")
        if not resp.ok:
            message = error.get("message") if isinstance(error, dict) else "unknown error"
            raise ModelCallError(f"HTTP {resp.status_code}: {message}")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise ModelCallError(f"API error: {message}")

        choices = data.get("choices") or []
        if not isinstance(choices, list) or not choices:
            raise ModelCallError("Response contained no choices")
        choice = choices[0] if isinstance(choices[0], dict) else {}
        message = choice.get("message") if isinstance(choice.get("message"), dict) else {}
        content = self.content_text(message.get("content"))
        logger.debug("Model response length=%d", len(content))
        return content

    @staticmethod
    def content_text(content: Any) -> str:
        """Flatten message content to text; list content keeps only its text parts."""
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            parts = []
            for part in content:
                if isinstance(part, str):
                    parts.append(part)
                elif isinstance(part, dict) and isinstance(part.get("text"), str):
                    parts.append(part["text"])
            return "".join(parts)
        return str(content)

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    def _post(self, url: str, **kwargs) -> requests.Response:
        """POST with the configured timeout, retrying transport errors."""
        kwargs.setdefault("timeout", self.config.timeout)
        attempts = max(1, int(self.config.max_attempts))

        for attempt in range(1, attempts + 1):
            try:
                return self.session.post(url, **kwargs)
            except requests.RequestException as exc:
                logger.warning("POST %s attempt %d/%d failed: %s", url, attempt, attempts, exc)
                if attempt == attempts:
                    raise ModelCallError(f"Request failed: {exc}") from exc
                time.sleep(2 ** attempt)

        raise RuntimeError("Retry loop exited unexpectedly")

    @staticmethod
    def _check_cancelled(cancel: Optional[threading.Event]) -> None:
        if cancel is not None and cancel.is_set():
            raise ModelCallCancelled("Model call cancelled by caller")
