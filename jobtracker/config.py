"""Configuration loader for the job tracker.

Reads config.yaml and returns typed configuration objects that the
model client, the store and the CLI consume. The model credential never
lives in the YAML file; it is read from the environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

# Checked in order; the first non-empty value wins.
API_KEY_ENV_VARS = ("ARK_API_KEY", "DOUBAO_API_KEY")


@dataclass
class ModelConfig:
    """Settings for the hosted chat-completions model."""

    api_url: str = "https://ark.cn-beijing.volces.com/api/v3/chat/completions"
    text_model: str = "doubao-1.5-pro-32k-250115"
    vision_model: str = "doubao-1.5-vision-pro-32k-250115"
    chat_model: str = "doubao-pro-32k-241215"
    api_key: str = ""
    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float = 60.0
    max_attempts: int = 1
    extract_temperature: float = 0.3
    extract_max_tokens: int = 2000
    chat_temperature: float = 0.7
    chat_max_tokens: int = 1500

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @property
    def timeout(self) -> tuple[float, float]:
        return (self.connect_timeout_seconds, self.read_timeout_seconds)


@dataclass
class AppConfig:
    """Top-level application configuration."""

    model: ModelConfig = field(default_factory=ModelConfig)
    data_dir: str = "data"
    log_level: str = "INFO"
    notification_duration: float = 3.0
    seed_on_first_run: bool = True


def api_key_from_env() -> str:
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return ""


def load_config(path: Path | str | None = None) -> AppConfig:
    """Load the application configuration from a YAML file."""
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        logger.warning("Config file not found at %s, using defaults", config_path)
        return AppConfig(model=ModelConfig(api_key=api_key_from_env()))

    with open(config_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if not raw:
        return AppConfig(model=ModelConfig(api_key=api_key_from_env()))

    model_raw = raw.get("model", {}) or {}
    defaults = ModelConfig()
    model = ModelConfig(
        api_url=model_raw.get("api_url", defaults.api_url),
        text_model=model_raw.get("text_model", defaults.text_model),
        vision_model=model_raw.get("vision_model", defaults.vision_model),
        chat_model=model_raw.get("chat_model", defaults.chat_model),
        api_key=api_key_from_env(),
        connect_timeout_seconds=model_raw.get(
            "connect_timeout_seconds", defaults.connect_timeout_seconds
        ),
        read_timeout_seconds=model_raw.get(
            "read_timeout_seconds", defaults.read_timeout_seconds
        ),
        max_attempts=model_raw.get("max_attempts", defaults.max_attempts),
        extract_temperature=model_raw.get(
            "extract_temperature", defaults.extract_temperature
        ),
        extract_max_tokens=model_raw.get(
            "extract_max_tokens", defaults.extract_max_tokens
        ),
        chat_temperature=model_raw.get("chat_temperature", defaults.chat_temperature),
        chat_max_tokens=model_raw.get("chat_max_tokens", defaults.chat_max_tokens),
    )

    return AppConfig(
        model=model,
        data_dir=raw.get("data_dir", "data"),
        log_level=raw.get("log_level", "INFO"),
        notification_duration=raw.get("notification_duration", 3.0),
        seed_on_first_run=raw.get("seed_on_first_run", True),
    )
