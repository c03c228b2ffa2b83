"""Tests for configuration loading."""

import tempfile

import yaml

from jobtracker.config import AppConfig, ModelConfig, load_config


def test_load_default_config():
    """Loading the project's config.yaml should work."""
    config = load_config()
    assert isinstance(config, AppConfig)
    assert config.model.text_model
    assert config.model.vision_model
    assert config.data_dir == "data"


def test_load_missing_file():
    """Missing config file returns defaults."""
    config = load_config("/nonexistent/path.yaml")
    assert isinstance(config, AppConfig)
    assert config.model.api_url == ModelConfig().api_url
    assert config.notification_duration == 3.0
    assert not config.model.enabled


def test_custom_config():
    data = {
        "data_dir": "elsewhere",
        "log_level": "DEBUG",
        "notification_duration": 0,
        "model": {
            "text_model": "text-x",
            "connect_timeout_seconds": 2,
            "read_timeout_seconds": 5,
            "max_attempts": 3,
        },
    }

    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(data, f)
        f.flush()
        config = load_config(f.name)

    assert config.data_dir == "elsewhere"
    assert config.log_level == "DEBUG"
    assert config.notification_duration == 0
    assert config.model.text_model == "text-x"
    assert config.model.chat_model == ModelConfig().chat_model
    assert config.model.timeout == (2, 5)
    assert config.model.max_attempts == 3


def test_api_key_comes_from_environment(monkeypatch, tmp_path):
    """The credential is never read from YAML."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"model": {"api_key": "from-yaml"}}), encoding="utf-8")

    config = load_config(path)
    assert config.model.api_key == ""

    monkeypatch.setenv("DOUBAO_API_KEY", "second")
    assert load_config(path).model.api_key == "second"

    monkeypatch.setenv("ARK_API_KEY", "first")
    config = load_config(path)
    assert config.model.api_key == "first"
    assert config.model.enabled
