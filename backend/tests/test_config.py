"""
Unit tests for environment-driven configuration.
Run from backend: python -m pytest tests/test_config.py -v
"""
import logging
from unittest.mock import patch

from core import config
from core.config import Settings, load_settings, log_config


def test_backend_dir_resolution():
    assert config._BACKEND_DIR.is_dir()
    assert (config._BACKEND_DIR / "core").is_dir()
    assert config.get_env_path() == config._BACKEND_DIR / ".env"


def test_defaults_when_env_empty():
    with patch.dict("os.environ", {}, clear=True):
        settings = load_settings()
    assert settings == Settings()
    assert settings.openai_api_base == "https://api.openai.com/v1"
    assert settings.openai_model == "gpt-4o-mini"
    assert settings.openai_timeout == 30
    assert settings.history_limit == 20
    assert settings.has_api_key is False


def test_env_overrides():
    env = {
        "OPENAI_API_KEY": "  sk-live  ",
        "OPENAI_API_BASE": "https://proxy.local/v1/",
        "OPENAI_MODEL": "gpt-4.1-mini",
        "OPENAI_TIMEOUT": "12",
        "HISTORY_LIMIT": "5",
    }
    with patch.dict("os.environ", env, clear=True):
        settings = load_settings()
    assert settings.openai_api_key == "sk-live"
    assert settings.openai_api_base == "https://proxy.local/v1"
    assert settings.openai_model == "gpt-4.1-mini"
    assert settings.openai_timeout == 12
    assert settings.history_limit == 5
    assert settings.has_api_key is True


def test_bad_integer_falls_back():
    with patch.dict("os.environ", {"OPENAI_TIMEOUT": "soon"}, clear=True):
        assert load_settings().openai_timeout == 30


def test_log_config_hides_key(caplog):
    with caplog.at_level(logging.INFO, logger="core.config"):
        log_config(Settings(openai_api_key="sk-secret"))
    assert "sk-secret" not in caplog.text
    assert "openai_key=True" in caplog.text


def test_log_config_warns_without_key(caplog):
    with caplog.at_level(logging.INFO, logger="core.config"):
        log_config(Settings())
    assert any(r.levelno == logging.WARNING for r in caplog.records)
